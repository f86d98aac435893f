from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.serialization import to_json_dict
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.exceptions import StorageError
from ..container import Container
from .model import AttendanceFilters
from .service import CSV_FIELDS

NO_DATA_MESSAGE = "No data found for the specified criteria."


def register(app: Flask, container: Container) -> None:
    def _optional_date(name: str):
        value = request.args.get(name)
        return parse_iso_date(value) if value else None

    def _write_report_csv(rows: list[dict], *, filename: str):
        """Write report rows to a CSV attachment."""

        if not rows:
            body = NO_DATA_MESSAGE.encode("utf-8")
        else:
            out = io.StringIO()
            writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
            body = out.getvalue().encode("utf-8-sig")

        return app.response_class(
            body,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.route("/api/reports/stats", methods=["GET"], endpoint="report_stats")
    def report_stats():
        try:
            stats = container.report_service.stats(_optional_date("date"))
        except ValueError:
            return jsonify({"message": "Invalid date (YYYY-MM-DD)"}), 400
        except StorageError:
            app.logger.exception("Error in GET /api/reports/stats")
            return jsonify({"message": "Failed to fetch attendance statistics"}), 500
        return jsonify(stats.to_dict())

    @app.route("/api/reports/grades", methods=["GET"], endpoint="report_grades")
    def report_grades():
        try:
            grades = container.report_service.grade_breakdown(_optional_date("date"))
        except ValueError:
            return jsonify({"message": "Invalid date (YYYY-MM-DD)"}), 400
        except StorageError:
            app.logger.exception("Error in GET /api/reports/grades")
            return jsonify({"message": "Failed to fetch grade attendance"}), 500
        return jsonify(to_json_dict(grades))

    @app.route("/api/reports/daily", methods=["GET"], endpoint="report_daily")
    def report_daily():
        days = request.args.get("days", default=DEFAULT_REPORT_DAYS, type=int)
        try:
            daily = container.report_service.daily(days)
        except StorageError:
            app.logger.exception("Error in GET /api/reports/daily")
            return jsonify({"message": "Failed to fetch daily attendance"}), 500
        return jsonify(to_json_dict(daily))

    @app.route("/api/reports/export", methods=["GET"], endpoint="report_export")
    def report_export():
        try:
            filters = AttendanceFilters(
                date_from=_optional_date("dateFrom"),
                date_to=_optional_date("dateTo"),
                grade=request.args.get("grade") or None,
                section=request.args.get("section") or None,
            )
        except ValueError:
            return jsonify({"message": "Invalid date (YYYY-MM-DD)"}), 400

        try:
            rows = container.report_service.export_rows(filters)
        except StorageError:
            app.logger.exception("Error in GET /api/reports/export")
            return jsonify({"message": "Failed to export attendance data"}), 500

        filename = f"attendance-report-{now_local().strftime('%Y-%m-%d')}.csv"
        return _write_report_csv(rows, filename=filename)
