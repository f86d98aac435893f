from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import is_valid_lrn
from ..core.enums import ScanStatus
from ..core.exceptions import SchemaObjectMissing, StorageError
from ..container import Container
from ..reports.model import AttendanceFilters
from .barcode import decode_lrn_from_image
from .service import ScanOutcome

_SCAN_HTTP_STATUS = {
    ScanStatus.COMPLETED: 200,
    ScanStatus.ALREADY_SCANNED: 200,
    ScanStatus.BAD_FORMAT: 400,
    ScanStatus.NOT_FOUND: 404,
    ScanStatus.SETUP_INCOMPLETE: 503,
    ScanStatus.INTERNAL_ERROR: 500,
}

_TABLE_MISSING = {
    "message": "Database Setup Required - Unable to load recent scans. "
    "Please check if the database is properly set up.",
    "error": "attendance_table_missing",
    "instructions": "Please run the attendance table creation script to enable this feature.",
    "records": [],
}


def scan_response(outcome: ScanOutcome) -> dict:
    body: dict = {"success": outcome.success, "message": outcome.message}
    if outcome.student is not None and outcome.status in (ScanStatus.COMPLETED, ScanStatus.ALREADY_SCANNED):
        body["student"] = outcome.student.identity()
    if outcome.already_scanned:
        body["alreadyScanned"] = True
    if outcome.attendance is not None:
        body["attendance"] = outcome.attendance.summary()
    return body


def register(app: Flask, container: Container) -> None:
    def _setup_pending():
        return jsonify({"success": False, "message": "Database setup in progress. Please try again in a moment."}), 503

    def _run_scan(lrn, location):
        outcome = container.scan_service.scan(lrn, location)
        return jsonify(scan_response(outcome)), _SCAN_HTTP_STATUS[outcome.status]

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="scan_attendance")
    def scan_attendance():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        lrn = body.get("lrn")

        # Malformed LRNs are rejected by the scan itself without touching storage.
        if is_valid_lrn(lrn) and not container.readiness.ensure_ready():
            return _setup_pending()

        return _run_scan(lrn, body.get("location"))

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="scan_attendance_image")
    def scan_attendance_image():
        """Scan from an uploaded photo of the student's barcode/QR card."""
        if not container.readiness.ensure_ready():
            return _setup_pending()

        file = request.files.get("image")
        if file is None:
            return jsonify({"success": False, "message": "Image file is required"}), 400

        try:
            lrn = decode_lrn_from_image(file.read())
        except (OSError, ValueError):
            return jsonify({"success": False, "message": "Could not read the uploaded image"}), 400
        if not lrn:
            return jsonify({"success": False, "message": "No LRN barcode detected in the image"}), 400

        return _run_scan(lrn, request.form.get("location"))

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        if not container.readiness.ensure_ready():
            return jsonify(_TABLE_MISSING), 503

        try:
            day = request.args.get("date")
            limit = request.args.get("limit", type=int)
            filters = AttendanceFilters(
                date_from=parse_iso_date(day) if day else None,
                date_to=parse_iso_date(day) if day else None,
                grade=request.args.get("grade") or None,
                section=request.args.get("section") or None,
                student_name=request.args.get("studentName") or None,
                limit=limit,
            )
        except ValueError:
            return jsonify({"message": "Invalid date (YYYY-MM-DD)", "records": []}), 400

        try:
            items = container.report_service.list_attendance(filters)
        except SchemaObjectMissing:
            container.readiness.reset()
            return jsonify(_TABLE_MISSING), 503
        except StorageError as e:
            app.logger.exception("Error in GET /api/attendance")
            return jsonify({"message": "Failed to fetch attendance records", "error": str(e), "records": []}), 500

        return jsonify(
            [
                {
                    **item.record.summary(),
                    "student_id": item.record.student_id,
                    "lrn": item.record.lrn,
                    "students": item.student.identity(),
                }
                for item in items
            ]
        )
