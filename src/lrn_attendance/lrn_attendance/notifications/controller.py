from __future__ import annotations

from datetime import datetime, time

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_json_dict
from ..core.enums import DeliveryStatus
from ..core.exceptions import StorageError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sms/config", methods=["GET"], endpoint="get_sms_config")
    def get_sms_config():
        return jsonify(container.notification_settings.settings.masked())

    @app.route("/api/sms/config", methods=["POST"], endpoint="save_sms_config")
    def save_sms_config():
        body = request.get_json(silent=True) or {}
        try:
            container.notification_settings.replace(body)
        except ValidationError as e:
            return jsonify({"message": str(e)}), 400
        return jsonify({"message": "Configuration saved successfully"})

    @app.route("/api/sms/test", methods=["POST"], endpoint="send_test_sms")
    def send_test_sms():
        body = request.get_json(silent=True) or {}
        phone = (body.get("phoneNumber") or "").strip()
        if not phone:
            return jsonify({"success": False, "error": "Phone number is required"}), 400

        result = container.dispatcher.send_test(phone)
        out = {"success": result.delivered}
        if result.message_id:
            out["messageId"] = result.message_id
        if result.error:
            out["error"] = result.error
        return jsonify(out)

    @app.route("/api/sms/logs", methods=["GET"], endpoint="list_sms_logs")
    def list_sms_logs():
        try:
            status = request.args.get("status")
            date_from = request.args.get("dateFrom")
            date_to = request.args.get("dateTo")
            student_id = request.args.get("studentId", type=int)
            logs = container.notification_logs_repo.list_logs(
                student_id=student_id,
                status=DeliveryStatus(status) if status else None,
                date_from=datetime.combine(parse_iso_date(date_from), time.min) if date_from else None,
                date_to=datetime.combine(parse_iso_date(date_to), time.max) if date_to else None,
            )
        except ValueError:
            return jsonify({"message": "Invalid filter value"}), 400
        except StorageError:
            app.logger.exception("Error fetching SMS logs")
            return jsonify({"message": "Failed to fetch SMS logs"}), 500

        return jsonify(to_json_dict(list(logs)))
