from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.serialization import to_json_dict
from ..core.exceptions import ConflictError, StorageError, StudentNotFound, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    def list_students():
        try:
            students = container.student_service.list_students(
                grade=request.args.get("grade") or None,
                section=request.args.get("section") or None,
            )
            return jsonify(to_json_dict(list(students)))
        except StorageError:
            app.logger.exception("Error in GET /api/students")
            return jsonify({"message": "Failed to fetch students"}), 500

    @app.route("/api/students", methods=["POST"], endpoint="create_student")
    def create_student():
        body = request.get_json(silent=True) or {}
        try:
            student = container.student_service.register(body)
            return jsonify(to_json_dict(student)), 201
        except ValidationError as e:
            return jsonify({"message": str(e)}), 400
        except ConflictError as e:
            return jsonify({"message": str(e)}), 409
        except StorageError:
            app.logger.exception("Error in POST /api/students")
            return jsonify({"message": "Failed to create student"}), 500

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    def update_student(student_id: int):
        body = request.get_json(silent=True) or {}
        try:
            student = container.student_service.update(student_id, body)
            return jsonify(to_json_dict(student))
        except ValidationError as e:
            return jsonify({"message": str(e)}), 400
        except StudentNotFound as e:
            return jsonify({"message": str(e)}), 404
        except ConflictError as e:
            return jsonify({"message": str(e)}), 409
        except StorageError:
            app.logger.exception("Error in PUT /api/students/%s", student_id)
            return jsonify({"message": "Failed to update student"}), 500

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(student_id: int):
        try:
            container.student_service.delete(student_id)
            return jsonify({"message": "Student deleted successfully"})
        except StudentNotFound as e:
            return jsonify({"message": str(e)}), 404
        except StorageError:
            app.logger.exception("Error in DELETE /api/students/%s", student_id)
            return jsonify({"message": "Failed to delete student"}), 500
