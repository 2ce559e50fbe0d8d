from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.pagination import PageRequest
from ..common.web import (
    current_owner_id,
    domain_error_response,
    json_body,
    login_required,
    server_error_response,
)
from ..container import Container
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @login_required
    def list_attendance():
        is_batch = request.args.get("isBatch")
        try:
            page = container.attendance_service.list_attendance(
                owner_id=current_owner_id(),
                page=PageRequest.from_args(request.args.get("page"), request.args.get("limit")),
                attendance_date=request.args.get("date"),
                is_batch=None if is_batch is None else is_batch == "true",
            )
            return jsonify({
                "success": True,
                "data": {
                    "attendance": [r.to_dict() for r in page.items],
                    "pagination": page.pagination(),
                },
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error fetching attendance")
            return server_error_response("Error fetching attendance", e)

    @app.route("/api/attendance/batch", methods=["POST"], endpoint="add_batch_attendance")
    @login_required
    def add_batch_attendance():
        data = json_body()
        try:
            record = container.attendance_service.add_batch_attendance(
                owner_id=current_owner_id(),
                student_ids=data.get("studentIds"),
                attendance_date=data.get("attendanceDate"),
                is_present=data.get("isPresent"),
                meal_type=data.get("mealType"),
            )
            return jsonify({
                "success": True,
                "message": "Batch attendance added successfully",
                "data": record.to_dict(),
            }), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error adding batch attendance")
            return server_error_response("Error adding batch attendance", e)

    @app.route("/api/attendance/single", methods=["POST"], endpoint="add_single_attendance")
    @login_required
    def add_single_attendance():
        data = json_body()
        try:
            record = container.attendance_service.add_single_attendance(
                owner_id=current_owner_id(),
                student_id=data.get("studentId"),
                attendance_date=data.get("attendanceDate"),
                is_present=data.get("isPresent"),
                meal_type=data.get("mealType"),
            )
            return jsonify({
                "success": True,
                "message": "Attendance added successfully",
                "data": record.to_dict(),
            }), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error adding attendance")
            return server_error_response("Error adding attendance", e)

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @login_required
    def update_attendance(attendance_id: int):
        data = json_body()
        try:
            record = container.attendance_service.update_attendance(
                owner_id=current_owner_id(),
                attendance_id=attendance_id,
                student_ids=data.get("studentIds"),
                attendance_date=data.get("attendanceDate"),
                is_present=data.get("isPresent"),
                meal_type=data.get("mealType"),
            )
            return jsonify({
                "success": True,
                "message": "Attendance updated successfully",
                "data": record.to_dict(),
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error updating attendance %s", attendance_id)
            return server_error_response("Error updating attendance", e)

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @login_required
    def delete_attendance(attendance_id: int):
        try:
            container.attendance_service.delete_attendance(owner_id=current_owner_id(), attendance_id=attendance_id)
            return jsonify({"success": True, "message": "Attendance deleted successfully"}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error deleting attendance %s", attendance_id)
            return server_error_response("Error deleting attendance", e)

    @app.route("/api/attendance/<int:attendance_id>/student", methods=["DELETE"], endpoint="remove_batch_student")
    @login_required
    def remove_batch_student(attendance_id: int):
        data = json_body()
        try:
            record = container.attendance_service.remove_student_from_batch(
                owner_id=current_owner_id(),
                attendance_id=attendance_id,
                student_id=data.get("studentId"),
            )
            if record is None:
                return jsonify({
                    "success": True,
                    "message": "Batch attendance deleted (no students remaining)",
                }), 200
            return jsonify({
                "success": True,
                "message": "Student removed from batch successfully",
                "data": record.to_dict(),
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error removing student from batch %s", attendance_id)
            return server_error_response("Error removing student from batch", e)
