from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.pagination import PageRequest
from ..common.web import (
    current_owner_id,
    domain_error_response,
    json_body,
    login_required,
    parse_bool,
    server_error_response,
)
from ..container import Container
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @login_required
    def list_students():
        try:
            page = container.student_service.list_students(
                owner_id=current_owner_id(),
                page=PageRequest.from_args(request.args.get("page"), request.args.get("limit")),
                search=request.args.get("search", ""),
                is_active=parse_bool(request.args.get("isActive")),
            )
            return jsonify({
                "success": True,
                "data": {
                    "students": [s.to_dict() for s in page.items],
                    "pagination": page.pagination(),
                },
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error fetching students")
            return server_error_response("Error fetching students", e)

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @login_required
    def add_student():
        data = json_body()
        try:
            student = container.student_service.add_student(
                owner_id=current_owner_id(),
                full_name=data.get("fullName", ""),
                email=data.get("email", ""),
                phone_number=data.get("phoneNumber", ""),
                gender=data.get("gender", ""),
            )
            return jsonify({"success": True, "message": "Student added successfully", "data": student.to_dict()}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error adding student")
            return server_error_response("Error adding student", e)

    @app.route("/api/students/<int:student_id>", methods=["GET"], endpoint="get_student")
    @login_required
    def get_student(student_id: int):
        try:
            student = container.student_service.get_student(owner_id=current_owner_id(), student_id=student_id)
            return jsonify({"success": True, "data": student.to_dict()}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error fetching student %s", student_id)
            return server_error_response("Error fetching student", e)

    @app.route("/api/students/<int:student_id>", methods=["PUT"], endpoint="update_student")
    @login_required
    def update_student(student_id: int):
        data = json_body()
        try:
            student = container.student_service.update_student(
                owner_id=current_owner_id(),
                student_id=student_id,
                full_name=data.get("fullName"),
                email=data.get("email"),
                phone_number=data.get("phoneNumber"),
                gender=data.get("gender"),
                is_active=parse_bool(data.get("isActive")),
            )
            return jsonify({"success": True, "message": "Student updated successfully", "data": student.to_dict()}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error updating student %s", student_id)
            return server_error_response("Error updating student", e)

    @app.route("/api/students/<int:student_id>/toggle", methods=["PATCH"], endpoint="toggle_student")
    @login_required
    def toggle_student(student_id: int):
        data = json_body()
        try:
            owner_id = current_owner_id()
            is_active = parse_bool(data.get("isActive"))
            if is_active is None:
                is_active = not container.student_service.get_student(owner_id=owner_id, student_id=student_id).is_active
            student = container.student_service.set_active(owner_id=owner_id, student_id=student_id, is_active=is_active)
            return jsonify({"success": True, "data": student.to_dict()}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error toggling student %s", student_id)
            return server_error_response("Error updating student", e)

    @app.route("/api/students/<int:student_id>", methods=["DELETE"], endpoint="delete_student")
    @login_required
    def delete_student(student_id: int):
        try:
            container.student_service.delete_student(owner_id=current_owner_id(), student_id=student_id)
            return jsonify({"success": True, "message": "Student deleted successfully"}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error deleting student %s", student_id)
            return server_error_response("Error deleting student", e)
