from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.web import current_owner_id, domain_error_response, json_body, login_required, server_error_response
from ..container import Container
from ..core.constants import UNSET
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _start_session(s_operator) -> None:
        session.clear()
        session["operator_id"] = s_operator.operator_id
        session["name"] = s_operator.full_name

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def auth_register():
        data = json_body()
        try:
            s_operator = container.auth_service.register(
                full_name=data.get("fullName", ""),
                email=data.get("email", ""),
                mobile_number=data.get("mobileNumber", ""),
                password=data.get("password", ""),
            )
            _start_session(s_operator)
            return jsonify({
                "success": True,
                "message": "Registration successful",
                "data": {"operatorId": s_operator.operator_id, "fullName": s_operator.full_name},
            }), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error registering operator")
            return server_error_response("Error during registration", e)

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        try:
            s_operator = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
            _start_session(s_operator)
            return jsonify({
                "success": True,
                "message": "Login successful",
                "data": {"operatorId": s_operator.operator_id, "fullName": s_operator.full_name},
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error during login")
            return server_error_response("Error during login", e)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return jsonify({"success": True, "message": "Logged out"}), 200

    @app.route("/api/auth/profile", methods=["PUT"], endpoint="auth_update_profile")
    @login_required
    def auth_update_profile():
        data = json_body()
        try:
            operator = container.auth_service.update_profile(
                current_owner_id(),
                full_name=data.get("fullName"),
                profile_image_path=data["profileImagePath"] if "profileImagePath" in data else UNSET,
            )
            session["name"] = operator.full_name
            return jsonify({
                "success": True,
                "message": "Profile updated successfully",
                "data": operator.to_dict(),
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error updating profile")
            return server_error_response("Error updating profile", e)
