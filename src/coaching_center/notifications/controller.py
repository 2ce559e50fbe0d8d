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
    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    def list_notifications():
        try:
            page = container.notification_service.list_notifications(
                owner_id=current_owner_id(),
                page=PageRequest.from_args(request.args.get("page"), request.args.get("limit")),
                is_read=parse_bool(request.args.get("isRead")),
                type=request.args.get("type") or None,
            )
            return jsonify({
                "success": True,
                "data": {
                    "notifications": [n.to_dict() for n in page.items],
                    "pagination": page.pagination(),
                },
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error fetching notifications")
            return server_error_response("Error fetching notifications", e)

    @app.route("/api/notifications/unread-count", methods=["GET"], endpoint="unread_notifications")
    @login_required
    def unread_notifications():
        try:
            count = container.notification_service.unread_count(owner_id=current_owner_id())
            return jsonify({"success": True, "data": {"count": count}}), 200
        except Exception as e:
            logger.exception("Error getting unread count")
            return server_error_response("Error getting unread count", e)

    @app.route("/api/notifications", methods=["POST"], endpoint="create_notification")
    @login_required
    def create_notification():
        data = json_body()
        try:
            notification = container.notification_service.create_notification(
                owner_id=current_owner_id(),
                title=data.get("title", ""),
                message=data.get("message", ""),
                type=data.get("type"),
                student_ids=data.get("studentIds") or [],
                student_names=data.get("studentNames") or [],
            )
            return jsonify({
                "success": True,
                "message": "Notification created successfully",
                "data": notification.to_dict(),
            }), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error creating notification")
            return server_error_response("Error creating notification", e)

    @app.route("/api/notifications/read-all", methods=["PATCH"], endpoint="read_all_notifications")
    @login_required
    def read_all_notifications():
        try:
            container.notification_service.mark_all_as_read(owner_id=current_owner_id())
            return jsonify({"success": True, "message": "All notifications marked as read"}), 200
        except Exception as e:
            logger.exception("Error marking all notifications as read")
            return server_error_response("Error marking all notifications as read", e)

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PATCH"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: int):
        try:
            notification = container.notification_service.mark_as_read(
                owner_id=current_owner_id(), notification_id=notification_id
            )
            return jsonify({
                "success": True,
                "message": "Notification marked as read",
                "data": notification.to_dict(),
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error marking notification %s as read", notification_id)
            return server_error_response("Error marking notification as read", e)

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="delete_notification")
    @login_required
    def delete_notification(notification_id: int):
        try:
            container.notification_service.delete_notification(
                owner_id=current_owner_id(), notification_id=notification_id
            )
            return jsonify({"success": True, "message": "Notification deleted successfully"}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error deleting notification %s", notification_id)
            return server_error_response("Error deleting notification", e)
