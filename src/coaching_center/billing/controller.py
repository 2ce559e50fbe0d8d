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
from ..core.constants import UNSET
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/billing", methods=["GET"], endpoint="list_billing")
    @login_required
    def list_billing():
        try:
            page = container.billing_service.list_payments(
                owner_id=current_owner_id(),
                page=PageRequest.from_args(request.args.get("page"), request.args.get("limit")),
                student_id=request.args.get("studentId", type=int),
                payment_month=request.args.get("paymentMonth"),
                payment_mode=request.args.get("paymentMode"),
            )
            return jsonify({
                "success": True,
                "data": {
                    "billing": [p.to_dict() for p in page.items],
                    "pagination": page.pagination(),
                },
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error fetching billing records")
            return server_error_response("Error fetching billing records", e)

    @app.route("/api/billing/overdue", methods=["GET"], endpoint="overdue_payments")
    @login_required
    def overdue_payments():
        try:
            overdue = container.billing_service.get_overdue_payments(owner_id=current_owner_id())
            return jsonify({
                "success": True,
                "data": {"overduePayments": [o.to_dict() for o in overdue]},
            }), 200
        except Exception as e:
            logger.exception("Error fetching overdue payments")
            return server_error_response("Error fetching overdue payments", e)

    @app.route("/api/billing", methods=["POST"], endpoint="add_billing")
    @login_required
    def add_billing():
        data = json_body()
        try:
            payment = container.billing_service.add_payment(
                owner_id=current_owner_id(),
                student_id=data.get("studentId"),
                payment_date=data.get("paymentDate"),
                payment_time=data.get("paymentTime"),
                payment_mode=data.get("paymentMode"),
                payment_month=data.get("paymentMonth"),
                amount=data.get("amount"),
                utr_number=data.get("utrNumber"),
            )
            return jsonify({
                "success": True,
                "message": "Billing record added successfully",
                "data": payment.to_dict(),
            }), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error adding billing record")
            return server_error_response("Error adding billing record", e)

    @app.route("/api/billing/<int:payment_id>", methods=["PUT"], endpoint="update_billing")
    @login_required
    def update_billing(payment_id: int):
        data = json_body()
        try:
            payment = container.billing_service.update_payment(
                owner_id=current_owner_id(),
                payment_id=payment_id,
                payment_date=data.get("paymentDate"),
                payment_time=data.get("paymentTime"),
                payment_mode=data.get("paymentMode"),
                payment_month=data.get("paymentMonth"),
                amount=data.get("amount"),
                utr_number=data["utrNumber"] if "utrNumber" in data else UNSET,
            )
            return jsonify({
                "success": True,
                "message": "Billing record updated successfully",
                "data": payment.to_dict(),
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error updating billing record %s", payment_id)
            return server_error_response("Error updating billing record", e)

    @app.route("/api/billing/<int:payment_id>", methods=["DELETE"], endpoint="delete_billing")
    @login_required
    def delete_billing(payment_id: int):
        try:
            container.billing_service.delete_payment(owner_id=current_owner_id(), payment_id=payment_id)
            return jsonify({"success": True, "message": "Billing record deleted successfully"}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error deleting billing record %s", payment_id)
            return server_error_response("Error deleting billing record", e)

    @app.route("/api/billing/student/<int:student_id>/toggle", methods=["PATCH"], endpoint="toggle_billing")
    @login_required
    def toggle_billing(student_id: int):
        data = json_body()
        try:
            # Only an explicit JSON false disables billing management.
            is_active = data.get("isActive") is not False
            container.billing_service.toggle_billing_management(
                owner_id=current_owner_id(), student_id=student_id, is_active=is_active
            )
            return jsonify({
                "success": True,
                "message": f"Billing management {'enabled' if is_active else 'disabled'} successfully",
            }), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception as e:
            logger.exception("Error toggling billing management for student %s", student_id)
            return server_error_response("Error toggling billing management", e)
