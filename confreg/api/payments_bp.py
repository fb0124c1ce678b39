from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import (
    payment_report_schema, payment_review_schema, payment_decision_schema,
    payment_reject_schema)
from confreg.services import payment_service
from confreg.services.errors import ServiceError
from confreg.services.registration_lifecycle import CASHIER_ROLES, PAYMENT_ADMIN_ROLES
from confreg.utils.auth_helpers import get_user_or_401, require_roles

payments_bp = Blueprint('payments', __name__, url_prefix='/api')


@payments_bp.route('/payments', methods=['POST'])
@jwt_required()
def report_payment():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = payment_report_schema.load(request.get_json() or {})
        registration, receipt = payment_service.report_payment(
            user, data['invoice_code'], data['receipt_url'],
            amount=data.get('amount'), notes=data.get('notes'))

        return jsonify({
            'success': True,
            'receipt': receipt.to_dict(),
            'registration': registration.to_dict(),
            'message': 'Payment receipt submitted successfully. We will verify it within 24 hours.'
        }), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error reporting payment')
        return jsonify({'message': 'Error reporting payment'}), 500


@payments_bp.route('/payments', methods=['PATCH'])
@jwt_required()
@require_roles(*PAYMENT_ADMIN_ROLES)
def review_payment():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = payment_review_schema.load(request.get_json() or {})
        registration = payment_service.admin_review(
            user, data['registration_id'], data['status'], data.get('admin_notes'))

        verb = 'confirmed' if data['status'] == 'confirm_paid' else 'rejected'
        return jsonify({
            'success': True,
            'registration': registration.to_dict(),
            'message': f'Payment {verb} successfully'
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error reviewing payment')
        return jsonify({'message': 'Error reviewing payment'}), 500


@payments_bp.route('/cashier/payments/<registration_id>/confirm', methods=['POST'])
@jwt_required()
@require_roles(*CASHIER_ROLES)
def cashier_confirm(registration_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = payment_decision_schema.load(request.get_json() or {})
        registration = payment_service.cashier_confirm(
            user, registration_id, data.get('admin_notes'))

        return jsonify({
            'id': registration.id,
            'status': registration.status,
            'processedBy': user.id,
            'message': 'Thanh toán đã được xác nhận thành công'
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error confirming payment')
        return jsonify({'message': 'Error confirming payment'}), 500


@payments_bp.route('/cashier/payments/<registration_id>/reject', methods=['POST'])
@jwt_required()
@require_roles(*CASHIER_ROLES)
def cashier_reject(registration_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = payment_reject_schema.load(request.get_json() or {})
        registration = payment_service.cashier_reject(
            user, registration_id, data['admin_notes'])

        return jsonify({
            'id': registration.id,
            'status': registration.status,
            'processedBy': user.id,
            'adminNotes': data['admin_notes'],
            'message': 'Thanh toán đã bị từ chối'
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error rejecting payment')
        return jsonify({'message': 'Error rejecting payment'}), 500
