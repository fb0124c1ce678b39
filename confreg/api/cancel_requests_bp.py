from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import cancel_request_input_schema, cancel_request_process_schema
from confreg.services import cancellation_service
from confreg.services.errors import ServiceError
from confreg.services.registration_lifecycle import CANCEL_REVIEW_ROLES
from confreg.utils.auth_helpers import get_user_or_401, require_roles

cancel_requests_bp = Blueprint('cancel_requests', __name__, url_prefix='/api')


@cancel_requests_bp.route('/cancel-requests', methods=['POST'])
@jwt_required()
def submit_cancel_request():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = cancel_request_input_schema.load(request.get_json() or {})
        registration, cancel_request = cancellation_service.submit_cancel_request(
            user, data)

        if cancel_request is None:
            return jsonify({
                'success': True,
                'message': 'Registration converted to donation. Thank you for your support!',
                'registration': registration.to_dict()
            }), 201

        return jsonify({
            'success': True,
            'message': 'Cancel request submitted successfully',
            'cancel_request': cancel_request.to_dict(),
            'registration': registration.to_dict()
        }), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error submitting cancel request')
        return jsonify({'message': 'Error submitting cancel request'}), 500


@cancel_requests_bp.route('/cancel-requests', methods=['GET'])
@jwt_required()
def my_cancel_requests():
    user, error = get_user_or_401()
    if error:
        return error

    requests_ = cancellation_service.list_user_cancel_requests(user)
    return jsonify({'cancel_requests': [c.to_dict() for c in requests_]}), 200


@cancel_requests_bp.route('/admin/cancel-requests', methods=['GET'])
@jwt_required()
@require_roles(*CANCEL_REVIEW_ROLES)
def list_cancel_requests():
    status = request.args.get('status')
    requests_ = cancellation_service.list_cancel_requests(status)
    return jsonify({'cancel_requests': [c.to_dict() for c in requests_]}), 200


@cancel_requests_bp.route('/admin/cancel-requests/<request_id>', methods=['PATCH'])
@jwt_required()
@require_roles(*CANCEL_REVIEW_ROLES)
def process_cancel_request(request_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = cancel_request_process_schema.load(request.get_json() or {})
        cancel_request = cancellation_service.process_cancel_request(
            user, request_id, data['action'], data.get('admin_notes'))

        return jsonify({
            'id': cancel_request.id,
            'status': cancel_request.status,
            'registration_status': cancel_request.registration.status,
            'processedAt': cancel_request.to_dict()['processed_at'],
            'processedBy': cancel_request.processed_by
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error processing cancel request')
        return jsonify({'message': 'Error processing cancel request'}), 500
