from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import registration_input_schema, registration_filter_schema
from confreg.services import registration_service
from confreg.services.errors import ServiceError
from confreg.utils.auth_helpers import get_user_or_401, require_roles

registrations_bp = Blueprint(
    'registrations', __name__, url_prefix='/api/registrations')


@registrations_bp.route('', methods=['POST'])
@jwt_required()
def create_registration():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = registration_input_schema.load(request.get_json() or {})
        registration = registration_service.create_registration(user, data)

        return jsonify({
            'success': True,
            'registration': registration.to_dict(include_registrants=True),
            'invoiceCode': registration.invoice_code
        }), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error creating registration')
        return jsonify({'message': 'Error creating registration'}), 500


@registrations_bp.route('', methods=['GET'])
@jwt_required()
@require_roles('super_admin', 'regional_admin')
def list_registrations():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        filters = registration_filter_schema.load(request.args)
        registrations = registration_service.list_registrations(
            user, status=filters.get('status'))

        return jsonify({
            'registrations': [r.to_dict(include_registrants=True) for r in registrations]
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception('Error listing registrations')
        return jsonify({'message': 'Error listing registrations'}), 500


@registrations_bp.route('/mine', methods=['GET'])
@jwt_required()
def my_registrations():
    user, error = get_user_or_401()
    if error:
        return error

    registrations = registration_service.list_user_registrations(user)
    return jsonify({
        'registrations': [r.to_dict(include_registrants=True) for r in registrations]
    }), 200


@registrations_bp.route('/<registration_id>', methods=['GET'])
@jwt_required()
def get_registration(registration_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        registration = registration_service.get_registration_for(user, registration_id)
        data = registration.to_dict(include_registrants=True)
        data['receipts'] = [r.to_dict() for r in registration.receipts]
        return jsonify({'registration': data}), 200

    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code


@registrations_bp.route('/<registration_id>', methods=['PUT'])
@jwt_required()
def update_registration(registration_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = registration_input_schema.load(request.get_json() or {})
        registration = registration_service.update_registration(
            user, registration_id, data)

        return jsonify({
            'success': True,
            'registration': registration.to_dict(include_registrants=True)
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error updating registration')
        return jsonify({'message': 'Error updating registration'}), 500


@registrations_bp.route('/<registration_id>/cancel', methods=['POST'])
@jwt_required()
def cancel_registration(registration_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        registration = registration_service.cancel_registration(user, registration_id)
        return jsonify({
            'success': True,
            'message': 'Registration cancelled successfully',
            'registration': registration.to_dict()
        }), 200

    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error cancelling registration')
        return jsonify({'message': 'Error cancelling registration'}), 500
