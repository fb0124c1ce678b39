from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import portrait_schema
from confreg.services import ticket_service
from confreg.services.errors import ServiceError
from confreg.utils.auth_helpers import get_user_or_401

tickets_bp = Blueprint('tickets', __name__, url_prefix='/api')


@tickets_bp.route('/tickets/<invoice_code>', methods=['GET'])
@jwt_required()
def get_tickets(invoice_code):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        return jsonify(ticket_service.get_tickets_for_invoice(user, invoice_code)), 200

    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception('Error loading tickets')
        return jsonify({'message': 'Error loading tickets'}), 500


@tickets_bp.route('/registrants/<registrant_id>/portrait', methods=['PUT'])
@jwt_required()
def update_portrait(registrant_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = portrait_schema.load(request.get_json() or {})
        registrant = ticket_service.update_portrait(
            user, registrant_id, data['portrait_url'])
        return jsonify({'registrant': registrant.to_dict()}), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error updating portrait')
        return jsonify({'message': 'Error updating portrait'}), 500
