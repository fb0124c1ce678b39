from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import (
    donation_create_schema, donation_update_schema, finance_filter_schema)
from confreg.services import finance_service
from confreg.services.errors import ServiceError
from confreg.utils.auth_helpers import get_user_or_401

donations_bp = Blueprint('donations', __name__, url_prefix='/api')


@donations_bp.route('/donations/public', methods=['GET'])
def public_donations():
    """Donor wall; no authentication."""
    try:
        donations, summary = finance_service.public_donations(
            request.args.get('event_config_id'))
        return jsonify({
            'donations': [d.to_public_dict() for d in donations],
            **summary
        }), 200
    except Exception:
        current_app.logger.exception('Error loading public donations')
        return jsonify({'message': 'Error loading donations'}), 500


@donations_bp.route('/finance/donations', methods=['POST'])
@jwt_required()
def create_donation():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = donation_create_schema.load(request.get_json() or {})
        donation = finance_service.create_entry(finance_service.DONATIONS, user, data)
        return jsonify({'donation': donation.to_dict()}), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error creating donation')
        return jsonify({'message': 'Error creating donation'}), 500


@donations_bp.route('/finance/donations', methods=['GET'])
@jwt_required()
def list_donations():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        filters = finance_filter_schema.load(request.args)
        rows, stats, total_pages = finance_service.list_entries(
            finance_service.DONATIONS, user, filters)

        return jsonify({
            'donations': [d.to_dict() for d in rows],
            'stats': stats,
            'pagination': {
                'page': filters['page'],
                'limit': filters['limit'],
                'total_pages': total_pages
            }
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception('Error listing donations')
        return jsonify({'message': 'Error listing donations'}), 500


@donations_bp.route('/finance/donations/<donation_id>', methods=['PATCH'])
@jwt_required()
def update_donation(donation_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = donation_update_schema.load(request.get_json() or {})
        donation = finance_service.update_entry(
            finance_service.DONATIONS, user, donation_id, data)
        return jsonify({'donation': donation.to_dict()}), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error updating donation')
        return jsonify({'message': 'Error updating donation'}), 500


@donations_bp.route('/finance/donations/<donation_id>', methods=['DELETE'])
@jwt_required()
def delete_donation(donation_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        finance_service.delete_entry(finance_service.DONATIONS, user, donation_id)
        return jsonify({'message': 'Donation deleted successfully'}), 200

    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error deleting donation')
        return jsonify({'message': 'Error deleting donation'}), 500
