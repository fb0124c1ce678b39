from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import (
    income_source_create_schema, income_source_update_schema, finance_filter_schema)
from confreg.services import finance_service
from confreg.services.errors import ServiceError
from confreg.utils.auth_helpers import get_user_or_401

income_sources_bp = Blueprint(
    'income_sources', __name__, url_prefix='/api/finance/income-sources')


@income_sources_bp.route('', methods=['POST'])
@jwt_required()
def create_income_source():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = income_source_create_schema.load(request.get_json() or {})
        source = finance_service.create_entry(finance_service.INCOME_SOURCES, user, data)
        return jsonify({'income_source': source.to_dict()}), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error creating income source')
        return jsonify({'message': 'Error creating income source'}), 500


@income_sources_bp.route('', methods=['GET'])
@jwt_required()
def list_income_sources():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        filters = finance_filter_schema.load(request.args)
        rows, stats, total_pages = finance_service.list_entries(
            finance_service.INCOME_SOURCES, user, filters)

        return jsonify({
            'income_sources': [s.to_dict() for s in rows],
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
        current_app.logger.exception('Error listing income sources')
        return jsonify({'message': 'Error listing income sources'}), 500


@income_sources_bp.route('/<source_id>', methods=['PATCH'])
@jwt_required()
def update_income_source(source_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = income_source_update_schema.load(request.get_json() or {})
        source = finance_service.update_entry(
            finance_service.INCOME_SOURCES, user, source_id, data)
        return jsonify({'income_source': source.to_dict()}), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error updating income source')
        return jsonify({'message': 'Error updating income source'}), 500


@income_sources_bp.route('/<source_id>', methods=['DELETE'])
@jwt_required()
def delete_income_source(source_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        finance_service.delete_entry(finance_service.INCOME_SOURCES, user, source_id)
        return jsonify({'message': 'Income source deleted successfully'}), 200

    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error deleting income source')
        return jsonify({'message': 'Error deleting income source'}), 500
