from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import (
    expense_create_schema, expense_update_schema, finance_filter_schema)
from confreg.services import finance_service
from confreg.services.errors import ServiceError
from confreg.utils.auth_helpers import get_user_or_401

expenses_bp = Blueprint('expenses', __name__, url_prefix='/api/finance/expenses')


@expenses_bp.route('', methods=['POST'])
@jwt_required()
def create_expense():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = expense_create_schema.load(request.get_json() or {})
        expense = finance_service.create_entry(finance_service.EXPENSES, user, data)
        return jsonify({'expense': expense.to_dict()}), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error creating expense request')
        return jsonify({'message': 'Error creating expense request'}), 500


@expenses_bp.route('', methods=['GET'])
@jwt_required()
def list_expenses():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        filters = finance_filter_schema.load(request.args)
        rows, stats, total_pages = finance_service.list_entries(
            finance_service.EXPENSES, user, filters)

        return jsonify({
            'expenses': [e.to_dict() for e in rows],
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
        current_app.logger.exception('Error listing expense requests')
        return jsonify({'message': 'Error listing expense requests'}), 500


@expenses_bp.route('/<expense_id>', methods=['PATCH'])
@jwt_required()
def update_expense(expense_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = expense_update_schema.load(request.get_json() or {})
        expense = finance_service.update_entry(
            finance_service.EXPENSES, user, expense_id, data)
        return jsonify({'expense': expense.to_dict()}), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error updating expense request')
        return jsonify({'message': 'Error updating expense request'}), 500


@expenses_bp.route('/<expense_id>', methods=['DELETE'])
@jwt_required()
def delete_expense(expense_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        finance_service.delete_entry(finance_service.EXPENSES, user, expense_id)
        return jsonify({'message': 'Expense request deleted successfully'}), 200

    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error deleting expense request')
        return jsonify({'message': 'Error deleting expense request'}), 500
