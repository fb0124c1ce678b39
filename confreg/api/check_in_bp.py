from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import check_in_schema
from confreg.services import checkin_service
from confreg.services.errors import ServiceError
from confreg.services.registration_lifecycle import check_in_roles
from confreg.utils.auth_helpers import get_current_user

check_in_bp = Blueprint('check_in', __name__, url_prefix='/api/check-in')


def _staff_or_error():
    user = get_current_user()
    if not user:
        return None, (jsonify({
            'success': False,
            'message': 'Unauthorized - Vui lòng đăng nhập'
        }), 401)
    if user.role not in check_in_roles():
        return None, (jsonify({
            'success': False,
            'message': 'Forbidden - Không có quyền truy cập chức năng này'
        }), 403)
    return user, None


@check_in_bp.route('', methods=['POST'])
@jwt_required()
def check_in():
    try:
        user, error = _staff_or_error()
        if error:
            return error

        data = check_in_schema.load(request.get_json() or {})
        registrant_id = checkin_service.resolve_registrant_id(
            data.get('registrant_id'), data.get('qr_code'))

        result = checkin_service.check_in(registrant_id, user)
        # Soft failures are 200 so kiosks can show the message as-is
        return jsonify({
            'success': result.success,
            'message': result.message,
            'registrant': result.registrant
        }), 200

    except ValidationError as err:
        return jsonify({
            'success': False,
            'message': 'Thiếu thông tin registrant ID',
            'errors': err.messages
        }), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify({'success': False, **e.to_dict()}), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Check-in failed')
        return jsonify({
            'success': False,
            'message': 'Lỗi hệ thống khi xử lý check-in'
        }), 500


@check_in_bp.route('', methods=['GET'])
@jwt_required()
def check_in_stats():
    try:
        user, error = _staff_or_error()
        if error:
            return error
        return jsonify(checkin_service.check_in_stats()), 200
    except Exception:
        current_app.logger.exception('Check-in stats failed')
        return jsonify({'message': 'Failed to fetch stats'}), 500
