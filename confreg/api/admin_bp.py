import io

from flask import Blueprint, current_app, request, jsonify, send_file
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.models.event_config import EventConfig
from confreg.models.event_role import EventRole
from confreg.models.registration import REGISTRATION_STATUSES
from confreg.schemas import (
    admin_registration_input_schema, payment_decision_schema,
    event_config_schema, event_configs_schema, event_role_schema, event_roles_schema)
from confreg.services import (
    export_service, payment_service, registration_service, repair_service)
from confreg.services.errors import ServiceError
from confreg.services.registration_lifecycle import MANAGER_ROLES
from confreg.utils.auth_helpers import get_user_or_401, require_roles
from confreg.utils.datetime_utils import to_local, utcnow

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')

REPAIR_VIEW_ROLES = ('super_admin', 'registration_manager', 'regional_admin')
EXPORT_ROLES = ('super_admin', 'regional_admin', 'registration_manager')

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


@admin_bp.route('/registrations', methods=['POST'])
@jwt_required()
@require_roles(*MANAGER_ROLES)
def create_registration():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = admin_registration_input_schema.load(request.get_json() or {})
        registration = registration_service.create_admin_registration(user, data)
        return jsonify({
            'message': 'Registration created',
            'registration': registration.to_dict(include_registrants=True)
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


@admin_bp.route('/registrations/<registration_id>/confirm', methods=['POST'])
@jwt_required()
@require_roles(*MANAGER_ROLES)
def confirm_registration(registration_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = payment_decision_schema.load(request.get_json() or {})
        registration = payment_service.manager_confirm(
            user, registration_id, data.get('admin_notes'))
        return jsonify({
            'success': True,
            'message': 'Registration confirmed',
            'registration': registration.to_dict()
        }), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error confirming registration')
        return jsonify({'message': 'Error confirming registration'}), 500


@admin_bp.route('/registrations/export', methods=['GET'])
@jwt_required()
@require_roles(*EXPORT_ROLES)
def export_registrations():
    status = request.args.get('status') or None
    if status and status not in REGISTRATION_STATUSES:
        return jsonify({'message': 'Invalid status filter'}), 400

    try:
        content = export_service.export_registrations(status)
    except Exception:
        current_app.logger.exception('Error exporting registrations')
        return jsonify({'message': 'Error exporting registrations'}), 500

    filename = f"registrations-{to_local(utcnow()).strftime('%Y%m%d_%H%M%S')}.xlsx"
    return send_file(
        io.BytesIO(content),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=filename,
    )


@admin_bp.route('/tools/fix-registrants', methods=['GET'])
@jwt_required()
@require_roles(*REPAIR_VIEW_ROLES)
def broken_registrations():
    broken = repair_service.find_broken_registrations()
    return jsonify({
        'count': len(broken),
        'registrations': [repair_service.describe(r, p) for r, p in broken]
    }), 200


@admin_bp.route('/tools/fix-registrants', methods=['POST'])
@jwt_required()
@require_roles(*MANAGER_ROLES)
def fix_registrants():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        result = repair_service.fix_primary_registrants(user)
        return jsonify({'success': True, **result}), 200

    except Exception:
        db.session.rollback()
        current_app.logger.exception('Primary registrant repair failed')
        return jsonify({'message': 'Primary registrant repair failed'}), 500


@admin_bp.route('/tools/sync-checkin-status', methods=['POST'])
@jwt_required()
@require_roles(*MANAGER_ROLES)
def sync_checkin_status():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        updated = repair_service.sync_checkin_status(user)
        return jsonify({'success': True, 'updated': updated}), 200

    except Exception:
        db.session.rollback()
        current_app.logger.exception('Check-in status sync failed')
        return jsonify({'message': 'Check-in status sync failed'}), 500


@admin_bp.route('/events', methods=['GET'])
@jwt_required()
@require_roles('super_admin', 'regional_admin', 'registration_manager', 'event_organizer')
def list_events():
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', 20, type=int)

    events = EventConfig.query.order_by(EventConfig.created_at.desc()).paginate(
        page=page, per_page=per_page, error_out=False)
    return jsonify({
        'events': event_configs_schema.dump(events.items),
        'total': events.total or 0,
        'pages': events.pages,
        'current_page': page
    }), 200


@admin_bp.route('/events', methods=['POST'])
@jwt_required()
@require_roles('super_admin')
def create_event():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = event_config_schema.load(request.get_json() or {})

        event = EventConfig()
        for key, value in data.items():
            setattr(event, key, value)
        # Only one event is active at a time
        if event.is_active:
            EventConfig.query.filter_by(is_active=True).update({'is_active': False})
        db.session.add(event)
        db.session.commit()

        current_app.logger.info(f"Event {event.name} created by {user.email}")
        return jsonify({
            'message': 'Event created',
            'event': event_config_schema.dump(event)
        }), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error creating event')
        return jsonify({'message': 'Error creating event'}), 500


@admin_bp.route('/roles', methods=['GET'])
@jwt_required()
@require_roles('super_admin', 'regional_admin', 'registration_manager', 'event_organizer')
def list_roles():
    query = EventRole.query
    event_config_id = request.args.get('event_config_id')
    if event_config_id:
        query = query.filter_by(event_config_id=event_config_id)
    return jsonify({'roles': event_roles_schema.dump(query.order_by(EventRole.name).all())}), 200


@admin_bp.route('/roles', methods=['POST'])
@jwt_required()
@require_roles('super_admin')
def create_role():
    try:
        data = event_role_schema.load(request.get_json() or {})

        role = EventRole()
        for key, value in data.items():
            setattr(role, key, value)
        db.session.add(role)
        db.session.commit()

        return jsonify({'message': 'Role created', 'role': event_role_schema.dump(role)}), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error creating role')
        return jsonify({'message': 'Error creating role'}), 500
