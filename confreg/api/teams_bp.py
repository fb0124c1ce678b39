from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import team_create_schema, bulk_assign_schema, assign_team_schema
from confreg.services import team_service
from confreg.services.errors import ServiceError
from confreg.utils.auth_helpers import get_user_or_401, require_roles

teams_bp = Blueprint('teams', __name__, url_prefix='/api/admin')

TEAM_ADMIN_ROLES = ('event_organizer', 'regional_admin', 'super_admin')
TEAM_ASSIGN_ROLES = ('event_organizer', 'registration_manager', 'regional_admin', 'super_admin')


@teams_bp.route('/teams', methods=['GET'])
@jwt_required()
@require_roles(*TEAM_ASSIGN_ROLES)
def list_teams():
    teams = team_service.list_teams(request.args.get('event_config_id'))
    return jsonify({'teams': teams}), 200


@teams_bp.route('/teams', methods=['POST'])
@jwt_required()
@require_roles(*TEAM_ADMIN_ROLES)
def create_team():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = team_create_schema.load(request.get_json() or {})
        team = team_service.create_team(user, data)
        return jsonify({'team': team.to_dict(member_count=0)}), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error creating team')
        return jsonify({'message': 'Error creating team'}), 500


@teams_bp.route('/registrants/unassigned', methods=['GET'])
@jwt_required()
@require_roles(*TEAM_ASSIGN_ROLES)
def unassigned_registrants():
    user, error = get_user_or_401()
    if error:
        return error
    registrants = team_service.list_unassigned(user)
    return jsonify({'registrants': [r.to_dict() for r in registrants]}), 200


@teams_bp.route('/registrants/bulk-assign', methods=['POST'])
@jwt_required()
@require_roles(*TEAM_ADMIN_ROLES)
def bulk_assign():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = bulk_assign_schema.load(request.get_json() or {})
        report = team_service.bulk_assign(user, data['registrant_ids'], data['team_id'])
        return jsonify(report), 200

    except ValidationError as err:
        return jsonify({'message': 'Invalid request data', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Bulk assign failed')
        return jsonify({'message': 'Internal server error'}), 500


@teams_bp.route('/registrants/<registrant_id>/assign-team', methods=['POST'])
@jwt_required()
@require_roles(*TEAM_ASSIGN_ROLES)
def assign_team(registrant_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = assign_team_schema.load(request.get_json() or {})
        registrant = team_service.assign_registrant(user, registrant_id, data['team_id'])
        return jsonify({'success': True, 'registrant': registrant.to_dict()}), 200

    except ValidationError as err:
        return jsonify({'message': 'Invalid request data', 'errors': err.messages}), 400
    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Team assignment failed')
        return jsonify({'message': 'Internal server error'}), 500


@teams_bp.route('/registrants/<registrant_id>/remove-team', methods=['POST'])
@jwt_required()
@require_roles(*TEAM_ASSIGN_ROLES)
def remove_team(registrant_id):
    try:
        user, error = get_user_or_401()
        if error:
            return error

        registrant = team_service.remove_from_team(user, registrant_id)
        return jsonify({'success': True, 'registrant': registrant.to_dict()}), 200

    except ServiceError as e:
        db.session.rollback()
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Team removal failed')
        return jsonify({'message': 'Internal server error'}), 500
