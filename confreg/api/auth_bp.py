from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import create_access_token, jwt_required
from marshmallow import ValidationError
from confreg import db
from confreg.schemas import (
    user_login_schema, user_register_schema, profile_update_schema, user_schema)
from confreg.models.user import User
from confreg.utils.auth_helpers import get_user_or_401

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/register', methods=['POST'])
def register():
    try:
        data = user_register_schema.load(request.get_json() or {})

        email = data['email'].strip().lower()
        if User.query.filter_by(email=email).first():
            return jsonify({'message': 'Email is already registered'}), 409

        user = User()
        user.email = email
        user.full_name = data['full_name'].strip()
        user.region = data.get('region')
        user.province = data.get('province')
        user.facebook_url = data.get('facebook_url')
        user.role = 'participant'
        user.set_password(data['password'])
        db.session.add(user)
        db.session.commit()

        current_app.logger.info(f"User registered: {user.email}")
        access_token = create_access_token(identity=str(user.id))
        return jsonify({
            'access_token': access_token,
            'user': user_schema.dump(user)
        }), 201

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error registering user')
        return jsonify({'message': 'Error registering user'}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    try:
        data = user_login_schema.load(request.get_json() or {})

        user = User.query.filter_by(
            email=data['email'].strip().lower(), is_active=True).first()

        if user and user.check_password(data['password']):
            access_token = create_access_token(identity=str(user.id))
            return jsonify({
                'access_token': access_token,
                'user': user_schema.dump(user)
            }), 200

        return jsonify({'message': 'Invalid credentials'}), 401

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except Exception:
        current_app.logger.exception('Error during login')
        return jsonify({'message': 'Error during login'}), 500


@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
def profile():
    user, error = get_user_or_401()
    if error:
        return error
    return jsonify({'user': user.to_dict()}), 200


@auth_bp.route('/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    try:
        user, error = get_user_or_401()
        if error:
            return error

        data = profile_update_schema.load(request.get_json() or {})
        for field, value in data.items():
            setattr(user, field, value)
        db.session.commit()

        return jsonify({'message': 'Profile updated', 'user': user.to_dict()}), 200

    except ValidationError as err:
        return jsonify({'message': 'Validation error', 'errors': err.messages}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception('Error updating profile')
        return jsonify({'message': 'Error updating profile'}), 500


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    # Stateless JWT: the client discards the token
    return jsonify({'message': 'Logged out'}), 200
