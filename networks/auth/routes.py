import time

from flask import request, jsonify, current_app

from . import auth_bp  # Import the blueprint
from .. import db       # Import db from the parent package
from ..models import User
from .utils import auth_payload, error_response


# Registration route
@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''
    display_name = (data.get('displayName') or '').strip()

    # Input validation
    if not email or not password or not display_name:
        return error_response('Email, password and display name are required', 400)

    if len(email) > 255 or len(password) > 128 or len(display_name) > 100:
        return error_response('Input too long', 400)

    if User.query.filter_by(email=email).first():
        return error_response('A user with this email already exists', 400)

    try:
        user = User(email=email, display_name=display_name)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error during registration: {e}")
        return error_response('Server error during registration', 500)

    current_app.logger.info(f"Registered user {user.id}")
    return jsonify(auth_payload(user)), 201


# Login route
@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    password = data.get('password') or ''

    if not email or not password:
        return error_response('Email and password are required', 400)

    user = User.query.filter_by(email=email).first()

    # Constant time delay mitigation
    time.sleep(current_app.config.get('LOGIN_DELAY', 0.1))

    if user is None or not user.check_password(password):
        return error_response('Invalid email or password', 401)

    return jsonify(auth_payload(user))
