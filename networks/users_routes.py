from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user
from sqlalchemy import or_

from . import db
from .models import User
from .auth.utils import error_response

users_bp = Blueprint('users_bp', __name__)

PROFILE_FIELDS = {
    'displayName': 'display_name',
    'bio': 'bio',
    'photoURL': 'photo_url',
}


@users_bp.route('/me')
@login_required
def get_me():
    """Profile of the authenticated user."""
    return jsonify(current_user.to_dict())


@users_bp.route('/me', methods=['PATCH'])
@login_required
def update_me():
    """Partial profile update; only the fields present in the body change."""
    data = request.get_json(silent=True) or {}
    updates = {column: data[field] for field, column in PROFILE_FIELDS.items() if field in data}

    if not updates:
        return error_response('No data to update', 400)

    if 'display_name' in updates:
        display_name = (updates['display_name'] or '').strip()
        if not display_name:
            return error_response('Display name cannot be empty', 400)
        if len(display_name) > 100:
            return error_response('Display name is too long', 400)
        updates['display_name'] = display_name

    try:
        for column, value in updates.items():
            setattr(current_user, column, value)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating profile of user {current_user.id}: {e}")
        return error_response('Server error while updating profile', 500)

    return jsonify(current_user.to_dict())


@users_bp.route('/search')
@login_required
def search_users():
    """Find users by display name or email, excluding the caller."""
    query = (request.args.get('query') or '').strip()
    min_length = current_app.config.get('USER_SEARCH_MIN_LENGTH', 2)
    if len(query) < min_length:
        return error_response(f'Search query must be at least {min_length} characters', 400)

    # Escape LIKE wildcards so user input is matched literally
    escaped = query.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    pattern = f'%{escaped}%'
    users = User.query.filter(
        or_(
            User.display_name.ilike(pattern, escape='\\'),
            User.email.ilike(pattern, escape='\\')
        ),
        User.id != current_user.id
    ).order_by(User.display_name, User.id).limit(
        current_app.config.get('USER_SEARCH_LIMIT', 20)
    ).all()

    return jsonify([u.to_dict() for u in users])


@users_bp.route('/<int:user_id>')
@login_required
def get_user(user_id):
    """Public profile of any user."""
    user = db.session.get(User, user_id)
    if not user:
        return error_response('User not found', 404)
    return jsonify(user.to_dict(include_email=False))
