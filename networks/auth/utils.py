from flask import jsonify

from .. import login_manager
from ..models import User

BEARER_PREFIX = 'Bearer '


def get_bearer_token(request):
    """Extract the token from an `Authorization: Bearer <token>` header."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


@login_manager.request_loader
def load_user_from_request(request):
    token = get_bearer_token(request)
    if not token:
        return None
    return User.verify_auth_token(token)


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'success': False, 'error': 'Not authorized'}), 401


def error_response(message, status_code):
    return jsonify({'success': False, 'error': message}), status_code


def auth_payload(user):
    """Body returned by register and login."""
    return {
        'user': user.to_dict(),
        'token': user.get_auth_token(),
    }
