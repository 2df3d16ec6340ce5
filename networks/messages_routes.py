from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user

from . import db
from .auth.utils import error_response
from .services.message_service import MessageService, MessagingError

messages_bp = Blueprint('messages', __name__)


def _domain_error(e):
    current_app.logger.warning(f"Messaging request by user {current_user.id} rejected: {e.message}")
    return error_response(e.message, e.status_code)


def _server_error(action, e):
    db.session.rollback()
    current_app.logger.error(f"Error {action} for user {current_user.id}: {e}")
    return error_response('Server error', 500)


@messages_bp.route('/conversations')
@login_required
def get_conversations():
    """Get the conversation list with last message and unread count."""
    try:
        return jsonify(MessageService.list_conversations(current_user._get_current_object()))
    except Exception as e:
        return _server_error('listing conversations', e)


@messages_bp.route('/unread-count')
@login_required
def unread_count():
    """Get count of unread messages across all conversations."""
    try:
        return jsonify({'count': MessageService.unread_total(current_user._get_current_object())})
    except Exception as e:
        return _server_error('counting unread messages', e)


@messages_bp.route('/<int:other_user_id>')
@login_required
def get_messages(other_user_id):
    """Get the messages exchanged with another user, marking theirs as read."""
    after = request.args.get('after')
    after_id = None
    if after:
        try:
            after_id = int(after)
        except ValueError:
            return error_response('Invalid "after" parameter', 400)

    try:
        messages = MessageService.fetch_messages(current_user._get_current_object(), other_user_id, after_id=after_id)
        return jsonify([m.to_dict() for m in messages])
    except MessagingError as e:
        return _domain_error(e)
    except Exception as e:
        return _server_error('fetching messages', e)


@messages_bp.route('/<int:other_user_id>', methods=['POST'])
@login_required
def send_message(other_user_id):
    """Send a new message."""
    data = request.get_json(silent=True) or {}
    content = data.get('content')

    try:
        message = MessageService.send_message(current_user._get_current_object(), other_user_id, content)
        return jsonify(message.to_dict()), 201
    except MessagingError as e:
        db.session.rollback()
        return _domain_error(e)
    except Exception as e:
        return _server_error('sending message', e)


@messages_bp.route('/<int:message_id>', methods=['DELETE'])
@login_required
def delete_message(message_id):
    """Permanently delete one of the current user's messages."""
    try:
        MessageService.delete_message(current_user._get_current_object(), message_id)
        return jsonify({'success': True})
    except MessagingError as e:
        return _domain_error(e)
    except Exception as e:
        return _server_error('deleting message', e)
