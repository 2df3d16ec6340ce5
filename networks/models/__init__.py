"""
Models package for the Networks API.

Users, the conversations between pairs of them and the messages inside
each conversation.
"""
from .base import db

from .user import User
from .conversation import Conversation
from .message import Message

# Import Flask-Login user loader
from .. import login_manager


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


__all__ = [
    'db',
    'User',
    'Conversation',
    'Message',
    'load_user',
]
