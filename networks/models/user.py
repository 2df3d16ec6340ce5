"""User model for authentication and profiles."""
from datetime import datetime, timezone

from flask import current_app
from flask_login import UserMixin
from itsdangerous import URLSafeTimedSerializer as Serializer, BadSignature, SignatureExpired

from .base import db
from .. import bcrypt

TOKEN_SALT = 'access-token'


def utcnow():
    return datetime.now(timezone.utc)


def isoformat_utc(value):
    """ISO-8601 string in UTC; naive values read back from the database are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    display_name = db.Column(db.String(100), nullable=False)
    photo_url = db.Column(db.String(500), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    # Relationships
    messages_sent = db.relationship('Message',
                                    back_populates='sender',
                                    lazy='dynamic',
                                    passive_deletes=True)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def get_auth_token(self):
        """Sign a bearer token carrying this user's id."""
        s = Serializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)
        return s.dumps({'user_id': self.id})

    @staticmethod
    def verify_auth_token(token, max_age=None):
        """Return the user a bearer token belongs to, or None if it is invalid or expired."""
        if max_age is None:
            max_age = current_app.config['TOKEN_MAX_AGE']
        s = Serializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)
        try:
            user_id = s.loads(token, max_age=max_age).get('user_id')
        except (BadSignature, SignatureExpired):
            return None
        if user_id is None:
            return None
        return db.session.get(User, user_id)

    def to_author(self):
        """Compact identity attached to messages and conversation summaries."""
        return {
            'uid': str(self.id),
            'displayName': self.display_name,
            'photoURL': self.photo_url,
        }

    def to_dict(self, include_email=True):
        data = {
            'uid': str(self.id),
            'displayName': self.display_name,
            'photoURL': self.photo_url,
            'bio': self.bio,
        }
        if include_email:
            data['email'] = self.email
        return data

    def __repr__(self):
        return f'<User {self.id} {self.email}>'
