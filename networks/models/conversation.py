"""Conversation model: the single thread between two users."""
from .base import db
from .user import utcnow


class Conversation(db.Model):
    """
    A one-to-one conversation.

    The participant pair is stored normalized (user1_id < user2_id) so that
    the unique constraint covers the unordered pair and every lookup is a
    single equality match.
    """
    __tablename__ = 'conversations'

    id = db.Column(db.Integer, primary_key=True)
    user1_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    user2_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    user1 = db.relationship('User', foreign_keys=[user1_id])
    user2 = db.relationship('User', foreign_keys=[user2_id])
    messages = db.relationship('Message',
                               back_populates='conversation',
                               lazy='dynamic',
                               cascade='all, delete-orphan',
                               passive_deletes=True)

    __table_args__ = (
        db.UniqueConstraint('user1_id', 'user2_id', name='uq_conversations_pair'),
        db.CheckConstraint('user1_id < user2_id', name='ordered_pair'),
    )

    @staticmethod
    def normalize_pair(user_a_id, user_b_id):
        """Return the pair as it is stored: smaller id first."""
        a, b = int(user_a_id), int(user_b_id)
        return (a, b) if a < b else (b, a)

    @classmethod
    def find_for_pair(cls, user_a_id, user_b_id, for_update=False):
        """
        Look up the conversation of a pair in either order.

        With for_update the row is read with SELECT ... FOR UPDATE, which sees
        the latest committed version rather than the transaction's snapshot.
        """
        user1_id, user2_id = cls.normalize_pair(user_a_id, user_b_id)
        query = cls.query.filter_by(user1_id=user1_id, user2_id=user2_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def other_user_id(self, user_id):
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def other_user(self, user_id):
        return self.user2 if self.user1_id == user_id else self.user1

    def has_participant(self, user_id):
        return user_id in (self.user1_id, self.user2_id)

    def touch(self):
        self.updated_at = utcnow()

    def __repr__(self):
        return f'<Conversation {self.id} between {self.user1_id} and {self.user2_id}>'
