from .base import db
from .user import utcnow, isoformat_utc


class Message(db.Model):
    __tablename__ = 'messages'

    id = db.Column(db.Integer, primary_key=True)
    conversation_id = db.Column(db.Integer, db.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False)
    sender_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    # Plain text, or an object-storage URL uploaded by the client beforehand
    content = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    conversation = db.relationship('Conversation', back_populates='messages')
    sender = db.relationship('User', back_populates='messages_sent')

    __table_args__ = (
        db.Index('idx_messages_conversation_created', 'conversation_id', 'created_at'),
        db.Index('idx_messages_conversation_unread', 'conversation_id', 'is_read'),
    )

    def to_dict(self):
        return {
            'id': str(self.id),
            'text': self.content,
            'senderId': str(self.sender_id),
            'read': bool(self.is_read),
            'createdAt': isoformat_utc(self.created_at),
            'author': self.sender.to_author() if self.sender else None,
        }

    def __repr__(self):
        return f'<Message {self.id} from {self.sender_id} in {self.conversation_id}>'
