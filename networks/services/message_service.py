from flask import current_app
from sqlalchemy import and_, case, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from networks import db
from networks.models import Conversation, Message, User
from networks.models.user import isoformat_utc


class MessagingError(Exception):
    """Base class for failures that map to a client-facing HTTP status."""
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(MessagingError):
    status_code = 400


class NotFoundError(MessagingError):
    status_code = 404


class ForbiddenError(MessagingError):
    status_code = 403


class MessageService:
    @staticmethod
    def find_conversation(user_a_id, user_b_id):
        """Return the conversation between two users, or None. Never creates one."""
        return Conversation.find_for_pair(user_a_id, user_b_id)

    @staticmethod
    def resolve_conversation(current_user_id, other_user_id, touch=False):
        """
        Finds the conversation for an unordered pair of users, creating it if needed.

        Args:
            current_user_id: ID of the acting user
            other_user_id: ID of the counterpart, must exist
            touch: bump updated_at on an existing conversation (send path)

        Returns:
            Conversation: the existing or newly created conversation (not committed)

        Raises:
            NotFoundError: the counterpart does not exist
            ValidationError: both ids are the same user
        """
        if db.session.get(User, other_user_id) is None:
            raise NotFoundError('Recipient not found')
        if int(current_user_id) == int(other_user_id):
            raise ValidationError('Cannot start a conversation with yourself')

        conversation = Conversation.find_for_pair(current_user_id, other_user_id)
        if conversation:
            if touch:
                conversation.touch()
            return conversation

        user1_id, user2_id = Conversation.normalize_pair(current_user_id, other_user_id)
        conversation = Conversation(user1_id=user1_id, user2_id=user2_id)
        # On pysqlite with no open transaction the SAVEPOINT starts one and its
        # RELEASE commits the conversation row ahead of the message insert
        try:
            with db.session.begin_nested():
                db.session.add(conversation)
        except IntegrityError:
            # A concurrent request created the pair first. A plain SELECT would
            # read this transaction's snapshot (InnoDB REPEATABLE READ), so lock
            # the committed row instead
            current_app.logger.info(
                f"Conversation for users {user1_id}/{user2_id} created concurrently, reusing it")
            conversation = Conversation.find_for_pair(user1_id, user2_id, for_update=True)
            if conversation is None:
                raise
            if touch:
                conversation.touch()
        return conversation

    @staticmethod
    def send_message(sender, recipient_id, content):
        """Append a message from sender to recipient, creating the conversation lazily."""
        if not isinstance(content, str) or not content.strip():
            raise ValidationError('Message cannot be empty')

        max_length = current_app.config.get('MESSAGE_MAX_LENGTH')
        if max_length and len(content) > max_length:
            raise ValidationError(f'Message cannot be longer than {max_length} characters')

        conversation = MessageService.resolve_conversation(sender.id, recipient_id, touch=True)

        message = Message(
            conversation=conversation,
            sender=sender,
            content=content,
            is_read=False
        )
        db.session.add(message)
        db.session.commit()
        return message

    @staticmethod
    def mark_read(conversation, reader_id):
        """Flag the counterpart's unread messages as read. Returns the number of rows updated."""
        updated = Message.query.filter(
            Message.conversation_id == conversation.id,
            Message.sender_id != reader_id,
            Message.is_read == False  # noqa: E712
        ).update({Message.is_read: True}, synchronize_session=False)
        db.session.commit()
        return updated

    @staticmethod
    def fetch_messages(current_user, other_user_id, after_id=None):
        """
        Returns the messages between current_user and other_user_id, oldest first.

        The counterpart's unread messages are marked read before selecting, so
        the returned list already reflects the reader's view. Without an
        existing conversation the result is empty and nothing is created.
        """
        conversation = MessageService.find_conversation(current_user.id, other_user_id)
        if conversation is None:
            return []

        MessageService.mark_read(conversation, current_user.id)

        query = Message.query.filter(Message.conversation_id == conversation.id)
        if after_id is not None:
            query = query.filter(Message.id > after_id)
        return query.options(
            joinedload(Message.sender)
        ).order_by(Message.created_at.asc(), Message.id.asc()).all()

    @staticmethod
    def delete_message(current_user, message_id):
        """
        Hard-deletes a message owned by current_user.

        Ownership is part of the DELETE condition. When nothing matches, the
        message is looked up only to tell a missing message from a foreign one.
        """
        deleted = Message.query.filter(
            Message.id == message_id,
            Message.sender_id == current_user.id
        ).delete(synchronize_session=False)
        db.session.commit()

        if deleted:
            return True

        if db.session.get(Message, message_id) is None:
            raise NotFoundError('Message not found')
        raise ForbiddenError('You cannot delete this message')

    @staticmethod
    def _unread_counts(user_id):
        """Subquery of unread counterpart messages per conversation."""
        return db.session.query(
            Message.conversation_id.label('conversation_id'),
            func.count(Message.id).label('unread_count')
        ).filter(
            Message.is_read == False,  # noqa: E712
            Message.sender_id != user_id
        ).group_by(Message.conversation_id).subquery()

    @staticmethod
    def list_conversations(user):
        """
        Builds the inbox summary for a user.

        Returns:
            list: dicts with id, otherUser, lastMessage (or None) and unreadCount,
            most recently active conversation first
        """
        other_user_id = case(
            (Conversation.user1_id == user.id, Conversation.user2_id),
            else_=Conversation.user1_id
        )

        # Newest message per conversation: highest created_at, ties broken by id
        ranked = db.session.query(
            Message.id.label('message_id'),
            Message.conversation_id.label('conversation_id'),
            func.row_number().over(
                partition_by=Message.conversation_id,
                order_by=(Message.created_at.desc(), Message.id.desc())
            ).label('position')
        ).subquery()
        latest = db.session.query(
            ranked.c.conversation_id,
            ranked.c.message_id
        ).filter(ranked.c.position == 1).subquery()

        unread = MessageService._unread_counts(user.id)

        rows = db.session.query(
            Conversation,
            User,
            Message,
            func.coalesce(unread.c.unread_count, 0)
        ).select_from(
            Conversation
        ).join(
            User, User.id == other_user_id
        ).outerjoin(
            latest, latest.c.conversation_id == Conversation.id
        ).outerjoin(
            Message, Message.id == latest.c.message_id
        ).outerjoin(
            unread, unread.c.conversation_id == Conversation.id
        ).filter(
            or_(Conversation.user1_id == user.id, Conversation.user2_id == user.id)
        ).order_by(
            Conversation.updated_at.desc(),
            Conversation.id.desc()
        ).all()

        summaries = []
        for conversation, other_user, last_message, unread_count in rows:
            summaries.append({
                'id': str(conversation.id),
                'otherUser': other_user.to_author(),
                'lastMessage': {
                    'text': last_message.content,
                    'senderId': str(last_message.sender_id),
                    'timestamp': isoformat_utc(last_message.created_at),
                } if last_message else None,
                'unreadCount': int(unread_count or 0),
            })
        return summaries

    @staticmethod
    def unread_total(user):
        """Total unread counterpart messages across all of a user's conversations."""
        count = db.session.query(func.count(Message.id)).join(
            Conversation, Conversation.id == Message.conversation_id
        ).filter(
            or_(Conversation.user1_id == user.id, Conversation.user2_id == user.id),
            and_(Message.sender_id != user.id, Message.is_read == False)  # noqa: E712
        ).scalar()
        return count or 0
