"""
Chat models: groups, messages (direct and group) and block relations
"""
from app import db
from sqlalchemy import UniqueConstraint
from models.base import BaseModel
from utils.helpers import to_iso, utcnow


class ChatGroup(BaseModel):
    __tablename__ = 'chat_groups'

    name = db.Column(db.String(150), nullable=False)
    members = db.Column(db.JSON, nullable=False, default=list)
    # Always a subset of members
    admins = db.Column(db.JSON, nullable=False, default=list)
    avatar = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'members': list(self.members or []),
            'admins': list(self.admins or []),
            'avatar': self.avatar,
        }


class ChatMessage(BaseModel):
    __tablename__ = 'chat_messages'

    sender_id = db.Column(db.String(64), nullable=False, index=True)
    # For group messages receiver_id repeats group_id
    receiver_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.String(64), nullable=True, index=True)
    content = db.Column(db.Text, nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False, default=utcnow)
    read = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        data = {
            'id': self.id,
            'senderId': self.sender_id,
            'receiverId': self.receiver_id,
            'content': self.content,
            'timestamp': to_iso(self.timestamp),
            'read': self.read,
        }
        if self.group_id:
            data['groupId'] = self.group_id
        return data


class BlockedUser(BaseModel):
    """Directed relation: user_id has blocked blocked_user_id"""
    __tablename__ = 'blocked_users'
    __table_args__ = (
        UniqueConstraint('user_id', 'blocked_user_id', name='uq_blocked_pair'),
    )

    user_id = db.Column(db.String(64), nullable=False, index=True)
    blocked_user_id = db.Column(db.String(64), nullable=False)
