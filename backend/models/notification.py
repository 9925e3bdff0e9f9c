from app import db
from models.base import BaseModel
from utils.helpers import to_iso, utcnow


class Notification(BaseModel):
    __tablename__ = 'notifications'

    # A user id, or 'all' for broadcast notifications
    user_id = db.Column(db.String(64), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow)
    read = db.Column(db.Boolean, nullable=False, default=False)
    type = db.Column(db.String(20), nullable=False)  # info | alert | success

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'title': self.title,
            'message': self.message,
            'date': to_iso(self.date),
            'read': self.read,
            'type': self.type,
        }
