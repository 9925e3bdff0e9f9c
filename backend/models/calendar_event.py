from app import db
from models.base import BaseModel


class CalendarEvent(BaseModel):
    __tablename__ = 'calendar_events'

    title = db.Column(db.String(200), nullable=False)
    date = db.Column(db.String(10), nullable=False, index=True)  # YYYY-MM-DD
    type = db.Column(db.String(20), nullable=False)  # exam | holiday | deadline | meeting | other
    description = db.Column(db.Text, nullable=True)

    def to_dict(self):
        data = {
            'id': self.id,
            'title': self.title,
            'date': self.date,
            'type': self.type,
        }
        if self.description is not None:
            data['description'] = self.description
        return data
