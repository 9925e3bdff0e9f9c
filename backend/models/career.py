"""
Career Model
A career owns its ordered year labels and its subjects (stored as JSON)
"""
from app import db
from models.base import BaseModel


class Career(BaseModel):
    __tablename__ = 'careers'

    name = db.Column(db.String(200), nullable=False)
    years = db.Column(db.JSON, nullable=False, default=list)
    # [{id, name, year}]
    subjects = db.Column(db.JSON, nullable=False, default=list)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'years': list(self.years or []),
            'subjects': list(self.subjects or []),
        }
