from app import db
from sqlalchemy.orm import validates
from models.base import BaseModel
from services.validation import validate_capacity


class Classroom(BaseModel):
    __tablename__ = 'classrooms'

    name = db.Column(db.String(100), nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    location = db.Column(db.String(150), nullable=False)

    @validates('capacity')
    def check_capacity(self, key, capacity):
        return validate_capacity(capacity)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'capacity': self.capacity,
            'location': self.location,
        }
