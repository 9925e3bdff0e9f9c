"""
User Model for the portal
Handles credentials, role and per-user preferences
"""
from app import db
from sqlalchemy.orm import validates
from models.base import BaseModel
from services.validation import validate_role
from utils.helpers import default_avatar


class User(BaseModel):
    __tablename__ = 'users'

    name = db.Column(db.String(150), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    # Plaintext-equivalent credential, compared as-is on login
    password = db.Column(db.String(128), nullable=False, default='')
    role = db.Column(db.String(20), nullable=False)
    avatar = db.Column(db.Text, nullable=True)

    preferences = db.Column(db.JSON, nullable=True)
    academic_data = db.Column(db.JSON, nullable=True)

    @validates('role')
    def check_role(self, key, role):
        return validate_role(role)

    def to_dict(self):
        data = {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'avatar': self.avatar or default_avatar(self.name),
            'preferences': self.preferences,
        }
        if self.academic_data is not None:
            data['academicData'] = self.academic_data
        return data

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'
