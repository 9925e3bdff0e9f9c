"""
Base model with common fields for all models.
Every table keeps created_at/updated_at bookkeeping that is never exposed
through to_dict().
"""
from app import db
from utils.helpers import generate_uuid, utcnow


class BaseModel(db.Model):
    """
    Abstract base model that all other models inherit from.
    Ids are strings: seed rows use short ids ('1', 'c8', 'g1'), new rows get UUIDs.
    """
    __abstract__ = True

    id = db.Column(db.String(64), primary_key=True, default=generate_uuid)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        raise NotImplementedError

    def update(self, **kwargs):
        """
        Update model fields from keyword arguments.
        Returns self for method chaining.
        """
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

        self.updated_at = utcnow()
        return self

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.id}>'
