from app import db
from models.base import BaseModel
from utils.helpers import to_iso, utcnow


class JustificationRequest(BaseModel):
    __tablename__ = 'justification_requests'

    student_id = db.Column(db.String(64), nullable=False, index=True)
    student_name = db.Column(db.String(150), nullable=False)
    course_name = db.Column(db.String(200), nullable=False)
    date = db.Column(db.String(10), nullable=False)  # day of the absence
    reason = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='PENDING')
    request_date = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'studentId': self.student_id,
            'studentName': self.student_name,
            'courseName': self.course_name,
            'date': self.date,
            'reason': self.reason,
            'status': self.status,
            'requestDate': to_iso(self.request_date),
        }
