from app import db
from models.base import BaseModel


class FinalExam(BaseModel):
    __tablename__ = 'final_exams'

    subject_name = db.Column(db.String(200), nullable=False)
    subject_id = db.Column(db.String(64), nullable=True)
    career_id = db.Column(db.String(64), nullable=True)
    date = db.Column(db.String(10), nullable=False, index=True)
    time = db.Column(db.String(5), nullable=False)
    professor = db.Column(db.String(150), nullable=False)
    classroom = db.Column(db.String(150), nullable=False)
    registered_student_ids = db.Column(db.JSON, nullable=False, default=list)

    def to_dict(self):
        """Stored shape, including the registered student ids"""
        data = {
            'id': self.id,
            'subjectName': self.subject_name,
            'date': self.date,
            'time': self.time,
            'professor': self.professor,
            'classroom': self.classroom,
            'registeredStudentIds': list(self.registered_student_ids or []),
        }
        if self.subject_id is not None:
            data['subjectId'] = self.subject_id
        if self.career_id is not None:
            data['careerId'] = self.career_id
        return data

    def to_session(self, user_id):
        """Per-user view: registration flag and count instead of the id list"""
        registered = self.registered_student_ids or []
        data = self.to_dict()
        del data['registeredStudentIds']
        data['isRegistered'] = user_id in registered
        data['registeredCount'] = len(registered)
        return data
