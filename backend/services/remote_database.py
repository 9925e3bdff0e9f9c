"""
Remote backend: the same logical operations as the mock backend, run as
SQLAlchemy queries against the relational store.

Rows are snake_case; every read goes through the model's to_dict() so callers
only ever see the camelCase domain shapes. Failed writes roll the session back
and re-raise; nothing is retried.
"""
from contextlib import contextmanager
import uuid

from flask import current_app
from sqlalchemy import and_, func, or_, text
from sqlalchemy.exc import SQLAlchemyError

from app import db
from models import (
    BlockedUser,
    CalendarEvent,
    Career,
    ChatGroup,
    ChatMessage,
    Classroom,
    FinalExam,
    JustificationRequest,
    Notification,
    User,
)
from services import seed_data
from services.courses import CourseCatalog
from services.validation import (
    BROADCAST_USER_ID,
    ValidationError,
    validate_career,
    validate_classroom,
    validate_direct_message,
    validate_event,
    validate_final_exam,
    validate_group,
    validate_group_message,
    validate_justification,
    validate_justification_status,
    validate_notification,
    validate_user,
)
from utils.helpers import default_avatar, generate_uuid, parse_iso, utcnow

# camelCase domain field -> snake_case column, for user updates
USER_FIELDS = {
    'name': 'name',
    'email': 'email',
    'password': 'password',
    'role': 'role',
    'avatar': 'avatar',
    'preferences': 'preferences',
    'academicData': 'academic_data',
}


def _direct_between(user_id, other_id):
    return and_(
        ChatMessage.group_id.is_(None),
        or_(
            and_(ChatMessage.sender_id == user_id, ChatMessage.receiver_id == other_id),
            and_(ChatMessage.sender_id == other_id, ChatMessage.receiver_id == user_id),
        ),
    )


def _visible_to(user_id):
    return or_(Notification.user_id == user_id, Notification.user_id == BROADCAST_USER_ID)


# ============ DOMAIN -> ROW BUILDERS ============
def build_user(data, user_id=None):
    return User(
        id=user_id or data.get('id') or generate_uuid(),
        name=data['name'],
        email=data['email'],
        password=data.get('password') or '',
        role=data['role'],
        avatar=data.get('avatar') or default_avatar(data['name']),
        preferences=data.get('preferences') or dict(seed_data.DEFAULT_PREFERENCES),
        academic_data=data.get('academicData'),
    )


def build_career(data):
    return Career(
        id=data['id'],
        name=data['name'],
        years=list(data.get('years') or []),
        subjects=list(data.get('subjects') or []),
        updated_at=utcnow(),
    )


def build_classroom(data):
    return Classroom(
        id=data['id'],
        name=data['name'],
        capacity=data['capacity'],
        location=data['location'],
        updated_at=utcnow(),
    )


def build_event(data, event_id=None):
    return CalendarEvent(
        id=event_id or data.get('id') or generate_uuid(),
        title=data['title'],
        date=data['date'],
        type=data['type'],
        description=data.get('description'),
    )


def build_notification(data, notification_id=None):
    return Notification(
        id=notification_id or data.get('id') or generate_uuid(),
        user_id=data['userId'],
        title=data['title'],
        message=data['message'],
        date=parse_iso(data['date']) if data.get('date') else utcnow(),
        read=bool(data.get('read', False)),
        type=data['type'],
    )


def build_group(data):
    return ChatGroup(
        id=data['id'],
        name=data['name'],
        members=list(data['members']),
        admins=list(data['admins']),
        avatar=data.get('avatar'),
    )


def build_message(data, message_id=None):
    return ChatMessage(
        id=message_id or data.get('id') or generate_uuid(),
        sender_id=data['senderId'],
        receiver_id=data['receiverId'],
        group_id=data.get('groupId'),
        content=data['content'],
        timestamp=parse_iso(data['timestamp']) if data.get('timestamp') else utcnow(),
        read=bool(data.get('read', False)),
    )


def build_justification(data, request_id=None):
    return JustificationRequest(
        id=request_id or data.get('id') or generate_uuid(),
        student_id=data['studentId'],
        student_name=data['studentName'],
        course_name=data['courseName'],
        date=data['date'],
        reason=data['reason'],
        status=data.get('status', 'PENDING'),
        request_date=parse_iso(data['requestDate']) if data.get('requestDate') else utcnow(),
    )


def build_final_exam(data, exam_id=None):
    return FinalExam(
        id=exam_id or data.get('id') or generate_uuid(),
        subject_name=data['subjectName'],
        subject_id=data.get('subjectId'),
        career_id=data.get('careerId'),
        date=data['date'],
        time=data['time'],
        professor=data['professor'],
        classroom=data['classroom'],
        registered_student_ids=list(data.get('registeredStudentIds') or []),
    )


SEED_TABLES = [
    (User, seed_data.initial_users, build_user),
    (Career, seed_data.initial_careers, build_career),
    (Classroom, seed_data.initial_classrooms, build_classroom),
    (CalendarEvent, seed_data.initial_events, build_event),
    (Notification, seed_data.initial_notifications, build_notification),
    (ChatGroup, seed_data.initial_groups, build_group),
    (ChatMessage, seed_data.initial_messages, build_message),
    (JustificationRequest, seed_data.initial_justifications, build_justification),
    (FinalExam, seed_data.initial_finals, build_final_exam),
]


class RemoteBackend:
    name = 'remote'

    def __init__(self, seed=False, catalog=None):
        self.seed = seed
        self.catalog = catalog if catalog is not None else CourseCatalog()

    @contextmanager
    def _writing(self):
        """Commit on success; roll back and re-raise on any failure"""
        try:
            yield db.session
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            if isinstance(e, SQLAlchemyError):
                current_app.logger.error(f"Remote write failed: {e}")
            raise

    def initialize_database(self):
        """
        Check connectivity and create missing tables. With seeding enabled,
        a fresh store (every table empty) gets the initial data; once any
        table holds rows, tables emptied later stay empty.
        """
        db.session.execute(text('SELECT 1'))
        db.create_all()
        if not self.seed:
            return

        with self._writing() as session:
            if any(session.query(model).count() for model, _, _ in SEED_TABLES):
                return
            for model, initial, build in SEED_TABLES:
                session.add_all(build(row) for row in initial())
                print(f"[SEED] {model.__tablename__}: seeded")

    # ============ USERS ============
    def get_users(self):
        users = User.query.order_by(User.created_at.desc(), User.id).all()
        return [u.to_dict() for u in users]

    def get_user_by_id(self, user_id):
        user = db.session.get(User, user_id)
        return user.to_dict() if user else None

    def _email_taken(self, email, exclude_id=None):
        query = User.query.filter(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def add_user(self, data):
        validate_user(data)
        if self._email_taken(data['email']):
            raise ValidationError(f"Email already registered: {data['email']}")

        user = build_user(data, user_id=generate_uuid())
        with self._writing() as session:
            session.add(user)
        return user.to_dict()

    def update_user(self, user_id, updates):
        validate_user(updates, partial=True)
        user = db.session.get(User, user_id)
        if user is None:
            return None
        if updates.get('email') and self._email_taken(updates['email'], exclude_id=user_id):
            raise ValidationError(f"Email already registered: {updates['email']}")

        changes = {
            column: updates[field]
            for field, column in USER_FIELDS.items()
            if updates.get(field) is not None
        }
        with self._writing():
            user.update(**changes)
        return user.to_dict()

    def delete_user(self, user_id):
        with self._writing() as session:
            session.query(User).filter_by(id=user_id).delete()

    def authenticate_user(self, email, password):
        if not email or not password:
            return None
        user = User.query.filter(
            func.lower(User.email) == email.lower(),
            User.password == password,
        ).first()
        return user.to_dict() if user else None

    # ============ CAREERS ============
    def get_careers(self):
        return [c.to_dict() for c in Career.query.order_by(Career.name).all()]

    def save_career(self, career):
        validate_career(career)
        with self._writing() as session:
            stored = session.merge(build_career(career))
        return stored.to_dict()

    def delete_career(self, career_id):
        with self._writing() as session:
            session.query(Career).filter_by(id=career_id).delete()

    # ============ CLASSROOMS ============
    def get_classrooms(self):
        return [c.to_dict() for c in Classroom.query.order_by(Classroom.name).all()]

    def save_classroom(self, classroom):
        validate_classroom(classroom)
        with self._writing() as session:
            stored = session.merge(build_classroom(classroom))
        return stored.to_dict()

    def delete_classroom(self, classroom_id):
        with self._writing() as session:
            session.query(Classroom).filter_by(id=classroom_id).delete()

    # ============ CALENDAR EVENTS ============
    def get_events(self):
        return [e.to_dict() for e in CalendarEvent.query.order_by(CalendarEvent.date).all()]

    def add_event(self, event):
        validate_event(event)
        row = build_event(event, event_id=generate_uuid())
        with self._writing() as session:
            session.add(row)
        return row.to_dict()

    def delete_event(self, event_id):
        with self._writing() as session:
            session.query(CalendarEvent).filter_by(id=event_id).delete()

    # ============ NOTIFICATIONS ============
    def get_notifications(self, user_id):
        rows = (Notification.query
                .filter(_visible_to(user_id))
                .order_by(Notification.date.desc())
                .all())
        return [n.to_dict() for n in rows]

    def get_unread_count(self, user_id):
        return (Notification.query
                .filter(_visible_to(user_id), Notification.read.is_(False))
                .count())

    def add_notification(self, notification):
        validate_notification(notification)
        row = build_notification(
            {**notification, 'date': None, 'read': False},
            notification_id=generate_uuid(),
        )
        with self._writing() as session:
            session.add(row)
        return row.to_dict()

    def mark_notification_as_read(self, notification_id):
        with self._writing() as session:
            session.query(Notification).filter_by(id=notification_id).update(
                {'read': True}, synchronize_session=False
            )

    def mark_all_notifications_as_read(self, user_id):
        with self._writing() as session:
            session.query(Notification).filter(_visible_to(user_id)).update(
                {'read': True}, synchronize_session=False
            )

    def delete_notification(self, notification_id):
        with self._writing() as session:
            session.query(Notification).filter_by(id=notification_id).delete()

    # ============ CHAT: GROUPS ============
    def get_groups(self, user_id):
        # Membership lives in a JSON array; filter after loading
        return [g.to_dict() for g in ChatGroup.query.all() if user_id in (g.members or [])]

    def create_group(self, name, member_ids, admin_id):
        validate_group(name, member_ids)
        group = ChatGroup(
            id=f'g{uuid.uuid4().hex}',
            name=name,
            members=list(dict.fromkeys(list(member_ids) + [admin_id])),
            admins=[admin_id],
            avatar=default_avatar(name),
        )
        with self._writing() as session:
            session.add(group)
        return group.to_dict()

    def leave_group(self, user_id, group_id):
        group = db.session.get(ChatGroup, group_id)
        if group is None:
            return

        with self._writing() as session:
            members = [m for m in group.members if m != user_id]
            if not members:
                session.delete(group)
                return
            admins = [a for a in group.admins if a != user_id]
            if not admins:
                admins = [members[0]]
            group.update(members=members, admins=admins)

    def update_group_avatar(self, group_id, avatar):
        group = db.session.get(ChatGroup, group_id)
        if group is None:
            return
        with self._writing():
            group.update(avatar=avatar)

    # ============ CHAT: MESSAGES ============
    def get_messages(self, user_id, other_id, is_group=False):
        query = ChatMessage.query
        if is_group:
            query = query.filter(ChatMessage.group_id == other_id)
        else:
            query = query.filter(_direct_between(user_id, other_id))
        return [m.to_dict() for m in query.order_by(ChatMessage.timestamp.asc()).all()]

    def send_message(self, sender_id, receiver_id, content):
        known = {u.id for u in User.query.filter(User.id.in_([sender_id, receiver_id])).all()}
        validate_direct_message(sender_id, receiver_id, content, known)
        row = ChatMessage(
            id=generate_uuid(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            timestamp=utcnow(),
            read=False,
        )
        with self._writing() as session:
            session.add(row)
        return row.to_dict()

    def send_group_message(self, sender_id, group_id, content):
        group = db.session.get(ChatGroup, group_id)
        validate_group_message(sender_id, group.to_dict() if group else None, content)
        row = ChatMessage(
            id=generate_uuid(),
            sender_id=sender_id,
            receiver_id=group_id,
            group_id=group_id,
            content=content,
            timestamp=utcnow(),
            read=False,
        )
        with self._writing() as session:
            session.add(row)
        return row.to_dict()

    def mark_messages_as_read(self, user_id, sender_id):
        with self._writing() as session:
            session.query(ChatMessage).filter(
                ChatMessage.receiver_id == user_id,
                ChatMessage.sender_id == sender_id,
                ChatMessage.group_id.is_(None),
            ).update({'read': True}, synchronize_session=False)

    def clear_chat(self, user_id, other_id, is_group=None):
        if is_group is None:
            is_group = other_id.startswith('g')
        condition = (ChatMessage.group_id == other_id) if is_group else _direct_between(user_id, other_id)
        with self._writing() as session:
            session.query(ChatMessage).filter(condition).delete(synchronize_session=False)

    def get_unread_messages_count(self, user_id):
        return ChatMessage.query.filter(
            ChatMessage.receiver_id == user_id,
            ChatMessage.read.is_(False),
            ChatMessage.group_id.is_(None),
        ).count()

    # ============ CHAT: BLOCKING ============
    def toggle_block_user(self, user_id, target_id):
        existing = BlockedUser.query.filter_by(user_id=user_id, blocked_user_id=target_id).first()
        with self._writing() as session:
            if existing:
                session.delete(existing)
            else:
                session.add(BlockedUser(id=generate_uuid(), user_id=user_id, blocked_user_id=target_id))
        return existing is None

    def is_user_blocked(self, user_id, target_id):
        return BlockedUser.query.filter_by(
            user_id=user_id, blocked_user_id=target_id
        ).first() is not None

    def get_contacts(self, current_user_id):
        messages = (ChatMessage.query
                    .filter(ChatMessage.group_id.is_(None),
                            or_(ChatMessage.sender_id == current_user_id,
                                ChatMessage.receiver_id == current_user_id))
                    .order_by(ChatMessage.timestamp.asc())
                    .all())
        my_blocks = {
            b.blocked_user_id
            for b in BlockedUser.query.filter_by(user_id=current_user_id).all()
        }

        contacts = []
        for user in self.get_users():
            if user['id'] == current_user_id:
                continue
            conversation = [
                m for m in messages
                if user['id'] in (m.sender_id, m.receiver_id)
            ]
            unread = len([m for m in conversation if m.sender_id == user['id'] and not m.read])
            contacts.append({
                **user,
                'unread': unread,
                'lastMessage': conversation[-1].content if conversation else None,
                'isBlocked': user['id'] in my_blocks,
            })
        return contacts

    # ============ JUSTIFICATIONS ============
    def get_justification_requests(self):
        rows = JustificationRequest.query.order_by(JustificationRequest.request_date.desc()).all()
        return [r.to_dict() for r in rows]

    def add_justification_request(self, request_data):
        validate_justification(request_data)
        row = build_justification(
            {**request_data, 'status': 'PENDING', 'requestDate': None},
            request_id=generate_uuid(),
        )
        with self._writing() as session:
            session.add(row)
        return row.to_dict()

    def update_justification_status(self, request_id, status):
        # A decided request can still be changed again; callers do not rely on it
        validate_justification_status(status)
        with self._writing() as session:
            session.query(JustificationRequest).filter_by(id=request_id).update(
                {'status': status, 'updated_at': utcnow()}, synchronize_session=False
            )
        return self.get_justification_requests()

    # ============ FINAL EXAMS ============
    def get_final_exams(self, user_id):
        return [f.to_session(user_id) for f in FinalExam.query.order_by(FinalExam.date).all()]

    def add_final_exam(self, exam):
        validate_final_exam(exam)
        row = build_final_exam({**exam, 'registeredStudentIds': []}, exam_id=generate_uuid())
        with self._writing() as session:
            session.add(row)
        return row.to_session(None)

    def delete_final_exam(self, exam_id):
        with self._writing() as session:
            session.query(FinalExam).filter_by(id=exam_id).delete()

    def toggle_final_registration(self, user_id, exam_id):
        """Read-modify-write of the registered id list, under a row lock where supported"""
        with self._writing() as session:
            exam = session.query(FinalExam).filter_by(id=exam_id).with_for_update().first()
            if exam is None:
                return False
            registered = list(exam.registered_student_ids or [])
            is_registered = user_id in registered
            if is_registered:
                registered = [s for s in registered if s != user_id]
            else:
                registered.append(user_id)
            exam.update(registered_student_ids=registered)
        return not is_registered

    # ============ COURSES ============
    def get_student_courses(self, student_id):
        return self.catalog.get_student_courses(student_id)

    def get_teacher_courses(self, teacher_id):
        return self.catalog.get_teacher_courses(teacher_id)

    def get_course_students(self, course_id):
        return self.catalog.get_course_students(course_id)

    def toggle_course_status(self, course_id):
        return self.catalog.toggle_course_status(course_id)
