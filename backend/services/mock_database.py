"""
Mock backend: every collection is one JSON document in a key/value Storage.

Collections are seeded the first time their key is read (or all at once by
initialize_database). Seeding checks for key presence only, so a collection
that was emptied on purpose is never refilled.

Writes load the whole collection, change it and write it back. Each backend
operation holds the backend lock, so request threads in one process never
interleave a load-modify-save. Two processes sharing a FileStorage directory
are not coordinated and can still lose updates (last writer wins).
"""
from functools import wraps
import json
import threading
import time

from services import seed_data
from services.courses import CourseCatalog
from services.storage import MemoryStorage
from services.validation import (
    BROADCAST_USER_ID,
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
    validate_unique_email,
    validate_user,
)
from utils.helpers import default_avatar, now_iso, parse_iso

STORAGE_KEY_USERS = 'isfdyt26_users'
STORAGE_KEY_EVENTS = 'isfdyt26_events'
STORAGE_KEY_NOTIFICATIONS = 'isfdyt26_notifications'
STORAGE_KEY_JUSTIFICATIONS = 'isfdyt26_justifications'
STORAGE_KEY_CAREERS = 'isfdyt26_careers'
STORAGE_KEY_MESSAGES = 'isfdyt26_messages'
STORAGE_KEY_GROUPS = 'isfdyt26_groups'
STORAGE_KEY_CLASSROOMS = 'isfdyt26_classrooms'
STORAGE_KEY_BLOCKED = 'isfdyt26_blocked'
STORAGE_KEY_FINALS = 'isfdyt26_finals'

SEEDS = {
    STORAGE_KEY_USERS: seed_data.initial_users,
    STORAGE_KEY_EVENTS: seed_data.initial_events,
    STORAGE_KEY_NOTIFICATIONS: seed_data.initial_notifications,
    STORAGE_KEY_JUSTIFICATIONS: seed_data.initial_justifications,
    STORAGE_KEY_CAREERS: seed_data.initial_careers,
    STORAGE_KEY_MESSAGES: seed_data.initial_messages,
    STORAGE_KEY_GROUPS: seed_data.initial_groups,
    STORAGE_KEY_CLASSROOMS: seed_data.initial_classrooms,
    STORAGE_KEY_BLOCKED: seed_data.initial_blocked,
    STORAGE_KEY_FINALS: seed_data.initial_finals,
}


def strip_password(user):
    return {k: v for k, v in user.items() if k != 'password'}


def is_direct_between(message, user_id, other_id):
    return not message.get('groupId') and (
        (message['senderId'] == user_id and message['receiverId'] == other_id)
        or (message['senderId'] == other_id and message['receiverId'] == user_id)
    )


def exam_session_view(exam, user_id):
    """Per-user view of a stored final exam"""
    registered = exam.get('registeredStudentIds') or []
    view = {k: v for k, v in exam.items() if k != 'registeredStudentIds'}
    view['isRegistered'] = user_id in registered
    view['registeredCount'] = len(registered)
    return view


def locked(method):
    """Run a backend method while holding the backend lock"""
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class MockBackend:
    name = 'mock'

    def __init__(self, storage=None, catalog=None):
        self.storage = storage if storage is not None else MemoryStorage()
        self.catalog = catalog if catalog is not None else CourseCatalog()
        self._last_id = 0
        self._lock = threading.RLock()

    # ============ STORAGE PLUMBING ============
    @locked
    def _next_id(self):
        """Millisecond timestamp, bumped so ids never repeat within this backend"""
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    @locked
    def _seed(self, key):
        data = SEEDS[key]()
        self._save(key, data)
        return data

    @locked
    def _load(self, key):
        raw = self.storage.get_item(key)
        if raw is None:
            return self._seed(key)
        return json.loads(raw)

    @locked
    def _save(self, key, data):
        self.storage.set_item(key, json.dumps(data, ensure_ascii=False))

    @locked
    def initialize_database(self):
        for key in SEEDS:
            if self.storage.get_item(key) is None:
                self._seed(key)

    # ============ CLASSROOMS ============
    @locked
    def get_classrooms(self):
        return self._load(STORAGE_KEY_CLASSROOMS)

    @locked
    def save_classroom(self, classroom):
        validate_classroom(classroom)
        classrooms = self._load(STORAGE_KEY_CLASSROOMS)
        self._upsert(classrooms, classroom)
        self._save(STORAGE_KEY_CLASSROOMS, classrooms)
        return dict(classroom)

    @locked
    def delete_classroom(self, classroom_id):
        classrooms = [c for c in self._load(STORAGE_KEY_CLASSROOMS) if c['id'] != classroom_id]
        self._save(STORAGE_KEY_CLASSROOMS, classrooms)

    # ============ CAREERS ============
    @locked
    def get_careers(self):
        return self._load(STORAGE_KEY_CAREERS)

    @locked
    def save_career(self, career):
        validate_career(career)
        careers = self._load(STORAGE_KEY_CAREERS)
        self._upsert(careers, career)
        self._save(STORAGE_KEY_CAREERS, careers)
        return json.loads(json.dumps(career))

    @locked
    def delete_career(self, career_id):
        careers = [c for c in self._load(STORAGE_KEY_CAREERS) if c['id'] != career_id]
        self._save(STORAGE_KEY_CAREERS, careers)

    @staticmethod
    def _upsert(records, record):
        for index, existing in enumerate(records):
            if existing['id'] == record['id']:
                records[index] = record
                return
        records.append(record)

    # ============ USERS ============
    @locked
    def get_users(self):
        return [strip_password(u) for u in self._load(STORAGE_KEY_USERS)]

    @locked
    def get_user_by_id(self, user_id):
        for user in self._load(STORAGE_KEY_USERS):
            if user['id'] == user_id:
                return strip_password(user)
        return None

    @locked
    def add_user(self, data):
        validate_user(data)
        users = self._load(STORAGE_KEY_USERS)
        validate_unique_email(data['email'], users)

        new_user = dict(data)
        new_user['id'] = self._next_id()
        new_user['password'] = data.get('password') or ''
        new_user['preferences'] = data.get('preferences') or dict(seed_data.DEFAULT_PREFERENCES)
        if not new_user.get('avatar'):
            new_user['avatar'] = default_avatar(new_user['name'])

        users.append(new_user)
        self._save(STORAGE_KEY_USERS, users)
        return strip_password(new_user)

    @locked
    def update_user(self, user_id, updates):
        updates = {k: v for k, v in updates.items() if k != 'id'}
        validate_user(updates, partial=True)
        users = self._load(STORAGE_KEY_USERS)

        for index, user in enumerate(users):
            if user['id'] == user_id:
                if 'email' in updates:
                    validate_unique_email(updates['email'], users, exclude_id=user_id)
                users[index] = {**user, **updates}
                self._save(STORAGE_KEY_USERS, users)
                return strip_password(users[index])
        return None

    @locked
    def delete_user(self, user_id):
        users = [u for u in self._load(STORAGE_KEY_USERS) if u['id'] != user_id]
        self._save(STORAGE_KEY_USERS, users)

    @locked
    def authenticate_user(self, email, password):
        if not email or not password:
            return None
        wanted = email.lower()
        for user in self._load(STORAGE_KEY_USERS):
            if user['email'].lower() == wanted and user.get('password') == password:
                return strip_password(user)
        return None

    # ============ EVENTS ============
    @locked
    def get_events(self):
        return self._load(STORAGE_KEY_EVENTS)

    @locked
    def add_event(self, event):
        validate_event(event)
        events = self._load(STORAGE_KEY_EVENTS)
        new_event = {**event, 'id': self._next_id()}
        events.append(new_event)
        self._save(STORAGE_KEY_EVENTS, events)
        return new_event

    @locked
    def delete_event(self, event_id):
        events = [e for e in self._load(STORAGE_KEY_EVENTS) if e['id'] != event_id]
        self._save(STORAGE_KEY_EVENTS, events)

    # ============ NOTIFICATIONS ============
    @locked
    def get_notifications(self, user_id):
        visible = [
            n for n in self._load(STORAGE_KEY_NOTIFICATIONS)
            if n['userId'] == user_id or n['userId'] == BROADCAST_USER_ID
        ]
        return sorted(visible, key=lambda n: parse_iso(n['date']), reverse=True)

    @locked
    def get_unread_count(self, user_id):
        return len([n for n in self.get_notifications(user_id) if not n['read']])

    @locked
    def add_notification(self, notification):
        validate_notification(notification)
        notifications = self._load(STORAGE_KEY_NOTIFICATIONS)
        new_notification = {
            **notification,
            'id': self._next_id(),
            'date': now_iso(),
            'read': False,
        }
        notifications.append(new_notification)
        self._save(STORAGE_KEY_NOTIFICATIONS, notifications)
        return new_notification

    @locked
    def mark_notification_as_read(self, notification_id):
        notifications = self._load(STORAGE_KEY_NOTIFICATIONS)
        for n in notifications:
            if n['id'] == notification_id:
                n['read'] = True
        self._save(STORAGE_KEY_NOTIFICATIONS, notifications)

    @locked
    def mark_all_notifications_as_read(self, user_id):
        notifications = self._load(STORAGE_KEY_NOTIFICATIONS)
        for n in notifications:
            if n['userId'] == user_id or n['userId'] == BROADCAST_USER_ID:
                n['read'] = True
        self._save(STORAGE_KEY_NOTIFICATIONS, notifications)

    @locked
    def delete_notification(self, notification_id):
        notifications = [
            n for n in self._load(STORAGE_KEY_NOTIFICATIONS) if n['id'] != notification_id
        ]
        self._save(STORAGE_KEY_NOTIFICATIONS, notifications)

    # ============ CHAT: GROUPS ============
    @locked
    def get_groups(self, user_id):
        return [g for g in self._load(STORAGE_KEY_GROUPS) if user_id in g['members']]

    @locked
    def _find_group(self, group_id):
        for group in self._load(STORAGE_KEY_GROUPS):
            if group['id'] == group_id:
                return group
        return None

    @locked
    def create_group(self, name, member_ids, admin_id):
        validate_group(name, member_ids)
        groups = self._load(STORAGE_KEY_GROUPS)
        members = list(dict.fromkeys(list(member_ids) + [admin_id]))
        new_group = {
            'id': f'g{self._next_id()}',
            'name': name,
            'members': members,
            'admins': [admin_id],
            'avatar': default_avatar(name),
        }
        groups.append(new_group)
        self._save(STORAGE_KEY_GROUPS, groups)
        return new_group

    @locked
    def leave_group(self, user_id, group_id):
        groups = self._load(STORAGE_KEY_GROUPS)
        for index, group in enumerate(groups):
            if group['id'] != group_id:
                continue
            group['members'] = [m for m in group['members'] if m != user_id]
            if not group['members']:
                del groups[index]
            elif user_id in group['admins']:
                group['admins'] = [a for a in group['admins'] if a != user_id]
                if not group['admins']:
                    group['admins'] = [group['members'][0]]
            self._save(STORAGE_KEY_GROUPS, groups)
            return

    @locked
    def update_group_avatar(self, group_id, avatar):
        groups = self._load(STORAGE_KEY_GROUPS)
        for group in groups:
            if group['id'] == group_id:
                group['avatar'] = avatar
                self._save(STORAGE_KEY_GROUPS, groups)
                return

    # ============ CHAT: MESSAGES ============
    @locked
    def get_messages(self, user_id, other_id, is_group=False):
        messages = self._load(STORAGE_KEY_MESSAGES)
        if is_group:
            selected = [m for m in messages if m.get('groupId') == other_id]
        else:
            selected = [m for m in messages if is_direct_between(m, user_id, other_id)]
        return sorted(selected, key=lambda m: parse_iso(m['timestamp']))

    @locked
    def send_message(self, sender_id, receiver_id, content):
        user_ids = {u['id'] for u in self._load(STORAGE_KEY_USERS)}
        validate_direct_message(sender_id, receiver_id, content, user_ids)
        messages = self._load(STORAGE_KEY_MESSAGES)
        new_message = {
            'id': self._next_id(),
            'senderId': sender_id,
            'receiverId': receiver_id,
            'content': content,
            'timestamp': now_iso(),
            'read': False,
        }
        messages.append(new_message)
        self._save(STORAGE_KEY_MESSAGES, messages)
        return new_message

    @locked
    def send_group_message(self, sender_id, group_id, content):
        validate_group_message(sender_id, self._find_group(group_id), content)
        messages = self._load(STORAGE_KEY_MESSAGES)
        new_message = {
            'id': self._next_id(),
            'senderId': sender_id,
            'receiverId': group_id,
            'groupId': group_id,
            'content': content,
            'timestamp': now_iso(),
            'read': False,
        }
        messages.append(new_message)
        self._save(STORAGE_KEY_MESSAGES, messages)
        return new_message

    @locked
    def mark_messages_as_read(self, user_id, sender_id):
        messages = self._load(STORAGE_KEY_MESSAGES)
        for m in messages:
            if not m.get('groupId') and m['receiverId'] == user_id and m['senderId'] == sender_id:
                m['read'] = True
        self._save(STORAGE_KEY_MESSAGES, messages)

    @locked
    def clear_chat(self, user_id, other_id, is_group=None):
        if is_group is None:
            is_group = other_id.startswith('g')
        messages = self._load(STORAGE_KEY_MESSAGES)
        if is_group:
            kept = [m for m in messages if m.get('groupId') != other_id]
        else:
            kept = [m for m in messages if not is_direct_between(m, user_id, other_id)]
        self._save(STORAGE_KEY_MESSAGES, kept)

    @locked
    def get_unread_messages_count(self, user_id):
        return len([
            m for m in self._load(STORAGE_KEY_MESSAGES)
            if m['receiverId'] == user_id and not m['read'] and not m.get('groupId')
        ])

    # ============ CHAT: BLOCKING ============
    @locked
    def toggle_block_user(self, user_id, target_id):
        blocked_map = self._load(STORAGE_KEY_BLOCKED)
        user_blocks = blocked_map.get(user_id, [])
        is_blocked = target_id in user_blocks
        if is_blocked:
            blocked_map[user_id] = [b for b in user_blocks if b != target_id]
        else:
            blocked_map[user_id] = user_blocks + [target_id]
        self._save(STORAGE_KEY_BLOCKED, blocked_map)
        return not is_blocked

    @locked
    def is_user_blocked(self, user_id, target_id):
        return target_id in self._load(STORAGE_KEY_BLOCKED).get(user_id, [])

    @locked
    def get_contacts(self, current_user_id):
        messages = self._load(STORAGE_KEY_MESSAGES)
        my_blocks = set(self._load(STORAGE_KEY_BLOCKED).get(current_user_id, []))
        contacts = []
        for user in self.get_users():
            if user['id'] == current_user_id:
                continue
            conversation = sorted(
                (m for m in messages if is_direct_between(m, current_user_id, user['id'])),
                key=lambda m: parse_iso(m['timestamp']),
            )
            unread = len([
                m for m in conversation
                if m['senderId'] == user['id'] and not m['read']
            ])
            contacts.append({
                **user,
                'unread': unread,
                'lastMessage': conversation[-1]['content'] if conversation else None,
                'isBlocked': user['id'] in my_blocks,
            })
        return contacts

    # ============ JUSTIFICATIONS ============
    @locked
    def get_justification_requests(self):
        return self._load(STORAGE_KEY_JUSTIFICATIONS)

    @locked
    def add_justification_request(self, request_data):
        validate_justification(request_data)
        reqs = self._load(STORAGE_KEY_JUSTIFICATIONS)
        new_request = {
            **request_data,
            'id': self._next_id(),
            'status': 'PENDING',
            'requestDate': now_iso(),
        }
        reqs.append(new_request)
        self._save(STORAGE_KEY_JUSTIFICATIONS, reqs)
        return new_request

    @locked
    def update_justification_status(self, request_id, status):
        # A decided request can still be changed again; callers do not rely on it
        validate_justification_status(status)
        reqs = self._load(STORAGE_KEY_JUSTIFICATIONS)
        for r in reqs:
            if r['id'] == request_id:
                r['status'] = status
        self._save(STORAGE_KEY_JUSTIFICATIONS, reqs)
        return reqs

    # ============ FINAL EXAMS ============
    @locked
    def get_final_exams(self, user_id):
        return [exam_session_view(f, user_id) for f in self._load(STORAGE_KEY_FINALS)]

    @locked
    def add_final_exam(self, exam):
        validate_final_exam(exam)
        finals = self._load(STORAGE_KEY_FINALS)
        new_exam = {
            k: v for k, v in exam.items()
            if k not in ('id', 'isRegistered', 'registeredCount', 'registeredStudentIds')
        }
        new_exam['id'] = self._next_id()
        new_exam['registeredStudentIds'] = []
        finals.append(new_exam)
        self._save(STORAGE_KEY_FINALS, finals)
        return exam_session_view(new_exam, None)

    @locked
    def delete_final_exam(self, exam_id):
        finals = [f for f in self._load(STORAGE_KEY_FINALS) if f['id'] != exam_id]
        self._save(STORAGE_KEY_FINALS, finals)

    @locked
    def toggle_final_registration(self, user_id, exam_id):
        finals = self._load(STORAGE_KEY_FINALS)
        for exam in finals:
            if exam['id'] != exam_id:
                continue
            registered = exam.get('registeredStudentIds') or []
            is_registered = user_id in registered
            if is_registered:
                exam['registeredStudentIds'] = [s for s in registered if s != user_id]
            else:
                exam['registeredStudentIds'] = registered + [user_id]
            self._save(STORAGE_KEY_FINALS, finals)
            return not is_registered
        return False

    # ============ COURSES ============
    @locked
    def get_student_courses(self, student_id):
        return self.catalog.get_student_courses(student_id)

    @locked
    def get_teacher_courses(self, teacher_id):
        return self.catalog.get_teacher_courses(teacher_id)

    @locked
    def get_course_students(self, course_id):
        return self.catalog.get_course_students(course_id)

    @locked
    def toggle_course_status(self, course_id):
        return self.catalog.toggle_course_status(course_id)
