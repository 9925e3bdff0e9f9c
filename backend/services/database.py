"""
Database facade: one function per logical operation, independent of backend.

The backend is chosen once, when the app is created: the remote store when
both DATABASE_URL and DATABASE_KEY are set, the mock store otherwise. The
choice is kept on the app and never re-evaluated. Nothing here catches,
retries or caches; backend errors reach the caller unchanged.
"""
from flask import current_app

from services.mock_database import MockBackend
from services.storage import FileStorage, MemoryStorage

EXTENSION_KEY = 'portal_backend'


def remote_configured(config):
    return bool(config.get('DATABASE_URL')) and bool(config.get('DATABASE_KEY'))


def select_backend(config):
    """Build the backend for this configuration"""
    if remote_configured(config):
        from services.remote_database import RemoteBackend
        return RemoteBackend(seed=bool(config.get('SEED_REMOTE_DATABASE')))

    storage_dir = config.get('MOCK_STORAGE_DIR')
    storage = FileStorage(storage_dir) if storage_dir else MemoryStorage()
    return MockBackend(storage=storage)


def init_app(app, backend=None):
    backend = backend if backend is not None else select_backend(app.config)
    app.extensions[EXTENSION_KEY] = backend
    print(f"[DB] Backend selected: {backend.name}")
    return backend


def get_backend():
    return current_app.extensions[EXTENSION_KEY]


def backend_name(app):
    return app.extensions[EXTENSION_KEY].name


def is_remote(app):
    return backend_name(app) == 'remote'


def initialize_database():
    return get_backend().initialize_database()


# ============ USERS ============
def get_users():
    return get_backend().get_users()


def get_user_by_id(user_id):
    return get_backend().get_user_by_id(user_id)


def add_user(user):
    return get_backend().add_user(user)


def update_user(user_id, updates):
    return get_backend().update_user(user_id, updates)


def delete_user(user_id):
    return get_backend().delete_user(user_id)


def authenticate_user(email, password):
    return get_backend().authenticate_user(email, password)


# ============ CAREERS ============
def get_careers():
    return get_backend().get_careers()


def save_career(career):
    return get_backend().save_career(career)


def delete_career(career_id):
    return get_backend().delete_career(career_id)


# ============ CLASSROOMS ============
def get_classrooms():
    return get_backend().get_classrooms()


def save_classroom(classroom):
    return get_backend().save_classroom(classroom)


def delete_classroom(classroom_id):
    return get_backend().delete_classroom(classroom_id)


# ============ EVENTS ============
def get_events():
    return get_backend().get_events()


def add_event(event):
    return get_backend().add_event(event)


def delete_event(event_id):
    return get_backend().delete_event(event_id)


# ============ NOTIFICATIONS ============
def get_notifications(user_id):
    return get_backend().get_notifications(user_id)


def get_unread_count(user_id):
    return get_backend().get_unread_count(user_id)


def add_notification(notification):
    return get_backend().add_notification(notification)


def mark_notification_as_read(notification_id):
    return get_backend().mark_notification_as_read(notification_id)


def mark_all_notifications_as_read(user_id):
    return get_backend().mark_all_notifications_as_read(user_id)


def delete_notification(notification_id):
    return get_backend().delete_notification(notification_id)


# ============ CHAT ============
def get_groups(user_id):
    return get_backend().get_groups(user_id)


def create_group(name, member_ids, admin_id):
    return get_backend().create_group(name, member_ids, admin_id)


def leave_group(user_id, group_id):
    return get_backend().leave_group(user_id, group_id)


def update_group_avatar(group_id, avatar):
    return get_backend().update_group_avatar(group_id, avatar)


def get_messages(user_id, other_id, is_group=False):
    return get_backend().get_messages(user_id, other_id, is_group)


def send_message(sender_id, receiver_id, content):
    return get_backend().send_message(sender_id, receiver_id, content)


def send_group_message(sender_id, group_id, content):
    return get_backend().send_group_message(sender_id, group_id, content)


def mark_messages_as_read(user_id, sender_id):
    return get_backend().mark_messages_as_read(user_id, sender_id)


def clear_chat(user_id, other_id, is_group=None):
    return get_backend().clear_chat(user_id, other_id, is_group)


def get_unread_messages_count(user_id):
    return get_backend().get_unread_messages_count(user_id)


def toggle_block_user(user_id, target_id):
    return get_backend().toggle_block_user(user_id, target_id)


def is_user_blocked(user_id, target_id):
    return get_backend().is_user_blocked(user_id, target_id)


def get_contacts(current_user_id):
    return get_backend().get_contacts(current_user_id)


# ============ JUSTIFICATIONS ============
def get_justification_requests():
    return get_backend().get_justification_requests()


def add_justification_request(request_data):
    return get_backend().add_justification_request(request_data)


def update_justification_status(request_id, status):
    return get_backend().update_justification_status(request_id, status)


# ============ FINAL EXAMS ============
def get_final_exams(user_id):
    return get_backend().get_final_exams(user_id)


def add_final_exam(exam):
    return get_backend().add_final_exam(exam)


def delete_final_exam(exam_id):
    return get_backend().delete_final_exam(exam_id)


def toggle_final_registration(user_id, exam_id):
    return get_backend().toggle_final_registration(user_id, exam_id)


# ============ COURSES ============
def get_student_courses(student_id):
    return get_backend().get_student_courses(student_id)


def get_teacher_courses(teacher_id):
    return get_backend().get_teacher_courses(teacher_id)


def get_course_students(course_id):
    return get_backend().get_course_students(course_id)


def toggle_course_status(course_id):
    return get_backend().toggle_course_status(course_id)
