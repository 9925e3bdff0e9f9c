"""
Write-boundary checks shared by the mock and remote backends.

Every check raises ValidationError (a ValueError) with a message that can be
shown to the user as-is.
"""
import re

VALID_ROLES = ['ALUMNO', 'DOCENTE', 'PRECEPTOR', 'DIRECTIVO', 'ADMIN']
VALID_THEMES = ['indigo', 'teal', 'blue', 'rose', 'violet', 'amber']
VALID_EVENT_TYPES = ['exam', 'holiday', 'deadline', 'meeting', 'other']
VALID_NOTIFICATION_TYPES = ['info', 'alert', 'success']
JUSTIFICATION_DECISIONS = ['APPROVED', 'REJECTED']

BROADCAST_USER_ID = 'all'

DAY_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
TIME_PATTERN = re.compile(r'^\d{2}:\d{2}$')
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class ValidationError(ValueError):
    """Raised when a write would break a domain invariant"""


def require_fields(data, *fields):
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f'{field} is required')


def validate_choice(value, choices, label):
    if value not in choices:
        raise ValidationError(f"{label} must be one of: {', '.join(choices)}")
    return value


def validate_role(role):
    return validate_choice(role, VALID_ROLES, 'Role')


def validate_email(email):
    if not email or not EMAIL_PATTERN.match(email):
        raise ValidationError('Invalid email')
    return email


def validate_unique_email(email, users, exclude_id=None):
    """Emails are unique regardless of case"""
    wanted = email.lower()
    for user in users:
        if user['id'] != exclude_id and user.get('email', '').lower() == wanted:
            raise ValidationError(f'Email already registered: {email}')


def validate_preferences(preferences):
    if preferences is None:
        return None
    if not isinstance(preferences, dict):
        raise ValidationError('preferences must be an object')
    if 'theme' in preferences:
        validate_choice(preferences['theme'], VALID_THEMES, 'Theme')
    for flag in ('emailNotifications', 'darkMode'):
        if flag in preferences and not isinstance(preferences[flag], bool):
            raise ValidationError(f'{flag} must be true or false')
    return preferences


def validate_user(data, partial=False):
    if not partial:
        require_fields(data, 'name', 'email', 'role')
    if 'email' in data:
        validate_email(data['email'])
    if 'role' in data:
        validate_role(data['role'])
    if 'preferences' in data:
        validate_preferences(data['preferences'])
    return data


def validate_day(value, label='date'):
    if not isinstance(value, str) or not DAY_PATTERN.match(value):
        raise ValidationError(f'{label} must use the YYYY-MM-DD format')
    return value


def validate_career(career):
    """Every subject must belong to one of the career's years"""
    require_fields(career, 'id', 'name')
    years = career.get('years') or []
    if not isinstance(years, list) or not years:
        raise ValidationError('A career needs at least one year')
    for subject in career.get('subjects') or []:
        require_fields(subject, 'id', 'name', 'year')
        if subject['year'] not in years:
            raise ValidationError(
                f"Subject '{subject['name']}' uses year '{subject['year']}', "
                f"which is not one of the career years"
            )
    return career


def validate_capacity(capacity):
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise ValidationError('Capacity must be a positive integer')
    return capacity


def validate_classroom(classroom):
    require_fields(classroom, 'id', 'name', 'location')
    validate_capacity(classroom.get('capacity'))
    return classroom


def validate_event(event):
    require_fields(event, 'title', 'date', 'type')
    validate_day(event['date'])
    validate_choice(event['type'], VALID_EVENT_TYPES, 'Event type')
    return event


def validate_notification(notification):
    require_fields(notification, 'userId', 'title', 'message', 'type')
    validate_choice(notification['type'], VALID_NOTIFICATION_TYPES, 'Notification type')
    return notification


def validate_direct_message(sender_id, receiver_id, content, user_ids):
    if not content or not content.strip():
        raise ValidationError('Message content is required')
    if sender_id not in user_ids:
        raise ValidationError(f'Unknown sender: {sender_id}')
    if receiver_id not in user_ids:
        raise ValidationError(f'Unknown receiver: {receiver_id}')


def validate_group_message(sender_id, group, content):
    if not content or not content.strip():
        raise ValidationError('Message content is required')
    if group is None:
        raise ValidationError('Unknown group')
    if sender_id not in group['members']:
        raise ValidationError('Only group members can post to the group')


def validate_group(name, member_ids):
    if not name or not name.strip():
        raise ValidationError('Group name is required')
    if not isinstance(member_ids, list):
        raise ValidationError('memberIds must be a list')


def validate_justification(request_data):
    require_fields(request_data, 'studentId', 'studentName', 'courseName', 'date', 'reason')
    validate_day(request_data['date'])
    return request_data


def validate_justification_status(status):
    return validate_choice(status, JUSTIFICATION_DECISIONS, 'Status')


def validate_final_exam(exam):
    require_fields(exam, 'subjectName', 'date', 'time', 'professor', 'classroom')
    validate_day(exam['date'])
    if not TIME_PATTERN.match(exam['time']):
        raise ValidationError('time must use the HH:MM format')
    return exam
