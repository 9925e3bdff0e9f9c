# models/__init__.py
from .user import User
from .career import Career
from .classroom import Classroom
from .calendar_event import CalendarEvent
from .notification import Notification
from .chat import ChatGroup, ChatMessage, BlockedUser
from .justification import JustificationRequest
from .final_exam import FinalExam

__all__ = [
    'User', 'Career', 'Classroom', 'CalendarEvent', 'Notification',
    'ChatGroup', 'ChatMessage', 'BlockedUser', 'JustificationRequest', 'FinalExam'
]
