"""
Initial datasets written once into an empty store.

Constant collections are deep-copied on every call; collections with
timestamps are stamped relative to the moment they are seeded.
"""
import copy
from datetime import timedelta

from utils.helpers import default_avatar, to_iso, utcnow

DEFAULT_PREFERENCES = {'emailNotifications': True, 'darkMode': False, 'theme': 'indigo'}

INITIAL_CAREERS = [
    {
        'id': 'c8',
        'name': 'Tecnicatura Superior en Desarrollo de Software',
        'years': ['1° Año', '2° Año', '3° Año'],
        'subjects': [
            {'id': 's1', 'name': 'Programación I', 'year': '1° Año'},
            {'id': 's2', 'name': 'Sistemas Operativos', 'year': '1° Año'},
            {'id': 's3', 'name': 'Matemática I', 'year': '1° Año'},
            {'id': 's4', 'name': 'Inglés Técnico I', 'year': '1° Año'},
            {'id': 's5', 'name': 'Base de Datos', 'year': '2° Año'},
            {'id': 's6', 'name': 'Práctica Profesionalizante I', 'year': '1° Año'},
        ],
    },
    {'id': 'c1', 'name': 'Profesorado de Educación Primaria',
     'years': ['1° Año', '2° Año', '3° Año', '4° Año'], 'subjects': []},
    {'id': 'c2', 'name': 'Profesorado de Educación Especial',
     'years': ['2° Año', '3° Año', '4° Año'], 'subjects': []},
    {'id': 'c3', 'name': 'Profesorado de Educación Inicial',
     'years': ['1° Año', '2° Año'], 'subjects': []},
    {'id': 'c6', 'name': 'Tecnicatura Superior en Enfermería',
     'years': ['1° Año', '2° Año', '3° Año'], 'subjects': []},
]


def _seed_user(user_id, name, role, email, initials, theme, dark_mode=False):
    return {
        'id': user_id,
        'name': name,
        'role': role,
        'email': email,
        'password': '123',
        'avatar': default_avatar(initials),
        'preferences': {'emailNotifications': True, 'darkMode': dark_mode, 'theme': theme},
    }


INITIAL_USERS = [
    _seed_user('1', 'Alumno Demo', 'ALUMNO', 'alumno@isfd26.edu.ar', 'AD', 'indigo'),
    _seed_user('2', 'Prof. Alejandro Gomez', 'DOCENTE', 'docente@isfd26.edu.ar', 'AG', 'teal'),
    _seed_user('3', 'Laura Quiroga', 'PRECEPTOR', 'preceptor@isfd26.edu.ar', 'LQ', 'rose'),
    _seed_user('4', 'Dir. Esteban Quito', 'DIRECTIVO', 'directivo@isfd26.edu.ar', 'EQ', 'blue'),
    _seed_user('5', 'Admin Sistema', 'ADMIN', 'admin@isfd26.edu.ar', 'AS', 'violet', dark_mode=True),
]

INITIAL_EVENTS = [
    {'id': '1', 'title': 'Inicio Ciclo Lectivo', 'date': '2024-03-11', 'type': 'other',
     'description': 'Acto de inicio'},
    {'id': '2', 'title': 'Parcial Programación I', 'date': '2024-05-20', 'type': 'exam'},
    {'id': '3', 'title': 'Feriado Nacional', 'date': '2024-05-25', 'type': 'holiday'},
    {'id': '4', 'title': 'Entrega TP Final', 'date': '2024-06-15', 'type': 'deadline'},
]

INITIAL_GROUPS = [
    {'id': 'g1', 'name': 'Sala de Profesores', 'members': ['2', '3', '4', '5'],
     'admins': ['4'], 'avatar': default_avatar('SP')},
]

INITIAL_CLASSROOMS = [
    {'id': 'a1', 'name': 'Aula 204', 'capacity': 35, 'location': 'Planta Alta'},
    {'id': 'a2', 'name': 'Laboratorio de Informática', 'capacity': 25, 'location': 'Planta Baja'},
    {'id': 'a3', 'name': 'Auditorio', 'capacity': 100, 'location': 'Edificio Anexo'},
]

INITIAL_FINALS = [
    {'id': 'f1', 'subjectName': 'Programación I', 'subjectId': 's1', 'date': '2024-07-10',
     'time': '18:00', 'professor': 'Prof. A. Gomez', 'classroom': 'Lab. Informática',
     'registeredStudentIds': []},
    {'id': 'f2', 'subjectName': 'Sistemas Operativos', 'subjectId': 's2', 'date': '2024-07-12',
     'time': '19:00', 'professor': 'Prof. M. Sanchez', 'classroom': 'Aula 204',
     'registeredStudentIds': []},
    {'id': 'f3', 'subjectName': 'Inglés Técnico I', 'subjectId': 's4', 'date': '2024-07-15',
     'time': '18:00', 'professor': 'Prof. S. Connor', 'classroom': 'Aula 205',
     'registeredStudentIds': ['1']},
    {'id': 'f4', 'subjectName': 'Matemática I', 'subjectId': 's3', 'date': '2024-07-18',
     'time': '18:30', 'professor': 'Prof. R. Diaz', 'classroom': 'Aula 202',
     'registeredStudentIds': []},
]


def initial_users():
    return copy.deepcopy(INITIAL_USERS)


def initial_careers():
    return copy.deepcopy(INITIAL_CAREERS)


def initial_events():
    return copy.deepcopy(INITIAL_EVENTS)


def initial_groups():
    return copy.deepcopy(INITIAL_GROUPS)


def initial_classrooms():
    return copy.deepcopy(INITIAL_CLASSROOMS)


def initial_finals():
    return copy.deepcopy(INITIAL_FINALS)


def initial_blocked():
    return {}


def initial_notifications():
    now = to_iso(utcnow())
    return [
        {'id': '1', 'userId': '1', 'title': 'Nueva Calificación',
         'message': 'Se ha cargado la nota de Parcial Programación.',
         'date': now, 'read': False, 'type': 'success'},
        {'id': '2', 'userId': 'all', 'title': 'Mantenimiento del Sistema',
         'message': 'La plataforma estará en mantenimiento el domingo.',
         'date': now, 'read': False, 'type': 'info'},
        {'id': '3', 'userId': '2', 'title': 'Recordatorio Planificación',
         'message': 'Recuerde subir la planificación anual antes del viernes.',
         'date': now, 'read': True, 'type': 'alert'},
    ]


def initial_messages():
    now = utcnow()
    return [
        {'id': 'm1', 'senderId': '2', 'receiverId': '1',
         'content': 'Hola, recuerda entregar el TP mañana.',
         'timestamp': to_iso(now - timedelta(milliseconds=86400000)), 'read': False},
        {'id': 'm2', 'senderId': '1', 'receiverId': '2',
         'content': 'Si profesor, ya lo estoy terminando.',
         'timestamp': to_iso(now - timedelta(milliseconds=82000000)), 'read': True},
    ]


def initial_justifications():
    return [
        {'id': 'req1', 'studentId': '2', 'studentName': 'Benitez, Clara',
         'courseName': 'Programación I', 'date': '2024-05-10',
         'reason': 'Consulta médica (Certificado adjunto)', 'status': 'PENDING',
         'requestDate': to_iso(utcnow())},
    ]
