"""
Course catalog: student courses with academic status, teacher courses with
archiving, course rosters and the final-exam eligibility rule.

The catalog is not persisted. Each backend owns one CourseCatalog instance so
tests can build isolated catalogs instead of sharing process-wide state.
"""
import copy
import random

APPROVED = 'Cursada Aprobada'
IN_PROGRESS = 'Cursando'
FREE = 'Libre'
PROMOTED = 'Promocionado'

STUDENT_COURSES = [
    {
        'id': 'prog1',
        'name': 'Programación I',
        'professor': 'Prof. Alejandro Gomez',
        'schedule': 'Lun 18:00 - 22:00',
        'attendance': 92,
        'nextExams': [{'date': '2024-06-10', 'title': 'Parcial Estructuras de Control'}],
        'resources': [
            {'id': 'r1', 'title': 'Introducción a Algoritmos', 'type': 'pdf', 'url': '#', 'date': '2024-03-15'},
            {'id': 'r2', 'title': 'Clase Grabada: Variables y Tipos', 'type': 'video', 'url': '#', 'date': '2024-03-20'},
        ],
        'academicStatus': APPROVED,
    },
    {
        'id': 'sis1',
        'name': 'Sistemas Operativos',
        'professor': 'Prof. Maria Sanchez',
        'schedule': 'Mar 18:00 - 20:00',
        'attendance': 85,
        'nextExams': [],
        'resources': [],
        'academicStatus': IN_PROGRESS,
    },
    {
        'id': 'mat1',
        'name': 'Matemática I',
        'professor': 'Prof. Roberto Diaz',
        'schedule': 'Mie 18:00 - 20:00',
        'attendance': 100,
        'nextExams': [],
        'resources': [],
        'academicStatus': IN_PROGRESS,
    },
    {
        'id': 'ing1',
        'name': 'Inglés Técnico I',
        'professor': 'Prof. Sarah Connor',
        'schedule': 'Jue 18:00 - 20:00',
        'attendance': 70,
        'nextExams': [],
        'resources': [],
        'academicStatus': APPROVED,
    },
]

TEACHER_COURSES = [
    {
        'id': 'soft1-prog1',
        'name': 'Programación I',
        'career': 'Tec. Sup. en Desarrollo de Software',
        'year': '1° Año',
        'schedule': 'Lun 18:00 - 22:00',
        'totalStudents': 32,
        'nextClass': 'Hoy 18:00',
        'status': 'active',
    },
    {
        'id': 'soft2-bd',
        'name': 'Base de Datos',
        'career': 'Tec. Sup. en Desarrollo de Software',
        'year': '2° Año',
        'schedule': 'Mar 19:00 - 21:00',
        'totalStudents': 25,
        'nextClass': 'Mañana 19:00',
        'status': 'active',
    },
    {
        'id': 'enf3-prac',
        'name': 'Práctica Profesional',
        'career': 'Tec. Sup. en Enfermería',
        'year': '3° Año',
        'schedule': 'Vie 08:00 - 12:00',
        'totalStudents': 18,
        'nextClass': 'Vie 08:00',
        'status': 'active',
    },
    {
        'id': 'archived-1',
        'name': 'Introducción a la Programación (2023)',
        'career': 'Tec. Sup. en Desarrollo de Software',
        'year': '1° Año',
        'schedule': 'Finalizado',
        'totalStudents': 28,
        'nextClass': '-',
        'status': 'archived',
    },
]

ROSTER_SIZES = {'soft1-prog1': 12, 'soft2-bd': 8}
DEFAULT_ROSTER_SIZE = 6

SURNAMES = ['Alvarez', 'Benitez', 'Castro', 'Dominguez', 'Fernandez', 'Gomez',
            'Lopez', 'Martinez', 'Perez', 'Rodriguez', 'Sanchez', 'Torres']
FIRST_NAMES = ['Juan', 'Maria', 'Pedro', 'Ana', 'Luis', 'Sofia', 'Carlos',
               'Lucia', 'Miguel', 'Elena']


class CourseCatalog:

    def __init__(self, teacher_courses=None):
        self._teacher_courses = copy.deepcopy(
            TEACHER_COURSES if teacher_courses is None else teacher_courses
        )

    def get_student_courses(self, student_id):
        # Academic records are not tracked per student yet
        return copy.deepcopy(STUDENT_COURSES)

    def get_teacher_courses(self, teacher_id):
        return copy.deepcopy(self._teacher_courses)

    def toggle_course_status(self, course_id):
        """Flip a course between active and archived; returns the full list"""
        for course in self._teacher_courses:
            if course['id'] == course_id:
                course['status'] = 'archived' if course['status'] == 'active' else 'active'
        return copy.deepcopy(self._teacher_courses)

    def get_course_students(self, course_id):
        """Roster for a course. Figures are stable for a given course id."""
        count = ROSTER_SIZES.get(course_id, DEFAULT_ROSTER_SIZE)
        rng = random.Random(course_id)
        students = []
        for i in range(count):
            students.append({
                'id': f'st-{course_id}-{i}',
                'name': f'{SURNAMES[i % len(SURNAMES)]}, {FIRST_NAMES[i % len(FIRST_NAMES)]}',
                'attendance': 70 + rng.randrange(30),
                'lastGrade': rng.randrange(4) + 6,
            })
        return students


def check_exam_eligibility(courses, exam):
    """
    Decide whether a student may register for a final exam session.

    The related course is matched by subject id first, then by subject name.
    Returns (allowed, reason); reason is None when allowed.
    """
    related = next(
        (c for c in courses
         if (exam.get('subjectId') and c['id'] == exam.get('subjectId'))
         or c['name'] == exam.get('subjectName')),
        None,
    )

    if related is None:
        return False, 'No cursas esta materia'
    if related['academicStatus'] == APPROVED:
        return True, None
    if related['academicStatus'] == PROMOTED:
        return False, 'Ya promocionaste'
    return False, 'Cursada no aprobada'
