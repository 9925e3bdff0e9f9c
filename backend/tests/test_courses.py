#!/usr/bin/env python
"""
Tests for the course catalog and final exam eligibility
"""
from services.courses import (
    APPROVED,
    IN_PROGRESS,
    PROMOTED,
    CourseCatalog,
    check_exam_eligibility,
)


class TestCourseCatalog:

    def test_toggle_course_status_round_trip(self):
        catalog = CourseCatalog()

        courses = catalog.toggle_course_status('soft1-prog1')
        prog = next(c for c in courses if c['id'] == 'soft1-prog1')
        assert prog['status'] == 'archived'

        courses = catalog.toggle_course_status('soft1-prog1')
        prog = next(c for c in courses if c['id'] == 'soft1-prog1')
        assert prog['status'] == 'active'

    def test_unknown_course_leaves_list_unchanged(self):
        catalog = CourseCatalog()
        before = catalog.get_teacher_courses('2')
        assert catalog.toggle_course_status('nope') == before

    def test_catalogs_are_isolated(self):
        first, second = CourseCatalog(), CourseCatalog()
        first.toggle_course_status('soft2-bd')

        status = {c['id']: c['status'] for c in second.get_teacher_courses('2')}
        assert status['soft2-bd'] == 'active'

    def test_returned_lists_are_copies(self):
        catalog = CourseCatalog()
        catalog.get_teacher_courses('2')[0]['status'] = 'broken'
        assert catalog.get_teacher_courses('2')[0]['status'] == 'active'

    def test_student_courses(self):
        courses = CourseCatalog().get_student_courses('1')
        assert [c['id'] for c in courses] == ['prog1', 'sis1', 'mat1', 'ing1']

    def test_roster_sizes(self):
        catalog = CourseCatalog()
        assert len(catalog.get_course_students('soft1-prog1')) == 12
        assert len(catalog.get_course_students('soft2-bd')) == 8
        assert len(catalog.get_course_students('enf3-prac')) == 6

    def test_roster_is_deterministic_and_in_range(self):
        catalog = CourseCatalog()
        first = catalog.get_course_students('soft2-bd')
        assert first == catalog.get_course_students('soft2-bd')

        for student in first:
            assert 70 <= student['attendance'] <= 99
            assert 6 <= student['lastGrade'] <= 9
        assert first[0]['name'] == 'Alvarez, Juan'


class TestExamEligibility:

    COURSES = [
        {'id': 'prog1', 'name': 'Programación I', 'academicStatus': APPROVED},
        {'id': 'sis1', 'name': 'Sistemas Operativos', 'academicStatus': IN_PROGRESS},
        {'id': 'mat1', 'name': 'Matemática I', 'academicStatus': PROMOTED},
    ]

    def test_approved_course_by_name(self):
        exam = {'subjectId': 's1', 'subjectName': 'Programación I'}
        assert check_exam_eligibility(self.COURSES, exam) == (True, None)

    def test_match_by_subject_id(self):
        exam = {'subjectId': 'prog1', 'subjectName': 'Otro nombre'}
        assert check_exam_eligibility(self.COURSES, exam) == (True, None)

    def test_course_in_progress(self):
        exam = {'subjectName': 'Sistemas Operativos'}
        assert check_exam_eligibility(self.COURSES, exam) == (False, 'Cursada no aprobada')

    def test_promoted_course(self):
        exam = {'subjectName': 'Matemática I'}
        assert check_exam_eligibility(self.COURSES, exam) == (False, 'Ya promocionaste')

    def test_course_not_taken(self):
        exam = {'subjectName': 'Base de Datos'}
        assert check_exam_eligibility(self.COURSES, exam) == (False, 'No cursas esta materia')
