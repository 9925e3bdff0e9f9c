#!/usr/bin/env python
"""
Tests for the JSON API through the Flask test client
"""
import pytest

ALUMNO, DOCENTE, PRECEPTOR, DIRECTIVO, ADMIN = '1', '2', '3', '4', '5'


def as_user(user_id):
    return {'X-User-Id': user_id}


@pytest.fixture
def client(mock_app):
    return mock_app.test_client()


class TestAppRoutes:

    def test_home_and_health(self, client):
        assert client.get('/').get_json()['backend'] == 'mock'

        health = client.get('/health').get_json()
        assert health['status'] == 'healthy'
        assert health['database'] == 'not used'
        assert 'finals' in health['registered_blueprints']

    def test_remote_health(self, remote_app):
        health = remote_app.test_client().get('/health').get_json()
        assert health['backend'] == 'remote'
        assert health['database'] == 'connected'

    def test_unknown_endpoint(self, client):
        response = client.get('/nope')
        assert response.status_code == 404
        assert response.get_json()['success'] is False


class TestAuthRoutes:

    def test_login_and_me(self, client):
        response = client.post('/auth/login', json={'email': 'Admin@isfd26.edu.ar', 'password': '123'})
        assert response.status_code == 200
        body = response.get_json()
        assert 'password' not in body['data']

        me = client.get('/auth/me', headers={'Authorization': f"Bearer {body['token']}"})
        assert me.status_code == 200
        assert me.get_json()['data']['id'] == ADMIN

    def test_login_failures(self, client):
        assert client.post('/auth/login', json={'email': 'admin@isfd26.edu.ar'}).status_code == 400
        bad = client.post('/auth/login', json={'email': 'admin@isfd26.edu.ar', 'password': 'x'})
        assert bad.status_code == 401

    def test_me_requires_auth(self, client):
        assert client.get('/auth/me').status_code == 401
        forged = client.get('/auth/me', headers={'Authorization': 'Bearer not-a-token'})
        assert forged.status_code == 401

    def test_dev_header(self, client):
        me = client.get('/auth/me', headers=as_user(DOCENTE)).get_json()
        assert me['data']['role'] == 'DOCENTE'


class TestUserRoutes:

    def test_list_users(self, client):
        body = client.get('/users', headers=as_user(ALUMNO)).get_json()
        assert body['count'] == 5

        filtered = client.get('/users?role=ADMIN', headers=as_user(ALUMNO)).get_json()
        assert [u['id'] for u in filtered['data']] == [ADMIN]

    def test_only_admin_creates_users(self, client):
        new_user = {'name': 'Nueva Docente', 'email': 'nueva@isfd26.edu.ar', 'role': 'DOCENTE'}
        assert client.post('/users', json=new_user, headers=as_user(DIRECTIVO)).status_code == 403

        created = client.post('/users', json=new_user, headers=as_user(ADMIN))
        assert created.status_code == 201

        duplicate = client.post('/users', json=new_user, headers=as_user(ADMIN))
        assert duplicate.status_code == 400
        assert duplicate.get_json()['error'] == 'Validation Error'

    def test_profile_edits(self, client):
        own = client.put(f'/users/{ALUMNO}', json={'name': 'Alumna Demo'}, headers=as_user(ALUMNO))
        assert own.status_code == 200
        assert own.get_json()['data']['name'] == 'Alumna Demo'

        other = client.put(f'/users/{DOCENTE}', json={'name': 'X'}, headers=as_user(ALUMNO))
        assert other.status_code == 403

        promote = client.put(f'/users/{ALUMNO}', json={'role': 'ADMIN'}, headers=as_user(ALUMNO))
        assert promote.status_code == 403

    def test_last_admin_is_kept(self, client):
        assert client.delete(f'/users/{ADMIN}', headers=as_user(ADMIN)).status_code == 400
        demote = client.put(f'/users/{ADMIN}', json={'role': 'DOCENTE'}, headers=as_user(ADMIN))
        assert demote.status_code == 400

    def test_missing_user(self, client):
        assert client.get('/users/999', headers=as_user(ADMIN)).status_code == 404


class TestCareerRoutes:

    def test_preserve_subjects(self, client):
        response = client.put('/careers/c8', headers=as_user(ADMIN), json={
            'name': 'Tecnicatura en Software',
            'years': ['1° Año', '2° Año', '3° Año'],
            'preserveSubjects': True,
        })
        assert response.status_code == 200
        saved = response.get_json()['data']
        assert saved['name'] == 'Tecnicatura en Software'
        assert len(saved['subjects']) == 6
        assert 'preserveSubjects' not in saved

    def test_subjects(self, client):
        added = client.post('/careers/c1/subjects', headers=as_user(ADMIN),
                            json={'name': 'Didáctica General', 'year': '1° Año'})
        assert added.status_code == 201
        subject_id = added.get_json()['data']['id']

        removed = client.delete(f'/careers/c1/subjects/{subject_id}', headers=as_user(ADMIN))
        assert removed.get_json()['data']['subjects'] == []

    def test_subject_year_outside_career(self, client):
        response = client.post('/careers/c3/subjects', headers=as_user(ADMIN),
                               json={'name': 'Taller', 'year': '4° Año'})
        assert response.status_code == 400

    def test_only_admin_edits_careers(self, client):
        response = client.delete('/careers/c1', headers=as_user(DIRECTIVO))
        assert response.status_code == 403


class TestEventRoutes:

    def test_roles(self, client):
        event = {'title': 'Parcial', 'date': '2024-06-03', 'type': 'exam'}
        assert client.post('/events', json=event, headers=as_user(ALUMNO)).status_code == 403
        assert client.post('/events', json=event, headers=as_user(DOCENTE)).status_code == 201

    def test_month_filter(self, client):
        body = client.get('/events?month=2024-05', headers=as_user(ALUMNO)).get_json()
        assert sorted(e['id'] for e in body['data']) == ['2', '3']


class TestNotificationRoutes:

    def test_only_staff_create_notifications(self, client):
        notice = {'userId': 'all', 'title': 'Aviso', 'message': 'Sin clases el lunes', 'type': 'alert'}
        assert client.post('/notifications', json=notice, headers=as_user(ALUMNO)).status_code == 403
        assert client.post('/notifications', json={**notice, 'userId': DOCENTE},
                           headers=as_user(ALUMNO)).status_code == 403

        before = client.get('/notifications', headers=as_user(ALUMNO)).get_json()['count']
        assert client.post('/notifications', json=notice, headers=as_user(DOCENTE)).status_code == 201
        after = client.get('/notifications', headers=as_user(ALUMNO)).get_json()['count']
        assert after == before + 1


class TestChatRoutes:

    def test_blocked_sender_cannot_send(self, client):
        client.post(f'/chat/block/{DOCENTE}', headers=as_user(ALUMNO))
        response = client.post('/chat/messages', headers=as_user(ALUMNO),
                               json={'receiverId': DOCENTE, 'content': 'Hola'})
        assert response.status_code == 403

        client.post(f'/chat/block/{DOCENTE}', headers=as_user(ALUMNO))
        response = client.post('/chat/messages', headers=as_user(ALUMNO),
                               json={'receiverId': DOCENTE, 'content': 'Hola'})
        assert response.status_code == 201

    def test_group_avatar_requires_group_admin(self, client):
        payload = {'avatar': 'data:image/png;base64,AAAA'}
        assert client.put('/chat/groups/g1/avatar', json=payload,
                          headers=as_user(PRECEPTOR)).status_code == 403
        assert client.put('/chat/groups/g1/avatar', json=payload,
                          headers=as_user(DIRECTIVO)).status_code == 200

    def test_group_messages(self, client):
        sent = client.post('/chat/groups/g1/messages', headers=as_user(DOCENTE),
                           json={'content': 'Reunión mañana'})
        assert sent.status_code == 201

        outsider = client.get('/chat/messages/g1?group=true', headers=as_user(ALUMNO))
        assert outsider.status_code == 404

        listed = client.get('/chat/messages/g1?group=true', headers=as_user(PRECEPTOR)).get_json()
        assert [m['content'] for m in listed['data']] == ['Reunión mañana']

    def test_group_clear_requires_membership(self, client):
        client.post('/chat/groups/g1/messages', headers=as_user(DOCENTE),
                    json={'content': 'Reunión mañana'})

        for path in ('/chat/messages/g1?group=true', '/chat/messages/g1'):
            assert client.delete(path, headers=as_user(ALUMNO)).status_code == 404
        listed = client.get('/chat/messages/g1?group=true', headers=as_user(DOCENTE)).get_json()
        assert listed['count'] == 1

        assert client.delete('/chat/messages/g1?group=true',
                             headers=as_user(PRECEPTOR)).status_code == 200
        listed = client.get('/chat/messages/g1?group=true', headers=as_user(DOCENTE)).get_json()
        assert listed['count'] == 0

    def test_unread_count_and_read(self, client):
        count = client.get('/chat/unread-count', headers=as_user(ALUMNO)).get_json()
        assert count['data']['count'] == 1

        client.post(f'/chat/messages/{DOCENTE}/read', headers=as_user(ALUMNO))
        count = client.get('/chat/unread-count', headers=as_user(ALUMNO)).get_json()
        assert count['data']['count'] == 0


class TestJustificationRoutes:

    def test_student_submits_and_staff_decides(self, client):
        created = client.post('/justifications', headers=as_user(ALUMNO), json={
            'courseName': 'Programación I', 'date': '2024-06-05', 'reason': 'Paro de transporte',
        })
        assert created.status_code == 201
        request_id = created.get_json()['data']['id']
        assert created.get_json()['data']['studentId'] == ALUMNO

        own = client.get('/justifications', headers=as_user(ALUMNO)).get_json()
        assert [r['id'] for r in own['data']] == [request_id]

        denied = client.patch(f'/justifications/{request_id}/status',
                              headers=as_user(DOCENTE), json={'status': 'APPROVED'})
        assert denied.status_code == 403

        decided = client.patch(f'/justifications/{request_id}/status',
                               headers=as_user(PRECEPTOR), json={'status': 'APPROVED'})
        assert decided.status_code == 200

        pending = client.get('/justifications?status=PENDING', headers=as_user(PRECEPTOR)).get_json()
        assert [r['id'] for r in pending['data']] == ['req1']

    def test_only_students_submit(self, client):
        response = client.post('/justifications', headers=as_user(DOCENTE), json={
            'courseName': 'X', 'date': '2024-06-05', 'reason': 'Y',
        })
        assert response.status_code == 403


class TestFinalRoutes:

    def test_register_for_approved_course(self, client):
        response = client.post('/finals/f1/registration', headers=as_user(ALUMNO))
        assert response.status_code == 200
        assert response.get_json()['data']['registered'] is True

    def test_course_not_approved(self, client):
        response = client.post('/finals/f2/registration', headers=as_user(ALUMNO))
        assert response.status_code == 403
        assert response.get_json()['message'] == 'Cursada no aprobada'

    def test_unregister_skips_eligibility(self, client):
        response = client.post('/finals/f3/registration', headers=as_user(ALUMNO))
        assert response.get_json()['data']['registered'] is False

    def test_unknown_exam(self, client):
        assert client.post('/finals/nope/registration', headers=as_user(ALUMNO)).status_code == 404

    def test_managers_add_finals(self, client):
        exam = {'subjectName': 'Base de Datos', 'date': '2024-12-01', 'time': '18:00',
                'professor': 'Prof. L. Ruiz', 'classroom': 'Aula 204'}
        assert client.post('/finals', json=exam, headers=as_user(DOCENTE)).status_code == 403
        created = client.post('/finals', json=exam, headers=as_user(PRECEPTOR))
        assert created.status_code == 201
        assert created.get_json()['data']['registeredCount'] == 0


class TestCourseAndAssistantRoutes:

    def test_toggle_course(self, client):
        body = client.post('/courses/soft2-bd/toggle-status', headers=as_user(DOCENTE)).get_json()
        status = {c['id']: c['status'] for c in body['data']}
        assert status['soft2-bd'] == 'archived'

    def test_roster(self, client):
        body = client.get('/courses/enf3-prac/students', headers=as_user(DOCENTE)).get_json()
        assert body['count'] == 6

    def test_assistant_without_key(self, client):
        response = client.post('/assistant/tutor', headers=as_user(ALUMNO),
                               json={'question': '¿Qué es SQL?', 'subject': 'Base de Datos'})
        assert response.get_json()['data']['text'] == 'Error: API Key no configurada.'

    def test_assistant_missing_fields(self, client):
        response = client.post('/assistant/tutor', headers=as_user(ALUMNO), json={'question': 'x'})
        assert response.status_code == 400
