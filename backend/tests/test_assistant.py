#!/usr/bin/env python
"""
Tests for the AI assistant helpers. The HTTP call is replaced, nothing
leaves the machine.
"""
import pytest
import requests
from services import assistant


class FakeResponse:

    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} error')

    def json(self):
        return self.payload


def reply(text):
    return {'candidates': [{'content': {'parts': [{'text': text}]}}]}


class TestAssistant:

    @pytest.fixture
    def configured(self, mock_app):
        mock_app.config['GEMINI_API_KEY'] = 'test-key'
        mock_app.config['GEMINI_MODEL'] = 'gemini-test'
        return mock_app

    @pytest.fixture
    def calls(self, monkeypatch):
        recorded = []

        def fake_post(url, **kwargs):
            recorded.append((url, kwargs))
            return FakeResponse(reply('**Respuesta**'))

        monkeypatch.setattr(assistant.requests, 'post', fake_post)
        return recorded

    def test_missing_key(self, mock_app, calls):
        assert assistant.generate_tutor_response('¿Qué es un bucle?', 'Programación') == \
            'Error: API Key no configurada.'
        assert calls == []

    def test_tutor_request(self, configured, calls):
        answer = assistant.generate_tutor_response('¿Qué es un bucle?', 'Programación I')
        assert answer == '**Respuesta**'

        url, kwargs = calls[0]
        assert 'gemini-test:generateContent' in url
        assert kwargs['params'] == {'key': 'test-key'}
        assert kwargs['timeout'] == assistant.REQUEST_TIMEOUT
        prompt = kwargs['json']['contents'][0]['parts'][0]['text']
        assert 'Programación I' in prompt
        assert '¿Qué es un bucle?' in prompt

    def test_lesson_plan_prompt(self, configured, calls):
        assistant.generate_lesson_plan('Fracciones', '2° Año')
        prompt = calls[0][1]['json']['contents'][0]['parts'][0]['text']
        assert 'Tema: Fracciones' in prompt
        assert 'Nivel/Año: 2° Año' in prompt

    def test_empty_reply_uses_fallback(self, configured, monkeypatch):
        monkeypatch.setattr(assistant.requests, 'post',
                            lambda url, **kwargs: FakeResponse({'candidates': []}))
        assert assistant.analyze_institutional_data('Asistencia 80%') == 'Error al analizar datos.'

    def test_http_failure_is_downgraded(self, configured, monkeypatch):
        monkeypatch.setattr(assistant.requests, 'post',
                            lambda url, **kwargs: FakeResponse({}, status=503))
        assert assistant.generate_lesson_plan('Fracciones', '2° Año') == \
            'Ocurrió un error al conectar con el asistente de planificación.'

    def test_network_error_is_downgraded(self, configured, monkeypatch):
        def boom(url, **kwargs):
            raise requests.ConnectionError('unreachable')

        monkeypatch.setattr(assistant.requests, 'post', boom)
        assert assistant.generate_tutor_response('x', 'y') == \
            'Lo siento, tuve un problema al procesar tu consulta.'

    def test_generate_joins_parts(self, monkeypatch):
        payload = {'candidates': [{'content': {'parts': [{'text': 'Hola '}, {'text': 'mundo'}]}}]}
        monkeypatch.setattr(assistant.requests, 'post', lambda url, **kwargs: FakeResponse(payload))
        assert assistant.generate('prompt', api_key='k', model='m') == 'Hola mundo'
