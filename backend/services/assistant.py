"""
AI text assistant backed by the Gemini generateContent REST endpoint.

All helpers are best effort: a missing key returns a fixed message, and any
failure is logged and turned into a canned apology. Nothing here raises.
"""
import logging

import requests
from flask import current_app, has_app_context

logger = logging.getLogger(__name__)

API_URL = 'https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent'
DEFAULT_MODEL = 'gemini-2.5-flash'
REQUEST_TIMEOUT = 30

MISSING_KEY_MESSAGE = 'Error: API Key no configurada.'


class AssistantError(Exception):
    """The text service answered with something unusable"""


def _settings():
    if has_app_context():
        return (current_app.config.get('GEMINI_API_KEY', ''),
                current_app.config.get('GEMINI_MODEL') or DEFAULT_MODEL)
    return '', DEFAULT_MODEL


def generate(prompt, api_key=None, model=None):
    """
    Send one prompt and return the generated text ('' when the reply has none).
    Raises requests.RequestException or AssistantError on failure.
    """
    configured_key, configured_model = _settings()
    api_key = api_key or configured_key
    model = model or configured_model

    response = requests.post(
        API_URL.format(model=model),
        params={'key': api_key},
        json={'contents': [{'parts': [{'text': prompt}]}]},
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()

    try:
        candidates = response.json().get('candidates') or []
    except ValueError as e:
        raise AssistantError(f'Invalid JSON from text service: {e}')

    if not candidates:
        return ''
    parts = candidates[0].get('content', {}).get('parts') or []
    return ''.join(part.get('text', '') for part in parts)


def _ask(prompt, empty_message, failure_message, label):
    api_key, _ = _settings()
    if not api_key:
        return MISSING_KEY_MESSAGE

    try:
        text = generate(prompt, api_key=api_key)
    except Exception as e:
        logger.error(f"{label} error: {e}")
        return failure_message
    return text or empty_message


def generate_tutor_response(question, subject):
    prompt = (
        "Eres un tutor educativo amable y paciente para estudiantes de secundaria.\n"
        f"La materia es: {subject}.\n"
        f"El estudiante pregunta: \"{question}\".\n"
        "Responde de manera clara, concisa y alentadora. "
        "Usa formato Markdown para resaltar puntos clave."
    )
    return _ask(
        prompt,
        empty_message='No se pudo generar una respuesta.',
        failure_message='Lo siento, tuve un problema al procesar tu consulta.',
        label='Tutor',
    )


def generate_lesson_plan(topic, grade_level):
    prompt = (
        "Actúa como un coordinador pedagógico experto. "
        "Crea un plan de clase breve para docentes.\n"
        f"Tema: {topic}\n"
        f"Nivel/Año: {grade_level}\n\n"
        "Estructura requerida (en Markdown):\n"
        "1. Objetivos de aprendizaje\n"
        "2. Actividad de inicio (5 min)\n"
        "3. Desarrollo (20 min)\n"
        "4. Cierre y evaluación (10 min)\n"
        "5. Recursos necesarios"
    )
    return _ask(
        prompt,
        empty_message='Error al generar la planificación.',
        failure_message='Ocurrió un error al conectar con el asistente de planificación.',
        label='Planner',
    )


def analyze_institutional_data(data_description):
    prompt = (
        "Eres un asesor educativo analizando datos de una escuela.\n"
        f"Datos actuales: \"{data_description}\"\n\n"
        "Proporciona un resumen ejecutivo breve (máximo 3 párrafos) con:\n"
        "1. Análisis de la situación.\n"
        "2. Una recomendación estratégica para mejorar.\n"
        "Usa un tono profesional y directivo."
    )
    return _ask(
        prompt,
        empty_message='Error al analizar datos.',
        failure_message='No se pudo realizar el análisis en este momento.',
        label='Analysis',
    )
