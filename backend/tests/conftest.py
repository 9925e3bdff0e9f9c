"""
Shared fixtures: a mock-backed app, a remote-backed app on in-memory SQLite,
and ready-made backends for direct tests
"""
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from app import create_app, db
from services.courses import CourseCatalog
from services.mock_database import MockBackend
from services.storage import MemoryStorage

MOCK_CONFIG = {
    'TESTING': True,
    'DATABASE_URL': '',
    'DATABASE_KEY': '',
    'MOCK_STORAGE_DIR': '',
    'GEMINI_API_KEY': '',
    'SECRET_KEY': 'test-secret',
}

REMOTE_CONFIG = {
    **MOCK_CONFIG,
    'DATABASE_URL': 'sqlite:///:memory:',
    'DATABASE_KEY': 'test',
    'SEED_REMOTE_DATABASE': True,
}


@pytest.fixture(scope='function')
def mock_app():
    """App running on the in-memory mock store"""
    app = create_app(MOCK_CONFIG)
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def remote_app():
    """App running on a seeded in-memory SQLite database"""
    app = create_app(REMOTE_CONFIG)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def mock_backend():
    backend = MockBackend(storage=MemoryStorage(), catalog=CourseCatalog())
    backend.initialize_database()
    return backend


@pytest.fixture
def remote_backend(remote_app):
    return remote_app.extensions['portal_backend']


@pytest.fixture(params=['mock', 'remote'])
def backend(request):
    """Each backend-agnostic test runs once against both stores"""
    if request.param == 'mock':
        return request.getfixturevalue('mock_backend')
    return request.getfixturevalue('remote_backend')
