import pytest
import sys
import os
import json

# Add backend directory to Python path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from app import create_app
from extensions import db as _db
from config import TestConfig
from review.review_runner import reset_review_sessions


@pytest.fixture(scope='session')
def app():
    """Create a Flask app configured for testing."""
    app = create_app(config_class=TestConfig)
    return app


@pytest.fixture(scope='function')
def db(app):
    """Create fresh database tables for each test function."""
    with app.app_context():
        _db.create_all()
        yield _db
        reset_review_sessions()
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture(scope='function')
def client(app, db):
    """A Flask test client with a clean database."""
    return app.test_client()


def register_and_login(client, username='testuser', email='test@example.com', password='TestPass123'):
    """Register a user via POST /api/users, log in and return the login response."""
    client.post('/api/users', json={
        'username': username,
        'email': email,
        'password': password,
    })
    return client.post('/api/token', json={
        'username': username,
        'password': password,
    })


@pytest.fixture
def auth_headers(client):
    """Authorization header for a freshly registered 'testuser'."""
    resp = register_and_login(client)
    assert resp.status_code == 200
    token = json.loads(resp.data)['access_token']
    return {'Authorization': f'Bearer {token}'}
