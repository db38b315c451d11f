import mongomock
import pytest

from app import create_app
from config.database import Database
from config.settings import Settings


@pytest.fixture
def settings():
    return Settings(JWT_SECRET='test-secret', BCRYPT_ROUNDS=4, LOG_LEVEL='WARNING', DEBUG=False)


@pytest.fixture
def database(settings):
    db = Database(settings, client=mongomock.MongoClient())
    yield db
    db.close()


@pytest.fixture
def app(settings, database):
    app = create_app(settings, database)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


def register(client, name='Ann', email='ann@x.com', password='secret1'):
    response = client.post('/api/auth/register', json={'name': name, 'email': email, 'password': password})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def class_payload(**overrides):
    payload = {
        'title': 'Intro to Python',
        'description': 'Variables, loops and functions',
        'instructor': 'Grace Hopper',
        'type': 'recorded',
        'videoUrl': 'https://videos.example.com/python-intro',
        'duration': '1h 30m',
        'category': 'Programming',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def student(client):
    return register(client)


@pytest.fixture
def student_token(student):
    return student['token']


@pytest.fixture
def admin_token(client):
    response = client.post('/api/admin/setup',
                           json={'name': 'Root', 'email': 'admin@x.com', 'password': 'adminpw'})
    assert response.status_code == 201, response.get_json()
    login = client.post('/api/auth/login', json={'email': 'admin@x.com', 'password': 'adminpw'})
    return login.get_json()['token']


@pytest.fixture
def make_class(client, admin_token):
    def _make(**overrides):
        response = client.post('/api/admin/classes', json=class_payload(**overrides), headers=bearer(admin_token))
        assert response.status_code == 201, response.get_json()
        return response.get_json()
    return _make
