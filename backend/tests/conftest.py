import io
import os
import sys
import pytest

# Ensure the backend root (containing the `minigames` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from minigames import create_app, db, seed_templates


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    MAX_CONTENT_LENGTH = 1024 * 1024
    CORS_ORIGINS = ['http://localhost:5173']


USERS = {
    'owner': 'USER',
    'other': 'USER',
    'admin': 'SUPER_ADMIN',
}
PASSWORD = 'password'


@pytest.fixture()
def flask_app(tmp_path):
    class Config(TestConfig):
        # File-backed so the data outlives each request's app context
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    application = create_app(Config)
    with application.app_context():
        from minigames.models import User, Role
        db.create_all()
        seed_templates()
        for username, role in USERS.items():
            user = User(username=username, role=Role(role))
            user.set_password(PASSWORD)
            db.session.add(user)
        db.session.commit()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    with flask_app.app_context():
        yield flask_app


@pytest.fixture()
def users(flask_app):
    from minigames.models import User
    with flask_app.app_context():
        return {u.username: u.id for u in User.query.all()}


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def login(flask_app):
    """Returns a test client already logged in as the given seeded user."""
    def _login(username):
        c = flask_app.test_client()
        res = c.post('/api/auth/login', json={'username': username, 'password': PASSWORD})
        assert res.status_code == 200, res.get_json()
        return c
    return _login


@pytest.fixture()
def storage(flask_app):
    return flask_app.extensions['storage']


def thumbnail(name='thumb.png', content=b'\x89PNG\r\n\x1a\nfake-image'):
    return (io.BytesIO(content), name)


def tile_list(*pairs):
    return [{'label': label, 'color': color} for label, color in pairs]
