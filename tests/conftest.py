"""
Pytest configuration and fixtures.
"""
import sys
import os
import tempfile
from types import SimpleNamespace

import pytest

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    from networks import create_app
    from config import Config

    db_fd, db_path = tempfile.mkstemp()

    # Use a throwaway SQLite file for tests to ensure clean state and speed
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f'sqlite:///{db_path}'
        SQLALCHEMY_ENGINE_OPTIONS = {}
        SECRET_KEY = 'test-secret-key'
        LOGIN_DELAY = 0
        BCRYPT_LOG_ROUNDS = 4

    app = create_app(TestConfig)

    # Initialize database
    with app.app_context():
        from networks import db
        db.create_all()

    yield app

    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture(scope='function', autouse=True)
def clean_db(app):
    """Clean database between tests."""
    with app.app_context():
        from networks import db
        # Drop all tables and recreate them to ensure a clean slate
        db.session.remove()
        db.drop_all()
        db.create_all()
    yield


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """
    Factory creating a user and a bearer token for it.

    Returns a namespace with id, email, display_name, token and headers,
    usable outside of the app context.
    """
    from networks.models import db, User

    def _make_user(email, display_name, password='password', photo_url=None):
        with app.app_context():
            user = User(email=email, display_name=display_name, photo_url=photo_url)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            token = user.get_auth_token()
            return SimpleNamespace(
                id=user.id,
                email=email,
                display_name=display_name,
                password=password,
                token=token,
                headers={'Authorization': f'Bearer {token}'},
            )

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user('alice@example.com', 'Alice')


@pytest.fixture
def bob(make_user):
    return make_user('bob@example.com', 'Bob')


@pytest.fixture
def carol(make_user):
    return make_user('carol@example.com', 'Carol')
