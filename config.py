import os
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables from .env file
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
dotenv_path = os.path.join(BASE_DIR, '.env')

# Load the .env file from that specific path
load_dotenv(dotenv_path=dotenv_path)


class Config:
    """Base configuration class."""

    # Get secret key and database URL from environment variables
    SECRET_KEY = os.getenv('SECRET_KEY') or 'dev-fallback-secret-key-change-in-prod'
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL') or \
        'sqlite:///' + os.path.join(BASE_DIR, 'networks.db')

    # Flask-SQLAlchemy settings
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_recycle': 280}
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bearer tokens are the only credential; no cookie sessions
    SESSION_PROTECTION = None

    # Bearer token lifetime, in seconds
    TOKEN_MAX_AGE = int(os.getenv('TOKEN_MAX_AGE', int(timedelta(days=7).total_seconds())))

    # Origins allowed to call the API from a browser
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(',')
        if origin.strip()
    ]

    # Messaging
    MESSAGE_MAX_LENGTH = int(os.getenv('MESSAGE_MAX_LENGTH', 4000))

    # Users
    USER_SEARCH_LIMIT = 20
    USER_SEARCH_MIN_LENGTH = 2
