# This file stores the configs for the Flask app
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()

class Config():
    # Database configs
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'sqlite:///vocab_master.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT configs
    SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ERROR_MESSAGE_KEY = 'message'

    # JWT Token Expiry
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)

    # accept access tokens from headers, refresh from cookies
    JWT_TOKEN_LOCATION = ['headers', 'cookies']

    # JWT Cookie Settings
    JWT_REFRESH_COOKIE_PATH = '/api/token'
    JWT_COOKIE_SECURE = os.getenv('JWT_COOKIE_SECURE', 'false').lower() == 'true'
    JWT_COOKIE_SAMESITE = 'Strict'
    JWT_COOKIE_CSRF_PROTECT = False          # SameSite=Strict covers the refresh cookie

    # Flask configs
    DEBUG = os.getenv('FLASK_DEBUG', 'false').lower() == 'true'
    PROPAGATE_EXCEPTIONS = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Dictionary lookup (Cambridge English-Chinese (Traditional))
    DICTIONARY_BASE_URL = os.getenv(
        'DICTIONARY_BASE_URL',
        'https://dictionary.cambridge.org/zht/詞典/英語-漢語-繁體/'
    )
    DICTIONARY_TIMEOUT = float(os.getenv('DICTIONARY_TIMEOUT', '10'))
    DICTIONARY_USER_AGENT = (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
    )

    # Rate limiting - in-memory storage, no Redis needed
    RATELIMIT_STORAGE_URI = 'memory://'
    RATELIMIT_STRATEGY = 'fixed-window'
    RATELIMIT_DEFAULT = '200 per minute'


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-secret-key'
    JWT_COOKIE_SECURE = False  # Allow HTTP in tests
    DICTIONARY_BASE_URL = 'https://dictionary.test/lookup/'
    RATELIMIT_ENABLED = False  # Disable rate limiting in tests
