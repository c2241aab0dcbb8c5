"""
Shared pytest fixtures for Kakeibo tests.
"""

import pytest
import os
import sys
from unittest.mock import patch

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


class TestConfig:
    """Test configuration with fixed secrets and fake Google client settings."""
    SECRET_KEY = 'test-secret-key-for-testing-only'
    TESTING = True
    WTF_CSRF_ENABLED = True
    SERVER_NAME = 'localhost'
    LOG_LEVEL = 'DEBUG'
    API_TOKEN = 'secret-token'
    GOOGLE_CLIENT_ID = 'test-client-id.apps.googleusercontent.com'
    GOOGLE_CLIENT_SECRET = 'test-client-secret'
    GOOGLE_REDIRECT_URI = 'http://localhost/auth/google/callback'
    GOOGLE_TOKENS_PATH = '/tmp/test_kakeibo_tokens.json'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


@pytest.fixture
def app(tmp_path):
    """Create application for testing."""
    with patch('config.Config', TestConfig):
        from app import create_app
        application = create_app(config_class=TestConfig)
        application.config['WTF_CSRF_ENABLED'] = True
        application.config['GOOGLE_TOKENS_PATH'] = str(tmp_path / 'tokens.json')
        yield application


@pytest.fixture
def app_no_csrf(tmp_path):
    """Create application for testing without CSRF protection."""
    with patch('config.Config', TestConfig):
        from app import create_app
        application = create_app(config_class=TestConfig)
        application.config['WTF_CSRF_ENABLED'] = False
        application.config['GOOGLE_TOKENS_PATH'] = str(tmp_path / 'tokens.json')
        yield application


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def client_no_csrf(app_no_csrf):
    """Create test client without CSRF."""
    return app_no_csrf.test_client()


@pytest.fixture
def auth_headers():
    """Headers carrying the demo bearer token."""
    return {'Authorization': 'Bearer secret-token'}

