import os
import sys
import json

import pytest
import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Settings  # noqa: E402
from app import create_app  # noqa: E402


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        linkedin_client_id='client-123',
        linkedin_client_secret='secret-456',
        linkedin_redirect_uri='http://localhost:3003/linkedin/callback',
        secret_key='test-secret-key',
        certificates_dir=tmp_path / 'certificates',
        quiz_title='Test Quiz',
    )


@pytest.fixture()
def app(settings):
    app = create_app(settings)
    app.config['TESTING'] = True
    return app


@pytest.fixture()
def app_client(app):
    return app.test_client()


def make_response(status_code=200, body=None, headers=None):
    """Build a real requests.Response so raise_for_status behaves as in production."""
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(body).encode('utf-8') if body is not None else b''
    resp.headers['Content-Type'] = 'application/json'
    for key, value in (headers or {}).items():
        resp.headers[key] = value
    resp.url = 'https://api.linkedin.com/test'
    return resp


@pytest.fixture()
def fake_response():
    return make_response
