"""Pytest configuration and shared fixtures."""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from api_server import app as flask_app
from utils import build_drive_id_pattern


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def strict_client(app, monkeypatch):
    """Client whose endpoint only accepts IDs of 25+ characters."""
    monkeypatch.setitem(app.config, 'DRIVE_ID_PATTERN', build_drive_id_pattern(25))
    return app.test_client()
