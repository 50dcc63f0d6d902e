"""Shared fixtures: a testing app, its client, admin tokens and a mocked database."""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from flask_jwt_extended import create_access_token

import qbank
from qbank import create_app

ADMIN_ID = str(ObjectId())


@pytest.fixture
def app():
    return create_app('testing')


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(monkeypatch):
    """Replace the Mongo database behind ``mongo.db`` with a MagicMock."""
    mock_db = MagicMock()
    monkeypatch.setattr(qbank, 'mongo_db', mock_db)
    return mock_db


def make_token(app, user_type='admin'):
    with app.app_context():
        return create_access_token(
            identity=ADMIN_ID,
            additional_claims={'user_type': user_type, 'username': 'admin', 'full_name': 'Administrator'}
        )


@pytest.fixture
def admin_headers(app):
    return {'Authorization': f'Bearer {make_token(app)}'}


@pytest.fixture
def student_headers(app):
    return {'Authorization': f"Bearer {make_token(app, user_type='student')}"}
