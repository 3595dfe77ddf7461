"""Shared fixtures for the Crowdin app tests."""

import os
import time

from cryptography.fernet import Fernet

# Settings are read at import time, so the environment must be prepared first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BASE_URL"] = "http://testserver"
os.environ["CROWDIN_CLIENT_ID"] = "test-client-id"
os.environ["CROWDIN_CLIENT_SECRET"] = "test-client-secret-0123456789abcdef"
os.environ["ENCRYPTION_KEY"] = Fernet.generate_key().decode()

import jwt
import pytest
from fastapi.testclient import TestClient

from app import app
from config import settings as app_settings
from crowdin.auth import TokenCipher
from crowdin.organizations import OrganizationDirectory
from Database.database import Base, SessionLocal, engine, init_db

ORGANIZATION_DOMAIN = "acme"
ORGANIZATION_ID = 42
PROJECT_ID = 7


@pytest.fixture
def settings():
    return app_settings


@pytest.fixture
def db_session():
    init_db(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cipher(settings):
    return TokenCipher(settings.ENCRYPTION_KEY)


@pytest.fixture
def installed_event(settings):
    return {
        "appId": "length-checker",
        "appSecret": "app-secret",
        "clientId": settings.CROWDIN_CLIENT_ID,
        "userId": 1,
        "organizationId": ORGANIZATION_ID,
        "domain": ORGANIZATION_DOMAIN,
        "baseUrl": f"https://{ORGANIZATION_DOMAIN}.crowdin.com",
    }


@pytest.fixture
def organization(db_session, cipher, installed_event):
    return OrganizationDirectory(db_session, cipher).register_installation(installed_event)


@pytest.fixture
def make_jwt(settings):
    def _make(secret=None, expires_in=300, context=None, **claims):
        now = int(time.time())
        payload = {
            "aud": settings.CROWDIN_CLIENT_ID,
            "sub": "1",
            "domain": ORGANIZATION_DOMAIN,
            "context": context if context is not None else {
                "organization_id": ORGANIZATION_ID,
                "project_id": PROJECT_ID,
                "user_id": 1,
            },
            "iat": now,
            "exp": now + expires_in,
        }
        payload.update(claims)
        return jwt.encode(payload, secret or settings.CROWDIN_CLIENT_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def client(db_session):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
