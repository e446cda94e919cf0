import os
import tempfile

# Point the app at throwaway storage before anything imports the settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="pinvent-uploads-"))
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("FRONTEND_URL", "https://pinvent.test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from pinvent.core.config import settings
from pinvent.core.database import Base, get_db
from pinvent.services.email import EmailDeliveryError, get_notifier


class RecordingNotifier:
    """Stands in for SMTP; keeps every message, or fails on demand."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def __call__(self, subject, html_body, send_to, sent_from, reply_to=None):
        if self.fail:
            raise EmailDeliveryError("smtp down")
        self.sent.append({
            "subject": subject,
            "html_body": html_body,
            "send_to": send_to,
            "sent_from": sent_from,
            "reply_to": reply_to,
        })

    @property
    def last_reset_token(self):
        body = self.sent[-1]["html_body"]
        marker = "/resetpassword/"
        start = body.index(marker) + len(marker)
        end = body.index('"', start)
        return body[start:end]


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture()
def client(db_session, notifier, upload_dir):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    # The session cookie is Secure, so talk to the app over https
    with TestClient(app, base_url="https://testserver") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def register(client):
    def _register(email="ada@example.com", password="secret", name="Ada", **extra):
        payload = {"name": name, "email": email, "password": password, **extra}
        return client.post("/api/users/register", json=payload)
    return _register
