import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from raven import models  # noqa: F401
from raven.database import Base, get_db
from raven.domain.scheduling.availability import BusinessHours, get_business_hours
from raven.main import app
from raven.notifications import NotificationDispatcher, get_notifier


class RecordingSender:
    """Stands in for the Resend transport and keeps every message it is given"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, to, from_address, subject, text, html=None):
        if self.fail:
            raise RuntimeError("mail provider unavailable")
        self.sent.append(
            {"to": to, "from": from_address, "subject": subject, "text": text, "html": html}
        )
        return {"id": f"test-{len(self.sent)}"}

    def subjects_for(self, to):
        return [message["subject"] for message in self.sent if message["to"] == to]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def notifier(sender):
    return NotificationDispatcher(
        sender=sender,
        from_address="Raven Community <noreply@raven.test>",
        owner_email=None,
        login_url="https://raven.test/login",
    )


@pytest.fixture
def business_hours():
    return BusinessHours(open_hour=6, close_hour=22, slot_duration_minutes=60)


@pytest.fixture
def api(session_factory, notifier, business_hours):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_business_hours] = lambda: business_hours
    yield TestClient(app)
    app.dependency_overrides.clear()
