"""Shared fixtures: a fresh app and store per test."""

import os
import sys
import tempfile
import uuid
from datetime import date, timedelta
from pathlib import Path

# Settings are read once at import time by ``mockprep.main``.
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="mockprep-uploads-"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from mockprep.container import build_container  # noqa: E402
from mockprep.core.config import Settings  # noqa: E402
from mockprep.domain.models import Caller, InterviewSlot, Role  # noqa: E402
from mockprep.main import create_app  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        UPLOAD_DIR=str(tmp_path / "uploads"),
        BCRYPT_ROUNDS=4,
        SEED_DEMO_DATA=False,
        LOG_LEVEL="WARNING",
        JWT_SECRET="test-secret",
        MAX_UPLOAD_BYTES=1024,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def container(app):
    return app.state.container


@pytest.fixture
def services(settings):
    """Container without the HTTP layer, for service-level tests."""
    return build_container(settings)


def _add_slot(target, **overrides) -> InterviewSlot:
    fields = dict(
        id=str(uuid.uuid4()),
        interviewer_id="iv-1",
        interviewer_name="Jane Smith",
        interviewer_company="Google",
        date=date.today() + timedelta(days=7),
        time="11:00 AM",
        duration=60,
        price=60.0,
        type="Technical",
        domain="Technical",
        profile="Software",
        available=True,
    )
    fields.update(overrides)
    return target.stores.slots.add(InterviewSlot(**fields))


@pytest.fixture
def slot_factory(container):
    return lambda **overrides: _add_slot(container, **overrides)


@pytest.fixture
def service_slot_factory(services):
    return lambda **overrides: _add_slot(services, **overrides)


@pytest.fixture
def user_factory(container):
    """Create a user directly and return ``(user, auth_headers)``."""

    def _make(email=None, role=Role.student, name="Test User", password="password123"):
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        user = container.users.create(name, email, container.hash_password(password), role=role)
        token = container.tokens.issue_token(user.id)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def caller_factory(services):
    """Create a user in the service container and return its :class:`Caller`."""

    def _make(role=Role.student, email=None):
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        user = services.users.create("Someone", email, "not-a-hash", role=role)
        return Caller.for_user(user)

    return _make
