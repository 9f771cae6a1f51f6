import os

# Configure before anything imports groupchat.config.settings
os.environ["APP_ENV"] = "testing"
os.environ["SERVICE_AUTH_SECRET"] = "test-secret"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["TASK_BACKEND"] = "inline"
os.environ["PUSH_BACKEND"] = "log"
os.environ.setdefault("SERVICE_AUTH_AUDIENCE", "your_service_audience")
os.environ.setdefault("SERVICE_AUTH_ISSUER", "your_service_name")

import asyncio

import pytest
from fastapi.testclient import TestClient

from groupchat.application.commands.users import RegisterUserWithEmailCommand
from groupchat.domain.value_objects.user_email import UserEmail
from groupchat.domain.value_objects.user_id import UserId
from groupchat.fastapi_app import create_fastapi_app
from groupchat.infrastructure.storage import InMemoryDocumentStore
from helpers import (
    FakePushGateway,
    RecordingTaskDispatcher,
    build_services,
)


@pytest.fixture()
def store():
    return InMemoryDocumentStore()


@pytest.fixture()
def dispatcher():
    return RecordingTaskDispatcher()


@pytest.fixture()
def push_gateway():
    return FakePushGateway()


@pytest.fixture()
def services(store, dispatcher, push_gateway):
    return build_services(store, dispatcher=dispatcher, push_gateway=push_gateway)


@pytest.fixture()
def make_user(services):
    """Register a user by email (<id>@example.com) and return it."""

    def _make(user_id: str, display_name: str = None, fcm_token: str = None):
        return asyncio.run(
            services.register_email.execute(
                RegisterUserWithEmailCommand(
                    user_id=UserId(user_id),
                    email=UserEmail(f"{user_id}@example.com"),
                    display_name=display_name or user_id.upper(),
                    fcm_token=fcm_token,
                )
            )
        )

    return _make


@pytest.fixture()
def app():
    """Create and configure a new FastAPI app instance for each test."""
    return create_fastapi_app()


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app (runs the lifespan)."""
    with TestClient(app) as test_client:
        yield test_client
