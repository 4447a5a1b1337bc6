"""Shared fixtures: a fresh seeded store per test, served in-process and over HTTP."""

import os
import tempfile

# Configuration is read at import time, so it has to be in place first
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("MOCK_LATENCY_MS", "0")
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="lms-uploads-")

import pytest
import requests
from fastapi.testclient import TestClient
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from app import app
from core.database import create_store
from core.dependencies import get_store
from utils.api_client import ApiClient
from utils.request_router import RequestRouter

DEFAULT_PASSWORD = "password123"

# Seeded account used per role
SEED_ACCOUNTS = {
    "admin": "admin@university.edu",
    "instructor": "instructor@university.edu",
    "student": "student@university.edu",
}


class StarletteTransportAdapter(BaseAdapter):
    """Transport adapter handing requests' prepared requests to a TestClient."""

    def __init__(self, test_client: TestClient):
        super().__init__()
        self.test_client = test_client

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        result = self.test_client.request(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.body,
        )
        response = requests.Response()
        response.status_code = result.status_code
        response._content = result.content
        response.headers = CaseInsensitiveDict(result.headers)
        response.url = request.url
        response.request = request
        response.reason = result.reason_phrase
        response.encoding = "utf-8"
        return response

    def close(self):
        pass


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def store(upload_dir):
    store = create_store(url="sqlite://", seed=True, upload_dir=upload_dir)
    yield store
    store.dispose()


@pytest.fixture
def db(store):
    with store.session() as session:
        yield session


@pytest.fixture
def router(store):
    return RequestRouter(store=store, latency_ms=0)


@pytest.fixture
def http(store):
    """A TestClient bound to the test store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(http):
    session = requests.Session()
    session.mount("http://testserver", StarletteTransportAdapter(http))
    return ApiClient(base_url="http://testserver", session=session)


@pytest.fixture(params=["in_process", "http"])
def client(request):
    """Run a test against both the in-process router and the HTTP client."""
    if request.param == "in_process":
        return request.getfixturevalue("router")
    return request.getfixturevalue("api_client")


@pytest.fixture
def login_as():
    """Log a client in as one of the seeded accounts."""

    def _login(client, role):
        return client.login(SEED_ACCOUNTS[role], DEFAULT_PASSWORD, role)

    return _login
