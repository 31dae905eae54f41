"""
Shared fixtures.

Mock mode is switched on before anything imports blog.main, because that
module builds an app from the environment at import time.
"""

import os

os.environ.setdefault("MONGODB_MOCK_MODE", "true")

import pytest
from fastapi.testclient import TestClient

from blog.config.settings import Settings
from blog.main import create_app

STORAGE_ENV_VARS = [
    f"{prefix}OSS_{name}"
    for prefix in ("", "PUBLIC_")
    for name in ("REGION", "ACCESS_KEY_ID", "ACCESS_KEY_SECRET", "BUCKET", "BASE_PATH")
]


class FakeS3Client:
    """
    Stand-in for a boto3 S3 client.

    failures is a list of exceptions raised by successive put_object
    calls; once it runs out, calls succeed.
    """

    def __init__(self, failures=None):
        self.failures = list(failures or [])
        self.calls = []

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.failures:
            raise self.failures.pop(0)
        return {"ETag": '"etag"', "ResponseMetadata": {"HTTPStatusCode": 200}}


class RecordingSleep:
    """Async sleep replacement that records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture(autouse=True)
def clean_storage_env(monkeypatch):
    """Keep real OSS credentials in the environment out of tests."""
    for name in STORAGE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def upload_root(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_root):
    return Settings(
        _env_file=None,
        upload_root=str(upload_root),
        mongodb_mock_mode=True,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def sites_collection(app, settings):
    return app.state.mongo_client[settings.mongodb_database]["sites"]


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def s3_client_factory():
    """Build a FakeS3Client with scripted put_object failures."""
    return FakeS3Client


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
