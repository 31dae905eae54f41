"""
API tests for POST /api/upload.

The app runs with local storage under a temporary directory unless a test
swaps in a remote writer backed by a fake S3 client.
"""

import re

import pytest
from fastapi.testclient import TestClient

from blog.config.settings import Settings
from blog.core.uploads.dispatcher import UploadDispatcher
from blog.infrastructure.storage.client import RemoteStorageWriter, StorageConfig
from blog.main import create_app

UUID_PATTERN = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


def stored_files(root):
    return [path for path in root.rglob("*") if path.is_file()]


class TestLocalUpload:
    """Uploads with object storage not configured."""

    def test_markdown_without_directory_lands_in_articles(self, client, upload_root):
        data = b"a" * 10 * 1024

        response = client.post(
            "/api/upload",
            files={"file": ("note.md", data, "text/markdown")},
        )

        assert response.status_code == 200
        url = response.json()["url"]
        assert re.fullmatch(rf"/uploads/articles/articles/{UUID_PATTERN}\.md", url)

        files = stored_files(upload_root)
        assert len(files) == 1
        assert files[0].read_bytes() == data

    def test_stored_file_is_served_back(self, client):
        response = client.post(
            "/api/upload",
            files={"file": ("hello.txt", b"hello there", "text/plain")},
        )

        served = client.get(response.json()["url"])

        assert served.status_code == 200
        assert served.content == b"hello there"

    def test_image_goes_to_images_and_requested_directory(self, client):
        response = client.post(
            "/api/upload",
            files={"file": ("Cover.PNG", b"\x89PNG", "image/png")},
            data={"directory": "posts/2024"},
        )

        assert response.status_code == 200
        assert re.fullmatch(
            rf"/uploads/images/posts/2024/{UUID_PATTERN}\.png",
            response.json()["url"],
        )

    def test_video_goes_to_videos(self, client):
        response = client.post(
            "/api/upload",
            files={"file": ("clip.mp4", b"\x00\x00", "video/mp4")},
            data={"directory": "demos"},
        )

        assert response.status_code == 200
        assert response.json()["url"].startswith("/uploads/videos/demos/")

    def test_markdown_name_accepted_with_generic_type(self, client):
        response = client.post(
            "/api/upload",
            files={"file": ("draft.md", b"# draft", "application/octet-stream")},
        )

        assert response.status_code == 200
        assert response.json()["url"].startswith("/uploads/articles/articles/")

    def test_empty_directory_field_uses_default(self, client):
        response = client.post(
            "/api/upload",
            files={"file": ("note.md", b"x", "text/markdown")},
            data={"directory": ""},
        )

        assert response.status_code == 200
        assert response.json()["url"].startswith("/uploads/articles/articles/")

    def test_same_name_twice_never_collides(self, client, upload_root):
        urls = {
            client.post(
                "/api/upload",
                files={"file": ("same.md", content, "text/markdown")},
                data={"directory": "fresh/nested"},
            ).json()["url"]
            for content in (b"first", b"second")
        }

        assert len(urls) == 2
        assert len(stored_files(upload_root / "articles" / "fresh" / "nested")) == 2


class TestRejectedUpload:
    """Invalid uploads answer 400 and write nothing."""

    def test_missing_file(self, client, upload_root):
        response = client.post("/api/upload", data={"directory": "posts"})

        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}
        assert stored_files(upload_root) == []

    def test_disallowed_type(self, client, upload_root):
        response = client.post(
            "/api/upload",
            files={"file": ("paper.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "Only markdown, image and video files are allowed"
        }
        assert stored_files(upload_root) == []

    def test_missing_extension(self, client, upload_root):
        response = client.post(
            "/api/upload",
            files={"file": ("notes", b"text", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid file extension"}
        assert stored_files(upload_root) == []

    def test_extension_with_path_separator(self, client, upload_root):
        response = client.post(
            "/api/upload",
            files={"file": ("x.png/evil", b"png", "image/png")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid file extension"}
        assert stored_files(upload_root) == []

    def test_file_field_sent_as_text(self, client, upload_root):
        response = client.post("/api/upload", data={"file": "not-a-file"})

        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}
        assert stored_files(upload_root) == []

    @pytest.mark.parametrize("directory", ["../outside", "/etc", "a/../../b"])
    def test_directory_escaping_upload_root(self, client, upload_root, directory):
        response = client.post(
            "/api/upload",
            files={"file": ("note.md", b"x", "text/markdown")},
            data={"directory": directory},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid directory"}
        assert stored_files(upload_root.parent) == []

    def test_oversized_file(self, app, client, upload_root):
        app.state.upload_dispatcher = UploadDispatcher(
            app.state.upload_dispatcher.writer, max_size_bytes=16
        )

        response = client.post(
            "/api/upload",
            files={"file": ("note.md", b"x" * 17, "text/markdown")},
        )

        assert response.status_code == 413
        assert "error" in response.json()
        assert stored_files(upload_root) == []


class TestRemoteUpload:
    """Uploads through the OSS writer, with a fake S3 client."""

    @pytest.fixture
    def config(self):
        return StorageConfig(
            region="oss-cn-hangzhou",
            access_key_id="id",
            access_key_secret="secret",
            bucket="my-blog",
            base_path="static",
        )

    def test_url_points_at_bucket(self, app, client, config, fake_s3, recording_sleep):
        app.state.upload_dispatcher = UploadDispatcher(
            RemoteStorageWriter(config, s3_client=fake_s3, sleep=recording_sleep)
        )

        response = client.post(
            "/api/upload",
            files={"file": ("cover.jpg", b"jpeg", "image/jpeg")},
            data={"directory": "covers"},
        )

        assert response.status_code == 200
        assert re.fullmatch(
            rf"https://my-blog\.oss-cn-hangzhou\.aliyuncs\.com/static/images/covers/{UUID_PATTERN}\.jpg",
            response.json()["url"],
        )
        assert fake_s3.calls[0]["Key"].startswith("static/images/covers/")

    def test_exhausted_retries_answer_500(
        self, app, client, config, s3_client_factory, recording_sleep, upload_root
    ):
        s3 = s3_client_factory(failures=[ConnectionError("oss unreachable")] * 3)
        app.state.upload_dispatcher = UploadDispatcher(
            RemoteStorageWriter(config, s3_client=s3, sleep=recording_sleep)
        )

        response = client.post(
            "/api/upload",
            files={"file": ("note.md", b"x", "text/markdown")},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "oss unreachable"}
        assert len(s3.calls) == 3
        assert recording_sleep.delays == [1.0, 2.0]
        assert stored_files(upload_root) == []

    def test_error_without_message_uses_fallback(
        self, app, client, config, s3_client_factory, recording_sleep
    ):
        s3 = s3_client_factory(failures=[RuntimeError()] * 3)
        app.state.upload_dispatcher = UploadDispatcher(
            RemoteStorageWriter(config, s3_client=s3, sleep=recording_sleep)
        )

        response = client.post(
            "/api/upload",
            files={"file": ("note.md", b"x", "text/markdown")},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Upload failed"}


class TestUploadDirectory:
    """The local upload directory is created at startup, not at build time."""

    def test_building_the_app_touches_nothing(self, app, upload_root):
        assert not upload_root.exists()

    def test_default_directory_not_created_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        create_app(Settings(_env_file=None, mongodb_mock_mode=True))

        assert not (tmp_path / "public").exists()

    def test_startup_creates_directory(self, app, upload_root):
        with TestClient(app) as client:
            assert upload_root.is_dir()
            response = client.post(
                "/api/upload",
                files={"file": ("note.md", b"x", "text/markdown")},
            )

        assert response.status_code == 200
        assert len(stored_files(upload_root)) == 1
