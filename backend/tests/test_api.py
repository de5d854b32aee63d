"""
Hometown Content Server — API Endpoint Tests
==============================================

What:  End-to-end behavior of every route through the full middleware stack.
How:   HTTPX AsyncClient over ASGITransport (see conftest.test_client).

What we test:
    ✅ POST /api/upload: stored bytes, public URL, type/size/no-file errors
    ✅ GET/POST /api/data: read, replace, validation, read-after-failed-write
    ✅ Static serving of /uploads and the site root
    ✅ CORS headers everywhere, preflight, X-Request-ID, /health
    ✅ Unexpected errors → generic 500 with CORS headers; access log lines
"""

import json
import logging

import pytest
from httpx import ASGITransport, AsyncClient

from hometown_server.config import Settings
from hometown_server.main import create_app

MAX_UPLOAD = 5_242_880


def upload_files(content: bytes, filename: str = "photo.png", content_type: str = "image/png"):
    return {"file": (filename, content, content_type)}


class TestUploadEndpoint:

    @pytest.mark.asyncio
    async def test_upload_success(self, test_client, test_settings, sample_png_bytes):
        response = await test_client.post("/api/upload", files=upload_files(sample_png_bytes))

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["fileUrl"].startswith("/uploads/")
        assert body["fileUrl"].endswith(".png")

        stored = test_settings.upload_dir_path / body["fileUrl"].rsplit("/", 1)[1]
        assert stored.read_bytes() == sample_png_bytes

    @pytest.mark.asyncio
    async def test_uploaded_file_is_served(self, test_client, sample_png_bytes):
        response = await test_client.post(
            "/api/upload", files=upload_files(sample_png_bytes, "story.mp3", "audio/mpeg")
        )
        file_url = response.json()["fileUrl"]

        served = await test_client.get(file_url)
        assert served.status_code == 200
        assert served.content == sample_png_bytes

    @pytest.mark.asyncio
    async def test_no_file_field(self, test_client):
        response = await test_client.post(
            "/api/upload", files={"attachment": ("a.png", b"x", "image/png")}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "没有文件被上传"}

    @pytest.mark.asyncio
    async def test_empty_request(self, test_client):
        response = await test_client.post("/api/upload")
        assert response.status_code == 400
        assert response.json() == {"error": "没有文件被上传"}

    @pytest.mark.asyncio
    async def test_text_part_named_file(self, test_client, test_settings):
        response = await test_client.post(
            "/api/upload",
            data={"file": "not a file"},
            files={"attachment": ("a.png", b"x", "image/png")},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "没有文件被上传"}
        assert list(test_settings.upload_dir_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_urlencoded_file_field(self, test_client):
        response = await test_client.post("/api/upload", data={"file": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "没有文件被上传"}

    @pytest.mark.asyncio
    async def test_disallowed_type_writes_nothing(self, test_client, test_settings):
        response = await test_client.post(
            "/api/upload", files=upload_files(b"%PDF-1.4", "doc.pdf", "application/pdf")
        )
        assert response.status_code == 400
        assert response.json() == {"error": "不支持的文件类型"}
        assert list(test_settings.upload_dir_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_oversized_upload_writes_nothing(self, test_client, test_settings):
        response = await test_client.post(
            "/api/upload",
            files=upload_files(b"\x00" * (MAX_UPLOAD + 1), "big.jpg", "image/jpeg"),
        )
        assert response.status_code == 400
        assert response.json() == {"error": "文件大小超过限制"}
        assert list(test_settings.upload_dir_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_upload_at_size_limit(self, test_client, test_settings):
        response = await test_client.post(
            "/api/upload",
            files=upload_files(b"\x00" * MAX_UPLOAD, "big.webp", "image/webp"),
        )
        assert response.status_code == 200
        name = response.json()["fileUrl"].rsplit("/", 1)[1]
        assert (test_settings.upload_dir_path / name).stat().st_size == MAX_UPLOAD


class TestContentEndpoints:

    @pytest.mark.asyncio
    async def test_get_data(self, test_client, sample_document):
        response = await test_client.get("/api/data")
        assert response.status_code == 200
        assert response.json() == sample_document

    @pytest.mark.asyncio
    async def test_post_then_get(self, test_client):
        document = {"hometowns": [], "banner": "x", "audioStory": "y", "products": []}

        response = await test_client.post("/api/data", json=document)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "数据保存成功"}

        response = await test_client.get("/api/data")
        assert response.json() == document

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["hometowns", "banner", "audioStory", "products"])
    async def test_missing_field_rejected(self, test_client, sample_document, missing):
        payload = dict(sample_document)
        del payload[missing]

        response = await test_client.post("/api/data", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "数据格式不正确"}

        response = await test_client.get("/api/data")
        assert response.json() == sample_document

    @pytest.mark.asyncio
    async def test_malformed_json_rejected(self, test_client, test_settings):
        before = test_settings.data_file_path.read_bytes()
        response = await test_client.post(
            "/api/data",
            content=b'{"hometowns": [',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "数据格式不正确"}
        assert test_settings.data_file_path.read_bytes() == before

    @pytest.mark.asyncio
    async def test_array_body_rejected(self, test_client):
        response = await test_client.post("/api/data", json=[1, 2, 3])
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_urlencoded_body_rejected(self, test_client, test_settings):
        before = test_settings.data_file_path.read_bytes()
        response = await test_client.post(
            "/api/data",
            data={"hometowns": "a", "banner": "b", "audioStory": "c", "products": "d"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "数据格式不正确"}
        assert test_settings.data_file_path.read_bytes() == before

    @pytest.mark.asyncio
    async def test_nan_body_rejected(self, test_client, test_settings):
        before = test_settings.data_file_path.read_bytes()
        response = await test_client.post(
            "/api/data",
            content=b'{"hometowns": [], "banner": NaN, "audioStory": "y", "products": []}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "数据格式不正确"}
        assert test_settings.data_file_path.read_bytes() == before

    @pytest.mark.asyncio
    async def test_document_with_nan_is_read_error(self, test_client, test_settings):
        test_settings.data_file_path.write_text(
            '{"hometowns": [], "banner": NaN, "audioStory": "y", "products": []}',
            encoding="utf-8",
        )
        response = await test_client.get("/api/data")
        assert response.status_code == 500
        assert response.json() == {"error": "读取数据失败"}

    @pytest.mark.asyncio
    async def test_missing_document_is_server_error(self, test_client, test_settings):
        test_settings.data_file_path.unlink()

        response = await test_client.get("/api/data")
        assert response.status_code == 500
        assert response.json() == {"error": "读取数据失败"}

    @pytest.mark.asyncio
    async def test_post_recreates_missing_document(self, test_client, test_settings, sample_document):
        test_settings.data_file_path.unlink()

        response = await test_client.post("/api/data", json=sample_document)
        assert response.status_code == 200
        assert json.loads(test_settings.data_file_path.read_text(encoding="utf-8")) == sample_document

    @pytest.mark.asyncio
    async def test_save_failure_is_server_error(self, tmp_path, site_root, sample_document):
        config = Settings(
            site_root=str(site_root),
            data_file=str(tmp_path / "no-such-dir" / "data.json"),
        )
        transport = ASGITransport(app=create_app(config))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/api/data", json=sample_document)

        assert response.status_code == 500
        assert response.json() == {"error": "保存数据失败"}


class TestStaticAndHeaders:

    @pytest.mark.asyncio
    async def test_index_served_at_root(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert "首页" in response.text

    @pytest.mark.asyncio
    async def test_admin_page_served(self, test_client):
        response = await test_client.get("/admin.html")
        assert response.status_code == 200
        assert "管理页面" in response.text

    @pytest.mark.asyncio
    async def test_unknown_static_path_404(self, test_client):
        response = await test_client.get("/nope.html")
        assert response.status_code == 404
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_unknown_upload_404(self, test_client):
        response = await test_client.get("/uploads/0000000000000-0.png")
        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/data", "/", "/health"])
    async def test_cors_headers_on_every_response(self, test_client, path):
        response = await test_client.get(path)
        assert response.headers["access-control-allow-origin"] == "*"
        assert "POST" in response.headers["access-control-allow-methods"]
        assert "Content-Type" in response.headers["access-control-allow-headers"]

    @pytest.mark.asyncio
    async def test_cors_headers_on_errors(self, test_client):
        response = await test_client.post("/api/data", json={})
        assert response.status_code == 400
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_preflight(self, test_client):
        response = await test_client.options(
            "/api/data",
            headers={
                "Origin": "http://elsewhere.example",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 204
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/api/data", headers={"X-Request-ID": "abc12345"})
        assert response.headers["x-request-id"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/data")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(self, test_app, monkeypatch):
        async def broken_read():
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(test_app.state.document_store, "read", broken_read)

        transport = ASGITransport(app=test_app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/data")

        assert response.status_code == 500
        assert response.json() == {"error": "服务器内部错误"}
        assert "disk on fire" not in response.text
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_access_log_line(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="hometown_server.access")

        await test_client.get("/api/data", headers={"X-Request-ID": "log12345"})
        await test_client.post("/api/data", json={})
        await test_client.get("/health")

        records = [r for r in caplog.records if r.name == "hometown_server.access"]
        assert [(r.method, r.path, r.status) for r in records] == [
            ("GET", "/api/data", 200),
            ("POST", "/api/data", 400),
        ]
        assert records[0].request_id == "log12345"
        assert records[0].levelno == logging.INFO
        assert records[1].levelno == logging.WARNING


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["data_file"] == "readable"
        assert body["upload_dir"] == "writable"

    @pytest.mark.asyncio
    async def test_degraded_without_document(self, test_client, test_settings):
        test_settings.data_file_path.unlink()
        body = (await test_client.get("/health")).json()
        assert body["status"] == "degraded"
        assert body["data_file"] == "unreadable"
