"""
Hometown Content Server — Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own site directory under tmp_path (index.html,
       admin.html, data.json) and an app built with create_app() on top of it.

Fixture Hierarchy:
    site_root ──► test_settings ──► test_app ──► test_client
    sample_document, sample_png_bytes: plain data
"""

import json
import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Point the import-time `settings`/`app` singletons at a scratch directory
# BEFORE any hometown_server import, so no uploads/ appears in the repo.
os.environ["SITE_ROOT"] = tempfile.mkdtemp(prefix="hometown_test_")
os.environ["LOG_LEVEL"] = "WARNING"

from hometown_server.config import Settings  # noqa: E402
from hometown_server.main import create_app  # noqa: E402

INDEX_HTML = "<!doctype html><title>家乡</title><h1>首页</h1>"
ADMIN_HTML = "<!doctype html><title>管理</title><h1>管理页面</h1>"


@pytest.fixture
def sample_document():
    """A complete content document with every required key populated."""
    return {
        "hometowns": [
            {"name": "婺源", "image": "/uploads/1717401234567-1.jpg", "intro": "油菜花海"},
            {"name": "凤凰", "image": "/uploads/1717401234567-2.jpg", "intro": "沱江古城"},
        ],
        "banner": {"title": "我的家乡", "image": "/uploads/1717401234567-3.png"},
        "audioStory": {"title": "外婆的故事", "audio": "/uploads/1717401234567-4.mp3"},
        "products": [{"name": "皇菊", "price": 38.5}],
    }


@pytest.fixture
def sample_png_bytes():
    """PNG signature plus a few bytes; only the declared type is checked."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + bytes(range(64))


@pytest.fixture
def site_root(tmp_path, sample_document):
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (root / "admin.html").write_text(ADMIN_HTML, encoding="utf-8")
    (root / "data.json").write_text(
        json.dumps(sample_document, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return root


@pytest.fixture
def test_settings(site_root):
    return Settings(site_root=str(site_root), log_level="WARNING")


@pytest.fixture
def test_app(test_settings):
    return create_app(test_settings)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient wired straight into the ASGI app (no server, no lifespan).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
