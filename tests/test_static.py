"""Tests for the /static/ file server route."""

import logging
from email.utils import formatdate
from pathlib import Path

import pytest

from frontdoor.config import ServerConfig
from frontdoor.routing.router import Router
from frontdoor.server.handler import Dispatcher
from frontdoor.server.static import StaticFiles
from frontdoor.server.webserver import Server
from frontdoor.testing import TestClient


@pytest.fixture
def server(site_root: Path) -> Server:
    return Server(ServerConfig(root_path=site_root, server_root="http://example.com/app"))


class TestStaticFileServing:
    async def test_serves_js_file(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/app.js")
            assert response.status == 200
            assert "javascript" in response.content_type
            assert response.text == "console.log('hello');"

    async def test_serves_css_with_charset(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/style.css")
            assert response.content_type == "text/css; charset=utf-8"

    async def test_serves_binary_file(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/logo.png")
            assert response.status == 200
            assert response.content_type == "image/png"
            assert response.body == b"\x89PNG\r\n\x1a\n"

    async def test_unknown_type_is_octet_stream(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/blob")
            assert response.content_type == "application/octet-stream"

    async def test_nested_file(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/css/main.css")
            assert response.status == 200
            assert "font-size" in response.text

    async def test_file_headers(self, server: Server, site_root: Path) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/app.js")
            mtime = (site_root / "static" / "app.js").stat().st_mtime
            assert response.header("content-length") == str(len("console.log('hello');"))
            assert response.header("last-modified") == formatdate(mtime, usegmt=True)

    async def test_directory_serves_index(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/docs")
            assert response.status == 200
            assert response.text == "<h1>Docs</h1>"


class TestStaticNotFound:
    async def test_missing_file_is_404(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/missing.js")
            assert response.status == 404
            assert "text/plain" in response.content_type

    async def test_directory_without_index_is_404(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/css")
            assert response.status == 404

    async def test_bare_prefix_is_404(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/")
            assert response.status == 404

    @pytest.mark.parametrize("path", ["/static/missing", "/static/a/b/c", "/static/index.html"])
    async def test_never_reaches_index_page(self, server: Server, path: str) -> None:
        async with TestClient(server) as client:
            response = await client.get(path)
            assert "data-base-url" not in response.text

    async def test_traversal_is_forbidden(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/../../secret.txt")
            assert response.status == 403
            assert "top secret" not in response.text

    async def test_nul_byte_is_404(self, server: Server, caplog: pytest.LogCaptureFixture) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/a\x00.js")
            assert response.status == 404
        assert "Traceback" not in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


class TestConditionalRequests:
    async def test_not_modified(self, server: Server, site_root: Path) -> None:
        mtime = (site_root / "static" / "app.js").stat().st_mtime
        async with TestClient(server) as client:
            response = await client.get(
                "/static/app.js",
                headers={"If-Modified-Since": formatdate(mtime + 60, usegmt=True)},
            )
            assert response.status == 304
            assert response.body == b""

    async def test_modified_since_older_date(self, server: Server, site_root: Path) -> None:
        mtime = (site_root / "static" / "app.js").stat().st_mtime
        async with TestClient(server) as client:
            response = await client.get(
                "/static/app.js",
                headers={"If-Modified-Since": formatdate(mtime - 3600, usegmt=True)},
            )
            assert response.status == 200

    async def test_garbage_date_is_ignored(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.get("/static/app.js", headers={"If-Modified-Since": "yesterday"})
            assert response.status == 200

    async def test_head_sends_headers_only(self, server: Server) -> None:
        async with TestClient(server) as client:
            response = await client.head("/static/app.js")
            assert response.status == 200
            assert response.body == b""
            assert response.header("content-length") == str(len("console.log('hello');"))


class TestStaticFilesHandler:
    async def test_custom_prefix_and_cache_control(self, site_root: Path) -> None:
        router = Router()
        router.add_prefix("/assets", StaticFiles(site_root / "static", cache_control="no-cache"))

        async with TestClient(Dispatcher(router)) as client:
            response = await client.get("/assets/app.js")
            assert response.status == 200
            assert response.header("cache-control") == "no-cache"

    def test_directory_is_resolved(self, site_root: Path) -> None:
        handler = StaticFiles(site_root / "static" / ".." / "static")
        assert handler.directory == (site_root / "static").resolve()
