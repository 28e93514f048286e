"""Tests for the redirect and static-site apps."""
from pathlib import Path

from fastapi.testclient import TestClient

from docket_watch import server
from docket_watch.config import HTTP_PORT, HTTPS_PORT, PLAIN_PORT, Settings
from docket_watch.server import build_redirect_app, build_site_app


def test_http_request_redirects_to_https_with_query() -> None:
    client = TestClient(build_redirect_app())

    response = client.get("http://host/path?q=1", follow_redirects=False)

    assert response.status_code == 301
    assert response.headers["location"] == "https://host/path?q=1"


def test_root_and_other_methods_redirect() -> None:
    client = TestClient(build_redirect_app())

    root = client.get("http://example.org/", follow_redirects=False)
    post = client.post("http://example.org/submit", follow_redirects=False)

    assert root.headers["location"] == "https://example.org/"
    assert post.status_code == 301
    assert post.headers["location"] == "https://example.org/submit"


def test_site_serves_index_at_root(tmp_path) -> None:
    (tmp_path / "index.html").write_text("<html><body>comments</body></html>", encoding="utf-8")
    client = TestClient(build_site_app(tmp_path))

    response = client.get("/")

    assert response.status_code == 200
    assert "comments" in response.text


def test_site_missing_file_is_404(tmp_path) -> None:
    client = TestClient(build_site_app(tmp_path))

    assert client.get("/missing.html").status_code == 404


def test_redirect_keeps_percent_encoded_path() -> None:
    client = TestClient(build_redirect_app())

    response = client.get("http://host/a%3Fb?q=1", follow_redirects=False)

    assert response.status_code == 301
    assert response.headers["location"] == "https://host/a%3Fb?q=1"


def test_redirect_keeps_encoded_slash() -> None:
    client = TestClient(build_redirect_app())

    response = client.get("http://host/docs%2Fv1/index.html", follow_redirects=False)

    assert response.headers["location"] == "https://host/docs%2Fv1/index.html"


class ListenerRecorder:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, app, port, host="0.0.0.0", ssl_certfile=None, ssl_keyfile=None):
        self.calls.append(
            {"app": app, "port": port, "host": host, "ssl_certfile": ssl_certfile, "ssl_keyfile": ssl_keyfile}
        )
        return object()


def test_https_site_binds_redirect_and_tls_listeners(monkeypatch, tmp_path) -> None:
    recorder = ListenerRecorder()
    monkeypatch.setattr(server, "start_listener", recorder)
    settings = Settings(api_key="k", cert_path=Path("/etc/letsencrypt/live/example.org"))

    threads = server.start_https_site(settings, tmp_path / "static", host="127.0.0.1")

    assert len(threads) == 2
    assert [call["port"] for call in recorder.calls] == [HTTP_PORT, HTTPS_PORT]
    redirect, site = recorder.calls
    assert redirect["ssl_certfile"] is None
    redirect_client = TestClient(redirect["app"])
    assert redirect_client.get("http://example.org/", follow_redirects=False).status_code == 301
    assert site["ssl_certfile"] == str(settings.cert_file)
    assert site["ssl_keyfile"] == str(settings.key_file)
    assert site["ssl_certfile"].endswith("fullchain.pem")
    assert site["ssl_keyfile"].endswith("privkey.pem")
    assert site["host"] == "127.0.0.1"
    assert (tmp_path / "static").is_dir()


def test_plain_site_binds_only_plain_port(monkeypatch, tmp_path) -> None:
    recorder = ListenerRecorder()
    monkeypatch.setattr(server, "start_listener", recorder)

    server.start_plain_site(tmp_path / "static")

    assert [call["port"] for call in recorder.calls] == [PLAIN_PORT]
    assert recorder.calls[0]["ssl_certfile"] is None
