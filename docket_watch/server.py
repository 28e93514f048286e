"""
Static site listeners.

Port 80 redirects every request to its HTTPS equivalent; port 443 serves the
rendered output directory over TLS. A plain listener on 8080 is available
for local runs without certificates.
"""
import os
import sys
import threading
from pathlib import Path
from typing import List, Optional, Union

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from .config import HTTP_PORT, HTTPS_PORT, PLAIN_PORT, Settings


REDIRECT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def https_url_for(request: Request) -> str:
    """https://{Host}{path}[?{query}] for an incoming request.

    Path and query are taken as sent on the wire, still percent-encoded.
    """
    host = request.headers.get("host") or request.url.netloc
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1") if raw_path else request.url.path
    target = f"https://{host}{path}"
    query = request.scope.get("query_string") or b""
    if query:
        target += f"?{query.decode('latin-1')}"
    return target


def build_redirect_app() -> FastAPI:
    app = FastAPI(title="docket-watch redirect", docs_url=None, redoc_url=None, openapi_url=None)

    @app.api_route("/{path:path}", methods=REDIRECT_METHODS, include_in_schema=False)
    async def redirect_to_https(request: Request, path: str) -> RedirectResponse:
        return RedirectResponse(https_url_for(request), status_code=301)

    return app


def build_site_app(static_dir: Union[str, Path]) -> FastAPI:
    """Serve the output directory as the document root (index.html at /)."""
    app = FastAPI(title="docket-watch", docs_url=None, redoc_url=None, openapi_url=None)
    app.mount("/", StaticFiles(directory=str(static_dir), html=True, check_dir=False), name="static")
    return app


def _run_listener(server: uvicorn.Server, name: str) -> None:
    try:
        server.run()
    finally:
        # A listener that stops takes the whole process down.
        print(f"FATAL: {name} listener stopped", file=sys.stderr, flush=True)
        os._exit(1)


def start_listener(
    app: FastAPI,
    port: int,
    host: str = "0.0.0.0",
    ssl_certfile: Optional[str] = None,
    ssl_keyfile: Optional[str] = None,
) -> threading.Thread:
    """Run a uvicorn server for `app` in a daemon thread."""
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        ssl_certfile=ssl_certfile,
        ssl_keyfile=ssl_keyfile,
        log_level="info",
    )
    server = uvicorn.Server(config)
    name = f"{'https' if ssl_certfile else 'http'}:{port}"
    thread = threading.Thread(target=_run_listener, args=(server, name), name=name, daemon=True)
    thread.start()
    print(f"Starting {name} listener on {host}")
    return thread


def start_https_site(settings: Settings, static_dir: Union[str, Path], host: str = "0.0.0.0") -> List[threading.Thread]:
    """Start the redirecting HTTP listener and the TLS static listener."""
    Path(static_dir).mkdir(parents=True, exist_ok=True)
    redirect = start_listener(build_redirect_app(), HTTP_PORT, host=host)
    site = start_listener(
        build_site_app(static_dir),
        HTTPS_PORT,
        host=host,
        ssl_certfile=str(settings.cert_file),
        ssl_keyfile=str(settings.key_file),
    )
    return [redirect, site]


def start_plain_site(static_dir: Union[str, Path], host: str = "0.0.0.0", port: int = PLAIN_PORT) -> List[threading.Thread]:
    Path(static_dir).mkdir(parents=True, exist_ok=True)
    return [start_listener(build_site_app(static_dir), port, host=host)]
