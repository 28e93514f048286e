"""HTTP client for the Regulations.gov v4 API."""
from typing import Any, Dict, Optional

import requests

from .errors import ErrorKind, PipelineError


class RegsGovClient:
    """Shared HTTP session that signs every request with the API key.

    There is no retry or backoff: any transport failure, non-2xx status or
    undecodable body is raised as a PipelineError for the caller to handle.
    """

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize client.

        Args:
            api_key: Value sent in the X-Api-Key header
            session: Pre-built session (tests inject a fake one)
            timeout: Per-request timeout in seconds; None waits indefinitely
        """
        if not api_key:
            raise ValueError("Must provide an API key")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"User-Agent": "docket-watch/0.1"})

    def __enter__(self) -> "RegsGovClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def request_json(self, url: str) -> Dict[str, Any]:
        """GET a URL and return its decoded JSON object."""
        headers = {"X-Api-Key": self.api_key}
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PipelineError(ErrorKind.TRANSPORT, f"GET {url} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise PipelineError(
                ErrorKind.DECODE,
                f"GET {url} returned HTTP {response.status_code}",
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise PipelineError(ErrorKind.DECODE, f"GET {url} returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise PipelineError(
                ErrorKind.DECODE,
                f"GET {url} returned {type(data).__name__}, expected an object",
            )
        return data
