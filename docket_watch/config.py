"""Constants and environment-driven settings for docket-watch."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError


# Docket being watched
DOCKET_ID = "NIST-2024-0001"

# API endpoints (brackets are sent literally)
REGS_API_BASE = "https://api.regulations.gov/v4"
REGS_DOCUMENTS_URL = REGS_API_BASE + "/documents?filter[docketId]={docketId}"
REGS_COMMENTS_URL = (
    REGS_API_BASE + "/comments?filter[commentOnId]={documentId}&page[size]={pageSize}&page[number]=1"
)
REGS_COMMENT_DETAIL_URL = REGS_API_BASE + "/comments/{commentId}"
PUBLIC_COMMENT_URL = "https://www.regulations.gov/comment/{commentId}"

COMMENT_PAGE_SIZE = 250
COMMENT_LIST_DELAY = 0.5  # seconds, before each per-document comment listing
POLL_INTERVAL = 5 * 60  # seconds between cycles

# Output
DEFAULT_OUTPUT_DIR = "static"
INDEX_FILENAME = "index.html"
DISPLAY_TIMEZONE = "America/New_York"

# TLS material inside CERT_PATH
CERT_FILENAME = "fullchain.pem"
KEY_FILENAME = "privkey.pem"

HTTP_PORT = 80
HTTPS_PORT = 443
PLAIN_PORT = 8080


@dataclass
class Settings:
    api_key: str
    cert_path: Optional[Path] = None

    @property
    def cert_file(self) -> Path:
        if self.cert_path is None:
            raise ConfigError("CERT_PATH is not set")
        return self.cert_path / CERT_FILENAME

    @property
    def key_file(self) -> Path:
        if self.cert_path is None:
            raise ConfigError("CERT_PATH is not set")
        return self.cert_path / KEY_FILENAME


def load_settings(environ: Optional[Mapping[str, str]] = None, require_tls: bool = True) -> Settings:
    """Read API_KEY and CERT_PATH from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)
        require_tls: Whether CERT_PATH must be present

    Returns:
        Populated Settings
    """
    env = os.environ if environ is None else environ

    api_key = (env.get("API_KEY") or "").strip()
    if not api_key:
        raise ConfigError("API_KEY environment variable is not set")

    cert_path_str = (env.get("CERT_PATH") or "").strip()
    if require_tls and not cert_path_str:
        raise ConfigError("CERT_PATH environment variable is not set (use --no-tls for local runs)")

    return Settings(
        api_key=api_key,
        cert_path=Path(cert_path_str) if cert_path_str else None,
    )
