"""Error types shared by the fetch stages, the renderer and the CLI."""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    DECODE = "decode"
    FILESYSTEM = "filesystem"
    TIMEZONE = "timezone"


class PipelineError(Exception):
    """A failure that aborts the current cycle.

    Args:
        kind: Which class of failure occurred.
        message: Human-readable detail.
        stage: Optional label for where it happened (e.g. "comment TEST-0001").
    """

    def __init__(self, kind: ErrorKind, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.stage = stage

    def with_stage(self, stage: str) -> "PipelineError":
        return PipelineError(self.kind, self.message, stage=stage)

    def __str__(self) -> str:
        if self.stage:
            return f"{self.stage}: {self.kind.value}: {self.message}"
        return f"{self.kind.value}: {self.message}"


class ConfigError(Exception):
    """Raised when a required environment setting is missing."""
