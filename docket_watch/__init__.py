"""Watch a regulations.gov docket and publish its comments as a static page."""
from .cache import CommentCache
from .errors import ConfigError, ErrorKind, PipelineError
from .models import CacheEntry, CommentRecord
from .pipeline import CycleSummary, IngestPipeline
from .regs_client import RegsGovClient

__version__ = "0.1.0"
