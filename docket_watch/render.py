"""Render the cached comments as a static HTML page."""
import html
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import DEFAULT_OUTPUT_DIR, DISPLAY_TIMEZONE, INDEX_FILENAME
from .errors import ErrorKind, PipelineError
from .models import CacheEntry


PAGE_HEAD = """<html>
<head>
    <title>Comments</title>
    <style>
    table {
      width: 100%;
      border-collapse: collapse;
    }

    th, td {
      border: 1px solid black;
      padding: 8px;
      text-align: left;
    }

    th {
      background-color: #f2f2f2;
    }
    </style>
    <script>
    function copyTableToClipboard() {
        var range = document.createRange();
        range.selectNode(document.getElementById("commentsTable"));
        window.getSelection().removeAllRanges();
        window.getSelection().addRange(range);
        document.execCommand("copy");
        window.getSelection().removeAllRanges();
        alert("Table copied to clipboard!");
    }
    </script>
</head>
<body>
    <p><i>Data last updated: {last_updated}</i></p>
    <button onclick="copyTableToClipboard()">Copy HTML Table to Clipboard</button>
    <table id="commentsTable" border="1">
        <tr>
            <th>Comment URL</th>
            <th>Attachments</th>
            <th>First Name</th>
            <th>Last Name</th>
            <th>Email</th>
            <th>Organization</th>
        </tr>
"""

PAGE_TAIL = """    </table>
</body>
</html>
"""


def attachment_filename(url: str) -> str:
    """Label for an attachment link: everything after the last '/'."""
    return url[url.rfind("/") + 1:]


def format_last_updated(now: Optional[datetime] = None, tz_name: str = DISPLAY_TIMEZONE) -> str:
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise PipelineError(ErrorKind.TIMEZONE, f"cannot load time zone {tz_name}: {exc}") from exc

    moment = now.astimezone(tz) if now is not None else datetime.now(tz)
    return moment.strftime("%Y-%m-%d %H:%M:%S %Z")


def _row(entry: CacheEntry) -> str:
    record = entry.record
    esc = html.escape
    links = "".join(
        f'<a href="{esc(url)}">{esc(attachment_filename(url))}</a><br>'
        for url in entry.attachments
    )
    return (
        "        <tr>\n"
        f'            <td><a href="{esc(record.public_url)}">{esc(record.comment_id)}</a></td>\n'
        f"            <td>{links}</td>\n"
        f"            <td>{esc(record.first_name)}</td>\n"
        f"            <td>{esc(record.last_name)}</td>\n"
        f"            <td>{esc(record.email)}</td>\n"
        f"            <td>{esc(record.organization)}</td>\n"
        "        </tr>\n"
    )


def render_html(entries: Dict[str, CacheEntry], last_updated: str) -> str:
    """Build the page: one row per entry, ordered by the comment's self link."""
    ordered: List[CacheEntry] = sorted(
        entries.values(), key=lambda e: (e.record.self_link, e.comment_id)
    )
    parts = [PAGE_HEAD.replace("{last_updated}", html.escape(last_updated))]
    parts.extend(_row(entry) for entry in ordered)
    parts.append(PAGE_TAIL)
    return "".join(parts)


def write_index_html(
    entries: Dict[str, CacheEntry],
    output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
    now: Optional[datetime] = None,
    tz_name: str = DISPLAY_TIMEZONE,
) -> Path:
    """Regenerate <output_dir>/index.html from a cache snapshot.

    The page is written to a temporary file and renamed into place so the
    static server never serves a partial page.

    Returns:
        Path of the written page
    """
    last_updated = format_last_updated(now, tz_name)
    page = render_html(entries, last_updated)

    out_dir = Path(output_dir)
    target = out_dir / INDEX_FILENAME
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".index-", suffix=".html", dir=str(out_dir))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(page)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as exc:
        raise PipelineError(ErrorKind.FILESYSTEM, f"cannot write {target}: {exc}") from exc

    print(f"HTML file generated: {target} ({len(entries):,} comments)")
    return target
