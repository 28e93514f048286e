"""Command-line entry point: serve the page and keep it current."""
import argparse
import functools
import sys
from typing import List, Optional

from .cache import CommentCache
from .config import DEFAULT_OUTPUT_DIR, DOCKET_ID, POLL_INTERVAL, load_settings
from .errors import ConfigError
from .pipeline import IngestPipeline
from .regs_client import RegsGovClient
from .render import write_index_html
from .server import start_https_site, start_plain_site


def print_cache(cache: CommentCache) -> None:
    for comment_id, entry in sorted(cache.snapshot().items()):
        print(f"Comment {comment_id}:")
        print(f"\tAttachments: {list(entry.attachments)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docket-watch",
        description=f"Poll regulations.gov for new comments on docket {DOCKET_ID} and publish them as HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  API_KEY     Regulations.gov API key (required)
  CERT_PATH   Directory holding fullchain.pem and privkey.pem (required unless --no-tls/--once)

Examples:
  # Production: redirect :80 -> :443 and refresh every 5 minutes
  API_KEY=... CERT_PATH=/etc/letsencrypt/live/example.org docket-watch

  # Local: plain HTTP on :8080
  API_KEY=... docket-watch --no-tls

  # One cycle, write static/index.html, print the cache and exit
  API_KEY=... docket-watch --once
        """,
    )
    parser.add_argument("--once", action="store_true", help="Run a single cycle, render, print the cache and exit")
    parser.add_argument("--no-tls", action="store_true", help="Serve plain HTTP on port 8080 instead of 80/443")
    parser.add_argument("--interval", type=float, default=POLL_INTERVAL, help="Seconds between cycles (default: 300)")
    parser.add_argument("--output-dir", type=str, default=DEFAULT_OUTPUT_DIR, help="Directory for index.html (default: static)")
    parser.add_argument("--request-timeout", type=float, default=None, help="Per-request timeout in seconds (default: none)")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Bind address for the listeners")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(require_tls=not (args.no_tls or args.once))
    except ConfigError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    cache = CommentCache()
    client = RegsGovClient(settings.api_key, timeout=args.request_timeout)
    pipeline = IngestPipeline(client, cache)
    publish = functools.partial(write_index_html, output_dir=args.output_dir)

    print(f"Watching docket {DOCKET_ID}")
    print(f"Output directory: {args.output_dir}")

    with client:
        if args.once:
            pipeline.run_once(publish)
            print_cache(cache)
            return

        try:
            if args.no_tls:
                start_plain_site(args.output_dir, host=args.host)
            else:
                start_https_site(settings, args.output_dir, host=args.host)
        except OSError as exc:
            print(f"ERROR: cannot prepare {args.output_dir}: {exc}")
            sys.exit(1)

        try:
            pipeline.run_forever(publish, interval=args.interval)
        except KeyboardInterrupt:
            print(f"\n⚠ Interrupted by user ({len(cache):,} comments cached)")


if __name__ == "__main__":
    main()
