#!/usr/bin/env python3
"""
Script to inspect and maintain the post thumbnail endpoint from the backend.

Usage:
    python scripts/thumbnail_endpoint.py --url <post_id> [--size SIZE]
    python scripts/thumbnail_endpoint.py --structure
    python scripts/thumbnail_endpoint.py --resolve <post_id> [--size SIZE]
    python scripts/thumbnail_endpoint.py --flush [--force]

Examples:
    # Print the endpoint URL for post 42 at medium size
    python scripts/thumbnail_endpoint.py --url 42 --size medium
    
    # Print where the endpoint would redirect for post 42
    python scripts/thumbnail_endpoint.py --resolve 42
    
    # Rebuild the persisted rewrite rules
    python scripts/thumbnail_endpoint.py --flush
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.services.host import content_host
from app.services.thumbnail_endpoint import (
    thumbnail_endpoint,
    setup_rewrite_rules,
    flush_rewrite_rules,
    ResolutionOutcome,
)


def print_url(post_id: int, size: str = None) -> None:
    """Print the endpoint URL for a post."""
    print(thumbnail_endpoint.build_url(post_id, size))


def print_structure() -> None:
    """Print the endpoint URL structure."""
    mode = "pretty" if content_host.is_pretty_permalinks_enabled() else "plain"
    print(f"{thumbnail_endpoint.url_structure()}  ({mode} permalinks)")


def resolve(post_id: int, size: str = None) -> None:
    """Print the thumbnail location for a post."""
    result = thumbnail_endpoint.resolve(str(post_id), size)
    
    if result.outcome != ResolutionOutcome.REDIRECT:
        print(f"✗ No thumbnail for post {post_id}", file=sys.stderr)
        sys.exit(1)
    
    print(f"✓ Post {post_id} thumbnail:")
    print(f"  Attachment: {result.thumbnail_id}")
    print(f"  Size: {result.size or 'full'}")
    print(f"  URL: {result.asset.url}")
    print(f"  Dimensions: {result.asset.width}x{result.asset.height}")


def flush(force: bool = False) -> None:
    """Register the endpoint rewrite rule and flush it if needed."""
    setup = setup_rewrite_rules(
        content_host,
        thumbnail_endpoint.prefix,
        thumbnail_endpoint.id_var,
        thumbnail_endpoint.size_var,
    )
    if force:
        setup.needs_flush = True
    
    if flush_rewrite_rules(content_host, setup):
        print(f"✓ Rewrite rules flushed ({len(content_host.current_rules())} active)")
    else:
        print("Rewrite rules are up to date")


def main():
    parser = argparse.ArgumentParser(
        description="Inspect and maintain the post thumbnail endpoint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    
    parser.add_argument(
        "--url",
        type=int,
        metavar="POST_ID",
        help="Print the endpoint URL for a post",
    )
    parser.add_argument(
        "--resolve",
        type=int,
        metavar="POST_ID",
        help="Print the thumbnail location the endpoint redirects to",
    )
    parser.add_argument(
        "--size",
        type=str,
        help="Image size name (e.g., 'thumbnail', 'medium', 'large')",
    )
    parser.add_argument(
        "--structure",
        action="store_true",
        help="Print the endpoint URL structure",
    )
    parser.add_argument(
        "--flush",
        action="store_true",
        help="Rebuild rewrite rules if the endpoint rule is missing or outdated",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Rebuild rewrite rules unconditionally (use with --flush)",
    )
    
    args = parser.parse_args()
    
    # Execute action
    if args.flush:
        flush(force=args.force)
    elif args.structure:
        print_structure()
    elif args.url is not None:
        print_url(args.url, args.size)
    elif args.resolve is not None:
        resolve(args.resolve, args.size)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
