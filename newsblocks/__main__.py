"""CLI entry point: python -m newsblocks PATH|- [options]"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from collections import Counter
from pathlib import Path

from newsblocks.config import PRESETS, DedupMode, preset
from newsblocks.errors import ProfileError, RootNotFoundError
from newsblocks.extractors.feed import parse_feed
from newsblocks.extractors.markdown import format_post_markdown
from newsblocks.items import NewsPost
from newsblocks.parser import PostParser
from newsblocks.profiles import SiteProfile, load_profile

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="newsblocks",
        description=(
            "Convert a news article page (or a feed) into ordered content blocks.\n"
            "Reads from a file or stdin; never touches the network."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("path", metavar="PATH",
                        help="HTML (or feed XML with --feed) file to read, or '-' for stdin")
    parser.add_argument("--base-url", default="", metavar="URL",
                        help="Article URL used to resolve relative links and pick a profile")
    parser.add_argument("--root", default=None, metavar="CSS",
                        help="CSS selector of the article body (default: body)")
    parser.add_argument("--remove", action="append", default=[], metavar="CSS",
                        help="Remove nodes matching this selector before extraction (repeatable)")
    parser.add_argument("--unwrap", action="append", default=[], metavar="TAG",
                        help="Replace this tag with its children before extraction (repeatable)")
    parser.add_argument("--summary", default=None, metavar="TEXT",
                        help="Article description to de-duplicate against "
                             "(default: the page's meta description)")
    parser.add_argument("--profile", default=None, metavar="YAML",
                        help="YAML site profile file; the entry matching --base-url is used")
    parser.add_argument("--preset", default=None, choices=sorted(PRESETS),
                        help="Engine preset")
    parser.add_argument("--dedup-mode", default=None, choices=[m.value for m in DedupMode],
                        help="Summary de-duplication policy")
    parser.add_argument("--threshold", type=float, default=None, metavar="N",
                        help="Similarity threshold in percent (similarity mode)")
    parser.add_argument("--entities", default=None, metavar="TAGS",
                        help="Comma-separated tags that force container recursion "
                             "(e.g. 'a,img,blockquote')")
    parser.add_argument("--feed", action="store_true", default=False,
                        help="Treat input as an RSS/Atom feed and build a post per entry")
    parser.add_argument("--format", default="json", choices=["json", "markdown"],
                        help="Output format (default: json)")
    parser.add_argument("--stats", action="store_true", default=False,
                        help="Print a block count summary to stderr")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _build_profile(args: argparse.Namespace) -> SiteProfile:
    """Return the site profile with CLI flags applied over it.

    Raises ProfileError or ValueError for unusable settings.
    """
    if args.profile:
        profile = load_profile(args.profile, args.base_url)
    else:
        profile = SiteProfile(name="cli", base_url=args.base_url)

    config = preset(args.preset) if args.preset else profile.config
    config = config.with_options(
        dedup_mode=args.dedup_mode,
        similarity_threshold=args.threshold,
        parsed_entity_tags=args.entities,
    )
    return dataclasses.replace(
        profile,
        root_selector=args.root or profile.root_selector,
        remove=profile.remove + tuple(args.remove),
        unwrap=profile.unwrap + tuple(args.unwrap),
        config=config,
    )


def _render(posts: list[NewsPost], fmt: str, as_list: bool) -> str:
    if fmt == "markdown":
        return "\n\n".join(format_post_markdown(p) for p in posts)
    data = [p.model_dump(mode="json", exclude_none=True) for p in posts]
    return json.dumps(data if as_list else data[0], ensure_ascii=False, indent=2)


def _print_stats(posts: list[NewsPost]) -> None:
    from rich.console import Console
    from rich.table import Table

    counts = Counter(block.kind.value for post in posts for block in post.items)
    table = Table(title="Extracted blocks")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right", style="green")
    for kind, count in counts.most_common():
        table.add_row(kind, str(count))
    table.add_row("[bold]total[/bold]", f"[bold]{sum(counts.values())}[/bold]")
    console = Console(stderr=True)
    console.print(f"Posts: {len(posts)}")
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT, stream=sys.stderr)

    try:
        source = _read_input(args.path)
    except OSError as exc:
        parser.error(f"cannot read {args.path}: {exc}")

    try:
        profile = _build_profile(args)
    except (ProfileError, ValueError) as exc:
        parser.error(str(exc))

    post_parser = PostParser(profile, strict=True)
    if args.feed:
        entries = parse_feed(source, base_url=args.base_url or profile.base_url)
        if not entries:
            print("ERROR: no feed entries found", file=sys.stderr)
            return 1
        posts = [post_parser.parse_entry(entry) for entry in entries]
    else:
        try:
            post = post_parser.parse(source, args.base_url, description=args.summary)
        except RootNotFoundError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        posts = [post]

    print(_render(posts, args.format, as_list=args.feed))
    if args.stats:
        _print_stats(posts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
