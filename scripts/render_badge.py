#!/usr/bin/env python3
"""
Render a visit counter badge offline, or print its URL.

Nothing is read from or written to a counter store: the count is taken from
the command line. Any RenderOptions field can be given as --option NAME=VALUE.

Examples:
    python scripts/render_badge.py --count 42 -o badge.svg
    python scripts/render_badge.py --count 7 --option label=Downloads --option width=180
    python scripts/render_badge.py --url home --option background_counter=4c1
"""
import argparse
import logging
import sys
from pathlib import Path

# Allow running from a source checkout without installing
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from visit_counter.models import RenderOptions  # noqa: E402
from visit_counter.render import build_badge_url, render_badge  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_option_pairs(pairs):
    """Turn ['label=Hits', 'width=180'] into RenderOptions (None if empty)."""
    values = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"Expected NAME=VALUE, got {pair!r}")
        key = key.strip().replace("-", "_")
        if key not in RenderOptions.field_names():
            raise ValueError(f"Unknown option: {key}")
        values[key] = value
    return RenderOptions.from_mapping(values) if values else None


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render a visit counter badge")
    parser.add_argument("--count", type=int, default=0, help="Counter value to show")
    parser.add_argument("--option", action="append", metavar="NAME=VALUE",
                        help="Render option (repeatable)")
    parser.add_argument("-o", "--output", help="Write the SVG to this file instead of stdout")
    parser.add_argument("--url", metavar="NAME", help="Print the badge URL for counter NAME and exit")
    parser.add_argument("--base-url", default="", help="Origin prepended to --url output")
    args = parser.parse_args(argv)

    try:
        options = parse_option_pairs(args.option)
    except ValueError as e:
        parser.error(str(e))

    if args.url:
        print(build_badge_url(args.url, options, base_url=args.base_url))
        return 0

    if args.count < 0:
        parser.error("--count must be non-negative")

    svg = render_badge(args.count, options)
    if args.output:
        Path(args.output).write_text(svg, encoding="utf-8")
        logger.info(f"Wrote badge to {args.output}")
    else:
        sys.stdout.write(svg + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
