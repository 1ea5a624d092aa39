"""Command line — ``convo-flow transcript.json`` writes an SVG or JSON layout."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from convo_flow.api import layout_transcript
from convo_flow.errors import ConvoFlowError
from convo_flow.layout import LayoutConfig
from convo_flow.layout.types import H_SPACING, V_SPACING
from convo_flow.renderers import SvgRenderer

logger = logging.getLogger("convo_flow")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="convo-flow",
        description="Draw a branching ChatGPT conversation as a node-and-edge diagram.",
    )
    parser.add_argument("input", help="transcript JSON file (shared or export format), or - for stdin")
    parser.add_argument("-o", "--output", help="output file (default: stdout)")
    parser.add_argument("--format", choices=("svg", "json"), default="svg", help="output format")
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="skip the referential-integrity and ordering checks",
    )
    parser.add_argument("--h-spacing", type=float, default=H_SPACING, help="horizontal distance per depth level")
    parser.add_argument("--v-spacing", type=float, default=V_SPACING, help="vertical distance between rows")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = LayoutConfig(horizontal_spacing=args.h_spacing, vertical_spacing=args.v_spacing)

    try:
        text = sys.stdin.read() if args.input == "-" else Path(args.input).read_text(encoding="utf-8")
        result = layout_transcript(text, cfg, validate=not args.no_validate)
    except OSError as exc:
        print(f"error: cannot read {args.input}: {exc.strerror or exc}", file=sys.stderr)
        return 1
    except ConvoFlowError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        out = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    else:
        out = SvgRenderer().render(result)

    if args.output:
        Path(args.output).write_text(out + "\n", encoding="utf-8")
        logger.info("wrote %d nodes, %d edges to %s", len(result.nodes), len(result.edges), args.output)
    else:
        sys.stdout.write(out + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
