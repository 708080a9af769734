"""Main entry point — ``clipcmd`` / ``python3 -m clipcmd.app.main``.

Usage::

    clipcmd render input.mp4 out.mov --trim 10 20 --size 400 300 --fps 48
    clipcmd render input.mp4 out.mov --plan edits.yaml --print-command
    clipcmd concat part1.mov part2.mov --output joined.mov
"""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path

from clipcmd.app.bootstrap import Toolkit, create_toolkit, load_settings
from clipcmd.app.settings import ClipCmdSettings
from clipcmd.application.edit_plan import apply_edit_plan
from clipcmd.application.source_descriptor import SourceDescriptor
from clipcmd.domain.errors import ClipCmdError
from clipcmd.infrastructure.adapters.edit_plan_loader import load_edit_plan

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clipcmd", description="Build and run ffmpeg edit commands.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Apply edits to one source video")
    render.add_argument("input", type=Path, help="Source video")
    render.add_argument("output", type=Path, help="Output file; its extension selects the container")
    render.add_argument("--trim", nargs=2, type=float, metavar=("START", "END"), help="Keep START..END seconds")
    render.add_argument("--start", type=float, help="Start offset in seconds")
    render.add_argument("--end", type=float, help="End offset in seconds")
    render.add_argument("--plan", type=Path, help="YAML edit plan applied in order")
    render.add_argument("--crop", nargs=4, type=int, metavar=("X", "Y", "W", "H"), help="Crop rectangle")
    render.add_argument("--size", nargs=2, type=int, metavar=("W", "H"), help="Scale to W x H")
    render.add_argument("--fps", type=int, help="Output frame rate")
    render.add_argument("--bitrate", type=int, help="Output video bitrate in bits/second")
    render.add_argument("--mute", action="store_true", help="Drop the audio track")
    render.add_argument("--print-command", action="store_true", help="Print the ffmpeg command instead of running it")

    concat = subparsers.add_parser("concat", help="Join rendered clips without re-encoding")
    concat.add_argument("clips", nargs="+", type=Path, help="Clips in output order")
    concat.add_argument("--output", "-o", required=True, help="Output file name, placed next to the first clip")
    concat.add_argument("--print-command", action="store_true", help="Print the ffmpeg command instead of running it")

    return parser


def apply_cli_edits(video: SourceDescriptor, args: argparse.Namespace) -> SourceDescriptor:
    """Apply flag edits: trim bounds, plan steps, crop, size, fps, bitrate, mute."""
    if args.trim is not None:
        video.trim(*args.trim)
    if args.start is not None:
        video.set_start(args.start)
    if args.end is not None:
        video.set_end(args.end)
    if args.plan is not None:
        apply_edit_plan(video, load_edit_plan(args.plan))
    if args.crop is not None:
        video.crop(*args.crop)
    if args.size is not None:
        video.set_size(*args.size)
    if args.fps is not None:
        video.set_frame_rate(args.fps)
    if args.bitrate is not None:
        video.set_bitrate(args.bitrate)
    if args.mute:
        video.mute()
    return video


def _run_render(toolkit: Toolkit, args: argparse.Namespace) -> None:
    video = apply_cli_edits(toolkit.load(args.input), args)
    if args.print_command:
        print(shlex.join(video.command_line(args.output)))
        return
    output = video.render(args.output, stderr=sys.stderr)
    logger.info("Wrote %s", output)


def _run_concat(toolkit: Toolkit, args: argparse.Namespace) -> None:
    clip = toolkit.new_clip(args.clips)
    if args.print_command:
        print(shlex.join(clip.command_line(args.output)))
        return
    output = clip.concatenate(args.output, stderr=sys.stderr)
    logger.info("Wrote %s", output)


def main(argv: Sequence[str] | None = None, settings: ClipCmdSettings | None = None) -> int:
    """Parse arguments, run the chosen command, and return the exit status."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(settings)
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else settings.log_level.upper(),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stderr,
        )
        toolkit = create_toolkit(settings)
        if args.command == "render":
            _run_render(toolkit, args)
        else:
            _run_concat(toolkit, args)
    except ClipCmdError as exc:
        print(f"clipcmd: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
