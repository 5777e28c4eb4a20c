from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from quatfractal.config import ENCODERS, RenderSettings, load_config, settings_from_config
from quatfractal.pipeline import render_sequence
from quatfractal.renderers.cpu import renderer_info
from quatfractal.sink import PpmDirectorySink
from quatfractal.util.logging_setup import (
    DEFAULT_LOG_FILE,
    configure_root_logging,
    create_log_queue,
    get_logger,
    start_queue_listener,
)
from quatfractal.util.manifest import build_manifest, git_commit, write_manifest
from quatfractal.video.encoders import cleanup_frames, collect_frames, encode_with_ffmpeg, encode_with_opencv

DEFAULT_MANIFEST = os.path.join("artifacts", "run.json")


def parse_frames(spec: str) -> List[int]:
    """'0,4,10-12' -> [0, 4, 10, 11, 12]"""
    out = []
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            lo, hi = part.split("-", 1)
            lo_i, hi_i = int(lo), int(hi)
            if hi_i < lo_i:
                raise ValueError(f"Bad frame range: {part}")
            out.extend(range(lo_i, hi_i + 1))
        else:
            out.append(int(part))
    if not out:
        raise ValueError("No frames selected.")
    return out


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="quatfractal", description="Quaternion Newton fractal animation renderer.")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--workers", type=int, default=None, help="Worker processes per frame (overrides config).")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default=DEFAULT_LOG_FILE, help="Log file path (rotating). Set empty to disable file logging.")
    p.add_argument("--manifest", type=str, default=DEFAULT_MANIFEST, help="Run manifest path. Set empty to skip it.")
    p.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render PPM frames.")
    r.add_argument("--frames-dir", type=str, default=None, help="Override frames_dir from config.")
    r.add_argument("--frames", type=str, default=None, help="Subset of frames, e.g. '0,5,10-12'.")

    e = sub.add_parser("encode", help="Assemble rendered frames into an animation.")
    e.add_argument("--input-dir", type=str, default=None, help="Frames directory (defaults to config frames_dir).")
    e.add_argument("--output", type=str, default=None, help="Output file (defaults to config output).")
    e.add_argument("--fps", type=int, default=None, help="Frames per second (defaults to config fps).")
    e.add_argument("--encoder", type=str, default=None, choices=list(ENCODERS), help="Encoder backend.")

    a = sub.add_parser("run", help="Render all frames, encode them and delete the frames.")
    a.add_argument("--frames-dir", type=str, default=None, help="Override frames_dir from config.")
    a.add_argument("--output", type=str, default=None, help="Output file (defaults to config output).")
    a.add_argument("--keep-frames", action="store_true", help="Keep the PPM frames after encoding.")

    return p


def _encode(settings: RenderSettings, *, input_dir: str, output: str, fps: int, encoder: str) -> None:
    collect_frames(input_dir, settings.frame_prefix)
    if encoder == "opencv":
        encode_with_opencv(input_dir=input_dir, output_file=output, fps=fps, prefix=settings.frame_prefix)
    else:
        pattern = os.path.join(input_dir, f"{settings.frame_prefix}_%03d.ppm")
        encode_with_ffmpeg(input_pattern=pattern, output_file=output, fps=fps)


def _render(args, settings: RenderSettings, queue, log_level: int, frames=None) -> PpmDirectorySink:
    sink = PpmDirectorySink(settings)
    with sink:
        render_sequence(settings=settings, sink=sink, log_queue=queue, log_level=log_level,
                        frames=frames, progress=not args.no_progress)
    if args.manifest:
        manifest = build_manifest(settings=settings, renderer_info=renderer_info(settings), commit=git_commit())
        write_manifest(args.manifest, manifest)
        get_logger().info("Run manifest written: %s", args.manifest)
    return sink


def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    listener_logger = configure_root_logging(level=log_level, console=True, log_file=log_file)

    queue = create_log_queue()
    listener = start_queue_listener(queue, listener_logger)
    logger = get_logger()

    try:
        cfg = load_config(args.config)
        if args.workers is not None:
            cfg["workers"] = args.workers
        if getattr(args, "frames_dir", None):
            cfg["frames_dir"] = args.frames_dir
        if getattr(args, "output", None):
            cfg["output"] = args.output
        settings = settings_from_config(cfg)

        if args.cmd == "render":
            frames = parse_frames(args.frames) if args.frames else None
            _render(args, settings, queue, log_level, frames)
            return 0

        if args.cmd == "encode":
            _encode(
                settings,
                input_dir=args.input_dir or settings.frames_dir,
                output=settings.output,
                fps=args.fps or settings.fps,
                encoder=args.encoder or settings.encoder,
            )
            return 0

        if args.cmd == "run":
            sink = _render(args, settings, queue, log_level)
            _encode(settings, input_dir=settings.frames_dir, output=settings.output,
                    fps=settings.fps, encoder=settings.encoder)
            if not args.keep_frames:
                cleanup_frames(sink.paths)
            logger.info("Done: %s", settings.output)
            return 0

        raise RuntimeError("Unknown command.")
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("%s failed: %s", args.cmd, e)
        return 1
    finally:
        listener.stop()


if __name__ == "__main__":
    sys.exit(main())
