from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from mandeltile.config import RASTER, SEGMENTS, load_config, normalise_config
from mandeltile.errors import MandeltileError
from mandeltile.pipeline import render_raster, render_segments
from mandeltile.stitch import stitch_segments
from mandeltile.util.confirm import choose_confirmation
from mandeltile.util.logging_setup import configure_root_logging, get_logger

def _add_silence(p: argparse.ArgumentParser) -> None:
    p.add_argument("-s", "--silence", nargs="?", const="progress", default=None, choices=["progress", "ALL"],
                   help="Hide percentage progress report. With --silence=ALL, silence all output.")

def _add_workers(p: argparse.ArgumentParser) -> None:
    p.add_argument("--workers", type=int, default=None, help="Worker processes (default: config, 1).")

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mandeltile", description="Mandelbrot set renderer: one picture or a resumable grid of segments.")
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. Rendering parameters not given use built-in defaults.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="", help="Rotating log file path. Empty disables file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render the whole picture into one image.")
    _add_silence(r)
    r.add_argument("-y", "--overwrite", action="store_true", help="Overwrite an existing image without asking.")
    r.add_argument("--output-dir", type=str, default=None, help="Override output_dir from config.")
    _add_workers(r)

    s = sub.add_parser("segments", help="Render the picture as a grid of square segments, skipping ones already on disk.")
    _add_silence(s)
    s.add_argument("-o", "--overwrite", action="store_true", help="Overwrite existing segments instead of leaving them as they are.")
    s.add_argument("--segments-dir", type=str, default=None, help="Override segments_dir from config.")
    _add_workers(s)

    st = sub.add_parser("stitch", help="Join a finished segment grid into one image.")
    st.add_argument("--segments-dir", type=str, default=None, help="Override segments_dir from config.")
    st.add_argument("--output", type=str, default=None, help="Output PNG (defaults to output_dir/mandelbrot_<density>_<iterations>_stitched.png).")

    return p

def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    silence = getattr(args, "silence", None)
    if silence:
        out["report_progress"] = False
        if silence == "ALL":
            out["silence_output"] = True
    if getattr(args, "workers", None) is not None:
        out["workers"] = args.workers
    if getattr(args, "output_dir", None):
        out["output_dir"] = args.output_dir
    if getattr(args, "segments_dir", None):
        out["segments_dir"] = args.segments_dir
    if args.cmd == "render" and args.overwrite:
        out["overwrite_existing"] = True
    if args.cmd == "segments" and args.overwrite:
        out["accept_existing"] = False
    return out

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    configure_root_logging(level=log_level, console=True, log_file=log_file)
    logger = get_logger()

    try:
        cfg_dict = load_config(args.config)
        cfg_dict.update(_overrides(args))
        cfg = normalise_config(cfg_dict, SEGMENTS if args.cmd in ("segments", "stitch") else RASTER)

        if args.cmd == "render":
            render_raster(cfg, confirm=choose_confirmation(silence_output=cfg.silence_output))
            return 0

        if args.cmd == "segments":
            report = render_segments(cfg)
            logger.debug("Segments rendered=%s skipped=%s", len(report.rendered), len(report.skipped))
            return 0

        if args.cmd == "stitch":
            stitch_segments(cfg, args.output)
            return 0

        raise RuntimeError("Unknown command.")
    except MandeltileError as e:
        logger.error("%s", e)
        return 1
