#!/usr/bin/env python3
"""sitegen: static site build CLI.

Usage:
    python main.py                          Build the site once
    python main.py --posts-dir content      Override POSTS_DIR
    python main.py --output-dir public      Override OUTPUT_DIR
    python main.py --base-url https://...   Override BASE_URL
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

from config import BuildConfig, ConfigurationError
from errors import SiteBuildError
from pipeline.build import run_build

logger = logging.getLogger("sitegen")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _setup_logging(cfg: BuildConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitegen",
        description="Build the personal site: homepage, blog, feeds, preview images",
    )
    parser.add_argument("--base-url", type=str, default=None, help="Overrides BASE_URL")
    parser.add_argument("--posts-dir", type=Path, default=None, help="Overrides POSTS_DIR")
    parser.add_argument("--output-dir", type=Path, default=None, help="Overrides OUTPUT_DIR")
    parser.add_argument("--blog-path", type=str, default=None, help="Overrides BLOG_PATH")
    parser.add_argument("--log-level", type=str, default=None, help="Overrides LOG_LEVEL")
    return parser


def resolve_config(args: argparse.Namespace) -> BuildConfig:
    """Environment first, then any command-line overrides."""
    overrides = {
        "base_url": args.base_url,
        "posts_dir": args.posts_dir,
        "output_dir": args.output_dir,
        "blog_path": args.blog_path,
        "log_level": args.log_level,
    }
    cfg = BuildConfig.from_env()
    return dataclasses.replace(cfg, **{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = resolve_config(args)
    except ConfigurationError as exc:
        parser.exit(1, f"sitegen: {exc}\n")

    _setup_logging(cfg)

    try:
        asyncio.run(run_build(cfg))
    except SiteBuildError as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
