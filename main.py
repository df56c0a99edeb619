#!/usr/bin/env python
"""CLI for the newsletter tweet digest."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from pydantic import BaseModel, field_validator

from newsletter_digest.config import create_from_config, get_default_config_path, load_config
from newsletter_digest.exceptions import DigestError
from newsletter_digest.output import save_day_files, save_review_files

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    config: Path
    use_cache: bool = False
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


async def run(args: CLIArgs) -> None:
    """Fetch, curate and write the digest for the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    use_cache = args.use_cache or config.storage.use_cache
    pipeline, run_logger = create_from_config(
        config,
        use_cache=use_cache,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    logger.info(f"Config: {args.config}")
    logger.info(f"Mode: {'cached' if use_cache else 'live search'}")

    result = await pipeline.run()

    logger.info(f"Tweets found: {result.raw_count}, curated: {len(result.tweets)}")

    logger.info("Saving json files")
    save_day_files(result.days, config.storage.data_path)
    logger.info("Rendering html files")
    save_review_files(result.reviewers, config.storage.data_path)

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")

    logger.info("Done.")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Curate tweets for the newsletter digest.")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--use-cache",
        action="store_true",
        default=os.environ.get("USE_CACHED", "").lower() == "true",
        help="Read tweets from saved day files instead of searching (env: USE_CACHED=true)",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Enable intermediate pipeline logging to JSON file",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            config=config_path,
            use_cache=ns.use_cache,
            log=ns.log,
            log_dir=ns.log_dir,
        )
        asyncio.run(run(args))
    except KeyboardInterrupt:
        sys.exit(130)
    except (DigestError, ValueError) as e:
        # ValueError also covers pydantic validation and missing credentials
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
