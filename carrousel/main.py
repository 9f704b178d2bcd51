"""
Carrousel Main Application

Command line entry point: runs the display carousel, or simulates a rotation
of the configured catalog and prints the resulting distribution.
"""

import argparse
import asyncio
import logging
import random
import sys
from datetime import timedelta
from typing import Optional, Sequence

from carrousel import __version__
from carrousel.config import CarrouselConfig, load_catalog, load_config
from carrousel.content import Content
from carrousel.display import Carousel, LoggingPresenter
from carrousel.errors import CarrouselError
from carrousel.scheduling import simulate
from carrousel.utils.logging_setup import setup_logging_from_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="carrousel",
        description="Weighted rotation of images, videos and web pages on a display.",
    )
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--seed", type=int, help="Fixed random seed")
    parser.add_argument(
        "--simulate",
        type=int,
        metavar="N",
        help="Print N simulated selections and the resulting distribution, then exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_simulation(
    catalog: Sequence[Content], steps: int, rng: random.Random, strict: bool
) -> None:
    """Simulate ``steps`` selections and print them."""
    result = simulate(catalog, steps, draw=rng.random, strict=strict)

    for position, index in enumerate(result.selections, start=1):
        content = catalog[index]
        print(f"{position:>6}  [{index}] {content.type.value:<6} {content.url}")

    print()
    print(f"Simulated {steps} selections over {result.elapsed}")
    print(f"{'index':>5}  {'target':>7}  {'screen':>7}  {'plays':>6}  {'gap':>4}  url")
    stats = result.stats
    screen_share = stats.screen_time_share()
    for index, content in enumerate(catalog):
        print(
            f"{index:>5}  {stats.target_share.get(index, 0):>7.2%}  "
            f"{screen_share.get(index, 0):>7.2%}  "
            f"{stats.selections_by_index.get(index, 0):>6}  "
            f"{stats.longest_gap.get(index, 0):>4}  {content.url}"
        )


def run_carousel(config: CarrouselConfig, config_path: Optional[str], rng: random.Random) -> None:
    """Run the display carousel until interrupted."""

    def catalog_loader() -> Sequence[Content]:
        # Pick up catalog edits on every refresh
        return load_catalog(load_config(config_path))

    carousel = Carousel(
        catalog_loader=catalog_loader,
        presenter=LoggingPresenter(),
        refresh_interval=timedelta(hours=config.display.refresh_interval_hours),
        preload_timeout=config.display.preload_timeout_seconds,
        draw=rng.random,
        strict=config.scheduling.strict_distribution,
    )

    try:
        asyncio.run(carousel.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Called when running `python -m carrousel` or via the `carrousel` script.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.simulate is not None and args.simulate < 1:
        parser.error(f"--simulate needs at least one selection, got {args.simulate}")

    try:
        config = load_config(args.config)
    except CarrouselError as e:
        print(f"carrousel: {e}", file=sys.stderr)
        return 2

    setup_logging_from_config(
        config.logging,
        log_level=args.log_level,
        log_to_file=args.simulate is None,
    )

    seed = args.seed if args.seed is not None else config.scheduling.seed
    rng = random.Random(seed)

    try:
        if args.simulate is not None:
            run_simulation(
                load_catalog(config), args.simulate, rng, config.scheduling.strict_distribution
            )
        else:
            logger.info(f"Starting Carrousel v{__version__}")
            run_carousel(config, args.config, rng)
    except CarrouselError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
