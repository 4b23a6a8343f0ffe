"""Command line entry point for seeding demo capacity logs.

Example usage (four years, reproducible, written to a JSON file):

    python -m capacitylog --years 4 --seed 42 --output logs.json

Store the log under the client's storage key in a directory of JSON slots:

    python -m capacitylog --years 1 --storage-dir capacity_logs

Defaults come from Config (CAPACITYLOG_YEARS, CAPACITYLOG_SEED,
CAPACITYLOG_STORAGE_KEY, CAPACITYLOG_STORAGE_DIR).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import random
from pathlib import Path
from typing import List, Optional, Sequence

from .analysis import format_summary, summarize
from .config import Config
from .errors import CapacityLogError, StorageError
from .logging_utils import EMOJI_ERROR, EMOJI_INFO, EMOJI_SUCCESS, log_error, log_info, log_success
from .persistence import JsonPersistence, clear_seeded_logs
from .schemas import CapacityObservation
from .simulator import generate


def positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capacitylog",
        description="Generate synthetic capacity logs for demo and test datasets",
    )
    parser.add_argument(
        "--years",
        type=positive_int,
        default=Config.DEFAULT_YEARS,
        help="Span of simulated data in years",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=Config.SEED,
        help="Seed for reproducible output (ids still differ between runs)",
    )
    parser.add_argument("--output", type=Path, help="Write the log as a JSON array to this file")
    parser.add_argument(
        "--storage-dir",
        type=Path,
        help="Save the log into a JSON storage slot under this directory",
    )
    parser.add_argument(
        "--key",
        default=Config.STORAGE_KEY,
        help="Storage key used with --storage-dir",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Remove the stored log for --key from --storage-dir and exit",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print errors")
    parser.add_argument("--show-config", action="store_true", help="Print configuration and exit")
    return parser


async def save_to_storage(
    storage_dir: Path,
    key: str,
    observations: List[CapacityObservation],
) -> None:
    persistence = JsonPersistence(storage_dir)
    await persistence.initialize()
    try:
        await persistence.save_logs(key, observations)
    finally:
        await persistence.close()


async def clear_storage(storage_dir: Path, key: str) -> None:
    persistence = JsonPersistence(storage_dir)
    await persistence.initialize()
    try:
        await clear_seeded_logs(persistence, key=key)
    finally:
        await persistence.close()


def write_output(path: Path, observations: List[CapacityObservation]) -> None:
    records = [observation.to_record() for observation in observations]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(records, indent=2), "utf-8")
    except OSError as exc:
        raise StorageError(f"cannot write {path}: {exc}") from exc


def run(args: argparse.Namespace) -> int:
    verbose = not args.quiet

    if args.show_config:
        print(Config.display())
        return 0

    if args.clear:
        if args.storage_dir is None:
            log_error(f"{EMOJI_ERROR} --clear requires --storage-dir")
            return 2
        asyncio.run(clear_storage(args.storage_dir, args.key))
        if verbose:
            log_success(f"{EMOJI_SUCCESS} Cleared {args.key!r} in {args.storage_dir}")
        return 0

    rng = random.Random(args.seed) if args.seed is not None else None
    observations = generate(args.years, rng=rng, verbose=verbose)

    if verbose:
        log_info(f"{EMOJI_INFO} {format_summary(summarize(observations))}")

    if args.output is not None:
        write_output(args.output, observations)
        if verbose:
            log_success(f"{EMOJI_SUCCESS} Wrote {len(observations)} records to {args.output}")

    if args.storage_dir is not None:
        asyncio.run(save_to_storage(args.storage_dir, args.key, observations))
        if verbose:
            log_success(f"{EMOJI_SUCCESS} Saved {len(observations)} records under {args.key!r}")

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except StorageError as exc:
        log_error(f"{EMOJI_ERROR} Storage failed: {exc}")
        return 1
    except CapacityLogError as exc:
        log_error(f"{EMOJI_ERROR} {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
