"""Generate climbing workouts against a running Workout Generator API.

Starts a generation job, polls its status until it finishes and prints the
workouts as JSON.

Usage:
    python scripts/generate_workouts.py --profile profile.json \\
        --focus finger_strength --focus endurance --days Mon,Thu

    export WORKOUT_API_URL=https://workouts.example.com
    python scripts/generate_workouts.py --profile profile.json --focus power

Exit codes:
    0  workouts generated
    1  generation failed, job not found, or the service returned an error
    2  polling timed out (the job may still finish; try again)
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from application.models import GenerateWorkoutsRequest, TrainingFocus, UserProfile
from backend.services.errors import JobNotFoundError, WorkoutGenerationError
from backend.services.job_poller import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    JobFailedError,
    JobStatusPoller,
    PollingTimeoutError,
)

logger = logging.getLogger("generate_workouts")

DEFAULT_API_URL = "http://localhost:8000"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_TIMEOUT = 2


def _split_csv(values: Optional[List[str]]) -> List[str]:
    items: List[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate climbing workouts via the job API")
    parser.add_argument(
        "--profile",
        required=True,
        type=Path,
        help="Path to a climber profile JSON file (camelCase keys)",
    )
    parser.add_argument(
        "--focus",
        action="append",
        required=True,
        help=f"Focus area, repeatable or comma-separated. One of: {', '.join(f.value for f in TrainingFocus)}",
    )
    parser.add_argument("--days", action="append", help="Preferred training days, e.g. Mon,Thu")
    parser.add_argument("--notes", help="Free-text notes for the coach")
    parser.add_argument(
        "--api-url",
        default=os.environ.get("WORKOUT_API_URL", DEFAULT_API_URL),
        help=f"Workout Generator API URL (default: $WORKOUT_API_URL or {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL_SECONDS,
        help="Seconds between status checks",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help="Status checks before giving up",
    )
    parser.add_argument("--output", "-o", type=Path, help="Write workouts JSON here instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    return parser


def build_request(args: argparse.Namespace) -> GenerateWorkoutsRequest:
    """Read the profile file and assemble the generation request.

    Raises:
        ValueError: the profile file or a focus value is invalid.
    """
    try:
        profile = UserProfile.model_validate(json.loads(args.profile.read_text()))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"Could not read profile {args.profile}: {e}") from e

    try:
        focus_areas = [TrainingFocus(value) for value in _split_csv(args.focus)]
    except ValueError as e:
        raise ValueError(f"Unknown focus area: {e}") from e

    return GenerateWorkoutsRequest(
        profile=profile,
        focus_areas=focus_areas,
        preferred_days=_split_csv(args.days),
        notes=args.notes,
    )


async def run(args: argparse.Namespace, poller: Optional[JobStatusPoller] = None) -> int:
    try:
        request = build_request(args)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILED

    owns_poller = poller is None
    if poller is None:
        poller = JobStatusPoller(
            args.api_url,
            interval=args.interval,
            max_attempts=args.max_attempts,
            on_progress=lambda message: print(message, file=sys.stderr),
        )

    try:
        workouts = await poller.generate(request)
    except PollingTimeoutError as e:
        print(f"TIMEOUT: {e} (job {e.job_id}, last progress: {e.last_progress or 'none'})", file=sys.stderr)
        return EXIT_TIMEOUT
    except JobFailedError as e:
        print(f"FAILED: {e}", file=sys.stderr)
        if args.verbose and e.error_stack:
            print(e.error_stack, file=sys.stderr)
        return EXIT_FAILED
    except JobNotFoundError as e:
        print(f"FAILED: {e}. It may have expired; start a new generation.", file=sys.stderr)
        return EXIT_FAILED
    except WorkoutGenerationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILED
    finally:
        if owns_poller:
            await poller.close()

    payload = json.dumps(workouts, indent=2)
    if args.output:
        args.output.write_text(payload)
        print(f"Wrote {len(workouts)} workout(s) to {args.output}", file=sys.stderr)
    else:
        print(payload)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
