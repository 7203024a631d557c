#!/usr/bin/env python3
"""CLI entry point for the 5 Whys discovery tool.

Runs the same wizard the website widget runs, either interactively or from
command-line answers, and prints the resulting automation plan.

Usage:
    kyros-discovery
    kyros-discovery --problem "Managers spend hours chasing project status" \\
        --why "Updates live in five tools" --why "Nobody owns the report" \\
        --why "It was never automated" --why "No time to set it up" \\
        --why "Leadership never asked" --json
    kyros-discovery --check-env
"""

import argparse
import asyncio
import sys
from typing import Callable, List, Optional, Sequence

from . import env_validator
from .config import ConfigError, config
from .controller import StepController
from .formspree import get_formspree_endpoint
from .logging_utils import get_logger, setup_logging
from .models import WHY_COUNT, AnalysisResult
from .presenter import (
    EXAMPLE_PROBLEMS,
    PROBLEM_HEADING,
    PROBLEM_HELPER,
    ResultFormatter,
    step_prompt,
    step_title,
)

logger = get_logger(__name__)

InputFunc = Callable[[str], str]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the discovery CLI."""
    parser = argparse.ArgumentParser(
        prog="kyros-discovery",
        description="Walk through the 5 Whys discovery tool from the terminal.",
    )

    answers = parser.add_argument_group("answers")
    answers.add_argument(
        "--problem",
        "-p",
        type=str,
        default=None,
        help="Problem statement (skips the interactive prompts)",
    )
    answers.add_argument(
        "--why",
        "-w",
        action="append",
        default=None,
        help=f"Answer to a 'why' prompt; pass exactly {WHY_COUNT} times",
    )

    output = parser.add_argument_group("output options")
    output.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    output.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Simulated analysis latency in seconds (default: from config)",
    )
    output.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    output.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )

    execution = parser.add_argument_group("execution options")
    execution.add_argument(
        "--check-env",
        action="store_true",
        help="Validate the environment file and exit",
    )

    return parser


def _ask(input_func: InputFunc, prompt: str, choices: Sequence[str] = ()) -> str:
    """Prompt until a non-blank answer is given; digits pick from ``choices``."""
    while True:
        answer = input_func(prompt)
        stripped = answer.strip()
        if stripped.isdigit() and 1 <= int(stripped) <= len(choices):
            return choices[int(stripped) - 1]
        if stripped:
            return answer
        print("Please enter an answer to continue.")


async def run_discovery(
    controller: StepController,
    problem: Optional[str] = None,
    whys: Optional[Sequence[str]] = None,
    input_func: InputFunc = input,
) -> Optional[AnalysisResult]:
    """Drive the controller through all six steps.

    Missing answers are collected with ``input_func``.

    Returns:
        The analysis result, or None if an answer was rejected.
    """
    if problem is None:
        print(PROBLEM_HEADING)
        print(PROBLEM_HELPER)
        for number, example in enumerate(EXAMPLE_PROBLEMS, start=1):
            print(f"  [{number}] {example}")
        problem = _ask(input_func, "> ", EXAMPLE_PROBLEMS)

    if not controller.submit_problem(problem):
        logger.error("Problem statement rejected", extra={"problem": problem})
        return None

    for index in range(WHY_COUNT):
        if whys is not None:
            answer = whys[index]
        else:
            step = index + 1
            print(f"\n{step_title(step)}")
            print(step_prompt(controller.state, step))
            answer = _ask(input_func, "> ")

        if not await controller.submit_why(index, answer):
            logger.error("Answer rejected", extra={"index": index})
            return None

    return controller.state.analysis_result


def print_contact_hint() -> None:
    """Print the contact form endpoint when one is configured."""
    try:
        endpoint = get_formspree_endpoint()
    except ConfigError as e:
        logger.warning(f"Contact form unavailable: {e}")
        return
    print(f"Contact form: {endpoint}")


def main(argv: Optional[List[str]] = None, input_func: InputFunc = input) -> int:
    """Main entry point for the discovery CLI.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.check_env:
        return env_validator.main([])

    if args.why is not None and len(args.why) != WHY_COUNT:
        parser.error(f"--why must be given exactly {WHY_COUNT} times")
    if args.why is not None and args.problem is None:
        parser.error("--why requires --problem")

    level = "DEBUG" if args.debug else ("INFO" if args.verbose else "WARNING")
    setup_logging(level=level)

    controller = StepController(analysis_delay=args.delay)
    logger.info(
        "Discovery started",
        extra={"session_id": controller.session_id, "app_env": config.APP_ENV},
    )

    try:
        result = asyncio.run(
            run_discovery(controller, args.problem, args.why, input_func=input_func)
        )
    except (EOFError, KeyboardInterrupt):
        print("\nDiscovery cancelled.")
        return 1

    if result is None:
        print("Discovery could not be completed; every answer needs some text.")
        return 1

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print()
        print(ResultFormatter(cta_url=config.discovery_cta_url()).format_text(result))
        print_contact_hint()

    return 0


if __name__ == "__main__":
    sys.exit(main())
