"""Command-line interface for the parimutuel settlement engine.

Entry point
-----------
The ``main()`` function is registered as a console script in
``pyproject.toml``::

    [project.scripts]
    parimutuel = "parimutuel.cli:main"

Usage examples::

    parimutuel simulate examples/scenarios/two_sided.yaml
    parimutuel simulate scenario.json --format yaml --log-level INFO
    parimutuel info
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="parimutuel",
        description="Parimutuel settlement engine -- replay and inspect markets.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity. (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    # -- simulate ------------------------------------------------------------
    sim_parser = subparsers.add_parser(
        "simulate",
        help="Replay a scenario file.",
        description=(
            "Build a market from a JSON/YAML scenario, apply its steps against "
            "an in-memory asset ledger, and print the final state."
        ),
    )
    sim_parser.add_argument("scenario", type=str, help="Path to the scenario file.")
    sim_parser.add_argument(
        "--format",
        type=str,
        default="json",
        choices=["json", "yaml"],
        help="Output format. (default: json)",
    )

    # -- info ----------------------------------------------------------------
    subparsers.add_parser(
        "info",
        help="Show engine version and settlement constants.",
    )

    return parser


# =========================================================================
# Subcommand handlers
# =========================================================================

def _cmd_simulate(args: argparse.Namespace) -> int:
    """Handle the ``simulate`` subcommand."""
    from parimutuel.domain.exceptions import ParimutuelError
    from parimutuel.services.simulation import load_scenario, run_scenario

    try:
        scenario = load_scenario(args.scenario)
        result = run_scenario(scenario)
    except OSError as exc:
        print(f"Error reading {args.scenario}: {exc}", file=sys.stderr)
        return 1
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        print(f"Error parsing {args.scenario}: {exc}", file=sys.stderr)
        return 1
    except ParimutuelError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 2

    _emit(result.to_dict(), args.format)
    return 0 if not result.market.check_invariants() else 3


def _cmd_info(args: argparse.Namespace) -> int:
    """Handle the ``info`` subcommand."""
    from parimutuel import __version__
    from parimutuel.domain.settlement import BPS_DENOMINATOR
    from parimutuel.domain.values import MAX_OUTCOMES, MIN_OUTCOMES

    _emit(
        {
            "version": __version__,
            "bps_denominator": BPS_DENOMINATOR,
            "outcomes_per_market": [MIN_OUTCOMES, MAX_OUTCOMES],
            "resolvers": ["admin", "oracle"],
        },
        "json",
    )
    return 0


def _emit(data: dict[str, Any], fmt: str) -> None:
    if fmt == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    else:
        print(json.dumps(data, indent=2))


# =========================================================================
# Main entry point
# =========================================================================

def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns an exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    handlers = {
        "simulate": _cmd_simulate,
        "info": _cmd_info,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
