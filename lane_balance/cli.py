"""
Command-line interface for the Lane's balance engine.

Usage:
    python -m lane_balance.cli [--log-level LEVEL] [command] [options]

Commands:
    evaluate    Evaluate one parameter set and print the balance summary.
    geometry    Generate the geometry frame for one parameter set as JSON.
    sweep       Sweep a parameter grid and print regime/pattern statistics.
    scenarios   List the scenarios of a configuration file.
    validate    Run the property validation suite (exit 0 on pass).
    info        Print version and default thresholds.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Tuple

from . import __version__
from .analysis.metrics import parameter_grid, summary_statistics, sweep
from .analysis.validation import run_all_checks
from .config_loader import (
    build_engine_config,
    build_parameter_set,
    get_scenario_by_name,
    list_scenarios,
    load_config,
)
from .core.mapping import format_log_magnitude
from .core.parameters import ParameterSet
from .engine import DEFAULT_CONFIG, EngineConfig
from .simulation.session import BalanceSession

logger = logging.getLogger("lane_balance.cli")


def _add_parameter_arguments(parser: argparse.ArgumentParser) -> None:
    """Shared --qs/--d50/--qw/--s/--scenario/--config options."""
    for flag, name in (("--qs", "sediment discharge"), ("--d50", "median sediment size"),
                       ("--qw", "water discharge"), ("--s", "slope")):
        parser.add_argument(
            flag, type=float, default=None, metavar="V",
            help=f"{name.capitalize()} [1–100] (default: scenario value or 50)"
        )
    parser.add_argument(
        "--scenario", default=None, metavar="NAME",
        help="Start from a named scenario"
    )
    parser.add_argument(
        "--config", default=None, metavar="PATH",
        help="Scenario/threshold YAML file (default: packaged scenarios.yaml)"
    )


def _build_subparsers(parser: argparse.ArgumentParser) -> None:
    """Register all sub-commands on the root parser."""
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------- evaluate --
    eval_p = sub.add_parser("evaluate", help="Evaluate one parameter set")
    _add_parameter_arguments(eval_p)
    eval_p.add_argument(
        "--json", action="store_true",
        help="Output the evaluation as JSON"
    )

    # ------------------------------------------------------------- geometry --
    geom_p = sub.add_parser("geometry", help="Generate the geometry frame as JSON")
    _add_parameter_arguments(geom_p)
    geom_p.add_argument(
        "--output", default=None, metavar="FILE",
        help="Write the frame to FILE instead of stdout"
    )
    geom_p.add_argument(
        "--indent", type=int, default=None, metavar="N",
        help="JSON indentation (default: compact)"
    )

    # ---------------------------------------------------------------- sweep --
    sweep_p = sub.add_parser("sweep", help="Sweep a parameter grid")
    sweep_p.add_argument(
        "--steps", type=int, default=5, metavar="N",
        help="Values per axis (default: 5)"
    )
    sweep_p.add_argument(
        "--fix", action="append", default=[], metavar="KEY=V",
        help="Pin a control instead of sweeping it, e.g. --fix Qw=50 (repeatable)"
    )
    sweep_p.add_argument(
        "--config", default=None, metavar="PATH",
        help="Threshold YAML file (default: built-in thresholds)"
    )
    sweep_p.add_argument(
        "--json", action="store_true",
        help="Output summary statistics as JSON"
    )

    # ------------------------------------------------------------ scenarios --
    scen_p = sub.add_parser("scenarios", help="List scenarios")
    scen_p.add_argument(
        "--config", default=None, metavar="PATH",
        help="Scenario YAML file (default: packaged scenarios.yaml)"
    )
    scen_p.add_argument(
        "--json", action="store_true",
        help="Output scenarios as JSON"
    )

    # ------------------------------------------------------------- validate --
    sub.add_parser("validate", help="Run the property validation suite")

    # ----------------------------------------------------------------- info --
    sub.add_parser("info", help="Print version and default thresholds")


def _resolve_parameters(args: argparse.Namespace) -> Tuple[ParameterSet, EngineConfig]:
    """Scenario (if any), then explicit flags on top."""
    if args.scenario is not None or args.config is not None:
        config = load_config(args.config)
        engine_config = build_engine_config(config)
    else:
        config, engine_config = None, DEFAULT_CONFIG

    if args.scenario is not None:
        params = build_parameter_set(get_scenario_by_name(config, args.scenario))
    else:
        params = ParameterSet.equilibrium()

    overrides = {key: value for key, value in
                 (("Qs", args.qs), ("D50", args.d50), ("Qw", args.qw), ("S", args.s))
                 if value is not None}
    if overrides:
        params = params.copy_with(**overrides)
    return params, engine_config


def _parse_fixed(items: List[str]) -> dict:
    fixed = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"--fix expects KEY=VALUE, got {item!r}")
        fixed[key.strip()] = float(value)
    return fixed


def _cmd_evaluate(args: argparse.Namespace) -> None:
    """Execute the evaluate sub-command."""
    params, config = _resolve_parameters(args)
    with BalanceSession(params, config) as session:
        evaluation = session.evaluation

    if args.json:
        print(json.dumps(evaluation.to_dict(), indent=2))
        return

    balance = evaluation.balance
    print(f"Qs={params.qs:g}  D50={params.d50:g} ({format_log_magnitude(params.d50)} mm)"
          f"  Qw={params.qw:g}  S={params.s:g} ({format_log_magnitude(params.s)})")
    print(f"  Balance ratio:    {balance.ratio:.4f}")
    print(f"  {evaluation.tendency.imbalance}")
    print(f"  Regime:           {balance.regime.label}")
    print(f"  Beam tilt:        {balance.tilt_angle_degrees:+.2f}°")
    print(f"  Stream power:     {balance.stream_power:.4f}")
    print(f"  Pattern:          {evaluation.pattern.title}")
    print(f"  Seed:             {evaluation.seed:.3f}")
    print(f"  {evaluation.tendency.label}")
    print(f"  {evaluation.tendency.why}")
    print("  Active processes:")
    for name in balance.process_names():
        print(f"    - {name}")


def _cmd_geometry(args: argparse.Namespace) -> None:
    """Execute the geometry sub-command."""
    params, config = _resolve_parameters(args)
    with BalanceSession(params, config) as session:
        frame = session.frame

    text = frame.to_json(indent=args.indent)
    if args.output:
        with open(args.output, "w") as f:
            f.write(text)
        logger.info("Wrote %d primitives to %s", len(frame), args.output)
    else:
        print(text)


def _cmd_sweep(args: argparse.Namespace) -> None:
    """Execute the sweep sub-command."""
    config = build_engine_config(load_config(args.config)) if args.config else DEFAULT_CONFIG
    grid = parameter_grid(args.steps, _parse_fixed(args.fix))
    stats = summary_statistics(sweep(grid, config))

    if args.json:
        print(json.dumps(stats, indent=2))
    else:
        print(f"Sweep completed: {int(stats['n_points'])} parameter sets")
        print(f"  Mean imbalance index: {stats['mean_imbalance_index']:+.4f}")
        print(f"  Imbalance range:      [{stats['min_imbalance_index']:+.4f}, "
              f"{stats['max_imbalance_index']:+.4f}]")
        print(f"  Mean braiding index:  {stats['mean_braiding_index']:.4f}")
        print(f"  Degradation:  {stats['fraction_degradation']:.3f}")
        print(f"  Equilibrium:  {stats['fraction_equilibrium']:.3f}")
        print(f"  Aggradation:  {stats['fraction_aggradation']:.3f}")
        print(f"  Straight:     {stats['fraction_straight']:.3f}")
        print(f"  Meandering:   {stats['fraction_meandering']:.3f}")
        print(f"  Braided:      {stats['fraction_braided']:.3f}")


def _cmd_scenarios(args: argparse.Namespace) -> None:
    """Execute the scenarios sub-command."""
    config = load_config(args.config)
    engine_config = build_engine_config(config)
    rows = []
    for name, description in list_scenarios(config):
        params = build_parameter_set(get_scenario_by_name(config, name))
        with BalanceSession(params, engine_config) as session:
            evaluation = session.evaluation
        rows.append({
            "name": name,
            "description": description,
            "params": params.to_dict(),
            "regime": evaluation.balance.regime.label,
            "pattern": evaluation.pattern.label,
        })

    if args.json:
        print(json.dumps(rows, indent=2))
        return
    for row in rows:
        print(f"{row['name']}: {row['regime']}, {row['pattern']}")
        if row["description"]:
            print(f"  {row['description']}")


def _cmd_validate(_args: argparse.Namespace) -> None:
    """Execute the validate sub-command."""
    passed = run_all_checks()
    print(f"All {len(passed)} validation checks passed.")


def _cmd_info(_args: argparse.Namespace) -> None:
    """Execute the info sub-command."""
    print(f"Lane's balance engine {__version__}")
    for table, values in DEFAULT_CONFIG.to_dict().items():
        print(f"Default {table}:")
        for name, value in values.items():
            print(f"  {name}: {value}")


_COMMANDS = {
    "evaluate": _cmd_evaluate,
    "geometry": _cmd_geometry,
    "sweep": _cmd_sweep,
    "scenarios": _cmd_scenarios,
    "validate": _cmd_validate,
    "info": _cmd_info,
}


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="lane-balance",
        description="Lane's balance engine CLI",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)"
    )
    _build_subparsers(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    command = _COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)
    try:
        command(args)
    except (ValueError, KeyError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
