"""
config_loader.py — Scenario and threshold loader.

Loads YAML scenario files and converts them to the ParameterSet and
EngineConfig objects the engine consumes.

Public API:
    load_config(path)                 -> raw config dict
    get_scenario_by_name(config, name) -> scenario dict
    list_scenarios(config)            -> list of (name, description) tuples
    build_parameter_set(scenario)     -> ParameterSet
    build_engine_config(config)       -> EngineConfig
    load_scenario(name, path)         -> (ParameterSet, EngineConfig)
"""

from __future__ import annotations

import warnings
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

import yaml

from .core.balance import BalanceThresholds
from .core.parameters import ParameterSet
from .engine import EngineConfig
from .geometry.generator import Canvas
from .systems.pattern_classifier import PatternThresholds
from .systems.processes import ProcessThresholds

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "data" / "scenarios.yaml"

_TABLES: Dict[str, Type[Any]] = {
    "balance": BalanceThresholds,
    "processes": ProcessThresholds,
    "pattern": PatternThresholds,
    "canvas": Canvas,
}


# ─────────────────────────────────────────────────────────────────────────── #
# YAML loading + validation                                                    #
# ─────────────────────────────────────────────────────────────────────────── #

def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load and validate a scenario configuration YAML file.

    Args:
        config_path: File to read; the packaged scenarios.yaml when None.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError:        If the document is not a mapping or a scenario
                           lacks its name or params.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path.resolve()}")

    with open(path, "r") as f:
        config = yaml.safe_load(f)

    if not isinstance(config, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(config).__name__}")
    config.setdefault("thresholds", {})
    config.setdefault("scenarios", [])
    if not isinstance(config["scenarios"], list):
        raise ValueError("'scenarios' must be a list.")

    names = set()
    for scenario in config["scenarios"]:
        if not isinstance(scenario, dict) or "name" not in scenario:
            raise ValueError("Each scenario must have a 'name' field.")
        if "params" not in scenario:
            raise ValueError(f"Scenario '{scenario['name']}' has no 'params' section.")
        if scenario["name"] in names:
            raise ValueError(f"Duplicate scenario name '{scenario['name']}'.")
        names.add(scenario["name"])

    return config


def get_scenario_by_name(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Retrieve a scenario dict by name."""
    for scenario in config["scenarios"]:
        if scenario["name"] == name:
            return scenario
    available = [s["name"] for s in config["scenarios"]]
    raise ValueError(f"Scenario '{name}' not found. Available: {available}")


def list_scenarios(config: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Return list of (name, description) for all scenarios."""
    return [
        (s["name"], " ".join(str(s.get("description", "")).split()))
        for s in config["scenarios"]
    ]


# ─────────────────────────────────────────────────────────────────────────── #
# Conversion                                                                   #
# ─────────────────────────────────────────────────────────────────────────── #

def build_parameter_set(scenario: Dict[str, Any]) -> ParameterSet:
    """ParameterSet from a scenario's params mapping (short keys or field names).

    Raises:
        ValueError: If a key is unknown, missing, or a value is out of range.
    """
    try:
        return ParameterSet.from_dict(scenario["params"])
    except KeyError as exc:
        raise ValueError(f"Scenario '{scenario.get('name')}': {exc.args[0]}") from exc


def _build_table(section: str, cls: Type[Any], values: Optional[Dict[str, Any]]) -> Any:
    values = dict(values or {})
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        warnings.warn(f"Ignoring unknown keys in thresholds.{section}: {unknown}")
        for key in unknown:
            values.pop(key)
    return cls(**values)


def build_engine_config(config: Dict[str, Any]) -> EngineConfig:
    """EngineConfig from the 'thresholds' section; missing tables keep defaults."""
    thresholds = config.get("thresholds") or {}
    unknown = sorted(set(thresholds) - set(_TABLES))
    if unknown:
        warnings.warn(f"Ignoring unknown threshold tables: {unknown}")
    return EngineConfig(**{
        section: _build_table(section, cls, thresholds.get(section))
        for section, cls in _TABLES.items()
    })


def load_scenario(
    name: str, config_path: Optional[str] = None
) -> Tuple[ParameterSet, EngineConfig]:
    """Load one named scenario and the engine configuration of its file."""
    config = load_config(config_path)
    scenario = get_scenario_by_name(config, name)
    return build_parameter_set(scenario), build_engine_config(config)
