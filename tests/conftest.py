"""Shared fixtures for the lane_balance test suite."""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from lane_balance.core.parameters import ParameterSet
from lane_balance.engine import classify_pattern, compute_seed, evaluate_balance, generate_geometry


@pytest.fixture
def midpoint():
    return ParameterSet.equilibrium()


@pytest.fixture
def make_frame():
    """Full pipeline: params -> frame, the way a session draws it."""
    def _make(params, config=None):
        result = evaluate_balance(params)
        pattern = classify_pattern(params, result.ratio)
        seed = compute_seed(params, result.ratio)
        return generate_geometry(pattern, params, seed, config)
    return _make


@pytest.fixture
def write_yaml(tmp_path):
    def _write(text, name="scenarios.yaml"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write
