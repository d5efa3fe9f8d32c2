from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared mapping file contents and a helper writing them to disk.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Sample Mappings
# -----------------------------------------------------------------------------
MAPPING_A = (
    "v1\tofficial\tintermediary\n"
    "CLASS\ta\tnet/minecraft/class_1\n"
    "FIELD\ta\tI\tb\tfield_1\n"
    "METHOD\ta\t()V\tc\tmethod_1\n"
    "METHOD\ta\t(I)V\tc\tmethod_2\n"
    "CLASS\ta$b\tnet/minecraft/class_1$class_2\n"
)

MAPPING_B = (
    "v1\tofficial\tnamed\n"
    "CLASS\ta\tnet/minecraft/World\n"
    "FIELD\ta\tI\tb\ttime\n"
    "METHOD\ta\t()V\tc\ttick\n"
    "CLASS\ta$b\tnet/minecraft/World$Chunk\n"
)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mapping_a_text() -> str:
    """official/intermediary mapping with an overloaded method and a nested class."""
    return MAPPING_A


@pytest.fixture
def mapping_b_text() -> str:
    """official/named mapping covering a subset of MAPPING_A's entries."""
    return MAPPING_B


@pytest.fixture
def write_mapping(tmp_path: Path) -> Callable[[str, str], str]:
    """
    Return a helper that writes mapping content under tmp_path.

    Returns:
        Callable[[str, str], str]: (file name, content) -> absolute path.
    """
    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def sample_inputs(write_mapping: Callable[[str, str], str]) -> Dict[str, str]:
    """Write the two sample mappings and return their paths."""
    return {
        "a": write_mapping("a.tiny", MAPPING_A),
        "b": write_mapping("b.tiny", MAPPING_B),
    }


@pytest.fixture
def mock_config_dict(sample_inputs: Dict[str, str], tmp_path: Path) -> Dict[str, Any]:
    """
    Return a valid, complete merge configuration for testing.

    Reflects the structure defined in 'tinymerge.domain.config'.
    """
    return {
        # IO Paths
        "input_a": sample_inputs["a"],
        "input_b": sample_inputs["b"],
        "output_path": str(tmp_path / "out" / "merged.tiny"),

        # Reconciliation
        "fallback_order": [],

        # Execution
        "overwrite": False,
        "dry_run": False,
    }
