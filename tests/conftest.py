"""
Pytest configuration and shared fixtures for the procmon test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the procmon project.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from procmon.models.keys import ALL, SINGLE, Category, MetricKey  # noqa: E402
from procmon.models.snapshot import CounterSnapshot  # noqa: E402
from procmon.sources.base import AbstractCounterSource  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample [monitor] configuration data for testing."""
    return {
        "sampling": {
            "interval_seconds": 0.5,
            "history_capacity": 100,
            "output": "sar-u",
            "header_interval": 10,
            "daemon": False,
        },
        "archive": {
            "enabled": True,
            "directory": "archive",
            "every_samples": 5,
            "partition_minutes": 10,
        },
        "charts": {
            "enabled": False,
            "width": 1200,
            "height": 800,
            "output_dir": "charts",
        },
    }


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary config.toml for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)

    return {"config": config_file, "dir": temp_dir}


# ============================================================================
# Test Utilities
# ============================================================================


CPU_FIELDS = ("user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal", "guest", "guest_nice")


class ScriptedSource(AbstractCounterSource):
    """Counter source replaying a fixed list of (timestamp, readings) pairs."""

    def __init__(self, script: List[Tuple[float, Dict[MetricKey, Optional[float]]]]):
        super().__init__()
        self.script = list(script)
        self.calls = 0

    def _current(self):
        return self.script[min(self.calls, len(self.script) - 1)]

    def _now(self) -> float:
        return self._current()[0]

    def _collect(self, snapshot: CounterSnapshot) -> None:
        for key, value in self._current()[1].items():
            snapshot.set(key, value)
        self.calls += 1


class TestUtils:
    """Utility functions for testing."""

    @staticmethod
    def cpu_readings(cpu_name: str = ALL, **values) -> Dict[MetricKey, float]:
        """CPU time readings with every bucket present, 0 unless given."""
        return {MetricKey(Category.CPU, cpu_name, name): float(values.get(name, 0.0)) for name in CPU_FIELDS}

    @staticmethod
    def load_readings(load_1=0.5, load_5=0.4, load_15=0.3, runnable=2, total=150) -> Dict[MetricKey, float]:
        return {
            MetricKey(Category.LOAD, SINGLE, "load_1"): load_1,
            MetricKey(Category.LOAD, SINGLE, "load_5"): load_5,
            MetricKey(Category.LOAD, SINGLE, "load_15"): load_15,
            MetricKey(Category.LOAD, SINGLE, "current_runnable"): runnable,
            MetricKey(Category.LOAD, SINGLE, "total"): total,
        }

    @staticmethod
    def scripted_source(script) -> ScriptedSource:
        return ScriptedSource(script)


@pytest.fixture
def test_utils():
    """Provide test utility functions."""
    return TestUtils


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically clear configuration cache after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield  # Run the test

    from procmon.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)
