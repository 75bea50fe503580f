import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))


class ScriptedRng:
    """Replays fixed draws so behavior tests can pin every random choice."""

    def __init__(self, floats=(), ints=()):
        self._floats = list(floats)
        self._ints = list(ints)
        self._initial = (list(floats), list(ints))

    def next_float(self) -> float:
        if not self._floats:
            raise AssertionError("ScriptedRng ran out of floats")
        return self._floats.pop(0)

    def next_int(self, max_value: int) -> int:
        if not self._ints:
            raise AssertionError("ScriptedRng ran out of ints")
        value = self._ints.pop(0)
        assert 0 <= value <= max_value
        return value

    def reset(self) -> None:
        self._floats, self._ints = list(self._initial[0]), list(self._initial[1])


@pytest.fixture
def scripted_rng():
    return ScriptedRng


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run long simulation tests",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "slow: marks long-running simulation tests (use --run-slow)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-slow"):
        return

    skip_marker = pytest.mark.skip(
        reason="Long-running simulation test (use --run-slow)",
    )

    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_marker)
