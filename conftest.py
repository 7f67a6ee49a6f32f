"""File for tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from processor import ControlUnit, RandomSource, build_machine

GOLDEN_DEFAULT = "golden/*.yaml"


def pytest_configure(config: Any) -> None:
    """Configure the tests."""
    config.addinivalue_line(
        "markers",
        "golden_test(pattern): parameterize test with YAML records matching pattern",
    )


def _golden_patterns(node: Any) -> list[str]:
    """Return the patterns from golden_test markers on `node` (default when bare)."""
    return [m.args[0] if m.args else GOLDEN_DEFAULT for m in node.iter_markers(name="golden_test")]


def _load_record(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        msg = f"{path} does not contain a mapping"
        raise TypeError(msg)
    data.setdefault("__path__", str(path))
    data.setdefault("__name__", path.stem)
    return data


def pytest_generate_tests(metafunc: Any) -> None:
    """Generate tests (parametrization) from YAML golden records."""
    if "golden" not in metafunc.fixturenames:
        return

    root = Path(metafunc.config.rootpath)
    files: list[Path] = []
    for pat in _golden_patterns(metafunc.definition) or [GOLDEN_DEFAULT]:
        files.extend(sorted(root.glob(pat)))

    metafunc.parametrize("golden", [_load_record(p) for p in files], ids=[p.stem for p in files])


@pytest.fixture
def cli_logging() -> Iterator[None]:
    """Undo the root-logger setup done by `processor.init_logging` in CLI runs."""
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        if type(h) in (logging.FileHandler, logging.StreamHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def make_cu() -> Callable[..., ControlUnit]:
    """Factory: machine running the concatenation of the given instruction bytes."""

    def _make(
        *chunks: bytes,
        config: dict[str, Any] | None = None,
        keys: list[int] | None = None,
        rng: RandomSource | None = None,
    ) -> ControlUnit:
        return build_machine(b"".join(chunks), config, keys=keys, rng=rng)

    return _make
