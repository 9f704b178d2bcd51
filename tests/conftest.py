"""
Carrousel Test Configuration

Shared fixtures and configuration for all tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List

import pytest

import carrousel.config as config_module
from carrousel.content import Content, ContentType


# ============ Time & Randomness Fixtures ============


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ScriptedDraw:
    """Returns pre-defined random draws in order, then repeats the last one."""

    def __init__(self, values: Iterable[float]):
        self.values: List[float] = list(values)
        self.calls = 0

    def __call__(self) -> float:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def now() -> datetime:
    """A fixed point in time."""
    return datetime(2026, 5, 10, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock(now: datetime) -> FakeClock:
    """Clock starting at ``now``."""
    return FakeClock(now)


@pytest.fixture
def scripted_draw() -> Callable[..., ScriptedDraw]:
    """Factory for scripted random draws."""
    return ScriptedDraw


# ============ Content Fixtures ============


@pytest.fixture
def make_content() -> Callable[..., Content]:
    """Factory for content items."""
    counter = {"n": 0}

    def _make(
        duration: float = 10,
        weight: float = 1,
        type: ContentType = ContentType.IMAGE,
        url: str = None,
    ) -> Content:
        counter["n"] += 1
        return Content(
            type=type,
            url=url or f"https://example.test/item-{counter['n']}",
            duration=duration,
            weight=weight,
        )

    return _make


@pytest.fixture
def two_item_catalog(make_content) -> List[Content]:
    """Two items, duration 10, weight 1."""
    return [make_content(duration=10, weight=1), make_content(duration=10, weight=1)]


@pytest.fixture
def weighted_catalog(make_content) -> List[Content]:
    """Three equal-duration items with weights 1, 2 and 3."""
    return [
        make_content(duration=10, weight=1, type=ContentType.IMAGE),
        make_content(duration=10, weight=2, type=ContentType.VIDEO),
        make_content(duration=10, weight=3, type=ContentType.IFRAME),
    ]


# ============ Configuration Fixtures ============


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests away from real config files and environment overrides."""
    for env_var in (
        "CARROUSEL_LOG_LEVEL",
        "CARROUSEL_LOG_FILE",
        "CARROUSEL_SEED",
        "CARROUSEL_STRICT_DISTRIBUTION",
        "CARROUSEL_REFRESH_INTERVAL_HOURS",
    ):
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "_config", None)
    yield


@pytest.fixture
def config_file(tmp_path):
    """Write a config.yaml and return its path."""

    def _write(text: str):
        path = tmp_path / "config.yaml"
        path.write_text(text)
        return path

    return _write
