"""Shared test fixtures for Code Owner Finder tests."""

import shutil

import pytest

from code_owner_finder.diff.models import DiffChange, DiffLine, DiffRevision, Difference

DAY = 86400
T0 = 1_600_000_000  # 2020-09-13, unix seconds


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def t0():
    """A fixed point in time for deterministic histories."""
    return T0


@pytest.fixture
def day():
    return DAY


@pytest.fixture
def clock_at():
    """Factory for injectable clocks frozen at a given timestamp."""

    def _clock_at(timestamp):
        return lambda: timestamp

    return _clock_at


@pytest.fixture
def creation_revision():
    """Factory for the first revision of a file, written entirely by one author."""

    def _creation(author, timestamp, weights, revision_id="r1"):
        content = tuple(DiffLine(author, timestamp, w) for w in weights)
        difference = Difference(
            author=author,
            timestamp=timestamp,
            changes=(DiffChange(deleted=0, inserted=len(weights), line_begin1=0, line_begin2=0),),
        )
        return DiffRevision(revision_id=revision_id, content=content, difference_with_previous=difference)

    return _creation


@pytest.fixture
def requires_git():
    if shutil.which("git") is None:
        pytest.skip("git executable not available")
