import pytest

from bigcalc.commands import RESERVED_NAMES
from bigcalc.main import REPL, Settings


@pytest.fixture
def store():
    return {}


@pytest.fixture
def reserved():
    return RESERVED_NAMES


@pytest.fixture
def repl(tmp_path):
    return REPL(Settings(history_file=str(tmp_path / "history")))


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")
