import asyncio
import inspect
import pathlib
import sys
from datetime import date

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from eventdesk.controller import DashboardController  # noqa: E402
from eventdesk.store import LocalJsonStore  # noqa: E402

TODAY = date(2025, 11, 10)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            argnames = pyfuncitem._fixtureinfo.argnames
            loop.run_until_complete(test_function(**{name: pyfuncitem.funcargs[name] for name in argnames}))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def local_store(tmp_path: pathlib.Path) -> LocalJsonStore:
    return LocalJsonStore(tmp_path / "accounts", "owner-1")


@pytest.fixture
def controller(local_store: LocalJsonStore, today: date) -> DashboardController:
    return DashboardController(local_store, clock=lambda: today)
