from collections.abc import Iterator

import pytest
from starlette.testclient import TestClient

from todo_api.runtime import AppContext
from todo_api.server import create_app
from todo_api.util.log import Log, LogFormat, LogLevel
from tests.helpers import create_test_app_context


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _log_teardown() -> Iterator[None]:
    yield
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=True, file=False)


@pytest.fixture
def app_ctx() -> Iterator[AppContext]:
    with create_test_app_context() as ctx:
        yield ctx


@pytest.fixture
def client(app_ctx: AppContext) -> Iterator[TestClient]:
    app = create_app(app_ctx, access_log=False)
    with TestClient(app) as test_client:
        yield test_client
