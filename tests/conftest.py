from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from httpdispatch.aggregator import ErrorAggregator
from httpdispatch.config import Settings
from httpdispatch.dispatcher import Dispatcher
from httpdispatch.main import App
from httpdispatch.metrics import MetricsReporter
from httpdispatch.responder import ResponseWriter
from tests.fakes import RecordingCounter, RecordingLogger, RecordingWriter


@pytest.fixture
def counter() -> RecordingCounter:
    return RecordingCounter()


@pytest.fixture
def log() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def reporter(counter: RecordingCounter, log: RecordingLogger) -> MetricsReporter:
    return MetricsReporter(counter, log)


@pytest.fixture
def aggregator(reporter: MetricsReporter, log: RecordingLogger) -> ErrorAggregator:
    return ErrorAggregator(reporter, log)


@pytest.fixture
def writer(tmp_path: Path, log: RecordingLogger) -> ResponseWriter:
    """Real output writer whose template directory is the test's tmp_path."""
    return ResponseWriter(str(tmp_path), log)


@pytest.fixture
def recording_writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def dispatcher(aggregator: ErrorAggregator, recording_writer: RecordingWriter) -> Dispatcher:
    return Dispatcher(aggregator, recording_writer)


@pytest.fixture
def app(tmp_path: Path, counter: RecordingCounter, log: RecordingLogger) -> App:
    """App wired to the in-memory counter and logger. Tests register their own routes."""
    return App(Settings(template_directory=str(tmp_path)), counter=counter, logger=log)


@pytest_asyncio.fixture
async def client(app: App) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
