import pytest
from fastapi import FastAPI
from pytest_mock import MockerFixture

from actioncues.common.opentelemetry import setup_opentelemetry

MODULE = "actioncues.common.opentelemetry"


@pytest.mark.parametrize(
    "backend,instrumented,skipped",
    [
        ("redis", "RedisInstrumentor", "SQLAlchemyInstrumentor"),
        ("postgres", "SQLAlchemyInstrumentor", "RedisInstrumentor"),
    ],
)
def test_setup_opentelemetry_instruments_task_store(
    mocker: MockerFixture, backend: str, instrumented: str, skipped: str
) -> None:
    mocker.patch(f"{MODULE}.TracerProvider")
    mocker.patch(f"{MODULE}.BatchSpanProcessor")
    mocker.patch(f"{MODULE}.OTLPSpanExporter")
    mock_set_tracer_provider = mocker.patch(f"{MODULE}.trace.set_tracer_provider")
    mock_fastapi_instrumentor = mocker.patch(f"{MODULE}.FastAPIInstrumentor")
    mock_instrumented = mocker.patch(f"{MODULE}.{instrumented}")
    mock_skipped = mocker.patch(f"{MODULE}.{skipped}")
    app = FastAPI()

    setup_opentelemetry("actioncues-test", app, backend)

    mock_set_tracer_provider.assert_called_once()
    mock_fastapi_instrumentor.instrument_app.assert_called_once_with(app)
    mock_instrumented.return_value.instrument.assert_called_once()
    mock_skipped.assert_not_called()
