from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from rateio.api.error_handlers import register_error_handlers
from rateio.domain.errors import ZeroRecipientsError


def _app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/split-error")
    def split_error() -> None:
        raise ZeroRecipientsError(message="No recipients", details={"recipients": 0})

    @app.get("/store-error")
    def store_error() -> None:
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    @app.get("/crash")
    def crash() -> None:
        raise RuntimeError("boom")

    return app


def test_domain_error_handler_returns_error_shape() -> None:
    client = TestClient(_app())
    response = client.get("/split-error")

    assert response.status_code == 422
    assert response.json() == {
        "code": "ZERO_RECIPIENTS",
        "message": "No recipients",
        "details": {"recipients": 0},
    }


def test_persistence_error_maps_to_service_unavailable() -> None:
    client = TestClient(_app())
    response = client.get("/store-error")

    assert response.status_code == 503
    assert response.json()["code"] == "PERSISTENCE_ERROR"


def test_unexpected_error_maps_to_internal_error() -> None:
    client = TestClient(_app(), raise_server_exceptions=False)
    response = client.get("/crash")

    assert response.status_code == 500
    assert response.json()["details"] == {"error_type": "RuntimeError"}
