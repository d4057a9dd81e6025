from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.errors import NotFoundError, register_exception_handlers
from app.core.middleware import RequestIDMiddleware


def build_app() -> FastAPI:
    application = FastAPI()
    application.add_middleware(RequestIDMiddleware)
    register_exception_handlers(application)

    @application.get("/boom")
    def boom():
        raise RuntimeError("database password is hunter2")

    @application.get("/missing")
    def missing():
        raise NotFoundError("Widget not found")

    return application


def test_unhandled_exception_is_sanitized():
    client = TestClient(build_app(), raise_server_exceptions=False)
    response = client.get("/boom")
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal Server Error", "code": "UNEXPECTED_ERROR"}
    assert "hunter2" not in response.text


def test_domain_error_keeps_its_status():
    client = TestClient(build_app())
    response = client.get("/missing")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Widget not found", "code": "NOT_FOUND"}


def test_request_id_is_echoed():
    client = TestClient(build_app())
    response = client.get("/missing", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/missing").headers["X-Request-ID"]


def test_unknown_route_uses_envelope(client: TestClient):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "message": "Cannot find /api/nowhere on this server",
        "code": "NOT_FOUND",
    }


def test_body_validation_errors_are_400(client: TestClient):
    response = client.post("/api/auth/login", json={"userId": "u1"})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert "password" in body["message"]


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}
