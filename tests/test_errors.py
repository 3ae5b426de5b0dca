from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)


def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "HTTP_ERROR"
    assert "message" in data


def test_validation_error_structure():
    # Temporary route to exercise request validation
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "VALIDATION_ERROR"
    assert len(data["details"]) > 0
    assert "input" not in data["details"][0]


def test_custom_exception():
    from app.core.exceptions import ValidationError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ValidationError(message="Bad logo", code="INVALID_FILE_TYPE", details={"content_type": "text/plain"})

    response = client.get("/test-custom-error")
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "INVALID_FILE_TYPE"
    assert data["message"] == "Bad logo"
    assert data["details"] == {"content_type": "text/plain"}
    assert data["error"] is None


def test_storage_error_carries_underlying_message():
    from app.core.exceptions import StorageError

    @app.get("/test-storage-error")
    def trigger_storage_error():
        raise StorageError(details="disk full")

    response = client.get("/test-storage-error")
    assert response.status_code == 500
    data = response.json()
    assert data == {
        "success": False,
        "message": "Server error",
        "code": "STORAGE_ERROR",
        "error": "disk full",
        "details": None,
    }


def test_unhandled_exception_returns_500():
    @app.get("/test-crash")
    def crash():
        raise RuntimeError("boom")

    crash_client = TestClient(app, raise_server_exceptions=False)
    response = crash_client.get("/test-crash")
    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert data["error"] == "boom"
