def test_ping_endpoint_reports_connectivity(client):
    """
    Validate the public health endpoint payload.

    1. Call the public ping endpoint without authentication.
    2. Parse the response payload returned by the backend.
    3. Validate the expected message value.
    4. Validate DB and Redis connectivity flags are true.
    """
    response = client.get("/api/v1/ping")
    assert response.status_code == 200

    payload = response.json()
    assert payload["message"] == "EduVerse API is running"
    assert payload["db_connected"] is True
    assert payload["redis_connected"] is True


def test_request_id_header_is_echoed_or_generated(client):
    """
    Validate the request logging middleware correlation header.

    1. Send a request carrying an X-Request-ID header.
    2. Validate the same id is echoed on the response.
    3. Send a request without the header and validate one is generated.
    """
    echoed = client.get("/api/v1/ping", headers={"X-Request-ID": "trace-123"})
    assert echoed.headers["X-Request-ID"] == "trace-123"

    generated = client.get("/api/v1/ping")
    assert len(generated.headers["X-Request-ID"]) == 32
