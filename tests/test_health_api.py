"""Health checks: liveness, base de datos y readiness."""

from pybreaker import STATE_CLOSED, STATE_OPEN

from app.infrastructure.circuit_breaker import payment_gateway_breaker


class TestHealthEndpoints:
    def test_liveness(self, client):
        for path in ("/health", "/health/live"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json() == {"status": "ok", "service": "room-booking-api"}

    def test_database_check_in_memory_mode(self, client):
        response = client.get("/health/db")
        assert response.status_code == 200
        assert response.json()["mode"] == "in-memory"

    def test_readiness_reports_gateway_circuit(self, client):
        body = client.get("/health/ready").json()
        assert body["status"] == "ready"
        assert body["checks"]["database"] == "in-memory"
        assert body["checks"]["payment_gateway"] == {"mode": "demo", "circuit": STATE_CLOSED}

    def test_open_circuit_does_not_make_the_service_unready(self, client):
        payment_gateway_breaker.open()
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["checks"]["payment_gateway"]["circuit"] == STATE_OPEN
