# =============================================================================
# TESTES DE INTEGRACAO - Endpoints
# =============================================================================
# Testes de integracao usando FastAPI TestClient (sem servidor externo)
# =============================================================================

from unittest.mock import AsyncMock, MagicMock

from core.exceptions import DeliveryFailure


class TestHealthEndpoints:
    """Testes dos endpoints de health check."""

    def test_root_returns_ok(self, client):
        """GET / - Deve retornar status ok."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["environment"] == "test"

    def test_health(self, client):
        """GET /api/health - Status e quizzes ativos."""
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["message"] == "Mwalimu AI Backend is running!"
        assert data["active_quizzes"] == 0
        assert "timestamp" in data


class TestWebhookEndpoint:
    """Testes do webhook do Twilio."""

    def test_webhook_replies_via_sender(self, client, mock_sender):
        """POST /webhook/whatsapp - Responde OK e envia a resposta."""
        response = client.post(
            "/webhook/whatsapp",
            data={"Body": "Quiz me on Math", "From": "whatsapp:+254712345678", "ProfileName": "Amina"},
        )

        assert response.status_code == 200
        assert response.text == "OK"
        mock_sender.send.assert_awaited_once()
        recipient, body = mock_sender.send.await_args.args
        assert recipient == "whatsapp:+254712345678"
        assert "MATHEMATICS QUIZ" in body

    def test_webhook_quiz_roundtrip(self, client, mock_sender):
        """Pedido de quiz seguido das respostas."""
        sender_id = "whatsapp:+254712345678"
        client.post("/webhook/whatsapp", data={"Body": "Quiz me on Math", "From": sender_id})
        assert client.get("/api/health").json()["active_quizzes"] == 1

        client.post("/webhook/whatsapp", data={"Body": "1B 2C 3D", "From": sender_id})

        body = mock_sender.send.await_args.args[1]
        assert "3/3 (100%)" in body
        assert client.get("/api/health").json()["active_quizzes"] == 0

    def test_webhook_delivery_failure_still_ok(self, client, mock_sender):
        """Falha de entrega nao muda a resposta ao Twilio."""
        mock_sender.send.side_effect = DeliveryFailure("whatsapp:+254712345678", attempts=3)

        response = client.post(
            "/webhook/whatsapp", data={"Body": "hello", "From": "whatsapp:+254712345678"}
        )

        assert response.status_code == 200

    def test_webhook_handler_crash(self, client, mock_sender):
        """Erro no processamento: pedido de desculpas + 500."""
        import app_state
        from agents.replies import ERROR_APOLOGY

        broken = MagicMock()
        broken.handle_inbound_message = AsyncMock(side_effect=RuntimeError("boom"))
        app_state.handler = broken

        response = client.post(
            "/webhook/whatsapp", data={"Body": "hello", "From": "whatsapp:+254712345678"}
        )

        assert response.status_code == 500
        mock_sender.send.assert_awaited_once_with("whatsapp:+254712345678", ERROR_APOLOGY)

    def test_webhook_requires_sender(self, client):
        """From ausente - 422."""
        response = client.post("/webhook/whatsapp", data={"Body": "hello"})

        assert response.status_code == 422


class TestApiEndpoints:
    """Testes da API de teste e listagem."""

    def test_message_endpoint(self, client, mock_sender):
        """POST /api/message - Resposta no corpo, sem WhatsApp."""
        response = client.post("/api/message", json={"message": "Quiz me on Science"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["intent"] == "QUIZ_REQUEST"
        assert "SCIENCE QUIZ" in data["response"]
        mock_sender.send.assert_not_awaited()

    def test_message_endpoint_user_id(self, client):
        """userId identifica o dono da sessao."""
        client.post("/api/message", json={"message": "Quiz me", "userId": "+254712345678"})
        response = client.post("/api/message", json={"message": "1B 2C 3D", "userId": "+254712345678"})

        assert response.json()["intent"] == "QUIZ_ANSWER"

    def test_message_endpoint_empty(self, client):
        """Mensagem vazia - 400."""
        response = client.post("/api/message", json={"message": "   "})

        assert response.status_code == 400

    def test_message_endpoint_error(self, client):
        """Erro no processamento - 500 com success false."""
        import app_state

        broken = MagicMock()
        broken.process = AsyncMock(side_effect=RuntimeError("boom"))
        app_state.handler = broken

        response = client.post("/api/message", json={"message": "hello"})

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "boom"}

    def test_students_listing(self, client):
        """GET /api/students - Lista com campo class."""
        client.post(
            "/api/message",
            json={
                "message": "Register student: Amina Hassan, Form 2A, +254700000001",
                "userId": "+254712345678",
            },
        )

        data = client.get("/api/students").json()

        assert data["count"] == 1
        assert data["students"][0]["name"] == "Amina Hassan"
        assert data["students"][0]["class"] == "Form 2A"
