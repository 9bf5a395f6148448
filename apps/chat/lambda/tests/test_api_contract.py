import unittest
from contextlib import ExitStack
from unittest.mock import AsyncMock, Mock, patch

from fastapi.testclient import TestClient

import app as app_module
from chat_stream.errors import BadRequestError, NoModelsAvailableError


async def _chunks():
    yield "Hel"
    yield "lo"


class ApiContractTests(unittest.TestCase):
    def setUp(self) -> None:
        app_module.get_chat_service.cache_clear()
        app_module.get_provider_registry.cache_clear()

    def _post_chat(self, chat_service: Mock, payload: dict | None = None):
        with ExitStack() as stack:
            stack.enter_context(
                patch.object(app_module, "ensure_langsmith_configured", return_value=None)
            )
            flush_mock = stack.enter_context(
                patch.object(app_module, "flush_langsmith_traces", return_value=None)
            )
            stack.enter_context(
                patch.object(app_module, "get_chat_service", return_value=chat_service)
            )
            with TestClient(app_module.app) as client:
                response = client.post(
                    "/api/chat",
                    json=payload or {"messages": [{"role": "user", "content": "hi"}]},
                )
        return response, flush_mock

    def test_health_endpoint(self) -> None:
        with TestClient(app_module.app) as client:
            response = client.get("/api/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_models_endpoint_returns_model_fields(self) -> None:
        with TestClient(app_module.app) as client:
            response = client.get("/api/models")

        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertGreaterEqual(len(payload), 1)

        first = payload[0]
        self.assertIn("name", first)
        self.assertIn("label", first)
        self.assertIn("provider", first)
        self.assertIn("maxTokenAllowed", first)

    def test_prompts_endpoint_lists_templates(self) -> None:
        with TestClient(app_module.app) as client:
            response = client.get("/api/prompts")

        self.assertEqual(response.status_code, 200)
        self.assertIn("default", [prompt["id"] for prompt in response.json()])

    def test_chat_endpoint_streams_text(self) -> None:
        chat_service = Mock()
        chat_service.stream_chat = AsyncMock(return_value=_chunks())

        response, flush_mock = self._post_chat(
            chat_service,
            {
                "messages": [{"id": "1", "role": "user", "content": "hi"}],
                "contextOptimization": True,
                "promptId": "optimized",
            },
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "Hello")
        self.assertTrue(response.headers["content-type"].startswith("text/plain"))
        self.assertEqual(flush_mock.call_count, 1)
        request = chat_service.stream_chat.await_args.args[0]
        self.assertTrue(request.context_optimization)
        self.assertEqual(request.prompt_id, "optimized")

    def test_chat_endpoint_empty_messages_returns_422(self) -> None:
        with TestClient(app_module.app) as client:
            response = client.post("/api/chat", json={"messages": []})

        self.assertEqual(response.status_code, 422)

    def test_chat_endpoint_bad_request_error_maps_to_400(self) -> None:
        chat_service = Mock()
        chat_service.stream_chat = AsyncMock(
            side_effect=BadRequestError("Missing API key for OpenAI provider")
        )

        response, flush_mock = self._post_chat(chat_service)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Missing API key for OpenAI provider")
        self.assertEqual(flush_mock.call_count, 1)

    def test_chat_endpoint_no_models_maps_to_503(self) -> None:
        chat_service = Mock()
        chat_service.stream_chat = AsyncMock(side_effect=NoModelsAvailableError("Empty"))

        response, flush_mock = self._post_chat(chat_service)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], "No models found for provider Empty")
        self.assertEqual(flush_mock.call_count, 1)

    def test_chat_endpoint_unexpected_error_maps_to_502(self) -> None:
        chat_service = Mock()
        chat_service.stream_chat = AsyncMock(side_effect=RuntimeError("provider down"))

        response, flush_mock = self._post_chat(chat_service)

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"], "provider down")
        self.assertEqual(flush_mock.call_count, 1)


if __name__ == "__main__":
    unittest.main()
