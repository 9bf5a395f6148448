import unittest
from unittest.mock import AsyncMock, Mock

from chat_stream.schemas import ChatStreamRequest
from chat_stream.services.chat_service import ChatService
from chat_stream.usage import StreamCallbacks


class ChatServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_stream_chat_builds_context_and_delegates_to_orchestrator(self) -> None:
        request = ChatStreamRequest.model_validate(
            {
                "messages": [{"id": "1", "role": "user", "content": "hello"}],
                "apiKeys": {"OpenAI": "sk-test"},
                "providerSettings": {"OpenAILike": {"enabled": True, "baseUrl": "http://x"}},
                "contextOptimization": True,
                "summary": "so far",
                "promptId": "optimized",
            }
        )
        handle = Mock()
        orchestrator = Mock()
        orchestrator.run = AsyncMock(return_value=handle)
        callbacks = StreamCallbacks()
        service = ChatService(orchestrator=orchestrator, env={"OPENAI_API_KEY": "env-key"})

        result = await service.stream_chat(request, callbacks=callbacks, options={"temperature": 0})

        self.assertIs(result, handle)
        orchestrator.run.assert_awaited_once()
        (context,) = orchestrator.run.await_args.args
        self.assertIs(context.messages, request.messages)
        self.assertEqual(context.credentials.api_keys, {"OpenAI": "sk-test"})
        self.assertEqual(
            context.credentials.settings_for("OpenAILike").base_url, "http://x"
        )
        self.assertEqual(context.env, {"OPENAI_API_KEY": "env-key"})
        self.assertTrue(context.context_optimization)
        self.assertEqual(context.summary, "so far")
        self.assertEqual(context.prompt_id, "optimized")
        self.assertIs(context.callbacks, callbacks)
        self.assertEqual(context.options, {"temperature": 0})


if __name__ == "__main__":
    unittest.main()
