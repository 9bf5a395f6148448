import unittest

from chat_stream.errors import NoModelsAvailableError
from chat_stream.model_resolver import ModelResolver
from chat_stream.providers.base import ProviderCredentials
from chat_stream.providers.registry import ProviderRegistry

from stubs import StubProvider, model


class ModelResolverTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.openai = StubProvider(
            "OpenAI",
            static_models=[model("gpt-4o-mini"), model("gpt-4.1")],
            dynamic_models=[model("gpt-5")],
        )
        self.empty = StubProvider("Empty")
        self.dynamic_only = StubProvider(
            "Dynamic", dynamic_models=[model("local-a", "Dynamic"), model("local-b", "Dynamic")]
        )
        self.registry = ProviderRegistry(
            [self.openai, self.empty, self.dynamic_only], default_provider="OpenAI"
        )
        self.resolver = ModelResolver(self.registry)
        self.credentials = ProviderCredentials()

    async def test_static_match_skips_dynamic_fetch(self) -> None:
        resolved = await self.resolver.resolve("OpenAI", "gpt-4.1", self.credentials)

        self.assertEqual(resolved.model.name, "gpt-4.1")
        self.assertIs(resolved.provider, self.openai)
        self.assertFalse(resolved.fallback_used)
        self.assertEqual(self.openai.fetch_calls, 0)

    async def test_dynamic_match_is_used_when_static_misses(self) -> None:
        resolved = await self.resolver.resolve("OpenAI", "gpt-5", self.credentials)

        self.assertEqual(resolved.model.name, "gpt-5")
        self.assertFalse(resolved.fallback_used)
        self.assertEqual(self.openai.fetch_calls, 1)

    async def test_unknown_model_falls_back_to_first_entry_with_warning(self) -> None:
        with self.assertLogs("chat_stream.model_resolver", level="WARNING") as logs:
            resolved = await self.resolver.resolve("OpenAI", "missing-model", self.credentials)

        self.assertEqual(resolved.model.name, "gpt-4o-mini")
        self.assertTrue(resolved.fallback_used)
        self.assertEqual(resolved.requested_model, "missing-model")
        self.assertEqual(self.openai.fetch_calls, 1)
        self.assertIn("missing-model", logs.output[0])
        self.assertIn("gpt-4o-mini", logs.output[0])

    async def test_fallback_uses_dynamic_list_when_static_is_empty(self) -> None:
        resolved = await self.resolver.resolve("Dynamic", "missing-model", self.credentials)

        self.assertEqual(resolved.model.name, "local-a")

    async def test_empty_provider_raises_no_models_available(self) -> None:
        with self.assertRaises(NoModelsAvailableError) as ctx:
            await self.resolver.resolve("Empty", "anything", self.credentials)

        self.assertEqual(ctx.exception.provider, "Empty")
        self.assertEqual(self.empty.fetch_calls, 1)

    async def test_unknown_provider_uses_default_provider(self) -> None:
        resolved = await self.resolver.resolve("NoSuchProvider", "gpt-4o-mini", self.credentials)

        self.assertIs(resolved.provider, self.openai)
        self.assertEqual(resolved.model.name, "gpt-4o-mini")

    async def test_static_entries_win_over_duplicate_dynamic_entries(self) -> None:
        provider = StubProvider(
            "Dup",
            static_models=[model("shared", "Dup", max_tokens=100)],
            dynamic_models=[model("shared", "Dup", max_tokens=999), model("other", "Dup")],
        )
        resolver = ModelResolver(ProviderRegistry([provider], default_provider="Dup"))

        resolved = await resolver.resolve("Dup", "shared", self.credentials)

        self.assertEqual(resolved.model.max_token_allowed, 100)


class ProviderRegistryTests(unittest.TestCase):
    def test_rejects_unregistered_default(self) -> None:
        with self.assertRaisesRegex(ValueError, "Default provider OpenAI is not registered"):
            ProviderRegistry([StubProvider("Other")], default_provider="OpenAI")

    def test_static_models_spans_all_providers(self) -> None:
        registry = ProviderRegistry(
            [
                StubProvider("OpenAI", static_models=[model("a")]),
                StubProvider("Other", static_models=[model("b", "Other")]),
            ],
            default_provider="OpenAI",
        )

        self.assertEqual([m.name for m in registry.static_models()], ["a", "b"])
        self.assertEqual([p.name for p in registry.list_providers()], ["OpenAI", "Other"])


if __name__ == "__main__":
    unittest.main()
