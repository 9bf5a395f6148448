import unittest

from chat_stream.prompt_assembler import PromptAssembler
from chat_stream.prompts import PromptContext, PromptLibrary, PromptTemplate, get_system_prompt
from chat_stream.schemas import ChatMessage, FileEntry

from stubs import FixedTokenCounter


def _library() -> PromptLibrary:
    return PromptLibrary(
        {"default": PromptTemplate(label="T", description="d", render=lambda _: "TEMPLATE")}
    )


class PromptAssemblerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tokenizer = FixedTokenCounter(42)
        self.assembler = PromptAssembler(_library(), self.tokenizer)
        self.messages = [
            ChatMessage(id="1", role="user", content="first"),
            ChatMessage(id="2", role="assistant", content="answer"),
            ChatMessage(id="3", role="user", content="latest"),
        ]
        self.files = {
            "/home/project/src/app.js": FileEntry(type="file", content="console.log(1)"),
            "/home/project/src": FileEntry(type="folder"),
        }
        self.context_files = {
            "/home/project/src/app.js": FileEntry(type="file", content="console.log(1)"),
        }

    def test_context_blocks_without_summary_keep_history(self) -> None:
        prompt = self.assembler.assemble(
            self.messages,
            files=self.files,
            context_files=self.context_files,
            context_optimization=True,
        )

        self.assertTrue(prompt.system_prompt.startswith("TEMPLATE"))
        self.assertIn("Below are all the files present in the project:", prompt.system_prompt)
        self.assertIn("/home/project/src/app.js\n/home/project/src\n", prompt.system_prompt)
        self.assertIn("CONTEXT BUFFER:", prompt.system_prompt)
        self.assertIn('filePath="/home/project/src/app.js"', prompt.system_prompt)
        self.assertNotIn("CHAT SUMMARY:", prompt.system_prompt)
        self.assertEqual(len(prompt.messages), 3)

    def test_summary_collapses_history_to_last_message(self) -> None:
        prompt = self.assembler.assemble(
            self.messages,
            files=self.files,
            context_files=self.context_files,
            summary="user wants a todo app",
            context_optimization=True,
        )

        self.assertIn("CHAT SUMMARY:\n---\nuser wants a todo app\n---", prompt.system_prompt)
        self.assertEqual([m.id for m in prompt.messages], ["3"])

    def test_empty_file_maps_still_apply_summary(self) -> None:
        prompt = self.assembler.assemble(
            self.messages,
            files={},
            context_files={},
            summary="s",
            context_optimization=True,
        )

        self.assertIn("Below are all the files present in the project:", prompt.system_prompt)
        self.assertIn("CONTEXT BUFFER:", prompt.system_prompt)
        self.assertIn("CHAT SUMMARY:\n---\ns\n---", prompt.system_prompt)
        self.assertEqual([m.id for m in prompt.messages], ["3"])

    def test_blocks_are_ordered(self) -> None:
        prompt = self.assembler.assemble(
            self.messages,
            files=self.files,
            context_files=self.context_files,
            summary="summary",
            context_optimization=True,
        ).system_prompt

        self.assertLess(
            prompt.index("Below are all the files"), prompt.index("CONTEXT BUFFER:")
        )
        self.assertLess(prompt.index("CONTEXT BUFFER:"), prompt.index("CHAT SUMMARY:"))

    def test_disabled_optimization_returns_template_unchanged(self) -> None:
        prompt = self.assembler.assemble(
            self.messages,
            files=self.files,
            context_files=self.context_files,
            summary="ignored",
            context_optimization=False,
        )

        self.assertEqual(prompt.system_prompt, "TEMPLATE")
        self.assertEqual(len(prompt.messages), 3)

    def test_missing_file_maps_return_template_unchanged(self) -> None:
        prompt = self.assembler.assemble(
            self.messages, files=self.files, summary="ignored", context_optimization=True
        )

        self.assertEqual(prompt.system_prompt, "TEMPLATE")

    def test_unknown_prompt_id_falls_back_to_baseline(self) -> None:
        prompt = self.assembler.assemble(self.messages, prompt_id="nope")

        self.assertEqual(prompt.system_prompt, get_system_prompt(PromptContext()))

    def test_token_count_is_computed_once_for_final_prompt(self) -> None:
        prompt = self.assembler.assemble(
            self.messages,
            files=self.files,
            context_files=self.context_files,
            context_optimization=True,
        )

        self.assertEqual(prompt.token_count, 42)
        self.assertEqual(self.tokenizer.calls, [prompt.system_prompt])

    def test_input_list_is_not_modified(self) -> None:
        self.assembler.assemble(
            self.messages,
            files=self.files,
            context_files=self.context_files,
            summary="s",
            context_optimization=True,
        )

        self.assertEqual(len(self.messages), 3)


class PromptLibraryTests(unittest.TestCase):
    def test_default_templates_render_context(self) -> None:
        library = PromptLibrary()
        context = PromptContext(cwd="/work", modification_tag_name="edits")

        prompt = library.get("default", context)

        self.assertIn("/work", prompt)
        self.assertIn("<edits>", prompt)
        self.assertEqual(
            [p.id for p in library.list_prompts()], ["default", "optimized", "discuss"]
        )
        self.assertIsNone(library.get("unknown", context))


if __name__ == "__main__":
    unittest.main()
