"""
Unit tests for QuizController command handling.
"""
import logging
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock

from quiztrainer.data_manager import DataManager
from quiztrainer.exam_engine import ExaminationEngine, SessionAbortedError
from quiztrainer.models import Quiz, SessionOutcome
from quiztrainer.quiz_controller import QuizController
from tests.test_fixtures import FixedRandom, RecordingOutput, ScriptedPrompt, async_test


class TestQuizControllerCommands(unittest.TestCase):
    """Test cases for the REPL commands."""

    def setUp(self):
        logging.disable(logging.CRITICAL)
        self.temp_dir = tempfile.mkdtemp()
        self.store = DataManager(str(Path(self.temp_dir) / "quizzes.json"))
        self.store.load()
        self.prompt = ScriptedPrompt()
        self.output = RecordingOutput()
        self.engine = ExaminationEngine(self.store, self.prompt, self.output, rng=FixedRandom(0.0))
        self.controller = QuizController(self.store, self.prompt, self.output, engine=self.engine)

    def tearDown(self):
        logging.disable(logging.NOTSET)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    @async_test
    async def test_empty_line_is_ignored(self):
        self.assertTrue(await self.controller.handle_line("   "))
        self.assertEqual(self.output.lines, [])

    @async_test
    async def test_unknown_command(self):
        self.assertTrue(await self.controller.handle_line("frobnicate 3"))
        self.assertIn("Unknown command: 'frobnicate'", self.output.lines)

    @async_test
    async def test_help_is_case_insensitive(self):
        self.assertTrue(await self.controller.handle_line("HELP"))
        self.assertEqual(self.output.lines[0], "Commands:")
        self.assertTrue(any("p|play" in line for line in self.output.lines))

    @async_test
    async def test_list(self):
        await self.controller.handle_line("list")
        self.assertEqual(self.output.lines, [
            "  [0]: Capital of Italy",
            "  [1]: Capital of France",
            "  [2]: Capital of Spain",
            "  [3]: Capital of Portugal",
        ])

    @async_test
    async def test_show(self):
        await self.controller.handle_line("show 1")
        self.assertEqual(self.output.lines, ["  [1]: Capital of France => Paris"])

    @async_test
    async def test_show_missing_id(self):
        self.assertTrue(await self.controller.handle_line("show"))
        self.assertEqual(self.output.errors, ["Missing id parameter."])

    @async_test
    async def test_show_invalid_id(self):
        self.assertTrue(await self.controller.handle_line("show 99"))
        self.assertEqual(self.output.errors, ["The id parameter is not valid."])

    @async_test
    async def test_add(self):
        self.prompt.answers = ["Capital of Germany", "Berlin"]

        self.assertTrue(await self.controller.handle_line("add"))

        self.assertEqual(self.store.count(), 5)
        self.assertEqual(self.store.get_by_index(4), Quiz("Capital of Germany", "Berlin"))
        self.assertEqual(len(self.prompt.asked), 2)

    @async_test
    async def test_add_empty_answer_reports_error(self):
        self.prompt.answers = ["Capital of Germany", ""]

        self.assertTrue(await self.controller.handle_line("add"))

        self.assertEqual(self.store.count(), 4)
        self.assertEqual(self.output.errors, ["The answer cannot be empty."])

    @async_test
    async def test_delete(self):
        await self.controller.handle_line("delete 0")

        self.assertEqual(self.store.count(), 3)
        self.assertEqual(self.store.get_by_index(0).question, "Capital of France")

    @async_test
    async def test_edit_keeps_value_on_empty_reply(self):
        self.prompt.answers = ["", "Roma"]

        await self.controller.handle_line("edit 0")

        self.assertEqual(self.store.get_by_index(0), Quiz("Capital of Italy", "Roma"))

    @async_test
    async def test_edit_invalid_id_does_not_prompt(self):
        await self.controller.handle_line("edit nope")

        self.assertEqual(self.prompt.asked, [])
        self.assertEqual(self.output.errors, ["The id parameter is not valid."])

    @async_test
    async def test_test_command(self):
        self.prompt.answers = ["  paris"]

        await self.controller.handle_line("test 1")

        self.assertEqual(self.prompt.asked, ["Capital of France? "])
        self.assertEqual(self.output.big, ["Correct"])

    @async_test
    async def test_play_runs_a_session(self):
        self.prompt.answers = ["Rome", "Paris", "Madrid", "Lisbon"]

        self.assertTrue(await self.controller.handle_line("p"))

        result = self.controller.last_result
        self.assertEqual(result.outcome, SessionOutcome.EXHAUSTED)
        self.assertEqual(result.score, 4)
        self.assertEqual(self.output.big, [4])

    @async_test
    async def test_play_stops_repl_when_input_closes(self):
        self.prompt.answers = ["Rome"]

        self.assertFalse(await self.controller.handle_line("play"))
        self.assertIsNone(self.controller.last_result)
        self.assertEqual(self.output.big, [])

    @async_test
    async def test_play_reports_other_aborts(self):
        engine = AsyncMock(spec=ExaminationEngine)
        engine.run_session.side_effect = SessionAbortedError("Play session aborted: boom")
        controller = QuizController(self.store, self.prompt, self.output, engine=engine)

        self.assertTrue(await controller.handle_line("play"))
        self.assertEqual(self.output.errors, ["Play session aborted: boom"])

    @async_test
    async def test_credits(self):
        await self.controller.handle_line("credits")
        self.assertEqual(self.output.lines[0], "Authors:")
        self.assertEqual(len(self.output.lines), 3)

    @async_test
    async def test_quit_closes_prompt(self):
        self.assertFalse(await self.controller.handle_line("q"))
        self.assertTrue(self.prompt.closed)


if __name__ == '__main__':
    unittest.main()
