"""
Test fixtures and sample data for quiz trainer tests.
"""
import asyncio
import json
import tempfile
from pathlib import Path
from typing import Dict, List

from quiztrainer.models import Quiz
from quiztrainer.prompt import PromptClosedError


class TestFixtures:
    """Centralized test fixtures for all test modules."""

    @staticmethod
    def create_sample_quizzes() -> List[Quiz]:
        """Create sample quizzes for testing."""
        return [
            Quiz("What is 2+2", "4"),
            Quiz("What is the capital of France", "Paris"),
            Quiz("What color is the sky", "Blue"),
            Quiz("What is 5*5", "25"),
            Quiz("What is the largest planet", "Jupiter")
        ]

    @staticmethod
    def create_valid_quiz_json() -> Dict:
        """Create valid quiz JSON structure."""
        return {
            "quiz": [
                {"question": "Capital of Japan", "answer": "Tokyo"},
                {"question": "10 + 5", "answer": "15"},
                {"question": "Language this trainer is written in", "answer": "Python"}
            ]
        }

    @staticmethod
    def create_invalid_quiz_json_structures() -> List:
        """Create various invalid quiz JSON structures for testing."""
        return [
            # Missing 'quiz' key
            {"questions": [{"question": "Test", "answer": "Test"}]},
            # 'quiz' is not an array
            {"quiz": "not an array"},
            # Quiz entry is not an object
            {"quiz": ["just a string"]},
            # Missing question field
            {"quiz": [{"answer": "Test"}]},
            # Missing answer field
            {"quiz": [{"question": "Test"}]},
            # Wrong field types
            {"quiz": [{"question": 123, "answer": "Test"}]},
            {"quiz": [{"question": "Test", "answer": ["Test"]}]},
            # Not an object at all
            ["quiz"],
        ]

    @staticmethod
    def write_quiz_file(directory: str, data, name: str = "quizzes.json") -> Path:
        """Write quiz data as JSON into directory and return the path."""
        path = Path(directory) / name
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f)
        return path

    @staticmethod
    def create_temp_dir() -> str:
        return tempfile.mkdtemp()


class InMemoryStore:
    """Minimal quiz store holding a plain list."""

    def __init__(self, quizzes: List[Quiz] = None):
        self.quizzes = list(quizzes or [])
        self.get_all_calls = 0

    def get_all(self) -> List[Quiz]:
        self.get_all_calls += 1
        return list(self.quizzes)


class ScriptedPrompt:
    """
    Prompt that answers from a fixed script.

    Exceptions in the script are raised instead of returned. Running out of
    answers behaves like closed input.
    """

    def __init__(self, answers: List = None):
        self.answers = list(answers or [])
        self.asked: List[str] = []
        self.closed = False
        self.on_ask = None

    async def ask(self, text: str) -> str:
        if self.closed:
            raise PromptClosedError("Prompt is closed")
        self.asked.append(text)
        if self.on_ask is not None:
            self.on_ask(text)
        await asyncio.sleep(0)
        if not self.answers:
            self.closed = True
            raise PromptClosedError("No more scripted answers")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer.strip()

    def close(self) -> None:
        self.closed = True


class RecordingOutput:
    """Output sink that records lines instead of printing them."""

    def __init__(self):
        self.lines: List[str] = []
        self.big: List = []
        self.errors: List[str] = []

    def colorize(self, text, color) -> str:
        return str(text)

    def log(self, msg: str, color: str = None) -> None:
        self.lines.append(msg)

    def errorlog(self, msg: str) -> None:
        self.errors.append(msg)

    def biglog(self, value, color: str = None, title: str = None) -> None:
        if title:
            self.lines.append(title)
        self.big.append(value)


class FixedRandom:
    """Random source returning a fixed sequence of floats, repeating the last."""

    def __init__(self, *values: float):
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


class AsyncTestHelpers:
    """Helper functions for async testing."""

    @staticmethod
    async def run_with_timeout(coro, timeout: float = 5.0):
        """Run coroutine with timeout."""
        return await asyncio.wait_for(coro, timeout=timeout)


def async_test(coro):
    """Decorator to run async test methods."""
    def wrapper(self):
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(coro(self))
        finally:
            loop.close()
            asyncio.set_event_loop(None)
    wrapper.__name__ = coro.__name__
    wrapper.__doc__ = coro.__doc__
    return wrapper
