"""
Command controller for the quiz trainer REPL.
Parses command lines and runs the matching quiz operation.
"""
import logging
from typing import Awaitable, Callable, Dict, Optional

from .data_manager import QuizStoreError
from .exam_engine import ExaminationEngine, SessionAbortedError
from .models import SessionResult
from .prompt import PromptClosedError

HELP_LINES = [
    "Commands:",
    "  h|help - Show this help.",
    "  list - List the existing quizzes.",
    "  show <id> - Show the question and the answer of the given quiz.",
    "  add - Add a new quiz interactively.",
    "  delete <id> - Delete the given quiz.",
    "  edit <id> - Edit the given quiz.",
    "  test <id> - Test the given quiz.",
    "  p|play - Play: answer all quizzes in random order.",
    "  credits - Credits.",
    "  q|quit - Quit the program.",
]

AUTHORS = [
    "Eros García Arroyo",
    "Luis García Olivares",
]


class QuizController:
    """
    Dispatches REPL command lines to quiz operations.

    Store errors are reported to the user and never stop the REPL. Only
    quit, or a prompt that has been closed, ends the loop.
    """

    def __init__(self, store, prompt, output, engine: Optional[ExaminationEngine] = None):
        """
        Initialize the controller.

        Args:
            store: DataManager or SqlQuizStore
            prompt: PromptService used for interactive commands
            output: OutputSink for all user-facing lines
            engine: Examination engine, built from the other collaborators if None
        """
        self.logger = logging.getLogger(__name__)
        self.store = store
        self.prompt = prompt
        self.output = output
        self.engine = engine or ExaminationEngine(store, prompt, output)
        self.last_result: Optional[SessionResult] = None

        self._commands: Dict[str, Callable[[Optional[str]], Awaitable[bool]]] = {
            'h': self.help_cmd,
            'help': self.help_cmd,
            'list': self.list_cmd,
            'show': self.show_cmd,
            'add': self.add_cmd,
            'delete': self.delete_cmd,
            'edit': self.edit_cmd,
            'test': self.test_cmd,
            'p': self.play_cmd,
            'play': self.play_cmd,
            'credits': self.credits_cmd,
            'q': self.quit_cmd,
            'quit': self.quit_cmd,
        }

    async def handle_line(self, line: str) -> bool:
        """
        Run one command line.

        Returns:
            False when the REPL must stop, True otherwise
        """
        words = line.split(maxsplit=1)
        if not words:
            return True

        cmd = words[0].lower()
        arg = words[1].strip() if len(words) > 1 else None

        handler = self._commands.get(cmd)
        if handler is None:
            self.output.log(f"Unknown command: '{self.output.colorize(cmd, 'red')}'")
            self.output.log(f"Use {self.output.colorize('help', 'green')} to see the available commands.")
            return True

        self.logger.debug(f"Running command {cmd!r} with argument {arg!r}")
        try:
            return await handler(arg)
        except QuizStoreError as e:
            self.logger.warning(f"Command {cmd!r} failed: {e}")
            self.output.errorlog(str(e))
            return True

    def _quiz_line(self, quiz_id, quiz, with_answer: bool = False) -> str:
        line = f"  [{self.output.colorize(quiz_id, 'magenta')}]: {self.output.colorize(quiz.question, None)}"
        if with_answer:
            line += f" {self.output.colorize('=>', 'magenta')} {self.output.colorize(quiz.answer, None)}"
        return line

    def _missing_id(self, arg: Optional[str]) -> bool:
        if arg is None:
            self.output.errorlog("Missing id parameter.")
            return True
        return False

    async def help_cmd(self, arg: Optional[str] = None) -> bool:
        for line in HELP_LINES:
            self.output.log(line)
        return True

    async def list_cmd(self, arg: Optional[str] = None) -> bool:
        for quiz_id, quiz in enumerate(self.store.get_all()):
            self.output.log(self._quiz_line(quiz_id, quiz))
        return True

    async def show_cmd(self, arg: Optional[str] = None) -> bool:
        if self._missing_id(arg):
            return True
        quiz = self.store.get_by_index(arg)
        self.output.log(self._quiz_line(arg, quiz, with_answer=True))
        return True

    async def add_cmd(self, arg: Optional[str] = None) -> bool:
        question = await self.prompt.ask(self.output.colorize(" Enter a question: ", "red"))
        answer = await self.prompt.ask(self.output.colorize(" Enter an answer: ", "red"))
        quiz = self.store.add(question, answer)
        self.output.log(
            f"{self.output.colorize(' Added', 'magenta')}: {self.output.colorize(quiz.question, None)} "
            f"{self.output.colorize('=>', 'magenta')} {self.output.colorize(quiz.answer, None)}"
        )
        return True

    async def delete_cmd(self, arg: Optional[str] = None) -> bool:
        if self._missing_id(arg):
            return True
        quiz = self.store.delete_by_index(arg)
        self.output.log(f" Deleted quiz {self.output.colorize(arg, 'magenta')}: {self.output.colorize(quiz.question, None)}")
        return True

    async def edit_cmd(self, arg: Optional[str] = None) -> bool:
        if self._missing_id(arg):
            return True
        quiz = self.store.get_by_index(arg)
        self.output.log(self._quiz_line(arg, quiz, with_answer=True))
        self.output.log(" Press enter to keep the current value.")

        question = await self.prompt.ask(self.output.colorize(" Enter a question: ", "red")) or quiz.question
        answer = await self.prompt.ask(self.output.colorize(" Enter an answer: ", "red")) or quiz.answer

        updated = self.store.update(arg, question, answer)
        self.output.log(
            f" Quiz {self.output.colorize(arg, 'magenta')} changed to: {self.output.colorize(updated.question, None)} "
            f"{self.output.colorize('=>', 'magenta')} {self.output.colorize(updated.answer, None)}"
        )
        return True

    async def test_cmd(self, arg: Optional[str] = None) -> bool:
        if self._missing_id(arg):
            return True
        quiz = self.store.get_by_index(arg)
        await self.engine.check_single(quiz)
        return True

    async def play_cmd(self, arg: Optional[str] = None) -> bool:
        try:
            self.last_result = await self.engine.run_session()
        except SessionAbortedError as e:
            if isinstance(e.__cause__, PromptClosedError):
                self.logger.info("Play session ended because input was closed")
                return False
            self.logger.error(f"Play session aborted: {e}")
            self.output.errorlog(str(e))
        return True

    async def credits_cmd(self, arg: Optional[str] = None) -> bool:
        self.output.log("Authors:")
        for author in AUTHORS:
            self.output.log(author, "green")
        return True

    async def quit_cmd(self, arg: Optional[str] = None) -> bool:
        self.prompt.close()
        return False
