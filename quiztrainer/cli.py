"""
Interactive REPL for the quiz trainer.
"""
import logging
from typing import Any, Dict, Optional

from .config_manager import ConfigManager
from .data_manager import DataManager, QuizStoreError
from .output import OutputSink
from .prompt import PromptClosedError, PromptService
from .quiz_controller import QuizController

logger = logging.getLogger(__name__)


def create_store(config_manager: ConfigManager):
    """Build the quiz store selected by the configuration."""
    if config_manager.get_storage() == "sql":
        from .sql_store import SqlQuizStore
        return SqlQuizStore(config_manager.get_database_url())
    return DataManager(config_manager.get_quiz_file())


class QuizCli:
    """Runs the read-eval-print loop until quit or end of input."""

    def __init__(self, config_manager: ConfigManager, store=None,
                 output: Optional[OutputSink] = None, prompt: Optional[PromptService] = None):
        self.config_manager = config_manager
        self.output = output or OutputSink(use_color=config_manager.get_use_color())
        self.prompt = prompt or PromptService(console=self.output.console)
        self.store = store if store is not None else create_store(config_manager)
        self.controller = QuizController(self.store, self.prompt, self.output)

    def load_quizzes(self) -> bool:
        """
        Load the quiz store and report any problems.

        Returns:
            False if the store could not be loaded at all
        """
        try:
            self.store.load()
        except QuizStoreError as e:
            logger.error(f"Failed to load quizzes: {e}")
            self.output.errorlog(str(e))
            return False

        for error in self.store.get_load_errors():
            self.output.errorlog(error)
        summary = self.store.get_loading_summary()
        if summary['defaults_loaded']:
            self.output.log(f"Using the default quizzes ({summary['total_quizzes']}).", "yellow")
        logger.info(f"Quiz store ready: {summary['total_quizzes']} quizzes from {summary['source']}")
        return True

    async def run(self) -> int:
        """
        Run the REPL.

        Returns:
            Process exit status
        """
        if not self.load_quizzes():
            return 1

        self.output.log("Quiz trainer. Type 'help' to see the commands.", "cyan")
        prompt_text = self.output.colorize(self.config_manager.get_prompt(), "blue")
        try:
            while True:
                line = await self.prompt.ask(prompt_text)
                if not await self.controller.handle_line(line):
                    break
        except PromptClosedError:
            logger.info("Input closed, leaving the REPL")
        finally:
            self.prompt.close()
            dispose = getattr(self.store, "dispose", None)
            if dispose is not None:
                dispose()

        self.output.log("Bye!", "cyan")
        return 0


async def run_cli(config: Optional[Dict[str, Any]] = None,
                  output: Optional[OutputSink] = None, prompt: Optional[PromptService] = None) -> int:
    """
    Configure and run the quiz trainer REPL.

    Returns:
        Process exit status; 1 if the settings are invalid or the store cannot load
    """
    config_manager = ConfigManager()
    rejected = config_manager.apply_config(config)

    output = output or OutputSink(use_color=config_manager.get_use_color())
    for message in rejected:
        output.errorlog(message)

    validation = config_manager.validate_settings()
    if not validation['valid']:
        for issue in validation['issues']:
            logger.warning(f"Invalid setting: {issue}")
            output.errorlog(issue)
        return 1

    logger.info(config_manager.get_settings_summary())
    cli = QuizCli(config_manager, output=output, prompt=prompt)
    return await cli.run()
