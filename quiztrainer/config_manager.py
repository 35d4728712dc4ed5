"""
Configuration manager for quiz trainer settings.
"""
import logging
import os
from typing import Any, Dict, List, Optional
from pathlib import Path


class ConfigManager:
    """Manages storage, prompt and display settings."""

    # Default configuration values
    DEFAULT_STORAGE = "json"
    DEFAULT_QUIZ_FILE = "quizzes.json"
    DEFAULT_DATABASE_URL = "sqlite:///quizzes.db"
    DEFAULT_PROMPT = "quiz > "
    DEFAULT_USE_COLOR = True

    STORAGE_BACKENDS = ("json", "sql")
    MAX_PROMPT_LENGTH = 40

    # Environment variable -> setting name
    ENV_OVERRIDES = {
        'QUIZ_STORAGE': 'storage',
        'QUIZ_FILE': 'quiz_file',
        'QUIZ_DATABASE_URL': 'database_url',
    }

    def __init__(self):
        """Initialize ConfigManager with default settings."""
        self.logger = logging.getLogger(__name__)
        self.reset_to_defaults()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values."""
        self._storage = self.DEFAULT_STORAGE
        self._quiz_file = self.DEFAULT_QUIZ_FILE
        self._database_url = self.DEFAULT_DATABASE_URL
        self._prompt = self.DEFAULT_PROMPT
        self._use_color = self.DEFAULT_USE_COLOR
        self.logger.debug("All settings reset to default values")

    def set_storage(self, storage: str) -> Dict[str, Any]:
        """
        Select the quiz storage backend.

        Args:
            storage: "json" for the quiz file or "sql" for the database table

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(storage, str):
            error_msg = f"Storage must be a string, got {type(storage).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"Invalid input: Expected one of {', '.join(self.STORAGE_BACKENDS)}"
            }

        backend = storage.strip().lower()
        if backend not in self.STORAGE_BACKENDS:
            error_msg = f"Unknown storage backend: {storage}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"Unknown storage '{storage}'. Use one of: {', '.join(self.STORAGE_BACKENDS)}"
            }

        self._storage = backend
        self.logger.info(f"Storage backend set to {backend}")
        return {
            'success': True,
            'message': f"Storage backend set to {backend}",
            'user_message': f"Quizzes will be stored using the {backend} backend"
        }

    def get_storage(self) -> str:
        return self._storage

    def set_quiz_file(self, quiz_file: str) -> Dict[str, Any]:
        """
        Set the path of the JSON quiz file with validation.

        Args:
            quiz_file: Path to the quiz file

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(quiz_file, str):
            error_msg = f"Quiz file must be a string, got {type(quiz_file).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"Invalid input: Expected a path string, got {type(quiz_file).__name__}"
            }

        if not quiz_file.strip():
            error_msg = "Quiz file cannot be empty"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "Quiz file path cannot be empty"
            }

        path = Path(quiz_file.strip())
        if path.exists() and path.is_dir():
            error_msg = f"Quiz file is a directory: {quiz_file}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"{quiz_file} is a directory, expected a .json file"
            }

        if path.suffix.lower() != ".json":
            error_msg = f"Quiz file must have a .json extension: {quiz_file}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"Quiz file must be a .json file: {quiz_file}"
            }

        self._quiz_file = str(path)
        self.logger.info(f"Quiz file set to {path}")
        return {
            'success': True,
            'message': f"Quiz file set to {path}",
            'user_message': f"Quizzes will be read from {path}"
        }

    def get_quiz_file(self) -> str:
        return self._quiz_file

    def set_database_url(self, database_url: str) -> Dict[str, Any]:
        """
        Set the SQLAlchemy database URL used by the sql backend.

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(database_url, str) or "://" not in database_url:
            error_msg = f"Invalid database URL: {database_url!r}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "Database URL must look like dialect://... (e.g. sqlite:///quizzes.db)"
            }

        self._database_url = database_url.strip()
        self.logger.info("Database URL updated")
        return {
            'success': True,
            'message': "Database URL updated",
            'user_message': f"Database set to {self._database_url}"
        }

    def get_database_url(self) -> str:
        return self._database_url

    def set_prompt(self, prompt: str) -> Dict[str, Any]:
        """
        Set the REPL prompt text.

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(prompt, str) or not prompt.strip():
            error_msg = "Prompt must be a non-empty string"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': "Prompt cannot be empty"
            }

        if len(prompt) > self.MAX_PROMPT_LENGTH:
            error_msg = f"Prompt cannot exceed {self.MAX_PROMPT_LENGTH} characters"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"Prompt too long: Maximum is {self.MAX_PROMPT_LENGTH} characters"
            }

        self._prompt = prompt
        return {
            'success': True,
            'message': f"Prompt set to {prompt!r}",
            'user_message': f"Prompt set to {prompt!r}"
        }

    def get_prompt(self) -> str:
        return self._prompt

    def set_use_color(self, use_color: bool) -> Dict[str, Any]:
        """
        Enable or disable colored output.

        Returns:
            Dictionary with success status, error message, and user-friendly message
        """
        if not isinstance(use_color, bool):
            error_msg = f"use_color must be a boolean, got {type(use_color).__name__}"
            self.logger.error(error_msg)
            return {
                'success': False,
                'error': error_msg,
                'user_message': f"Invalid input: Expected true/false, got {type(use_color).__name__}"
            }

        self._use_color = use_color
        state = "enabled" if use_color else "disabled"
        return {
            'success': True,
            'message': f"Colored output {state}",
            'user_message': f"Colored output {state}"
        }

    def get_use_color(self) -> bool:
        return self._use_color

    def apply_config(self, config: Optional[Dict[str, Any]], environ: Optional[Dict[str, str]] = None) -> List[str]:
        """
        Apply settings from a parsed config.json and environment overrides.

        Invalid values are skipped and keep their previous setting.

        Args:
            config: Parsed configuration dictionary (may be None or empty)
            environ: Environment mapping, defaults to os.environ

        Returns:
            List of user-friendly messages for settings that were rejected
        """
        config = config or {}
        environ = os.environ if environ is None else environ
        rejected = []

        quiz_config = config.get('quiz', {})
        cli_config = config.get('cli', {})

        settings = {
            'storage': quiz_config.get('storage'),
            'quiz_file': quiz_config.get('quiz_file'),
            'database_url': quiz_config.get('database_url'),
            'prompt': cli_config.get('prompt'),
            'use_color': cli_config.get('use_color'),
        }

        for env_name, setting in self.ENV_OVERRIDES.items():
            if environ.get(env_name):
                self.logger.info(f"Using {env_name} from environment")
                settings[setting] = environ[env_name]

        setters = {
            'storage': self.set_storage,
            'quiz_file': self.set_quiz_file,
            'database_url': self.set_database_url,
            'prompt': self.set_prompt,
            'use_color': self.set_use_color,
        }

        for name, value in settings.items():
            if value is None:
                continue
            result = setters[name](value)
            if not result['success']:
                self.logger.warning(f"Ignoring invalid '{name}' setting: {result['error']}")
                rejected.append(result['user_message'])

        return rejected

    def validate_settings(self) -> Dict[str, Any]:
        """
        Validate current settings and return validation results.

        Returns:
            Dictionary with validation results and any issues found
        """
        validation_result = {
            "valid": True,
            "issues": []
        }

        if self._storage not in self.STORAGE_BACKENDS:
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid storage backend: {self._storage}")

        if self._storage == "json" and (not isinstance(self._quiz_file, str) or not self._quiz_file.strip()):
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid quiz file: {self._quiz_file}")

        if self._storage == "sql" and "://" not in str(self._database_url):
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid database URL: {self._database_url}")

        if not isinstance(self._use_color, bool):
            validation_result["valid"] = False
            validation_result["issues"].append(f"Invalid color setting: {self._use_color}")

        return validation_result

    def get_settings_summary(self) -> str:
        """
        Get a formatted summary of current settings.

        Returns:
            Human-readable string describing current settings
        """
        source = self._quiz_file if self._storage == "json" else self._database_url
        return (
            f"Quiz Trainer Settings:\n"
            f"• Storage: {self._storage} ({source})\n"
            f"• Prompt: {self._prompt!r}\n"
            f"• Colors: {'on' if self._use_color else 'off'}"
        )
