"""
Data manager for the JSON quiz file and quiz data validation.
"""
import json
import os
import logging
from typing import Any, Dict, List, Union
from pathlib import Path

from .models import Quiz


DEFAULT_QUIZZES = [
    {"question": "Capital of Italy", "answer": "Rome"},
    {"question": "Capital of France", "answer": "Paris"},
    {"question": "Capital of Spain", "answer": "Madrid"},
    {"question": "Capital of Portugal", "answer": "Lisbon"},
]


class QuizStoreError(Exception):
    """Base exception for quiz store errors."""
    pass


class InvalidQuizIdError(QuizStoreError):
    """Raised when a quiz id is malformed or out of range."""

    def __init__(self, quiz_id=None):
        super().__init__("The id parameter is not valid.")
        self.quiz_id = quiz_id


class InvalidQuizError(QuizStoreError):
    """Raised when a quiz question or answer is empty."""
    pass


def parse_quiz_id(quiz_id: Union[int, str], count: int) -> int:
    """
    Convert a user supplied id into a valid list index.

    Args:
        quiz_id: Integer index or a string of digits
        count: Number of quizzes currently stored

    Returns:
        The index as an int

    Raises:
        InvalidQuizIdError: If the id is not a non-negative integer below count
    """
    if isinstance(quiz_id, bool):
        raise InvalidQuizIdError(quiz_id)
    if isinstance(quiz_id, str):
        quiz_id = quiz_id.strip()
        if not quiz_id.isdigit():
            raise InvalidQuizIdError(quiz_id)
        index = int(quiz_id)
    elif isinstance(quiz_id, int):
        index = quiz_id
    else:
        raise InvalidQuizIdError(quiz_id)

    if index < 0 or index >= count:
        raise InvalidQuizIdError(quiz_id)
    return index


def build_quiz(question: str, answer: str) -> Quiz:
    """Create a Quiz, rejecting empty questions or answers."""
    if not isinstance(question, str) or not question.strip():
        raise InvalidQuizError("The question cannot be empty.")
    if not isinstance(answer, str) or not answer.strip():
        raise InvalidQuizError("The answer cannot be empty.")
    return Quiz(question=question.strip(), answer=answer.strip())


class DataManager:
    """Manages the JSON quiz file and the in-memory quiz list."""

    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB limit

    def __init__(self, quiz_file: str = "quizzes.json"):
        """
        Initialize DataManager with the quiz file path.

        Args:
            quiz_file: Path to the JSON file holding the quizzes
        """
        self.quiz_file = Path(quiz_file)
        self.quizzes: List[Quiz] = []
        self.logger = logging.getLogger(__name__)
        self.load_errors: List[str] = []  # Track loading errors for user feedback
        self.defaults_loaded = False

    def load(self) -> List[Quiz]:
        """
        Load quizzes from the JSON file.

        A missing file is created with the default quizzes. An unreadable or
        invalid file is left untouched and the defaults are used in memory.

        Returns:
            The loaded quizzes
        """
        self.load_errors.clear()
        self.defaults_loaded = False

        if not self.quiz_file.exists():
            self.logger.info(f"Quiz file {self.quiz_file} not found, creating it with default quizzes")
            self._use_defaults()
            try:
                self.save()
            except QuizStoreError as e:
                self.load_errors.append(str(e))
            return self.get_all()

        load_result = self._load_quiz_file_safely()
        if not load_result['success']:
            self.load_errors.append(f"{self.quiz_file.name}: {load_result['error']}")
            self.logger.warning(f"Falling back to default quizzes: {load_result['error']}")
            self._use_defaults()
            return self.get_all()

        self.logger.info(f"Loaded {len(self.quizzes)} quizzes from {self.quiz_file}")
        return self.get_all()

    def save(self) -> None:
        """
        Write the current quizzes to the JSON file.

        Raises:
            QuizStoreError: If the file cannot be written
        """
        data = {
            "quiz": [
                {"question": quiz.question, "answer": quiz.answer}
                for quiz in self.quizzes
            ]
        }
        try:
            if self.quiz_file.parent and not self.quiz_file.parent.exists():
                self.quiz_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.quiz_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            self.logger.error(f"Failed to write quiz file {self.quiz_file}: {e}")
            raise QuizStoreError(f"Cannot save quizzes to {self.quiz_file}: {e}") from e
        self.logger.debug(f"Saved {len(self.quizzes)} quizzes to {self.quiz_file}")

    def validate_quiz_structure(self, data: Any) -> bool:
        """
        Validate that JSON data has the correct quiz structure.

        Expected structure:
        {
            "quiz": [
                {
                    "question": str,
                    "answer": str
                }
            ]
        }

        Args:
            data: Parsed JSON data to validate

        Returns:
            True if structure is valid, False otherwise
        """
        if not isinstance(data, dict):
            self.logger.error("Quiz data must be a JSON object")
            return False

        if "quiz" not in data:
            self.logger.error("Quiz data must contain a 'quiz' key")
            return False

        quiz_array = data["quiz"]
        if not isinstance(quiz_array, list):
            self.logger.error("'quiz' value must be an array")
            return False

        for i, quiz_data in enumerate(quiz_array):
            if not isinstance(quiz_data, dict):
                self.logger.error(f"Quiz {i} must be an object")
                return False

            if "question" not in quiz_data:
                self.logger.error(f"Quiz {i} missing 'question' field")
                return False

            if "answer" not in quiz_data:
                self.logger.error(f"Quiz {i} missing 'answer' field")
                return False

            if not isinstance(quiz_data["question"], str):
                self.logger.error(f"Quiz {i} 'question' field must be a string")
                return False

            if not isinstance(quiz_data["answer"], str):
                self.logger.error(f"Quiz {i} 'answer' field must be a string")
                return False

        return True

    def get_all(self) -> List[Quiz]:
        """
        Get every stored quiz.

        Returns:
            A new list, so callers may change it without touching the store
        """
        return list(self.quizzes)

    def count(self) -> int:
        """Number of stored quizzes."""
        return len(self.quizzes)

    def get_by_index(self, quiz_id: Union[int, str]) -> Quiz:
        """
        Retrieve one quiz by id.

        Raises:
            InvalidQuizIdError: If the id is not valid
        """
        return self.quizzes[parse_quiz_id(quiz_id, len(self.quizzes))]

    def add(self, question: str, answer: str) -> Quiz:
        """Append a new quiz and save the file."""
        quiz = build_quiz(question, answer)
        self._commit(self.quizzes + [quiz])
        self.logger.info(f"Added quiz {len(self.quizzes) - 1}: {quiz.question}")
        return quiz

    def update(self, quiz_id: Union[int, str], question: str, answer: str) -> Quiz:
        """Replace the quiz at the given id and save the file."""
        index = parse_quiz_id(quiz_id, len(self.quizzes))
        quiz = build_quiz(question, answer)
        quizzes = list(self.quizzes)
        quizzes[index] = quiz
        self._commit(quizzes)
        self.logger.info(f"Updated quiz {index}: {quiz.question}")
        return quiz

    def delete_by_index(self, quiz_id: Union[int, str]) -> Quiz:
        """Remove the quiz at the given id and save the file."""
        index = parse_quiz_id(quiz_id, len(self.quizzes))
        quiz = self.quizzes[index]
        self._commit(self.quizzes[:index] + self.quizzes[index + 1:])
        self.logger.info(f"Deleted quiz {index}: {quiz.question}")
        return quiz

    def _commit(self, quizzes: List[Quiz]) -> None:
        """Save quizzes, keeping the previous list if the file cannot be written."""
        previous = self.quizzes
        self.quizzes = quizzes
        try:
            self.save()
        except QuizStoreError:
            self.quizzes = previous
            raise

    def _use_defaults(self) -> None:
        self.quizzes = [Quiz(q["question"], q["answer"]) for q in DEFAULT_QUIZZES]
        self.defaults_loaded = True

    def _load_quiz_file_safely(self) -> Dict[str, Any]:
        """
        Load the quiz file with comprehensive error handling.

        Returns:
            Dictionary with success status and error message if applicable
        """
        try:
            if not os.access(self.quiz_file, os.R_OK):
                return {
                    'success': False,
                    'error': "Permission denied: Cannot read file"
                }

            file_size = self.quiz_file.stat().st_size
            if file_size > self.MAX_FILE_SIZE:
                return {
                    'success': False,
                    'error': f"File too large ({file_size / 1024 / 1024:.1f}MB). Maximum size is {self.MAX_FILE_SIZE / 1024 / 1024}MB"
                }

            with open(self.quiz_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if not self.validate_quiz_structure(data):
                return {
                    'success': False,
                    'error': "Invalid quiz structure"
                }

            self.quizzes = [
                Quiz(question=q["question"], answer=q["answer"])
                for q in data["quiz"]
            ]
            return {'success': True}

        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in {self.quiz_file}: {e}")
            return {
                'success': False,
                'error': f"Invalid JSON: {e}"
            }
        except PermissionError:
            return {
                'success': False,
                'error': "Permission denied"
            }
        except OSError as e:
            return {
                'success': False,
                'error': f"System error: {e}"
            }

    def get_load_errors(self) -> List[str]:
        """
        Get list of errors encountered during the last load operation.

        Returns:
            List of error messages
        """
        return self.load_errors.copy()

    def has_load_errors(self) -> bool:
        """Check if there were any errors during the last load operation."""
        return len(self.load_errors) > 0

    def get_loading_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the last load operation.

        Returns:
            Dictionary with loading statistics and status
        """
        return {
            'total_quizzes': len(self.quizzes),
            'has_errors': self.has_load_errors(),
            'error_count': len(self.load_errors),
            'errors': self.get_load_errors(),
            'defaults_loaded': self.defaults_loaded,
            'source': str(self.quiz_file)
        }
