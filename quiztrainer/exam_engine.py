"""
Examination engine for play mode.
Asks every quiz once in random order until the pool runs out or an answer is wrong.
"""
import asyncio
import logging
import random
import time
from typing import List, Optional

from .models import Quiz, SessionOutcome, SessionResult, SessionState

logger = logging.getLogger(__name__)

TALLY_TITLE = "End of exam. Correct answers:"


def normalize_answer(text: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return text.strip().lower()


def answers_match(given: str, expected: str) -> bool:
    """Exact comparison of the normalized forms, no partial credit."""
    return normalize_answer(given) == normalize_answer(expected)


class ExamEngineError(Exception):
    """Base exception for examination engine errors."""
    pass


class SessionAbortedError(ExamEngineError):
    """
    Raised when a collaborator fails during a play session.

    No tally is reported for an aborted session. The original error is
    chained as __cause__.
    """

    def __init__(self, message: str, score: int = 0, asked: int = 0):
        super().__init__(message)
        self.score = score
        self.asked = asked
        self.outcome = SessionOutcome.ABORTED


class SessionLifecycleLogger:
    """Structured logging for play session events."""

    @staticmethod
    def log_session_start(pool_size: int) -> float:
        start_time = time.time()
        logger.info(
            f"Session lifecycle: START - {pool_size} quizzes in pool",
            extra={
                'event_type': 'session_start',
                'pool_size': pool_size,
                'timestamp': start_time
            }
        )
        return start_time

    @staticmethod
    def log_question(index: int, remaining: int) -> None:
        logger.debug(
            f"Session lifecycle: ASK - drew index {index}, {remaining} left after removal",
            extra={
                'event_type': 'session_question',
                'index': index,
                'remaining': remaining,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_answer(correct: bool, score: int) -> None:
        logger.debug(
            f"Session lifecycle: ANSWER - {'correct' if correct else 'incorrect'}, score {score}",
            extra={
                'event_type': 'session_answer',
                'correct': correct,
                'score': score,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_state_transition(from_state: SessionState, to_state: SessionState, reason: str = None) -> None:
        logger.debug(
            f"Session lifecycle: STATE_TRANSITION - {from_state.name} -> {to_state.name}" +
            (f" ({reason})" if reason else ""),
            extra={
                'event_type': 'session_state_transition',
                'from_state': from_state.value,
                'to_state': to_state.value,
                'reason': reason,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_session_end(outcome: SessionOutcome, score: int, asked: int, start_time: float) -> None:
        logger.info(
            f"Session lifecycle: END - {outcome.name}, score {score}/{asked} asked, {time.time() - start_time:.1f}s",
            extra={
                'event_type': 'session_end',
                'outcome': outcome.value,
                'score': score,
                'asked': asked,
                'duration': time.time() - start_time,
                'timestamp': time.time()
            }
        )

    @staticmethod
    def log_session_abort(error: BaseException, score: int, asked: int) -> None:
        logger.warning(
            f"Session lifecycle: ABORTED - {type(error).__name__}: {error}",
            extra={
                'event_type': 'session_aborted',
                'error_type': type(error).__name__,
                'error_message': str(error),
                'score': score,
                'asked': asked,
                'timestamp': time.time()
            }
        )


class ExaminationEngine:
    """Runs play sessions against a quiz store, a prompt and an output sink."""

    def __init__(self, store, prompt, output, rng: Optional[random.Random] = None):
        """
        Args:
            store: Anything with get_all() returning the quizzes
            prompt: Anything with an async ask(text) returning the trimmed answer
            output: Anything with log(line) and biglog(value, color, title)
            rng: Random source, defaults to the random module
        """
        self.store = store
        self.prompt = prompt
        self.output = output
        self.rng = rng or random

    def _draw_index(self, pool_size: int) -> int:
        index = int(self.rng.random() * pool_size)
        assert 0 <= index < pool_size, f"random index {index} outside pool of {pool_size}"
        return index

    async def run_session(self) -> SessionResult:
        """
        Run one complete play session.

        Returns:
            SessionResult with EXHAUSTED or FAILED outcome and the final score

        Raises:
            SessionAbortedError: If the store, prompt or output fails; no tally is emitted
            asyncio.CancelledError: If the task running the session is cancelled
        """
        score = 0
        asked: List[Quiz] = []
        state = SessionState.RUNNING

        try:
            pool = list(self.store.get_all())
            total = len(pool)
            start_time = SessionLifecycleLogger.log_session_start(total)

            while state is SessionState.RUNNING:
                if not pool:
                    self.output.log("Nothing left to ask.")
                    SessionLifecycleLogger.log_state_transition(state, SessionState.EXHAUSTED, "pool empty")
                    state = SessionState.EXHAUSTED
                    break

                index = self._draw_index(len(pool))
                quiz = pool.pop(index)
                asked.append(quiz)
                SessionLifecycleLogger.log_question(index, len(pool))

                answer = await self.prompt.ask(
                    self.output.colorize(f"{quiz.question}? ", "red")
                )

                if answers_match(answer, quiz.answer):
                    score += 1
                    SessionLifecycleLogger.log_answer(True, score)
                    label = "correct answer" if score == 1 else "correct answers"
                    self.output.log(f"CORRECT - {score} {label} so far.")
                else:
                    SessionLifecycleLogger.log_answer(False, score)
                    self.output.log(
                        f"INCORRECT. The correct answer was: {self.output.colorize(quiz.answer, 'magenta')}"
                    )
                    SessionLifecycleLogger.log_state_transition(state, SessionState.FAILED, "wrong answer")
                    state = SessionState.FAILED

            self.output.biglog(score, "magenta", title=TALLY_TITLE)

        except asyncio.CancelledError as e:
            SessionLifecycleLogger.log_session_abort(e, score, len(asked))
            raise
        except AssertionError:
            raise
        except Exception as e:
            SessionLifecycleLogger.log_session_abort(e, score, len(asked))
            SessionLifecycleLogger.log_state_transition(state, SessionState.ABORTED, type(e).__name__)
            raise SessionAbortedError(
                f"Play session aborted: {e}", score=score, asked=len(asked)
            ) from e

        outcome = SessionOutcome.EXHAUSTED if state is SessionState.EXHAUSTED else SessionOutcome.FAILED
        SessionLifecycleLogger.log_state_transition(state, SessionState.DONE)
        SessionLifecycleLogger.log_session_end(outcome, score, len(asked), start_time)
        return SessionResult(outcome=outcome, score=score, total=total, asked=asked)

    async def check_single(self, quiz: Quiz) -> bool:
        """
        Ask one quiz and report whether the answer was right.

        Returns:
            True if the answer matched
        """
        answer = await self.prompt.ask(self.output.colorize(f"{quiz.question}? ", "red"))
        if answers_match(answer, quiz.answer):
            self.output.log("Correct")
            self.output.biglog("Correct", "green")
            return True
        self.output.log("Incorrect")
        self.output.biglog("Incorrect", "red")
        return False
