"""
Core data models for the quiz trainer.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


@dataclass(frozen=True)
class Quiz:
    """Represents a single question/answer pair."""
    question: str
    answer: str


class SessionState(Enum):
    """Enumeration of play session states."""
    RUNNING = "running"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    DONE = "done"
    ABORTED = "aborted"


class SessionOutcome(Enum):
    """How a play session ended."""
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    ABORTED = "aborted"


@dataclass
class SessionResult:
    """Outcome of one finished play session."""
    outcome: SessionOutcome
    score: int
    total: int
    asked: List[Quiz] = field(default_factory=list)
