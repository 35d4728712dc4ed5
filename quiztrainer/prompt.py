"""
Asynchronous line prompt for the quiz trainer REPL.
"""
import asyncio
import logging
import threading
from typing import Callable, Optional

from rich.console import Console

logger = logging.getLogger(__name__)


class PromptError(Exception):
    """Base exception for prompt errors."""
    pass


class PromptClosedError(PromptError):
    """Raised when input has ended or the prompt was closed."""
    pass


class PromptBusyError(PromptError):
    """Raised when a second question is asked while one is still pending."""
    pass


class PromptService:
    """
    Asks questions on the terminal without blocking the event loop.

    Each blocking read runs on its own daemon thread and stays attached to the
    service until an ask() consumes its line. A cancelled ask() leaves the
    read in place for the next ask(), so at most one thread ever reads from
    the terminal. Only one ask() may wait at a time; closing the service
    releases a waiting ask() with PromptClosedError.
    """

    def __init__(self, console: Optional[Console] = None, reader: Optional[Callable[[str], str]] = None):
        """
        Args:
            console: rich console used to render the prompt text
            reader: blocking callable returning one line of input, mainly for tests
        """
        self.console = console or Console(highlight=False)
        self._reader = reader or self._read_line
        self._read: Optional[asyncio.Future] = None
        self._waiter: Optional[asyncio.Future] = None
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_pending(self) -> bool:
        """True while a reader thread is still waiting for a line."""
        return self._read is not None and not self._read.done()

    def _read_line(self, text: str) -> str:
        return self.console.input(text)

    def _start_read(self, text: str) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def deliver(setter, value):
            if not future.done():
                setter(value)

        def worker():
            try:
                line = self._reader(text)
            except Exception as e:
                outcome = (future.set_exception, e)
            else:
                outcome = (future.set_result, line)
            try:
                loop.call_soon_threadsafe(deliver, *outcome)
            except RuntimeError:
                logger.debug("Event loop closed before the input line arrived")

        threading.Thread(target=worker, name="quiz-prompt-reader", daemon=True).start()
        return future

    async def ask(self, text: str) -> str:
        """
        Show text and wait for one line of input.

        If an earlier ask() was cancelled while its read was still running,
        this call waits on that read instead of starting another one.

        Returns:
            The answer with surrounding whitespace removed

        Raises:
            PromptClosedError: If input ended or close() was called
            PromptBusyError: If another question is still waiting for input
        """
        if self._closed:
            raise PromptClosedError("Prompt is closed")
        if self._waiter is not None:
            raise PromptBusyError("Another question is still waiting for an answer")

        if self._read is None:
            self._read = self._start_read(text)
        else:
            logger.debug("Waiting on the read left by a cancelled question")
        read = self._read

        self._waiter = asyncio.shield(read)
        try:
            answer = await self._waiter
        except asyncio.CancelledError:
            if self._closed:
                raise PromptClosedError("Prompt closed while waiting for input") from None
            raise
        except EOFError as e:
            logger.info("Input stream ended")
            self._read = None
            self._closed = True
            raise PromptClosedError("Input stream ended") from e
        except Exception:
            self._read = None
            raise
        finally:
            self._waiter = None

        self._read = None
        if self._closed:
            raise PromptClosedError("Prompt closed while waiting for input")
        return answer.strip()

    def close(self) -> None:
        """Close the prompt, releasing any waiting question.

        A reader thread blocked on the terminal keeps running until its line
        or end of input arrives; it is a daemon and does not hold up exit.
        """
        if self._closed:
            return
        self._closed = True
        if self._waiter is not None and not self._waiter.done():
            logger.debug("Releasing pending prompt on close")
            self._waiter.cancel()
