"""Conversation orchestration against the upstream assistant service.

One turn is: resolve or create the thread, append the latest user message,
start a run, poll it until it settles, then read the newest thread message.
Each call is independent; the only state carried between turns is the thread
handle the caller passes back in.

Polling suspends with ``asyncio.sleep`` so many in-flight turns can wait on
the same event loop without holding a thread each.
"""

import asyncio
import logging
from collections.abc import Sequence

from assistant_chat.assistant.config import AssistantConfig, load_assistant_config
from assistant_chat.assistant.errors import (
    AssistantTimeoutError,
    ChatError,
    InvalidRequestError,
    NoAssistantResponseError,
    UpstreamRunFailedError,
    error_message,
    status_code_of,
    to_chat_error,
)
from assistant_chat.assistant.upstream import AssistantBackend, OpenAIAssistantBackend, RunState
from assistant_chat.models.schemas import Role, Turn, TurnResult

logger = logging.getLogger(__name__)


def last_user_turn(history: Sequence[Turn]) -> Turn:
    """Return the most recent user turn in the history.

    Raises:
        InvalidRequestError: If history is not a list of turns or has no user turn.
    """
    if not isinstance(history, Sequence) or isinstance(history, str):
        raise InvalidRequestError("Invalid messages format")
    if not all(isinstance(turn, Turn) for turn in history):
        raise InvalidRequestError("Invalid messages format")

    for turn in reversed(history):
        if turn.role is Role.USER:
            return turn
    raise InvalidRequestError("No user message found")


class ConversationOrchestrator:
    """Drives a single chat turn through the assistant service."""

    def __init__(self, config: AssistantConfig, backend: AssistantBackend) -> None:
        self._config = config
        self._backend = backend

    async def submit_turn(
        self,
        history: Sequence[Turn],
        thread_id: str | None = None,
    ) -> TurnResult:
        """Submit the last user turn and wait for the assistant's reply.

        Args:
            history: Conversation so far; must contain at least one user turn.
            thread_id: Upstream thread to resume, or None to start a new one.

        Returns:
            The assistant turn and the thread handle to use next time.

        Raises:
            ChatError: Classified failure, see ``assistant_chat.assistant.errors``.
        """
        user_turn = last_user_turn(history)

        try:
            thread_id = await self._backend.resolve_thread(thread_id)
            await self._backend.append_user_message(thread_id, user_turn.content)
            run = await self._backend.start_run(thread_id, self._config.assistant_id)
            logger.info(f"Started run {run.id} on thread {thread_id}")

            run = await self._wait_for_run(thread_id, run)
            self._raise_for_run(run)

            message = await self._backend.latest_message(thread_id)
        except ChatError:
            raise
        except Exception as e:
            logger.error(
                f"Assistant API error: type={type(e).__name__} "
                f"status={status_code_of(e)} message={error_message(e)}"
            )
            raise to_chat_error(e) from e

        if message is None or message.role != Role.ASSISTANT.value:
            logger.error(f"No assistant message found on thread {thread_id} after run {run.id}")
            raise NoAssistantResponseError()

        return TurnResult(
            assistant_turn=Turn(role=Role.ASSISTANT, content=message.content),
            thread_id=thread_id,
        )

    async def _wait_for_run(self, thread_id: str, run: RunState) -> RunState:
        """Poll the run until it leaves the pending states.

        Raises:
            AssistantTimeoutError: If it is still pending after the last poll.
        """
        polls = 0
        while run.is_pending:
            if polls >= self._config.max_poll_attempts:
                logger.warning(
                    f"Run {run.id} still {run.status} after {polls} polls, giving up"
                )
                raise AssistantTimeoutError()
            await asyncio.sleep(self._config.poll_interval_seconds)
            run = await self._backend.get_run(thread_id, run.id)
            polls += 1
            logger.debug(f"Run {run.id} poll {polls}: {run.status}")
        return run

    @staticmethod
    def _raise_for_run(run: RunState) -> None:
        if run.status == "completed":
            return
        if run.status == "failed":
            logger.warning(f"Run {run.id} failed: {run.failure_reason}")
            raise UpstreamRunFailedError(run.failure_reason)
        logger.warning(f"Run {run.id} ended with status {run.status}")
        raise UpstreamRunFailedError(f"run ended with status '{run.status}'")


# Module-level singleton instance
_orchestrator: ConversationOrchestrator | None = None


def get_orchestrator() -> ConversationOrchestrator:
    """Get or create the process-wide orchestrator.

    Returns:
        The ConversationOrchestrator instance.

    Raises:
        ConfigurationError: If the assistant configuration is incomplete.
    """
    global _orchestrator
    if _orchestrator is None:
        config = load_assistant_config()
        _orchestrator = ConversationOrchestrator(config, OpenAIAssistantBackend(config))
    return _orchestrator
