"""Conversation engine: the boundary the host UI talks to.

Orchestrates directory listing, history fetch/merge, turn pairing, the
live session buffer and the selection state machine over one immutable
ViewState. Backend failures never escape this boundary; they end up as
loading/error fields on the state.

Usage:
    from threadview.session import ConversationEngine

    async with ConversationEngine.from_settings() as engine:
        await engine.refresh()
        engine.set_input("Hello!")
        await engine.submit()
        for message in engine.rendered():
            print(message.role.value, message.text)
"""

import asyncio
from typing import Any

from threadview.backend import Backend, BackendError, HttpBackend, UploadFile
from threadview.config import get_settings
from threadview.config.models import EngineConfig
from threadview.config.settings import Settings
from threadview.conversation.directory import ConversationDirectory, default_conversation_id
from threadview.conversation.history import HistoryFetcher, split_by_conversation
from threadview.conversation.models import LiveMessage, LiveSource, Turn, TurnId
from threadview.conversation.turns import build_turns_by_conversation
from threadview.exceptions import (
    DirectoryUnavailable,
    HistoryFetchFailed,
    InvalidTransition,
    SendFailed,
    UploadFailed,
)
from threadview.observability.logging import get_logger, setup_logging
from threadview.session import buffer, selection
from threadview.session.composer import RenderedMessage, compose
from threadview.session.single_flight import SingleFlight
from threadview.session.state import ViewState

logger = get_logger(__name__)


class ConversationEngine:
    """Aggregates backend history with the live session for the host UI."""

    def __init__(
        self,
        backend: Backend,
        config: EngineConfig | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            backend: Assistant backend collaborator
            config: Engine policy; defaults apply when omitted
        """
        self._backend = backend
        self._config = config or EngineConfig()
        self._directory = ConversationDirectory(backend)
        self._fetcher = HistoryFetcher(backend)
        self._buffer = buffer.LiveSessionBuffer()
        self._state = ViewState()
        self._refresh = SingleFlight(self._refresh_cycle, name="refresh")
        self._send_lock = asyncio.Lock()
        self._sends_in_flight = 0
        self._uploads_in_flight = 0

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ConversationEngine":
        """Build an engine talking HTTP to the configured backend.

        Also configures structured logging from `observability.logging`.
        """
        settings = settings or get_settings()
        setup_logging(**settings.observability.logging.model_dump())
        return cls(HttpBackend.from_config(settings.backend), settings.engine)

    async def __aenter__(self) -> "ConversationEngine":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._backend.close()

    # State

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def turns(self) -> tuple[Turn, ...]:
        """Side panel turns, most recent first."""
        return self._state.turns

    def rendered(self) -> tuple[RenderedMessage, ...]:
        """Main pane content for the current state."""
        state = self._state
        return compose(state.live_messages, state.upload_messages, state.turns, state.selection)

    def _apply(self, **changes: Any) -> ViewState:
        self._state = self._state.model_copy(update=changes)
        return self._state

    def set_input(self, text: str) -> ViewState:
        return self._apply(input_text=text)

    def select_conversation(self, conversation_id: str) -> ViewState:
        """Make a conversation the target of the next send."""
        return self._apply(active_conversation_id=conversation_id)

    # Selection

    def select_turn(self, turn_id: TurnId | str) -> ViewState:
        """Inspect a past turn and pre-fill the input with its prompt.

        A plain string is taken as a server message id.

        Raises:
            InvalidTransition: If no turn with that id is known
        """
        turn = self._state.find_turn(turn_id)
        if turn is None:
            key = turn_id if isinstance(turn_id, str) else turn_id.key
            raise InvalidTransition(f"Unknown turn: {key}")
        self._state = selection.select_turn(self._state, turn)
        logger.debug("turn_selected", turn_id=turn.id.key, conversation_id=turn.conversation_id)
        return self._state

    def back_to_live(self) -> ViewState:
        self._state = selection.back_to_live(self._state)
        return self._state

    # Refresh

    async def refresh(self) -> ViewState:
        """Reload conversations and their histories.

        Overlapping calls are serialized; calls made while a refresh is
        running share the single refresh that follows it.
        """
        return await self._refresh()

    async def _refresh_cycle(self) -> ViewState:
        self._apply(
            conversations_loading=True,
            history_loading=True,
            conversations_error=None,
            history_error=None,
        )

        try:
            conversations = await self._directory.list()
        except DirectoryUnavailable as exc:
            return self._apply(
                conversations=(),
                conversations_loading=False,
                history_loading=False,
                conversations_error=exc.message,
            )

        try:
            history = await self._fetcher.fetch_all(conversations)
        except HistoryFetchFailed as exc:
            logger.warning("refresh_history_frozen", conversation_id=exc.conversation_id)
            return self._apply(
                conversations=conversations,
                active_conversation_id=default_conversation_id(
                    conversations, self._state.active_conversation_id
                ),
                conversations_loading=False,
                history_loading=False,
                history_error=exc.message,
            )

        groups = split_by_conversation(history)
        turns = build_turns_by_conversation(
            (groups[c.id] for c in conversations if c.id in groups),
            self._config.ingestion_marker,
        )

        logger.info(
            "refresh_applied",
            conversation_count=len(conversations),
            message_count=len(history),
            turn_count=len(turns),
        )
        return self._apply(
            conversations=conversations,
            active_conversation_id=default_conversation_id(
                conversations, self._state.active_conversation_id
            ),
            history=history,
            turns=turns,
            conversations_loading=False,
            history_loading=False,
        )

    # Sending

    def _settle_failure(self, field: str, prompt: LiveMessage) -> tuple[LiveMessage, ...]:
        messages: tuple[LiveMessage, ...] = getattr(self._state, field)
        if self._config.retain_failed_messages:
            return buffer.mark_failed(messages, prompt.id)
        return buffer.retract(messages, prompt.id)

    async def submit(self, text: str | None = None) -> LiveMessage | None:
        """Send the input field (or `text`) as a new turn.

        The prompt is appended to the live view before the backend answers.
        Sends are delivered one at a time and each reply is placed right
        after its own prompt.

        Returns:
            The assistant's reply, or None when nothing was sent or the send failed
        """
        body = (self._state.input_text if text is None else text).strip()
        if not body:
            return None

        prompt = self._buffer.prompt(body, LiveSource.TYPED)
        self._state = selection.resend(self._state)
        target = self._state.active_conversation_id
        self._sends_in_flight += 1
        self._apply(
            live_messages=buffer.append(self._state.live_messages, prompt),
            input_text="",
            send_error=None,
            sending=True,
        )

        try:
            async with self._send_lock:
                conversation_id = target or self._state.active_conversation_id
                try:
                    reply = await self._backend.send_turn(body, conversation_id)
                except BackendError as exc:
                    error = SendFailed(exc.message)
                    logger.warning(
                        "send_failed",
                        conversation_id=conversation_id,
                        status_code=exc.status_code,
                        error=exc.message,
                    )
                    self._apply(
                        live_messages=self._settle_failure("live_messages", prompt),
                        send_error=error.message,
                    )
                    return None

                answer = self._buffer.reply(prompt, reply.text)
                self._apply(
                    live_messages=buffer.insert_reply(self._state.live_messages, answer),
                    active_conversation_id=self._state.active_conversation_id
                    or reply.conversation_id
                    or None,
                )
                logger.info("turn_sent", conversation_id=reply.conversation_id)
        finally:
            self._sends_in_flight -= 1
            self._apply(sending=self._sends_in_flight > 0)

        if self._config.refresh_after_send:
            await self.refresh()
        return answer

    async def upload(
        self,
        file: UploadFile | None = None,
        question: str | None = None,
    ) -> LiveMessage | None:
        """Send a question and/or file as a multimodal turn.

        Returns:
            The assistant's answer, or None when the upload was rejected or failed
        """
        question = question.strip() if question else None
        if not question and (file is None or file.size == 0):
            error = UploadFailed("Provide text, image, or file.")
            self._apply(upload_error=error.message)
            return None

        lines = [question] if question else []
        if file is not None:
            lines.append(f'Uploaded "{file.name}"')
        prompt = self._buffer.prompt("\n".join(lines), LiveSource.UPLOAD)
        target = self._state.active_conversation_id

        self._uploads_in_flight += 1
        self._apply(
            upload_messages=buffer.append(self._state.upload_messages, prompt),
            upload_error=None,
            uploading=True,
        )

        try:
            async with self._send_lock:
                conversation_id = target or self._state.active_conversation_id
                try:
                    reply = await self._backend.send_multimodal_turn(
                        question=question,
                        file=file,
                        conversation_id=conversation_id,
                    )
                except BackendError as exc:
                    error = UploadFailed(exc.message)
                    logger.warning(
                        "upload_failed",
                        conversation_id=conversation_id,
                        file_name=file.name if file else None,
                        status_code=exc.status_code,
                        error=exc.message,
                    )
                    self._apply(
                        upload_messages=self._settle_failure("upload_messages", prompt),
                        upload_error=error.message,
                    )
                    return None

                answer = self._buffer.reply(prompt, reply.text)
                self._apply(
                    upload_messages=buffer.insert_reply(self._state.upload_messages, answer),
                    active_conversation_id=self._state.active_conversation_id
                    or reply.conversation_id
                    or None,
                )
                logger.info(
                    "upload_answered",
                    conversation_id=reply.conversation_id,
                    file_name=file.name if file else None,
                )
        finally:
            self._uploads_in_flight -= 1
            self._apply(uploading=self._uploads_in_flight > 0)

        if self._config.refresh_after_send:
            await self.refresh()
        return answer
