import logging
import threading
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from cochef.core.config import config
from cochef.core.errors import ConversationBusyError, SessionUserMismatchError
from cochef.models.schemas import ChatMessage
from cochef.services.timer import TimerService

logger = logging.getLogger(__name__)


class Conversation:
    """Role-tagged chat history owned by one caller.

    The system message is set once at construction and always stays first;
    ``reset`` drops everything after it.
    """

    def __init__(self, system_prompt: str):
        self._system = ChatMessage(role="system", content=system_prompt)
        self._messages: list[ChatMessage] = []
        self._turn_lock = threading.Lock()

    @property
    def system_prompt(self) -> str:
        return self._system.content

    @property
    def messages(self) -> list[ChatMessage]:
        return [self._system, *self._messages]

    @property
    def history(self) -> list[ChatMessage]:
        """Messages after the system message."""
        return list(self._messages)

    def add_message(self, role: str, content: str) -> None:
        if role not in ("user", "assistant"):
            raise ValueError(f"Only user and assistant messages can be added, got '{role}'")
        self._messages.append(ChatMessage(role=role, content=content))

    def add_turn(self, user_text: str, assistant_text: str) -> None:
        self.add_message("user", user_text)
        self.add_message("assistant", assistant_text)

    def reset(self) -> None:
        self._messages = []

    @contextmanager
    def turn(self) -> Iterator["Conversation"]:
        """Holds the conversation for one turn; a second concurrent turn is rejected."""
        if not self._turn_lock.acquire(blocking=False):
            raise ConversationBusyError("A message is already being processed for this conversation")
        try:
            yield self
        finally:
            self._turn_lock.release()


@dataclass
class ChatSession:
    conversation: Conversation
    timer: TimerService = field(default_factory=TimerService)
    user_id: Optional[str] = None


class SessionRegistry:
    """In-memory chat sessions keyed by a client chosen session id.

    At most ``max_sessions`` are kept; creating one more drops the session
    that was used least recently.
    """

    def __init__(self, prompt_factory: Callable[[Optional[str]], str], max_sessions: Optional[int] = None):
        self._prompt_factory = prompt_factory
        self.max_sessions = max_sessions or config.SESSION_MAX_COUNT
        self._sessions: OrderedDict[str, ChatSession] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, session_id: str) -> Optional[ChatSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def get_or_create(self, session_id: str, user_id: Optional[str] = None) -> ChatSession:
        """
        Returns the session for ``session_id``, creating it when missing.

        A session created without a user takes the first ``user_id`` it is
        given later.

        Raises:
            SessionUserMismatchError: the session belongs to another user.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
                if user_id and session.user_id is None:
                    session.user_id = user_id
                elif user_id and session.user_id != user_id:
                    raise SessionUserMismatchError(f"Chat session {session_id} belongs to another user")
                return session

            conversation = Conversation(self._prompt_factory(user_id))
            session = ChatSession(conversation=conversation, user_id=user_id)
            self._sessions[session_id] = session
            logger.info(f"Started chat session {session_id}")

            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info(f"Dropped idle chat session {evicted}")
            return session

    def reset(self, session_id: str) -> bool:
        session = self.get(session_id)
        if session is None:
            return False
        with session.conversation.turn():
            session.conversation.reset()
        session.timer.hide_timer()
        return True
