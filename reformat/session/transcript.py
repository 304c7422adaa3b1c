"""
Explain-it-back conversation.

The learner explains the topic to a tutor. The transcript is append-only
and strictly ordered: a turn is not dispatched until the previous reply
(or failure) has been recorded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from loguru import logger

from reformat.content.models import TransformedDocument
from reformat.core.errors import GenerationError, InvalidTransitionError
from reformat.core.profiles import ProfileType
from reformat.integrations.gemini_client import GenerationGateway
from reformat.integrations.prompts import EXPLAIN_GREETING


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


@dataclass(frozen=True)
class Message:
    role: Role
    text: str


@dataclass
class ConversationTranscript:
    """Ordered chat history. Messages are only ever appended."""

    _messages: list[Message] = field(default_factory=list)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def append(self, role: Role, text: str) -> Message:
        message = Message(role=Role(role), text=text)
        self._messages.append(message)
        return message

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)


class ExplainSession:
    """
    One explain-it-back conversation about a document.

    The greeting is local and is not sent to the tutor as history.
    """

    def __init__(
        self,
        document: TransformedDocument,
        profile: ProfileType,
        gateway: GenerationGateway,
    ):
        self.document = document
        self.profile = ProfileType(profile)
        self.gateway = gateway
        self.transcript = ConversationTranscript()
        self.transcript.append(Role.MODEL, EXPLAIN_GREETING.format(title=document.title))
        self._pending = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    def _history(self) -> list[Message]:
        # Everything after the greeting, before the turn being sent
        return list(self.transcript.messages[1:-1])

    async def send(self, text: str) -> Message:
        """Append the learner's turn, await the reply, append it."""
        text = text.strip()
        if not text:
            raise ValueError("Cannot send an empty message")
        if self._pending:
            raise InvalidTransitionError("A reply is still pending")

        self._pending = True
        self.transcript.append(Role.USER, text)
        try:
            reply = await self.gateway.chat(self._history(), text, self.document, self.profile)
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Tutor turn failed: {e}")
            raise GenerationError(f"Tutor turn failed: {e}") from e
        finally:
            self._pending = False

        return self.transcript.append(Role.MODEL, reply)
