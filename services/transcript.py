"""
Append-only transcript of a session's conversation.

This module keeps the ordered log of user and system messages that the
presentation layer renders as the terminal history. The transcript is the
audit log of the session: messages can be appended and read, never edited or
removed. Reads return an immutable snapshot, so a snapshot taken before an
append is always a strict prefix of a snapshot taken after it.

Unlike the on-disk conversation history of earlier versions of this service,
the transcript is memory-resident and lives exactly as long as its session.
"""

import datetime
import itertools
import time
import uuid
from typing import Any, List, Optional, Tuple

from shared.models import Sender, TranscriptMessage


def generate_interaction_id() -> str:
    """
    Generates a unique interaction ID using UUID4.

    An interaction groups a user command with the system response it
    produced. Notices outside a command cycle get an interaction of their own.

    Returns:
        str: A UUID4 string (e.g., "a1b2c3d4-e5f6-7890-abcd-ef1234567890")
    """
    return str(uuid.uuid4())


class Transcript:
    """
    Ordered, append-only log of `TranscriptMessage` objects.

    Message ids combine the creation time in milliseconds with a per-transcript
    sequence number, so ids are unique and increase in creation order even when
    several messages are created within the same millisecond.
    """

    def __init__(self) -> None:
        self._messages: List[TranscriptMessage] = []
        self._ids = set()
        self._sequence = itertools.count(1)

    def next_message_id(self) -> str:
        return f"{int(time.time() * 1000)}-{next(self._sequence):06d}"

    def create_message(
        self,
        sender: Sender,
        text: str,
        interaction_id: Optional[str] = None,
        chart_data: Optional[Any] = None,
        table_data: Optional[Any] = None,
    ) -> TranscriptMessage:
        """
        Build a message with a fresh id and the current UTC timestamp.

        The message is not appended; pass it to `append`.
        """
        return TranscriptMessage(
            id=self.next_message_id(),
            sender=sender,
            text=text,
            timestamp=datetime.datetime.now(datetime.timezone.utc),
            interaction_id=interaction_id or generate_interaction_id(),
            chart_data=chart_data,
            table_data=table_data,
        )

    def append(self, message: TranscriptMessage) -> None:
        """
        Append a message to the end of the log.

        Raises:
            TypeError: If `message` is not a `TranscriptMessage`.
            ValueError: If a message with the same id was already appended.
        """
        if not isinstance(message, TranscriptMessage):
            raise TypeError(f"Expected TranscriptMessage, got {type(message).__name__}")
        if message.id in self._ids:
            raise ValueError(f"Duplicate transcript message id: {message.id}")
        self._ids.add(message.id)
        self._messages.append(message)

    def all(self) -> Tuple[TranscriptMessage, ...]:
        """Return a read-only snapshot of every message in insertion order."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)
