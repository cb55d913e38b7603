"""
Glue between a message channel and the dialogue engine.
"""
import logging
import threading
from contextlib import contextmanager
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)


class Delivery(NamedTuple):
    """Outcome of handing a reply to the channel."""
    chat_id: str
    reply: Optional[str]
    delivered: bool
    error: Optional[BaseException] = None


class Bot:
    """
    Processes incoming messages one at a time per conversation.

    Different conversations may be handled concurrently; messages of the
    same conversation are serialised so its state is never updated by two
    handlers at once.

    Args:
        engine: DialogueEngine
        conversations: store with get(chat_id) / set(chat_id, state)
        channel: object with send(chat_id, text), or None to only return replies
    """

    def __init__(self, engine, conversations, channel=None):
        self.engine = engine
        self.conversations = conversations
        self.channel = channel
        # chat_id -> [lock, number of handlers holding or waiting for it]
        self._locks = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _conversation_lock(self, chat_id):
        with self._locks_guard:
            entry = self._locks.setdefault(chat_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[chat_id]

    def handle_message(self, chat_id, text: str) -> Delivery:
        """Run one message through the state machine and deliver the reply."""
        chat_id = str(chat_id)
        with self._conversation_lock(chat_id):
            state = self.conversations.get(chat_id)
            reply, next_state = self.engine.react(state, text)
            self.conversations.set(chat_id, next_state)

        if type(state) is not type(next_state):
            logger.info("Chat %s: %s -> %s", chat_id, type(state).__name__, type(next_state).__name__)

        return self.deliver(chat_id, reply)

    def deliver(self, chat_id, reply) -> Delivery:
        if reply is None or self.channel is None:
            return Delivery(chat_id, reply, delivered=False)
        try:
            self.channel.send(chat_id, reply)
        except Exception as e:
            logger.exception("Failed to deliver reply to chat %s", chat_id)
            return Delivery(chat_id, reply, delivered=False, error=e)
        return Delivery(chat_id, reply, delivered=True)
