"""
Where each conversation's dialogue state is kept between messages.

MemoryConversationStore keeps states in this process. RedisConversationStore
keeps them in Redis as JSON so they survive restarts and can be shared by
several web workers.
"""
import json
import threading

from models import StartState, dialogue_from_dict

KEY_PREFIX = "wordle:dialogue:"


class MemoryConversationStore:
    def __init__(self):
        self._states = {}
        self._lock = threading.Lock()

    def get(self, chat_id):
        with self._lock:
            return self._states.get(str(chat_id), StartState())

    def set(self, chat_id, state):
        with self._lock:
            if isinstance(state, StartState):
                self._states.pop(str(chat_id), None)
            else:
                self._states[str(chat_id)] = state


class RedisConversationStore:
    """
    Args:
        r: redis client created with decode_responses=True
        ttl: seconds an idle game is kept (None keeps it forever)
    """

    def __init__(self, r, ttl=None):
        self.r = r
        self.ttl = ttl

    def key(self, chat_id) -> str:
        return f"{KEY_PREFIX}{chat_id}"

    def get(self, chat_id):
        raw = self.r.get(self.key(chat_id))
        if not raw:
            return StartState()
        return dialogue_from_dict(json.loads(raw))

    def set(self, chat_id, state):
        if isinstance(state, StartState):
            self.r.delete(self.key(chat_id))
        else:
            self.r.set(self.key(chat_id), json.dumps(state.to_dict()), ex=self.ttl)
