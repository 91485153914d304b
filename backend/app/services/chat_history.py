from __future__ import annotations

from collections import OrderedDict, deque
from threading import Lock
from typing import Deque, List

from backend.core.ports.chat_model import Turn


class ChatHistoryStore:
    """In-memory ring buffer of chat turns per session id.

    Keeps at most ``max_exchanges`` user/model pairs per session and at most
    ``max_sessions`` sessions (least recently used evicted). Not persisted.
    """

    def __init__(self, max_exchanges: int = 10, max_sessions: int = 1000) -> None:
        self.max_exchanges = max(1, int(max_exchanges))
        self.max_sessions = max(1, int(max_sessions))
        self._sessions: "OrderedDict[str, Deque[Turn]]" = OrderedDict()
        self._lock = Lock()

    def get(self, session_id: str) -> List[Turn]:
        with self._lock:
            turns = self._sessions.get(session_id)
            return list(turns) if turns else []

    def append_exchange(self, session_id: str, user_text: str, model_text: str) -> None:
        with self._lock:
            turns = self._sessions.get(session_id)
            if turns is None:
                turns = deque(maxlen=self.max_exchanges * 2)
                self._sessions[session_id] = turns
            self._sessions.move_to_end(session_id)
            turns.append(("user", user_text))
            turns.append(("model", model_text))
            while len(self._sessions) > self.max_sessions:
                self._sessions.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
