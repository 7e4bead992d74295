from __future__ import annotations
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from . import config as CFG
from .state import TextState

log = logging.getLogger(__name__)


@dataclass
class Session:
    id: str
    state: TextState
    # callers hold this for the whole of one operation, so a session sees
    # a strict sequence of edits
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionRegistry:
    """
    Text sessions keyed by an opaque id chosen at the HTTP/CLI boundary.

    Ids come from clients, so the registry is bounded: past `max_sessions`
    the least recently used session is evicted.
    """

    def __init__(self, boundaries: Optional[Iterable[str]] = None, max_sessions: Optional[int] = None) -> None:
        self.boundaries = frozenset(CFG.BOUNDARY_CHARS if boundaries is None else boundaries)
        self.max_sessions = max(1, CFG.MAX_SESSIONS if max_sessions is None else max_sessions)
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, sid: Optional[str] = None) -> Session:
        sid = sid or CFG.DEFAULT_SESSION
        with self._lock:
            s = self._sessions.get(sid)
            if s is None:
                s = Session(sid, TextState(self.boundaries))
                self._sessions[sid] = s
                while len(self._sessions) > self.max_sessions:
                    old, _ = self._sessions.popitem(last=False)
                    log.info("evicted idle session %r", old)
            else:
                self._sessions.move_to_end(sid)
            return s

    def drop(self, sid: Optional[str] = None) -> None:
        with self._lock:
            self._sessions.pop(sid or CFG.DEFAULT_SESSION, None)

    def __contains__(self, sid: str) -> bool:
        return sid in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
