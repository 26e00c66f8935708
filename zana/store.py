import json
import logging
import os
import threading
from collections import OrderedDict
from typing import Optional, Protocol

from zana.errors import ResultNotFound
from zana.models.schemas import AnalysisResult, Session

logger = logging.getLogger(__name__)

SESSION_KEY = "zana_session"


class SessionStore(Protocol):
    def load(self) -> Optional[Session]:
        ...

    def save(self, session: Session) -> None:
        ...

    def clear(self) -> None:
        ...


class MemorySessionStore:
    def __init__(self, session: Optional[Session] = None):
        self._session = session

    def load(self) -> Optional[Session]:
        return self._session.model_copy() if self._session else None

    def save(self, session: Session) -> None:
        self._session = session.model_copy()

    def clear(self) -> None:
        self._session = None


class JsonSessionStore:
    """
    The session as one JSON blob under a well-known key inside a JSON file.
    Other keys in the file are preserved.
    """

    def __init__(self, path: str, key: str = SESSION_KEY):
        self.path = path
        self.key = key
        self._lock = threading.Lock()

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_path, self.path)

    def load(self) -> Optional[Session]:
        with self._lock:
            blob = self._read_all().get(self.key)
        if not blob:
            return None
        return Session.model_validate_json(blob)

    def save(self, session: Session) -> None:
        with self._lock:
            data = self._read_all()
            data[self.key] = session.model_dump_json()
            self._write_all(data)

    def clear(self) -> None:
        with self._lock:
            data = self._read_all()
            if data.pop(self.key, None) is not None:
                self._write_all(data)


class ResultStore:
    """Completed analyses by id, oldest evicted first."""

    def __init__(self, max_items: int = 200):
        self.max_items = max_items
        self._items: "OrderedDict[str, AnalysisResult]" = OrderedDict()

    def put(self, result: AnalysisResult) -> None:
        self._items[result.id] = result
        while len(self._items) > self.max_items:
            evicted, _ = self._items.popitem(last=False)
            logger.debug("Evicted result %s", evicted)

    def get(self, result_id: str) -> AnalysisResult:
        try:
            return self._items[result_id]
        except KeyError:
            raise ResultNotFound(f"Result {result_id} not found")

    def __contains__(self, result_id: str) -> bool:
        return result_id in self._items

    def __len__(self) -> int:
        return len(self._items)


results_store = ResultStore()
