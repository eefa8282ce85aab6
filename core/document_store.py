"""
JsonDocumentStore: one JSON document per user with merge-style writes.
Path: data/users/<user_id>.json

Writes merge nested maps key by key and replace everything else, matching the
"merge: true" semantics of the hosted document database the app syncs with.
Reads go through an in-memory cache; pass refresh=True to re-read the file.
"""
import copy
import json
import os
import re
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from core.exceptions import StateError
from core.logger import get_logger
from core.paths import USERS_DIR

logger = get_logger("document_store")

_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_\-]{1,128}$")


def deep_merge(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``updates`` into a copy of ``base``; nested dicts merge, other values replace."""
    merged = copy.deepcopy(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class JsonDocumentStore:
    """File-backed user documents with a per-user lock and read-through cache."""

    def __init__(self, root: Optional[Path] = None):
        self._root = root if root is not None else USERS_DIR
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @staticmethod
    def _check_user_id(user_id: str) -> None:
        if not _USER_ID_PATTERN.match(user_id or ""):
            raise StateError(f"Invalid user id: {user_id!r}")

    def _path(self, user_id: str) -> Path:
        return self._root / f"{user_id}.json"

    def lock(self, user_id: str) -> threading.RLock:
        """Lock serialising read-modify-write sequences for one user."""
        with self._locks_guard:
            if user_id not in self._locks:
                self._locks[user_id] = threading.RLock()
            return self._locks[user_id]

    def _read(self, user_id: str) -> Dict[str, Any]:
        path = self._path(user_id)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StateError(f"User document {path.name} is not valid JSON: {e}", corrupted_data=str(path))
        if not isinstance(data, dict):
            raise StateError(f"User document {path.name} is not an object", corrupted_data=str(path))
        return data

    def get(self, user_id: str, refresh: bool = False) -> Dict[str, Any]:
        """Return a copy of the user's document ({} when absent)."""
        self._check_user_id(user_id)
        with self.lock(user_id):
            if refresh or user_id not in self._cache:
                self._cache[user_id] = self._read(user_id)
            return copy.deepcopy(self._cache[user_id])

    def merge(
        self,
        user_id: str,
        fields: Dict[str, Any],
        replace: Iterable[str] = (),
    ) -> Dict[str, Any]:
        """
        Merge ``fields`` into the stored document and return the result.

        Keys listed in ``replace`` overwrite the stored value instead of being
        merged, so entries removed from a nested map really disappear.
        """
        self._check_user_id(user_id)
        with self.lock(user_id):
            current = self._read(user_id)
            for key in replace:
                if key in fields:
                    current.pop(key, None)
            merged = deep_merge(current, fields)
            self._write(user_id, merged)
            self._cache[user_id] = merged
            logger.debug("Merged %s into %s", sorted(fields), user_id)
            return copy.deepcopy(merged)

    def _write(self, user_id: str, data: Dict[str, Any]) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._path(user_id)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)

