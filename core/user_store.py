"""
User storage adapter: preferences and progress snapshots over the document store.

Preferences and progress share the one document per user, as in the hosted
database; each side only reads and writes its own keys.
"""
from typing import Any, Dict, Optional

from core.document_store import JsonDocumentStore
from core.logger import get_logger
from core.models import Preferences, ProgressState
from core.validation import validate_preferences

logger = get_logger("user_store")


class UserStore:
    """Typed read/write access to a user's document."""

    def __init__(self, documents: Optional[JsonDocumentStore] = None):
        self.documents = documents or JsonDocumentStore()

    def lock(self, user_id: str):
        return self.documents.lock(user_id)

    def load_preferences(self, user_id: str, refresh: bool = False) -> Preferences:
        return Preferences.from_document(self.documents.get(user_id, refresh=refresh))

    def save_preferences(self, user_id: str, prefs: Preferences) -> Preferences:
        """Validate and store preferences; the activity map is replaced, not merged."""
        validate_preferences(prefs)
        self.documents.merge(user_id, prefs.to_document(), replace=("selectedActivities",))
        logger.info("Saved preferences for %s", user_id)
        return prefs

    def load_progress(self, user_id: str, refresh: bool = False) -> ProgressState:
        return ProgressState.from_document(self.documents.get(user_id, refresh=refresh))

    def save_progress(self, user_id: str, delta: Dict[str, Any]) -> ProgressState:
        """Merge a partial progress update and return the resulting snapshot."""
        if not delta:
            return self.load_progress(user_id)
        merged = self.documents.merge(user_id, delta)
        return ProgressState.from_document(merged)
