import os
import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep tests deterministic: no background polling threads.
os.environ.setdefault("ARISE_DISABLE_WATCHERS", "1")


@pytest.fixture
def users(tmp_path):
    """UserStore backed by a throwaway data directory."""
    from core.document_store import JsonDocumentStore
    from core.user_store import UserStore

    return UserStore(JsonDocumentStore(root=tmp_path))
