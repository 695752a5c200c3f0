from __future__ import annotations

import math
import threading
import uuid
from collections import Counter
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from app.errors import PersistenceError, UserExistsError
from app.models import AnalysisResult, User


@runtime_checkable
class AnalysisStore(Protocol):
    """What the analyzer and the routes need from a datastore."""

    available: bool

    def create_user(self, email: str, name: str, password_hash: str) -> User: ...

    def get_user_by_email(self, email: str) -> Optional[User]: ...

    def save_analysis(self, result: AnalysisResult) -> str: ...

    def get_analysis(self, user_id: str, analysis_id: str) -> Optional[AnalysisResult]: ...

    def delete_analysis(self, user_id: str, analysis_id: str) -> bool: ...

    def list_analyses(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        analysis_type: Optional[str] = None,
    ) -> Tuple[List[AnalysisResult], int]: ...

    def dashboard(self, user_id: str) -> dict: ...


class MemoryStore:
    """
    In-process store for users and analyses.
    Set `available = False` to make every call fail like a dropped database.
    """

    def __init__(self):
        self.available = True
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}
        self._analyses: Dict[str, AnalysisResult] = {}

    def _check(self) -> None:
        if not self.available:
            raise PersistenceError()

    # users

    def create_user(self, email: str, name: str, password_hash: str) -> User:
        self._check()
        key = email.strip().lower()
        with self._lock:
            if key in self._users:
                raise UserExistsError()
            user = User(email=key, name=name, password_hash=password_hash, id=uuid.uuid4().hex)
            self._users[key] = user
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        self._check()
        return self._users.get(email.strip().lower())

    # analyses

    def save_analysis(self, result: AnalysisResult) -> str:
        self._check()
        with self._lock:
            result.id = uuid.uuid4().hex
            self._analyses[result.id] = result
        return result.id

    def get_analysis(self, user_id: str, analysis_id: str) -> Optional[AnalysisResult]:
        self._check()
        a = self._analyses.get(analysis_id)
        if not a or a.user_id != user_id:
            return None
        return a

    def delete_analysis(self, user_id: str, analysis_id: str) -> bool:
        self._check()
        with self._lock:
            a = self._analyses.get(analysis_id)
            if not a or a.user_id != user_id:
                return False
            del self._analyses[analysis_id]
        return True

    def _owned(self, user_id: str) -> List[AnalysisResult]:
        with self._lock:
            items = [a for a in self._analyses.values() if a.user_id == user_id]
        items.sort(key=lambda a: a.created_at, reverse=True)
        return items

    def list_analyses(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        analysis_type: Optional[str] = None,
    ) -> Tuple[List[AnalysisResult], int]:
        self._check()
        items = self._owned(user_id)
        if analysis_type and analysis_type != "all":
            items = [a for a in items if a.analysis_type == analysis_type]
        start = (max(page, 1) - 1) * limit
        return items[start:start + limit], len(items)

    def dashboard(self, user_id: str) -> dict:
        self._check()
        items = self._owned(user_id)
        counts = Counter(a.analysis_type for a in items)
        scores = [a.score for a in items if a.score is not None]
        return {
            "totalAnalyses": len(items),
            "analysisTypeStats": [{"_id": k, "count": v} for k, v in counts.items()],
            "averageScore": (sum(scores) / len(scores)) if scores else 0,
            "recentAnalyses": [
                {
                    "_id": a.id,
                    "fileName": a.file_name,
                    "analysisType": a.analysis_type,
                    "score": a.score,
                    "createdAt": a.created_at.isoformat(),
                }
                for a in items[:5]
            ],
        }


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0
