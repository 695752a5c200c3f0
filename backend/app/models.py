from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    email: str
    name: str
    password_hash: str
    id: Optional[str] = None
    created_at: datetime = field(default_factory=_now)

    def public(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass
class AnalysisResult:
    user_id: str
    file_name: str
    file_size: int
    analysis_type: str
    extracted_text: str
    analysis: str
    score: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    id: Optional[str] = None
    created_at: datetime = field(default_factory=_now)

    def to_dict(self, include_text: bool = True) -> Dict[str, Any]:
        out = {
            "_id": self.id,
            "userId": self.user_id,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "analysisType": self.analysis_type,
            "analysis": self.analysis,
            "score": self.score,
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
        }
        if include_text:
            out["extractedText"] = self.extracted_text
        return out
