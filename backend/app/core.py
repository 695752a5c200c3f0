from enum import Enum
from datetime import datetime
from typing import Optional, List, Any, Dict

from pydantic import BaseModel, Field, ConfigDict

MAX_FILE_MB = 10
MAX_FILE_BYTES = MAX_FILE_MB * 1024 * 1024

PDF_MIME = "application/pdf"

# stored copy of the resume text is capped, the model still sees all of it
STORED_TEXT_CHARS = 2000


class AnalysisType(str, Enum):
    comprehensive = "comprehensive"
    skills = "skills"
    experience = "experience"
    formatting = "formatting"


class AnalysisRequest(BaseModel):
    user_id: str
    file_name: Optional[str] = None
    content_type: Optional[str] = None
    data: Optional[bytes] = None
    analysis_type: str = AnalysisType.comprehensive.value

    @property
    def file_size(self) -> int:
        return len(self.data or b"")


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    file_name: str = Field(alias="fileName")
    analysis_type: str = Field(alias="analysisType")
    analysis: str
    score: Optional[int] = None
    created_at: datetime = Field(alias="createdAt")


class AnalyzeEnvelope(BaseModel):
    success: bool = True
    analysis: AnalysisResponse


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    email: str
    name: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut


class HistoryResponse(BaseModel):
    analyses: List[Dict[str, Any]]
    totalPages: int
    currentPage: int
    total: int


class DashboardResponse(BaseModel):
    totalAnalyses: int = 0
    analysisTypeStats: List[Dict[str, Any]] = Field(default_factory=list)
    averageScore: float = 0
    recentAnalyses: List[Dict[str, Any]] = Field(default_factory=list)
