from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from app.ai import DeepSeekClient
from app.config import Settings
from app.core import (
    AnalysisRequest,
    AnalysisResponse,
    MAX_FILE_BYTES,
    MAX_FILE_MB,
    PDF_MIME,
    STORED_TEXT_CHARS,
)
from app.errors import (
    AnalysisFailedError,
    EmptyContentError,
    InvalidArgumentError,
    MissingFileError,
)
from app.models import AnalysisResult
from app.services.parse import extract_text_from_pdf_bytes
from app.services.prompts import SYSTEM_PROMPT, build_prompt, parse_analysis_type
from app.services.scoring import extract_score
from app.store import AnalysisStore

logger = logging.getLogger(__name__)


class ResumeAnalyzer:
    """
    Runs one resume through extract -> prompt -> model -> score -> save.

    Everything up to and including the model call fails the request.
    A failed save is logged and the analysis is returned with id=None.
    """

    def __init__(
        self,
        settings: Settings,
        client: DeepSeekClient,
        store: AnalysisStore,
        extractor: Callable[[bytes], str] = extract_text_from_pdf_bytes,
    ):
        self.settings = settings
        self.client = client
        self.store = store
        self.extractor = extractor

    def _check_upload(self, request: AnalysisRequest) -> None:
        if not request.data:
            raise MissingFileError()
        if request.content_type and request.content_type != PDF_MIME:
            raise InvalidArgumentError("Only PDF files are allowed!")
        if request.file_size > MAX_FILE_BYTES:
            raise InvalidArgumentError(f"File too large (max {MAX_FILE_MB}MB).")

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        logger.info(
            "Resume analysis request: user=%s type=%s file=%s",
            request.user_id, request.analysis_type, request.file_name,
        )
        self._check_upload(request)
        self.client.ensure_configured()

        text = await run_in_threadpool(self.extractor, request.data)
        if not text.strip():
            raise EmptyContentError()
        logger.info("PDF text extraction successful, length: %d", len(text))

        kind = parse_analysis_type(request.analysis_type)
        prompt = build_prompt(kind, text)

        try:
            analysis = await self.client.chat(SYSTEM_PROMPT, prompt)
        except AnalysisFailedError:
            raise
        except Exception as e:
            raise AnalysisFailedError(f"Analysis failed: {e}", cause=e) from e

        score = extract_score(analysis)
        logger.info("Analysis completed, score: %s", score)

        file_name = request.file_name or "resume.pdf"
        result = AnalysisResult(
            user_id=request.user_id,
            file_name=file_name,
            file_size=request.file_size,
            analysis_type=kind.value,
            extracted_text=text[:STORED_TEXT_CHARS],
            analysis=analysis,
            score=score,
            tags=[kind.value],
        )
        analysis_id = self._save(result)

        return AnalysisResponse(
            id=analysis_id,
            file_name=file_name,
            analysis_type=kind.value,
            analysis=analysis,
            score=score,
            created_at=datetime.now(timezone.utc),
        )

    def _save(self, result: AnalysisResult) -> Optional[str]:
        try:
            analysis_id = self.store.save_analysis(result)
        except Exception:
            logger.warning("Database save failed, but analysis successful", exc_info=True)
            return None
        logger.info("Analysis results saved (id=%s)", analysis_id)
        return analysis_id
