import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, File, Form, HTTPException, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from app.ai import DeepSeekClient
from app.auth import current_user, hash_password, issue_token, verify_password
from app.config import Settings
from app.core import (
    MAX_FILE_BYTES,
    PDF_MIME,
    AnalysisRequest,
    AnalysisType,
    AnalyzeEnvelope,
    AuthResponse,
    DashboardResponse,
    HistoryResponse,
    LoginRequest,
    RegisterRequest,
    UserOut,
)
from app.errors import AuthError, MissingFileError, PersistenceError, ResumeAnalyzerError
from app.services.analyzer import ResumeAnalyzer
from app.store import AnalysisStore, MemoryStore, total_pages

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> AnalysisStore:
    return request.app.state.store


def get_analyzer(request: Request) -> ResumeAnalyzer:
    return request.app.state.analyzer


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _log_startup(settings: Settings) -> None:
    logger.info("Starting Resume Analyzer (env=%s)", settings.env)
    if settings.has_api_key:
        logger.info("DeepSeek API key configured, format %s", "valid" if settings.api_key_valid else "INVALID")
    else:
        logger.warning("DEFAULT_DEEPSEEK_API_KEY not configured - resume analysis will be unavailable")


@router.get("/", tags=["default"])
def root():
    return {"status": "ok", "service": "Resume Analyzer", "docs": "/docs"}


@router.get("/api/health", tags=["default"])
def health(settings: Settings = Depends(get_settings), store: AnalysisStore = Depends(get_store)):
    return {
        "status": "OK",
        "database": "Connected" if store.available else "Disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "hasDefaultApiKey": settings.has_api_key,
        "env": settings.env,
        "rate_limit_enabled": settings.is_prod,
    }


@router.post("/api/auth/register", status_code=201, response_model=AuthResponse, tags=["auth"])
def register(
    body: RegisterRequest,
    settings: Settings = Depends(get_settings),
    store: AnalysisStore = Depends(get_store),
):
    logger.info("Registration request received: %s", body.email)
    user = store.create_user(body.email, body.name, hash_password(body.password))
    logger.info("User created successfully: %s", user.email)
    return AuthResponse(
        message="User created successfully",
        token=issue_token(user, settings),
        user=UserOut(**user.public()),
    )


@router.post("/api/auth/login", response_model=AuthResponse, tags=["auth"])
def login(
    body: LoginRequest,
    settings: Settings = Depends(get_settings),
    store: AnalysisStore = Depends(get_store),
):
    logger.info("Login request received: %s", body.email)
    user = store.get_user_by_email(body.email)
    if not user or not verify_password(body.password, user.password_hash):
        raise AuthError("Invalid email or password")
    return AuthResponse(
        message="Login successful",
        token=issue_token(user, settings),
        user=UserOut(**user.public()),
    )


# registered in create_app, wrapped by that app's rate limiter
async def analyze(
    request: Request,
    resume: Optional[UploadFile] = File(None),
    analysis_type: str = Form(AnalysisType.comprehensive.value, alias="analysisType"),
    user_id: str = Depends(current_user),
    analyzer: ResumeAnalyzer = Depends(get_analyzer),
):
    if resume is None:
        raise MissingFileError()
    if resume.content_type != PDF_MIME:
        raise HTTPException(status_code=400, detail="Only PDF files are allowed!")

    contents = await resume.read()
    await resume.close()
    if len(contents) > MAX_FILE_BYTES:
        raise HTTPException(status_code=400, detail="File too large")

    result = await analyzer.analyze(
        AnalysisRequest(
            user_id=user_id,
            file_name=resume.filename,
            content_type=resume.content_type,
            data=contents,
            analysis_type=analysis_type,
        )
    )
    return AnalyzeEnvelope(analysis=result).model_dump(by_alias=True, mode="json")


@router.get("/api/history", response_model=HistoryResponse, tags=["analysis"])
def history(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    analysis_type: Optional[str] = Query(None, alias="analysisType"),
    user_id: str = Depends(current_user),
    store: AnalysisStore = Depends(get_store),
):
    items, total = store.list_analyses(user_id, page=page, limit=limit, analysis_type=analysis_type)
    return HistoryResponse(
        analyses=[a.to_dict(include_text=False) for a in items],
        totalPages=total_pages(total, limit),
        currentPage=page,
        total=total,
    )


@router.get("/api/analysis/{analysis_id}", tags=["analysis"])
def get_analysis(
    analysis_id: str,
    user_id: str = Depends(current_user),
    store: AnalysisStore = Depends(get_store),
):
    a = store.get_analysis(user_id, analysis_id)
    if not a:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return a.to_dict()


@router.delete("/api/analysis/{analysis_id}", tags=["analysis"])
def delete_analysis(
    analysis_id: str,
    user_id: str = Depends(current_user),
    store: AnalysisStore = Depends(get_store),
):
    if not store.delete_analysis(user_id, analysis_id):
        raise HTTPException(status_code=404, detail="Analysis not found")
    logger.info("Analysis record deleted: %s", analysis_id)
    return {"message": "Analysis deleted successfully"}


@router.get("/api/dashboard", response_model=DashboardResponse, tags=["analysis"])
def dashboard(
    user_id: str = Depends(current_user),
    store: AnalysisStore = Depends(get_store),
):
    try:
        return DashboardResponse(**store.dashboard(user_id))
    except PersistenceError:
        return DashboardResponse()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[AnalysisStore] = None,
    client: Optional[DeepSeekClient] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _log_startup(settings)

    store = store if store is not None else MemoryStore()
    client = client or DeepSeekClient(settings)

    app = FastAPI(title="Resume Analyzer", version="0.1.0")
    app.state.settings = settings
    app.state.store = store
    app.state.analyzer = ResumeAnalyzer(settings, client, store)

    # only resume analysis is rate limited, and only in production
    limiter = Limiter(key_func=get_remote_address, enabled=settings.is_prod)
    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return _error(429, f"Rate limit exceeded: {settings.rate_limit} per IP.")

    @app.exception_handler(ResumeAnalyzerError)
    def analyzer_error_handler(request: Request, exc: ResumeAnalyzerError):
        if exc.status_code >= 500:
            logger.error("Analysis error: %s", exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    def validation_error_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = first.get("msg", "Invalid request")
        return _error(400, f"{loc}: {msg}" if loc else msg)

    app.add_api_route(
        "/api/analyze",
        limiter.limit(settings.rate_limit)(analyze),
        methods=["POST"],
        tags=["analysis"],
    )
    app.include_router(router)
    return app


app = create_app()
