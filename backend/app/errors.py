from typing import Optional


class ResumeAnalyzerError(Exception):
    """Base error. `message` is safe to return to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFileError(ResumeAnalyzerError):
    status_code = 400

    def __init__(self, message: str = "PDF file is required"):
        super().__init__(message)


class EmptyContentError(ResumeAnalyzerError):
    status_code = 400

    def __init__(self, message: str = "Could not extract text from PDF"):
        super().__init__(message)


class InvalidArgumentError(ResumeAnalyzerError):
    status_code = 400


class ExtractionError(ResumeAnalyzerError):
    """
    The upload is not a readable PDF. Answered with 400 since the caller
    sent a bad file; older deployments of this API returned 500 here.
    """

    status_code = 400

    def __init__(self, message: str = "Could not read PDF file"):
        super().__init__(message)


class ConfigurationError(ResumeAnalyzerError):
    status_code = 500


class AnalysisFailedError(ResumeAnalyzerError):
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UpstreamError(AnalysisFailedError):
    def __init__(self, status: int, body: str):
        super().__init__(f"Analysis failed: DeepSeek API Error: {status}")
        self.status = status
        self.body = body


class NetworkError(AnalysisFailedError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Analysis failed: {type(cause).__name__}: {cause}", cause=cause)


class PersistenceError(ResumeAnalyzerError):
    status_code = 503

    def __init__(self, message: str = "Database connection unavailable"):
        super().__init__(message)


class UserExistsError(ResumeAnalyzerError):
    status_code = 400

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class AuthError(ResumeAnalyzerError):
    """Missing or bad credentials: 401 when absent or wrong, 403 when a token fails verification."""

    status_code = 401

    def __init__(self, message: str = "Access token required", status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code
