import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

API_KEY_PREFIX = "sk-"


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    deepseek_api_key: Optional[str] = None
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    deepseek_model: str = "deepseek-chat"
    request_timeout: float = 60.0
    jwt_secret: str = "your-secret-key"
    token_ttl_hours: int = 24
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    rate_limit: str = "5/day"
    log_level: str = "INFO"

    @property
    def is_prod(self) -> bool:
        return self.env in {"prod", "production"}

    @property
    def has_api_key(self) -> bool:
        return bool(self.deepseek_api_key)

    @property
    def api_key_valid(self) -> bool:
        return bool(self.deepseek_api_key) and self.deepseek_api_key.startswith(API_KEY_PREFIX)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            env=os.getenv("ENV", "dev").lower(),
            deepseek_api_key=os.getenv("DEFAULT_DEEPSEEK_API_KEY") or None,
            deepseek_base_url=os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com/v1").rstrip("/"),
            deepseek_model=os.getenv("DEEPSEEK_MODEL", "deepseek-chat"),
            request_timeout=float(os.getenv("DEEPSEEK_TIMEOUT", "60")),
            jwt_secret=os.getenv("JWT_SECRET", "your-secret-key"),
            token_ttl_hours=int(os.getenv("TOKEN_TTL_HOURS", "24")),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "http://localhost:3000")),
            rate_limit=os.getenv("RATE_LIMIT", "5/day"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
