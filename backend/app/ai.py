from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import Settings, API_KEY_PREFIX
from app.errors import (
    AnalysisFailedError,
    ConfigurationError,
    NetworkError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 2000


def check_api_key(api_key: Optional[str]) -> str:
    if not api_key:
        raise ConfigurationError("AI analysis service not configured. Please contact administrator.")
    if not api_key.startswith(API_KEY_PREFIX):
        raise ConfigurationError("System configuration error. Please contact administrator.")
    return api_key


def build_payload(model: str, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
    messages: List[Dict[str, str]] = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    return {
        "model": model,
        "messages": messages,
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
    }


class DeepSeekClient:
    """
    One chat-completion request per call, no retries.
    HTTP errors -> UpstreamError, transport errors (DNS, refused, timeout) -> NetworkError.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.settings.deepseek_base_url.rstrip('/')}/chat/completions"

    def ensure_configured(self) -> None:
        check_api_key(self.settings.deepseek_api_key)

    async def chat(self, system_prompt: str, user_prompt: str) -> str:
        api_key = check_api_key(self.settings.deepseek_api_key)
        payload = build_payload(self.settings.deepseek_model, system_prompt, user_prompt)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

        logger.info("Calling DeepSeek API (model=%s)", self.settings.deepseek_model)
        try:
            async with httpx.AsyncClient(timeout=self.settings.request_timeout, transport=self._transport) as client:
                response = await client.post(self.url, headers=headers, json=payload)
        except httpx.RequestError as e:
            logger.error("DeepSeek request error: %r", e)
            raise NetworkError(e) from e

        if not response.is_success:
            logger.error("DeepSeek API error %s: %s", response.status_code, response.text[:500])
            raise UpstreamError(response.status_code, response.text)

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AnalysisFailedError("Analysis failed: unexpected response from DeepSeek API", cause=e) from e

        if not isinstance(content, str):
            raise AnalysisFailedError("Analysis failed: DeepSeek API returned no text")

        logger.info("DeepSeek API call successful (%d chars)", len(content))
        return content
