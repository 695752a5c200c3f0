import fitz
import httpx
import pytest

from app.ai import DeepSeekClient
from app.auth import issue_token
from app.config import Settings
from app.main import create_app
from app.store import MemoryStore

SAMPLE_ANALYSIS = (
    "1. **Overall Impression & Strengths**\nSolid backend profile.\n\n"
    "7. **Overall Score (1-100)**\nOverall Score: 87/100"
)


def make_pdf(text: str = "Jane Doe\nBackend engineer\nPython, FastAPI, AWS") -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    if text:
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class FakeClient(DeepSeekClient):
    """Records prompts instead of calling the network."""

    def __init__(self, settings, reply=SAMPLE_ANALYSIS, error=None):
        super().__init__(settings)
        self.reply = reply
        self.error = error
        self.calls = []

    async def chat(self, system_prompt, user_prompt):
        self.ensure_configured()
        self.calls.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(deepseek_api_key="sk-test-key", jwt_secret="test-secret")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def fake_client(settings):
    return FakeClient(settings)


@pytest.fixture
def app(settings, store, fake_client):
    return create_app(settings=settings, store=store, client=fake_client)


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def user(store):
    return store.create_user("jane@example.com", "Jane", "x$y")


@pytest.fixture
def auth_headers(user, settings):
    return {"Authorization": f"Bearer {issue_token(user, settings)}"}


@pytest.fixture
def pdf_bytes():
    return make_pdf()


@pytest.fixture
def other_user_headers(store, settings):
    other = store.create_user("bob@example.com", "Bob", "x$y")
    return {"Authorization": f"Bearer {issue_token(other, settings)}"}
