from datetime import datetime, timezone

import pytest

from mnemo.domain.models import JudgeRequest, JudgeVerdict, Verdict
from mnemo.domain.ports import SemanticJudge


class StubJudge(SemanticJudge):
    """In-memory judge that records requests and replays a fixed verdict."""

    def __init__(self, verdict: JudgeVerdict | None = None, available: bool = True):
        self.verdict = verdict or JudgeVerdict(Verdict.YES, "Same meaning.")
        self.available = available
        self.requests: list[JudgeRequest] = []

    async def is_available(self) -> bool:
        return self.available

    async def evaluate(self, request: JudgeRequest) -> JudgeVerdict:
        self.requests.append(request)
        return self.verdict


@pytest.fixture
def now():
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def stub_judge():
    return StubJudge()


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    for var in ("MNEMO_USE_AI", "MNEMO_AI_ENDPOINT", "MNEMO_AI_API_KEY", "MNEMO_AI_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def make_judge():
    """Factory for StubJudge instances with a chosen verdict/availability."""
    return StubJudge
