import json
import logging
import re
from typing import Literal

import httpx
from pydantic import BaseModel, ValidationError, field_validator

from mnemo.domain.constants import AI_MAX_TOKENS, AI_TIMEOUT
from mnemo.domain.exceptions import JudgeError
from mnemo.domain.models import JudgeRequest, JudgeVerdict, Verdict
from mnemo.domain.ports import SemanticJudge

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

SYSTEM_PROMPT = (
    "You grade flashcard answers. Decide whether the student's answer means the same "
    "thing as any of the accepted answers. Ignore spelling, phrasing and word order. "
    'Respond only with JSON: {"result": "YES" | "PARTIAL" | "NO", "reason": "<one sentence>"}'
)


class _VerdictPayload(BaseModel):
    result: Literal["YES", "PARTIAL", "NO"]
    reason: str = ""

    @field_validator("result", mode="before")
    @classmethod
    def upper_result(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class ChatCompletionJudge(SemanticJudge):
    """Adapter asking an OpenAI-compatible chat completion endpoint for a verdict."""

    def __init__(
        self,
        endpoint: str | None,
        api_key: str | None,
        deployment: str = "deepseek-chat",
        max_tokens: int = AI_MAX_TOKENS,
        timeout: float = AI_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.endpoint = endpoint.rstrip("/") if endpoint else None
        self.api_key = api_key
        self.deployment = deployment
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        return f"{self.endpoint}/chat/completions"

    async def is_available(self) -> bool:
        return bool(self.endpoint and self.api_key)

    def build_messages(self, request: JudgeRequest) -> list[dict[str, str]]:
        accepted = "; ".join(request.expected_answers)
        lines = []
        if request.context:
            lines.append(f"Question: {request.context}")
        lines.append(f"Accepted answers: {accepted}")
        lines.append(f"Student's answer: {request.response}")
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "\n".join(lines)},
        ]

    async def evaluate(self, request: JudgeRequest) -> JudgeVerdict:
        if not await self.is_available():
            raise JudgeError("Semantic judge is not configured")

        payload = {
            "model": self.deployment,
            "messages": self.build_messages(request),
            "max_tokens": self.max_tokens,
            "temperature": 0,
        }
        content = await self._chat(payload)
        verdict = self.parse_verdict(content)
        self.logger.debug(f"Judge verdict {verdict.result.value}: {verdict.reason}")
        return verdict

    async def _chat(self, payload: dict) -> str:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        try:
            resp = await self._client.post(
                self.url,
                json=payload,
                headers={"api-key": self.api_key or ""},
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise JudgeError(f"Chat completion request failed: {e}") from e
        except ValueError as e:
            raise JudgeError(f"Chat completion returned invalid JSON: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise JudgeError(f"Chat completion reply has no message: {data!r}") from e
        if not content:
            raise JudgeError("Chat completion reply was empty")
        return content

    @staticmethod
    def parse_verdict(content: str) -> JudgeVerdict:
        """Extract the first JSON object from the model's reply."""
        match = _JSON_OBJECT_RE.search(content)
        if not match:
            raise JudgeError(f"No JSON verdict in reply: {content[:100]!r}")
        try:
            parsed = _VerdictPayload.model_validate(json.loads(match.group(0)))
        except (ValueError, ValidationError) as e:
            raise JudgeError(f"Malformed verdict: {e}") from e
        return JudgeVerdict(result=Verdict(parsed.result), reason=parsed.reason.strip())

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
