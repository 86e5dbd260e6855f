import json

import httpx
import pytest

from mnemo.domain.exceptions import JudgeError
from mnemo.domain.models import JudgeRequest, Verdict
from mnemo.infrastructure.adapters.chat_judge import ChatCompletionJudge

REQUEST = JudgeRequest(
    expected_answers=("United States", "USA"),
    response="the States",
    context="Which country declared independence in 1776?",
)


def _reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _judge(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ChatCompletionJudge(
        endpoint="https://llm.example.com/", api_key="secret", client=client, **kwargs
    )


@pytest.mark.asyncio
async def test_evaluate_posts_chat_completion():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, json=_reply('{"result": "YES", "reason": "Common short name."}')
        )

    judge = _judge(handler, deployment="grader", max_tokens=99)
    verdict = await judge.evaluate(REQUEST)

    assert verdict.result is Verdict.YES
    assert verdict.reason == "Common short name."
    assert seen["url"] == "https://llm.example.com/chat/completions"
    assert seen["key"] == "secret"
    assert seen["body"]["model"] == "grader"
    assert seen["body"]["max_tokens"] == 99
    user_message = seen["body"]["messages"][1]["content"]
    assert "Question: Which country declared independence in 1776?" in user_message
    assert "Accepted answers: United States; USA" in user_message
    assert "Student's answer: the States" in user_message


@pytest.mark.asyncio
async def test_verdict_embedded_in_prose_is_extracted():
    def handler(request):
        content = 'Sure!\n```json\n{"result": "partial", "reason": "Incomplete."}\n```'
        return httpx.Response(200, json=_reply(content))

    verdict = await _judge(handler).evaluate(REQUEST)
    assert verdict.result is Verdict.PARTIAL
    assert verdict.reason == "Incomplete."


def test_context_is_optional():
    judge = ChatCompletionJudge(endpoint="https://x", api_key="k")
    messages = judge.build_messages(JudgeRequest(expected_answers=("Paris",), response="paris"))
    assert "Question:" not in messages[1]["content"]
    assert messages[0]["role"] == "system"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, body",
    [
        (500, {"error": "upstream down"}),
        (200, {"choices": []}),
        (200, _reply("")),
        (200, _reply("I think so")),
        (200, _reply('{"result": "MAYBE"}')),
        (200, _reply('{"result": YES}')),
    ],
)
async def test_bad_replies_raise_judge_error(status, body):
    judge = _judge(lambda request: httpx.Response(status, json=body))
    with pytest.raises(JudgeError):
        await judge.evaluate(REQUEST)


@pytest.mark.asyncio
async def test_non_json_body_raises_judge_error():
    judge = _judge(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(JudgeError):
        await judge.evaluate(REQUEST)


@pytest.mark.asyncio
async def test_transport_error_raises_judge_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(JudgeError):
        await _judge(handler).evaluate(REQUEST)


@pytest.mark.asyncio
async def test_availability_requires_endpoint_and_key():
    assert await ChatCompletionJudge(endpoint="https://x", api_key="k").is_available()
    assert not await ChatCompletionJudge(endpoint=None, api_key="k").is_available()
    assert not await ChatCompletionJudge(endpoint="https://x", api_key=None).is_available()


@pytest.mark.asyncio
async def test_unconfigured_judge_refuses_to_evaluate():
    with pytest.raises(JudgeError):
        await ChatCompletionJudge(endpoint=None, api_key=None).evaluate(REQUEST)


@pytest.mark.asyncio
async def test_close_releases_client():
    judge = _judge(lambda request: httpx.Response(200, json=_reply('{"result": "NO"}')))
    verdict = await judge.evaluate(REQUEST)
    assert verdict.result is Verdict.NO
    assert verdict.reason == ""
    await judge.close()
    assert judge._client is None
