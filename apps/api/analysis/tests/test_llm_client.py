import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from analysis.llm import LLMAnalysisClient, get_openai_client
from analysis.models import CommunitySample, UserActivity


def _completion(content):
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


def _client_returning(content):
    openai_client = MagicMock()
    openai_client.chat.completions.create.return_value = _completion(content)
    return openai_client


@pytest.mark.parametrize("api_key", ["", "your_openai_key", "test-key"])
def test_placeholder_keys_disable_client(api_key):
    assert get_openai_client(api_key) is None
    assert LLMAnalysisClient(api_key=api_key).available is False


@pytest.mark.asyncio
async def test_content_analysis_parses_reply_and_uses_low_temperature():
    openai_client = _client_returning(json.dumps({"summary": "About attention", "key_topics": ["NLP"]}))
    client = LLMAnalysisClient(client=openai_client, model="test-model")

    result = await client.analyze_content(
        title="Attention",
        body="x" * 5000,
        author="Ada",
        content_type="blog",
    )

    assert result.summary == "About attention"
    assert result.key_topics == ["NLP"]
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["temperature"] == 0.1
    assert kwargs["max_tokens"] == 2000
    assert kwargs["messages"][0]["role"] == "system"
    assert "x" * 3000 + "..." in kwargs["messages"][1]["content"]
    assert "x" * 3001 not in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_transport_errors_fall_back():
    openai_client = MagicMock()
    openai_client.chat.completions.create.side_effect = TimeoutError("upstream timed out")
    client = LLMAnalysisClient(client=openai_client)

    result = await client.analyze_content(title="Slow", body="Body", author="Ada", content_type="portfolio")
    assert result.summary.startswith('Analysis of "Slow"')


@pytest.mark.asyncio
async def test_empty_reply_falls_back():
    client = LLMAnalysisClient(client=_client_returning(""))
    result = await client.analyze_user_interests(UserActivity(user_id="u1", user_name="Ada", user_email="a@x.io"))
    assert result.interests[0].topic == "AI"


@pytest.mark.asyncio
async def test_user_and_community_temperatures():
    openai_client = _client_returning("{}")
    client = LLMAnalysisClient(client=openai_client)

    await client.analyze_user_interests(UserActivity(user_id="u1", user_name="Ada", user_email="a@x.io"))
    user_kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert (user_kwargs["temperature"], user_kwargs["max_tokens"]) == (0.2, 1500)

    now = datetime.now(timezone.utc)
    await client.analyze_community_trends(CommunitySample(posts=[], start=now, end=now))
    community_kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert (community_kwargs["temperature"], community_kwargs["max_tokens"]) == (0.3, 2000)


@pytest.mark.asyncio
async def test_missing_credentials_never_call_upstream():
    client = LLMAnalysisClient(api_key="")
    now = datetime.now(timezone.utc)
    result = await client.analyze_community_trends(CommunitySample(posts=[], start=now, end=now))
    assert result.topic_trends[0].topic == "AI"
