import asyncio
import logging
from typing import Optional

from openai import OpenAI

from config import settings
from .models import (
    CommunitySample,
    CommunityTrendResult,
    ContentAnalysisResult,
    UserActivity,
    UserInterestResult,
)
from .parsing import (
    fallback_community_analysis,
    fallback_content_analysis,
    fallback_user_interest_analysis,
    parse_community_analysis,
    parse_content_analysis,
    parse_user_interest_analysis,
)
from .prompts import (
    COMMUNITY_SYSTEM_PROMPT,
    CONTENT_SYSTEM_PROMPT,
    USER_INTEREST_SYSTEM_PROMPT,
    build_community_prompt,
    build_content_prompt,
    build_user_interest_prompt,
)

logger = logging.getLogger(__name__)


class LLMUnavailableError(RuntimeError):
    """Raised internally when no completion could be obtained."""


def get_openai_client(api_key: str) -> Optional[OpenAI]:
    """Get OpenAI client, handling placeholders."""
    if not api_key or "your_" in api_key or api_key == "test-key":
        return None
    return OpenAI(api_key=api_key, timeout=settings.OPENAI_TIMEOUT_SECONDS)


class LLMAnalysisClient:
    """
    Runs the three analysis prompts against the chat completion API.

    The public ``analyze_*`` methods never raise. Transport errors, empty
    replies, and missing credentials all produce the static fallback result.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        self.model = model or settings.OPENAI_MODEL
        if client is not None:
            self._client = client
        else:
            self._client = get_openai_client(settings.OPENAI_API_KEY if api_key is None else api_key)

    @property
    def available(self) -> bool:
        return self._client is not None

    def _complete_sync(self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        if self._client is None:
            raise LLMUnavailableError("OpenAI API key missing or unavailable")
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMUnavailableError("No response from LLM")
        return content

    async def _complete(self, system_prompt: str, user_prompt: str, *, temperature: float, max_tokens: int) -> str:
        return await asyncio.to_thread(self._complete_sync, system_prompt, user_prompt, temperature, max_tokens)

    async def analyze_content(
        self,
        *,
        title: str,
        body: str,
        author: str,
        content_type: str,
    ) -> ContentAnalysisResult:
        prompt = build_content_prompt(
            title=title,
            body=body,
            author=author,
            content_type=content_type,
            max_chars=settings.ANALYSIS_CONTENT_MAX_CHARS,
        )
        try:
            reply = await self._complete(CONTENT_SYSTEM_PROMPT, prompt, temperature=0.1, max_tokens=2000)
        except Exception as exc:
            logger.warning("Content analysis fallback for %r: %s", title, exc)
            return fallback_content_analysis(title)
        return parse_content_analysis(reply, title=title)

    async def analyze_user_interests(self, activity: UserActivity) -> UserInterestResult:
        prompt = build_user_interest_prompt(activity)
        try:
            reply = await self._complete(USER_INTEREST_SYSTEM_PROMPT, prompt, temperature=0.2, max_tokens=1500)
        except Exception as exc:
            logger.warning("User interest analysis fallback for %s: %s", activity.user_id, exc)
            return fallback_user_interest_analysis()
        return parse_user_interest_analysis(reply)

    async def analyze_community_trends(self, sample: CommunitySample) -> CommunityTrendResult:
        prompt = build_community_prompt(sample)
        try:
            reply = await self._complete(COMMUNITY_SYSTEM_PROMPT, prompt, temperature=0.3, max_tokens=2000)
        except Exception as exc:
            logger.warning("Community analysis fallback (%d posts): %s", len(sample.posts), exc)
            return fallback_community_analysis()
        return parse_community_analysis(reply)


_shared_client: Optional[LLMAnalysisClient] = None


def get_llm_analysis_client() -> LLMAnalysisClient:
    """Process-wide client, created on first use."""
    global _shared_client
    if _shared_client is None:
        _shared_client = LLMAnalysisClient()
    return _shared_client
