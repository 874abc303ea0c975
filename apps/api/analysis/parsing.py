"""
Coercion of untrusted LLM replies into typed analysis results.

Every reply is treated as free text that may or may not contain a JSON
object. Fields are validated one at a time: a bad field is replaced by its
default, while a reply with no decodable object yields the static fallback.
"""

from __future__ import annotations

import json
import logging
import math
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from .models import (
    CommunityInsights,
    CommunityPredictions,
    CommunitySentiment,
    CommunityTrendResult,
    Complexity,
    ComplexityLevel,
    ContentAnalysisResult,
    ContentInsights,
    ExtractedConcept,
    Interest,
    LanguageMetrics,
    LearnerInsights,
    ReadingBehavior,
    Recommendations,
    Sentiment,
    SentimentBreakdown,
    SentimentLabel,
    SentimentProfile,
    TopicTrend,
    TrendDirection,
    UserInterestResult,
)

logger = logging.getLogger(__name__)

_JSON_SPAN = re.compile(r"\{[\s\S]*\}")

E = TypeVar("E", bound=Enum)


def extract_json_object(reply: Optional[str]) -> Optional[Dict[str, Any]]:
    """Return the JSON object embedded in ``reply``, or None when there is none."""
    if not reply:
        return None
    match = _JSON_SPAN.search(reply)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        # Trailing prose with stray braces breaks the greedy span; retry on the first object only.
        try:
            parsed, _end = json.JSONDecoder().raw_decode(reply, match.start())
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _number(value: Any, default: float, low: Optional[float] = None, high: Optional[float] = None) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return default
    if low is not None:
        number = max(low, number)
    if high is not None:
        number = min(high, number)
    return number


def _unit(value: Any, default: float) -> float:
    return _number(value, default, 0.0, 1.0)


def _count(value: Any, default: int) -> int:
    return int(round(_number(value, float(default), 0.0)))


def _text(value: Any, default: str) -> str:
    if not isinstance(value, str):
        return default
    text = value.strip()
    return text or default


def _choice(value: Any, enum_type: Type[E], default: E) -> E:
    if isinstance(value, str):
        try:
            return enum_type(value.strip().lower())
        except ValueError:
            return default
    return default


def _string_list(value: Any, default: List[str]) -> List[str]:
    if not isinstance(value, list):
        return list(default)
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


# Fallbacks

def fallback_content_analysis(title: str) -> ContentAnalysisResult:
    return ContentAnalysisResult(
        summary=f'Analysis of "{title}" - Content covers educational topics with moderate complexity.',
        key_topics=["AI", "Education", "Technology"],
        sentiment=Sentiment(label=SentimentLabel.NEUTRAL, score=0.0, confidence=0.5),
        complexity=Complexity(level=ComplexityLevel.INTERMEDIATE, score=5.0, readability_score=5.0),
        categories=["General"],
        extracted_concepts=[],
        language_metrics=LanguageMetrics(technical_terms=5, average_sentence_length=15.0, vocabulary_richness=0.5),
        ai_insights=ContentInsights(
            main_theme="Educational content",
            target_audience=["Students"],
            recommended_actions=["Review content"],
            related_topics=["Learning"],
        ),
    )


def fallback_user_interest_analysis() -> UserInterestResult:
    return UserInterestResult(
        interests=[Interest(topic="AI", category="Technology", weight=0.5, confidence=0.5)],
        reading_behavior=ReadingBehavior(preferred_complexity=ComplexityLevel.INTERMEDIATE, engagement_score=0.5),
        sentiment_profile=SentimentProfile(
            positive_content_affinity=0.5,
            technical_content_preference=0.5,
            diversity_score=0.5,
        ),
        recommendations=Recommendations(
            suggested_topics=["Machine Learning"],
            recommended_authors=[],
            next_reading_level="intermediate",
            personalized_tags=["AI"],
        ),
        ai_insights=LearnerInsights(
            learning_style="Balanced learner",
            knowledge_areas=["AI"],
            skill_level="Intermediate",
            recommended_path=["Continue learning"],
            personality_traits=["curious"],
        ),
    )


def fallback_community_analysis() -> CommunityTrendResult:
    return CommunityTrendResult(
        topic_trends=[
            TopicTrend(topic="AI", category="Technology", frequency=10, growth_rate=0.0, sentiment=SentimentLabel.NEUTRAL)
        ],
        sentiment_analysis=CommunitySentiment(
            overall=SentimentBreakdown(positive=50.0, negative=20.0, neutral=30.0, average_score=0.15),
            trending=TrendDirection.STABLE,
        ),
        insights=CommunityInsights(
            top_growing_topics=["AI"],
            declining_topics=[],
            content_gaps=["Advanced tutorials"],
            recommended_focus_areas=["Community engagement"],
            community_health_score=0.7,
        ),
        predictions=CommunityPredictions(
            next_trending_topics=["Machine Learning"],
            expected_growth_areas=["Education"],
            risk_factors=[],
            opportunities=["More beginner content"],
        ),
    )


# Content analysis

def _concepts(value: Any) -> List[ExtractedConcept]:
    if not isinstance(value, list):
        return []
    concepts: List[ExtractedConcept] = []
    for row in value:
        if not isinstance(row, dict):
            continue
        name = _text(row.get("concept"), "")
        if not name:
            continue
        concepts.append(
            ExtractedConcept(
                concept=name,
                relevance=_unit(row.get("relevance"), 0.5),
                category=_text(row.get("category"), "General"),
            )
        )
    return concepts


def coerce_content_analysis(payload: Dict[str, Any]) -> ContentAnalysisResult:
    sentiment = _mapping(payload.get("sentiment"))
    complexity = _mapping(payload.get("complexity"))
    language = _mapping(payload.get("language_metrics"))
    insights = _mapping(payload.get("ai_insights"))
    return ContentAnalysisResult(
        summary=_text(payload.get("summary"), "Content analysis summary"),
        key_topics=_string_list(payload.get("key_topics"), []),
        sentiment=Sentiment(
            label=_choice(sentiment.get("label", sentiment.get("overall")), SentimentLabel, SentimentLabel.NEUTRAL),
            score=_number(sentiment.get("score"), 0.0, -1.0, 1.0),
            confidence=_unit(sentiment.get("confidence"), 0.5),
        ),
        complexity=Complexity(
            level=_choice(complexity.get("level"), ComplexityLevel, ComplexityLevel.INTERMEDIATE),
            score=_number(complexity.get("score"), 5.0, 1.0, 10.0),
            readability_score=_number(complexity.get("readability_score"), 5.0, 0.0, 10.0),
        ),
        categories=_string_list(payload.get("categories"), ["General"]),
        extracted_concepts=_concepts(payload.get("extracted_concepts")),
        language_metrics=LanguageMetrics(
            technical_terms=_count(language.get("technical_terms"), 0),
            average_sentence_length=_number(language.get("average_sentence_length"), 15.0, 0.0),
            vocabulary_richness=_unit(language.get("vocabulary_richness"), 0.5),
        ),
        ai_insights=ContentInsights(
            main_theme=_text(insights.get("main_theme"), "General content"),
            target_audience=_string_list(insights.get("target_audience"), ["General"]),
            recommended_actions=_string_list(insights.get("recommended_actions"), []),
            related_topics=_string_list(insights.get("related_topics"), []),
        ),
    )


def parse_content_analysis(reply: Optional[str], *, title: str) -> ContentAnalysisResult:
    payload = extract_json_object(reply)
    if payload is None:
        logger.warning("No JSON object in content analysis reply for %r; using fallback", title)
        return fallback_content_analysis(title)
    return coerce_content_analysis(payload)


# User interest analysis

def _interests(value: Any, default: List[Interest]) -> List[Interest]:
    if not isinstance(value, list):
        return list(default)
    interests: List[Interest] = []
    for row in value:
        if not isinstance(row, dict):
            continue
        topic = _text(row.get("topic"), "")
        if not topic:
            continue
        interests.append(
            Interest(
                topic=topic,
                category=_text(row.get("category"), "General"),
                weight=_unit(row.get("weight"), 0.5),
                confidence=_unit(row.get("confidence"), 0.5),
            )
        )
    return interests


def coerce_user_interest_analysis(payload: Dict[str, Any]) -> UserInterestResult:
    fallback = fallback_user_interest_analysis()
    behavior = _mapping(payload.get("reading_behavior"))
    profile = _mapping(payload.get("sentiment_profile"))
    recommendations = _mapping(payload.get("recommendations"))
    insights = _mapping(payload.get("ai_insights"))
    return UserInterestResult(
        interests=_interests(payload.get("interests"), fallback.interests),
        reading_behavior=ReadingBehavior(
            preferred_complexity=_choice(
                behavior.get("preferred_complexity"),
                ComplexityLevel,
                fallback.reading_behavior.preferred_complexity,
            ),
            engagement_score=_unit(behavior.get("engagement_score"), fallback.reading_behavior.engagement_score),
        ),
        sentiment_profile=SentimentProfile(
            positive_content_affinity=_unit(
                profile.get("positive_content_affinity"),
                fallback.sentiment_profile.positive_content_affinity,
            ),
            technical_content_preference=_unit(
                profile.get("technical_content_preference"),
                fallback.sentiment_profile.technical_content_preference,
            ),
            diversity_score=_unit(profile.get("diversity_score"), fallback.sentiment_profile.diversity_score),
        ),
        recommendations=Recommendations(
            suggested_topics=_string_list(
                recommendations.get("suggested_topics"), fallback.recommendations.suggested_topics
            ),
            recommended_authors=_string_list(recommendations.get("recommended_authors"), []),
            next_reading_level=_text(
                recommendations.get("next_reading_level"), fallback.recommendations.next_reading_level
            ),
            personalized_tags=_string_list(
                recommendations.get("personalized_tags"), fallback.recommendations.personalized_tags
            ),
        ),
        ai_insights=LearnerInsights(
            learning_style=_text(insights.get("learning_style"), fallback.ai_insights.learning_style),
            knowledge_areas=_string_list(insights.get("knowledge_areas"), fallback.ai_insights.knowledge_areas),
            skill_level=_text(insights.get("skill_level"), fallback.ai_insights.skill_level),
            recommended_path=_string_list(insights.get("recommended_path"), fallback.ai_insights.recommended_path),
            personality_traits=_string_list(
                insights.get("personality_traits"), fallback.ai_insights.personality_traits
            ),
        ),
    )


def parse_user_interest_analysis(reply: Optional[str]) -> UserInterestResult:
    payload = extract_json_object(reply)
    if payload is None:
        logger.warning("No JSON object in user interest reply; using fallback")
        return fallback_user_interest_analysis()
    return coerce_user_interest_analysis(payload)


# Community trend analysis

def _topic_trends(value: Any, default: List[TopicTrend]) -> List[TopicTrend]:
    if not isinstance(value, list):
        return list(default)
    trends: List[TopicTrend] = []
    for row in value:
        if not isinstance(row, dict):
            continue
        topic = _text(row.get("topic"), "")
        if not topic:
            continue
        trends.append(
            TopicTrend(
                topic=topic,
                category=_text(row.get("category"), "General"),
                frequency=_count(row.get("frequency"), 0),
                growth_rate=_number(row.get("growth_rate"), 0.0),
                sentiment=_choice(row.get("sentiment"), SentimentLabel, SentimentLabel.NEUTRAL),
            )
        )
    return trends


def coerce_community_analysis(payload: Dict[str, Any]) -> CommunityTrendResult:
    fallback = fallback_community_analysis()
    sentiment = _mapping(payload.get("sentiment_analysis"))
    overall = _mapping(sentiment.get("overall"))
    insights = _mapping(payload.get("insights"))
    predictions = _mapping(payload.get("predictions"))
    default_overall = fallback.sentiment_analysis.overall
    return CommunityTrendResult(
        topic_trends=_topic_trends(payload.get("topic_trends"), fallback.topic_trends),
        sentiment_analysis=CommunitySentiment(
            overall=SentimentBreakdown(
                positive=_number(overall.get("positive"), default_overall.positive, 0.0, 100.0),
                negative=_number(overall.get("negative"), default_overall.negative, 0.0, 100.0),
                neutral=_number(overall.get("neutral"), default_overall.neutral, 0.0, 100.0),
                average_score=_number(overall.get("average_score"), default_overall.average_score, -1.0, 1.0),
            ),
            trending=_choice(sentiment.get("trending"), TrendDirection, TrendDirection.STABLE),
        ),
        insights=CommunityInsights(
            top_growing_topics=_string_list(insights.get("top_growing_topics"), fallback.insights.top_growing_topics),
            declining_topics=_string_list(insights.get("declining_topics"), []),
            content_gaps=_string_list(insights.get("content_gaps"), fallback.insights.content_gaps),
            recommended_focus_areas=_string_list(
                insights.get("recommended_focus_areas"), fallback.insights.recommended_focus_areas
            ),
            community_health_score=_unit(
                insights.get("community_health_score"), fallback.insights.community_health_score
            ),
        ),
        predictions=CommunityPredictions(
            next_trending_topics=_string_list(
                predictions.get("next_trending_topics"), fallback.predictions.next_trending_topics
            ),
            expected_growth_areas=_string_list(
                predictions.get("expected_growth_areas"), fallback.predictions.expected_growth_areas
            ),
            risk_factors=_string_list(predictions.get("risk_factors"), []),
            opportunities=_string_list(predictions.get("opportunities"), fallback.predictions.opportunities),
        ),
    )


def parse_community_analysis(reply: Optional[str]) -> CommunityTrendResult:
    payload = extract_json_object(reply)
    if payload is None:
        logger.warning("No JSON object in community analysis reply; using fallback")
        return fallback_community_analysis()
    return coerce_community_analysis(payload)
