import json

import pytest

from analysis.models import ComplexityLevel, SentimentLabel, TrendDirection
from analysis.parsing import (
    extract_json_object,
    parse_community_analysis,
    parse_content_analysis,
    parse_user_interest_analysis,
)


def test_extract_json_from_fenced_reply():
    reply = 'Here you go:\n```json\n{"summary": "ok", "key_topics": ["AI"]}\n```'
    assert extract_json_object(reply) == {"summary": "ok", "key_topics": ["AI"]}


def test_extract_json_survives_trailing_braces():
    reply = '{"summary": "first"} and then some notes {not json}'
    assert extract_json_object(reply) == {"summary": "first"}


@pytest.mark.parametrize("reply", [None, "", "no braces here", "{broken", "[1, 2, 3]"])
def test_extract_json_returns_none_without_object(reply):
    assert extract_json_object(reply) is None


def test_content_reply_without_json_uses_fallback():
    result = parse_content_analysis("I cannot help with that.", title="Neural Nets 101")
    assert result.summary.startswith('Analysis of "Neural Nets 101"')
    assert result.key_topics == ["AI", "Education", "Technology"]
    assert result.sentiment.label is SentimentLabel.NEUTRAL
    assert result.complexity.level is ComplexityLevel.INTERMEDIATE


def test_content_scores_are_clamped():
    reply = json.dumps({
        "summary": "Deep dive",
        "sentiment": {"label": "Positive", "score": 5, "confidence": -2},
        "complexity": {"level": "expert", "score": 42, "readability_score": 3.5},
        "extracted_concepts": [{"concept": "Attention", "relevance": 9}, {"relevance": 0.4}, "junk"],
    })
    result = parse_content_analysis(reply, title="Transformers")

    assert result.sentiment.label is SentimentLabel.POSITIVE
    assert result.sentiment.score == 1.0
    assert result.sentiment.confidence == 0.0
    assert result.complexity.level is ComplexityLevel.INTERMEDIATE
    assert result.complexity.score == 10.0
    assert result.complexity.readability_score == 3.5
    assert [concept.concept for concept in result.extracted_concepts] == ["Attention"]
    assert result.extracted_concepts[0].relevance == 1.0


def test_content_defaults_fill_missing_fields():
    result = parse_content_analysis("{}", title="Anything")
    assert result.summary == "Content analysis summary"
    assert result.categories == ["General"]
    assert result.key_topics == []
    assert result.language_metrics.technical_terms == 0
    assert result.language_metrics.average_sentence_length == 15.0
    assert result.language_metrics.vocabulary_richness == 0.5


def test_booleans_and_non_finite_numbers_are_rejected():
    reply = '{"sentiment": {"score": true, "confidence": NaN}, "complexity": {"score": Infinity}}'
    result = parse_content_analysis(reply, title="Odd numbers")
    assert result.sentiment.score == 0.0
    assert result.sentiment.confidence == 0.5
    assert result.complexity.score == 5.0


def test_user_interest_reply_is_coerced():
    reply = json.dumps({
        "interests": [{"topic": "NLP", "category": "Technical", "weight": 1.7}],
        "reading_behavior": {"preferred_complexity": "beginner", "engagement_score": 0.9},
        "recommendations": {"recommended_authors": ["Ada", 3]},
    })
    result = parse_user_interest_analysis(reply)
    assert [interest.topic for interest in result.interests] == ["NLP"]
    assert result.interests[0].weight == 1.0
    assert result.interests[0].confidence == 0.5
    assert result.reading_behavior.preferred_complexity is ComplexityLevel.BEGINNER
    assert result.recommendations.recommended_authors == ["Ada"]
    assert result.recommendations.suggested_topics == ["Machine Learning"]


def test_user_interest_without_json_uses_fallback():
    result = parse_user_interest_analysis("nothing useful")
    assert result.interests[0].topic == "AI"
    assert result.ai_insights.learning_style == "Balanced learner"


def test_community_reply_is_coerced():
    reply = json.dumps({
        "topic_trends": [
            {"topic": "LLMs", "frequency": 4.6, "growth_rate": 0.3, "sentiment": "negative"},
            {"category": "no topic"},
        ],
        "sentiment_analysis": {"overall": {"positive": 140, "average_score": -3}, "trending": "declining"},
        "insights": {"community_health_score": 0.4},
    })
    result = parse_community_analysis(reply)
    assert len(result.topic_trends) == 1
    assert result.topic_trends[0].frequency == 5
    assert result.topic_trends[0].sentiment is SentimentLabel.NEGATIVE
    assert result.sentiment_analysis.overall.positive == 100.0
    assert result.sentiment_analysis.overall.average_score == -1.0
    assert result.sentiment_analysis.trending is TrendDirection.DECLINING
    assert result.insights.community_health_score == 0.4


def test_community_without_json_uses_fallback():
    result = parse_community_analysis(None)
    assert result.topic_trends[0].topic == "AI"
    assert result.sentiment_analysis.trending is TrendDirection.STABLE
