"""
Analysis models and schemas.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Literal

from pydantic import BaseModel


ContentType = Literal["blog", "portfolio"]


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ComplexityLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class TrendDirection(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class BasicMetrics(BaseModel):
    word_count: int
    sentence_count: int
    reading_time_minutes: int
    average_sentence_length: float


# Content analysis

class Sentiment(BaseModel):
    label: SentimentLabel
    score: float       # -1 to 1
    confidence: float  # 0 to 1


class Complexity(BaseModel):
    level: ComplexityLevel
    score: float       # 1 to 10
    readability_score: float


class ExtractedConcept(BaseModel):
    concept: str
    relevance: float   # 0 to 1
    category: str


class LanguageMetrics(BaseModel):
    technical_terms: int
    average_sentence_length: float
    vocabulary_richness: float  # 0 to 1


class ContentInsights(BaseModel):
    main_theme: str
    target_audience: List[str]
    recommended_actions: List[str]
    related_topics: List[str]


class ContentAnalysisResult(BaseModel):
    """Structured output of one content analysis pass."""
    summary: str
    key_topics: List[str]
    sentiment: Sentiment
    complexity: Complexity
    categories: List[str]
    extracted_concepts: List[ExtractedConcept]
    language_metrics: LanguageMetrics
    ai_insights: ContentInsights


# User interest analysis

class Interest(BaseModel):
    topic: str
    category: str
    weight: float      # 0 to 1
    confidence: float  # 0 to 1


class ReadingBehavior(BaseModel):
    preferred_complexity: ComplexityLevel
    engagement_score: float


class SentimentProfile(BaseModel):
    positive_content_affinity: float
    technical_content_preference: float
    diversity_score: float


class Recommendations(BaseModel):
    suggested_topics: List[str]
    recommended_authors: List[str]
    next_reading_level: str
    personalized_tags: List[str]


class LearnerInsights(BaseModel):
    learning_style: str
    knowledge_areas: List[str]
    skill_level: str
    recommended_path: List[str]
    personality_traits: List[str]


class UserInterestResult(BaseModel):
    """Structured output of one user interest analysis pass."""
    interests: List[Interest]
    reading_behavior: ReadingBehavior
    sentiment_profile: SentimentProfile
    recommendations: Recommendations
    ai_insights: LearnerInsights


# Community trend analysis

class TopicTrend(BaseModel):
    topic: str
    category: str
    frequency: int
    growth_rate: float
    sentiment: SentimentLabel


class SentimentBreakdown(BaseModel):
    positive: float  # percentage
    negative: float
    neutral: float
    average_score: float  # -1 to 1


class CommunitySentiment(BaseModel):
    overall: SentimentBreakdown
    trending: TrendDirection


class CommunityInsights(BaseModel):
    top_growing_topics: List[str]
    declining_topics: List[str]
    content_gaps: List[str]
    recommended_focus_areas: List[str]
    community_health_score: float  # 0 to 1


class CommunityPredictions(BaseModel):
    next_trending_topics: List[str]
    expected_growth_areas: List[str]
    risk_factors: List[str]
    opportunities: List[str]


class CommunityTrendResult(BaseModel):
    """Structured output of one community trend analysis pass."""
    topic_trends: List[TopicTrend]
    sentiment_analysis: CommunitySentiment
    insights: CommunityInsights
    predictions: CommunityPredictions


# Inputs handed to the LLM client

@dataclass(frozen=True)
class ReadingHistoryItem:
    title: str
    content: str
    time_spent: float
    completed: bool
    categories: List[str] = field(default_factory=list)
    sentiment: str = "neutral"


@dataclass(frozen=True)
class CreatedContentItem:
    title: str
    content: str
    categories: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UserActivity:
    user_id: str
    user_name: str
    user_email: str
    content_history: List[ReadingHistoryItem] = field(default_factory=list)
    created_content: List[CreatedContentItem] = field(default_factory=list)


@dataclass(frozen=True)
class CommunityPost:
    title: str
    content: str
    author: str
    created_at: datetime
    categories: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CommunitySample:
    posts: List[CommunityPost]
    start: datetime
    end: datetime
