"""Prompt builders for content, user-interest, and community analysis."""

from __future__ import annotations

from .models import CommunitySample, UserActivity

CONTENT_SYSTEM_PROMPT = (
    "You are an expert content analyst specializing in AI and education content. "
    "Provide detailed, accurate analysis in the requested JSON format."
)

USER_INTEREST_SYSTEM_PROMPT = (
    "You are an expert in educational psychology and learning analytics. "
    "Analyze user behavior patterns to provide personalized insights and recommendations."
)

COMMUNITY_SYSTEM_PROMPT = (
    "You are a community analytics expert specializing in educational content trends, "
    "sentiment analysis, and growth predictions. Provide actionable insights for community "
    "growth and engagement."
)

COMMUNITY_SAMPLE_SIZE = 20


def build_content_prompt(
    *,
    title: str,
    body: str,
    author: str,
    content_type: str,
    max_chars: int,
) -> str:
    excerpt = (body or "")[: max(int(max_chars), 0)]
    return (
        f"Analyze the following {content_type} content and provide a comprehensive analysis:\n\n"
        f'Title: "{title}"\n'
        f"Author: {author}\n"
        f'Content: "{excerpt}..."\n\n'
        "Please provide your analysis in the following JSON format:\n"
        "{\n"
        '  "summary": "A concise 2-3 sentence summary of the main points",\n'
        '  "key_topics": ["topic1", "topic2", "topic3"],\n'
        '  "sentiment": {"label": "positive|negative|neutral", "score": 0.5, "confidence": 0.8},\n'
        '  "complexity": {"level": "beginner|intermediate|advanced", "score": 6, "readability_score": 7.2},\n'
        '  "categories": ["AI", "Education", "Machine Learning"],\n'
        '  "extracted_concepts": [{"concept": "Neural Networks", "relevance": 0.9, "category": "Technical"}],\n'
        '  "language_metrics": {"technical_terms": 15, "average_sentence_length": 18.5, "vocabulary_richness": 0.7},\n'
        '  "ai_insights": {\n'
        '    "main_theme": "Main theme of the content",\n'
        '    "target_audience": ["Students", "Researchers", "Practitioners"],\n'
        '    "recommended_actions": ["action1", "action2"],\n'
        '    "related_topics": ["topic1", "topic2"]\n'
        "  }\n"
        "}\n\n"
        "Sentiment score ranges from -1 to 1; confidence and relevance from 0 to 1; "
        "complexity score from 1 to 10.\n"
        "Focus on AI and education related analysis. Be precise and provide actionable insights."
    )


def build_user_interest_prompt(activity: UserActivity) -> str:
    history_lines = "\n".join(
        f"Title: {item.title}, Time Spent: {item.time_spent}min, "
        f"Completed: {str(item.completed).lower()}, Categories: {', '.join(item.categories)}"
        for item in activity.content_history
    )
    return (
        "Analyze this user's reading behavior and content creation to determine their "
        "interests and learning profile:\n\n"
        f"User: {activity.user_name}\n"
        f"Content History ({len(activity.content_history)} items):\n"
        f"{history_lines or 'No reading history yet.'}\n\n"
        f"Created Content: {len(activity.created_content)} items\n\n"
        "Please provide analysis in JSON format:\n"
        "{\n"
        '  "interests": [{"topic": "Machine Learning", "category": "Technical", "weight": 0.8, "confidence": 0.9}],\n'
        '  "reading_behavior": {"preferred_complexity": "intermediate", "engagement_score": 0.7},\n'
        '  "sentiment_profile": {"positive_content_affinity": 0.6, "technical_content_preference": 0.8, "diversity_score": 0.5},\n'
        '  "recommendations": {\n'
        '    "suggested_topics": ["topic1", "topic2"],\n'
        '    "recommended_authors": ["author1", "author2"],\n'
        '    "next_reading_level": "advanced",\n'
        '    "personalized_tags": ["tag1", "tag2"]\n'
        "  },\n"
        '  "ai_insights": {\n'
        '    "learning_style": "Visual learner with technical focus",\n'
        '    "knowledge_areas": ["AI", "Data Science"],\n'
        '    "skill_level": "Intermediate",\n'
        '    "recommended_path": ["step1", "step2"],\n'
        '    "personality_traits": ["analytical", "curious"]\n'
        "  }\n"
        "}\n"
        "All weights, confidences, and scores range from 0 to 1."
    )


def build_community_prompt(sample: CommunitySample) -> str:
    post_lines = "\n".join(
        f'"{post.title}" by {post.author} - Categories: {", ".join(post.categories)}'
        for post in sample.posts[:COMMUNITY_SAMPLE_SIZE]
    )
    return (
        "Analyze this community's content trends and provide insights:\n\n"
        f"Time Period: {sample.start.date().isoformat()} to {sample.end.date().isoformat()}\n"
        f"Total Posts: {len(sample.posts)}\n\n"
        "Recent Posts Sample:\n"
        f"{post_lines or 'No posts in this period.'}\n\n"
        "Provide analysis in JSON format:\n"
        "{\n"
        '  "topic_trends": [{"topic": "Machine Learning", "category": "Technical", "frequency": 15, '
        '"growth_rate": 0.2, "sentiment": "positive"}],\n'
        '  "sentiment_analysis": {\n'
        '    "overall": {"positive": 60, "negative": 10, "neutral": 30, "average_score": 0.3},\n'
        '    "trending": "improving|declining|stable"\n'
        "  },\n"
        '  "insights": {\n'
        '    "top_growing_topics": ["topic1", "topic2"],\n'
        '    "declining_topics": ["topic3"],\n'
        '    "content_gaps": ["gap1", "gap2"],\n'
        '    "recommended_focus_areas": ["area1", "area2"],\n'
        '    "community_health_score": 0.8\n'
        "  },\n"
        '  "predictions": {\n'
        '    "next_trending_topics": ["trend1", "trend2"],\n'
        '    "expected_growth_areas": ["area1", "area2"],\n'
        '    "risk_factors": ["risk1"],\n'
        '    "opportunities": ["opportunity1", "opportunity2"]\n'
        "  }\n"
        "}"
    )
