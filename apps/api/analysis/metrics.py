"""
Basic text metrics computed locally, without the LLM.
"""

import math
import re

from .models import BasicMetrics

WORDS_PER_MINUTE = 200

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def count_words(text: str) -> int:
    return len((text or "").split())


def count_sentences(text: str) -> int:
    """Count non-empty fragments between runs of terminal punctuation."""
    return sum(1 for fragment in _SENTENCE_BOUNDARY.split(text or "") if fragment.strip())


def calculate_basic_metrics(text: str) -> BasicMetrics:
    """Word/sentence counts, reading time at 200 wpm, and mean sentence length."""
    word_count = count_words(text)
    sentence_count = count_sentences(text)
    average_sentence_length = word_count / sentence_count if sentence_count else 0.0
    return BasicMetrics(
        word_count=word_count,
        sentence_count=sentence_count,
        reading_time_minutes=math.ceil(word_count / WORDS_PER_MINUTE),
        average_sentence_length=average_sentence_length,
    )
