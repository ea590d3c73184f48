"""Test fixtures for the ratings module."""

import pytest

from marketlens.features.ratings.engine import RatingStatisticsEngine
from marketlens.features.records.models import FeedbackRecord, parse_feedback


@pytest.fixture
def engine() -> RatingStatisticsEngine:
    """Rating statistics engine."""
    return RatingStatisticsEngine()


@pytest.fixture
def feedback() -> list[FeedbackRecord]:
    """Ratings 5, 5, 4, 1 in March 2024; two have vendor replies."""
    documents = [
        {
            "feedbackId": "F1",
            "rating": 5,
            "feedbackDate": "2024-03-01T10:00:00Z",
            "isReplied": True,
        },
        {"feedbackId": "F2", "rating": 5, "feedbackDate": "2024-03-05T10:00:00Z"},
        {
            "feedbackId": "F3",
            "rating": 4,
            "feedbackDate": "2024-03-10T10:00:00Z",
            "isReplied": True,
        },
        {"feedbackId": "F4", "rating": 1, "feedbackDate": "2024-03-20T10:00:00Z"},
    ]
    return [parse_feedback(document) for document in documents]
