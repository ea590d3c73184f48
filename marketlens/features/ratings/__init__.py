"""Ratings: distribution, average and reply rate of customer feedback."""

from marketlens.features.ratings.engine import STARS, RatingStatisticsEngine, RatingStats

__all__ = [
    "STARS",
    "RatingStatisticsEngine",
    "RatingStats",
]
