# backend/modules/feedback/services/stats_service.py

from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List
from datetime import datetime, timedelta
import logging

from core.config import settings
from modules.businesses.services.directory_service import BusinessDirectory
from modules.feedback.models.feedback_models import Feedback, FeedbackSentiment
from modules.feedback.schemas.feedback_schemas import (
    FeedbackStats,
    OwnerFeedbackStats,
    TrendPoint,
)

logger = logging.getLogger(__name__)

TREND_DAYS = 7


class FeedbackStatsService:
    """Read-only aggregates over visible (not hidden, not deleted) feedback"""

    def __init__(self, db: Session):
        self.db = db

    def get_public_stats(self, business_code: str) -> FeedbackStats:
        business = BusinessDirectory(self.db).get_active_by_code(business_code)
        return FeedbackStats(**self._aggregate(business.id))

    def get_owner_stats(self, business_id: int) -> OwnerFeedbackStats:
        return OwnerFeedbackStats(
            **self._aggregate(business_id),
            recent_trend=self._recent_trend(business_id),
        )

    def _visible(self, business_id: int):
        return (
            Feedback.business_id == business_id,
            Feedback.is_hidden.is_(False),
            Feedback.deleted_at.is_(None),
        )

    def _aggregate(self, business_id: int) -> Dict:
        average, total = (
            self.db.query(func.avg(Feedback.rating), func.count(Feedback.id))
            .filter(*self._visible(business_id))
            .one()
        )

        # Decimal ratings fall in the bucket of their whole star
        rating_distribution = {
            star: 0
            for star in range(
                int(settings.feedback_rating_min), int(settings.feedback_rating_max) + 1
            )
        }
        for rating, count in (
            self.db.query(Feedback.rating, func.count(Feedback.id))
            .filter(*self._visible(business_id))
            .group_by(Feedback.rating)
            .all()
        ):
            star = int(rating)
            rating_distribution[star] = rating_distribution.get(star, 0) + count

        sentiment_distribution = {sentiment.value: 0 for sentiment in FeedbackSentiment}
        for sentiment, count in (
            self.db.query(Feedback.sentiment, func.count(Feedback.id))
            .filter(*self._visible(business_id))
            .group_by(Feedback.sentiment)
            .all()
        ):
            sentiment_distribution[FeedbackSentiment(sentiment).value] = count

        return {
            "average_rating": round(float(average), 2) if average is not None else 0.0,
            "total_reviews": total or 0,
            "rating_distribution": rating_distribution,
            "sentiment_distribution": sentiment_distribution,
        }

    def _recent_trend(self, business_id: int) -> List[TrendPoint]:
        since = datetime.utcnow() - timedelta(days=TREND_DAYS)
        day = func.date(Feedback.created_at)
        rows = (
            self.db.query(day, func.count(Feedback.id), func.avg(Feedback.rating))
            .filter(*self._visible(business_id), Feedback.created_at >= since)
            .group_by(day)
            .order_by(day)
            .all()
        )
        return [
            TrendPoint(date=str(date), count=count, average_rating=round(float(avg), 2))
            for date, count, avg in rows
        ]
