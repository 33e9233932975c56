# backend/modules/feedback/services/sentiment_service.py

from modules.feedback.models.feedback_models import FeedbackSentiment


POSITIVE_THRESHOLD = 4
NEGATIVE_THRESHOLD = 2


def classify_rating(rating: float) -> FeedbackSentiment:
    """
    Map a rating to a coarse sentiment.

    >= 4 is positive, <= 2 is negative, anything strictly between is neutral.
    """
    if rating >= POSITIVE_THRESHOLD:
        return FeedbackSentiment.POSITIVE
    if rating <= NEGATIVE_THRESHOLD:
        return FeedbackSentiment.NEGATIVE
    return FeedbackSentiment.NEUTRAL
