from app.services.recs.service import RecommendationService

__all__ = ["RecommendationService"]
