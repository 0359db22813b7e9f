from fastapi import APIRouter
from typing import Any, Dict

from enquiry_app.models.enquiry import AnswerSet
from enquiry_app.services.pricing import PriceEngine, format_price_range

router = APIRouter()


@router.post("/")
async def estimate(answers: AnswerSet) -> Dict[str, Any]:
    """Live estimate for a (possibly partial) questionnaire."""
    breakdown = PriceEngine().compute_breakdown(answers)
    return {
        "breakdown": breakdown,
        "formatted": {
            "base": format_price_range(breakdown.base.price),
            "aiFeatures": [format_price_range(i.price) for i in breakdown.ai_features],
            "integrations": [format_price_range(i.price) for i in breakdown.integrations],
            "contentNeeds": [format_price_range(i.price) for i in breakdown.content_needs],
            "total": format_price_range(breakdown.total),
        },
    }


@router.get("/matrix")
async def base_price_matrix():
    return PriceEngine().base_matrix()
