import logging
from typing import Any, Dict, List

from enquiry_app.models.enquiry import AnswerSet
from enquiry_app.models.pricing import PriceLineItem, PriceRange, PricingBreakdown, ZERO_RANGE
from enquiry_app.services import price_tables

logger = logging.getLogger(__name__)

AWAITING_SELECTION_LABEL = "Select options to see pricing"


def sum_price_ranges(*ranges: PriceRange) -> PriceRange:
    lo = 0
    hi = 0
    for r in ranges:
        lo += r.min
        hi += r.max
    return PriceRange(min=lo, max=hi)


def format_price_range(price: PriceRange) -> str:
    """Render a range for display: "—", "£500" or "£1,000 - £2,500"."""
    if price.min == 0 and price.max == 0:
        return "—"
    if price.min == price.max:
        return f"£{price.min:,.0f}"
    return f"£{price.min:,.0f} - £{price.max:,.0f}"


class PriceEngine:
    """Rule-based website estimate.

    Pure: the answers are only read, and the same answers always give the
    same breakdown. Missing or unknown selections price at zero instead of
    raising, so a half-filled questionnaire still gets an estimate.
    """

    BASE_PRICES = price_tables.BASE_PRICES
    COMPLEXITY_LABELS = price_tables.COMPLEXITY_LABELS
    INVOLVEMENT_LABELS = price_tables.INVOLVEMENT_LABELS
    AI_FEATURE_PRICES = price_tables.AI_FEATURE_PRICES
    INTEGRATION_PRICES = price_tables.INTEGRATION_PRICES
    CONTENT_CREATION_PRICES = price_tables.CONTENT_CREATION_PRICES

    def _base(self, complexity: str, involvement: str) -> PriceLineItem:
        row = self.BASE_PRICES.get(complexity) if complexity else None
        price = row.get(involvement) if (row is not None and involvement) else None
        if price is None:
            return PriceLineItem(label=AWAITING_SELECTION_LABEL, price=ZERO_RANGE)

        complexity_label = self.COMPLEXITY_LABELS.get(complexity, complexity)
        involvement_label = self.INVOLVEMENT_LABELS.get(involvement, involvement)
        return PriceLineItem(label=f"{complexity_label} + {involvement_label}", price=price)

    def _ai_features(self, tags: List[str]) -> List[PriceLineItem]:
        return [self.AI_FEATURE_PRICES[t] for t in tags if t in self.AI_FEATURE_PRICES]

    def _integrations(self, advanced: List[str], dynamic: List[str]) -> List[PriceLineItem]:
        return [self.INTEGRATION_PRICES[t] for t in [*advanced, *dynamic] if t in self.INTEGRATION_PRICES]

    def _content_needs(self, answers: AnswerSet) -> List[PriceLineItem]:
        needs: List[PriceLineItem] = []
        prices = self.CONTENT_CREATION_PRICES

        def missing(key: str) -> bool:
            return answers.asset_status(key) == "no"

        if missing("logo"):
            needs.append(prices["logo"])

        # one entry covers both colours and fonts
        if missing("brandColours") or missing("brandFonts"):
            needs.append(prices["brandColours"])

        pages = sum(1 for key in price_tables.COPYWRITING_ASSET_KEYS if missing(key))
        if pages > 0:
            per_page = prices["copywriting"].price
            needs.append(PriceLineItem(
                label=f"{prices['copywriting'].label} (approx. {pages} {'page' if pages == 1 else 'pages'})",
                price=PriceRange(min=per_page.min * pages, max=per_page.max * pages),
            ))

        if any(missing(key) for key in price_tables.PHOTO_ASSET_KEYS):
            needs.append(prices["photoSourcing"])

        return needs

    def compute_breakdown(self, answers: AnswerSet) -> PricingBreakdown:
        base = self._base(answers.website_complexity, answers.involvement_level)
        ai_features = self._ai_features(answers.ai_features)
        integrations = self._integrations(answers.advanced_features, answers.dynamic_features)
        content_needs = self._content_needs(answers)

        total = sum_price_ranges(
            base.price,
            *(item.price for item in ai_features),
            *(item.price for item in integrations),
        )
        logger.debug(
            "Computed breakdown base=%s ai=%s integrations=%s content_needs=%s total=%s",
            base.label, len(ai_features), len(integrations), len(content_needs), total,
        )
        return PricingBreakdown(
            base=base,
            ai_features=ai_features,
            integrations=integrations,
            content_needs=content_needs,
            total=total,
        )

    def base_matrix(self) -> List[Dict[str, Any]]:
        """Every base price cell in catalog order, for the price matrix view."""
        cells = []
        for complexity in price_tables.COMPLEXITY_ORDER:
            for involvement in price_tables.INVOLVEMENT_ORDER:
                price = self.BASE_PRICES[complexity][involvement]
                cells.append({
                    "complexity": complexity,
                    "involvement": involvement,
                    "label": f"{self.COMPLEXITY_LABELS[complexity]} + {self.INVOLVEMENT_LABELS[involvement]}",
                    "price": price.model_dump(),
                    "formatted": format_price_range(price),
                })
        return cells


def compute_breakdown(answers: AnswerSet) -> PricingBreakdown:
    return PriceEngine().compute_breakdown(answers)
