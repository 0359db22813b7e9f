from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class PriceRange(BaseModel):
    """A (min, max) pair of whole pounds. (0, 0) means "not yet priceable"."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(0, ge=0)
    max: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "PriceRange":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self

    def is_zero(self) -> bool:
        return self.min == 0 and self.max == 0


ZERO_RANGE = PriceRange(min=0, max=0)


class PriceLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    price: PriceRange


class PricingBreakdown(BaseModel):
    # camelCase on the wire, matching the questionnaire payloads
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    base: PriceLineItem
    ai_features: List[PriceLineItem] = []
    integrations: List[PriceLineItem] = []
    # quoted separately, never part of `total`
    content_needs: List[PriceLineItem] = []
    total: PriceRange = ZERO_RANGE
