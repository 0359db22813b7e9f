from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field


class WebsiteComplexity(str, Enum):
    SIMPLE_STATIC = "simple-static"
    SOME_MOVING_PARTS = "some-moving-parts"
    FULL_FEATURED = "full-featured"


class InvolvementLevel(str, Enum):
    DO_IT_FOR_ME = "do-it-for-me"
    TEACH_ME_BASICS = "teach-me-basics"
    GUIDE_ME = "guide-me"


class AssetStatus(str, Enum):
    YES = "yes"
    NO = "no"
    NA = "na"
    NOT_SURE = "not-sure"
    DRAFT = "draft"
    USE_STANDARD = "use-standard"
    CREATE_FROM_LOGO = "create-from-logo"
    SUGGEST_FOR_ME = "suggest-for-me"


class EnquiryStatus(str, Enum):
    NEW = "new"
    IN_REVIEW = "in_review"
    CONTACTED = "contacted"
    QUOTED = "quoted"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    COMPLETED = "completed"


STATUS_LABELS = {
    EnquiryStatus.NEW: "New",
    EnquiryStatus.IN_REVIEW: "In Review",
    EnquiryStatus.CONTACTED: "Contacted",
    EnquiryStatus.QUOTED: "Quote Sent",
    EnquiryStatus.ACCEPTED: "Accepted",
    EnquiryStatus.DECLINED: "Declined",
    EnquiryStatus.COMPLETED: "Completed",
}


class NoteType(str, Enum):
    CONTEXT = "context"
    CALL_SUMMARY = "call_summary"
    QUOTE_SENT = "quote_sent"
    FOLLOW_UP = "follow_up"
    GENERAL = "general"


class SectionKey(str, Enum):
    CONTACT = "contact"
    WORKING_RELATIONSHIP = "workingRelationship"
    WEBSITE_REQUIREMENTS = "websiteRequirements"
    AI_FEATURES = "aiFeatures"
    BUSINESS_INFO = "businessInfo"
    DESIGN_ASSETS = "designAssets"


# Design asset catalog, in questionnaire order, with the labels used in emails.
DESIGN_ASSET_LABELS: Dict[str, str] = {
    # Branding
    "logo": "Logo",
    "logoVariations": "Logo variations",
    "brandColours": "Brand colours",
    "brandFonts": "Brand fonts",
    "brandGuidelines": "Brand guidelines",
    # Photography & imagery
    "heroImage": "Hero image",
    "teamPhotos": "Team photos",
    "productPhotos": "Product photos",
    "servicePhotos": "Service photos",
    "locationPhotos": "Location photos",
    "behindScenes": "Behind-the-scenes photos",
    "customerPhotos": "Customer photos",
    "stockImagery": "Stock imagery",
    # Graphics
    "icons": "Icons",
    "illustrations": "Illustrations",
    "infographics": "Infographics",
    "charts": "Charts/diagrams",
    "backgrounds": "Background patterns",
    "socialGraphics": "Social media graphics",
    "favicon": "Favicon",
    # Video & media
    "promoVideo": "Promotional video",
    "productDemos": "Product demo videos",
    "testimonialVideos": "Testimonial videos",
    "backgroundVideo": "Background video",
    "audioFiles": "Audio files",
    # Written content
    "homepageText": "Homepage text",
    "aboutText": "About page text",
    "serviceDescriptions": "Service descriptions",
    "teamBios": "Team bios",
    "testimonials": "Testimonials",
    "caseStudies": "Case studies",
    "faqContent": "FAQ content",
    "blogPosts": "Blog posts",
    "legalText": "Legal text",
    "tagline": "Tagline",
    "callToAction": "Call-to-action text",
    # Documents
    "brochures": "Brochures/PDFs",
    "priceLists": "Price lists",
    "catalogues": "Catalogues",
    "certificates": "Certificates",
    "pressMentions": "Press mentions",
    # Social proof
    "clientLogos": "Client logos",
    "partnerLogos": "Partner logos",
    "certificationBadges": "Certification badges",
    "awardLogos": "Award logos",
    "asSeenIn": '"As seen in" logos',
    "starRatings": "Star ratings",
    # Existing digital assets
    "existingContent": "Existing content",
    "domainOwned": "Domain name",
    "emailAccounts": "Email accounts",
    "customerDatabase": "Customer database",
    "productDatabase": "Product database",
    "socialAccounts": "Social media accounts",
    "googleBusiness": "Google Business profile",
}

DESIGN_ASSET_KEYS = tuple(DESIGN_ASSET_LABELS)


class AnswerSet(BaseModel):
    """Questionnaire answers that drive the price estimate.

    Unanswered enum fields are the empty string, never None. Values outside
    the known catalogs are accepted here; pricing degrades them to zero.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    website_complexity: str = ""
    involvement_level: str = ""
    ai_features: List[str] = []
    advanced_features: List[str] = []
    dynamic_features: List[str] = []
    design_assets: Dict[str, str] = {}

    @field_validator("*", mode="before")
    @classmethod
    def _unset_to_empty(cls, value, info):
        if value is not None:
            return value
        annotation = cls.model_fields[info.field_name].annotation
        if annotation is str:
            return ""
        if getattr(annotation, "__origin__", None) is list:
            return []
        if getattr(annotation, "__origin__", None) is dict:
            return {}
        return value

    def asset_status(self, key: str) -> str:
        return self.design_assets.get(key) or ""


class EnquirySubmission(AnswerSet):
    """The complete questionnaire as submitted by the client."""

    account_management: str = ""
    core_pages: List[str] = []
    core_pages_other: str = ""
    dynamic_features_other: str = ""
    advanced_features_other: str = ""
    business_name: str = ""
    business_description: str = ""
    competitor_websites: List[str] = []
    inspiration_website: str = ""
    inspiration_reason: str = ""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    preferred_contact: str = ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Enquiry(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)
    status: str = Field(default=EnquiryStatus.NEW.value, index=True)
    full_name: str
    email: str
    phone: str
    preferred_contact: Optional[str] = None
    business_name: Optional[str] = None
    website_complexity: Optional[str] = None
    involvement_level: Optional[str] = None
    # full EnquirySubmission as JSON (camelCase keys)
    answers: str
    # snapshot of the estimate at submission time; the breakdown itself is recomputed
    estimate_min: int = 0
    estimate_max: int = 0

    def submission(self) -> EnquirySubmission:
        return EnquirySubmission.model_validate_json(self.answers)


class EnquiryNote(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    enquiry_id: int = Field(foreign_key="enquiry.id", index=True)
    note_type: str = Field(default=NoteType.GENERAL.value)
    content: str
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)


class SectionNote(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    enquiry_id: int = Field(foreign_key="enquiry.id", index=True)
    section_key: str
    content: str
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
