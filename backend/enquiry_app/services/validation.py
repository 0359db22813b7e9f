import re
from typing import Any, Callable, Dict, List
from urllib.parse import urlparse

from enquiry_app.models.enquiry import EnquirySubmission

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# E.164: "+" then 2-15 digits, no leading zero in the country code
PHONE_RE = re.compile(r"^\+[1-9]\d{1,14}$")

MIN_DESCRIPTION_LENGTH = 10


def is_valid_email(email: str) -> bool:
    if not email or not email.strip():
        return False
    return bool(EMAIL_RE.match(email.strip()))


def is_valid_phone(phone: str) -> bool:
    """E.164 check; spaces and dashes are ignored ("+44 7911-123456" is valid)."""
    if not phone or not phone.strip():
        return False
    cleaned = re.sub(r"[\s-]", "", phone)
    return bool(PHONE_RE.match(cleaned))


def is_valid_url(url: str) -> bool:
    if not url or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_required(value: str) -> bool:
    return value is not None and value.strip() != ""


def has_min_items(items: List[Any], minimum: int = 1) -> bool:
    return isinstance(items, (list, tuple)) and len(items) >= minimum


# --- per-step checks (mirror the questionnaire pages) ---

def validate_involvement_level(sub: EnquirySubmission) -> bool:
    if sub.involvement_level == "":
        return False
    if sub.involvement_level != "guide-me" and sub.account_management == "":
        return False
    return True


def validate_website_complexity(sub: EnquirySubmission) -> bool:
    return sub.website_complexity != ""


def validate_features(sub: EnquirySubmission) -> bool:
    return has_min_items(sub.core_pages)


def validate_ai_features(sub: EnquirySubmission) -> bool:
    return has_min_items(sub.ai_features)


def validate_your_business(sub: EnquirySubmission) -> bool:
    has_description = len(sub.business_description.strip()) >= MIN_DESCRIPTION_LENGTH
    has_competitor = any(url.strip() for url in sub.competitor_websites)
    return has_description and has_competitor


def validate_design_assets(sub: EnquirySubmission) -> bool:
    return sub.asset_status("logo") != "" and sub.asset_status("brandColours") != ""


def validate_contact_info(sub: EnquirySubmission) -> bool:
    return (
        is_required(sub.full_name)
        and is_valid_email(sub.email)
        and is_valid_phone(sub.phone)
        and sub.preferred_contact != ""
    )


def validate_pricing_summary(sub: EnquirySubmission) -> bool:
    return True


STEP_VALIDATORS: Dict[str, Callable[[EnquirySubmission], bool]] = {
    "involvement-level": validate_involvement_level,
    "website-complexity": validate_website_complexity,
    "features": validate_features,
    "ai-features": validate_ai_features,
    "your-business": validate_your_business,
    "design-assets": validate_design_assets,
    "contact-info": validate_contact_info,
    "pricing-summary": validate_pricing_summary,
}


class EnquiryValidator:
    """Validation of a complete questionnaire submission.

    Rules:
    - every questionnaire step must pass -> otherwise incomplete_step:<step>
    - email / phone that are present but malformed are reported on their own
    - competitor and inspiration websites must be http(s) URLs when given

    Deterministic: issues are de-duplicated and returned sorted.
    """

    def _add_issue(self, issues: List[str], issue: str) -> None:
        if issue not in issues:
            issues.append(issue)

    def validate_step(self, step: str, sub: EnquirySubmission) -> bool:
        return STEP_VALIDATORS[step](sub)

    def validate(self, sub: EnquirySubmission) -> Dict[str, Any]:
        issues: List[str] = []

        for step, check in STEP_VALIDATORS.items():
            if not check(sub):
                self._add_issue(issues, f"incomplete_step:{step}")

        if sub.email.strip() and not is_valid_email(sub.email):
            self._add_issue(issues, "invalid_email")
        if sub.phone.strip() and not is_valid_phone(sub.phone):
            self._add_issue(issues, "invalid_phone")

        urls = [u for u in sub.competitor_websites if u.strip()]
        if sub.inspiration_website.strip():
            urls.append(sub.inspiration_website)
        for url in urls:
            if not is_valid_url(url):
                self._add_issue(issues, f"invalid_url:{url.strip()}")

        decision = "invalid" if issues else "valid"
        return {"decision": decision, "issues": sorted(issues)}
