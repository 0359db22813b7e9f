"""Plain-text emails sent after an enquiry is submitted."""

from typing import Dict, List

from enquiry_app.models.enquiry import DESIGN_ASSET_LABELS, EnquirySubmission
from enquiry_app.models.pricing import PricingBreakdown
from enquiry_app.services.pricing import format_price_range

READY_STATUSES = {"yes", "draft", "use-standard", "create-from-logo", "suggest-for-me"}
NEEDED_STATUSES = {"no", "not-sure"}

# Email wording. Pricing line items use their own labels from price_tables.
INVOLVEMENT_LABELS = {
    "do-it-for-me": "Do it for me",
    "teach-me-basics": "Teach me the basics",
    "guide-me": "Guide me through it",
}

ACCOUNT_MANAGEMENT_LABELS = {
    "you-manage": "You manage everything in your accounts",
    "my-name-you-setup": "Set them up in my name, but you do the setup",
    "walk-me-through": "Walk me through it so I own and understand it",
}

COMPLEXITY_LABELS = {
    "simple-static": "Simple & static",
    "some-moving-parts": "Some moving parts",
    "full-featured": "Full-featured",
}

PREFERRED_CONTACT_LABELS = {
    "email": "Email",
    "phone": "Phone",
    "whatsapp": "WhatsApp",
}


def format_list(items: List[str]) -> str:
    cleaned = [i for i in items if i and i.strip()]
    if not cleaned:
        return "None specified"
    return "\n".join(f"• {i}" for i in cleaned)


def summarize_assets(assets: Dict[str, str]) -> Dict[str, int]:
    ready = sum(1 for s in assets.values() if s in READY_STATUSES)
    needed = sum(1 for s in assets.values() if s in NEEDED_STATUSES)
    not_applicable = sum(1 for s in assets.values() if s == "na")
    return {
        "ready": ready,
        "needed": needed,
        "not_applicable": not_applicable,
        "total": ready + needed + not_applicable,
    }


def assets_needing_help(assets: Dict[str, str]) -> List[str]:
    """Labels of assets marked no / not-sure, in questionnaire order."""
    return [
        label for key, label in DESIGN_ASSET_LABELS.items()
        if assets.get(key) in NEEDED_STATUSES
    ]


def build_user_confirmation(sub: EnquirySubmission, breakdown: PricingBreakdown) -> Dict[str, str]:
    subject = f"Thank you for your enquiry, {sub.full_name}"
    lines = [
        f"Thank You, {sub.full_name}!",
        "",
        "We've received your website enquiry and will be in touch within two working days.",
        "",
        f"Preferred contact: {PREFERRED_CONTACT_LABELS.get(sub.preferred_contact, sub.preferred_contact)}",
        f"Website type: {COMPLEXITY_LABELS.get(sub.website_complexity, sub.website_complexity)}",
        f"Working style: {INVOLVEMENT_LABELS.get(sub.involvement_level, sub.involvement_level)}",
        "",
        f"Estimated price: {format_price_range(breakdown.total)}",
        "This estimate is a guide only; your final quote will follow our conversation.",
    ]
    return {"subject": subject, "text": "\n".join(lines)}


def build_admin_notification(
    enquiry_id: int, sub: EnquirySubmission, breakdown: PricingBreakdown
) -> Dict[str, str]:
    subject = f"New website enquiry from {sub.full_name}"
    summary = summarize_assets(sub.design_assets)

    lines = [
        f"Enquiry #{enquiry_id}",
        "",
        "CONTACT",
        f"Name: {sub.full_name}",
        f"Email: {sub.email}",
        f"Phone: {sub.phone}",
        f"Preferred contact: {PREFERRED_CONTACT_LABELS.get(sub.preferred_contact, sub.preferred_contact)}",
        "",
        "BUSINESS",
        f"Business name: {sub.business_name or 'Not provided'}",
        f"Description: {sub.business_description}",
        "Competitors:",
        format_list(sub.competitor_websites),
        f"Inspiration: {sub.inspiration_website or 'None'}",
    ]
    if sub.inspiration_reason:
        lines.append(f"Why: {sub.inspiration_reason}")

    lines += [
        "",
        "WORKING RELATIONSHIP",
        f"Involvement: {INVOLVEMENT_LABELS.get(sub.involvement_level, sub.involvement_level)}",
    ]
    if sub.account_management:
        lines.append(
            f"Accounts: {ACCOUNT_MANAGEMENT_LABELS.get(sub.account_management, sub.account_management)}"
        )

    lines += [
        "",
        "WEBSITE",
        f"Complexity: {COMPLEXITY_LABELS.get(sub.website_complexity, sub.website_complexity)}",
        "Core pages:",
        format_list(sub.core_pages + ([sub.core_pages_other] if sub.core_pages_other else [])),
        "Dynamic features:",
        format_list(sub.dynamic_features + ([sub.dynamic_features_other] if sub.dynamic_features_other else [])),
        "Advanced features:",
        format_list(sub.advanced_features + ([sub.advanced_features_other] if sub.advanced_features_other else [])),
        "AI features:",
        format_list(sub.ai_features),
        "",
        "ESTIMATE",
        f"{breakdown.base.label}: {format_price_range(breakdown.base.price)}",
    ]
    for item in [*breakdown.ai_features, *breakdown.integrations]:
        lines.append(f"{item.label}: {format_price_range(item.price)}")
    lines.append(f"Total: {format_price_range(breakdown.total)}")
    if breakdown.content_needs:
        lines.append("Content to quote separately:")
        for item in breakdown.content_needs:
            lines.append(f"• {item.label}: {format_price_range(item.price)}")

    lines += [
        "",
        "DESIGN ASSETS",
        f"Ready: {summary['ready']}  Needed: {summary['needed']}  N/A: {summary['not_applicable']}",
        "Needs help with:",
        format_list(assets_needing_help(sub.design_assets)),
    ]
    return {"subject": subject, "text": "\n".join(lines)}
