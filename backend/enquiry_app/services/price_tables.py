"""Static price tables (whole pounds).

Adding a priced feature is a data change here; the engine only looks tags up.
Tags missing from a map are unpriced and contribute nothing to the estimate.
"""

from types import MappingProxyType

from enquiry_app.models.pricing import PriceLineItem, PriceRange


def _range(lo: int, hi: int) -> PriceRange:
    return PriceRange(min=lo, max=hi)


def _item(label: str, lo: int, hi: int) -> PriceLineItem:
    return PriceLineItem(label=label, price=_range(lo, hi))


COMPLEXITY_ORDER = ("simple-static", "some-moving-parts", "full-featured")
INVOLVEMENT_ORDER = ("do-it-for-me", "teach-me-basics", "guide-me")

# complexity -> involvement -> range
BASE_PRICES = MappingProxyType({
    "simple-static": MappingProxyType({
        "do-it-for-me": _range(400, 500),
        "teach-me-basics": _range(500, 650),
        "guide-me": _range(650, 800),
    }),
    "some-moving-parts": MappingProxyType({
        "do-it-for-me": _range(700, 1000),
        "teach-me-basics": _range(900, 1200),
        "guide-me": _range(1100, 1500),
    }),
    "full-featured": MappingProxyType({
        "do-it-for-me": _range(1400, 2000),
        "teach-me-basics": _range(1600, 2200),
        "guide-me": _range(1800, 2500),
    }),
})

COMPLEXITY_LABELS = MappingProxyType({
    "simple-static": "Simple Static",
    "some-moving-parts": "Some Moving Parts",
    "full-featured": "Full-Featured",
})

INVOLVEMENT_LABELS = MappingProxyType({
    "do-it-for-me": "Do it for me",
    "teach-me-basics": "Teach me the basics",
    "guide-me": "Guide me through",
})

# "ai-not-sure" and "ai-none" are deliberately absent
AI_FEATURE_PRICES = MappingProxyType({
    "ai-chatbot": _item("AI Chatbot", 300, 500),
    "ai-assistant": _item("AI Shopping Assistant", 800, 1500),
    "ai-contact-form": _item("Smart Contact Form", 200, 400),
    "ai-search": _item("AI Search", 500, 800),
    "ai-content": _item("AI Content Generation", 300, 500),
    "ai-recommendations": _item("Personalised Recommendations", 800, 1500),
    "ai-voice": _item("Voice Assistant", 1000, 2000),
})

INTEGRATION_PRICES = MappingProxyType({
    # advanced features
    "shop": _item("Online Shop", 200, 400),
    "cart-checkout": _item("Shopping Cart & Checkout", 150, 300),
    "payments": _item("Payment Processing", 100, 200),
    "calendar-booking": _item("Calendar Booking", 150, 300),
    "service-deposits": _item("Booking with Deposits", 200, 350),
    "members-area": _item("Members Area", 300, 500),
    "courses": _item("Course Library", 400, 800),
    "customer-dashboard": _item("Customer Dashboard", 300, 600),
    "subscriptions": _item("Subscription Payments", 200, 400),
    "discount-codes": _item("Discount Codes", 50, 100),
    "inventory": _item("Inventory Management", 200, 400),
    "order-tracking": _item("Order Tracking", 100, 200),
    "email-automations": _item("Email Automations", 100, 250),
    "crm": _item("CRM Integration", 200, 400),
    "reviews-ratings": _item("Reviews & Ratings", 100, 200),
    "wishlist": _item("Wishlist", 50, 150),
    "live-chat": _item("Live Chat", 50, 100),
    "multi-language": _item("Multi-language Support", 300, 600),
    "multi-location": _item("Multi-location Support", 300, 600),
    "integrations": _item("External Tool Integrations", 100, 300),
    # dynamic features
    "newsletter": _item("Newsletter Signup", 50, 100),
    "external-booking": _item("External Booking Link", 50, 100),
    "social-feed": _item("Social Media Feed", 50, 100),
})

# copywriting is per page
CONTENT_CREATION_PRICES = MappingProxyType({
    "logo": _item("Logo Design", 200, 400),
    "brandColours": _item("Brand Colours & Fonts", 100, 200),
    "copywriting": _item("Copywriting", 50, 100),
    "photoSourcing": _item("Photo Sourcing", 50, 150),
})

COPYWRITING_ASSET_KEYS = ("homepageText", "aboutText", "serviceDescriptions")
PHOTO_ASSET_KEYS = ("heroImage", "teamPhotos", "productPhotos", "servicePhotos")
