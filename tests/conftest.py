from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from enquiry_app.db import session as db_session
from enquiry_app.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    db_session.set_engine(engine)
    yield engine
    db_session.set_engine(None)
    engine.dispose()


@pytest.fixture
def sent_emails():
    """Captures notification payloads instead of posting them."""
    sent = []

    def fake_send(enquiry_id, submission, breakdown, client=None):
        sent.append({"enquiry_id": enquiry_id, "email": submission.email, "total": breakdown.total})
        return True

    with patch("enquiry_app.api.enquiries.send_confirmation_emails", side_effect=fake_send):
        yield sent


@pytest.fixture
def client(engine, sent_emails):
    with TestClient(app) as c:
        yield c


def make_submission(**overrides):
    """A complete, valid questionnaire payload (camelCase, as the frontend sends it)."""
    payload = {
        "involvementLevel": "do-it-for-me",
        "accountManagement": "you-manage",
        "websiteComplexity": "simple-static",
        "corePages": ["home", "about", "contact"],
        "dynamicFeatures": ["newsletter"],
        "advancedFeatures": [],
        "aiFeatures": ["ai-chatbot"],
        "businessName": "Hollow Oak Bakery",
        "businessDescription": "Small-batch sourdough bakery in Leeds.",
        "competitorWebsites": ["https://example-bakery.co.uk"],
        "inspirationWebsite": "",
        "designAssets": {"logo": "yes", "brandColours": "no", "homepageText": "no"},
        "fullName": "Sam Carter",
        "email": "sam@example.com",
        "phone": "+447911123456",
        "preferredContact": "email",
    }
    payload.update(overrides)
    return payload
