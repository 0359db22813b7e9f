from unittest.mock import patch

from starlette.background import BackgroundTasks
from fastapi.testclient import TestClient
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from conftest import make_submission
from enquiry_app.api import enquiries
from enquiry_app.db import session as db_session
from enquiry_app.main import app


def submit(client, **overrides):
    resp = client.post("/enquiries/", json=make_submission(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json() == {"status": "ok", "service": "website-enquiry"}

    def test_startup_creates_tables(self):
        engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
        db_session.set_engine(engine)
        try:
            assert inspect(engine).get_table_names() == []
            with TestClient(app):
                tables = set(inspect(engine).get_table_names())
            assert {"enquiry", "enquirynote", "sectionnote"} <= tables
        finally:
            db_session.set_engine(None)
            engine.dispose()


class TestEstimateApi:
    def test_partial_answers(self, client):
        resp = client.post("/estimate/", json={"websiteComplexity": "simple-static"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["breakdown"]["base"]["label"] == "Select options to see pricing"
        assert body["formatted"]["total"] == "—"

    def test_full_estimate(self, client):
        resp = client.post("/estimate/", json={
            "websiteComplexity": "simple-static",
            "involvementLevel": "do-it-for-me",
            "aiFeatures": ["ai-chatbot", "ai-none"],
            "designAssets": {"logo": "no"},
        })
        body = resp.json()
        assert body["breakdown"]["total"] == {"min": 700, "max": 1000}
        assert body["breakdown"]["aiFeatures"] == [{"label": "AI Chatbot", "price": {"min": 300, "max": 500}}]
        assert body["breakdown"]["contentNeeds"][0]["label"] == "Logo Design"
        assert body["formatted"]["total"] == "£700 - £1,000"
        assert body["formatted"]["contentNeeds"] == ["£200 - £400"]

    def test_matrix(self, client):
        cells = client.get("/estimate/matrix").json()
        assert len(cells) == 9
        assert cells[4]["complexity"] == "some-moving-parts"
        assert cells[4]["involvement"] == "teach-me-basics"
        assert cells[4]["formatted"] == "£900 - £1,200"


class TestValidateApi:
    def test_valid(self, client):
        assert client.post("/validate/", json=make_submission()).json() == {"decision": "valid", "issues": []}

    def test_single_step(self, client):
        resp = client.post("/validate/contact-info", json=make_submission(email="bad"))
        assert resp.json() == {"step": "contact-info", "valid": False}

    def test_unknown_step(self, client):
        assert client.post("/validate/colour-scheme", json=make_submission()).status_code == 404


class TestEnquiriesApi:
    def test_submit(self, client, sent_emails):
        body = submit(client)
        assert body["status"] == "new"
        assert body["statusLabel"] == "New"
        assert body["estimate"] == {"min": 750, "max": 1100}
        assert body["estimateFormatted"] == "£750 - £1,100"
        assert body["breakdown"]["total"] == {"min": 750, "max": 1100}
        assert len(sent_emails) == 1
        assert sent_emails[0]["enquiry_id"] == body["id"]
        assert sent_emails[0]["email"] == "sam@example.com"
        assert sent_emails[0]["total"].max == 1100

    def test_submit_incomplete(self, client, sent_emails):
        resp = client.post("/enquiries/", json=make_submission(phone="12345", corePages=[]))
        assert resp.status_code == 422
        issues = resp.json()["detail"]["issues"]
        assert "invalid_phone" in issues
        assert "incomplete_step:features" in issues
        assert sent_emails == []
        assert client.get("/enquiries/").json() == []

    def test_list_newest_first_and_filter(self, client):
        first = submit(client, fullName="First Person")
        second = submit(client, fullName="Second Person")
        client.put(f"/enquiries/{first['id']}/status", json={"status": "quoted"})

        names = [e["fullName"] for e in client.get("/enquiries/").json()]
        assert names == ["Second Person", "First Person"]

        quoted = client.get("/enquiries/", params={"status": "quoted"}).json()
        assert [e["id"] for e in quoted] == [first["id"]]
        assert quoted[0]["statusLabel"] == "Quote Sent"

        new = client.get("/enquiries/", params={"status": "new"}).json()
        assert [e["id"] for e in new] == [second["id"]]

    def test_list_unknown_status(self, client):
        assert client.get("/enquiries/", params={"status": "archived"}).status_code == 422

    def test_detail_recomputes_breakdown(self, client):
        created = submit(client, advancedFeatures=["payments"])
        detail = client.get(f"/enquiries/{created['id']}").json()
        assert detail["answers"]["advancedFeatures"] == ["payments"]
        assert detail["breakdown"]["total"] == {"min": 850, "max": 1300}
        assert detail["notes"] == []
        assert detail["sectionNotes"] == []

    def test_detail_missing(self, client):
        assert client.get("/enquiries/999").status_code == 404

    def test_status_update(self, client):
        created = submit(client)
        resp = client.put(f"/enquiries/{created['id']}/status", json={"status": "in_review"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "in_review"

    def test_status_update_rejects_unknown(self, client):
        created = submit(client)
        resp = client.put(f"/enquiries/{created['id']}/status", json={"status": "lost"})
        assert resp.status_code == 422

    def test_status_update_missing(self, client):
        assert client.put("/enquiries/999/status", json={"status": "contacted"}).status_code == 404

    def test_notes(self, client):
        created = submit(client)
        url = f"/enquiries/{created['id']}/notes"
        resp = client.post(url, json={"content": "  Called, wants a shop later.  ", "note_type": "call_summary",
                                      "created_by": "admin"})
        assert resp.status_code == 201
        assert resp.json()["content"] == "Called, wants a shop later."

        notes = client.get(url).json()
        assert [(n["noteType"], n["createdBy"]) for n in notes] == [("call_summary", "admin")]

    def test_note_requires_content(self, client):
        created = submit(client)
        resp = client.post(f"/enquiries/{created['id']}/notes", json={"content": "   "})
        assert resp.status_code == 422

    def test_note_missing_enquiry(self, client):
        assert client.post("/enquiries/999/notes", json={"content": "hello"}).status_code == 404
        assert client.get("/enquiries/999/notes").status_code == 404

    def test_section_notes(self, client):
        created = submit(client)
        url = f"/enquiries/{created['id']}/section-notes"
        client.post(url, json={"content": "Logo brief attached", "section_key": "designAssets"})
        client.post(url, json={"content": "Confirm phone", "sectionKey": "contact"})

        assert len(client.get(url).json()) == 2
        only_assets = client.get(url, params={"section": "designAssets"}).json()
        assert [n["content"] for n in only_assets] == ["Logo brief attached"]

        detail = client.get(f"/enquiries/{created['id']}").json()
        assert len(detail["sectionNotes"]) == 2

    def test_section_note_unknown_section(self, client):
        created = submit(client)
        resp = client.post(f"/enquiries/{created['id']}/section-notes",
                           json={"content": "x", "section_key": "pricing"})
        assert resp.status_code == 422

    def test_confirmation_emails_run_as_background_task(self, client, sent_emails):
        with patch.object(BackgroundTasks, "add_task") as add_task:
            body = submit(client)
        assert sent_emails == []
        func, enquiry_id, sub, breakdown = add_task.call_args.args
        assert func is enquiries.send_confirmation_emails
        assert enquiry_id == body["id"]
        assert sub.email == "sam@example.com"
        assert breakdown.total.max == 1100

    def test_status_update_storage_failure(self, client):
        created = submit(client)
        with patch.object(Session, "commit", side_effect=SQLAlchemyError("disk full")):
            resp = client.put(f"/enquiries/{created['id']}/status", json={"status": "contacted"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to update enquiry status"
        assert client.get(f"/enquiries/{created['id']}").json()["status"] == "new"

    def test_note_storage_failure(self, client):
        created = submit(client)
        with patch.object(Session, "commit", side_effect=SQLAlchemyError("disk full")):
            resp = client.post(f"/enquiries/{created['id']}/notes", json={"content": "hello"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to store note"
        assert client.get(f"/enquiries/{created['id']}/notes").json() == []

    def test_section_note_storage_failure(self, client):
        created = submit(client)
        with patch.object(Session, "commit", side_effect=SQLAlchemyError("disk full")):
            resp = client.post(f"/enquiries/{created['id']}/section-notes",
                               json={"content": "hello", "sectionKey": "contact"})
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to store section note"
        assert client.get(f"/enquiries/{created['id']}/section-notes").json() == []


class TestDashboardApi:
    def test_stats(self, client):
        a = submit(client)
        submit(client)
        b = submit(client)
        client.put(f"/enquiries/{a['id']}/status", json={"status": "in_review"})
        client.put(f"/enquiries/{b['id']}/status", json={"status": "declined"})

        stats = client.get("/dashboard/stats").json()
        assert stats == {
            "total": 3, "new": 1, "inReview": 1, "contacted": 0, "quoted": 0,
            "accepted": 0, "declined": 1, "completed": 0,
        }

    def test_summary_excludes_declined_from_pipeline(self, client):
        a = submit(client)
        submit(client)
        client.put(f"/enquiries/{a['id']}/status", json={"status": "declined"})

        body = client.get("/dashboard/summary").json()
        assert body["total"] == 2
        assert body["pipelineValue"] == 1100
        assert body["pipelineFormatted"] == "£750 - £1,100"

    def test_summary_html(self, client):
        resp = client.get("/dashboard/summary", headers={"accept": "text/html"})
        assert resp.status_code == 200
        assert "Enquiries Summary" in resp.text

    def test_summary_html_renders_rows_as_text(self, client):
        submit(client, fullName="<img src=x onerror=alert(1)>", businessName="<b>Shop</b>")
        resp = client.get("/dashboard/summary", headers={"accept": "text/html"})
        assert resp.status_code == 200
        assert "innerHTML" not in resp.text
        assert "td.textContent = value;" in resp.text
        assert "<img src=x" not in resp.text
        # the row data reaches the page only through the JSON list
        assert client.get("/enquiries/").json()[0]["fullName"] == "<img src=x onerror=alert(1)>"
