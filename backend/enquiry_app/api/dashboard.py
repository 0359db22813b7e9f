from fastapi import APIRouter, HTTPException, Request
from typing import Any, Dict
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
import logging
from starlette.responses import HTMLResponse

from enquiry_app.db.session import get_session
from enquiry_app.models.enquiry import Enquiry, EnquiryStatus
from enquiry_app.models.pricing import PriceRange
from enquiry_app.services.pricing import format_price_range

logger = logging.getLogger(__name__)
router = APIRouter()

# response keys for each status, as the admin dashboard reads them
STAT_KEYS = {
    EnquiryStatus.NEW.value: "new",
    EnquiryStatus.IN_REVIEW.value: "inReview",
    EnquiryStatus.CONTACTED.value: "contacted",
    EnquiryStatus.QUOTED.value: "quoted",
    EnquiryStatus.ACCEPTED.value: "accepted",
    EnquiryStatus.DECLINED.value: "declined",
    EnquiryStatus.COMPLETED.value: "completed",
}


def _render_summary_html(total: int, pipeline: str, new: int) -> str:
    return f"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>Enquiries Summary</title>
  <style>
    body {{ font-family: Inter, system-ui, -apple-system, 'Segoe UI', Roboto, 'Helvetica Neue', Arial; background:#f3f4f6; padding:24px; }}
    .container {{ max-width:1100px; margin:0 auto; }}
    .cards {{ display:flex; gap:16px; margin-bottom:20px; }}
    .card {{ background:white;padding:20px;border-radius:8px; box-shadow:0 1px 3px rgba(0,0,0,0.06); flex:1 }}
    .title {{ color:#6b7280; font-size:13px }}
    .value {{ font-size:28px; font-weight:700; margin-top:6px }}
    table {{ width:100%; border-collapse:collapse; margin-top:12px; background:white; border-radius:8px; overflow:hidden }}
    th, td {{ padding:12px; text-align:left; border-bottom:1px solid #eef2f7 }}
    thead {{ background:#f9fafb }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Enquiries Summary</h1>
    <div class="cards">
      <div class="card"><div class="title">Total Enquiries</div><div class="value">{total}</div></div>
      <div class="card"><div class="title">Pipeline Value</div><div class="value">{pipeline}</div></div>
      <div class="card"><div class="title">New</div><div class="value">{new}</div></div>
    </div>
    <h2>Recent Enquiries</h2>
    <table>
      <thead><tr><th>ID</th><th>Name</th><th>Business</th><th>Status</th><th>Estimate</th></tr></thead>
      <tbody id="rows"></tbody>
    </table>
    <script>
      // names come from the public form: cells are filled via textContent only
      fetch('/enquiries/').then(function(r){{ return r.json(); }}).then(function(rows){{
        var tbody = document.getElementById('rows');
        rows.slice(0,20).forEach(function(e){{
          var tr = document.createElement('tr');
          [e.id, e.fullName, e.businessName || '—', e.statusLabel, e.estimateFormatted].forEach(function(value){{
            var td = document.createElement('td');
            td.textContent = value;
            tr.appendChild(td);
          }});
          tbody.appendChild(tr);
        }});
      }});
    </script>
  </div>
</body>
</html>
"""


def _count_by_status(rows) -> Dict[str, int]:
    counts = {key: 0 for key in STAT_KEYS.values()}
    for e in rows:
        key = STAT_KEYS.get(e.status or EnquiryStatus.NEW.value)
        if key is not None:
            counts[key] += 1
    return counts


@router.get("/stats")
def stats():
    session = get_session()
    try:
        rows = session.exec(select(Enquiry)).all()
        return {"total": len(rows), **_count_by_status(rows)}
    finally:
        session.close()


@router.get("/summary")
def summary(request: Request) -> Any:
    session = get_session()
    try:
        rows = session.exec(select(Enquiry)).all()
        open_rows = [e for e in rows if e.status != EnquiryStatus.DECLINED.value]
        pipeline = PriceRange(
            min=sum(e.estimate_min for e in open_rows),
            max=sum(e.estimate_max for e in open_rows),
        )
        counts = _count_by_status(rows)

        accept = request.headers.get('accept', '')
        if 'text/html' in accept:
            html = _render_summary_html(len(rows), format_price_range(pipeline), counts["new"])
            return HTMLResponse(content=html)

        return {
            "total": len(rows),
            "new": counts["new"],
            "pipelineValue": pipeline.max,
            "pipelineFormatted": format_price_range(pipeline),
        }
    except SQLAlchemyError as e:
        logger.exception("Failed to compute summary: %s", e)
        raise HTTPException(status_code=500, detail="Failed to compute dashboard summary")
    finally:
        session.close()
