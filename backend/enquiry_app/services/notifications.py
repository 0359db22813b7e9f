import logging
import time
from typing import Any, Dict, Optional

import requests

from enquiry_app import config
from enquiry_app.models.enquiry import EnquirySubmission
from enquiry_app.models.pricing import PricingBreakdown
from enquiry_app.services.email_content import build_admin_notification, build_user_confirmation

logger = logging.getLogger(__name__)


class NotificationClient:
    """Posts email payloads to the mail-sending webhook."""

    def __init__(self, webhook_url: Optional[str] = None, max_retries: Optional[int] = None,
                 timeout: Optional[float] = None):
        self.webhook = webhook_url if webhook_url is not None else config.NOTIFICATION_WEBHOOK_URL
        self.max_retries = max_retries if max_retries is not None else config.NOTIFICATION_MAX_RETRIES
        self.timeout = timeout if timeout is not None else config.NOTIFICATION_TIMEOUT
        logger.debug("NotificationClient initialized with webhook=%s max_retries=%s", self.webhook, self.max_retries)

    def trigger(self, payload: Dict[str, Any]) -> bool:
        if not self.webhook:
            logger.info("No notification webhook configured; skipping %s", payload.get("kind"))
            return False

        headers = {"Content-Type": "application/json"}
        # lets the mail collaborator drop duplicates on retry
        if "enquiry_id" in payload:
            headers["Idempotency-Key"] = f"enquiry-{payload['enquiry_id']}-{payload.get('kind', 'email')}"

        for attempt in range(1, self.max_retries + 1):
            try:
                logger.debug("Sending notification attempt=%s url=%s", attempt, self.webhook)
                resp = requests.post(self.webhook, json=payload, timeout=self.timeout, headers=headers)
                resp.raise_for_status()
                logger.info("Notification sent kind=%s status=%s", payload.get("kind"), resp.status_code)
                return True
            except requests.RequestException as e:
                logger.warning("Attempt %s: failed to send notification: %s", attempt, e)
            if attempt < self.max_retries:
                time.sleep(0.5 * attempt)
        logger.error("All %s attempts to send %s notification failed", self.max_retries, payload.get("kind"))
        return False


def send_confirmation_emails(
    enquiry_id: int,
    submission: EnquirySubmission,
    breakdown: PricingBreakdown,
    client: Optional[NotificationClient] = None,
) -> bool:
    """Confirmation to the client, then a detailed copy to the admin."""
    if not submission.email:
        logger.info("No email address on enquiry id=%s; not sending confirmation", enquiry_id)
        return False

    client = client or NotificationClient()
    user_msg = build_user_confirmation(submission, breakdown)
    admin_msg = build_admin_notification(enquiry_id, submission, breakdown)

    user_sent = client.trigger({
        "enquiry_id": enquiry_id,
        "kind": "user_confirmation",
        "from": config.SENDER_EMAIL,
        "to": submission.email,
        **user_msg,
    })
    admin_sent = client.trigger({
        "enquiry_id": enquiry_id,
        "kind": "admin_notification",
        "from": config.SENDER_EMAIL,
        "to": config.ADMIN_EMAIL,
        "reply_to": submission.email,
        **admin_msg,
    })
    return user_sent and admin_sent
