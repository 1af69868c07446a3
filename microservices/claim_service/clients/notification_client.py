"""
Notification Service Client

Client for calling notification_service to deliver verification emails.
"""

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class NotificationClient:
    """Client for notification_service"""

    def __init__(self, base_url: str = "http://localhost:8206", timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def send_email(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        text_content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Send an email notification via notification_service.

        Args:
            recipient_email: Recipient address
            subject: Email subject
            html_content: HTML body
            text_content: Plain text body
            metadata: Extra fields for tracing (claim_id, campaign_id)

        Returns:
            Notification response
        """
        request_data = {
            "type": "email",
            "recipient_email": recipient_email,
            "subject": subject,
            "content": text_content,
            "html_content": html_content,
            "priority": "high",
            "metadata": metadata or {},
            "tags": ["claim_verification"],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/api/v1/notifications/send",
                    json=request_data,
                )
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Error sending email notification: {e.response.status_code} {e.response.text}")
            raise

        except httpx.HTTPError as e:
            logger.error(f"Error sending email notification: {e}")
            raise
