"""
Automation API Client - hands converted leads to the CRM automation.

The automation endpoint accepts a JSON body with the API token and the
contact fields, and answers with JSON.
"""

import logging

import requests
from fastapi import Request

from careerhq.core.config import Settings
from careerhq.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class AutomationClient:

    def __init__(self, settings: Settings):
        self.url = settings.automation_api_url
        self.api_token = settings.automation_api_token
        self.timeout = settings.automation_timeout_seconds
        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    def submit_contact(self, name: str, email: str, phone: str) -> dict:
        payload = {
            "api_token": self.api_token,
            "contact_name": name,
            "contact_email": email,
            "contact_phone": phone,
        }
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Automation API call failed: %s", e)
            raise UpstreamError("Failed to submit form") from e
        try:
            return response.json()
        except ValueError:
            return {}


def normalize_phone(phone: str, prefix: str = "+91") -> str:
    """'9876543210' -> '+919876543210'; already prefixed numbers are kept."""
    phone = phone.strip()
    return phone if phone.startswith(prefix) else f"{prefix}{phone}"


def get_automation_client(request: Request) -> AutomationClient:
    return request.app.state.automation
