# =====================================================================
# PRINT VENDOR CLIENT - services/print_vendor.py
# =====================================================================

import base64
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings
from app.schemas.journal import PdfExportOut, PrintJobRequest

logger = logging.getLogger(__name__)


def build_print_job_payload(
    request: PrintJobRequest,
    export: PdfExportOut,
    title: str,
    external_id: str,
    pod_package_id: str = settings.PRINT_POD_PACKAGE_ID,
    production_delay: int = settings.PRINT_PRODUCTION_DELAY,
) -> Dict[str, Any]:
    """Fixed-shape print job referencing the generated cover and interior PDFs."""
    address = request.shipping_address
    return {
        "contact_email": request.contact_email,
        "external_id": request.external_id or external_id,
        "line_items": [
            {
                "external_id": f"{external_id}-item-1",
                "printable_normalization": {
                    "cover": {"source_url": export.cover_url},
                    "interior": {"source_url": export.pdf_url},
                    "pod_package_id": pod_package_id,
                },
                "quantity": request.quantity,
                "title": title,
            }
        ],
        "production_delay": production_delay,
        "shipping_address": {
            "city": address.city,
            "country_code": address.country_code,
            "name": address.name,
            "phone_number": address.phone_number,
            "postcode": address.postcode,
            "state_code": address.state_code,
            "street1": address.street1,
        },
        "shipping_level": request.shipping_level,
    }


class PrintVendorClient:
    """
    Print-on-demand API client.

    Authenticates with the OAuth2 client-credentials grant, then posts
    print jobs with the bearer token.
    """

    def __init__(
        self,
        auth_url: str = settings.PRINT_AUTH_URL,
        job_url: str = settings.PRINT_JOB_URL,
        client_key: str = settings.PRINT_CLIENT_KEY,
        client_secret: str = settings.PRINT_CLIENT_SECRET,
        timeout: float = settings.PRINT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.auth_url = auth_url
        self.job_url = job_url
        self.client_key = client_key
        self.client_secret = client_secret
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def get_access_token(self) -> Optional[str]:
        """Exchange client credentials for an access token. None on failure."""
        credentials = base64.b64encode(
            f"{self.client_key}:{self.client_secret}".encode()
        ).decode()

        try:
            with self._client() as client:
                response = client.post(
                    self.auth_url,
                    data={"grant_type": "client_credentials"},
                    headers={"Authorization": f"Basic {credentials}"},
                )
        except httpx.HTTPError as exc:
            logger.error(f"PrintVendorClient.get_access_token: {exc}")
            return None

        if not response.is_success:
            logger.warning(
                f"PrintVendorClient.get_access_token: status {response.status_code}"
            )
            return None

        try:
            body = response.json()
        except ValueError:
            logger.warning("PrintVendorClient.get_access_token: non-JSON token response")
            return None
        if not isinstance(body, dict):
            logger.warning("PrintVendorClient.get_access_token: unexpected token response")
            return None

        return body.get("access_token")

    def create_print_job(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Submit a print job.

        Returns:
            The vendor's JSON response as-is, vendor errors included, or
            ``{"error": ...}`` when no token could be obtained
        """
        token = self.get_access_token()
        if not token:
            return {"error": "Failed to get access token"}

        with self._client() as client:
            response = client.post(
                self.job_url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Cache-Control": "no-cache",
                    "Content-Type": "application/json",
                },
            )

        try:
            return response.json()
        except ValueError:
            logger.warning(
                f"PrintVendorClient.create_print_job: non-JSON response ({response.status_code})"
            )
            return {"status_code": response.status_code, "body": response.text}


def get_print_client() -> PrintVendorClient:
    """Print vendor client dependency."""
    return PrintVendorClient()
