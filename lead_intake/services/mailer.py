"""
Outbound mail via Microsoft Graph.

App-only (client credentials) token, then one sendMail call per lead.
No retries, no token cache.
"""

import logging

import httpx

from lead_intake.config import Settings
from lead_intake.errors import CredentialError, DeliveryError
from lead_intake.schemas.email import ComposedEmail

logger = logging.getLogger(__name__)

GRAPH_SCOPE = "https://graph.microsoft.com/.default"


class GraphMailer:
    """
    Sends composed emails from a fixed sender mailbox.

    Setup Required:
    - Register an app in Microsoft Entra admin center
    - Grant the Mail.Send application permission (admin consent)
    - Set AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET, SENDER_EMAIL_ADDRESS
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        sender: str,
        login_base_url: str = "https://login.microsoftonline.com",
        graph_base_url: str = "https://graph.microsoft.com/v1.0",
    ):
        self.http = http
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.sender = sender
        self.login_base_url = login_base_url.rstrip("/")
        self.graph_base_url = graph_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "GraphMailer":
        return cls(
            http=http,
            tenant_id=settings.azure_tenant_id,
            client_id=settings.azure_client_id,
            client_secret=settings.azure_client_secret,
            sender=settings.sender_email_address,
            login_base_url=settings.login_base_url,
            graph_base_url=settings.graph_base_url,
        )

    @property
    def token_url(self) -> str:
        return f"{self.login_base_url}/{self.tenant_id}/oauth2/v2.0/token"

    async def acquire_token(self) -> str:
        """Exchange client id/secret for a Graph access token."""
        if not (self.tenant_id and self.client_id and self.client_secret):
            raise CredentialError(
                "Microsoft Graph credentials not configured. "
                "Set AZURE_TENANT_ID, AZURE_CLIENT_ID and AZURE_CLIENT_SECRET."
            )

        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": GRAPH_SCOPE,
            "grant_type": "client_credentials",
        }
        try:
            response = await self.http.post(
                self.token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            raise CredentialError(f"Token request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Token exchange failed: {response.status_code}")
            raise CredentialError(f"Token exchange failed ({response.status_code}): {response.text}")

        try:
            token_data = response.json()
        except ValueError as e:
            logger.error("Token endpoint returned a non-JSON body")
            raise CredentialError("Token response is not valid JSON") from e

        access_token = token_data.get("access_token") if isinstance(token_data, dict) else None
        if not access_token:
            raise CredentialError("Token response did not include an access_token")
        return access_token

    async def deliver(self, recipient: str, email: ComposedEmail) -> None:
        """Send one HTML email to `recipient`. Raises DeliveryError if Graph rejects it."""
        if not self.sender:
            raise DeliveryError("Sender mailbox not configured. Set SENDER_EMAIL_ADDRESS.")

        token = await self.acquire_token()
        message = {
            "message": {
                "subject": email.subject,
                "body": {"contentType": "HTML", "content": email.body},
                "toRecipients": [{"emailAddress": {"address": recipient}}],
            },
            "saveToSentItems": True,
        }
        try:
            response = await self.http.post(
                f"{self.graph_base_url}/users/{self.sender}/sendMail",
                json=message,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"sendMail request failed: {e}") from e

        # Graph answers 202 Accepted on success
        if response.status_code not in (200, 202):
            logger.error(f"sendMail rejected for {recipient}: {response.status_code}")
            raise DeliveryError(f"Mail provider rejected the send ({response.status_code}): {response.text}")
