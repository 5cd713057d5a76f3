"""Client for the Seal access control service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class SealError(Exception):
    """A Seal request could not be made or was refused."""


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".rstrip()


class SealClient:
    """Registers access policies and checks wallet access with Seal."""

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self._owns_client = http_client is None
        self._http = (
            http_client if http_client is not None else httpx.Client(timeout=DEFAULT_TIMEOUT)
        )

    def __enter__(self) -> "SealClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self._http.close()

    @property
    def _configured(self) -> bool:
        return bool(self.api_key) and bool(self.endpoint)

    def _post(self, url: str, body: Mapping[str, Any], what: str) -> httpx.Response:
        try:
            return self._http.post(
                url,
                json=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": "Bearer " + self.api_key,
                },
            )
        except httpx.HTTPError as exc:
            raise SealError(f"failed to send {what}request to Seal API: {exc}") from exc

    def register_policy(
        self,
        policy_name: str,
        content_cid: str,
        nft_criteria: Mapping[str, Any] | None,
    ) -> None:
        """Register a policy protecting ``content_cid``.

        Does nothing, with a warning, when the client is not configured.
        """
        if not self._configured:
            logger.warning(
                "Seal API Key or Endpoint not configured. Skipping policy registration."
            )
            return

        api_url = f"{self.endpoint}/v1/policies"
        body = {
            "name": policy_name,
            "contentCids": [content_cid],
            "accessGroup": dict(nft_criteria) if nft_criteria is not None else None,
        }
        logger.info(
            "Registering Seal policy '%s' for CID %s at %s", policy_name, content_cid, api_url
        )
        response = self._post(api_url, body, "")
        if response.status_code not in (200, 201):
            logger.error("Seal API error response body: %s", response.text)
            raise SealError(
                f"Seal API returned non-success status: {_status_line(response)}"
            )
        logger.info("Successfully registered Seal policy '%s' for CID %s", policy_name, content_cid)

    def verify_access(self, wallet_address: str, content_cid: str) -> bool:
        """Ask Seal whether ``wallet_address`` may access ``content_cid``."""
        if not self._configured:
            logger.warning(
                "Seal API Key or Endpoint not configured. Assuming access denied for verification."
            )
            raise SealError("Seal client not configured")

        api_url = f"{self.endpoint}/v1/verify"
        body = {"walletAddress": wallet_address, "contentCid": content_cid}
        logger.info(
            "Verifying Seal access for wallet %s on CID %s via %s",
            wallet_address,
            content_cid,
            api_url,
        )
        response = self._post(api_url, body, "verify ")
        if response.status_code != 200:
            logger.error("Seal verify API error response body: %s", response.text)
            raise SealError(
                f"Seal verify API returned non-success status: {_status_line(response)}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SealError(f"failed to decode Seal verify response: {exc}") from exc
        if payload is None:
            return False
        if not isinstance(payload, dict):
            raise SealError(
                "failed to decode Seal verify response: "
                f"expected an object, got {type(payload).__name__}"
            )
        has_access = payload.get("hasAccess")
        if has_access is None:
            return False
        if not isinstance(has_access, bool):
            raise SealError(
                "failed to decode Seal verify response: hasAccess is not a boolean"
            )
        return has_access