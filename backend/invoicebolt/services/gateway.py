"""
Razorpay Gateway — order creation over the Orders REST API.
The secret key is only ever sent to Razorpay as basic-auth credentials.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from invoicebolt.config import Settings
from invoicebolt.errors import ConfigurationError, GatewayError

logger = logging.getLogger("invoicebolt.gateway")


@dataclass(frozen=True)
class GatewayOrder:
    id: str
    amount: int      # minor units, as echoed by the gateway
    currency: str


class RazorpayGateway:
    """Thin client for ``POST /orders``."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self.settings = settings
        self._client = client

    def _http(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.settings.RAZORPAY_API_BASE,
                timeout=self.settings.GATEWAY_TIMEOUT_SECONDS,
            )
        return self._client

    def create_order(
        self,
        amount_minor: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> GatewayOrder:
        """Create a gateway order.

        Args:
            amount_minor: Amount in the currency's smallest unit (paise).
            currency: ISO currency code, e.g. "INR".
            receipt: Our merchant transaction id.
            notes: Free-form key/value metadata stored with the order.

        Raises:
            ConfigurationError: key id or secret missing.
            GatewayError: network failure or a non-2xx answer.
        """
        if not self.settings.payments_enabled:
            raise ConfigurationError("Missing Razorpay keys")

        payload = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        auth = (self.settings.RAZORPAY_KEY_ID, self.settings.RAZORPAY_KEY_SECRET)

        try:
            response = self._http().post("/orders", json=payload, auth=auth)
        except httpx.HTTPError as e:
            logger.error(f"Razorpay order request failed for {receipt}: {e}")
            raise GatewayError("Payment gateway unavailable") from e

        if response.status_code not in (200, 201):
            description = "Payment gateway rejected the order"
            try:
                description = response.json()["error"]["description"] or description
            except (ValueError, KeyError, TypeError):
                pass
            logger.error(f"Razorpay order creation failed for {receipt}: {response.status_code} {description}")
            raise GatewayError(description)

        try:
            data = response.json()
            order = GatewayOrder(id=data["id"], amount=int(data["amount"]), currency=data["currency"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Unexpected Razorpay order payload for {receipt}: {e}")
            raise GatewayError("Unexpected payment gateway response") from e

        logger.info(f"Razorpay order {order.id} created for {receipt}")
        return order

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
