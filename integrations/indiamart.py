"""
IndiaMART catalogue integration.

Maps a NormalizedProduct onto the seller API's product/add payload and
sends it, or returns it untouched in simulate mode.
"""

import json
from typing import Any, Optional

import httpx
import structlog

from config import settings as app_settings, DEFAULT_INDIAMART_URL
from exceptions import (
    MissingCredentialsError,
    MissingFieldsError,
    RemoteRejectedError,
    RemoteUnreachableError,
)
from models.agent_settings import AgentMode, AgentSettings
from models.catalog import SubmitResult, SubmitStatus
from models.product import NormalizedProduct, DEFAULT_CURRENCY

logger = structlog.get_logger(__name__)


# Fields the catalogue rejects when empty (wire name of the draft field)
REQUIRED_FIELDS: dict[str, str] = {
    "title": "title",
    "description": "description",
    "short_description": "shortDescription",
}

MAX_IMAGES = 3
AUTH_HEADER = "authtoken"


def missing_fields(product: NormalizedProduct) -> list[str]:
    """Required fields that are empty, by their console name."""
    return [
        wire_name
        for attribute, wire_name in REQUIRED_FIELDS.items()
        if not getattr(product, attribute)
    ]


def normalize_settings(agent_settings: AgentSettings) -> AgentSettings:
    """Trimmed copy of the settings; mode defaults to simulate."""
    return AgentSettings(
        api_key=(agent_settings.api_key or "").strip(),
        seller_id=(agent_settings.seller_id or "").strip(),
        base_url=(agent_settings.base_url or "").strip(),
        mode=agent_settings.mode or AgentMode.SIMULATE,
        auto_start=agent_settings.auto_start,
    )


def build_payload(product: NormalizedProduct, agent_settings: AgentSettings) -> dict[str, str]:
    """
    Build the product/add request body.

    Only the first three image URLs are sent. Features are pipe-joined,
    keywords comma-joined. Every value is a string.

    Args:
        product: Normalized product
        agent_settings: Settings snapshot (for SELLER_ID)

    Returns:
        Dict keyed by IndiaMART field names
    """
    images = (list(product.image_urls[:MAX_IMAGES]) + ["", "", ""])[:MAX_IMAGES]

    return {
        "PRODUCT_NAME": product.title,
        "SELLER_ID": agent_settings.seller_id or "",
        "CURRENCY_TYPE": product.currency or DEFAULT_CURRENCY,
        "YOUR_PRICE": product.price,
        "UNIT": product.unit,
        "MIN_ORDER_QUANTITY": product.min_order_qty,
        "PACKAGE_DETAILS": product.packaging,
        "SUPPLY_ABILITY": product.stock,
        "DELIVERY_TIME": product.lead_time,
        "SHORT_DESC": product.short_description,
        "LONG_DESC": product.description,
        "KEY_FEATURES": "|".join(product.features),
        "KEYWORDS": ",".join(product.keywords),
        "IMAGE1": images[0],
        "IMAGE2": images[1],
        "IMAGE3": images[2],
        "CATEGORY": product.category,
    }


def decode_body(response: httpx.Response) -> Any:
    """JSON when the server says so, raw text otherwise."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except json.JSONDecodeError:
            logger.warning("indiamart_invalid_json", status=response.status_code)
    return response.text


class IndiaMartGateway:
    """
    Upload gateway for the IndiaMART seller catalogue.

    Args:
        transport: Optional httpx transport (tests pass httpx.MockTransport)
        timeout_sec: Transport timeout for one upload
        default_url: Endpoint used when the settings carry no base URL
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_sec: Optional[float] = None,
        default_url: Optional[str] = None,
    ):
        self.transport = transport
        self.timeout_sec = timeout_sec or app_settings.upload_timeout_seconds
        self.default_url = default_url or app_settings.indiamart_base_url or DEFAULT_INDIAMART_URL
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                transport=self.transport,
                timeout=self.timeout_sec,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def submit(self, product: NormalizedProduct, agent_settings: AgentSettings) -> SubmitResult:
        """
        Upload (or simulate uploading) one product.

        Args:
            product: Normalized product
            agent_settings: Settings snapshot for this upload

        Returns:
            SubmitResult (simulated with payload, or success with response)

        Raises:
            MissingFieldsError: title, description or shortDescription empty
            MissingCredentialsError: live mode without API key / seller ID
            RemoteRejectedError: IndiaMART answered non-2xx
            RemoteUnreachableError: Network failure or timeout
        """
        missing = missing_fields(product)
        if missing:
            raise MissingFieldsError(missing)

        agent_settings = normalize_settings(agent_settings)
        payload = build_payload(product, agent_settings)

        if agent_settings.mode == AgentMode.SIMULATE:
            logger.info("indiamart_simulated", title=product.title)
            return SubmitResult(status=SubmitStatus.SIMULATED, payload=payload)

        if not agent_settings.api_key:
            raise MissingCredentialsError("api_key")
        if not agent_settings.seller_id:
            raise MissingCredentialsError("seller_id")

        endpoint = agent_settings.base_url or self.default_url

        try:
            logger.info("indiamart_upload_started", title=product.title, endpoint=endpoint)
            response = await self._get_client().post(
                endpoint,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    AUTH_HEADER: agent_settings.api_key,
                },
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            message = str(e) or type(e).__name__
            logger.error("indiamart_unreachable", endpoint=endpoint, error=message)
            raise RemoteUnreachableError(message)

        body = decode_body(response)

        if not response.is_success:
            logger.error(
                "indiamart_rejected",
                status=response.status_code,
                response=str(body)[:500],
            )
            raise RemoteRejectedError(response.status_code, body)

        logger.info("indiamart_upload_succeeded", title=product.title, status=response.status_code)
        return SubmitResult(status=SubmitStatus.SUCCESS, response=body)


# Singleton instance for convenience
_indiamart_gateway: Optional[IndiaMartGateway] = None


def get_indiamart_gateway() -> IndiaMartGateway:
    """Get or create IndiaMartGateway instance."""
    global _indiamart_gateway
    if _indiamart_gateway is None:
        _indiamart_gateway = IndiaMartGateway()
    return _indiamart_gateway
