"""CoinGecko price provider: fetches current USD prices in one batched call."""

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from pricetracker.domain.errors import UpstreamFetchError
from pricetracker.domain.models import Quote
from pricetracker.infra.http.client import HttpClient

logger = logging.getLogger(__name__)

BASE_URL = "https://api.coingecko.com"

VS_CURRENCY = "usd"


def parse_simple_price(data: object) -> dict[str, Quote]:
    """Decode ``{<id>: {"usd": <number>}, ...}`` into typed quotes.

    Entries that are not a valid non-negative USD quote are dropped with a warning;
    callers treat a missing id as a zero price.
    """
    if not isinstance(data, dict):
        raise UpstreamFetchError(details=f"Unexpected response shape: {type(data).__name__}")

    quotes: dict[str, Quote] = {}
    for external_id, entry in data.items():
        try:
            quotes[external_id] = Quote.model_validate(entry)
        except PydanticValidationError:
            logger.warning("Ignoring malformed CoinGecko quote for %s: %r", external_id, entry)
    return quotes


class CoinGeckoProvider:
    """Fetch current USD prices from the CoinGecko ``/simple/price`` endpoint. No retries."""

    def __init__(self, http_client: HttpClient, api_key: str = "", base_url: str = BASE_URL) -> None:
        self._http = http_client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def build_params(self, external_ids: list[str]) -> dict[str, str]:
        params: dict[str, str] = {
            "ids": ",".join(external_ids),
            "vs_currencies": VS_CURRENCY,
        }
        if self._api_key:
            params["x_cg_demo_api_key"] = self._api_key
        return params

    async def get_prices(self, external_ids: list[str]) -> dict[str, Quote]:
        """Return quotes keyed by CoinGecko id.

        Raises UpstreamFetchError on transport failure, a non-2xx status or an
        undecodable body.
        """
        url = f"{self._base_url}/api/v3/simple/price"
        params = self.build_params(external_ids)

        try:
            response = await self._http.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning("CoinGecko request failed: %s", e)
            raise UpstreamFetchError(details=str(e)) from e

        if not response.is_success:
            logger.warning("CoinGecko returned %d for ids=%s", response.status_code, params["ids"])
            raise UpstreamFetchError(details=f"CoinGecko returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFetchError(details="CoinGecko returned invalid JSON") from e

        return parse_simple_price(data)
