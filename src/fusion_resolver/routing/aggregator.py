"""DEX aggregator HTTP client (1inch-compatible API, e.g. 3route on Etherlink).

Endpoints used:
- GET <base>/quote        price quote
- GET <base>/swap_params  router address + opaque calldata for a swap
- GET <base>/tokens       supported token list

The client does no caching, retries or circuit
breaking. Every failure surfaces as ExternalApiError.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

import httpx

from fusion_resolver.config import get_settings
from fusion_resolver.errors import ExternalApiError, InvalidParameterError
from fusion_resolver.routing.base import ConversionBackend, Quote, SwapParameters
from fusion_resolver.utils.validation import (
    checksum_address,
    validate_amount,
    validate_slippage,
)

logger = logging.getLogger(__name__)


class AggregatorClient(ConversionBackend):
    """Typed wrapper around the aggregator quote/swap_params endpoints.

    Pass an httpx.AsyncClient to reuse a connection pool (or to inject a
    MockTransport in tests); otherwise a short-lived client is opened per
    request with the configured timeout.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize aggregator client.

        Args:
            base_url: API base URL including version/chain path
            api_key: API key appended as the apikey query parameter
            timeout: Request timeout in seconds (ignored with client)
            client: Shared httpx client owned by the caller
        """
        settings = get_settings()
        self.base_url = (base_url or settings.aggregator_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.aggregator_api_key
        self.timeout = timeout if timeout is not None else settings.aggregator_timeout
        self._client = client

    @property
    def name(self) -> str:
        return f"aggregator ({self.base_url})"

    def _get_headers(self) -> dict:
        return {"Accept": "application/json"}

    def _with_api_key(self, params: dict) -> dict:
        if self.api_key:
            return {**params, "apikey": self.api_key}
        return params

    async def _get(self, path: str, params: dict, context: str) -> Any:
        """GET a JSON document, mapping every failure to ExternalApiError."""
        url = f"{self.base_url}/{path}"
        query = self._with_api_key(params)
        logger.debug(f"Aggregator request: GET {url} {context}")

        try:
            if self._client is not None:
                response = await self._client.get(url, params=query, headers=self._get_headers())
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=query, headers=self._get_headers())
        except httpx.RequestError as e:
            logger.error(f"Aggregator {path} transport error ({context}): {type(e).__name__}: {e}")
            raise ExternalApiError(
                f"{path} request failed ({context}): {type(e).__name__}: {e}",
                url=url,
            ) from e

        if not response.is_success:
            body = response.text
            logger.warning(f"Aggregator {path} error: {response.status_code} - {body}")
            raise ExternalApiError(
                f"{path} API error: {response.status_code} {response.reason_phrase} - {body} ({context})",
                status_code=response.status_code,
                body=body,
                url=url,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ExternalApiError(
                f"{path} returned invalid JSON ({context})",
                status_code=response.status_code,
                body=response.text,
                url=url,
            ) from e

    async def fetch_quote(
        self,
        source_token: str,
        destination_token: str,
        amount: int,
    ) -> Quote:
        """Get a price quote for selling amount of source_token."""
        src = checksum_address(source_token, "source_token")
        dst = checksum_address(destination_token, "destination_token")
        validate_amount(amount)
        context = f"src={src} dst={dst} amount={amount}"

        data = await self._get(
            "quote",
            {
                "src": src,
                "dst": dst,
                "amount": str(amount),
                "includeTokensInfo": "true",
                "includeProtocols": "true",
                "includeGas": "true",
            },
            context,
        )
        _require_object(data, "quote", context)

        destination_amount = _read_int(data, ("dstAmount", "toAmount"), context, "quote")
        source_amount = _read_int(data, ("srcAmount", "fromAmount"), context, "quote", default=amount)
        estimated_gas = _read_int(data, ("estimatedGas", "gas"), context, "quote", default=0)

        quote = Quote(
            source_token=src,
            destination_token=dst,
            source_amount=source_amount,
            destination_amount=destination_amount,
            estimated_gas=estimated_gas,
            routing_metadata={
                "protocols": data.get("protocols", []),
                "from_token": data.get("fromToken"),
                "to_token": data.get("toToken"),
            },
        )
        logger.info(
            f"Quote {src} -> {dst}: {quote.source_amount} -> {quote.destination_amount} "
            f"(gas: {quote.estimated_gas})"
        )
        return quote

    async def fetch_swap_parameters(
        self,
        source_token: str,
        destination_token: str,
        amount: int,
        from_address: str,
        slippage_bps: int,
        is_exact_output: bool = False,
    ) -> SwapParameters:
        """Get router address and opaque calldata for a swap."""
        src = checksum_address(source_token, "source_token")
        dst = checksum_address(destination_token, "destination_token")
        sender = checksum_address(from_address, "from_address")
        validate_amount(amount)
        validate_slippage(slippage_bps)
        context = f"src={src} dst={dst} amount={amount} from={sender}"

        params = {
            "src": src,
            "dst": dst,
            "amount": str(amount),
            "from": sender,
            # API takes percent, e.g. 200 bps -> "2"
            "slippage": str(Decimal(slippage_bps) / Decimal(100)),
            "disableEstimate": "true",
            "allowPartialFill": "false",
        }
        if is_exact_output:
            params["isExactOutput"] = "true"

        data = await self._get("swap_params", params, context)
        _require_object(data, "swap_params", context)

        tx = data.get("tx") or {}
        if not isinstance(tx, dict):
            raise ExternalApiError(
                f"swap_params field tx is not an object ({context})", body=str(data)[:500]
            )
        # 3route nests the router-level fields (amountIn, ...) under params
        nested = data.get("params") if isinstance(data.get("params"), dict) else {}

        calldata = data.get("params")
        if not isinstance(calldata, str):
            calldata = tx.get("data")
        router = data.get("router") or tx.get("to")
        if not isinstance(calldata, str) or not router:
            raise ExternalApiError(
                f"swap_params response missing router or calldata ({context})",
                body=str(data)[:500],
            )
        try:
            router_address = checksum_address(router, "router")
        except InvalidParameterError as e:
            raise ExternalApiError(f"swap_params returned {e} ({context})") from e

        expected_input = _read_int(nested, ("amountIn",), context, "swap_params", default=0)
        if not expected_input:
            expected_input = _read_int(
                data, ("srcAmount", "amountIn", "fromAmount"), context, "swap_params", default=amount
            )
        gas_source = data if data.get("gas") not in (None, "") else tx
        gas_estimate = _read_int(gas_source, ("gas",), context, "swap_params", default=0)

        swap = SwapParameters(
            router_address=router_address,
            encoded_calldata=calldata,
            expected_input_amount=expected_input,
            expected_output_amount=_read_int(
                data, ("dstAmount", "toAmount"), context, "swap_params"
            ),
            gas_estimate=gas_estimate,
        )
        logger.info(
            f"Swap params {src} -> {dst}: in={swap.expected_input_amount} "
            f"out={swap.expected_output_amount} router={swap.router_address}"
        )
        return swap

    async def get_supported_tokens(self) -> list[dict]:
        """List tokens the aggregator can route."""
        data = await self._get("tokens", {}, "tokens")
        tokens = data.get("tokens", []) if isinstance(data, dict) else data
        if isinstance(tokens, dict):
            return list(tokens.values())
        return list(tokens)

    async def is_pair_supported(
        self,
        source_token: str,
        destination_token: str,
        amount: int = 10**15,
    ) -> bool:
        """Probe a pair with a small quote; False when the aggregator refuses it."""
        try:
            await self.fetch_quote(source_token, destination_token, amount)
            return True
        except ExternalApiError as e:
            logger.debug(f"Pair {source_token} -> {destination_token} unsupported: {e}")
            return False


def _require_object(data: Any, endpoint: str, context: str) -> None:
    if not isinstance(data, dict):
        raise ExternalApiError(
            f"{endpoint} returned unexpected payload type {type(data).__name__} ({context})"
        )


def _read_int(
    data: dict,
    keys: tuple[str, ...],
    context: str,
    endpoint: str,
    default: Optional[int] = None,
) -> int:
    """Read the first present integer field among keys."""
    for key in keys:
        value = data.get(key)
        if value is None or value == "":
            continue
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ExternalApiError(
                f"{endpoint} field {key} is not an integer: {value!r} ({context})"
            ) from e
    if default is not None:
        return default
    raise ExternalApiError(f"{endpoint} response missing {'/'.join(keys)} ({context})")


def create_aggregator_client(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> AggregatorClient:
    """Create an aggregator client from settings."""
    return AggregatorClient(base_url=base_url, api_key=api_key, client=client)
