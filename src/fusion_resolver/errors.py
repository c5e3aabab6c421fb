"""Error taxonomy for resolver transaction composition.

- ConfigurationError: missing chain address or registry entry. Fatal.
- ExternalApiError: aggregator HTTP or transport failure. Never retried here.
- InvalidParameterError: bad caller input, raised before any network call.
"""

from typing import Optional


class ResolverError(Exception):
    """Base class for all resolver errors."""
    pass


class ConfigurationError(ResolverError):
    """Raised when required configuration (chain address, token) is absent."""
    pass


class InvalidParameterError(ResolverError, ValueError):
    """Raised for out-of-range slippage, non-positive amounts or bad addresses."""
    pass


class ExternalApiError(ResolverError):
    """Raised when the aggregator API fails.

    Attributes:
        status_code: HTTP status, or None for transport failures
        body: Response body text (error description from the API)
        url: Requested endpoint, without query string
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(message)

    @property
    def is_transport_error(self) -> bool:
        """True when no HTTP response was received at all."""
        return self.status_code is None
