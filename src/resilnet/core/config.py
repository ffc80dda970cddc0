r"""Configuration dataclass and defaults for ResilientClient.

This module provides configuration constants and an immutable
dataclass-based configuration object for the ResilientClient. A
configuration is set once at construction time; a different configuration
is obtained with ``merge``, which builds a new object.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "DEFAULT_WAIT_MAX",
    "DEFAULT_WAIT_MIN",
    "DRAIN_BODY_LIMIT",
    "ClientConfig",
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from resilnet.core.validation import validate_retry_params

if TYPE_CHECKING:
    from collections.abc import Callable

    from resilnet.callbacks import FailureInfo, RequestInfo, ResponseInfo, RetryInfo
    from resilnet.retry.policy import RetryPolicy


# Default overall timeout in seconds for one call, enforced by the transport
DEFAULT_TIMEOUT = 30.0

# Default maximum number of extra attempts
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 4

# Default bounds of the backoff schedule, in seconds
# Wait time = wait_min * (2 ** attempt), capped at wait_max
# With 2.0 and 8.0: waits are 2s, 4s, 8s, 8s
DEFAULT_WAIT_MIN = 2.0
DEFAULT_WAIT_MAX = 8.0

# Maximum number of bytes read from a discarded response before closing it
DRAIN_BODY_LIMIT = 4096


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for ResilientClient retry behavior.

    Note:
        The timeout is NOT included in this config as it is used
        directly by httpx.Client, not by the retry logic.

    Args:
        max_retries: Maximum number of extra attempts for failed requests.
            Must be >= 0.
        wait_min: Backoff delay before the first retry, in seconds.
            Must be >= 0.
        wait_max: Upper bound of the backoff delay, in seconds.
            Must be >= wait_min.
        on_request: Optional callback called before each request attempt.
        on_retry: Optional callback called before each backoff wait.
        on_success: Optional callback called when a response is returned.
        on_failure: Optional callback called when the request fails for good.

    Example:
        ```pycon
        >>> from resilnet.core.config import ClientConfig
        >>> config = ClientConfig()
        >>> config.max_retries, config.wait_min, config.wait_max
        (4, 2.0, 8.0)
        >>> merged = config.merge(max_retries=10)
        >>> merged.max_retries
        10
        >>> config.max_retries
        4

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    wait_min: float = DEFAULT_WAIT_MIN
    wait_max: float = DEFAULT_WAIT_MAX
    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[ResponseInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_retry_params(
            max_retries=self.max_retries,
            wait_min=self.wait_min,
            wait_max=self.wait_max,
        )

    def merge(self, **overrides: Any) -> ClientConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied; the current instance is
        left unchanged.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ClientConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_policy(self) -> RetryPolicy:
        """Build the retry policy described by this configuration.

        Returns:
            The RetryPolicy with the same attempt budget and wait bounds.
        """
        from resilnet.retry.policy import RetryPolicy  # noqa: PLC0415

        return RetryPolicy(
            max_retries=self.max_retries, wait_min=self.wait_min, wait_max=self.wait_max
        )
