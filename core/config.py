"""
Configuration dataclasses for the background-removal transports and route.

These immutable config objects decouple parameter passing from constructor
signatures, making it easy to define standard configurations and reuse
them across the API and tests.
"""

from dataclasses import dataclass

# remove.bg output sizes accepted by the ``size`` form field.
VALID_OUTPUT_SIZES: frozenset[str] = frozenset(
    {
        "auto",
        "preview",
        "small",
        "regular",
        "medium",
        "hd",
        "full",
        "4k",
    }
)


@dataclass(frozen=True)
class BackgroundRemovalConfig:
    """
    Configuration for calls to the background-removal API.

    Attributes:
        endpoint: URL of the remove.bg-compatible API.
        timeout_seconds: Transport timeout. The only bound on how long a
            removal can stay in PROCESSING.
        output_size: Value of the ``size`` form field. Defaults to "auto".
        failure_threshold: Consecutive failures before the circuit opens.
        reset_timeout_seconds: How long the circuit stays open before probing.

    Example:
        >>> config = BackgroundRemovalConfig(timeout_seconds=10.0)
        >>> transport = RemoveBgApiTransport(api_key=key, config=config)
    """

    endpoint: str = "https://api.remove.bg/v1.0/removebg"
    timeout_seconds: float = 30.0
    output_size: str = "auto"
    failure_threshold: int = 3
    reset_timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.endpoint.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got {self.endpoint!r}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        if self.output_size not in VALID_OUTPUT_SIZES:
            raise ValueError(
                f"Unknown output_size {self.output_size!r}, "
                f"valid options: {sorted(VALID_OUTPUT_SIZES)}"
            )
        if self.failure_threshold <= 0:
            raise ValueError(f"failure_threshold must be positive, got {self.failure_threshold}")
        if self.reset_timeout_seconds < 0:
            raise ValueError(
                f"reset_timeout_seconds must be non-negative, got {self.reset_timeout_seconds}"
            )


DEFAULT_REMOVAL_CONFIG = BackgroundRemovalConfig()
"""Default configuration: remove.bg v1.0, 30s timeout, size=auto."""


@dataclass(frozen=True)
class RemovalQuotaConfig:
    """
    Per-client budget for the ``POST /remove-bg`` service route.

    Every removal there spends remove.bg credits, so one client gets at
    most ``max_removals`` successful admissions per sliding window.

    Attributes:
        max_removals: Removals admitted per client within the window.
        window_seconds: Length of the sliding window.
        key_prefix: Redis key prefix for the per-client sorted sets.
    """

    max_removals: int = 10
    window_seconds: int = 60
    key_prefix: str = "diary:remove-bg:"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_removals <= 0:
            raise ValueError(f"max_removals must be positive, got {self.max_removals}")
        if self.window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {self.window_seconds}")
        if not self.key_prefix:
            raise ValueError("key_prefix must not be empty")


DEFAULT_QUOTA_CONFIG = RemovalQuotaConfig()
"""Default budget: 10 removals per client per minute."""
