"""
Error taxonomy for pool discovery and resolution.

Discovery (``PoolLocator.locate``) fails with a ``DiscoveryError`` and
single-pool resolution (``PoolProber.resolve``) fails with a
``ResolutionError``. Errors that can happen on both paths inherit from both
so callers can catch whichever side they are on.
"""


class PoolResolverError(Exception):
    """Base exception for everything this package raises on purpose."""
    pass


class DiscoveryError(PoolResolverError):
    """Raised when enumerating the pools of a collection fails."""
    pass


class ResolutionError(PoolResolverError):
    """Raised when a single pool address cannot be resolved."""
    pass


class InvalidAddress(DiscoveryError, ResolutionError):
    """Input is not a well-formed address. Never retried."""

    def __init__(self, value):
        super().__init__(f"Invalid address: {value!r}")
        self.value = value


class NotAContract(ResolutionError):
    """No bytecode is deployed at the address."""

    def __init__(self, address: str):
        super().__init__(f"Address {address} is not a contract")
        self.address = address


class NotAPool(ResolutionError):
    """The contract does not satisfy the LSSVM pair read interface."""

    def __init__(self, address: str, reason: str = ""):
        message = f"Address {address} is not a valid LSSVM pool contract"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.address = address
        self.reason = reason


class TransientError(DiscoveryError, ResolutionError):
    """The chain endpoint itself failed. The caller may retry."""
    pass


class Timeout(DiscoveryError, ResolutionError):
    """The whole operation exceeded its deadline; partial work is discarded."""

    def __init__(self, operation: str, seconds: float):
        super().__init__(f"{operation} timed out after {seconds:g}s")
        self.operation = operation
        self.seconds = seconds


class UnsupportedChain(ResolutionError):
    def __init__(self, chain_id, supported: int):
        super().__init__(
            f"Unsupported chain: {chain_id}. Only chain {supported} is currently supported."
        )
        self.chain_id = chain_id
        self.supported = supported


class CallReverted(Exception):
    """
    A read call reverted, returned no data or returned data that does not
    decode. Raised by chain readers and call helpers; probes treat it as a
    classification signal, not as a failure.
    """
    pass
