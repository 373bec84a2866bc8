from web3 import Web3

from pool_resolver.utils.errors import InvalidAddress


def normalize_address(value) -> str:
    """Validate an address and return its lower-cased form (used as cache key)."""
    if not isinstance(value, str) or not Web3.is_address(value):
        raise InvalidAddress(value)
    return value.lower()


def checksum_address(value) -> str:
    if not isinstance(value, str) or not Web3.is_address(value):
        raise InvalidAddress(value)
    return Web3.to_checksum_address(value)


def same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()
