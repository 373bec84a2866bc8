from typing import Any

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3

from pool_resolver.sources.lssvm.config.abi import PoolFunction
from pool_resolver.sources.lssvm.evm.client import ChainReader
from pool_resolver.utils.errors import CallReverted


def selector_for(fn: PoolFunction) -> bytes:
    return function_signature_to_4byte_selector(fn.signature)


async def read_pool_function(reader: ChainReader, address: str, fn: PoolFunction) -> Any:
    """
    Call a zero-argument view function and decode its single return value.

    Empty return data (an EOA, or a contract without the function and without
    a fallback) and undecodable data both raise CallReverted, the same as a
    real revert. Addresses come back checksummed.
    """
    raw = await reader.call(address, selector_for(fn))
    if not raw:
        raise CallReverted(f"{fn.name}() at {address} returned no data")
    try:
        (value,) = decode([fn.output_type], raw)
    except (DecodingError, OverflowError, ValueError) as exc:
        raise CallReverted(f"{fn.name}() at {address} returned malformed data: {exc}") from exc
    if fn.output_type == "address":
        return Web3.to_checksum_address(value)
    return value
