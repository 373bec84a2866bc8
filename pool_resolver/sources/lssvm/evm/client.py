"""
Chain access for the pool resolver.

``ChainReader`` is the whole capability surface the core depends on: bytecode
lookup, raw read-only calls and decoded event logs. ``Web3ChainReader`` is the
production implementation on top of ``web3.AsyncWeb3``; tests substitute an
in-memory reader with the same three coroutines.
"""

import logging
from typing import Dict, List, Protocol, Union

import aiohttp
import backoff
from eth_utils import encode_hex, event_abi_to_log_topic
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3._utils.events import get_event_data
from web3.exceptions import ContractLogicError, MismatchedABI

from pool_resolver.sources.lssvm.config.settings import RPC_MAX_TRIES, RPC_TIMEOUT_SECONDS
from pool_resolver.utils.errors import CallReverted, TransientError

log = logging.getLogger(__name__)

BlockId = Union[int, str]

# node error strings that mean "the call reverted" rather than "the node failed"
REVERT_MARKERS = ("revert", "invalid opcode")


class ChainReader(Protocol):
    async def get_bytecode(self, address: str) -> bytes: ...

    async def call(self, address: str, selector: bytes, args: bytes = b"") -> bytes: ...

    async def get_logs(
        self, contract_address: str, event_abi: dict, from_block: BlockId, to_block: BlockId
    ) -> List[dict]: ...


# Cache of AsyncWeb3 clients per RPC URL
_web3_clients: Dict[str, AsyncWeb3] = {}


def _create_web3_client(rpc_url: str, timeout: float = RPC_TIMEOUT_SECONDS) -> AsyncWeb3:
    log.info(f"Connecting to RPC: {rpc_url.split('/v2/')[0]}")
    return AsyncWeb3(
        AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)})
    )


def get_web3_client(rpc_url: str) -> AsyncWeb3:
    """Returns a cached or newly created AsyncWeb3 client for a given RPC URL."""
    if rpc_url not in _web3_clients:
        _web3_clients[rpc_url] = _create_web3_client(rpc_url)
    return _web3_clients[rpc_url]


def _looks_like_revert(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in REVERT_MARKERS)


class Web3ChainReader:
    def __init__(self, w3: AsyncWeb3):
        self.w3 = w3

    @classmethod
    def from_rpc_url(cls, rpc_url: str) -> "Web3ChainReader":
        return cls(get_web3_client(rpc_url))

    async def get_bytecode(self, address: str) -> bytes:
        try:
            code = await self.w3.eth.get_code(AsyncWeb3.to_checksum_address(address))
        except Exception as exc:
            raise TransientError(f"eth_getCode for {address} failed: {exc}") from exc
        return bytes(code)

    async def call(self, address: str, selector: bytes, args: bytes = b"") -> bytes:
        tx = {"to": AsyncWeb3.to_checksum_address(address), "data": encode_hex(selector + args)}
        try:
            result = await self.w3.eth.call(tx)
        except ContractLogicError as exc:
            raise CallReverted(str(exc)) from exc
        except Exception as exc:
            if _looks_like_revert(exc):
                raise CallReverted(str(exc)) from exc
            raise TransientError(f"eth_call to {address} failed: {exc}") from exc
        return bytes(result)

    @backoff.on_exception(backoff.expo, TransientError, max_tries=RPC_MAX_TRIES, jitter=None)
    async def get_logs(
        self, contract_address: str, event_abi: dict, from_block: BlockId, to_block: BlockId
    ) -> List[dict]:
        """Fetch and decode every `event_abi` log emitted by `contract_address` in the range."""
        topic = encode_hex(event_abi_to_log_topic(event_abi))
        try:
            logs = await self.w3.eth.get_logs({
                "address": AsyncWeb3.to_checksum_address(contract_address),
                "topics": [topic],
                "fromBlock": from_block,
                "toBlock": to_block,
            })
        except Exception as exc:
            raise TransientError(
                f"eth_getLogs {event_abi['name']} blocks {from_block}-{to_block} failed: {exc}"
            ) from exc

        codec = self.w3.codec
        decoded = []
        for entry in logs:
            try:
                decoded.append(get_event_data(codec, event_abi, entry))
            except MismatchedABI as exc:
                log.warning(f"Skipping undecodable {event_abi['name']} log: {exc}")
        log.debug(f"Fetched {len(decoded)} {event_abi['name']} logs from blocks {from_block}-{to_block}")
        return decoded
