from dotenv import load_dotenv
import asyncio
import pathlib

import pytest
from eth_abi import encode

from pool_resolver.sources.lssvm.config.abi import POOL_FUNCTIONS
from pool_resolver.sources.lssvm.evm.calls import selector_for
from pool_resolver.sources.lssvm.evm.events import FactoryEventScanner
from pool_resolver.sources.lssvm.locator import PoolLocator
from pool_resolver.sources.lssvm.prober import PoolProber
from pool_resolver.sources.lssvm.service import PoolService
from pool_resolver.storage.cache import ResolutionCache
from pool_resolver.utils.errors import CallReverted

# Automatically load .env from project root
load_dotenv(dotenv_path=pathlib.Path(__file__).parent.parent.parent / ".env")

COLLECTION = "0x" + "aa" * 20
OTHER_COLLECTION = "0x" + "dd" * 20
POOL_B = "0x" + "bb" * 20
POOL_C = "0x" + "cc" * 20
POOL_D = "0x" + "d1" * 20
CURVE = "0x" + "ee" * 20
ERC20_TOKEN = "0x" + "12" * 20
FACTORY = "0x" + "fa" * 20
CHAIN_ID = 8453

_FUNCTIONS_BY_SELECTOR = {selector_for(fn): fn for fn in POOL_FUNCTIONS}
_FUNCTIONS_BY_NAME = {fn.name: fn for fn in POOL_FUNCTIONS}


class FakeChainReader:
    """In-memory chain: bytecode, per-function return data and factory events.

    A function with no configured return value reverts.
    """

    def __init__(self) -> None:
        self.code: dict[str, bytes] = {}
        self.returns: dict[tuple[str, str], object] = {}
        self.events: dict[str, list[dict]] = {"NewERC721Pair": [], "NewERC1155Pair": []}
        self.calls: list[tuple[str, str]] = []
        self.bytecode_requests: list[str] = []
        self.log_queries: list[tuple[str, object, object]] = []
        self.log_error: Exception | None = None
        self.delay = 0.0

    # ---- setup helpers -------------------------------------------------
    def add_pool(
        self,
        address: str,
        nft: str,
        pool_type: int = 2,
        spot_price: int = 10**18,
        delta: int = 5 * 10**16,
        fee: int = 0,
        bonding_curve: str = CURVE,
        nft_id: int | None = None,
        pair_variant: int | None = None,
        token: str | None = None,
    ) -> None:
        self.code[address.lower()] = b"\x60\x80\x60\x40"
        self.set_return(address, "poolType", pool_type)
        self.set_return(address, "spotPrice", spot_price)
        self.set_return(address, "delta", delta)
        self.set_return(address, "fee", fee)
        self.set_return(address, "nft", nft)
        self.set_return(address, "bondingCurve", bonding_curve)
        if nft_id is not None:
            self.set_return(address, "nftId", nft_id)
        if pair_variant is not None:
            self.set_return(address, "pairVariant", pair_variant)
        if token is not None:
            self.set_return(address, "token", token)

    def set_return(self, address: str, name: str, value) -> None:
        fn = _FUNCTIONS_BY_NAME[name]
        self.returns[(address.lower(), name)] = encode([fn.output_type], [value])

    def set_raw(self, address: str, name: str, raw) -> None:
        """Raw bytes to return, or an exception instance to raise."""
        self.returns[(address.lower(), name)] = raw

    def add_event(self, kind: str, pool_address: str, block: int) -> None:
        self.events[kind].append({"args": {"poolAddress": pool_address}, "blockNumber": block})

    def calls_to(self, address: str) -> list[str]:
        return [name for addr, name in self.calls if addr == address.lower()]

    # ---- ChainReader ---------------------------------------------------
    async def get_bytecode(self, address: str) -> bytes:
        self.bytecode_requests.append(address.lower())
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.code.get(address.lower(), b"")

    async def call(self, address: str, selector: bytes, args: bytes = b"") -> bytes:
        fn = _FUNCTIONS_BY_SELECTOR[selector]
        self.calls.append((address.lower(), fn.name))
        if self.delay:
            await asyncio.sleep(self.delay)
        result = self.returns.get((address.lower(), fn.name))
        if result is None:
            raise CallReverted(f"{fn.name}() reverted")
        if isinstance(result, Exception):
            raise result
        return result

    async def get_logs(self, contract_address, event_abi, from_block, to_block):
        self.log_queries.append((event_abi["name"], from_block, to_block))
        if self.log_error is not None:
            raise self.log_error
        start = from_block if isinstance(from_block, int) else 0
        return [e for e in self.events[event_abi["name"]] if e["blockNumber"] >= start]


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def reader() -> FakeChainReader:
    return FakeChainReader()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_service(clock):
    def _make(reader, timeout=5.0, ttl=300, incremental=True, max_concurrency=4):
        prober = PoolProber(reader)
        scanner = FactoryEventScanner(reader, FACTORY, start_block=0, incremental=incremental)
        locator = PoolLocator(scanner, prober, max_concurrency=max_concurrency)
        return PoolService(
            locator,
            prober,
            chain_id=CHAIN_ID,
            collection_cache=ResolutionCache(ttl_seconds=ttl, clock=clock),
            pool_cache=ResolutionCache(ttl_seconds=ttl, clock=clock),
            timeout=timeout,
        )
    return _make
