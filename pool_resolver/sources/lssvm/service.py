import asyncio
import logging
from typing import Awaitable, List, Optional, TypeVar

from pool_resolver.sources.lssvm.config import settings
from pool_resolver.sources.lssvm.evm.client import ChainReader, Web3ChainReader
from pool_resolver.sources.lssvm.evm.events import FactoryEventScanner
from pool_resolver.sources.lssvm.locator import PoolLocator
from pool_resolver.sources.lssvm.prober import PoolProber
from pool_resolver.storage.cache import ResolutionCache
from pool_resolver.utils.address import normalize_address
from pool_resolver.utils.errors import Timeout, UnsupportedChain
from pool_resolver.utils.types import PoolRecord

log = logging.getLogger(__name__)

T = TypeVar("T")


class PoolService:
    """Cached, deadline-bounded front door for discovery and single-pool resolution.

    Owns its caches: one keyed by collection address (lists of pools) and one
    keyed by pool address (single records). Keys are lower-cased addresses.
    Only successful results are cached.
    """

    def __init__(
        self,
        locator: PoolLocator,
        prober: PoolProber,
        chain_id: int = settings.BASE_CHAIN_ID,
        collection_cache: Optional[ResolutionCache] = None,
        pool_cache: Optional[ResolutionCache] = None,
        timeout: Optional[float] = settings.REQUEST_TIMEOUT_SECONDS,
    ):
        self.locator = locator
        self.prober = prober
        self.chain_id = chain_id
        self.collection_cache = collection_cache if collection_cache is not None else ResolutionCache()
        self.pool_cache = pool_cache if pool_cache is not None else ResolutionCache()
        self.timeout = timeout

    async def _with_deadline(self, operation: str, coro: Awaitable[T]) -> T:
        if not self.timeout:
            return await coro
        try:
            return await asyncio.wait_for(coro, self.timeout)
        except asyncio.TimeoutError:
            log.error(f"{operation} timed out after {self.timeout}s")
            raise Timeout(operation, self.timeout)

    async def discover_pools(self, collection_address: str) -> List[PoolRecord]:
        key = normalize_address(collection_address)
        cached = self.collection_cache.get(key)
        if cached is not None:
            log.debug(f"Cache hit for collection {key}")
            return list(cached)

        pools = await self._with_deadline(f"Pool discovery for {key}", self.locator.locate(key))
        self.collection_cache.put(key, tuple(pools))
        return list(pools)

    def check_chain(self, chain_id) -> int:
        try:
            value = int(chain_id)
        except (TypeError, ValueError):
            raise UnsupportedChain(chain_id, self.chain_id)
        if value != self.chain_id:
            raise UnsupportedChain(chain_id, self.chain_id)
        return value

    async def resolve_pool(self, chain_id, pool_address: str) -> PoolRecord:
        self.check_chain(chain_id)
        key = normalize_address(pool_address)
        cached = self.pool_cache.get(key)
        if cached is not None:
            log.debug(f"Cache hit for pool {key}")
            return cached

        record = await self._with_deadline(f"Pool resolution for {key}", self.prober.resolve(key))
        self.pool_cache.put(key, record)
        return record


def build_pool_service(
    reader: Optional[ChainReader] = None,
    rpc_url: str = settings.BASE_RPC_URL,
) -> PoolService:
    """Wire a PoolService from settings. Each call builds independent caches."""
    reader = reader or Web3ChainReader.from_rpc_url(rpc_url)
    prober = PoolProber(reader)
    scanner = FactoryEventScanner(
        reader,
        settings.LSSVM_FACTORY_ADDRESS,
        start_block=settings.FACTORY_START_BLOCK,
        incremental=settings.INCREMENTAL_LOG_SCAN,
    )
    locator = PoolLocator(scanner, prober, max_concurrency=settings.PROBE_CONCURRENCY)

    def make_cache() -> ResolutionCache:
        return ResolutionCache(
            ttl_seconds=settings.POOL_CACHE_TTL_SECONDS,
            max_entries=settings.POOL_CACHE_MAX_ENTRIES,
        )

    log.info(
        f"Pool service for chain {settings.BASE_CHAIN_ID}, factory {settings.LSSVM_FACTORY_ADDRESS}, "
        f"cache ttl {settings.POOL_CACHE_TTL_SECONDS:g}s"
    )
    return PoolService(
        locator,
        prober,
        chain_id=settings.BASE_CHAIN_ID,
        collection_cache=make_cache(),
        pool_cache=make_cache(),
        timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )
