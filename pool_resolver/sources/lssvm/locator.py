import asyncio
import logging
import time
from typing import List

from pool_resolver.sources.lssvm.evm.events import FactoryEventScanner
from pool_resolver.sources.lssvm.prober import PoolProber
from pool_resolver.utils.address import normalize_address, same_address
from pool_resolver.utils.errors import PoolResolverError
from pool_resolver.utils.types import PoolRecord

log = logging.getLogger(__name__)

DEFAULT_PROBE_CONCURRENCY = 8


class PoolLocator:
    """Finds the pools trading a given NFT collection.

    Candidates come from the factory's creation events; each one is resolved
    with the prober and kept if its nft() is the requested collection. A
    candidate that fails to resolve is logged and dropped, it never fails the
    discovery as a whole. Failures of the log query itself do propagate.
    """

    def __init__(
        self,
        scanner: FactoryEventScanner,
        prober: PoolProber,
        max_concurrency: int = DEFAULT_PROBE_CONCURRENCY,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.scanner = scanner
        self.prober = prober
        self.max_concurrency = max_concurrency

    async def locate(self, collection_address: str) -> List[PoolRecord]:
        collection = normalize_address(collection_address)
        start_ts = time.time()

        candidates = await self.scanner.scan()
        records = await self._probe_all(candidates)
        pools = [r for r in records if same_address(r.nft_address, collection)]

        log.info(
            f"[locate] {collection}: {len(pools)} pools out of {len(records)} resolved / "
            f"{len(candidates)} candidates in {time.time() - start_ts:.2f}s"
        )
        return pools

    async def _probe_all(self, candidates: List[str]) -> List[PoolRecord]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def probe(address: str) -> PoolRecord:
            async with semaphore:
                return await self.prober.resolve(address)

        results = await asyncio.gather(*(probe(a) for a in candidates), return_exceptions=True)

        records: List[PoolRecord] = []
        for address, result in zip(candidates, results):
            if isinstance(result, PoolRecord):
                records.append(result)
            elif isinstance(result, PoolResolverError):
                log.warning(f"Error fetching pool {address}, skipping: {result}")
            else:
                raise result
        return records
