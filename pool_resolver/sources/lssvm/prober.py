import asyncio
import logging

from pool_resolver.sources.lssvm.config.abi import BONDING_CURVE, DELTA, FEE, NFT, POOL_TYPE, SPOT_PRICE
from pool_resolver.sources.lssvm.evm.calls import read_pool_function
from pool_resolver.sources.lssvm.evm.client import ChainReader
from pool_resolver.sources.lssvm.probes import classify_nft_standard, probe_settlement_token
from pool_resolver.utils.address import checksum_address
from pool_resolver.utils.errors import CallReverted, NotAContract, NotAPool, TransientError
from pool_resolver.utils.types import NftStandard, PoolRecord, PoolType

log = logging.getLogger(__name__)

PARAMETER_FUNCTIONS = (SPOT_PRICE, DELTA, FEE, NFT, BONDING_CURVE)


class PoolProber:
    """Resolves one address into a PoolRecord, or fails with a ResolutionError.

    Steps, in order:
      1. bytecode must exist                        -> NotAContract
      2. poolType() must answer                     -> NotAPool
      3. spotPrice/delta/fee/nft/bondingCurve read  -> NotAPool
      4. NFT standard probes (nftId, pairVariant)   -> never fails, UNKNOWN at worst
      5. token() probe                              -> never fails, zero address for ETH
    Transport failures at any step surface as TransientError.
    """

    def __init__(self, reader: ChainReader):
        self.reader = reader

    async def resolve(self, address: str) -> PoolRecord:
        pool = checksum_address(address)

        code = await self.reader.get_bytecode(pool)
        if not code:
            raise NotAContract(pool)

        try:
            raw_type = await read_pool_function(self.reader, pool, POOL_TYPE)
        except CallReverted as exc:
            raise NotAPool(pool, f"poolType() failed: {exc}") from exc
        try:
            pool_type = PoolType(raw_type)
        except ValueError:
            raise NotAPool(pool, f"unknown poolType {raw_type}")

        spot_price, delta, fee, nft, bonding_curve = await self._read_parameters(pool)
        nft_match = await classify_nft_standard(self.reader, pool)
        token = await probe_settlement_token(self.reader, pool)

        record = PoolRecord(
            address=pool,
            pool_type=pool_type,
            spot_price=spot_price,
            delta=delta,
            fee=fee,
            bonding_curve=bonding_curve,
            nft_address=nft,
            nft_standard=nft_match.standard,
            token_address=token,
            nft_id=nft_match.nft_id if nft_match.standard is NftStandard.ERC1155 else None,
        )
        log.debug(f"Resolved {pool}: {record.pool_type_label} {record.nft_standard.value} pool for {nft}")
        return record

    async def _read_parameters(self, pool: str) -> list:
        results = await asyncio.gather(
            *(read_pool_function(self.reader, pool, fn) for fn in PARAMETER_FUNCTIONS),
            return_exceptions=True,
        )
        # a node failure is reported as such even if another read also reverted
        for result in results:
            if isinstance(result, TransientError):
                raise result
        for fn, result in zip(PARAMETER_FUNCTIONS, results):
            if isinstance(result, CallReverted):
                raise NotAPool(pool, f"{fn.name}() failed after poolType() succeeded: {result}") from result
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results
