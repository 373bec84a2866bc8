"""
Probe strategies for classifying an LSSVM pair.

A probe is a speculative read whose revert is a classification signal, not a
failure. Each NFT-standard strategy returns ``Matched`` or ``NO_MATCH``; the
prober walks ``NFT_STANDARD_PROBES`` in order and the first match wins, since
some pairs answer more than one of these calls.

Only ``CallReverted`` is absorbed here. Transport failures (``TransientError``)
propagate to the caller untouched.
"""

import logging
from typing import Awaitable, Callable, NamedTuple, Optional, Tuple, Union

from pool_resolver.sources.lssvm.config.abi import NFT_ID, PAIR_VARIANT, TOKEN
from pool_resolver.sources.lssvm.evm.calls import read_pool_function
from pool_resolver.sources.lssvm.evm.client import ChainReader
from pool_resolver.utils.constants import ERC1155_PAIR_VARIANTS, PAIR_VARIANTS, ZERO_ADDRESS
from pool_resolver.utils.errors import CallReverted
from pool_resolver.utils.types import NftStandard

log = logging.getLogger(__name__)


class Matched(NamedTuple):
    standard: NftStandard
    nft_id: Optional[int] = None


class NoMatch(NamedTuple):
    reason: str = ""


NO_MATCH = NoMatch()

ProbeResult = Union[Matched, NoMatch]
Probe = Callable[[ChainReader, str], Awaitable[ProbeResult]]


async def probe_nft_id(reader: ChainReader, address: str) -> ProbeResult:
    # only ERC1155 pairs expose nftId(); ERC721 pairs revert here
    try:
        nft_id = await read_pool_function(reader, address, NFT_ID)
    except CallReverted as exc:
        log.debug(f"nftId probe missed for {address}: {exc}")
        return NoMatch("nftId reverted")
    return Matched(NftStandard.ERC1155, nft_id)


async def probe_pair_variant(reader: ChainReader, address: str) -> ProbeResult:
    try:
        variant = await read_pool_function(reader, address, PAIR_VARIANT)
    except CallReverted as exc:
        log.debug(f"pairVariant probe missed for {address}: {exc}")
        return NoMatch("pairVariant reverted")

    log.debug(f"Pair variant for {address}: {PAIR_VARIANTS.get(variant, variant)}")
    if variant not in ERC1155_PAIR_VARIANTS:
        return Matched(NftStandard.ERC721)

    try:
        nft_id = await read_pool_function(reader, address, NFT_ID)
    except CallReverted as exc:
        log.warning(f"Failed to get nftId for ERC1155 pair {address}: {exc}")
        nft_id = None
    return Matched(NftStandard.ERC1155, nft_id)


NFT_STANDARD_PROBES: Tuple[Tuple[str, Probe], ...] = (
    ("nftId", probe_nft_id),
    ("pairVariant", probe_pair_variant),
)


async def classify_nft_standard(reader: ChainReader, address: str) -> Matched:
    """Run the NFT-standard probes in order; UNKNOWN when none of them match."""
    for name, probe in NFT_STANDARD_PROBES:
        result = await probe(reader, address)
        if isinstance(result, Matched):
            log.debug(f"{address} classified as {result.standard.value} by {name} probe")
            return result
    log.info(f"Could not determine NFT standard for {address}")
    return Matched(NftStandard.UNKNOWN)


async def probe_settlement_token(reader: ChainReader, address: str) -> str:
    """ERC20 pairs expose token(); ETH pairs revert, which maps to the zero address."""
    try:
        return await read_pool_function(reader, address, TOKEN)
    except CallReverted:
        log.debug(f"token() call reverted for {address}, assuming ETH pair")
        return ZERO_ADDRESS
