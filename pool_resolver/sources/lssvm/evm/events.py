import asyncio
import logging
from typing import Dict, List, Optional

from pool_resolver.sources.lssvm.config.abi import NEW_ERC1155_PAIR_ABI, NEW_ERC721_PAIR_ABI
from pool_resolver.sources.lssvm.evm.client import ChainReader
from pool_resolver.utils.address import checksum_address

log = logging.getLogger(__name__)


class FactoryEventScanner:
    """Collects every pool address the factory has announced.

    The factory's creation events do not carry the NFT collection, so the scan
    cannot be filtered per collection and always covers the whole factory.
    With ``incremental`` set, the candidates seen so far and the highest block
    that carried an event are kept in memory and later scans start from that
    block instead of ``start_block``. The state lives only as long as the
    scanner object.
    """

    def __init__(
        self,
        reader: ChainReader,
        factory_address: str,
        start_block: int = 0,
        incremental: bool = True,
    ):
        self.reader = reader
        self.factory_address = checksum_address(factory_address)
        self.start_block = start_block
        self.incremental = incremental
        self.high_water_mark: Optional[int] = None
        # lower-cased address -> checksummed address, first-seen order
        self._candidates: Dict[str, str] = {}

    async def scan(self) -> List[str]:
        """Return the deduplicated pool addresses announced by the factory."""
        from_block = self.start_block
        if self.incremental and self.high_water_mark is not None:
            from_block = self.high_water_mark

        erc721_events, erc1155_events = await asyncio.gather(
            self.reader.get_logs(self.factory_address, NEW_ERC721_PAIR_ABI, from_block, "latest"),
            self.reader.get_logs(self.factory_address, NEW_ERC1155_PAIR_ABI, from_block, "latest"),
        )

        found: Dict[str, str] = {} if not self.incremental else self._candidates
        newest = self.high_water_mark
        new_count = 0
        for event in [*erc721_events, *erc1155_events]:
            pool_address = checksum_address(event["args"]["poolAddress"])
            key = pool_address.lower()
            if key not in found:
                found[key] = pool_address
                new_count += 1
            block = event.get("blockNumber")
            if block is not None and (newest is None or block > newest):
                newest = block

        if self.incremental:
            self.high_water_mark = newest
        log.info(
            f"Factory scan from block {from_block}: {len(erc721_events)} ERC721 + "
            f"{len(erc1155_events)} ERC1155 events, {new_count} new, {len(found)} candidates"
        )
        return list(found.values())
