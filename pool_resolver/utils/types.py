from enum import Enum, IntEnum
from typing import NamedTuple, Optional

from pool_resolver.utils.constants import POOL_TYPE_LABELS, ZERO_ADDRESS


class PoolType(IntEnum):
    TOKEN = 0
    NFT = 1
    TRADE = 2


class NftStandard(str, Enum):
    ERC721 = "ERC721"
    ERC1155 = "ERC1155"
    UNKNOWN = "UNKNOWN"


class PoolRecord(NamedTuple):
    """Snapshot of an LSSVM pair at scan time. Amounts are raw wei integers."""
    address: str
    pool_type: PoolType
    spot_price: int
    delta: int
    fee: int
    bonding_curve: str
    nft_address: str
    nft_standard: NftStandard
    token_address: str
    nft_id: Optional[int] = None

    @property
    def is_erc1155(self) -> bool:
        return self.nft_standard is NftStandard.ERC1155

    @property
    def is_native(self) -> bool:
        """True when the pool settles in ETH rather than an ERC-20."""
        return self.token_address == ZERO_ADDRESS

    @property
    def pool_type_label(self) -> str:
        return POOL_TYPE_LABELS[int(self.pool_type)]

    def to_summary(self) -> dict:
        # amounts as decimal strings, JSON numbers lose precision past 2**53
        return {
            "poolAddress": self.address,
            "spotPrice": str(self.spot_price),
            "poolType": int(self.pool_type),
            "nftAddress": self.nft_address,
        }

    def to_detail(self) -> dict:
        return {
            **self.to_summary(),
            "delta": str(self.delta),
            "fee": str(self.fee),
            "bondingCurve": self.bonding_curve,
            "nftStandard": self.nft_standard.value,
            "nftId": None if self.nft_id is None else str(self.nft_id),
            "tokenAddress": self.token_address,
            "isERC1155": self.is_erc1155,
            "poolTypeLabel": self.pool_type_label,
        }
