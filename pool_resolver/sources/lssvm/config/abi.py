from typing import NamedTuple


class PoolFunction(NamedTuple):
    """A zero-argument view function on an LSSVM pair."""
    name: str
    signature: str
    output_type: str


POOL_TYPE = PoolFunction("poolType", "poolType()", "uint8")
SPOT_PRICE = PoolFunction("spotPrice", "spotPrice()", "uint256")
DELTA = PoolFunction("delta", "delta()", "uint256")
FEE = PoolFunction("fee", "fee()", "uint256")
NFT = PoolFunction("nft", "nft()", "address")
BONDING_CURVE = PoolFunction("bondingCurve", "bondingCurve()", "address")
# ERC1155 pairs only
NFT_ID = PoolFunction("nftId", "nftId()", "uint256")
PAIR_VARIANT = PoolFunction("pairVariant", "pairVariant()", "uint8")
# ERC20 pairs only
TOKEN = PoolFunction("token", "token()", "address")

POOL_FUNCTIONS = (
    POOL_TYPE, SPOT_PRICE, DELTA, FEE, NFT, BONDING_CURVE, NFT_ID, PAIR_VARIANT, TOKEN,
)

NEW_ERC721_PAIR_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": True, "internalType": "address", "name": "poolAddress", "type": "address"},
        {"indexed": False, "internalType": "uint256[]", "name": "initialIds", "type": "uint256[]"},
    ],
    "name": "NewERC721Pair",
    "type": "event",
}

NEW_ERC1155_PAIR_ABI = {
    "anonymous": False,
    "inputs": [
        {"indexed": True, "internalType": "address", "name": "poolAddress", "type": "address"},
        {"indexed": False, "internalType": "uint256", "name": "initialBalance", "type": "uint256"},
    ],
    "name": "NewERC1155Pair",
    "type": "event",
}

FACTORY_EVENTS = (NEW_ERC721_PAIR_ABI, NEW_ERC1155_PAIR_ABI)
