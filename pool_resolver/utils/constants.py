ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

BASE_CHAIN_ID = 8453

ETH_DECIMALS = 18

POOL_TYPE_LABELS = {
    0: "TOKEN",   # buys NFTs only
    1: "NFT",     # sells NFTs only
    2: "TRADE",   # both sides
}

# LSSVMPair.PairVariant
PAIR_VARIANTS = {
    0: "ERC721_ETH",
    1: "ERC721_ERC20",
    2: "ERC1155_ETH",
    3: "ERC1155_ERC20",
}

ERC1155_PAIR_VARIANTS = {2, 3}
