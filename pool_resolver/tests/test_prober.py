import pytest

from conftest import COLLECTION, CURVE, ERC20_TOKEN, POOL_B
from pool_resolver.sources.lssvm.prober import PoolProber
from pool_resolver.utils.constants import ZERO_ADDRESS
from pool_resolver.utils.errors import InvalidAddress, NotAContract, NotAPool, TransientError
from pool_resolver.utils.types import NftStandard, PoolType


@pytest.mark.asyncio
async def test_resolves_erc721_eth_pool(reader):
    reader.add_pool(POOL_B, nft=COLLECTION, pool_type=2, spot_price=10**18, delta=10**16, fee=5 * 10**15, pair_variant=0)

    record = await PoolProber(reader).resolve(POOL_B)

    assert record.address.lower() == POOL_B
    assert record.pool_type is PoolType.TRADE
    assert record.spot_price == 10**18
    assert record.delta == 10**16
    assert record.fee == 5 * 10**15
    assert record.nft_address.lower() == COLLECTION
    assert record.bonding_curve.lower() == CURVE
    assert record.nft_standard is NftStandard.ERC721
    assert record.nft_id is None
    assert record.token_address == ZERO_ADDRESS
    assert record.is_native


@pytest.mark.asyncio
async def test_nft_id_probe_wins_and_skips_pair_variant(reader):
    # pairVariant would say ERC721; the earlier nftId probe must decide
    reader.add_pool(POOL_B, nft=COLLECTION, nft_id=7, pair_variant=0)

    record = await PoolProber(reader).resolve(POOL_B)

    assert record.nft_standard is NftStandard.ERC1155
    assert record.nft_id == 7
    assert "pairVariant" not in reader.calls_to(POOL_B)


@pytest.mark.asyncio
@pytest.mark.parametrize("variant", [2, 3])
async def test_erc1155_variant_without_readable_nft_id(reader, variant):
    reader.add_pool(POOL_B, nft=COLLECTION, pair_variant=variant)

    record = await PoolProber(reader).resolve(POOL_B)

    assert record.nft_standard is NftStandard.ERC1155
    assert record.nft_id is None
    assert reader.calls_to(POOL_B).count("nftId") == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("variant", [0, 1])
async def test_erc721_variants(reader, variant):
    reader.add_pool(POOL_B, nft=COLLECTION, pair_variant=variant)

    record = await PoolProber(reader).resolve(POOL_B)

    assert record.nft_standard is NftStandard.ERC721
    assert record.nft_id is None


@pytest.mark.asyncio
async def test_unknown_standard_when_no_probe_matches(reader):
    reader.add_pool(POOL_B, nft=COLLECTION)

    record = await PoolProber(reader).resolve(POOL_B)

    assert record.nft_standard is NftStandard.UNKNOWN
    assert record.nft_id is None


@pytest.mark.asyncio
async def test_erc20_pool_reports_token(reader):
    reader.add_pool(POOL_B, nft=COLLECTION, pair_variant=1, token=ERC20_TOKEN)

    record = await PoolProber(reader).resolve(POOL_B)

    assert record.token_address.lower() == ERC20_TOKEN
    assert not record.is_native


@pytest.mark.asyncio
async def test_empty_bytecode_is_not_a_contract(reader):
    with pytest.raises(NotAContract):
        await PoolProber(reader).resolve(POOL_B)
    assert reader.calls == []


@pytest.mark.asyncio
async def test_reverting_pool_type_is_not_a_pool(reader):
    reader.add_pool(POOL_B, nft=COLLECTION)
    del reader.returns[(POOL_B, "poolType")]

    with pytest.raises(NotAPool):
        await PoolProber(reader).resolve(POOL_B)


@pytest.mark.asyncio
async def test_pool_type_with_no_data_is_not_a_pool(reader):
    reader.add_pool(POOL_B, nft=COLLECTION)
    reader.set_raw(POOL_B, "poolType", b"")

    with pytest.raises(NotAPool):
        await PoolProber(reader).resolve(POOL_B)


@pytest.mark.asyncio
async def test_out_of_range_pool_type_is_not_a_pool(reader):
    reader.add_pool(POOL_B, nft=COLLECTION, pool_type=7)

    with pytest.raises(NotAPool):
        await PoolProber(reader).resolve(POOL_B)


@pytest.mark.asyncio
async def test_node_failure_on_pool_type_is_transient(reader):
    reader.add_pool(POOL_B, nft=COLLECTION)
    reader.set_raw(POOL_B, "poolType", TransientError("connection reset"))

    with pytest.raises(TransientError):
        await PoolProber(reader).resolve(POOL_B)


@pytest.mark.asyncio
async def test_missing_parameter_after_pool_type_is_not_a_pool(reader):
    reader.add_pool(POOL_B, nft=COLLECTION)
    del reader.returns[(POOL_B, "spotPrice")]

    with pytest.raises(NotAPool):
        await PoolProber(reader).resolve(POOL_B)


@pytest.mark.asyncio
async def test_transient_parameter_failure_beats_revert(reader):
    reader.add_pool(POOL_B, nft=COLLECTION)
    del reader.returns[(POOL_B, "delta")]
    reader.set_raw(POOL_B, "fee", TransientError("429 too many requests"))

    with pytest.raises(TransientError):
        await PoolProber(reader).resolve(POOL_B)


@pytest.mark.asyncio
async def test_transient_failure_inside_probe_is_not_swallowed(reader):
    reader.add_pool(POOL_B, nft=COLLECTION)
    reader.set_raw(POOL_B, "nftId", TransientError("timeout"))

    with pytest.raises(TransientError):
        await PoolProber(reader).resolve(POOL_B)


@pytest.mark.asyncio
async def test_amounts_keep_full_precision(reader):
    huge = 2**200 + 1
    reader.add_pool(POOL_B, nft=COLLECTION, spot_price=huge, pair_variant=0)

    record = await PoolProber(reader).resolve(POOL_B)

    assert record.spot_price == huge
    assert record.to_summary()["spotPrice"] == str(huge)


@pytest.mark.asyncio
async def test_resolve_is_idempotent(reader):
    reader.add_pool(POOL_B, nft=COLLECTION, nft_id=3, token=ERC20_TOKEN)
    prober = PoolProber(reader)

    assert await prober.resolve(POOL_B) == await prober.resolve(POOL_B)


@pytest.mark.asyncio
async def test_malformed_address_is_rejected(reader):
    with pytest.raises(InvalidAddress):
        await PoolProber(reader).resolve("0x1234")
