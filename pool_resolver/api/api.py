import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from pool_resolver.sources.lssvm.service import PoolService, build_pool_service
from pool_resolver.utils.errors import (
    DiscoveryError,
    InvalidAddress,
    NotAContract,
    NotAPool,
    Timeout,
    TransientError,
    UnsupportedChain,
)

log = logging.getLogger(__name__)

router = APIRouter()


def get_pool_service(request: Request) -> PoolService:
    service = getattr(request.app.state, "pool_service", None)
    if service is None:
        service = build_pool_service()
        request.app.state.pool_service = service
    return service


@router.get("/")
def read_root():
    return {"message": "LSSVM pool resolver"}


@router.get("/pools/{contract_address}")
async def discover_pools(contract_address: str, service: PoolService = Depends(get_pool_service)):
    """Pools created by the factory for the NFT collection `contract_address`."""
    try:
        pools = await service.discover_pools(contract_address)
    except InvalidAddress:
        return JSONResponse({"error": "Invalid contract address"}, status_code=400)
    except DiscoveryError as e:
        log.error(f"Error fetching pools for {contract_address}: {e}")
        return JSONResponse(
            {"error": "Failed to fetch pools", "details": str(e)},
            status_code=500,
        )
    return {"pools": [pool.to_summary() for pool in pools]}


@router.get("/pool/{chain_id}/{pool_address}")
async def resolve_pool(chain_id: str, pool_address: str, service: PoolService = Depends(get_pool_service)):
    try:
        pool = await service.resolve_pool(chain_id, pool_address)
    except UnsupportedChain as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except InvalidAddress:
        return JSONResponse({"error": "Invalid pool address"}, status_code=400)
    except (NotAContract, NotAPool) as e:
        return JSONResponse(
            {
                "error": "Invalid pool address",
                "details": (
                    f"The address {pool_address} is not a valid LSSVM pool contract. It may be from "
                    f"a different factory or not exist on chain {service.chain_id}."
                ),
                "reason": str(e),
            },
            status_code=404,
        )
    except TransientError as e:
        log.warning(f"RPC failure resolving {pool_address}: {e}")
        return JSONResponse({"error": "Error loading pool", "details": str(e)}, status_code=502)
    except Timeout as e:
        return JSONResponse({"error": "Error loading pool", "details": str(e)}, status_code=504)
    return {"pool": pool.to_detail()}
