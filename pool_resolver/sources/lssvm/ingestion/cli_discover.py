import asyncio
import json
import logging

import typer

from pool_resolver.sources.lssvm.config.settings import BASE_CHAIN_ID
from pool_resolver.sources.lssvm.service import build_pool_service
from pool_resolver.utils.errors import PoolResolverError
from pool_resolver.utils.units import format_price

log = logging.getLogger(__name__)

app = typer.Typer(help="Look up LSSVM pools from the command line")


@app.command("discover")
def discover(
    collection: str = typer.Argument(..., help="NFT collection address, 0x..."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """
    List the pools trading a collection.
    """
    service = build_pool_service()
    try:
        pools = asyncio.run(service.discover_pools(collection))
    except PoolResolverError as e:
        log.error(f"[cli] Discovery failed: {e}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps({"pools": [p.to_summary() for p in pools]}, indent=2))
        return
    if not pools:
        typer.echo(f"No pools found for {collection}")
        return
    for pool in pools:
        settlement = "ETH" if pool.is_native else pool.token_address
        typer.echo(
            f"{pool.address}  {pool.pool_type_label:<5}  "
            f"spot {format_price(pool.spot_price)} {settlement}"
        )


@app.command("resolve")
def resolve(
    pool_address: str = typer.Argument(..., help="Pool address, 0x..."),
    chain_id: int = typer.Option(BASE_CHAIN_ID, help="Chain id, only Base is supported"),
):
    """
    Print the full record of a single pool.
    """
    service = build_pool_service()
    try:
        pool = asyncio.run(service.resolve_pool(chain_id, pool_address))
    except PoolResolverError as e:
        log.error(f"[cli] Resolution failed: {e}")
        raise typer.Exit(code=1)
    typer.echo(json.dumps(pool.to_detail(), indent=2))


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1"),
    port: int = typer.Option(8000),
):
    """
    Run the HTTP API.
    """
    import uvicorn

    uvicorn.run("pool_resolver.main:app", host=host, port=port)


def main():
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    app()


if __name__ == "__main__":
    main()
