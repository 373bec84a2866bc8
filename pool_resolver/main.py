# pool_resolver/main.py
from fastapi import FastAPI
from pool_resolver.api import api
from pool_resolver.sources.lssvm.config.settings import LOG_LEVEL
from pool_resolver.sources.lssvm.service import build_pool_service
import logging
from pool_resolver.utils.shortname import ShortNameFilter

app = FastAPI(title="LSSVM pool resolver")

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="[%(levelname)s] %(shortname)s: %(message)s",
)
for handler in logging.getLogger().handlers:
    handler.addFilter(ShortNameFilter())
log = logging.getLogger(__name__)

app.include_router(api.router, prefix="/api")


@app.on_event("startup")
def create_pool_service():
    app.state.pool_service = build_pool_service()
    log.info("✅ Pool service ready.")
