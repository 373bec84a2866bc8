import os
from dotenv import load_dotenv

from pool_resolver.utils.constants import BASE_CHAIN_ID as _BASE_CHAIN_ID

load_dotenv()


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


ALCHEMY_API_KEY = os.getenv("ALCHEMY_API_KEY")
BASE_RPC_URL = os.getenv("BASE_RPC_URL") or (
    f"https://base-mainnet.g.alchemy.com/v2/{ALCHEMY_API_KEY}"
    if ALCHEMY_API_KEY
    else "https://mainnet.base.org"
)
BASE_CHAIN_ID = int(os.getenv("BASE_CHAIN_ID", _BASE_CHAIN_ID))

# LSSVMPairFactory on Base
LSSVM_FACTORY_ADDRESS = os.getenv(
    "LSSVM_FACTORY_ADDRESS", "0x605145D263482684590f630E9e581B21E4938eb8"
)
# block the factory was deployed at; 0 scans from genesis
FACTORY_START_BLOCK = int(os.getenv("FACTORY_START_BLOCK", "0"))
INCREMENTAL_LOG_SCAN = _env_bool("INCREMENTAL_LOG_SCAN", True)

POOL_CACHE_TTL_SECONDS = float(os.getenv("POOL_CACHE_TTL_SECONDS", "300"))
POOL_CACHE_MAX_ENTRIES = int(os.getenv("POOL_CACHE_MAX_ENTRIES", "1024"))

PROBE_CONCURRENCY = int(os.getenv("PROBE_CONCURRENCY", "8"))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
RPC_TIMEOUT_SECONDS = float(os.getenv("RPC_TIMEOUT_SECONDS", "10"))
RPC_MAX_TRIES = int(os.getenv("RPC_MAX_TRIES", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
