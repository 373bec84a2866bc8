from decimal import Decimal, InvalidOperation, ROUND_DOWN, localcontext

from pool_resolver.utils.constants import ETH_DECIMALS


def format_units(value: int, decimals: int = ETH_DECIMALS) -> str:
    """Render an integer amount of base units as a decimal string ("1.5", not "1.500")."""
    negative = value < 0
    whole, frac = divmod(abs(int(value)), 10 ** decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    out = f"{whole}.{frac_str}" if frac_str else str(whole)
    return f"-{out}" if negative else out


def parse_units(text: str, decimals: int = ETH_DECIMALS) -> int:
    """Inverse of format_units. Digits past `decimals` places are truncated."""
    try:
        amount = Decimal(text.strip())
    except (InvalidOperation, AttributeError):
        raise ValueError(f"Not a decimal amount: {text!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a decimal amount: {text!r}")
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = amount.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_DOWN)
    return int(scaled)


def format_price(price: int, decimals: int = ETH_DECIMALS) -> str:
    return format_units(price, decimals)


def parse_price(price: str, decimals: int = ETH_DECIMALS) -> int:
    return parse_units(price, decimals)
