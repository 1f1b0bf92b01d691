"""
HELA Helpers

Amount scaling for runtime denominations and resolution of user-supplied
account references (wallet names, test accounts, literal addresses).
"""

from decimal import Decimal, InvalidOperation

from .config import CliConfig, ParaTime
from .constants import NATIVE_DENOMINATION, NATIVE_DENOMINATION_KEY
from .crypto import Address
from .exceptions import AccountNotFound, InvalidAddressError, InvalidAmount, UnresolvableAddress
from .wallet import load_test_account_config, parse_test_account_address


def _denomination_key(denom: str) -> str:
    return NATIVE_DENOMINATION_KEY if denom == NATIVE_DENOMINATION else denom


def parse_paratime_denomination(paratime: ParaTime, amount: str, denom: str) -> int:
    """
    Scale a decimal amount into base units of *denom* on *paratime*.

    Args:
        paratime: Runtime providing the denomination's decimal places
        amount: Decimal string such as "100.5"
        denom: Denomination ("" for the native one)

    Returns:
        Amount in base units

    Raises:
        InvalidAmount: Malformed, negative, or finer than the denomination allows
    """
    decimals = paratime.get_denomination(_denomination_key(denom)).decimals
    try:
        value = Decimal(amount.strip())
    except (InvalidOperation, AttributeError):
        raise InvalidAmount(f"malformed amount: {amount!r}")

    if not value.is_finite():
        raise InvalidAmount(f"malformed amount: {amount!r}")
    if value < 0:
        raise InvalidAmount(f"amount must not be negative: {amount}")

    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmount(
            f"amount {amount} has more than {decimals} decimal places"
        )
    return int(scaled)


def format_paratime_denomination(paratime: ParaTime, amount: int, denom: str = NATIVE_DENOMINATION) -> str:
    """Render base units as a decimal amount with the denomination symbol."""
    info = paratime.get_denomination(_denomination_key(denom))
    value = Decimal(amount).scaleb(-info.decimals)
    text = format(value.normalize(), "f") if amount else "0"
    return f"{text} {info.symbol}"


def resolve_local_account_or_address(cfg: CliConfig, value: str) -> Address:
    """
    Resolve a wallet account name, `test:<name>`, or a bech32 address.

    Args:
        cfg: Client configuration (wallet entries)
        value: User-supplied account reference

    Raises:
        UnresolvableAddress: If *value* matches none of the above
    """
    if test_name := parse_test_account_address(value):
        try:
            return Address.from_bech32(load_test_account_config(test_name).address)
        except AccountNotFound as e:
            raise UnresolvableAddress(value, str(e))

    if account := cfg.wallet.all.get(value):
        try:
            return Address.from_bech32(account.address)
        except InvalidAddressError as e:
            raise UnresolvableAddress(value, str(e))

    try:
        return Address.from_bech32(value)
    except InvalidAddressError as e:
        raise UnresolvableAddress(value, str(e))
