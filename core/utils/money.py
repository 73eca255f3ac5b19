"""
금액 유틸리티

Decimal 금액 <-> minor unit 정수 변환, 거래 부호 계산.
DB는 잔액을 정수(센트)로 보관해야 원자적 증감(balance = balance + ?)이 가능하다.
"""

from decimal import Decimal, InvalidOperation

from core.constants import MAX_AMOUNT_MINOR, MONEY_QUANT, MONEY_SCALE
from core.errors import InvalidArgumentError
from core.types import TransactionType

_MINOR_FACTOR = 10 ** MONEY_SCALE
_MAX_AMOUNT = Decimal(MAX_AMOUNT_MINOR) / _MINOR_FACTOR


def parse_amount(value: Decimal | str | int | float) -> Decimal:
    """입력값을 양수 Decimal 금액으로 변환

    Args:
        value: 금액 (Decimal, 문자열, 정수, 실수)

    Returns:
        소수점 2자리로 정규화된 Decimal

    Raises:
        InvalidArgumentError: 숫자가 아니거나 0 이하, 상한 초과, 소수점 2자리 초과

    Example:
        >>> parse_amount("12.5")
        Decimal('12.50')
    """
    try:
        # float는 str 경유로 변환해야 이진 오차가 섞이지 않음
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"유효하지 않은 금액입니다: {value!r}") from e

    if not amount.is_finite():
        raise InvalidArgumentError(f"유효하지 않은 금액입니다: {value!r}")

    if amount <= 0:
        raise InvalidArgumentError(f"금액은 0보다 커야 합니다: {amount}")

    if amount > _MAX_AMOUNT:
        raise InvalidArgumentError(f"금액은 {_MAX_AMOUNT}을 넘을 수 없습니다: {amount}")

    try:
        quantized = amount.quantize(MONEY_QUANT)
    except InvalidOperation as e:
        raise InvalidArgumentError(f"유효하지 않은 금액입니다: {value!r}") from e

    if amount != quantized:
        raise InvalidArgumentError(
            f"금액은 소수점 {MONEY_SCALE}자리까지만 허용됩니다: {amount}"
        )

    return quantized


def to_minor(amount: Decimal) -> int:
    """Decimal 금액을 minor unit 정수로 변환

    Example:
        >>> to_minor(Decimal("70.25"))
        7025
    """
    return int((amount * _MINOR_FACTOR).to_integral_value())


def from_minor(value: int) -> Decimal:
    """minor unit 정수를 Decimal 금액으로 변환

    Example:
        >>> from_minor(-3000)
        Decimal('-30.00')
    """
    return (Decimal(value) / _MINOR_FACTOR).quantize(MONEY_QUANT)


def signed_minor(tx_type: TransactionType | str, amount_minor: int) -> int:
    """거래가 계좌 잔액에 미치는 부호 있는 영향 (minor unit)

    income은 +amount, expense는 -amount.

    Example:
        >>> signed_minor("expense", 3000)
        -3000
    """
    if TransactionType(tx_type) == TransactionType.INCOME:
        return amount_minor
    return -amount_minor
