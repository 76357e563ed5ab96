import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

logger = logging.getLogger(__name__)

QuantityInput = Optional[Union[str, int, float, Decimal]]

# Binary SI suffixes
_BINARY_SUFFIXES = {
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
    "Ti": 1024**4,
    "Pi": 1024**5,
    "Ei": 1024**6,
}

# Decimal SI suffixes
_DECIMAL_SUFFIXES = {
    "n": Decimal("0.000000001"),
    "u": Decimal("0.000001"),
    "m": Decimal("0.001"),
    "k": Decimal(1000),
    "M": Decimal(1000**2),
    "G": Decimal(1000**3),
    "T": Decimal(1000**4),
    "P": Decimal(1000**5),
    "E": Decimal(1000**6),
}

# Human byte sizes such as "100mb", "2GB" or "512KiB". Every prefix is a power
# of 1024, as in the byte-size flags accepted by the CLI.
_BYTE_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?|\.\d+)\s*([KMGTPE]?)I?B$", re.IGNORECASE)
_BYTE_SIZE_POWERS = {"": 0, "K": 1, "M": 2, "G": 3, "T": 4, "P": 5, "E": 6}

# Kubernetes rejects quantities that do not fit a signed 64-bit integer.
MAX_QUANTITY = Decimal(2**63 - 1)


def _to_decimal(number: str) -> Decimal:
    try:
        value = Decimal(number)
    except InvalidOperation:
        raise ValueError(f"'{number}' is not a number")
    if not value.is_finite():
        raise ValueError(f"'{number}' is not a finite number")
    return value


def _scale(number: str, multiplier) -> Decimal:
    try:
        return _to_decimal(number) * multiplier
    except ArithmeticError:
        raise ValueError(f"'{number}' is out of range")


def _bounded(value: Decimal) -> Decimal:
    if value > MAX_QUANTITY or value < -MAX_QUANTITY:
        raise ValueError("quantity too large")
    return value


def parse_quantity(quantity: QuantityInput) -> Decimal:
    """
    Parse a Kubernetes quantity (e.g. '250m', '2', '1Gi', '500M') to Decimal.

    Raises:
        ValueError: If the string is not a valid quantity, or is out of range.
    """
    if quantity is None:
        return Decimal(0)
    if isinstance(quantity, (int, float, Decimal)):
        return _to_decimal(str(quantity))

    quantity = str(quantity).strip()
    if not quantity:
        raise ValueError("empty quantity")

    for suffix, multiplier in _BINARY_SUFFIXES.items():
        if quantity.endswith(suffix):
            return _scale(quantity[: -len(suffix)], multiplier)

    # A trailing "E" may be a suffix or an exponent ("1E3"); only the last
    # character is considered here, so "1E" is exa and "1E3" is a plain number.
    suffix = quantity[-1]
    if suffix in _DECIMAL_SUFFIXES:
        return _scale(quantity[:-1], _DECIMAL_SUFFIXES[suffix])

    return _to_decimal(quantity)


def parse_cpu(cpu: QuantityInput) -> int:
    """
    Converts a CPU quantity to millicores.

    '250m' is a millicore literal; anything without the suffix is a number of
    whole cores ('2' -> 2000, '0.5' -> 500). Invalid input yields 0 and a warning.
    """
    if cpu is None:
        return 0
    text = str(cpu).strip()
    try:
        if text.endswith("m"):
            millicores = _to_decimal(text[:-1])
        else:
            millicores = _scale(text, 1000)
        millicores = _bounded(millicores)
    except (ValueError, ArithmeticError) as e:
        logger.warning("Could not parse CPU quantity '%s': %s. Using 0.", cpu, e)
        return 0

    if millicores < 0:
        logger.warning("Negative CPU quantity '%s'. Using 0.", cpu)
        return 0
    return int(millicores)


def parse_memory(memory: QuantityInput) -> int:
    """
    Converts a memory quantity to bytes.

    Byte-size strings ('100mb', '2GB', '512KiB') use binary multipliers.
    Kubernetes quantities ('1Gi', '500M', '1048576') follow the platform rules.
    Invalid input yields 0 and a warning.
    """
    if memory is None:
        return 0
    text = str(memory).strip()

    try:
        match = _BYTE_SIZE_RE.match(text)
        if match:
            number, prefix = match.group(1), match.group(2).upper()
            value = _scale(number, 1024 ** _BYTE_SIZE_POWERS[prefix])
        else:
            value = parse_quantity(text)
        value = _bounded(value)
    except (ValueError, ArithmeticError) as e:
        logger.warning("Could not parse memory quantity '%s': %s. Using 0.", memory, e)
        return 0

    if value < 0:
        logger.warning("Negative memory quantity '%s'. Using 0.", memory)
        return 0
    return int(value)


def parse_pod_count(pods: QuantityInput) -> int:
    """Converts the allocatable 'pods' quantity of a node to an int."""
    if pods is None:
        return 0
    try:
        value = _bounded(parse_quantity(pods))
    except (ValueError, ArithmeticError) as e:
        logger.warning("Could not parse pod count '%s': %s. Using 0.", pods, e)
        return 0
    return max(int(value), 0)
