"""Canonicalization of legacy IPv4 host notations.

Hosts such as ``0300.0250.0000.0001``, ``0xC0A80001`` or ``192.11010049`` are
accepted by most resolvers as IPv4 addresses. IPv4Normalizer rewrites them as
dotted-decimal quads; anything that is not such a notation is left alone.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Optional, Protocol

from urikit.logging_config import get_logger, log_with_context

if TYPE_CHECKING:
    from urikit.host import Host

logger = get_logger(__name__)

_HEX_RE = re.compile(r"^0x([0-9a-f]*)$", re.IGNORECASE)
_OCTAL_RE = re.compile(r"^0([0-7]+)$")
_DECIMAL_RE = re.compile(r"^(?:0|[1-9][0-9]*)$")


class IPv4Calculator(Protocol):
    def parse_with_radix(self, value: str, radix: int) -> Any: ...

    def power(self, value: Any, exponent: int) -> Any: ...

    def multiply(self, value1: Any, value2: Any) -> Any: ...

    def divide(self, value: Any, base: Any) -> Any: ...

    def modulo(self, value: Any, base: Any) -> Any: ...

    def add(self, value1: Any, value2: Any) -> Any: ...

    def subtract(self, value1: Any, value2: Any) -> Any: ...

    def compare(self, value1: Any, value2: Any) -> int: ...


class NativeCalculator:
    """Python integers are unbounded, so no intermediate step can overflow."""

    def parse_with_radix(self, value: str, radix: int) -> int:
        return int(value, radix)

    def power(self, value: int, exponent: int) -> int:
        return value**exponent

    def multiply(self, value1: int, value2: int) -> int:
        return value1 * value2

    def divide(self, value: int, base: int) -> int:
        return value // base

    def modulo(self, value: int, base: int) -> int:
        return value % base

    def add(self, value1: int, value2: int) -> int:
        return value1 + value2

    def subtract(self, value1: int, value2: int) -> int:
        return value1 - value2

    def compare(self, value1: int, value2: int) -> int:
        return (value1 > value2) - (value1 < value2)


class IPv4Normalizer:
    def __init__(self, calculator: Optional[IPv4Calculator] = None) -> None:
        self._calc: IPv4Calculator = calculator or NativeCalculator()
        self._one = self._calc.parse_with_radix("1", 10)
        self._base = self._calc.parse_with_radix("256", 10)
        self._max_octet = self._calc.parse_with_radix("255", 10)
        self._max_address = self._calc.subtract(self._calc.power(self._base, 4), self._one)

    def _parse_part(self, part: str) -> Optional[Any]:
        match = _HEX_RE.match(part)
        if match:
            return self._calc.parse_with_radix(match.group(1) or "0", 16)
        match = _OCTAL_RE.match(part)
        if match:
            return self._calc.parse_with_radix(match.group(1), 8)
        if _DECIMAL_RE.match(part):
            return self._calc.parse_with_radix(part, 10)
        return None

    def normalize(self, value: Optional[str]) -> Optional[str]:
        """Return the dotted-decimal form of ``value`` or None if it is not IPv4."""
        if not value:
            return None

        parts = value.split(".")
        if len(parts) > 1 and parts[-1] == "":
            parts.pop()
        if not 1 <= len(parts) <= 4:
            return None

        numbers = [self._parse_part(part) for part in parts]
        if any(number is None for number in numbers):
            return None

        calc = self._calc
        count = len(numbers)
        *leading, last = numbers
        if any(calc.compare(number, self._max_octet) > 0 for number in leading):
            return None

        last_max = calc.subtract(calc.power(self._base, 5 - count), self._one)
        if calc.compare(last, last_max) > 0:
            return None

        total = last
        for index, number in enumerate(leading):
            total = calc.add(total, calc.multiply(number, calc.power(self._base, 3 - index)))
        if calc.compare(total, self._max_address) > 0:
            return None

        tail: list[Any] = []
        remaining = last
        for _ in range(5 - count):
            tail.insert(0, calc.modulo(remaining, self._base))
            remaining = calc.divide(remaining, self._base)

        result = ".".join(str(octet) for octet in [*leading, *tail])
        if result != value:
            log_with_context(
                logger,
                logging.DEBUG,
                "legacy ipv4 notation normalized",
                host=value,
                operation="normalize_ipv4",
            )
        return result

    def normalize_host(self, host: Host) -> Host:
        return host.normalize_ipv4(normalizer=self)
