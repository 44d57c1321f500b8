"""Human-readable numbers with SI or binary prefixes."""

from __future__ import annotations

from dataclasses import dataclass

_PREFIXES = ("", "k", "M", "G", "T", "P")
_COEFFICIENT_WIDTH = 4


def _parse_spec(spec: str) -> str:
    """Return the alignment character of ``spec``; a width is accepted but ignored."""
    rest = spec[1:] if spec.startswith(":") else spec
    align = ""
    if rest[:1] in ("<", ">", "="):
        align, rest = rest[0], rest[1:]
    if rest and not (rest.isascii() and rest.isdigit()):
        raise ValueError(f"invalid format specification: {spec!r}")
    return align


@dataclass(frozen=True)
class PowFormat:
    """A quantity shown with a power-of-1000 (or 1024 if ``binary``) prefix.

    Format specifications: ``>`` and ``<`` pad to a fixed width, ``=`` keeps
    the coefficient and prefix columns aligned; a numeric width is ignored.
    """

    value: int
    unit: str
    binary: bool = False

    def _scaled(self) -> tuple[float, int]:
        base = 1024 if self.binary else 1000
        fraction = float(self.value)
        power = 0
        while power + 1 < len(_PREFIXES) and fraction / base >= 1:
            fraction /= base
            power += 1
        return fraction, power

    def __format__(self, spec: str) -> str:
        align = _parse_spec(spec)
        if align in ("<", ">"):
            width = _COEFFICIENT_WIDTH + 1 + int(self.binary) + len(self.unit)
            plain = format(self, "")
            return plain.rjust(width) if align == ">" else plain.ljust(width)
        fraction, power = self._scaled()
        prefix = _PREFIXES[power] + ("i" if self.binary and power else "")
        if align == "=":
            padding = "" if power else ("  " if self.binary else " ")
            return f"{fraction:<4.3g}{padding}{prefix}{self.unit}"
        return f"{fraction:.3g}{prefix}{self.unit}"


def format_pow(value: int, unit: str, binary: bool = False, spec: str = "") -> str:
    """Format ``value`` with a unit prefix, as :class:`PowFormat` does."""
    return format(PowFormat(value, unit, binary), spec)