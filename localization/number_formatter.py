"""Number formatting: plain numbers, percentages and human file sizes.

Format options come from the active translation table (``number.format``,
``number.percentage.format``, ``number.human.storage_units``) and can be
overridden per call.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Callable, Dict, Mapping, Optional

from .interpolation import prepare_options

Lookup = Callable[[str], Optional[Mapping[str, Any]]]
Translate = Callable[..., str]

STORAGE_UNITS = [None, "kb", "mb", "gb", "tb"]

NUMBER_DEFAULTS = {
    "precision": 3,
    "separator": ".",
    "delimiter": ",",
    "strip_insignificant_zeros": False,
}

PERCENTAGE_DEFAULTS = {
    "precision": 3,
    "separator": ".",
    "delimiter": "",
}


def _fixed(number: float, precision: int) -> str:
    """Fixed-point text of `number`, rounding half away from zero."""
    quantum = Decimal(1).scaleb(-precision)
    return str(Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP, context=Context(prec=100)))


class NumberFormatter:
    """Formats numbers according to the active locale's number options."""

    def __init__(self, lookup: Optional[Lookup] = None, translate: Optional[Translate] = None):
        self._lookup = lookup or (lambda scope: None)
        self._translate = translate

    def _options(self, scope: str) -> Optional[Dict[str, Any]]:
        found = self._lookup(scope)
        return dict(found) if isinstance(found, Mapping) else None

    def format_number(self, number: float, options: Optional[Mapping[str, Any]] = None) -> str:
        """
        Format `number` with grouping and a fixed number of decimals.

        Args:
            number: The number to format
            options: precision, separator, delimiter, strip_insignificant_zeros

        Returns:
            Formatted number string
        """
        opts = prepare_options(options, self._options("number.format"), NUMBER_DEFAULTS)
        precision = int(opts["precision"])
        separator = str(opts["separator"])
        delimiter = str(opts["delimiter"])

        negative = number < 0
        text = _fixed(abs(number), precision)
        whole, _, fraction = text.partition(".")

        groups = []
        while whole:
            groups.insert(0, whole[-3:])
            whole = whole[:-3]
        formatted = delimiter.join(groups)

        if precision > 0:
            formatted += separator + fraction
        if negative:
            formatted = "-" + formatted

        if precision > 0 and opts.get("strip_insignificant_zeros"):
            formatted = formatted.rstrip("0")
            if separator and formatted.endswith(separator):
                formatted = formatted[: -len(separator)]

        return formatted

    def format_percentage(self, number: float, options: Optional[Mapping[str, Any]] = None) -> str:
        opts = prepare_options(
            options,
            self._options("number.percentage.format"),
            self._options("number.format"),
            PERCENTAGE_DEFAULTS,
        )
        return self.format_number(number, opts) + "%"

    def format_human_size(self, number: float, options: Optional[Mapping[str, Any]] = None) -> str:
        """
        Format a byte count as a human readable size (e.g. ``1.5 MB``).

        Sizes are divided by 1024 at most four times. Whole results are shown
        without decimals, everything else with one.
        """
        kb = 1024
        size = number
        iterations = 0
        while size >= kb and iterations < 4:
            size = size / kb
            iterations += 1

        if iterations == 0:
            unit = self._unit("byte", count=size)
            precision = 0
        else:
            unit = self._unit(STORAGE_UNITS[iterations])
            precision = 0 if size - math.floor(size) == 0 else 1

        stored = self._lookup("number.human.storage_units.format")
        default_format = stored if isinstance(stored, str) else "%n %u"
        opts = prepare_options(
            options,
            {"precision": precision, "format": default_format, "delimiter": ""},
        )
        formatted = self.format_number(size, opts)
        return str(opts["format"]).replace("%u", unit).replace("%n", formatted)

    def _unit(self, name: str, count: Optional[float] = None) -> str:
        if self._translate is None:
            return name.upper() if name != "byte" else ("Byte" if count == 1 else "Bytes")
        options = {"count": count} if count is not None else None
        return self._translate(f"number.human.storage_units.units.{name}", options)


# Global instance, no locale data
_number_formatter = NumberFormatter()


def to_number(number: float, options: Optional[Mapping[str, Any]] = None) -> str:
    """Global function to format numbers."""
    return _number_formatter.format_number(number, options)


def to_percentage(number: float, options: Optional[Mapping[str, Any]] = None) -> str:
    """Global function to format percentages."""
    return _number_formatter.format_percentage(number, options)


def to_human_size(number: float, options: Optional[Mapping[str, Any]] = None) -> str:
    """Global function to format byte sizes."""
    return _number_formatter.format_human_size(number, options)
