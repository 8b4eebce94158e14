from __future__ import annotations


class DatavizError(Exception):
    """Base class for errors raised by dataviz."""


class ScaleDomainError(DatavizError, ValueError):
    """Raised when a scale is constructed with an unusable domain or range."""


class UnitMismatchError(DatavizError, TypeError):
    """Raised when unit values with different unit tags are combined."""


class ChartDataError(DatavizError, ValueError):
    """Raised for malformed chart input; adapters turn it into an empty output."""


class ColorParseError(DatavizError, ValueError):
    pass


class ThemeError(DatavizError, ValueError):
    pass
