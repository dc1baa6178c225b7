from __future__ import annotations


class ChartDataError(ValueError):
    """Raised when host series rows are empty or malformed."""


class OptionError(KeyError):
    """Raised for option names the chart does not know about."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown option"
