from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class LayoutEvent:
    """Passed to layout hooks while the host negotiates space around its plot."""

    chart: Any
    reserved_bottom: float = 0

    def reserve_space_bottom(self, px: float) -> None:
        self.reserved_bottom += px


@dataclass(frozen=True)
class PredrawEvent:
    chart: Any


@dataclass(frozen=True)
class PluginHooks:
    layout: Callable[[LayoutEvent], None]
    predraw: Callable[[PredrawEvent], bool]
