from __future__ import annotations

from typing import Any, Hashable, Iterable, Sequence

from dataviz_core.scales.base import CategoricalScale, ScaleKind
from dataviz_core.units import px


class OrdinalScale(CategoricalScale):
    """Category at position i maps to ``range[i % len(range)]``."""

    def __init__(
        self,
        domain: Iterable[Hashable],
        range: Sequence[Any],
        *,
        unknown: Any = None,
    ) -> None:
        super().__init__(domain)
        self._range = list(range)
        self._unknown = px(0) if unknown is None else unknown

    @property
    def kind(self) -> ScaleKind:
        return ScaleKind.ORDINAL

    def range(self) -> tuple[Any, ...]:
        return tuple(self._range)

    def set_range(self, range: Sequence[Any]) -> OrdinalScale:
        self._range = list(range)
        return self

    def set_unknown(self, value: Any) -> OrdinalScale:
        self._unknown = value
        return self

    @property
    def unknown(self) -> Any:
        return self._unknown

    def forward(self, value: Any) -> Any:
        idx = self.index(value)
        if idx is None or not self._range:
            return self._unknown
        return self._range[idx % len(self._range)]

