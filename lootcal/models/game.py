from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping, Optional

from .prize import Prize


class GameLayout(IntEnum):
    """Visual layout requested by the game template."""

    HORIZONTAL = 1
    VERTICAL_MAP = 2


@dataclass(frozen=True)
class MiniGame:
    """A lootbox calendar template together with its prizes."""

    id: int
    name: Optional[str] = None
    promo_text: Optional[str] = None
    over_limit_message: Optional[str] = None
    layout: GameLayout = GameLayout.HORIZONTAL
    prizes: tuple[Prize, ...] = field(default_factory=tuple)

    def __repr__(self) -> str:
        return (
            f"<MiniGame(id={self.id}, name={self.name!r}, "
            f"layout={self.layout.name}, prizes={len(self.prizes)})>"
        )

    def prize_by_id(self, prize_id: Optional[int]) -> Optional[Prize]:
        """Return the template prize with ``prize_id`` if it exists."""

        if prize_id is None:
            return None
        for prize in self.prizes:
            if prize.id == prize_id:
                return prize
        return None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "MiniGame":
        ui_definition = payload.get("saw_template_ui_definition") or {}
        layout_value = ui_definition.get("game_layout") or GameLayout.HORIZONTAL
        try:
            layout = GameLayout(int(layout_value))
        except ValueError:
            layout = GameLayout.HORIZONTAL
        return cls(
            id=int(payload["id"]),
            name=payload.get("name"),
            promo_text=payload.get("promo_text"),
            over_limit_message=payload.get("over_limit_message"),
            layout=layout,
            prizes=tuple(Prize.from_api(item) for item in payload.get("prizes") or ()),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "promo_text": self.promo_text,
            "over_limit_message": self.over_limit_message,
            "layout": int(self.layout),
            "prizes": [prize.to_json() for prize in self.prizes],
        }


__all__ = ["GameLayout", "MiniGame"]
