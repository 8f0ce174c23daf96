from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from ..errors import SpinErrorCode
from ..models import HistoryRecord, MiniGame
from ..models.utils import optional_int


@dataclass(frozen=True)
class PlayResult:
    """Outcome of a play call: ``error_code == 0`` means ``prize_id`` was won."""

    error_code: int
    error_message: Optional[str] = None
    prize_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error_code == SpinErrorCode.OK

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "PlayResult":
        code = optional_int(payload.get("err_code"))
        return cls(
            error_code=code if code is not None else SpinErrorCode.OK,
            error_message=payload.get("err_message"),
            prize_id=optional_int(payload.get("prize_id")),
        )


class GameAPI(Protocol):
    """Remote collaborator used by the calendar workflows and claim sessions."""

    def list_mini_games(self) -> list[MiniGame]: ...

    def list_history(
        self, template_id: int, limit: int, offset: int = 0
    ) -> list[HistoryRecord]: ...

    def play(self, template_id: int) -> PlayResult: ...

    def get_translations(self, language: str) -> dict[str, str]: ...


__all__ = ["GameAPI", "PlayResult"]
