from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    ON = "on"
    OFF = "off"
    TOGGLE = "toggle"
    COLOR = "color"


@dataclass(frozen=True)
class ResolvedColor:
    red: int
    green: int
    blue: int
    alpha: int = 255

    @property
    def hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    @property
    def is_black(self) -> bool:
        return self.red == 0 and self.green == 0 and self.blue == 0


BLACK = ResolvedColor(0, 0, 0)


@dataclass(frozen=True)
class DesiredState:
    """A single requested change, built once per invocation.

    ``action`` is kept as the raw token so that unsupported values reach the
    dispatcher and are rejected there.
    """

    action: str
    transition: float = 0.0
    color: ResolvedColor | None = None
    kelvin: int | None = None

    @classmethod
    def power(cls, token: str, transition: float = 0.0) -> DesiredState:
        return cls(action=token, transition=transition)

    @classmethod
    def set_color(
        cls, color: ResolvedColor, kelvin: int, transition: float = 0.0
    ) -> DesiredState:
        return cls(
            action=Action.COLOR.value,
            transition=transition,
            color=color,
            kelvin=kelvin,
        )


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Outcome:
    status: OutcomeStatus
    reason: str = ""

    @classmethod
    def applied(cls) -> Outcome:
        return cls(OutcomeStatus.APPLIED)

    @classmethod
    def skipped(cls, reason: str) -> Outcome:
        return cls(OutcomeStatus.SKIPPED, reason)

    @classmethod
    def rejected(cls, reason: str) -> Outcome:
        return cls(OutcomeStatus.REJECTED, reason)
