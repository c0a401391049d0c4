"""Data models for esplight."""

from esplight.models.command import (
    BLACK,
    Action,
    DesiredState,
    Outcome,
    OutcomeStatus,
    ResolvedColor,
)
from esplight.models.device import Device, DiscoveryEvent, EventKind, LightState

__all__ = [
    "BLACK",
    "Action",
    "DesiredState",
    "Device",
    "DiscoveryEvent",
    "EventKind",
    "LightState",
    "Outcome",
    "OutcomeStatus",
    "ResolvedColor",
]
