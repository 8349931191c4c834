"""Quorum policy: when does a minyan have enough confirmed attendees."""
from typing import Optional

from minyan.config import settings
from minyan.models.building import Building

MINYAN_SIZE = 10


def has_minyan(yes_count: int, quorum_size: int = MINYAN_SIZE) -> bool:
    return yes_count >= quorum_size


def quorum_size_for(building: Optional[Building]) -> int:
    """Building override if set, else the configured default (10 unless changed)."""
    if building is not None and building.quorum_size:
        return building.quorum_size
    return settings.DEFAULT_QUORUM_SIZE
