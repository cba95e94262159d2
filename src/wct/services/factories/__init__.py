"""Factory helpers for runtime entities."""

from .active_factory import create_active_fighter, create_active_warband
from .id_factory import make_instance_id
from .temp_fighter_factory import TEMP_FIGHTER_DEFAULTS, create_temp_fighter, create_temp_warband

__all__ = [
    "TEMP_FIGHTER_DEFAULTS",
    "create_active_fighter",
    "create_active_warband",
    "create_temp_fighter",
    "create_temp_warband",
    "make_instance_id",
]
