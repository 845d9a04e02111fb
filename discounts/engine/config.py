# discounts/engine/config.py
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .tiers import Tier

TIERED = "tiered"

DEFAULT_MESSAGE = "Congratulations! You get {{percentage}} % off your order!"
DEFAULT_NEXT_MESSAGE = "Spend {{remaining}} more and get {{percentage}} % off."

# metafield missing -> nothing configured
DEFAULT_RAW_CONFIGURATION: Dict[str, Any] = {"tiers": [], "type": "tiers"}


class ConfigurationError(ValueError):
    """Configuration JSON that does not match the expected shape."""


@dataclass(frozen=True)
class Configuration:
    tiers: Tuple[Tier, ...] = field(default_factory=tuple)
    type: str = TIERED
    message: str = DEFAULT_MESSAGE
    next_message: Optional[str] = None

    @property
    def is_tiered(self) -> bool:
        return self.type == TIERED


def load_configuration(raw: Union[str, Dict[str, Any], None]) -> Configuration:
    """
    Build a Configuration from the metafield value (JSON string or already-decoded dict).
    None means no metafield: the default (empty) configuration.
    """
    if raw is None:
        raw = DEFAULT_RAW_CONFIGURATION
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Configuration is not valid JSON: {e}")
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration must be an object, got {type(raw).__name__}")

    raw_tiers = raw.get("tiers")
    tiers = []
    if isinstance(raw_tiers, list):
        for i, t in enumerate(raw_tiers):
            if not isinstance(t, dict):
                raise ConfigurationError(f"tiers[{i}] must be an object")
            try:
                tiers.append(Tier.from_wire(t))
            except KeyError as e:
                raise ConfigurationError(f"tiers[{i}] is missing {e}")
            except ValueError as e:
                raise ConfigurationError(f"tiers[{i}]: {e}")

    message = raw.get("message") or DEFAULT_MESSAGE
    next_message = raw.get("next_message") or None
    for name, value in (("message", message), ("next_message", next_message)):
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"{name} must be a string")

    return Configuration(
        tiers=tuple(tiers),
        type=str(raw.get("type") or ""),
        message=message,
        next_message=next_message,
    )


def dump_configuration(configuration: Configuration) -> Dict[str, Any]:
    return {
        "tiers": [t.to_wire() for t in configuration.tiers],
        "type": configuration.type,
        "message": configuration.message,
        "next_message": configuration.next_message or "",
    }
