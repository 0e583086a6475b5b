"""
Configuration, parameter parsing and date seeding.
"""

import hashlib
import json
import logging
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised for malformed render parameters."""


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_power_of_four(n: int) -> bool:
    """Check that n is 1, 4, 16, 64, ..."""
    return n > 0 and n & (n - 1) == 0 and (n.bit_length() - 1) % 2 == 0


def parse_dimensions(text: str) -> Tuple[int, int]:
    """
    Parse screen dimensions.

    Args:
        text: Dimensions as "WIDTHxHEIGHT", e.g. "800x600"

    Returns:
        (width, height) tuple
    """
    parts = text.strip().split('x')
    if len(parts) != 2:
        raise ConfigurationError(f"Invalid dimension format '{text}'. Use 'WIDTHxHEIGHT'")

    try:
        width = int(parts[0])
    except ValueError:
        raise ConfigurationError(f"Invalid width in '{text}'") from None
    try:
        height = int(parts[1])
    except ValueError:
        raise ConfigurationError(f"Invalid height in '{text}'") from None

    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Dimensions must be positive, got '{text}'")
    return width, height


def floor_to_hour(moment: datetime) -> datetime:
    """Drop minutes, seconds and microseconds."""
    return moment.replace(minute=0, second=0, microsecond=0)


def parse_date_seed(text: str) -> datetime:
    """
    Parse an ISO 8601 date seed, naive values are taken as UTC.

    The result is floored to the hour.
    """
    text = text.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'

    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        raise ConfigurationError(f"Invalid date seed '{text}'. Use ISO 8601") from None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return floor_to_hour(moment.astimezone(timezone.utc))


def seed_from_datetime(moment: datetime) -> int:
    """Hash a datetime to a 64-bit seed, stable across processes."""
    digest = hashlib.blake2b(moment.isoformat().encode(), digest_size=8).digest()
    return int.from_bytes(digest, 'big')


@dataclass
class DiveConfig:
    """Configuration for a dive run."""

    # Image parameters
    dive_dimensions: Tuple[int, int] = (800, 600)
    shot_dimensions: Tuple[int, int] = (800, 600)
    antialiasing: int = 4  # Per-axis supersampling factor

    # Seeding, None means the current hour
    date_seed: Optional[str] = None

    # Output
    output: str = 'image.png'
    debug_images: bool = True
    debug_dir: str = '.'

    # Performance
    workers: Optional[int] = None

    def validate(self):
        """Validate configuration parameters."""
        for name in ('dive_dimensions', 'shot_dimensions'):
            dims = getattr(self, name)
            if (not isinstance(dims, (tuple, list)) or len(dims) != 2
                    or not all(_is_int(d) and d > 0 for d in dims)):
                raise ConfigurationError(f"{name} must be two positive integers, got {dims!r}")

        if not _is_int(self.antialiasing) or not is_power_of_four(self.antialiasing):
            raise ConfigurationError("The specified antialiasing must be a power of four")

        if self.workers is not None and (not _is_int(self.workers) or self.workers < 1):
            raise ConfigurationError(f"workers must be an integer >= 1, got {self.workers!r}")

        if self.date_seed is not None:
            if not isinstance(self.date_seed, str):
                raise ConfigurationError(f"date_seed must be an ISO 8601 string, got {self.date_seed!r}")
            parse_date_seed(self.date_seed)

    def resolve_date_seed(self) -> datetime:
        """The configured date seed, or the current hour."""
        if self.date_seed is not None:
            return parse_date_seed(self.date_seed)
        return floor_to_hour(datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiveConfig':
        """Create configuration from a dictionary, dimensions may be strings."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        for name in ('dive_dimensions', 'shot_dimensions'):
            if isinstance(values.get(name), str):
                values[name] = parse_dimensions(values[name])
            elif isinstance(values.get(name), list):
                values[name] = tuple(values[name])
        return cls(**values)

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'DiveConfig':
        """Load configuration from a JSON file."""
        filepath = Path(filepath)
        with open(filepath, 'r') as f:
            data = json.load(f)
        logger.info(f"Loaded configuration from {filepath}")
        return cls.from_dict(data)
