"""YAML configuration loader with validation."""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Dict, Optional, Any

import yaml

DEFAULT_REFERENCE_REGION = "us-east-1"


@dataclass
class Config:
    """vpcwipe configuration."""
    reference_region: str = DEFAULT_REFERENCE_REGION
    regions: List[str] = field(default_factory=lambda: ["all"])
    max_workers: Optional[int] = None
    profile: Optional[str] = None
    countdown: int = 5
    json_logs: bool = False
    verbosity: int = 1

    def __post_init__(self):
        if self.max_workers is not None and (
            isinstance(self.max_workers, bool)
            or not isinstance(self.max_workers, int)
            or self.max_workers < 1
        ):
            raise ValueError(f"max_workers must be a positive integer, got {self.max_workers!r}")
        if not isinstance(self.countdown, int) or self.countdown < 0:
            raise ValueError(f"countdown must be a non-negative integer, got {self.countdown!r}")
        if not isinstance(self.regions, list) or not self.regions:
            raise ValueError("regions must be a non-empty list")
        if not self.reference_region:
            raise ValueError("reference_region must not be empty")

    def should_include_region(self, region: str) -> bool:
        """Check if region should be processed."""
        if "all" in self.regions:
            return True
        return region in self.regions


def load_config(path: Optional[str] = None) -> Config:
    """Load config from YAML file or return defaults.

    Args:
        path: Path to YAML config file. If None, returns default config.

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If specified path doesn't exist
        ValueError: If the file holds unknown keys or invalid values
        yaml.YAMLError: If YAML is invalid
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return _parse_config(data)


def _parse_config(data: Dict[str, Any]) -> Config:
    """Parse config dict into Config dataclass."""
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping")

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    regions = data.get("regions", ["all"])
    if isinstance(regions, str):
        regions = [regions]

    return Config(
        reference_region=data.get("reference_region", DEFAULT_REFERENCE_REGION),
        regions=regions,
        max_workers=data.get("max_workers"),
        profile=data.get("profile"),
        countdown=data.get("countdown", 5),
        json_logs=data.get("json_logs", False),
        verbosity=data.get("verbosity", 1),
    )
