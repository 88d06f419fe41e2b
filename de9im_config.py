"""
DE-9IM Configuration Module

Centralized configuration for the relationship engine.
"""

from dataclasses import dataclass, field
from typing import Dict, Any
import json

from robust_kernel import Tolerance, DEFAULT_RELATIVE_TOLERANCE, DEFAULT_ABSOLUTE_TOLERANCE


@dataclass
class ToleranceConfig:
    """Coordinate comparison tolerance."""
    # epsilon = max(absolute, relative * max(1, max |coordinate|))
    relative: float = DEFAULT_RELATIVE_TOLERANCE
    absolute: float = DEFAULT_ABSOLUTE_TOLERANCE

    def to_tolerance(self) -> Tolerance:
        return Tolerance(relative=self.relative, absolute=self.absolute)


@dataclass
class RelateConfig:
    """Relationship engine configuration."""
    tolerance: ToleranceConfig = field(default_factory=ToleranceConfig)

    # Decomposition
    max_collection_depth: int = 64

    # Matrix construction
    use_envelope_shortcut: bool = True

    def __post_init__(self):
        if self.max_collection_depth < 1:
            raise ValueError(f"max_collection_depth must be positive, got {self.max_collection_depth}")


@dataclass
class De9imGlobalConfig:
    """Global configuration."""
    relate: RelateConfig = field(default_factory=RelateConfig)

    # Logging
    log_level: str = "WARNING"
    verbose: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            'relate': {
                'tolerance': {
                    'relative': self.relate.tolerance.relative,
                    'absolute': self.relate.tolerance.absolute,
                },
                'max_collection_depth': self.relate.max_collection_depth,
                'use_envelope_shortcut': self.relate.use_envelope_shortcut,
            },
            'log_level': self.log_level,
            'verbose': self.verbose,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'De9imGlobalConfig':
        """Build a config from a dictionary; missing keys keep their defaults."""
        relate_data = dict(data.get('relate', {}))
        tolerance = ToleranceConfig(**relate_data.pop('tolerance', {}))
        return cls(
            relate=RelateConfig(tolerance=tolerance, **relate_data),
            log_level=data.get('log_level', cls.log_level),
            verbose=data.get('verbose', cls.verbose),
        )

    def save(self, filepath: str):
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'De9imGlobalConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls.from_dict(data)


# Default global configuration instance
DEFAULT_CONFIG = De9imGlobalConfig()
