"""
Import configuration.

Persisted as JSON so the same switches can be shared between the CLI and
embedding applications.
"""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)


@dataclass
class ImportConfig:
    """Switches consumed by the importer."""
    # Skip the whole-stream checksum pass (slightly corrupted but recoverable files)
    allow_loading_with_incorrect_checksum: bool = False
    # Do not ask the object repository to resolve required objects before import
    skip_object_check: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportConfig":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**{k: bool(v) for k, v in data.items() if k in known})

    @classmethod
    def load(cls, path) -> "ImportConfig":
        """Load config from a JSON file."""
        with open(Path(path), 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))

    def save(self, path):
        """Save config to a JSON file."""
        with open(Path(path), 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
