"""
journey.core.config — Configuration for the journey journal.

Supports loading from YAML, environment variables, and programmatic
construction.  Every store receives its paths from a ``Config`` instead
of reaching for a process-wide location.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict


def _default_data_dir() -> Path:
    """``$JOURNEY_DATA_DIR`` if set, else ``./journey_data``."""
    if env_dir := os.environ.get("JOURNEY_DATA_DIR"):
        return Path(env_dir).expanduser()
    return Path("./journey_data")


@dataclass
class Config:
    """
    Central configuration object.

    Construct directly, via ``Config.from_yaml(path)``, or via
    ``Config.from_data_dir(path)`` for quick bootstrap.
    """

    # -- storage ------------------------------------------------------------
    data_dir: Path = field(default_factory=_default_data_dir)
    journals_filename: str = "journals.json"
    images_dirname: str = "JournalImages"
    defaults_filename: str = "defaults.yaml"

    # -- dashboard ----------------------------------------------------------
    search_debounce_seconds: float = 0.5
    snippet_length: int = 100

    # -- file locking -------------------------------------------------------
    lock_timeout: float = 5.0  # seconds to wait for a read-modify-write lock

    # -- logging ------------------------------------------------------------
    structured_logging: bool = False  # emit JSON log lines when True
    log_level: str = "INFO"

    # -----------------------------------------------------------------------
    # Derived paths (all relative to data_dir)
    # -----------------------------------------------------------------------

    @property
    def journals_path(self) -> Path:
        return self.data_dir / self.journals_filename

    @property
    def images_dir(self) -> Path:
        return self.data_dir / self.images_dirname

    @property
    def defaults_path(self) -> Path:
        return self.data_dir / self.defaults_filename

    @property
    def profile_images_dir(self) -> Path:
        # Profile pictures live beside the journal file, not in the
        # journal image directory.
        return self.data_dir

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir).expanduser().resolve()

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file.

        Any key in the YAML that matches a Config field is applied.
        Unknown keys are silently ignored so the file can carry other
        application settings alongside journey config.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as fh:
            raw: Dict[str, Any] = yaml.safe_load(fh) or {}

        # pull the journey section if nested, else use top-level
        data = raw.get("journey", raw) or {}

        if "data_dir" in data:
            data["data_dir"] = Path(data["data_dir"])

        known = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known}

        return cls(**filtered)

    @classmethod
    def from_data_dir(cls, data_dir: str | Path, **overrides: Any) -> "Config":
        """Quick constructor — just point at a data directory."""
        return cls(data_dir=Path(data_dir), **overrides)

    # -----------------------------------------------------------------------
    # Directory bootstrapping
    # -----------------------------------------------------------------------

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for d in (self.data_dir, self.images_dir, self.profile_images_dir):
            d.mkdir(parents=True, exist_ok=True)

    # -----------------------------------------------------------------------
    # Serialisation
    # -----------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a plain dict (YAML/JSON-safe)."""
        return {
            "data_dir": str(self.data_dir),
            "journals_filename": self.journals_filename,
            "images_dirname": self.images_dirname,
            "defaults_filename": self.defaults_filename,
            "search_debounce_seconds": self.search_debounce_seconds,
            "snippet_length": self.snippet_length,
            "lock_timeout": self.lock_timeout,
            "structured_logging": self.structured_logging,
            "log_level": self.log_level,
        }
