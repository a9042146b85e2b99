"""
Workspace - centralized data path resolution for DESWEAL.

A Workspace represents the root directory containing all financial data.
All paths (event store, scheme and goal config) are computed relative
to this root.

Resolution priority:
1. Explicit path (--data-dir CLI option)
2. DESWEAL_DATA environment variable
3. Current working directory
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Workspace:
    """Root directory for all financial data paths."""

    root: Path

    @classmethod
    def resolve(cls, explicit: Path | None = None) -> Workspace:
        """Resolve workspace root from explicit path, env var, or CWD.

        Args:
            explicit: Explicitly provided path (highest priority)

        Returns:
            Workspace with resolved root
        """
        if explicit is not None:
            return cls(root=explicit)
        env = os.environ.get("DESWEAL_DATA")
        if env:
            return cls(root=Path(env))
        return cls(root=Path.cwd())

    @property
    def data_dir(self) -> Path:
        return self.root / "data"

    @property
    def event_store_path(self) -> Path:
        return self.data_dir / "events.db"

    @property
    def config_dir(self) -> Path:
        return self.root / "config"

    @property
    def schemes_config(self) -> Path:
        return self.config_dir / "schemes.yml"

    @property
    def goals_config(self) -> Path:
        return self.config_dir / "goals.yml"


__all__ = ["Workspace"]
