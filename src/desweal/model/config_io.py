from __future__ import annotations

"""
Scheme and goal configuration I/O (YAML loading and saving).

Functions for reading and writing config/schemes.yml and config/goals.yml.

Privacy
- All operations are local file I/O only
- No network access
"""

from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from desweal.errors import ValidationError, describe_validation_error
from desweal.model.distribution import SchemeConfig
from desweal.model.goal import GoalConfig

TConfig = TypeVar("TConfig", bound=BaseModel)


def _load(path: Path, model: type[TConfig]) -> TConfig:
    if not path.exists():
        return model()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return model.model_validate(data)
    except yaml.YAMLError as e:
        raise ValidationError(f"{path}: malformed YAML: {e}") from e
    except PydanticValidationError as e:
        raise ValidationError(f"{path}: {describe_validation_error(e)}") from e


def _save(path: Path, config: BaseModel) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # mode="json" renders enums and Decimals as plain strings for YAML
    data = config.model_dump(exclude_none=True, mode="json")
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def load_schemes_config(path: Path) -> SchemeConfig:
    """Load custom distribution schemes from YAML (safe loader).

    Returns an empty SchemeConfig when the file is missing.

    Raises:
        ValidationError: If the file is not valid YAML or does not match the schema
    """
    return _load(path, SchemeConfig)


def save_schemes_config(path: Path, config: SchemeConfig) -> None:
    """Write custom distribution schemes to YAML, creating parent directories."""
    _save(path, config)


def load_goals_config(path: Path) -> GoalConfig:
    """Load savings goals from YAML (safe loader).

    Returns an empty GoalConfig when the file is missing.

    Raises:
        ValidationError: If the file is not valid YAML or does not match the schema
    """
    return _load(path, GoalConfig)


def save_goals_config(path: Path, config: GoalConfig) -> None:
    """Write savings goals to YAML, creating parent directories."""
    _save(path, config)


def parse_bucket_spec(spec: str) -> tuple[str, str]:
    """Parse a "label=percentage" bucket argument.

    Args:
        spec: Bucket spec string (e.g., "needs=50")

    Returns:
        Tuple of (label, percentage text)

    Raises:
        ValidationError: If the argument has no '=' or an empty label
    """
    if "=" not in spec:
        raise ValidationError(f"Bucket must be LABEL=PERCENT: {spec}")
    label, pct = spec.split("=", 1)
    label = label.strip()
    if not label:
        raise ValidationError(f"Bucket label is empty: {spec}")
    return label, pct.strip()


__all__ = [
    "load_goals_config",
    "load_schemes_config",
    "parse_bucket_spec",
    "save_goals_config",
    "save_schemes_config",
]
