from __future__ import annotations

"""
Manage custom distribution schemes (add, remove).
"""

from typing import Optional

from desweal.errors import DeswealError, NotFoundError, ValidationError
from desweal.model.config_io import load_schemes_config, parse_bucket_spec, save_schemes_config
from desweal.model.distribution import SchemeConfig
from desweal.services.distribution_engine import DistributionEngine
from desweal.workspace import Workspace
from .util import console, print_error


def run(
    *,
    add: Optional[str] = None,
    remove: Optional[str] = None,
    buckets: Optional[list[str]] = None,
    description: Optional[str] = None,
    workspace: Workspace,
    write: bool = False,
) -> int:
    """Add or remove a custom scheme.

    Actions (mutually exclusive):
    - --add NAME --bucket LABEL=PCT ...: Add a scheme; percentages must sum to 100
    - --remove NAME: Remove a custom scheme

    Returns:
        Exit code (0 on success, 1 on error)
    """
    if (add is None) == (remove is None):
        console.print("[red]Error:[/] Specify exactly one action: --add or --remove")
        return 1

    try:
        config = load_schemes_config(workspace.schemes_config)
        if add:
            updated = _add(config, add, buckets or [], description)
            console.print(f"[green]Scheme '{add}' is valid[/]")
        else:
            updated = _remove(config, remove)
            console.print(f"[green]Removing scheme '{remove}'[/]")
    except DeswealError as e:
        print_error(e)
        return 1

    if not write:
        console.print("[dim]Dry-run: use --write to persist[/]")
        return 0

    save_schemes_config(workspace.schemes_config, updated)
    console.print(f"[green]Saved[/] {workspace.schemes_config}")
    return 0


def _add(config: SchemeConfig, name: str, bucket_specs: list[str], description: Optional[str]) -> SchemeConfig:
    if not bucket_specs:
        raise ValidationError("At least one --bucket LABEL=PCT is required")
    if config.find_scheme(name):
        raise ValidationError(f"Scheme already exists: {name}")

    parsed: dict[str, str] = {}
    for spec in bucket_specs:
        label, pct = parse_bucket_spec(spec)
        if label in parsed:
            raise ValidationError(f"Duplicate bucket label: {label}")
        parsed[label] = pct

    scheme = DistributionEngine().build_custom(name, parsed)
    if description:
        scheme = scheme.model_copy(update={"description": description})
    return SchemeConfig(schemes=[*config.schemes, scheme])


def _remove(config: SchemeConfig, name: str) -> SchemeConfig:
    if config.find_scheme(name) is None:
        raise NotFoundError("Scheme", name)
    return SchemeConfig(schemes=[s for s in config.schemes if s.name != name])
