from __future__ import annotations

"""
Tests for schemes command.
"""

from pathlib import Path
from tempfile import TemporaryDirectory

from desweal.cli.command import scheme, schemes
from desweal.workspace import Workspace


class DescribeSchemesCommand:
    def it_should_list_presets_without_config(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))

            assert schemes.run(workspace=workspace) == 0
            assert not workspace.schemes_config.exists()

    def it_should_list_custom_schemes(self):
        with TemporaryDirectory() as tmpdir:
            workspace = Workspace(root=Path(tmpdir))
            scheme.run(add="saver", buckets=["all=100"], workspace=workspace, write=True)

            assert schemes.run(workspace=workspace) == 0
