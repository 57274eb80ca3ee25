"""
Bundled method and adapter scripts.

The scripts ship as package data under ``forne/bundled/``. A ResourceTable
is built once (usually at startup) and handed to whatever needs to look a
script up; nothing here is global.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib import resources
from typing import TYPE_CHECKING

from loguru import logger

from forne.errors import UnknownScript

if TYPE_CHECKING:
    from importlib.abc import Traversable

BUNDLED_PACKAGE = "forne"
BUNDLED_DIR = "bundled"


@dataclass(frozen=True)
class InbuiltScript:
    """A method or adapter bundled with forne, referred to by name."""

    name: str


@dataclass(frozen=True)
class CustomScript:
    """
    A user-supplied method or adapter.

    For methods, `name` is what gets recorded on the set, so two different
    scripts must never share one. Prefixing the author's handle
    (``alice/powerlearn``) keeps names apart.
    """

    name: str
    body: str


RawScript = InbuiltScript | CustomScript
RawMethod = RawScript
RawAdapter = RawScript


@dataclass(frozen=True)
class ResourceTable:
    """Name -> source tables for bundled methods and adapters."""

    methods: Mapping[str, str] = field(default_factory=dict)
    adapters: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def bundled(cls) -> ResourceTable:
        """Load the scripts shipped inside the forne package."""
        root = resources.files(BUNDLED_PACKAGE).joinpath(BUNDLED_DIR)
        table = cls(
            methods=_read_scripts(root.joinpath("methods")),
            adapters=_read_scripts(root.joinpath("adapters")),
        )
        logger.debug(
            f"Loaded {len(table.methods)} bundled method(s) and {len(table.adapters)} adapter(s)"
        )
        return table

    def method_names(self) -> list[str]:
        return sorted(self.methods)

    def adapter_names(self) -> list[str]:
        return sorted(self.adapters)

    def is_inbuilt_method(self, name: str) -> bool:
        """Whether a name (or, from a CLI, possibly a path) is a bundled method."""
        return name in self.methods

    def is_inbuilt_adapter(self, name: str) -> bool:
        return name in self.adapters

    def method_source(self, name: str) -> str:
        """
        Get the source of a bundled method.

        Raises:
            UnknownScript: If no bundled method has this name.
        """
        try:
            return self.methods[name]
        except KeyError:
            raise UnknownScript("method", name) from None

    def adapter_source(self, name: str) -> str:
        """
        Get the source of a bundled adapter.

        Raises:
            UnknownScript: If no bundled adapter has this name.
        """
        try:
            return self.adapters[name]
        except KeyError:
            raise UnknownScript("adapter", name) from None


def _read_scripts(directory: Traversable) -> dict[str, str]:
    """Read every ``*.py`` script in a directory, keyed by file stem."""
    scripts: dict[str, str] = {}
    if not directory.is_dir():
        return scripts
    for entry in directory.iterdir():
        if entry.is_file() and entry.name.endswith(".py") and not entry.name.startswith("_"):
            scripts[entry.name[: -len(".py")]] = entry.read_text(encoding="utf-8")
    return scripts
