"""
Project Context

Boundary to the host project: loading provider objects by name and
enumerating service entry points. The default implementation works
against the running interpreter's importable modules and installed
distributions.
"""
from __future__ import annotations

import importlib
import logging
from importlib.metadata import EntryPoint, entry_points
from typing import Any, Iterable

logger = logging.getLogger(__name__)


class ProjectContext:
    """Default project context backed by importlib.

    Subclass and override ``load_symbol`` / ``entry_points`` to expose a
    different environment (a virtualenv of the edited project, a test
    double, ...).

    Attributes:
        project_id: Stable identifier of the project.
    """

    def __init__(self, project_id: str = "default") -> None:
        self.project_id = project_id

    def load_symbol(self, name: str) -> Any:
        """Load an object by qualified name.

        Accepts ``"package.module:attr"`` or ``"package.module.attr"``.

        Raises:
            ImportError: If the module cannot be imported.
            AttributeError: If the attribute does not exist.
        """
        if ":" in name:
            module_name, _, attr_path = name.partition(":")
        else:
            module_name, _, attr_path = name.rpartition(".")
            if not module_name:
                raise ImportError(f"Not a qualified name: {name}")

        obj: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
        return obj

    def entry_points(self, group: str) -> Iterable[EntryPoint]:
        """Return installed entry points registered under ``group``."""
        return entry_points(group=group)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.project_id!r})"
