"""Template registry of named %-style format strings for log messages."""

import logging
import os
from types import MappingProxyType

import yaml

from action_logger.errors import TemplateRegistryFrozen

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES = {
    "GenericError": "An error occurred: %s",
    "UnexpectedError": "Unexpected error: %s",
    "UnhandledException": "Unhandled exception: %s",
    "ActionRecorded": "Action event (%s) recorded for customer %s",
    "ActionSaveFailed": "Failed to save action event for customer %s (%s)",
}


def format_message(fmt: str, *args) -> str:
    """Apply %-formatting without ever raising.

    A mismatch between placeholders and arguments produces a readable but
    malformed message instead of an exception.
    """
    if not args:
        try:
            return fmt % ()
        except (TypeError, ValueError):
            return fmt
    try:
        return fmt % args
    except (TypeError, ValueError) as exc:
        return f"{fmt} (format error: {exc}; args={list(args)!r})"


class TemplateRegistry:
    """Case-insensitive name -> format string mapping.

    Populate at startup, then call freeze() before the dispatcher's worker
    starts; lookups are lock-free and rely on no writes happening afterwards.
    """

    def __init__(self, templates: dict[str, str] | None = None):
        self._templates: dict[str, str] = {}
        self._frozen = False
        for name, fmt in (templates or {}).items():
            self.add_template(name, fmt)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def templates(self) -> MappingProxyType:
        """Read-only view keyed by upper-cased name."""
        return MappingProxyType(self._templates)

    def add_template(self, name: str, fmt: str):
        """Register fmt under name; an existing entry with the same name is replaced."""
        if self._frozen:
            raise TemplateRegistryFrozen(f"cannot add template {name!r}: registry is frozen")
        self._templates[name.upper()] = fmt

    def freeze(self):
        self._frozen = True

    def resolve(self, name: str, *args) -> str:
        """Render the template called name; unknown names are used as the format string."""
        fmt = self._templates.get(name.upper())
        if fmt is None:
            return format_message(name, *args)
        return format_message(fmt, *args)

    def load_default_templates(self):
        for name, fmt in DEFAULT_TEMPLATES.items():
            self.add_template(name, fmt)

    def load_templates_file(self, path: str) -> int:
        """Register every ``name: format`` pair from a YAML file.

        A missing file is skipped. Returns the number of templates loaded.
        """
        if not os.path.exists(path):
            logger.warning("Templates file %s not found, skipping", path)
            return 0

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            return 0
        if not isinstance(data, dict):
            raise ValueError(f"Templates file {path} must contain a mapping")

        for name, fmt in data.items():
            self.add_template(str(name), str(fmt))
        logger.info("Loaded %d templates from %s", len(data), path)
        return len(data)

    def __contains__(self, name: str) -> bool:
        return name.upper() in self._templates

    def __len__(self) -> int:
        return len(self._templates)
