"""
Payload template loading.

Reads message templates relative to the configured template directory.

Dependencies: pathlib (stdlib)
System role: Template source for scenario send and receive steps
"""

import logging
from pathlib import Path

from simulator.core.exceptions import TemplateNotFoundError

logger = logging.getLogger(__name__)


class TemplateLoader:
    """Loads and caches payload templates from a directory."""

    def __init__(self, template_path: str | Path, encoding: str = "utf-8") -> None:
        """
        Initialize template loader.

        Args:
            template_path: Directory holding template files
            encoding: File encoding used when reading templates
        """
        self.template_path = Path(template_path)
        self.encoding = encoding
        self._cache: dict[str, str] = {}

    def resolve(self, name: str) -> Path:
        """
        Resolve a template name to a file inside the template directory.

        Raises:
            TemplateNotFoundError: If the file is missing or outside the directory
        """
        base = self.template_path.resolve()
        candidate = (base / name).resolve()
        if base != candidate and base not in candidate.parents:
            raise TemplateNotFoundError(name, str(self.template_path))
        if not candidate.is_file():
            raise TemplateNotFoundError(name, str(self.template_path))
        return candidate

    def load(self, name: str) -> str:
        """
        Load template content by relative name.

        Args:
            name: Template file name relative to the template directory

        Returns:
            str: Template content

        Raises:
            TemplateNotFoundError: If the template cannot be read
        """
        if name in self._cache:
            return self._cache[name]

        path = self.resolve(name)
        content = path.read_text(encoding=self.encoding)
        self._cache[name] = content
        logger.debug("Loaded template %s from %s", name, path)
        return content

    def clear(self) -> None:
        self._cache.clear()
