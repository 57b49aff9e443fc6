"""
Manifest reader for Node projects.

Reads the declared dependencies from a package.json and merges the
dependency categories into a single ``name -> declared range`` mapping.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from opencheck.core.exceptions import ManifestError, ValidationError
from opencheck.core.validation import validate_package_name

logger = logging.getLogger(__name__)


class ManifestReader:
    """Read and merge declared dependencies from package.json."""

    MANIFEST_NAME = "package.json"

    # Merged in this order; a name declared twice keeps the later range
    DEFAULT_SECTIONS = ("dependencies", "devDependencies")

    def __init__(self, sections: Optional[tuple[str, ...]] = None):
        """Initialize the reader.

        Args:
            sections: Manifest sections to merge, in precedence order
                (later wins). Defaults to dependencies then devDependencies.
        """
        self.sections = sections or self.DEFAULT_SECTIONS

    def find_manifest(self, project_path: Path) -> Path:
        """Locate package.json for a project directory or file path.

        Raises:
            ManifestError: If no manifest exists at the path.
        """
        manifest = project_path / self.MANIFEST_NAME if project_path.is_dir() else project_path
        if not manifest.is_file():
            raise ManifestError(str(manifest), "File does not exist")
        return manifest

    def read(self, project_path: Path) -> dict[str, str]:
        """Read the merged dependency mapping of a project.

        Args:
            project_path: Project directory or path to a package.json.

        Returns:
            Mapping of package name to declared version range, in
            declaration order.

        Raises:
            ManifestError: If the manifest is missing or is not valid JSON.
        """
        manifest = self.find_manifest(project_path)

        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(str(manifest), str(e))
        except json.JSONDecodeError as e:
            raise ManifestError(str(manifest), f"Invalid JSON: {e}")

        if not isinstance(data, dict):
            raise ManifestError(str(manifest), "Top-level value must be an object")

        return self.merge(data, source=str(manifest))

    def merge(self, manifest: dict, source: str = MANIFEST_NAME) -> dict[str, str]:
        """Merge the configured sections of a parsed manifest.

        Entries with an invalid package name or a non-string range are
        skipped with a warning.
        """
        merged: dict[str, str] = {}

        for section in self.sections:
            entries = manifest.get(section) or {}
            if not isinstance(entries, dict):
                raise ManifestError(source, f"'{section}' must be an object")

            for name, declared_range in entries.items():
                try:
                    validate_package_name(name)
                except ValidationError as e:
                    logger.warning("Skipping %s in %s: %s", name, section, e)
                    continue
                if not isinstance(declared_range, str):
                    logger.warning(
                        "Skipping %s in %s: version range is not a string", name, section
                    )
                    continue
                merged[name] = declared_range

        logger.debug("Read %d dependencies from %s", len(merged), source)
        return merged
