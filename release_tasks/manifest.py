"""Manifest (package.json) access.

The manifest is read fresh at every access. Writes round-trip the parsed
document, so keys other than ``name`` and ``version`` survive unchanged.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from release_tasks.exceptions import ManifestError, ManifestParseError

DEFAULT_MANIFEST_NAME = "package.json"


@dataclass
class Manifest:
    """Parsed manifest document.

    Attributes:
        data: Full parsed JSON object
        trailing_newline: Whether the file ended with a newline when read
    """

    data: dict[str, Any] = field(default_factory=dict)
    trailing_newline: bool = True

    @property
    def name(self) -> str | None:
        value = self.data.get("name")
        return value if isinstance(value, str) else None

    @property
    def version(self) -> str | None:
        value = self.data.get("version")
        return value if isinstance(value, str) else None

    @version.setter
    def version(self, value: str) -> None:
        self.data["version"] = value


def manifest_path(working_dir: Path, override: Path | str | None = None) -> Path:
    """Resolve the manifest location.

    Args:
        working_dir: Project root
        override: Optional path, relative to working_dir unless absolute

    Returns:
        Absolute manifest path
    """
    if override is None:
        return working_dir / DEFAULT_MANIFEST_NAME
    path = Path(override)
    return path if path.is_absolute() else working_dir / path


def read_manifest(path: Path) -> Manifest:
    """Read and parse a manifest file.

    A missing ``version`` key is not an error here.

    Raises:
        ManifestError: If the file cannot be read
        ManifestParseError: If the file is not a JSON object
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestError(
            f"Manifest not found: {path}",
            fix_hint="Run from the project root or pass --manifest",
        ) from None
    except OSError as e:
        raise ManifestError(f"Failed to read manifest {path}", details=str(e)) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(
            f"Invalid JSON in {path}",
            details=str(e),
            fix_hint="Check JSON syntax at the indicated line",
        ) from e

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"Manifest {path} must contain a JSON object",
            details=f"Found {type(data).__name__}",
        )

    return Manifest(data=data, trailing_newline=text.endswith("\n"))


def write_manifest(path: Path, manifest: Manifest) -> None:
    """Replace the manifest file with the given document.

    Uses 2-space indentation so version bumps produce a one-line diff.

    Raises:
        ManifestError: If the file cannot be written
    """
    text = json.dumps(manifest.data, indent=2, ensure_ascii=False)
    if manifest.trailing_newline:
        text += "\n"
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Failed to write manifest {path}", details=str(e)) from e
