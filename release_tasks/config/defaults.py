"""Default configuration generation.

Inspects the project (manifest scripts, Dockerfile, git branch) and writes a
commented release_tasks.yml that the user can edit.
"""

import json
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from release_tasks.exceptions import ConfigurationError
from release_tasks.manifest import DEFAULT_MANIFEST_NAME

DOCKERFILE_CANDIDATES = ["Dockerfile", "docker/Dockerfile", ".docker/Dockerfile"]

MAIN_BRANCH_NAMES = ("main", "master")

# Manifest script names tried, in order, for each task
SCRIPT_CANDIDATES = {
    "lint": ("lint", "eslint"),
    "build": ("build",),
}

# (settings key, banner title); None continues the previous banner
SECTIONS = [
    ("manifest", "Manifest & Tags"),
    ("tag_with_name", None),
    ("strict_versions", None),
    ("git", "Main Branch & Remote"),
    ("tasks", "Pipeline Tasks"),
    ("npm", "npm Publishing"),
    ("container", "Container Publishing"),
    ("release", "Failure Policy"),
    ("publish", None),
]


def get_git_default_branch(project_root: Path) -> str:
    """Guess the main branch from the checked out branch.

    Returns:
        ``main`` or ``master`` when HEAD is on one of them, else ``master``
    """
    try:
        proc = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=project_root,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, OSError):
        return "master"
    current = proc.stdout.strip()
    if proc.returncode == 0 and current in MAIN_BRANCH_NAMES:
        return current
    return "master"


def load_manifest_data(project_root: Path) -> dict[str, Any]:
    """Read package.json for detection, returning {} when unusable."""
    package_json = project_root / DEFAULT_MANIFEST_NAME
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def detect_scripts(manifest: dict[str, Any]) -> dict[str, str | None]:
    """Map manifest scripts to lint and build commands."""
    pkg_scripts = manifest.get("scripts")
    if not isinstance(pkg_scripts, dict):
        pkg_scripts = {}
    return {
        task: next((f"npm run {name}" for name in names if name in pkg_scripts), None)
        for task, names in SCRIPT_CANDIDATES.items()
    }


def detect_dockerfile(project_root: Path) -> str | None:
    """Return the first Dockerfile found, relative to project_root."""
    for candidate in DOCKERFILE_CANDIDATES:
        if (project_root / candidate).is_file():
            return candidate
    return None


def generate_default_config(project_root: Path) -> dict[str, Any]:
    """Generate default configuration based on the detected project.

    Args:
        project_root: Project root directory

    Returns:
        Configuration dictionary matching the ProjectSettings schema
    """
    manifest = load_manifest_data(project_root)
    scripts = detect_scripts(manifest)
    dockerfile = detect_dockerfile(project_root)

    config: dict[str, Any] = {
        "manifest": DEFAULT_MANIFEST_NAME,
        "tag_with_name": False,
        "strict_versions": False,
        "git": {
            "main_branch": get_git_default_branch(project_root),
            "remote": "origin",
        },
        "tasks": {
            "lint": scripts["lint"],
            "build": scripts["build"],
        },
        "npm": bool(manifest) and not manifest.get("private", False),
    }

    if dockerfile is not None:
        config["container"] = {
            # Only pass -f when the Dockerfile is not at the root
            "dockerfile": dockerfile if dockerfile != "Dockerfile" else None,
            "registry": {
                "url": "REGISTRY_URL",
                "namespace": "NAMESPACE",
                "region": None,
                "profile": None,
                "login": "password-stdin",
            },
        }

    config["release"] = {"exit_on_failure": False}
    config["publish"] = {"exit_on_failure": True}
    return config


def generate_config_header(project_root: Path) -> str:
    """Build the comment block written above the generated settings."""
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    rule = "# " + "=" * 76
    lines = [
        rule,
        "# release-tasks configuration",
        rule,
        f"# Generated {stamp} for {project_root.name}",
        "#",
        "# Task commands run through the shell in the project root.",
        "# {version} in before/after_version_update is replaced with the new version.",
        "# Any value can be overridden with RELEASE_TASKS_<KEY> environment variables,",
        "# nested keys joined with __ (e.g. RELEASE_TASKS_GIT__MAIN_BRANCH=main).",
        "#",
        "# Regenerate with: release-tasks init-config --force",
        rule,
    ]
    return "\n".join(lines) + "\n\n"


def render_config(config: dict[str, Any], header: str) -> str:
    """Render settings as YAML with a banner before each section group."""
    parts = [header]
    for key, title in SECTIONS:
        if key not in config:
            continue
        if title:
            parts.append(f"# {'-' * 76}\n# {title}\n# {'-' * 76}\n")
        parts.append(
            yaml.safe_dump(
                {key: config[key]},
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        )
        parts.append("\n")
    return "".join(parts)


def write_default_config(output_path: Path, project_root: Path | None = None) -> None:
    """Detect project defaults and write them as a commented YAML file.

    Args:
        output_path: Destination file; parent directories are created
        project_root: Project inspected for defaults (defaults to cwd)

    Raises:
        ConfigurationError: If the file cannot be written
    """
    root = project_root if project_root is not None else Path.cwd()
    text = render_config(generate_default_config(root), generate_config_header(root))

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot write configuration to {output_path}",
            details=str(e),
            fix_hint="Choose another location with --output",
        ) from e
