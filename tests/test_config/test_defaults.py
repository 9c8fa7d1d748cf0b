"""Unit tests for default configuration generation.

Tests cover:
- Script detection from package.json
- Dockerfile detection
- Generated configuration validity
- Writing the commented YAML file
"""

import json
from pathlib import Path

import pytest
import yaml

from release_tasks.config.defaults import (
    detect_dockerfile,
    detect_scripts,
    generate_default_config,
    write_default_config,
)
from release_tasks.config.loader import load_config
from release_tasks.config.models import ProjectSettings
from release_tasks.exceptions import ConfigurationError


class TestDetectScripts:
    """Tests for detect_scripts function."""

    def test_lint_and_build(self) -> None:
        """lint and build scripts map to npm run commands."""
        scripts = detect_scripts({"scripts": {"lint": "eslint .", "build": "tsc"}})
        assert scripts == {"lint": "npm run lint", "build": "npm run build"}

    def test_eslint_fallback(self) -> None:
        """An eslint script is used when there is no lint script."""
        assert detect_scripts({"scripts": {"eslint": "eslint ."}})["lint"] == "npm run eslint"

    def test_no_scripts(self) -> None:
        """Missing or malformed scripts yield no commands."""
        assert detect_scripts({}) == {"lint": None, "build": None}
        assert detect_scripts({"scripts": "nope"}) == {"lint": None, "build": None}


class TestDetectDockerfile:
    """Tests for detect_dockerfile function."""

    def test_root_dockerfile(self, project_dir: Path) -> None:
        (project_dir / "Dockerfile").write_text("FROM node:20\n")
        assert detect_dockerfile(project_dir) == "Dockerfile"

    def test_nested_dockerfile(self, project_dir: Path) -> None:
        (project_dir / "docker").mkdir()
        (project_dir / "docker" / "Dockerfile").write_text("FROM node:20\n")
        assert detect_dockerfile(project_dir) == "docker/Dockerfile"

    def test_no_dockerfile(self, project_dir: Path) -> None:
        assert detect_dockerfile(project_dir) is None


class TestGenerateDefaultConfig:
    """Tests for generate_default_config function."""

    def test_npm_project(self, demo_project: Path) -> None:
        """A public npm project enables npm publishing and detected tasks."""
        config = generate_default_config(demo_project)

        assert config["npm"] is True
        assert config["tasks"] == {"lint": "npm run lint", "build": "npm run build"}
        assert config["git"]["main_branch"] in ("main", "master")
        assert "container" not in config
        assert config["release"] == {"exit_on_failure": False}
        assert config["publish"] == {"exit_on_failure": True}

    def test_private_package_not_published(self, project_dir: Path) -> None:
        """Private packages do not enable npm publishing."""
        (project_dir / "package.json").write_text(
            json.dumps({"name": "demo", "version": "1.0.0", "private": True})
        )
        assert generate_default_config(project_dir)["npm"] is False

    def test_container_section_with_dockerfile(self, demo_project: Path) -> None:
        """A Dockerfile adds a container section with registry placeholders."""
        (demo_project / "Dockerfile").write_text("FROM node:20\n")

        config = generate_default_config(demo_project)

        assert config["container"]["dockerfile"] is None
        assert config["container"]["registry"]["url"] == "REGISTRY_URL"

    def test_generated_config_is_valid(self, demo_project: Path) -> None:
        """The generated dictionary validates as ProjectSettings."""
        (demo_project / "Dockerfile").write_text("FROM node:20\n")
        settings = ProjectSettings(**generate_default_config(demo_project))
        assert settings.container is not None
        assert settings.npm is True


class TestWriteDefaultConfig:
    """Tests for write_default_config function."""

    def test_written_file_loads(self, demo_project: Path) -> None:
        """The written file has a header and loads back as the same settings."""
        output = demo_project / "release_tasks.yml"

        write_default_config(output, project_root=demo_project)

        text = output.read_text()
        assert text.startswith("# ====")
        assert "# Pipeline Tasks" in text
        assert yaml.safe_load(text)["tasks"]["build"] == "npm run build"
        settings = load_config(project_root=demo_project)
        assert settings.tasks.lint == "npm run lint"
        assert settings.publish.exit_on_failure is True

    def test_creates_parent_directories(self, demo_project: Path) -> None:
        output = demo_project / "config" / "release_tasks.yml"
        write_default_config(output, project_root=demo_project)
        assert output.is_file()

    def test_unwritable_output(self, demo_project: Path) -> None:
        """Write failures raise ConfigurationError."""
        blocker = demo_project / "blocker"
        blocker.write_text("")

        with pytest.raises(ConfigurationError):
            write_default_config(blocker / "release_tasks.yml", project_root=demo_project)
