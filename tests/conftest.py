"""Shared fixtures."""

from pathlib import Path

import pytest

from msipack import MsiPackager, ParameterSet, Project
from msipack.wix_templates import WixTemplateRenderer


@pytest.fixture
def project() -> Project:
    """A project at version 1.2.3, iteration 2."""
    return Project(
        name="project",
        homepage="https://example.com",
        install_dir="C:/project",
        build_version="1.2.3",
        build_iteration="2",  # type: ignore[arg-type]
        maintainer="Chef Software",
    )


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """An existing staging directory."""
    path = tmp_path / "staging" / "dir"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    """Where finished packages go. Not created up front."""
    return tmp_path / "package" / "dir"


@pytest.fixture
def parameters() -> ParameterSet:
    """An empty parameter set."""
    return ParameterSet()


@pytest.fixture
def renderer(
    project: Project, parameters: ParameterSet, staging_dir: Path
) -> WixTemplateRenderer:
    """A renderer writing into the staging directory."""
    return WixTemplateRenderer(project, parameters, staging_dir)


@pytest.fixture
def packager(project: Project, staging_dir: Path, package_dir: Path) -> MsiPackager:
    """A packager for the test project."""
    return MsiPackager(project, staging_dir, package_dir)
