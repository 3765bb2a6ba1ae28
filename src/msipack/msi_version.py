"""Conversion of arbitrary build versions into MSI versions."""

import re
from dataclasses import dataclass
from typing import NamedTuple, Self

from .exceptions import InvalidVersionFormat

MSI_FIELD_LIMIT = 65534

_SAFE_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)", re.ASCII)
_MSI_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)\.(\d+)$", re.ASCII)
_FIELD_NAMES = ("major", "minor", "patch", "build")


class NormalizedVersion(NamedTuple):
    """The two version strings derived from a build version."""

    msi_version: str
    display_version: str


def _check_field(version: str, name: str, value: int) -> int:
    if value < 0 or value > MSI_FIELD_LIMIT:
        raise InvalidVersionFormat(
            version, f"{name} must be between 0 and {MSI_FIELD_LIMIT}, got {value}"
        )
    return value


def _parse_field(version: str, name: str, part: str) -> int:
    # Checked before int() so huge components never hit the int conversion limit.
    digits = part.lstrip("0") or "0"
    if len(digits) > len(str(MSI_FIELD_LIMIT)):
        raise InvalidVersionFormat(
            version, f"{name} must be between 0 and {MSI_FIELD_LIMIT}"
        )
    return _check_field(version, name, int(digits))


def _check_iteration(build_version: str, build_iteration: int) -> int:
    if not isinstance(build_iteration, int) or isinstance(build_iteration, bool):
        raise InvalidVersionFormat(
            build_version,
            f"build iteration must be an int, got {build_iteration!r}",
        )
    return _check_field(build_version, "build iteration", build_iteration)


@dataclass(frozen=True, order=True)
class MsiVersion:
    """Four field numeric version as understood by Windows Installer.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        build: Packaging build iteration.
    """

    major: int
    minor: int
    patch: int
    build: int

    def __post_init__(self: Self) -> None:
        """Reject fields outside the MSI range."""
        text = f"{self.major}.{self.minor}.{self.patch}.{self.build}"
        for name in ("major", "minor", "patch", "build"):
            _check_field(text, name, getattr(self, name))

    @classmethod
    def parse(cls, version_str: str) -> Self:
        """Parse a strict MSI version string.

        Args:
            version_str: Version string in format "major.minor.patch.build".

        Returns:
            Parsed MsiVersion instance.

        Raises:
            InvalidVersionFormat: If version string format is invalid.
        """
        match = _MSI_VERSION_RE.match(version_str)
        if match is None:
            raise InvalidVersionFormat(version_str)
        major, minor, patch, build = (
            _parse_field(version_str, name, part)
            for name, part in zip(_FIELD_NAMES, match.groups(), strict=True)
        )
        return cls(major, minor, patch, build)

    @classmethod
    def from_build_version(cls, build_version: str, build_iteration: int) -> Self:
        """Derive an MSI version from an arbitrary build version.

        Only the leading "major.minor.patch" of ``build_version`` is kept.
        Pre-release tags, build metadata and git descriptors are dropped and the
        build iteration becomes the fourth field.

        Args:
            build_version: Upstream version, e.g. "1.2.3-alpha.1+git.94.561b564".
            build_iteration: Packaging revision.

        Returns:
            The MSI version.

        Raises:
            InvalidVersionFormat: If no leading "major.minor.patch" exists or a
                field is outside the MSI range.
        """
        major, minor, patch = parse_safe_version(build_version)
        _check_iteration(build_version, build_iteration)
        return cls(major, minor, patch, build_iteration)

    @property
    def display(self: Self) -> str:
        """The user facing "major.minor.patch" form."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self: Self) -> str:
        """Return string representation of version.

        Returns:
            Version string in format "major.minor.patch.build".
        """
        return f"{self.major}.{self.minor}.{self.patch}.{self.build}"

    def __repr__(self: Self) -> str:
        """Return detailed string representation.

        Returns:
            Detailed version representation.
        """
        return f"MsiVersion({self.major}, {self.minor}, {self.patch}, {self.build})"


def _match_safe_version(build_version: str) -> re.Match[str]:
    if not isinstance(build_version, str):
        raise InvalidVersionFormat(build_version, "expected a string")

    match = _SAFE_VERSION_RE.match(build_version)
    if match is None:
        raise InvalidVersionFormat(
            build_version, "expected a leading 'major.minor.patch'"
        )

    for name, part in zip(_FIELD_NAMES[:3], match.groups(), strict=True):
        _parse_field(build_version, name, part)
    return match


def parse_safe_version(build_version: str) -> tuple[int, int, int]:
    """Extract the leading "major.minor.patch" of a build version.

    Args:
        build_version: Arbitrary upstream version string.

    Returns:
        The three numeric components.

    Raises:
        InvalidVersionFormat: If the prefix is missing or a component is larger
            than the MSI field limit.
    """
    match = _match_safe_version(build_version)
    major, minor, patch = (
        _parse_field(build_version, name, part)
        for name, part in zip(_FIELD_NAMES[:3], match.groups(), strict=True)
    )
    return major, minor, patch


def safe_version(build_version: str) -> str:
    """Return the "major.minor.patch" prefix of a build version, unmodified.

    Raises:
        InvalidVersionFormat: As for ``parse_safe_version``.
    """
    return _match_safe_version(build_version).group(0)


def normalize(build_version: str, build_iteration: int = 1) -> NormalizedVersion:
    """Derive the MSI and display versions of a build.

    Example:
        >>> normalize("1.2.3-alpha.1+20140501194641.git.94.561b564", 2)
        NormalizedVersion(msi_version='1.2.3.2', display_version='1.2.3')

    Raises:
        InvalidVersionFormat: If the build version or iteration cannot be
            represented in an MSI version.
    """
    display_version = safe_version(build_version)
    _check_iteration(build_version, build_iteration)
    return NormalizedVersion(
        msi_version=f"{display_version}.{build_iteration}",
        display_version=display_version,
    )
