"""Tests for msi_version.py."""

import pytest

from msipack import InvalidVersionFormat, MsiVersion, normalize
from msipack.msi_version import MSI_FIELD_LIMIT, parse_safe_version, safe_version


# normalize tests
def test_normalize_plain_semver() -> None:
    """Test a strict semantic version gets the iteration appended."""
    result = normalize("1.2.3", 2)
    assert result.msi_version == "1.2.3.2"
    assert result.display_version == "1.2.3"


def test_normalize_strips_prerelease_and_build_metadata() -> None:
    """Test pre-release and git build metadata are dropped."""
    result = normalize("1.2.3-alpha.1+20140501194641.git.94.561b564", 2)
    assert result.msi_version == "1.2.3.2"
    assert result.display_version == "1.2.3"


def test_normalize_git_describe_version() -> None:
    """Test the iteration does not come from a git descriptor."""
    result = normalize("10.4.0+git.17.g0123abc", 1)
    assert result == ("10.4.0.1", "10.4.0")


def test_normalize_default_iteration() -> None:
    """Test the build iteration defaults to 1."""
    assert normalize("2.0.0").msi_version == "2.0.0.1"


def test_normalize_iteration_zero() -> None:
    """Test iteration zero is allowed."""
    assert normalize("0.0.1", 0).msi_version == "0.0.1.0"


@pytest.mark.parametrize(
    "version",
    ["0.0.0", "1.2.3", "65534.65534.65534", "4.10.200"],
)
@pytest.mark.parametrize("iteration", [0, 1, 7, 65534])
def test_normalize_appends_iteration(version: str, iteration: int) -> None:
    """Test msi_version is always the safe version plus the iteration."""
    result = normalize(version, iteration)
    assert result.msi_version == f"{version}.{iteration}"
    assert result.display_version == version


def test_normalize_keeps_leading_zeros_in_display_version() -> None:
    """Test the display version is the matched text, unmodified."""
    assert normalize("01.2.3", 1).display_version == "01.2.3"


@pytest.mark.parametrize(
    "version",
    ["", "1.2", "1", "v1.2.3", "release-1.2.3", "a.b.c", "1..2.3", " 1.2.3"],
)
def test_normalize_rejects_missing_safe_version(version: str) -> None:
    """Test versions without a leading major.minor.patch are rejected."""
    with pytest.raises(InvalidVersionFormat, match="Invalid version format"):
        normalize(version, 1)


@pytest.mark.parametrize("version", ["65535.0.0", "1.65535.0", "1.2.70000"])
def test_normalize_rejects_components_over_limit(version: str) -> None:
    """Test components above the MSI field limit are rejected, not clamped."""
    with pytest.raises(InvalidVersionFormat, match=str(MSI_FIELD_LIMIT)):
        normalize(version, 1)


@pytest.mark.parametrize(
    "version", ["9" * 5000 + ".0.0", "1." + "9" * 5000 + ".0", "1.2." + "9" * 5000]
)
def test_normalize_rejects_huge_components(version: str) -> None:
    """Test components too long for int conversion are a version error."""
    with pytest.raises(InvalidVersionFormat, match="must be between"):
        normalize(version, 1)


def test_normalize_accepts_zero_padded_components() -> None:
    """Test leading zeros do not count towards the field length."""
    assert parse_safe_version("0000001.2.3") == (1, 2, 3)
    assert normalize("0000001.2.3", 1).display_version == "0000001.2.3"


def test_normalize_rejects_iteration_over_limit() -> None:
    """Test the iteration has to fit in an MSI field too."""
    with pytest.raises(InvalidVersionFormat):
        normalize("1.2.3", MSI_FIELD_LIMIT + 1)


def test_normalize_rejects_negative_iteration() -> None:
    """Test negative iterations are rejected."""
    with pytest.raises(InvalidVersionFormat):
        normalize("1.2.3", -1)


def test_normalize_rejects_non_string() -> None:
    """Test non-string versions are rejected."""
    with pytest.raises(InvalidVersionFormat):
        normalize(1.2, 1)  # type: ignore[arg-type]


def test_invalid_version_format_is_value_error() -> None:
    """Test InvalidVersionFormat can be caught as ValueError."""
    with pytest.raises(ValueError):
        normalize("nope", 1)


# safe version tests
def test_parse_safe_version() -> None:
    """Test the numeric components are extracted."""
    assert parse_safe_version("3.14.15-rc.2") == (3, 14, 15)


def test_safe_version_ignores_fourth_component() -> None:
    """Test only the first three components are kept."""
    assert safe_version("1.2.3.4") == "1.2.3"


# MsiVersion tests
def test_msi_version_parse() -> None:
    """Test parsing a strict four field version."""
    version = MsiVersion.parse("1.2.3.4")
    assert version == MsiVersion(1, 2, 3, 4)
    assert str(version) == "1.2.3.4"
    assert version.display == "1.2.3"
    assert repr(version) == "MsiVersion(1, 2, 3, 4)"


@pytest.mark.parametrize("version", ["1.2.3", "1.2.3.4.5", "1.2.3.x", "1.2.3.4-rc"])
def test_msi_version_parse_invalid(version: str) -> None:
    """Test parse only accepts exactly four numeric fields."""
    with pytest.raises(InvalidVersionFormat):
        MsiVersion.parse(version)


def test_msi_version_rejects_out_of_range_fields() -> None:
    """Test constructing a version with an oversized field fails."""
    with pytest.raises(InvalidVersionFormat):
        MsiVersion(1, 2, 3, 70000)


def test_msi_version_parse_rejects_huge_fields() -> None:
    """Test a strict version with a huge field is a version error."""
    with pytest.raises(InvalidVersionFormat):
        MsiVersion.parse("1.2.3." + "9" * 5000)


def test_msi_version_ordering() -> None:
    """Test versions compare numerically field by field."""
    assert MsiVersion.parse("1.2.3.4") < MsiVersion.parse("1.2.10.0")
    assert MsiVersion.parse("1.2.3.2") > MsiVersion.parse("1.2.3.1")
    assert max(MsiVersion.parse("2.0.0.0"), MsiVersion.parse("10.0.0.0")) == (
        MsiVersion(10, 0, 0, 0)
    )


def test_msi_version_from_build_version() -> None:
    """Test deriving an MsiVersion from an arbitrary build version."""
    version = MsiVersion.from_build_version("1.2.3-beta+exp.sha.5114f85", 9)
    assert version == MsiVersion(1, 2, 3, 9)


def test_msi_version_from_build_version_rejects_bool_iteration() -> None:
    """Test a bool is not accepted as an iteration."""
    with pytest.raises(InvalidVersionFormat):
        MsiVersion.from_build_version("1.2.3", True)


def test_msi_version_is_hashable() -> None:
    """Test versions can be used as dictionary keys."""
    versions = {MsiVersion(1, 0, 0, 1): "a"}
    assert versions[MsiVersion.parse("1.0.0.1")] == "a"
