"""Validated packager attributes."""

import re
from collections.abc import Mapping, MutableMapping
from typing import Any, Final, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidValue, MissingRequiredAttribute

DEFAULT_LOCALIZATION = "en-us"
DEFAULT_TIMESTAMP_SERVERS = (
    "http://timestamp.digicert.com",
    "http://timestamp.verisign.com/scripts/timestamp.dll",
)

# Preprocessor variable names as accepted by $(var.Name).
DEFINE_NAME_PATTERN: Final = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")


def check_define_value(attribute: str, value: str) -> None:
    """Check a value can be written verbatim into ``<?define Name="Value" ?>``.

    Processing instructions are not entity-decoded, so the value is written
    as is and may not contain a double quote or close the instruction.

    Raises:
        InvalidValue: If ``value`` is not a str or contains ``"`` or ``?>``.
    """
    if not isinstance(value, str):
        raise InvalidValue(attribute, "a str", value)
    if '"' in value or "?>" in value:
        raise InvalidValue(attribute, "a str without '\"' or '?>'", value)


def check_define_name(name: str) -> None:
    """Check a name is a valid preprocessor variable name.

    Raises:
        InvalidValue: If ``name`` is not a str or not a valid identifier.
    """
    if not isinstance(name, str) or not DEFINE_NAME_PATTERN.fullmatch(name):
        raise InvalidValue(
            "parameters", f"names matching {DEFINE_NAME_PATTERN.pattern}", name
        )


class _Unset:
    """Marker for attributes that were never configured."""

    def __repr__(self: Self) -> str:
        return "<unset>"


_UNSET: Final = _Unset()


class SigningIdentity(BaseModel):
    """Certificate used to sign the finished package.

    Attributes:
        thumbprint: SHA1 thumbprint of the certificate.
        store: Certificate store name.
        algorithm: File digest and timestamp digest algorithm.
        machine_store: Look the certificate up in the machine store.
        timestamp_servers: RFC 3161 servers tried in order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    thumbprint: str = Field(min_length=1)
    store: str = "My"
    algorithm: str = "SHA256"
    machine_store: bool = False
    timestamp_servers: tuple[str, ...] = DEFAULT_TIMESTAMP_SERVERS


class ParameterSet:
    """Configuration of a single MSI packaging run.

    Every setter validates its argument before storing anything, so a rejected
    value leaves the previous state untouched.
    """

    def __init__(self: Self) -> None:
        """Initialize an empty parameter set."""
        self._upgrade_code: str | _Unset = _UNSET
        self._parameters: MutableMapping[str, str] = {}
        self._localization = DEFAULT_LOCALIZATION
        self._wix_candle_extensions: list[str] = []
        self._wix_light_extensions: list[str] = []
        self._delay_validation = False
        self._signing_identity: SigningIdentity | None = None

    @property
    def upgrade_code(self: Self) -> str:
        """The upgrade code shared by all versions of the product.

        Raises:
            MissingRequiredAttribute: If it was never set.
        """
        if isinstance(self._upgrade_code, _Unset):
            raise MissingRequiredAttribute("upgrade_code")
        return self._upgrade_code

    def set_upgrade_code(self: Self, value: str) -> None:
        """Set the upgrade code, conventionally a GUID.

        Raises:
            InvalidValue: If ``value`` is not a string or contains ``"`` or
                ``?>``.
        """
        check_define_value("upgrade_code", value)
        self._upgrade_code = value

    @property
    def parameters(self: Self) -> MutableMapping[str, str]:
        """Extra preprocessor constants for the parameters file.

        The stored mapping itself is returned, not a copy, so callers may extend
        it before rendering.
        """
        return self._parameters

    def set_parameters(self: Self, value: MutableMapping[str, str]) -> None:
        """Replace the extra preprocessor constants.

        Raises:
            InvalidValue: If ``value`` is not a mapping of preprocessor names to
                strings that can be written into a define.
        """
        if not isinstance(value, Mapping):
            raise InvalidValue("parameters", "a mapping", value)
        for key, item in value.items():
            check_define_name(key)
            check_define_value(f"parameters[{key!r}]", item)
        self._parameters = value

    @property
    def localization(self: Self) -> str:
        """Culture of the localization file, e.g. "en-us"."""
        return self._localization

    def set_localization(self: Self, culture: str) -> None:
        """Set the localization culture.

        Raises:
            InvalidValue: If ``culture`` is not a non-empty string.
        """
        if not isinstance(culture, str) or not culture.strip():
            raise InvalidValue("localization", "a non-empty str", culture)
        self._localization = culture.strip().lower()

    @property
    def wix_candle_extensions(self: Self) -> list[str]:
        """WiX extensions passed to the compiler."""
        return list(self._wix_candle_extensions)

    def add_wix_candle_extension(self: Self, extension: str) -> None:
        """Add a compiler extension such as "WixUtilExtension"."""
        self._add_extension(
            "wix_candle_extension", self._wix_candle_extensions, extension
        )

    @property
    def wix_light_extensions(self: Self) -> list[str]:
        """WiX extensions passed to the linker."""
        return list(self._wix_light_extensions)

    def add_wix_light_extension(self: Self, extension: str) -> None:
        """Add a linker extension such as "WixUIExtension"."""
        self._add_extension(
            "wix_light_extension", self._wix_light_extensions, extension
        )

    @property
    def delay_validation(self: Self) -> bool:
        """Whether ICE validation is skipped when linking."""
        return self._delay_validation

    def set_delay_validation(self: Self, value: bool) -> None:
        """Skip ICE validation at link time.

        Raises:
            InvalidValue: If ``value`` is not a bool.
        """
        if not isinstance(value, bool):
            raise InvalidValue("delay_validation", "true or false", value)
        self._delay_validation = value

    @property
    def signing_identity(self: Self) -> SigningIdentity | None:
        """Certificate used to sign the package, or None for unsigned builds."""
        return self._signing_identity

    def set_signing_identity(self: Self, thumbprint: str, **params: Any) -> None:
        """Sign the package with the given certificate.

        Args:
            thumbprint: Certificate thumbprint.
            **params: Any of ``store``, ``algorithm``, ``machine_store`` and
                ``timestamp_servers``. A single timestamp server may be given as
                a string.

        Raises:
            InvalidValue: If the thumbprint or any parameter is invalid.
        """
        if not isinstance(thumbprint, str):
            raise InvalidValue("signing_identity", "a str thumbprint", thumbprint)

        servers = params.get("timestamp_servers")
        if isinstance(servers, str):
            params["timestamp_servers"] = (servers,)

        try:
            identity = SigningIdentity(thumbprint=thumbprint, **params)
        except ValidationError as e:
            raise InvalidValue("signing_identity", str(e), params) from e
        self._signing_identity = identity

    @staticmethod
    def _add_extension(attribute: str, extensions: list[str], extension: str) -> None:
        if not isinstance(extension, str) or not extension:
            raise InvalidValue(attribute, "a non-empty str", extension)
        if extension not in extensions:
            extensions.append(extension)
