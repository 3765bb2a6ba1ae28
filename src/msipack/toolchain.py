"""Invocation of the WiX compiler, linker and signtool."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Self

from .exceptions import ToolchainError
from .parameter_set import SigningIdentity

logger = logging.getLogger(__name__)


class WixToolchain:
    """Runs the external tools that turn WiX sources into a signed MSI.

    Every command blocks until the process exits. A non-zero exit status is
    fatal and is never retried.
    """

    def __init__(
        self: Self,
        candle: str = "candle.exe",
        light: str = "light.exe",
        signtool: str = "signtool.exe",
    ) -> None:
        """Initialize the toolchain.

        Args:
            candle: Path or name of the WiX compiler.
            light: Path or name of the WiX linker.
            signtool: Path or name of the Windows SDK signing tool.
        """
        self.candle = candle
        self.light = light
        self.signtool = signtool

    def compile(
        self: Self,
        source: Path,
        wixobj: Path,
        *,
        extensions: Sequence[str] = (),
        cwd: Path | None = None,
    ) -> str:
        """Compile a WiX source into an object file.

        Args:
            source: The .wxs file.
            wixobj: Output .wixobj path.
            extensions: WiX extensions to load.
            cwd: Working directory, normally the staging directory so that
                relative includes resolve.

        Returns:
            Captured output of the compiler.

        Raises:
            ToolchainError: If the compiler fails.
        """
        command = [self.candle, "-nologo", "-out", str(wixobj)]
        command.extend(_extension_args(extensions))
        command.append(str(source))
        return self._run(command, cwd)

    def link(  # noqa: PLR0913
        self: Self,
        wixobj: Path,
        localization: Path,
        msi: Path,
        *,
        culture: str = "en-us",
        extensions: Sequence[str] = (),
        delay_validation: bool = False,
        cwd: Path | None = None,
    ) -> str:
        """Link a compiled object into an MSI package.

        Args:
            wixobj: The .wixobj produced by ``compile``.
            localization: The .wxl localization file.
            msi: Output package path.
            culture: Culture to link for.
            extensions: WiX extensions to load.
            delay_validation: Skip ICE validation.
            cwd: Working directory.

        Returns:
            Captured output of the linker.

        Raises:
            ToolchainError: If the linker fails.
        """
        command = [self.light, "-nologo"]
        if delay_validation:
            command.append("-sval")
        command.extend(_extension_args(extensions))
        command.extend(
            [
                f"-cultures:{culture}",
                "-loc",
                str(localization),
                "-out",
                str(msi),
                str(wixobj),
            ]
        )
        return self._run(command, cwd)

    def sign(self: Self, path: Path, identity: SigningIdentity) -> str:
        """Sign and timestamp a file.

        Timestamp servers are tried in order until one of them works.

        Args:
            path: File to sign.
            identity: Certificate to sign with.

        Returns:
            Captured output of the successful signtool run.

        Raises:
            ToolchainError: If signing fails with every timestamp server.
        """
        last_error: ToolchainError | None = None
        for server in identity.timestamp_servers:
            command = [
                self.signtool,
                "sign",
                "/v",
                "/sha1",
                identity.thumbprint,
                "/s",
                identity.store,
            ]
            if identity.machine_store:
                command.append("/sm")
            command.extend(
                [
                    "/fd",
                    identity.algorithm,
                    "/tr",
                    server,
                    "/td",
                    identity.algorithm,
                    str(path),
                ]
            )
            try:
                return self._run(command, None)
            except ToolchainError as e:
                logger.warning("Signing with timestamp server %s failed", server)
                last_error = e

        if last_error is None:
            raise ToolchainError([self.signtool, "sign"], None, "No timestamp servers")
        raise last_error

    def _run(self: Self, command: list[str], cwd: Path | None) -> str:
        logger.info("Executing: %s", " ".join(command))
        try:
            proc = subprocess.run(
                command,
                cwd=str(cwd) if cwd else None,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
            )
        except OSError as e:
            raise ToolchainError(command, None, str(e)) from e

        output = proc.stdout or ""
        errors = proc.stderr or ""
        if proc.returncode != 0:
            raise ToolchainError(command, proc.returncode, output + errors)
        logger.debug("%s", output)
        if errors.strip():
            logger.warning("%s wrote to stderr: %s", command[0], errors.strip())
        return output


def _extension_args(extensions: Sequence[str]) -> list[str]:
    args: list[str] = []
    for extension in extensions:
        args.extend(["-ext", extension])
    return args
