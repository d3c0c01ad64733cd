"""Platform matching for OS constraints."""

from __future__ import annotations

import platform
from typing import TYPE_CHECKING

from userinput.logging_utils import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from userinput.model import OsConstraint

logger = get_logger(__name__)

# Constraint family -> platform.system() values belonging to it
OS_FAMILIES: dict[str, tuple[str, ...]] = {
    "windows": ("windows",),
    "mac": ("darwin",),
    "macosx": ("darwin",),
    "osx": ("darwin",),
    "linux": ("linux",),
    "unix": ("linux", "darwin", "freebsd", "openbsd", "netbsd", "sunos", "aix"),
    "bsd": ("freebsd", "openbsd", "netbsd"),
}

ARCH_ALIASES: dict[str, str] = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "i386": "x86",
    "i686": "x86",
    "arm64": "aarch64",
}


def _normalize_arch(arch: str) -> str:
    arch = arch.lower()
    return ARCH_ALIASES.get(arch, arch)


class PlatformMatcher:
    """Matches OS constraints against a platform description.

    The platform defaults to the one the interpreter runs on; tests and
    automated runs may describe another one explicitly.
    """

    def __init__(self, system: str | None = None, machine: str | None = None, release: str | None = None) -> None:
        """Initialize the matcher.

        Parameters
        ----------
        system : str | None, optional
            Operating system name as reported by ``platform.system()``
        machine : str | None, optional
            Machine architecture as reported by ``platform.machine()``
        release : str | None, optional
            OS release as reported by ``platform.release()``

        """
        self.system = (system if system is not None else platform.system()).lower()
        self.machine = _normalize_arch(machine if machine is not None else platform.machine())
        self.release = release if release is not None else platform.release()

    def matches(self, constraint: OsConstraint) -> bool:
        """Return True if every attribute the constraint sets matches this platform."""
        if constraint.family is not None:
            family = constraint.family.lower()
            if self.system not in OS_FAMILIES.get(family, (family,)):
                return False
        if constraint.name is not None and constraint.name.lower() != self.system:
            return False
        if constraint.arch is not None and _normalize_arch(constraint.arch) != self.machine:
            return False
        return constraint.version is None or self.release.startswith(constraint.version)

    def matches_current_platform(self, constraints: Sequence[OsConstraint]) -> bool:
        """Return True if no constraints are given or any of them matches.

        Parameters
        ----------
        constraints : Sequence[OsConstraint]
            The OS constraints of an entry, field or panel

        Returns
        -------
        bool
            Whether the constrained element applies on this platform

        """
        if not constraints:
            return True
        result = any(self.matches(constraint) for constraint in constraints)
        if not result:
            logger.debug("No OS constraint matches %s/%s: %s", self.system, self.machine, constraints)
        return result
