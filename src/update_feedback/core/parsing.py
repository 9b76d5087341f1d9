"""Parsers for package identifier strings.

All parsers split from the right, so package names may contain dashes.
Version and release are assumed to be dash-free, which holds for every
RPM build identifier and is not re-validated here.
"""

from update_feedback.core.entities import NevraIdentity, PackageIdentity
from update_feedback.core.errors import ParseError


def _split_right(value: str, separator: str, parts: int, kind: str) -> list[str]:
    """Split from the right into exactly `parts` non-empty components."""
    components = value.rsplit(separator, parts - 1)
    
    if len(components) != parts or not all(components):
        raise ParseError(value, kind)
    
    return components


def parse_nvr(value: str) -> PackageIdentity:
    """Parse a ``name-version-release`` string."""
    name, version, release = _split_right(value.strip(), "-", 3, "NVR")
    return PackageIdentity(name, version, release)


def parse_nevra(value: str) -> NevraIdentity:
    """Parse a ``name-[epoch:]version-release.arch`` string.
    
    The epoch defaults to ``"0"`` when it is absent.
    """
    value = value.strip()
    nevr, arch = _split_right(value, ".", 2, "NEVRA")
    
    try:
        name, epoch_version, release = _split_right(nevr, "-", 3, "NEVRA")
    except ParseError:
        raise ParseError(value, "NEVRA") from None
    
    if ":" in epoch_version:
        epoch, version = epoch_version.split(":", 1)
        if not epoch or not version:
            raise ParseError(value, "NEVRA")
    else:
        epoch, version = "0", epoch_version
    
    return NevraIdentity(name, epoch, version, release, arch)


def parse_filename(value: str) -> NevraIdentity:
    """Parse a package file name such as ``dnf-4.2.18-2.fc32.src.rpm``."""
    value = value.strip()
    nevra, _extension = _split_right(value, ".", 2, "package file name")
    
    try:
        return parse_nevra(nevra)
    except ParseError:
        raise ParseError(value, "package file name") from None
