"""Matching of update records against the locally installed packages."""

from collections.abc import Iterable

from update_feedback.core.entities import NEVER, BuildIndex, CandidateUpdate, PackageIdentity
from update_feedback.core.parsing import parse_nvr


def match_installed(
    installed: Iterable[PackageIdentity], candidates: Iterable[CandidateUpdate]
) -> tuple[list[CandidateUpdate], BuildIndex]:
    """Find updates that have at least one build installed on this system.
    
    Returns:
        Tuple of (survivors, build index). An update appears in survivors once
        per matching build; use `finalize` to collapse duplicates.
    
    Raises:
        ParseError: if any build string of any candidate is malformed.
    """
    lookup = installed if isinstance(installed, (set, frozenset)) else set(installed)
    survivors: list[CandidateUpdate] = []
    index: BuildIndex = {}
    
    for update in candidates:
        # Parse every build first so one malformed build fails the whole run
        nvrs = [(build, parse_nvr(build)) for build in update.builds]
        
        for build, nvr in nvrs:
            if nvr in lookup:
                survivors.append(update)
                index.setdefault(update.alias, []).append(build)
    
    return survivors, index


def _presentation_key(update: CandidateUpdate) -> tuple:
    submitted = update.submitted_at
    return (submitted is None, submitted or NEVER, update.alias)


def finalize(survivors: Iterable[CandidateUpdate]) -> list[CandidateUpdate]:
    """Deduplicate matcher hits by alias and sort oldest submission first.
    
    Ties on the submission date are broken by alias. Updates without a
    submission date go last.
    """
    unique: dict[str, CandidateUpdate] = {}
    for update in survivors:
        unique.setdefault(update.alias, update)
    
    return sorted(unique.values(), key=_presentation_key)


def package_names(update: CandidateUpdate) -> set[str]:
    """Get the set of package names built by an update."""
    return {parse_nvr(build).name for build in update.builds}
