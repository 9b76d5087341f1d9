"""Persistent lists of ignored updates and blocked packages."""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from update_feedback.core.entities import CandidateUpdate
from update_feedback.core.errors import PersistenceError
from update_feedback.core.matcher import package_names

UPDATES_KEY = "ignored_updates"
PACKAGES_KEY = "ignored_packages"


@dataclass(frozen=True)
class IgnoreLists:
    """Aliases of ignored updates and names of blocked packages.
    
    Both collections behave like sets but are kept sorted so that the
    persisted document is deterministic.
    """
    
    ignored_updates: tuple[str, ...] = ()
    ignored_packages: tuple[str, ...] = ()
    
    @classmethod
    def create(
        cls, updates: Iterable[str] = (), packages: Iterable[str] = ()
    ) -> "IgnoreLists":
        return cls(tuple(sorted(set(updates))), tuple(sorted(set(packages))))
    
    def with_ignored_update(self, alias: str) -> "IgnoreLists":
        return IgnoreLists.create((*self.ignored_updates, alias), self.ignored_packages)
    
    def with_ignored_packages(self, names: Iterable[str]) -> "IgnoreLists":
        return IgnoreLists.create(self.ignored_updates, (*self.ignored_packages, *names))
    
    def without_ignored_package(self, name: str) -> "IgnoreLists":
        return IgnoreLists.create(
            self.ignored_updates, (p for p in self.ignored_packages if p != name)
        )
    
    def without_ignored_updates(self) -> "IgnoreLists":
        return IgnoreLists.create((), self.ignored_packages)
    
    def to_document(self) -> dict[str, list[str]]:
        return {
            UPDATES_KEY: list(self.ignored_updates),
            PACKAGES_KEY: list(self.ignored_packages),
        }


def prune(ignore_lists: IgnoreLists, survivors: Iterable[CandidateUpdate]) -> IgnoreLists:
    """Drop ignored aliases that no longer belong to an observed update."""
    current = {update.alias for update in survivors}
    return IgnoreLists.create(
        (alias for alias in ignore_lists.ignored_updates if alias in current),
        ignore_lists.ignored_packages,
    )


def is_blocked(update: CandidateUpdate, ignore_lists: IgnoreLists) -> bool:
    """Check if every package built by the update is blocked."""
    return package_names(update) <= set(ignore_lists.ignored_packages)


def filter_blocked(
    survivors: Iterable[CandidateUpdate], ignore_lists: IgnoreLists
) -> list[CandidateUpdate]:
    """Drop updates whose packages are all blocked; partially blocked ones stay."""
    return [update for update in survivors if not is_blocked(update, ignore_lists)]


def filter_ignored(
    survivors: Iterable[CandidateUpdate],
    ignore_lists: IgnoreLists,
    include_ignored: bool = False,
) -> list[CandidateUpdate]:
    """Drop previously ignored updates unless explicitly asked to keep them."""
    if include_ignored:
        return list(survivors)
    
    ignored = set(ignore_lists.ignored_updates)
    return [update for update in survivors if update.alias not in ignored]


def parse_document(text: str) -> IgnoreLists:
    """Parse a persisted ignore-list document.
    
    Structured YAML documents carry two named lists. Anything else is read as
    the legacy format, one ignored update alias per line.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        data = None
    
    if isinstance(data, dict) and (UPDATES_KEY in data or PACKAGES_KEY in data):
        updates = data.get(UPDATES_KEY) or []
        packages = data.get(PACKAGES_KEY) or []
        
        if not isinstance(updates, list) or not isinstance(packages, list):
            raise PersistenceError("Ignore list document has an unexpected structure")
        
        return IgnoreLists.create(
            (str(alias) for alias in updates), (str(name) for name in packages)
        )
    
    # Legacy flat-line format
    lines = (line.strip() for line in text.splitlines())
    return IgnoreLists.create(line for line in lines if line)


def dump_document(ignore_lists: IgnoreLists) -> str:
    """Serialize ignore lists to a structured YAML document."""
    return yaml.safe_dump(
        ignore_lists.to_document(), default_flow_style=False, sort_keys=False
    )


class IgnoreListStore:
    """Load and save ignore lists at a fixed location."""
    
    def __init__(self, path: Path, legacy_path: Optional[Path] = None) -> None:
        self.path = path
        self.legacy_path = legacy_path
    
    def load(self) -> IgnoreLists:
        """Read the ignore lists; a missing file means nothing is ignored.
        
        Falls back to the legacy file if the structured one was never written.
        
        Raises:
            PersistenceError: if the file exists but cannot be read.
        """
        source = self.path
        if not source.exists() and self.legacy_path is not None:
            source = self.legacy_path
        
        if not source.exists():
            return IgnoreLists()
        
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {source}: {e}") from e
        
        return parse_document(text)
    
    def save(self, ignore_lists: IgnoreLists) -> None:
        """Write the ignore lists back.
        
        Raises:
            PersistenceError: if the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(dump_document(ignore_lists), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Could not write {self.path}: {e}") from e
