"""Business logic use cases."""

from dataclasses import dataclass, field
from typing import Optional

from update_feedback.core import (
    BuildIndex,
    CandidateUpdate,
    FeedbackLoop,
    FeedbackSubmitter,
    IgnoreLists,
    IgnoreListStore,
    InventorySource,
    PackageIdentity,
    PersistenceError,
    ReviewConsole,
    ReviewContext,
    ReviewState,
    UpdateSource,
    UpdateStatus,
    filter_blocked,
    filter_ignored,
    finalize,
    match_installed,
    prune,
)


@dataclass
class RunOptions:
    """Decision flags for a feedback run."""
    
    check_pending: bool = False
    check_commented: bool = False
    check_ignored: bool = False
    check_obsoleted: bool = False
    check_unpushed: bool = False
    clear_ignored: bool = False


@dataclass
class RunResult:
    """Outcome of a feedback run."""
    
    state: Optional[ReviewState] = None
    reviewed: list[CandidateUpdate] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)
    obsoleted: list[CandidateUpdate] = field(default_factory=list)
    unpushed: list[CandidateUpdate] = field(default_factory=list)


class IgnoreListService:
    """Administrative access to the persisted ignore lists."""
    
    def __init__(self, store: IgnoreListStore) -> None:
        self.store = store
    
    def load(self) -> IgnoreLists:
        """Load ignore lists; unreadable files count as empty."""
        try:
            return self.store.load()
        except PersistenceError as e:
            print(f"⚠️  Could not read ignored updates, starting empty: {e}")
            return IgnoreLists()
    
    def save(self, ignore_lists: IgnoreLists) -> bool:
        """Save ignore lists; a failure is reported, not raised."""
        try:
            self.store.save(ignore_lists)
        except PersistenceError as e:
            print("⚠️  Failed to write ignored updates to disk.")
            print(f"  └─ {e}")
            return False
        return True
    
    def add_package(self, name: str) -> IgnoreLists:
        """Block a package by name."""
        ignore_lists = self.load().with_ignored_packages([name])
        if self.save(ignore_lists):
            print(f"✓ Added {name} to ignored packages")
        return ignore_lists
    
    def remove_package(self, name: str) -> IgnoreLists:
        """Unblock a package by name."""
        current = self.load()
        
        if name not in current.ignored_packages:
            print(f"⚠️  {name} is not in the list of ignored packages")
            return current
        
        ignore_lists = current.without_ignored_package(name)
        if self.save(ignore_lists):
            print(f"✓ Removed {name} from ignored packages")
        return ignore_lists
    
    def print_ignored(self) -> IgnoreLists:
        """Print both ignore lists."""
        ignore_lists = self.load()
        
        print("Ignored updates:")
        for alias in ignore_lists.ignored_updates:
            print(f"  • {alias}")
        
        print("Ignored packages:")
        for name in ignore_lists.ignored_packages:
            print(f"  • {name}")
        
        return ignore_lists


class FeedbackService:
    """Service for matching installed updates and collecting feedback on them."""
    
    def __init__(
        self,
        update_source: UpdateSource,
        inventory: InventorySource,
        submitter: FeedbackSubmitter,
        console: ReviewConsole,
        ignore_service: IgnoreListService,
        username: str,
        verbose: bool = False,
    ) -> None:
        self.update_source = update_source
        self.inventory = inventory
        self.submitter = submitter
        self.console = console
        self.ignore_service = ignore_service
        self.username = username
        self.verbose = verbose
    
    async def run(self, options: RunOptions) -> RunResult:
        """Run the whole feedback pipeline.
        
        Query and parse failures propagate; a failed comment or a failed
        ignore-list write does not stop the run.
        """
        result = RunResult()
        
        print("\n" + "=" * 70)
        print("📥 STAGE 1: QUERYING SYSTEM AND UPDATES")
        print("=" * 70)
        
        release = await self.inventory.get_release()
        print(f"✓ Release: {release}")
        
        print("Querying dnf for installed packages ...")
        installed = await self.inventory.get_installed()
        print(f"  └─ Installed source packages: {len(installed)}")
        
        statuses = [UpdateStatus.TESTING]
        if options.check_pending:
            statuses.append(UpdateStatus.PENDING)
        
        updates = await self._fetch(release, statuses)
        
        # Updates submitted by the acting user are not up for review
        updates = [update for update in updates if update.user != self.username]
        
        print("\n" + "=" * 70)
        print("🔍 STAGE 2: MATCHING INSTALLED UPDATES")
        print("=" * 70)
        
        survivors, build_index = match_installed(installed, updates)
        ordered = finalize(survivors)
        print(f"✓ Installed updates: {len(ordered)}")
        
        ignore_lists = self.ignore_service.load()
        if options.clear_ignored:
            ignore_lists = ignore_lists.without_ignored_updates()
        
        ignore_lists = prune(ignore_lists, ordered)
        state = ReviewState(ignore_lists=ignore_lists)
        result.state = state
        
        if not ordered:
            self.ignore_service.save(ignore_lists)
        else:
            candidates = filter_blocked(ordered, ignore_lists)
            if self.verbose:
                print(f"  └─ Blocked by ignored packages: {len(ordered) - len(candidates)}")
            
            before = len(candidates)
            candidates = filter_ignored(candidates, ignore_lists, options.check_ignored)
            if before != len(candidates):
                print(f"  └─ Skipping previously ignored updates: {before - len(candidates)}")
            
            contexts = await self._build_contexts(candidates, build_index)
            
            print("\n" + "=" * 70)
            print(f"📝 STAGE 3: REVIEW ({len(candidates)} updates)")
            print("=" * 70)
            
            loop = FeedbackLoop(
                console=self.console,
                submitter=self.submitter,
                acting_user=self.username,
                include_commented=options.check_commented,
            )
            try:
                state = await loop.run(candidates, state, contexts)
            finally:
                # Also runs if the loop is interrupted, partial decisions are kept
                self.ignore_service.save((loop.state or state).ignore_lists)
            
            result.state = state
            result.reviewed = candidates
            result.stats = dict(loop.stats)
            
            if loop.stats["already_commented"]:
                print(f"✓ Already commented, not shown: {loop.stats['already_commented']}")
        
        if options.check_obsoleted:
            result.obsoleted = await self.report_installed(
                release, UpdateStatus.OBSOLETE, installed,
                "There are obsoleted updates installed on this system.",
                "This probably means your system is not up-to-date.",
            )
        
        if options.check_unpushed:
            result.unpushed = await self.report_installed(
                release, UpdateStatus.UNPUSHED, installed,
                "There are unpushed updates installed on this system.",
                "It is recommended to run 'dnf distro-sync' to clean this up.",
            )
        
        return result
    
    async def _fetch(self, release: str, statuses: list[UpdateStatus]) -> list[CandidateUpdate]:
        """Query the update tracker for every requested status."""
        updates: list[CandidateUpdate] = []
        
        for status in statuses:
            print(f"Querying bodhi for {status.value} updates ...")
            found = await self.update_source.fetch_updates(release, status)
            updates.extend(found)
            print(f"  └─ Found: {len(found)}")
        
        return updates
    
    async def _build_contexts(
        self, candidates: list[CandidateUpdate], build_index: BuildIndex
    ) -> dict[str, ReviewContext]:
        """Collect locally installed binaries, summaries and install times."""
        if not candidates:
            return {}
        
        src_bin_map = await self.inventory.get_source_binary_map()
        summaries = await self.inventory.get_summaries()
        install_times = await self.inventory.get_install_times()
        
        contexts: dict[str, ReviewContext] = {}
        for update in candidates:
            builds = build_index.get(update.alias, [])
            binaries = [binary for build in builds for binary in src_bin_map.get(build, [])]
            contexts[update.alias] = ReviewContext(
                builds=builds,
                binaries=binaries,
                summaries=summaries,
                install_times=install_times,
            )
        
        return contexts
    
    async def report_installed(
        self,
        release: str,
        status: UpdateStatus,
        installed: set[PackageIdentity],
        headline: str,
        advice: str,
    ) -> list[CandidateUpdate]:
        """List installed updates in a status that should not be installed."""
        updates = await self._fetch(release, [status])
        survivors, build_index = match_installed(installed, updates)
        found = finalize(survivors)
        
        if not found:
            return found
        
        src_bin_map = await self.inventory.get_source_binary_map()
        
        print(f"\n⚠️  {headline}")
        print(f"  {advice}")
        for update in found:
            print(f" - {update.title}:")
            for build in build_index[update.alias]:
                for binary in src_bin_map.get(build, [build]):
                    print(f"   - {binary}")
        
        return found
