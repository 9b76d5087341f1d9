"""Local inventory adapter backed by rpm and dnf repoquery."""

import asyncio
from datetime import datetime, timezone

from update_feedback.core import InventorySource, PackageIdentity, QueryError, parse_filename

REPOQUERY = ("dnf", "--quiet", "repoquery", "--cacheonly", "--installed")
INSTALL_TIME_FORMAT = "%Y-%m-%d %H:%M"


def _lines(output: str) -> list[str]:
    return [line for line in output.strip().splitlines() if line.strip()]


def parse_installed(output: str) -> set[PackageIdentity]:
    """Parse ``repoquery --source`` output (one ``*.src.rpm`` per line)."""
    return {parse_filename(line).nvr for line in _lines(output)}


def parse_summaries(output: str) -> dict[str, str]:
    """Parse ``name<TAB>summary`` lines."""
    summaries: dict[str, str] = {}
    
    for line in _lines(output):
        parts = line.split("\t")
        if len(parts) != 2:
            raise QueryError(f"Failed to parse dnf output: {line}")
        summaries[parts[0]] = parts[1]
    
    return summaries


def parse_source_binary_map(output: str) -> dict[str, list[str]]:
    """Parse ``source-nvr binary-nevra`` lines into source -> binaries."""
    mapping: dict[str, list[str]] = {}
    
    for line in _lines(output):
        parts = line.split(" ")
        if len(parts) != 2:
            raise QueryError(f"Failed to parse dnf output: {line}")
        mapping.setdefault(parts[0], []).append(parts[1])
    
    return mapping


def parse_install_times(output: str) -> dict[str, datetime]:
    """Parse ``binary-nevra<TAB>YYYY-MM-DD HH:MM`` lines; the first entry wins."""
    times: dict[str, datetime] = {}
    
    for line in _lines(output):
        parts = line.split("\t")
        if len(parts) != 2:
            raise QueryError(f"Failed to parse dnf output: {line}")
        
        try:
            installed_at = datetime.strptime(parts[1], INSTALL_TIME_FORMAT)
        except ValueError as e:
            raise QueryError(f"Failed to parse dnf output: {e}") from e
        
        times.setdefault(parts[0], installed_at.replace(tzinfo=timezone.utc))
    
    return times


class DnfInventory(InventorySource):
    """Query installed packages through rpm and dnf subprocesses."""
    
    async def _run(self, *args: str) -> str:
        """Run a command and return its stdout; any failure is a QueryError."""
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            raise QueryError(f"Failed to run {args[0]}: {e}") from e
        
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise QueryError(f"Failed to run {args[0]} (exit {process.returncode}): {message}")
        
        return stdout.decode("utf-8", errors="replace")
    
    async def get_release(self) -> str:
        """Get ``F<n>`` from the ``%{fedora}`` rpm macro."""
        output = (await self._run("rpm", "--eval", "%{fedora}")).strip()
        
        if not output.isdigit():
            raise QueryError(f"Unexpected release number from rpm: {output!r}")
        
        return f"F{output}"
    
    async def get_installed(self) -> set[PackageIdentity]:
        return parse_installed(await self._run(*REPOQUERY, "--source"))
    
    async def get_source_binary_map(self) -> dict[str, list[str]]:
        query_format = "%{source_name}-%{version}-%{release} %{name}-%{version}-%{release}.%{arch}"
        return parse_source_binary_map(await self._run(*REPOQUERY, "--qf", query_format))
    
    async def get_install_times(self) -> dict[str, datetime]:
        query_format = "%{name}-%{version}-%{release}.%{arch}\t%{INSTALLTIME}"
        return parse_install_times(await self._run(*REPOQUERY, "--qf", query_format))
    
    async def get_summaries(self) -> dict[str, str]:
        return parse_summaries(await self._run(*REPOQUERY, "--qf", "%{name}\t%{summary}"))
