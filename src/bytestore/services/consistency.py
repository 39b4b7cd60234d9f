"""
Offline consistency scan of an object store directory tree.

Walks the tree without loading an index and reports everything the startup
rebuild would skip or reject: orphan payloads left by a failed add, orphan
sidecars left by a failed delete, foreign entries, and corrupt sidecars.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import ValidationError

from bytestore.services.container import PAYLOAD_SUFFIX, SIDECAR_SUFFIX, parse_identifier
from bytestore.services.object_meta import ObjectMeta

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class CorruptSidecar:
    """A sidecar that cannot be loaded."""

    path: Path
    reason: str


@dataclass
class ConsistencyReport:
    """Result of scanning an object store root."""

    root: Path
    container_count: int = 0
    object_count: int = 0
    orphan_payloads: list[Path] = field(default_factory=list)
    orphan_sidecars: list[Path] = field(default_factory=list)
    invalid_entries: list[Path] = field(default_factory=list)
    corrupt_sidecars: list[CorruptSidecar] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        """True when every payload has a loadable sidecar and vice versa."""
        return not (self.orphan_payloads or self.orphan_sidecars or self.corrupt_sidecars)

    @property
    def problem_count(self) -> int:
        return len(self.orphan_payloads) + len(self.orphan_sidecars) + len(self.corrupt_sidecars)


def _check_sidecar(sidecar_path: Path, container_id: str) -> str | None:
    """Return the reason a sidecar cannot be loaded, or None if it is valid."""
    try:
        meta = ObjectMeta.from_sidecar(sidecar_path.read_bytes())
    except OSError as exc:
        return f"unreadable: {exc}"
    except ValidationError as exc:
        return f"invalid record: {exc.error_count()} validation error(s)"
    if str(meta.id) != sidecar_path.stem or str(meta.container_id) != container_id:
        return "record does not match its location"
    return None


def _scan_container(directory: Path, report: ConsistencyReport) -> None:
    entries = sorted(directory.iterdir())
    names = {entry.name for entry in entries}

    for entry in entries:
        if entry.suffix not in (PAYLOAD_SUFFIX, SIDECAR_SUFFIX) or not entry.is_file():
            report.invalid_entries.append(entry)
            continue
        if parse_identifier(entry.stem) is None:
            report.invalid_entries.append(entry)
            continue

        if entry.suffix == PAYLOAD_SUFFIX:
            if entry.with_suffix(SIDECAR_SUFFIX).name not in names:
                report.orphan_payloads.append(entry)
            continue

        reason = _check_sidecar(entry, directory.name)
        if reason is not None:
            report.corrupt_sidecars.append(CorruptSidecar(path=entry, reason=reason))
            continue
        if entry.with_suffix(PAYLOAD_SUFFIX).name not in names:
            report.orphan_sidecars.append(entry)
        report.object_count += 1


def scan_store(root: Path) -> ConsistencyReport:
    """
    Scan an object store root and report disk-level inconsistencies.

    Args:
        root: Object store root directory

    Returns:
        Report of containers, objects and problems found

    Raises:
        OSError: If the root or a container directory cannot be listed
    """
    report = ConsistencyReport(root=root)
    for entry in sorted(root.iterdir()):
        if not entry.is_dir() or parse_identifier(entry.name) is None:
            report.invalid_entries.append(entry)
            continue
        report.container_count += 1
        _scan_container(entry, report)
    return report
