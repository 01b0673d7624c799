"""Static-of exemptions and deferred validator reports.

A validator ``const isFoo = Ianitor.interface({...})`` needs no explicit
check when the file also declares ``type Foo = Ianitor.Static<typeof isFoo>``.
The alias may come before or after the validator, so validator reports
are queued during the declaration walk and only resolved once every
alias has been seen.

The tracker is sealed when the walk ends. Lookups before sealing and
registrations after it are programming errors and raise RuntimeError.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ianitorlint.analysis.tree import SourceRef


class ExemptionTracker:
    """Names of validators re-exposed through a Static-of alias."""

    def __init__(self) -> None:
        self._names: set[str] = set()
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def register(self, name: str) -> None:
        if self._sealed:
            raise RuntimeError(f"Cannot register exemption {name!r} after the scan completed")
        self._names.add(name)

    def seal(self) -> None:
        self._sealed = True

    def is_exempt(self, name: str | None) -> bool:
        if not self._sealed:
            raise RuntimeError("Exemptions are incomplete until the declaration scan completes")
        return name is not None and name in self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)


@dataclass(frozen=True)
class DeferredReport:
    """A validator declaration that will be reported unless exempted."""

    name: str | None
    score: float
    source: SourceRef | None


class DeferredQueue:
    """Validator reports awaiting the end-of-file flush, in declaration order."""

    def __init__(self) -> None:
        self._pending: list[DeferredReport] = []

    def defer(self, report: DeferredReport) -> None:
        self._pending.append(report)

    def flush(self, exemptions: ExemptionTracker) -> list[DeferredReport]:
        """Drain the queue, dropping reports whose validator is exempt."""
        pending, self._pending = self._pending, []
        return [report for report in pending if not exemptions.is_exempt(report.name)]

    def __iter__(self) -> Iterator[DeferredReport]:
        return iter(self._pending)

    def __len__(self) -> int:
        return len(self._pending)


__all__ = [
    "DeferredQueue",
    "DeferredReport",
    "ExemptionTracker",
]
