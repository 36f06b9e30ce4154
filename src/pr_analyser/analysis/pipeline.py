"""
Analyzer Pipeline

Ordered registry of analyzers run over one change set.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from ..models.review import ChangedFile, Finding
from .analyzers import (
    Analyzer,
    ChangeVolumeAnalyzer,
    CrossDatabaseSynergyAnalyzer,
    MissingDropScriptAnalyzer,
    DotEqualsUsageAnalyzer,
)


logger = logging.getLogger(__name__)


class AnalyzerPipeline:
    """
    Runs registered analyzers in registration order and concatenates their
    findings. No deduplication happens across analyzers.
    """

    def __init__(self, analyzers: Optional[Iterable[Analyzer]] = None):
        self._analyzers: List[Analyzer] = []
        for analyzer in analyzers or []:
            self.register(analyzer)

    @property
    def analyzers(self) -> List[Analyzer]:
        return list(self._analyzers)

    @property
    def names(self) -> List[str]:
        return [analyzer.name for analyzer in self._analyzers]

    def register(self, analyzer: Analyzer) -> None:
        """Append an analyzer; names must be unique."""
        if analyzer.name in self.names:
            raise ValueError(f"Analyzer already registered: {analyzer.name}")
        self._analyzers.append(analyzer)

    def unregister(self, name: str) -> Analyzer:
        """Remove and return the analyzer registered under `name`."""
        for index, analyzer in enumerate(self._analyzers):
            if analyzer.name == name:
                return self._analyzers.pop(index)
        raise KeyError(f"No analyzer registered as {name!r}")

    def run(self, files: Sequence[ChangedFile]) -> List[Finding]:
        """
        Run every analyzer over the change set.

        Args:
            files: Full change set, shared read-only by all analyzers

        Returns:
            All findings, grouped by analyzer in registration order
        """
        findings = []
        for analyzer in self._analyzers:
            produced = analyzer.analyze(files)
            logger.debug(f"{analyzer.name}: {len(produced)} findings")
            findings.extend(produced)

        logger.info(f"Analyzers produced {len(findings)} findings")
        return findings


def default_pipeline(change_threshold: int = 100, disabled: Iterable[str] = ()) -> AnalyzerPipeline:
    """
    Pipeline with the built-in analyzers in their display order.

    Args:
        change_threshold: Added-line limit for ChangeVolumeAnalyzer
        disabled: Analyzer names to leave out
    """
    disabled = set(disabled)
    analyzers = [
        ChangeVolumeAnalyzer(threshold=change_threshold),
        CrossDatabaseSynergyAnalyzer(),
        MissingDropScriptAnalyzer(),
        DotEqualsUsageAnalyzer(),
    ]

    unknown = disabled - {analyzer.name for analyzer in analyzers}
    if unknown:
        raise ValueError(f"Unknown analyzers: {', '.join(sorted(unknown))}")

    return AnalyzerPipeline(a for a in analyzers if a.name not in disabled)
