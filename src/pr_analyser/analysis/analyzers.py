"""
Change Set Analyzers

Heuristic checks over a normalized change set. Each analyzer is stateless,
reads the change set without modifying it, and returns its findings in the
order it produced them.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterator, List, Sequence

from ..models.review import ChangedFile, Finding


logger = logging.getLogger(__name__)


def iter_added_lines(files: Sequence[ChangedFile], extension: str) -> Iterator[str]:
    """
    Yield the text of every ADDED line in files with exactly this extension.

    Extensions are compared case-sensitively; ChangedFile lower-cases its own.
    """
    for changed_file in files:
        if changed_file.extension == extension:
            yield from changed_file.added_lines


def any_path_contains(files: Sequence[ChangedFile], substring: str) -> bool:
    """True if any file path contains `substring` anywhere."""
    return any(substring in changed_file.path for changed_file in files)


class Analyzer(ABC):
    """Base class for change set analyzers."""

    name: str = "analyzer"

    @abstractmethod
    def analyze(self, files: Sequence[ChangedFile]) -> List[Finding]:
        """
        Analyze the change set.

        Args:
            files: Every changed file with its line edits

        Returns:
            Findings in production order (possibly empty)
        """

    def finding(self, message: str) -> Finding:
        return Finding(message=message, analyzer=self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class ChangeVolumeAnalyzer(Analyzer):
    """Large JavaScript/Java changes probably need automated tests."""

    name = "change_volume"
    MESSAGE = "Significant changes - check if automated tests are required."

    def __init__(self, threshold: int = 100):
        if threshold < 0:
            raise ValueError("Change threshold must be non-negative")
        self.threshold = threshold

    def analyze(self, files: Sequence[ChangedFile]) -> List[Finding]:
        js_lines = sum(1 for _ in iter_added_lines(files, 'js'))
        java_lines = sum(1 for _ in iter_added_lines(files, 'java'))

        logger.debug(f"Added lines: js={js_lines}, java={java_lines}")
        if js_lines + java_lines > self.threshold:
            return [self.finding(self.MESSAGE)]
        return []


class CrossDatabaseSynergyAnalyzer(Analyzer):
    """
    Database scripts are kept in one directory per dialect. Touching one
    dialect usually means the other needs the same change, and any database
    change has to be announced when merged.
    """

    name = "cross_database_synergy"
    MSSQL_PATH = '/mssql/'
    ORACLE_PATH = '/oracle/'
    MSSQL_ONLY_MESSAGE = "MSSQL updated but not Oracle. Check this is ok."
    ORACLE_ONLY_MESSAGE = "Oracle updated but not MSSQL. Check this is ok."
    NOTIFY_MESSAGE = "(On merge) Notify the team that there are database changes that need to be applied."

    def analyze(self, files: Sequence[ChangedFile]) -> List[Finding]:
        mssql = any_path_contains(files, self.MSSQL_PATH)
        oracle = any_path_contains(files, self.ORACLE_PATH)

        findings = []
        if mssql and not oracle:
            findings.append(self.finding(self.MSSQL_ONLY_MESSAGE))
        if oracle and not mssql:
            findings.append(self.finding(self.ORACLE_ONLY_MESSAGE))
        if mssql or oracle:
            findings.append(self.finding(self.NOTIFY_MESSAGE))
        return findings


class MissingDropScriptAnalyzer(Analyzer):
    """New tables need matching entries in the drop scripts."""

    name = "missing_drop_script"
    MESSAGE = "Create table but no drop table. Need to update the drop scripts?"

    def analyze(self, files: Sequence[ChangedFile]) -> List[Finding]:
        creates_table = any('create table' in line.lower() for line in iter_added_lines(files, 'sql'))
        drops_table = any('drop table' in line.lower() for line in iter_added_lines(files, 'sql'))

        if creates_table and not drops_table:
            return [self.finding(self.MESSAGE)]
        return []


class DotEqualsUsageAnalyzer(Analyzer):
    """Direct `.equals` calls in Java where a StringUtils helper may be safer."""

    name = "dot_equals_usage"
    MESSAGE = "Found uses of .equals. Review these to check if StringUtils methods are a more appropriate choice."

    def analyze(self, files: Sequence[ChangedFile]) -> List[Finding]:
        for line in iter_added_lines(files, 'java'):
            if '.equals' in line and 'StringUtils' not in line:
                return [self.finding(self.MESSAGE)]
        return []
