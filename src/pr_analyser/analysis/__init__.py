"""
Change Set Analysis

This module provides the heuristic analyzers and the pipeline that runs them.
"""

from .analyzers import (
    Analyzer,
    ChangeVolumeAnalyzer,
    CrossDatabaseSynergyAnalyzer,
    MissingDropScriptAnalyzer,
    DotEqualsUsageAnalyzer,
)
from .pipeline import AnalyzerPipeline, default_pipeline

__all__ = [
    'Analyzer',
    'ChangeVolumeAnalyzer',
    'CrossDatabaseSynergyAnalyzer',
    'MissingDropScriptAnalyzer',
    'DotEqualsUsageAnalyzer',
    'AnalyzerPipeline',
    'default_pipeline',
]
