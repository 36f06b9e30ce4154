"""
PR Analyser

Pull request change analysis that publishes advisory findings as review tasks.
"""

__version__ = "1.0.0"

from .api import PRAnalyserAPI, AnalysisResult, AnalysisStatus, publish_order

__all__ = ["PRAnalyserAPI", "AnalysisResult", "AnalysisStatus", "publish_order"]
