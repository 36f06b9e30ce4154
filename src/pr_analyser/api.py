"""
Main PR Analyser API

Main interface that orchestrates the analysis run, from change set
collection to tasks published on the tracking comment.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence
from datetime import datetime
from dataclasses import dataclass, field

from .analysis.pipeline import AnalyzerPipeline, default_pipeline
from .bitbucket.client import BitbucketClient
from .bitbucket.parser import DiffNormalizer
from .bitbucket.source import ChangeSource
from .config import AppConfig, get_config
from .models.review import Finding, ReviewRef, Task
from .publishing.publisher import TaskPublisher
from .publishing.store import BitbucketTrackingCommentStore, TrackingCommentStore


logger = logging.getLogger(__name__)


def publish_order(findings: Sequence[Finding]) -> List[Finding]:
    """
    Order in which findings are created as tasks.

    The review server lists a comment's tasks newest first. Creating them in
    reverse pipeline order makes them display in pipeline order.
    """
    return list(reversed(findings))


@dataclass
class AnalysisResult:
    """Result of one analysis run."""
    ref: ReviewRef
    comment_id: int
    files_analyzed: int
    findings: List[Finding]
    published: List[Task]
    processing_time: float
    created_at: datetime


@dataclass
class AnalysisStatus:
    """Current analyser state of a pull request."""
    ref: ReviewRef
    status: str  # 'not_analysed', 'all_good', 'tasks_pending'
    comment_id: Optional[int] = None
    tasks: List[Task] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'project': self.ref.project,
            'repo': self.ref.repo,
            'pr_id': self.ref.pr_id,
            'status': self.status,
            'comment_id': self.comment_id,
            'tasks': [
                {'text': task.text, 'state': task.state.value, 'resolved': task.is_resolved}
                for task in self.tasks
            ],
        }


class PRAnalyserAPI:
    """
    Main PR Analyser API interface.

    Orchestrates one analysis run:
    1. Find or create the tracking comment
    2. Fetch the change set with normalized diffs
    3. Run the analyzer pipeline
    4. Publish the findings as tasks, in display order
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[BitbucketClient] = None,
        pipeline: Optional[AnalyzerPipeline] = None,
        store: Optional[TrackingCommentStore] = None,
    ):
        """
        Initialize PR Analyser API.

        Args:
            config: Optional configuration object
            client: Review server client (built from config when omitted)
            pipeline: Analyzer pipeline (built-in analyzers when omitted)
            store: Tracking comment store (activity feed lookup when omitted)
        """
        self.config = config or get_config()

        logger.info("Initializing PR Analyser API components...")

        bitbucket = self.config.bitbucket
        self.client = client or BitbucketClient(
            base_url=bitbucket.base_url,
            token=bitbucket.token,
            timeout_seconds=bitbucket.timeout_seconds,
            max_retries=bitbucket.max_retries,
        )
        normalizer = DiffNormalizer()

        self.change_source = ChangeSource(self.client, normalizer, page_limit=bitbucket.page_limit)
        self.pipeline = pipeline or default_pipeline(
            change_threshold=self.config.analysis.change_threshold,
            disabled=self.config.analysis.disabled_analyzers,
        )
        self.store = store or BitbucketTrackingCommentStore(
            self.client, normalizer, activities_limit=bitbucket.activities_limit
        )
        self.publisher = TaskPublisher(
            self.client, self.store, comment_text=self.config.analysis.tracking_comment_text
        )

        logger.info(f"PR Analyser API initialized with analyzers: {', '.join(self.pipeline.names)}")

    def run_analysis(
        self,
        ref: ReviewRef,
        on_complete: Optional[Callable[[AnalysisResult], None]] = None,
    ) -> AnalysisResult:
        """
        Analyse a pull request and publish the findings as tasks.

        Any failure aborts the run and is re-raised. Tasks created before the
        failure are left in place.

        Args:
            ref: Pull request reference
            on_complete: Called with the result once every task is published

        Returns:
            AnalysisResult of the run
        """
        start_time = datetime.now()
        logger.info(f"Starting analysis: {ref}")

        try:
            comment = self.publisher.ensure_tracking_comment(ref)
            files = self.change_source.fetch_changes(ref)
            findings = self.pipeline.run(files)
            published = self.publisher.publish(ref, comment, publish_order(findings))
        except Exception as e:
            logger.error(f"Analysis failed: {ref} - {e}")
            raise

        processing_time = (datetime.now() - start_time).total_seconds()
        result = AnalysisResult(
            ref=ref,
            comment_id=comment.id,
            files_analyzed=len(files),
            findings=findings,
            published=published,
            processing_time=processing_time,
            created_at=start_time,
        )

        logger.info(f"Analysis completed: {ref} ({len(findings)} findings, {processing_time:.2f}s)")

        if on_complete is not None:
            on_complete(result)
        return result

    def get_status(self, ref: ReviewRef) -> AnalysisStatus:
        """
        Current analyser state of a pull request, without creating anything.

        Args:
            ref: Pull request reference

        Returns:
            AnalysisStatus with the tracking comment's tasks
        """
        comment = self.store.find(ref, self.publisher.comment_text)
        if comment is None:
            return AnalysisStatus(ref=ref, status='not_analysed')

        status = 'tasks_pending' if comment.tasks else 'all_good'
        return AnalysisStatus(ref=ref, status=status, comment_id=comment.id, tasks=list(comment.tasks))
