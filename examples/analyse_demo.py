#!/usr/bin/env python3
"""
PR Analyser Demo

Shows the analyser status of a pull request and, with --run, analyses it
and publishes the findings as tasks.

Usage:
    python examples/analyse_demo.py <pull request url> [--run]

Example:
    BITBUCKET_URL=https://bitbucket.example.com/rest/api/latest \\
    BITBUCKET_TOKEN=... \\
    python examples/analyse_demo.py https://bitbucket.example.com/projects/ABC/repos/app/pull-requests/42/overview
"""

import sys
import os
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pr_analyser.api import PRAnalyserAPI
from pr_analyser.bitbucket.client import BitbucketAPIError
from pr_analyser.config import get_config
from pr_analyser.models.review import ReviewRef
from pr_analyser.publishing.publisher import MissingTrackingComment


def main():
    """Main demo function."""
    if len(sys.argv) not in (2, 3) or (len(sys.argv) == 3 and sys.argv[2] != '--run'):
        print("Usage: python analyse_demo.py <pull request url> [--run]")
        sys.exit(1)

    try:
        ref = ReviewRef.from_url(sys.argv[1])
        config = get_config()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    logger = logging.getLogger(__name__)
    api = PRAnalyserAPI(config)

    try:
        if len(sys.argv) == 3:
            logger.info(f"Analysing {ref}...")
            result = api.run_analysis(ref)
            print(f"\nPublished {len(result.published)} tasks on comment {result.comment_id}")

        status = api.get_status(ref)
        print(f"\n{ref}: {status.status}")
        for task in status.tasks:
            marker = 'x' if task.is_resolved else ' '
            print(f"  [{marker}] {task.text}")

    except (BitbucketAPIError, MissingTrackingComment) as e:
        logger.error(f"Analysis failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
