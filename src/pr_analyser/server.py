"""
PR Analyser HTTP Server

Flask endpoints the pull request page calls to show analyser status and
trigger an analysis run.
"""

import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from . import __version__
from .api import PRAnalyserAPI
from .bitbucket.client import BitbucketAPIError
from .models.review import ReviewRef
from .publishing.publisher import MissingTrackingComment


logger = logging.getLogger(__name__)

PR_ROUTE = '/api/v1/projects/<project>/repos/<repo>/pull-requests/<int:pr_id>'


def create_app(analyser_api: Optional[PRAnalyserAPI] = None) -> Flask:
    """
    Create the Flask application.

    Args:
        analyser_api: API instance to serve (built from configuration when omitted)
    """
    app = Flask(__name__)
    CORS(app)  # called from the review server's pull request page

    api = analyser_api or PRAnalyserAPI()

    def failed(error: Exception, status_code: int):
        return jsonify({'status': 'failed', 'error': str(error)}), status_code

    def analyse(ref: ReviewRef):
        result = api.run_analysis(ref)
        return jsonify({
            'status': 'completed',
            'project': ref.project,
            'repo': ref.repo,
            'pr_id': ref.pr_id,
            'comment_id': result.comment_id,
            'files_analyzed': result.files_analyzed,
            'tasks_created': [task.text for task in result.published],
            'processing_time': result.processing_time,
        })

    @app.errorhandler(BitbucketAPIError)
    def handle_api_error(error):
        logger.error(f"Review server error: {error}")
        return failed(error, 502)

    @app.errorhandler(MissingTrackingComment)
    def handle_missing_comment(error):
        logger.error(str(error))
        return failed(error, 502)

    @app.errorhandler(ValueError)
    def handle_bad_reference(error):
        return failed(error, 400)

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'pr-analyser',
            'version': __version__,
        })

    @app.route(f'{PR_ROUTE}/status', methods=['GET'])
    def status(project, repo, pr_id):
        """Tracking comment tasks, or not_analysed."""
        ref = ReviewRef(project=project, repo=repo, pr_id=pr_id)
        return jsonify(api.get_status(ref).to_dict())

    @app.route(f'{PR_ROUTE}/analyse', methods=['POST'])
    def analyse_pull_request(project, repo, pr_id):
        """Run the analysers and publish tasks."""
        return analyse(ReviewRef(project=project, repo=repo, pr_id=pr_id))

    @app.route('/api/v1/analyse', methods=['POST'])
    def analyse_url():
        """Run the analysers for the pull request page at `url`."""
        data = request.get_json(silent=True) or {}
        if not data.get('url'):
            return failed(ValueError("Request body must contain 'url'"), 400)
        return analyse(ReviewRef.from_url(data['url']))

    return app
