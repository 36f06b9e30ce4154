"""
Shared fixtures: an in-memory review server behind a patched requests session.
"""

import json
from urllib.parse import unquote
from typing import Dict, List, Optional
from unittest.mock import Mock, patch

import pytest

from pr_analyser.config import AppConfig, AnalysisConfig, BitbucketConfig, LoggingConfig, ServerConfig
from pr_analyser.models.review import ReviewRef

BASE_URL = "https://bitbucket.example.com/rest/api/latest"
PR_URL = f"{BASE_URL}/projects/ABC/repos/app/pull-requests/42"


def make_response(data=None, status_code: int = 200) -> Mock:
    """Mock requests.Response carrying a JSON body."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.content = json.dumps(data).encode() if data is not None else b''
    response.json.return_value = data
    response.headers = {}
    return response


def segment(kind: str, *lines: str) -> Dict:
    return {'type': kind, 'lines': [{'line': line} for line in lines]}


def file_diff(*segments: Dict) -> Dict:
    """Diff response with a single hunk holding `segments`."""
    return {'diffs': [{'hunks': [{'segments': list(segments)}]}]}


def change(path: str) -> Dict:
    name = path.rsplit('/', 1)[-1]
    extension = name.rsplit('.', 1)[-1] if '.' in name else None
    entry = {'toString': path, 'name': name}
    if extension:
        entry['extension'] = extension
    return {'path': entry}


class FakeBitbucketServer:
    """Routes Session.request calls to in-memory pull request state."""

    def __init__(self):
        self.changes: List[Dict] = []
        self.diffs: Dict[str, Dict] = {}
        self.activities: List[Dict] = []
        self.tasks: List[Dict] = []
        self.calls: List[tuple] = []
        self.comment_posts = 0
        self.fail_on: Optional[str] = None
        self.hide_created_comments = False
        self._next_comment_id = 100

    def add_file(self, path: str, diff: Optional[Dict] = None) -> None:
        self.changes.append(change(path))
        self.diffs[path] = diff if diff is not None else {'diffs': []}

    def add_comment(self, text: str, tasks: Optional[List[Dict]] = None) -> int:
        comment_id = self._next_comment_id
        self._next_comment_id += 1
        self.activities.insert(0, {
            'id': comment_id * 10,
            'action': 'COMMENTED',
            'comment': {'id': comment_id, 'text': text, 'tasks': tasks or []},
        })
        return comment_id

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.fail_on and self.fail_on in url:
            return make_response({'errors': [{'message': 'Boom'}]}, status_code=500)

        if url == f"{BASE_URL}/tasks" and method == 'POST':
            self.tasks.append(kwargs['json'])
            return make_response({'id': len(self.tasks)}, status_code=201)

        assert url.startswith(PR_URL), url
        endpoint = url[len(PR_URL):]

        if endpoint == '/changes':
            return make_response({'values': self.changes, 'isLastPage': True, 'size': len(self.changes)})
        if endpoint.startswith('/diff/'):
            return make_response(self.diffs[unquote(endpoint[len('/diff/'):])])
        if endpoint == '/activities':
            return make_response({'values': self.activities, 'isLastPage': True})
        if endpoint == '/comments' and method == 'POST':
            self.comment_posts += 1
            if not self.hide_created_comments:
                self.add_comment(kwargs['json']['text'])
            return make_response({'version': 0}, status_code=201)

        raise AssertionError(f"Unexpected request: {method} {url}")


@pytest.fixture
def review_ref() -> ReviewRef:
    return ReviewRef(project='ABC', repo='app', pr_id=42)


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        bitbucket=BitbucketConfig(base_url=BASE_URL, token='test-token'),
        analysis=AnalysisConfig(),
        logging=LoggingConfig(),
        server=ServerConfig(),
    )


@pytest.fixture
def bitbucket_server():
    """Fake review server; every requests.Session.request call is routed to it."""
    server = FakeBitbucketServer()
    with patch('requests.Session.request', side_effect=server):
        yield server
