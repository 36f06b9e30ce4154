"""
Bitbucket Integration Layer

This module provides review server API integration for change listing,
diff retrieval and normalization.
"""

from .client import BitbucketClient, BitbucketAPIError, PayloadError
from .parser import DiffNormalizer
from .source import ChangeSource

__all__ = ['BitbucketClient', 'BitbucketAPIError', 'PayloadError', 'DiffNormalizer', 'ChangeSource']
