"""
Unit tests for AnalyzerPipeline and the publish order policy.
"""

import pytest

from pr_analyser.analysis.analyzers import Analyzer
from pr_analyser.analysis.pipeline import AnalyzerPipeline, default_pipeline
from pr_analyser.api import publish_order
from pr_analyser.models.review import Finding


class StaticAnalyzer(Analyzer):
    """Returns fixed messages."""

    def __init__(self, name, *messages):
        self.name = name
        self.messages = messages

    def analyze(self, files):
        return [self.finding(m) for m in self.messages]


class TestAnalyzerPipeline:

    def test_concatenates_in_registration_order(self):
        pipeline = AnalyzerPipeline([
            StaticAnalyzer('first', 'a1', 'a2'),
            StaticAnalyzer('second'),
            StaticAnalyzer('third', 'c1'),
        ])

        findings = pipeline.run([])

        assert [f.message for f in findings] == ['a1', 'a2', 'c1']
        assert [f.analyzer for f in findings] == ['first', 'first', 'third']

    def test_no_dedup_across_analyzers(self):
        pipeline = AnalyzerPipeline([StaticAnalyzer('a', 'same'), StaticAnalyzer('b', 'same')])
        assert len(pipeline.run([])) == 2

    def test_register_and_unregister(self):
        pipeline = AnalyzerPipeline()
        pipeline.register(StaticAnalyzer('a', 'x'))
        pipeline.register(StaticAnalyzer('b', 'y'))

        removed = pipeline.unregister('a')

        assert removed.name == 'a'
        assert pipeline.names == ['b']
        assert [f.message for f in pipeline.run([])] == ['y']

    def test_duplicate_name_rejected(self):
        pipeline = AnalyzerPipeline([StaticAnalyzer('a')])
        with pytest.raises(ValueError):
            pipeline.register(StaticAnalyzer('a'))

    def test_unregister_unknown(self):
        with pytest.raises(KeyError):
            AnalyzerPipeline().unregister('missing')

    def test_empty_pipeline(self):
        assert AnalyzerPipeline().run([]) == []


class TestDefaultPipeline:

    def test_built_in_order(self):
        assert default_pipeline().names == [
            'change_volume',
            'cross_database_synergy',
            'missing_drop_script',
            'dot_equals_usage',
        ]

    def test_disabled(self):
        assert default_pipeline(disabled=['dot_equals_usage']).names[-1] == 'missing_drop_script'

    def test_unknown_disabled_name(self):
        with pytest.raises(ValueError):
            default_pipeline(disabled=['nope'])

    def test_threshold_passed_through(self):
        assert default_pipeline(change_threshold=7).analyzers[0].threshold == 7


def test_publish_order_reverses_pipeline_order():
    findings = [Finding('a'), Finding('b'), Finding('c')]

    assert publish_order(findings) == [Finding('c'), Finding('b'), Finding('a')]
    assert [f.message for f in findings] == ['a', 'b', 'c']
    assert publish_order([]) == []
