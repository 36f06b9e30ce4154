"""
Property-based tests for normalization and the analyzer pipeline.
"""

from hypothesis import given, strategies as st

from pr_analyser.analysis.analyzers import Analyzer, ChangeVolumeAnalyzer
from pr_analyser.analysis.pipeline import AnalyzerPipeline, default_pipeline
from pr_analyser.api import publish_order
from pr_analyser.bitbucket.parser import DiffNormalizer
from pr_analyser.models.review import ChangedFile, ChangeKind, Finding, LineEdit


kinds = st.sampled_from(['ADDED', 'REMOVED', 'CONTEXT'])
line_text = st.text(max_size=40)
segments = st.lists(st.tuples(kinds, st.lists(line_text, max_size=5)), max_size=6)
hunks = st.lists(segments, max_size=4)
diffs = st.lists(st.one_of(st.none(), hunks), max_size=3)

extensions = st.sampled_from(['js', 'java', 'sql', 'py', ''])
paths = st.sampled_from(['src/a', 'db/mssql/b', 'db/oracle/c', 'lib/d'])
line_edits = st.lists(
    st.builds(LineEdit, st.sampled_from(list(ChangeKind)), st.sampled_from(['x', 'a.equals(b)', 'create table t', 'drop table t'])),
    max_size=20,
)
changed_files = st.lists(
    st.builds(lambda path, ext, lines: ChangedFile(path=f"{path}.{ext}", name='f', extension=ext, lines=lines),
              paths, extensions, line_edits),
    max_size=6,
)


class CountingAnalyzer(Analyzer):
    """Emits a fixed number of findings."""

    def __init__(self, name, count):
        self.name = name
        self.count = count

    def analyze(self, files):
        return [self.finding(f"{self.name}-{i}") for i in range(self.count)]


def to_raw(diff_list):
    return {'diffs': [
        {} if hunk_list is None else {'hunks': [
            {'segments': [{'type': kind, 'lines': [{'line': t} for t in texts]} for kind, texts in segs]}
            for segs in hunk_list
        ]}
        for hunk_list in diff_list
    ]}


@given(diffs)
def test_normalize_preserves_every_line_in_order(diff_list):
    expected = [
        (kind, text)
        for hunk_list in diff_list if hunk_list
        for segs in hunk_list
        for kind, texts in segs
        for text in texts
    ]

    edits = DiffNormalizer().normalize(to_raw(diff_list))

    assert [(e.kind.value, e.text) for e in edits] == expected


@given(st.lists(st.integers(min_value=0, max_value=5), max_size=8), changed_files)
def test_pipeline_output_is_concatenation(counts, files):
    analyzers = [CountingAnalyzer(f"a{i}", n) for i, n in enumerate(counts)]

    findings = AnalyzerPipeline(analyzers).run(files)

    assert len(findings) == sum(counts)
    assert findings == [f for a in analyzers for f in a.analyze(files)]


@given(changed_files)
def test_default_pipeline_matches_individual_analyzers(files):
    pipeline = default_pipeline()
    assert pipeline.run(files) == [f for a in pipeline.analyzers for f in a.analyze(files)]


@given(st.integers(min_value=0, max_value=300), st.integers(min_value=0, max_value=300), st.integers(min_value=0, max_value=50))
def test_change_volume_threshold(js_count, java_count, other_count):
    files = [
        ChangedFile('a.js', 'a.js', 'js', [LineEdit(ChangeKind.ADDED, 'x')] * js_count),
        ChangedFile('B.java', 'B.java', 'java', [LineEdit(ChangeKind.ADDED, 'x')] * java_count),
        ChangedFile('c.py', 'c.py', 'py', [LineEdit(ChangeKind.ADDED, 'x')] * other_count),
    ]

    findings = ChangeVolumeAnalyzer().analyze(files)

    assert len(findings) == (1 if js_count + java_count > 100 else 0)


@given(st.lists(st.text(min_size=1).filter(lambda s: s.strip()), max_size=10))
def test_publish_order_is_exact_reverse(messages):
    findings = [Finding(m) for m in messages]
    assert publish_order(publish_order(findings)) == findings
    assert [f.message for f in publish_order(findings)] == messages[::-1]
