"""Tests for folding commits into language and time-bucket summaries."""

from datetime import date, datetime, timezone

import pytest

from commit_stats.entities import CommitRecord, FileChange, RepositoryRef, TimePeriod
from commit_stats.services.aggregation import (
    CommitAggregator,
    aggregate_commits,
    bucket_start,
)
from commit_stats.services.language_detector import detect_language

HELLO = RepositoryRef(owner="octocat", name="hello")
WORLD = RepositoryRef(owner="octocat", name="world")


def make_commit(sha, when, files, repository=HELLO, fetched=True):
    return CommitRecord(
        id=sha,
        committed_at=when,
        repository=repository,
        files=[
            FileChange(
                path=path,
                additions=additions,
                deletions=deletions,
                changes=additions + deletions,
                language=detect_language(path),
            )
            for path, additions, deletions in files
        ],
        files_fetched=fetched,
    )


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestBucketStart:
    def test_daily_is_utc_day(self):
        assert bucket_start(utc(2024, 3, 13, 23, 59), TimePeriod.DAILY) == date(2024, 3, 13)

    def test_weekly_rolls_back_to_sunday(self):
        assert bucket_start(utc(2024, 3, 13, 15), TimePeriod.WEEKLY) == date(2024, 3, 10)

    def test_weekly_sunday_is_its_own_bucket(self):
        assert bucket_start(utc(2024, 3, 10, 0, 0), TimePeriod.WEEKLY) == date(2024, 3, 10)
        assert bucket_start(utc(2024, 3, 16, 23, 59), TimePeriod.WEEKLY) == date(2024, 3, 10)

    @pytest.mark.parametrize(
        "when, expected",
        [
            (utc(2024, 3, 2, 12), date(2024, 2, 25)),  # across a leap-year month end
            (utc(2025, 1, 1, 8), date(2024, 12, 29)),  # across a year end
        ],
    )
    def test_weekly_crosses_month_and_year(self, when, expected):
        assert bucket_start(when, TimePeriod.WEEKLY) == expected

    def test_non_utc_timestamp_uses_utc_day(self):
        from datetime import timedelta

        tokyo = timezone(timedelta(hours=9))
        # 2024-03-10 07:00 in Tokyo is still Saturday 2024-03-09 in UTC
        when = datetime(2024, 3, 10, 7, 0, tzinfo=tokyo)
        assert bucket_start(when, TimePeriod.DAILY) == date(2024, 3, 9)
        assert bucket_start(when, TimePeriod.WEEKLY) == date(2024, 3, 3)


class TestAggregate:
    @pytest.fixture
    def commits(self):
        return [
            make_commit("a", utc(2024, 3, 11, 9), [("a.py", 10, 2), ("b.py", 5, 0), ("c.js", 1, 1)]),
            make_commit("b", utc(2024, 3, 11, 18), [("d.py", 3, 3)], repository=WORLD),
            make_commit("c", utc(2024, 3, 13, 9), [("main.go", 20, 20)]),
            make_commit("d", utc(2024, 3, 18, 9), [("README", 1, 0)]),
        ]

    def test_buckets_partition_the_summary(self, commits):
        for period in TimePeriod:
            result = aggregate_commits(commits, period)
            assert sum(b.total_additions for b in result.buckets) == result.summary.total_additions
            assert sum(b.total_deletions for b in result.buckets) == result.summary.total_deletions
            assert sum(b.total_files for b in result.buckets) == result.summary.total_files

    def test_summary_totals(self, commits):
        summary = aggregate_commits(commits).summary

        assert summary.total_additions == 40
        assert summary.total_deletions == 26
        assert summary.total_changes == 66
        assert summary.total_files == 6
        assert summary.total_commits == 4

    def test_distinct_commit_count_per_language(self, commits):
        languages = {l.language: l for l in aggregate_commits(commits).summary.languages}

        # Commit "a" touches two Python files but counts once
        assert languages["Python"].commit_count == 2
        assert languages["Python"].file_count == 3
        assert languages["JavaScript"].commit_count == 1
        assert all(l.commit_count <= 4 for l in languages.values())

    def test_languages_sorted_by_changes_then_name(self):
        commits = [
            make_commit("a", utc(2024, 3, 11), [("x.rb", 2, 2), ("x.go", 3, 1), ("x.py", 1, 0)]),
        ]

        languages = aggregate_commits(commits).summary.languages

        assert [l.language for l in languages] == ["Go", "Ruby", "Python"]

    def test_top_languages_slice(self):
        paths = [f"f.{ext}" for ext in ("py", "js", "go", "rs", "rb", "java", "c", "cpp", "php", "kt", "swift", "dart")]
        commit = make_commit("a", utc(2024, 3, 11), [(p, i + 1, 0) for i, p in enumerate(paths)])

        summary = aggregate_commits([commit]).summary

        assert len(summary.languages) == 12
        assert len(summary.top_languages) == 10
        assert summary.top_languages[0].language == "Dart"
        assert summary.top_languages == summary.languages[:10]

    def test_daily_buckets_sorted_without_zero_fill(self, commits):
        buckets = aggregate_commits(commits, TimePeriod.DAILY).buckets

        assert [b.date for b in buckets] == ["2024-03-11", "2024-03-13", "2024-03-18"]
        assert buckets[0].commit_count == 2

    def test_weekly_buckets(self, commits):
        buckets = aggregate_commits(commits, TimePeriod.WEEKLY).buckets

        assert [b.date for b in buckets] == ["2024-03-10", "2024-03-17"]
        assert buckets[0].commit_count == 3

    def test_bucket_language_breakdown_by_repository(self, commits):
        first = aggregate_commits(commits).buckets[0]
        python = next(l for l in first.languages if l.language == "Python")

        assert [(r.repository, r.changes) for r in python.repositories] == [
            ("octocat/hello", 17),
            ("octocat/world", 6),
        ]
        assert python.repositories[0].commit_count == 1

    def test_commit_without_files_still_counted(self):
        commits = [
            make_commit("ok", utc(2024, 3, 11), [("a.py", 1, 0)]),
            make_commit("failed", utc(2024, 3, 11), [], fetched=False),
        ]

        result = aggregate_commits(commits)

        assert result.summary.total_commits == 2
        assert result.summary.total_files == 1
        assert result.buckets[0].commit_count == 2

    def test_empty_input(self):
        result = aggregate_commits([])

        assert result.buckets == []
        assert result.summary.total_commits == 0
        assert result.summary.top_languages == []

    def test_result_independent_of_input_order_and_merging(self, commits):
        whole = aggregate_commits(commits, TimePeriod.WEEKLY)

        left = CommitAggregator(TimePeriod.WEEKLY).add_commits(commits[2:])
        right = CommitAggregator(TimePeriod.WEEKLY).add_commits(reversed(commits[:2]))
        merged = left.merge(right).build()

        assert merged.summary == whole.summary
        assert merged.buckets == whole.buckets

    def test_merge_rejects_mismatched_periods(self):
        with pytest.raises(ValueError):
            CommitAggregator(TimePeriod.DAILY).merge(CommitAggregator(TimePeriod.WEEKLY))
