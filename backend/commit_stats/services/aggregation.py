"""
Fold enriched commits into language and time-bucket summaries.

Accumulators are plain objects owned by the caller. Concurrent branches can
each build their own and merge them afterwards; merging is order independent,
and every list in the output is sorted before it is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Set, Tuple

from commit_stats.config import settings
from commit_stats.dtos.commit_stats import (
    BucketLanguageStats,
    CommitStatsSummary,
    LanguageStats,
    RepositoryLanguageStats,
    TimeBucket,
)
from commit_stats.entities import CommitRecord, FileChange, RepositoryRef, TimePeriod
from commit_stats.services.language_colors import get_language_color


def bucket_start(committed_at: datetime, time_period: TimePeriod) -> date:
    """
    Return the bucket a commit falls in.

    Daily buckets are the UTC calendar day. Weekly buckets start on the most
    recent Sunday at or before the UTC day, found by subtracting whole days of
    elapsed time from midnight rather than decrementing the day field.
    """
    if committed_at.tzinfo is None:
        committed_at = committed_at.replace(tzinfo=timezone.utc)
    midnight = datetime.combine(
        committed_at.astimezone(timezone.utc).date(), time.min, tzinfo=timezone.utc
    )
    if time_period == TimePeriod.WEEKLY:
        days_since_sunday = (midnight.weekday() + 1) % 7
        midnight = midnight - timedelta(days=days_since_sunday)
    return midnight.date()


@dataclass
class _StatsAccumulator:
    additions: int = 0
    deletions: int = 0
    file_count: int = 0
    commit_ids: Set[str] = field(default_factory=set)

    @property
    def changes(self) -> int:
        return self.additions + self.deletions

    def add_file(self, commit_id: str, change: FileChange) -> None:
        self.additions += change.additions
        self.deletions += change.deletions
        self.file_count += 1
        self.commit_ids.add(commit_id)

    def merge(self, other: "_StatsAccumulator") -> None:
        self.additions += other.additions
        self.deletions += other.deletions
        self.file_count += other.file_count
        self.commit_ids |= other.commit_ids


@dataclass
class _LanguageAccumulator(_StatsAccumulator):
    repositories: Dict[Tuple[str, str], _StatsAccumulator] = field(default_factory=dict)

    def add_repository_file(
        self, repository: RepositoryRef, commit_id: str, change: FileChange
    ) -> None:
        self.add_file(commit_id, change)
        self.repositories.setdefault(repository.key, _StatsAccumulator()).add_file(
            commit_id, change
        )

    def merge(self, other: "_LanguageAccumulator") -> None:  # type: ignore[override]
        super().merge(other)
        for key, stats in other.repositories.items():
            self.repositories.setdefault(key, _StatsAccumulator()).merge(stats)


@dataclass
class _BucketAccumulator:
    totals: _StatsAccumulator = field(default_factory=_StatsAccumulator)
    languages: Dict[str, _LanguageAccumulator] = field(default_factory=dict)

    def merge(self, other: "_BucketAccumulator") -> None:
        self.totals.merge(other.totals)
        for language, stats in other.languages.items():
            self.languages.setdefault(language, _LanguageAccumulator()).merge(stats)


@dataclass
class AggregationResult:
    summary: CommitStatsSummary
    buckets: List[TimeBucket]


class CommitAggregator:
    """Accumulates commits for one time period; build() renders the result."""

    def __init__(self, time_period: TimePeriod = TimePeriod.DAILY):
        self.time_period = TimePeriod(time_period)
        self._totals = _StatsAccumulator()
        self._languages: Dict[str, _StatsAccumulator] = {}
        self._buckets: Dict[date, _BucketAccumulator] = {}

    def add_commit(self, commit: CommitRecord) -> None:
        key = bucket_start(commit.committed_at, self.time_period)
        bucket = self._buckets.setdefault(key, _BucketAccumulator())

        # Commits without file data still count as commits
        self._totals.commit_ids.add(commit.id)
        bucket.totals.commit_ids.add(commit.id)

        for change in commit.files:
            self._totals.add_file(commit.id, change)
            self._languages.setdefault(change.language, _StatsAccumulator()).add_file(
                commit.id, change
            )
            bucket.totals.add_file(commit.id, change)
            bucket.languages.setdefault(
                change.language, _LanguageAccumulator()
            ).add_repository_file(commit.repository, commit.id, change)

    def add_commits(self, commits: Iterable[CommitRecord]) -> "CommitAggregator":
        for commit in commits:
            self.add_commit(commit)
        return self

    def merge(self, other: "CommitAggregator") -> "CommitAggregator":
        if other.time_period != self.time_period:
            raise ValueError("Cannot merge aggregators with different time periods")
        self._totals.merge(other._totals)
        for language, stats in other._languages.items():
            self._languages.setdefault(language, _StatsAccumulator()).merge(stats)
        for key, bucket in other._buckets.items():
            self._buckets.setdefault(key, _BucketAccumulator()).merge(bucket)
        return self

    def build(self, top_n: int | None = None) -> AggregationResult:
        if top_n is None:
            top_n = settings.TOP_LANGUAGES_LIMIT

        languages = _sorted_languages(
            _language_stats(language, stats) for language, stats in self._languages.items()
        )
        summary = CommitStatsSummary(
            total_additions=self._totals.additions,
            total_deletions=self._totals.deletions,
            total_changes=self._totals.changes,
            total_files=self._totals.file_count,
            total_commits=len(self._totals.commit_ids),
            languages=languages,
            top_languages=languages[:top_n],
        )

        buckets = [
            self._build_bucket(key, self._buckets[key]) for key in sorted(self._buckets)
        ]
        return AggregationResult(summary=summary, buckets=buckets)

    @staticmethod
    def _build_bucket(key: date, bucket: _BucketAccumulator) -> TimeBucket:
        languages = _sorted_languages(
            BucketLanguageStats(
                **_language_stats(language, stats).model_dump(),
                repositories=_sorted_repositories(stats.repositories),
            )
            for language, stats in bucket.languages.items()
        )
        return TimeBucket(
            date=key.isoformat(),
            total_additions=bucket.totals.additions,
            total_deletions=bucket.totals.deletions,
            total_changes=bucket.totals.changes,
            total_files=bucket.totals.file_count,
            commit_count=len(bucket.totals.commit_ids),
            languages=languages,
        )


def aggregate_commits(
    commits: Iterable[CommitRecord],
    time_period: TimePeriod = TimePeriod.DAILY,
    *,
    top_n: int | None = None,
) -> AggregationResult:
    return CommitAggregator(time_period).add_commits(commits).build(top_n=top_n)


def _language_stats(language: str, stats: _StatsAccumulator) -> LanguageStats:
    return LanguageStats(
        language=language,
        color=get_language_color(language),
        additions=stats.additions,
        deletions=stats.deletions,
        changes=stats.changes,
        file_count=stats.file_count,
        commit_count=len(stats.commit_ids),
    )


def _sorted_languages(items: Iterable[LanguageStats]) -> list:
    return sorted(items, key=lambda item: (-item.changes, item.language))


def _sorted_repositories(
    repositories: Dict[Tuple[str, str], _StatsAccumulator],
) -> List[RepositoryLanguageStats]:
    entries = [
        RepositoryLanguageStats(
            repository=f"{owner}/{name}",
            owner=owner,
            name=name,
            additions=stats.additions,
            deletions=stats.deletions,
            changes=stats.changes,
            file_count=stats.file_count,
            commit_count=len(stats.commit_ids),
        )
        for (owner, name), stats in repositories.items()
    ]
    return sorted(entries, key=lambda item: (-item.changes, item.repository))
