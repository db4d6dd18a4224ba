"""
Commit stats DTOs - Response models for the commit statistics endpoint.

Serialized with camelCase keys.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from commit_stats.entities import CommitRecord, TimePeriod


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Aggregated view
# =============================================================================


class LanguageStats(CamelModel):
    """Line-change totals for one language."""

    language: str
    color: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0  # additions + deletions
    file_count: int = 0
    commit_count: int = 0  # distinct commits touching the language


class RepositoryLanguageStats(CamelModel):
    """Contribution of one repository to a language inside a bucket."""

    repository: str  # owner/name
    owner: str
    name: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    file_count: int = 0
    commit_count: int = 0


class BucketLanguageStats(LanguageStats):
    repositories: List[RepositoryLanguageStats] = Field(default_factory=list)


class TimeBucket(CamelModel):
    """One day (daily) or one Sunday-started week (weekly)."""

    date: str  # ISO date of the day / week start
    total_additions: int = 0
    total_deletions: int = 0
    total_changes: int = 0
    total_files: int = 0
    commit_count: int = 0
    languages: List[BucketLanguageStats] = Field(default_factory=list)


class CommitStatsSummary(CamelModel):
    total_additions: int = 0
    total_deletions: int = 0
    total_changes: int = 0
    total_files: int = 0
    total_commits: int = 0
    languages: List[LanguageStats] = Field(default_factory=list)
    top_languages: List[LanguageStats] = Field(default_factory=list)


class AggregatedData(CamelModel):
    time_period: TimePeriod
    buckets: List[TimeBucket] = Field(default_factory=list)


# =============================================================================
# Raw commit view
# =============================================================================


class CommitFileResponse(CamelModel):
    filename: str
    status: str
    additions: int
    deletions: int
    changes: int
    language: str


class CommitRepositoryResponse(CamelModel):
    name: str
    owner: str
    primary_language: Optional[str] = None


class CommitResponse(CamelModel):
    id: str
    committed_at: datetime
    message: str
    additions: int
    deletions: int
    changed_files: int
    author_login: Optional[str] = None
    repository: CommitRepositoryResponse
    files: List[CommitFileResponse] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: CommitRecord) -> "CommitResponse":
        return cls(
            id=record.id,
            committed_at=record.committed_at,
            message=record.message,
            additions=record.additions,
            deletions=record.deletions,
            changed_files=record.changed_file_count,
            author_login=record.author_login,
            repository=CommitRepositoryResponse(
                name=record.repository.name,
                owner=record.repository.owner,
                primary_language=record.repository.primary_language,
            ),
            files=[
                CommitFileResponse(
                    filename=change.path,
                    status=change.status.value,
                    additions=change.additions,
                    deletions=change.deletions,
                    changes=change.changes,
                    language=change.language,
                )
                for change in record.files
            ],
        )


# =============================================================================
# Endpoint response
# =============================================================================


class TimeRange(CamelModel):
    start_date: str
    end_date: str


class ProcessedRepository(CamelModel):
    name: str
    owner: str
    commit_count: int  # commits found before truncation
    processed_commits: int  # commits kept after the per-repository cap
    failed_commits: int = 0  # commits whose file changes could not be fetched


class CommitStatsResponse(CamelModel):
    time_range: TimeRange
    summary: Optional[CommitStatsSummary] = None
    aggregated_data: Optional[AggregatedData] = None
    commits: Optional[List[CommitResponse]] = None
    processed_repositories: List[ProcessedRepository] = Field(default_factory=list)
    total_commits: int = 0
    total_repositories: int = 0


class SupportedLanguage(CamelModel):
    name: str
    color: str


class SupportedLanguagesResponse(CamelModel):
    languages: List[SupportedLanguage] = Field(default_factory=list)
