from .commit_stats import (
    AggregatedData,
    BucketLanguageStats,
    CommitResponse,
    CommitStatsResponse,
    CommitStatsSummary,
    LanguageStats,
    ProcessedRepository,
    RepositoryLanguageStats,
    SupportedLanguage,
    SupportedLanguagesResponse,
    TimeBucket,
    TimeRange,
)

__all__ = [
    "AggregatedData",
    "BucketLanguageStats",
    "CommitResponse",
    "CommitStatsResponse",
    "CommitStatsSummary",
    "LanguageStats",
    "ProcessedRepository",
    "RepositoryLanguageStats",
    "SupportedLanguage",
    "SupportedLanguagesResponse",
    "TimeBucket",
    "TimeRange",
]
