from .commit import (
    UNKNOWN_LANGUAGE,
    CommitRecord,
    FileChange,
    FileStatus,
    RepositoryRef,
)
from .window import (
    CommitStatsInputError,
    DateWindow,
    InvalidDateError,
    InvalidDateRangeError,
    TimePeriod,
    WorkBudget,
    parse_timestamp,
)

__all__ = [
    "UNKNOWN_LANGUAGE",
    "CommitRecord",
    "CommitStatsInputError",
    "DateWindow",
    "FileChange",
    "FileStatus",
    "InvalidDateError",
    "InvalidDateRangeError",
    "RepositoryRef",
    "TimePeriod",
    "WorkBudget",
    "parse_timestamp",
]
