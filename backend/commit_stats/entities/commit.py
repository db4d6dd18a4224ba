from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_LANGUAGE = "Unknown"


class FileStatus(str, Enum):
    """File status reported by the commit detail endpoint."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"

    @classmethod
    def from_upstream(cls, value: Optional[str]) -> "FileStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.CHANGED


class RepositoryRef(BaseModel):
    """Repository with committer activity inside the window."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    is_private: bool = False
    primary_language: Optional[str] = None
    pushed_at: Optional[datetime] = None
    default_branch: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def key(self) -> tuple[str, str]:
        return (self.owner, self.name)


class FileChange(BaseModel):
    """Line-level diff stats for one file in a commit."""

    path: str
    status: FileStatus = FileStatus.MODIFIED
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    language: str = UNKNOWN_LANGUAGE


class CommitRecord(BaseModel):
    """A commit by the requested author, optionally enriched with file changes."""

    id: str = Field(..., description="Commit SHA")
    committed_at: datetime
    message: str = ""
    additions: int = 0
    deletions: int = 0
    changed_file_count: int = 0
    author_login: Optional[str] = None
    repository: RepositoryRef

    files: List[FileChange] = Field(default_factory=list)
    files_fetched: bool = False  # False when the detail fetch failed or never ran
