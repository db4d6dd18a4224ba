"""
Commit activity pipeline.

Stages:
1. Work budget from the window width
2. Repository discovery through commit search
3. Commit history per repository (bounded, concurrent)
4. File changes per commit (bounded, concurrent batches)
5. Aggregation by language and time bucket

Per-item upstream failures degrade the result instead of failing the request.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from commit_stats.config import settings
from commit_stats.dtos.commit_stats import (
    AggregatedData,
    CommitResponse,
    CommitStatsResponse,
    ProcessedRepository,
    TimeRange,
)
from commit_stats.entities import (
    CommitRecord,
    DateWindow,
    FileChange,
    FileStatus,
    RepositoryRef,
    TimePeriod,
    WorkBudget,
)
from commit_stats.services.aggregation import aggregate_commits
from commit_stats.services.github.exceptions import GithubError, GithubResponseError
from commit_stats.services.github.github_client import GitHubClient
from commit_stats.services.github.pagination import collect, paginate
from commit_stats.services.language_detector import detect_language
from commit_stats.services.work_budget import compute_work_budget

logger = logging.getLogger(__name__)

# GitHub answers 409 Conflict when listing commits of an empty repository
EMPTY_REPOSITORY_STATUS = 409


# =============================================================================
# Upstream payload parsing
# =============================================================================


def _repository_from_search_item(item: Dict[str, Any]) -> Optional[RepositoryRef]:
    repo = item.get("repository") or {}
    owner = (repo.get("owner") or {}).get("login")
    name = repo.get("name")
    if not owner or not name:
        return None
    return RepositoryRef(
        owner=owner,
        name=name,
        is_private=bool(repo.get("private", False)),
        primary_language=repo.get("language"),
        pushed_at=repo.get("pushed_at"),
        default_branch=repo.get("default_branch"),
    )


def _commit_from_list_item(
    item: Dict[str, Any], repository: RepositoryRef
) -> CommitRecord:
    commit = item.get("commit") or {}
    committer = commit.get("committer") or {}
    author = commit.get("author") or {}
    stats = item.get("stats") or {}
    login = (item.get("author") or {}).get("login") or author.get("name")
    return CommitRecord(
        id=item["sha"],
        committed_at=committer.get("date") or author.get("date"),
        message=commit.get("message") or "",
        additions=stats.get("additions") or 0,
        deletions=stats.get("deletions") or 0,
        changed_file_count=len(item.get("files") or []),
        author_login=login,
        repository=repository,
    )


def _file_change_from_payload(payload: Dict[str, Any]) -> FileChange:
    path = payload.get("filename") or ""
    additions = payload.get("additions") or 0
    deletions = payload.get("deletions") or 0
    return FileChange(
        path=path,
        status=FileStatus.from_upstream(payload.get("status")),
        additions=additions,
        deletions=deletions,
        changes=payload.get("changes") or (additions + deletions),
        language=detect_language(path),
    )


# =============================================================================
# Pipeline stages
# =============================================================================


async def discover_repositories(
    client: GitHubClient, username: str, window: DateWindow
) -> List[RepositoryRef]:
    """
    Find public repositories with commits by username inside the window.

    Uses commit search (committer-date is day-granular), deduplicated by
    (owner, name) in first-seen order.
    """
    query = (
        f"author:{username} "
        f"committer-date:{window.start.date().isoformat()}..{window.end.date().isoformat()}"
    )
    page_size = settings.GITHUB_PAGE_SIZE

    async def fetch_page(token):
        return await client.search_commits(query, token=token, per_page=page_size)

    repositories: Dict[tuple[str, str], RepositoryRef] = {}
    async for item in paginate(
        fetch_page,
        max_pages=settings.GITHUB_MAX_PAGES,
        page_size=page_size,
        fatal_errors=(GithubResponseError,),
        resource=f"commit search for {username}",
    ):
        repository = _repository_from_search_item(item)
        if repository is None or repository.is_private:
            continue
        repositories.setdefault(repository.key, repository)

    logger.info(
        "Found %d repositories with commits by %s in date range",
        len(repositories),
        username,
    )
    return list(repositories.values())


async def get_commit_history(
    client: GitHubClient,
    username: str,
    repository: RepositoryRef,
    window: DateWindow,
    *,
    limit: Optional[int] = None,
) -> List[CommitRecord]:
    """Commits authored by username in the window, most recent first."""
    page_size = settings.GITHUB_PAGE_SIZE

    async def fetch_page(token):
        return await client.list_commits(
            repository.full_name,
            author=username,
            since=window.start_iso,
            until=window.end_iso,
            token=token,
            per_page=page_size,
        )

    items = await collect(
        paginate(
            fetch_page,
            max_pages=settings.GITHUB_MAX_PAGES,
            page_size=page_size,
            benign_statuses=(EMPTY_REPOSITORY_STATUS,),
            resource=f"commits of {repository.full_name}",
        ),
        limit=limit,
    )
    return [_commit_from_list_item(item, repository) for item in items]


async def _fetch_commit_detail(
    client: GitHubClient, repository: RepositoryRef, commit_id: str
) -> Optional[Dict[str, Any]]:
    try:
        return await client.get_commit(repository.full_name, commit_id)
    except GithubError as exc:
        logger.warning(
            "Failed to get file changes for commit %s in %s: %s",
            commit_id,
            repository.full_name,
            exc,
        )
        return None


async def get_file_changes(
    client: GitHubClient, repository: RepositoryRef, commit_id: str
) -> Optional[List[FileChange]]:
    """
    File-level diff stats for one commit, each tagged with its language.

    Returns None when the commit detail cannot be fetched; the pipeline keeps
    the commit with no file data.
    """
    detail = await _fetch_commit_detail(client, repository, commit_id)
    if detail is None:
        return None
    return [_file_change_from_payload(f) for f in detail.get("files") or []]


# =============================================================================
# Orchestration
# =============================================================================


@dataclass
class RepositoryResult:
    repository: RepositoryRef
    commits: List[CommitRecord] = field(default_factory=list)
    commit_count: int = 0  # found before truncation

    @property
    def failed_commits(self) -> int:
        return sum(1 for commit in self.commits if not commit.files_fetched)

    def to_processed(self) -> ProcessedRepository:
        return ProcessedRepository(
            name=self.repository.name,
            owner=self.repository.owner,
            commit_count=self.commit_count,
            processed_commits=len(self.commits),
            failed_commits=self.failed_commits,
        )


@dataclass
class CollectionResult:
    budget: WorkBudget
    repositories: List[RepositoryResult] = field(default_factory=list)

    @property
    def commits(self) -> List[CommitRecord]:
        return [commit for result in self.repositories for commit in result.commits]


class CommitActivityService:
    def __init__(self, client: GitHubClient):
        self.client = client

    async def collect(self, username: str, window: DateWindow) -> CollectionResult:
        budget = compute_work_budget(window.width_days)
        logger.info(
            "Date range: %.0f days. Processing up to %d repos, %d commits per repo.",
            window.width_days,
            budget.max_repositories,
            budget.max_commits_per_repository,
        )

        repositories = await discover_repositories(self.client, username, window)
        selected = repositories[: budget.max_repositories]
        if len(selected) < len(repositories):
            logger.info(
                "Limited to %d of %d repositories", len(selected), len(repositories)
            )

        result = CollectionResult(budget=budget)
        step = budget.repo_concurrency
        for start in range(0, len(selected), step):
            batch = selected[start : start + step]
            batch_results = await asyncio.gather(
                *(
                    self._process_repository(username, repository, window, budget)
                    for repository in batch
                ),
                return_exceptions=True,
            )
            for repository, outcome in zip(batch, batch_results):
                if isinstance(outcome, BaseException):
                    if not isinstance(outcome, Exception):
                        raise outcome
                    logger.error(
                        "Error processing repository %s: %s",
                        repository.full_name,
                        outcome,
                    )
                    continue
                result.repositories.append(outcome)

        return result

    async def _process_repository(
        self,
        username: str,
        repository: RepositoryRef,
        window: DateWindow,
        budget: WorkBudget,
    ) -> RepositoryResult:
        logger.info("Processing %s...", repository.full_name)
        commits = await get_commit_history(self.client, username, repository, window)
        logger.info("Found %d commits in %s", len(commits), repository.full_name)

        to_process = commits[: budget.max_commits_per_repository]
        if len(to_process) < len(commits):
            logger.info(
                "Limited to processing %d of %d commits for %s",
                len(to_process),
                len(commits),
                repository.full_name,
            )

        enriched: List[CommitRecord] = []
        step = budget.commit_batch_size
        for start in range(0, len(to_process), step):
            batch = to_process[start : start + step]
            enriched.extend(
                await asyncio.gather(*(self._enrich_commit(commit) for commit in batch))
            )

        return RepositoryResult(
            repository=repository, commits=enriched, commit_count=len(commits)
        )

    async def _enrich_commit(self, commit: CommitRecord) -> CommitRecord:
        detail = await _fetch_commit_detail(self.client, commit.repository, commit.id)
        if detail is None:
            return commit.model_copy(update={"files": [], "files_fetched": False})

        files = [_file_change_from_payload(f) for f in detail.get("files") or []]
        # files is capped at 300 entries per page; stats covers the whole commit
        stats = detail.get("stats") or {}
        additions = stats.get("additions")
        if additions is None:
            additions = sum(f.additions for f in files)
        deletions = stats.get("deletions")
        if deletions is None:
            deletions = sum(f.deletions for f in files)
        return commit.model_copy(
            update={
                "files": files,
                "files_fetched": True,
                "additions": additions,
                "deletions": deletions,
                "changed_file_count": len(files),
            }
        )

    async def get_commit_stats(
        self,
        username: str,
        window: DateWindow,
        time_period: TimePeriod = TimePeriod.DAILY,
        aggregate: bool = True,
    ) -> CommitStatsResponse:
        started = time.monotonic()
        logger.info(
            "Fetching commit stats for %s from %s to %s",
            username,
            window.start_iso,
            window.end_iso,
        )

        collected = await self.collect(username, window)
        commits = collected.commits
        response = CommitStatsResponse(
            time_range=TimeRange(start_date=window.start_iso, end_date=window.end_iso),
            processed_repositories=[r.to_processed() for r in collected.repositories],
            total_commits=len(commits),
            total_repositories=len(collected.repositories),
        )

        if aggregate:
            aggregation = aggregate_commits(commits, time_period)
            response.summary = aggregation.summary
            response.aggregated_data = AggregatedData(
                time_period=time_period, buckets=aggregation.buckets
            )
        else:
            response.commits = [CommitResponse.from_record(c) for c in commits]

        logger.info(
            "Total commits processed: %d across %d repositories in %.1fs",
            len(commits),
            len(collected.repositories),
            time.monotonic() - started,
        )
        return response
