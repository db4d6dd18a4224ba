"""
Work budget derived from the requested window width.

Upstream requests grow as repositories x commits and the request has a hard
wall-clock ceiling, so wider windows get smaller caps. Caps never increase as
the window widens.
"""

from commit_stats.entities.window import WorkBudget

# (exclusive lower bound on width in days, max repositories, max commits per repo)
BUDGET_TIERS = (
    (90, 10, 50),
    (30, 15, 100),
)
DEFAULT_MAX_REPOSITORIES = 20
DEFAULT_MAX_COMMITS_PER_REPOSITORY = 200

MAX_REPO_CONCURRENCY = 3
COMMIT_BATCH_SIZE = 5


def compute_work_budget(width_days: float) -> WorkBudget:
    max_repositories = DEFAULT_MAX_REPOSITORIES
    max_commits = DEFAULT_MAX_COMMITS_PER_REPOSITORY
    for lower_bound, tier_repositories, tier_commits in BUDGET_TIERS:
        if width_days > lower_bound:
            max_repositories = tier_repositories
            max_commits = tier_commits
            break

    return WorkBudget(
        max_repositories=max_repositories,
        max_commits_per_repository=max_commits,
        repo_concurrency=min(MAX_REPO_CONCURRENCY, max_repositories),
        commit_batch_size=COMMIT_BATCH_SIZE,
    )
