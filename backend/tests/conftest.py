import pytest

from tests._fakes import FakeCommit, FakeFile, FakeGitHub, FakeRepo


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def two_repo_github(fake_github: FakeGitHub) -> FakeGitHub:
    """Two public repositories, three commits each, every commit touching .py and .js."""
    for repo_name in ("alpha", "beta"):
        commits = [
            FakeCommit(
                sha=f"{repo_name}-{i}",
                date=f"2024-03-13T1{i}:00:00Z",
                files=[
                    FakeFile("src/app.py", additions=10, deletions=2),
                    FakeFile("web/index.js", additions=5, deletions=1),
                ],
            )
            for i in range(3)
        ]
        fake_github.add_repo(FakeRepo("octocat", repo_name, commits=commits))
    return fake_github
