from typing import Protocol

from src.domain.models import PullRequestInput


class ScmGateway(Protocol):
    """
    Branch, file and pull-request operations against a git hosting provider.

    Every call is independent and may fail on its own; callers must not assume
    atomicity across calls.
    """

    async def get_branch_head(self, repo: str, branch: str) -> str:
        """Returns the SHA of the commit at the tip of `branch`."""
        ...

    async def get_file(self, repo: str, path: str, ref: str) -> bytes:
        """Returns the raw contents of `path` at `ref`."""
        ...

    async def create_branch(self, repo: str, name: str, from_sha: str) -> None:
        ...

    async def update_file(self, repo: str, path: str, branch: str, content: bytes, message: str) -> None:
        """Commits `content` as the new contents of `path` on `branch`."""
        ...

    async def create_pull_request(self, repo: str, pull_request: PullRequestInput) -> None:
        ...


class NameGenerator(Protocol):
    def prefixed_name(self, prefix: str) -> str:
        ...
