import logging
from typing import List, Optional

from src.application import patcher
from src.application.matcher import ConfigMatcher
from src.domain.exceptions import (
    BranchCreationError,
    FileUpdateError,
    MultipleUpdatesFailedError,
    PullRequestError,
)
from src.domain.gateway import NameGenerator, ScmGateway
from src.domain.models import PullRequestInput, PushEvent, RepoConfiguration, Repository
from src.domain.names import RandomNameGenerator

logger = logging.getLogger(__name__)

PULL_REQUEST_BODY = "Automated Image Update"


class UpdaterService:
    """
    Service responsible for applying a registry push event to every configured
    GitOps repository that references the pushed image.

    For each matching target the current file is fetched, the configured key is
    rewritten to the new image reference, and the change is committed either
    straight to the source branch or to a freshly generated branch followed by
    a pull request. Steps that already succeeded are never rolled back.
    """

    def __init__(
            self,
            gateway: ScmGateway,
            config: RepoConfiguration,
            name_generator: Optional[NameGenerator] = None,
    ):
        self.gateway = gateway
        self.matcher = ConfigMatcher(config)
        self.name_generator = name_generator or RandomNameGenerator()

    async def update_from_hook(self, event: PushEvent) -> None:
        """
        Updates all repositories configured for the event's image.

        Targets are processed one after another. A failing target does not stop
        the remaining ones: a single failure is re-raised unchanged, several are
        raised together as MultipleUpdatesFailedError.
        """
        repos = self.matcher.match_all(event)
        if not repos:
            logger.info(f"No repository configured for {event.repository_name}, ignoring hook.")
            return

        errors: List[Exception] = []
        for repo in repos:
            try:
                await self._update_repository(repo, event)
            except Exception as e:
                logger.warning(f"Update of {repo.source_repo}/{repo.file_path} for {repo.name} failed: {e}")
                errors.append(e)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise MultipleUpdatesFailedError(errors)

    async def _update_repository(self, repo: Repository, event: PushEvent) -> None:
        new_image = event.image_for_tag(event.first_tag)

        # Fetch and patch errors are surfaced as-is; nothing has been written yet.
        content = await self.gateway.get_file(repo.source_repo, repo.file_path, repo.source_branch)
        updated = patcher.patch(content, repo.update_key, new_image)

        branch = await self._target_branch(repo)

        logger.info(f"Updating {repo.file_path} in {repo.source_repo} on {branch} to {new_image}.")
        try:
            await self.gateway.update_file(
                repo.source_repo, repo.file_path, branch, updated, self._commit_message(repo, new_image)
            )
        except Exception as e:
            raise FileUpdateError(e) from e

        if branch == repo.source_branch:
            return

        pull_request = PullRequestInput(
            title=f"Image {repo.name} updated",
            body=PULL_REQUEST_BODY,
            head=branch,
            base=repo.source_branch,
        )
        try:
            await self.gateway.create_pull_request(repo.source_repo, pull_request)
        except Exception as e:
            raise PullRequestError(e) from e
        logger.info(f"Opened pull request {branch} -> {repo.source_branch} in {repo.source_repo}.")

    async def _target_branch(self, repo: Repository) -> str:
        """Returns the branch to commit to, creating a new one when the target asks for it."""
        if not repo.uses_pull_request:
            return repo.source_branch

        sha = await self.gateway.get_branch_head(repo.source_repo, repo.source_branch)
        branch = self.name_generator.prefixed_name(repo.branch_generate_name)
        try:
            await self.gateway.create_branch(repo.source_repo, branch, sha)
        except Exception as e:
            raise BranchCreationError(e) from e

        logger.info(f"Created branch {branch} from {repo.source_branch}@{sha} in {repo.source_repo}.")
        return branch

    @staticmethod
    def _commit_message(repo: Repository, new_image: str) -> str:
        return f"Update image for {repo.name} to {new_image}"
