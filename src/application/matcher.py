from typing import List

from src.domain.models import PushEvent, RepoConfiguration, Repository


class ConfigMatcher:
    """Selects the configured update targets for an incoming push event."""

    def __init__(self, config: RepoConfiguration):
        self.config = config

    def match_all(self, event: PushEvent) -> List[Repository]:
        """
        Returns every configured repository whose name equals the event's
        repository name, in configuration order. An empty list is a valid result.
        """
        return [repo for repo in self.config.repositories if repo.name == event.repository_name]
