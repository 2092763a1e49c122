import unittest

from src.application.matcher import ConfigMatcher
from src.domain.models import PushEvent, RepoConfiguration, Repository


def _repository(name: str, file_path: str) -> Repository:
    return Repository(
        name=name,
        source_repo="testorg/testrepo",
        file_path=file_path,
        update_key="test.image",
    )


class TestConfigMatcher(unittest.TestCase):
    def setUp(self) -> None:
        self.config = RepoConfiguration(repositories=(
            _repository("org/a", "first.yaml"),
            _repository("org/b", "other.yaml"),
            _repository("org/a", "second.yaml"),
        ))

    def test_returns_all_matches_in_configuration_order(self) -> None:
        event = PushEvent(repository_name="org/a", image_reference="quay.io/org/a", updated_tags=["v1"])

        matches = ConfigMatcher(self.config).match_all(event)

        self.assertEqual([m.file_path for m in matches], ["first.yaml", "second.yaml"])

    def test_matching_is_exact(self) -> None:
        event = PushEvent(repository_name="org/A", image_reference="quay.io/org/a", updated_tags=["v1"])

        self.assertEqual(ConfigMatcher(self.config).match_all(event), [])
