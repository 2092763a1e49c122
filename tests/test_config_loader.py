import tempfile
import unittest
from pathlib import Path

from src.domain.exceptions import ConfigurationError
from src.infrastructure.config_loader import load_repo_configuration, parse_repo_configuration

CONFIG_YAML = """
repositories:
  - name: mynamespace/repository
    sourceRepo: testorg/testrepo
    sourceBranch: staging
    filePath: environments/test/services/service-a/test.yaml
    updateKey: test.image
    branchGenerateName: test-branch-
  - name: mynamespace/other
    sourceRepo: testorg/testrepo
    filePath: environments/test/services/service-b/test.yaml
    updateKey: spec.image
"""


class TestParseRepoConfiguration(unittest.TestCase):
    def test_parses_camel_case_fields(self) -> None:
        config = parse_repo_configuration(CONFIG_YAML)

        first, second = config.repositories
        self.assertEqual(first.name, "mynamespace/repository")
        self.assertEqual(first.source_repo, "testorg/testrepo")
        self.assertEqual(first.source_branch, "staging")
        self.assertEqual(first.file_path, "environments/test/services/service-a/test.yaml")
        self.assertEqual(first.update_key, "test.image")
        self.assertEqual(first.branch_generate_name, "test-branch-")
        self.assertEqual(second.source_branch, "master")
        self.assertEqual(second.branch_generate_name, "")

    def test_empty_document_has_no_repositories(self) -> None:
        self.assertEqual(parse_repo_configuration("").repositories, ())

    def test_missing_required_field_raises(self) -> None:
        with self.assertRaises(ConfigurationError):
            parse_repo_configuration("repositories:\n  - name: only-a-name\n")

    def test_invalid_yaml_raises(self) -> None:
        with self.assertRaises(ConfigurationError):
            parse_repo_configuration("repositories: [")


class TestLoadRepoConfiguration(unittest.TestCase):
    def test_loads_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text(CONFIG_YAML, encoding="utf-8")

            config = load_repo_configuration(path)

        self.assertEqual(len(config.repositories), 2)

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(ConfigurationError):
            load_repo_configuration("/nonexistent/image-hooks/config.yaml")
