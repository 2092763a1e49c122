import json
import unittest

from src.domain.exceptions import ConfigurationError, HookParseError
from src.infrastructure.acl import DockerHubTranslator, QuayTranslator, get_translator


class TestQuayTranslator(unittest.TestCase):
    def test_to_domain_parses_repository_push(self) -> None:
        raw_body = json.dumps({
            "repository": "mynamespace/repository",
            "namespace": "mynamespace",
            "name": "repository",
            "docker_url": "quay.io/mynamespace/repository",
            "homepage": "https://quay.io/repository/mynamespace/repository",
            "updated_tags": ["latest", "v1"],
        }).encode()

        event = QuayTranslator.to_domain(raw_body)

        self.assertEqual(event.repository_name, "mynamespace/repository")
        self.assertEqual(event.image_reference, "quay.io/mynamespace/repository")
        self.assertEqual(event.updated_tags, ["latest", "v1"])

    def test_missing_updated_tags_raises(self) -> None:
        raw_body = json.dumps({
            "repository": "mynamespace/repository",
            "docker_url": "quay.io/mynamespace/repository",
        })

        with self.assertRaises(HookParseError):
            QuayTranslator.to_domain(raw_body)

    def test_invalid_json_raises(self) -> None:
        with self.assertRaises(HookParseError):
            QuayTranslator.to_domain(b"{not json")


class TestDockerHubTranslator(unittest.TestCase):
    def test_to_domain_parses_push_data(self) -> None:
        raw_body = json.dumps({
            "callback_url": "https://registry.hub.docker.com/u/svendowideit/testhook/hook/2141b5bi5i5b02bec211i4eeih0242eg11000a/",
            "push_data": {"pushed_at": 1417566161, "pusher": "trustedbuilder", "tag": "latest"},
            "repository": {
                "name": "testhook",
                "namespace": "svendowideit",
                "repo_name": "svendowideit/testhook",
            },
        }).encode()

        event = DockerHubTranslator.to_domain(raw_body)

        self.assertEqual(event.repository_name, "svendowideit/testhook")
        self.assertEqual(event.image_reference, "svendowideit/testhook")
        self.assertEqual(event.updated_tags, ["latest"])

    def test_missing_tag_raises(self) -> None:
        raw_body = json.dumps({"push_data": {}, "repository": {"repo_name": "svendowideit/testhook"}})

        with self.assertRaises(HookParseError):
            DockerHubTranslator.to_domain(raw_body)

    def test_non_object_body_raises(self) -> None:
        with self.assertRaises(HookParseError):
            DockerHubTranslator.to_domain(b"[]")

    def test_non_object_repository_raises(self) -> None:
        raw_body = json.dumps({"repository": "svendowideit/testhook", "push_data": {"tag": "latest"}})

        with self.assertRaises(HookParseError):
            DockerHubTranslator.to_domain(raw_body)

    def test_non_object_push_data_raises(self) -> None:
        raw_body = json.dumps({"repository": {"repo_name": "svendowideit/testhook"}, "push_data": ["latest"]})

        with self.assertRaises(HookParseError):
            DockerHubTranslator.to_domain(raw_body)


class TestGetTranslator(unittest.TestCase):
    def test_known_names(self) -> None:
        self.assertIs(get_translator("quay"), QuayTranslator)
        self.assertIs(get_translator("docker"), DockerHubTranslator)

    def test_unknown_name_raises(self) -> None:
        with self.assertRaises(ConfigurationError):
            get_translator("gcr")
