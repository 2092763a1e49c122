import json
from typing import Any, Dict, Union

from pydantic import ValidationError

from src.domain.exceptions import ConfigurationError, HookParseError
from src.domain.models import PushEvent


def _load_body(raw_body: Union[bytes, str]) -> Dict[str, Any]:
    try:
        payload = json.loads(raw_body)
    except (ValueError, TypeError) as e:
        raise HookParseError(f"invalid JSON body: {e}") from e
    if not isinstance(payload, dict):
        raise HookParseError("webhook body must be a JSON object")
    return payload


def _build_event(**fields: Any) -> PushEvent:
    try:
        return PushEvent(**fields)
    except ValidationError as e:
        raise HookParseError(f"incomplete push event: {e}") from e


class QuayTranslator:
    """
    Anti-corruption layer that translates Quay.io repository push notifications into PushEvent instances.
    """

    name = "quay"

    @staticmethod
    def to_domain(raw_body: Union[bytes, str]) -> PushEvent:
        """
        Transforms a Quay "Repository Push" webhook body into a PushEvent.

        Args:
            raw_body (Union[bytes, str]): The raw JSON body sent by Quay.

        Returns:
            PushEvent: The normalized push event.
        """
        payload = _load_body(raw_body)
        return _build_event(
            repository_name=payload.get('repository'),
            image_reference=payload.get('docker_url'),
            updated_tags=payload.get('updated_tags'),
        )


class DockerHubTranslator:
    """
    Anti-corruption layer that translates Docker Hub push webhooks into PushEvent instances.
    """

    name = "docker"

    @staticmethod
    def to_domain(raw_body: Union[bytes, str]) -> PushEvent:
        """
        Transforms a Docker Hub webhook body into a PushEvent.

        Docker Hub reports a single tag per push and names the image by its
        `repo_name`, which is also the pullable reference on Docker Hub.
        """
        payload = _load_body(raw_body)

        repository = payload.get('repository') or {}
        push_data = payload.get('push_data') or {}
        if not isinstance(repository, dict) or not isinstance(push_data, dict):
            raise HookParseError("'repository' and 'push_data' must be JSON objects")
        repo_name = repository.get('repo_name')
        tag = push_data.get('tag')

        return _build_event(
            repository_name=repo_name,
            image_reference=repo_name,
            updated_tags=[tag] if tag else [],
        )


TRANSLATORS = {
    QuayTranslator.name: QuayTranslator,
    DockerHubTranslator.name: DockerHubTranslator,
}


def get_translator(name: str):
    """Returns the translator registered under `name`, e.g. "quay" or "docker"."""
    try:
        return TRANSLATORS[name]
    except KeyError:
        raise ConfigurationError(f"unknown parser: {name}") from None
