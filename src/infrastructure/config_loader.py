from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from src.domain.exceptions import ConfigurationError
from src.domain.models import RepoConfiguration


def parse_repo_configuration(text: str) -> RepoConfiguration:
    """
    Parses a YAML repository configuration of the form:

        repositories:
          - name: mynamespace/repository
            sourceRepo: org/gitops
            sourceBranch: master
            filePath: environments/test/deployment.yaml
            updateKey: spec.template.spec.containers.0.image
            branchGenerateName: image-update-
    """
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid configuration YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError("configuration must be a mapping with a 'repositories' list")

    try:
        return RepoConfiguration(repositories=raw.get("repositories") or [])
    except ValidationError as e:
        raise ConfigurationError(f"invalid repository configuration: {e}") from e


def load_repo_configuration(path: Union[str, Path]) -> RepoConfiguration:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"failed to read configuration {path}: {e}") from e
    return parse_repo_configuration(text)
