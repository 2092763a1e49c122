from typing import List, Tuple
from pydantic import BaseModel, Field, ConfigDict, field_validator

DEFAULT_SOURCE_BRANCH = "master"


class PushEvent(BaseModel):
    """
    Normalized record of an image pushed to a container registry.
    Produced by a registry-specific translator, independent of the payload shape.
    """
    model_config = ConfigDict(frozen=True)

    repository_name: str = Field(..., description="Identifier the registry uses for the pushed image")
    image_reference: str = Field(..., description="Pullable image reference without a tag, e.g. quay.io/org/repo")
    updated_tags: List[str] = Field(..., min_length=1, description="Tags updated by the push, in registry order")

    @property
    def first_tag(self) -> str:
        return self.updated_tags[0]

    def image_for_tag(self, tag: str) -> str:
        return f"{self.image_reference}:{tag}"


class Repository(BaseModel):
    """
    One configured update target: which file in which git repository to rewrite
    when an image with a matching name is pushed.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Registry repository name that triggers this update")
    source_repo: str = Field(..., alias="sourceRepo", description="Git hosting identifier, e.g. org/repo")
    source_branch: str = Field(
        DEFAULT_SOURCE_BRANCH, alias="sourceBranch", description="Branch to read from and merge into"
    )
    file_path: str = Field(..., alias="filePath", description="Path of the YAML file inside the repository")
    update_key: str = Field(..., alias="updateKey", description="Dot-separated path of the value to replace")
    branch_generate_name: str = Field(
        "", alias="branchGenerateName",
        description="Prefix for generated branches; empty commits directly to the source branch"
    )

    @field_validator("source_branch", mode="before")
    @classmethod
    def _default_source_branch(cls, value):
        return value or DEFAULT_SOURCE_BRANCH

    @field_validator("branch_generate_name", mode="before")
    @classmethod
    def _empty_branch_generate_name(cls, value):
        return value or ""

    @property
    def uses_pull_request(self) -> bool:
        return self.branch_generate_name != ""


class RepoConfiguration(BaseModel):
    """The set of update targets, built once at startup and never mutated."""
    model_config = ConfigDict(frozen=True)

    repositories: Tuple[Repository, ...] = Field(default_factory=tuple)


class PullRequestInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: str
    head: str
    base: str
