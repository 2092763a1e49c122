from enum import Enum
from typing import List, Optional


class ErrorKind(str, Enum):
    """Identifies which step of an image update failed."""
    UPSTREAM = "upstream"
    PATCH = "patch"
    BRANCH_CREATION = "branch_creation"
    FILE_UPDATE = "file_update"
    PULL_REQUEST = "pull_request"


class ImageHooksException(Exception):
    """Base exception for all image-hooks errors."""
    pass

class ConfigurationError(ImageHooksException):
    """Raised when the repository configuration or process settings are invalid."""
    pass

class HookParseError(ImageHooksException):
    """Raised when a registry webhook body cannot be turned into a PushEvent."""
    pass

class ScmRequestError(ImageHooksException):
    """Raised when a request to the source-control provider fails."""
    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)

class PatchError(ImageHooksException):
    """Raised when a document cannot be patched."""
    kind = ErrorKind.PATCH

class KeyNotFoundError(PatchError):
    """Raised when the update key does not resolve to a scalar value."""
    def __init__(self, key_path: str):
        self.key_path = key_path
        super().__init__(f"key not found: {key_path}")


class UpdateStepError(ImageHooksException):
    """
    A failure in one of the git-side steps of an update, wrapping the upstream cause.

    The message reads "<context>: <cause>" and the cause is also chained as __cause__.
    """
    kind: ErrorKind
    context: str

    def __init__(self, cause: BaseException):
        self.cause = cause
        self.__cause__ = cause
        super().__init__(f"{self.context}: {cause}")

class BranchCreationError(UpdateStepError):
    kind = ErrorKind.BRANCH_CREATION
    context = "failed to create branch"

class FileUpdateError(UpdateStepError):
    kind = ErrorKind.FILE_UPDATE
    context = "failed to update file"

class PullRequestError(UpdateStepError):
    kind = ErrorKind.PULL_REQUEST
    context = "failed to create a pull request"


class MultipleUpdatesFailedError(ImageHooksException):
    """Raised when more than one configured target failed for the same push event."""
    def __init__(self, errors: List[Exception]):
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"{len(self.errors)} repository updates failed: {details}")
