import secrets

# Same alphabet Kubernetes uses for generateName suffixes: no vowels, no
# look-alike characters.
SUFFIX_ALPHABET = "bcdfghjklmnpqrstvwxz2456789"
SUFFIX_LENGTH = 5


class RandomNameGenerator:
    """Appends a random suffix to a prefix to build a fresh branch name."""

    def __init__(self, length: int = SUFFIX_LENGTH):
        self.length = length

    def prefixed_name(self, prefix: str) -> str:
        suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(self.length))
        return f"{prefix}{suffix}"


class StubNameGenerator:
    """Deterministic generator that always appends the same suffix."""

    def __init__(self, suffix: str):
        self.suffix = suffix

    def prefixed_name(self, prefix: str) -> str:
        return f"{prefix}{self.suffix}"
