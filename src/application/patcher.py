import json
import logging
from typing import Optional, Tuple

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode
from yaml.tokens import ScalarToken

from src.domain.exceptions import KeyNotFoundError, PatchError

logger = logging.getLogger(__name__)

# Flow indicators are unsafe anywhere in a plain scalar, the rest only as its
# first character.
_FLOW_INDICATORS = set(",[]{}")
_LEADING_INDICATORS = set("#&*!|>'\"%@`-?:")


def patch(document: bytes, key_path: str, new_value: str) -> bytes:
    """
    Replaces the scalar at `key_path` in a YAML document with `new_value`.

    Only the characters of the addressed scalar are rewritten. Comments, key
    order, indentation and every other value keep their exact bytes, because the
    edit is applied to the source text at the positions PyYAML records for the
    node instead of re-serializing the parsed document.

    Args:
        document (bytes): UTF-8 encoded YAML document.
        key_path (str): Dot-separated keys, e.g. "spec.template.image". Numeric
            segments index into sequences.
        new_value (str): The replacement string value.

    Returns:
        bytes: The patched document.

    Raises:
        KeyNotFoundError: A segment is missing or the target is not a scalar.
        PatchError: The document cannot be parsed or the scalar cannot be edited in place.
    """
    try:
        text = document.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PatchError(f"document is not valid UTF-8: {e}") from e

    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise PatchError(f"failed to parse document: {e}") from e

    target = _resolve(root, key_path)

    if target.style in ("|", ">"):
        raise PatchError(f"cannot rewrite block scalar at {key_path}")

    replacement = _render_scalar(new_value, target.style)
    span = _scalar_span(text, target)
    if span is None:
        # Empty value such as "image:" has no scalar text; write after the indicator.
        start = end = target.end_mark.index
        replacement = " " + replacement
    else:
        start, end = span

    logger.debug(f"Replacing {text[start:end]!r} with {replacement!r} at {key_path}")
    return (text[:start] + replacement + text[end:]).encode("utf-8")


def _resolve(root: Optional[Node], key_path: str) -> ScalarNode:
    node = root
    for segment in key_path.split("."):
        node, position = _child(node, segment)
        if node is None:
            raise KeyNotFoundError(key_path)
        # Aliases refer to nodes defined earlier in the stream, so a child that
        # starts before its own slot was reached through one.
        if node.start_mark.index < position:
            raise PatchError(f"cannot rewrite {key_path}: it is reached through an alias")

    if not isinstance(node, ScalarNode):
        raise KeyNotFoundError(key_path)
    return node


def _child(node: Optional[Node], segment: str) -> Tuple[Optional[Node], int]:
    """Returns the child for `segment` and the offset its own text must start at."""
    if isinstance(node, MappingNode):
        found, position = None, 0
        # Later duplicates win, matching how the loader builds the mapping.
        for key_node, value_node in node.value:
            if isinstance(key_node, ScalarNode) and key_node.value == segment:
                found, position = value_node, key_node.end_mark.index
        return found, position

    if isinstance(node, SequenceNode) and segment.isdigit():
        index = int(segment)
        if index < len(node.value):
            if index == 0:
                return node.value[0], node.start_mark.index
            return node.value[index], node.value[index - 1].end_mark.index

    return None, 0


def _scalar_span(text: str, node: ScalarNode) -> Optional[Tuple[int, int]]:
    """
    Returns the offsets of the scalar's own text. The node's marks also cover
    any anchor or tag written before it, which must stay in place.
    """
    for token in yaml.scan(text, Loader=yaml.SafeLoader):
        if isinstance(token, ScalarToken) and token.end_mark.index == node.end_mark.index:
            return token.start_mark.index, token.end_mark.index
    return None


def _render_scalar(value: str, style: Optional[str]) -> str:
    if style == "'":
        return "'" + value.replace("'", "''") + "'"
    if style == '"' or not _is_safe_plain(value):
        return json.dumps(value)
    return value


def _is_safe_plain(value: str) -> bool:
    if not value or value != value.strip() or "\n" in value:
        return False
    if value[0] in _LEADING_INDICATORS or any(ch in _FLOW_INDICATORS for ch in value):
        return False
    try:
        return yaml.safe_load(value) == value
    except yaml.YAMLError:
        return False
