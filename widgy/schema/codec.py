"""JSON decoding and encoding for widget configs.

Decoding wraps pydantic and JSON errors in `DecodeError` with a short,
user-displayable message. Encoding always emits the canonical key set.
"""

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .lib import WidgetConfig, WidgetNode, migrate

logger = logging.getLogger(__name__)

MAX_REPORTED_ERRORS = 5

_NODE_ADAPTER: TypeAdapter[WidgetNode] = TypeAdapter(WidgetNode)

_FENCE_OPEN = "```json\n"
_FENCE_CLOSE = "\n```"


class DecodeError(ValueError):
    """Raised when input cannot be decoded into a widget node or config.

    Attributes:
        errors: One ``location: reason`` entry per problem found.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def _describe(exc: ValidationError) -> list[str]:
    entries = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        entries.append(f"{location}: {error['msg']}")
    return entries


def _wrap(exc: ValidationError, what: str) -> DecodeError:
    entries = _describe(exc)
    shown = entries[:MAX_REPORTED_ERRORS]
    message = f"Invalid {what}: " + "; ".join(shown)
    if len(entries) > len(shown):
        message += f" (and {len(entries) - len(shown)} more)"
    logger.warning(message)
    return DecodeError(message, entries)


def _load(data: str | bytes | dict[str, Any]) -> Any:
    if isinstance(data, (str, bytes, bytearray)):
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed JSON: {e}")
            raise DecodeError(f"Malformed JSON: {e}", [str(e)]) from e
    return data


def decode_node(data: str | bytes | dict[str, Any]) -> WidgetNode:
    """Decode a single node from a JSON string or parsed object.

    Raises:
        DecodeError: If the input is not valid JSON or not a node.
    """
    try:
        return _NODE_ADAPTER.validate_python(_load(data))
    except ValidationError as e:
        raise _wrap(e, "widget node") from e


def decode_config(data: str | bytes | dict[str, Any]) -> WidgetConfig:
    """Decode a `WidgetConfig` from a JSON string or parsed object.

    The schema version is left as found; see `parse_widget_config` for the
    migrating variant.

    Raises:
        DecodeError: If the input is not valid JSON or not a config.
    """
    try:
        return WidgetConfig.model_validate(_load(data))
    except ValidationError as e:
        raise _wrap(e, "widget config") from e


def encode_node(node: WidgetNode) -> dict[str, Any]:
    return _NODE_ADAPTER.dump_python(node, mode="json", exclude_none=True)


def encode_config(config: WidgetConfig) -> dict[str, Any]:
    """Serialize `config` to its canonical JSON-compatible dict."""
    return config.model_dump(mode="json", exclude_none=True)


def dumps_config(config: WidgetConfig, indent: int | None = 2, sort_keys: bool = True) -> str:
    """Serialize `config` to a canonical JSON string."""
    return json.dumps(encode_config(config), indent=indent, sort_keys=sort_keys, ensure_ascii=False)


def extract_json(text: str) -> str:
    """Pull the JSON body out of free-form generator output.

    Prefers the contents of a fenced ```json block, then the span from the
    first ``{`` to the last ``}``, and otherwise returns `text` unchanged.
    """
    start = text.find(_FENCE_OPEN)
    if start != -1:
        body_start = start + len(_FENCE_OPEN)
        end = text.find(_FENCE_CLOSE, body_start)
        if end != -1:
            return text[body_start:end]

    first, last = text.find("{"), text.rfind("}")
    if first != -1 and last > first:
        return text[first : last + 1]

    return text


def parse_widget_config(text: str) -> WidgetConfig:
    """Extract, decode and migrate a config from generator output.

    Raises:
        DecodeError: If no valid config can be decoded.
    """
    return migrate(decode_config(extract_json(text)))


__all__ = [
    "DecodeError",
    "decode_node",
    "decode_config",
    "encode_node",
    "encode_config",
    "dumps_config",
    "extract_json",
    "parse_widget_config",
]
