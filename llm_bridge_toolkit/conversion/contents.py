"""Part classification and content normalisation.

Every predicate here is total: it accepts any Python value and answers
``False`` for anything it does not recognise.  Malformed fragments are
dropped from the conversation rather than raised.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ValidationError

from ..types import (
    ROLE_USER,
    Content,
    FunctionCallPart,
    FunctionResponsePart,
    InlineDataPart,
    Part,
    TextPart,
)

logger = logging.getLogger(__name__)


def _raw_field(part: Mapping[str, Any], camel: str, snake: str) -> Any:
    value = part.get(camel)
    if value is None:
        value = part.get(snake)
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)
    return value


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


def is_text(part: Any) -> bool:
    if isinstance(part, TextPart):
        return True
    return isinstance(part, Mapping) and isinstance(part.get("text"), str)


def is_function_call(part: Any) -> bool:
    """Return ``True`` for a function call with a string name and an args mapping."""
    if isinstance(part, FunctionCallPart):
        return True
    if not isinstance(part, Mapping):
        return False
    call = _raw_field(part, "functionCall", "function_call")
    if not isinstance(call, Mapping):
        return False
    return isinstance(call.get("name"), str) and isinstance(call.get("args"), Mapping)


def is_function_response(part: Any) -> bool:
    """Return ``True`` for a function response with id, name and output or error."""
    if isinstance(part, FunctionResponsePart):
        return True
    if not isinstance(part, Mapping):
        return False
    fr = _raw_field(part, "functionResponse", "function_response")
    if not isinstance(fr, Mapping):
        return False
    response = fr.get("response")
    if not isinstance(response, Mapping):
        return False
    has_payload = isinstance(response.get("output"), str) or isinstance(
        response.get("error"), str
    )
    return isinstance(fr.get("id"), str) and isinstance(fr.get("name"), str) and has_payload


def is_inline_data(part: Any) -> bool:
    if isinstance(part, InlineDataPart):
        return True
    if not isinstance(part, Mapping):
        return False
    data = _raw_field(part, "inlineData", "inline_data")
    if not isinstance(data, Mapping):
        return False
    mime_type = data.get("mimeType", data.get("mime_type"))
    return isinstance(mime_type, str) and isinstance(data.get("data"), str)


def coerce_part(raw: Any) -> Optional[Part]:
    """Turn *raw* into a typed part, or ``None`` when it is not a valid fragment."""
    if isinstance(raw, (TextPart, FunctionCallPart, FunctionResponsePart, InlineDataPart)):
        return raw
    if isinstance(raw, str):
        return TextPart(text=raw)

    model: Optional[type] = None
    if is_function_call(raw):
        model = FunctionCallPart
    elif is_function_response(raw):
        model = FunctionResponsePart
    elif is_inline_data(raw):
        model = InlineDataPart
    elif is_text(raw):
        model = TextPart

    if model is None:
        logger.debug("Dropping unrecognised part: %r", raw)
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.debug("Dropping malformed %s: %s", model.__name__, e)
        return None


def coerce_parts(raw_parts: Any) -> List[Part]:
    if raw_parts is None:
        return []
    if not isinstance(raw_parts, (list, tuple)):
        raw_parts = [raw_parts]
    parts: List[Part] = []
    for raw in raw_parts:
        part = coerce_part(raw)
        if part is not None:
            parts.append(part)
    return parts


# ---------------------------------------------------------------------------
# Normaliser
# ---------------------------------------------------------------------------


def _is_content_block(item: Any) -> bool:
    return isinstance(item, Content) or (isinstance(item, Mapping) and "parts" in item)


def _normalize_item(item: Any) -> Content:
    if isinstance(item, str):
        return Content(role=ROLE_USER, parts=[TextPart(text=item)])
    if isinstance(item, Content):
        return item
    if _is_content_block(item):
        return Content(
            role=item.get("role") or ROLE_USER,
            parts=coerce_parts(item.get("parts")),
        )
    return Content(role=ROLE_USER, parts=coerce_parts([item]))


def normalize_contents(contents: Any) -> List[Content]:
    """Coerce any accepted contents shape into an ordered list of :class:`Content`.

    Accepted shapes: a string, a single content block, a bare part, or a
    list whose items are any of those.  Strings and bare parts become
    ``user`` blocks; content blocks keep their declared role.  Order is
    preserved and nothing is merged.
    """
    if contents is None:
        return []
    if isinstance(contents, (list, tuple)):
        return [_normalize_item(item) for item in contents]
    return [_normalize_item(contents)]
