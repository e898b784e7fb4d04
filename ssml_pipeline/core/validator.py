"""Validation and sanitization of user-supplied markup.

WHY: Markup is accepted from users (and from LLM rewriting) and forwarded to
an external speech synthesizer. Before that hand-off it must be within size
limits, free of elements that fetch remote content, well-formed, and limited
to the narrow element vocabulary the synthesizer understands. Bare text and
fragments are common input, so the result is always wrapped in a <speak>
root.

HOW: validate_markup() applies seven rules in a fixed order and stops at the
first failure, raising MarkupValidationError with a typed kind:
  1. empty or whitespace-only            → EMPTY
  2. longer than MAX_MARKUP_LENGTH       → TOO_LONG
  3. any <audio> element                 → FORBIDDEN_ELEMENT
  4. src/audio/href pointing off-host    → EXTERNAL_REFERENCE
  5. not well-formed XML                 → MALFORMED_XML
  6. element outside ALLOWED_ELEMENTS    → DISALLOWED_ELEMENT
  7. wrap in <speak> unless already rooted there

RULES:
- Pure function; no aggregation of multiple errors
- This is advisory sanitization, not a security boundary: behaviour of the
  underlying XML parser (e.g. internal entity expansion) is passed through
- Success output is trimmed; a <speak>-rooted document is otherwise unchanged
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Optional

from ssml_pipeline.config import ALLOWED_ELEMENTS, MAX_MARKUP_LENGTH
from ssml_pipeline.core.markup import (
    Element,
    MarkupSyntaxError,
    parse_document,
    parse_fragment,
    strip_xml_declaration,
)

logger = logging.getLogger(__name__)

_FORBIDDEN_AUDIO_RE = re.compile(r"<\s*audio\b[^>]*>", re.IGNORECASE)

# Absolute ("https://", "ftp://") or scheme-relative ("//host") URI values.
_EXTERNAL_URI_RE = re.compile(
    r"""\b(?:src|audio|href)\s*=\s*["']\s*(?:[a-z][a-z0-9+.\-]*:)?//""",
    re.IGNORECASE,
)


class ValidationErrorKind(enum.Enum):
    """Why a piece of markup was rejected."""

    EMPTY = "empty"
    TOO_LONG = "too_long"
    FORBIDDEN_ELEMENT = "forbidden_element"
    EXTERNAL_REFERENCE = "external_reference"
    MALFORMED_XML = "malformed_xml"
    DISALLOWED_ELEMENT = "disallowed_element"


class MarkupValidationError(ValueError):
    """Raised when markup fails validation.

    WHY: Callers turn a rejection into a user-facing message and refuse the
    request. A typed kind lets them map specific failures (e.g. TOO_LONG)
    to specific responses without parsing message strings.

    RULES:
    - kind is always set
    - element is set only for DISALLOWED_ELEMENT (lower-cased name)
    """

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str,
        element: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.element = element
        super().__init__(message)


@dataclass(frozen=True)
class ValidatedMarkup:
    """Markup that passed validation, always rooted at <speak>."""

    wrapped: str


def _error(
    kind: ValidationErrorKind,
    message: str,
    element: Optional[str] = None,
) -> MarkupValidationError:
    logger.debug("Markup rejected (%s): %s", kind.value, message)
    return MarkupValidationError(kind, message, element)


def _find_disallowed(root: Element) -> Optional[str]:
    for element in root.iter():
        if element.name not in ALLOWED_ELEMENTS:
            return element.name
    return None


def validate_markup(text: str) -> ValidatedMarkup:
    """Validate user markup and wrap it in a <speak> root.

    Args:
        text: Raw markup or plain text, as received in a request field.

    Returns:
        ValidatedMarkup whose ``wrapped`` string is safe to send to the
        synthesizer.

    Raises:
        MarkupValidationError: On the first rule the input breaks.
    """
    if not text or not text.strip():
        raise _error(ValidationErrorKind.EMPTY, "Empty markup")

    if len(text) > MAX_MARKUP_LENGTH:
        raise _error(
            ValidationErrorKind.TOO_LONG,
            "Markup too long (max {} chars)".format(MAX_MARKUP_LENGTH),
        )

    if _FORBIDDEN_AUDIO_RE.search(text):
        raise _error(
            ValidationErrorKind.FORBIDDEN_ELEMENT,
            "Forbidden element <audio> detected in markup",
        )

    if _EXTERNAL_URI_RE.search(text):
        raise _error(
            ValidationErrorKind.EXTERNAL_REFERENCE,
            "External URIs not allowed in markup attributes",
        )

    trimmed = text.strip()

    # A single <speak> document passes through untouched; anything else is
    # checked (and later emitted) as a fragment inside a new <speak> root.
    root: Optional[Element] = None
    try:
        root = parse_document(trimmed)
    except MarkupSyntaxError:
        root = None

    rooted_at_speak = root is not None and root.name == "speak"
    if not rooted_at_speak:
        try:
            root = parse_fragment(trimmed)
        except MarkupSyntaxError as exc:
            raise _error(
                ValidationErrorKind.MALFORMED_XML,
                "XML validation error: {}".format(exc),
            ) from exc

    disallowed = _find_disallowed(root)
    if disallowed is not None:
        raise _error(
            ValidationErrorKind.DISALLOWED_ELEMENT,
            "Disallowed markup element: <{}>".format(disallowed),
            element=disallowed,
        )

    if rooted_at_speak:
        return ValidatedMarkup(wrapped=trimmed)
    return ValidatedMarkup(
        wrapped="<speak>{}</speak>".format(strip_xml_declaration(trimmed))
    )
