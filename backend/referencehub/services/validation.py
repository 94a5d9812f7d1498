"""
ReferenceHub Backend — Submission Validator
===========================================

What:  Pure functions that check and normalize submitted entry fields.
How:   Rules run in a fixed order and the first violation raises a
       ValidationError carrying one human-readable message:

           1. url       (required, valid absolute URL)
           2. note      (≤500 chars; required in the legacy shape)
           3. context   (required, ≤500 chars; current shape only)
           4. slideUrl  (optional, valid URL)
           5. tags      (≤5 kept, each ≤20 chars)

Who:   Called by the HTML form route and the JSON API route before anything
       touches the repository. No side effects.
"""

from typing import Any, List, Mapping, Optional

from referencehub.exceptions import ValidationError
from referencehub.schemas.entry import MAX_TAG_LENGTH, MAX_TAGS, EntryInput, SchemaVersion
from referencehub.services.url_normalizer import is_valid_url

MAX_NOTE_LENGTH = 500
MAX_CONTEXT_LENGTH = 500

# ── Messages ──────────────────────────────────────────────────────────────
MSG_URL_REQUIRED = "Please enter a URL."
MSG_URL_FORMAT = "Please enter the URL in a valid format."
MSG_NOTE_REQUIRED = "Please enter a note."
MSG_NOTE_TOO_LONG = f"Notes must be {MAX_NOTE_LENGTH} characters or fewer."
MSG_CONTEXT_REQUIRED = "Please describe how you used this URL."
MSG_CONTEXT_TOO_LONG = f"Context must be {MAX_CONTEXT_LENGTH} characters or fewer."
MSG_SLIDE_URL_FORMAT = "Please enter the slide URL in a valid format."
MSG_TAG_TOO_LONG = f"Each tag must be {MAX_TAG_LENGTH} characters or fewer."


def _optional_text(value: Any) -> Optional[str]:
    """Trimmed string, or None for non-strings and blank strings."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def coerce_tags_input(raw: Any) -> str:
    """
    Flatten the accepted tag inputs into one comma-separated string.

    A list contributes its string items (anything else becomes an empty
    slot); a string passes through; any other type means "no tags".
    """
    if isinstance(raw, (list, tuple)):
        return ",".join(item if isinstance(item, str) else "" for item in raw)
    if isinstance(raw, str):
        return raw
    return ""


def normalize_tags(raw: str) -> List[str]:
    """
    Split on commas, trim, drop empties, keep the first five.

    Order of first occurrence is kept and duplicates are not removed.
    """
    if not raw:
        return []
    tags = [tag.strip() for tag in raw.split(",")]
    return [tag for tag in tags if tag][:MAX_TAGS]


def validate_tags(raw: Any) -> List[str]:
    """Normalized tag list; raises ValidationError if a kept tag is too long."""
    tags = normalize_tags(coerce_tags_input(raw))
    if any(len(tag) > MAX_TAG_LENGTH for tag in tags):
        raise ValidationError(message=MSG_TAG_TOO_LONG, field="tags")
    return tags


def validate_entry_input(
    raw: Mapping[str, Any],
    version: SchemaVersion = SchemaVersion.CURRENT,
) -> EntryInput:
    """
    Validate one submission.

    Args:
        raw: Untyped fields from a form or a JSON body. Recognized keys are
             `url`, `note`, `context`, `slideUrl` and `tags`; others are ignored.
        version: Which entry shape is active.

    Returns:
        EntryInput with trimmed values (URLs are canonicalized later by the
        repository).

    Raises:
        ValidationError: The first violated rule, in the documented order.
    """
    # ── 1. URL ────────────────────────────────────────────────────────────
    url_value = raw.get("url")
    if not isinstance(url_value, str) or not url_value.strip():
        raise ValidationError(message=MSG_URL_REQUIRED, field="url")
    url = url_value.strip()
    if not is_valid_url(url):
        raise ValidationError(message=MSG_URL_FORMAT, field="url")

    # ── 2. Note ───────────────────────────────────────────────────────────
    note = _optional_text(raw.get("note"))
    if version == SchemaVersion.LEGACY and note is None:
        raise ValidationError(message=MSG_NOTE_REQUIRED, field="note")
    if note is not None and len(note) > MAX_NOTE_LENGTH:
        raise ValidationError(message=MSG_NOTE_TOO_LONG, field="note")

    # ── 3. Context ────────────────────────────────────────────────────────
    context: Optional[str] = None
    slide_url: Optional[str] = None
    if version == SchemaVersion.CURRENT:
        context = _optional_text(raw.get("context"))
        if context is None:
            raise ValidationError(message=MSG_CONTEXT_REQUIRED, field="context")
        if len(context) > MAX_CONTEXT_LENGTH:
            raise ValidationError(message=MSG_CONTEXT_TOO_LONG, field="context")

        # ── 4. Slide URL ──────────────────────────────────────────────────
        slide_url = _optional_text(raw.get("slideUrl"))
        if slide_url is not None and not is_valid_url(slide_url):
            raise ValidationError(message=MSG_SLIDE_URL_FORMAT, field="slideUrl")

    # ── 5. Tags ───────────────────────────────────────────────────────────
    tags = validate_tags(raw.get("tags"))

    return EntryInput(
        url=url,
        note=note,
        context=context,
        slide_url=slide_url,
        tags=tags,
    )
