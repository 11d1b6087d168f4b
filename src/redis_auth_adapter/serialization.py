"""Record encoding for the Redis auth adapter.

Records are stored as JSON text keyed by field alias. Decoding validates the
JSON straight into the target model, which is where declared date fields are
turned back into ``datetime`` values.

``hydrate_dates`` converts every top-level string that looks like an ISO-8601
timestamp into a ``datetime``. Decoding applies it to extra fields only, so a
datetime stored in free-form profile data reads back as a datetime while
declared text fields are never reinterpreted. It is also usable on raw values
read out of the store.

Examples:
    Encoding and decoding a session::

        raw = encode_record(session)
        assert decode_record(AdapterSession, raw) == session

    Hydrating a raw record::

        >>> hydrate_dates({"expires": "2024-01-01T00:00:00.000Z", "userId": "u1"})
        {'expires': datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc), 'userId': 'u1'}
"""

import json
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, TypeVar

from redis_auth_adapter.models import AdapterModel

ModelT = TypeVar("ModelT", bound=AdapterModel)

_OFFSET = r"(?:[+-][0-2]\d:[0-5]\d|Z)"
ISO_DATE_RE = re.compile(
    r"\d{4}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d(?::[0-5]\d(?:\.\d+)?)?" + _OFFSET
)


def to_text(value: str | bytes) -> str:
    """Return ``value`` as text, decoding bytes from clients without decode_responses."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def encode_record(model: AdapterModel) -> str:
    """Serialize a model to the JSON stored under its primary key.

    Only fields that were set are written, so optional fields the caller never
    supplied do not appear in the stored record.
    """
    return model.model_dump_json(by_alias=True, exclude_unset=True)


def decode_record(model_cls: type[ModelT], raw: str | bytes) -> ModelT:
    """Deserialize stored JSON into ``model_cls``.

    Declared date fields are parsed by the model. Extra fields holding
    timestamp text are converted with hydrate_dates.

    Raises:
        ValidationError: If the stored value is not valid JSON for the model.
    """
    model = model_cls.model_validate_json(raw)
    if model.model_extra:
        # model_extra is the instance's own extras dict
        model.model_extra.update(hydrate_dates(model.model_extra))
    return model


def parse_iso_datetime(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp with a ``Z`` or numeric offset.

    Returns:
        The parsed datetime, or None when ``value`` does not match or is not
        a real calendar date.
    """
    if not ISO_DATE_RE.search(value):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def hydrate_dates(record: Mapping[str, Any] | str | bytes) -> dict[str, Any]:
    """Convert every top-level timestamp-looking string into a ``datetime``.

    Args:
        record: A decoded record, or its JSON text.

    Returns:
        A new dictionary with matching values replaced.

    Note:
        Any string matching the pattern is converted, including free-text
        fields that merely look like timestamps.
    """
    if isinstance(record, (str, bytes)):
        record = json.loads(record)

    hydrated: dict[str, Any] = {}
    for key, value in record.items():
        parsed = parse_iso_datetime(value) if isinstance(value, str) and value else None
        hydrated[key] = parsed if parsed is not None else value
    return hydrated
