"""Validation of the raw VIA Rail feed into typed train snapshots."""

import logging
from typing import Any, Dict, Sequence, Union

from pydantic import ValidationError

from .exceptions import FeedValidationError
from .models import Train, ViaRailData

logger = logging.getLogger(__name__)

# Union tags pydantic inserts into error locations; not part of the wire path
_VARIANT_TAGS = {"intermediate", "terminal"}


def _format_path(loc: Sequence[Union[str, int]]) -> str:
    return ".".join(str(part) for part in loc if part not in _VARIANT_TAGS)


def _feed_error(exc: ValidationError, what: str) -> FeedValidationError:
    errors = exc.errors(include_url=False)
    path = _format_path(errors[0]["loc"]) if errors else None
    logger.warning(f"Rejected {what}: {len(errors)} error(s), first at {path!r}")
    return FeedValidationError(
        f"Invalid {what} at {path!r}: {errors[0]['msg'] if errors else exc}",
        path=path,
        errors=errors,
    )


def normalize_feed(payload: Any) -> ViaRailData:
    """
    Validate a parsed feed payload and return a typed snapshot.

    Args:
        payload: Parsed JSON mapping of train id to train record.

    Returns:
        ViaRailData snapshot.

    Raises:
        FeedValidationError: If any entry does not match the schema. No
            partial result is produced.
    """
    try:
        data = ViaRailData.model_validate(payload)
    except ValidationError as exc:
        raise _feed_error(exc, "feed") from exc

    logger.debug(f"Normalized feed with {len(data)} trains")
    return data


def normalize_train(payload: Any) -> Train:
    """Validate a single train record."""
    try:
        return Train.model_validate(payload)
    except ValidationError as exc:
        raise _feed_error(exc, "train record") from exc


def to_payload(data: Union[ViaRailData, Train]) -> Dict[str, Any]:
    """
    Serialize a snapshot back to the feed's wire shape.

    Only fields the feed actually sent are emitted, so an explicit
    ``"direction": null`` survives while an unreported direction stays absent.
    """
    return data.model_dump(mode="json", by_alias=True, exclude_unset=True)
