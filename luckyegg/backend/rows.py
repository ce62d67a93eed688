"""
Row validation at the backend boundary.

Rows can be written by other clients of the backend, so a single row may
not fit our models (e.g. a rarity this service does not know). Lists skip
such rows with a warning; single-row reads raise BackendError.
"""

import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from luckyegg.backend.client import Row
from luckyegg.models.failure import BackendError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def parse_rows(model: type[M], rows: list[Row], table: str) -> list[M]:
    """Validate rows into models, dropping the ones that do not validate."""
    parsed: list[M] = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(
                "Skipping invalid %s row %r: %d validation error(s): %s",
                table,
                row.get("id"),
                e.error_count(),
                e.errors()[0]["msg"],
            )
    return parsed


def parse_row(model: type[M], row: Row, table: str) -> M:
    """
    Validate one row.

    Raises:
        BackendError: If the row does not fit the model
    """
    try:
        return model.model_validate(row)
    except ValidationError as e:
        raise BackendError(f"invalid {table} row {row.get('id')!r}: {e}") from e
