# core/indexes.py
"""
Composite index guard.

Filtered, ordered range queries are only allowed when a declared index on
the model covers them: the equality-filtered fields (in any order) followed
by the ordering field. Uncovered combinations fail fast with
BackendPreconditionError instead of degrading into a table scan.
"""
import logging
from typing import Iterable

from .exceptions import BackendPreconditionError

logger = logging.getLogger("devfest.indexes")


def _strip_direction(field_name: str) -> str:
    return field_name.lstrip("-")


def find_covering_index(model, equality_fields: Iterable[str], order_field: str):
    """Return the first ``Meta.indexes`` entry covering the query, or None."""
    wanted = {_strip_direction(f) for f in equality_fields}
    order = _strip_direction(order_field)

    for index in model._meta.indexes:
        fields = [_strip_direction(f) for f in index.fields]
        if not fields or fields[-1] != order:
            continue
        if set(fields[:-1]) == wanted:
            return index
    return None


def require_index(model, equality_fields: Iterable[str], order_field: str):
    equality_fields = sorted(equality_fields)
    index = find_covering_index(model, equality_fields, order_field)
    if index is None:
        missing = equality_fields + [order_field]
        detail = (
            f"No composite index on {model._meta.label} covers "
            f"filters={equality_fields} order_by={order_field}. "
            f"Declare models.Index(fields={missing!r}) and migrate."
        )
        logger.error(detail)
        raise BackendPreconditionError(detail)
    return index
