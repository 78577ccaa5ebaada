"""Collection-wide summary counts."""

from __future__ import annotations

import logging
from typing import Dict

from pydantic import ValidationError

from .filters import PRIMARY_TYPE_FIELD, legendary_clause
from .models import CategoryCount, StatsSummary
from .store import Store

logger = logging.getLogger(__name__)

TYPE_DISTRIBUTION_PIPELINE = [
    {"$group": {"_id": f"${PRIMARY_TYPE_FIELD}", "count": {"$sum": 1}}},
]


def _type_distribution(store: Store) -> Dict[str, int]:
    distribution: Dict[str, int] = {}
    for row in store.aggregate(TYPE_DISTRIBUTION_PIPELINE):
        try:
            parsed = CategoryCount.model_validate(row)
        except ValidationError as exc:
            # A malformed group (e.g. a missing type_01) is skipped, not fatal.
            logger.debug("Skipping type distribution row %r: %s", row, exc)
            continue
        distribution[parsed.category] = parsed.count
    return distribution


def compute_stats(store: Store) -> StatsSummary:
    """Count all Pokemon, legendary Pokemon, and Pokemon per primary type.

    Args:
        store: Store handle for the served collection.

    Returns:
        Summary with totals and the primary type distribution.

    Raises:
        StoreFailure: If any of the three store calls fails; no partial summary is returned.
    """
    total = store.count({})
    legendary = store.count(legendary_clause("true"))
    distribution = _type_distribution(store)
    logger.debug("Stats: total=%d legendary=%d types=%d", total, legendary, len(distribution))
    return StatsSummary(
        total_count=total,
        special_count=legendary,
        category_distribution=distribution,
    )
