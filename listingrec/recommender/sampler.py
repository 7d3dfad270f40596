"""Distribution-weighted item sampling.

Selects a bounded, de-duplicated, randomized set of item summaries whose
category composition approximates a caller-supplied category distribution.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

import numpy as np

from listingrec.catalog.models import ItemSummary
from listingrec.catalog.store import ItemCatalog

# Configure module logger
logger = logging.getLogger(__name__)

# Largest result the sampler will ever return
DEFAULT_HARD_CAP = 1000

# Category ids are signed 64-bit integers written in plain decimal
CATEGORY_KEY_PATTERN = re.compile(r"[+-]?[0-9]+")
MAX_CATEGORY_ID = 2**63 - 1
MIN_CATEGORY_ID = -(2**63)


@dataclass(frozen=True)
class CategoryWeight:
    """A parsed (category id, weight) pair."""

    category_id: int
    weight: float


def parse_category_key(raw_key: object) -> Optional[int]:
    """Parse a category key, or return None if it is not a valid id.

    Only an optional sign followed by ASCII digits is accepted, with no
    surrounding whitespace or digit separators, within the signed 64-bit
    range.
    """
    if not isinstance(raw_key, str) or not CATEGORY_KEY_PATTERN.fullmatch(raw_key):
        return None
    category_id = int(raw_key)
    if not MIN_CATEGORY_ID <= category_id <= MAX_CATEGORY_ID:
        return None
    return category_id


def parse_distribution(distribution: Mapping[str, object]) -> List[CategoryWeight]:
    """Turn a raw distribution mapping into valid category weights.

    Keys that do not parse as integer category ids are skipped, as are
    weights that are not finite numbers. When two keys parse to the same
    id the later weight wins, but the id keeps its first position.

    Args:
        distribution: Mapping of string category ids to weights.

    Returns:
        List of CategoryWeight in input order.
    """
    parsed: Dict[int, float] = {}

    for raw_key, raw_weight in distribution.items():
        category_id = parse_category_key(raw_key)
        if category_id is None:
            logger.debug(
                "Skipping malformed category key", extra={"category_key": raw_key}
            )
            continue

        if isinstance(raw_weight, bool):
            continue
        try:
            weight = float(raw_weight)
        except (TypeError, ValueError):
            logger.debug(
                "Skipping non-numeric weight", extra={"category_id": category_id}
            )
            continue
        if not math.isfinite(weight):
            continue

        parsed[category_id] = weight

    return [CategoryWeight(cid, w) for cid, w in parsed.items()]


def resolve_effective_limit(
    limit: Optional[int], hard_cap: int = DEFAULT_HARD_CAP
) -> int:
    """Clamp a requested limit to the hard cap.

    Missing, zero or negative limits fall back to the hard cap.
    """
    if limit is None or limit <= 0:
        return hard_cap
    return min(limit, hard_cap)


def resolve_pools(
    catalog: ItemCatalog, weights: List[CategoryWeight]
) -> Dict[int, List[ItemSummary]]:
    """Fetch a private working pool for every weighted category.

    Each pool is a fresh list so draws never touch the catalog's storage.
    Categories whose pool is empty are left out.
    """
    pools: Dict[int, List[ItemSummary]] = {}
    for entry in weights:
        items = list(catalog.list_by_category(entry.category_id))
        if items:
            pools[entry.category_id] = items
    return pools


def compute_quotas(
    weights: List[CategoryWeight],
    pools: Mapping[int, List[ItemSummary]],
    effective_limit: int,
) -> Dict[int, int]:
    """Compute the number of draws per category.

    quota = ceil(effective_limit * weight), saturated to [0, effective_limit]
    since no category can contribute more than the limit. Weights are not
    normalized, so the total may exceed the limit; the overshoot is trimmed
    after drawing. Non-positive weights give a zero quota.
    """
    return {
        entry.category_id: category_quota(entry.weight, effective_limit)
        for entry in weights
        if entry.category_id in pools
    }


def category_quota(weight: float, effective_limit: int) -> int:
    """Return ceil(effective_limit * weight) clamped to [0, effective_limit]."""
    if weight <= 0:
        return 0
    if weight >= 1:
        return effective_limit
    return min(math.ceil(effective_limit * weight), effective_limit)


def draw_from_pools(
    pools: Dict[int, List[ItemSummary]],
    quotas: Mapping[int, int],
    effective_limit: int,
    rng: np.random.Generator,
) -> List[ItemSummary]:
    """Draw items per quota without replacement.

    Pools are consumed in place: every drawn item is removed from its pool.
    Drawing stops once the result reaches effective_limit.
    """
    result: List[ItemSummary] = []

    for category_id, quota in quotas.items():
        pool = pools[category_id]
        drawn = 0
        while drawn < quota and pool and len(result) < effective_limit:
            index = int(rng.integers(len(pool)))
            result.append(pool.pop(index))
            drawn += 1

        if len(result) >= effective_limit:
            break

    return result


def finalize(
    result: List[ItemSummary], effective_limit: int, rng: np.random.Generator
) -> List[ItemSummary]:
    """Shuffle drawn items and trim them to the limit."""
    order = rng.permutation(len(result))
    return [result[int(i)] for i in order[:effective_limit]]


class DistributionSampler:
    """Samples catalog items according to a category distribution.

    The sampler holds no per-call state. Every call builds its own pools and
    uses its own random generator, so one instance can serve concurrent
    callers as long as the catalog supports concurrent reads.
    """

    def __init__(self, catalog: ItemCatalog, hard_cap: int = DEFAULT_HARD_CAP):
        if hard_cap <= 0:
            raise ValueError(f"hard_cap must be positive, got {hard_cap}")
        self.catalog = catalog
        self.hard_cap = hard_cap

    def sample(
        self,
        distribution: Mapping[str, object],
        limit: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> List[ItemSummary]:
        """Select items whose category mix follows the given distribution.

        Args:
            distribution: Mapping of string category ids to weights. Malformed
                keys and unknown or empty categories are skipped.
            limit: Maximum number of items. None or non-positive means the
                hard cap.
            rng: Random generator for this call. A new unseeded generator is
                created when omitted.

        Returns:
            List of distinct item summaries, at most the effective limit long,
            in random order.

        Raises:
            Exception: Whatever the catalog raises on a failed read.
        """
        effective_limit = resolve_effective_limit(limit, self.hard_cap)
        if rng is None:
            rng = np.random.default_rng()

        weights = parse_distribution(distribution)
        pools = resolve_pools(self.catalog, weights)
        if not pools:
            logger.info(
                "No category yielded items",
                extra={"requested_categories": len(distribution)},
            )
            return []

        quotas = compute_quotas(weights, pools, effective_limit)
        drawn = draw_from_pools(pools, quotas, effective_limit, rng)
        result = finalize(drawn, effective_limit, rng)

        logger.debug(
            "Sampled items by distribution",
            extra={
                "effective_limit": effective_limit,
                "num_categories": len(pools),
                "total_quota": sum(quotas.values()),
                "num_items": len(result),
            },
        )

        return result
