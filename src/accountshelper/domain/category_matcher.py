"""Payee text to category matching with learned mappings."""

import logging
from typing import Callable, Optional, Sequence

from accountshelper.database.base import Database
from accountshelper.domain.entities import CategoryMapping
from accountshelper.domain.enums import Category

logger = logging.getLogger(__name__)

# Usage counts saturate at the largest signed 32-bit value.
MAX_USAGE_COUNT = 2**31 - 1

# Matching tiers, strongest first. Each takes (normalized input, mapping key).
MATCH_TIERS: tuple[tuple[str, Callable[[str, str], bool]], ...] = (
    ("exact", lambda text, key: text == key),
    ("prefix", lambda text, key: text.startswith(key)),
    ("contains", lambda text, key: key in text),
)


def normalize(text: Optional[str]) -> str:
    """Lower-case and trim text for comparison."""
    if text is None:
        return ""
    return text.strip().lower()


def select_mapping(
    mappings: Sequence[CategoryMapping], normalized: str
) -> Optional[CategoryMapping]:
    """Pick the mapping that best matches already-normalized input.

    Tiers are tried in order (exact, prefix, contains) and only the first tier
    with any match is considered. Within that tier the highest usage count
    wins; equal counts fall back to the earliest mapping in ``mappings``.
    """
    if not normalized:
        return None

    for tier, matches in MATCH_TIERS:
        candidates = [m for m in mappings if m.normalized_key and matches(normalized, m.normalized_key)]
        if candidates:
            # max() keeps the first of equal elements, which preserves insertion order
            best = max(candidates, key=lambda m: m.usage_count)
            logger.debug("Matched %r via %s mapping %r", normalized, tier, best.normalized_key)
            return best
    return None


def incremented(usage_count: int) -> int:
    """Return the next usage count, saturating at MAX_USAGE_COUNT."""
    return min(usage_count + 1, MAX_USAGE_COUNT)


class CategoryMatcher:
    """Learns and applies payee text to category mappings."""

    def __init__(self, db: Database):
        """Initialize category matcher.

        Args:
            db: Database instance
        """
        self.db = db

    def list_mappings(self) -> list[CategoryMapping]:
        """List every learned mapping in insertion order."""
        return self.db.list_category_mappings()

    def preview_category(self, text: Optional[str]) -> Category:
        """Category that text would match, without counting it as a use."""
        best = select_mapping(self.db.list_category_mappings(), normalize(text))
        return best.category if best is not None else Category.unknown

    def match_category(self, text: Optional[str]) -> Category:
        """Find the most likely category for free-text payee input.

        A hit counts as a use of the winning mapping.

        Args:
            text: Payee or description text

        Returns:
            Matched category, or Category.unknown when nothing matches
        """
        normalized = normalize(text)
        if not normalized:
            return Category.unknown

        best = select_mapping(self.db.list_category_mappings(), normalized)
        if best is None:
            logger.debug("No mapping matches %r", normalized)
            return Category.unknown

        self.db.update_category_mapping(best.id, usage_count=incremented(best.usage_count))
        return best.category

    def teach_mapping(self, text: Optional[str], category: Category) -> Optional[CategoryMapping]:
        """Teach that text maps to a category.

        Re-teaching an existing key updates that mapping in place and bumps its
        usage count rather than adding a second mapping for the key.

        Args:
            text: Payee or description text
            category: Category to map it to

        Returns:
            The stored mapping, or None when the text is empty
        """
        normalized = normalize(text)
        if not normalized:
            return None

        existing = self.db.find_category_mappings(normalized)
        if not existing:
            mapping_id = self.db.create_category_mapping(normalized, category, usage_count=1)
            logger.debug("Learned new mapping %r -> %s", normalized, category.description)
            return CategoryMapping(id=mapping_id, normalized_key=normalized, category=category, usage_count=1)

        same_category = [m for m in existing if m.category is category]
        if same_category:
            target = same_category[0]
        else:
            target = max(existing, key=lambda m: m.usage_count)

        usage_count = incremented(target.usage_count)
        self.db.update_category_mapping(target.id, category=category, usage_count=usage_count)
        logger.debug(
            "Re-taught mapping %r: %s -> %s (usage %d)",
            normalized,
            target.category.description,
            category.description,
            usage_count,
        )
        return CategoryMapping(id=target.id, normalized_key=normalized, category=category, usage_count=usage_count)

    def reapply_mappings_to_unknown_transactions(self) -> int:
        """Categorise uncategorised transactions using the current mappings.

        Only transactions whose category is still unknown are touched, so
        running this repeatedly gives the same result.

        Returns:
            Number of transactions updated
        """
        changes: dict[int, Category] = {}
        for txn in self.db.list_transactions(uncategorized=True):
            if txn.category is not Category.unknown or not txn.payee:
                continue
            matched = self.match_category(txn.payee)
            if matched is not Category.unknown:
                changes[txn.id] = matched

        self.db.update_transaction_categories(changes)
        logger.debug("Reapplied mappings to %d uncategorised transactions", len(changes))
        return len(changes)
