"""Relevance ranking for multi-source search results."""

import re
from functools import cmp_to_key

from food_resolver.domain.products import FoodProduct

_TOKEN_SEPARATOR = re.compile(r"[\W_]+")


def normalize_query(query: str) -> str:
    """Lowercase and trim a query for ranking."""
    return query.strip().lower()


def rank_products(products: list[FoodProduct], query: str) -> list[FoodProduct]:
    """Sort products by relevance to a normalized query.

    Order: exact name match, then name prefix match, then first-word match,
    then shorter names. Earlier criteria always win; equal products keep
    their input order.
    """

    def compare(a: FoodProduct, b: FoodProduct) -> int:
        a_name = a.name.lower()
        b_name = b.name.lower()
        for matches in (_is_exact, _is_prefix, _is_first_word):
            a_match = matches(a_name, query)
            b_match = matches(b_name, query)
            if a_match != b_match:
                return -1 if a_match else 1
        return len(a_name) - len(b_name)

    return sorted(products, key=cmp_to_key(compare))


def _is_exact(name: str, query: str) -> bool:
    return name == query


def _is_prefix(name: str, query: str) -> bool:
    return name.startswith(query)


def _is_first_word(name: str, query: str) -> bool:
    first_word = _TOKEN_SEPARATOR.split(name, maxsplit=1)[0]
    return first_word.startswith(query)
