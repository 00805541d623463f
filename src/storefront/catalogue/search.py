"""Catalogue search and ranking.

A full-text index stand-in: every candidate is scored against the folded
query and ranked. Scores are additive, so a product whose name equals the
query also collects the prefix, substring and all-tokens bonuses.
"""

from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.shared.text import normalize_text

NAME_EXACT = 100
NAME_PREFIX = 60
NAME_CONTAINS = 40
NAME_ALL_TOKENS = 30
DESCRIPTION_CONTAINS = 10
DESCRIPTION_ALL_TOKENS = 5


@dataclass(frozen=True)
class ScoredProduct:
    product: Product
    score: int


def _created_at(product) -> datetime:
    return product.created_at or datetime.min


def score_text(name, description, key, tokens) -> int:
    """Score pre-normalised ``name``/``description`` against a normalised query."""
    score = 0

    if name == key:
        score += NAME_EXACT
    if name.startswith(key):
        score += NAME_PREFIX
    if key in name:
        score += NAME_CONTAINS
    if tokens and all(token in name for token in tokens):
        score += NAME_ALL_TOKENS
    if key in description:
        score += DESCRIPTION_CONTAINS
    if tokens and all(token in description for token in tokens):
        score += DESCRIPTION_ALL_TOKENS

    return score


def _score(product, key, tokens) -> int:
    return score_text(normalize_text(product.name), normalize_text(product.matchable_description), key, tokens)


def score_product(product, query) -> int:
    key = normalize_text(query)
    return _score(product, key, key.split())


def newest_first(products) -> list:
    # sorted() is stable, so equal timestamps keep store order.
    return sorted(products, key=_created_at, reverse=True)


def rank_products(products, query) -> list:
    """Order ``products`` by relevance to ``query``, dropping non-matches."""
    key = normalize_text(query)
    if not key:
        return newest_first(products)

    tokens = key.split()
    scored = []
    for product in products:
        score = _score(product, key, tokens)
        if score > 0:
            scored.append(ScoredProduct(product=product, score=score))

    scored.sort(key=lambda s: (s.score, _created_at(s.product)), reverse=True)
    return [s.product for s in scored]


def search_products(query=None, category=None) -> list[Product]:
    repo = current_domain.repository_for(Product)
    category = (category or "").strip()
    candidates = repo.by_category(category) if category else repo.all_products()
    return rank_products(candidates, query or "")
