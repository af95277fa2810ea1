"""
Badge Service

Marks the cheapest and the fastest quote in a result list. Ties go to the
earliest quote, so provider order decides between equal offers.
"""
from dataclasses import replace
from typing import List, Sequence

from shipquote.modules.shipping.providers.base import Quote


def assign_badges(quotes: Sequence[Quote]) -> List[Quote]:
    """
    Return copies of the quotes with is_cheapest/is_fastest set.

    Exactly one quote gets each badge when the list is non-empty; both can land
    on the same quote. Existing badges on the input are overwritten, and the
    input sequence is left untouched.

    Args:
        quotes: Quotes in provider order

    Returns:
        New list in the same order
    """
    if not quotes:
        return []

    cheapest = 0
    fastest = 0
    for i, quote in enumerate(quotes):
        if quote.price < quotes[cheapest].price:
            cheapest = i
        if quote.estimated_days < quotes[fastest].estimated_days:
            fastest = i

    return [
        replace(quote, is_cheapest=(i == cheapest), is_fastest=(i == fastest))
        for i, quote in enumerate(quotes)
    ]
