"""Interpretation of search results for lookups that must be unique."""

from typing import Optional, Sequence, TypeVar

from .errors import MultipleResultsError, NotFoundError

T = TypeVar('T')


def resolve_single(
    results: Sequence[T],
    lookup_key: str,
    size: Optional[int] = None,
) -> T:
    """Return the only result of a uniqueness-constrained lookup.

    Args:
        results: Candidate results returned by the lookup
        lookup_key: Human-readable description of what was looked up
        size: Result count reported by the API envelope, if any. Takes
            precedence when it exceeds the number of candidates returned.

    Returns:
        The single result

    Raises:
        NotFoundError: If there is no result
        MultipleResultsError: If there is more than one result
    """
    count = len(results)
    if size is not None and size > count:
        count = size

    if count > 1:
        raise MultipleResultsError(lookup_key, count)
    if not results:
        raise NotFoundError(lookup_key)
    return results[0]
