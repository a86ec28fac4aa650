"""
Element Normalizer

Merges the node, interface and volume discovery results into one ordered
list of elements and applies the configured presentation order.
"""

import random
from typing import Any, Iterable, Optional

import structlog

from possible_alerts.clients.base import MalformedResponseError
from possible_alerts.models import Element

logger = structlog.get_logger(__name__)

ORDER_MODES = ("caption", "query", "sample")


def merge_elements(
    nodes: Iterable[dict[str, Any]],
    interfaces: Iterable[dict[str, Any]],
    volumes: Iterable[dict[str, Any]],
) -> list[Element]:
    """
    Concatenate discovery rows (nodes, then interfaces, then volumes).

    Row order within each query is kept and nothing is deduplicated:
    an interface and its owning node are separate elements.

    Raises:
        MalformedResponseError: a row lacks NodeID, Uri or InstanceType
    """
    elements = []
    for rows in (nodes, interfaces, volumes):
        for row in rows:
            try:
                elements.append(Element.from_row(row))
            except KeyError as e:
                raise MalformedResponseError(f"Discovery row missing {e}") from e
            except TypeError as e:
                raise MalformedResponseError(f"Discovery row is not a mapping: {row!r}") from e
    return elements


def sort_by_caption(elements: list[Element]) -> list[Element]:
    # stable, so ties keep discovery order
    return sorted(elements, key=lambda element: element.caption)


def sample_elements(
    elements: list[Element],
    size: int,
    seed: Optional[int] = None,
) -> list[Element]:
    """Uniform random sample without replacement, capped at the list length."""
    rng = random.Random(seed)
    return rng.sample(elements, min(size, len(elements)))


def order_elements(
    elements: list[Element],
    mode: str = "caption",
    sample_size: int = 25,
    seed: Optional[int] = None,
) -> list[Element]:
    """
    Apply one presentation mode. Sorting and sampling are exclusive.

    Args:
        elements: Merged element list
        mode: "caption", "query" or "sample"
        sample_size: Elements kept in sample mode
        seed: Random seed for sample mode

    Returns:
        New list in the requested order
    """
    if mode == "caption":
        return sort_by_caption(elements)
    if mode == "query":
        return list(elements)
    if mode == "sample":
        sampled = sample_elements(elements, sample_size, seed)
        logger.info("elements_sampled", total=len(elements), kept=len(sampled))
        return sampled
    raise ValueError(f"Unknown element order: {mode!r} (expected one of {ORDER_MODES})")
