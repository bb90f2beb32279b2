"""
listops – Small, shared list operations for amalgamate.

Options such as ``--dir`` and ``--dir-quote`` are collected into separate
lists but must be consumed in the order they were typed. Each collected value
carries its position on the command line; these helpers merge lists back by
that position.
"""
import heapq
from typing import Iterable, List, Tuple, TypeVar

T = TypeVar("T")

Positioned = Tuple[int, T]


def merge_by_position(*lists: Iterable[Positioned]) -> List[T]:
    """Stable merge of already position-sorted lists, dropping the positions.

    Examples
    --------
    >>> merge_by_position([(0, "a"), (4, "c")], [(2, "b")])
    ['a', 'b', 'c']
    """
    return [value for _, value in heapq.merge(*lists, key=lambda item: item[0])]

