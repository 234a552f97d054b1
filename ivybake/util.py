# --------------------------------------------------------------------
# util.py: Common utility functions.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------
from datetime import datetime
from typing import Generator, Iterable, List, Optional, Set, TypeVar

# --------------------------------------------------------------------
T = TypeVar("T")


# --------------------------------------------------------------------
def badge(s: str) -> str:
    return "[ %s ]" % s


# --------------------------------------------------------------------
def decode(b: bytes) -> str:
    try:
        return b.decode("utf-8")
    except UnicodeDecodeError:
        return b.decode("ISO-8859-1")


# --------------------------------------------------------------------
def format_dt(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.isoformat()


# --------------------------------------------------------------------
def uniq(it: Iterable[T]) -> Generator[T, None, None]:
    """Filter the given iterable preserving order by removing
    any subsequent items already encountered."""

    visited: Set[T] = set()
    for x in it:
        if x not in visited:
            visited.add(x)
            yield x


# --------------------------------------------------------------------
def uniq_list(it: Iterable[T]) -> List[T]:
    return list(uniq(it))
