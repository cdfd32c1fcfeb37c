"""
Predicate-based filtering over in-memory collections.

Every wrapper in the project (members, classes, instructors, payments) is
built from the predicates below. Filtering never re-sorts: the result keeps
the relative order of the input sequence, and an empty query or the ``"all"``
sentinel matches every item.
"""
from typing import Any, Callable, Iterable

ALL = "all"

Getter = Callable[[Any], Any]
Predicate = Callable[[Any], bool]


def _getter(field) -> Getter:
    if callable(field):
        return field
    return lambda obj: getattr(obj, field, None)


def _texts(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v is not None]
    return [str(value)]


def is_blank(selected) -> bool:
    if selected is None:
        return True
    if isinstance(selected, str):
        s = selected.strip()
        return not s or s.lower() == ALL
    return False


def text_predicate(query: str, *fields) -> Predicate:
    """Case-insensitive substring match on any of ``fields``.

    A field may be an attribute name or a callable; list values (tags,
    specialties) match when any element contains the query.
    """
    needle = (query or "").strip().lower()
    getters = [_getter(f) for f in fields]

    def predicate(obj) -> bool:
        if not needle:
            return True
        for get in getters:
            for text in _texts(get(obj)):
                if needle in text.lower():
                    return True
        return False

    return predicate


def choice_predicate(selected, field) -> Predicate:
    """Exact match of one enum field against the selected value."""
    get = _getter(field)

    def predicate(obj) -> bool:
        if is_blank(selected):
            return True
        return str(get(obj)) == str(selected)

    return predicate


def any_of_predicate(selected, field) -> Predicate:
    """Selected value is one of the list stored in ``field``."""
    get = _getter(field)

    def predicate(obj) -> bool:
        if is_blank(selected):
            return True
        return str(selected) in _texts(get(obj))

    return predicate


def range_predicate(field, low=None, high=None) -> Predicate:
    """Inclusive range check; open ends are unbounded."""
    get = _getter(field)

    def predicate(obj) -> bool:
        value = get(obj)
        if low is None and high is None:
            return True
        if value is None:
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
        return True

    return predicate


def apply_filters(items: Iterable, *predicates: Predicate) -> list:
    return [item for item in items if all(p(item) for p in predicates)]
