"""Filter expressions for list queries.

Grammar: ``<attribute> <op> <value>`` where op is one of ``eq``, ``sw``
(starts with), ``ew`` (ends with) or ``co`` (contains). Operators are
case-insensitive, comparisons are case-sensitive, the value may be quoted::

    name sw Reg
    associationName eq "User Registration"
"""
from __future__ import annotations
import re
from typing import Any, Callable, Dict, Optional

from .exceptions import WorkflowClientError

FILTER_PATTERN = re.compile(r'^\s*(\w+)\s+(eq|sw|ew|co)\s+(?:"([^"]*)"|(\S+))\s*$', re.IGNORECASE)

_OPERATORS: Dict[str, Callable[[str, str], bool]] = {
    "eq": lambda actual, expected: actual == expected,
    "sw": lambda actual, expected: actual.startswith(expected),
    "ew": lambda actual, expected: actual.endswith(expected),
    "co": lambda actual, expected: expected in actual,
}


def compile_filter(expression: Optional[str],
                   attributes: Dict[str, Callable[[Any], Optional[str]]]) -> Callable[[Any], bool]:
    """Compile a filter expression into a predicate over stored records.

    Args:
        expression: Filter string; blank matches everything
        attributes: Filterable attribute name -> accessor on the record

    Raises:
        WorkflowClientError: If the expression or attribute is not supported
    """
    if not expression or not expression.strip():
        return lambda record: True

    match = FILTER_PATTERN.match(expression)
    if not match:
        raise WorkflowClientError(f"Invalid filter expression: {expression}")

    attribute, operator, quoted, bare = match.groups()
    accessor = attributes.get(attribute)
    if accessor is None:
        supported = ", ".join(sorted(attributes))
        raise WorkflowClientError(f"Unsupported filter attribute '{attribute}'. Supported: {supported}")

    compare = _OPERATORS[operator.lower()]
    expected = quoted if quoted is not None else bare

    def predicate(record: Any) -> bool:
        return compare(accessor(record) or "", expected)

    return predicate
