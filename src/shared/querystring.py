"""Decoding of bracketed query-string keys into nested structures.

Data-grid widgets serialize their state the PHP way::

    columns[0][data]=name&order[0][column]=0&order[0][dir]=asc&search[value]=ivan

``parse_nested_query`` turns such pairs into
``{"columns": [{"data": "name"}], "order": [{"column": "0", "dir": "asc"}],
"search": {"value": "ivan"}}``. Values stay strings; typing them is the job of
the pydantic schema the result is fed to.
"""
import re
from typing import Any, Dict, Iterable, List, Tuple

_KEY_RE = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_RE = re.compile(r"\[([^\[\]]*)\]")


def split_key(key: str) -> List[str]:
    """``"a[b][0]"`` -> ``["a", "b", "0"]``. Keys without brackets pass through."""
    match = _KEY_RE.match(key)
    if not match:
        return [key]
    head, rest = match.groups()
    return [head] + _SEGMENT_RE.findall(rest)


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    converted = {k: _listify(v) for k, v in node.items()}
    if converted and all(k.isdigit() for k in converted):
        return [converted[k] for k in sorted(converted, key=int)]
    return converted


def parse_nested_query(pairs: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    root: Dict[str, Any] = {}
    for key, value in pairs:
        parts = split_key(key)
        node = root
        for part in parts[:-1]:
            if part == "":
                # "a[]=x" appends
                part = str(len(node))
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        last = parts[-1]
        if last == "":
            last = str(len(node))
        node[last] = value
    return _listify(root)
