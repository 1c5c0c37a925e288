# plancarbon/query.py
"""
Tiny path language for pulling values out of parsed JSON.

    resources.*.values              every element's "values"
    planned_values.**.resources     "resources" at any depth
    boot_disk[0].size               array index (negative counts from the end)
    resources[type=aws_instance]    array elements (or the object itself) whose key equals a value
    resources[type="a.b"]           quoted value, may contain dots and brackets

A path that finds nothing returns []; only a malformed path raises PathSyntaxError.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from plancarbon.errors import PathSyntaxError

__all__ = ["query", "compile_path"]


@dataclass(frozen=True)
class _Key:
    name: str


@dataclass(frozen=True)
class _Wildcard:
    pass


@dataclass(frozen=True)
class _Descend:
    pass


@dataclass(frozen=True)
class _Index:
    index: int


@dataclass(frozen=True)
class _Equals:
    key: str
    value: str


_Step = Union[_Key, _Wildcard, _Descend, _Index, _Equals]

_cache: Dict[str, Tuple[_Step, ...]] = {}


def _split_segments(path: str) -> List[str]:
    """Split on dots that are outside brackets and quotes."""
    segments: List[str] = []
    buf: List[str] = []
    depth = 0
    quote: Optional[str] = None
    for c in path:
        if quote:
            buf.append(c)
            if c == quote:
                quote = None
            continue
        if c in ("'", '"') and depth:
            quote = c
        elif c == "[":
            depth += 1
        elif c == "]":
            depth -= 1
            if depth < 0:
                raise PathSyntaxError(f"unbalanced ']' in path {path!r}")
        elif c == "." and depth == 0:
            segments.append("".join(buf))
            buf = []
            continue
        buf.append(c)
    if quote or depth:
        raise PathSyntaxError(f"unterminated selector in path {path!r}")
    segments.append("".join(buf))
    return segments


def _parse_selector(sel: str, path: str) -> _Step:
    sel = sel.strip()
    if not sel:
        raise PathSyntaxError(f"empty selector in path {path!r}")
    if sel == "*":
        return _Wildcard()
    if "=" in sel:
        key, _, value = sel.partition("=")
        key, value = key.strip(), value.strip()
        if not key:
            raise PathSyntaxError(f"filter without key in path {path!r}")
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        return _Equals(key=key, value=value)
    try:
        return _Index(int(sel))
    except ValueError:
        raise PathSyntaxError(f"invalid selector [{sel}] in path {path!r}") from None


def _parse_segment(seg: str, path: str) -> Iterator[_Step]:
    if not seg:
        raise PathSyntaxError(f"empty segment in path {path!r}")
    head, sep, rest = seg.partition("[")
    if head == "*":
        yield _Wildcard()
    elif head == "**":
        yield _Descend()
    elif head:
        yield _Key(head)
    if not sep:
        return
    rest = "[" + rest
    i = 0
    while i < len(rest):
        if rest[i] != "[":
            raise PathSyntaxError(f"unexpected {rest[i]!r} after selector in path {path!r}")
        j = i + 1
        quote: Optional[str] = None
        while j < len(rest):
            c = rest[j]
            if quote:
                if c == quote:
                    quote = None
            elif c in ("'", '"'):
                quote = c
            elif c == "]":
                break
            j += 1
        if j >= len(rest):
            raise PathSyntaxError(f"unterminated selector in path {path!r}")
        yield _parse_selector(rest[i + 1 : j], path)
        i = j + 1


def compile_path(path: str) -> Tuple[_Step, ...]:
    compiled = _cache.get(path)
    if compiled is not None:
        return compiled
    body = path.strip()
    if body.startswith("."):
        body = body[1:]
    steps: List[_Step] = []
    if body:
        for seg in _split_segments(body):
            steps.extend(_parse_segment(seg, path))
    compiled = tuple(steps)
    _cache[path] = compiled
    return compiled


def _descendants(node: Any) -> Iterator[Any]:
    yield node
    if isinstance(node, dict):
        for v in node.values():
            yield from _descendants(v)
    elif isinstance(node, list):
        for v in node:
            yield from _descendants(v)


def _matches(node: Any, step: _Equals) -> bool:
    if not isinstance(node, dict) or step.key not in node:
        return False
    v = node[step.key]
    if isinstance(v, bool):
        return str(v).lower() == step.value.lower()
    return v is not None and str(v) == step.value


def _apply(step: _Step, node: Any) -> Iterator[Any]:
    if isinstance(step, _Key):
        if isinstance(node, dict) and step.name in node:
            yield node[step.name]
    elif isinstance(step, _Wildcard):
        if isinstance(node, list):
            yield from node
        elif isinstance(node, dict):
            yield from node.values()
    elif isinstance(step, _Descend):
        yield from _descendants(node)
    elif isinstance(step, _Index):
        if isinstance(node, list) and -len(node) <= step.index < len(node):
            yield node[step.index]
    elif isinstance(step, _Equals):
        if isinstance(node, list):
            yield from (n for n in node if _matches(n, step))
        elif _matches(node, step):
            yield node


def query(root: Any, path: str) -> List[Any]:
    nodes: List[Any] = [root]
    for step in compile_path(path):
        nodes = [m for n in nodes for m in _apply(step, n) if m is not None]
        if not nodes:
            break
    return [n for n in nodes if n is not None]
