"""
Minimatch-style glob matching for repository file paths.

`*` stays inside one path segment, `**` (as a whole segment) spans any number
of segments, `?` is one character, `[...]` is a character class and `{a,b}` /
`{1..3}` are brace groups. Wildcards never match a leading dot unless the
pattern segment starts with one. Patterns that fail to compile match nothing.
"""

import functools
import logging
import re
from typing import List, Optional, Tuple

logger = logging.getLogger("pr-file-labeler")

_NUMERIC_RANGE = re.compile(r"^(-?\d+)\.\.(-?\d+)(?:\.\.(-?\d+))?$")
_ALPHA_RANGE = re.compile(r"^([A-Za-z])\.\.([A-Za-z])(?:\.\.(-?\d+))?$")

# A whole path segment that does not start with a dot.
_SEGMENT = r"(?!\.)[^/]+"

_POSIX_CLASSES = {
    "alnum": "a-zA-Z0-9",
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "lower": "a-z",
    "upper": "A-Z",
    "space": r"\s",
    "xdigit": "0-9A-Fa-f",
    "word": r"\w",
}


def _closing_brace(pattern: str, start: int) -> int:
    depth = 0
    i = start
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _split_alternatives(body: str) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    depth = 0
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            current.append(body[i:i + 2])
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        elif c == "," and depth == 0:
            parts.append("".join(current))
            current = []
            i += 1
            continue
        current.append(c)
        i += 1
    parts.append("".join(current))
    return parts


def _expand_sequence(body: str) -> Optional[List[str]]:
    m = _NUMERIC_RANGE.match(body)
    if m:
        start, end = int(m.group(1)), int(m.group(2))
        step = abs(int(m.group(3) or 1)) or 1
        padded = any(len(g.lstrip("-")) > 1 and g.lstrip("-").startswith("0") for g in m.group(1, 2))
        width = max(len(m.group(1)), len(m.group(2))) if padded else 0
        values = range(start, end + 1, step) if start <= end else range(start, end - 1, -step)
        return [str(v).zfill(width) for v in values]
    m = _ALPHA_RANGE.match(body)
    if m:
        start, end = ord(m.group(1)), ord(m.group(2))
        step = abs(int(m.group(3) or 1)) or 1
        values = range(start, end + 1, step) if start <= end else range(start, end - 1, -step)
        return [chr(v) for v in values]
    return None


def expand_braces(pattern: str) -> List[str]:
    """Expand `{a,b}` and `{1..3}` groups; groups with neither stay literal."""
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            end = _closing_brace(pattern, i)
            if end != -1:
                body = pattern[i + 1:end]
                alternatives = _expand_sequence(body)
                if alternatives is None:
                    parts = _split_alternatives(body)
                    alternatives = parts if len(parts) > 1 else None
                if alternatives is not None:
                    prefix, suffix = pattern[:i], pattern[end + 1:]
                    expanded: List[str] = []
                    for alternative in alternatives:
                        for item in expand_braces(prefix + alternative + suffix):
                            if item not in expanded:
                                expanded.append(item)
                    return expanded
        i += 1
    return [pattern]


def _translate_class(segment: str, start: int) -> Tuple[Optional[str], int]:
    i = start + 1
    n = len(segment)
    negate = i < n and segment[i] in "!^"
    if negate:
        i += 1
    items: List[str] = []
    first = True
    while i < n:
        c = segment[i]
        if c == "]" and not first:
            break
        first = False
        if c == "[" and segment.startswith("[:", i):
            close = segment.find(":]", i + 2)
            name = segment[i + 2:close] if close != -1 else None
            if name in _POSIX_CLASSES:
                items.append(_POSIX_CLASSES[name])
                i = close + 2
                continue
        if c == "\\" and i + 1 < n:
            items.append(re.escape(segment[i + 1]))
            i += 2
            continue
        if c == "-" and items and i + 1 < n and segment[i + 1] != "]":
            items.append("-")
            i += 1
            continue
        items.append(re.escape(c))
        i += 1
    else:
        # no closing bracket: the "[" is a literal
        return None, start
    if negate:
        return "[^/" + "".join(items) + "]", i + 1
    return "[" + "".join(items) + "]", i + 1


def _translate_segment(segment: str) -> str:
    out: List[str] = []
    has_magic = False
    i, n = 0, len(segment)
    while i < n:
        c = segment[i]
        if c == "\\" and i + 1 < n:
            out.append(re.escape(segment[i + 1]))
            i += 2
            continue
        if c == "*":
            while i < n and segment[i] == "*":
                i += 1
            out.append("[^/]*")
            has_magic = True
            continue
        if c == "?":
            out.append("[^/]")
            has_magic = True
            i += 1
            continue
        if c == "[":
            cls, end = _translate_class(segment, i)
            if cls is not None:
                out.append(cls)
                has_magic = True
                i = end
                continue
        out.append(re.escape(c))
        i += 1
    head = ""
    if not segment.startswith("."):
        head += r"(?!\.)"
    if has_magic:
        head += r"(?=[^/])"
    return head + "".join(out)


def translate(pattern: str) -> str:
    """Translate one brace-free glob into a regular expression source."""
    segments: List[str] = []
    for segment in pattern.split("/"):
        if segment == "**" and segments and segments[-1] == "**":
            continue
        segments.append(segment)
    out = ""
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == "**":
            if index == last and index == 0:
                out += "(?:%s(?:/%s)*)?" % (_SEGMENT, _SEGMENT)
            elif index == last:
                out = out[:-1] + "(?:/%s)*" % _SEGMENT
            else:
                out += "(?:%s/)*" % _SEGMENT
            continue
        out += _translate_segment(segment)
        if index != last:
            out += "/"
    return r"\A(?:" + out + r")\Z"


@functools.lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> Optional[Tuple[bool, Tuple["re.Pattern", ...]]]:
    """Compile a glob into (negated, regexes). Returns None when it cannot compile."""
    if pattern.startswith("#"):
        return (False, ())
    negate = False
    while pattern.startswith("!"):
        negate = not negate
        pattern = pattern[1:]
    try:
        regexes = tuple(re.compile(translate(p)) for p in expand_braces(pattern))
    except re.error as e:
        logger.debug("glob %r does not compile: %s", pattern, e)
        return None
    return (negate, regexes)


def matches(pattern: str, path: str) -> bool:
    compiled = compile_pattern(pattern)
    if compiled is None:
        return False
    negate, regexes = compiled
    if not regexes:
        return False
    found = any(r.match(path) for r in regexes)
    return not found if negate else found
