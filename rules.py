"""
Label rules: each top-level key of the YAML document is a label, its value a
glob or a list of globs.

    docs: "**/*.md"
    backend:
      - "src/**/*.go"
      - "src/**/*.rs"
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple, Union

import yaml

from globmatch import compile_pattern

logger = logging.getLogger("pr-file-labeler")

RuleMapping = Mapping[str, Tuple[str, ...]]


class ConfigError(Exception):
    """Malformed action input or label rule configuration."""


def _patterns_for(label: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        if not value:
            raise ConfigError(f"label {label} has an empty list of globs")
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(f"found unexpected glob {item!r} for label {label} (globs must be strings)")
        return tuple(value)
    raise ConfigError(f"found unexpected type for label {label} (should be string or array of globs)")


def parse(raw: Union[str, bytes]) -> RuleMapping:
    try:
        document = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"label configuration is not valid YAML: {e}") from e
    if document is None:
        return MappingProxyType({})
    if not isinstance(document, dict):
        raise ConfigError(
            f"label configuration must map label names to globs, got {type(document).__name__}"
        )
    rules: Dict[str, Tuple[str, ...]] = {}
    for key, value in document.items():
        label = str(key)
        rules[label] = _patterns_for(label, value)
        for pattern in rules[label]:
            if compile_pattern(pattern) is None:
                logger.warning("glob %r for label %s is malformed and will never match", pattern, label)
    return MappingProxyType(rules)


def load_local(path: str) -> RuleMapping:
    with open(path, "r", encoding="utf-8") as f:
        return parse(f.read())
