import logging
import unicodedata
from typing import AbstractSet, Iterable, Mapping, Sequence, Set

from globmatch import matches

logger = logging.getLogger("pr-file-labeler")


def normalize_label(name: str) -> str:
    """Comparison key for label names: NFKD, combining marks dropped, casefolded.

    "Documentación", "documentacion" and "DOCUMENTACION" share one key.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def label_matches(changed_files: Sequence[str], patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        logger.debug("  checking pattern %s", pattern)
        for changed_file in changed_files:
            if matches(pattern, changed_file):
                logger.debug("    %s matches", changed_file)
                return True
    return False


def decide(changed_files: Iterable[str], rules: Mapping[str, Sequence[str]]) -> Set[str]:
    files = list(changed_files)
    labels = set()
    for label, patterns in rules.items():
        logger.debug("processing label %s", label)
        if label_matches(files, patterns):
            labels.add(label)
    return labels


def needs_labels(desired: AbstractSet[str], existing: Iterable[str]) -> bool:
    if not desired:
        return False
    current = {normalize_label(l) for l in existing}
    return any(normalize_label(l) not in current for l in desired)
