"""Reading and rewriting ``package.json`` dependency sections.

Only the dependency maps are interpreted. Updates replace the version
string tokens in place and leave every other character of the file as
written.
"""

from __future__ import annotations

import re
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from verbump.utils.logger import get_logger
from verbump.exceptions import ParseError
from verbump.models.dependency import Dependency
from verbump.constants import DEPENDENCY_SECTIONS
from verbump.utils.filesystem import read_text_file

logger = get_logger("manifest")

#: ``(section, package name)`` to the new declared version.
ManifestUpdates = Mapping[Tuple[str, str], str]

# A JSON string or one structural character. Scalars and whitespace are
# skipped, which is enough to track nesting in an already validated document.
_TOKEN_RE = re.compile(r'"(?:[^"\\]|\\.)*"|[{}\[\]:,]')


class ManifestParser:
    """Extracts :class:`Dependency` entries from a package manifest.

    Args:
        sections: Dependency sections to read, in output order.

    Example::

        >>> parser = ManifestParser()
        >>> parser.parse_string('{"dependencies": {"react": "^18.2.0"}}')
        [Dependency(name='react', version='^18.2.0', section='dependencies')]
    """

    def __init__(self, sections: Sequence[str] = DEPENDENCY_SECTIONS) -> None:
        self.sections = tuple(sections)

    def parse_file(self, path: Union[str, Path]) -> List[Dependency]:
        """Read and parse the manifest at *path*.

        Raises:
            FileOperationError: The file cannot be read.
            ParseError: The file is not a JSON object.
        """
        text = read_text_file(path)
        return self.parse_string(text, file_path=str(path))

    def parse_string(
        self,
        text: str,
        *,
        file_path: Optional[str] = None,
    ) -> List[Dependency]:
        """Parse manifest *text* into dependencies.

        Entries whose version is not a string are skipped.
        """
        document = load_manifest(text, file_path=file_path)
        dependencies: List[Dependency] = []

        for section in self.sections:
            entries = document.get(section)
            if entries is None:
                continue
            if not isinstance(entries, dict):
                logger.warning("Ignoring non-object section %r", section)
                continue

            for name, version in entries.items():
                if not isinstance(version, str):
                    logger.debug("Skipping %s in %s: version is not a string", name, section)
                    continue
                dependencies.append(Dependency(name=name, version=version, section=section))

        logger.debug("Parsed %d dependencies", len(dependencies))
        return dependencies


def load_manifest(text: str, *, file_path: Optional[str] = None) -> Dict[str, Any]:
    """Decode manifest *text*, requiring a top-level JSON object.

    Raises:
        ParseError: Invalid JSON or a non-object root.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"Invalid JSON: {exc.msg}",
            file_path=file_path,
            line_number=exc.lineno,
        ) from exc

    if not isinstance(document, dict):
        raise ParseError("Manifest root must be a JSON object", file_path=file_path)
    return document


def _version_spans(text: str) -> Dict[Tuple[str, str], Tuple[int, int]]:
    """Locate the string value of every ``section.name`` entry in *text*.

    Only objects nested directly in the root object count as sections.
    For duplicate keys the last occurrence wins, as with :func:`json.loads`.
    """
    spans: Dict[Tuple[str, str], Tuple[int, int]] = {}
    # (bracket, key the container is stored under in its parent)
    stack: List[Tuple[str, Optional[str]]] = []
    key: Optional[str] = None
    in_value = False

    for match in _TOKEN_RE.finditer(text):
        token = match.group()
        if token in ("{", "["):
            parent_key = key if in_value else None
            if len(stack) == 1 and parent_key is not None:
                # A repeated section replaces the earlier one.
                spans = {k: v for k, v in spans.items() if k[0] != parent_key}
            stack.append((token, parent_key))
            key, in_value = None, False
        elif token in ("}", "]"):
            stack.pop()
            key, in_value = None, False
        elif token == ":":
            in_value = True
        elif token == ",":
            key, in_value = None, False
        elif in_value:
            section = stack[1][1] if len(stack) == 2 else None
            if section is not None and stack[0][0] == "{" and stack[1][0] == "{":
                spans[(section, key)] = match.span()
            in_value = False
        elif stack and stack[-1][0] == "{":
            key = json.loads(token)

    return spans


def apply_updates(
    text: str,
    updates: ManifestUpdates,
    *,
    file_path: Optional[str] = None,
) -> str:
    """Return *text* with the given dependency versions replaced.

    Each new version is written over the old version's string token;
    every other character of *text* is kept. Updates for entries that are
    missing, or whose value is not a string, are ignored.

    Args:
        text: Original manifest text.
        updates: ``(section, name)`` to new declared version.
        file_path: Used in error messages only.

    Raises:
        ParseError: *text* is not a JSON object.
    """
    load_manifest(text, file_path=file_path)
    spans = _version_spans(text)

    edits: List[Tuple[int, int, str]] = []
    for target, new_version in updates.items():
        span = spans.get(target)
        if span is None:
            logger.debug("No %s entry for %s; update skipped", *target)
            continue
        edits.append((span[0], span[1], json.dumps(new_version)))

    # Right to left keeps earlier offsets valid.
    for start, end, replacement in sorted(edits, reverse=True):
        text = text[:start] + replacement + text[end:]

    logger.debug("Applied %d of %d updates", len(edits), len(updates))
    return text
