"""
Heuristic validator for planning documents.

Decides whether a markdown planning document is complete enough to unlock
the next stage. The rules are independent and all violations are collected,
never short-circuited, so a user can fix a document in one pass:

1. Every required header appears as an exact (case-sensitive) header.
2. The whole document has at least ``min_words`` words.
3. No forbidden string appears (case-insensitive). Each string is reported
   once per header it appears under. Matches inside fenced code blocks are
   reported unless ``exempt_code_blocks`` is set.
4. When ``require_all_checked`` is set, every checklist item is checked.

Reading problems (missing file, permission denied, invalid UTF-8) raise a
DocumentReadError. They are never folded into a failed ValidationResult,
because "I could not read it" and "it is incomplete" need different fixes.

Example:
    >>> from pathlib import Path
    >>> from nexus.core.gate.validator import validate
    >>> result = validate(
    ...     Path("01-PLANNING/01-Problem-and-Vision.md"),
    ...     required_headers=["Problem", "Vision"],
    ...     min_words=50,
    ...     forbidden=["TODO", "TBD"],
    ... )
    >>> result.passed
    True
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from nexus.core.gate.models import (
    BelowWordCount,
    ForbiddenString,
    MissingHeader,
    UncheckedItem,
    ValidationResult,
)
from nexus.core.markdown.checklist import scan_checklist
from nexus.core.markdown.sections import (
    count_words,
    extract_sections,
    flatten_inline,
    tokenize,
)

logger = logging.getLogger(__name__)

# Files above this size are processed but flagged
LARGE_FILE_BYTES = 100_000_000

_CODE_TOKEN_TYPES = frozenset({"fence", "code_block"})


class DocumentReadError(Exception):
    """Raised when a document cannot be read for validation."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentNotFoundError(DocumentReadError):
    """Raised when the document does not exist."""

    pass


class DocumentPermissionError(DocumentReadError):
    """Raised when the document cannot be opened due to permissions."""

    pass


class DocumentEncodingError(DocumentReadError):
    """Raised when the document is not valid UTF-8 text."""

    pass


def read_document(path: Path) -> tuple[str, list[str]]:
    """
    Read a planning document as UTF-8 text.

    Args:
        path: Document path.

    Returns:
        Tuple of (content, warnings). Warnings note non-fatal conditions
        such as a very large file.

    Raises:
        DocumentNotFoundError: If the file does not exist.
        DocumentPermissionError: If the file cannot be accessed.
        DocumentEncodingError: If the file contains invalid UTF-8 or binary data.
        DocumentReadError: For any other read failure.
    """
    warnings: list[str] = []

    try:
        size = path.stat().st_size
    except FileNotFoundError as e:
        raise DocumentNotFoundError(path, "File not found") from e
    except PermissionError as e:
        raise DocumentPermissionError(path, "Permission denied") from e
    except OSError as e:
        raise DocumentReadError(path, f"Cannot access file: {e}") from e

    if size > LARGE_FILE_BYTES:
        message = f"File very large ({size // 1_000_000}MB), may take time to process"
        logger.warning("%s: %s", path, message)
        warnings.append(message)

    try:
        raw = path.read_bytes()
    except PermissionError as e:
        raise DocumentPermissionError(path, "Permission denied") from e
    except IsADirectoryError as e:
        raise DocumentReadError(path, "Expected a file, found a directory") from e
    except OSError as e:
        raise DocumentReadError(path, f"Cannot read file: {e}") from e

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentEncodingError(path, "File contains invalid UTF-8 or binary data") from e

    return content, warnings


def find_forbidden_strings(
    content: str,
    forbidden: Iterable[str],
    *,
    exempt_code_blocks: bool = False,
) -> list[ForbiddenString]:
    """
    Find forbidden strings, reported once per (string, header) pair.

    The header attached to a match is the nearest header above it of any
    level. Matches before the first header carry ``header=None``.

    Args:
        content: Raw markdown text.
        forbidden: Strings to search for, case-insensitively.
        exempt_code_blocks: Skip fenced and indented code blocks.

    Returns:
        Matches in document order.
    """
    needles = [(token, token.lower()) for token in forbidden if token]
    if not needles:
        return []

    found: list[ForbiddenString] = []
    seen: set[tuple[str, str | None]] = set()
    current_header: str | None = None
    in_heading = False

    for token in tokenize(content):
        if token.type == "heading_open":
            in_heading = True
            continue
        if token.type == "heading_close":
            in_heading = False
            continue

        if token.type == "inline" and in_heading:
            current_header = flatten_inline(token).strip()
        elif token.type in _CODE_TOKEN_TYPES and exempt_code_blocks:
            continue
        elif token.type not in ("inline", "html_block", *_CODE_TOKEN_TYPES):
            continue

        haystack = token.content.lower()
        for original, lowered in needles:
            if lowered in haystack and (lowered, current_header) not in seen:
                seen.add((lowered, current_header))
                found.append(ForbiddenString(match=original, header=current_header))

    return found


def validate_content(
    content: str,
    required_headers: Sequence[str],
    min_words: int,
    forbidden: Sequence[str],
    *,
    require_all_checked: bool = False,
    exempt_code_blocks: bool = False,
    path: Path | None = None,
) -> ValidationResult:
    """
    Validate document text against the heuristics.

    This is the rule engine shared by the manual gate and the generator;
    ``validate`` reads a file and delegates here.

    Args:
        content: Raw markdown text.
        required_headers: Header names that must appear exactly.
        min_words: Minimum whole-document word count.
        forbidden: Strings that must not appear (case-insensitive).
        require_all_checked: Require every checklist item to be checked.
        exempt_code_blocks: Do not flag forbidden strings inside code blocks.
        path: Optional path recorded on the result.

    Returns:
        ValidationResult with every issue found.
    """
    result = ValidationResult(path=path)

    sections = extract_sections(content)
    result.headers = [section.header for section in sections]
    found_headers = set(result.headers)

    # Rule 1: required headers
    for header in required_headers:
        if header not in found_headers:
            result.add_issue(MissingHeader(name=header))

    # Rule 2: whole-document word count
    result.word_count = count_words(content)
    if result.word_count < min_words:
        result.add_issue(BelowWordCount(actual=result.word_count, required=min_words))

    # Rule 3: forbidden strings
    for issue in find_forbidden_strings(content, forbidden, exempt_code_blocks=exempt_code_blocks):
        result.add_issue(issue)

    # Rule 4: checklist completion
    if require_all_checked:
        for item in scan_checklist(content).unchecked:
            result.add_issue(UncheckedItem(preview=item.preview, line=item.line))

    if result.issues:
        logger.debug(
            "Validation of %s found %d issue(s)", path or "<content>", len(result.issues)
        )

    return result


def validate(
    path: Path,
    required_headers: Sequence[str],
    min_words: int,
    forbidden: Sequence[str],
    *,
    require_all_checked: bool = False,
    exempt_code_blocks: bool = False,
) -> ValidationResult:
    """
    Validate a planning document on disk.

    Args:
        path: Document path.
        required_headers: Header names that must appear exactly.
        min_words: Minimum whole-document word count.
        forbidden: Strings that must not appear (case-insensitive).
        require_all_checked: Require every checklist item to be checked.
        exempt_code_blocks: Do not flag forbidden strings inside code blocks.

    Returns:
        ValidationResult. Content problems are issues on the result.

    Raises:
        DocumentReadError: If the file cannot be read.
    """
    content, warnings = read_document(path)
    result = validate_content(
        content,
        required_headers,
        min_words,
        forbidden,
        require_all_checked=require_all_checked,
        exempt_code_blocks=exempt_code_blocks,
        path=path,
    )
    result.warnings.extend(warnings)
    return result


def validate_dashboard(path: Path) -> ValidationResult:
    """
    Validate that every checkbox in a dashboard file is checked.

    A dashboard without checkboxes passes.

    Raises:
        DocumentReadError: If the file cannot be read.
    """
    content, warnings = read_document(path)
    result = ValidationResult(path=path, warnings=warnings)
    result.word_count = count_words(content)
    for item in scan_checklist(content).unchecked:
        result.add_issue(UncheckedItem(preview=item.preview, line=item.line))
    return result
