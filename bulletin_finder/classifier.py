"""
Header row detection for bulletin sheets.

A header row has text in its first cell and nothing in its second. Headers
come in two independent families:

    organization: names a court / chamber ("JUZGADO SEXTO CIVIL MUNICIPAL")
    state:        announces a notice date or posting status ("ESTADO 18 ...")

This is keyword matching, not a grammar. A party name that happens to contain
a court keyword and sits alone in column A will be read as a court header.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from bulletin_finder.models import is_blank
from bulletin_finder.vocabulary import DEFAULT_VOCABULARY, MIN_ORGANIZATION_LENGTH, Vocabulary

NOT_HEADER = "not_header"
ORGANIZATION = "organization"
STATE = "state"
AMBIGUOUS = "ambiguous"

WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class HeaderMatch:
    kind: str
    text: str = ""

    @property
    def is_header(self) -> bool:
        return self.kind != NOT_HEADER


NOT_A_HEADER = HeaderMatch(NOT_HEADER)


def header_candidate_text(row: Sequence) -> str | None:
    """Return column A's text when the row has the header shape, else None."""
    first = row[0] if len(row) > 0 else None
    second = row[1] if len(row) > 1 else None
    if not isinstance(first, str) or not first.strip():
        return None
    if not is_blank(second):
        return None
    return first


def normalize_for_keywords(text: str) -> str:
    return WHITESPACE_RE.sub("", text.upper())


def is_organization_text(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    normalized = normalize_for_keywords(text)
    if len(normalized) < MIN_ORGANIZATION_LENGTH:
        return False
    return any(token and token in normalized for token in vocabulary.organization_tokens)


def is_state_text(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> bool:
    upper = text.strip().upper()
    if upper.startswith(vocabulary.state_token):
        return True
    collapsed = " ".join(upper.split())
    return any(marker in collapsed for marker in vocabulary.state_markers)


def classify_row(row: Sequence, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> HeaderMatch:
    text = header_candidate_text(row)
    if text is None:
        return NOT_A_HEADER
    # Court headers win: "JUZGADO ... DE FEBRERO" names a court, not a notice.
    if is_organization_text(text, vocabulary):
        return HeaderMatch(ORGANIZATION, text)
    if is_state_text(text, vocabulary):
        return HeaderMatch(STATE, text)
    return HeaderMatch(AMBIGUOUS, text)
