"""
Repair court header labels damaged by letter-spacing.

Bulletins exported from PDFs often arrive in one of two broken shapes:

    "JUZGADO   SEXTO   CIVIL"        words separated by wide gaps
    "J U Z G A D O S E X T O"        every letter separated by a space

Wide gaps keep word boundaries, so each chunk is squeezed back into a word.
Letter-spacing loses them, so the letters are joined into one token and known
keywords are cut back out of it. Connectors of three letters or fewer are not
cut out; "CIVILDEBOGOTA" stays fused rather than risk "DE" splits inside
longer words.
"""

from __future__ import annotations

import re

from bulletin_finder.vocabulary import DEFAULT_VOCABULARY, MIN_REINSERT_LENGTH, Vocabulary

WIDE_GAP_RE = re.compile(r" {2,}")
WHITESPACE_RE = re.compile(r"\s+")
SPACED_LETTER_RE = re.compile(r" [A-ZÁÉÍÓÚÑÜ] ")
SPACED_WORD_RE = re.compile(r"^(?:[A-ZÁÉÍÓÚÑÜ] )+[A-ZÁÉÍÓÚÑÜ]$")
LEADING_DIGIT_RE = re.compile(r"^\d")

WIDE_GAP = "wide_gap"
LETTER_SPACED = "letter_spaced"
FALLBACK = "fallback"


def detect_strategy(raw: str) -> str:
    if WIDE_GAP_RE.search(raw):
        return WIDE_GAP
    if SPACED_LETTER_RE.search(raw) or SPACED_WORD_RE.match(raw.strip()):
        return LETTER_SPACED
    return FALLBACK


def join_wide_gap_words(raw: str) -> str:
    chunks = [WHITESPACE_RE.sub("", chunk) for chunk in WIDE_GAP_RE.split(raw)]
    return " ".join(chunk for chunk in chunks if chunk)


def reinsert_keywords(compressed: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> str:
    label = compressed
    for keyword in vocabulary.reinsertion_keywords:
        if len(keyword) < MIN_REINSERT_LENGTH:
            continue
        label = label.replace(keyword, f" {keyword} ")
    return WHITESPACE_RE.sub(" ", label).strip()


def split_letter_spaced(raw: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> str:
    compressed = WHITESPACE_RE.sub("", raw)
    return reinsert_keywords(compressed, vocabulary)


def expand_prefix(label: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> str:
    expanded = vocabulary.expanded_prefix
    for prefix in vocabulary.abbreviation_prefixes:
        if label.startswith(prefix):
            rest = label[len(prefix):].strip()
            label = f"{expanded} {rest}" if rest else expanded
            break
    if LEADING_DIGIT_RE.match(label) and not label.startswith(expanded):
        label = f"{expanded} {label}"
    return label


def _reconstruct(raw: str, vocabulary: Vocabulary) -> str:
    # Padding counts as a wide gap: "JUZGADO SEXTO  " fuses to "JUZGADOSEXTO".
    strategy = detect_strategy(raw)
    if strategy == WIDE_GAP:
        label = join_wide_gap_words(raw)
    elif strategy == LETTER_SPACED:
        label = split_letter_spaced(raw, vocabulary)
    else:
        label = raw.strip()
    if not label:
        return label
    return expand_prefix(label.upper(), vocabulary)


def reconstruct_label(raw: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> str:
    """Best-effort readable label for a court header.

    Never raises: a label that cannot be repaired comes back as the raw text,
    trimmed.
    """
    try:
        return _reconstruct(raw, vocabulary)
    except Exception:
        return "" if raw is None else str(raw).strip()
