"""
Keyword tables behind header detection and label repair.

Everything here is data. The classifier and the reconstructor only walk these
tables, so a bulletin with a new court name or marker phrase is handled by
extending a Vocabulary (see config.py), not by touching control flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

ORGANIZATION_KEYWORDS = (
    "JUZGADO",
    "TRIBUNAL",
    "CORTE",
    "CONSEJO",
    "SUPREMA",
    "SUPERIOR",
    "SALA",
    "CIRCUITO",
    "MUNICIPAL",
    "CIVIL",
    "PENAL",
    "FAMILIA",
    "LABORAL",
    "ADMINISTRATIVO",
    "PROMISCUO",
    "EJECUCION",
    "EJECUCIÓN",
    "PEQUEÑAS",
    "CAUSAS",
)

ORDINAL_KEYWORDS = (
    "PRIMERO",
    "SEGUNDO",
    "TERCERO",
    "CUARTO",
    "QUINTO",
    "SEXTO",
    "SEPTIMO",
    "SÉPTIMO",
    "OCTAVO",
    "NOVENO",
    "DECIMO",
    "DÉCIMO",
)

CONNECTOR_WORDS = ("DE", "DEL", "EL", "LA", "LOS", "LAS", "Y", "EN")

STATE_TOKEN = "ESTADO"

MONTH_NAMES = (
    "ENERO",
    "FEBRERO",
    "MARZO",
    "ABRIL",
    "MAYO",
    "JUNIO",
    "JULIO",
    "AGOSTO",
    "SEPTIEMBRE",
    "SETIEMBRE",
    "OCTUBRE",
    "NOVIEMBRE",
    "DICIEMBRE",
)

UNPUBLISHED_MARKERS = (
    "NO SE HA PUBLICADO",
    "SIN PUBLICAR",
    "PENDIENTE DE PUBLICACION",
)

EXPANDED_PREFIX = "JUZGADO"
ABBREVIATION_PREFIXES = ("JDO.", "J.")

# Keywords this short collide with fragments of longer words ("DE" in
# "DEMANDA"), so they are never split back out of a compressed label.
MIN_REINSERT_LENGTH = 4
MIN_ORGANIZATION_LENGTH = 6


def _merge(base: tuple[str, ...], extra: Iterable[str]) -> tuple[str, ...]:
    merged = list(base)
    for word in extra:
        word = " ".join(str(word).upper().split())
        if word and word not in merged:
            merged.append(word)
    return tuple(merged)


@dataclass(frozen=True)
class Vocabulary:
    organization_keywords: tuple[str, ...] = ORGANIZATION_KEYWORDS + ORDINAL_KEYWORDS
    connectors: tuple[str, ...] = CONNECTOR_WORDS
    state_token: str = STATE_TOKEN
    month_names: tuple[str, ...] = MONTH_NAMES
    unpublished_markers: tuple[str, ...] = UNPUBLISHED_MARKERS
    expanded_prefix: str = EXPANDED_PREFIX
    abbreviation_prefixes: tuple[str, ...] = ABBREVIATION_PREFIXES
    _reinsertion: tuple[str, ...] = field(default=(), init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        words = {"".join(word.split()) for word in self.organization_keywords + self.connectors}
        words.discard("")
        ordered = tuple(sorted(words, key=lambda word: (-len(word), word)))
        object.__setattr__(self, "_reinsertion", ordered)

    @property
    def organization_tokens(self) -> tuple[str, ...]:
        """Keywords with whitespace removed, matching the compressed header text."""
        return tuple("".join(word.split()) for word in self.organization_keywords)

    @property
    def state_markers(self) -> tuple[str, ...]:
        return self.month_names + self.unpublished_markers

    @property
    def reinsertion_keywords(self) -> tuple[str, ...]:
        """Longest first; ties broken alphabetically so repairs are deterministic."""
        return self._reinsertion

    def extended(
        self,
        *,
        organization_keywords: Iterable[str] = (),
        state_markers: Iterable[str] = (),
    ) -> "Vocabulary":
        return Vocabulary(
            organization_keywords=_merge(self.organization_keywords, organization_keywords),
            connectors=self.connectors,
            state_token=self.state_token,
            month_names=self.month_names,
            unpublished_markers=_merge(self.unpublished_markers, state_markers),
            expanded_prefix=self.expanded_prefix,
            abbreviation_prefixes=self.abbreviation_prefixes,
        )


DEFAULT_VOCABULARY = Vocabulary()
