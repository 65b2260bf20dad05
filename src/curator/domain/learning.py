"""Correction learning state and folder scoring.

Every time a user moves a note to a different folder than the one the
curator chose, the note's keywords are credited to the folder the user
picked. Future notes are scored against those per-folder keyword tables.

State is an immutable value: the ``with_*`` functions return new state.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

STATE_VERSION = 1
MAX_CORRECTIONS = 1000
STORED_KEYWORDS = 10
# Divisor turning a raw folder score into a confidence. Tunable, not principled.
HINT_SCALE = 10.0


class Correction(BaseModel):
    """One observed folder override."""

    model_config = {"frozen": True}

    timestamp: str
    original_folder: str
    corrected_folder: str
    keywords: list[str] = Field(default_factory=list)
    note_basename: str


class FolderPattern(BaseModel):
    """Aggregated keyword frequencies for a folder."""

    model_config = {"frozen": True}

    count: int = 0
    keywords: dict[str, int] = Field(default_factory=dict)


class LearningState(BaseModel):
    """The persisted learning document."""

    model_config = {"frozen": True}

    version: int = STATE_VERSION
    corrections: list[Correction] = Field(default_factory=list)
    folder_patterns: dict[str, FolderPattern] = Field(default_factory=dict)


class FolderHints(BaseModel):
    """Result of scoring a note against learned folder patterns."""

    model_config = {"frozen": True}

    suggested_folder: str | None = None
    confidence: float = 0.0
    scores: dict[str, float] = Field(default_factory=dict)


def with_correction(
    state: LearningState,
    correction: Correction,
    keywords: list[str],
    *,
    max_corrections: int = MAX_CORRECTIONS,
) -> LearningState:
    """Append *correction* and credit *keywords* to its corrected folder.

    *keywords* is the full extracted list; the correction record itself
    carries only its own (shorter) keyword list.
    """
    folder = correction.corrected_folder
    pattern = state.folder_patterns.get(folder, FolderPattern())
    frequencies = dict(pattern.keywords)
    for word in keywords:
        frequencies[word] = frequencies.get(word, 0) + 1

    patterns = dict(state.folder_patterns)
    patterns[folder] = FolderPattern(count=pattern.count + 1, keywords=frequencies)

    corrections = [*state.corrections, correction]
    if len(corrections) > max_corrections:
        corrections = corrections[-max_corrections:]

    return state.model_copy(update={"corrections": corrections, "folder_patterns": patterns})


def score_folders(state: LearningState, keywords: list[str]) -> FolderHints:
    """Score every learned folder against *keywords*.

    A folder's score is the sum of its frequencies for the matching
    keywords divided by its hit count, so frequently-corrected folders
    are not favored by volume alone. Folders are visited in
    lexicographic order and the first strictly-highest score wins; a best
    score of zero suggests nothing.
    """
    if not state.folder_patterns:
        return FolderHints()

    scores: dict[str, float] = {}
    for folder in sorted(state.folder_patterns):
        pattern = state.folder_patterns[folder]
        raw = sum(pattern.keywords.get(word, 0) for word in keywords)
        scores[folder] = raw / (pattern.count or 1)

    best_folder: str | None = None
    best_score = 0.0
    for folder, score in scores.items():
        if score > best_score:
            best_folder = folder
            best_score = score

    return FolderHints(
        suggested_folder=best_folder,
        confidence=min(best_score / HINT_SCALE, 1.0),
        scores=scores,
    )
