from __future__ import annotations
"""Sequence building and phase timing helpers."""
from typing import Iterable, Mapping, Tuple

from models import StimulusItem, StimulusKind

DEFAULT_DURATIONS = {
    'visual_prompt': 30,
    'writing': 240,
    'word_prompt': 15,
    'sentence_prompt': 30,
    'other': 15,
}


def build_sequence(pool: Iterable[StimulusItem]) -> Tuple[StimulusItem, ...]:
    """Order pool items into the fixed test order.

    Visual prompts come first, then word prompts, then sentence prompts,
    then anything else. Python's sort is stable, so items of the same kind
    keep their pool insertion order.

    Args:
        pool: Items in insertion order

    Returns:
        Tuple of items in presentation order
    """
    return tuple(sorted(pool, key=lambda item: item.kind.value))


def resolve_duration(
    kind: StimulusKind,
    writing_subphase: bool,
    durations: Mapping[str, int] = DEFAULT_DURATIONS,
) -> int:
    """Return the phase length in whole seconds.

    The writing sub-phase is checked first so it always wins over kind.
    Missing keys in ``durations`` fall back to the defaults.

    Args:
        kind: Kind of the item being shown
        writing_subphase: True while the post-display writing window is active
        durations: Mapping of phase name -> seconds (configs/session.json)

    Returns:
        Phase duration in seconds
    """
    if writing_subphase:
        key = 'writing'
    elif kind is StimulusKind.VISUAL_PROMPT:
        key = 'visual_prompt'
    elif kind is StimulusKind.WORD_PROMPT:
        key = 'word_prompt'
    elif kind is StimulusKind.SENTENCE_PROMPT:
        key = 'sentence_prompt'
    else:
        key = 'other'
    return int(durations.get(key, DEFAULT_DURATIONS[key]))
