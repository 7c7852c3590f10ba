"""CuePlayer: alert sound played at the start of every phase."""
from __future__ import annotations

from typing import Any, Callable

from psychopy import logging, sound

from path_utils import file_exists_nonempty, resolve_path
from stimulus_types import CueConfig

DEFAULT_CUE_VALUE = 'A'
DEFAULT_CUE_SECS = 0.5


class CuePlayer:
    """Wraps a psychopy.sound.Sound so each cue restarts playback.

    The cue value is either a sound file (resolved against the project root)
    or anything psychopy.sound accepts as a tone (note name or Hz).
    """

    def __init__(
        self,
        conf: CueConfig | None = None,
        sound_factory: Callable[..., Any] = sound.Sound,
    ) -> None:
        conf = conf or {}
        value = conf.get('value', DEFAULT_CUE_VALUE)
        if isinstance(value, str) and file_exists_nonempty(value):
            value = resolve_path(value)
        self._sound = sound_factory(
            value,
            secs=conf.get('secs', DEFAULT_CUE_SECS),
            volume=conf.get('volume', 1.0),
        )

    def play(self) -> None:
        self._sound.stop()
        self._sound.play()
        logging.debug("Cue")

    def stop(self) -> None:
        self._sound.stop()
