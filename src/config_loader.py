"""Configuration loader for the stimulus sequencer.

Separately loads the session (configs/session.json) and layout
(configs/layout.json), with external override precedence for layout when
running as a packaged exe.
"""
from __future__ import annotations

import json
import os
import sys
from typing import cast


def get_base_dir() -> str:
    """Return base directory for read-only resources (configs/stimuli).

    Note: In PyInstaller onefile, resources are unpacked to a temporary
    extraction directory (sys._MEIPASS). That location is read-only and may be
    deleted after exit, so DO NOT write output files there.
    """
    meipass = getattr(sys, '_MEIPASS', None)
    if meipass and os.path.isdir(meipass):
        return meipass
    # Onedir: use the executable directory so bundled folders like 'configs/' work
    if getattr(sys, 'frozen', False):
        return os.path.dirname(sys.executable)
    # Normal dev mode: project root (src/..)
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def get_output_dir() -> str:
    """Return a persistent, user-writable directory for session logs.

    - For frozen apps (onefile/onedir), use the directory next to the executable.
    - For dev, use the project-level 'data' directory.
    """
    if getattr(sys, 'frozen', False):
        return os.path.join(os.path.dirname(sys.executable), 'data')
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'data'))


def get_exe_override_path(rel_path: str) -> str | None:
    """When running as a frozen exe, return the override path next to the exe.

    Example: rel_path='configs/layout.json' -> '<exe_dir>/configs/layout.json'
    Returns None if not frozen.
    """
    if getattr(sys, 'frozen', False):
        return os.path.join(os.path.dirname(sys.executable), rel_path)
    return None


# Module-level constants
BASE_DIR = get_base_dir()
SESSION_DEFAULT_PATH = os.path.join(BASE_DIR, 'configs', 'session.json')
LAYOUT_DEFAULT_PATH = os.path.join(BASE_DIR, 'configs', 'layout.json')


from stimulus_types import LayoutConfig, SessionConfig  # noqa: E402


def _read_json(path: str, what: str) -> dict:
    if not os.path.exists(path):
        raise RuntimeError(
            f"Default {what} config not found: {path}\n"
            "This file is required; make sure the project ships it."
        )
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_session(path: str | None = None) -> SessionConfig:
    """Load session.json configuration.

    Args:
        path: Alternative session file (defaults to configs/session.json)

    Returns:
        SessionConfig: stimuli dir, durations, classifier marker, cue and texts.
    """
    data = _read_json(path or SESSION_DEFAULT_PATH, 'session')
    return cast(SessionConfig, data)


def load_layout(path: str | None = None, override_path: str | None = None) -> LayoutConfig:
    """Load layout.json with external-override precedence and parameter merging.

    Search order:
    1) Load defaults from <BASE_DIR>/configs/layout.json (must exist)
    2) If running as frozen exe, load overrides from <exe_dir>/configs/layout.json
    3) Merge: override parameters take precedence, missing ones use defaults
    """
    layout = cast(LayoutConfig, _read_json(path or LAYOUT_DEFAULT_PATH, 'layout'))

    if override_path is None:
        override_path = get_exe_override_path(os.path.join('configs', 'layout.json'))
    if override_path and os.path.exists(override_path):
        try:
            with open(override_path, 'r', encoding='utf-8') as f:
                overrides = cast(LayoutConfig, json.load(f))
            layout.update(overrides)  # overrides take precedence
        except (OSError, ValueError) as e:
            # If override file is malformed, warn but continue with defaults
            import warnings
            warnings.warn(
                f"External layout config is malformed, using defaults: {override_path}\nError: {e}"
            )

    return layout
