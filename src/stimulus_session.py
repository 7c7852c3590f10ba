"""Timed Stimulus Test - Core Module

This module wires a complete test session together:
- Loading stimulus files into the engine's item pool
- Window lifecycle
- Item list → instruction → timed run → completion screen, repeated until Quit

Architecture:
    - create_window(): Module-level window context manager
    - choose_stimulus_files(): File picker used by the item list
    - StimulusSession: Session controller owning one SequencingEngine
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable

from psychopy import event, gui, logging, visual

from countdown import CountdownDriver
from cue import CuePlayer
from item_classifier import DEFAULT_SENTENCE_MARKER, list_stimulus_files
from models import OperationResult
from path_utils import resolve_path
from sequencing_engine import SequencingEngine
from session_runner import DEFAULT_WRITING_PROMPT, SessionRunner
from stimulus_types import LayoutConfig, ParticipantInfo, SessionConfig
from ui.controls import ControlBar
from ui.item_list import (
    ADD_FILES,
    DELETE,
    DELETE_ALL,
    PAGE_NEXT,
    PAGE_PREV,
    QUIT,
    START,
    ItemListView,
)
from ui.renderer import Renderer

# =============================================================================
# MODULE-LEVEL HELPERS
# =============================================================================

@contextmanager
def create_window(debug_mode: bool):
    """Context manager to create and cleanup a PsychoPy window.

    Args:
        debug_mode: When True, creates a 1280x800 window for faster debugging.
                    When False, creates a fullscreen window for sessions.

    Yields:
        visual.Window: The created PsychoPy window.
    """
    if debug_mode:
        win = visual.Window(size=(1280, 800), color='black', units='norm')
    else:
        win = visual.Window(fullscr=True, color='black', units='norm')
    try:
        yield win
    finally:
        win.close()


def is_debug_mode(layout: LayoutConfig, participant_info: ParticipantInfo | None) -> bool:
    """Debug mode: layout flag OR participant_id == '0'."""
    pid = str((participant_info or {}).get('participant_id', '')).strip()
    return bool(layout.get('debug_mode', False) or pid == '0')


def choose_stimulus_files() -> list[str]:
    """Let the experimenter pick stimulus files (images, word lists, sentence lists)."""
    paths = gui.fileOpenDlg(
        prompt='Select stimulus files (images, word lists, sentence lists)',
        allowed='Stimuli (*.png *.jpg *.jpeg *.bmp *.gif *.txt);;All files (*.*)',
    )
    return paths or []


# =============================================================================
# MAIN SESSION CLASS
# =============================================================================

class StimulusSession:
    """Timed stimulus test controller.

    Manages the complete session lifecycle:
    1. Item loading (stimuli directory at startup)
    2. Window creation (debug: 1280x800, normal: fullscreen)
    3. Item list: add files, delete items, start or quit
    4. Instruction screen
    5. Timed run driven by the SequencingEngine
    6. Completion screen, then back to the item list

    Notes:
    - The engine is created here and handed to SessionRunner; nothing is global
    - Window and UI components are local to run() scope
    """


    def __init__(
        self,
        session: SessionConfig,
        layout: LayoutConfig,
        participant_info: ParticipantInfo | None = None,
    ) -> None:
        """Initialize session with configuration and participant info.

        Args:
            session: Session config from configs/session.json
            layout: UI layout parameters from configs/layout.json
            participant_info: Participant metadata (id, age, gender, etc.)
        """
        self.session = session
        self.layout = layout
        self.participant_info = participant_info or {}
        self.debug_mode = is_debug_mode(layout, self.participant_info)

        durations_key = 'debug_durations' if self.debug_mode else 'durations'
        self.engine = SequencingEngine(
            durations=session.get(durations_key) or session.get('durations'),
            countdown=CountdownDriver(),
            sentence_marker=session.get('sentence_marker', DEFAULT_SENTENCE_MARKER),
        )

    # =========================================================================
    # ITEM LOADING
    # =========================================================================

    def load_stimuli_dir(self) -> list[str]:
        """Ingest every file in the configured stimuli directory.

        Returns:
            Reasons for files that were skipped
        """
        dirpath = resolve_path(self.session.get('stimuli_dir', 'stimuli'))
        _, skipped = self.load_files(list_stimulus_files(dirpath))
        return skipped

    def load_files(self, paths: Iterable[str]) -> tuple[OperationResult, list[str]]:
        result, skipped = self.engine.ingest(paths)
        if not result:
            logging.warning(result.message)
        return result, skipped

    # =========================================================================
    # ITEM SCREEN
    # =========================================================================

    def apply_item_action(self, action: tuple[str, str | None]) -> str:
        """Carry out an item screen action that changes the pool.

        Returns:
            Message to show under the list
        """
        name, item_id = action
        if name == DELETE:
            return self.engine.delete_item(item_id).message
        if name == DELETE_ALL:
            return self.engine.delete_all().message
        if name == ADD_FILES:
            paths = choose_stimulus_files()
            if not paths:
                return ''
            result, skipped = self.load_files(paths)
            if skipped:
                return f"{result.message}; skipped {len(skipped)} file(s)"
            return result.message
        raise ValueError(f"Not a pool action: {name}")

    def manage_items(self, win: visual.Window, renderer: Renderer) -> bool:
        """Show the item list until the experimenter starts a test or quits (blocking).

        Returns:
            True when Start Test was clicked with a non-empty sequence, False on Quit/escape
        """
        view = ItemListView(self.layout)
        mouse = event.Mouse(win=win)
        mouse_was_pressed = False
        event.clearEvents()
        page = 0
        message = ''

        while True:
            items = self.engine.pool.items
            page = view.clamp_page(page, len(items))
            targets = renderer.draw_item_list(mouse, view, items, page, message)
            win.flip()

            if event.getKeys(keyList=['escape']):
                return False

            mouse_is_pressed = any(mouse.getPressed())
            mouse_just_released = mouse_was_pressed and not mouse_is_pressed
            mouse_was_pressed = mouse_is_pressed
            if not mouse_just_released:
                continue

            action = view.handle_click(targets, mouse)
            if action is None:
                continue
            name = action[0]
            if name == START:
                if self.engine.sequence:
                    return True
            elif name == QUIT:
                return False
            elif name == PAGE_PREV:
                page -= 1
            elif name == PAGE_NEXT:
                page += 1
            else:
                message = self.apply_item_action(action)
                # The file dialog swallows the release; start the next click fresh
                mouse_was_pressed = False

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def run(self) -> None:
        """Main entry point: window → item list → instruction → timed run → completion.

        Returns to the item list after every completed run until Quit.
        """
        with create_window(self.debug_mode) as win:
            renderer = Renderer(win, self.layout)
            # The cue needs the audio backend, which is only guaranteed once a window exists
            self.engine.cue = CuePlayer(self.session.get('cue'))
            runner = SessionRunner(
                win,
                renderer,
                ControlBar(self.layout),
                writing_prompt=self.session.get('writing_prompt', DEFAULT_WRITING_PROMPT),
            )

            while self.manage_items(win, renderer):
                instruction_text = self.session.get('instruction', '')
                if instruction_text:
                    renderer.show_instruction(
                        instruction_text,
                        button_text=self.session.get('button_text', 'Start Test'),
                        debug_mode=self.debug_mode,
                    )

                runner.run(self.engine)
                renderer.show_completion(self.session.get('completion_lines'))
            logging.exp('Session closed from the item list')
