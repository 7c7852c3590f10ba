"""Typed structures for session configuration.

Defines TypedDict schemas for:
- DurationConfig: Phase lengths in whole seconds
- CueConfig: Alert cue sound settings
- SessionConfig: Overall session sequence (configs/session.json)
- ParticipantInfo: User demographic information
- LayoutConfig: Visual layout parameters (configs/layout.json)
"""
from __future__ import annotations

from typing import TypedDict


class DurationConfig(TypedDict, total=False):
    visual_prompt: int
    writing: int
    word_prompt: int
    sentence_prompt: int
    other: int

class CueConfig(TypedDict, total=False):
    value: str
    secs: float
    volume: float

class SessionConfig(TypedDict, total=False):
    stimuli_dir: str
    durations: DurationConfig
    debug_durations: DurationConfig
    sentence_marker: str
    cue: CueConfig
    writing_prompt: str
    instruction: str
    button_text: str
    completion_lines: list[str]

class ParticipantInfo(TypedDict, total=False):
    participant_id: str
    age: str
    gender: str
    session: str
    notes: str

class LayoutConfig(TypedDict, total=False):
    # Fonts
    font_main: str
    # Instruction screen
    instruction_center_y: float
    instruction_line_height: float
    instruction_line_spacing: float
    instruction_button_y: float
    instruction_button_delay: float
    # Buttons
    button_width: float
    button_height: float
    button_x: float
    button_label_height: float
    button_line_width: float
    button_fill_hover: object
    button_fill_normal: object
    button_fill_disabled: object
    button_outline_hover: object
    button_outline_normal: object
    button_outline_disabled: object
    # Header (timer/position)
    header_y: float
    header_font_size: float
    header_left_x: float
    header_right_x: float
    # Stimulus area
    stimulus_y: float
    stimulus_box_w: float
    stimulus_box_h: float
    stimulus_text_height: float
    writing_text_height: float
    # Control bar
    controls_y: float
    controls_gap: float
    controls_button_w: float
    # Pre-test item list
    list_top_y: float
    list_row_h: float
    list_text_height: float
    list_label_x: float
    list_delete_x: float
    list_delete_w: float
    list_action_w: float
    list_actions_y: float
    list_message_y: float
    # Timers
    timer_red_threshold: int
    # Misc
    debug_mode: bool
