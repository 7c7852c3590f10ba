"""Timed Stimulus Test – Entry Point

This module is the application entry for the timed stimulus test. It is responsible for:
- Collecting participant information via a PsychoPy dialog
- Loading configuration and the configured stimuli directory (more files can be added on the
  item list shown before each test)
- Setting up PsychoPy logging and delegating the session to `stimulus_session.StimulusSession`

Current behavior:
- Stimuli are ordered pictures first (TAT), then words (WAT), then sentences (SRT, files whose
  name contains the sentence marker), anything else last.
- Each picture is shown for 30 s and followed by a 240 s writing phase; words get 15 s and
  sentences 30 s. A cue sounds at every phase change.
- Next / Previous / Pause / End Test are available as buttons and keys (right, left, space, escape).

Debug mode:
- Enable by setting `"debug_mode": true` in `configs/layout.json`, or by entering participant_id `0`.
- Uses `debug_durations` from `configs/session.json` and a 1280×800 window.

Dependencies: PsychoPy, Pillow.
"""
import os
from datetime import datetime

from psychopy import gui, logging

from config_loader import get_output_dir, load_layout, load_session
from stimulus_session import StimulusSession, is_debug_mode


def get_participant_info():
    """Collect participant information via PsychoPy dialog.

    Returns:
        dict | None: Participant info dict if valid, None if cancelled
    """
    default = {
        'participant_id': '',
        'age': '',
        'gender': '',
        'session': 'S1',
        'notes': ''
    }
    while True:
        dlg = gui.DlgFromDict(default, title='Participant', order=['participant_id', 'age', 'gender', 'session', 'notes'])
        if not dlg.OK:
            return None
        pid = (default.get('participant_id') or '').strip()
        if pid:
            return default
        # prompt and loop again
        gui.Dlg(title='Notice', labelButtonOK='OK').addText('participant_id is required').show()


def setup_logging(participant_info, debug_mode):
    """Console + per-session log file in the output directory."""
    logging.console.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    out_dir = get_output_dir()
    os.makedirs(out_dir, exist_ok=True)
    ts = datetime.now().strftime('%Y%m%d_%H%M%S')
    pid = participant_info.get('participant_id', 'anon')
    log_path = os.path.join(out_dir, f'session_{pid}_{ts}.log')
    logging.LogFile(log_path, level=logging.EXP, filemode='w')
    return log_path


def main():
    """Main entry point for the timed stimulus test."""
    session = load_session()
    layout = load_layout()

    # Retry loop for participant info
    while True:
        info = get_participant_info()
        if info is None:
            confirm = gui.Dlg(title='Exit?', labelButtonOK='Retry', labelButtonCancel='Exit')
            confirm.addText('No participant information entered. Try again?')
            confirm.show()
            if confirm.OK:
                continue
            return
        break

    setup_logging(info, is_debug_mode(layout, info))

    task = StimulusSession(session, layout, participant_info=info)
    skipped = task.load_stimuli_dir()
    if skipped:
        dlg = gui.Dlg(title='Items skipped', labelButtonOK='Continue')
        for reason in skipped:
            dlg.addText(reason)
        dlg.show()

    try:
        task.run()
    finally:
        logging.flush()


if __name__ == '__main__':
    main()
