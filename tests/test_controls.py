import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from models import Operation, RunSnapshot, RunStatus  # noqa: E402
from ui.controls import ControlBar  # noqa: E402

LAYOUT = {'controls_y': -0.85, 'controls_gap': 0.05, 'controls_button_w': 0.3}


class FakeRect:
    def __init__(self, hit):
        self.hit = hit

    def contains(self, mouse):
        return self.hit


def snap(status=RunStatus.RUNNING, position=0, total=3, writing=False):
    return RunSnapshot(
        status=status, position=position, writing_subphase=writing,
        seconds_remaining=10, transition_locked=False, total=total,
    )


class TestControlBar(unittest.TestCase):
    def setUp(self):
        self.bar = ControlBar(LAYOUT)

    def test_specs_follow_preconditions(self):
        specs = self.bar.specs(snap(position=0))
        self.assertEqual([s[0] for s in specs], [
            Operation.RETREAT, Operation.ADVANCE, Operation.PAUSE, Operation.END,
        ])
        self.assertEqual([s[2] for s in specs], [False, True, True, True])

        paused = self.bar.specs(snap(status=RunStatus.PAUSED, position=1))
        self.assertEqual(paused[2][:2], (Operation.RESUME, 'Resume Test'))
        self.assertFalse(paused[0][2])
        self.assertFalse(paused[1][2])

    def test_positions_are_centred(self):
        xs = [x for x, _ in self.bar.positions(4)]
        self.assertAlmostEqual(xs[0], -xs[3])
        self.assertAlmostEqual(xs[1], -xs[2])

    def test_click_ignores_disabled_buttons(self):
        targets = [
            (Operation.RETREAT, FakeRect(True), False),
            (Operation.ADVANCE, FakeRect(True), True),
        ]
        self.assertIs(self.bar.handle_click(targets, mouse=None), Operation.ADVANCE)
        self.assertIsNone(self.bar.handle_click(targets[:1], mouse=None))

    def test_keys(self):
        self.assertIs(self.bar.handle_keys(['right'], snap()), Operation.ADVANCE)
        self.assertIs(self.bar.handle_keys(['left'], snap()), Operation.RETREAT)
        self.assertIs(self.bar.handle_keys(['escape'], snap()), Operation.END)
        self.assertIs(self.bar.handle_keys(['space'], snap()), Operation.PAUSE)
        self.assertIs(self.bar.handle_keys(['space'], snap(status=RunStatus.PAUSED)), Operation.RESUME)
        self.assertIsNone(self.bar.handle_keys(['q'], snap()))

if __name__ == '__main__':
    unittest.main()
