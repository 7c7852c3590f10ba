"""Tests for configuration loading (session + layout) and path helpers."""
import json
import os
import sys
import tempfile
import unittest
import warnings

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from config_loader import (  # noqa: E402
    LAYOUT_DEFAULT_PATH,
    get_base_dir,
    get_output_dir,
    load_layout,
    load_session,
)
from path_utils import file_exists_nonempty, fitted_size_keep_aspect, resolve_path  # noqa: E402
from utils import DEFAULT_DURATIONS  # noqa: E402


class TestConfigLoader(unittest.TestCase):
    def test_base_and_output_dirs(self):
        self.assertTrue(os.path.isdir(get_base_dir()))
        self.assertTrue(os.path.isdir(os.path.dirname(get_output_dir())))

    def test_session_defaults_match_phase_durations(self):
        session = load_session()
        self.assertEqual(session['durations'], DEFAULT_DURATIONS)
        self.assertEqual(set(session['debug_durations']), set(DEFAULT_DURATIONS))
        self.assertEqual(session['sentence_marker'], 'SRT')
        self.assertIn('value', session['cue'])

    def test_layout_has_required_keys(self):
        layout = load_layout()
        for key in ('font_main', 'header_y', 'controls_y', 'timer_red_threshold', 'button_height'):
            self.assertIn(key, layout)
        self.assertFalse(layout['debug_mode'])

    def test_missing_default_raises(self):
        with self.assertRaises(RuntimeError):
            load_session(os.path.join(ROOT, 'configs', 'missing.json'))

    def test_layout_override_merging(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            override = os.path.join(tmpdir, 'layout.json')
            with open(override, 'w', encoding='utf-8') as f:
                json.dump({'debug_mode': True, 'timer_red_threshold': 9}, f)
            layout = load_layout(override_path=override)
        with open(LAYOUT_DEFAULT_PATH, encoding='utf-8') as f:
            defaults = json.load(f)
        for key in defaults:
            self.assertIn(key, layout)
        self.assertTrue(layout['debug_mode'])
        self.assertEqual(layout['timer_red_threshold'], 9)
        self.assertEqual(layout['font_main'], defaults['font_main'])

    def test_malformed_override_warns_and_keeps_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            override = os.path.join(tmpdir, 'layout.json')
            with open(override, 'w', encoding='utf-8') as f:
                f.write('{not json')
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always')
                layout = load_layout(override_path=override)
        self.assertTrue(caught)
        self.assertFalse(layout['debug_mode'])


class TestPathUtils(unittest.TestCase):
    def test_resolve_relative_config(self):
        self.assertTrue(os.path.exists(resolve_path('configs/session.json')))

    def test_file_exists_nonempty(self):
        self.assertFalse(file_exists_nonempty('/non/existent/file.txt'))
        with tempfile.TemporaryDirectory() as tmpdir:
            empty = os.path.join(tmpdir, 'empty.txt')
            open(empty, 'w').close()
            self.assertFalse(file_exists_nonempty(empty))
            full = os.path.join(tmpdir, 'full.txt')
            with open(full, 'w') as f:
                f.write('content')
            self.assertTrue(file_exists_nonempty(full))

    def test_fitted_size_keep_aspect(self):
        from PIL import Image
        with tempfile.TemporaryDirectory() as tmpdir:
            wide = os.path.join(tmpdir, 'wide.png')
            Image.new('RGB', (200, 100)).save(wide)
            w, h = fitted_size_keep_aspect(wide, 1.0, 1.0)
            self.assertAlmostEqual(w, 1.0)
            self.assertAlmostEqual(h, 0.5)
            self.assertEqual(fitted_size_keep_aspect(os.path.join(tmpdir, 'none.png'), 1.0, 0.8), (1.0, 0.8))

if __name__ == '__main__':
    unittest.main()
