import os
import sys
import tempfile
import unittest

from PIL import Image

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from item_classifier import (  # noqa: E402
    classify_file,
    classify_files,
    classify_text,
    list_stimulus_files,
)
from models import StimulusKind, UnclassifiableContent  # noqa: E402


def write_text(dirpath, name, text):
    path = os.path.join(dirpath, name)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)
    return path


class TestClassifyText(unittest.TestCase):
    def test_one_word_prompt_per_line(self):
        items = classify_text('WAT_set1.txt', 'river\n  mother \n\n\nfear\n')
        self.assertEqual([i.payload for i in items], ['river', 'mother', 'fear'])
        self.assertTrue(all(i.kind is StimulusKind.WORD_PROMPT for i in items))
        self.assertTrue(all(i.label == 'WAT_set1.txt' for i in items))
        self.assertEqual(len({i.id for i in items}), 3)

    def test_sentence_marker(self):
        items = classify_text('SRT_situations.txt', 'He lost his wallet and\r\nShe was asked to lead and\r\n')
        self.assertEqual(len(items), 2)
        self.assertTrue(all(i.kind is StimulusKind.SENTENCE_PROMPT for i in items))

    def test_custom_marker(self):
        items = classify_text('situations.txt', 'one\n', sentence_marker='situations')
        self.assertIs(items[0].kind, StimulusKind.SENTENCE_PROMPT)


class TestClassifyFile(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def test_image_becomes_visual_prompt(self):
        path = os.path.join(self.tmpdir, 'TAT_01.png')
        Image.new('RGB', (40, 30), color='gray').save(path)
        items = classify_file(path)
        self.assertEqual(len(items), 1)
        self.assertIs(items[0].kind, StimulusKind.VISUAL_PROMPT)
        self.assertFalse(items[0].is_text)
        self.assertEqual(items[0].payload, os.path.abspath(path))

    def test_broken_image_is_unclassifiable(self):
        path = os.path.join(self.tmpdir, 'TAT_02.png')
        with open(path, 'wb') as f:
            f.write(b'not a png')
        with self.assertRaises(UnclassifiableContent):
            classify_file(path)

    def test_missing_and_unknown_files(self):
        with self.assertRaises(UnclassifiableContent):
            classify_file(os.path.join(self.tmpdir, 'nope.txt'))
        path = os.path.join(self.tmpdir, 'data.bin')
        with open(path, 'wb') as f:
            f.write(b'\x00')
        with self.assertRaises(UnclassifiableContent):
            classify_file(path)

    def test_undecodable_text(self):
        path = os.path.join(self.tmpdir, 'WAT.txt')
        with open(path, 'wb') as f:
            f.write(b'\xff\xfe\xfa bad')
        with self.assertRaises(UnclassifiableContent):
            classify_file(path)

    def test_classify_files_reports_skipped(self):
        words = write_text(self.tmpdir, 'WAT.txt', 'river\n')
        image = os.path.join(self.tmpdir, 'TAT_01.jpg')
        Image.new('RGB', (10, 10)).save(image)
        missing = os.path.join(self.tmpdir, 'gone.txt')
        items, skipped = classify_files([words, missing, image])
        self.assertEqual([i.kind for i in items], [StimulusKind.WORD_PROMPT, StimulusKind.VISUAL_PROMPT])
        self.assertEqual(len(skipped), 1)
        self.assertIn('gone.txt', skipped[0])

    def test_list_stimulus_files(self):
        write_text(self.tmpdir, '.gitignore', '*\n')
        b = write_text(self.tmpdir, 'b.txt', 'x')
        a = write_text(self.tmpdir, 'a.txt', 'y')
        os.mkdir(os.path.join(self.tmpdir, 'sub'))
        self.assertEqual(list_stimulus_files(self.tmpdir), [a, b])
        self.assertEqual(list_stimulus_files(os.path.join(self.tmpdir, 'missing')), [])

if __name__ == '__main__':
    unittest.main()
