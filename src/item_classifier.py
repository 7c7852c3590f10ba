"""Item classifier: turns uploaded stimulus files into StimulusItem records.

- Text files yield one item per non-blank line. Lines from a file whose name
  contains the sentence marker become sentence prompts, all others word prompts.
- Image files yield a single visual prompt whose payload is the image path.
  The image is opened with Pillow first so broken files are skipped up front.
- Anything else is reported as skipped.
"""
from __future__ import annotations

import mimetypes
import os
from typing import Iterable

from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from psychopy import logging

from models import StimulusItem, StimulusKind, UnclassifiableContent

DEFAULT_SENTENCE_MARKER = 'SRT'
TEXT_EXTENSIONS = ('.txt', '.text', '.csv')


def _guess_content_type(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    if mime:
        return mime
    if path.lower().endswith(TEXT_EXTENSIONS):
        return 'text/plain'
    return ''


def classify_text(
    label: str,
    text: str,
    sentence_marker: str = DEFAULT_SENTENCE_MARKER,
) -> list[StimulusItem]:
    """Split text content into one stimulus per non-blank line.

    Args:
        label: Source name (file name); checked for the sentence marker
        text: Decoded text content
        sentence_marker: Substring marking sentence-completion files

    Returns:
        List of word or sentence prompts in line order
    """
    kind = (
        StimulusKind.SENTENCE_PROMPT
        if sentence_marker and sentence_marker in label
        else StimulusKind.WORD_PROMPT
    )
    return [
        StimulusItem(kind=kind, label=label, payload=line.strip())
        for line in text.splitlines()
        if line.strip()
    ]


def classify_file(
    path: str,
    sentence_marker: str = DEFAULT_SENTENCE_MARKER,
) -> list[StimulusItem]:
    """Classify a single file.

    Args:
        path: File to read
        sentence_marker: Substring marking sentence-completion files

    Returns:
        Items produced from the file (may be empty for a blank text file)

    Raises:
        UnclassifiableContent: File missing, undecodable, or of unknown type
    """
    label = os.path.basename(path)
    if not os.path.isfile(path):
        raise UnclassifiableContent(f"{label}: file not found")

    content_type = _guess_content_type(path)
    if content_type.startswith('text/'):
        try:
            with open(path, 'r', encoding='utf-8-sig') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise UnclassifiableContent(f"{label}: cannot read text ({e})") from e
        return classify_text(label, text, sentence_marker)

    if content_type.startswith('image/'):
        try:
            with PILImage.open(path) as im:
                im.verify()
        except (OSError, UnidentifiedImageError) as e:
            raise UnclassifiableContent(f"{label}: cannot open image ({e})") from e
        return [
            StimulusItem(
                kind=StimulusKind.VISUAL_PROMPT,
                label=label,
                payload=os.path.abspath(path),
                is_text=False,
            )
        ]

    raise UnclassifiableContent(f"{label}: unsupported content type '{content_type or 'unknown'}'")


def classify_files(
    paths: Iterable[str],
    sentence_marker: str = DEFAULT_SENTENCE_MARKER,
) -> tuple[list[StimulusItem], list[str]]:
    """Classify many files, skipping the ones that cannot be classified.

    Returns:
        (items, skipped) where skipped holds one human-readable reason per file
    """
    items: list[StimulusItem] = []
    skipped: list[str] = []
    for path in paths:
        try:
            items.extend(classify_file(path, sentence_marker))
        except UnclassifiableContent as e:
            logging.warning(f"Item skipped: {e}")
            skipped.append(str(e))
    return items, skipped


def list_stimulus_files(dirpath: str) -> list[str]:
    """List regular files in a stimuli directory, sorted by name.

    Hidden files (e.g. .gitignore) are ignored. A missing directory yields [].
    """
    if not os.path.isdir(dirpath):
        return []
    return [
        os.path.join(dirpath, name)
        for name in sorted(os.listdir(dirpath))
        if not name.startswith('.') and os.path.isfile(os.path.join(dirpath, name))
    ]
