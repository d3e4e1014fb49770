"""Entity decoding and markup cleanup for wordbook text fields.

Older wordbook files were written by a tool that escaped entities twice
(``&lt;`` saved as ``&amp;lt;``). Decoding is therefore always two passes:
doubled entities first, then standard HTML entities. Saving writes single-level
entities only, so the doubled pass is a permanent part of the format.
"""

import html
import re

# Doubled entities, in replacement order. ``&amp;amp;`` goes last so that
# ``&amp;amp;lt;`` does not collapse into ``<`` in a single pass.
DOUBLED_ENTITIES: tuple[tuple[str, str], ...] = (
    ('&amp;lt;', '<'),
    ('&amp;gt;', '>'),
    ('&amp;quot;', '"'),
    ('&amp;apos;', "'"),
    ('&amp;amp;', '&'),
)

HTML_TAG_PATTERN = re.compile(r'<[^>]*>')
WHITESPACE_PATTERN = re.compile(r'\s+')

# Marks an explanatory annotation appended after the primary translation.
NOTE_MARKER = '说明：'


def decode_doubled_entities(text: str) -> str:
    """Undo one level of entity escaping applied on top of normal escaping."""
    for entity, char in DOUBLED_ENTITIES:
        text = text.replace(entity, char)
    return text


def decode_entities(text: str) -> str:
    """Two-pass decode: doubled entities, then standard HTML entities."""
    return html.unescape(decode_doubled_entities(text))


def _clean_once(text: str) -> str:
    text = decode_entities(text)
    text = HTML_TAG_PATTERN.sub('', text)
    text = WHITESPACE_PATTERN.sub(' ', text).strip()
    if NOTE_MARKER in text:
        text = text.split(NOTE_MARKER, 1)[0].strip()
    return text


def clean_html_tags(text: str) -> str:
    """Reduce a translation/phonetic/note field to plain text.

    Decodes entities, drops every tag, collapses whitespace and cuts off an
    embedded explanatory note. Steps repeat until the text is stable, so
    ``clean_html_tags(clean_html_tags(x)) == clean_html_tags(x)``.
    """
    if not text:
        return ""
    cleaned = _clean_once(text)
    # Every changing pass shortens the text or only normalizes whitespace,
    # so this terminates.
    while True:
        again = _clean_once(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again
