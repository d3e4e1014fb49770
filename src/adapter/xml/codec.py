"""Wordbook XML codec.

Converts between the persisted ``<wordbook>`` document and ``WordRecord``
lists. Parsing is a single forward SAX scan; the format is lenient, so a
record missing sub-elements or carrying an unparsable number still comes out
with defaults. Only a document that cannot be tokenized at all is rejected.

Document shape::

    <wordbook>
        <item>
            <word>...</word>
            <trans><![CDATA[...]]></trans>
            <phonetic><![CDATA[...]]></phonetic>
            <tags>...</tags>
            <progress>1</progress>
            <note><![CDATA[...]]></note>
            <examples>
                <example>
                    <source>...</source>
                    <trans><![CDATA[...]]></trans>
                </example>
            </examples>
        </item>
    </wordbook>

The learning-state elements (``id``, ``difficulty``, ``mastery``,
``review_count``, ``last_review``, ``created_at``, ``updated_at``) are
optional; files without them load with default state.
"""

import uuid
import xml.sax
from datetime import datetime, timezone
from logging import getLogger
from xml.sax.handler import ContentHandler, LexicalHandler
from xml.sax.saxutils import escape

from domain.model.errors import CodecEncodingError, CodecSyntaxError
from domain.model.word import (
    DEFAULT_DIFFICULTY,
    DEFAULT_PROGRESS,
    MASTERY_MAX,
    PROGRESS_MAX,
    Example,
    WordRecord,
)
from utils.html_cleaning import clean_html_tags, decode_doubled_entities

logger = getLogger(__name__)

ROOT = 'wordbook'
ITEM = 'item'
EXAMPLE = 'example'
EXAMPLES = 'examples'

EMPTY_DOCUMENT = '<?xml version="1.0" encoding="UTF-8"?>\n<wordbook>\n</wordbook>\n'

_XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
_ATTR_ENTITIES = {'"': '&quot;', "'": '&apos;'}
_INDENT = '    '


# ── parsing ──────────────────────────────────────────────────


def _parse_int(text: str, default: int, low: int, high: int, field_name: str) -> int:
    try:
        value = int(text.strip())
    except ValueError:
        logger.debug("Unparsable numeric field, using default", extra={"field": field_name, "value": text})
        return default
    if value < low or value > high:
        logger.debug("Numeric field out of range, using default", extra={"field": field_name, "value": value})
        return default
    return value


def _parse_datetime(text: str) -> datetime | None:
    text = text.strip()
    if not text:
        return None
    try:
        value = datetime.fromisoformat(text)
    except ValueError:
        logger.debug("Unparsable timestamp, keeping default", extra={"value": text})
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class _WordbookHandler(ContentHandler, LexicalHandler):
    """SAX handler building WordRecords as elements close."""

    def __init__(self):
        super().__init__()
        self.words: list[WordRecord] = []
        self._word: WordRecord | None = None
        self._example: Example | None = None
        self._in_cdata = False
        # (text, is_cdata) runs since the last element boundary
        self._segments: list[tuple[str, bool]] = []

    # ── text buffer ───────────────────────────────────────────

    def _text(self) -> str:
        return ''.join(
            text if is_cdata else decode_doubled_entities(text)
            for text, is_cdata in self._segments
        )

    def characters(self, content):
        if self._segments and self._segments[-1][1] == self._in_cdata:
            text, is_cdata = self._segments[-1]
            self._segments[-1] = (text + content, is_cdata)
        else:
            self._segments.append((content, self._in_cdata))

    def startCDATA(self):
        self._in_cdata = True

    def endCDATA(self):
        self._in_cdata = False

    # ── elements ──────────────────────────────────────────────

    def startElement(self, name, attrs):
        self._segments = []
        if name == ITEM:
            self._word = WordRecord(id='')
        elif name == EXAMPLE:
            self._example = Example()

    def endElement(self, name):
        text = self._text()
        self._segments = []

        word = self._word
        example = self._example

        if name == 'trans':
            if example is not None:
                example.translation = clean_html_tags(text)
            elif word is not None:
                word.translation = clean_html_tags(text)
        elif name == 'source':
            if example is not None:
                example.source = text.strip()
        elif name == EXAMPLE:
            if word is not None and example is not None:
                word.examples.append(example)
            self._example = None
        elif name == ITEM:
            if word is not None:
                self._finish(word)
            self._word = None
        elif word is not None:
            self._assign_field(word, name, text)

    def _assign_field(self, word: WordRecord, name: str, text: str) -> None:
        if name == 'word':
            word.headword = text.strip()
        elif name == 'phonetic':
            word.phonetic = clean_html_tags(text)
        elif name == 'note':
            word.note = clean_html_tags(text)
        elif name == 'tags':
            tag = text.strip()
            word.tags = [tag] if tag else []
        elif name == 'progress':
            word.progress = _parse_int(text, DEFAULT_PROGRESS, 0, PROGRESS_MAX, name)
        elif name == 'id':
            word.id = text.strip()
        elif name == 'difficulty':
            word.difficulty = _parse_int(text, DEFAULT_DIFFICULTY, 1, 10, name)
        elif name == 'mastery':
            word.mastery_level = _parse_int(text, 0, 0, MASTERY_MAX, name)
        elif name == 'review_count':
            word.review_count = _parse_int(text, 0, 0, 2**31 - 1, name)
        elif name == 'last_review':
            word.last_review = _parse_datetime(text)
        elif name == 'created_at':
            word.created_at = _parse_datetime(text) or word.created_at
        elif name == 'updated_at':
            word.updated_at = _parse_datetime(text) or word.updated_at

    def _finish(self, word: WordRecord) -> None:
        if not word.id:
            word.id = str(uuid.uuid4())
        if word.updated_at is None or word.updated_at < word.created_at:
            word.updated_at = word.created_at
        self.words.append(word)


def parse(content: str | bytes) -> list[WordRecord]:
    """Parse a wordbook document into word records.

    Raises:
        CodecEncodingError: content is not valid UTF-8.
        CodecSyntaxError: content cannot be tokenized as XML.
    """
    try:
        if isinstance(content, bytes):
            data = content.decode('utf-8-sig').encode('utf-8')
        else:
            data = content.encode('utf-8')
    except UnicodeError as e:
        raise CodecEncodingError(f"Wordbook is not valid UTF-8: {e}") from e

    handler = _WordbookHandler()
    parser = xml.sax.make_parser()
    parser.setContentHandler(handler)
    parser.setProperty(xml.sax.handler.property_lexical_handler, handler)
    parser.setFeature(xml.sax.handler.feature_external_ges, False)

    try:
        parser.feed(data)
        parser.close()
    except xml.sax.SAXParseException as e:
        raise CodecSyntaxError(
            f"Malformed wordbook at line {e.getLineNumber()}, column {e.getColumnNumber()}: {e.getMessage()}",
            line=e.getLineNumber(),
            column=e.getColumnNumber(),
        ) from e

    logger.debug("Wordbook parsed", extra={"word_count": len(handler.words)})
    return handler.words


# ── serialization ────────────────────────────────────────────


def escape_xml(text: str) -> str:
    return escape(text, _ATTR_ENTITIES)


def cdata(text: str) -> str:
    """Wrap text in CDATA, splitting any literal ``]]>`` across sections."""
    return '<![CDATA[' + text.replace(']]>', ']]]]><![CDATA[>') + ']]>'


def _element(depth: int, name: str, body: str) -> str:
    return f"{_INDENT * depth}<{name}>{body}</{name}>\n"


def _serialize_word(word: WordRecord) -> list[str]:
    lines = [f"{_INDENT}<{ITEM}>\n"]
    lines.append(_element(2, 'id', escape_xml(word.id)))
    lines.append(_element(2, 'word', escape_xml(word.headword)))
    lines.append(_element(2, 'trans', cdata(word.translation)))
    lines.append(_element(2, 'phonetic', cdata(word.phonetic)))
    if word.tags:
        lines.append(_element(2, 'tags', escape_xml(word.tags[0])))
    lines.append(_element(2, 'progress', str(word.progress)))
    lines.append(_element(2, 'difficulty', str(word.difficulty)))
    lines.append(_element(2, 'mastery', str(word.mastery_level)))
    lines.append(_element(2, 'review_count', str(word.review_count)))
    if word.last_review is not None:
        lines.append(_element(2, 'last_review', word.last_review.isoformat()))
    lines.append(_element(2, 'created_at', word.created_at.isoformat()))
    lines.append(_element(2, 'updated_at', word.updated_at.isoformat()))
    if word.note:
        lines.append(_element(2, 'note', cdata(word.note)))
    if word.examples:
        lines.append(f"{_INDENT * 2}<{EXAMPLES}>\n")
        for example in word.examples:
            lines.append(f"{_INDENT * 3}<{EXAMPLE}>\n")
            lines.append(_element(4, 'source', escape_xml(example.source)))
            lines.append(_element(4, 'trans', cdata(example.translation)))
            lines.append(f"{_INDENT * 3}</{EXAMPLE}>\n")
        lines.append(f"{_INDENT * 2}</{EXAMPLES}>\n")
    lines.append(f"{_INDENT}</{ITEM}>\n")
    return lines


def serialize(words: list[WordRecord]) -> str:
    """Render word records as a pretty-printed wordbook document."""
    parts = [_XML_HEADER, f"<{ROOT}>\n"]
    for word in words:
        parts.extend(_serialize_word(word))
    parts.append(f"</{ROOT}>\n")
    return ''.join(parts)
