"""
Tests for sentence / segment splitting and re-anchoring of remote segments.
"""

from __future__ import annotations

import pytest

from samples import AI_PROSE, CODE_SAMPLE, HUMAN_PROSE
from zana.utils.text_processing import (
    anchor_spans,
    segment_spans,
    split_into_sentences,
    split_paragraphs,
    word_tokens,
)


@pytest.mark.parametrize("content,is_code", [
    (HUMAN_PROSE, False),
    (AI_PROSE, False),
    (CODE_SAMPLE, True),
    ("  leading and trailing whitespace.  Second one.\n\n", False),
    ("\n\n    indented_first_line = 1\n\nsecond = 2\n", True),
    ("no terminal punctuation at all", False),
])
def test_segments_reconstruct_content(content, is_code):
    pieces = segment_spans(content, is_code)
    assert "".join(pieces) == content


def test_code_segments_are_lines():
    pieces = segment_spans("a = 1\nb = 2\n\nc = 3\n", True)
    assert pieces == ["a = 1\n", "b = 2\n\n", "c = 3\n"]


def test_paragraph_break_ends_sentence():
    sentences = split_into_sentences("A heading without a period\n\nThen a sentence. And another.")
    assert sentences == ["A heading without a period", "Then a sentence.", "And another."]


def test_split_paragraphs():
    assert split_paragraphs("one\n\n  \n two\n\nthree") == ["one", "two", "three"]


def test_word_tokens_drop_punctuation():
    assert word_tokens("Hello, world! It's 2024.") == ["Hello", "world", "It", "s", "2024"]


def test_anchor_spans_tile_the_content():
    content = "First   sentence here.\n\nSecond “quoted” one.  "
    spans = anchor_spans(content, ["First sentence here.", 'Second "quoted" one.'])
    assert spans[0][0] == 0
    assert spans[-1][1] == len(content)
    assert "".join(content[a:b] for a, b in spans) == content
    assert content[spans[1][0]:spans[1][1]].startswith("Second")


@pytest.mark.parametrize("pieces", [
    ["First sentence here."],
    ["First sentence here.", "Something else entirely."],
    ["Second one.", "First sentence here."],
    ["First sentence here.", "Second one.", "Extra."],
    [],
])
def test_anchor_spans_rejects_non_covering_pieces(pieces):
    with pytest.raises(ValueError):
        anchor_spans("First sentence here. Second one.", pieces)
