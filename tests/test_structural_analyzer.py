"""
Tests for the structural signal: prose layout vs. code formatting regularity.
"""

from __future__ import annotations

import pytest

from samples import AI_PROSE, CODE_SAMPLE, HUMAN_PROSE
from zana.services.statistical_analyzer import NEUTRAL_SCORE
from zana.services.structural_analyzer import analyze_structural

MIXED_INDENT_CODE = "def f(x):\n\tif x:\n  \treturn x\n  return 0\n"


@pytest.mark.parametrize("is_code", [True, False])
@pytest.mark.parametrize("text", ["a", "x = 1", "short text here"])
def test_too_little_material_is_neutral(text, is_code):
    signal = analyze_structural(text, is_code)
    assert signal.score == NEUTRAL_SCORE
    assert signal.metadata["reason"] == "insufficient_text"


def test_flag_selects_branch():
    """The same content is measured as code or prose purely by the flag."""
    as_code = analyze_structural(CODE_SAMPLE, True)
    as_prose = analyze_structural(CODE_SAMPLE, False)
    assert as_code.metadata["mode"] == "code"
    assert as_prose.metadata["mode"] == "prose"


def test_uniform_transition_heavy_prose_scores_high():
    machine = analyze_structural(AI_PROSE, False)
    human = analyze_structural(HUMAN_PROSE, False)
    assert machine.score >= 90
    assert machine.score > human.score + 30
    assert machine.metadata["measures"]["transition_rate"] == pytest.approx(1.0)


def test_todo_marker_counts_as_human_idiosyncrasy():
    clean = analyze_structural(CODE_SAMPLE, True)
    marked = analyze_structural(CODE_SAMPLE.replace("# Apply a percentage discount", "# TODO: percentage discount"), True)
    assert clean.metadata["likeness"]["no_markers"] == 1.0
    assert marked.metadata["likeness"]["no_markers"] == 0.0
    assert marked.score < clean.score


def test_indentation_consistency():
    clean = analyze_structural(CODE_SAMPLE, True)
    mixed = analyze_structural(MIXED_INDENT_CODE, True)
    assert clean.metadata["measures"]["indentation"] == 1.0
    assert mixed.metadata["measures"]["indentation"] < 1.0


def test_naming_uniformity_detects_mixed_styles():
    code = "\n".join([
        "user_name = get_user_name()",
        "userAge = getUserAge()",
        "account_id = load_account_id()",
        "lastLogin = fetchLastLogin()",
    ])
    signal = analyze_structural(code, True)
    assert signal.metadata["measures"]["naming"] < 1.0
    assert analyze_structural(CODE_SAMPLE, True).metadata["measures"]["naming"] == 1.0


def test_long_inputs_stay_in_range():
    long_prose = (HUMAN_PROSE + "\n\n") * 120
    long_code = CODE_SAMPLE * 400
    for content, is_code in ((long_prose, False), (long_code, True)):
        signal = analyze_structural(content, is_code)
        assert 0 <= signal.score <= 100


def test_deterministic():
    assert analyze_structural(AI_PROSE, False) == analyze_structural(AI_PROSE, False)
