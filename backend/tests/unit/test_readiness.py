"""
Unit tests for the readiness stage gate.

Covers the fixed issue order, the action-cue density rule (including its
half-up rounding), segment length and tolerance of incomplete input.
"""

import pytest

from app.domain.readiness import (
    ISSUE_CHECKLIST,
    ISSUE_HOOK_TYPE,
    ISSUE_LONG_SEGMENT,
    ISSUE_TARGET_LENGTH,
    ScriptSnapshot,
    count_action_cues,
    is_ready,
    round_half_up,
    split_paragraphs,
    validate_readiness,
)


def words(n: int, word: str = "word") -> str:
    return " ".join([word] * n)


def paragraphs(*sizes: int) -> str:
    return "\n\n".join(words(size) for size in sizes)


def gated(script_content: str, **overrides) -> ScriptSnapshot:
    """Passes every metadata rule so only content rules can fire."""
    values = dict(
        hook_type="question",
        target_length_minutes=10,
        words_per_minute=150,
        script_content=script_content,
        checklist_intro=True,
        checklist_body=True,
        checklist_cta=True,
    )
    values.update(overrides)
    return ScriptSnapshot(**values)


class TestMetadataRules:

    def test_empty_script_reports_three_issues_in_order(self, empty_snapshot):
        """No hook type, zero target and unchecked items; content rules stay quiet."""
        assert validate_readiness(empty_snapshot) == [
            ISSUE_HOOK_TYPE,
            ISSUE_TARGET_LENGTH,
            ISSUE_CHECKLIST,
        ]

    def test_ready_script_has_no_issues(self, ready_snapshot):
        assert validate_readiness(ready_snapshot) == []
        assert is_ready(ready_snapshot) is True

    def test_whitespace_hook_type_counts_as_classified(self):
        assert validate_readiness(gated("", hook_type="   ")) == []

    def test_empty_hook_type_is_unclassified(self):
        assert validate_readiness(gated("", hook_type="")) == [ISSUE_HOOK_TYPE]

    @pytest.mark.parametrize("target", [None, 0, -5, float("nan")])
    def test_target_length_must_be_positive(self, target):
        assert validate_readiness(gated("", target_length_minutes=target)) == [ISSUE_TARGET_LENGTH]

    def test_one_unchecked_item_fails_checklist(self):
        assert validate_readiness(gated("", checklist_cta=False)) == [ISSUE_CHECKLIST]

    def test_truthy_non_bool_checklist_fails(self):
        assert validate_readiness(gated("", checklist_intro=1)) == [ISSUE_CHECKLIST]

    def test_missing_attributes_are_failing_values(self):
        """Any object is accepted; absent fields count as unmet."""
        assert validate_readiness(object()) == [
            ISSUE_HOOK_TYPE,
            ISSUE_TARGET_LENGTH,
            ISSUE_CHECKLIST,
        ]

    def test_works_on_script_rows(self, script_factory):
        assert validate_readiness(script_factory(hook_type=None)) == [ISSUE_HOOK_TYPE]


class TestActionCueRule:

    def test_two_minutes_or_less_needs_no_cues(self):
        # 300 words at 150 wpm is exactly 2 minutes
        assert validate_readiness(gated(paragraphs(150, 150))) == []

    def test_three_minute_script_needs_one_cue(self):
        issues = validate_readiness(gated(paragraphs(150, 150, 150)))

        assert issues == ["Need at least 1 action cues for ~3 minute script"]

    def test_minutes_round_half_up_in_message(self):
        # 375 words -> 2.5 minutes, shown as ~3 (banker's rounding would say 2)
        issues = validate_readiness(gated(paragraphs(125, 125, 125)))

        assert issues == ["Need at least 1 action cues for ~3 minute script"]

    def test_enough_cues_pass(self):
        content = paragraphs(200, 200, 200) + "\n\n[ACTION:zoom] [ACTION:cut]"

        assert validate_readiness(gated(content)) == []

    def test_zero_words_per_minute_falls_back_to_default(self):
        issues = validate_readiness(gated(paragraphs(150, 150, 150), words_per_minute=0))

        assert issues == ["Need at least 1 action cues for ~3 minute script"]

    def test_slower_pace_raises_requirement(self):
        # 450 words at 75 wpm is 6 minutes -> 3 cues
        issues = validate_readiness(gated(paragraphs(150, 150, 150), words_per_minute=75))

        assert issues == ["Need at least 3 action cues for ~6 minute script"]

    def test_cue_matching_is_case_sensitive(self):
        assert count_action_cues("[action: zoom] [Action: cut] [ACTION: pan]") == 1

    def test_cue_does_not_span_lines(self):
        assert count_action_cues("[ACTION: zoom\n] text") == 0

    def test_cue_is_non_greedy(self):
        assert count_action_cues("[ACTION: a] middle [ACTION: b]") == 2


class TestSegmentRule:

    def test_paragraph_over_limit_is_flagged(self):
        issues = validate_readiness(gated(words(301), words_per_minute=1000))

        assert issues == [ISSUE_LONG_SEGMENT]

    def test_paragraph_at_limit_passes(self):
        assert validate_readiness(gated(words(300), words_per_minute=1000)) == []

    def test_cues_do_not_count_toward_segment_length(self):
        content = words(300) + " " + words(10, "[ACTION:cut]")

        assert validate_readiness(gated(content, words_per_minute=1000)) == []

    def test_single_newline_does_not_split(self):
        content = words(200) + "\n" + words(200)

        assert validate_readiness(gated(content, words_per_minute=1000)) == [ISSUE_LONG_SEGMENT]

    def test_blank_line_runs_split_paragraphs(self):
        assert split_paragraphs("a\n\n\nb\n\nc") == ["a", "b", "c"]


class TestIssueOrder:

    def test_all_rules_fire_in_fixed_order(self):
        snapshot = ScriptSnapshot(
            hook_type=None,
            target_length_minutes=None,
            words_per_minute=150,
            script_content=words(450),
        )

        assert validate_readiness(snapshot) == [
            ISSUE_HOOK_TYPE,
            ISSUE_TARGET_LENGTH,
            ISSUE_CHECKLIST,
            "Need at least 1 action cues for ~3 minute script",
            ISSUE_LONG_SEGMENT,
        ]


class TestRoundHalfUp:

    @pytest.mark.parametrize(
        "value, expected",
        [(2.5, 3), (3.5, 4), (2.49, 2), (4.0, 4)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestLengthScenarios:

    def test_ten_minute_script_needs_five_cues(self):
        issues = validate_readiness(gated(paragraphs(*[150] * 10)))

        assert issues == ["Need at least 5 action cues for ~10 minute script"]

    def test_long_paragraph_reported_once(self):
        content = "\n\n".join([words(20), words(350), words(20), words(30)])

        issues = validate_readiness(gated(content, words_per_minute=1000))

        assert issues.count(ISSUE_LONG_SEGMENT) == 1
