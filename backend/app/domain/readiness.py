"""
Readiness Validator

Deterministic stage-gate rules deciding whether a script may enter the
"ready" stage, plus the advisory deliverability report shown in the
script workspace.

Everything here is pure: no I/O, no clock, no exceptions escaping.
Inputs are duck-typed so the same rules run against ORM rows, API
payloads and the ScriptSnapshot dataclass used in tests.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional


DEFAULT_WORDS_PER_MINUTE = 150
DEFAULT_TARGET_MINUTES = 10
MAX_SEGMENT_WORDS = 300
MINUTES_PER_ACTION_CUE = 2

# Non-greedy, case-sensitive, does not cross newlines
ACTION_CUE_PATTERN = re.compile(r"\[ACTION:.*?\]")
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\n+")
VOWEL_GROUP_PATTERN = re.compile(r"[aeiouy]+")
SENTENCE_BREAK_PATTERN = re.compile(r"[.!?]+")

ISSUE_HOOK_TYPE = "Hook type must be classified"
ISSUE_TARGET_LENGTH = "Target length must be declared"
ISSUE_CHECKLIST = "All checklist items must be completed (Intro, Body, CTA)"
ISSUE_LONG_SEGMENT = "Script contains segments over 300 words without breaks"


@dataclass
class ScriptSnapshot:
    """The subset of a Script the readiness rules look at."""
    hook_type: Optional[str] = None
    target_length_minutes: Optional[float] = None
    words_per_minute: Optional[float] = None
    script_content: Optional[str] = None
    checklist_intro: bool = False
    checklist_body: bool = False
    checklist_cta: bool = False


# =============================================================================
# Text helpers
# =============================================================================

def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and value > 0


def _pace(words_per_minute: Any) -> float:
    """Speaking pace, falling back to the default when unset or zero."""
    if _is_positive_number(words_per_minute):
        return float(words_per_minute)
    return float(DEFAULT_WORDS_PER_MINUTE)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (not banker's rounding)."""
    return math.floor(value + 0.5)


def count_words(text: str) -> int:
    return len(text.split())


def count_action_cues(text: str) -> int:
    return len(ACTION_CUE_PATTERN.findall(text))


def strip_action_cues(text: str) -> str:
    return ACTION_CUE_PATTERN.sub("", text)


def split_paragraphs(text: str) -> List[str]:
    return PARAGRAPH_BREAK_PATTERN.split(text)


def estimate_minutes(text: str, words_per_minute: Any = None) -> float:
    return count_words(text) / _pace(words_per_minute)


# =============================================================================
# Stage gate
# =============================================================================

def validate_readiness(script: Any) -> List[str]:
    """
    Evaluate a script against the "ready" stage gate.

    Returns every blocking issue in a fixed order; an empty list means the
    script is eligible. Missing attributes are treated as failing values,
    never as errors.
    """
    issues: List[str] = []

    if not _text(getattr(script, "hook_type", None)):
        issues.append(ISSUE_HOOK_TYPE)

    if not _is_positive_number(getattr(script, "target_length_minutes", None)):
        issues.append(ISSUE_TARGET_LENGTH)

    checklist = (
        getattr(script, "checklist_intro", False),
        getattr(script, "checklist_body", False),
        getattr(script, "checklist_cta", False),
    )
    if not all(flag is True for flag in checklist):
        issues.append(ISSUE_CHECKLIST)

    content = _text(getattr(script, "script_content", None))

    minutes = estimate_minutes(content, getattr(script, "words_per_minute", None))
    action_cues = count_action_cues(content)
    required_cues = math.floor(minutes / MINUTES_PER_ACTION_CUE)
    if minutes > MINUTES_PER_ACTION_CUE and action_cues < required_cues:
        issues.append(
            f"Need at least {required_cues} action cues for "
            f"~{round_half_up(minutes)} minute script"
        )

    if any(
        count_words(strip_action_cues(paragraph)) > MAX_SEGMENT_WORDS
        for paragraph in split_paragraphs(content)
    ):
        issues.append(ISSUE_LONG_SEGMENT)

    return issues


def is_ready(script: Any) -> bool:
    return not validate_readiness(script)


# =============================================================================
# Deliverability (advisory)
# =============================================================================

@dataclass
class DeliverabilityReport:
    """
    Advisory scoring of how filmable a script is.

    Unlike the stage gate this never blocks a transition; it feeds the
    workspace side panel.
    """
    words: int
    estimated_minutes: float
    target_minutes: float
    pacing_score: float
    action_cues: int
    recommended_cues: int
    readability_score: float
    readability_label: str
    avg_words_per_sentence: float
    long_segments: int
    issues: List[str] = field(default_factory=list)

    @property
    def cues_ok(self) -> bool:
        return self.action_cues >= self.recommended_cues

    @property
    def is_ready(self) -> bool:
        return not self.issues


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _count_syllables(text: str) -> int:
    total = 0
    for word in text.lower().split():
        groups = VOWEL_GROUP_PATTERN.findall(word)
        total += len(groups) if groups else 1
    return total


def _readability_label(score: float) -> str:
    if score >= 60:
        return "Easy"
    if score >= 40:
        return "Moderate"
    return "Complex"


def assess_deliverability(
    script_content: Optional[str],
    hook_content: Optional[str] = None,
    target_minutes: Optional[float] = None,
    words_per_minute: Optional[float] = None,
) -> DeliverabilityReport:
    """Score pacing, cue density, readability and segment length of hook + body."""
    all_content = _text(hook_content) + "\n\n" + _text(script_content)
    clean_content = strip_action_cues(all_content)

    pace = _pace(words_per_minute)
    target = float(target_minutes) if _is_positive_number(target_minutes) else float(DEFAULT_TARGET_MINUTES)

    words = count_words(clean_content)
    minutes = words / pace

    target_words = target * pace
    pacing_score = _clamp(100 - abs(1 - words / target_words) * 100)

    action_cues = count_action_cues(all_content)
    recommended_cues = max(1, math.floor(minutes / MINUTES_PER_ACTION_CUE))

    sentences = len([s for s in SENTENCE_BREAK_PATTERN.split(clean_content) if s.strip()]) or 1
    avg_words_per_sentence = words / sentences
    avg_syllables_per_word = _count_syllables(clean_content) / (words or 1)
    reading_ease = 206.835 - 1.015 * avg_words_per_sentence - 84.6 * avg_syllables_per_word
    readability_score = _clamp(reading_ease)

    long_segments = sum(
        1 for paragraph in split_paragraphs(clean_content)
        if count_words(paragraph) > MAX_SEGMENT_WORDS
    )

    issues: List[str] = []
    if pacing_score < 70:
        issues.append("Pacing significantly off target")
    if action_cues < recommended_cues:
        issues.append(f"Need {recommended_cues - action_cues} more action cues")
    if readability_score < 50:
        issues.append("Script may be too complex")
    if long_segments > 0:
        issues.append(f"{long_segments} segment(s) over 300 words")

    return DeliverabilityReport(
        words=words,
        estimated_minutes=minutes,
        target_minutes=target,
        pacing_score=pacing_score,
        action_cues=action_cues,
        recommended_cues=recommended_cues,
        readability_score=readability_score,
        readability_label=_readability_label(readability_score),
        avg_words_per_sentence=avg_words_per_sentence,
        long_segments=long_segments,
        issues=issues,
    )
