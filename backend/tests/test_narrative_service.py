from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services.narrative_service import band_for, generate_comment, round_half_up  # noqa: E402


@pytest.mark.parametrize(
    "score,band",
    [
        (100, "exceptional"),
        (85, "exceptional"),
        (84, "excellent"),
        (70, "excellent"),
        (69, "good"),
        (55, "good"),
        (54, "encouraging"),
        (40, "encouraging"),
        (39, "supportive"),
        (0, "supportive"),
    ],
)
def test_band_thresholds_are_ranked_top_down(score, band):
    assert band_for(score) == band


def test_exceptional_comment_golden():
    assert generate_comment(100, 10, 10, 5, 5) == (
        "🎉 Exceptional work today! You crushed 10 out of 10 tasks (100%) and maintained 5 out of 5 habits. "
        "You're building incredible momentum - keep this energy flowing into tomorrow! "
        "Your productivity score of 100/100 shows outstanding dedication."
    )


def test_excellent_comment_nudges_habits_below_eighty_percent():
    assert generate_comment(76, 4, 5, 7, 10) == (
        "✨ Excellent day! You completed 4 out of 5 tasks and checked off 7 habits. "
        "Your 76/100 score reflects solid progress. "
        "Consider focusing a bit more on your daily habits tomorrow to maintain consistency."
    )


def test_excellent_comment_praises_balance():
    assert generate_comment(72, 2, 3, 4, 5) == (
        "✨ Excellent day! You completed 2 out of 3 tasks and checked off 4 habits. "
        "Your 72/100 score reflects solid progress. Great balance between tasks and habits!"
    )


def test_good_comment_keeps_blank_task_clause_spacing():
    # 3/5 tasks is exactly 60%, so only the habit clause is filled.
    assert generate_comment(56, 3, 5, 2, 4) == (
        "💪 Good effort! You finished 3 tasks and 2 habits today (score: 56/100).  "
        "Your habits need a little more attention - small consistent actions build big results!"
    )


def test_good_comment_with_both_clauses():
    assert generate_comment(58, 1, 2, 4, 4) == (
        "💪 Good effort! You finished 1 tasks and 4 habits today (score: 58/100). "
        "Tomorrow, try breaking down larger tasks into smaller, manageable chunks. "
        "Nice work on maintaining your habits!"
    )


def test_encouraging_comment_with_and_without_overload_clause():
    assert generate_comment(45, 1, 3, 2, 2) == (
        "🌱 It's okay to have challenging days. You completed 1 tasks and 2 habits (45/100). "
        "Tomorrow is a fresh start with new opportunities.  Remember: progress over perfection!"
    )
    assert generate_comment(45, 3, 8, 3, 4) == (
        "🌱 It's okay to have challenging days. You completed 3 tasks and 3 habits (45/100). "
        "Tomorrow is a fresh start with new opportunities. "
        "Consider planning fewer, high-priority tasks to avoid overwhelm. Remember: progress over perfection!"
    )


def test_supportive_comment_golden_for_empty_day():
    assert generate_comment(0, 0, 0, 0, 0) == (
        "🌤️ Every journey has tough days - you completed 0 tasks and 0 habits today. "
        "Don't let a 0/100 score discourage you. "
        "Tomorrow, start with just 2-3 essential tasks and 2-3 key habits. "
        "Small wins build confidence. You've got this! 💙"
    )


def test_generate_comment_is_deterministic():
    assert generate_comment(63, 2, 5, 3, 3) == generate_comment(63, 2, 5, 3, 3)


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(56.5) == 57
    assert round_half_up(56.49) == 56
