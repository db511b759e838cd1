"""
Rule-based end-of-day commentary.

Five score bands are checked top-down and the first match wins. Each band
fills a fixed template with the day's counts, so the same inputs always give
the same text.
"""

from __future__ import annotations

import math

BAND_EXCEPTIONAL = "exceptional"
BAND_EXCELLENT = "excellent"
BAND_GOOD = "good"
BAND_ENCOURAGING = "encouraging"
BAND_SUPPORTIVE = "supportive"

SCORE_BANDS: tuple[tuple[int, str], ...] = (
    (85, BAND_EXCEPTIONAL),
    (70, BAND_EXCELLENT),
    (55, BAND_GOOD),
    (40, BAND_ENCOURAGING),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def completion_pct(done: int, total: int) -> float:
    return (done / total) * 100 if total > 0 else 0.0


def band_for(score: int) -> str:
    for threshold, band in SCORE_BANDS:
        if score >= threshold:
            return band
    return BAND_SUPPORTIVE


def generate_comment(
    score: int,
    tasks_completed: int,
    tasks_total: int,
    habits_completed: int,
    habits_total: int,
) -> str:
    task_pct = completion_pct(tasks_completed, tasks_total)
    habit_pct = completion_pct(habits_completed, habits_total)
    band = band_for(score)

    if band == BAND_EXCEPTIONAL:
        return (
            f"🎉 Exceptional work today! You crushed {tasks_completed} out of {tasks_total} tasks "
            f"({round_half_up(task_pct)}%) and maintained {habits_completed} out of {habits_total} habits. "
            "You're building incredible momentum - keep this energy flowing into tomorrow! "
            f"Your productivity score of {score}/100 shows outstanding dedication."
        )

    if band == BAND_EXCELLENT:
        habit_clause = (
            "Consider focusing a bit more on your daily habits tomorrow to maintain consistency."
            if habit_pct < 80
            else "Great balance between tasks and habits!"
        )
        return (
            f"✨ Excellent day! You completed {tasks_completed} out of {tasks_total} tasks "
            f"and checked off {habits_completed} habits. "
            f"Your {score}/100 score reflects solid progress. {habit_clause}"
        )

    if band == BAND_GOOD:
        task_clause = (
            "Tomorrow, try breaking down larger tasks into smaller, manageable chunks."
            if task_pct < 60
            else ""
        )
        habit_clause = (
            "Your habits need a little more attention - small consistent actions build big results!"
            if habit_pct < 60
            else "Nice work on maintaining your habits!"
        )
        return (
            f"💪 Good effort! You finished {tasks_completed} tasks and {habits_completed} habits today "
            f"(score: {score}/100). {task_clause} {habit_clause}"
        )

    if band == BAND_ENCOURAGING:
        overload_clause = (
            "Consider planning fewer, high-priority tasks to avoid overwhelm."
            if tasks_total > 5
            else ""
        )
        return (
            f"🌱 It's okay to have challenging days. You completed {tasks_completed} tasks "
            f"and {habits_completed} habits ({score}/100). "
            f"Tomorrow is a fresh start with new opportunities. {overload_clause} "
            "Remember: progress over perfection!"
        )

    return (
        f"🌤️ Every journey has tough days - you completed {tasks_completed} tasks "
        f"and {habits_completed} habits today. "
        f"Don't let a {score}/100 score discourage you. "
        "Tomorrow, start with just 2-3 essential tasks and 2-3 key habits. "
        "Small wins build confidence. You've got this! 💙"
    )
