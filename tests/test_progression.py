import pytest

from core.models import SkillState, Task, TaskType, default_skills
from core.progression import (
    JOURNEY_XP_GOAL,
    RANKS,
    add_skill_xp,
    attention_skill,
    best_skill,
    current_rank,
    daily_completion,
    journey_progress,
    next_rank,
    progress_to_next_rank,
    skill_level,
    skill_progress,
    xp_display,
)


@pytest.mark.parametrize(
    "xp, expected",
    [(0, "Seeker"), (1999, "Seeker"), (2000, "Initiate"), (19799, "Ascendant"), (20000, "Transcendent")],
)
def test_current_rank_boundaries(xp, expected):
    assert current_rank(xp).name == expected


def test_rank_thresholds_are_ascending():
    thresholds = [r.required_xp for r in RANKS]
    assert thresholds == sorted(thresholds)
    assert thresholds[0] == 0
    assert JOURNEY_XP_GOAL > thresholds[-1]


def test_next_rank_and_progress():
    assert next_rank(0).name == "Initiate"
    assert progress_to_next_rank(1000) == pytest.approx(0.5)
    assert progress_to_next_rank(2000) == 0.0


def test_max_rank_has_no_next():
    assert next_rank(20000).name == "Transcendent"
    assert progress_to_next_rank(20000) == 0.0


def test_journey_progress_is_clamped():
    assert journey_progress(0) == 0.0
    assert journey_progress(10050) == pytest.approx(0.5)
    assert journey_progress(25000) == 1.0


def test_xp_display():
    assert xp_display(1500) == "1500 / 2000 XP"
    assert xp_display(20000) == "20000 / 19800 XP"


def test_skill_level_curve():
    assert skill_level(0) == 1
    assert skill_level(149) == 1
    assert skill_level(150) == 2
    assert skill_level(3350) == 10
    assert skill_level(99999) == 10


def test_skill_progress_within_level():
    assert skill_progress(0) == 0.0
    assert skill_progress(250) == pytest.approx(0.5)
    assert skill_progress(3350) == 1.0


def test_add_skill_xp_recomputes_level():
    updated = add_skill_xp(SkillState(level=1, xp=140), 25)
    assert updated == SkillState(level=2, xp=165)


def test_best_and_attention_skill_tie_break_alphabetically():
    skills = default_skills()
    assert best_skill(skills) == "Discipline"
    assert attention_skill(skills) == "Discipline"

    skills["Fuel"] = SkillState(xp=100)
    skills["Wisdom"] = SkillState(xp=100)
    skills["Discipline"] = SkillState(xp=10)
    assert best_skill(skills) == "Fuel"
    assert attention_skill(skills) == "Fitness"


def test_daily_completion_counts():
    tasks = [
        Task("d:a", "A", "", 25, 6, TaskType.DAILY, "Discipline", is_completed=True),
        Task("d:b", "B", "", 50, 12, TaskType.SET_DAY, "Fitness"),
    ]
    assert daily_completion(tasks) == {"completed": 1, "total": 2, "xp_earned": 25, "xp_possible": 75}
    assert daily_completion([])["total"] == 0
