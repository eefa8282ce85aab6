from datetime import date

from core.achievements import evaluate_achievements, newly_unlocked
from core.models import ProgressState, SkillState, default_skills

TODAY = date(2024, 1, 2)


def test_fresh_progress_has_nothing_unlocked():
    badges = evaluate_achievements(ProgressState(), TODAY)
    assert [b.id for b in badges] == ["first_steps", "disciplined", "fuel_up"]
    assert not any(b.unlocked for b in badges)


def test_conditions_unlock_on_today():
    skills = default_skills()
    skills["Fuel"] = SkillState(xp=20)
    progress = ProgressState(total_xp=20, skills=skills)

    assert newly_unlocked(progress, TODAY) == {"first_steps": TODAY, "fuel_up": TODAY}


def test_recorded_unlock_date_is_kept():
    earlier = date(2023, 6, 1)
    progress = ProgressState(total_xp=500, achievements={"first_steps": earlier})

    badges = {b.id: b for b in evaluate_achievements(progress, TODAY)}
    assert badges["first_steps"].unlocked_on == earlier
    assert badges["first_steps"].to_dict()["unlockedOn"] == "2023-06-01"
    assert "first_steps" not in newly_unlocked(progress, TODAY)


def test_disciplined_needs_level_two():
    skills = default_skills()
    skills["Discipline"] = SkillState(level=2, xp=150)
    progress = ProgressState(total_xp=150, skills=skills)

    assert "disciplined" in newly_unlocked(progress, TODAY)
