"""
Weekly Plan Templates

The tracker follows a fixed hybrid week: three lifting days, three runs
and a recovery day. A day's record is created lazily from its template
the first time the day is opened.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from src.dates import WEEKDAY_LABELS
from src.models.workout import SessionKind, WorkoutRecord


class PlannedExercise(BaseModel):
    """A prescribed exercise on a lifting day."""
    name: str
    sets: str
    reps: str


class DayPlan(BaseModel):
    """The plan for one weekday."""
    label: str
    name: str
    focus: str
    duration: str
    kind: SessionKind
    run_type: Optional[str] = None
    lift_focus: Optional[str] = None
    intensity: Optional[str] = None
    exercises: list[PlannedExercise] = Field(default_factory=list)
    workout_options: list[str] = Field(default_factory=list)
    mobility_exercises: list[str] = Field(default_factory=list)


def _exercises(*rows: tuple[str, str, str]) -> list[PlannedExercise]:
    return [PlannedExercise(name=n, sets=s, reps=r) for n, s, r in rows]


WEEKLY_PLAN: dict[str, DayPlan] = {
    "monday": DayPlan(
        label="monday",
        name="Upper Push",
        focus="Chest, Shoulders, Triceps",
        duration="40-50 minutes",
        kind=SessionKind.LIFT,
        lift_focus="push",
        exercises=_exercises(
            ("Bench/DB Press", "3-4", "6-8"),
            ("Incline DB Press", "3", "8-10"),
            ("Shoulder Press", "3", "8-10"),
            ("Dips/Triceps Pushdowns", "3", "10-12"),
            ("Lateral Raises", "3", "12-15"),
        ),
    ),
    "tuesday": DayPlan(
        label="tuesday",
        name="Speed Run",
        focus="Get faster, boost VO2max",
        duration="45-60 minutes",
        kind=SessionKind.RUN,
        run_type="speed",
        workout_options=[
            "6x400 m @ 5K pace (90 s rest)",
            "10x200 m fast (walk/jog recovery)",
            "20 min tempo @ \"comfortably hard\"",
        ],
    ),
    "wednesday": DayPlan(
        label="wednesday",
        name="Upper Pull",
        focus="Back, Biceps, Posture",
        duration="40-50 minutes",
        kind=SessionKind.LIFT,
        lift_focus="pull",
        exercises=_exercises(
            ("Pull-ups/Lat Pulldown", "3-4", "6-10"),
            ("Barbell/Seated Row", "3", "8-10"),
            ("Face Pulls", "3", "12-15"),
            ("Hammer Curls", "3", "10-12"),
            ("Reverse Fly", "3", "12-15"),
        ),
    ),
    "thursday": DayPlan(
        label="thursday",
        name="Easy Run",
        focus="Build engine in Zone 2",
        duration="30-50 minutes",
        kind=SessionKind.RUN,
        run_type="easy",
        intensity="Easy/low intensity pace",
    ),
    "friday": DayPlan(
        label="friday",
        name="Lower Body",
        focus="Strong legs without ruining long run",
        duration="40-50 minutes",
        kind=SessionKind.LIFT,
        lift_focus="legs",
        exercises=_exercises(
            ("Squat/Leg Press", "3-4", "6-8"),
            ("Romanian Deadlift", "3", "8-10"),
            ("Bulgarian Split Squat", "3", "8-10 each"),
            ("Leg Curls", "3", "10-12"),
            ("Calf Raises", "3", "12-15"),
        ),
    ),
    "saturday": DayPlan(
        label="saturday",
        name="Long Run",
        focus="Endurance, practice fueling and mental toughness",
        duration="60-120 minutes",
        kind=SessionKind.RUN,
        run_type="long",
    ),
    "sunday": DayPlan(
        label="sunday",
        name="Off / Mobility",
        focus="Recovery",
        duration="Optional mobility session",
        kind=SessionKind.MOBILITY,
        mobility_exercises=["Foam rolling", "Stretching", "Light yoga"],
    ),
}


def get_plan(day_label: str) -> DayPlan:
    """
    Get the plan for a weekday label.

    Raises:
        ValueError: If the label is not a weekday name
    """
    normalized = str(day_label).strip().lower()
    if normalized not in WEEKDAY_LABELS:
        raise ValueError(f"Unknown weekday label: {day_label!r}")
    return WEEKLY_PLAN[normalized]


def default_record(day_label: str, date_key: str, week_key: Optional[str]) -> WorkoutRecord:
    """Build the blank record for a day from its template (not persisted)."""
    plan = get_plan(day_label)

    payload: dict[str, Any] = {"runType": plan.run_type}
    if plan.kind == SessionKind.LIFT:
        payload["focus"] = plan.lift_focus
        payload["exercises"] = [
            {
                "name": exercise.name,
                "sets": "",
                "reps": "",
                "weight": "",
                "rpe": "",
                "completed": False,
            }
            for exercise in plan.exercises
        ]

    return WorkoutRecord(
        date_key=date_key,
        week_key=week_key,
        day_label=plan.label,
        kind=plan.kind,
        payload=payload,
        completed=False,
    )
