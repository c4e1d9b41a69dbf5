"""Workout preferences questionnaire — option sets and question catalog.

Config only. Each question's options are a str Enum whose values are the
strings stored in the users table. Display metadata (label, description,
icon) lives in one lookup table keyed by option set, then member; the option letter
shown in the UI is derived from declaration order.

Every single-select option set carries one sentinel member (not_sure,
no_preference or none_significant) used as the default answer.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PrimaryGoal(str, Enum):
    build_muscle = "build_muscle"
    lose_fat = "lose_fat"
    get_stronger = "get_stronger"
    improve_endurance = "improve_endurance"
    general_health = "general_health"
    not_sure = "not_sure"


class TrainingExperience(str, Enum):
    new = "new"
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    not_sure = "not_sure"


class SessionFrequency(str, Enum):
    two = "2_per_week"
    three = "3_per_week"
    four = "4_per_week"
    five = "5_per_week"
    six = "6_per_week"
    not_sure = "not_sure"


class SessionLength(str, Enum):
    thirty = "30_min"
    forty_five = "45_min"
    sixty = "60_min"
    ninety = "90_min"
    not_sure = "not_sure"


class EquipmentAccess(str, Enum):
    full_gym = "full_gym"
    home_gym = "home_gym"
    dumbbells_only = "dumbbells_only"
    bodyweight_only = "bodyweight_only"
    not_sure = "not_sure"


class MovementStyles(str, Enum):
    free_weights = "free_weights"
    machines = "machines"
    cables = "cables"
    calisthenics = "calisthenics"
    kettlebells = "kettlebells"
    no_preference = "no_preference"


class WeeklySplit(str, Enum):
    full_body = "full_body"
    upper_lower = "upper_lower"
    push_pull_legs = "push_pull_legs"
    body_part = "body_part"
    not_sure = "not_sure"


class VolumeTolerance(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"
    not_sure = "not_sure"


class RepRanges(str, Enum):
    heavy = "heavy"
    moderate = "moderate"
    light = "light"
    mixed = "mixed"
    no_preference = "no_preference"


class EffortLevel(str, Enum):
    comfortable = "comfortable"
    challenging = "challenging"
    near_failure = "near_failure"
    to_failure = "to_failure"
    not_sure = "not_sure"


class EatingApproach(str, Enum):
    surplus = "surplus"
    maintenance = "maintenance"
    deficit = "deficit"
    not_tracking = "not_tracking"
    not_sure = "not_sure"


class InjuryConsiderations(str, Enum):
    lower_back = "lower_back"
    knees = "knees"
    shoulders = "shoulders"
    wrists_elbows = "wrists_elbows"
    hips = "hips"
    none_significant = "none_significant"


class MobilityTime(str, Enum):
    none = "none"
    five_min = "5_min"
    ten_min = "10_min"
    fifteen_plus = "15_plus_min"
    not_sure = "not_sure"


class BusyEquipmentPreference(str, Enum):
    wait = "wait"
    substitute = "substitute"
    reorder = "reorder"
    no_preference = "no_preference"


class RestPeriods(str, Enum):
    short = "short"
    moderate = "moderate"
    long = "long"
    not_sure = "not_sure"


class ProgressionStyle(str, Enum):
    add_weight = "add_weight"
    add_reps = "add_reps"
    double_progression = "double_progression"
    no_preference = "no_preference"


class ExerciseMenuChange(str, Enum):
    every_week = "every_week"
    every_4_weeks = "every_4_weeks"
    every_8_weeks = "every_8_weeks"
    rarely = "rarely"
    not_sure = "not_sure"


class RecoveryResources(str, Enum):
    """Multi-select. Its sentinel is not_sure, not no_preference: an empty selection is stored as not_sure."""

    good_sleep = "good_sleep"
    low_stress = "low_stress"
    active_job = "active_job"
    sauna_massage = "sauna_massage"
    not_sure = "not_sure"


class ProgrammingFormat(str, Enum):
    guided_sessions = "guided_sessions"
    weekly_plan = "weekly_plan"
    exercise_list = "exercise_list"
    no_preference = "no_preference"


SENTINEL_VALUES = frozenset({"not_sure", "no_preference", "none_significant"})


def sentinel_of(options: type[Enum]) -> Enum:
    for member in options:
        if member.value in SENTINEL_VALUES:
            return member
    raise LookupError(f"{options.__name__} has no sentinel option")


@dataclass(frozen=True, slots=True)
class OptionDisplay:
    label: str
    description: str = ""
    icon: str = ""


_NOT_SURE = OptionDisplay("Not sure", "Let us pick for you", "questionmark.circle")
_NO_PREFERENCE = OptionDisplay("No preference", "Any option works for me", "circle.dashed")

OPTION_DISPLAY: dict[type[Enum], dict[Enum, OptionDisplay]] = {
    PrimaryGoal: {
        PrimaryGoal.build_muscle: OptionDisplay("Build muscle", "Increase muscle mass and size", "figure.strengthtraining.traditional"),
        PrimaryGoal.lose_fat: OptionDisplay("Lose fat", "Burn fat and lose weight", "flame.fill"),
        PrimaryGoal.get_stronger: OptionDisplay("Get stronger", "Increase maximum strength", "dumbbell.fill"),
        PrimaryGoal.improve_endurance: OptionDisplay("Improve endurance", "Build cardiovascular fitness", "heart.fill"),
        PrimaryGoal.general_health: OptionDisplay("General health", "Overall health and wellness", "figure.mixed.cardio"),
        PrimaryGoal.not_sure: _NOT_SURE,
    },
    TrainingExperience: {
        TrainingExperience.new: OptionDisplay("New to lifting", "Less than 6 months", "figure.walk"),
        TrainingExperience.beginner: OptionDisplay("Beginner", "6 months to 1 year", "figure.run"),
        TrainingExperience.intermediate: OptionDisplay("Intermediate", "1-3 years of consistent training", "figure.cross.training"),
        TrainingExperience.advanced: OptionDisplay("Advanced", "3+ years of consistent training", "figure.strengthtraining.traditional"),
        TrainingExperience.not_sure: _NOT_SURE,
    },
    SessionFrequency: {
        SessionFrequency.two: OptionDisplay("2x per week", "Moderate commitment", "calendar.badge.plus"),
        SessionFrequency.three: OptionDisplay("3x per week", "Balanced routine", "calendar"),
        SessionFrequency.four: OptionDisplay("4x per week", "Active lifestyle", "calendar.badge.clock"),
        SessionFrequency.five: OptionDisplay("5x per week", "High commitment", "calendar.circle.fill"),
        SessionFrequency.six: OptionDisplay("6x per week", "Very high commitment", "calendar.badge.exclamationmark"),
        SessionFrequency.not_sure: _NOT_SURE,
    },
    SessionLength: {
        SessionLength.thirty: OptionDisplay("30 minutes", "Quick and efficient", "clock.badge.checkmark"),
        SessionLength.forty_five: OptionDisplay("45 minutes", "Moderate duration", "clock"),
        SessionLength.sixty: OptionDisplay("60 minutes", "Standard workout", "clock.badge"),
        SessionLength.ninety: OptionDisplay("90 minutes", "Extended session", "clock.badge.plus"),
        SessionLength.not_sure: _NOT_SURE,
    },
    EquipmentAccess: {
        EquipmentAccess.full_gym: OptionDisplay("Full gym", "Commercial gym with racks and machines", "building.2.fill"),
        EquipmentAccess.home_gym: OptionDisplay("Home gym", "Rack, barbell and plates at home", "house.fill"),
        EquipmentAccess.dumbbells_only: OptionDisplay("Dumbbells only", "A set of dumbbells", "dumbbell.fill"),
        EquipmentAccess.bodyweight_only: OptionDisplay("Bodyweight only", "No equipment", "figure.core.training"),
        EquipmentAccess.not_sure: _NOT_SURE,
    },
    MovementStyles: {
        MovementStyles.free_weights: OptionDisplay("Free weights", "Barbells and dumbbells", "dumbbell.fill"),
        MovementStyles.machines: OptionDisplay("Machines", "Guided resistance machines", "gearshape.fill"),
        MovementStyles.cables: OptionDisplay("Cables", "Cable stations and pulleys", "cable.connector"),
        MovementStyles.calisthenics: OptionDisplay("Calisthenics", "Bodyweight skills and progressions", "figure.gymnastics"),
        MovementStyles.kettlebells: OptionDisplay("Kettlebells", "Swings, carries and complexes", "sportscourt.fill"),
        MovementStyles.no_preference: _NO_PREFERENCE,
    },
    WeeklySplit: {
        WeeklySplit.full_body: OptionDisplay("Full body", "Every session trains everything", "figure.arms.open"),
        WeeklySplit.upper_lower: OptionDisplay("Upper / lower", "Alternate upper and lower days", "arrow.up.arrow.down"),
        WeeklySplit.push_pull_legs: OptionDisplay("Push / pull / legs", "Three-way movement split", "arrow.triangle.2.circlepath"),
        WeeklySplit.body_part: OptionDisplay("Body part", "One or two muscle groups per day", "square.grid.2x2"),
        WeeklySplit.not_sure: _NOT_SURE,
    },
    VolumeTolerance: {
        VolumeTolerance.low: OptionDisplay("Low", "Few hard sets, long recovery", "gauge.low"),
        VolumeTolerance.moderate: OptionDisplay("Moderate", "Typical set counts", "gauge.medium"),
        VolumeTolerance.high: OptionDisplay("High", "Lots of sets, recover fast", "gauge.high"),
        VolumeTolerance.not_sure: _NOT_SURE,
    },
    RepRanges: {
        RepRanges.heavy: OptionDisplay("Heavy (3-6 reps)", "Strength focus", "scalemass.fill"),
        RepRanges.moderate: OptionDisplay("Moderate (8-12 reps)", "Hypertrophy focus", "chart.bar.fill"),
        RepRanges.light: OptionDisplay("Light (12-20 reps)", "Muscular endurance", "repeat"),
        RepRanges.mixed: OptionDisplay("Mixed", "A blend across the week", "shuffle"),
        RepRanges.no_preference: _NO_PREFERENCE,
    },
    EffortLevel: {
        EffortLevel.comfortable: OptionDisplay("Comfortable", "Leave 4+ reps in the tank", "leaf.fill"),
        EffortLevel.challenging: OptionDisplay("Challenging", "Leave 2-3 reps in the tank", "bolt.fill"),
        EffortLevel.near_failure: OptionDisplay("Near failure", "Leave about 1 rep in the tank", "bolt.heart.fill"),
        EffortLevel.to_failure: OptionDisplay("To failure", "Every working set to failure", "exclamationmark.triangle.fill"),
        EffortLevel.not_sure: _NOT_SURE,
    },
    EatingApproach: {
        EatingApproach.surplus: OptionDisplay("Surplus", "Eating to gain", "plus.circle.fill"),
        EatingApproach.maintenance: OptionDisplay("Maintenance", "Eating to maintain", "equal.circle.fill"),
        EatingApproach.deficit: OptionDisplay("Deficit", "Eating to lose", "minus.circle.fill"),
        EatingApproach.not_tracking: OptionDisplay("Not tracking", "I don't track food", "fork.knife"),
        EatingApproach.not_sure: _NOT_SURE,
    },
    InjuryConsiderations: {
        InjuryConsiderations.lower_back: OptionDisplay("Lower back", icon="figure.walk"),
        InjuryConsiderations.knees: OptionDisplay("Knees", icon="figure.step.training"),
        InjuryConsiderations.shoulders: OptionDisplay("Shoulders", icon="figure.arms.open"),
        InjuryConsiderations.wrists_elbows: OptionDisplay("Wrists / elbows", icon="hand.raised.fill"),
        InjuryConsiderations.hips: OptionDisplay("Hips", icon="figure.cooldown"),
        InjuryConsiderations.none_significant: OptionDisplay("None significant", "No injuries to work around", "checkmark.shield.fill"),
    },
    MobilityTime: {
        MobilityTime.none: OptionDisplay("None", "Skip mobility work", "xmark.circle"),
        MobilityTime.five_min: OptionDisplay("5 minutes", "Quick warm-up drills", "timer"),
        MobilityTime.ten_min: OptionDisplay("10 minutes", "Warm-up plus targeted work", "timer"),
        MobilityTime.fifteen_plus: OptionDisplay("15+ minutes", "Dedicated mobility block", "figure.flexibility"),
        MobilityTime.not_sure: _NOT_SURE,
    },
    BusyEquipmentPreference: {
        BusyEquipmentPreference.wait: OptionDisplay("Wait for it", "Keep the plan as written", "hourglass"),
        BusyEquipmentPreference.substitute: OptionDisplay("Substitute", "Swap in a similar exercise", "arrow.left.arrow.right"),
        BusyEquipmentPreference.reorder: OptionDisplay("Reorder", "Do another exercise first", "list.number"),
        BusyEquipmentPreference.no_preference: _NO_PREFERENCE,
    },
    RestPeriods: {
        RestPeriods.short: OptionDisplay("Short", "Around 60 seconds", "hare.fill"),
        RestPeriods.moderate: OptionDisplay("Moderate", "90 seconds to 2 minutes", "clock"),
        RestPeriods.long: OptionDisplay("Long", "3 minutes or more", "tortoise.fill"),
        RestPeriods.not_sure: _NOT_SURE,
    },
    ProgressionStyle: {
        ProgressionStyle.add_weight: OptionDisplay("Add weight", "Increase the load each week", "arrow.up.circle.fill"),
        ProgressionStyle.add_reps: OptionDisplay("Add reps", "Beat last week's reps", "plus.square.fill"),
        ProgressionStyle.double_progression: OptionDisplay("Double progression", "Reps first, then weight", "arrow.up.right.circle.fill"),
        ProgressionStyle.no_preference: _NO_PREFERENCE,
    },
    ExerciseMenuChange: {
        ExerciseMenuChange.every_week: OptionDisplay("Every week", "Lots of variety", "arrow.clockwise"),
        ExerciseMenuChange.every_4_weeks: OptionDisplay("Every 4 weeks", "Monthly rotation", "calendar"),
        ExerciseMenuChange.every_8_weeks: OptionDisplay("Every 8 weeks", "Long training blocks", "calendar.badge.clock"),
        ExerciseMenuChange.rarely: OptionDisplay("Rarely", "Stick with what works", "pin.fill"),
        ExerciseMenuChange.not_sure: _NOT_SURE,
    },
    RecoveryResources: {
        RecoveryResources.good_sleep: OptionDisplay("7+ hours of sleep", icon="bed.double.fill"),
        RecoveryResources.low_stress: OptionDisplay("Low daily stress", icon="sun.max.fill"),
        RecoveryResources.active_job: OptionDisplay("Physically active job", icon="figure.walk"),
        RecoveryResources.sauna_massage: OptionDisplay("Sauna / massage", icon="drop.fill"),
        RecoveryResources.not_sure: _NOT_SURE,
    },
    ProgrammingFormat: {
        ProgrammingFormat.guided_sessions: OptionDisplay("Guided sessions", "Step-by-step in the app", "play.circle.fill"),
        ProgrammingFormat.weekly_plan: OptionDisplay("Weekly plan", "The whole week at a glance", "list.bullet.rectangle"),
        ProgrammingFormat.exercise_list: OptionDisplay("Exercise list", "Just tell me what to do", "list.bullet"),
        ProgrammingFormat.no_preference: _NO_PREFERENCE,
    },
}


def option_letter(member: Enum) -> str:
    """A, B, C... by position within the member's option set."""
    return string.ascii_uppercase[list(type(member)).index(member)]


def display_of(member: Enum) -> OptionDisplay:
    display = OPTION_DISPLAY.get(type(member), {}).get(member)
    return display or OptionDisplay(member.value.replace("_", " ").capitalize())


@dataclass(frozen=True, slots=True)
class Question:
    field: str  # WorkoutPreferences attribute and users column
    title: str
    options: type[Enum]
    subtitle: str = ""
    multi: bool = False

    @property
    def sentinel(self) -> Enum:
        return sentinel_of(self.options)

    @property
    def choices(self) -> tuple[Enum, ...]:
        """Members a user can pick. A multi-select has no sentinel choice: none selected means no preference."""
        if self.multi:
            return tuple(m for m in self.options if m != self.sentinel)
        return tuple(self.options)

    def parse(self, value: str) -> Enum:
        """Raw option value → enum member. ValueError when not in the option set."""
        return self.options(value)


QUESTIONS: tuple[Question, ...] = (
    Question("primary_goal", "What's your primary goal?", PrimaryGoal, "We'll shape your plan around it"),
    Question("training_experience", "How long have you been training?", TrainingExperience),
    Question("session_frequency", "How often can you train?", SessionFrequency, "Sessions per week"),
    Question("session_length", "How long is a typical session?", SessionLength),
    Question("equipment_access", "What equipment do you have?", EquipmentAccess),
    Question("movement_styles", "Which training styles do you enjoy?", MovementStyles, "Select all that apply", multi=True),
    Question("weekly_split", "How would you like to split your week?", WeeklySplit),
    Question("volume_tolerance", "How much volume do you recover from?", VolumeTolerance),
    Question("rep_ranges", "Which rep ranges do you prefer?", RepRanges),
    Question("effort_level", "How hard do you push your sets?", EffortLevel),
    Question("eating_approach", "How are you eating right now?", EatingApproach),
    Question("injury_considerations", "Any injuries to work around?", InjuryConsiderations, "Select all that apply", multi=True),
    Question("mobility_time", "How much time for mobility work?", MobilityTime),
    Question("busy_equipment_preference", "If equipment is busy, what should we do?", BusyEquipmentPreference),
    Question("rest_periods", "How long do you like to rest between sets?", RestPeriods),
    Question("progression_style", "How do you like to progress?", ProgressionStyle),
    Question("exercise_menu_change", "How often should exercises change?", ExerciseMenuChange),
    Question("recovery_resources", "What supports your recovery?", RecoveryResources, "Select all that apply", multi=True),
    Question("programming_format", "How should your program be presented?", ProgrammingFormat),
)

QUESTIONS_BY_FIELD: dict[str, Question] = {q.field: q for q in QUESTIONS}


def get_question(field: str) -> Question | None:
    return QUESTIONS_BY_FIELD.get(field)


def list_questions() -> list[Question]:
    return list(QUESTIONS)


def describe_question(q: Question) -> dict[str, Any]:
    options = []
    for member in q.choices:
        display = display_of(member)
        options.append(
            {
                "value": member.value,
                "letter": option_letter(member),
                "label": display.label,
                "description": display.description,
                "icon": display.icon,
                "sentinel": member.value in SENTINEL_VALUES,
            }
        )
    return {
        "field": q.field,
        "title": q.title,
        "subtitle": q.subtitle,
        "multi": q.multi,
        "options": options,
    }
