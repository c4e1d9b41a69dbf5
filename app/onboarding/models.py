"""Answer record for the workout preferences questionnaire."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, Field

from app.onboarding.questions import (
    QUESTIONS,
    BusyEquipmentPreference,
    EatingApproach,
    EffortLevel,
    EquipmentAccess,
    ExerciseMenuChange,
    InjuryConsiderations,
    MobilityTime,
    MovementStyles,
    PrimaryGoal,
    ProgrammingFormat,
    ProgressionStyle,
    RecoveryResources,
    RepRanges,
    RestPeriods,
    SessionFrequency,
    SessionLength,
    TrainingExperience,
    VolumeTolerance,
    WeeklySplit,
)

MULTI_SEPARATOR = ", "


class WorkoutPreferences(BaseModel):
    """Flat answer record. Single-select fields default to their sentinel;
    an empty multi-select set means "no preference"."""

    primary_goal: PrimaryGoal = PrimaryGoal.not_sure
    training_experience: TrainingExperience = TrainingExperience.not_sure
    session_frequency: SessionFrequency = SessionFrequency.not_sure
    session_length: SessionLength = SessionLength.not_sure
    equipment_access: EquipmentAccess = EquipmentAccess.not_sure
    movement_styles: set[MovementStyles] = Field(default_factory=set)
    weekly_split: WeeklySplit = WeeklySplit.not_sure
    volume_tolerance: VolumeTolerance = VolumeTolerance.not_sure
    rep_ranges: RepRanges = RepRanges.no_preference
    effort_level: EffortLevel = EffortLevel.not_sure
    eating_approach: EatingApproach = EatingApproach.not_sure
    injury_considerations: set[InjuryConsiderations] = Field(default_factory=set)
    mobility_time: MobilityTime = MobilityTime.not_sure
    busy_equipment_preference: BusyEquipmentPreference = BusyEquipmentPreference.no_preference
    rest_periods: RestPeriods = RestPeriods.not_sure
    progression_style: ProgressionStyle = ProgressionStyle.no_preference
    exercise_menu_change: ExerciseMenuChange = ExerciseMenuChange.not_sure
    recovery_resources: set[RecoveryResources] = Field(default_factory=set)
    programming_format: ProgrammingFormat = ProgrammingFormat.no_preference

    def to_columns(self) -> dict[str, str]:
        """users-table column values, one string per question."""
        columns: dict[str, str] = {}
        for q in QUESTIONS:
            value = getattr(self, q.field)
            if q.multi:
                chosen = [m.value for m in q.choices if m in value]
                columns[q.field] = MULTI_SEPARATOR.join(chosen) if chosen else q.sentinel.value
            else:
                columns[q.field] = value.value
        return columns

    @classmethod
    def from_columns(cls, row: Mapping[str, Any]) -> WorkoutPreferences:
        """Rebuild a record from stored columns, tolerating drifted values.

        Missing/NULL columns keep the default, unknown single values fall
        back to the sentinel, unknown multi items are dropped.
        """
        data: dict[str, Any] = {}
        for q in QUESTIONS:
            raw = row.get(q.field)
            if raw is None:
                continue
            if q.multi:
                data[q.field] = {
                    m for m in (_parse(q.options, part.strip()) for part in str(raw).split(","))
                    if m is not None and m != q.sentinel
                }
            else:
                data[q.field] = _parse(q.options, str(raw)) or q.sentinel
        return cls(**data)


def _parse(options: type[Enum], raw: str) -> Enum | None:
    try:
        return options(raw)
    except ValueError:
        return None
