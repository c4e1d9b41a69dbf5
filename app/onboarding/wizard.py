"""Questionnaire wizard — a linear cursor over the question steps.

Steps are the questions in catalog order followed by one summary step.
Advancing from the summary step hands the answer record to the completion
callback and dismisses the wizard. The callback must only enqueue; the wizard
never waits on the submission outcome.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from app.onboarding.models import WorkoutPreferences
from app.onboarding.questions import QUESTIONS, Question, describe_question

logger = logging.getLogger(__name__)

SUMMARY_STEP = "summary"

CompletionHandler = Callable[[WorkoutPreferences], None]


class InvalidAnswer(ValueError):
    """Field/value pair that the questionnaire does not define."""


class QuestionnaireWizard:
    def __init__(
        self,
        on_complete: CompletionHandler,
        questions: Sequence[Question] = QUESTIONS,
    ):
        self._questions = tuple(questions)
        self._by_field = {q.field: q for q in self._questions}
        self._on_complete = on_complete
        self._record: WorkoutPreferences | None = WorkoutPreferences()
        self.step = 0
        self.dismissed = False

    @property
    def total_steps(self) -> int:
        return len(self._questions) + 1

    @property
    def last_step(self) -> int:
        return self.total_steps - 1

    @property
    def record(self) -> WorkoutPreferences | None:
        """Working copy of the answers; None once handed off."""
        return self._record

    def current_question(self) -> Question | None:
        if self.step < len(self._questions):
            return self._questions[self.step]
        return None

    def is_complete(self) -> bool:
        return self.step == self.last_step

    def progress(self) -> float:
        return self.step / self.last_step if self.last_step else 1.0

    def advance(self) -> None:
        if self.dismissed:
            return
        if self.step < self.last_step:
            self.step += 1
            return
        record, self._record = self._record, None
        self.dismissed = True
        logger.info("Questionnaire finished, handing off answers")
        self._on_complete(record)

    def retreat(self) -> None:
        if self.dismissed or self.step == 0:
            return
        self.step -= 1

    def _question(self, field: str, multi: bool) -> Question:
        q = self._by_field.get(field)
        if q is None:
            raise InvalidAnswer(f"Unknown question: {field}")
        if q.multi != multi:
            kind = "multi-select" if q.multi else "single-select"
            raise InvalidAnswer(f"Question '{field}' is {kind}")
        return q

    def _option(self, q: Question, value: str):
        try:
            return q.parse(value)
        except ValueError:
            raise InvalidAnswer(f"Invalid option for '{q.field}': {value}")

    def select_single(self, field: str, value: str) -> None:
        q = self._question(field, multi=False)
        option = self._option(q, value)
        if self._record is None:
            return
        setattr(self._record, field, option)

    def toggle_multi(self, field: str, value: str) -> None:
        q = self._question(field, multi=True)
        option = self._option(q, value)
        if option == q.sentinel:
            raise InvalidAnswer(f"'{value}' is not selectable for '{field}'; leave it empty for no preference")
        if self._record is None:
            return
        selected: set = getattr(self._record, field)
        if option in selected:
            selected.remove(option)
        else:
            selected.add(option)

    def answer(self, field: str) -> Any:
        if field not in self._by_field:
            raise InvalidAnswer(f"Unknown question: {field}")
        if self._record is None:
            return None
        return getattr(self._record, field)

    def snapshot(self) -> dict[str, Any]:
        q = self.current_question()
        return {
            "step": self.step,
            "total_steps": self.total_steps,
            "progress": round(self.progress(), 4),
            "is_complete": self.is_complete(),
            "dismissed": self.dismissed,
            "kind": "question" if q is not None else SUMMARY_STEP,
            "question": describe_question(q) if q is not None else None,
            "answers": self._record.model_dump(mode="json") if self._record is not None else None,
        }
