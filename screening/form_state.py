"""
Questionnaire form state.

Backed by any mutable mapping so the same code runs against st.session_state in
the app and a plain dict in tests.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, MutableMapping, Optional

from screening.thyroid import engine

logger = logging.getLogger(__name__)

IDLE = "idle"
SUBMITTING = "submitting"

ANSWERS_KEY = "answers"
RESULT_KEY = "last_result"
IN_FLIGHT_KEY = "in_flight"


class FormState:
    def __init__(
        self,
        store: MutableMapping,
        min_answers: int = engine.MIN_ANSWERS,
    ):
        self._store = store
        self._min_answers = min_answers
        store.setdefault(ANSWERS_KEY, {})
        store.setdefault(RESULT_KEY, None)
        store.setdefault(IN_FLIGHT_KEY, False)

    @property
    def answers(self) -> Dict[str, str]:
        return dict(self._store[ANSWERS_KEY])

    @property
    def answered_count(self) -> int:
        return sum(1 for label in self._store[ANSWERS_KEY].values() if label)

    @property
    def result(self) -> Optional[Dict]:
        return self._store[RESULT_KEY]

    @property
    def in_flight(self) -> bool:
        return bool(self._store[IN_FLIGHT_KEY])

    @property
    def phase(self) -> str:
        return SUBMITTING if self.in_flight else IDLE

    @property
    def can_submit(self) -> bool:
        return self.answered_count >= self._min_answers and not self.in_flight

    @property
    def submit_label(self) -> str:
        if self.in_flight:
            return "Analyzing..."
        if self.answered_count < self._min_answers:
            return f"Please rate at least {self._min_answers} symptoms"
        return "Analyze Symptoms"

    def set_answer(self, symptom_id: str, label: str) -> None:
        if not label:
            return
        answers = dict(self._store[ANSWERS_KEY])
        answers[symptom_id] = label
        self._store[ANSWERS_KEY] = answers

    def begin_submit(self) -> bool:
        if not self.can_submit:
            return False
        self._store[IN_FLIGHT_KEY] = True
        logger.info("Submission started with %d answers", self.answered_count)
        return True

    def complete_submit(self, delay: float, sleep: Callable[[float], None] = time.sleep) -> Dict:
        try:
            if delay > 0:
                sleep(delay)
            result = engine.run_inference(self.answers)
            self._store[RESULT_KEY] = result
        finally:
            self._store[IN_FLIGHT_KEY] = False
        logger.info("Submission finished")
        return result

    def submit(self, delay: float, sleep: Callable[[float], None] = time.sleep) -> Optional[Dict]:
        if not self.begin_submit():
            return None
        return self.complete_submit(delay, sleep=sleep)
