# controller.py
"""Step controller for the 5 Whys discovery widget.

The controller owns the wizard state: one problem statement followed by five
"why" prompts. Each accepted submission advances the wizard by exactly one
step; the fifth answer triggers the classifier instead. Renderers subscribe
to focus notifications to learn which step (or the analysis panel) was just
revealed.
"""

import asyncio
import uuid
from typing import Callable, List, Optional

from .classifier import RootCauseClassifier
from .config import config
from .logging_utils import ContextAdapter, LogContext, get_logger
from .models import (
    ANALYSIS_TARGET,
    RESULTS_TARGET,
    WHY_COUNT,
    AnalysisResult,
    StepMarker,
    WizardState,
)

FocusListener = Callable[[StepMarker], None]


class StepController:
    """Drives the six-step discovery wizard for a single widget mount.

    Submissions with blank text are ignored, as is anything submitted for a
    step other than the active one, and everything while an analysis is in
    flight. Analysis runs after a simulated delay; a reset during that delay
    bumps the generation counter so the late result is dropped.

    Attributes:
        classifier: RootCauseClassifier used for the final step.
        analysis_delay: Simulated latency in seconds before a result lands.
        pulse_seconds: How long a completed step stays marked as animated.
        session_id: Identifier attached to this controller's log records.
        state: The current WizardState.
    """

    def __init__(
        self,
        classifier: Optional[RootCauseClassifier] = None,
        analysis_delay: Optional[float] = None,
        pulse_seconds: Optional[float] = None,
        session_id: Optional[str] = None,
    ):
        """Initialize the controller.

        Args:
            classifier: Optional classifier instance. Defaults to a classifier
                        over the built-in knowledge base.
            analysis_delay: Optional latency override.
                            Defaults to config.ANALYSIS_DELAY_SECONDS.
            pulse_seconds: Optional pulse duration override.
                           Defaults to config.ANIMATION_PULSE_SECONDS.
            session_id: Optional session identifier for log correlation.
        """
        self.logger = ContextAdapter(get_logger(__name__), {})
        self.classifier = classifier or RootCauseClassifier()
        self.analysis_delay = (
            analysis_delay if analysis_delay is not None
            else config.ANALYSIS_DELAY_SECONDS
        )
        self.pulse_seconds = (
            pulse_seconds if pulse_seconds is not None
            else config.ANIMATION_PULSE_SECONDS
        )
        self.session_id = session_id or uuid.uuid4().hex[:12]

        self.state = WizardState()
        self._generation = 0
        self._listeners: List[FocusListener] = []
        self._pulse_handle: Optional[asyncio.TimerHandle] = None

    @property
    def generation(self) -> int:
        """Counter bumped on every reset."""
        return self._generation

    def subscribe(self, listener: FocusListener) -> Callable[[], None]:
        """Register a focus listener.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def can_submit(self, text: str) -> bool:
        """Whether the submit affordance should be enabled for this text."""
        return bool(text.strip()) and not self.state.is_analyzing

    def submit_problem(self, text: str) -> bool:
        """Record the problem statement and reveal the first "why" prompt.

        Returns:
            True if the submission was accepted.
        """
        if not self.can_submit(text) or self.state.current_step != 0:
            self.logger.debug(
                "Problem submission ignored",
                extra={"current_step": self.state.current_step},
            )
            return False

        self.state.problem_text = text
        self._mark_animated(0)
        self._advance(1)
        return True

    async def submit_why(self, index: int, text: str) -> bool:
        """Record the answer for "why" prompt ``index`` (0-4).

        Answers 0-3 reveal the next prompt. Answer 4 runs the analysis and
        returns once it has completed or been discarded.

        Returns:
            True if the submission was accepted.

        Raises:
            ValueError: If index is outside 0-4.
        """
        if not 0 <= index < WHY_COUNT:
            raise ValueError(f"Why index must be between 0 and {WHY_COUNT - 1}, got {index}")

        if not self.can_submit(text) or self.state.current_step != index + 1:
            self.logger.debug(
                "Why submission ignored",
                extra={
                    "index": index,
                    "current_step": self.state.current_step,
                    "is_analyzing": self.state.is_analyzing,
                },
            )
            return False

        self.state.why_answers[index] = text
        self._mark_animated(index + 1)

        if index < WHY_COUNT - 1:
            self._advance(index + 2)
        else:
            await self._run_analysis()
        return True

    def reset(self) -> None:
        """Return the wizard to its initial empty state.

        Any analysis still pending will discard its result.
        """
        self._cancel_pulse()
        self._generation += 1
        self.state = WizardState()
        self.logger.debug(
            "Wizard reset",
            extra={"session_id": self.session_id, "generation": self._generation},
        )

    async def _run_analysis(self) -> Optional[AnalysisResult]:
        generation = self._generation
        problem_text = self.state.problem_text
        why_answers = list(self.state.why_answers)

        self.state.is_analyzing = True
        self._emit(ANALYSIS_TARGET)

        with LogContext(session_id=self.session_id, generation=generation):
            self.logger.info("Analysis started")
            try:
                if self.analysis_delay > 0:
                    await asyncio.sleep(self.analysis_delay)
                result = self.classifier.analyze(problem_text, why_answers)
            finally:
                if generation == self._generation:
                    self.state.is_analyzing = False

            if generation != self._generation:
                self.logger.info(
                    "Discarding analysis result after reset",
                    extra={"current_generation": self._generation},
                )
                return None

            self.state.analysis_result = result
            self._mark_animated(ANALYSIS_TARGET)
            self._emit(RESULTS_TARGET)
            self.logger.info(
                "Analysis completed",
                extra={"solutions": [s.title for s in result.solutions]},
            )
            return result

    def _advance(self, step: int) -> None:
        self.state.current_step = step
        self._emit(step)

    def _emit(self, target: StepMarker) -> None:
        for listener in list(self._listeners):
            listener(target)

    def _mark_animated(self, marker: StepMarker) -> None:
        self._cancel_pulse()
        self.state.animated_step = marker

        if self.pulse_seconds <= 0:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to time the pulse; the marker clears on the next transition
            return
        self._pulse_handle = loop.call_later(
            self.pulse_seconds, self._clear_animation, marker
        )

    def _clear_animation(self, marker: StepMarker) -> None:
        self._pulse_handle = None
        if self.state.animated_step == marker:
            self.state.animated_step = None

    def _cancel_pulse(self) -> None:
        if self._pulse_handle is not None:
            self._pulse_handle.cancel()
            self._pulse_handle = None
