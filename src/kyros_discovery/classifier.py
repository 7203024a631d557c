# classifier.py
"""Root-cause classifier for the 5 Whys discovery widget.

This module provides the RootCauseClassifier class which scans the static
knowledge base for keyword hits in a visitor's answers and synthesises a
root cause, a short list of automation plays and a few playbook notes.
"""

from typing import Iterable, List, Optional, Sequence

from .knowledge_base import DEFAULT_RESULT, KNOWLEDGE_BASE
from .logging_utils import get_logger
from .models import WHY_COUNT, AnalysisResult, KnowledgeEntry, Solution


def build_text_blob(problem_text: str, why_answers: Sequence[str]) -> str:
    """Join the problem and all answers into one lowercase blob."""
    return " ".join([problem_text, *why_answers]).lower()


def dedupe_by_title(solutions: Iterable[Solution]) -> List[Solution]:
    """Drop solutions whose title was already seen; first occurrence wins."""
    seen = set()
    unique = []
    for solution in solutions:
        if solution.title in seen:
            continue
        seen.add(solution.title)
        unique.append(solution)
    return unique


class RootCauseClassifier:
    """Rule-based classifier mapping free-text answers to a discovery result.

    Matching is a literal, case-insensitive substring scan: an entry matches
    when any of its keywords occurs anywhere in the combined answers, so
    "status" also matches "statuses". Matched entries are combined in
    knowledge-base order, never ranked.

    Attributes:
        knowledge_base: Ordered entries to scan.
        default_result: Result returned when nothing matches.
        max_solutions: Cap on the number of solutions returned (default: 3).
        max_insights: Cap on the number of insights returned (default: 3).
    """

    DEFAULT_MAX_SOLUTIONS = 3
    DEFAULT_MAX_INSIGHTS = 3

    def __init__(
        self,
        knowledge_base: Optional[Sequence[KnowledgeEntry]] = None,
        default_result: Optional[AnalysisResult] = None,
        max_solutions: Optional[int] = None,
        max_insights: Optional[int] = None,
    ):
        """Initialize the classifier.

        Args:
            knowledge_base: Optional entries override. Defaults to KNOWLEDGE_BASE.
            default_result: Optional fallback override. Defaults to DEFAULT_RESULT.
            max_solutions: Optional solution cap override.
            max_insights: Optional insight cap override.
        """
        self.logger = get_logger(__name__)

        self.knowledge_base = tuple(
            knowledge_base if knowledge_base is not None else KNOWLEDGE_BASE
        )
        self.default_result = default_result or DEFAULT_RESULT
        self.max_solutions = (
            max_solutions if max_solutions is not None else self.DEFAULT_MAX_SOLUTIONS
        )
        self.max_insights = (
            max_insights if max_insights is not None else self.DEFAULT_MAX_INSIGHTS
        )

    def match(self, text_blob: str) -> List[KnowledgeEntry]:
        """Return the entries whose keywords occur in the blob, in declaration order."""
        text_blob = text_blob.lower()
        return [entry for entry in self.knowledge_base if entry.matches(text_blob)]

    def analyze(
        self,
        problem_text: str,
        why_answers: Sequence[str],
    ) -> AnalysisResult:
        """Classify a completed discovery run.

        Args:
            problem_text: The problem statement from step 0.
            why_answers: Exactly five answers, one per "why" step.

        Returns:
            AnalysisResult combining every matched entry, or the default
            result when nothing matches.

        Raises:
            ValueError: If why_answers does not hold exactly five answers.
        """
        if len(why_answers) != WHY_COUNT:
            raise ValueError(
                f"Expected {WHY_COUNT} answers, got {len(why_answers)}"
            )

        matches = self.match(build_text_blob(problem_text, why_answers))

        if not matches:
            self.logger.info("No knowledge entries matched, using default result")
            return self.default_result

        # Joined with a bare space, no sentence punctuation added
        root_cause = " ".join(entry.root_cause for entry in matches).strip()

        solutions = dedupe_by_title(
            solution for entry in matches for solution in entry.solutions
        )[: self.max_solutions]

        insights = [
            insight for entry in matches for insight in entry.insights
        ][: self.max_insights]

        self.logger.info(
            "Discovery answers classified",
            extra={
                "matched_entries": [entry.id for entry in matches],
                "solution_count": len(solutions),
            }
        )

        return AnalysisResult(
            root_cause=root_cause,
            solutions=tuple(solutions),
            insights=tuple(insights),
        )

    def get_stats(self) -> dict:
        """Get classifier configuration for diagnostics."""
        return {
            "entries": [entry.id for entry in self.knowledge_base],
            "keyword_count": sum(len(entry.keywords) for entry in self.knowledge_base),
            "max_solutions": self.max_solutions,
            "max_insights": self.max_insights,
        }


_default_classifier: Optional[RootCauseClassifier] = None


def analyze(problem_text: str, why_answers: Sequence[str]) -> AnalysisResult:
    """Classify answers with a shared classifier over the built-in knowledge base."""
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = RootCauseClassifier()
    return _default_classifier.analyze(problem_text, why_answers)
