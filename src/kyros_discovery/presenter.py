# presenter.py
"""Presentation helpers for the discovery widget.

Turns WizardState and AnalysisResult into the copy and display flags the
site renders, without depending on any particular rendering technology.
"""

from typing import Dict, List, Optional, Tuple

from .config import config
from .models import WHY_COUNT, AnalysisResult, CardState, WizardState

# Quick-pick problem statements offered under the first prompt
EXAMPLE_PROBLEMS: Tuple[str, ...] = (
    "Manual data entry from emails into our CRM",
    "Customer updates scattered across email, chat, and tickets",
    "Managers spend hours chasing project status",
    "Proposals take 3 hours of copy-paste per prospect",
    "Support repeats the same answers all day",
)

PROBLEM_HEADING = "What challenge keeps coming back?"
PROBLEM_HELPER = (
    "Tell us about the workflow that’s draining time or money. We’ll use your "
    "wording to keep the recommendations practical."
)


def card_state(state: WizardState, step: int) -> CardState:
    """Compute the display flags for card ``step`` (0 = problem, 1-5 = whys)."""
    return CardState(
        active=state.current_step == step,
        complete=(
            state.current_step > step
            or (step == WHY_COUNT and state.show_analysis)
        ),
        animated=state.animated_step == step,
    )


def step_title(step: int) -> str:
    """Heading for a "why" card."""
    return f"Why does it happen? (Level {step})"


def step_prompt(state: WizardState, step: int) -> str:
    """Helper text for "why" card ``step``, quoting the previous answer.

    Raises:
        ValueError: If step is not a "why" step (1-5).
    """
    if not 1 <= step <= WHY_COUNT:
        raise ValueError(f"Step must be between 1 and {WHY_COUNT}, got {step}")
    if step == 1:
        return f'Why does "{state.problem_text}" happen inside your business?'
    return f'Why does "{state.why_answers[step - 2]}" occur?'


def submit_label(step: int) -> str:
    """Label of the submit button on a card."""
    if step == 0:
        return "Start discovery"
    return "Show plan" if step == WHY_COUNT else "Next"


class ResultFormatter:
    """Formats an AnalysisResult for display.

    Attributes:
        brand_name: Brand used in the call-to-action.
        cta_url: Link target of the "Talk to us" action.
    """

    HEADING = "🎯 Discovery complete"
    SUBHEADING = "Here’s where automation will hit hardest."
    ROOT_CAUSE_TITLE = "Root cause"
    SOLUTIONS_TITLE = "Automation plays"
    INSIGHTS_TITLE = "Playbook notes"
    FOOTER = (
        "Ready to turn this outline into a sprint-ready plan? We’ll map the "
        "workflow with your team and ship the first automation inside four weeks."
    )
    RESET_LABEL = "Run another scenario"

    def __init__(
        self,
        brand_name: Optional[str] = None,
        cta_url: Optional[str] = None,
    ):
        self.brand_name = brand_name or config.BRAND_NAME
        self.cta_url = cta_url or config.DISCOVERY_CTA_PATH

    @property
    def cta_label(self) -> str:
        return f"Talk to {self.brand_name}"

    def build_sections(self, result: AnalysisResult) -> List[Dict]:
        """Break a result into titled sections.

        Returns:
            List of {"title", "body"} or {"title", "items"} dictionaries.
        """
        return [
            {"title": self.ROOT_CAUSE_TITLE, "body": result.root_cause},
            {
                "title": self.SOLUTIONS_TITLE,
                "items": [
                    {"title": s.title, "description": s.description}
                    for s in result.solutions
                ],
            },
            {"title": self.INSIGHTS_TITLE, "items": list(result.insights)},
        ]

    def format_text(self, result: AnalysisResult) -> str:
        """Render a result as plain text suitable for a terminal or email body."""
        lines = [self.HEADING, self.SUBHEADING, ""]

        lines.append(f"{self.ROOT_CAUSE_TITLE}:")
        lines.append(f"  {result.root_cause}")
        lines.append("")

        lines.append(f"{self.SOLUTIONS_TITLE}:")
        for solution in result.solutions:
            lines.append(f"  • {solution.title}")
            lines.append(f"    {solution.description}")
        lines.append("")

        lines.append(f"{self.INSIGHTS_TITLE}:")
        for insight in result.insights:
            lines.append(f"  ✓ {insight}")
        lines.append("")

        lines.append(self.FOOTER)
        lines.append(f"{self.cta_label}: {self.cta_url}")
        return "\n".join(lines)
