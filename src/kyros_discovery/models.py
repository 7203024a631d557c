"""Pydantic models for the Kyros discovery widget and site content."""

import re
import uuid
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Number of "why" prompts that follow the problem statement
WHY_COUNT = 5

# Focus targets emitted once the wizard leaves the numbered steps
ANALYSIS_TARGET = "analysis"
RESULTS_TARGET = "results"

StepMarker = Union[int, str]

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Solution(BaseModel):
    """A recommended automation play."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Short headline, unique within an entry")
    description: str = Field(default="", description="One-paragraph explanation")


class KnowledgeEntry(BaseModel):
    """A keyword-tagged root cause with its recommended solutions and insights."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique entry identifier")
    keywords: Tuple[str, ...] = Field(..., description="Lowercase substrings to look for")
    root_cause: str = Field(..., description="Root cause explanation")
    solutions: Tuple[Solution, ...] = Field(default_factory=tuple)
    insights: Tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Lowercase keywords and drop blanks, which would match any text."""
        keywords = tuple(k.lower() for k in v if k.strip())
        if not keywords:
            raise ValueError("a knowledge entry needs at least one keyword")
        return keywords

    @field_validator("solutions")
    @classmethod
    def validate_unique_titles(cls, v: Tuple[Solution, ...]) -> Tuple[Solution, ...]:
        titles = [s.title for s in v]
        if len(titles) != len(set(titles)):
            raise ValueError("solution titles must be unique within an entry")
        return v

    def matches(self, text: str) -> bool:
        """Check whether any keyword occurs in already-lowercased text."""
        return any(keyword in text for keyword in self.keywords)


class AnalysisResult(BaseModel):
    """Outcome of a discovery run, rendered back into the widget."""

    model_config = ConfigDict(frozen=True)

    root_cause: str = Field(..., description="Synthesised root cause paragraph")
    solutions: Tuple[Solution, ...] = Field(
        default_factory=tuple, description="Automation plays, deduplicated by title"
    )
    insights: Tuple[str, ...] = Field(
        default_factory=tuple, description="Playbook notes"
    )


class WizardState(BaseModel):
    """Mutable state of one discovery widget session."""

    model_config = ConfigDict(validate_assignment=True)

    problem_text: str = ""
    why_answers: List[str] = Field(default_factory=lambda: [""] * WHY_COUNT)
    current_step: int = Field(default=0, ge=0, le=WHY_COUNT + 1)
    animated_step: Optional[StepMarker] = None
    analysis_result: Optional[AnalysisResult] = None
    is_analyzing: bool = False

    @field_validator("why_answers")
    @classmethod
    def validate_answer_count(cls, v: List[str]) -> List[str]:
        if len(v) != WHY_COUNT:
            raise ValueError(f"exactly {WHY_COUNT} answers are required, got {len(v)}")
        return v

    @property
    def show_analysis(self) -> bool:
        """Whether a result is available to render."""
        return self.analysis_result is not None


class CardState(BaseModel):
    """Display flags for one wizard card."""

    active: bool = False
    complete: bool = False
    animated: bool = False


class CaseStudy(BaseModel):
    """A client story shown on the case studies page."""

    model_config = ConfigDict(frozen=True)

    slug: str
    name: str
    sector: str
    icon: str = ""
    challenge: str
    approach: Tuple[str, ...] = ()
    outcomes: Tuple[str, ...] = ()
    metrics: Tuple[str, ...] = ()
    testimonial_placeholder: str = ""
    services: Tuple[str, ...] = ()


class SubscriptionTool(BaseModel):
    """A productised subscription offering."""

    model_config = ConfigDict(frozen=True)

    slug: str
    name: str
    persona: str
    headline: str
    summary: str
    pain_points: Tuple[str, ...] = ()
    features: Tuple[str, ...] = ()
    outcomes: Tuple[str, ...] = ()
    pricing_note: str = ""
    cta_label: str = ""


class LeadSubmission(BaseModel):
    """Payload posted to the contact form endpoint."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    email: str = Field(..., description="Reply-to address of the prospect")
    name: str = Field(default="", description="Prospect name")
    company: str = Field(default="", description="Prospect company")
    message: str = Field(default="", description="Free-form note")
    problem: str = Field(default="", description="Discovery problem statement")
    whys: List[str] = Field(default_factory=list, description="Discovery answers")
    root_cause: str = Field(default="", description="Discovery root cause")
    recommended_solutions: List[str] = Field(
        default_factory=list, description="Titles of the recommended plays"
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_REGEX.match(v):
            raise ValueError("a valid email address is required")
        return v


class FormSubmission(BaseModel):
    """Outcome of posting a lead to the form endpoint."""

    submission_id: str
    endpoint: str
    success: bool
    status_code: int
    next_url: Optional[str] = None
