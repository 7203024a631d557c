"""Static site content: case studies and subscription offerings.

Placeholder copy until live projects and pricing are signed off.
"""

from typing import List, Optional, Tuple

from .models import CaseStudy, SubscriptionTool

CASE_STUDIES: Tuple[CaseStudy, ...] = (
    CaseStudy(
        slug="translation-firm",
        name="Translation Firm",
        sector="Professional Services",
        icon="🌐",
        challenge=(
            "Time-sensitive jobs were slipping through the cracks, creating missed "
            "revenue and unhappy clients."
        ),
        approach=(
            "Mapped out job sourcing, vetting, and acceptance workflows to spot "
            "automation gaps.",
            "Delivered a monitoring agent that triages job feeds against margin, "
            "client relevance, and workload.",
            "Built a lightweight command centre so humans can override and learn from "
            "automation decisions.",
        ),
        outcomes=(
            "4.5× revenue uplift on urgent requests.",
            "Minutes from posting to acceptance for top-tier clients.",
            "Early-warning indicators when supply or quality thresholds dip.",
        ),
        metrics=("4.5× revenue boost", "95% job capture rate", "Minutes to respond"),
        testimonial_placeholder="“Add quote from client champion here once approved.”",
        services=("Agile Sprint", "Automation Signal Pack"),
    ),
    CaseStudy(
        slug="marketing-team-insights",
        name="Marketing Team",
        sector="SaaS",
        icon="📊",
        challenge=(
            "Teams lost 10+ hours a week wrangling spreadsheets instead of optimising "
            "campaigns."
        ),
        approach=(
            "Audited existing reporting cadence and data cleanliness gaps.",
            "Implemented a centralised insights hub with curated KPIs and AI-assisted "
            "commentary.",
            "Trained the team on how to run “inspect & adapt” reviews in under 30 "
            "minutes.",
        ),
        outcomes=(
            "40% performance lift across paid channels.",
            "Reporting cycle time dropped from half a day to 30 minutes.",
            "Stakeholders receive Monday scorecards with action items already "
            "prioritised.",
        ),
        metrics=(
            "10+ hours reclaimed weekly",
            "40% performance boost",
            "Always-on insights",
        ),
        testimonial_placeholder="“Placeholder for marketing director quote.”",
        services=("Agile Sprint", "Playbook Insights Suite"),
    ),
    CaseStudy(
        slug="uk-distributor-quotes",
        name="UK Distributor",
        sector="Distribution & Logistics",
        icon="🏭",
        challenge="Manual quoting created delays, errors, and churn at the point of sale.",
        approach=(
            "Shadowed sales reps to capture the exact steps from request to quote.",
            "Wired supplier data, pricing, and contract rules into a single decision "
            "engine.",
            "Introduced pre-built follow-up cadences to keep prospects warm "
            "automatically.",
        ),
        outcomes=(
            "Quotes issued 70% faster with audit trails for compliance.",
            "Win rate up 25% with consistent margin protection.",
            "Sales team now handles 3× the deal volume with the same headcount.",
        ),
        metrics=("70% faster quotes", "25% more deals", "3× volume capacity"),
        testimonial_placeholder=(
            "“Insert managing director endorsement once signed off.”"
        ),
        services=("Agile Sprint", "Workflow Studio Library"),
    ),
)

SUBSCRIPTION_TOOLS: Tuple[SubscriptionTool, ...] = (
    SubscriptionTool(
        slug="automation-signal-pack",
        name="Automation Signal Pack",
        persona="Operations leads who need instant visibility over recurring workflows",
        headline="Always-on monitors that flag drift before it becomes a fire drill.",
        summary=(
            "A lightweight alerting layer that sits on top of existing tools and "
            "surfaces the three signals teams care about most: throughput, errors, and "
            "customer impact."
        ),
        pain_points=(
            "Teams only learn about broken automations when customers complain.",
            "Manual spot-checks steal time from higher-value work.",
            "No single place to see how today compares to last week.",
        ),
        features=(
            "Plug-and-play connectors for spreadsheets, CRMs, ticketing, and ops "
            "dashboards",
            "Signal scoring that highlights anomalies and emerging issues",
            "Inbox-friendly daily and weekly briefings for stakeholders",
        ),
        outcomes=(
            "Reduce blind spots across core automations",
            "Catch revenue-impacting issues within minutes instead of hours",
            "Show leadership where the team is winning (and where to invest next)",
        ),
        pricing_note=(
            "Subscription placeholder – slot in tiered pricing once positioning is "
            "locked in."
        ),
        cta_label="Talk to us about Signal Pack",
    ),
    SubscriptionTool(
        slug="playbook-insights-suite",
        name="Playbook Insights Suite",
        persona=(
            "Functional managers who want repeatable decision backing without hiring "
            "analysts"
        ),
        headline=(
            "Snapshots, scorecards, and recommendations delivered on a cadence your "
            "team will actually use."
        ),
        summary=(
            "Semi-automated reporting that distils raw data into ready-to-share "
            "insights across marketing, sales, and operations."
        ),
        pain_points=(
            "Weekly reports take hours to assemble and still miss the “so what?”",
            "Teams struggle to translate dashboards into next actions.",
            "Leaders need a single source of truth for board updates.",
        ),
        features=(
            "Opinionated templates for marketing, revenue, and ops scorecards",
            "Narrative overlays that explain trends in plain English",
            "Backlog view that captures follow-up actions and owners",
        ),
        outcomes=(
            "Give teams a shared lens on performance without pivot table gymnastics",
            "Create a rhythm for experimentation and continuous improvement",
            "Ship executive-ready summaries without last-minute scramble",
        ),
        pricing_note=(
            "Subscription placeholder – decide between seat-based or flat-fee pricing "
            "later."
        ),
        cta_label="Explore Insights Suite",
    ),
    SubscriptionTool(
        slug="workflow-studio-library",
        name="Workflow Studio Library",
        persona="Founders and senior ICs building processes while shipping product",
        headline="Pre-built automations and documentation packs you can deploy in a weekend.",
        summary=(
            "A curated library of low-code automations, SOPs, and enablement "
            "collateral designed to eliminate recurring busywork."
        ),
        pain_points=(
            "Common workflows get rebuilt from scratch every quarter.",
            "Process knowledge lives in people’s heads, not systems.",
            "There’s no time to package and train the team on new tooling.",
        ),
        features=(
            "Step-by-step blueprints for onboarding, fulfillment, and support flows",
            "Reusable automation modules for intake, routing, and notifications",
            "Change-log guidance to keep documentation honest and current",
        ),
        outcomes=(
            "Launch mature processes without hiring a consultant for every tweak",
            "Keep teams aligned as headcount grows",
            "Build institutional memory faster than turnover erodes it",
        ),
        pricing_note=(
            "Subscription placeholder – add tiers for starter, growth, and enterprise "
            "libraries."
        ),
        cta_label="Preview the Library",
    ),
)


def get_case_study(slug: str) -> Optional[CaseStudy]:
    """Look up a case study by slug."""
    for study in CASE_STUDIES:
        if study.slug == slug:
            return study
    return None


def get_subscription_tool(slug: str) -> Optional[SubscriptionTool]:
    """Look up a subscription offering by slug."""
    for tool in SUBSCRIPTION_TOOLS:
        if tool.slug == slug:
            return tool
    return None


def case_studies_for_service(service_name: str) -> List[CaseStudy]:
    """Case studies that list ``service_name`` among their services (case-insensitive)."""
    wanted = service_name.strip().lower()
    return [
        study for study in CASE_STUDIES
        if any(service.lower() == wanted for service in study.services)
    ]
