"""Static knowledge base for the 5 Whys discovery widget.

Entries are scanned in declaration order; that order decides how matched
root causes, solutions and insights are combined.
"""

from typing import Optional, Tuple

from .models import AnalysisResult, KnowledgeEntry, Solution

KNOWLEDGE_BASE: Tuple[KnowledgeEntry, ...] = (
    KnowledgeEntry(
        id="manual-data-entry",
        keywords=("manual", "copy", "spreadsheet", "crm", "data entry", "typing"),
        root_cause=(
            "Critical information is captured in inboxes and spreadsheets, so there "
            "is no structured intake feeding the core systems."
        ),
        solutions=(
            Solution(
                title="Inbox to CRM capture",
                description=(
                    "Deploy an intake bot that triages emails, extracts key fields, and "
                    "posts qualified records directly into your CRM or ERP."
                ),
            ),
            Solution(
                title="Validation checklist",
                description=(
                    "Create a review lane so operators only approve edge cases instead "
                    "of re-keying entire forms."
                ),
            ),
            Solution(
                title="Change telemetry",
                description=(
                    "Instrument automations with success/error logging so teams can see "
                    "throughput without opening spreadsheets."
                ),
            ),
        ),
        insights=(
            "Target processes where submissions already follow a loose template—"
            "mission-critical but repetitive",
            "Pair automation with a lightweight QA queue to keep trust high",
            "Promote a single source of truth to make downstream reporting painless",
        ),
    ),
    KnowledgeEntry(
        id="scattered-comms",
        keywords=(
            "slack",
            "teams",
            "whatsapp",
            "multiple channels",
            "messages",
            "communications",
        ),
        root_cause=(
            "Customer conversations live across too many channels, so there is no "
            "reliable queue or assignment logic."
        ),
        solutions=(
            Solution(
                title="Unified request hub",
                description=(
                    "Aggregate email, chat, and form submissions into a single Kanban "
                    "that routes requests by SLA and subject."
                ),
            ),
            Solution(
                title="Automation signal pack",
                description=(
                    "Add health monitoring to flag stale messages and unresolved threads "
                    "before clients chase for updates."
                ),
            ),
            Solution(
                title="Conversation summaries",
                description=(
                    "Use AI summaries to write back the latest status into the CRM, "
                    "keeping sales, success, and ops aligned."
                ),
            ),
        ),
        insights=(
            "Create channel guardrails—what lives in email vs. ticket vs. chat",
            "Track ageing so managers can spot load spikes early",
            "Feed structured outcomes (next action, owner, due date) into analytics",
        ),
    ),
    KnowledgeEntry(
        id="status-reporting",
        keywords=("status", "update", "report", "visibility", "project"),
        root_cause=(
            "Teams lack a live operational heartbeat, so they revert to manual "
            "chasing, duplicating effort in every cycle."
        ),
        solutions=(
            Solution(
                title="Automated stand-up notes",
                description=(
                    "Collect progress signals from task tools and surface blockers in a "
                    "daily digest that replaces manual check-ins."
                ),
            ),
            Solution(
                title="Operations briefing dashboard",
                description=(
                    "Combine delivery metrics, risk flags, and upcoming deadlines in a "
                    "single view for leads."
                ),
            ),
            Solution(
                title="Workflow studio playbook",
                description=(
                    "Document the cadence—what data is inspected when—so the rhythm "
                    "survives handovers."
                ),
            ),
        ),
        insights=(
            "Start with one team or pod to prove time saved",
            "Anchor every metric to an actionable owner",
            "Automate follow-ups when SLAs slip instead of relying on heroics",
        ),
    ),
    KnowledgeEntry(
        id="documents",
        keywords=("proposal", "quote", "document", "deck", "pdf"),
        root_cause=(
            "Sales and delivery rely on bespoke docs with little reuse, so knowledge "
            "never compounds and cycle times stay high."
        ),
        solutions=(
            Solution(
                title="Dynamic doc templates",
                description=(
                    "Merge CRM data into approved proposal shells so reps start from a "
                    "90% ready draft."
                ),
            ),
            Solution(
                title="Approval guardrails",
                description=(
                    "Encode pricing and scope rules so exceptions escalate automatically "
                    "instead of being fixed post-delivery."
                ),
            ),
            Solution(
                title="Asset library",
                description=(
                    "Host case studies, boilerplate, and outcomes in a searchable "
                    "knowledge base tied to the template."
                ),
            ),
        ),
        insights=(
            "Audit the top 5 document types and standardise language",
            "Automate version stamping so legal always knows what went out",
            "Measure turnaround per segment to highlight revenue impact",
        ),
    ),
    KnowledgeEntry(
        id="customer-support",
        keywords=(
            "support",
            "helpdesk",
            "faq",
            "questions",
            "tickets",
            "customer",
        ),
        root_cause=(
            "Support queues mix simple FAQs with high-touch work, so specialists burn "
            "cycles triaging instead of solving."
        ),
        solutions=(
            Solution(
                title="Self-serve assistant",
                description=(
                    "Deploy an AI copilot that drafts responses from your knowledge "
                    "base, ready for agent approval."
                ),
            ),
            Solution(
                title="Tiering rules",
                description=(
                    "Route critical customers or topics straight to the right squad with "
                    "enriched context."
                ),
            ),
            Solution(
                title="Insight loops",
                description=(
                    "Tag recurring issues and sync them with product backlog grooming so "
                    "you reduce volume over time."
                ),
            ),
        ),
        insights=(
            "Define what should be automated, augmented, or escalated",
            "Expose common answers publicly to deflect similar tickets",
            "Track deflection and resolution times to prove ROI",
        ),
    ),
)

# Returned verbatim when no entry matches
DEFAULT_RESULT = AnalysisResult(
    root_cause=(
        "The underlying friction points are still fuzzy, but there is a clear "
        "opportunity to document the process, measure where time goes, and layer in "
        "automation to remove the grind."
    ),
    solutions=(
        Solution(
            title="Discovery sprint",
            description=(
                "Map the workflow with your operators, capture the systems involved, "
                "and identify the 2-3 automation candidates with the fastest payback."
            ),
        ),
        Solution(
            title="Signal instrumentation",
            description=(
                "Add light-touch monitoring so you know when tasks pile up, deadlines "
                "slip, or data quality deteriorates."
            ),
        ),
        Solution(
            title="Knowledge cleanup",
            description=(
                "Document inputs, owners, and definitions so the team shares a single "
                "playbook ahead of automation."
            ),
        ),
    ),
    insights=(
        "Look for repeatable tasks that happen weekly or more—those yield the "
        "quickest wins.",
        "Capture metrics before automating so you can prove the uplift.",
        "Pair every automation with a named owner and backup.",
    ),
)


def get_entry(entry_id: str) -> Optional[KnowledgeEntry]:
    """Look up a knowledge entry by id."""
    for entry in KNOWLEDGE_BASE:
        if entry.id == entry_id:
            return entry
    return None


def _check_unique_ids(entries: Tuple[KnowledgeEntry, ...]) -> None:
    seen = set()
    for entry in entries:
        if entry.id in seen:
            raise ValueError(f"Duplicate knowledge entry id: {entry.id}")
        seen.add(entry.id)


_check_unique_ids(KNOWLEDGE_BASE)
