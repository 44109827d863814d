"""Static program catalog: titles, curricula, prices and session title pools."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process

BEGINNER = "beginner"
INTERMEDIATE = "intermediate"
EXPERT = "expert"
LEVELS: Tuple[str, ...] = (BEGINNER, INTERMEDIATE, EXPERT)

LEVEL_LABELS: Mapping[str, str] = {
    BEGINNER: "Beginner Level",
    INTERMEDIATE: "Intermediate Level",
    EXPERT: "Expert Level",
}
LEVEL_DAYS: Mapping[str, int] = {BEGINNER: 7, INTERMEDIATE: 10, EXPERT: 14}
LEVEL_PRICES: Mapping[str, int] = {BEGINNER: 3000, INTERMEDIATE: 7000, EXPERT: 12000}
LEVEL_CREDITS: Mapping[str, int] = {BEGINNER: 1, INTERMEDIATE: 3, EXPERT: 5}

DEFAULT_SESSION_TITLES: List[str] = ["Training Session • Day"]


@dataclass(frozen=True)
class Program:
    id: str
    title: str
    overview: str
    outcomes: Tuple[str, ...]


@dataclass(frozen=True)
class LevelBlock:
    days: int
    topics: Tuple[str, ...]
    session_titles: Tuple[str, ...]


PROGRAMS: Tuple[Program, ...] = (
    Program(
        id="vdaa",
        title="Virtual Data Analysis Assistant Training Program",
        overview=(
            "Hands-on training for virtual assistants who analyze data, build "
            "dashboards, and present business insights."
        ),
        outcomes=(
            "Spreadsheet & SQL fundamentals",
            "Cleaning & visualization best practices",
            "KPI dashboards and simple forecasts",
        ),
    ),
    Program(
        id="vadmin",
        title="Virtual Administrative Assistant Training Program",
        overview=(
            "Operational excellence for modern remote admins: calendar mastery, "
            "documentation, and process automation."
        ),
        outcomes=(
            "Email, calendar, and file systems",
            "SOP writing & documentation",
            "Automation with forms and spreadsheets",
        ),
    ),
    Program(
        id="veditorial",
        title="Virtual Editorial Assistant Training Program",
        overview=(
            "Editing workflow from research to publish. Learn briefs, style guides, "
            "CMS use, and basic graphics."
        ),
        outcomes=(
            "Content research & outlines",
            "Editing with style guides",
            "CMS publishing & basic graphics",
        ),
    ),
    Program(
        id="vmarketing",
        title="Virtual Marketing Assistant Training Program",
        overview=(
            "Campaign support for social, email, and ads. Build calendars, drafts, "
            "and reports that convert."
        ),
        outcomes=(
            "Social calendar & asset prep",
            "Email drafts & simple automations",
            "Campaign tracking & weekly reports",
        ),
    ),
)

PROGRAM_IDS: Tuple[str, ...] = tuple(p.id for p in PROGRAMS)
_PROGRAMS_BY_ID: Dict[str, Program] = {p.id: p for p in PROGRAMS}

_TOPICS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "vdaa": {
        BEGINNER: (
            "Introduction to Data Analytics",
            "Spreadsheet Proficiency",
            "Data Sorting, Filtering, and Graphs",
            "Data Accuracy and Validation",
            "Introduction to Google Sheets and Excel",
        ),
        INTERMEDIATE: (
            "Data Cleaning and Preparation",
            "Pivot Tables and Basic Statistics",
            "Creating Dashboards",
            "Trend and Pattern Analysis",
            "Visual Data Presentation",
        ),
        EXPERT: (
            "Advanced Data Tools (Power BI, Tableau Intro)",
            "Automating Reports for Insights",
            "Interpreting Data for Decision Support",
            "Managing Large Data Sets",
        ),
    },
    "vadmin": {
        BEGINNER: (
            "Understanding VA Administrative Roles",
            "Email Management and Scheduling Tools",
            "Document Organization (Google Workspace, MS Office)",
            "Calendar Management and Task Prioritization",
            "Online Meeting Setup (Zoom, Teams)",
        ),
        INTERMEDIATE: (
            "Workflow and Process Management",
            "Handling Client Communication",
            "Recordkeeping and Digital Filing Systems",
            "Managing Deadlines and Tasks",
            "Problem Solving and Critical Thinking",
        ),
        EXPERT: (
            "Project Coordination and Team Support",
            "Business Correspondence and Report Writing",
            "CRM Tools and Data Entry Accuracy",
            "Process Improvement for Admin Efficiency",
        ),
    },
    "veditorial": {
        BEGINNER: (
            "Introduction to Editorial Work",
            "Grammar, Spelling, and Punctuation Essentials",
            "Formatting Articles and Documents",
            "Basic Research and Fact-Checking",
            "Using Editing Tools (Grammarly, Hemingway)",
        ),
        INTERMEDIATE: (
            "Copyediting and Proofreading Techniques",
            "Style Guide Application (APA, MLA, Chicago)",
            "Collaborative Editing in Google Docs",
            "Managing Editorial Calendars",
            "Consistency and Tone Checks",
        ),
        EXPERT: (
            "Advanced Editing and Rewriting Skills",
            "SEO Writing and Content Optimization",
            "Managing Editorial Projects",
            "Handling Multiple Writers",
        ),
    },
    "vmarketing": {
        BEGINNER: (
            "Introduction to Digital Marketing",
            "Social Media Platforms Overview",
            "Content Scheduling Tools",
            "Basic Canva and Design Skills",
            "Audience Engagement Basics",
        ),
        INTERMEDIATE: (
            "Social Media Analytics",
            "Copywriting for Marketing",
            "Email Campaign Management",
            "SEO Basics and Keyword Use",
            "Branding and Consistency",
        ),
        EXPERT: (
            "Strategic Campaign Planning",
            "Paid Ads Management",
            "Marketing Reports and KPIs",
            "Influencer and Partner Collaboration",
        ),
    },
}

_SESSION_TITLES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "vdaa": {
        BEGINNER: (
            "Intro to Analytics • Day", "Spreadsheets Sprint • Day", "Charts & Filters • Day",
            "Data Accuracy Lab • Day", "Sheets & Excel Jumpstart • Day",
            "Mini Dashboard Practice • Day", "QA & Recap • Day",
        ),
        INTERMEDIATE: (
            "Data Cleaning Lab • Day", "Pivot Tables Power • Day", "Stats Basics • Day",
            "Dashboard Build • Day", "Trends & Patterns • Day", "Viz Storytelling • Day",
            "Review & Q&A • Day", "Practice Clinic • Day", "Case Study • Day",
            "Midterm Build • Day",
        ),
        EXPERT: (
            "Power BI / Tableau Intro • Day", "Automation for Insights • Day",
            "Decision Support • Day", "Large Dataset Skills • Day", "Advanced Modeling • Day",
            "Performance Tuning • Day", "Dashboard Polish • Day", "Final Lab • Day",
            "Capstone Review • Day", "Exec Storytelling • Day", "Data Ops Tips • Day",
            "Masterclass • Day", "Case Defense • Day", "Wrap-up & Cert • Day",
        ),
    },
    "vadmin": {
        BEGINNER: (
            "Admin Roles 101 • Day", "Email Mastery • Day", "Docs & Files • Day",
            "Calendars & Tasks • Day", "Meetings Setup • Day", "Toolbox Time • Day",
            "Recap • Day",
        ),
        INTERMEDIATE: (
            "Workflow Design • Day", "Client Comms • Day", "Records Mgmt • Day",
            "Deadlines Control • Day", "Problem Solving • Day", "Process QA • Day",
            "Ops Clinic • Day", "Docs Review • Day", "Playbook Build • Day", "Retro • Day",
        ),
        EXPERT: (
            "Project Coordination • Day", "Reports Writing • Day", "CRM & Data • Day",
            "Process Improvement • Day", "Stakeholder Sync • Day", "Automation • Day",
            "Admin Systematize • Day", "Ops Scaling • Day", "Leadership Support • Day",
            "Final Review • Day", "Handoff • Day", "Capstone • Day", "Mastery • Day",
            "Graduation • Day",
        ),
    },
    "veditorial": {
        BEGINNER: (
            "Editorial Basics • Day", "Grammar Essentials • Day", "Formatting • Day",
            "Fact-Checking • Day", "Editing Tools • Day", "Style Drill • Day",
            "Wrap-Up • Day",
        ),
        INTERMEDIATE: (
            "Copyedit Lab • Day", "Style Guides • Day", "Collab Docs • Day",
            "Editorial Calendar • Day", "Consistency Checks • Day", "Peer Review • Day",
            "Workflow Clinic • Day", "Rewrite Skills • Day", "Quality Gate • Day",
            "Retro • Day",
        ),
        EXPERT: (
            "Advanced Editing • Day", "SEO Writing • Day", "Project Mgmt • Day",
            "Multi-Writer Handling • Day", "Editorial Strategy • Day",
            "Analytics for Editors • Day", "Voice & Tone • Day", "Longform Clinic • Day",
            "Publication Day • Day", "Postmortem • Day", "Toolkit • Day", "Coaching • Day",
            "Capstone • Day", "Comm Debrief • Day",
        ),
    },
    "vmarketing": {
        BEGINNER: (
            "Digital Marketing Intro • Day", "Platforms Tour • Day", "Scheduling Tools • Day",
            "Canva Basics • Day", "Engagement 101 • Day", "Copy Starter • Day",
            "Wrap-Up • Day",
        ),
        INTERMEDIATE: (
            "Analytics Basics • Day", "Copywriting • Day", "Email Campaigns • Day",
            "SEO Basics • Day", "Brand Consistency • Day", "Content Ops • Day",
            "Performance Review • Day", "A/B Ideas • Day", "Reporting • Day", "Retro • Day",
        ),
        EXPERT: (
            "Campaign Strategy • Day", "Paid Ads • Day", "KPI Deep Dive • Day",
            "Influencer Collab • Day", "Funnel Optimization • Day", "Attribution • Day",
            "Advanced Reporting • Day", "Growth Loops • Day", "Creative Review • Day",
            "Ops Scaling • Day", "Quarter Plan • Day", "Pitch Prep • Day", "Capstone • Day",
            "Summit • Day",
        ),
    },
}

CURRICULA: Dict[str, Dict[str, LevelBlock]] = {
    program_id: {
        level: LevelBlock(
            days=LEVEL_DAYS[level],
            topics=topics,
            session_titles=_SESSION_TITLES.get(program_id, {}).get(level, ()),
        )
        for level, topics in levels.items()
    }
    for program_id, levels in _TOPICS.items()
}

_PROGRAM_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("data", "vdaa"),
    ("admin", "vadmin"),
    ("editor", "veditorial"),
    ("market", "vmarketing"),
)


def get_program(program_id: str) -> Optional[Program]:
    return _PROGRAMS_BY_ID.get(program_id)


def program_title(program_id: str) -> str:
    program = get_program(program_id)
    return program.title if program else str(program_id).upper()


def curriculum(program_id: str, level: str) -> Optional[LevelBlock]:
    return CURRICULA.get(program_id, {}).get(level)


def days_for(program_id: str, level: str) -> int:
    """Number of daily sessions for ``(program_id, level)``."""
    block = curriculum(program_id, level)
    if block is not None:
        return block.days
    return LEVEL_DAYS.get(level, LEVEL_DAYS[BEGINNER])


def session_titles_for(program_id: str, level: str) -> List[str]:
    block = curriculum(program_id, level)
    if block is None or not block.session_titles:
        return list(DEFAULT_SESSION_TITLES)
    return list(block.session_titles)


def normalize_program_id(raw: object) -> str:
    """Map a stored program code or title onto a catalog id.

    Raises
    ------
    ValueError
        If ``raw`` cannot be matched to any program.
    """
    value = str(raw or "").strip().lower()
    if not value:
        raise ValueError("missing program id")
    if value in _PROGRAMS_BY_ID:
        return value
    for keyword, program_id in _PROGRAM_KEYWORDS:
        if keyword in value:
            return program_id
    titles = {p.id: p.title.lower() for p in PROGRAMS}
    match = process.extractOne(value, titles, scorer=fuzz.WRatio, score_cutoff=80)
    if match:
        return match[2]
    raise ValueError(f"unknown program {raw!r}")


def normalize_level(raw: object) -> str:
    """Map ``"Beginner"``/``"INT"``/``"expert level"`` style values to a level key."""
    value = str(raw or "").strip().lower()
    for level in LEVELS:
        if value.startswith(level[:3]):
            return level
    raise ValueError(f"unknown level {raw!r}")


def search_programs(query: str, programs: Sequence[Program] = PROGRAMS) -> List[Program]:
    q = (query or "").strip().lower()
    if not q:
        return list(programs)
    return [
        p
        for p in programs
        if q in p.title.lower()
        or q in p.overview.lower()
        or any(q in outcome.lower() for outcome in p.outcomes)
    ]


def lessons_for(program_id: str, level: str) -> List[Dict[str, object]]:
    """Two-lesson walkthrough built from the first two topics of a level."""
    block = curriculum(program_id, level)
    if block is None or len(block.topics) < 2:
        return []
    first, second = block.topics[:2]
    return [
        {
            "id": "lesson-1",
            "title": first,
            "points": [f'Overview of "{first}"', "Why it matters", "Quick best practices"],
        },
        {
            "id": "lesson-2",
            "title": second,
            "points": [f'Core ideas in "{second}"', "Hands-on tips", "Common pitfalls"],
        },
    ]


def format_peso(amount: float) -> str:
    return f"₱{amount:,.0f}" if float(amount).is_integer() else f"₱{amount:,.2f}"


__all__ = [
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "LEVELS",
    "LEVEL_LABELS",
    "LEVEL_DAYS",
    "LEVEL_PRICES",
    "LEVEL_CREDITS",
    "Program",
    "LevelBlock",
    "PROGRAMS",
    "PROGRAM_IDS",
    "CURRICULA",
    "get_program",
    "program_title",
    "curriculum",
    "days_for",
    "session_titles_for",
    "normalize_program_id",
    "normalize_level",
    "search_programs",
    "lessons_for",
    "format_peso",
]
