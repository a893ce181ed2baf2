"""
Category Point Rules
app/scoring/rules.py

Fixed point table: category x attribute combination -> non-negative integer.
One handler per ActivityCategory; CATEGORY_RULES is checked for completeness
at import time so a new category cannot be added without a rule.

Text attributes are matched case-insensitively by substring. The store holds
both Arabic and English labels, so both are listed.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional

from app.models.activity import ActivityRecord
from app.models.enumerations import ActivityCategory, ScopusQuartile
from app.models.scoring import ScoreItem

RuleHandler = Callable[[ActivityRecord, int], ScoreItem]


# ---------------------------------------------------------------------------
# Point constants
# ---------------------------------------------------------------------------

RESEARCH_INCOMPLETE = 1
RESEARCH_COMPLETED_UNPUBLISHED = 3
RESEARCH_PUBLISHED_LOCAL = 5
RESEARCH_PUBLISHED_GLOBAL = 10

SCOPUS_QUARTILE_POINTS: Dict[str, int] = {
    ScopusQuartile.Q1.value: 20,
    ScopusQuartile.Q2.value: 15,
    ScopusQuartile.Q3.value: 10,
    ScopusQuartile.Q4.value: 5,
}

# (global, local)
CONFERENCE_COMMITTEE = (12, 8)
CONFERENCE_PARTICIPANT = (8, 5)
CONFERENCE_ATTENDANCE = (4, 2)
CONFERENCE_PARTICIPANT_TYPES = ("participant", "باحث")

POSITION_POINTS = (
    (("عميد", "معاون"), 20),    # dean / associate dean
    (("رئيس قسم",), 15),        # head of department
    (("مقرر",), 10),            # department rapporteur
)

PUBLICATION_POINTS = (
    (("كتاب", "book"), 20),
    (("فصل", "chapter"), 10),
)
PUBLICATION_DEFAULT = 5

# (lecturer, participant)
COURSE_POINTS = (8, 3)
SEMINAR_POINTS = (5, 2)
WORKSHOP_POINTS = (6, 3)

ASSIGNMENT_MINISTERIAL = 10
ASSIGNMENT_UNIVERSITY = 6

VOLUNTEER_MAJOR = 5
VOLUNTEER_DEFAULT = 2

COMMITTEE_CHAIR = 7
COMMITTEE_MEMBER = 4

THANK_YOU_INTERNATIONAL_KEYWORDS = ("دول", "internation", "global", "world", "أجنبي")
THANK_YOU_MINISTRY_KEYWORDS = ("وزار", "ministry", "minister")
THANK_YOU_POINTS = {"international": 10, "ministry": 6, "university": 3}

SUPERVISION_POINTS = (
    (("دكتوراه", "phd"), 10),
    (("ماجستير", "master"), 6),
    (("بكالوريوس", "bachelor"), 3),
)

EVALUATION_INTERNATIONAL = 5
EVALUATION_LOCAL = 2

JOURNAL_CHIEF_EXACT = ("editor_in_chief", "chief_editor")
JOURNAL_CHIEF_KEYWORDS = ("رئيس تحرير", "editor-in-chief", "editor in chief")
JOURNAL_BOARD_EXACT = ("editorial_board", "assistant_editor")
JOURNAL_BOARD_KEYWORDS = ("هيئة تحرير", "editorial board", "محرر مساعد", "assistant editor")
JOURNAL_POINTS = {"editor_in_chief": 20, "editorial_board": 10, "reviewer": 5}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _text(value: Any) -> str:
    return str(value or "").strip().lower()


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def _match_table(text: str, table, default: int) -> int:
    for keywords, points in table:
        if _contains_any(text, keywords):
            return points
    return default


def display_year(record: ActivityRecord, current_year: int) -> int:
    """Year shown for an item: explicit year, else activity date, else current year."""
    if record.year:
        return int(record.year)
    if record.occurred_on is not None:
        return record.occurred_on.year
    return current_year


def _item(record: ActivityRecord, current_year: int, points: int,
          details: Optional[Dict[str, Any]] = None, title: Optional[str] = None) -> ScoreItem:
    return ScoreItem(
        id=record.id,
        title=title if title is not None else record.title,
        year=display_year(record, current_year),
        points=points,
        details=details or {},
    )


def _is_global(classifications: Any) -> bool:
    if not classifications:
        return False
    return "global" in classifications


# ---------------------------------------------------------------------------
# Research
# ---------------------------------------------------------------------------

def research_points(record: ActivityRecord) -> int:
    """Status points plus Scopus quartile points."""
    is_completed = bool(record.get("is_completed"))
    is_published = bool(record.get("is_published"))

    if not is_completed:
        base = RESEARCH_INCOMPLETE
    elif not is_published:
        base = RESEARCH_COMPLETED_UNPUBLISHED
    elif _is_global(record.get("classifications")):
        base = RESEARCH_PUBLISHED_GLOBAL
    else:
        base = RESEARCH_PUBLISHED_LOCAL

    quartile = record.get("scopus_quartile")
    scopus = SCOPUS_QUARTILE_POINTS.get(str(quartile).upper(), 0) if quartile else 0
    return base + scopus


def research_status(record: ActivityRecord) -> str:
    if not record.get("is_completed"):
        return "incomplete"
    if not record.get("is_published"):
        return "completed_unpublished"
    if _is_global(record.get("classifications")):
        return "published_global"
    return "published_local"


def score_research(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, research_points(record), {
        "status": research_status(record),
        "scopusQuartile": record.get("scopus_quartile") or "non_scopus",
    })


def research_annual_bonus(count: int) -> int:
    """Bonus for the number of research items recorded in one year."""
    if count >= 5:
        return 10
    if count >= 3:
        return 5
    if count >= 1:
        return 2
    return 0


# ---------------------------------------------------------------------------
# Conferences, positions, publications
# ---------------------------------------------------------------------------

def conference_points(record: ActivityRecord) -> int:
    is_global = record.get("scope") == "global"
    if record.get("is_committee_member") is True:
        table = CONFERENCE_COMMITTEE
    elif record.get("type") in CONFERENCE_PARTICIPANT_TYPES:
        table = CONFERENCE_PARTICIPANT
    else:
        table = CONFERENCE_ATTENDANCE
    return table[0] if is_global else table[1]


def score_conference(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, conference_points(record), {
        "scope": record.get("scope"),
        "type": record.get("type"),
        "isCommittee": record.get("is_committee_member"),
    })


def position_points(record: ActivityRecord) -> int:
    title = _text(record.title)
    if not title:
        return 0
    return _match_table(title, POSITION_POINTS, 0)


def score_position(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, position_points(record))


def publication_points(record: ActivityRecord) -> int:
    return _match_table(_text(record.get("publication_type")), PUBLICATION_POINTS, PUBLICATION_DEFAULT)


def score_publication(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, publication_points(record), {
        "type": record.get("publication_type"),
    })


# ---------------------------------------------------------------------------
# Courses, seminars, workshops (lecturer vs participant)
# ---------------------------------------------------------------------------

def _lecturer_points(record: ActivityRecord, table) -> int:
    return table[0] if record.get("type") == "lecturer" else table[1]


def score_course(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, _lecturer_points(record, COURSE_POINTS),
                 {"type": record.get("type")})


def course_annual_bonus(count: int) -> int:
    """One extra point per course beyond the first in the same year."""
    return count - 1 if count > 1 else 0


def score_seminar(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, _lecturer_points(record, SEMINAR_POINTS),
                 {"type": record.get("type")})


def score_workshop(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, _lecturer_points(record, WORKSHOP_POINTS),
                 {"type": record.get("type")})


# ---------------------------------------------------------------------------
# Service activities
# ---------------------------------------------------------------------------

def assignment_points(record: ActivityRecord) -> int:
    if "وزار" in _text(record.title):
        return ASSIGNMENT_MINISTERIAL
    return ASSIGNMENT_UNIVERSITY


def score_assignment(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, assignment_points(record))


def volunteer_work_points(record: ActivityRecord) -> int:
    title = _text(record.title)
    work_type = _text(record.get("type"))
    if "وطن" in title or "جامع" in title or "وطن" in work_type:
        return VOLUNTEER_MAJOR
    return VOLUNTEER_DEFAULT


def score_volunteer_work(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, volunteer_work_points(record),
                 {"type": record.get("type")})


def committee_points(record: ActivityRecord) -> int:
    if "رئيس" in _text(record.get("assignment_type")):
        return COMMITTEE_CHAIR
    return COMMITTEE_MEMBER


def score_committee(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, committee_points(record),
                 {"type": record.get("assignment_type")})


def thank_you_book_points(record: ActivityRecord) -> int:
    organization = _text(record.title)
    if _contains_any(organization, THANK_YOU_INTERNATIONAL_KEYWORDS):
        return THANK_YOU_POINTS["international"]
    if _contains_any(organization, THANK_YOU_MINISTRY_KEYWORDS):
        return THANK_YOU_POINTS["ministry"]
    # university, college, institute and unrecognised issuers all score the same
    return THANK_YOU_POINTS["university"]


def thank_you_source_type(record: ActivityRecord) -> str:
    organization = _text(record.title)
    if _contains_any(organization, ("دول", "internation", "global")):
        return "international"
    if _contains_any(organization, ("وزار", "ministry")):
        return "ministry"
    return "university"


def score_thank_you_book(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, thank_you_book_points(record),
                 {"sourceType": thank_you_source_type(record)},
                 title=record.title or "Thank-you letter")


def supervision_points(record: ActivityRecord) -> int:
    return _match_table(_text(record.get("degree_type")), SUPERVISION_POINTS, 0)


def score_supervision(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, supervision_points(record),
                 {"degreeType": record.get("degree_type")})


def scientific_evaluation_points(record: ActivityRecord) -> int:
    if _contains_any(_text(record.get("evaluation_type")), ("دولي", "internation")):
        return EVALUATION_INTERNATIONAL
    return EVALUATION_LOCAL


def score_scientific_evaluation(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, scientific_evaluation_points(record),
                 {"type": record.get("evaluation_type")},
                 title=record.title or "Scientific evaluation")


def journal_role(record: ActivityRecord) -> str:
    """Normalise a stored journal role to editor_in_chief / editorial_board / reviewer."""
    role = _text(record.get("role"))
    if role in JOURNAL_CHIEF_EXACT or _contains_any(role, JOURNAL_CHIEF_KEYWORDS):
        return "editor_in_chief"
    if role in JOURNAL_BOARD_EXACT or _contains_any(role, JOURNAL_BOARD_KEYWORDS):
        return "editorial_board"
    return "reviewer"


def journal_membership_points(record: ActivityRecord) -> int:
    return JOURNAL_POINTS[journal_role(record)]


def score_journal_membership(record: ActivityRecord, current_year: int) -> ScoreItem:
    return _item(record, current_year, journal_membership_points(record),
                 {"role": journal_role(record)},
                 title=record.title or "Scientific journal")


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

CATEGORY_RULES: Dict[ActivityCategory, RuleHandler] = {
    ActivityCategory.RESEARCH: score_research,
    ActivityCategory.CONFERENCES: score_conference,
    ActivityCategory.POSITIONS: score_position,
    ActivityCategory.PUBLICATIONS: score_publication,
    ActivityCategory.COURSES: score_course,
    ActivityCategory.SEMINARS: score_seminar,
    ActivityCategory.WORKSHOPS: score_workshop,
    ActivityCategory.ASSIGNMENTS: score_assignment,
    ActivityCategory.VOLUNTEER_WORK: score_volunteer_work,
    ActivityCategory.COMMITTEES: score_committee,
    ActivityCategory.THANK_YOU_BOOKS: score_thank_you_book,
    ActivityCategory.SUPERVISION: score_supervision,
    ActivityCategory.SCIENTIFIC_EVALUATIONS: score_scientific_evaluation,
    ActivityCategory.JOURNAL_MEMBERSHIPS: score_journal_membership,
}

# Categories that earn a per-year bonus on top of their items.
ANNUAL_BONUS_RULES: Dict[ActivityCategory, Callable[[int], int]] = {
    ActivityCategory.RESEARCH: research_annual_bonus,
    ActivityCategory.COURSES: course_annual_bonus,
}


def annual_bonus_title(category: ActivityCategory, count: int) -> str:
    if category == ActivityCategory.RESEARCH:
        return f"Research count bonus ({count} research)"
    return f"Additional courses bonus ({count - 1} courses)"


def _check_exhaustive() -> None:
    missing = set(ActivityCategory) - set(CATEGORY_RULES)
    if missing:
        names = ", ".join(sorted(c.value for c in missing))
        raise RuntimeError(f"No point rule registered for: {names}")


_check_exhaustive()
