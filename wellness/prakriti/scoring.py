"""
scoring.py
==========
Prakriti scoring and recommendation selection.

Flow:
  questions → answers {question_id: "vata" | "pitta" | "kapha"}
            → DoshaScores(vata, pitta, kapha)
            → dominant label ("Vata", "Vata-Pitta", "Tri-Dosha", ...)
            → primary dosha (first segment of the label)
            → diet recommendations / schedule templates for that dosha

Nothing here talks to psycopg2 directly; reads and writes go through the
RecordStore handed in by the caller.
"""

from enum import Enum
from typing import Mapping, NamedTuple, Optional

from wellness.db.record_store import Database

VATA = "vata"
PITTA = "pitta"
KAPHA = "kapha"
DOSHA_TAGS = (VATA, PITTA, KAPHA)

TRI_DOSHA = "Tri-Dosha"
LABEL_SEPARATOR = "-"

# Fixed meal order for diet charts. Anything else sorts after these.
MEAL_ORDER = ("breakfast", "snack", "lunch", "dinner")

ASSESSMENTS_TABLE = "prakriti_assessments"
QUESTIONS_TABLE = "prakriti_questions"
RECOMMENDATION_TABLES = {
    "diet": "diet_recommendations",
    "schedule": "daily_schedule_templates",
}


class IncompleteAssessmentError(ValueError):
    """Submission attempted before every question has an answer."""

    def __init__(self, answered: int, total: int):
        super().__init__(f"Please answer all questions ({answered} of {total} answered)")
        self.answered = answered
        self.total = total


class DoshaScores(NamedTuple):
    vata: int
    pitta: int
    kapha: int

    @property
    def total(self) -> int:
        return self.vata + self.pitta + self.kapha


# ─────────────────────────────
# Scoring
# ─────────────────────────────

def compute_scores(answers: Mapping[str, str]) -> DoshaScores:
    """One point per answer to the dosha it was tagged with."""
    counts = {tag: 0 for tag in DOSHA_TAGS}
    for tag in answers.values():
        if tag not in counts:
            raise ValueError(f"Unknown dosha tag: {tag!r}")
        counts[tag] += 1
    return DoshaScores(counts[VATA], counts[PITTA], counts[KAPHA])


def derive_dominant_label(scores: DoshaScores) -> str:
    """
    Collapse three scores into a dominant label.

    Ties are common with a dozen questions, so the order of these checks
    decides the result and must not be rearranged:
      1. all equal                 → Tri-Dosha
      2. vata == pitta > kapha     → Vata-Pitta
      3. vata == kapha > pitta     → Vata-Kapha
      4. pitta == kapha > vata     → Pitta-Kapha
      5. otherwise the single highest score
    """
    vata, pitta, kapha = scores
    if vata == pitta == kapha:
        return TRI_DOSHA
    if vata == pitta and vata > kapha:
        return "Vata-Pitta"
    if vata == kapha and vata > pitta:
        return "Vata-Kapha"
    if pitta == kapha and pitta > vata:
        return "Pitta-Kapha"
    if vata > pitta and vata > kapha:
        return "Vata"
    if pitta > kapha:
        return "Pitta"
    return "Kapha"


def primary_dosha(label: str) -> str:
    """First listed dosha of a (possibly composite) label."""
    return label.split(LABEL_SEPARATOR)[0]


# ─────────────────────────────
# Assessment flow
# ─────────────────────────────

class FlowState(str, Enum):
    UNANSWERED = "unanswered"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    SUBMITTED = "submitted"


class AssessmentFlow:
    """
    Answers collected for one run through the questionnaire.

    Re-answering a question replaces the earlier answer. Once submitted the
    flow is finished; retaking the assessment starts a new flow.
    """

    def __init__(self, question_ids, answers: Optional[Mapping[str, str]] = None):
        self.question_ids = tuple(question_ids)
        self.answers = {}
        self.result = None
        for question_id, tag in (answers or {}).items():
            self.answer(question_id, tag)

    @property
    def total(self) -> int:
        return len(self.question_ids)

    @property
    def answered(self) -> int:
        return len(self.answers)

    @property
    def state(self) -> FlowState:
        if self.result is not None:
            return FlowState.SUBMITTED
        if self.answered == 0:
            return FlowState.UNANSWERED
        if self.answered < self.total:
            return FlowState.IN_PROGRESS
        return FlowState.COMPLETE

    def answer(self, question_id: str, tag: str) -> None:
        if self.result is not None:
            raise RuntimeError("Assessment already submitted")
        if question_id not in self.question_ids:
            raise KeyError(question_id)
        if tag not in DOSHA_TAGS:
            raise ValueError(f"Unknown dosha tag: {tag!r}")
        self.answers[question_id] = tag

    def unanswered_ids(self) -> list:
        return [q for q in self.question_ids if q not in self.answers]

    def submit(self, db: Database, user_id: str) -> dict:
        if self.result is not None:
            raise RuntimeError("Assessment already submitted")
        self.result = submit_assessment(db, user_id, self.answers, self.total)
        return self.result


# ─────────────────────────────
# Store access
# ─────────────────────────────

def load_questions(db: Database) -> list:
    return db.table(QUESTIONS_TABLE).find_all(order_by="display_order")


def submit_assessment(db: Database, user_id: str, answers: Mapping[str, str],
                      total_question_count: int) -> dict:
    """
    Score a finished answer set and append it as a new assessment row.

    Raises IncompleteAssessmentError without touching the store when the
    answer count does not match the question count. Earlier assessments are
    never modified; the newest one is the user's current result.
    """
    if len(answers) != total_question_count:
        raise IncompleteAssessmentError(len(answers), total_question_count)

    scores = compute_scores(answers)
    label = derive_dominant_label(scores)
    record = db.table(ASSESSMENTS_TABLE).insert({
        "user_id": user_id,
        "vata_score": scores.vata,
        "pitta_score": scores.pitta,
        "kapha_score": scores.kapha,
        "dominant_dosha": label,
        "assessment_data": dict(answers),
    })
    print(f"[PRAKRITI] Saved assessment {label} {tuple(scores)} for user {str(user_id)[:8]}...")
    return record


def get_current_assessment(db: Database, user_id: str) -> Optional[dict]:
    """Most recent assessment for the user, or None."""
    return db.table(ASSESSMENTS_TABLE).find_one(
        {"user_id": user_id}, order_by="assessed_at", descending=True
    )


def _meal_rank(recommendation: dict) -> int:
    meal_type = recommendation.get("meal_type")
    if meal_type in MEAL_ORDER:
        return MEAL_ORDER.index(meal_type)
    return len(MEAL_ORDER)


def select_recommendations_for_label(db: Database, label: str, table: str) -> list:
    """
    Reference rows for the primary dosha of `label`.

    table:
      "diet"     → diet_recommendations in breakfast, snack, lunch, dinner order
      "schedule" → daily_schedule_templates by display_order

    A composite label such as "Vata-Pitta" only looks up "Vata".
    Returns [] when nothing is stored for that dosha.
    """
    if table not in RECOMMENDATION_TABLES:
        raise ValueError(f"Unknown recommendation table: {table!r}")

    dosha = primary_dosha(label)
    store = db.table(RECOMMENDATION_TABLES[table])
    if table == "diet":
        rows = store.find_all({"dosha_type": dosha}, order_by="meal_type")
        return sorted(rows, key=_meal_rank)
    return store.find_all({"dosha_type": dosha}, order_by="display_order")


def group_by_time_of_day(templates: list) -> dict:
    """{time_of_day: [template, ...]} keeping first-seen order."""
    grouped = {}
    for template in templates:
        grouped.setdefault(template["time_of_day"], []).append(template)
    return grouped
