"""
Prakriti scoring and recommendation selection.

Test Categories:
1. Score tallying
2. Dominant label tie-break order
3. Assessment submission (append-only, rejects incomplete sets)
4. Flow states
5. Recommendation lookup and ordering
"""

import itertools

import pytest

from wellness.prakriti.scoring import (
    AssessmentFlow,
    DoshaScores,
    FlowState,
    IncompleteAssessmentError,
    TRI_DOSHA,
    compute_scores,
    derive_dominant_label,
    get_current_assessment,
    group_by_time_of_day,
    primary_dosha,
    select_recommendations_for_label,
    submit_assessment,
)


# ============================================================
# TEST: SCORING
# ============================================================

class TestComputeScores:

    def test_empty_answers_score_zero(self):
        assert compute_scores({}) == DoshaScores(0, 0, 0)

    def test_each_answer_counts_once(self):
        answers = {"q1": "vata", "q2": "pitta", "q3": "vata", "q4": "kapha", "q5": "vata"}
        assert compute_scores(answers) == DoshaScores(vata=3, pitta=1, kapha=1)

    @pytest.mark.parametrize("size", [1, 4, 12])
    def test_scores_sum_to_answer_count(self, size):
        tags = itertools.cycle(["kapha", "vata", "vata", "pitta"])
        answers = {f"q{i}": next(tags) for i in range(size)}
        assert compute_scores(answers).total == size

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValueError):
            compute_scores({"q1": "agni"})


# ============================================================
# TEST: DOMINANT LABEL
# ============================================================

class TestDominantLabel:

    @pytest.mark.parametrize("scores,label", [
        ((3, 3, 3), TRI_DOSHA),
        ((0, 0, 0), TRI_DOSHA),
        ((4, 4, 1), "Vata-Pitta"),
        ((4, 1, 4), "Vata-Kapha"),
        ((1, 4, 4), "Pitta-Kapha"),
        ((5, 2, 2), "Vata"),
        ((2, 5, 2), "Pitta"),
        ((2, 2, 5), "Kapha"),
        ((1, 1, 5), "Kapha"),
        ((5, 1, 1), "Vata"),
        ((3, 4, 5), "Kapha"),
        ((5, 4, 3), "Vata"),
        ((3, 5, 4), "Pitta"),
    ])
    def test_label_for_scores(self, scores, label):
        assert derive_dominant_label(DoshaScores(*scores)) == label

    def test_pair_below_third_is_single_label(self):
        # vata == pitta but both lose to kapha: not a composite
        assert derive_dominant_label(DoshaScores(2, 2, 3)) == "Kapha"

    def test_deterministic(self):
        scores = DoshaScores(4, 4, 4)
        assert {derive_dominant_label(scores) for _ in range(5)} == {TRI_DOSHA}

    @pytest.mark.parametrize("label,expected", [
        ("Vata-Pitta", "Vata"),
        ("Pitta-Kapha", "Pitta"),
        ("Kapha", "Kapha"),
        (TRI_DOSHA, "Tri"),
    ])
    def test_primary_dosha(self, label, expected):
        assert primary_dosha(label) == expected


# ============================================================
# TEST: SUBMISSION
# ============================================================

class TestSubmitAssessment:

    def test_incomplete_set_rejected_without_insert(self, db):
        with pytest.raises(IncompleteAssessmentError) as exc:
            submit_assessment(db, "user-1", {"q1": "vata"}, total_question_count=3)
        assert exc.value.answered == 1
        assert exc.value.total == 3
        assert db.inserts == []

    def test_complete_set_inserts_one_row(self, db):
        answers = {"q1": "vata", "q2": "vata", "q3": "pitta"}
        row = submit_assessment(db, "user-1", answers, total_question_count=3)

        assert db.inserts_into("prakriti_assessments") == [{
            "user_id": "user-1",
            "vata_score": 2,
            "pitta_score": 1,
            "kapha_score": 0,
            "dominant_dosha": "Vata",
            "assessment_data": answers,
        }]
        assert row["id"]
        assert row["assessed_at"]

    def test_retake_appends_and_latest_is_current(self, db):
        first = submit_assessment(db, "user-1", {"q1": "vata", "q2": "vata"}, 2)
        second = submit_assessment(db, "user-1", {"q1": "kapha", "q2": "kapha"}, 2)

        assert first["id"] != second["id"]
        assert len(db.tables["prakriti_assessments"]) == 2
        assert db.tables["prakriti_assessments"][0]["dominant_dosha"] == "Vata"
        assert get_current_assessment(db, "user-1")["id"] == second["id"]

    def test_current_assessment_is_per_user(self, db):
        submit_assessment(db, "user-1", {"q1": "pitta"}, 1)
        assert get_current_assessment(db, "user-2") is None


# ============================================================
# TEST: FLOW
# ============================================================

class TestAssessmentFlow:

    def test_states_follow_answer_count(self, db):
        flow = AssessmentFlow(["q1", "q2"])
        assert flow.state == FlowState.UNANSWERED

        flow.answer("q1", "vata")
        assert flow.state == FlowState.IN_PROGRESS

        flow.answer("q1", "pitta")
        assert flow.state == FlowState.IN_PROGRESS
        assert flow.answers == {"q1": "pitta"}

        flow.answer("q2", "kapha")
        assert flow.state == FlowState.COMPLETE

        flow.submit(db, "user-1")
        assert flow.state == FlowState.SUBMITTED

    def test_submitted_flow_is_closed(self, db):
        flow = AssessmentFlow(["q1"], {"q1": "vata"})
        flow.submit(db, "user-1")
        with pytest.raises(RuntimeError):
            flow.answer("q1", "kapha")
        with pytest.raises(RuntimeError):
            flow.submit(db, "user-1")

    def test_unknown_question_rejected(self):
        flow = AssessmentFlow(["q1"])
        with pytest.raises(KeyError):
            flow.answer("q9", "vata")

    def test_unanswered_ids_in_question_order(self):
        flow = AssessmentFlow(["q1", "q2", "q3"], {"q2": "vata"})
        assert flow.unanswered_ids() == ["q1", "q3"]

    def test_incomplete_flow_cannot_submit(self, db):
        flow = AssessmentFlow(["q1", "q2"], {"q1": "vata"})
        with pytest.raises(IncompleteAssessmentError):
            flow.submit(db, "user-1")
        assert flow.state == FlowState.IN_PROGRESS
        assert db.inserts == []


# ============================================================
# TEST: RECOMMENDATIONS
# ============================================================

class TestRecommendations:

    @pytest.fixture
    def diet_db(self, db):
        store = db.table("diet_recommendations")
        for meal in ["lunch", "zz_late_snack", "dinner", "brunch", "breakfast", "snack"]:
            store.insert({"dosha_type": "Vata", "meal_type": meal})
        store.insert({"dosha_type": "Pitta", "meal_type": "lunch"})
        return db

    def test_diet_in_meal_order_unknown_last(self, diet_db):
        rows = select_recommendations_for_label(diet_db, "Vata", "diet")
        assert [r["meal_type"] for r in rows] == [
            "breakfast", "snack", "lunch", "dinner", "brunch", "zz_late_snack",
        ]

    def test_composite_label_uses_first_dosha(self, diet_db):
        rows = select_recommendations_for_label(diet_db, "Vata-Pitta", "diet")
        assert {r["dosha_type"] for r in rows} == {"Vata"}

    def test_single_label_used_unchanged(self, diet_db):
        rows = select_recommendations_for_label(diet_db, "Pitta", "diet")
        assert [r["meal_type"] for r in rows] == ["lunch"]

    def test_no_reference_rows_is_empty(self, diet_db):
        assert select_recommendations_for_label(diet_db, "Kapha", "diet") == []
        assert select_recommendations_for_label(diet_db, TRI_DOSHA, "diet") == []

    def test_schedule_by_display_order(self, db):
        store = db.table("daily_schedule_templates")
        store.insert({"dosha_type": "Kapha", "time_of_day": "evening", "activity": "c", "display_order": 3})
        store.insert({"dosha_type": "Kapha", "time_of_day": "morning", "activity": "a", "display_order": 1})
        store.insert({"dosha_type": "Kapha", "time_of_day": "morning", "activity": "b", "display_order": 2})

        rows = select_recommendations_for_label(db, "Kapha-Pitta", "schedule")
        assert [r["activity"] for r in rows] == ["a", "b", "c"]

        grouped = group_by_time_of_day(rows)
        assert list(grouped) == ["morning", "evening"]
        assert [r["activity"] for r in grouped["morning"]] == ["a", "b"]

    def test_unknown_table_rejected(self, db):
        with pytest.raises(ValueError):
            select_recommendations_for_label(db, "Vata", "exercise")
