"""
Unit Tests for Scoring Module

Tests for condition scorers, risk classification and aggregation.
"""
import pytest
from typing import Dict, Any

from careon.core.scoring import (
    AnswerRecord, Condition, Confidence, RiskLevel, RiskEngine,
    aggregate, classify_risk,
    score_diabetes, score_hypertension, score_cvd, score_dyslipidemia, score_thyroid,
)
from careon.core.scoring.conditions import SCORERS
from careon.core.scoring.thresholds import LEVEL_CUTOFFS
from careon.errors import UnknownConditionError


# Fixtures
@pytest.fixture
def high_risk_male() -> Dict[str, Any]:
    """Older sedentary smoker with central obesity and diabetic parents."""
    return {
        "age": 60,
        "bmi": 29,
        "waist": "high",
        "gender": "male",
        "physical_activity": "sedentary",
        "family_diabetes": "both",
        "tobacco_use": "yes",
    }


@pytest.fixture
def favorable_profile() -> Dict[str, Any]:
    return {"age": 25, "bmi": 21, "physical_activity": "high"}


@pytest.fixture
def maximal_profile() -> Dict[str, Any]:
    """Every risk factor at its worst value."""
    return {
        "age": 70, "gender": "female", "bmi": 35, "waist": 120,
        "physical_activity": "sedentary", "family_diabetes": "both",
        "diet_sugar": "high", "diet_vegetables": "low", "diet_salt": "high",
        "diet_fried": "high", "stress_level": "high", "tobacco_use": "yes",
        "alcohol": "frequent", "family_hypertension": "yes", "family_heart": "yes",
        "family_cholesterol": "yes", "family_thyroid": "yes",
        "thyroid_symptoms": "yes", "neck_swelling": "yes",
        "history_diabetes": "yes", "history_bp": "yes", "history_autoimmune": "yes",
    }


@pytest.fixture
def mid_age_male() -> Dict[str, Any]:
    """South-Asian male profile with room left on every scale."""
    return {"age": 40, "gender": "male", "bmi": 24, "physical_activity": "moderate"}


class TestScenarios:
    """End-to-end assessment scenarios."""

    def test_high_risk_male(self, high_risk_male):
        result = aggregate(high_risk_male)

        assert result.scores[Condition.DIABETES] >= 80
        assert result.levels[Condition.DIABETES] == RiskLevel.HIGH
        assert result.scores[Condition.HYPERTENSION] >= 9
        assert result.levels[Condition.HYPERTENSION] == RiskLevel.HIGH

        diabetes_recs = [r for r in result.recommendations if r.condition == Condition.DIABETES]
        assert len(diabetes_recs) == 1
        assert diabetes_recs[0].priority == "urgent"

    def test_high_risk_male_exact_scores(self, high_risk_male):
        result = aggregate(high_risk_male)
        assert result.scores == {
            Condition.DIABETES: 100,
            Condition.HYPERTENSION: 9,
            Condition.CVD: 18,
            Condition.DYSLIPIDEMIA: 10,
            Condition.THYROID: 0,
        }

    def test_empty_record(self):
        result = aggregate({})

        assert all(score == 0 for score in result.scores.values())
        assert all(level == RiskLevel.LOW for level in result.levels.values())
        assert result.confidence == Confidence.LOW
        assert result.recommendations == []

    def test_none_is_empty_record(self):
        assert aggregate(None).to_dict() == aggregate({}).to_dict()

    def test_favorable_profile(self, favorable_profile):
        result = aggregate(favorable_profile)

        assert result.scores[Condition.DIABETES] == 0
        assert result.scores[Condition.HYPERTENSION] == 0
        assert result.levels[Condition.DIABETES] == RiskLevel.LOW
        assert result.levels[Condition.HYPERTENSION] == RiskLevel.LOW
        assert result.recommendations == []

    def test_thyroid_profile(self):
        result = aggregate({
            "thyroid_symptoms": "yes",
            "family_thyroid": "yes",
            "gender": "female",
            "neck_swelling": "yes",
        })
        assert result.scores[Condition.THYROID] >= 13
        assert result.levels[Condition.THYROID] == RiskLevel.HIGH

    def test_waist_crossing_cutoff_raises_scores(self, mid_age_male):
        below = aggregate({**mid_age_male, "waist": 85})
        above = aggregate({**mid_age_male, "waist": 95})

        for condition in (Condition.DIABETES, Condition.CVD, Condition.DYSLIPIDEMIA):
            assert above.scores[condition] > below.scores[condition]
        for condition in Condition:
            assert above.scores[condition] >= below.scores[condition]


class TestBounds:
    """Scores stay inside their documented ranges."""

    def test_maximal_profile_hits_caps(self, maximal_profile):
        result = aggregate(maximal_profile)
        assert result.scores[Condition.DIABETES] == 100
        assert result.scores[Condition.HYPERTENSION] == 15
        assert result.scores[Condition.CVD] == 20
        assert result.scores[Condition.DYSLIPIDEMIA] == 15
        assert result.scores[Condition.THYROID] == 16

    @pytest.mark.parametrize("answers", [
        {},
        {"age": 120, "bmi": 60, "waist": 180},
        {"age": -5, "bmi": -1, "waist": -10},
        {"age": "old", "bmi": "heavy", "waist": None},
        {"gender": "female", "waist": "high", "tobacco": "yes", "alcohol": ">3/week"},
    ])
    def test_scores_within_range(self, answers):
        result = aggregate(answers)
        for condition, score in result.scores.items():
            assert 0 <= score <= LEVEL_CUTOFFS[condition].max_score
            assert isinstance(score, int)


class TestMonotonicity:
    """Raising one factor never lowers a score."""

    @pytest.mark.parametrize("condition", list(Condition))
    def test_age_ladder(self, condition, mid_age_male):
        scorer = SCORERS[condition]
        scores = [scorer({**mid_age_male, "age": age}).score for age in (20, 34, 35, 44, 45, 50, 55, 80)]
        assert scores == sorted(scores)

    @pytest.mark.parametrize("condition", list(Condition))
    def test_activity_ladder(self, condition, mid_age_male):
        scorer = SCORERS[condition]
        scores = [
            scorer({**mid_age_male, "physical_activity": level}).score
            for level in ("high", "moderate", "low")
        ]
        assert scores == sorted(scores)
        assert scorer({**mid_age_male, "physical_activity": "sedentary"}).score == scores[-1]

    @pytest.mark.parametrize("condition", list(Condition))
    def test_bmi_ladder(self, condition, mid_age_male):
        scorer = SCORERS[condition]
        scores = [scorer({**mid_age_male, "bmi": bmi}).score for bmi in (18, 22.9, 23, 27.4, 27.5, 40)]
        assert scores == sorted(scores)

    @pytest.mark.parametrize("flag", [
        "tobacco_use", "family_heart", "family_hypertension", "family_cholesterol",
        "family_thyroid", "history_diabetes", "history_bp", "history_autoimmune",
        "thyroid_symptoms", "neck_swelling",
    ])
    def test_yes_never_lowers(self, flag, mid_age_male):
        no = aggregate({**mid_age_male, flag: "no"})
        yes = aggregate({**mid_age_male, flag: "yes"})
        for condition in Condition:
            assert yes.scores[condition] >= no.scores[condition]

    ORDINAL_LADDERS = [
        ("diet_salt", ("low", "moderate", "high"), Condition.HYPERTENSION),
        ("stress_level", ("low", "moderate", "high"), Condition.HYPERTENSION),
        ("diet_fried", ("low", "moderate", "high"), Condition.DYSLIPIDEMIA),
        ("diet_sugar", ("low", "moderate", "high"), Condition.DIABETES),
        ("diet_vegetables", ("high", "moderate", "low"), Condition.DIABETES),
        ("alcohol", ("none", "occasional", "frequent"), Condition.HYPERTENSION),
        ("family_diabetes", ("none", "one", "both"), Condition.DIABETES),
        ("waist", ("low", "medium", "high"), Condition.DIABETES),
        ("waist", (70, 90, 91, 100, 101, 150), Condition.DIABETES),
    ]

    @pytest.mark.parametrize("field,ladder,target", ORDINAL_LADDERS)
    def test_ordinal_ladder(self, field, ladder, target, mid_age_male):
        results = [aggregate({**mid_age_male, field: value}) for value in ladder]
        for condition in Condition:
            scores = [result.scores[condition] for result in results]
            assert scores == sorted(scores), condition
        assert results[-1].scores[target] > results[0].scores[target]


class TestDiabetesScore:

    def test_age_brackets(self):
        assert score_diabetes({"age": 34}).score == 0
        assert score_diabetes({"age": 35}).score == 20
        assert score_diabetes({"age": 49}).score == 20
        assert score_diabetes({"age": 50}).score == 30

    def test_family_history(self):
        assert score_diabetes({"family_diabetes": "one"}).score == 10
        assert score_diabetes({"family_diabetes": "yes"}).score == 10
        assert score_diabetes({"family_diabetes": "both"}).score == 20
        assert score_diabetes({"family_diabetes": "none"}).score == 0

    def test_waist_bands_use_gender_cutoff(self):
        assert score_diabetes({"gender": "female", "waist": 85}).score == 10
        assert score_diabetes({"gender": "female", "waist": 95}).score == 20
        assert score_diabetes({"gender": "male", "waist": 85}).score == 0
        assert score_diabetes({"gender": "male", "waist": 100}).score == 10
        assert score_diabetes({"gender": "male", "waist": 101}).score == 20

    def test_diet_factors(self):
        assert score_diabetes({"diet_sugar": "high", "diet_vegetables": "low"}).score == 10

    def test_confidence_low_without_body_measurements(self):
        assert score_diabetes({"bmi": 24}).confidence == Confidence.LOW
        assert score_diabetes({"waist": 80}).confidence == Confidence.LOW

    def test_confidence_moderate_with_no_symptoms_set(self):
        answers = {
            "bmi": 24, "waist": 80,
            "symptom_thirst": "no", "symptom_urination": "no", "symptom_fatigue": "no",
        }
        assert score_diabetes(answers).confidence == Confidence.MODERATE

    def test_confidence_moderate_with_one_symptom_set(self):
        answers = {"bmi": 24, "waist": 80, "symptom_thirst": "no", "symptom_fatigue": "yes"}
        assert score_diabetes(answers).confidence == Confidence.MODERATE

    def test_confidence_high_with_two_symptoms_set(self):
        answers = {"bmi": 24, "waist": 80, "symptom_thirst": "yes", "symptom_fatigue": "yes"}
        assert score_diabetes(answers).confidence == Confidence.HIGH

    def test_missing_measurements_override_symptoms(self):
        answers = {"bmi": 24, "symptom_thirst": "yes", "symptom_urination": "yes", "symptom_fatigue": "yes"}
        assert score_diabetes(answers).confidence == Confidence.LOW


class TestOtherScores:

    def test_hypertension_factors(self):
        answers = {
            "age": 46, "bmi": 24, "family_hypertension": "yes",
            "diet_salt": "moderate", "stress_level": "high", "physical_activity": "moderate",
        }
        # 2 + 2 + 2 + 1 + 2 + 1
        assert score_hypertension(answers).score == 10
        assert score_hypertension(answers).confidence == Confidence.HIGH

    def test_hypertension_confidence(self):
        assert score_hypertension({"bmi": 24}).confidence == Confidence.LOW
        assert score_hypertension({"age": 40, "bmi": 24}).confidence == Confidence.MODERATE

    def test_hypertension_legacy_keys(self):
        answers = {"salt": "high", "stress": "high", "activity": "sedentary", "tobacco": "yes"}
        assert score_hypertension(answers).score == 7

    def test_cvd_male_bonus_needs_age(self):
        assert score_cvd({"gender": "male", "age": 44}).score == 2
        assert score_cvd({"gender": "male", "age": 45}).score == 6
        assert score_cvd({"gender": "female", "age": 45}).score == 4

    def test_cvd_confidence(self):
        assert score_cvd({"age": 50}).confidence == Confidence.LOW
        assert score_cvd({"age": 50, "bmi": 22}).confidence == Confidence.MODERATE
        full = {"age": 50, "bmi": 22, "tobacco_use": "no", "family_heart": "no"}
        assert score_cvd(full).confidence == Confidence.HIGH

    def test_dyslipidemia_factors(self):
        answers = {"age": 36, "bmi": 28, "diet_fried": "moderate", "family_cholesterol": "yes"}
        assert score_dyslipidemia(answers).score == 2 + 4 + 2 + 2

    def test_dyslipidemia_legacy_diet(self):
        assert score_dyslipidemia({"diet": "high_fat"}).score == 3

    def test_thyroid_confidence(self):
        assert score_thyroid({}).confidence == Confidence.LOW
        partial = {"thyroid_symptoms": "no", "family_thyroid": "no"}
        assert score_thyroid(partial).confidence == Confidence.MODERATE
        full = {**partial, "gender": "male", "neck_swelling": "no"}
        assert score_thyroid(full).confidence == Confidence.HIGH

    def test_malformed_values_score_zero(self):
        answers = {"age": "abc", "bmi": "n/a", "tobacco_use": "maybe", "physical_activity": 3}
        result = aggregate(answers)
        assert all(score == 0 for score in result.scores.values())
        assert result.confidence == Confidence.LOW

    def test_numeric_strings_are_parsed(self):
        assert score_hypertension({"age": "55", "bmi": "23.5"}).score == 5

    def test_accepts_answer_record(self, high_risk_male):
        record = AnswerRecord.from_dict(high_risk_male)
        assert score_diabetes(record) == score_diabetes(high_risk_male)


class TestClassifyRisk:

    @pytest.mark.parametrize("condition,score,expected", [
        (Condition.DIABETES, 0, RiskLevel.LOW),
        (Condition.DIABETES, 29, RiskLevel.LOW),
        (Condition.DIABETES, 30, RiskLevel.MODERATE),
        (Condition.DIABETES, 59, RiskLevel.MODERATE),
        (Condition.DIABETES, 60, RiskLevel.HIGH),
        (Condition.HYPERTENSION, 3, RiskLevel.LOW),
        (Condition.HYPERTENSION, 4, RiskLevel.MODERATE),
        (Condition.HYPERTENSION, 8, RiskLevel.HIGH),
        (Condition.CVD, 6, RiskLevel.LOW),
        (Condition.CVD, 7, RiskLevel.MODERATE),
        (Condition.CVD, 14, RiskLevel.HIGH),
        (Condition.DYSLIPIDEMIA, 5, RiskLevel.MODERATE),
        (Condition.DYSLIPIDEMIA, 10, RiskLevel.HIGH),
        (Condition.THYROID, 4, RiskLevel.LOW),
        (Condition.THYROID, 10, RiskLevel.HIGH),
    ])
    def test_boundaries(self, condition, score, expected):
        assert classify_risk(condition, score) == expected

    def test_cutoffs_strictly_increasing(self):
        for cutoffs in LEVEL_CUTOFFS.values():
            assert 0 < cutoffs.moderate_from < cutoffs.high_from <= cutoffs.max_score

    def test_accepts_names_and_aliases(self):
        assert classify_risk("diabetes", 65) == RiskLevel.HIGH
        assert classify_risk("Cardiovascular", 7) == RiskLevel.MODERATE

    def test_unknown_condition(self):
        with pytest.raises(UnknownConditionError):
            classify_risk("kidney", 5)
        with pytest.raises(ValueError):
            classify_risk("kidney", 5)

    def test_medium_reads_as_moderate(self):
        assert RiskLevel.from_string("Medium") == RiskLevel.MODERATE
        assert RiskLevel.from_string("high") == RiskLevel.HIGH


class TestAggregate:

    def test_idempotent(self, high_risk_male):
        assert aggregate(high_risk_male).to_dict() == aggregate(high_risk_male).to_dict()

    def test_does_not_mutate_input(self, high_risk_male):
        snapshot = dict(high_risk_male)
        aggregate(high_risk_male)
        assert high_risk_male == snapshot

    @pytest.mark.parametrize("answers", [
        {},
        {"age": 60, "bmi": 29, "waist": 100},
        {"age": 40, "bmi": 24, "waist": 80, "symptom_thirst": "yes", "symptom_urination": "yes",
         "diet_salt": "low", "stress_level": "low", "tobacco_use": "no", "family_heart": "no",
         "diet_fried": "low", "physical_activity": "high", "thyroid_symptoms": "no",
         "family_thyroid": "no", "gender": "male", "neck_swelling": "no"},
    ])
    def test_overall_confidence_is_minimum(self, answers):
        result = aggregate(answers)
        assert result.confidence == min(result.individual_confidence.values(), key=lambda c: c.rank)

    def test_fully_answered_is_high_confidence(self):
        answers = {
            "age": 40, "bmi": 24, "waist": 80, "symptom_thirst": "yes", "symptom_urination": "yes",
            "diet_salt": "low", "stress_level": "low", "tobacco_use": "no", "family_heart": "no",
            "diet_fried": "low", "physical_activity": "high", "thyroid_symptoms": "no",
            "family_thyroid": "no", "gender": "male", "neck_swelling": "no",
        }
        assert aggregate(answers).confidence == Confidence.HIGH

    def test_recommendations_match_levels(self, high_risk_male):
        result = aggregate(high_risk_male)

        elevated = [c for c, level in result.levels.items() if level != RiskLevel.LOW]
        assert [r.condition for r in result.recommendations] == [c for c in Condition if c in elevated]
        for rec in result.recommendations:
            expected = "urgent" if result.levels[rec.condition] == RiskLevel.HIGH else "moderate"
            assert rec.priority == expected

    def test_to_dict_contract(self, high_risk_male):
        data = aggregate(high_risk_male).to_dict()

        keys = {"diabetes", "hypertension", "cvd", "dyslipidemia", "thyroid"}
        assert set(data["scores"]) == keys
        assert set(data["levels"]) == keys
        assert data["confidence"] in ("low", "moderate", "high")
        assert data["levels"]["diabetes"] == "High"
        assert {"condition": "diabetes", "priority": "urgent"}.items() <= data["recommendations"][0].items()

    def test_engine_facade(self, high_risk_male):
        engine = RiskEngine()
        assert engine.assess(high_risk_male).to_dict() == aggregate(high_risk_male).to_dict()
        assert engine.classify("thyroid", 12) == RiskLevel.HIGH
