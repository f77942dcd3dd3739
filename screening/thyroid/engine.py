"""
Thyroid symptom screening engine.
Implements get_inputs() and run_inference(user_data) on top of a weighted-average
severity score.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Mapping, Sequence

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


MIN_ANSWERS = 4
DIAGNOSIS_THRESHOLD = 0.4
ACCURACY_BASE = 85.0
ACCURACY_SPAN = 10.0

SYMPTOMS = [
    {
        "name": "fatigue",
        "weight": 0.8,
        "options": ["None", "Mild", "Moderate", "Severe"],
        "help": "Tiredness that does not go away with rest.",
    },
    {
        "name": "weightGain",
        "weight": 0.9,
        "options": ["None", "Slight", "Moderate", "Significant"],
        "help": "Unexplained weight gain over recent months.",
    },
    {
        "name": "coldSensitivity",
        "weight": 0.85,
        "options": ["None", "Mild", "Moderate", "Severe"],
        "help": "Feeling cold when others are comfortable.",
    },
    {
        "name": "drySkin",
        "weight": 0.7,
        "options": ["None", "Mild", "Moderate", "Severe"],
        "help": "Rough, flaky or itchy skin.",
    },
    {
        "name": "hairLoss",
        "weight": 0.75,
        "options": ["None", "Mild", "Moderate", "Severe"],
        "help": "Thinning hair or more hair shedding than usual.",
    },
    {
        "name": "depression",
        "weight": 0.6,
        "options": ["None", "Mild", "Moderate", "Severe"],
        "help": "Low mood or loss of interest in daily activities.",
    },
]

SEVERITY_SCORES = {
    "None": 0.0,
    "Mild": 0.33,
    "Slight": 0.33,
    "Moderate": 0.66,
    "Severe": 1.0,
    "Significant": 1.0,
}

# Colours are keyed by score so aliased labels always render alike.
SCORE_COLORS = {
    0.0: "#22c55e",
    0.33: "#eab308",
    0.66: "#f97316",
    1.0: "#ef4444",
}
DEFAULT_COLOR = "#3b82f6"


def humanize_name(name):
    """Turn a camelCase symptom name into a display label ('weightGain' -> 'Weight Gain')."""
    return re.sub(r"([A-Z])", r" \1", name).strip().title()


def severity_color(label):
    return SCORE_COLORS.get(SEVERITY_SCORES.get(label), DEFAULT_COLOR)


def get_inputs():
    return [
        {
            "type": "radio",
            "name": symptom["name"],
            "label": humanize_name(symptom["name"]),
            "unit": "",
            "help": symptom["help"],
            "options": list(symptom["options"]),
        }
        for symptom in SYMPTOMS
    ]


def validate_answers(answers, catalog=SYMPTOMS, severity_table=SEVERITY_SCORES):
    options_by_name = {symptom["name"]: symptom["options"] for symptom in catalog}
    problems = []
    for name, label in answers.items():
        if name not in options_by_name:
            problems.append(f"Unknown symptom '{name}'.")
            continue
        if label not in severity_table:
            problems.append(f"'{label}' has no severity score (symptom '{name}').")
        elif label not in options_by_name[name]:
            problems.append(f"'{label}' is not an option for symptom '{name}'.")
    return problems


def weighted_totals(answers, catalog=SYMPTOMS, severity_table=SEVERITY_SCORES):
    total_score = 0.0
    max_possible_score = 0.0
    filled = 0
    for symptom in catalog:
        selected = answers.get(symptom["name"])
        if selected:
            filled += 1
            total_score += severity_table[selected] * symptom["weight"]
        max_possible_score += symptom["weight"]
    return total_score, max_possible_score, filled


def normalized_score(
    answers: Mapping[str, str],
    catalog: Sequence[Dict] = SYMPTOMS,
    severity_table: Mapping[str, float] = SEVERITY_SCORES,
) -> float:
    total_score, max_possible_score, _ = weighted_totals(answers, catalog, severity_table)
    if max_possible_score == 0:
        return 0.0
    return total_score / max_possible_score


def score(
    answers: Mapping[str, str],
    catalog: Sequence[Dict] = SYMPTOMS,
    severity_table: Mapping[str, float] = SEVERITY_SCORES,
) -> Dict:
    """
    Weighted-average risk score.

    Returns {"diagnosis": bool, "accuracy_percent": float}. Fewer than
    MIN_ANSWERS rated symptoms always yields {False, 0.0}.
    """
    total_score, max_possible_score, filled = weighted_totals(answers, catalog, severity_table)

    if filled < MIN_ANSWERS:
        logger.debug("Only %d of %d symptoms rated, skipping score", filled, len(catalog))
        return {"diagnosis": False, "accuracy_percent": 0.0}

    normalized = total_score / max_possible_score
    coverage = filled / len(catalog)
    accuracy = ACCURACY_BASE + coverage * ACCURACY_SPAN

    logger.debug("Normalized score %.4f with coverage %.2f", normalized, coverage)
    return {
        "diagnosis": normalized >= DIAGNOSIS_THRESHOLD,
        "accuracy_percent": accuracy,
    }


def input_contributions(answers, catalog=SYMPTOMS, severity_table=SEVERITY_SCORES):
    rows = []
    for symptom in catalog:
        selected = answers.get(symptom["name"])
        severity = severity_table[selected] if selected else 0.0
        rows.append(
            {
                "Symptom": humanize_name(symptom["name"]),
                "Severity": selected or "Not rated",
                "Severity Score": severity,
                "Weight": symptom["weight"],
                "Contribution": round(severity * symptom["weight"], 3),
            }
        )
    return pd.DataFrame(rows).sort_values("Contribution", ascending=False, kind="stable")


def accuracy_curve(catalog=SYMPTOMS):
    size = len(catalog)
    answered = np.arange(0, size + 1)
    accuracy = np.where(
        answered >= MIN_ANSWERS,
        ACCURACY_BASE + (answered / size) * ACCURACY_SPAN,
        0.0,
    )
    return pd.DataFrame({"Answered": answered, "Accuracy (%)": np.round(accuracy, 2)})


def _rule_trace(answers):
    trace = []
    for symptom in SYMPTOMS:
        selected = answers.get(symptom["name"])
        if not selected:
            continue
        strength = SEVERITY_SCORES[selected] * symptom["weight"]
        if strength <= 0:
            continue
        trace.append(
            {
                "rule": f"IF {humanize_name(symptom['name'])} is {selected} THEN thyroid risk increases",
                "strength": round(strength, 2),
            }
        )
    return sorted(trace, key=lambda item: item["strength"], reverse=True)


def run_inference(user_data: Dict) -> Dict:
    answers = {name: label for name, label in user_data.items() if label}
    result = score(answers)
    _, _, answered = weighted_totals(answers)
    weighted = normalized_score(answers)

    if answered < MIN_ANSWERS:
        headline = "Not enough answers"
        recommendation = f"Please rate at least {MIN_ANSWERS} symptoms for an assessment."
        reasoning = f"Only {answered} of {len(SYMPTOMS)} symptoms were rated."
    else:
        if result["diagnosis"]:
            headline = "Potential Thyroid Condition Detected"
            recommendation = "Please consult with a healthcare professional for a proper medical evaluation."
        else:
            headline = "No Thyroid Condition Detected"
            recommendation = (
                "Your symptoms suggest normal thyroid function, but consult a doctor if symptoms persist."
            )
        reasoning = (
            f"{answered} of {len(SYMPTOMS)} symptoms rated. Weighted severity is "
            f"{weighted * 100:.1f}% of the maximum against a {DIAGNOSIS_THRESHOLD * 100:.0f}% threshold."
        )

    logger.info("Thyroid screening finished: diagnosis=%s answered=%d", result["diagnosis"], answered)
    return {
        "diagnosis": result["diagnosis"],
        "accuracy_percent": result["accuracy_percent"],
        "normalized_score": weighted,
        "risk_percentage": round(weighted * 100, 1),
        "answered": answered,
        "headline": headline,
        "recommendation": recommendation,
        "reasoning": reasoning,
        "rule_trace": _rule_trace(answers),
    }
