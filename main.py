from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

from screening.app_services import configure_logging, load_settings
from screening.form_state import FormState
from screening.thyroid import engine


NOT_RATED_COLOR = "#cbd5e1"


def _to_widget_key(name: str) -> str:
    return f"input_{name}"


def _validate_inputs(inputs):
    required = {"type", "name", "label", "unit", "help", "options"}
    for item in inputs:
        missing = required - set(item.keys())
        if missing:
            st.warning(f"Input '{item.get('name', 'unknown')}' missing keys: {', '.join(sorted(missing))}")
        if item.get("type") == "radio" and not item.get("options"):
            st.warning(f"Radio input '{item.get('name', 'unknown')}' needs 'options'.")


def _severity_badge(label):
    color = engine.severity_color(label)
    return (
        f'<span style="background:{color}22;color:{color};border:1px solid {color}55;'
        f'padding:2px 10px;border-radius:12px;font-size:0.85em;font-weight:600;">{label}</span>'
    )


def _render_radio(item):
    widget_key = _to_widget_key(item["name"])
    choice = st.radio(
        item["label"],
        item["options"],
        index=None,
        horizontal=True,
        key=widget_key,
        help=item.get("help", ""),
    )
    if choice is not None:
        st.markdown(_severity_badge(choice), unsafe_allow_html=True)
    return choice


def _severity_color_scale():
    domain = list(engine.SEVERITY_SCORES.keys()) + ["Not rated"]
    colors = [engine.severity_color(label) for label in engine.SEVERITY_SCORES] + [NOT_RATED_COLOR]
    return alt.Scale(domain=domain, range=colors)


def _render_result_block(result):
    diagnosis = result.get("diagnosis", False)
    border = "#fecaca" if diagnosis else "#bbf7d0"
    background = "#fef2f2" if diagnosis else "#f0fdf4"
    icon = "⚠️" if diagnosis else "✅"

    st.markdown(
        f"""<div style="border:1px solid {border}; background:{background}; padding:14px 18px;
        border-radius:8px; margin-top:12px;">
        <div style="font-size:1.15em; font-weight:600;">{icon} {result.get('headline', '')}</div>
        <div style="margin-top:6px; color:#4b5563;">Analysis Accuracy: {result.get('accuracy_percent', 0.0):.1f}%</div>
        <div style="margin-top:6px; color:#4b5563;">{result.get('recommendation', '')}</div>
        </div>""",
        unsafe_allow_html=True,
    )

    m1, m2, m3 = st.columns(3)
    with m1:
        st.metric(label="Analysis Accuracy", value=f"{result.get('accuracy_percent', 0.0):.1f}%")
    with m2:
        st.metric(label="Weighted Severity", value=f"{result.get('risk_percentage', 0.0)}%")
    with m3:
        st.metric(label="Symptoms Rated", value=f"{result.get('answered', 0)}/{len(engine.SYMPTOMS)}")

    with st.expander("📝 How this result was reached"):
        st.caption(result.get("reasoning", ""))
        trace_df = pd.DataFrame(result.get("rule_trace", []))
        if not trace_df.empty:
            st.dataframe(trace_df, width="stretch")


def _render_explanation():
    st.subheader("How the Score Works")
    st.markdown(
        "Each rated symptom contributes its severity score multiplied by its importance weight. "
        "The sum is divided by the highest possible weighted score, giving a value between 0 and 1."
    )
    st.markdown(
        f"- At least **{engine.MIN_ANSWERS}** symptoms must be rated before any result is produced.\n"
        f"- A weighted severity of **{engine.DIAGNOSIS_THRESHOLD * 100:.0f}%** or more is reported "
        "as a potential thyroid condition.\n"
        f"- The accuracy figure is {engine.ACCURACY_BASE:.0f}% plus up to {engine.ACCURACY_SPAN:.0f}% "
        "depending on how many symptoms were rated. It is a fixed heuristic, not a statistical estimate."
    )

    st.markdown("#### Severity Scores")
    severity_df = pd.DataFrame(
        [{"Severity": label, "Score": value} for label, value in engine.SEVERITY_SCORES.items()]
    )
    severity_chart = (
        alt.Chart(severity_df)
        .mark_bar(cornerRadiusEnd=4)
        .encode(
            x=alt.X("Score:Q", scale=alt.Scale(domain=[0, 1])),
            y=alt.Y("Severity:N", sort=list(engine.SEVERITY_SCORES.keys())),
            color=alt.Color("Severity:N", scale=_severity_color_scale(), legend=None),
            tooltip=["Severity", "Score"],
        )
    )
    st.altair_chart(severity_chart, width="stretch")

    st.markdown("#### Symptom Weights")
    weights_df = pd.DataFrame(
        [{"Symptom": engine.humanize_name(s["name"]), "Weight": s["weight"]} for s in engine.SYMPTOMS]
    )
    st.dataframe(weights_df, width="stretch")

    st.markdown("#### Accuracy by Number of Rated Symptoms")
    curve_df = engine.accuracy_curve()
    curve_chart = (
        alt.Chart(curve_df)
        .mark_line(point=alt.OverlayMarkDef(size=50, filled=True), interpolate="step-after")
        .encode(
            x=alt.X("Answered:O", title="Symptoms rated"),
            y=alt.Y("Accuracy (%):Q", scale=alt.Scale(domain=[0, 100])),
            tooltip=["Answered", "Accuracy (%)"],
        )
    )
    st.altair_chart(curve_chart, width="stretch")


def _render_impact(answers):
    st.subheader("How Each Symptom Contributes")
    if not answers:
        st.info("Rate symptoms in the Assessment tab to see their contributions here.")
        return

    contribution_df = engine.input_contributions(answers)
    bars = (
        alt.Chart(contribution_df)
        .mark_bar()
        .encode(
            x=alt.X("Contribution:Q", scale=alt.Scale(domain=[0, 1])),
            y=alt.Y("Symptom:N", sort="-x"),
            color=alt.Color("Severity:N", scale=_severity_color_scale()),
            tooltip=["Symptom", "Severity", "Severity Score", "Weight", "Contribution"],
        )
    )
    st.altair_chart(bars, width="stretch")
    st.dataframe(contribution_df, width="stretch")

    weighted = engine.normalized_score(answers) * 100
    gauge_df = pd.DataFrame(
        {"Measure": ["Weighted severity"], "Value": [round(weighted, 1)], "Threshold": [engine.DIAGNOSIS_THRESHOLD * 100]}
    )
    gauge = (
        alt.Chart(gauge_df)
        .mark_bar(cornerRadiusEnd=4)
        .encode(
            x=alt.X("Value:Q", title="Weighted severity (%)", scale=alt.Scale(domain=[0, 100])),
            y=alt.Y("Measure:N", title=None),
            tooltip=[alt.Tooltip("Value:Q", format=".1f")],
        )
    )
    threshold = (
        alt.Chart(gauge_df)
        .mark_rule(color="#e74c3c", strokeDash=[5, 5], strokeWidth=2)
        .encode(x="Threshold:Q")
    )
    st.altair_chart(gauge + threshold, width="stretch")


settings = load_settings()
configure_logging(settings["log_level"])

st.set_page_config(page_title=settings["page_title"], layout="centered")

st.markdown(f"<h1 style='text-align: center;'>🩺 {settings['page_title']}</h1>", unsafe_allow_html=True)

form = FormState(st.session_state)
input_schema = engine.get_inputs()
_validate_inputs(input_schema)

assessment_tab, explanation_tab, impact_tab = st.tabs([
    "Assessment",
    "Explanation",
    "Input Impact",
])

with assessment_tab:
    st.subheader("Thyroid Condition Assessment")
    st.write(
        "Please rate your symptoms to help us assess the likelihood of a thyroid condition. "
        f"For accurate results, please rate at least {engine.MIN_ANSWERS} symptoms."
    )

    for item in input_schema:
        choice = _render_radio(item)
        if choice is not None:
            form.set_answer(item["name"], choice)
        st.divider()

    for problem in engine.validate_answers(form.answers):
        st.warning(problem)

    if st.button(
        form.submit_label,
        key="submit_btn",
        type="primary",
        disabled=not form.can_submit,
        width="stretch",
    ):
        if form.begin_submit():
            st.rerun()

    if form.in_flight:
        with st.spinner("Analyzing..."):
            form.complete_submit(settings["submit_delay_seconds"])
        st.rerun()

    if form.result:
        _render_result_block(form.result)

with explanation_tab:
    _render_explanation()

with impact_tab:
    _render_impact(form.answers)

st.markdown("---")
st.markdown(
    "<div style='font-size:12px;color:#94a3b8;text-align:center;'>Disclaimer: This tool is for informational "
    "purposes only and should not be used as a substitute for professional medical advice.</div>",
    unsafe_allow_html=True,
)
