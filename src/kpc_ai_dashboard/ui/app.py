from __future__ import annotations

import time
import traceback
from typing import List, Optional

import logging

import pandas as pd
import plotly.express as px
import streamlit as st

from kpc_ai_dashboard.config import APP_NAME, APP_VERSION, CSV_CACHE_TTL_SECONDS
from kpc_ai_dashboard.core.data_loader import DataLoaderError, SurveySnapshot, timed_load_survey_snapshot
from kpc_ai_dashboard.core.insights import (
    CONNECTION_FAILED_MESSAGE,
    EMPTY_RESULT_MESSAGE,
    handle_insights_request,
)
from kpc_ai_dashboard.core.query_engine import (
    DashboardView,
    GroupStats,
    ToolUsage,
    build_dashboard,
)
from kpc_ai_dashboard.core.schema import (
    CODING_QUESTION,
    CONVERSATIONAL_QUESTION,
    IMAGE_QUESTION,
    ROOKIE_LABEL,
    VETERAN_LABEL,
    ToolQuestion,
)

logger = logging.getLogger(__name__)

COLORS = {
    ROOKIE_LABEL: "#6366f1",
    VETERAN_LABEL: "#10b981",
}
PIE_COLORS = ["#6366f1", "#8b5cf6", "#ec4899", "#f59e0b", "#10b981", "#3b82f6"]

INSIGHTS_KEY = "insights_text"


@st.cache_data(ttl=CSV_CACHE_TTL_SECONDS, show_spinner=False)
def _cached_snapshot() -> SurveySnapshot:
    snapshot, elapsed = timed_load_survey_snapshot()
    logger.info("Survey sheet loaded in %0.2fs (%d responses)", elapsed, len(snapshot))
    return snapshot


def _tool_frame(rows: List[ToolUsage]) -> pd.DataFrame:
    return pd.DataFrame.from_records([r.to_record() for r in rows])


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _render_header(snapshot: SurveySnapshot) -> None:
    st.title("AI, 어디까지 써봤니?")
    st.caption(f"{APP_NAME} · KPC 직원 AI 활용 현황 실시간 대시보드 📊 (v{APP_VERSION})")

    col1, col2 = st.columns([1, 4])
    with col1:
        if st.button("🔄 새로고침"):
            _cached_snapshot.clear()
            st.rerun()
    with col2:
        st.write(f"마지막 업데이트: {snapshot.loaded_at.strftime('%H:%M:%S')}")


def _render_summary_cards(stats: GroupStats) -> None:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("총 응답자", f"{stats.total}명")
    c2.metric("신입사원", f"{stats.rookie}명", f"{stats.rookie_percent}%", delta_color="off")
    c3.metric("기존직원", f"{stats.veteran}명", f"{stats.veteran_percent}%", delta_color="off")
    c4.metric("유료 결제율", f"{stats.paid_rate_overall}%", "전체 응답자 기준", delta_color="off")


def _render_tool_chart(question: ToolQuestion, rows: List[ToolUsage], stats: GroupStats, horizontal: bool = False) -> None:
    st.subheader(question.title)
    if not rows:
        st.info("해당 문항 데이터가 없습니다.")
        return

    df = _tool_frame(rows)
    long_df = df.melt(id_vars="name", value_vars=[ROOKIE_LABEL, VETERAN_LABEL], var_name="group", value_name="percent")
    long_df["group"] = long_df["group"].map(
        {ROOKIE_LABEL: f"{ROOKIE_LABEL} (n={stats.rookie})", VETERAN_LABEL: f"{VETERAN_LABEL} (n={stats.veteran})"}
    )

    if horizontal:
        fig = px.bar(long_df, y="name", x="percent", color="group", barmode="group", orientation="h",
                     color_discrete_sequence=[COLORS[ROOKIE_LABEL], COLORS[VETERAN_LABEL]])
        fig.update_xaxes(range=[0, 100], ticksuffix="%")
    else:
        fig = px.bar(long_df, x="name", y="percent", color="group", barmode="group",
                     color_discrete_sequence=[COLORS[ROOKIE_LABEL], COLORS[VETERAN_LABEL]])
        fig.update_yaxes(range=[0, 100], ticksuffix="%")
    fig.update_layout(legend_title_text="", xaxis_title="", yaxis_title="")
    st.plotly_chart(fig, use_container_width=True)


def _render_tenure(view: DashboardView) -> None:
    st.subheader("💳 년차별 유료 결제율 & 평균 결제액")
    if not view.tenure:
        st.info("결제 금액 문항 데이터가 없습니다.")
        return

    df = pd.DataFrame.from_records([t.to_record() for t in view.tenure])
    col1, col2 = st.columns(2)
    with col1:
        fig = px.bar(df, x="tenure", y="paidRate", text="paidRate", hover_data=["fullTenure", "count"],
                     color_discrete_sequence=[PIE_COLORS[1]])
        fig.update_yaxes(range=[0, 100], ticksuffix="%", title="")
        fig.update_xaxes(title="")
        st.plotly_chart(fig, use_container_width=True)
    with col2:
        fig = px.bar(df, x="tenure", y="avgPayment", text="avgPayment", hover_data=["fullTenure", "count"],
                     color_discrete_sequence=[PIE_COLORS[3]])
        fig.update_yaxes(ticksuffix="만원", title="")
        fig.update_xaxes(title="")
        st.plotly_chart(fig, use_container_width=True)


def _render_distributions(view: DashboardView) -> None:
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("🎓 전공 분포")
        if view.majors:
            df = pd.DataFrame({"name": [m.name for m in view.majors], "value": [m.value for m in view.majors]})
            fig = px.pie(df, names="name", values="value", color_discrete_sequence=PIE_COLORS)
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("전공 문항 데이터가 없습니다.")
    with col2:
        st.subheader("💰 월 결제 금액 분포")
        if view.payments:
            df = pd.DataFrame({"name": [p.name for p in view.payments], "value": [p.value for p in view.payments]})
            fig = px.bar(df, x="name", y="value", text="value", color_discrete_sequence=[PIE_COLORS[0]])
            fig.update_layout(xaxis_title="", yaxis_title="명")
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("결제 금액 문항 데이터가 없습니다.")


def _render_conversion(view: DashboardView) -> None:
    st.subheader("🔁 AI 도구별 유료 전환율")
    if not view.conversion:
        st.info("유료 전환 데이터가 없습니다. (도구별 사용자 3명 이상부터 표시)")
        return

    cols = st.columns(len(view.conversion))
    for col, group in zip(cols, view.conversion):
        with col:
            st.markdown(f"**{group.category}**")
            df = pd.DataFrame.from_records(
                [{"도구": r.name, "사용자": r.users, "유료": r.paid, "전환율(%)": r.rate} for r in group.data]
            )
            st.dataframe(df, use_container_width=True, hide_index=True)


def _render_pain_points(view: DashboardView) -> None:
    st.subheader("😩 가장 귀찮은 업무 TOP 5")
    pain = view.pain_points
    if not pain.top:
        st.info("주관식 응답이 아직 없습니다.")
    else:
        df = pd.DataFrame({"category": [p.category for p in pain.top], "count": [p.count for p in pain.top]})
        fig = px.bar(df, y="category", x="count", orientation="h", text="count",
                     color_discrete_sequence=[PIE_COLORS[2]])
        fig.update_layout(yaxis={"categoryorder": "total ascending"}, xaxis_title="", yaxis_title="")
        st.plotly_chart(fig, use_container_width=True)

    if pain.all_answers:
        with st.expander(f"전체 응답 보기 ({len(pain.all_answers)}건)", expanded=False):
            for answer in pain.all_answers:
                st.write(f"- {answer}")


def _request_insights(view: DashboardView) -> str:
    payload = {
        "stats": view.stats.to_payload(),
        "chartData": [r.to_record() for r in view.tool_charts.get(CONVERSATIONAL_QUESTION.key, [])],
        "paidRatio": view.stats.paid_rate_overall,
        "yearlyPaid": [t.to_record() for t in view.tenure],
    }
    try:
        result = handle_insights_request(payload)
    except Exception:
        logger.exception("Insight request failed")
        return CONNECTION_FAILED_MESSAGE
    return result.insights or EMPTY_RESULT_MESSAGE


def _render_insights(view: DashboardView) -> None:
    st.subheader("✨ Gemini AI 인사이트")
    if st.button("AI 인사이트 생성", key="generate_insights_btn"):
        with st.spinner("Gemini가 분석 중입니다..."):
            t0 = time.perf_counter()
            st.session_state[INSIGHTS_KEY] = _request_insights(view)
            logger.info("Insights generated in %0.2fs", time.perf_counter() - t0)

    text: Optional[str] = st.session_state.get(INSIGHTS_KEY)
    if text:
        st.markdown(text)


def _render_load_error(err: Exception) -> None:
    st.error(f"⚠️ {err}")
    if st.button("다시 시도", key="retry_load_btn"):
        _cached_snapshot.clear()
        st.rerun()
    with st.expander("Traceback (developer view)", expanded=False):
        st.text_area("Traceback", value=traceback.format_exc(), height=220)


def run_app() -> None:
    st.set_page_config(page_title=APP_NAME, page_icon="🎯", layout="wide")

    try:
        with st.spinner("데이터를 불러오는 중..."):
            snapshot = _cached_snapshot()
    except DataLoaderError as err:
        _render_load_error(err)
        return

    view = build_dashboard(snapshot)

    _render_header(snapshot)
    _render_summary_cards(view.stats)

    _render_tool_chart(CONVERSATIONAL_QUESTION, view.tool_charts[CONVERSATIONAL_QUESTION.key], view.stats)
    col1, col2 = st.columns(2)
    with col1:
        _render_tool_chart(CODING_QUESTION, view.tool_charts[CODING_QUESTION.key], view.stats, horizontal=True)
    with col2:
        _render_tool_chart(IMAGE_QUESTION, view.tool_charts[IMAGE_QUESTION.key], view.stats, horizontal=True)

    _render_tenure(view)
    _render_distributions(view)
    _render_conversion(view)
    _render_pain_points(view)
    _render_insights(view)
