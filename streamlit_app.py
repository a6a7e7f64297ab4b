import streamlit as st
import pandas as pd

from backend.engine import LeaderboardProcessor
from backend.storage import StorageError
from series_config import TEAM_NAMES, TOTAL_MATCHES

# --- Page Config ---
st.set_page_config(page_title="Ashes Predictions 2025", page_icon="🏏", layout="wide")

processor = LeaderboardProcessor.from_config()


def load_leaderboard():
    """Ranked participants plus the documents they were scored against (JSON-ready dicts).

    Recomputed on every rerun so a fresh series-stats.json shows up immediately.
    """
    leaderboard, series, stats = processor.calculate_leaderboard()
    return (
        [row.to_json_dict() for row in leaderboard],
        series.to_json_dict(),
        stats.to_json_dict(),
    )


def tick(flag):
    return "✅" if flag else ""


def show_leaderboard(rows, series):
    score = series.get('seriesScore', {})
    completed = score.get('england', 0) + score.get('australia', 0) + score.get('draw', 0)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("England", score.get('england', 0))
    col2.metric("Australia", score.get('australia', 0))
    col3.metric("Drawn", score.get('draw', 0))
    col4.metric("Tests decided", f"{completed}/{TOTAL_MATCHES}")

    if not rows:
        st.info("No participants yet.")
        return

    table = pd.DataFrame([{
        "Rank": r['rank'],
        "Name": r['name'],
        "Points": r['totalPoints'],
        "Series": f"{r['seriesScore']} {r['seriesWinner']}",
        "ENG Runs": f"{r['leadRunScorerEng']} {tick(r['correctEngRunScorer'])}",
        "ENG Wkts": f"{r['leadWktTakerEng']} {tick(r['correctEngWktTaker'])}",
        "AUS Runs": f"{r['leadRunScorerAus']} {tick(r['correctAusRunScorer'])}",
        "AUS Wkts": f"{r['leadWktTakerAus']} {tick(r['correctAusWktTaker'])}",
        "Tiebreaker": r['tiebreaker'],
        "Diff": r['tiebreakerDiff'],
    } for r in rows])
    st.dataframe(table, hide_index=True, use_container_width=True)


def show_stats(stats):
    st.caption(f"Last updated: {stats.get('lastUpdated') or 'never'}")
    if stats.get('actualTiebreaker') is not None:
        st.metric("Tiebreaker (1st innings, 1st Test)", stats['actualTiebreaker'])

    for team, team_name in TEAM_NAMES.items():
        st.subheader(team_name)
        col_runs, col_wkts = st.columns(2)
        with col_runs:
            st.markdown("**Top run scorers**")
            entries = stats.get('topRunScorers', {}).get(team, [])
            st.table(pd.DataFrame(entries, columns=['name', 'value']).rename(columns={'name': 'Player', 'value': 'Runs'}))
        with col_wkts:
            st.markdown("**Top wicket takers**")
            entries = stats.get('topWicketTakers', {}).get(team, [])
            st.table(pd.DataFrame(entries, columns=['name', 'value']).rename(columns={'name': 'Player', 'value': 'Wickets'}))


def show_rules():
    rules = processor.calculator.rules()
    st.subheader("Scoring System")
    for line in rules['scoring']:
        st.markdown(f"- {line}")
    st.markdown(f"Maximum: **{rules['max_points']} points**")
    st.subheader("Tiebreaker")
    st.write(rules['tiebreaker'])


st.title("ASHES PREDICTIONS 2025")
st.write("Good luck. 🤞🏏💰")

try:
    rows, series, stats = load_leaderboard()
except StorageError as e:
    st.error(f"Could not load series data: {e}")
    st.stop()

tab_board, tab_stats, tab_rules = st.tabs(["🏆 Leaderboard", "📊 Stats", "📜 Rules & Info"])
with tab_board:
    show_leaderboard(rows, series)
with tab_stats:
    show_stats(stats)
with tab_rules:
    show_rules()
