import logging

import streamlit as st

from display import (
    MEDAL_ICONS, export_history_csv, export_standings_csv,
    medal, score_color, score_table, standings_rows,
)
from nerts import MIN_PLAYERS, GameSession, NertsError, parse_score
from storage import JsonFileStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ---------- State ----------

def load_state():
    if "session" in st.session_state:
        return
    st.session_state.session = GameSession.load(JsonFileStore())

def run(action, *args):
    """Apply one session operation, reporting engine errors inline."""
    try:
        action(*args)
    except NertsError as exc:
        st.error(str(exc))
        return False
    return True

# ---------- UI ----------

st.set_page_config(page_title="Nerts Scorekeeper", page_icon="🃏", layout="wide")
st.title("NERTS.PRO")

load_state()
session: GameSession = st.session_state.session
state = session.state

with st.sidebar:
    st.header("Players")

    if not state.is_in_progress:
        with st.form("add_player_form", clear_on_submit=True):
            name = st.text_input("Add player")
            submitted = st.form_submit_button("Add Player")
            if submitted and name.strip():
                if run(session.add_player, name):
                    st.rerun()

    # Reset section
    if st.button("Reset All", use_container_width=True):
        st.session_state.show_reset_confirm = True

    if st.session_state.get("show_reset_confirm", False):
        st.warning("Are you sure you want to forget every player and score (this can't be undone)?")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("✅ Yes", use_container_width=True):
                st.session_state.show_reset_confirm = False
                if run(session.reset):
                    st.rerun()
        with c2:
            if st.button("❌ Cancel", use_container_width=True):
                st.session_state.show_reset_confirm = False
                st.rerun()

    st.divider()

    if state.players:
        if state.is_in_progress:
            st.info("Game in progress — players are locked until the next game.")
        for idx, p in enumerate(state.players):
            row_left, row_right = st.columns([8, 2])
            with row_left:
                st.write(p.name)
            with row_right:
                if st.button("🗑️", key=f"del_{p.id}", disabled=state.is_in_progress, help="Remove player"):
                    if run(session.remove_player, idx):
                        st.rerun()
    else:
        st.info("No players yet — add some above.")

# --- Setup ---
if not state.is_in_progress:
    st.subheader("New game")
    st.write(f"Players: **{len(state.players)}** — first to **{state.first_to}** wins.")
    if len(state.players) < MIN_PLAYERS:
        st.caption(f"Add at least {MIN_PLAYERS} players to start.")
    if st.button("START GAME", use_container_width=True, disabled=not session.can_start()):
        if run(session.start_game):
            st.rerun()

# --- Scores ---
else:
    game_over = session.is_game_over()

    header = st.columns(max(len(state.players), 1))
    for idx, col in enumerate(header[:len(state.players)]):
        with col:
            icon = ""
            if game_over:
                m = medal(session.placement(idx))
                icon = MEDAL_ICONS[m] + " " if m else ""
            st.markdown(f"### {icon}{session.unique_prefix(idx)}")
            st.metric("Total", session.player_sum(idx), label_visibility="collapsed")

    focused = state.focused
    for round_idx, rnd in enumerate(state.scores):
        cols = st.columns(max(len(rnd), 1))
        for player_idx, val in enumerate(rnd):
            with cols[player_idx]:
                if focused == (round_idx, player_idx):
                    with st.form(f"score_{round_idx}_{player_idx}", clear_on_submit=True):
                        text = st.text_input(
                            "score",
                            value="" if val is None else str(val),
                            key=f"in_{round_idx}_{player_idx}",
                            label_visibility="collapsed",
                        )
                        if st.form_submit_button("Enter", use_container_width=True):
                            try:
                                score = parse_score(text)
                            except NertsError as exc:
                                st.error(str(exc))
                            else:
                                if run(session.enter_score, round_idx, player_idx, score):
                                    st.rerun()
                elif val is None:
                    st.markdown("--")
                else:
                    color = score_color(val, state.negative_size, state.deck_size)
                    c1, c2 = st.columns([3, 1])
                    with c1:
                        st.markdown(
                            f"<span class='score' style='color: {color}'>{val}</span>",
                            unsafe_allow_html=True,
                        )
                    with c2:
                        if st.button("✏️", key=f"edit_{round_idx}_{player_idx}", help="Correct this score"):
                            if run(session.edit_score, round_idx, player_idx):
                                st.rerun()

    if game_over:
        winner = state.players[session.leaderboard[0]]
        st.success(f"{winner.name} wins with {state.player_sum(session.leaderboard[0])}!")

    if st.button("NEW GAME", use_container_width=True):
        if run(session.new_game):
            st.rerun()

# --- Standings ---
st.subheader("Standings")
if state.players:
    st.dataframe(standings_rows(session), hide_index=True, use_container_width=True)
    if state.scores:
        with st.expander("Score sheet"):
            st.dataframe(score_table(state), use_container_width=True)
else:
    st.info("Add players to begin.")

with st.expander("📤 Export Data"):
    st.download_button("📥 Score History CSV", export_history_csv(state), "nerts_history.csv", "text/csv")
    st.download_button("📊 Standings CSV", export_standings_csv(session), "nerts_standings.csv", "text/csv")
