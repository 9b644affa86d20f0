import pandas as pd

from nerts import GameSession, State, unique_prefix

MEDALS = {0: "gold", 1: "silver", 2: "bronze"}
MEDAL_ICONS = {"gold": "🥇", "silver": "🥈", "bronze": "🥉"}

# red -> green -> light blue, low scores to high
GRADIENT = [(255, 0, 0), (0, 255, 0), (0, 212, 255)]


def medal(place: int) -> str | None:
    return MEDALS.get(place)


def score_color(value: int, negative_size: int, deck_size: int) -> str:
    """Hex colour for a round score; -negative_size is red, a full deck is blue."""
    t = (value + negative_size) / deck_size if deck_size else 0.0
    t = min(max(t, 0.0), 1.0)
    segments = len(GRADIENT) - 1
    pos = t * segments
    i = min(int(pos), segments - 1)
    frac = pos - i
    lo, hi = GRADIENT[i], GRADIENT[i + 1]
    rgb = [round(a + (b - a) * frac) for a, b in zip(lo, hi)]
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def score_table(state: State) -> pd.DataFrame:
    names = [p.name for p in state.players]
    columns = [unique_prefix(names, i) for i in range(len(names))]
    n = len(state.scores)
    index = [f"Round {n - r}" for r in range(n)]
    rows = [["--" if v is None else v for v in r] for r in state.scores]
    return pd.DataFrame(rows, columns=columns, index=index)


def standings_rows(session: GameSession):
    state = session.state
    over = session.is_game_over()
    rows = []
    for place, idx in enumerate(session.leaderboard):
        p = state.players[idx]
        m = medal(place) if over else None
        rows.append({
            "Rank": place + 1,
            "Name": p.name,
            "Total": state.player_sum(idx),
            "Medal": MEDAL_ICONS[m] if m else "",
        })
    return rows


def export_standings_csv(session: GameSession):
    df = pd.DataFrame(standings_rows(session))
    return df.to_csv(index=False)


def export_history_csv(state: State):
    """One row per (round, player), oldest round first."""
    rows = []
    n = len(state.scores)
    for r_idx in range(n - 1, -1, -1):
        for p_idx, val in enumerate(state.scores[r_idx]):
            rows.append({
                "Round": n - r_idx,
                "Player": state.players[p_idx].name,
                "Score": "" if val is None else val,
            })
    df = pd.DataFrame(rows, columns=["Round", "Player", "Score"])
    return df.to_csv(index=False)
