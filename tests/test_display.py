"""Tests for score colours, medals and the CSV exports."""

import io

import pandas as pd

from display import (
    export_history_csv, export_standings_csv, medal,
    score_color, score_table, standings_rows,
)


def test_medal_for_top_three_places():
    assert [medal(i) for i in range(5)] == ["gold", "silver", "bronze", None, None]


def test_score_color_gradient_ends_and_middle():
    assert score_color(-13, 13, 52) == "#ff0000"
    assert score_color(13, 13, 52) == "#00ff00"
    assert score_color(39, 13, 52) == "#00d4ff"


def test_score_color_clamps_out_of_range_scores():
    assert score_color(-100, 13, 52) == "#ff0000"
    assert score_color(120, 13, 52) == "#00d4ff"


def test_score_table_lists_most_recent_round_first(ann_bob):
    ann_bob.enter_score(0, 0, 20)
    ann_bob.enter_score(0, 1, 30)
    ann_bob.enter_score(0, 0, 4)

    df = score_table(ann_bob.state)
    assert list(df.columns) == ["A", "B"]
    assert list(df.index) == ["Round 2", "Round 1"]
    assert df.loc["Round 1", "A"] == 20
    assert df.loc["Round 2", "B"] == "--"


def test_standings_show_medals_once_game_is_over(ann_bob):
    ann_bob.enter_score(0, 0, 90)
    ann_bob.enter_score(0, 1, 101)
    rows = standings_rows(ann_bob)
    assert [(r["Rank"], r["Name"], r["Total"], r["Medal"]) for r in rows] == [
        (1, "Bob", 101, "🥇"),
        (2, "Ann", 90, "🥈"),
    ]


def test_standings_have_no_medals_mid_game(ann_bob):
    ann_bob.enter_score(0, 0, 3)
    assert all(r["Medal"] == "" for r in standings_rows(ann_bob))


def test_export_standings_csv(ann_bob):
    df = pd.read_csv(io.StringIO(export_standings_csv(ann_bob)))
    assert list(df.columns) == ["Rank", "Name", "Total", "Medal"]
    assert list(df["Name"]) == ["Ann", "Bob"]


def test_export_history_csv_oldest_round_first(ann_bob):
    ann_bob.enter_score(0, 0, 20)
    ann_bob.enter_score(0, 1, 30)
    df = pd.read_csv(io.StringIO(export_history_csv(ann_bob.state)))
    assert list(df.columns) == ["Round", "Player", "Score"]
    assert list(df["Round"]) == [1, 1, 2, 2]
    assert list(df["Player"]) == ["Ann", "Bob", "Ann", "Bob"]
    assert list(df["Score"].iloc[:2]) == [20, 30]
    assert df["Score"].iloc[2:].isna().all()
