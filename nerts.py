import logging
from dataclasses import dataclass, field, asdict

log = logging.getLogger(__name__)

FIRST_TO = 100       # the game ends when a single player reaches this
NEGATIVE_SIZE = 13   # lowest possible round score is -NEGATIVE_SIZE
DECK_SIZE = 52
MIN_PLAYERS = 2
SCORE_MIN = -128
SCORE_MAX = 127

# ---------- Errors ----------

class NertsError(Exception):
    pass

class InvalidInput(NertsError, ValueError):
    pass

class StorageFailure(NertsError, RuntimeError):
    pass

# ---------- Data Models ----------

@dataclass
class Player:
    id: int
    name: str

    def to_json(self):
        return asdict(self)

    @staticmethod
    def from_json(d):
        return Player(id=int(d["id"]), name=str(d["name"]))

@dataclass
class State:
    players: list[Player] = field(default_factory=list)
    scores: list[list[int | None]] = field(default_factory=list)   # most recent round first
    is_in_progress: bool = False
    first_to: int = FIRST_TO
    negative_size: int = NEGATIVE_SIZE
    deck_size: int = DECK_SIZE
    focused: tuple[int, int] | None = None

    def to_json(self):
        return {
            "players": [p.to_json() for p in self.players],
            "scores": [list(r) for r in self.scores],
            "is_in_progress": self.is_in_progress,
            "first_to": self.first_to,
            "negative_size": self.negative_size,
            "deck_size": self.deck_size,
            "focused": list(self.focused) if self.focused is not None else None,
        }

    @staticmethod
    def from_json(d):
        if not isinstance(d, dict):
            raise ValueError(f"Saved game must be an object, got {type(d).__name__}.")
        focused = d.get("focused")
        state = State(
            players=[Player.from_json(p) for p in d.get("players", [])],
            scores=[[None if v is None else int(v) for v in r] for r in d.get("scores", [])],
            is_in_progress=bool(d.get("is_in_progress", False)),
            first_to=int(d.get("first_to", FIRST_TO)),
            negative_size=int(d.get("negative_size", NEGATIVE_SIZE)),
            deck_size=int(d.get("deck_size", DECK_SIZE)),
            focused=(int(focused[0]), int(focused[1])) if focused is not None else None,
        )
        for r in state.scores:
            if len(r) != len(state.players):
                raise ValueError(f"Round has {len(r)} scores for {len(state.players)} players.")
        if state.focused is not None and not state.has_cell(*state.focused):
            raise ValueError(f"Focused cell {state.focused} is outside the score grid.")
        return state

    # ---------- Score Grid ----------

    def is_editing(self, round_idx: int, player_idx: int) -> bool:
        return self.focused == (round_idx, player_idx)

    def has_cell(self, round_idx: int, player_idx: int) -> bool:
        return 0 <= round_idx < len(self.scores) and 0 <= player_idx < len(self.scores[round_idx])

    def next_empty(self) -> tuple[int, int] | None:
        """First unset cell, scanning the stored rounds back to front."""
        for round_idx in range(len(self.scores) - 1, -1, -1):
            for player_idx, val in enumerate(self.scores[round_idx]):
                if val is None:
                    return round_idx, player_idx
        return None

    def next_round(self):
        self.scores.insert(0, [None] * len(self.players))
        self.focused = (0, 0) if self.players else None

    # ---------- Standings ----------

    def player_sum(self, idx: int) -> int:
        return sum(r[idx] for r in self.scores if r[idx] is not None)

    def is_game_over(self) -> bool:
        if any(val is None for r in self.scores for val in r):
            return False
        if not self.players:
            return False

        totals = [self.player_sum(i) for i in range(len(self.players))]
        top = max(totals)
        no_tie = totals.count(top) == 1
        return top >= self.first_to and no_tie

    def get_leader_board(self) -> list[int]:
        # sorted() is stable, equal totals keep roster order
        totals = [self.player_sum(i) for i in range(len(self.players))]
        return sorted(range(len(self.players)), key=lambda i: -totals[i])


def unique_prefix(names: list[str], idx: int) -> str:
    """Shortest case-insensitive prefix of names[idx] no other name shares.

    Each other name is cut to the same length (or its own, if shorter) before
    comparing. Falls back to the whole name.
    """
    current = names[idx]
    for prefix_len in range(1, len(current) + 1):
        prefix = current[:prefix_len].lower()
        if all(
            prefix != other[:prefix_len].lower()
            for other_idx, other in enumerate(names)
            if other_idx != idx
        ):
            return current[:prefix_len]
    return current


def parse_score(text) -> int:
    """Turn the text typed into a score box into a round score."""
    try:
        val = int(str(text).strip())
    except ValueError:
        raise InvalidInput(f"'{text}' is not a whole number.") from None
    if not SCORE_MIN <= val <= SCORE_MAX:
        raise InvalidInput(f"Score {val} is outside {SCORE_MIN}..{SCORE_MAX}.")
    return val

# ---------- Session ----------

class GameSession:
    """Owns the state, applies one operation at a time and saves after each change.

    `store` is anything with load(), save(state) and clear().
    """

    def __init__(self, store, state: State | None = None):
        self.store = store
        self.state = state if state is not None else State()
        self.leaderboard = self.state.get_leader_board()

    @classmethod
    def load(cls, store):
        try:
            state = store.load()
        except (StorageFailure, KeyError, IndexError, TypeError, ValueError) as exc:
            log.warning("Could not load saved game, starting fresh: %s", exc)
            state = None
        return cls(store, state)

    def _commit(self):
        self.leaderboard = self.state.get_leader_board()
        log.debug("state: %s", self.state.to_json())
        self.store.save(self.state)

    # ---------- Roster ----------

    def add_player(self, name: str) -> bool:
        name = (name or "").strip()
        if not name:
            return False
        next_id = max((p.id for p in self.state.players), default=0) + 1
        self.state.players.append(Player(next_id, name))
        log.info("Added player %s (%s)", next_id, name)
        self._commit()
        return True

    def remove_player(self, idx: int) -> bool:
        if not 0 <= idx < len(self.state.players):
            return False
        removed = self.state.players.pop(idx)
        for r in self.state.scores:
            if idx < len(r):
                del r[idx]
        if self.state.focused is not None:
            round_idx, player_idx = self.state.focused
            if player_idx == idx:
                self.state.focused = self.state.next_empty() if self.state.is_in_progress else None
            elif player_idx > idx:
                self.state.focused = (round_idx, player_idx - 1)
        log.info("Removed player %s (%s)", removed.id, removed.name)
        self._commit()
        return True

    def can_start(self) -> bool:
        return not self.state.is_in_progress and len(self.state.players) >= MIN_PLAYERS

    # ---------- Rounds ----------

    def start_game(self) -> bool:
        if self.state.is_in_progress:
            log.info("start_game ignored, a game is already in progress")
            return False
        self.state.is_in_progress = True
        self.state.next_round()
        log.info("Game started with %d players", len(self.state.players))
        self._commit()
        return True

    def _check_cell(self, round_idx: int, player_idx: int):
        if not self.state.has_cell(round_idx, player_idx):
            raise InvalidInput(f"No score cell at round {round_idx}, player {player_idx}.")

    def enter_score(self, round_idx: int, player_idx: int, value: int) -> bool:
        self._check_cell(round_idx, player_idx)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInput(f"Score must be an int, got {value!r}.")
        if not SCORE_MIN <= value <= SCORE_MAX:
            raise InvalidInput(f"Score {value} is outside {SCORE_MIN}..{SCORE_MAX}.")

        state = self.state
        state.scores[round_idx][player_idx] = value
        state.focused = state.next_empty()
        if state.focused is None:
            if state.is_game_over():
                log.info("Game over, winner: %s", state.players[state.get_leader_board()[0]].name)
            else:
                state.next_round()
                log.info("Round %d complete, starting round %d", len(state.scores) - 1, len(state.scores))
        self._commit()
        return True

    def edit_score(self, round_idx: int, player_idx: int) -> bool:
        self._check_cell(round_idx, player_idx)
        self.state.focused = (round_idx, player_idx)
        self._commit()
        return True

    def new_game(self) -> bool:
        players = self.state.players
        self.state = State(players=players)
        log.info("New game, keeping %d players", len(players))
        self._commit()
        return True

    def reset(self):
        self.state = State()
        self.leaderboard = []
        self.store.clear()
        log.info("Reset everything")

    # ---------- Queries ----------

    def player_sum(self, idx: int) -> int:
        return self.state.player_sum(idx)

    def is_game_over(self) -> bool:
        return self.state.is_game_over()

    def placement(self, idx: int) -> int:
        return self.leaderboard.index(idx)

    def focused_cell(self) -> tuple[int, int]:
        return self.state.focused if self.state.focused is not None else (0, 0)

    def unique_prefix(self, idx: int) -> str:
        return unique_prefix([p.name for p in self.state.players], idx)
