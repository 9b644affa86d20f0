import os
import sys

import pytest

# Ensure the repo root (containing nerts.py) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from nerts import GameSession
from storage import MemoryStore


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def session(store):
    return GameSession(store)


@pytest.fixture()
def ann_bob(session):
    session.add_player("Ann")
    session.add_player("Bob")
    session.start_game()
    return session
