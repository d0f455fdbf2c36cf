import random

import pandas as pd
import pytest

from hanjadeck.database import DataSeeder, HanjaStorage
from hanjadeck.services import (
    BookmarkStore,
    MultiGradeService,
    RelatedWordService,
    WordRepository,
)
from hanjadeck.services.hanja_service import HanjaService

CHARACTER_FIELDS = [
    "id", "character", "pronunciation", "meaning",
    "strokeCount", "radical", "radicalName", "radicalStrokes",
]

CHARACTERS = [
    ("c1", "天", "천", "하늘", 4, "大", "큰대", 3),
    ("c2", "地", "지", "땅", 6, "土", "흙토", 3),
    ("c3", "國", "국", "나라", 11, "囗", "큰입구몸", 3),
    ("c4", "大", "대", "큰", 3, "大", "큰대", 3),
    ("c5", "土", "토", "흙", 3, "土", "흙토", 3),
    ("c6", "海", "해", "바다", 10, "水", "물수", 4),
    ("c7", "水", "수", "물", 4, "水", "물수", 4),
]

WORDS = [
    # id, word, pronunciation, meaning, grade, characterIds, leftSwipe, rightSwipe
    ("w1", "天地", "천지", "하늘과 땅", "8", "c1;c2", "w2", ""),
    ("w2", "天國", "천국", "하늘 나라", "8", "c1;c3", "", ""),
    ("w3", "大國", "대국", "큰 나라", "7급", "c4;c3", "", ""),
    ("w4", "海水", "해수", "바닷물", "7", "c6;c7", "", ""),
    ("w5", "土地", "토지", "땅", "6", "c5;c2", "", "w1"),
]

WORD_FIELDS = ["id", "word", "pronunciation", "meaning", "grade", "characterIds", "leftSwipe", "rightSwipe"]


def make_frames(characters=CHARACTERS, words=WORDS):
    """Build seed DataFrames the same shape as the bundled CSV files."""
    characters_df = pd.DataFrame(
        [[str(v) for v in row] for row in characters], columns=CHARACTER_FIELDS
    )
    words_df = pd.DataFrame([list(row) for row in words], columns=WORD_FIELDS)
    return characters_df, words_df


@pytest.fixture
def storage():
    storage = HanjaStorage(":memory:")
    storage.initialize()
    yield storage
    storage.close()


@pytest.fixture
def seeded_storage(storage):
    DataSeeder(storage).seed(*make_frames())
    return storage


@pytest.fixture
def repository(seeded_storage):
    return WordRepository(seeded_storage)


@pytest.fixture
def bookmarks(seeded_storage):
    return BookmarkStore(seeded_storage)


@pytest.fixture
def multi_grade(repository, bookmarks):
    return MultiGradeService(repository, bookmarks, rng=random.Random(7))


@pytest.fixture
def related(repository):
    return RelatedWordService(repository, rng=random.Random(7))


@pytest.fixture
def service():
    service = HanjaService(":memory:", rng=random.Random(7))
    service.initialize_storage()
    yield service
    service.close()
