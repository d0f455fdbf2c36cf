"""
Tests for the HanjaService facade.

Tests cover:
- Seeding lifecycle (first launch, reseed, full reset)
- Study queries over the bundled dataset
- Change notification
- Async wrappers
"""

import asyncio

import pytest

from hanjadeck.config import HanjaGrade
from hanjadeck.exceptions import StorageInitializationError
from hanjadeck.services import HanjaService


@pytest.fixture
def seeded_service(service):
    service.ensure_seeded()
    return service


class TestLifecycle:

    def test_ensure_seeded_runs_once(self, service):
        first = service.ensure_seeded()
        second = service.ensure_seeded()

        assert first.words == 19
        assert second is None

    def test_isolated_instances(self, seeded_service):
        other = HanjaService(":memory:")
        other.initialize_storage()
        try:
            assert other.get_words_by_grade(8) == []
        finally:
            other.close()

    def test_unusable_path_raises(self, tmp_path):
        broken = HanjaService(str(tmp_path))
        with pytest.raises(StorageInitializationError):
            broken.initialize_storage()

    def test_clear_all_data_on_fresh_facade(self):
        fresh = HanjaService(":memory:")
        try:
            fresh.clear_all_data()
            assert fresh.storage.is_initialized
            assert fresh.storage.table_counts()["words"] == 0
        finally:
            fresh.close()

    def test_reseed_clears_cached_pools(self, seeded_service):
        seeded_service.get_words_by_multiple_grades([8])
        seeded_service.storage.execute("DELETE FROM words WHERE grade = 8")
        assert len(seeded_service.get_words_by_multiple_grades([8])) == 13

        seeded_service.seed_from_static_dataset()
        assert len(seeded_service.get_words_by_multiple_grades([8])) == 13

        seeded_service.clear_all_data()
        assert seeded_service.get_words_by_multiple_grades([8]) == []


class TestStudyFlow:

    def test_random_stack_excludes_bookmarks(self, seeded_service):
        seeded_service.toggle_bookmark("grade8_word_01")
        stack = seeded_service.get_random_words_from_multiple_grades([8, 7], 100)

        ids = {card.id for card in stack}
        assert len(stack) == 17
        assert "grade8_word_01" not in ids

    def test_left_swipe_chains_on_first_character(self, seeded_service):
        current = seeded_service.repository.get_word_by_id("grade8_word_01")
        result = seeded_service.find_related_word(current, "left", grades=[8, 7])
        # 天地 -> 天國 is the only other word containing 天
        assert result.id == "grade7_word_01"

    def test_default_grade_used(self, seeded_service):
        current = seeded_service.repository.get_word_by_id("grade8_word_10")
        result = seeded_service.find_related_word(current, "left")
        # 山水 -> 火山 shares 山 within the default grade
        assert result.id == "grade8_word_11"

    def test_memorized_and_statistics(self, seeded_service):
        assert seeded_service.set_word_memorized("grade8_word_01", True) is True
        assert seeded_service.set_word_memorized("missing", True) is False

        stats = seeded_service.get_grade_statistics()
        assert stats[HanjaGrade.GRADE_8].total == 13
        assert stats[HanjaGrade.GRADE_8].memorized == 1
        assert stats[HanjaGrade.GRADE_1].total == 0

    def test_bookmark_roundtrip(self, seeded_service):
        assert seeded_service.toggle_bookmark("grade7_word_03") is True
        assert seeded_service.is_bookmarked("grade7_word_03") is True
        assert seeded_service.get_bookmarked_ids() == ["grade7_word_03"]


class TestChangeNotification:

    def test_callbacks_receive_word_ids(self, seeded_service):
        changes = []
        seeded_service.on_change(changes.append)

        seeded_service.set_word_memorized("grade8_word_02", True)
        seeded_service.toggle_bookmark("grade8_word_03")
        seeded_service.set_word_memorized("missing", True)
        seeded_service.seed_from_static_dataset()

        assert changes == ["grade8_word_02", "grade8_word_03", "*"]

    def test_failing_callback_does_not_break_mutation(self, seeded_service):
        def broken(word_id):
            raise RuntimeError("listener down")

        seeded_service.on_change(broken)
        assert seeded_service.toggle_bookmark("grade8_word_04") is True


class TestAsync:

    def test_async_wrappers(self, service):
        async def flow():
            await service.initialize_storage_async()
            report = await service.seed_from_static_dataset_async()
            words = await service.get_words_by_grade_async("7급")
            stack = await service.get_random_words_from_multiple_grades_async([8], 3)
            related = await service.find_related_word_async(words[0], "left", [8, 7])
            memorized = await service.set_word_memorized_async(words[0].id, True)
            bookmarked = await service.toggle_bookmark_async(words[1].id)
            stats = await service.get_grade_statistics_async()
            return report, words, stack, related, memorized, bookmarked, stats

        report, words, stack, related, memorized, bookmarked, stats = asyncio.run(flow())

        assert report.words == 19
        assert len(words) == 5
        assert len(stack) == 3
        assert related is not None
        assert memorized is True
        assert bookmarked is True
        assert stats[HanjaGrade.GRADE_7].memorized == 1
