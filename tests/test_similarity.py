# tests/test_similarity.py

"""
Similarity Matcher Tests
"""

from decimal import Decimal

import pytest

from app.models.enumerations import ActivityCategory as C
from app.scoring.similarity import category_similarity, find_similar, similarity
from app.scoring.utils import mean_percent, round_half_up


class TestCategorySimilarity:

    def test_both_zero_carries_no_signal(self):
        assert category_similarity(0, 0) is None

    def test_identical_counts(self):
        assert category_similarity(4, 4) == Decimal(1)

    def test_one_side_zero(self):
        assert category_similarity(2, 0) == Decimal(0)

    def test_partial(self):
        assert category_similarity(3, 4) == Decimal("0.75")


class TestSimilarity:

    def test_worked_example(self):
        target = {C.RESEARCH: 4, C.CONFERENCES: 2}
        peer = {C.RESEARCH: 4, C.CONFERENCES: 0}
        # research 1.0 is included, conferences 0.0 is not
        assert similarity(target, peer) == 100

    def test_average_of_included_categories(self):
        a = {C.RESEARCH: 4, C.COURSES: 3}
        b = {C.RESEARCH: 3, C.COURSES: 3}
        # (0.75 + 1.0) / 2 = 87.5 -> 88
        assert similarity(a, b) == 88

    def test_exactly_half_is_excluded(self):
        assert similarity({C.RESEARCH: 2}, {C.RESEARCH: 1}) == 0

    def test_nothing_included(self):
        assert similarity({C.RESEARCH: 5}, {C.COURSES: 5}) == 0
        assert similarity({}, {}) == 0

    def test_symmetric(self):
        a = {C.RESEARCH: 5, C.COURSES: 2, C.COMMITTEES: 7}
        b = {C.RESEARCH: 4, C.COURSES: 3, C.SEMINARS: 1}
        assert similarity(a, b) == similarity(b, a)

    def test_self_similarity_is_100_when_active(self):
        a = {C.RESEARCH: 1, C.SUPERVISION: 2}
        assert similarity(a, a) == 100


class TestFindSimilar:

    @pytest.fixture
    def population(self):
        return [
            (1, {C.RESEARCH: 4, C.CONFERENCES: 2}),
            (2, {C.RESEARCH: 4}),
            (3, {C.RESEARCH: 3, C.CONFERENCES: 2}),
            (4, {C.COURSES: 9}),
            (5, {C.RESEARCH: 2, C.CONFERENCES: 2}),
            (6, {C.RESEARCH: 4, C.CONFERENCES: 2}),
        ]

    def test_excludes_target_and_sorts_descending(self, population):
        results = find_similar(1, population[0][1], population)
        assert [r.peer_id for r in results] == [2, 5, 6, 3]
        assert [r.similarity_percent for r in results] == [100, 100, 100, 88]

    def test_threshold_is_strict(self, population):
        results = find_similar(1, population[0][1], population, min_similarity_percent=88)
        assert [r.peer_id for r in results] == [2, 5, 6]

    def test_top_k(self, population):
        results = find_similar(1, population[0][1], population, top_k=2)
        assert [r.peer_id for r in results] == [2, 5]

    def test_empty_population(self):
        assert find_similar(1, {C.RESEARCH: 1}, []) == []


class TestRounding:

    def test_half_rounds_up(self):
        assert round_half_up(Decimal("87.5")) == 88
        assert round_half_up(Decimal("86.5")) == 87

    def test_mean_percent_empty(self):
        assert mean_percent([]) == 0
