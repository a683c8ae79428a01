"""
Unit tests for the pair + four melds completion search.

Covers the first-found decomposition order, failure on unconsumable
residue, the 14-tile precondition, and agreement with the mahjong
library's agari check on single-suit hands.
"""

import itertools
import random

import pytest
from mahjong.agari import Agari

from game.logic.enums import MeldKind
from game.logic.exceptions import HandSizeError
from game.logic.tiles import COPIES_PER_RANK, NUM_RANKS, hand_to_counts
from game.logic.win import Meld, find_completion, is_complete

_TILES_34 = 34
_SEVEN_PAIRS = 7


def _is_agari_by_library(hand) -> bool:
    # ranks 0-8 map onto the man suit of the 34-array
    tiles_34 = hand_to_counts(hand) + [0] * (_TILES_34 - NUM_RANKS)
    return Agari().is_agari(tiles_34)


def _is_seven_pairs(hand) -> bool:
    return hand_to_counts(hand).count(2) == _SEVEN_PAIRS


def _all_meld_shapes() -> list[Meld]:
    triplets = [Meld(MeldKind.TRIPLET, r) for r in range(NUM_RANKS)]
    runs = [Meld(MeldKind.RUN, r) for r in range(NUM_RANKS - 2)]
    return triplets + runs


def _constructed_complete_hands() -> list[tuple[int, ...]]:
    """Every hand built as pair + 4 melds without exceeding 4 copies of a rank."""
    hands = set()
    for pair in range(NUM_RANKS):
        for melds in itertools.combinations_with_replacement(_all_meld_shapes(), 4):
            tiles = [pair, pair] + [t for meld in melds for t in meld.tiles]
            counts = hand_to_counts(tiles)
            if max(counts) <= COPIES_PER_RANK:
                hands.add(tuple(sorted(tiles)))
    return sorted(hands)


class TestFindCompletion:
    def test_pair_with_triplets_and_run(self):
        result = find_completion((0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3, 4, 5, 6))
        assert result is not None
        assert result.pair == 0
        assert result.melds == (
            Meld(MeldKind.TRIPLET, 1),
            Meld(MeldKind.TRIPLET, 2),
            Meld(MeldKind.TRIPLET, 3),
            Meld(MeldKind.RUN, 4),
        )

    def test_lowest_pair_rank_wins_tie(self):
        # pairs at 0, 3 and 6 all lead to a completion; the lowest is reported
        hand = (0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6)
        result = find_completion(hand)
        assert result is not None
        assert result.pair == 0
        assert all(meld.kind == MeldKind.RUN for meld in result.melds)

    def test_triplet_tried_before_run(self):
        # 000 111 222 can be read as three triplets or three runs
        hand = (0, 0, 0, 1, 1, 1, 2, 2, 2, 3, 4, 5, 8, 8)
        result = find_completion(hand)
        assert result is not None
        assert result.pair == 8
        assert result.melds[:3] == tuple(Meld(MeldKind.TRIPLET, r) for r in range(3))

    def test_backtracks_from_triplet_to_run(self):
        # pair candidates 0, 1 and 2 dead-end; the search has to reach pair 6
        hand = (0, 0, 0, 1, 1, 1, 2, 2, 2, 3, 4, 5, 6, 6)
        assert is_complete(hand)

    def test_nine_gates_style_hand(self):
        hand = (0, 0, 0, 1, 2, 3, 4, 5, 6, 7, 8, 8, 8, 4)
        result = find_completion(sorted(hand))
        assert result is not None
        assert result.pair == 4
        assert sorted([t for meld in result.melds for t in meld.tiles] + [result.pair] * 2) == sorted(hand)

    def test_melds_consume_all_tiles(self):
        for hand in _constructed_complete_hands()[::97]:
            result = find_completion(hand)
            assert result is not None
            used = [result.pair, result.pair] + [t for meld in result.melds for t in meld.tiles]
            assert sorted(used) == list(hand)

    def test_isolated_tile_blocks_completion(self):
        # rank 8 single with no 6 or 7 to form a run
        hand = (0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3, 4, 5, 8)
        assert find_completion(hand) is None

    def test_seven_pairs_is_not_a_standard_completion(self):
        hand = (0, 0, 1, 1, 3, 3, 4, 4, 6, 6, 7, 7, 8, 8)
        assert find_completion(hand) is None

    def test_gapped_ranks_cannot_form_runs(self):
        hand = (0, 0, 0, 0, 2, 2, 2, 2, 4, 4, 4, 4, 6, 6)
        assert find_completion(hand) is None

    def test_accepts_unsorted_input(self):
        assert is_complete((6, 5, 4, 3, 3, 3, 2, 2, 2, 1, 1, 1, 0, 0))


class TestPrecondition:
    @pytest.mark.parametrize("size", [0, 13, 15])
    def test_wrong_hand_size_raises(self, size):
        with pytest.raises(HandSizeError):
            find_completion([0] * size)

    def test_out_of_range_rank_raises(self):
        with pytest.raises(ValueError):
            find_completion((0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3, 4, 5, 9))


class TestAgreesWithMahjongLibrary:
    def test_every_constructed_hand_is_complete(self):
        hands = _constructed_complete_hands()
        assert hands
        failures = [hand for hand in hands if not is_complete(hand)]
        assert failures == []

    def test_random_hands_match_library(self):
        rng = random.Random(20240601)
        wall = [rank for rank in range(NUM_RANKS) for _ in range(COPIES_PER_RANK)]
        for _ in range(3000):
            hand = tuple(sorted(rng.sample(wall, 14)))
            if _is_seven_pairs(hand):
                continue
            assert is_complete(hand) == _is_agari_by_library(hand), hand

    def test_constructed_hands_match_library(self):
        for hand in _constructed_complete_hands()[::13]:
            assert _is_agari_by_library(hand)
