import os
import random
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from mahjong.agari import Agari

from logic.agari import (
    decompose_sets,
    enumerate_waits,
    is_chiitoitsu,
    is_complete_hand,
    is_tenpai,
    is_winning_hand,
)
from models.tile_utils import build_pool, hand_to_counts


NINE_GATES = [1, 1, 1, 2, 3, 4, 5, 6, 7, 8, 9, 9, 9]

WINNING_HANDS = [
    # 七対子（順子にも分解できる）
    [1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7],
    # 七対子のみ
    [1, 1, 2, 2, 4, 4, 5, 5, 7, 7, 8, 8, 9, 9],
    # 111 234 55 678 999
    [1, 1, 1, 2, 3, 4, 5, 5, 6, 7, 8, 9, 9, 9],
    # 123 123 456 789 99
    [1, 1, 2, 2, 3, 3, 4, 5, 6, 7, 8, 9, 9, 9],
    # 222 333 444 555 66
    [2, 2, 2, 3, 3, 3, 4, 4, 4, 5, 5, 5, 6, 6],
]

NON_WINNING_HANDS = [
    # 七対子の対子を刻子+単騎に崩した形
    [1, 1, 1, 2, 2, 4, 4, 5, 5, 7, 7, 8, 8, 9],
    # 111 222 444 555 + 78（雀頭なし）
    [1, 1, 1, 2, 2, 2, 4, 4, 4, 5, 5, 5, 7, 8],
    # 孤立した 1 と 9
    [1, 2, 2, 2, 4, 4, 4, 6, 6, 6, 8, 8, 8, 9],
]


def to_34(hand):
    return hand_to_counts(hand) + [0] * 25


@pytest.mark.parametrize('hand', WINNING_HANDS)
def test_winning_hands(hand):
    assert is_winning_hand(hand) is True


@pytest.mark.parametrize('hand', NON_WINNING_HANDS)
def test_non_winning_hands(hand):
    assert is_winning_hand(hand) is False


def test_wrong_length_is_not_winning():
    assert is_winning_hand(NINE_GATES) is False
    assert is_winning_hand(WINNING_HANDS[2] + [5]) is False
    assert is_winning_hand([]) is False


def test_five_copies_is_not_winning():
    assert is_winning_hand([1, 1, 1, 1, 1, 2, 3, 4, 5, 6, 7, 8, 9, 9]) is False


def test_out_of_range_tiles_are_not_winning():
    assert is_winning_hand([0, 0, 1, 1, 1, 2, 3, 4, 5, 6, 7, 8, 9, 9]) is False
    assert is_winning_hand([1, 1, 1, 2, 3, 4, 5, 6, 7, 8, 9, 9, 9, 10]) is False


def test_chiitoitsu_requires_seven_distinct_pairs():
    assert is_chiitoitsu(hand_to_counts(WINNING_HANDS[1])) is True
    # 4枚使いは2対子とみなさない
    assert is_chiitoitsu(hand_to_counts([1, 1, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6])) is False


def test_decompose_sets_restores_counts_on_failure():
    counts = hand_to_counts([1, 2, 4, 5, 7, 8])
    original = list(counts)
    assert decompose_sets(counts, 0, 2) is False
    assert counts == original


def test_is_complete_hand_smaller_sizes():
    assert is_complete_hand([1, 1, 1, 2, 3, 4, 5, 5]) is True
    assert is_complete_hand([1, 1, 2, 3, 4]) is True
    assert is_complete_hand([1, 1, 2, 3, 5]) is False
    assert is_complete_hand([1, 1, 2, 3]) is False


def test_nine_gates_waits_on_every_tile():
    assert enumerate_waits(NINE_GATES) == [1, 2, 3, 4, 5, 6, 7, 8, 9]


def test_known_waits():
    assert enumerate_waits([1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7]) == [1, 4, 7]
    assert enumerate_waits([1, 1, 1, 2, 3, 4, 5, 6, 7, 8]) == [2, 3, 5, 6, 8, 9]
    assert enumerate_waits([1, 1, 1, 2, 3, 4, 5]) == [2, 3, 5, 6]


def test_chiitoitsu_only_wait():
    # 5単騎の七対子待ちのみ
    hand = [1, 1, 2, 2, 4, 4, 6, 6, 8, 8, 9, 9, 5]
    assert enumerate_waits(hand) == [5]


def test_not_tenpai_has_no_waits():
    hand = [1, 4, 4, 4, 4, 5, 5, 5, 6, 6, 6, 6, 9]
    assert enumerate_waits(hand) == []
    assert is_tenpai(hand) is False


def test_enumerate_waits_wrong_length():
    assert enumerate_waits([]) == []
    assert enumerate_waits(WINNING_HANDS[0]) == []


def test_enumerate_waits_is_pure():
    hand = list(NINE_GATES)
    first = enumerate_waits(hand)
    second = enumerate_waits(hand)
    assert first == second
    assert hand == NINE_GATES


def test_waits_match_reference_library():
    agari = Agari()
    rng = random.Random(20240601)
    for _ in range(200):
        hand = sorted(build_pool(rng)[:13])
        expected = [t for t in range(1, 10)
                    if hand.count(t) < 4 and agari.is_agari(to_34(hand + [t]))]
        assert enumerate_waits(hand) == expected, hand
