import logging
import os
import random
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from logic.agari import enumerate_waits
from logic.generator import (
    HandGenerationOptions,
    fallback_hand,
    generate_hand,
    options_for_difficulty,
)
from models.constants import FALLBACK_HANDS, MAX_ATTEMPTS
from models.tile_utils import hand_to_counts


def test_generated_hand_shape_and_tenpai():
    rng = random.Random(1)
    for _ in range(100):
        hand = generate_hand(rng=rng)
        assert len(hand) == 13
        assert hand == sorted(hand)
        assert all(0 <= c <= 4 for c in hand_to_counts(hand))
        assert len(enumerate_waits(hand)) >= 1


def test_default_options_without_rng():
    hand = generate_hand()
    assert len(hand) == 13
    assert enumerate_waits(hand)


def test_min_max_waits_constraint():
    rng = random.Random(7)
    options = HandGenerationOptions(min_waits=3, max_waits=4)
    fallback = fallback_hand()
    for _ in range(200):
        hand = generate_hand(options, rng=rng)
        if hand == fallback:
            continue
        assert 3 <= len(enumerate_waits(hand)) <= 4


def test_exact_waits_constraint():
    rng = random.Random(3)
    options = HandGenerationOptions(exact_waits=2)
    for _ in range(50):
        assert len(enumerate_waits(generate_hand(options, rng=rng))) == 2


def test_impossible_constraint_returns_fallback(caplog):
    rng = random.Random(5)
    with caplog.at_level(logging.WARNING, logger='logic.generator'):
        hand = generate_hand(HandGenerationOptions(min_waits=10), rng=rng)
    assert hand == list(FALLBACK_HANDS[13])
    assert len(enumerate_waits(hand)) >= 1
    assert 'fallback' in caplog.text


def test_conflicting_constraints_use_and_semantics():
    # exact_waits と min_waits が矛盾する場合も特別扱いせずフォールバック
    hand = generate_hand(HandGenerationOptions(min_waits=5, exact_waits=2), rng=random.Random(9))
    assert hand == fallback_hand()


def test_fallback_is_a_copy():
    hand = generate_hand(HandGenerationOptions(min_waits=10), rng=random.Random(0))
    hand.append(1)
    assert fallback_hand() == list(FALLBACK_HANDS[13])


def test_attempt_budget_is_bounded():
    class CountingRandom(random.Random):
        shuffles = 0

        def shuffle(self, x):
            CountingRandom.shuffles += 1
            super().shuffle(x)

    generate_hand(HandGenerationOptions(min_waits=10), rng=CountingRandom(2))
    assert CountingRandom.shuffles == MAX_ATTEMPTS


@pytest.mark.parametrize('size', [7, 10])
def test_smaller_hand_sizes(size):
    rng = random.Random(size)
    for _ in range(30):
        hand = generate_hand(HandGenerationOptions(tiles=size), rng=rng)
        assert len(hand) == size
        assert enumerate_waits(hand)


@pytest.mark.parametrize('size', [7, 10, 13])
def test_fallback_hands_are_tenpai(size):
    assert enumerate_waits(fallback_hand(size))


def test_same_seed_same_hand():
    assert generate_hand(rng=random.Random(42)) == generate_hand(rng=random.Random(42))


def test_options_for_difficulty():
    options = options_for_difficulty('master')
    assert options == HandGenerationOptions(min_waits=5, max_waits=9, tiles=13)
    assert options_for_difficulty('beginner').tiles == 7
    with pytest.raises(ValueError):
        options_for_difficulty('impossible')


def test_options_from_dict_rejects_unknown_fields():
    assert HandGenerationOptions.from_dict({'min_waits': 2}).min_waits == 2
    assert HandGenerationOptions.from_dict(None) == HandGenerationOptions()
    with pytest.raises(ValueError):
        HandGenerationOptions.from_dict({'minWaits': 2})


@pytest.mark.parametrize('kwargs', [
    {'min_waits': -1},
    {'max_waits': 'three'},
    {'exact_waits': 1.5},
    {'tiles': 14},
    {'tiles': 13.0},
    {'tiles': True},
])
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        HandGenerationOptions(**kwargs)


def test_accepts():
    options = HandGenerationOptions(min_waits=2, max_waits=3)
    assert options.accepts(0) is False
    assert options.accepts(1) is False
    assert options.accepts(2) is True
    assert options.accepts(4) is False
    assert HandGenerationOptions().accepts(9) is True


def test_float_hand_size_is_rejected_before_generation():
    with pytest.raises(ValueError):
        generate_hand(HandGenerationOptions.from_dict({'tiles': 13.0}))
