"""
アガり（和了）判定と待ち牌の列挙
萬子一色（1〜9）の手牌だけを扱う
"""
from typing import List

from models.constants import TILE_RANKS
from models.tile_utils import hand_to_counts, has_valid_counts


def is_winning_hand(hand: List[int]) -> bool:
    """
    14枚の手牌がアガり形かどうかを判定

    Args:
        hand: 手牌のリスト（例：[1, 1, 1, 2, 3, ...]）

    Returns:
        アガり形なら True、14枚でなければ常に False
    """
    if len(hand) != 14:
        return False
    return is_complete_hand(hand)


def is_complete_hand(hand: List[int]) -> bool:
    """
    3n+2 枚の手牌が「1雀頭 + n面子」または七対子になっているか

    七対子は14枚のときだけ判定する
    """
    if len(hand) % 3 != 2:
        return False
    if any(t not in TILE_RANKS for t in hand):
        return False

    counts = hand_to_counts(hand)
    if not has_valid_counts(counts):
        return False

    if len(hand) == 14 and is_chiitoitsu(counts):
        return True
    return is_standard_win(counts, (len(hand) - 2) // 3)


def is_chiitoitsu(counts: List[int]) -> bool:
    """七対子（異なる7種の対子）かどうか"""
    pairs = 0
    for c in counts:
        if c == 2:
            pairs += 1
        elif c != 0:
            return False
    return pairs == 7


def is_standard_win(counts: List[int], required_sets: int) -> bool:
    """雀頭を1つ選び、残りが required_sets 個の面子に分解できるか"""
    for i, c in enumerate(counts):
        if c >= 2:
            work = list(counts)
            work[i] -= 2
            if decompose_sets(work, 0, required_sets):
                return True
    return False


def decompose_sets(counts: List[int], sets_found: int, required_sets: int = 4) -> bool:
    """
    counts から面子（刻子・順子）を再帰的に取り除く

    counts はその場で書き換え、失敗したら元に戻す（呼び出し側のコピーを渡すこと）
    """
    if sets_found == required_sets:
        return True

    # 一番小さい残り牌
    pos = 0
    while pos < 9 and counts[pos] == 0:
        pos += 1
    if pos >= 9:
        return True

    # 刻子
    if counts[pos] >= 3:
        counts[pos] -= 3
        if decompose_sets(counts, sets_found + 1, required_sets):
            return True
        counts[pos] += 3

    # 順子
    if pos <= 6 and counts[pos] and counts[pos + 1] and counts[pos + 2]:
        counts[pos] -= 1
        counts[pos + 1] -= 1
        counts[pos + 2] -= 1
        if decompose_sets(counts, sets_found + 1, required_sets):
            return True
        counts[pos] += 1
        counts[pos + 1] += 1
        counts[pos + 2] += 1

    return False


def enumerate_waits(hand: List[int]) -> List[int]:
    """
    待ち牌（加えるとアガりになる牌）を昇順で返す

    13枚なら is_winning_hand、7枚・10枚なら is_complete_hand で判定する。
    3n+1 枚でない手牌には空リストを返す。
    """
    if len(hand) % 3 != 1:
        return []

    check = is_winning_hand if len(hand) == 13 else is_complete_hand
    waits = []
    for t in TILE_RANKS:
        if check(list(hand) + [t]):
            waits.append(t)
    return waits


def is_tenpai(hand: List[int]) -> bool:
    """テンパイ（待ちが1つ以上）かどうか"""
    return len(enumerate_waits(hand)) > 0
