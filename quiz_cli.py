"""
CLI版 メンチン待ち当てクイズ
"""
import argparse
import logging
import random
import sys
from typing import List, Optional

from logic.agari import enumerate_waits, is_winning_hand
from logic.generator import generate_hand, options_for_difficulty
from models.constants import DIFFICULTIES, MODES
from models.quiz import QuizSession
from models.tile_utils import format_hand_compact, parse_hand


def print_hand(hand: List[int], waits: Optional[List[int]] = None) -> None:
	"""手牌と待ちを表示"""
	line = f"{format_hand_compact(hand)}  ({len(hand)} tiles)"
	if waits is not None:
		line += f"  waits: {' '.join(str(t) for t in waits) or '-'}"
	print(line)


def cmd_waits(args) -> int:
	hand = parse_hand(args.hand)
	print_hand(hand, enumerate_waits(hand))
	return 0


def cmd_check(args) -> int:
	hand = parse_hand(args.hand)
	winning = is_winning_hand(hand)
	print(f"{format_hand_compact(hand)}: {'agari' if winning else 'not agari'}")
	return 0 if winning else 1


def cmd_generate(args) -> int:
	rng = random.Random(args.seed) if args.seed is not None else None
	options = options_for_difficulty(args.difficulty)
	for _ in range(args.count):
		hand = generate_hand(options, rng=rng)
		print_hand(hand, enumerate_waits(hand))
	return 0


def read_answer(prompt: str) -> Optional[List[int]]:
	"""
	解答を入力させる。空入力なら待ちなし、q で終了（None）
	"""
	text = input(prompt).strip()
	if text.lower() in ('q', 'quit'):
		return None
	return sorted(set(int(c) for c in text if c.isdigit() and c != '0'))


def cmd_play(args) -> int:
	"""対話形式でクイズを進行"""
	rng = random.Random(args.seed) if args.seed is not None else None
	quiz = QuizSession(rng=rng)
	quiz.start_game(args.mode, args.difficulty)

	print(f"Chinitsu wait quiz (mode: {args.mode}, difficulty: {args.difficulty})")
	print("Enter the waiting tiles (e.g. 147), or q to quit.\n")

	while quiz.is_playing:
		print(f"Q{quiz.correct_count + 1}  score: {quiz.score}  lives: {quiz.lives}", end='')
		if quiz.game_end_time:
			print(f"  time: {quiz.tick()}s", end='')
		print()
		if not quiz.is_playing:
			break
		print_hand(quiz.hand.to_list())

		answer = read_answer('> ')
		if answer is None:
			quiz.end_game()
			break
		for t in answer:
			quiz.toggle_wait(t)

		quiz.tick()
		if not quiz.is_playing:
			break
		result = quiz.submit_answer()
		waits = ' '.join(str(t) for t in result['correct_waits'])
		if result['correct']:
			bonus = ' FAST!' if result['bonuses'] else ''
			print(f"  correct! +{result['points']}{bonus}\n")
		else:
			print(f"  wrong. answer: {waits}\n")

		if quiz.is_playing:
			quiz.next_hand()

	breakdown = quiz.last_score_breakdown or {}
	print("--- Result ---")
	print(f"correct answers: {quiz.correct_count}")
	for key in ('base_score', 'clear_bonus', 'life_bonus', 'time_bonus'):
		if breakdown.get(key):
			print(f"{key}: {breakdown[key]}")
	print(f"total: {breakdown.get('total_score', quiz.score)}{'  CLEAR!' if quiz.is_clear else ''}")
	return 0


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Chinitsu (one-suit) wait quiz")
	parser.add_argument("--verbose", action="store_true", help="Show debug logs")
	sub = parser.add_subparsers(dest="command", required=True)

	p = sub.add_parser("waits", help="List the waits of a hand (e.g. 1112345678999)")
	p.add_argument("hand")
	p.set_defaults(func=cmd_waits)

	p = sub.add_parser("check", help="Check whether a 14-tile hand is complete")
	p.add_argument("hand")
	p.set_defaults(func=cmd_check)

	p = sub.add_parser("generate", help="Generate quiz hands")
	p.add_argument("--difficulty", default="normal", choices=DIFFICULTIES)
	p.add_argument("--count", type=int, default=1)
	p.add_argument("--seed", type=int, default=None)
	p.set_defaults(func=cmd_generate)

	p = sub.add_parser("play", help="Play the quiz interactively")
	p.add_argument("--mode", default="practice", choices=MODES)
	p.add_argument("--difficulty", default="normal", choices=DIFFICULTIES)
	p.add_argument("--seed", type=int, default=None)
	p.set_defaults(func=cmd_play)
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	"""メイン関数"""
	args = build_parser().parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
	)
	try:
		return args.func(args)
	except ValueError as e:
		print(f"error: {e}", file=sys.stderr)
		return 2
	except (EOFError, KeyboardInterrupt):
		print()
		return 0


if __name__ == '__main__':
	sys.exit(main())
