import os

from flask import Flask, request, session, redirect, url_for, jsonify

from logic.agari import enumerate_waits, is_winning_hand
from logic.generator import HandGenerationOptions, generate_hand, options_for_difficulty
from models.quiz import QuizSession, QuizStateError
from models.tile_utils import format_hand_compact, validate_hand

app = Flask(__name__)
# セッション用のシークレットキー（本番では CHINITSU_SECRET_KEY を設定）
app.secret_key = os.environ.get('CHINITSU_SECRET_KEY', 'dev-secret-key')
app.config.from_prefixed_env('CHINITSU')


def get_quiz_from_session() -> QuizSession:
	"""セッションからクイズ状態を復元"""
	quiz_data = session.get('quiz_data')
	if quiz_data is None:
		return None
	return QuizSession.from_dict(quiz_data)


def save_quiz_to_session(quiz: QuizSession) -> None:
	"""クイズ状態をセッションに保存"""
	session['quiz_data'] = quiz.to_json_serializable()


def build_state_response(quiz: QuizSession, result: dict | None = None) -> dict:
	"""現在のクイズ状態をフロント向けJSONに整形（正解の待ちは解答後のみ含める）"""
	result = result or {}
	response_data = {
		'mode': quiz.mode,
		'difficulty': quiz.difficulty,
		'is_playing': quiz.is_playing,
		'is_game_over': quiz.is_game_over,
		'is_clear': quiz.is_clear,
		'score': quiz.score,
		'lives': quiz.lives,
		'time_left': quiz.time_left,
		'correct_count': quiz.correct_count,
		'hand': quiz.hand.to_list(),
		'compact': quiz.hand.get_compact_format(),
		'selected_waits': quiz.selected_waits,
		'answered': quiz.answered,
		'score_breakdown': quiz.last_score_breakdown,
	}
	if quiz.answered or quiz.is_game_over:
		response_data['correct_waits'] = quiz.current_waits
	for key in ('correct', 'points', 'fast_bonus', 'bonuses'):
		if key in result:
			response_data[key] = result[key]
	return response_data


def read_json_object() -> dict:
	"""リクエストJSONを辞書で返す（空なら {}、オブジェクト以外は ValueError）"""
	data = request.get_json(silent=True)
	if data is None:
		return {}
	if not isinstance(data, dict):
		raise ValueError('request body must be a JSON object')
	return data


def read_hand_from_request() -> list:
	"""リクエストJSONの hand を検証して返す（不正なら ValueError）"""
	data = read_json_object()
	return validate_hand(data.get('hand'))


@app.errorhandler(ValueError)
def handle_value_error(e):
	return jsonify({'error': str(e)}), 400


@app.errorhandler(QuizStateError)
def handle_quiz_state_error(e):
	return jsonify({'error': str(e)}), 400


@app.route('/reset')
def reset():
	session.clear()
	return redirect(url_for('quiz_state'))


@app.route('/api/waits', methods=['POST'])
def api_waits():
	"""手牌の待ち牌を返す"""
	hand = read_hand_from_request()
	return jsonify({
		'hand': hand,
		'compact': format_hand_compact(hand),
		'waits': enumerate_waits(hand),
	})


@app.route('/api/check', methods=['POST'])
def api_check():
	"""14枚の手牌がアガり形か判定"""
	hand = read_hand_from_request()
	return jsonify({'hand': hand, 'winning': is_winning_hand(hand)})


@app.route('/api/generate', methods=['POST'])
def api_generate():
	"""難易度または生成条件から問題を1つ作る"""
	data = dict(read_json_object())
	difficulty = data.pop('difficulty', None)
	if difficulty is not None:
		if data:
			return jsonify({'error': 'difficulty cannot be combined with other options'}), 400
		options = options_for_difficulty(difficulty)
	else:
		options = HandGenerationOptions.from_dict(data)

	hand = generate_hand(options)
	app.logger.debug("generated hand %s for %s", hand, options)
	return jsonify({
		'hand': hand,
		'compact': format_hand_compact(hand),
		'waits': enumerate_waits(hand),
	})


@app.route('/quiz/start', methods=['POST'])
def quiz_start():
	data = read_json_object()
	quiz = QuizSession()
	quiz.start_game(data.get('mode', 'challenge'), data.get('difficulty', 'normal'))
	save_quiz_to_session(quiz)
	return jsonify(build_state_response(quiz))


@app.route('/quiz/state', methods=['GET'])
def quiz_state():
	quiz = get_quiz_from_session()
	if quiz is None:
		return jsonify({'error': 'No quiz in progress'}), 400
	quiz.tick()
	save_quiz_to_session(quiz)
	return jsonify(build_state_response(quiz))


@app.route('/quiz/toggle', methods=['POST'])
def quiz_toggle():
	"""待ち牌の選択を切り替える"""
	quiz = get_quiz_from_session()
	if quiz is None:
		return jsonify({'error': 'No quiz in progress'}), 400

	tile = read_json_object().get('tile')
	if isinstance(tile, bool) or not isinstance(tile, int):
		return jsonify({'error': 'Invalid parameters'}), 400

	quiz.toggle_wait(tile)
	save_quiz_to_session(quiz)
	return jsonify(build_state_response(quiz))


@app.route('/quiz/submit', methods=['POST'])
def quiz_submit():
	"""解答して結果を返す"""
	quiz = get_quiz_from_session()
	if quiz is None:
		return jsonify({'error': 'No quiz in progress'}), 400

	was_playing = quiz.is_playing
	quiz.tick()
	if was_playing and not quiz.is_playing:
		# 時間切れで終了した
		save_quiz_to_session(quiz)
		return jsonify(build_state_response(quiz))
	result = quiz.submit_answer()
	save_quiz_to_session(quiz)
	return jsonify(build_state_response(quiz, result))


@app.route('/quiz/next', methods=['POST'])
def quiz_next():
	"""次の問題へ進む"""
	quiz = get_quiz_from_session()
	if quiz is None:
		return jsonify({'error': 'No quiz in progress'}), 400

	quiz.next_hand()
	save_quiz_to_session(quiz)
	return jsonify(build_state_response(quiz))


if __name__ == '__main__':
	app.run(debug=True)
