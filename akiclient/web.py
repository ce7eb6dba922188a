# web.py - Flask bridge that plays Akinator on behalf of a browser
import logging
import uuid
from dataclasses import asdict

from flask import Flask, jsonify, request

from .base import GameFactory
from .config import configure_logging, parse_bool, settings
from .errors import AkinatorError, InvalidLanguageError, NoGuessError, StateError
from .models import Response

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Store active games
games = {}


def game_state(game):
    state = {
        'question': game.question,
        'options': game.options(),
        'progression': game.progress(),
        'step': game.cursor.step if game.cursor else None,
        'answered': game.is_answered(),
        'history': [{'question': r.question, 'answer': r.label} for r in game.responses()],
    }
    if game.is_answered():
        state['guess'] = asdict(game.answer_guess)
    return state


def error_response(e):
    if isinstance(e, InvalidLanguageError):
        status = 400
    elif isinstance(e, (StateError, NoGuessError)):
        status = 409
    else:
        status = 502
    return jsonify({'error': str(e)}), status


def lookup(game_id):
    return games.get(game_id)


@app.errorhandler(AkinatorError)
def handle_akinator_error(e):
    logger.warning(f"Request failed: {e}")
    return error_response(e)


@app.route('/api/start', methods=['POST'])
def start_game():
    """Start a new game with the service."""
    data = request.get_json(silent=True) or {}
    try:
        game = GameFactory.create(
            data.get('variant'),
            theme=data.get('theme', settings.THEME),
            language=data.get('language', settings.LANGUAGE),
            child_mode=parse_bool(data.get('child_mode'), settings.CHILD_MODE),
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    game.start()

    game_id = str(uuid.uuid4())
    games[game_id] = game
    return jsonify({'game_id': game_id, **game_state(game)})


@app.route('/api/question/<game_id>', methods=['GET'])
def get_question(game_id):
    """Current question, progression and held guess."""
    game = lookup(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(game_state(game))


@app.route('/api/answer/<game_id>', methods=['POST'])
def submit_answer(game_id):
    game = lookup(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404

    data = request.get_json(silent=True) or {}
    try:
        response = Response.parse(data.get('answer', ''))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    game.answer(response)
    return jsonify(game_state(game))


@app.route('/api/undo/<game_id>', methods=['POST'])
def undo_answer(game_id):
    game = lookup(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404
    game.undo()
    return jsonify(game_state(game))


@app.route('/api/guess/<game_id>', methods=['GET'])
def get_guess(game_id):
    """Top guess; it becomes the one accept/decline act on."""
    game = lookup(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404

    top = game.answer_guess if game.is_answered() else game.guess()
    return jsonify({'guess': asdict(top)})


@app.route('/api/guesses/<game_id>', methods=['GET'])
def list_guesses(game_id):
    game = lookup(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify({'guesses': [asdict(g) for g in game.list_guesses()]})


@app.route('/api/accept/<game_id>', methods=['POST'])
def accept_guess(game_id):
    """Finish the game on a correct guess."""
    game = lookup(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404

    game.accept_answer()
    name = game.answer_guess.name
    del games[game_id]
    return jsonify({'status': 'accepted', 'name': name})


@app.route('/api/decline/<game_id>', methods=['POST'])
def decline_guess(game_id):
    game = lookup(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404
    game.decline_answer()
    return jsonify(game_state(game))


if __name__ == '__main__':
    configure_logging()
    app.run(port=settings.WEB_PORT, debug=False)
