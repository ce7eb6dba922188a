import logging
import sys

from .base import GameFactory
from .config import configure_logging, settings
from .errors import AkinatorError, NoGuessError
from .models import Response

logger = logging.getLogger(__name__)

# Progression at which we stop asking and ask for a guess
GUESS_THRESHOLD = 85.0
MAX_QUESTIONS = 80


def confirm(prompt):
    return input(prompt).strip().lower() in ['yes', 'y']


def offer_guess(game):
    """Show the top guess. Returns True when the game is over."""
    try:
        guess = game.answer_guess if game.is_answered() else game.guess()
    except NoGuessError:
        print("  (I don't have a guess yet, keep going...)")
        return False

    print("\n" + "=" * 50)
    if guess.probability:
        print(f"I am {guess.probability:.0f}% sure it is {guess.name}!")
    else:
        print(f"I think it is {guess.name}!")
    if guess.description:
        print(f"({guess.description})")
    print("=" * 50)

    if confirm(f"Is it {guess.name}? (yes/no) -> "):
        game.accept_answer()
        print("🎉 Yes! I got it!")
        return True

    question = game.decline_answer()
    print("Darn! Let me keep asking...")
    logger.debug(f"Back to questioning: {question}")
    return False


def play_game(game):
    """Main game loop."""
    game.start()
    print("=" * 50)
    print(f"Akinator - think of something in '{game.theme.name}', I will guess it.")
    print("=" * 50)
    print("Answer with: yes, no, idk, probably, probably not")
    print("  u = undo last answer, g = make me guess, q = quit")

    offered_step = None
    for _ in range(MAX_QUESTIONS):
        confident = game.progress() >= GUESS_THRESHOLD and game.cursor.step != offered_step
        if game.is_answered() or confident:
            offered_step = game.cursor.step
            if offer_guess(game):
                return
            continue

        print(f"\nQ{len(game.history) + 1} ({game.progress():.0f}%): {game.question}")
        user_answer = input("-> ").strip().lower()

        if user_answer in ['q', 'quit']:
            return
        if user_answer in ['u', 'b', 'undo']:
            game.undo()
            continue
        if user_answer in ['g', 'guess']:
            if offer_guess(game):
                return
            continue

        try:
            response = Response.parse(user_answer)
        except ValueError:
            print("  (Invalid answer. Please use one of the allowed options.)")
            continue
        game.answer(response)

    print("\nI've asked too many questions! You've beaten me.")


def main():
    configure_logging()
    while True:
        game = GameFactory.create(
            settings.VARIANT,
            theme=settings.THEME,
            language=settings.LANGUAGE,
            child_mode=settings.CHILD_MODE,
        )
        try:
            play_game(game)
        except AkinatorError as e:
            print(f"Error: {e}")
            sys.exit(1)

        if not confirm("\nPlay again? (y/n) -> "):
            print("Thanks for playing!")
            break
        print("\n" + "=" * 50 + "\n")


if __name__ == "__main__":
    main()
