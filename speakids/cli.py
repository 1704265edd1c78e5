"""
SpeaKids CLI - Command-line interface for the service.

Usage:
    speakids serve [--host HOST] [--port PORT]    Run the HTTP API
    speakids word                                 Print the word of the day
    speakids sentence [--level A1]                Print the sentence of the day
    speakids translate TEXT --context SENTENCE    Translate a word in context
    speakids placement                            List placement test questions
"""

import argparse
import asyncio
import sys

from . import config


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="SpeaKids - Language-learning games for children",
        prog="speakids",
    )
    parser.add_argument("--log-level", default=None, help="Override SPEAKIDS_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    # Daily content
    subparsers.add_parser("word", help="Print the word of the day")
    sentence_parser = subparsers.add_parser("sentence", help="Print the sentence of the day")
    sentence_parser.add_argument("--level", default="A1", help="CEFR level (A1-C2)")

    # Translate command
    translate_parser = subparsers.add_parser("translate", help="Translate a word in context")
    translate_parser.add_argument("text", help="Word or expression")
    translate_parser.add_argument("--context", "-c", required=True, help="Sentence it appears in")

    # Placement questions
    subparsers.add_parser("placement", help="List placement test questions")

    args = parser.parse_args()
    config.configure_logging(args.log_level)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "word":
        cmd_word(args)
    elif args.command == "sentence":
        cmd_sentence(args)
    elif args.command == "translate":
        cmd_translate(args)
    elif args.command == "placement":
        cmd_placement(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "speakids.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=config.LOG_LEVEL.lower(),
    )


def cmd_word(args):
    from .content import Flows
    from .learning import fetch_daily_word

    word = asyncio.run(fetch_daily_word(Flows()))
    print(f"{word.word}: {word.hint}")


def cmd_sentence(args):
    from .content import Flows
    from .content.models import CefrLevel
    from .learning import fetch_daily_sentence

    try:
        level = CefrLevel(args.level.upper())
    except ValueError:
        print(f"Error: unknown level {args.level}")
        sys.exit(1)

    sentence = asyncio.run(fetch_daily_sentence(Flows(), level))
    print(sentence.sentence)
    if sentence.translation:
        print(sentence.translation)


def cmd_translate(args):
    from .content import Flows
    from .learning import translate_text

    result = asyncio.run(translate_text(Flows(), args.text, args.context))
    if result.error:
        print(f"Error: {result.error}")
        sys.exit(1)

    print(f"Translation: {result.translation}")
    print(f"Explanation: {result.explanation}")
    if result.synonyms:
        print(f"Synonyms: {', '.join(result.synonyms)}")


def cmd_placement(args):
    from .learning.placement import PLACEMENT_QUESTIONS

    for q in PLACEMENT_QUESTIONS:
        print(f"[{q.id}] ({q.level}, {q.skill}) {q.question}")
        for option in q.options:
            print(f"    {option.id}) {option.text}")


if __name__ == "__main__":
    main()
