#!/usr/bin/env python3
"""
Generate the User resource API documentation snippets

Runs the documented user tour in-process against a fresh application and
writes one snippet directory per operation.

Usage:
    python src/generate_docs.py                                # defaults from the environment
    python src/generate_docs.py --output-dir docs/snippets --format markdown
    python src/generate_docs.py --strict                       # 404 for unknown ids (tour will fail)
"""

import argparse
import logging
import sys
from dotenv import load_dotenv

from fastapi.testclient import TestClient


def build_parser() -> argparse.ArgumentParser:
    from config.settings import SNIPPETS_OUTPUT_DIR, SNIPPETS_FORMAT, SUPPORTED_SNIPPET_FORMATS

    parser = argparse.ArgumentParser(description="Generate User resource API documentation snippets")
    parser.add_argument("--output-dir", default=SNIPPETS_OUTPUT_DIR,
                        help=f"Directory for generated snippets (default: {SNIPPETS_OUTPUT_DIR})")
    parser.add_argument("--format", dest="snippet_format", default=SNIPPETS_FORMAT,
                        choices=SUPPORTED_SNIPPET_FORMATS, help="Snippet output format")
    parser.add_argument("--strict", action="store_true",
                        help="Answer 404 for updates and deletes of unknown users")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    return parser


def main(argv=None) -> int:
    load_dotenv()

    from config.settings import LOG_LEVEL
    from app import create_app
    from restdocs.documentation import RestDocumentation
    from restdocs.errors import SnippetError
    from restdocs.recorder import FileSnippetRecorder
    from scenarios.user_tour import ScenarioStepError, UserResourceTour
    from services.users_service import UsersService

    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else LOG_LEVEL)
    logger = logging.getLogger("generate_docs")

    users_service = UsersService(
        permissive_update=not args.strict,
        permissive_delete=not args.strict
    )
    recorder = FileSnippetRecorder(args.output_dir, snippet_format=args.snippet_format)
    app = create_app(users_service)

    with TestClient(app) as client:
        tour = UserResourceTour(client, RestDocumentation(recorder))
        try:
            result = tour.run()
        except (ScenarioStepError, SnippetError) as e:
            logger.error(f"Documentation run failed: {e}")
            return 1

    print(f"📄 Documented {len(result.records)} operations in {args.output_dir}")
    for name in dict.fromkeys(result.operation_names):
        print(f"   ✅ {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
