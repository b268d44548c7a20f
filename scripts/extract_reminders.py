"""Script to extract reminder candidates from a text file or stdin.

Prints the candidates as JSON on stdout. With --raw the input is treated as
model output and only the parsing/validation pipeline runs (no provider call).
"""

import argparse
import json
import logging
import os
import sys
from datetime import date

# Ensure the main package is in the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from reminder_engine.core.config import get_settings
from reminder_engine.core.dependencies import create_llm_client
from reminder_engine.features.errors import ProviderError, UnreadableInputError
from reminder_engine.features.extraction_pipeline import run_extraction_pipeline
from reminder_engine.features.extraction_service import (
    extract_reminders_from_document,
    extract_reminders_from_text,
)

# --- Logging Setup --- (stderr, so stdout stays valid JSON)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)
logger = logging.getLogger(__name__)
# --- End Logging Setup ---

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Extract reminder candidates from text.")
    parser.add_argument(
        "input",
        nargs="?",
        help="Path to a text file. Reads stdin when omitted."
    )
    parser.add_argument(
        "--mode",
        choices=["text", "document"],
        default="text",
        help="Prompt to use: free text (emails, notes) or a bill/document (default: text)."
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Treat the input as model output and run only the pipeline."
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date (YYYY-MM-DD) for relative dates. Defaults to the current date."
    )
    return parser.parse_args(argv)

def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    today = args.today or date.today()

    if args.input:
        with open(args.input, "r", encoding="utf-8") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    if args.raw:
        result = run_extraction_pipeline(text, today, currency_symbol=settings.currency_symbol)
    else:
        extract_func = extract_reminders_from_document if args.mode == "document" else extract_reminders_from_text
        try:
            llm_service = create_llm_client(settings)
            result = extract_func(text, llm_service, today=today)
        except (UnreadableInputError, ProviderError) as e:
            logger.error(str(e))
            return 1

    logger.info(f"Extracted {len(result.candidates)} candidate(s) via {result.strategy.value} path.")
    output = {
        "strategy": result.strategy.value,
        "candidates": [c.model_dump(mode="json", by_alias=True) for c in result.candidates],
    }
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0

if __name__ == "__main__":
    sys.exit(main())
