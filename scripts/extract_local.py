"""Run OCR and field extraction on a local ticket photo.

Usage:
    uv run python scripts/extract_local.py path/to/ticket.jpg
    uv run python scripts/extract_local.py path/to/ticket.jpg --lang eng

Prints the raw OCR text, the extracted fields and whether the ticket
would land in the fix queue. Nothing is persisted.
"""
# ruff: noqa: E402
import argparse
import json
import sys
from pathlib import Path

project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from dotenv import load_dotenv
load_dotenv(Path(project_root) / ".env")

from src.core.extractor import extract
from src.services.ocr.tesseract import TesseractOCR


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("image", type=Path)
    parser.add_argument("--lang", type=str, default="eng")
    args = parser.parse_args()

    if not args.image.is_file():
        print(f"Image not found: {args.image}")
        sys.exit(1)

    print(f"Running OCR on {args.image}...")
    raw_text = TesseractOCR(lang=args.lang).extract_text(args.image.read_bytes())

    print("\n=== EXTRACTED TEXT ===")
    print(raw_text)

    fields = extract(raw_text)
    print("\n=== EXTRACTED FIELDS ===")
    print(json.dumps(fields.model_dump(), indent=2))
    print(f"\nNeeds fix: {fields.needs_fix} (missing: {fields.missing_required()})")


if __name__ == "__main__":
    main()
