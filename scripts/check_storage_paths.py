"""Report uploaded tickets whose record has lost its storage path.

Usage:
    uv run python scripts/check_storage_paths.py
    uv run python scripts/check_storage_paths.py --config config.yaml

Manual entries never have a photo and are not reported. Exits with status 1
when any ticket is missing its storage path.
"""
# ruff: noqa: E402
import argparse
import sys
from pathlib import Path

project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from dotenv import load_dotenv
load_dotenv(Path(project_root) / ".env")

from src.config import AppConfig
from src.builder import WorkflowBuilder


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", type=Path, default=Path(project_root) / "config.yaml")
    args = parser.parse_args()

    config = AppConfig.from_yaml(args.config) if args.config.exists() else AppConfig()
    review = WorkflowBuilder(config).build_review_service()

    missing = review.missing_storage_paths()
    for ticket in missing:
        print(f"Missing storage_path: {ticket.id}")

    if not missing:
        print("All tickets have storage_path.")
        return
    print(f"{len(missing)} tickets missing storage_path.")
    sys.exit(1)


if __name__ == "__main__":
    main()
