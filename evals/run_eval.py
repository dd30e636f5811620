"""
Main evaluation runner. Uses opik.evaluate() to run all scenarios
through the ingestion workflow and compute metrics.

Each scenario's OCR text is stored as the "photo" in an in-memory blob
store; the mock OCR engine hands it back unchanged, so the scores measure
field extraction and routing, not Tesseract.

Usage:
    python -m evals.run_eval
    python -m evals.run_eval --category needs_fix
"""
import json
import argparse
from pathlib import Path

import opik
from opik import Opik
from opik.evaluation import evaluate

from evals.graders.extraction import ExtractionAccuracy
from evals.graders.outcome import WorkflowOutcome
from evals.graders.validation import NeedsFixCorrectness

from src.config import AppConfig
from src.builder import WorkflowBuilder


SCENARIOS_DIR = Path(__file__).parent / "scenarios"


def load_scenarios(category: str | None = None) -> list[dict]:
    """Load scenarios from JSON files, optionally filtered by category."""
    scenarios = []
    for path in sorted(SCENARIOS_DIR.glob("*.json")):
        with open(path) as f:
            data = json.load(f)
        for s in data["scenarios"]:
            if category is None or s["category"] == category:
                scenarios.append(s)
    return scenarios


def to_dataset_item(scenario: dict) -> dict:
    """Opik requires 'id' to be a UUID; rename our string ids to 'scenario_id'."""
    item = {**scenario}
    item["scenario_id"] = item.pop("id", None)
    return item


def build_eval_task(workflow, blob_store):
    """Build the task function that opik.evaluate() will call for each scenario."""

    @opik.track(name="ticket_ingestion")
    def eval_task(scenario: dict) -> dict:
        storage_path = f"tickets/eval/{scenario['scenario_id']}.jpg"
        blob_store.put(storage_path, scenario["input"]["ocr_text"].encode("utf-8"), "image/jpeg")

        result = workflow.invoke({
            "storage_path": storage_path,
            "content_type": "image/jpeg",
            "uploader_uid": "eval",
            "file_name": f"{scenario['scenario_id']}.jpg",
            "trajectory": [],
        })

        expected = scenario["expected"]
        return {
            "extracted_fields": result.get("extracted_fields"),
            "needs_fix": result.get("needs_fix", True),
            "missing_fields": result.get("missing_fields", []),
            "trajectory": result.get("trajectory", []),
            "final_status": result.get("final_status", "error"),
            # Pass through expected values for graders
            "expected_fields": expected["fields"],
            "expected_needs_fix": expected["needs_fix"],
            "expected_missing_fields": expected.get("missing_fields"),
            "expected_trajectory": expected["trajectory"],
            "expected_final_status": expected["final_status"],
        }

    return eval_task


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--category", type=str, default=None)
    parser.add_argument("--experiment-name", type=str, default=None)
    args = parser.parse_args()

    config = AppConfig.for_eval()
    builder = WorkflowBuilder(config)
    workflow = builder.build()

    # Load scenarios into Opik dataset
    scenarios = load_scenarios(args.category)
    client = Opik(
        project_name=config.opik_project,
        workspace=config.opik_workspace,
        api_key=config.opik_api_key,
    )
    dataset_name = f"ticket-scenarios-{args.category}" if args.category else "ticket-scenarios-all"
    dataset = client.get_or_create_dataset(dataset_name)

    dataset.insert([to_dataset_item(s) for s in scenarios])

    evaluate(
        dataset=dataset,
        task=build_eval_task(workflow, builder.blob_store),
        scoring_metrics=[
            ExtractionAccuracy(),
            NeedsFixCorrectness(),
            WorkflowOutcome(),
        ],
        experiment_name=args.experiment_name or "ticket-extraction-eval",
        experiment_config={
            "ocr_engine": config.ocr_engine,
            "category": args.category or "all",
        },
        project_name=config.opik_project,
        task_threads=1,
    )


if __name__ == "__main__":
    main()
