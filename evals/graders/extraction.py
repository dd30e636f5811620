from opik.evaluation.metrics import BaseMetric
from opik.evaluation.metrics.score_result import ScoreResult


EXTRACTION_FIELDS = [
    "ticket_number", "weight_tons", "truck_number",
    "driver_actual", "driver_badge", "debris_type",
]


class ExtractionAccuracy(BaseMetric):
    """Field-level extraction accuracy over all six ticket fields.

    An expected absence counts: extracting a value
    where the ground truth has none is a mismatch.
    """
    name = "extraction_accuracy"

    def score(self, extracted_fields: dict | None, expected_fields: dict, **kwargs) -> ScoreResult:
        extracted_fields = extracted_fields or {}
        correct = 0
        mismatches = []

        for field in EXTRACTION_FIELDS:
            expected = self._normalize(expected_fields.get(field))
            actual = self._normalize(extracted_fields.get(field))
            if actual == expected:
                correct += 1
            else:
                mismatches.append(f"{field}: expected {expected!r}, got {actual!r}")

        total = len(EXTRACTION_FIELDS)
        return ScoreResult(
            value=correct / total,
            name=self.name,
            reason=f"{correct}/{total} fields correct. Mismatches: {mismatches}" if mismatches else f"{correct}/{total} fields correct",
        )

    @staticmethod
    def _normalize(value) -> str | None:
        """Normalize for comparison: collapse whitespace, lowercase."""
        if value is None:
            return None
        return " ".join(str(value).split()).lower()
