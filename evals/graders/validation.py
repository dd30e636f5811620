from opik.evaluation.metrics import BaseMetric
from opik.evaluation.metrics.score_result import ScoreResult


class NeedsFixCorrectness(BaseMetric):
    """Checks that the ticket was routed to (or kept out of) the fix queue correctly."""
    name = "needs_fix_correctness"

    def score(
        self,
        needs_fix: bool,
        expected_needs_fix: bool,
        missing_fields: list[str] | None = None,
        expected_missing_fields: list[str] | None = None,
        **kwargs,
    ) -> ScoreResult:
        if needs_fix != expected_needs_fix:
            return ScoreResult(
                value=0.0,
                name=self.name,
                reason=f"Expected needs_fix={expected_needs_fix}, got {needs_fix}",
            )

        if expected_missing_fields is not None and set(missing_fields or []) != set(expected_missing_fields):
            return ScoreResult(
                value=0.5,
                name=self.name,
                reason=f"needs_fix correct but missing fields differ. Expected: {sorted(expected_missing_fields)}, Got: {sorted(missing_fields or [])}",
            )

        return ScoreResult(value=1.0, name=self.name, reason=f"needs_fix={needs_fix} as expected")
