from opik.evaluation.metrics import BaseMetric
from opik.evaluation.metrics.score_result import ScoreResult


class WorkflowOutcome(BaseMetric):
    """Half credit for the visited node sequence, half for the final status."""
    name = "workflow_outcome"

    def score(
        self,
        trajectory: list[str],
        expected_trajectory: list[str],
        final_status: str,
        expected_final_status: str,
        **kwargs,
    ) -> ScoreResult:
        value = 0.0
        problems = []
        if trajectory == expected_trajectory:
            value += 0.5
        else:
            problems.append(f"trajectory {trajectory} != {expected_trajectory}")
        if final_status == expected_final_status:
            value += 0.5
        else:
            problems.append(f"final_status {final_status!r} != {expected_final_status!r}")

        return ScoreResult(
            value=value,
            name=self.name,
            reason="; ".join(problems) if problems else "Trajectory and final status as expected",
        )
