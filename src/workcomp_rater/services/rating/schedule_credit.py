"""Schedule credit for workforce stability, safety programs and tenure."""

from collections.abc import Iterable

from beartype import beartype

from ...models.business import SafetyProgram, WorkforceMetrics

LOW_TURNOVER_THRESHOLD = 0.15
LOW_TURNOVER_CREDIT = 0.05
TENURE_THRESHOLD_YEARS = 5
TENURE_CREDIT = 0.03
TRAINING_HOURS_THRESHOLD = 20
TRAINING_CREDIT = 0.04
SAFETY_PROGRAM_CREDIT = 0.02
MAX_SAFETY_PROGRAM_CREDIT = 0.10
ESTABLISHED_BUSINESS_YEARS = 10
ESTABLISHED_BUSINESS_CREDIT = 0.03
MATURE_BUSINESS_YEARS = 5
MATURE_BUSINESS_CREDIT = 0.02

MAX_SCHEDULE_CREDIT = 0.25


@beartype
class ScheduleCreditCalculator:
    """Additive credit rules, capped at 25% in total."""

    @beartype
    @staticmethod
    def workforce_credit(metrics: WorkforceMetrics) -> float:
        credit = 0.0
        if metrics.turnover_rate < LOW_TURNOVER_THRESHOLD:
            credit += LOW_TURNOVER_CREDIT
        if metrics.avg_tenure > TENURE_THRESHOLD_YEARS:
            credit += TENURE_CREDIT
        if metrics.training_hours_per_year > TRAINING_HOURS_THRESHOLD:
            credit += TRAINING_CREDIT
        return credit

    @beartype
    @staticmethod
    def safety_program_credit(safety_programs: Iterable[SafetyProgram]) -> float:
        """2% per active program, at most 10%."""
        active = sum(1 for program in safety_programs if program.status == "active")
        return min(MAX_SAFETY_PROGRAM_CREDIT, active * SAFETY_PROGRAM_CREDIT)

    @beartype
    @staticmethod
    def tenure_credit(years_in_business: float) -> float:
        if years_in_business > ESTABLISHED_BUSINESS_YEARS:
            return ESTABLISHED_BUSINESS_CREDIT
        if years_in_business > MATURE_BUSINESS_YEARS:
            return MATURE_BUSINESS_CREDIT
        return 0.0

    @beartype
    @classmethod
    def compute(
        cls,
        workforce_metrics: WorkforceMetrics,
        safety_programs: Iterable[SafetyProgram],
        years_in_business: float,
    ) -> float:
        """Calculate the schedule credit.

        Returns:
            Credit in [0, 0.25]; multiply premium by ``1 - credit``
        """
        credit = (
            cls.workforce_credit(workforce_metrics)
            + cls.safety_program_credit(safety_programs)
            + cls.tenure_credit(years_in_business)
        )
        return min(MAX_SCHEDULE_CREDIT, credit)
