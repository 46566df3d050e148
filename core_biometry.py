"""
SonoCalc: Core Biometry Engine
==============================
The mathematical core that converts validated ultrasound measurements into
gestational age and estimated fetal weight.

All functions are pure and total over the validated input windows:
BPD 15-110 mm, AC 80-400 mm, CRL 5-85 mm.

NOTE: The BPD/AC weight estimate is a heuristic composite (age-based baseline
scaled by AC), not a validated clinical regression such as Hadlock.
"""

import math
from typing import Optional, Sequence, Tuple

from constants import BIOMETRY_CONSTANTS, CalculatorKind, RECOMMENDED_WINDOWS
from models import (
    AuditLog,
    BpdAcResult,
    CalculationOutcome,
    CrlResult,
    EstimateWarnings,
    FetalWeightEstimate,
    GestationalAge,
)

IntervalTable = Sequence[Tuple[float, float, float, float]]

class BiometryEngine:
    """
    Measurements (mm) -> Continuous Weeks -> Gestational Age / Fetal Weight.
    """

    @staticmethod
    def round_half_away(value: float) -> int:
        """Rounds .5 away from zero (3.5 -> 4, -3.5 -> -4)."""
        return int(math.copysign(math.floor(abs(value) + 0.5), value))

    @staticmethod
    def evaluate_piecewise(table: IntervalTable, x: float) -> float:
        """
        Linear scan over (upper_bound, intercept, origin, slope) rows.
        The first row with x <= upper_bound wins.
        """
        for upper_bound, intercept, origin, slope in table:
            if x <= upper_bound:
                return intercept + (x - origin) * slope
        # Tables end with an open (inf) row, so this is a malformed table
        raise ValueError(f"No interval covers {x}")

    @staticmethod
    def split_weeks(total_weeks: float, total_days: Optional[int] = None) -> GestationalAge:
        """
        Whole weeks (floor) + remainder days (rounded).
        A remainder that rounds up to 7 days rolls into the next week.
        """
        weeks = math.floor(total_weeks)
        days = BiometryEngine.round_half_away((total_weeks - weeks) * BIOMETRY_CONSTANTS.DAYS_PER_WEEK)
        if days >= BIOMETRY_CONSTANTS.DAYS_PER_WEEK:
            weeks += 1
            days -= BIOMETRY_CONSTANTS.DAYS_PER_WEEK
        return GestationalAge(weeks=int(weeks), days=days, total_days=total_days)

    # --- BPD -> AGE ---

    @staticmethod
    def raw_weeks_from_bpd(bpd_mm: float) -> float:
        """Piecewise BPD curve before clamping."""
        return BiometryEngine.evaluate_piecewise(BIOMETRY_CONSTANTS.BPD_TO_WEEKS, bpd_mm)

    @staticmethod
    def continuous_weeks_from_bpd(bpd_mm: float) -> float:
        """Piecewise BPD curve clamped to 12-42 weeks. Shared by the age and weight estimates."""
        weeks = BiometryEngine.raw_weeks_from_bpd(bpd_mm)
        return max(BIOMETRY_CONSTANTS.MIN_WEEKS, min(BIOMETRY_CONSTANTS.MAX_WEEKS, weeks))

    @staticmethod
    def age_from_bpd(bpd_mm: float) -> GestationalAge:
        return BiometryEngine.split_weeks(BiometryEngine.continuous_weeks_from_bpd(bpd_mm))

    # --- BPD + AC -> WEIGHT ---

    @staticmethod
    def baseline_weight_for_weeks(weeks: float) -> float:
        return BiometryEngine.evaluate_piecewise(BIOMETRY_CONSTANTS.WEEKS_TO_BASELINE_WEIGHT, weeks)

    @staticmethod
    def adjusted_weight(bpd_mm: float, ac_mm: float) -> float:
        """Baseline for the (clamped) age, scaled by (AC/250)^1.5. No floor applied."""
        weeks = BiometryEngine.continuous_weeks_from_bpd(bpd_mm)
        baseline = BiometryEngine.baseline_weight_for_weeks(weeks)
        ac_factor = ac_mm / BIOMETRY_CONSTANTS.AC_REFERENCE_MM
        return baseline * math.pow(ac_factor, BIOMETRY_CONSTANTS.AC_EXPONENT)

    @staticmethod
    def weight_from_bpd_ac(bpd_mm: float, ac_mm: float) -> float:
        """Estimated fetal weight in grams, floored at 300 g. No upper limit."""
        return max(BIOMETRY_CONSTANTS.MIN_WEIGHT_G, BiometryEngine.adjusted_weight(bpd_mm, ac_mm))

    # --- CRL -> AGE (Robinson) ---

    @staticmethod
    def days_from_crl(crl_mm: float) -> float:
        return BIOMETRY_CONSTANTS.ROBINSON_SLOPE * math.sqrt(crl_mm) + BIOMETRY_CONSTANTS.ROBINSON_INTERCEPT_DAYS

    @staticmethod
    def age_from_crl(crl_mm: float) -> GestationalAge:
        ga_days = BiometryEngine.days_from_crl(crl_mm)
        return BiometryEngine.split_weeks(
            ga_days / BIOMETRY_CONSTANTS.DAYS_PER_WEEK,
            total_days=BiometryEngine.round_half_away(ga_days),
        )

    # --- OUTCOME FACTORIES (used by the session layer) ---

    @staticmethod
    def _outside_window(calculator: CalculatorKind, age: GestationalAge) -> bool:
        lower, upper = RECOMMENDED_WINDOWS.SPECS[calculator]
        return not (lower <= age.decimal_weeks <= upper)

    @staticmethod
    def estimate_bpd_ac(bpd_mm: float, ac_mm: float) -> CalculationOutcome:
        """Full BPD + AC pipeline on already-validated values."""
        raw_weeks = BiometryEngine.raw_weeks_from_bpd(bpd_mm)
        age = BiometryEngine.age_from_bpd(bpd_mm)
        weight = FetalWeightEstimate(grams=BiometryEngine.weight_from_bpd_ac(bpd_mm, ac_mm))

        warnings = EstimateWarnings(
            age_clamped=not (BIOMETRY_CONSTANTS.MIN_WEEKS <= raw_weeks <= BIOMETRY_CONSTANTS.MAX_WEEKS),
            weight_floor_applied=BiometryEngine.adjusted_weight(bpd_mm, ac_mm) < BIOMETRY_CONSTANTS.MIN_WEIGHT_G,
            outside_recommended_window=BiometryEngine._outside_window(CalculatorKind.BPD_AC, age),
        )

        return CalculationOutcome.succeeded(
            CalculatorKind.BPD_AC,
            BpdAcResult(weight=weight, gestational_age=age, bpd_mm=bpd_mm, ac_mm=ac_mm),
            warnings,
            AuditLog(inputs_hash=hash((bpd_mm, ac_mm))),
        )

    @staticmethod
    def estimate_crl(crl_mm: float) -> CalculationOutcome:
        """Full CRL pipeline on an already-validated value."""
        age = BiometryEngine.age_from_crl(crl_mm)
        warnings = EstimateWarnings(
            outside_recommended_window=BiometryEngine._outside_window(CalculatorKind.CRL, age),
        )
        return CalculationOutcome.succeeded(
            CalculatorKind.CRL,
            CrlResult(gestational_age=age, crl_mm=crl_mm),
            warnings,
            AuditLog(inputs_hash=hash((crl_mm,))),
        )

# Module-level aliases for callers that prefer plain functions
age_from_bpd = BiometryEngine.age_from_bpd
weight_from_bpd_ac = BiometryEngine.weight_from_bpd_ac
age_from_crl = BiometryEngine.age_from_crl
