from enum import Enum
from dataclasses import dataclass
VERSION = "1.0.0"

MEDICAL_DISCLAIMER = (
    "Decision support tool only. Results are for clinical reference and must be "
    "interpreted together with other findings. Not a substitute for a full "
    "obstetric examination."
)

class MeasurementKind(Enum):
    BPD = "bpd"   # Biparietal diameter
    AC = "ac"     # Abdominal circumference
    CRL = "crl"   # Crown-rump length

class CalculatorKind(Enum):
    BPD_AC = "bpd_ac"
    CRL = "crl"

@dataclass(frozen=True)
class MeasurementRange:
    label: str
    minimum_mm: float
    maximum_mm: float

    def contains(self, value: float) -> bool:
        return self.minimum_mm <= value <= self.maximum_mm

class MEASUREMENT_RANGES:
    """
    Accepted input windows (mm). Anything outside is rejected by the validator,
    never clamped.
    """
    SPECS = {
        MeasurementKind.BPD: MeasurementRange("Biparietal diameter (BPD)", 15.0, 110.0),
        MeasurementKind.AC: MeasurementRange("Abdominal circumference (AC)", 80.0, 400.0),
        MeasurementKind.CRL: MeasurementRange("Crown-rump length (CRL)", 5.0, 85.0),
    }

    @staticmethod
    def get(kind: MeasurementKind) -> MeasurementRange:
        return MEASUREMENT_RANGES.SPECS[kind]

class BIOMETRY_CONSTANTS:
    # Rows: (upper_bound, intercept, origin, slope) -> intercept + (x - origin) * slope
    # Selected by the first row with x <= upper_bound. Last row is open-ended.
    BPD_TO_WEEKS = (
        (25.0, 12.0, 20.0, 0.8),
        (40.0, 16.0, 25.0, 0.6),
        (55.0, 25.0, 40.0, 0.4),
        (70.0, 31.0, 55.0, 0.3),
        (85.0, 35.5, 70.0, 0.25),
        (95.0, 39.25, 85.0, 0.15),
        (float("inf"), 40.75, 95.0, 0.1),
    )
    BPD_BREAKPOINTS_MM = (25.0, 40.0, 55.0, 70.0, 85.0, 95.0)

    MIN_WEEKS = 12.0
    MAX_WEEKS = 42.0

    # Weeks -> baseline grams, same row layout as BPD_TO_WEEKS
    WEEKS_TO_BASELINE_WEIGHT = (
        (20.0, 300.0, 18.0, 50.0),
        (28.0, 400.0, 20.0, 75.0),
        (32.0, 1000.0, 28.0, 150.0),
        (36.0, 1600.0, 32.0, 200.0),
        (40.0, 2400.0, 36.0, 150.0),
        (float("inf"), 3000.0, 40.0, 50.0),
    )
    WEIGHT_BREAKPOINTS_WEEKS = (20.0, 28.0, 32.0, 36.0, 40.0)

    AC_REFERENCE_MM = 250.0
    AC_EXPONENT = 1.5
    MIN_WEIGHT_G = 300.0

    # Robinson: GA(days) = 8.052 * sqrt(CRL) + 23.73
    ROBINSON_SLOPE = 8.052
    ROBINSON_INTERCEPT_DAYS = 23.73

    DAYS_PER_WEEK = 7

class RECOMMENDED_WINDOWS:
    # Gestational age (weeks) each calculator is intended for
    SPECS = {
        CalculatorKind.BPD_AC: (18.0, 40.0),
        CalculatorKind.CRL: (6.0, 16.0),
    }

# Simulated processing latency of the original UI (seconds)
DEFAULT_COMPUTE_DELAY_S = 0.8

class MESSAGES:
    MISSING_BPD_AC = "Please enter both BPD and AC values."
    MISSING_CRL = "Please enter a CRL value."
    NOT_A_NUMBER = "Please enter a valid number."
    OUT_OF_RANGE = "{label} should be within {minimum:g}-{maximum:g} mm."
    METHOD_BPD_AC = "Estimated from BPD and AC using an empirical clinical formula."
    METHOD_CRL = "Estimated from CRL using the Robinson formula."
