"""
SonoCalc: Data Dictionary
=========================
Defines the measurements entered at the bedside, the estimates produced by the
biometry engine, and the outcome objects handed to the UI.

NO FORMULAS are implemented here. The estimators live in core_biometry.py.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union
from datetime import datetime
from constants import VERSION, MeasurementKind, CalculatorKind, MEASUREMENT_RANGES, MESSAGES

class DataTypeError(TypeError):
    """Raised when inputs are wrong python types (a list instead of text or a number)."""
    pass

class SessionBusyError(RuntimeError):
    """Raised when a session receives a submission while the previous one is still running."""
    pass

# --- 1. VALIDATION TAXONOMY ---

class ValidationErrorKind(Enum):
    MISSING_INPUT = "missing_input"
    NOT_A_NUMBER = "not_a_number"
    OUT_OF_RANGE = "out_of_range"

class MeasurementValidationError(ValueError):
    """Base class for user-correctable input problems."""
    error_kind: ValidationErrorKind

    def __init__(self, measurement: MeasurementKind, message: str):
        super().__init__(message)
        self.measurement = measurement
        self.message = message

class MissingInputError(MeasurementValidationError):
    error_kind = ValidationErrorKind.MISSING_INPUT

class NotANumberError(MeasurementValidationError):
    error_kind = ValidationErrorKind.NOT_A_NUMBER

class OutOfRangeError(MeasurementValidationError):
    error_kind = ValidationErrorKind.OUT_OF_RANGE

    def __init__(self, measurement: MeasurementKind, minimum: float, maximum: float):
        spec = MEASUREMENT_RANGES.get(measurement)
        super().__init__(
            measurement,
            MESSAGES.OUT_OF_RANGE.format(label=spec.label, minimum=minimum, maximum=maximum),
        )
        self.minimum = minimum
        self.maximum = maximum

# --- 2. INPUT LAYER ---

@dataclass
class Measurement:
    """
    A single ultrasound measurement in millimeters, as typed by the operator.
    `value` stays None until the text parses.
    """
    kind: MeasurementKind
    raw_text: Optional[str] = None
    value: Optional[float] = None

    @property
    def minimum_mm(self) -> float:
        return MEASUREMENT_RANGES.get(self.kind).minimum_mm

    @property
    def maximum_mm(self) -> float:
        return MEASUREMENT_RANGES.get(self.kind).maximum_mm

    @property
    def is_usable(self) -> bool:
        if self.value is None or not math.isfinite(self.value):
            return False
        return self.minimum_mm <= self.value <= self.maximum_mm

@dataclass
class ValidationResult:
    """Standardized validator response. `values` is keyed by measurement name ('bpd', 'ac', 'crl')."""
    success: bool
    measurements: Dict[str, Measurement]
    values: Dict[str, float] = field(default_factory=dict)
    error: Optional[MeasurementValidationError] = None

# --- 3. OUTPUT LAYER ---

@dataclass(frozen=True)
class GestationalAge:
    weeks: int
    days: int                          # 0-6
    total_days: Optional[int] = None   # CRL path only

    @property
    def decimal_weeks(self) -> float:
        return self.weeks + self.days / 7

    @property
    def label(self) -> str:
        return f"{self.weeks}w {self.days}d"

@dataclass(frozen=True)
class FetalWeightEstimate:
    grams: float  # >= 300 (floor)

    @property
    def rounded_grams(self) -> int:
        # Half away from zero, same as the displayed value in the bedside tool
        return int(math.floor(self.grams + 0.5))

@dataclass
class EstimateWarnings:
    """Non-critical issues the clinician should see next to the number."""
    age_clamped: bool = False                  # BPD-derived weeks hit the 12-42 week clamp
    weight_floor_applied: bool = False         # Weight raised to the 300 g floor
    outside_recommended_window: bool = False   # Age outside the calculator's intended window

@dataclass
class BpdAcResult:
    weight: FetalWeightEstimate
    gestational_age: GestationalAge
    bpd_mm: float
    ac_mm: float

@dataclass
class CrlResult:
    gestational_age: GestationalAge
    crl_mm: float

@dataclass
class AuditLog:
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    action: str = "biometry_estimate"
    inputs_hash: int = 0
    model_version: str = VERSION

@dataclass
class CalculationOutcome:
    """
    Success(payload) | Failure(error) for one calculator.
    Exactly one of `payload` / `error` is set.
    """
    calculator: CalculatorKind
    success: bool
    payload: Optional[Union[BpdAcResult, CrlResult]] = None
    error: Optional[MeasurementValidationError] = None
    warnings: EstimateWarnings = field(default_factory=EstimateWarnings)
    audit_log: Optional[AuditLog] = None

    @classmethod
    def succeeded(cls, calculator: CalculatorKind, payload, warnings: EstimateWarnings,
                  audit_log: Optional[AuditLog] = None) -> "CalculationOutcome":
        return cls(calculator=calculator, success=True, payload=payload,
                   warnings=warnings, audit_log=audit_log)

    @classmethod
    def failed(cls, calculator: CalculatorKind, error: MeasurementValidationError,
               audit_log: Optional[AuditLog] = None) -> "CalculationOutcome":
        return cls(calculator=calculator, success=False, error=error, audit_log=audit_log)
