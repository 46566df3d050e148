# schemas.py
from typing import Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from constants import (
    VERSION,
    MEDICAL_DISCLAIMER,
    MESSAGES,
    CalculatorKind,
    MeasurementKind,
)
from models import (
    BpdAcResult,
    CalculationOutcome,
    CrlResult,
    EstimateWarnings,
    GestationalAge,
    OutOfRangeError,
    ValidationErrorKind,
)

# --- RESPONSE SCHEMA (The Contract with the renderer) ---

class GestationalAgeResponse(BaseModel):
    weeks: int = Field(..., ge=0, description="Completed weeks")
    days: int = Field(..., ge=0, le=6, description="Remainder days")
    total_days: Optional[int] = Field(None, ge=0, description="Total days (CRL only)")
    decimal_weeks: float = Field(..., description="weeks + days/7, one decimal place")
    label: str = Field(..., description="e.g. '35w 4d'")

class ErrorResponse(BaseModel):
    kind: ValidationErrorKind
    measurement: MeasurementKind
    message: str
    minimum_mm: Optional[float] = None
    maximum_mm: Optional[float] = None

class OutcomeResponse(BaseModel):
    calculator: CalculatorKind
    success: bool

    # Results
    estimated_weight_g: Optional[int] = Field(None, ge=300, description="Rounded EFW (BPD + AC only)")
    gestational_age: Optional[GestationalAgeResponse] = None
    measurements_mm: Dict[str, float] = Field(default_factory=dict)
    warnings: EstimateWarnings = Field(default_factory=EstimateWarnings)  # Dataclass nested as-is

    # Failure
    error: Optional[ErrorResponse] = None

    # UX
    method_note: str = ""
    human_readable_summary: str = ""
    disclaimer: str = MEDICAL_DISCLAIMER
    engine_version: str = VERSION
    generated_at: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "calculator": "bpd_ac", "success": True, "estimated_weight_g": 2300,
                "gestational_age": {"weeks": 35, "days": 4, "total_days": None,
                                    "decimal_weeks": 35.6, "label": "35w 4d"},
                "measurements_mm": {"bpd": 70.0, "ac": 250.0},
                "human_readable_summary": "EFW 2300 g. GA 35w 4d (35.6 weeks) by BPD.",
            }
        }
    )

def _age_response(age: GestationalAge) -> GestationalAgeResponse:
    return GestationalAgeResponse(
        weeks=age.weeks,
        days=age.days,
        total_days=age.total_days,
        decimal_weeks=round(age.decimal_weeks, 1),
        label=age.label,
    )

def _error_response(outcome: CalculationOutcome) -> ErrorResponse:
    err = outcome.error
    bounds = {}
    if isinstance(err, OutOfRangeError):
        bounds = {"minimum_mm": err.minimum, "maximum_mm": err.maximum}
    return ErrorResponse(kind=err.error_kind, measurement=err.measurement, message=err.message, **bounds)

def build_response(outcome: CalculationOutcome) -> OutcomeResponse:
    """
    Converts an engine outcome into the serializable contract.
    Call .model_dump() / .model_dump_json() on the result.
    """
    if not outcome.success:
        error = _error_response(outcome)
        return OutcomeResponse(
            calculator=outcome.calculator,
            success=False,
            error=error,
            human_readable_summary=error.message,
        )

    payload = outcome.payload
    age = _age_response(payload.gestational_age)

    if isinstance(payload, BpdAcResult):
        weight_g = payload.weight.rounded_grams
        return OutcomeResponse(
            calculator=outcome.calculator,
            success=True,
            estimated_weight_g=weight_g,
            gestational_age=age,
            measurements_mm={"bpd": payload.bpd_mm, "ac": payload.ac_mm},
            warnings=outcome.warnings,
            method_note=MESSAGES.METHOD_BPD_AC,
            human_readable_summary=f"EFW {weight_g} g. GA {age.label} ({age.decimal_weeks:.1f} weeks) by BPD.",
        )

    if isinstance(payload, CrlResult):
        return OutcomeResponse(
            calculator=outcome.calculator,
            success=True,
            gestational_age=age,
            measurements_mm={"crl": payload.crl_mm},
            warnings=outcome.warnings,
            method_note=MESSAGES.METHOD_CRL,
            human_readable_summary=(
                f"GA {age.label} ({age.decimal_weeks:.1f} weeks), "
                f"{age.total_days} days total by CRL."
            ),
        )

    raise TypeError(f"Unknown payload type {type(payload)}")
