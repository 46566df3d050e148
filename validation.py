# validation.py
import math
import re
from typing import Any, List, Tuple

from constants import MeasurementKind, MEASUREMENT_RANGES, MESSAGES
from models import (
    DataTypeError,
    Measurement,
    MeasurementValidationError,
    MissingInputError,
    NotANumberError,
    OutOfRangeError,
    ValidationResult,
)

# Plain ASCII decimal / scientific notation, plus inf and nan spellings
DECIMAL_PATTERN = re.compile(
    r"^[+-]?((\d+\.?\d*|\.\d+)([eE][+-]?\d+)?|inf|infinity|nan)$",
    re.ASCII | re.IGNORECASE,
)

def read_measurement(kind: MeasurementKind, raw: Any, missing_message: str) -> Measurement:
    """
    Turns raw operator input into a Measurement with a parsed value.
    Raises MissingInputError / NotANumberError. Range is NOT checked here.
    """
    if raw is None:
        raise MissingInputError(kind, missing_message)

    # Already-parsed numbers are accepted as-is (bool is not a measurement)
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            value = float(raw)
        except OverflowError:
            # Ints beyond float range are still numbers: let the range rule reject them
            return Measurement(kind=kind, raw_text=None, value=math.inf if raw > 0 else -math.inf)
        if math.isnan(value):
            raise NotANumberError(kind, MESSAGES.NOT_A_NUMBER)
        return Measurement(kind=kind, raw_text=str(raw), value=value)

    if not isinstance(raw, str):
        raise DataTypeError(f"Measurement '{kind.value}' must be text or numeric, got {type(raw)}")

    text = raw.strip()
    if not text:
        raise MissingInputError(kind, missing_message)

    # float() alone would also take '7_0' and non-ASCII digits
    if not DECIMAL_PATTERN.match(text):
        raise NotANumberError(kind, MESSAGES.NOT_A_NUMBER)

    value = float(text)
    if math.isnan(value):
        raise NotANumberError(kind, MESSAGES.NOT_A_NUMBER)

    return Measurement(kind=kind, raw_text=raw, value=value)

def check_range(measurement: Measurement) -> None:
    """Raises OutOfRangeError unless the value lies inside its kind's window (inclusive)."""
    spec = MEASUREMENT_RANGES.get(measurement.kind)
    if not measurement.is_usable:
        raise OutOfRangeError(measurement.kind, spec.minimum_mm, spec.maximum_mm)

def _validate(fields: List[Tuple[MeasurementKind, Any]], missing_message: str) -> ValidationResult:
    """
    Runs each rule over every field before moving to the next rule,
    so a blank AC is reported before a malformed BPD.
    """
    measurements = {kind.value: Measurement(kind=kind, raw_text=raw) for kind, raw in fields}

    try:
        # Rule 1: presence
        for kind, raw in fields:
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                raise MissingInputError(kind, missing_message)

        # Rule 2: numeric
        for kind, raw in fields:
            measurements[kind.value] = read_measurement(kind, raw, missing_message)

        # Rule 3: range
        for kind, _ in fields:
            check_range(measurements[kind.value])

    except MeasurementValidationError as e:
        return ValidationResult(success=False, measurements=measurements, error=e)

    return ValidationResult(
        success=True,
        measurements=measurements,
        values={name: m.value for name, m in measurements.items()},
    )

def validate_bpd_ac(bpd_text: Any, ac_text: Any) -> ValidationResult:
    """Validator for the BPD + AC calculator. values -> {'bpd': float, 'ac': float}"""
    return _validate(
        [(MeasurementKind.BPD, bpd_text), (MeasurementKind.AC, ac_text)],
        MESSAGES.MISSING_BPD_AC,
    )

def validate_crl(crl_text: Any) -> ValidationResult:
    """Validator for the CRL calculator. values -> {'crl': float}"""
    return _validate([(MeasurementKind.CRL, crl_text)], MESSAGES.MISSING_CRL)
