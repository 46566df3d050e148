# session.py
import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional, Union

from constants import CalculatorKind, DEFAULT_COMPUTE_DELAY_S
from core_biometry import BiometryEngine
from models import (
    CalculationOutcome,
    Measurement,
    SessionBusyError,
    ValidationResult,
)
from validation import validate_bpd_ac, validate_crl

logger = logging.getLogger("sonocalc-engine")

class SessionState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    COMPUTING = "computing"
    RESULT = "result"
    ERROR = "error"

class CalculatorSession:
    """
    One calculator tab: IDLE -> VALIDATING -> (COMPUTING -> RESULT) | ERROR.
    reset() returns to IDLE from any state.
    """

    # calculator -> (validator, estimator)
    PIPELINES: Dict[CalculatorKind, tuple] = {
        CalculatorKind.BPD_AC: (validate_bpd_ac, lambda v: BiometryEngine.estimate_bpd_ac(v["bpd"], v["ac"])),
        CalculatorKind.CRL: (validate_crl, lambda v: BiometryEngine.estimate_crl(v["crl"])),
    }

    def __init__(self, calculator: CalculatorKind, delay_s: float = DEFAULT_COMPUTE_DELAY_S):
        self.calculator = calculator
        self.delay_s = delay_s
        self.state = SessionState.IDLE
        self.measurements: Dict[str, Measurement] = {}
        self.outcome: Optional[CalculationOutcome] = None

    @property
    def busy(self) -> bool:
        return self.state in (SessionState.VALIDATING, SessionState.COMPUTING)

    def reset(self) -> None:
        self.state = SessionState.IDLE
        self.measurements = {}
        self.outcome = None

    def _begin(self) -> None:
        if self.busy:
            raise SessionBusyError(f"{self.calculator.value} session is still {self.state.value}")
        self.state = SessionState.VALIDATING

    def _run(self, raw_inputs: tuple) -> CalculationOutcome:
        validator, estimator = self.PIPELINES[self.calculator]
        logger.info(f"Submission on {self.calculator.value}: {raw_inputs}")

        try:
            validation: ValidationResult = validator(*raw_inputs)
            self.measurements = validation.measurements

            if not validation.success:
                logger.warning(f"Validation failed ({validation.error.error_kind.value}): {validation.error}")
                self.outcome = CalculationOutcome.failed(self.calculator, validation.error)
                self.state = SessionState.ERROR
                return self.outcome

            self.state = SessionState.COMPUTING
            self.outcome = estimator(validation.values)
            self.state = SessionState.RESULT

        except Exception as e:
            # Formula failures on validated input are engine defects, never user errors
            logger.error(f"Internal engine failure on {self.calculator.value}: {str(e)}", exc_info=True)
            self.reset()
            raise

        logger.info(f"Result on {self.calculator.value}: {self.outcome.payload}")
        return self.outcome

    def submit(self, *raw_inputs: Any) -> CalculationOutcome:
        """Synchronous pipeline, no artificial delay."""
        self._begin()
        return self._run(raw_inputs)

    async def submit_async(self, *raw_inputs: Any, delay_s: Optional[float] = None) -> CalculationOutcome:
        """
        Same pipeline, preceded by a simulated processing delay spent in VALIDATING.
        Cancelling during the delay returns the session to IDLE.
        """
        self._begin()
        try:
            await asyncio.sleep(self.delay_s if delay_s is None else delay_s)
        except asyncio.CancelledError:
            self.reset()
            raise
        return self._run(raw_inputs)

SessionId = Union[CalculatorKind, str]

class ObstetricCalculator:
    """
    Entry point for the UI. Holds one lazily-created session per calculator;
    the BPD + AC and CRL sessions never share state.
    """

    def __init__(self, delay_s: float = DEFAULT_COMPUTE_DELAY_S):
        self.delay_s = delay_s
        self._sessions: Dict[CalculatorKind, CalculatorSession] = {}

    def session(self, session_id: SessionId) -> CalculatorSession:
        kind = CalculatorKind(session_id)
        if kind not in self._sessions:
            self._sessions[kind] = CalculatorSession(kind, delay_s=self.delay_s)
        return self._sessions[kind]

    def submit_bpd_ac(self, bpd_text: Any, ac_text: Any) -> CalculationOutcome:
        return self.session(CalculatorKind.BPD_AC).submit(bpd_text, ac_text)

    def submit_crl(self, crl_text: Any) -> CalculationOutcome:
        return self.session(CalculatorKind.CRL).submit(crl_text)

    async def submit_bpd_ac_async(self, bpd_text: Any, ac_text: Any,
                                  delay_s: Optional[float] = None) -> CalculationOutcome:
        return await self.session(CalculatorKind.BPD_AC).submit_async(bpd_text, ac_text, delay_s=delay_s)

    async def submit_crl_async(self, crl_text: Any, delay_s: Optional[float] = None) -> CalculationOutcome:
        return await self.session(CalculatorKind.CRL).submit_async(crl_text, delay_s=delay_s)

    def reset(self, session_id: SessionId) -> None:
        kind = CalculatorKind(session_id)
        # A session that was never used is already idle
        if kind in self._sessions:
            self._sessions[kind].reset()
            logger.info(f"Session {kind.value} reset")
