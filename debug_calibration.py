# debug_calibration.py
import logging

from constants import BIOMETRY_CONSTANTS
from core_biometry import BiometryEngine
from schemas import build_response
from session import ObstetricCalculator

logger = logging.getLogger("sonocalc-calibration")

TOLERANCE = 1e-9

def _check_continuity(name, table, breakpoints) -> bool:
    """Evaluates both neighbouring rows of an interval table at each breakpoint."""
    ok = True
    for i, x in enumerate(breakpoints):
        _, b_left, o_left, s_left = table[i]
        _, b_right, o_right, s_right = table[i + 1]
        left = b_left + (x - o_left) * s_left
        right = b_right + (x - o_right) * s_right
        gap = abs(left - right)
        status = "OK " if gap <= TOLERANCE else "GAP"
        print(f"  {status} {name} @ {x:g}: left={left:.6f} right={right:.6f} (|d|={gap:.2e})")
        ok = ok and gap <= TOLERANCE
    return ok

def run_debug():
    print("\n========================================")
    print("   SONOCALC FORMULA CALIBRATION DEBUGGER")
    print("========================================")

    # 1. CONTINUITY OF THE INTERVAL TABLES
    print("\n--- CHECKING BREAKPOINT CONTINUITY ---")
    bpd_ok = _check_continuity("BPD->weeks", BIOMETRY_CONSTANTS.BPD_TO_WEEKS,
                               BIOMETRY_CONSTANTS.BPD_BREAKPOINTS_MM)
    weight_ok = _check_continuity("weeks->baseline g", BIOMETRY_CONSTANTS.WEEKS_TO_BASELINE_WEIGHT,
                                  BIOMETRY_CONSTANTS.WEIGHT_BREAKPOINTS_WEEKS)

    # 2. REFERENCE CASES
    print("\n--- REFERENCE CASES ---")
    age = BiometryEngine.age_from_bpd(70)
    print(f" > BPD 70 mm          -> {age.label}")
    print(f" > BPD 70 / AC 250 mm -> {BiometryEngine.weight_from_bpd_ac(70, 250):.1f} g")
    crl_age = BiometryEngine.age_from_crl(30)
    print(f" > CRL 30 mm          -> {crl_age.label} ({crl_age.total_days} days)")

    # 3. FULL PIPELINE (what the UI receives)
    print("\n--- END-TO-END SUBMISSIONS ---")
    calculator = ObstetricCalculator(delay_s=0)
    for outcome in (calculator.submit_bpd_ac("70", "250"),
                    calculator.submit_bpd_ac("10", "250"),
                    calculator.submit_crl("30")):
        print(f" > {build_response(outcome).human_readable_summary}")

    # 4. VERDICT
    if bpd_ok and weight_ok:
        print("\n✅ SUCCESS: All interval tables are continuous at their breakpoints.")
    else:
        logger.error("Interval tables have discontinuities, check BIOMETRY_CONSTANTS")
        print("\n❌ FAILURE: Discontinuity detected.")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_debug()
