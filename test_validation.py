import unittest
from constants import MeasurementKind
from models import (
    DataTypeError,
    Measurement,
    MissingInputError,
    NotANumberError,
    OutOfRangeError,
    ValidationErrorKind,
)
from validation import validate_bpd_ac, validate_crl

class TestInputValidation(unittest.TestCase):
    """
    Raw operator text -> typed values or a typed failure. Never raises for bad text.
    """

    def assertFailure(self, result, error_cls, measurement):
        self.assertFalse(result.success)
        self.assertIsInstance(result.error, error_cls)
        self.assertEqual(result.error.measurement, measurement)
        self.assertEqual(result.values, {})

    def test_01_missing_input(self):
        self.assertFailure(validate_bpd_ac('', '250'), MissingInputError, MeasurementKind.BPD)
        self.assertFailure(validate_bpd_ac('70', ''), MissingInputError, MeasurementKind.AC)
        self.assertFailure(validate_bpd_ac(None, '250'), MissingInputError, MeasurementKind.BPD)
        self.assertFailure(validate_crl('   '), MissingInputError, MeasurementKind.CRL)
        self.assertEqual(validate_crl('').error.error_kind, ValidationErrorKind.MISSING_INPUT)

    def test_02_not_a_number(self):
        self.assertFailure(validate_bpd_ac('abc', '250'), NotANumberError, MeasurementKind.BPD)
        self.assertFailure(validate_bpd_ac('70', '25o'), NotANumberError, MeasurementKind.AC)
        self.assertFailure(validate_crl('nan'), NotANumberError, MeasurementKind.CRL)
        self.assertFailure(validate_crl(float('nan')), NotANumberError, MeasurementKind.CRL)
        # float() would accept these, a plain decimal field must not
        self.assertFailure(validate_bpd_ac('7_0', '2_50'), NotANumberError, MeasurementKind.BPD)
        self.assertFailure(validate_crl('٣٠'), NotANumberError, MeasurementKind.CRL)
        self.assertFailure(validate_crl('30 mm'), NotANumberError, MeasurementKind.CRL)
        # Ordinary spellings still parse
        self.assertEqual(validate_crl('+.5e2').values, {'crl': 50.0})
        self.assertEqual(validate_crl('30.').values, {'crl': 30.0})

    def test_03_out_of_range(self):
        result = validate_bpd_ac('10', '250')
        self.assertFailure(result, OutOfRangeError, MeasurementKind.BPD)
        self.assertEqual(result.error.error_kind, ValidationErrorKind.OUT_OF_RANGE)
        self.assertEqual((result.error.minimum, result.error.maximum), (15.0, 110.0))
        self.assertEqual(str(result.error), "Biparietal diameter (BPD) should be within 15-110 mm.")

        result = validate_bpd_ac('70', '401')
        self.assertFailure(result, OutOfRangeError, MeasurementKind.AC)
        self.assertEqual((result.error.minimum, result.error.maximum), (80.0, 400.0))

        result = validate_crl('4.9')
        self.assertFailure(result, OutOfRangeError, MeasurementKind.CRL)
        self.assertEqual((result.error.minimum, result.error.maximum), (5.0, 85.0))

    def test_04_infinity_is_out_of_range(self):
        self.assertFailure(validate_crl('inf'), OutOfRangeError, MeasurementKind.CRL)
        self.assertFailure(validate_bpd_ac('70', '-inf'), OutOfRangeError, MeasurementKind.AC)

    def test_05_rule_order_first_failure_wins(self):
        """Presence is checked for both fields before parsing, parsing before range."""
        self.assertFailure(validate_bpd_ac('abc', ''), MissingInputError, MeasurementKind.AC)
        self.assertFailure(validate_bpd_ac('10', 'abc'), NotANumberError, MeasurementKind.AC)
        self.assertFailure(validate_bpd_ac('10', '500'), OutOfRangeError, MeasurementKind.BPD)

    def test_06_bounds_are_inclusive(self):
        self.assertTrue(validate_bpd_ac('15', '80').success)
        self.assertTrue(validate_bpd_ac('110', '400').success)
        self.assertTrue(validate_crl('5').success)
        self.assertTrue(validate_crl('85').success)

    def test_07_values_pass_through_unmodified(self):
        result = validate_bpd_ac(' 70.123 ', '250.75')
        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(result.values, {'bpd': 70.123, 'ac': 250.75})
        self.assertEqual(result.measurements['bpd'].raw_text, ' 70.123 ')
        self.assertTrue(all(m.is_usable for m in result.measurements.values()))

    def test_08_numeric_input_accepted(self):
        result = validate_crl(30)
        self.assertTrue(result.success)
        self.assertEqual(result.values, {'crl': 30.0})

    def test_08b_huge_int_is_out_of_range(self):
        """Ints too large for a float are still numbers and fail the range rule."""
        result = validate_crl(10 ** 400)
        self.assertFailure(result, OutOfRangeError, MeasurementKind.CRL)
        self.assertFalse(result.measurements['crl'].is_usable)
        self.assertFailure(validate_bpd_ac('70', -10 ** 400), OutOfRangeError, MeasurementKind.AC)

    def test_09_failed_measurements_are_kept(self):
        """The unparsed text stays on the measurement so the UI can show it back."""
        result = validate_bpd_ac('abc', '250')
        self.assertEqual(result.measurements['bpd'].raw_text, 'abc')
        self.assertIsNone(result.measurements['bpd'].value)

    def test_10_wrong_python_type_is_a_contract_violation(self):
        with self.assertRaises(DataTypeError):
            validate_crl(['30'])
        with self.assertRaises(TypeError):
            validate_bpd_ac('70', True)

    def test_11_measurement_usability(self):
        self.assertTrue(Measurement(MeasurementKind.AC, '250', 250.0).is_usable)
        self.assertFalse(Measurement(MeasurementKind.AC, '79', 79.0).is_usable)
        self.assertFalse(Measurement(MeasurementKind.AC, None, None).is_usable)
        self.assertFalse(Measurement(MeasurementKind.AC, 'inf', float('inf')).is_usable)
        self.assertEqual(Measurement(MeasurementKind.CRL).maximum_mm, 85.0)

if __name__ == '__main__':
    unittest.main()
