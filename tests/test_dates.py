import unittest
from datetime import date, datetime

from billing_cycle.utils.dates import (
    ClosingDayOverflow,
    add_months,
    as_calendar_date,
    day_in_month,
    is_business_day,
    month_range,
    resolve_day_in_month,
    roll_day_in_month,
    shift_to_business_day,
)


class MonthArithmeticTests(unittest.TestCase):
    def test_add_months_crosses_years(self) -> None:
        self.assertEqual(add_months(2025, 12, 1), (2026, 1))
        self.assertEqual(add_months(2025, 1, -1), (2024, 12))
        self.assertEqual(add_months(2025, 6, 0), (2025, 6))
        self.assertEqual(add_months(2025, 11, -23), (2023, 12))

    def test_month_range(self) -> None:
        self.assertEqual(month_range(date(2024, 2, 14)), (date(2024, 2, 1), date(2024, 2, 29)))

    def test_as_calendar_date(self) -> None:
        self.assertEqual(as_calendar_date(datetime(2025, 11, 7, 23, 59)), date(2025, 11, 7))
        self.assertEqual(as_calendar_date(date(2025, 11, 7)), date(2025, 11, 7))


class DayInMonthTests(unittest.TestCase):
    def test_clamp_uses_last_day(self) -> None:
        self.assertEqual(resolve_day_in_month(2025, 4, 31), date(2025, 4, 30))
        self.assertEqual(resolve_day_in_month(2025, 2, 30), date(2025, 2, 28))

    def test_roll_spills_into_next_month(self) -> None:
        self.assertEqual(roll_day_in_month(2025, 4, 31), date(2025, 5, 1))
        self.assertEqual(roll_day_in_month(2025, 2, 31), date(2025, 3, 3))
        self.assertEqual(roll_day_in_month(2025, 12, 31), date(2025, 12, 31))

    def test_day_in_month_modes(self) -> None:
        self.assertEqual(day_in_month(2025, 4, 31), date(2025, 5, 1))
        self.assertEqual(day_in_month(2025, 4, 31, overflow=ClosingDayOverflow.CLAMP), date(2025, 4, 30))
        self.assertEqual(day_in_month(2025, 4, 31, overflow="CLAMP"), date(2025, 4, 30))
        self.assertEqual(day_in_month(2025, 4, 15, overflow="CLAMP"), date(2025, 4, 15))

    def test_integral_float_day(self) -> None:
        self.assertEqual(day_in_month(2025, 4, 15.0, overflow="CLAMP"), date(2025, 4, 15))
        self.assertEqual(day_in_month(2025, 4, 31.0, overflow="CLAMP"), date(2025, 4, 30))
        self.assertEqual(day_in_month(2025, 4, 31.0), date(2025, 5, 1))

    def test_unknown_overflow_raises(self) -> None:
        with self.assertRaises(ValueError):
            day_in_month(2025, 4, 31, overflow="WRAP")


class BusinessDayTests(unittest.TestCase):
    def test_is_business_day(self) -> None:
        self.assertTrue(is_business_day(date(2025, 11, 7)))  # Fri
        self.assertFalse(is_business_day(date(2025, 11, 8)))  # Sat
        self.assertFalse(is_business_day(date(2025, 11, 9)))  # Sun

    def test_shift_directions(self) -> None:
        self.assertEqual(shift_to_business_day(date(2025, 11, 8), direction="prev"), date(2025, 11, 7))
        self.assertEqual(shift_to_business_day(date(2025, 11, 8), direction="next"), date(2025, 11, 10))
        self.assertEqual(shift_to_business_day(date(2025, 11, 9), direction="next"), date(2025, 11, 10))
        self.assertEqual(shift_to_business_day(date(2025, 11, 10), direction="next"), date(2025, 11, 10))

    def test_unknown_direction_raises(self) -> None:
        with self.assertRaises(ValueError):
            shift_to_business_day(date(2025, 11, 8), direction="nearest")


if __name__ == "__main__":
    unittest.main()
