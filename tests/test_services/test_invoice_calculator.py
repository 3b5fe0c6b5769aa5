import unittest
from datetime import date, datetime, timedelta, timezone

from villa.models.bookings import Booking, MealPrices
from villa.models.invoice import InvoiceLineItem
from villa.services.invoice_calculator import (
    check_booking_totals,
    invoice_total,
    meal_line_items,
    nights_between,
    room_line_item,
)
from villa.utils.custom_exceptions import (
    InvalidAmount,
    InvalidDateRange,
    InvalidPercent,
    MissingPriceConfiguration,
    TotalsMismatch,
)

IST = timezone(timedelta(hours=5, minutes=30))


def make_booking(**overrides) -> Booking:
    fields = dict(
        booking_id="b1",
        user_id="u1",
        user_email="guest@example.com",
        room_name="Rose Suite",
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 4),
        amount=7000,
        room_total=4000,
        veg_guests=2,
        meal_prices=MealPrices(veg=500),
    )
    fields.update(overrides)
    return Booking(**fields)


class TestNightsBetween(unittest.TestCase):

    def test_same_day_is_one_night(self):
        start = datetime(2024, 6, 1, 9, 0)
        end = datetime(2024, 6, 1, 18, 30)

        self.assertEqual(nights_between(start, end), 1)
        self.assertEqual(nights_between(date(2024, 6, 1), date(2024, 6, 1)), 1)

    def test_counts_calendar_nights(self):
        self.assertEqual(nights_between(date(2024, 6, 1), date(2024, 6, 4)), 3)

    def test_time_of_day_is_ignored(self):
        start = datetime(2024, 6, 1, 23, 0)
        end = datetime(2024, 6, 3, 1, 0)

        self.assertEqual(nights_between(start, end), 2)

    def test_aware_end_read_in_start_timezone(self):
        start = datetime(2024, 6, 1, 12, 0, tzinfo=IST)
        # 2024-06-04 01:30 in IST
        end = datetime(2024, 6, 3, 20, 0, tzinfo=timezone.utc)

        self.assertEqual(nights_between(start, end), 3)

    def test_end_before_start_raises(self):
        with self.assertRaises(InvalidDateRange):
            nights_between(date(2024, 6, 4), date(2024, 6, 1))


class TestLineItems(unittest.TestCase):

    def test_line_item_total(self):
        item = InvoiceLineItem.of("Veg Meal", 500, 6)

        self.assertEqual(item.line_total, 3000)

    def test_inconsistent_line_item_rejected(self):
        with self.assertRaises(ValueError):
            InvoiceLineItem(label="Veg Meal", unit_price=500, quantity=6, line_total=2500)

    def test_negative_unit_price_rejected(self):
        with self.assertRaises(InvalidAmount):
            InvoiceLineItem.of("Veg Meal", -500, 6)

    def test_negative_quantity_rejected(self):
        with self.assertRaises(InvalidAmount):
            InvoiceLineItem.of("Veg Meal", 500, -6)

    def test_zero_nights_rejected(self):
        for nights in (0, -2):
            with self.subTest(nights=nights):
                with self.assertRaises(InvalidDateRange):
                    meal_line_items(make_booking(), nights=nights)

    def test_room_line_item_zero_nights_rejected(self):
        booking = make_booking(room_total=None, price_per_night=2000)

        with self.assertRaises(InvalidDateRange):
            room_line_item(booking, 0)

    def test_veg_meal_line_item(self):
        items = meal_line_items(make_booking())

        self.assertEqual(
            items,
            [InvoiceLineItem(label="Veg Meal", unit_price=500, quantity=6, line_total=3000)],
        )

    def test_zero_guest_categories_are_omitted(self):
        booking = make_booking(veg_guests=0, non_veg_guests=1, meal_prices=MealPrices(non_veg=700))

        items = meal_line_items(booking)

        self.assertEqual([item.label for item in items], ["Non-Veg Meal"])

    def test_all_categories_in_order(self):
        booking = make_booking(
            veg_guests=1,
            non_veg_guests=2,
            combo_guests=3,
            meal_prices=MealPrices(veg=400, non_veg=600, combo=800),
        )

        items = meal_line_items(booking, nights=2)

        self.assertEqual([i.label for i in items], ["Veg Meal", "Non-Veg Meal", "Combo Meal"])
        self.assertEqual([i.quantity for i in items], [2, 4, 6])
        self.assertEqual([i.line_total for i in items], [800, 2400, 4800])

    def test_missing_price_raises(self):
        booking = make_booking(veg_guests=1, meal_prices=MealPrices())

        with self.assertRaises(MissingPriceConfiguration) as ctx:
            meal_line_items(booking)
        self.assertIn("Veg Meal", str(ctx.exception))

    def test_missing_price_ignored_without_guests(self):
        booking = make_booking(veg_guests=0, meal_prices=MealPrices())

        self.assertEqual(meal_line_items(booking), [])

    def test_negative_meal_price_raises(self):
        booking = make_booking(meal_prices=MealPrices(veg=-10))

        with self.assertRaises(InvalidAmount):
            meal_line_items(booking)

    def test_room_line_item_from_price_per_night(self):
        booking = make_booking(room_total=None, price_per_night=2000)

        item = room_line_item(booking, 3)

        self.assertEqual((item.unit_price, item.quantity, item.line_total), (2000, 3, 6000))

    def test_room_line_item_uses_stored_total(self):
        item = room_line_item(make_booking(), 3)

        self.assertEqual((item.label, item.line_total, item.quantity), ("Room Charges", 4000, 1))


class TestInvoiceTotal(unittest.TestCase):

    def test_room_and_veg_meals_with_tax(self):
        items = meal_line_items(make_booking())

        totals = invoice_total(4000, items, 12)

        self.assertEqual(totals.sub_total, 7000)
        self.assertEqual(totals.tax, 840)
        self.assertEqual(totals.grand_total, 7840)

    def test_tax_rounds_half_up(self):
        self.assertEqual(invoice_total(10, [], 5).tax, 1)

    def test_zero_tax_rate(self):
        totals = invoice_total(4000, [], 0)

        self.assertEqual(totals.grand_total, 4000)

    def test_invariant_chain(self):
        for room_total in (0, 1, 999, 4000):
            for rate in (0, 5, 12, 18, 100):
                items = [InvoiceLineItem.of("Veg Meal", 333, 3)]
                totals = invoice_total(room_total, items, rate)
                self.assertGreaterEqual(totals.grand_total, totals.sub_total)
                self.assertGreaterEqual(totals.sub_total, room_total)
                self.assertGreaterEqual(room_total, 0)

    def test_subtotal_never_below_room_total(self):
        with self.assertRaises(InvalidAmount):
            invoice_total(4000, [InvoiceLineItem.of("Veg Meal", -500, 6)], 12)

    def test_negative_room_total_raises(self):
        with self.assertRaises(InvalidAmount):
            invoice_total(-1, [], 12)

    def test_tax_rate_out_of_range_raises(self):
        with self.assertRaises(InvalidPercent):
            invoice_total(100, [], 150)

    def test_is_idempotent(self):
        items = meal_line_items(make_booking())

        self.assertEqual(invoice_total(4000, items, 12), invoice_total(4000, items, 12))


class TestCheckBookingTotals(unittest.TestCase):

    def test_consistent_totals_pass(self):
        booking = make_booking(meal_total=3000)

        check_booking_totals(booking, room_line_item(booking, 3), meal_line_items(booking))

    def test_amount_mismatch_raises(self):
        booking = make_booking(amount=8000)

        with self.assertRaises(TotalsMismatch):
            check_booking_totals(booking, room_line_item(booking, 3), meal_line_items(booking))

    def test_stored_meal_total_mismatch_raises(self):
        booking = make_booking(meal_total=2500)

        with self.assertRaises(TotalsMismatch):
            check_booking_totals(booking, room_line_item(booking, 3), meal_line_items(booking))


if __name__ == "__main__":
    unittest.main()
