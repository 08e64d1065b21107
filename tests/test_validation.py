from datetime import date
from unittest import TestCase

from medschedule.config import MAX_SCHEDULE_DAYS, MAX_TIMES_PER_DAY
from medschedule.domain.schedules.builder import ItemDraft, ScheduleAggregateBuilder
from medschedule.domain.schedules.exceptions import (
    EmptyItemList,
    InvalidDate,
    InvalidDuration,
    InvalidItem,
    ScheduleValidationError,
)
from medschedule.domain.schedules.schemas import MedicineItemIn
from medschedule.domain.schedules.validator import ScheduleItemValidator
from medschedule.shared.roles import Author

from .helpers import create_request, item


class ScheduleItemValidatorTest(TestCase):
    def test_valid_item(self):
        self.assertEqual(ScheduleItemValidator.validate(item()), [])

    def test_zero_gap_is_valid(self):
        self.assertEqual(ScheduleItemValidator.validate(item(gap=0)), [])

    def test_each_rule(self):
        cases = [
            (item(name=""), "medicineName"),
            (item(name="   "), "medicineName"),
            (item(dosage=""), "dosage"),
            (item(dosage="\t"), "dosage"),
            (item(times=0), "timesPerDay"),
            (item(times=-3), "timesPerDay"),
            (item(gap=-1), "gapBetweenDays"),
            (item(times=MAX_TIMES_PER_DAY + 1), "timesPerDay"),
            (item(times=10**20), "timesPerDay"),
            (item(times="two"), "timesPerDay"),
            (item(gap=MAX_SCHEDULE_DAYS + 1), "gapBetweenDays"),
            (item(gap="weekly"), "gapBetweenDays"),
        ]
        for medicine, field in cases:
            errors = ScheduleItemValidator.validate(medicine)
            self.assertEqual([e["field"] for e in errors], [field], msg=repr(medicine))

    def test_upper_bounds_are_inclusive(self):
        self.assertEqual(
            ScheduleItemValidator.validate(item(times=MAX_TIMES_PER_DAY, gap=MAX_SCHEDULE_DAYS)), []
        )

    def test_missing_numbers_are_reported(self):
        errors = ScheduleItemValidator.validate(
            MedicineItemIn(medicineName="Metformin", dosage="500mg")
        )
        self.assertEqual(
            sorted(e["field"] for e in errors), ["gapBetweenDays", "timesPerDay"]
        )

    def test_batch_reports_every_failing_item(self):
        batch = [item(), item(name="", times=0), item(name="Ibuprofen", gap=-2)]

        with self.assertRaises(InvalidItem) as ctx:
            ScheduleItemValidator.validate_items(batch)

        errors = ctx.exception.errors
        self.assertEqual(sorted({e["index"] for e in errors}), [1, 2])
        self.assertIn("Ibuprofen", ctx.exception.message)
        self.assertIn("Unnamed Item", ctx.exception.message)
        self.assertEqual(ctx.exception.status_code, 400)


class ScheduleAggregateBuilderTest(TestCase):
    def setUp(self):
        self.builder = ScheduleAggregateBuilder()

    def test_build_create_request(self):
        draft = self.builder.build(
            create_request(
                7,
                items=[item(name="  Amoxicillin ", notes="  after food "), item(name="Zinc", gap=0)],
                notes="  ",
            ),
            author=Author.doctor(3),
        )

        self.assertEqual(draft.patient_id, 7)
        self.assertEqual(draft.author, Author.doctor(3))
        self.assertEqual(draft.start_date, date(2024, 1, 1))
        self.assertEqual(draft.number_of_days, 10)
        self.assertIsNone(draft.notes)
        self.assertEqual([i.medicine_name for i in draft.items], ["Amoxicillin", "Zinc"])
        self.assertEqual([i.position for i in draft.items], [0, 1])
        self.assertEqual(draft.items[0].notes, "after food")

    def test_datetime_start_is_truncated_to_date(self):
        draft = self.builder.build(create_request(1, start="2024-02-29T18:30:00Z"))
        self.assertEqual(draft.start_date, date(2024, 2, 29))

    def test_number_of_days_is_coerced(self):
        draft = self.builder.build(create_request(1, days="14"))
        self.assertEqual(draft.number_of_days, 14)

    def test_invalid_dates(self):
        for value in ["2024-13-01", "yesterday", "", None]:
            with self.assertRaises(InvalidDate, msg=repr(value)):
                self.builder.build(create_request(1, start=value))

    def test_numeric_strings_in_items_are_coerced(self):
        draft = self.builder.build(create_request(1, items=[item(times="3", gap=" 0 ")]))
        self.assertEqual(draft.items[0].times_per_day, 3)
        self.assertEqual(draft.items[0].gap_between_days, 0)

    def test_invalid_durations(self):
        for value in [0, -5, "ten", None, MAX_SCHEDULE_DAYS + 1, 5_000_000]:
            with self.assertRaises(InvalidDuration, msg=repr(value)):
                self.builder.build(create_request(1, days=value))

    def test_longest_duration_is_accepted(self):
        draft = self.builder.build(create_request(1, days=MAX_SCHEDULE_DAYS))
        self.assertEqual(draft.number_of_days, MAX_SCHEDULE_DAYS)

    def test_end_date_past_calendar_limit(self):
        with self.assertRaises(InvalidDuration):
            self.builder.build(create_request(1, start="9999-12-01", days=100))

        draft = self.builder.build(create_request(1, start="9999-12-01", days=31))
        self.assertEqual(draft.number_of_days, 31)

    def test_empty_items(self):
        with self.assertRaises(EmptyItemList):
            self.builder.build(create_request(1, items=[]))

    def test_blank_rows_are_dropped_before_empty_check(self):
        with self.assertRaises(EmptyItemList):
            self.builder.build(create_request(1, items=[MedicineItemIn(), MedicineItemIn(notes=" ")]))

        draft = self.builder.build(create_request(1, items=[MedicineItemIn(), item(name="Zinc")]))
        self.assertEqual([i.medicine_name for i in draft.items], ["Zinc"])

    def test_invalid_item_rejects_whole_request(self):
        with self.assertRaises(InvalidItem):
            self.builder.build(create_request(1, items=[item(), item(dosage="")]))

    def test_all_errors_are_validation_errors(self):
        for error in (InvalidDate, InvalidDuration, EmptyItemList, InvalidItem):
            self.assertTrue(issubclass(error, ScheduleValidationError))


class ItemDiffTest(TestCase):
    def draft(self, position, item_id=None):
        return ItemDraft(
            id=item_id,
            medicine_name=f"Medicine {position}",
            dosage="1 tablet",
            times_per_day=1,
            gap_between_days=0,
            position=position,
        )

    def test_replace_semantics(self):
        changes = ScheduleAggregateBuilder.diff_items(
            [1, 2], [self.draft(0, item_id=1), self.draft(1)]
        )

        self.assertEqual([d.id for d in changes.updates], [1])
        self.assertEqual(len(changes.inserts), 1)
        self.assertEqual(changes.deletions, [2])

    def test_all_new_items_delete_everything_stored(self):
        changes = ScheduleAggregateBuilder.diff_items([4, 5, 6], [self.draft(0)])
        self.assertEqual(changes.deletions, [4, 5, 6])

    def test_unknown_id_is_rejected(self):
        with self.assertRaises(InvalidItem) as ctx:
            ScheduleAggregateBuilder.diff_items([1], [self.draft(0, item_id=99)])
        self.assertEqual(ctx.exception.errors[0]["field"], "id")

    def test_duplicate_id_is_rejected(self):
        with self.assertRaises(InvalidItem):
            ScheduleAggregateBuilder.diff_items(
                [1], [self.draft(0, item_id=1), self.draft(1, item_id=1)]
            )
