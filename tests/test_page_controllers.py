"""
Tests for the screen controllers: filtering, search, pagination, forms,
deletes, copy/paste and CSV import, all against an in-memory Supabase.
"""

import unittest
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import Settings
from data.models.hedging import CattleType
from fakes import FakeSupabase
from page_controllers import (
    AllDetailsController,
    BrockoffController,
    CattleByPenController,
    FeederCattleController,
    HedgingController,
    KeyDetailsController,
    NewGroupController,
    NewPenController,
    PenKeyDetailsController,
    PensController,
    PerformanceController,
    ViewState,
    clean_form,
    floor_number,
    year_options,
)
from utils.clipboard import MemoryClipboard
from utils.csv_importer import NOT_ENOUGH_LINES_MESSAGE, SKIP
from utils.validation import BROCKOFF_LOT_ERROR, PRE_SHIP_NAME_ERROR

CLOSEOUTS = [
    {'lot': 'A100', 'purchase_date': '2025-01-10', 'hd_purchased': 100, 'died': 1, 'hd_sold': 0,
     'origin': 'Texas', 'notes_on_group': 'Heavy steers',
     'ave_feed_intake_per_hd_per_day_deads_out': 25.0, 'dm_feed_per_gain_deads_out': 6.1,
     'adg_deads_out': 3.2},
    {'lot': 'A200', 'purchase_date': '2025-03-05', 'hd_purchased': 80, 'died': 0, 'hd_sold': 80,
     'origin': 'Kansas', 'adg_deads_out': 0},
    {'lot': 'B300', 'purchase_date': '2025-02-01', 'hd_purchased': 50},
    {'lot': 'C400', 'purchase_date': None, 'hd_purchased': 40},
    {'lot': 'A500', 'purchase_date': '2024-11-20', 'hd_purchased': 60, 'died': 2, 'hd_sold': 10,
     'origin': 'Nebraska', 'ave_feed_intake_per_hd_per_day_deads_out': 24.0,
     'dm_feed_per_gain_deads_out': 6.5, 'adg_deads_out': 2.9},
]

PENS = [
    {'pen_name': 'P1', 'pen_square_feet': 5000, 'pen_type': 'Open Lot', 'bunk_space_ft': 40, 'pre_ship': False},
    {'pen_name': 'P2', 'pen_square_feet': 8000, 'pen_type': 'Confinement', 'bunk_space_ft': 60, 'pre_ship': True},
]

GROUPS_BY_PEN = [
    {'group_name': 'A100', 'pen_name': 'P1', 'head': 50},
    {'group_name': 'A200', 'pen_name': 'P2', 'head': 30},
    {'group_name': 'B300', 'pen_name': 'P3', 'head': 20},
]

HEDGING = [
    {'cattle_type': 'Feeder Cattle', 'futures_month': '2025-03-01', 'positions': 2},
    {'cattle_type': 'Live Cattle', 'futures_month': '2025-04-01', 'positions': 5},
    {'cattle_type': 'Feeder Cattle', 'futures_month': '2025-01-01', 'positions': 1},
]


def make_client():
    return FakeSupabase({
        'home_closeouts': CLOSEOUTS,
        'pens': PENS,
        'groups_by_pen': GROUPS_BY_PEN,
        'hedging': HEDGING,
    })


def make_controller(cls, client=None):
    client = client or make_client()
    controller = cls.create(client, Settings())
    controller.load()
    return controller, client


def lots(rows):
    return [row.lot for row in rows]


def by_lot(controller, lot):
    return next(row for row in controller.table.rows if row.lot == lot)


class TestHelpers(unittest.TestCase):

    def test_clean_form_blanks_become_none(self):
        self.assertEqual(clean_form({'a': '  ', 'b': 'x', 'c': 0}), {'a': None, 'b': 'x', 'c': 0})

    def test_floor_number(self):
        self.assertEqual(floor_number('12.7'), 12)
        self.assertEqual(floor_number(8), 8)
        self.assertIsNone(floor_number(''))

    def test_year_options(self):
        self.assertEqual(year_options(date(2025, 6, 1)), [2024, 2025, 2026, 2027, 2028, 2029])

    def test_view_state_search_resets_page(self):
        view = ViewState(page=3)
        view.searched('')
        self.assertEqual(view.page, 3)
        view.searched('a1')
        self.assertEqual(view.page, 1)


class TestCloseoutScreens(unittest.TestCase):
    """Population filters and search for the closeout screens."""

    def test_new_group_shows_home_lots_with_purchase_date(self):
        controller, _ = make_controller(NewGroupController)
        self.assertEqual(lots(controller.rows), ['A200', 'A100', 'A500'])

    def test_key_details_shows_active_home_groups(self):
        controller, _ = make_controller(KeyDetailsController)
        self.assertEqual(lots(controller.rows), ['A100', 'A500'])

    def test_key_details_searches_notes(self):
        controller, _ = make_controller(KeyDetailsController)
        controller.set_search('HEAVY')
        self.assertEqual(lots(controller.visible_rows), ['A100'])

    def test_all_details_shows_every_home_lot(self):
        controller, _ = make_controller(AllDetailsController)
        self.assertEqual(lots(controller.rows), ['C400', 'A200', 'A100', 'A500'])
        controller.set_search('kansas')
        self.assertEqual(lots(controller.visible_rows), ['A200'])

    def test_brockoff_shows_b_lots_only(self):
        controller, _ = make_controller(BrockoffController)
        self.assertEqual(lots(controller.rows), ['B300'])

    def test_load_failure_shows_error(self):
        client = make_client()
        client.fail('select', 'relation "home_closeouts" does not exist')
        controller, _ = make_controller(NewGroupController, client)
        self.assertEqual(controller.error, 'relation "home_closeouts" does not exist')
        self.assertEqual(controller.rows, [])
        controller.clear_error()
        self.assertIsNone(controller.error)


class TestCloseoutForms(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(NewGroupController)

    def test_add_group(self):
        self.controller.open_add_form()
        self.assertTrue(self.controller.add_group({
            'lot': 'A600',
            'purchase_date': date(2025, 4, 1),
            'hd_purchased': 90.0,
            'purchase_wgt': None,
            'purchase_price_per_cwt': '',
        }))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertEqual(payload, {
            'lot': 'A600',
            'purchase_date': '2025-04-01',
            'hd_purchased': 90.0,
            'purchase_wgt': None,
            'purchase_price_per_cwt': None,
        })
        self.assertIn('A600', lots(self.controller.rows))
        self.assertFalse(self.controller.view.show_form)
        self.assertEqual(self.controller.pop_notice(), "✅ Group A600 added")
        self.assertIsNone(self.controller.pop_notice())

    def test_add_group_requires_lot(self):
        self.controller.open_add_form()
        self.assertFalse(self.controller.add_group({'lot': '', 'purchase_date': date(2025, 4, 1)}))
        self.assertEqual(self.controller.error, "lot is required")
        self.assertEqual(self.client.calls_for('insert'), [])
        self.assertTrue(self.controller.view.show_form)

    def test_remote_failure_keeps_form_open(self):
        self.client.fail('insert', 'duplicate key value violates unique constraint')
        self.controller.open_add_form()
        self.assertFalse(self.controller.add_group({'lot': 'A100', 'purchase_date': date(2025, 4, 1)}))
        self.assertEqual(self.controller.error, 'duplicate key value violates unique constraint')
        self.assertTrue(self.controller.view.show_form)

    def test_edit_group(self):
        record = by_lot(self.controller, 'A100')
        self.assertTrue(self.controller.start_edit(record.id))
        values = self.controller.form_defaults(self.controller.editing_record)
        values['hd_purchased'] = 105.0
        self.assertTrue(self.controller.save_edit(values))

        update = self.client.calls_for('update')[-1]
        self.assertEqual(update['filters'], [('eq', 'id', record.id)])
        self.assertEqual(update['payload']['hd_purchased'], 105.0)
        self.assertEqual(update['payload']['purchase_date'], '2025-01-10')
        self.assertEqual(by_lot(self.controller, 'A100').hd_purchased, 105)
        self.assertIsNone(self.controller.view.editing_id)
        self.assertFalse(self.controller.view.show_form)

    def test_edit_validates_merged_record(self):
        record = by_lot(self.controller, 'A100')
        self.controller.start_edit(record.id)
        self.assertFalse(self.controller.save_edit({'lot': 'A100', 'purchase_date': None}))
        self.assertEqual(self.controller.error, "purchase date is required")
        self.assertEqual(self.client.calls_for('update'), [])

    def test_save_without_selection(self):
        self.assertFalse(self.controller.save_edit({'lot': 'A1'}))
        self.assertEqual(self.controller.error, "No record selected for editing")

    def test_start_edit_unknown_row(self):
        self.assertFalse(self.controller.start_edit(999))
        self.assertEqual(self.controller.error, "No row with id 999 in home_closeouts")

    def test_editing_row_deleted_elsewhere_closes_form(self):
        record = by_lot(self.controller, 'A100')
        self.controller.start_edit(record.id)
        self.client.tables['home_closeouts'] = [
            row for row in self.client.tables['home_closeouts'] if row['id'] != record.id
        ]
        self.controller.load()
        self.assertIsNone(self.controller.editing_record)
        self.assertFalse(self.controller.view.show_form)

    def test_delete_needs_confirmation(self):
        record = by_lot(self.controller, 'A200')
        self.assertFalse(self.controller.confirm_delete())
        self.controller.request_delete(record.id)
        self.controller.cancel_delete()
        self.assertFalse(self.controller.confirm_delete())

        self.controller.request_delete(record.id)
        self.assertTrue(self.controller.confirm_delete())
        self.assertNotIn('A200', lots(self.controller.rows))
        self.assertIsNone(self.controller.view.pending_delete)
        self.assertEqual(self.controller.pop_notice(), "🗑️ Record deleted")


class TestBrockoff(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(BrockoffController)

    def test_add_requires_b_prefix(self):
        self.controller.open_add_form()
        self.assertFalse(self.controller.add_group({'lot': 'b400', 'purchase_date': date(2025, 5, 1)}))
        self.assertEqual(self.controller.error, BROCKOFF_LOT_ERROR)
        self.assertEqual(self.client.calls_for('insert'), [])

    def test_add_brockoff_group(self):
        self.controller.open_add_form()
        self.assertTrue(self.controller.add_group({'lot': 'B400', 'purchase_date': date(2025, 5, 1)}))
        self.assertEqual(lots(self.controller.rows), ['B400', 'B300'])

    def test_edit_cannot_drop_prefix(self):
        record = by_lot(self.controller, 'B300')
        self.controller.start_edit(record.id)
        self.assertFalse(self.controller.save_edit({'lot': 'A300', 'purchase_date': date(2025, 2, 1)}))
        self.assertEqual(self.controller.error, BROCKOFF_LOT_ERROR)

    def test_copy(self):
        clipboard = MemoryClipboard()
        transfer = self.controller.attach_clipboard(clipboard)
        self.assertEqual(transfer.copy(), "Copied 1 records!")
        header, row = clipboard.text.split('\n')
        self.assertEqual(header, "Lot\tPurchase Date\tHD Purchased\tPurchase Wgt\tPurchase $/CWT")
        self.assertEqual(row, "B300\t2025-02-01\t50\t\t")

    def test_paste_needs_lot_and_five_columns(self):
        clipboard = MemoryClipboard(
            "Lot\tPurchase Date\tHD Purchased\tPurchase Wgt\tPurchase $/CWT\n"
            "B400\t2025-05-01\t40\t600\t180\n"
            "\t2025-05-02\t10\t500\t170\n"
            "B500\t2025-05-03\n"
        )
        transfer = self.controller.attach_clipboard(clipboard)
        selects_before = len(self.client.calls_for('select'))

        self.assertEqual(transfer.paste(), "Added 1 records!")

        inserts = self.client.calls_for('insert')
        self.assertEqual(len(inserts), 1)
        self.assertEqual(inserts[0]['payload'][0], {
            'lot': 'B400',
            'purchase_date': '2025-05-01',
            'hd_purchased': '40',
            'purchase_wgt': '600',
            'purchase_price_per_cwt': '180',
        })
        # One reload after the whole paste
        self.assertEqual(len(self.client.calls_for('select')), selects_before + 1)
        self.assertEqual(lots(self.controller.rows), ['B400', 'B300'])

    def test_attach_clipboard_reuses_transfer(self):
        first = self.controller.attach_clipboard(MemoryClipboard())
        other = MemoryClipboard()
        second = self.controller.attach_clipboard(other)
        self.assertIs(first, second)
        self.assertIs(second.clipboard, other)


class TestPerformance(unittest.TestCase):

    def setUp(self):
        self.controller, _ = make_controller(PerformanceController)

    def test_available_groups_newest_first(self):
        self.assertEqual(lots(self.controller.available_groups), ['A100', 'A500'])

    def test_select_recent_and_chart_order(self):
        self.controller.select_recent(1)
        self.assertEqual(lots(self.controller.selected_groups), ['A100'])
        self.controller.select_all()
        self.assertEqual(lots(self.controller.selected_groups), ['A500', 'A100'])
        self.controller.select_none()
        self.assertEqual(self.controller.selected_groups, [])

    def test_select_all_respects_search(self):
        self.controller.set_search('nebraska')
        self.controller.select_all()
        self.assertEqual(lots(self.controller.selected_groups), ['A500'])

    def test_toggle_group(self):
        group = self.controller.available_groups[0]
        self.controller.toggle_group(group.id)
        self.assertEqual(self.controller.selected_ids, [group.id])
        self.controller.toggle_group(group.id)
        self.assertEqual(self.controller.selected_ids, [])

    def test_chart_series_follow_metric_toggles(self):
        self.controller.select_all()
        labels, series = self.controller.chart_series()
        self.assertEqual(labels, ['A500', 'A100'])
        self.assertEqual([s.label for s in series],
                         ['Avg Daily Feed (lbs)', 'Feed Conversion', 'Avg Daily Gain (lbs)'])
        self.assertEqual(series[2].values, [2.9, 3.2])
        self.assertEqual(series[2].axis, 'y1')

        self.controller.toggle_metric('avg_daily_gain')
        _, series = self.controller.chart_series()
        self.assertEqual(len(series), 2)

    def test_chart_type(self):
        self.controller.set_chart_type('line')
        self.assertEqual(self.controller.chart_type, 'line')
        with self.assertRaises(ValueError):
            self.controller.set_chart_type('pie')


class TestPens(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(PensController)

    def test_pre_ship_b_name_rejected_before_remote_call(self):
        self.controller.open_add_form()
        self.assertFalse(self.controller.save_pen({'pen_name': 'b9', 'pen_type': 'Open Lot', 'pre_ship': True}))
        self.assertEqual(self.controller.error, PRE_SHIP_NAME_ERROR)
        self.assertEqual(self.client.calls_for('insert'), [])

    def test_add_pen(self):
        self.controller.open_add_form()
        self.assertTrue(self.controller.save_pen({
            'pen_name': 'P9', 'pen_square_feet': 1200.0, 'pen_type': 'Confinement', 'pre_ship': False,
        }))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertEqual(payload, {'pen_name': 'P9', 'pen_square_feet': 1200, 'pen_type': 'Confinement',
                                   'pre_ship': False})
        self.assertEqual(self.controller.pop_notice(), "✅ Saved pen P9")

    def test_pen_name_required(self):
        self.controller.open_add_form()
        self.assertFalse(self.controller.save_pen({'pen_name': '', 'pen_type': 'Open Lot', 'pre_ship': False}))
        self.assertEqual(self.controller.error, "pen name is required")

    def test_form_defaults(self):
        pen = self.controller.table.rows[0]
        self.assertEqual(self.controller.form_defaults(pen), {
            'pen_name': 'P1', 'pen_square_feet': 5000, 'pen_type': 'Open Lot', 'pre_ship': False,
        })
        self.assertEqual(self.controller.form_defaults()['pen_type'], 'Open Lot')


class TestPenKeyDetails(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(PenKeyDetailsController)

    def test_search_by_type(self):
        self.controller.set_search('confine')
        self.assertEqual([p.pen_name for p in self.controller.visible_rows], ['P2'])

    def test_edit_only(self):
        self.assertFalse(self.controller.save_pen({'pen_name': 'P7', 'pen_type': 'Open Lot', 'pre_ship': False}))
        self.assertEqual(self.client.calls_for('insert'), [])

    def test_bunk_space_is_floored(self):
        pen = self.controller.table.rows[0]
        self.controller.start_edit(pen.id)
        self.assertTrue(self.controller.save_pen({
            'pen_name': 'P1', 'pen_type': 'Confinement', 'bunk_space_ft': '12.7', 'pre_ship': True,
        }))
        payload = self.client.calls_for('update')[-1]['payload']
        self.assertEqual(payload, {'pen_name': 'P1', 'pen_type': 'Confinement', 'bunk_space_ft': 12,
                                   'pre_ship': True})


class TestNewPen(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(NewPenController)

    def test_add_with_all_fields(self):
        self.assertTrue(self.controller.save_pen({
            'pen_name': 'P8', 'pen_square_feet': '2,500', 'pen_type': 'Lot with Shed',
            'bunk_space_ft': 8.9, 'pre_ship': False,
        }))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertEqual(payload['pen_square_feet'], 2500)
        self.assertEqual(payload['bunk_space_ft'], 8)

    def test_csv_import(self):
        self.assertTrue(self.controller.load_csv(b"Pen Name,Pen Type,Sq Foot\nP5,Open Lot,100\nP6,,\n"))
        self.assertEqual(self.controller.csv_session.mapping, {0: 'pen_name', 1: 'pen_type', 2: SKIP})

        result = self.controller.import_csv()

        self.assertTrue(result.success)
        self.assertEqual(result.inserted, 2)
        inserts = self.client.calls_for('insert')
        self.assertEqual(len(inserts), 1)
        self.assertEqual(inserts[0]['payload'], [{'pen_name': 'P5', 'pen_type': 'Open Lot'}, {'pen_name': 'P6'}])
        self.assertEqual([p.pen_name for p in self.controller.rows], ['P1', 'P2', 'P5', 'P6'])
        self.assertEqual(self.controller.pop_notice(), "✅ Imported 2 records")
        self.assertFalse(self.controller.csv_session.is_open)

    def test_csv_without_rows(self):
        self.assertFalse(self.controller.load_csv(b"Pen Name\n"))
        self.assertEqual(self.controller.error, NOT_ENOUGH_LINES_MESSAGE)

    def test_csv_import_failure(self):
        self.controller.load_csv(b"Pen Name\nP5\n")
        self.client.fail('insert', 'duplicate key value')
        result = self.controller.import_csv()
        self.assertFalse(result.success)
        self.assertEqual(self.controller.error, 'duplicate key value')
        self.assertTrue(self.controller.csv_session.is_open)

    def test_cancel_csv(self):
        self.controller.load_csv(b"Pen Name\nP5\n")
        self.controller.cancel_csv()
        self.assertFalse(self.controller.csv_session.is_open)


class TestCattleByPen(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(CattleByPenController)

    def test_add_row(self):
        self.controller.open_add_form()
        self.assertTrue(self.controller.save_record({'group_name': 'A600', 'pen_name': 'P6', 'head': '15'}))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertEqual(payload, {'group_name': 'A600', 'pen_name': 'P6', 'head': 15})

    def test_head_must_not_be_negative(self):
        self.controller.open_add_form()
        self.assertFalse(self.controller.save_record({'group_name': 'A600', 'pen_name': 'P6', 'head': -1}))
        self.assertEqual(self.controller.error, "head must be at least 0")

    def test_zero_head_is_stored_as_zero(self):
        self.controller.open_add_form()
        self.assertTrue(self.controller.save_record({'group_name': 'A600', 'pen_name': 'P6', 'head': 0.0}))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertEqual(payload['head'], 0)
        self.assertIsNotNone(payload['head'])

    def test_edit_form_keeps_zero_head(self):
        self.client.add_row('groups_by_pen', {'group_name': 'A700', 'pen_name': 'P7', 'head': 0})
        self.controller.load()
        row = next(r for r in self.controller.table.rows if r.group_name == 'A700')
        self.controller.start_edit(row.id)
        self.assertEqual(self.controller.form_defaults(self.controller.editing_record),
                         {'group_name': 'A700', 'pen_name': 'P7', 'head': 0})

    def test_edit_row(self):
        row = self.controller.table.rows[0]
        self.controller.start_edit(row.id)
        self.assertEqual(self.controller.form_defaults(self.controller.editing_record),
                         {'group_name': 'A100', 'pen_name': 'P1', 'head': 50})
        self.assertTrue(self.controller.save_record({'group_name': 'A100', 'pen_name': 'P4', 'head': 50}))
        self.assertEqual(self.client.calls_for('update')[-1]['filters'], [('eq', 'id', row.id)])

    def test_paste_rejects_rows_without_group_or_pen(self):
        transfer = self.controller.attach_clipboard(MemoryClipboard(
            "Group Name\tPen Name\tHead\n"
            "A400\tP4\t12\n"
            "\t\t5\n"
            "A500\t\t\n"
            "short\tline"
        ))
        self.assertEqual(transfer.paste(), "Added 2 records!")
        payloads = [call['payload'][0] for call in self.client.calls_for('insert')]
        self.assertEqual(payloads, [
            {'group_name': 'A400', 'pen_name': 'P4', 'head': 12},
            {'group_name': 'A500', 'pen_name': None, 'head': None},
        ])

    def test_copy_uses_group_columns(self):
        clipboard = MemoryClipboard()
        self.controller.attach_clipboard(clipboard).copy()
        lines = clipboard.text.split('\n')
        self.assertEqual(lines[0], "Group Name\tPen Name\tHead")
        self.assertEqual(lines[1:], ["A100\tP1\t50", "A200\tP2\t30", "B300\tP3\t20"])

    def test_clear_all(self):
        ids = [row.id for row in self.controller.rows]
        self.assertEqual(self.controller.clear_message,
                         "Are you sure you want to delete ALL 3 records? This action cannot be undone.")
        self.controller.request_clear()
        self.assertTrue(self.controller.view.confirm_clear)
        self.assertTrue(self.controller.clear_all())
        self.assertEqual(self.client.calls_for('delete')[-1]['filters'], [('in', 'id', ids)])
        self.assertEqual(self.controller.rows, [])
        self.assertFalse(self.controller.view.confirm_clear)
        self.assertEqual(self.controller.pop_notice(), "🗑️ Deleted 3 records")
        self.assertFalse(self.controller.clear_all())

    def test_cancel_clear(self):
        self.controller.request_clear()
        self.controller.cancel_clear()
        self.assertFalse(self.controller.view.confirm_clear)

    def test_pagination_clamps_after_rows_shrink(self):
        client = FakeSupabase({'groups_by_pen': [
            {'group_name': f'G{i:02d}', 'pen_name': 'P1', 'head': i} for i in range(20)
        ]})
        controller, _ = make_controller(CattleByPenController, client)
        controller.go_to_page(5)
        page = controller.current_page()
        self.assertEqual(page.page, 2)
        self.assertEqual(len(page.items), 5)
        self.assertEqual(page.summary, "Showing 16 - 20 of 20")
        self.assertEqual(controller.view.page, 2)


class TestHedging(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(HedgingController)

    def test_records_split_by_type(self):
        feeder = self.controller.records_for(CattleType.FEEDER)
        live = self.controller.records_for(CattleType.LIVE)
        self.assertEqual([r.month_label for r in feeder], ['Jan25', 'Mar25'])
        self.assertEqual([r.month_label for r in live], ['Apr25'])

    def test_edit_context_follows_record_type(self):
        live = self.controller.records_for(CattleType.LIVE)[0]
        self.assertTrue(self.controller.start_edit(live.id))
        self.assertEqual(self.controller.view.form_context, 'Live Cattle')
        self.assertEqual(self.controller.form_defaults(self.controller.editing_record),
                         {'futures_month': '2025-04', 'positions': 5})

    def test_edit_form_keeps_zero_positions(self):
        self.client.add_row('hedging', {'cattle_type': 'Live Cattle', 'futures_month': '2025-08-01', 'positions': 0})
        self.controller.load()
        record = next(r for r in self.controller.rows if r.month_label == 'Aug25')
        self.assertTrue(self.controller.start_edit(record.id))
        self.assertEqual(self.controller.form_defaults(self.controller.editing_record),
                         {'futures_month': '2025-08', 'positions': 0})

    def test_add_position_from_month_input(self):
        self.controller.open_add_form('Live Cattle')
        self.assertTrue(self.controller.save_position(CattleType.LIVE, {'futures_month': '2025-06', 'positions': 3.0}))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertEqual(payload, {'cattle_type': 'Live Cattle', 'futures_month': '2025-06-01', 'positions': 3})
        self.assertEqual(self.controller.pop_notice(), "✅ Saved Live Cattle position")

    def test_negative_positions_rejected(self):
        self.controller.open_add_form('Feeder Cattle')
        self.assertFalse(self.controller.save_position('Feeder Cattle', {'futures_month': '2025-06', 'positions': -1}))
        self.assertEqual(self.controller.error, "positions must be at least 0")


class TestFeederCattle(unittest.TestCase):

    def setUp(self):
        self.controller, self.client = make_controller(FeederCattleController)

    def test_only_feeder_positions(self):
        self.assertEqual([r.month_label for r in self.controller.rows], ['Jan25', 'Mar25'])

    def test_form_defaults_split_month_and_year(self):
        record = self.controller.rows[1]
        self.assertEqual(self.controller.form_defaults(record), {'month': 3, 'year': 2025, 'positions': 2})
        self.assertEqual(self.controller.form_defaults(), {'month': None, 'year': None, 'positions': None})

    def test_add_position_from_month_and_year(self):
        self.controller.open_add_form()
        self.assertTrue(self.controller.save_feeder_position({'month': 8, 'year': 2026, 'positions': 4.0}))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertEqual(payload, {'cattle_type': 'Feeder Cattle', 'futures_month': '2026-08-01', 'positions': 4})


@pytest.mark.parametrize("controller_cls,table", [
    (NewGroupController, 'home_closeouts'),
    (PensController, 'pens'),
    (CattleByPenController, 'groups_by_pen'),
    (HedgingController, 'hedging'),
])
def test_create_uses_configured_table(controller_cls, table):
    client = make_client()
    settings = Settings()
    settings.set('display.page_size', 2)
    controller = controller_cls.create(client, settings)
    assert controller.table.table == table
    assert controller.page_size == 2
    assert controller.loading
