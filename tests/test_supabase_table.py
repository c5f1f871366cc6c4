"""
Tests for the Supabase table accessor using an in-memory client.
"""

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from data.models.pen import Pen, PenType
from data.repositories.base_repository import DataNotFoundError
from data.repositories.supabase_table import SupabaseTable, TableState, error_message
from fakes import FakeSupabase


def make_pens_client():
    return FakeSupabase({
        'pens': [
            {'pen_name': 'P3', 'pen_type': 'Open Lot', 'pre_ship': False},
            {'pen_name': 'P1', 'pen_type': 'Confinement', 'pre_ship': True},
            {'pen_name': 'P2', 'pen_type': 'Lot with Shed', 'pre_ship': False},
        ],
    })


class TestTableState(unittest.TestCase):

    def test_initial_state_is_loading(self):
        state = TableState()
        self.assertTrue(state.loading)
        self.assertEqual(state.rows, ())
        self.assertIsNone(state.error)

    def test_failure_keeps_previous_rows(self):
        state = TableState().loaded([1, 2]).failed("boom")
        self.assertEqual(state.rows, (1, 2))
        self.assertEqual(state.error, "boom")
        self.assertFalse(state.loading)

    def test_start_clears_error(self):
        state = TableState().failed("boom").started()
        self.assertIsNone(state.error)
        self.assertTrue(state.loading)

    def test_error_message_prefers_api_message(self):
        class APIError(Exception):
            message = "duplicate key value"
        self.assertEqual(error_message(APIError("raw")), "duplicate key value")
        self.assertEqual(error_message(RuntimeError("plain")), "plain")


class TestSupabaseTable(unittest.TestCase):

    def setUp(self):
        self.client = make_pens_client()
        self.table = SupabaseTable(self.client, 'pens', 'pen_name', ascending=True)

    def test_fetch_all_orders_rows(self):
        self.assertTrue(self.table.fetch_all())
        self.assertEqual([row['pen_name'] for row in self.table.rows], ['P1', 'P2', 'P3'])
        self.assertFalse(self.table.loading)
        self.assertEqual(self.client.calls[-1]['order'], ('pen_name', False))

    def test_fetch_all_descending(self):
        table = SupabaseTable(self.client, 'pens', 'pen_name', ascending=False)
        table.fetch_all()
        self.assertEqual([row['pen_name'] for row in table.rows], ['P3', 'P2', 'P1'])
        self.assertEqual(self.client.calls[-1]['order'], ('pen_name', True))

    def test_rows_converted_to_model(self):
        table = SupabaseTable(self.client, 'pens', 'pen_name', model=Pen)
        table.fetch_all()
        pen = table.rows[0]
        self.assertIsInstance(pen, Pen)
        self.assertEqual(pen.pen_type, PenType.CONFINEMENT)
        self.assertTrue(pen.pre_ship)

    def test_fetch_failure_sets_error_and_keeps_rows(self):
        self.table.fetch_all()
        self.client.fail('select', 'permission denied for table pens')
        self.assertFalse(self.table.fetch_all())
        self.assertEqual(self.table.error, 'permission denied for table pens')
        self.assertEqual(len(self.table.rows), 3)
        self.assertFalse(self.table.loading)

    def test_clear_error(self):
        self.client.fail('select', 'offline')
        self.table.fetch_all()
        self.table.clear_error()
        self.assertIsNone(self.table.error)

    def test_insert_refetches(self):
        self.table.fetch_all()
        self.assertTrue(self.table.insert({'pen_name': 'P0', 'pen_type': PenType.OPEN_LOT}))
        insert_call = self.client.calls_for('insert')[-1]
        self.assertEqual(insert_call['payload'], [{'pen_name': 'P0', 'pen_type': 'Open Lot'}])
        self.assertEqual(self.client.calls[-1]['op'], 'select')
        self.assertEqual(self.table.rows[0]['pen_name'], 'P0')

    def test_insert_without_refetch(self):
        self.table.fetch_all()
        self.table.insert({'pen_name': 'P0'}, refetch=False)
        self.assertEqual(self.client.calls[-1]['op'], 'insert')
        self.assertEqual(len(self.table.rows), 3)

    def test_insert_model_leaves_out_read_only_fields(self):
        self.table.insert(Pen(id=99, pen_name='P9', pen_type='Open Lot'))
        payload = self.client.calls_for('insert')[-1]['payload'][0]
        self.assertNotIn('id', payload)
        self.assertNotIn('created_at', payload)
        self.assertEqual(payload['pen_type'], 'Open Lot')

    def test_insert_rejects_unknown_record_type(self):
        self.assertFalse(self.table.insert(42))
        self.assertIn("Cannot store int", self.table.error)

    def test_insert_many_is_one_call(self):
        self.assertTrue(self.table.insert_many([{'pen_name': 'P7'}, {'pen_name': 'P8'}]))
        inserts = self.client.calls_for('insert')
        self.assertEqual(len(inserts), 1)
        self.assertEqual(len(inserts[0]['payload']), 2)

    def test_failed_insert_reports_error(self):
        self.client.fail('insert', 'null value in column "pen_name"')
        self.assertFalse(self.table.insert({'pen_type': 'Open Lot'}))
        self.assertEqual(self.table.error, 'null value in column "pen_name"')
        self.assertEqual(self.client.calls_for('select'), [])

    def test_update_filters_by_id(self):
        self.table.fetch_all()
        pen_id = self.table.rows[0]['id']
        self.assertTrue(self.table.update(pen_id, {'pen_square_feet': 1200}))
        update = self.client.calls_for('update')[-1]
        self.assertEqual(update['filters'], [('eq', 'id', pen_id)])
        self.assertEqual(self.table.find(pen_id)['pen_square_feet'], 1200)

    def test_remove(self):
        self.table.fetch_all()
        pen_id = self.table.rows[0]['id']
        self.assertTrue(self.table.remove(pen_id))
        self.assertEqual(len(self.table.rows), 2)
        with self.assertRaises(DataNotFoundError):
            self.table.find(pen_id)

    def test_remove_many(self):
        self.table.fetch_all()
        ids = [row['id'] for row in self.table.rows[:2]]
        self.assertTrue(self.table.remove_many(ids))
        self.assertEqual(self.client.calls_for('delete')[-1]['filters'], [('in', 'id', ids)])
        self.assertEqual(len(self.table.rows), 1)


if __name__ == '__main__':
    unittest.main()
