# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import itertools
import unittest

from cassbind import ConsistencyLevel, InvalidRequest, NotFound
from cassbind.columns import Column, ColumnOrSuperColumn
from cassbind.keyspace import Keyspace
from cassbind.local import LocalClient
from cassbind.query import ColumnParent, ColumnPath, ColumnNames, SliceRange

KEYSPACES = {
    'Keyspace1': {
        'CF1': {'Type': 'Standard'},
        'Super1': {'Type': 'Super'},
    }
}


class LocalKeyspaceTest(unittest.TestCase):
    """
    Runs Keyspace operations end to end against the in-memory client.
    """

    def setUp(self):
        self.client = LocalClient(KEYSPACES)
        self.ticks = itertools.count(1000)
        self.keyspace = Keyspace.from_client(self.client, 'Keyspace1',
                                             timestamp_generator=lambda: next(self.ticks))

    def test_insert_then_get_value(self):
        self.keyspace.insert_column('k1', 'CF1', 'name', 'v1')
        self.assertEqual(self.keyspace.get_column_value('k1', 'CF1', 'name'), 'v1')

    def test_get_super_column_on_standard_rejected(self):
        self.keyspace.insert_column('k1', 'CF1', 'name', 'v1')
        self.assertRaises(InvalidRequest, self.keyspace.get_super_column, 'k1', 'CF1', 'sc1')

    def test_missing_column_not_found(self):
        self.assertRaises(NotFound, self.keyspace.get_column, 'k1', 'CF1', 'name')
        self.keyspace.insert_column('k1', 'CF1', 'other', 'v1')
        self.assertRaises(NotFound, self.keyspace.get_column, 'k1', 'CF1', 'name')

    def test_later_write_wins(self):
        self.keyspace.insert_column('k1', 'CF1', 'name', 'v1')
        self.keyspace.insert_column('k1', 'CF1', 'name', 'v2')
        column = self.keyspace.get_column('k1', 'CF1', 'name')
        self.assertEqual(column.value, 'v2')
        self.assertEqual(column.timestamp, 1001)

    def test_older_write_ignored(self):
        self.client.insert('Keyspace1', 'k1', ColumnParent('CF1'), Column('c', 'new', 50), None)
        self.client.insert('Keyspace1', 'k1', ColumnParent('CF1'), Column('c', 'old', 10), None)
        self.assertEqual(self.keyspace.get_column_value('k1', 'CF1', 'c'), 'new')

    def test_remove_column(self):
        self.keyspace.insert_column('k1', 'CF1', 'a', '1')
        self.keyspace.insert_column('k1', 'CF1', 'b', '2')
        self.keyspace.remove_column('k1', 'CF1', 'a')
        self.assertRaises(NotFound, self.keyspace.get_column, 'k1', 'CF1', 'a')
        self.assertEqual(self.keyspace.get_column_value('k1', 'CF1', 'b'), '2')

    def test_remove_ignores_newer_data(self):
        self.client.insert('Keyspace1', 'k1', ColumnParent('CF1'), Column('c', 'v', 5000), None)
        self.keyspace.remove_column('k1', 'CF1', 'c')
        self.assertEqual(self.keyspace.get_column_value('k1', 'CF1', 'c'), 'v')

    def test_super_columns(self):
        self.keyspace.insert_column('k1', 'Super1', 'b', '2', super_column_name='sc1')
        self.keyspace.insert_column('k1', 'Super1', 'a', '1', super_column_name='sc1')
        self.keyspace.insert_column('k1', 'Super1', 'c', '3', super_column_name='sc2')

        sc = self.keyspace.get_super_column('k1', 'Super1', 'sc1')
        self.assertEqual(sc.name, 'sc1')
        self.assertEqual([(c.name, c.value) for c in sc.columns], [('a', '1'), ('b', '2')])
        self.assertEqual(self.keyspace.get_column_value('k1', 'Super1', 'c', 'sc2'), '3')
        self.assertEqual(self.keyspace.get_count('k1', ColumnParent('Super1')), 2)
        self.assertEqual(self.keyspace.get_count('k1', ColumnParent('Super1', 'sc1')), 2)

        self.keyspace.remove_super_column('k1', 'Super1', 'sc1')
        self.assertRaises(NotFound, self.keyspace.get_super_column, 'k1', 'Super1', 'sc1')
        self.assertEqual(self.keyspace.get_count('k1', ColumnParent('Super1')), 1)

    def test_slices(self):
        for name in ('d', 'a', 'c', 'b'):
            self.keyspace.insert_column('k1', 'CF1', name, name.upper())
        parent = ColumnParent('CF1')

        names = self.keyspace.get_slice_names('k1', parent, ['c', 'a', 'z'])
        self.assertEqual([c.name for c in names], ['a', 'c'])

        everything = self.keyspace.get_slice_range('k1', parent)
        self.assertEqual([c.value for c in everything], ['A', 'B', 'C', 'D'])

        bounded = self.keyspace.get_slice_range('k1', parent, SliceRange('b', 'c'))
        self.assertEqual([c.name for c in bounded], ['b', 'c'])

        backwards = self.keyspace.get_slice_range('k1', parent, SliceRange('c', '', reversed=True, count=2))
        self.assertEqual([c.name for c in backwards], ['c', 'b'])

        self.assertEqual(self.keyspace.get_slice_range('k2', parent), [])
        self.assertEqual(self.keyspace.get_count('k1', parent), 4)

    def test_super_row_slice_holds_only_super_columns(self):
        self.keyspace.insert_column('k1', 'Super1', 'a', '1', super_column_name='sc1')
        self.assertEqual(self.keyspace.get_slice_range('k1', ColumnParent('Super1')), [])
        inner = self.keyspace.get_slice_range('k1', ColumnParent('Super1', 'sc1'))
        self.assertEqual([c.name for c in inner], ['a'])

    def test_range_slices(self):
        for key in ('k3', 'k1', 'k2', 'k4'):
            self.keyspace.insert_column(key, 'CF1', 'name', key)
        parent = ColumnParent('CF1')

        rows = self.keyspace.get_range_slice(parent, SliceRange(), 'k2', 'k3')
        self.assertEqual(list(rows), ['k2', 'k3'])
        self.assertEqual(rows['k2'][0].value, 'k2')

        rows = self.keyspace.get_range_slice(parent, ColumnNames(['name']), '', '', 3)
        self.assertEqual(list(rows), ['k1', 'k2', 'k3'])

    def test_super_range_slices(self):
        self.keyspace.insert_column('k1', 'Super1', 'a', '1', super_column_name='sc1')
        self.keyspace.insert_column('k2', 'Super1', 'a', '1', super_column_name='sc2')
        rows = self.keyspace.get_super_range_slice(ColumnParent('Super1'), SliceRange(), '', '')
        self.assertEqual(sorted(rows), ['k1', 'k2'])
        self.assertEqual([sc.name for sc in rows['k2']], ['sc2'])

    def test_ttl_expiry(self):
        now = [100.0]
        self.client.clock = lambda: now[0]
        self.keyspace.insert_column('k1', 'CF1', 'temp', 'v', ttl=10)
        self.assertEqual(self.keyspace.get_column_value('k1', 'CF1', 'temp'), 'v')
        now[0] = 111.0
        self.assertRaises(NotFound, self.keyspace.get_column, 'k1', 'CF1', 'temp')
        self.assertEqual(self.keyspace.get_count('k1', ColumnParent('CF1')), 0)


class LocalClientTest(unittest.TestCase):

    def setUp(self):
        self.client = LocalClient(KEYSPACES)

    def test_describe_keyspace(self):
        self.assertEqual(self.client.describe_keyspace('Keyspace1'), KEYSPACES['Keyspace1'])
        self.assertRaises(NotFound, self.client.describe_keyspace, 'Nope')

    def test_rejects_malformed_requests(self):
        cl = ConsistencyLevel.ONE
        self.assertRaises(InvalidRequest, self.client.insert, 'Keyspace1', 'k', ColumnParent('Nope'),
                          Column('c', 'v', 1), cl)
        self.assertRaises(InvalidRequest, self.client.insert, 'Keyspace1', 'k', ColumnParent('Super1'),
                          Column('c', 'v', 1), cl)
        self.assertRaises(InvalidRequest, self.client.insert, 'Keyspace1', 'k', ColumnParent('CF1', 'sc'),
                          Column('c', 'v', 1), cl)
        self.assertRaises(InvalidRequest, self.client.insert, 'Keyspace1', 'k', ColumnParent('CF1'),
                          Column('', 'v', 1), cl)
        self.assertRaises(InvalidRequest, self.client.get_slice, 'Other', 'k', ColumnParent('CF1'),
                          SliceRange(), cl)

    def test_rejects_malformed_paths(self):
        cl = ConsistencyLevel.ONE
        self.client.insert('Keyspace1', 'k', ColumnParent('Super1', 'sc1'), Column('x', 'v', 1), cl)
        self.client.insert('Keyspace1', 'k', ColumnParent('Super1', 'sc2'), Column('x', 'v', 1), cl)
        self.client.insert('Keyspace1', 'k', ColumnParent('CF1'), Column('a', 'v', 1), cl)

        self.assertRaises(InvalidRequest, self.client.remove, 'Keyspace1', 'k',
                          ColumnPath('Super1', column='x'), 10, cl)
        self.assertEqual(self.client.get_count('Keyspace1', 'k', ColumnParent('Super1'), cl), 2)
        self.assertRaises(InvalidRequest, self.client.remove, 'Keyspace1', 'k',
                          ColumnPath('CF1', 'sc1'), 10, cl)

        for path in (ColumnPath('Super1', column='x'), ColumnPath('Super1'),
                     ColumnPath('CF1'), ColumnPath('CF1', 'sc1', 'a')):
            self.assertRaises(InvalidRequest, self.client.get, 'Keyspace1', 'k', path, cl)
        self.assertEqual(self.client.get('Keyspace1', 'k', ColumnPath('Super1', 'sc1', 'x'), cl),
                         ColumnOrSuperColumn(column=Column('x', 'v', 1)))

    def test_remove_whole_super_row(self):
        cl = ConsistencyLevel.ONE
        self.client.insert('Keyspace1', 'k', ColumnParent('Super1', 'sc1'), Column('x', 'v', 1), cl)
        self.client.insert('Keyspace1', 'k', ColumnParent('Super1', 'sc2'), Column('x', 'v', 5), cl)
        self.client.remove('Keyspace1', 'k', ColumnPath('Super1'), 2, cl)
        self.assertEqual(self.client.get_count('Keyspace1', 'k', ColumnParent('Super1'), cl), 1)
        self.assertRaises(NotFound, self.client.get, 'Keyspace1', 'k', ColumnPath('Super1', 'sc1'), cl)

    def test_get_returns_copies(self):
        self.client.insert('Keyspace1', 'k', ColumnParent('CF1'), Column('c', 'v', 1), None)
        cosc = self.client.get('Keyspace1', 'k', ColumnPath('CF1', column='c'), None)
        self.assertEqual(cosc, ColumnOrSuperColumn(column=Column('c', 'v', 1)))
        cosc.column.value = 'changed'
        again = self.client.get('Keyspace1', 'k', ColumnPath('CF1', column='c'), None)
        self.assertEqual(again.column.value, 'v')

    def test_remove_row(self):
        self.client.insert('Keyspace1', 'k', ColumnParent('CF1'), Column('a', 'v', 1), None)
        self.client.insert('Keyspace1', 'k', ColumnParent('CF1'), Column('b', 'v', 1), None)
        self.client.remove('Keyspace1', 'k', ColumnPath('CF1'), 2, None)
        self.assertEqual(self.client.get_count('Keyspace1', 'k', ColumnParent('CF1'), None), 0)
        self.assertEqual(self.client.get_range_slice('Keyspace1', ColumnParent('CF1'), SliceRange(),
                                                     '', '', 10, None), [])
