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

"""
An in-memory stand-in for the remote client, intended for tests and local
development.

Storage layout: ``self._data`` maps keyspace names to cf-dicts, which map
column family names to row-dicts keyed by row key.  In a ``Standard``
column family a row-dict maps column names to entries; in a ``Super``
column family it maps super column names to dicts of column entries.
An entry is a ``(Column, expires_at)`` pair, ``expires_at`` being
:const:`None` for columns without a ttl.
"""

import logging
import time
from threading import Lock

from cassbind import ColumnFamilyType, InvalidRequest, NotFound
from cassbind.columns import Column, SuperColumn, ColumnOrSuperColumn, KeySlice
from cassbind.query import ColumnNames, SliceRange

log = logging.getLogger(__name__)


def _copy_column(column):
    return Column(column.name, column.value, column.timestamp, column.ttl)


class LocalClient(object):
    """
    Implements ``insert``, ``remove``, ``get``, ``get_slice``,
    ``get_range_slice``, ``get_count`` and ``describe_keyspace`` over plain
    dictionaries.

    `keyspaces` maps keyspace names to descriptions in the same form a
    :class:`~cassbind.keyspace.Keyspace` takes.  Consistency levels are
    accepted and ignored.  Writes are last-write-wins by timestamp, and
    removes delete everything stamped at or before the remove timestamp.
    """

    clock = staticmethod(time.time)
    """
    Source of the current time, in seconds, used to expire columns that
    were written with a ttl.
    """

    def __init__(self, keyspaces):
        self._keyspaces = dict((name, dict((cf, dict(attrs)) for cf, attrs in desc.items()))
                               for name, desc in keyspaces.items())
        self._data = dict((name, {}) for name in self._keyspaces)
        self._lock = Lock()

    def describe_keyspace(self, keyspace):
        try:
            desc = self._keyspaces[keyspace]
        except KeyError:
            raise NotFound("No such keyspace '%s'" % (keyspace,))
        return dict((cf, dict(attrs)) for cf, attrs in desc.items())

    def _cf_type(self, keyspace, column_family):
        try:
            cf_def = self._keyspaces[keyspace][column_family]
        except KeyError:
            raise InvalidRequest("unconfigured columnfamily %s in keyspace %s"
                                 % (column_family, keyspace))
        return cf_def.get(ColumnFamilyType.ATTRIBUTE, ColumnFamilyType.STANDARD)

    def _rows(self, keyspace, column_family):
        return self._data[keyspace].setdefault(column_family, {})

    def _container(self, keyspace, key, column_parent, make=False):
        """
        Returns the dict holding the columns addressed by `column_parent`,
        or :const:`None` if it does not exist and `make` is false.
        """
        cf_type = self._cf_type(keyspace, column_parent.column_family)
        rows = self._rows(keyspace, column_parent.column_family)
        row = rows.get(key)
        if row is None:
            if not make:
                return None
            row = rows[key] = {}
        if cf_type == ColumnFamilyType.SUPER:
            if column_parent.super_column is None:
                return row
            sc = row.get(column_parent.super_column)
            if sc is None and make:
                sc = row[column_parent.super_column] = {}
            return sc
        if column_parent.super_column is not None:
            raise InvalidRequest("supercolumn parameter is invalid for standard CF %s"
                                 % (column_parent.column_family,))
        return row

    def _live(self, entry, now):
        expires_at = entry[1]
        return expires_at is None or expires_at > now

    def _live_columns(self, columns, now):
        return sorted((_copy_column(e[0]) for e in columns.values() if self._live(e, now)),
                      key=lambda c: c.name)

    def _pack_super_column(self, name, columns, now):
        return SuperColumn(name, self._live_columns(columns, now))

    def insert(self, keyspace, key, column_parent, column, consistency_level):
        if not column.name:
            raise InvalidRequest("column name must not be empty")
        if column.timestamp is None:
            raise InvalidRequest("column timestamp is required")
        with self._lock:
            if (self._cf_type(keyspace, column_parent.column_family) == ColumnFamilyType.SUPER
                    and column_parent.super_column is None):
                raise InvalidRequest("missing mandatory super column name for super CF %s"
                                     % (column_parent.column_family,))
            container = self._container(keyspace, key, column_parent, make=True)
            existing = container.get(column.name)
            if existing is not None and existing[0].timestamp > column.timestamp:
                log.debug("Ignoring insert of %r older than stored column", column.name)
                return
            expires_at = self.clock() + column.ttl if column.ttl else None
            container[column.name] = (_copy_column(column), expires_at)

    def _check_path(self, cf_type, column_path, whole_row=False):
        """
        Rejects a path that does not agree with the type of its column
        family.  With `whole_row`, a path naming only the column family is
        also accepted.
        """
        if whole_row and column_path.super_column is None and column_path.column is None:
            return
        if cf_type == ColumnFamilyType.SUPER:
            if column_path.super_column is None:
                raise InvalidRequest("missing mandatory super column name for super CF %s"
                                     % (column_path.column_family,))
        else:
            if column_path.super_column is not None:
                raise InvalidRequest("supercolumn parameter is invalid for standard CF %s"
                                     % (column_path.column_family,))
            if column_path.column is None:
                raise InvalidRequest("column parameter is required for standard CF %s"
                                     % (column_path.column_family,))

    def remove(self, keyspace, key, column_path, timestamp, consistency_level):
        with self._lock:
            cf_type = self._cf_type(keyspace, column_path.column_family)
            self._check_path(cf_type, column_path, whole_row=True)
            rows = self._rows(keyspace, column_path.column_family)
            row = rows.get(key)
            if row is None:
                return
            if cf_type == ColumnFamilyType.SUPER and column_path.super_column is None:
                for sc_name in list(row):
                    self._remove_older(row[sc_name], timestamp)
                    if not row[sc_name]:
                        del row[sc_name]
            elif cf_type == ColumnFamilyType.SUPER:
                sc = row.get(column_path.super_column)
                if sc is None:
                    return
                self._remove_older(sc, timestamp, column_path.column)
                if not sc:
                    del row[column_path.super_column]
            else:
                self._remove_older(row, timestamp, column_path.column)
            if not row:
                del rows[key]

    def _remove_older(self, columns, timestamp, name=None):
        names = [name] if name is not None else list(columns)
        for n in names:
            entry = columns.get(n)
            if entry is not None and entry[0].timestamp <= timestamp:
                del columns[n]

    def get(self, keyspace, key, column_path, consistency_level):
        now = self.clock()
        with self._lock:
            cf_type = self._cf_type(keyspace, column_path.column_family)
            self._check_path(cf_type, column_path)
            container = self._container(keyspace, key, column_path.parent)
            if column_path.column is None:
                if container is None:
                    raise NotFound("No data at %r for key %r" % (column_path, key))
                sc = self._pack_super_column(column_path.super_column, container, now)
                if not sc.columns:
                    raise NotFound("No data at %r for key %r" % (column_path, key))
                return ColumnOrSuperColumn(super_column=sc)
            entry = container.get(column_path.column) if container is not None else None
            if entry is None or not self._live(entry, now):
                raise NotFound("No data at %r for key %r" % (column_path, key))
            return ColumnOrSuperColumn(column=_copy_column(entry[0]))

    def _slice(self, keyspace, key, column_parent, predicate, now):
        cf_type = self._cf_type(keyspace, column_parent.column_family)
        container = self._container(keyspace, key, column_parent)
        if not container:
            return []
        if cf_type == ColumnFamilyType.SUPER and column_parent.super_column is None:
            items = [ColumnOrSuperColumn(super_column=self._pack_super_column(n, cols, now))
                     for n, cols in container.items()]
            items = [i for i in items if i.super_column.columns]
            name_of = lambda i: i.super_column.name
        else:
            items = [ColumnOrSuperColumn(column=c) for c in self._live_columns(container, now)]
            name_of = lambda i: i.column.name
        items.sort(key=name_of)
        return self._filter(items, predicate, name_of)

    def _filter(self, items, predicate, name_of):
        if isinstance(predicate, ColumnNames):
            wanted = set(predicate.column_names)
            return [i for i in items if name_of(i) in wanted]
        if not isinstance(predicate, SliceRange):
            raise InvalidRequest("Unsupported slice predicate %r" % (predicate,))
        if predicate.reversed:
            items = list(reversed(items))
            low, high = predicate.finish, predicate.start
        else:
            low, high = predicate.start, predicate.finish
        selected = [i for i in items
                    if (not low or name_of(i) >= low) and (not high or name_of(i) <= high)]
        return selected[:predicate.count]

    def get_slice(self, keyspace, key, column_parent, predicate, consistency_level):
        now = self.clock()
        with self._lock:
            return self._slice(keyspace, key, column_parent, predicate, now)

    def get_range_slice(self, keyspace, column_parent, predicate, start_key, finish_key,
                        row_count, consistency_level):
        now = self.clock()
        with self._lock:
            # raises for an unknown column family
            self._cf_type(keyspace, column_parent.column_family)
            rows = self._rows(keyspace, column_parent.column_family)
            out = []
            for row_key in sorted(rows):
                if start_key and row_key < start_key:
                    continue
                if finish_key and row_key > finish_key:
                    break
                if len(out) >= row_count:
                    break
                out.append(KeySlice(row_key, self._slice(keyspace, row_key, column_parent,
                                                         predicate, now)))
            return out

    def get_count(self, keyspace, key, column_parent, consistency_level):
        now = self.clock()
        with self._lock:
            return len(self._slice(keyspace, key, column_parent,
                                   SliceRange(count=2 ** 31 - 1), now))
