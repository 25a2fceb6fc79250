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
This module houses :class:`Keyspace`, the main entry point of cassbind.
"""

import logging

from cassbind import (ConsistencyLevel, InvalidRequest, NotFound, MalformedResponse,
                      consistency_value_to_name)
from cassbind.columns import Column, extract_columns, extract_super_columns
from cassbind.query import ColumnParent, ColumnPath, SlicePredicate, ColumnNames, SliceRange
from cassbind.timestamps import wall_clock_timestamp
from cassbind import validation

log = logging.getLogger(__name__)


class Keyspace(object):
    """
    Shapes requests against one keyspace and forwards them to a remote
    client.

    The `client` is any object implementing ``insert``, ``remove``, ``get``,
    ``get_slice``, ``get_range_slice`` and ``get_count`` with the argument
    order of the Cassandra Thrift interface, each taking the keyspace name
    first and the consistency level last.  :class:`~cassbind.local.LocalClient`
    is an in-memory example.

    `description` maps each column family name to its attributes, e.g.
    ``{'Standard1': {'Type': 'Standard'}}``.  It is copied at construction
    and used to validate every path and parent before the remote call.

    Example usage::

        >>> from cassbind.keyspace import Keyspace
        >>> ks = Keyspace(client, 'Keyspace1', {'Standard1': {'Type': 'Standard'}})
        >>> ks.insert_column('jsmith', 'Standard1', 'first', 'John')
        >>> ks.get_column_value('jsmith', 'Standard1', 'first')
        'John'

    Every operation blocks until the client returns or raises.  Errors from
    the client propagate unchanged; this class does no retrying.
    """

    def __init__(self, client, name, description,
                 consistency_level=ConsistencyLevel.ONE,
                 timestamp_generator=None):
        self._client = client
        self._name = name
        self._description = dict((cf, dict(attrs)) for cf, attrs in description.items())
        self._consistency_level = consistency_level
        self._timestamp_generator = timestamp_generator or wall_clock_timestamp

    @classmethod
    def from_client(cls, client, name, consistency_level=ConsistencyLevel.ONE, **kwargs):
        """
        Builds a :class:`Keyspace` whose description is fetched from the
        remote client with ``describe_keyspace``.
        """
        description = client.describe_keyspace(name)
        log.debug("Fetched description of keyspace %s: %d column families",
                  name, len(description))
        return cls(client, name, description, consistency_level, **kwargs)

    @property
    def name(self):
        """
        The name of the keyspace.
        """
        return self._name

    @property
    def consistency_level(self):
        """
        The :class:`~cassbind.ConsistencyLevel` forwarded with every request.
        """
        return self._consistency_level

    @property
    def description(self):
        """
        A copy of the column family description this keyspace validates
        against.
        """
        return dict((cf, dict(attrs)) for cf, attrs in self._description.items())

    @property
    def client(self):
        return self._client

    @property
    def timestamp_generator(self):
        """
        A zero-argument callable returning the timestamp, in microseconds
        since the epoch, stamped on each insert and remove.  Defaults to
        :func:`~cassbind.timestamps.wall_clock_timestamp`, which is not
        monotonic.  :class:`~cassbind.timestamps.MonotonicTimestampGenerator`
        may be passed to the constructor instead.
        """
        return self._timestamp_generator

    def column_family_type(self, column_family):
        """
        Returns the declared type of `column_family` (``'Standard'`` or
        ``'Super'``).  Raises :exc:`~cassbind.UnknownColumnFamily` if it is
        not declared.
        """
        return validation.column_family_type(self._description, column_family)

    def column_parent(self, column_family, super_column_name=None):
        return ColumnParent(column_family, super_column_name)

    def column_path(self, column_family, super_column_name=None, column_name=None):
        return ColumnPath(column_family, super_column_name, column_name)

    def insert_column(self, key, column_family, column_name, value,
                      super_column_name=None, ttl=None):
        """
        Writes `value` to the column `column_name` of row `key`, inside
        `super_column_name` when given.  The column is stamped with a fresh
        timestamp.  `ttl`, if given, is the column's time to live in seconds.
        """
        parent = ColumnParent(column_family, super_column_name)
        column = Column(column_name, value, self._timestamp_generator(), ttl)
        validation.validate_column_parent(self._description, parent)
        log.debug("insert keyspace=%s key=%r parent=%r column=%r CL=%s",
                  self._name, key, parent, column_name,
                  consistency_value_to_name(self._consistency_level))
        self._client.insert(self._name, key, parent, column, self._consistency_level)

    def remove(self, key, column_path, super_column_name=None, column_name=None):
        """
        Removes data from row `key`.

        `column_path` is either a :class:`~cassbind.query.ColumnPath`, or the
        name of a column family, in which case a path is built from
        `super_column_name` and `column_name`.  Give a super column name and
        no column name to remove a whole super column.
        """
        if not isinstance(column_path, ColumnPath):
            column_path = ColumnPath(column_path, super_column_name, column_name)
        elif super_column_name or column_name:
            raise ValueError("super_column_name and column_name may only be "
                             "given with a column family name, not a ColumnPath")
        validation.validate_column_path(self._description, column_path)
        timestamp = self._timestamp_generator()
        log.debug("remove keyspace=%s key=%r path=%r timestamp=%d",
                  self._name, key, column_path, timestamp)
        self._client.remove(self._name, key, column_path, timestamp, self._consistency_level)

    def remove_column(self, key, column_family, column_name, super_column_name=None):
        self.remove(key, column_family, super_column_name, column_name)

    def remove_super_column(self, key, column_family, super_column_name):
        self.remove(key, column_family, super_column_name)

    def get_column(self, key, column_family, column_name, super_column_name=None):
        """
        Returns the :class:`~cassbind.columns.Column` at `column_name` in
        row `key`, looked up inside `super_column_name` when given.

        :raises NotFound: if the returned column is missing or has an
            empty name
        :raises MalformedResponse: if a super column came back instead
        """
        if not column_name:
            raise InvalidRequest("get_column requires a column name")
        path = ColumnPath(column_family, super_column_name, column_name)
        validation.validate_column_path(self._description, path)
        log.debug("get keyspace=%s key=%r path=%r", self._name, key, path)
        cosc = self._client.get(self._name, key, path, self._consistency_level)
        column = cosc.column if cosc is not None else None
        if column is None and cosc is not None and cosc.super_column is not None:
            raise MalformedResponse("Expected a column at %r but a super column "
                                    "was returned" % (path,))
        if column is None or not column.name:
            raise NotFound("No column at %r for key %r" % (path, key))
        return column

    def get_column_value(self, key, column_family, column_name, super_column_name=None):
        """
        Like :meth:`get_column`, but returns only the column's value.
        """
        return self.get_column(key, column_family, column_name, super_column_name).value

    def get_super_column(self, key, column_family, super_column_name):
        """
        Returns the :class:`~cassbind.columns.SuperColumn` named
        `super_column_name` in row `key`.  `column_family` must be declared
        ``Super``.

        :raises NotFound: if the returned super column is missing or has an
            empty name
        :raises MalformedResponse: if a plain column came back instead
        """
        path = ColumnPath(column_family, super_column_name)
        validation.validate_super_column_path(self._description, path)
        log.debug("get keyspace=%s key=%r super path=%r", self._name, key, path)
        cosc = self._client.get(self._name, key, path, self._consistency_level)
        super_column = cosc.super_column if cosc is not None else None
        if super_column is None and cosc is not None and cosc.column is not None:
            raise MalformedResponse("Expected a super column at %r but a column "
                                    "was returned" % (path,))
        if super_column is None or not super_column.name:
            raise NotFound("No super column at %r for key %r" % (path, key))
        return super_column

    def get_slice_names(self, key, column_parent, predicate):
        """
        Returns the plain columns of row `key` named by `predicate`, which
        is either a :class:`~cassbind.query.ColumnNames` or an iterable of
        column names.  Entries shaped as super columns are dropped.
        """
        if isinstance(predicate, SlicePredicate) and not isinstance(predicate, ColumnNames):
            raise InvalidRequest("get_slice_names requires column names, not %r" % (predicate,))
        if not isinstance(predicate, ColumnNames):
            try:
                predicate = ColumnNames(predicate)
            except TypeError:
                raise InvalidRequest("get_slice_names requires an iterable of column names, "
                                     "not %r" % (predicate,))
        return self._get_slice(key, column_parent, predicate)

    def get_slice_range(self, key, column_parent, predicate=None):
        """
        Returns the plain columns of row `key` selected by the
        :class:`~cassbind.query.SliceRange` `predicate`.  With no predicate
        the default, unbounded range is used.
        """
        if predicate is None:
            predicate = SliceRange()
        elif not isinstance(predicate, SliceRange):
            raise InvalidRequest("get_slice_range requires a SliceRange, not %r" % (predicate,))
        return self._get_slice(key, column_parent, predicate)

    def _get_slice(self, key, column_parent, predicate):
        validation.validate_slice_parent(self._description, column_parent)
        log.debug("get_slice keyspace=%s key=%r parent=%r predicate=%r",
                  self._name, key, column_parent, predicate)
        results = self._client.get_slice(self._name, key, column_parent, predicate,
                                         self._consistency_level)
        return extract_columns(results)

    def get_range_slice(self, column_parent, predicate, start_key, finish_key, row_count=100):
        """
        Reads up to `row_count` rows with keys from `start_key` to
        `finish_key` and returns a :class:`dict` mapping each row key to
        that row's plain columns, in the order the rows were returned.
        """
        return self._get_range_slice(column_parent, predicate, start_key, finish_key,
                                     row_count, extract_columns)

    def get_super_range_slice(self, column_parent, predicate, start_key, finish_key,
                              row_count=100):
        """
        Like :meth:`get_range_slice`, but maps each row key to the row's
        super columns.
        """
        return self._get_range_slice(column_parent, predicate, start_key, finish_key,
                                     row_count, extract_super_columns)

    def _get_range_slice(self, column_parent, predicate, start_key, finish_key,
                         row_count, extract):
        validation.validate_slice_parent(self._description, column_parent)
        log.debug("get_range_slice keyspace=%s parent=%r predicate=%r start=%r finish=%r count=%d",
                  self._name, column_parent, predicate, start_key, finish_key, row_count)
        key_slices = self._client.get_range_slice(self._name, column_parent, predicate,
                                                  start_key, finish_key, row_count,
                                                  self._consistency_level)
        return dict((ks.key, extract(ks.columns)) for ks in key_slices)

    def get_count(self, key, column_parent):
        """
        Returns the number of columns (or super columns) under
        `column_parent` in row `key`.
        """
        validation.validate_slice_parent(self._description, column_parent)
        log.debug("get_count keyspace=%s key=%r parent=%r", self._name, key, column_parent)
        return self._client.get_count(self._name, key, column_parent, self._consistency_level)

    def __repr__(self):
        return "<%s name=%s consistency_level=%s column_families=%s>" % (
            self.__class__.__name__, self._name,
            consistency_value_to_name(self._consistency_level),
            sorted(self._description))
