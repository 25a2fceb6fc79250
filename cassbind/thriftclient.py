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
Drives a generated Cassandra Thrift client through the interface a
:class:`~cassbind.keyspace.Keyspace` consumes.

The Python bindings are generated from Cassandra's ``cassandra.thrift``
interface file by the Thrift compiler and are not shipped with cassbind.
Pass the generated ``Cassandra`` service module and its ``ttypes`` module
to :func:`connect`, or wrap an already open ``Cassandra.Client`` in a
:class:`ThriftClient`:

.. code-block:: python

    from cassandra_thrift import Cassandra, ttypes

    from cassbind.keyspace import Keyspace
    from cassbind.thriftclient import connect

    client = connect('127.0.0.1', 9160, Cassandra, ttypes)
    ks = Keyspace.from_client(client, 'Keyspace1')

Requests are converted into the generated ``ttypes`` structures on the way
out, and results are converted back into :mod:`cassbind.columns`
structures on the way in.  Consistency levels are forwarded unchanged.
"""

import logging

from thrift.protocol import TBinaryProtocol
from thrift.transport import TSocket, TTransport

from cassbind import ColumnFamilyType, InvalidRequest, NotFound
from cassbind.columns import Column, SuperColumn, ColumnOrSuperColumn, KeySlice
from cassbind.query import ColumnNames, SliceRange

log = logging.getLogger(__name__)

# CfDef fields copied into a keyspace description, and the keys they go under
_CF_DEF_ATTRIBUTES = (
    ('column_type', ColumnFamilyType.ATTRIBUTE),
    ('comparator_type', 'CompareWith'),
    ('subcomparator_type', 'CompareSubcolumnsWith'),
)

_MAX_COUNT = 2 ** 31 - 1


def connect(host, port, cassandra, ttypes, timeout=None):
    """
    Opens a framed, binary-protocol connection to `host`:`port` and returns
    a :class:`ThriftClient` over it.

    `cassandra` is the generated service module (the one defining
    ``Client``) and `ttypes` its generated types module.  `timeout`, in
    seconds, applies to every socket operation.
    """
    socket = TSocket.TSocket(host, port)
    if timeout is not None:
        socket.setTimeout(timeout * 1000.0)
    transport = TTransport.TFramedTransport(socket)
    protocol = TBinaryProtocol.TBinaryProtocol(transport)
    client = cassandra.Client(protocol)
    transport.open()
    log.debug("Opened Thrift connection to %s:%s", host, port)
    return ThriftClient(client, ttypes, transport)


class ThriftClient(object):
    """
    Adapts a generated ``Cassandra.Client`` (Thrift API 0.7 and later) to
    the calls made by :class:`~cassbind.keyspace.Keyspace`.

    The connection is switched with ``set_keyspace`` whenever a request
    names a different keyspace than the previous one.  A
    ``NotFoundException`` from the server is raised as
    :exc:`~cassbind.NotFound` and an ``InvalidRequestException`` as
    :exc:`~cassbind.InvalidRequest`.  Any other error, including transport
    errors and timeouts, propagates unchanged.

    Like the generated client it wraps, an instance is not thread safe.
    """

    def __init__(self, client, ttypes, transport=None):
        self._client = client
        self._ttypes = ttypes
        self._transport = transport
        self._keyspace = None

    @property
    def client(self):
        """
        The wrapped generated client.
        """
        return self._client

    def close(self):
        if self._transport is not None:
            self._transport.close()

    def _call(self, method, *args):
        try:
            return getattr(self._client, method)(*args)
        except self._ttypes.NotFoundException:
            raise NotFound("%s found nothing" % (method,))
        except self._ttypes.InvalidRequestException as exc:
            raise InvalidRequest(getattr(exc, 'why', None) or str(exc))

    def _use(self, keyspace):
        if keyspace != self._keyspace:
            log.debug("Switching Thrift connection to keyspace %s", keyspace)
            self._call('set_keyspace', keyspace)
            self._keyspace = keyspace

    def _column_parent(self, column_parent):
        return self._ttypes.ColumnParent(column_family=column_parent.column_family,
                                         super_column=column_parent.super_column)

    def _column_path(self, column_path):
        return self._ttypes.ColumnPath(column_family=column_path.column_family,
                                       super_column=column_path.super_column,
                                       column=column_path.column)

    def _predicate(self, predicate):
        if isinstance(predicate, ColumnNames):
            return self._ttypes.SlicePredicate(column_names=list(predicate.column_names))
        if isinstance(predicate, SliceRange):
            slice_range = self._ttypes.SliceRange(start=predicate.start, finish=predicate.finish,
                                                  reversed=predicate.reversed,
                                                  count=predicate.count)
            return self._ttypes.SlicePredicate(slice_range=slice_range)
        raise InvalidRequest("Unsupported slice predicate %r" % (predicate,))

    @staticmethod
    def _from_column(column):
        return Column(column.name, column.value, column.timestamp, getattr(column, 'ttl', None))

    def _from_result(self, cosc):
        column = super_column = None
        if cosc.column is not None:
            column = self._from_column(cosc.column)
        if cosc.super_column is not None:
            super_column = SuperColumn(cosc.super_column.name,
                                       [self._from_column(c) for c in cosc.super_column.columns])
        return ColumnOrSuperColumn(column, super_column)

    def describe_keyspace(self, keyspace):
        ks_def = self._call('describe_keyspace', keyspace)
        description = {}
        for cf_def in ks_def.cf_defs:
            attrs = {}
            for field, attribute in _CF_DEF_ATTRIBUTES:
                value = getattr(cf_def, field, None)
                if value is not None:
                    attrs[attribute] = value
            description[cf_def.name] = attrs
        return description

    def insert(self, keyspace, key, column_parent, column, consistency_level):
        self._use(keyspace)
        thrift_column = self._ttypes.Column(name=column.name, value=column.value,
                                            timestamp=column.timestamp, ttl=column.ttl)
        self._call('insert', key, self._column_parent(column_parent),
                   thrift_column, consistency_level)

    def remove(self, keyspace, key, column_path, timestamp, consistency_level):
        self._use(keyspace)
        self._call('remove', key, self._column_path(column_path),
                   timestamp, consistency_level)

    def get(self, keyspace, key, column_path, consistency_level):
        self._use(keyspace)
        cosc = self._call('get', key, self._column_path(column_path),
                          consistency_level)
        return self._from_result(cosc)

    def get_slice(self, keyspace, key, column_parent, predicate, consistency_level):
        self._use(keyspace)
        results = self._call('get_slice', key, self._column_parent(column_parent),
                             self._predicate(predicate), consistency_level)
        return [self._from_result(cosc) for cosc in results]

    def get_range_slice(self, keyspace, column_parent, predicate, start_key, finish_key,
                        row_count, consistency_level):
        self._use(keyspace)
        key_range = self._ttypes.KeyRange(start_key=start_key, end_key=finish_key,
                                          count=row_count)
        key_slices = self._call('get_range_slices',
                                self._column_parent(column_parent),
                                self._predicate(predicate), key_range, consistency_level)
        return [KeySlice(ks.key, [self._from_result(cosc) for cosc in ks.columns])
                for ks in key_slices]

    def get_count(self, keyspace, key, column_parent, consistency_level):
        self._use(keyspace)
        predicate = self._predicate(SliceRange(count=_MAX_COUNT))
        return self._call('get_count', key, self._column_parent(column_parent),
                          predicate, consistency_level)
