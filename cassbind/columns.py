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
Value structures exchanged with the remote client: the cells that are
written and the results that come back from reads.
"""


class _Struct(object):
    """
    Equality and repr driven by ``__slots__``, in the manner of generated
    Thrift structs.
    """

    __slots__ = ()

    def __eq__(self, other):
        return (isinstance(other, self.__class__) and
                all(getattr(self, s) == getattr(other, s) for s in self.__slots__))

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__,
                           ', '.join('%s=%r' % (s, getattr(self, s)) for s in self.__slots__))


class Column(_Struct):
    """
    A single named cell.  :attr:`timestamp` is the write time in
    microseconds since the epoch; :attr:`ttl`, when set, is the number of
    seconds after which the cell expires.
    """

    __slots__ = ('name', 'value', 'timestamp', 'ttl')

    def __init__(self, name=None, value=None, timestamp=None, ttl=None):
        self.name = name
        self.value = value
        self.timestamp = timestamp
        self.ttl = ttl


class SuperColumn(_Struct):
    """
    A named, ordered group of :class:`Column` instances.
    """

    __slots__ = ('name', 'columns')

    def __init__(self, name=None, columns=None):
        self.name = name
        self.columns = list(columns) if columns is not None else []


class ColumnOrSuperColumn(_Struct):
    """
    One entry of a read result.  A well-formed entry sets exactly one of
    :attr:`column` or :attr:`super_column`.
    """

    __slots__ = ('column', 'super_column')

    def __init__(self, column=None, super_column=None):
        self.column = column
        self.super_column = super_column


class KeySlice(_Struct):
    """
    The columns read from a single row by a range query.
    """

    __slots__ = ('key', 'columns')

    def __init__(self, key=None, columns=None):
        self.key = key
        self.columns = list(columns) if columns is not None else []


def extract_columns(results):
    """
    Returns the plain columns with non-empty names from a list of
    :class:`ColumnOrSuperColumn`, preserving their relative order.
    Entries shaped as super columns are discarded.
    """
    return [cosc.column for cosc in results
            if cosc.column is not None and cosc.column.name]


def extract_super_columns(results):
    """
    Like :func:`extract_columns`, but keeps only the super columns.
    """
    return [cosc.super_column for cosc in results
            if cosc.super_column is not None and cosc.super_column.name]
