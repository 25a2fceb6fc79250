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
This module holds the structures that address data in a keyspace
(:class:`ColumnParent` and :class:`ColumnPath`) and the slice predicates
that select columns within a row.
"""

from cassbind.columns import _Struct


def _optional_name(name):
    # empty names mean "not supplied"
    return name if name else None


class ColumnParent(_Struct):
    """
    Identifies a container of columns: a whole row of a column family, or
    one super column of a row when :attr:`super_column` is set.

    An empty :attr:`super_column` is normalized to :const:`None`.
    """

    __slots__ = ('column_family', 'super_column')

    def __init__(self, column_family, super_column=None):
        self.column_family = column_family
        self.super_column = _optional_name(super_column)

    @property
    def is_super(self):
        return self.super_column is not None


class ColumnPath(_Struct):
    """
    Identifies a single column, a whole super column (when only
    :attr:`super_column` is set) or a whole row (when neither is set).

    Empty names are normalized to :const:`None`.
    """

    __slots__ = ('column_family', 'super_column', 'column')

    def __init__(self, column_family, super_column=None, column=None):
        self.column_family = column_family
        self.super_column = _optional_name(super_column)
        self.column = _optional_name(column)

    @property
    def is_super(self):
        return self.super_column is not None

    @property
    def parent(self):
        """
        The :class:`ColumnParent` that contains this path's target.
        """
        return ColumnParent(self.column_family, self.super_column)


class SlicePredicate(_Struct):
    """
    An abstract selector of columns within a row.  There are two variants:
    :class:`ColumnNames` and :class:`SliceRange`.
    """

    __slots__ = ()


class ColumnNames(SlicePredicate):
    """
    Selects the columns whose names are listed.
    """

    __slots__ = ('column_names',)

    def __init__(self, column_names):
        if isinstance(column_names, (str, bytes)):
            column_names = (column_names,)
        self.column_names = tuple(column_names)


class SliceRange(SlicePredicate):
    """
    Selects up to :attr:`count` columns whose names fall between
    :attr:`start` and :attr:`finish` inclusive.  An empty bound leaves that
    end of the range open.  When :attr:`reversed` is true the columns are
    walked from the end of the row, so :attr:`start` should then be the
    greater bound.
    """

    __slots__ = ('start', 'finish', 'reversed', 'count')

    def __init__(self, start='', finish='', reversed=False, count=100):
        if count < 0:
            raise ValueError("SliceRange count must not be negative, got %r" % (count,))
        self.start = start
        self.finish = finish
        self.reversed = reversed
        self.count = count
