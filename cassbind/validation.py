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
Checks of paths and parents against a keyspace description.

A description maps each column family name to its attributes, for example
``{'Standard1': {'Type': 'Standard'}, 'Super1': {'Type': 'Super'}}``.
Every function here is pure: it either returns or raises
:exc:`~cassbind.InvalidRequest` (or its subclass
:exc:`~cassbind.UnknownColumnFamily`).
"""

import logging

from cassbind import ColumnFamilyType, InvalidRequest, UnknownColumnFamily

log = logging.getLogger(__name__)


def column_family_type(description, column_family):
    """
    Returns the declared ``"Type"`` of `column_family`, which may be
    :const:`None` if the entry has no type.

    :raises UnknownColumnFamily: if the description has no (or an empty)
        entry for `column_family`
    """
    cf_def = description.get(column_family)
    if not cf_def:
        log.debug("Rejecting request for undeclared column family %r", column_family)
        raise UnknownColumnFamily(column_family)
    return cf_def.get(ColumnFamilyType.ATTRIBUTE)


def _reject(what, target, cf_type):
    log.debug("Rejecting %s %r for column family type %r", what, target, cf_type)
    raise InvalidRequest("Invalid %s %r for column family '%s' of type %r"
                         % (what, target, target.column_family, cf_type))


def validate_column_path(description, column_path):
    """
    A path into a ``Standard`` column family must name a column; a path
    into a ``Super`` column family must name a super column.
    """
    cf_type = column_family_type(description, column_path.column_family)
    if cf_type == ColumnFamilyType.STANDARD:
        if column_path.column:
            return
    elif cf_type == ColumnFamilyType.SUPER:
        if column_path.super_column:
            return
    _reject('column path', column_path, cf_type)


def validate_column_parent(description, column_parent):
    """
    Any parent within a ``Standard`` column family is accepted; a parent
    within a ``Super`` column family must name a super column.
    """
    cf_type = column_family_type(description, column_parent.column_family)
    if cf_type == ColumnFamilyType.STANDARD:
        return
    elif cf_type == ColumnFamilyType.SUPER:
        if column_parent.super_column:
            return
    _reject('column parent', column_parent, cf_type)


def validate_super_column_path(description, column_path):
    """
    The path must address a super column of a ``Super`` column family.
    """
    cf_type = column_family_type(description, column_path.column_family)
    if cf_type == ColumnFamilyType.SUPER and column_path.super_column:
        return
    _reject('super column path', column_path, cf_type)


def validate_slice_parent(description, column_parent):
    """
    Parents used for slices, range slices and counts only need to address
    a declared column family of a known type, since a row-level slice of a
    ``Super`` column family has no super column name.
    """
    cf_type = column_family_type(description, column_parent.column_family)
    if cf_type not in (ColumnFamilyType.STANDARD, ColumnFamilyType.SUPER):
        _reject('column parent', column_parent, cf_type)
