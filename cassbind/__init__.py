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

import logging


class NullHandler(logging.Handler):

    def emit(self, record):
        pass

logging.getLogger('cassbind').addHandler(NullHandler())

__version_info__ = (0, 3, 0)
__version__ = '.'.join(map(str, __version_info__))


class ConsistencyLevel(object):
    """
    Specifies how many replicas must acknowledge an operation before the
    remote client reports it as a success.  The value is forwarded to the
    wrapped client unchanged; this layer never interprets it.

    Values follow the numbering of the Thrift ``ConsistencyLevel`` enum.
    """

    ONE = 1
    """
    Only one replica needs to respond to consider the operation a success
    """

    QUORUM = 2
    """
    ``ceil(RF/2)`` replicas must respond to consider the operation a success
    """

    LOCAL_QUORUM = 3
    """
    Requires a quorum of replicas in the local datacenter
    """

    EACH_QUORUM = 4
    """
    Requires a quorum of replicas in each datacenter
    """

    ALL = 5
    """
    All replicas must respond to consider the operation a success
    """

    ANY = 6
    """
    Only requires that one node receives the write, possibly as a hint.
    Valid only for writes.
    """

    TWO = 7
    """
    Two replicas must respond to consider the operation a success
    """

    THREE = 8
    """
    Three replicas must respond to consider the operation a success
    """


ConsistencyLevel.name_to_value = {
    'ONE': ConsistencyLevel.ONE,
    'QUORUM': ConsistencyLevel.QUORUM,
    'LOCAL_QUORUM': ConsistencyLevel.LOCAL_QUORUM,
    'EACH_QUORUM': ConsistencyLevel.EACH_QUORUM,
    'ALL': ConsistencyLevel.ALL,
    'ANY': ConsistencyLevel.ANY,
    'TWO': ConsistencyLevel.TWO,
    'THREE': ConsistencyLevel.THREE
}

ConsistencyLevel.value_to_name = {v: k for k, v in ConsistencyLevel.name_to_value.items()}


def consistency_value_to_name(value):
    """
    Returns the name of a consistency level value.  Values without a name
    are returned as they are.
    """
    if value is None:
        return "Not Set"
    try:
        return ConsistencyLevel.value_to_name.get(value, value)
    except TypeError:
        # unhashable
        return value


class ColumnFamilyType(object):
    """
    Values of the ``"Type"`` attribute in a keyspace description.
    """

    STANDARD = 'Standard'
    """
    Rows hold plain columns
    """

    SUPER = 'Super'
    """
    Rows hold super columns, each of which groups plain columns
    """

    ATTRIBUTE = 'Type'
    """
    The description key under which a column family declares its type
    """


class CassbindException(Exception):
    """
    Base for all exceptions explicitly raised by cassbind.
    """
    pass


class InvalidRequest(CassbindException):
    """
    A request was rejected before reaching the remote client, for example
    because a path does not agree with the declared type of its column
    family, or because a slice predicate of the wrong kind was supplied.
    """
    pass


class UnknownColumnFamily(InvalidRequest):
    """
    A request addressed a column family that the keyspace description
    does not declare.
    """

    column_family = None
    """
    The name of the undeclared column family
    """

    def __init__(self, column_family):
        Exception.__init__(self, "Unknown column family '%s'" % (column_family,))
        self.column_family = column_family


class NotFound(InvalidRequest):
    """
    The requested column or super column is absent.

    This remains a subclass of :exc:`InvalidRequest` so that callers that
    treat absence as an invalid request keep working.
    """
    pass


class MalformedResponse(InvalidRequest):
    """
    The remote client returned a result of the wrong shape, such as a super
    column where a plain column was requested.
    """
    pass


class ConfigurationException(CassbindException):
    """
    Keyspace configuration could not be loaded or was incomplete.
    """
    pass
