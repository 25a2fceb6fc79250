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
Loading keyspace settings from YAML.

A configuration looks like this:

.. code-block:: yaml

    keyspace: Keyspace1
    consistency_level: QUORUM
    column_families:
      Standard1: {Type: Standard}
      Super1: {Type: Super, CompareSubcolumnsWith: BytesType}

``keyspace`` and ``column_families`` are required.  ``consistency_level``
is a :class:`~cassbind.ConsistencyLevel` name or value and defaults to
``ONE``.
"""

import logging
import os

import yaml

from cassbind import ConsistencyLevel, ConfigurationException
from cassbind.keyspace import Keyspace

log = logging.getLogger(__name__)

DEFAULT_CONSISTENCY_LEVEL = ConsistencyLevel.ONE


def consistency_level_from_name(value):
    """
    Resolves a consistency level given by name (in any case) or by its
    integer value.
    """
    if isinstance(value, bool):
        raise ConfigurationException("Invalid consistency level %r" % (value,))
    if isinstance(value, int):
        if value not in ConsistencyLevel.value_to_name:
            raise ConfigurationException("Invalid consistency level %r" % (value,))
        return value
    try:
        return ConsistencyLevel.name_to_value[str(value).upper()]
    except KeyError:
        raise ConfigurationException("Invalid consistency level %r; expected one of %s"
                                     % (value, ', '.join(sorted(ConsistencyLevel.name_to_value))))


def check_config(config):
    """
    Validates a configuration mapping and returns a normalized copy with
    the consistency level resolved to its integer value.
    """
    if not isinstance(config, dict):
        raise ConfigurationException("keyspace configuration must be a mapping, got %r"
                                     % (type(config).__name__,))
    name = config.get('keyspace')
    if not name:
        raise ConfigurationException("keyspace configuration requires a keyspace name")
    column_families = config.get('column_families')
    if not column_families or not isinstance(column_families, dict):
        raise ConfigurationException("keyspace %s requires a column_families mapping" % (name,))
    for cf, attrs in column_families.items():
        if not isinstance(attrs, dict):
            raise ConfigurationException("column family %s of keyspace %s must map "
                                         "attribute names to values" % (cf, name))
    level = config.get('consistency_level')
    if level is None:
        level = DEFAULT_CONSISTENCY_LEVEL
    else:
        level = consistency_level_from_name(level)
    return {
        'keyspace': name,
        'consistency_level': level,
        'column_families': dict((cf, dict(attrs)) for cf, attrs in column_families.items())
    }


def load_config(source):
    """
    Reads a configuration from `source`, which may be an open stream, the
    path of a YAML file or a YAML document as a string, and checks it with
    :func:`check_config`.
    """
    if hasattr(source, 'read'):
        config = yaml.safe_load(source)
    elif os.path.exists(source):
        log.debug("Loading keyspace configuration from %s", source)
        with open(source) as f:
            config = yaml.safe_load(f)
    else:
        config = yaml.safe_load(source)
    return check_config(config)


def keyspace_from_config(client, config, **kwargs):
    """
    Builds a :class:`~cassbind.keyspace.Keyspace` bound to `client` from a
    configuration mapping.  Additional keyword arguments go to the
    :class:`~cassbind.keyspace.Keyspace` constructor.
    """
    config = check_config(config)
    return Keyspace(client, config['keyspace'], config['column_families'],
                    config['consistency_level'], **kwargs)
