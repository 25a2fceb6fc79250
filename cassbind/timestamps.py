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
Client-side generation of write and remove timestamps, expressed in
microseconds since the UNIX epoch.

:func:`wall_clock_timestamp` is the default used by
:class:`~cassbind.keyspace.Keyspace`.  It makes no monotonicity guarantee:
two calls within the clock's resolution may return equal values, and a
clock adjustment may make them go backwards.  Callers needing strictly
increasing timestamps within a process can pass a
:class:`MonotonicTimestampGenerator` instead.
"""

import logging
import time
from threading import Lock

log = logging.getLogger(__name__)


def wall_clock_timestamp():
    """
    Returns ``int(time.time() * 1e6)``.
    """
    return int(time.time() * 1e6)


class MonotonicTimestampGenerator(object):
    """
    A callable returning wall-clock microseconds, except that when the clock
    fails to advance past the last value returned, the last value plus one
    is returned instead.  Warnings are logged when the returned values run
    ahead of the clock by more than :attr:`warning_threshold` seconds.
    """

    warn_on_drift = True
    """
    Whether drift into the future is logged at all.
    """

    warning_threshold = 1
    """
    Minimum drift, in seconds, before a warning is logged.
    """

    warning_interval = 1
    """
    Minimum number of seconds between two drift warnings.
    """

    def __init__(self, warn_on_drift=True, warning_threshold=1, warning_interval=1):
        self.lock = Lock()
        self.last = 0
        self._last_warn = 0
        self.warn_on_drift = warn_on_drift
        self.warning_threshold = warning_threshold
        self.warning_interval = warning_interval

    def __call__(self):
        with self.lock:
            now = wall_clock_timestamp()
            if now > self.last:
                self.last = now
            else:
                self.last += 1
                self._check_drift(now)
            return self.last

    def _check_drift(self, now):
        # caller holds self.lock
        if not self.warn_on_drift:
            return
        drift = self.last - now
        if drift < self.warning_threshold * 1e6:
            return
        if now - self._last_warn < self.warning_interval * 1e6:
            return
        log.warning("Clock skew detected: clock reads %d but the last generated "
                    "timestamp was %d (%d microseconds ahead); timestamps are being "
                    "incremented artificially", now, self.last, drift)
        self._last_warn = now
