#!/usr/bin/env python
# -*- coding: utf-8

# Copyright 2017-2019 The FIAAS Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
import itertools
import logging
import time
from queue import PriorityQueue
from time import monotonic as time_monotonic
from typing import Callable

from ..base_thread import DaemonThread

LOG = logging.getLogger(__name__)

# Longest time to sleep before looking at the queue again, so tasks added meanwhile are not delayed much
MAX_IDLE = 1.0


class Scheduler(DaemonThread):
    """Runs tasks once their delay has passed, in order of when they are due"""

    def __init__(self, time_func=time_monotonic, delay_func=time.sleep):
        super(Scheduler, self).__init__()
        self._tasks = PriorityQueue()
        self._sequence = itertools.count()
        self._time_func: Callable[[], float] = time_func
        self._delay_func: Callable[[float], None] = delay_func

    def __call__(self, *args, run_forever=True, **kwargs):
        while True:
            execute_at, sequence, task = self._tasks.get()
            now = self._time_func()
            if now >= execute_at:
                try:
                    task()
                except Exception:
                    LOG.exception("Error while processing task %r", task)
            else:
                self._tasks.put((execute_at, sequence, task))
                self._delay_func(min(execute_at - now, MAX_IDLE))
            # the run_forever parameter is only to enable testing
            if not run_forever:
                LOG.warning("breaking task processing loop because run_forever=%s", run_forever)
                break

    def add(self, task: Callable[[], None], delay=1):
        execute_at = self._time_func() + delay
        # the sequence number keeps tasks due at the same time in insertion order, and tasks are never compared
        self._tasks.put((execute_at, next(self._sequence), task))
