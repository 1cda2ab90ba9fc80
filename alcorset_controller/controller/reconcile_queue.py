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

import logging
from collections import namedtuple
from queue import Queue
from threading import Lock

LOG = logging.getLogger(__name__)

ReconcileRequest = namedtuple("ReconcileRequest", ["namespace", "name"])


class ReconcileQueue(object):
    """FIFO of AlcorSets waiting to be reconciled

    A request that is already waiting is not added again, since one reconcile looks at the current state anyway.
    Once a request has been taken by get, it can be added again.
    """

    def __init__(self):
        self._queue = Queue()
        self._pending = set()
        self._lock = Lock()

    def put(self, request):
        with self._lock:
            if request in self._pending:
                LOG.debug("%s/%s is already waiting to be reconciled", request.namespace, request.name)
                return False
            self._pending.add(request)
        self._queue.put(request)
        return True

    def get(self):
        request = self._queue.get()
        with self._lock:
            self._pending.discard(request)
        return request

    def qsize(self):
        return self._queue.qsize()
