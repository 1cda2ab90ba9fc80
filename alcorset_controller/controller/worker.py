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

from ..base_thread import DaemonThread
from ..config import Configuration
from ..log_extras import set_extras
from .bookkeeper import Bookkeeper
from .reconcile_queue import ReconcileQueue
from .reconciler import Reconciler
from .scheduler import Scheduler

LOG = logging.getLogger(__name__)


class ReconcileWorker(DaemonThread):
    """Take incoming ReconcileRequests and let the reconciler act on them

    Mainly focused on bookkeeping and rescheduling, leaving the hard work to the reconciler.
    """

    def __init__(self, reconcile_queue, reconciler, scheduler, bookkeeper, config):
        super(ReconcileWorker, self).__init__()
        self._queue = _make_gen(reconcile_queue.get)
        self._reconcile_queue: ReconcileQueue = reconcile_queue
        self._reconciler: Reconciler = reconciler
        self._scheduler: Scheduler = scheduler
        self._bookkeeper: Bookkeeper = bookkeeper
        self._config: Configuration = config
        self._failures = {}

    def __call__(self):
        for request in self._queue:
            self.process(request)

    def process(self, request):
        set_extras(namespace=request.namespace, name=request.name)
        LOG.info("Reconciling %s/%s", request.namespace, request.name)
        try:
            with self._bookkeeper.time(request):
                result = self._reconciler.reconcile(request.namespace, request.name)
        except Exception:
            LOG.exception("Error while reconciling %s/%s: ", request.namespace, request.name)
            self._bookkeeper.failed(request)
            delay = self._error_backoff(request)
            LOG.info("Retrying %s/%s in %s seconds", request.namespace, request.name, delay)
            self._scheduler.add(Requeue(self._reconcile_queue, request), delay)
            return
        self._failures.pop(request, None)
        self._bookkeeper.success(result)
        LOG.info("Completed reconcile of %s/%s with action %s", request.namespace, request.name, result.action)
        if result.requeue:
            self._scheduler.add(Requeue(self._reconcile_queue, request), self._config.requeue_delay)

    def _error_backoff(self, request):
        failures = self._failures.get(request, 0)
        self._failures[request] = failures + 1
        return min(self._config.error_backoff_base * (2 ** failures), self._config.error_backoff_max)


class Requeue(object):
    """Scheduler task putting a request back on the queue"""

    def __init__(self, reconcile_queue, request):
        self._reconcile_queue = reconcile_queue
        self.request = request

    def __call__(self):
        self._reconcile_queue.put(self.request)

    def __repr__(self):
        return "Requeue({}/{})".format(self.request.namespace, self.request.name)


def _make_gen(func):
    while True:
        yield func()
