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
from prometheus_client import Counter, Histogram


class Bookkeeper(object):
    """Measures time, fails and outcomes of reconciles"""

    reconcile_counter = Counter("alcorset_reconcile", "Reconciles started", ["namespace"])
    error_counter = Counter("alcorset_reconcile_errors", "Reconcile failed", ["namespace"])
    action_counter = Counter("alcorset_reconcile_actions", "Reconcile completed, by action taken", ["action"])
    requeue_counter = Counter("alcorset_reconcile_requeues", "Reconcile asked to be run again", ["reason"])
    reconcile_histogram = Histogram("alcorset_reconcile_duration_seconds", "Time spent on each reconcile")

    def time(self, request):
        self.reconcile_counter.labels(request.namespace).inc()
        return self.reconcile_histogram.time()

    def failed(self, request):
        self.error_counter.labels(request.namespace).inc()
        self.requeue_counter.labels("error").inc()

    def success(self, result):
        self.action_counter.labels(result.action).inc()
        if result.requeue:
            self.requeue_counter.labels("requested").inc()
