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


import pinject

from .bookkeeper import Bookkeeper
from .claims import ClaimManager
from .finalizers import Terminator
from .owner_references import OwnerReferences
from .reconcile_queue import ReconcileQueue
from .reconciler import Reconciler
from .replicas import ReplicaManager
from .scheduler import Scheduler
from .worker import ReconcileWorker


class ControllerBindings(pinject.BindingSpec):
    def configure(self, bind, require):
        require("config")
        bind("reconcile_queue", to_class=ReconcileQueue)
        bind("owner_references", to_class=OwnerReferences)
        bind("claim_manager", to_class=ClaimManager)
        bind("replica_manager", to_class=ReplicaManager)
        bind("terminator", to_class=Terminator)
        bind("reconciler", to_class=Reconciler)
        bind("bookkeeper", to_class=Bookkeeper)
        bind("scheduler", to_class=Scheduler)
        bind("worker", to_class=ReconcileWorker)
