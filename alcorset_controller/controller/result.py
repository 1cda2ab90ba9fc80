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

from collections import namedtuple

# What a single reconcile did, and whether the AlcorSet should be reconciled again shortly
ReconcileResult = namedtuple("ReconcileResult", ["action", "requeue"])

NOT_FOUND = "not_found"
ADD_FINALIZER = "add_finalizer"
INIT_STATUS = "init_status"
INVALID_SPEC = "invalid_spec"
WAIT_RAISING = "wait_raising"
WAIT_FALLING = "wait_falling"
TEARDOWN = "teardown"
CREATE = "create"
CONVERGED = "converged"
DELETE_REPLICAS = "delete_replicas"
RELEASE_CLAIMS = "release_claims"
DELETED = "deleted"


def done(action):
    return ReconcileResult(action, False)


def requeue(action):
    return ReconcileResult(action, True)
