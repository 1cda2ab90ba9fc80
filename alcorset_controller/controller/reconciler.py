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

"""Drives a single AlcorSet one step closer to its desired state

Every call re-reads the AlcorSet and does at most one kind of change. Further steps are triggered by the
watch events the change itself causes, or by the requeue flag in the returned result.
"""

import logging

from k8s.client import NotFound

from . import result, status
from .claims import ClaimKind
from .finalizers import add_finalizers, required_finalizer
from .replicas import Phase
from ..constants import ALL_FINALIZERS, STATUS_INVALID_SPEC
from ..resources.types import AlcorSet

LOG = logging.getLogger(__name__)


class InvalidSpec(Exception):
    pass


def validate(alcorset):
    spec = alcorset.spec
    if ClaimKind.of(alcorset) is ClaimKind.VPC:
        return
    if spec.ips and spec.ippool:
        raise InvalidSpec("only one of ips and ippool can be set")
    if spec.ips and spec.replicas > len(spec.ips):
        raise InvalidSpec("{} replicas requested, but only {} ips given".format(spec.replicas, len(spec.ips)))


class Reconciler(object):
    def __init__(self, replica_manager, terminator):
        self._replica_manager = replica_manager
        self._terminator = terminator

    def reconcile(self, namespace, name):
        try:
            alcorset = AlcorSet.get(name, namespace)
        except NotFound:
            LOG.info("AlcorSet %s/%s not found, it has probably been deleted", namespace, name)
            return result.done(result.NOT_FOUND)

        if alcorset.metadata.deletionTimestamp is not None:
            return self._terminator(alcorset)

        # One claim finalizer per AlcorSet, chosen when it is first added
        if not any(f in alcorset.metadata.finalizers for f in ALL_FINALIZERS):
            add_finalizers(alcorset, [required_finalizer(alcorset)])
            return result.done(result.ADD_FINALIZER)

        if not status.is_initialized(alcorset):
            LOG.info("Initializing status of %s/%s", namespace, name)
            status.init_status(alcorset)
            return result.done(result.INIT_STATUS)

        try:
            validate(alcorset)
        except InvalidSpec as e:
            LOG.warning("AlcorSet %s/%s has an invalid spec: %s", namespace, name, e)
            status.set_status_text(alcorset, "{}: {}".format(STATUS_INVALID_SPEC, e))
            return result.done(result.INVALID_SPEC)

        return self._scale(alcorset)

    def _scale(self, alcorset):
        namespace, name = alcorset.metadata.namespace, alcorset.metadata.name
        listing = self._replica_manager.list_replicas(alcorset)
        if listing.phase is Phase.RAISING:
            LOG.info("Waiting for the last pod of %s/%s to become ready", namespace, name)
            return result.done(result.WAIT_RAISING)
        if listing.phase is Phase.FALLING:
            LOG.info("Waiting for the last deleted pod of %s/%s to terminate", namespace, name)
            return result.requeue(result.WAIT_FALLING)

        replicas = alcorset.spec.replicas
        pods = listing.pods
        if len(pods) > replicas:
            LOG.info("%s/%s has %d pods, wants %d", namespace, name, len(pods), replicas)
            self._replica_manager.teardown_replicas(alcorset, pods, delete_all=False)
            return result.done(result.TEARDOWN)
        if len(pods) < replicas:
            LOG.info("%s/%s has %d pods, wants %d", namespace, name, len(pods), replicas)
            if self._replica_manager.create_replicas(alcorset, pods):
                return result.requeue(result.CREATE)
            return result.done(result.CREATE)
        LOG.debug("%s/%s has the desired %d pods", namespace, name, replicas)
        return result.done(result.CONVERGED)
