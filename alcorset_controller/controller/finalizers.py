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

from . import result, status
from .claims import ClaimKind
from .replicas import Phase
from ..constants import ALL_FINALIZERS, STATUS_TERMINATING
from ..resources.types import AlcorSet
from ..retry import retry_on_upsert_conflict

LOG = logging.getLogger(__name__)


def required_finalizer(alcorset):
    return ClaimKind.of(alcorset).finalizer


@retry_on_upsert_conflict
def add_finalizers(alcorset, to_add):
    fresh = AlcorSet.get(alcorset.metadata.name, alcorset.metadata.namespace)
    finalizers = list(fresh.metadata.finalizers)
    missing = [f for f in to_add if f not in finalizers]
    if not missing:
        return
    LOG.info("Adding finalizers %s to %s/%s", ", ".join(missing), fresh.metadata.namespace, fresh.metadata.name)
    fresh.metadata.finalizers = finalizers + missing
    fresh.save()


@retry_on_upsert_conflict
def remove_finalizer(alcorset, to_remove):
    fresh = AlcorSet.get(alcorset.metadata.name, alcorset.metadata.namespace)
    finalizers = [f for f in fresh.metadata.finalizers if f != to_remove]
    if len(finalizers) == len(fresh.metadata.finalizers):
        return
    LOG.info("Removing finalizer %s from %s/%s", to_remove, fresh.metadata.namespace, fresh.metadata.name)
    fresh.metadata.finalizers = finalizers
    fresh.save()


class Terminator(object):
    """Cleans up after an AlcorSet that is being deleted

    Pods go first, and claims are only deleted once no pod is left. Deleting a claim frees its IP, and a Pod
    with a long terminationGracePeriodSeconds could otherwise still be using an IP that another new claim is
    given, leaving two Pods with the same IP in the cluster.
    """

    def __init__(self, replica_manager, claim_manager):
        self._replica_manager = replica_manager
        self._claim_manager = claim_manager

    def __call__(self, alcorset):
        namespace, name = alcorset.metadata.namespace, alcorset.metadata.name
        listing = self._replica_manager.list_replicas(alcorset)
        if listing.phase is Phase.RAISING:
            LOG.info("Waiting for pods of %s/%s to come up before tearing down", namespace, name)
            return result.done(result.WAIT_RAISING)
        if listing.phase is Phase.FALLING:
            LOG.info("Waiting for pods of %s/%s to terminate", namespace, name)
            return result.requeue(result.WAIT_FALLING)
        if listing.pods:
            LOG.info("Deleting %d pods of %s/%s", len(listing.pods), namespace, name)
            self._replica_manager.teardown_replicas(alcorset, listing.pods, delete_all=True)
            status.set_status_text(alcorset, STATUS_TERMINATING)
            return result.done(result.DELETE_REPLICAS)

        present = [f for f in ALL_FINALIZERS if f in alcorset.metadata.finalizers]
        if not present:
            LOG.info("%s/%s has no finalizer of ours, nothing left to clean up", namespace, name)
            return result.done(result.DELETED)
        finalizer = present[0]
        self._claim_manager.delete_all_claims(alcorset, ClaimKind.for_finalizer(finalizer))
        remove_finalizer(alcorset, finalizer)
        return result.done(result.RELEASE_CLAIMS)
