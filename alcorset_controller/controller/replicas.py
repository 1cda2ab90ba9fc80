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

import copy
import logging
from collections import namedtuple
from enum import Enum

from k8s.client import NotFound
from k8s.models.common import ObjectMeta

from . import status
from .claims import ClaimCreationFailed, claim_annotations
from .naming import NO_INDEX, index_of, pod_hostname, pod_name
from ..constants import (
    APP_LABEL,
    STATUS_FAILED_TO_CLAIM_IP,
    STATUS_READY,
    STATUS_SCALING_DOWN,
    STATUS_SCALING_UP,
    STATUS_WAIT_IPCLAIM_READY,
)
from ..resources.types import ReplicaPod

LOG = logging.getLogger(__name__)


class Phase(Enum):
    # Nothing is in flight, the pod list can be acted upon
    CONVERGED = "Converged"
    # Sequence mode: a pod has been created but is not running and ready yet
    RAISING = "Raising"
    # Sequence mode: a pod is terminating
    FALLING = "Falling"


ReplicaListing = namedtuple("ReplicaListing", ["phase", "pods"])


class ReplicaManager(object):
    """Creates and deletes the Pods of an AlcorSet"""

    def __init__(self, claim_manager, owner_references):
        self._claim_manager = claim_manager
        self._owner_references = owner_references

    def list_replicas(self, alcorset):
        pods = ReplicaPod.find(namespace=alcorset.metadata.namespace, labels={APP_LABEL: alcorset.metadata.name})
        if alcorset.spec.sequence:
            if any(pod.metadata.deletionTimestamp is not None for pod in pods):
                return ReplicaListing(Phase.FALLING, pods)
            if not all(pod.is_running_and_ready() for pod in pods):
                return ReplicaListing(Phase.RAISING, pods)
        return ReplicaListing(Phase.CONVERGED, pods)

    def create_replicas(self, alcorset, pods):
        """Create missing replicas, returning True if the AlcorSet must be reconciled again"""
        namespace = alcorset.metadata.namespace
        replicas = alcorset.spec.replicas
        existing = {pod.metadata.name for pod in pods}
        to_create = 1 if alcorset.spec.sequence else replicas - len(pods)
        for _ in range(to_create):
            index = _first_free_index(alcorset, existing)
            if index is None:
                break
            name = pod_name(alcorset, index)
            try:
                claim = self._claim_manager.get_or_create_claim(alcorset, name)
            except ClaimCreationFailed:
                LOG.exception("Failed to claim IP for %s/%s", namespace, name)
                status.set_status_text(alcorset, STATUS_FAILED_TO_CLAIM_IP)
                return True
            if claim is None:
                LOG.info("IP claim for %s/%s not ready yet, will requeue", namespace, name)
                status.set_status_text(alcorset, STATUS_WAIT_IPCLAIM_READY)
                return True
            self._claim_manager.record_claimed_ip(alcorset, claim.status.ip)
            pod = self._build_pod(alcorset, index, claim_annotations(claim))
            if self._create_if_missing(pod):
                created = len(existing) + 1
                text = STATUS_READY if created >= replicas else STATUS_SCALING_UP
                status.adjust_count(alcorset, 1, text)
            existing.add(name)
        return False

    def teardown_replicas(self, alcorset, pods, delete_all):
        # Terminating pods were counted down when they were deleted, and still show up until they are gone
        pods = [pod for pod in pods if pod.metadata.deletionTimestamp is None]
        if alcorset.spec.sequence:
            victims = _highest_index(pods, delete_all)
        elif delete_all:
            victims = pods
        else:
            victims = [pod for pod in pods if index_of(pod.metadata.name) >= alcorset.spec.replicas]
        for pod in victims:
            LOG.info("Deleting pod %s/%s", pod.metadata.namespace, pod.metadata.name)
            try:
                ReplicaPod.delete(pod.metadata.name, pod.metadata.namespace)
            except NotFound:
                LOG.debug("Pod %s/%s was already gone", pod.metadata.namespace, pod.metadata.name)
                continue
            status.adjust_count(alcorset, -1, STATUS_SCALING_DOWN)

    def _build_pod(self, alcorset, index, annotations):
        template = alcorset.spec.template
        labels = dict(template.metadata.labels or {})
        labels[APP_LABEL] = alcorset.metadata.name
        merged_annotations = dict(template.metadata.annotations or {})
        merged_annotations.update(annotations)
        spec = copy.deepcopy(template.spec or {})
        spec["hostname"] = pod_hostname(alcorset, index)
        metadata = ObjectMeta(name=pod_name(alcorset, index), namespace=alcorset.metadata.namespace,
                              labels=labels, annotations=merged_annotations)
        pod = ReplicaPod(metadata=metadata, spec=spec)
        self._owner_references.apply(pod, alcorset)
        return pod

    @staticmethod
    def _create_if_missing(pod):
        try:
            found = ReplicaPod.get(pod.metadata.name, pod.metadata.namespace)
            LOG.info("Found pod %s/%s in phase %s", found.metadata.namespace, found.metadata.name, found.status.phase)
            return False
        except NotFound:
            pass
        LOG.info("Creating pod %s/%s", pod.metadata.namespace, pod.metadata.name)
        pod.save()
        return True


def _first_free_index(alcorset, existing):
    for index in range(alcorset.spec.replicas):
        if pod_name(alcorset, index) not in existing:
            return index
    return None


def _highest_index(pods, delete_all):
    """The single pod with the highest index, as a list to be torn down

    Pods without an index are only taken when everything goes and no indexed pod is left.
    """
    candidates = [pod for pod in pods if index_of(pod.metadata.name) != NO_INDEX]
    if not candidates:
        return pods[:1] if delete_all else []
    return [max(candidates, key=lambda pod: index_of(pod.metadata.name))]
