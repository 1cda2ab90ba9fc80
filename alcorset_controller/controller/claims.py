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

"""IPClaims and VPCIPClaims for the replicas of an AlcorSet

There is one claim per replica, with the same name as the replica Pod. An AlcorSet uses VPCIPClaims when
spec.onVpc is set, IPClaims otherwise; never both.
"""

import logging
from enum import Enum

from k8s.client import ClientError, K8sClientException, NotFound
from k8s.models.common import ObjectMeta

from . import status
from .naming import index_of
from ..constants import (
    APP_LABEL,
    FINALIZER_IPCLAIM,
    FINALIZER_VPCIPCLAIM,
    ANNOTATION_VPC_IP,
    ANNOTATION_VPC_NIC_MAC,
    ANNOTATION_VPC_NIC_ID,
    ANNOTATION_VPC_INSTANCE_ID,
    ANNOTATION_VPC_IP_RETAIN,
    ANNOTATION_SRIOV_IP,
    ANNOTATION_SRIOV_VLAN,
    ANNOTATION_SRIOV_ROUTE,
    ANNOTATION_SRIOV_MASK,
    ANNOTATION_SRIOV_MBPS,
)
from ..resources.types import IPClaim, IPClaimSpec, VPCIPClaim, VPCIPClaimSpec

LOG = logging.getLogger(__name__)


class ClaimKind(Enum):
    IP = "IPClaim"
    VPC = "VPCIPClaim"

    @property
    def model(self):
        return VPCIPClaim if self is ClaimKind.VPC else IPClaim

    @property
    def finalizer(self):
        return FINALIZER_VPCIPCLAIM if self is ClaimKind.VPC else FINALIZER_IPCLAIM

    @classmethod
    def of(cls, alcorset):
        """The kind of claims alcorset uses

        Fixed by the finalizer once the AlcorSet holds one, so flipping spec.onVpc later does not mix kinds.
        """
        for kind in cls:
            if kind.finalizer in alcorset.metadata.finalizers:
                return kind
        return cls.VPC if alcorset.spec.onVpc else cls.IP

    @classmethod
    def for_finalizer(cls, finalizer):
        for kind in cls:
            if kind.finalizer == finalizer:
                return kind
        raise ValueError("No claim kind uses finalizer {}".format(finalizer))


class ClaimCreationFailed(Exception):
    pass


class ClaimManager(object):
    def __init__(self, owner_references):
        self._owner_references = owner_references

    def get_or_create_claim(self, alcorset, name):
        """Return the claim for the replica called name, if it has been given an IP

        None means the claim is not ready yet, either because it was just created or because the IP has not been
        assigned yet. Both are resolved by waiting for the claim to change, which triggers a new reconcile.
        """
        kind = ClaimKind.of(alcorset)
        namespace = alcorset.metadata.namespace
        try:
            claim = kind.model.get(name, namespace)
        except NotFound:
            self._create(kind, alcorset, name)
            return None
        if not claim.status.ip:
            LOG.info("%s %s/%s has no IP yet", kind.value, namespace, name)
            return None
        LOG.debug("Found %s %s/%s with IP %s", kind.value, namespace, name, claim.status.ip)
        return claim

    def _create(self, kind, alcorset, name):
        namespace = alcorset.metadata.namespace
        metadata = ObjectMeta(name=name, namespace=namespace, labels={APP_LABEL: alcorset.metadata.name})
        if kind is ClaimKind.VPC:
            claim = VPCIPClaim(metadata=metadata, spec=VPCIPClaimSpec(pod=name))
        else:
            claim = IPClaim(metadata=metadata, spec=IPClaimSpec(ippool=alcorset.spec.ippool,
                                                                 mbps=alcorset.spec.mbps,
                                                                 ip=_requested_ip(alcorset, name)))
        self._owner_references.apply(claim, alcorset)
        LOG.info("Creating %s %s/%s", kind.value, namespace, name)
        try:
            claim.save()
        except ClientError as e:
            if e.response is not None and e.response.status_code == 409:
                LOG.info("%s %s/%s was created by someone else in the meantime", kind.value, namespace, name)
                return
            raise ClaimCreationFailed("Failed to create {} {}/{}".format(kind.value, namespace, name)) from e
        except K8sClientException as e:
            raise ClaimCreationFailed("Failed to create {} {}/{}".format(kind.value, namespace, name)) from e

    def record_claimed_ip(self, alcorset, ip):
        if status.add_claimed_ip(alcorset, ip):
            LOG.info("Recorded claimed IP %s for %s/%s", ip, alcorset.metadata.namespace, alcorset.metadata.name)

    def delete_all_claims(self, alcorset, kind):
        """Delete every claim of kind belonging to alcorset, and forget their IPs in the status"""
        namespace = alcorset.metadata.namespace
        try:
            claims = kind.model.find(namespace=namespace, labels={APP_LABEL: alcorset.metadata.name})
        except NotFound:
            LOG.info("No %ss found for %s/%s, nothing to release", kind.value, namespace, alcorset.metadata.name)
            return
        released = []
        for claim in claims:
            if claim.status.ip:
                released.append(claim.status.ip)
            LOG.info("Deleting %s %s/%s", kind.value, namespace, claim.metadata.name)
            try:
                kind.model.delete(claim.metadata.name, namespace)
            except NotFound:
                pass  # already deleted
        if released:
            status.remove_claimed_ips(alcorset, released)


def claim_annotations(claim):
    """Pod annotations carrying the connectivity data of a ready claim"""
    if isinstance(claim, VPCIPClaim):
        return {
            ANNOTATION_VPC_IP: claim.status.ip,
            ANNOTATION_VPC_NIC_MAC: claim.status.interfaceMACAddress or "",
            ANNOTATION_VPC_NIC_ID: claim.status.interfaceID or "",
            ANNOTATION_VPC_INSTANCE_ID: claim.status.instanceID or "",
            ANNOTATION_VPC_IP_RETAIN: "true",
        }
    # IPClaim status only carries the address so far, the rest is reserved for the SR-IOV plugin
    return {
        ANNOTATION_SRIOV_IP: claim.status.ip,
        ANNOTATION_SRIOV_VLAN: "",
        ANNOTATION_SRIOV_ROUTE: "",
        ANNOTATION_SRIOV_MASK: "",
        ANNOTATION_SRIOV_MBPS: "",
    }


def _requested_ip(alcorset, name):
    ips = alcorset.spec.ips
    index = index_of(name)
    if 0 <= index < len(ips):
        return ips[index]
    return None
