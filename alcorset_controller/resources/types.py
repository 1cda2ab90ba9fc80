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


from k8s.base import Model
from k8s.fields import Field, ListField
from k8s.models.common import ObjectMeta

from ..constants import API_VERSION, ALCORSET_KIND


class TemplateMetadata(Model):
    labels = Field(dict)
    annotations = Field(dict)


class ReplicaTemplate(Model):
    """Template replicas are instantiated from

    The pod spec is kept as a plain mapping so whatever the user writes is passed on to the API server unchanged.
    """
    metadata = Field(TemplateMetadata)
    spec = Field(dict)


class AlcorSetSpec(Model):
    replicas = Field(int, 0)
    ips = ListField(str)
    ippool = Field(str)
    onVpc = Field(bool, False)  # NOQA
    mbps = Field(int, 0)
    hostnamePrefix = Field(str)  # NOQA
    sequence = Field(bool, False)
    template = Field(ReplicaTemplate)


class AlcorSetStatus(Model):
    count = Field(int, 0)
    # None until the controller has initialized it, which is how an uninitialized status is detected
    claimedIPs = Field(list)  # NOQA
    status = Field(str)


class AlcorSet(Model):
    class Meta:
        list_url = "/apis/alcor.io/v1alpha1/alcorsets"
        url_template = "/apis/alcor.io/v1alpha1/namespaces/{namespace}/alcorsets/{name}"
        watch_list_url = "/apis/alcor.io/v1alpha1/watch/alcorsets"
        watch_list_url_template = "/apis/alcor.io/v1alpha1/watch/namespaces/{namespace}/alcorsets"

    apiVersion = Field(str, API_VERSION)  # NOQA
    kind = Field(str, ALCORSET_KIND)

    metadata = Field(ObjectMeta)
    spec = Field(AlcorSetSpec)
    status = Field(AlcorSetStatus)

    def save_status(self):
        """Write status through the status subresource

        The main resource ignores status on update, and the status subresource ignores everything else.
        The resourceVersion is sent along, so a stale write fails with 409 Conflict.
        """
        url = self._build_url(name=self.metadata.name, namespace=self.metadata.namespace)
        self._client.put(url + "/status", self.as_dict())


class IPClaimSpec(Model):
    ippool = Field(str)
    mbps = Field(int, 0)
    # Requested address, only set when the AlcorSet lists explicit IPs
    ip = Field(str)


class IPClaimStatus(Model):
    ip = Field(str)


class IPClaim(Model):
    class Meta:
        list_url = "/apis/alcor.io/v1alpha1/ipclaims"
        url_template = "/apis/alcor.io/v1alpha1/namespaces/{namespace}/ipclaims/{name}"
        watch_list_url = "/apis/alcor.io/v1alpha1/watch/ipclaims"
        watch_list_url_template = "/apis/alcor.io/v1alpha1/watch/namespaces/{namespace}/ipclaims"

    apiVersion = Field(str, API_VERSION)  # NOQA
    kind = Field(str, "IPClaim")

    metadata = Field(ObjectMeta)
    spec = Field(IPClaimSpec)
    status = Field(IPClaimStatus)


class VPCIPClaimSpec(Model):
    pod = Field(str)


class VPCIPClaimStatus(Model):
    ip = Field(str)
    interfaceMACAddress = Field(str)  # NOQA
    interfaceID = Field(str)  # NOQA
    instanceID = Field(str)  # NOQA


class VPCIPClaim(Model):
    class Meta:
        list_url = "/apis/alcor.io/v1alpha1/vpcipclaims"
        url_template = "/apis/alcor.io/v1alpha1/namespaces/{namespace}/vpcipclaims/{name}"
        watch_list_url = "/apis/alcor.io/v1alpha1/watch/vpcipclaims"
        watch_list_url_template = "/apis/alcor.io/v1alpha1/watch/namespaces/{namespace}/vpcipclaims"

    apiVersion = Field(str, API_VERSION)  # NOQA
    kind = Field(str, "VPCIPClaim")

    metadata = Field(ObjectMeta)
    spec = Field(VPCIPClaimSpec)
    status = Field(VPCIPClaimStatus)


class PodCondition(Model):
    type = Field(str)
    status = Field(str)


class ReplicaPodStatus(Model):
    phase = Field(str)
    conditions = ListField(PodCondition)
    podIP = Field(str)  # NOQA


class ReplicaPod(Model):
    """A Pod as far as the controller cares about it"""
    class Meta:
        list_url = "/api/v1/pods"
        url_template = "/api/v1/namespaces/{namespace}/pods/{name}"
        watch_list_url = "/api/v1/watch/pods"
        watch_list_url_template = "/api/v1/watch/namespaces/{namespace}/pods"

    apiVersion = Field(str, "v1")  # NOQA
    kind = Field(str, "Pod")

    metadata = Field(ObjectMeta)
    spec = Field(dict)
    status = Field(ReplicaPodStatus)

    def is_running_and_ready(self):
        if self.status.phase != "Running":
            return False
        return any(c.type == "Ready" and c.status == "True" for c in self.status.conditions)
