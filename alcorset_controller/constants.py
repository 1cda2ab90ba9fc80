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

"""Label keys, finalizer names and annotation keys shared by the controller"""

API_GROUP = "alcor.io"
API_VERSION = "{}/v1alpha1".format(API_GROUP)
ALCORSET_KIND = "AlcorSet"

# Set on every Pod, IPClaim and VPCIPClaim owned by an AlcorSet, value is the AlcorSet name
APP_LABEL = "app.alcorset.alcor.io"

FINALIZER_IPCLAIM = "ipclaim.finalizer.alcorset.alcor.io"
# VPCIPClaims carry their own finalizer for releasing the address through the VPC API,
# this one only guards the AlcorSet
FINALIZER_VPCIPCLAIM = "vpcipclaim.finalizer.alcorset.alcor.io"
ALL_FINALIZERS = (FINALIZER_IPCLAIM, FINALIZER_VPCIPCLAIM)

POD_NAME_INDEX_SEPARATOR = "-"

ANNOTATION_VPC_IP = "vpc.alcor.io/ip"
ANNOTATION_VPC_NIC_MAC = "vpc.alcor.io/nic-mac"
ANNOTATION_VPC_NIC_ID = "vpc.alcor.io/nic-id"
ANNOTATION_VPC_INSTANCE_ID = "vpc.alcor.io/instance-id"
ANNOTATION_VPC_IP_RETAIN = "vpc.alcor.io/ip-retain"

ANNOTATION_SRIOV_IP = "sriov.alcor.io/ip"
ANNOTATION_SRIOV_VLAN = "sriov.alcor.io/vlan"
ANNOTATION_SRIOV_ROUTE = "sriov.alcor.io/route"
ANNOTATION_SRIOV_MASK = "sriov.alcor.io/mask"
ANNOTATION_SRIOV_MBPS = "sriov.alcor.io/mbps"

STATUS_INITIALIZED = "Initialized"
STATUS_WAIT_IPCLAIM_READY = "Wait IPClaim ready"
STATUS_FAILED_TO_CLAIM_IP = "Failed to claim IP"
STATUS_SCALING_UP = "Scaling up"
STATUS_SCALING_DOWN = "Scaling down"
STATUS_READY = "Ready"
STATUS_TERMINATING = "Terminating"
STATUS_INVALID_SPEC = "Invalid spec"
