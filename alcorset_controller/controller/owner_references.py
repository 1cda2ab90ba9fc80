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

from k8s.models.common import OwnerReference

from ..constants import API_VERSION, ALCORSET_KIND


class OwnerReferences(object):

    def apply(self, k8s_model, alcorset):
        """Make alcorset the controller of k8s_model

        blockOwnerDeletion keeps the AlcorSet around in foreground deletion until the owned object is gone.
        """
        owner_reference = OwnerReference(apiVersion=API_VERSION,
                                         blockOwnerDeletion=True,
                                         controller=True,
                                         kind=ALCORSET_KIND,
                                         name=alcorset.metadata.name,
                                         uid=alcorset.metadata.uid)

        k8s_model.metadata.ownerReferences = [owner_reference]


def controlling_alcorset(k8s_model):
    """Name of the AlcorSet controlling k8s_model, or None if it has no such controller"""
    for ref in k8s_model.metadata.ownerReferences:
        if ref.controller and ref.kind == ALCORSET_KIND and ref.apiVersion == API_VERSION:
            return ref.name
    return None
