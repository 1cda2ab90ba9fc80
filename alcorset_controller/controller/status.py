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

"""Writes to AlcorSet status

Every write re-reads the AlcorSet, changes the fresh copy and PUTs it with the resourceVersion it was read at.
A concurrent writer makes the PUT fail with 409, which is retried from a new read.
Nothing here changes the AlcorSet instance passed in by the caller.
"""

import logging

from ..constants import STATUS_INITIALIZED
from ..resources.types import AlcorSet
from ..retry import retry_on_upsert_conflict

LOG = logging.getLogger(__name__)


@retry_on_upsert_conflict
def _update_status(alcorset, change):
    fresh = AlcorSet.get(alcorset.metadata.name, alcorset.metadata.namespace)
    if not change(fresh.status):
        return False
    LOG.debug("Updating status of %s/%s to %r at resourceVersion=%s", fresh.metadata.namespace, fresh.metadata.name,
              fresh.status, fresh.metadata.resourceVersion)
    fresh.save_status()
    return True


def is_initialized(alcorset):
    return alcorset.status.claimedIPs is not None


def init_status(alcorset):
    def change(status):
        if status.claimedIPs is not None:
            return False
        status.claimedIPs = []
        status.status = STATUS_INITIALIZED
        return True

    return _update_status(alcorset, change)


def add_claimed_ip(alcorset, ip):
    def change(status):
        claimed = status.claimedIPs or []
        if ip in claimed:
            return False
        status.claimedIPs = claimed + [ip]
        return True

    return _update_status(alcorset, change)


def remove_claimed_ips(alcorset, ips):
    """Drop ips from claimedIPs, only writing if the set actually shrank"""
    def change(status):
        claimed = status.claimedIPs or []
        left = [ip for ip in claimed if ip not in ips]
        if len(left) == len(claimed):
            return False
        status.claimedIPs = left
        return True

    return _update_status(alcorset, change)


def adjust_count(alcorset, delta, text=None):
    def change(status):
        status.count = max(0, status.count + delta)
        if text is not None:
            status.status = text
        return True

    return _update_status(alcorset, change)


def set_status_text(alcorset, text):
    def change(status):
        if status.status == text:
            return False
        status.status = text
        return True

    return _update_status(alcorset, change)
