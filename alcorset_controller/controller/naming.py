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

import re

from ..constants import POD_NAME_INDEX_SEPARATOR

INDEX_SUFFIX = re.compile(r"{}([0-9]+)$".format(re.escape(POD_NAME_INDEX_SEPARATOR)))
# Returned by index_of for names the controller did not create
NO_INDEX = -1


def pod_name(alcorset, index):
    return "{}{}{:d}".format(alcorset.metadata.name, POD_NAME_INDEX_SEPARATOR, index)


def pod_hostname(alcorset, index):
    prefix = alcorset.spec.hostnamePrefix or alcorset.metadata.name
    return "{}{}{:d}".format(prefix, POD_NAME_INDEX_SEPARATOR, index)


def index_of(name):
    """Parse the index from the trailing -<digits> of a pod name, NO_INDEX if there is none"""
    m = INDEX_SUFFIX.search(name)
    if not m:
        return NO_INDEX
    return int(m.group(1))
