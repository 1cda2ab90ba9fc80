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
import threading

_LOG_EXTRAS = threading.local()
EXTRA_KEYS = ("namespace", "name")


class ExtraFilter(logging.Filter):
    """Attach the AlcorSet currently handled by this thread to every record"""

    def filter(self, record):
        extras = {}
        for key in EXTRA_KEYS:
            extras[key] = getattr(_LOG_EXTRAS, key, "")
        record.extras = extras
        record.alcorset = "{}/{}".format(extras["namespace"], extras["name"]) if extras["name"] else "-"
        return 1


def set_extras(namespace, name):
    if namespace is None or name is None:
        raise TypeError("Both namespace and name must be specified")
    _LOG_EXTRAS.namespace = namespace
    _LOG_EXTRAS.name = name


def clear_extras():
    for key in EXTRA_KEYS:
        if hasattr(_LOG_EXTRAS, key):
            delattr(_LOG_EXTRAS, key)
