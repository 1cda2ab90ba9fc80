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


import pinject

from .types import IPClaim, ReplicaPod, VPCIPClaim
from .watcher import AlcorSetWatcher, OwnedResourceWatcher


class ResourceBindings(pinject.BindingSpec):
    def configure(self, bind, require):
        require("config")
        require("reconcile_queue")

        bind("alcorset_watcher", to_class=AlcorSetWatcher)

    def provide_owned_watchers(self, reconcile_queue, config):
        return [OwnedResourceWatcher(model, reconcile_queue, config) for model in (ReplicaPod, IPClaim, VPCIPClaim)]
