# coding: utf-8

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

from k8s.base import WatchEvent
from k8s.watcher import Watcher

from .types import AlcorSet
from ..base_thread import DaemonThread
from ..controller.owner_references import controlling_alcorset
from ..controller.reconcile_queue import ReconcileRequest

LOG = logging.getLogger(__name__)


class ResourceWatcher(DaemonThread):
    """Turns watch events for model into reconcile requests"""

    def __init__(self, model, reconcile_queue, config):
        super(ResourceWatcher, self).__init__(name_suffix=model.__name__)
        self._model = model
        self._reconcile_queue = reconcile_queue
        self._watcher = Watcher(model)
        self.namespace = config.namespace
        self.watch_all_namespaces = config.watch_all_namespaces

    def __call__(self):
        while True:
            if self.watch_all_namespaces:
                self._watch(namespace=None)
            else:
                self._watch(namespace=self.namespace)

    def _watch(self, namespace):
        try:
            for event in self._watcher.watch(namespace=namespace):
                self._handle_watch_event(event)
        except Exception:
            LOG.exception("Error while watching for changes on %ss", self._model.__name__)

    def _handle_watch_event(self, event):
        if event.type not in (WatchEvent.ADDED, WatchEvent.MODIFIED, WatchEvent.DELETED):
            raise ValueError("Unknown WatchEvent type {}".format(event.type))
        request = self._request_for(event.object)
        if request is None:
            return
        if self._reconcile_queue.put(request):
            LOG.debug("Queued reconcile of %s/%s after %s %s %s/%s", request.namespace, request.name, event.type,
                      self._model.__name__, event.object.metadata.namespace, event.object.metadata.name)

    def _request_for(self, obj):
        raise NotImplementedError("Subclass must implement this method")


class AlcorSetWatcher(ResourceWatcher):
    def __init__(self, reconcile_queue, config):
        super(AlcorSetWatcher, self).__init__(AlcorSet, reconcile_queue, config)

    def _request_for(self, alcorset):
        return ReconcileRequest(alcorset.metadata.namespace, alcorset.metadata.name)


class OwnedResourceWatcher(ResourceWatcher):
    """Watches objects created on behalf of AlcorSets, reconciling the AlcorSet controlling them

    Objects without an AlcorSet as controller are ignored.
    """

    def _request_for(self, obj):
        owner = controlling_alcorset(obj)
        if owner is None:
            return None
        return ReconcileRequest(obj.metadata.namespace, owner)
