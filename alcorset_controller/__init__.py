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
import signal
import sys
import threading
import traceback

import pinject
from k8s import config as k8s_config
from prometheus_client import Info

from .config import Configuration
from .controller import ControllerBindings
from .logsetup import init_logging
from .resources import ResourceBindings
from .web import WebBindings


class MainBindings(pinject.BindingSpec):
    def __init__(self, config: Configuration):
        self._config = config

    def configure(self, bind):
        bind("config", to_instance=self._config)
        bind("health_check", to_class=HealthCheck)


class HealthCheck(object):
    def __init__(self, worker, scheduler, alcorset_watcher, owned_watchers):
        self._threads = [worker, scheduler, alcorset_watcher] + list(owned_watchers)

    def is_healthy(self):
        return all(thread.is_alive() for thread in self._threads)


class Main(object):
    def __init__(self, worker, scheduler, webapp, config, alcorset_watcher, owned_watchers):
        self._worker = worker
        self._scheduler = scheduler
        self._webapp = webapp
        self._config = config
        self._alcorset_watcher = alcorset_watcher
        self._owned_watchers = owned_watchers

    def run(self):
        self._worker.start()
        self._scheduler.start()
        self._alcorset_watcher.start()
        for watcher in self._owned_watchers:
            watcher.start()
        # Run web-app in main thread
        self._webapp.run("0.0.0.0", self._config.port)


def init_k8s_client(config: Configuration, log: logging.Logger):
    if config.client_cert:
        k8s_config.cert = (config.client_cert, config.client_key)

    if config.api_token:
        k8s_config.api_token = config.api_token
    else:
        # use default in-cluster config if api_token is not explicitly set
        try:
            # sets api_token_source and verify_ssl
            k8s_config.use_in_cluster_config()
        except IOError as e:
            if not config.client_cert:
                log.warning("No apiserver auth config was specified, and in-cluster config could not be set up: %s", str(e))

    # if api_cert or debug is explicitly set, override in-cluster config setting (if used)
    if config.api_cert:
        k8s_config.verify_ssl = config.api_cert
    elif config.debug:
        k8s_config.verify_ssl = not config.debug

    k8s_config.api_server = config.api_server
    k8s_config.debug = config.debug


def thread_dump_logger(log: logging.Logger):
    def _dump_threads(signum, frame):
        log.info("Received signal %s, dumping thread stacks", signum)
        thread_names = {t.ident: t.name for t in threading.enumerate()}
        for thread_ident, frame in list(sys._current_frames().items()):
            log.info("Thread ident=0x%x name=%s", thread_ident, thread_names.get(thread_ident, "unknown"))
            log.info("".join(traceback.format_stack(frame)))

    return _dump_threads


def expose_version(config: Configuration):
    i = Info("alcorset_controller_version", "The version of the running alcorset-controller.")
    i.info({"version": config.version})


def main():
    cfg = Configuration()
    init_logging(cfg)
    log = logging.getLogger(__name__)
    init_k8s_client(cfg, log)
    expose_version(cfg)
    signal.signal(signal.SIGUSR2, thread_dump_logger(log))

    try:
        log.info("alcorset-controller starting with configuration {!r}".format(cfg))
        binding_specs = [
            MainBindings(cfg),
            ControllerBindings(),
            ResourceBindings(),
            WebBindings(),
        ]
        obj_graph = pinject.new_object_graph(modules=None, binding_specs=binding_specs)
        obj_graph.provide(Main).run()
    except BaseException:
        log.exception("General failure! Inspect traceback and make the code better!")


if __name__ == "__main__":
    main()
