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

"""Web app that provides metrics and health of the controller"""

import logging

import pinject
from flask import Flask, Blueprint, current_app, make_response, request_started, request_finished, \
    got_request_exception
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST, Counter, Histogram

LOG = logging.getLogger(__name__)

web = Blueprint("web", __name__)

request_histogram = Histogram("web_request_latency", "Request latency in seconds", ["page"])
metrics_histogram = request_histogram.labels("metrics")
healthz_histogram = request_histogram.labels("healthz")


@web.route("/internal-backstage/prometheus")
@metrics_histogram.time()
def metrics():
    resp = make_response(generate_latest())
    resp.mimetype = CONTENT_TYPE_LATEST
    return resp


@web.route("/healthz")
@healthz_histogram.time()
def healthz():
    if current_app.health_check.is_healthy():
        return "OK", 200
    else:
        return "I don't feel so good...", 500


def _connect_signals():
    rs_counter = Counter("web_request_started", "HTTP requests received")
    request_started.connect(lambda s, *a, **e: rs_counter.inc(), weak=False)
    rf_counter = Counter("web_request_finished", "HTTP requests successfully handled")
    request_finished.connect(lambda s, *a, **e: rf_counter.inc(), weak=False)
    re_counter = Counter("web_request_exception", "Failed HTTP requests")
    got_request_exception.connect(lambda s, *a, **e: re_counter.inc(), weak=False)


def create_webapp(health_check):
    app = Flask(__name__)
    app.health_check = health_check
    app.register_blueprint(web)
    _connect_signals()
    return app


class WebBindings(pinject.BindingSpec):
    def provide_webapp(self, health_check):
        return create_webapp(health_check)
