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
import mock
import pytest

from alcorset_controller import HealthCheck
from alcorset_controller.web import WebBindings


@pytest.fixture()
def health_check():
    yield mock.create_autospec(HealthCheck, spec_set=True, instance=True)


@pytest.fixture
def app(health_check):
    bindings = WebBindings()
    yield bindings.provide_webapp(health_check)


@pytest.fixture()
def client(app):
    return app.test_client()


class TestEndpoints:
    def test_metrics(self, client):
        # only the web module is under test here, so only the metrics it defines are on the response
        expected_metrics = [
            b"web_request_started_total",
            b"web_request_finished_total",
            b"web_request_exception_total",
        ]

        resp = client.get("/internal-backstage/prometheus")

        assert resp.status_code == 200
        for metric_name in expected_metrics:
            assert metric_name in resp.data

    @pytest.mark.parametrize(
        "is_healthy, status_code",
        (
            (True, 200),
            (False, 500),
        ),
    )
    def test_healthcheck(self, client, health_check, is_healthy, status_code):
        health_check.is_healthy.return_value = is_healthy

        resp = client.get("/healthz")
        assert resp.status_code == status_code

    def test_unknown_page(self, client):
        resp = client.get("/")
        assert resp.status_code == 404
