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
import copy
import itertools
import re

import mock
import pytest
from k8s import config
from k8s.client import ClientError, NotFound
from requests import Request, Response

from alcorset_controller.constants import API_VERSION, ALCORSET_KIND

NAMESPACE = "ns"
TIMESTAMP = "2020-01-01T00:00:00Z"
URL_PATTERN = re.compile(r"^/(?:api/v1|apis/alcor\.io/v1alpha1)/namespaces/([^/]+)/([^/]+)/?([^/]*)(/status)?$")


# k8s client library mocks


@pytest.fixture(autouse=True)
def k8s_config(monkeypatch):
    """Configure k8s for test-runs"""
    monkeypatch.setattr(config, "api_server", "https://10.0.0.1")
    monkeypatch.setattr(config, "api_token", "password")
    monkeypatch.setattr(config, "verify_ssl", False)


@pytest.fixture()
def put():
    with mock.patch('k8s.client.Client.put') as mockk:
        yield mockk


@pytest.fixture
def cluster():
    """An in-memory API server, serving AlcorSets, IP claims and Pods through the k8s client"""
    fake = FakeCluster()
    with mock.patch('k8s.client.Client.get') as get_mock, \
            mock.patch('k8s.client.Client.post') as post_mock, \
            mock.patch('k8s.client.Client.put') as put_mock, \
            mock.patch('k8s.client.Client.delete') as delete_mock:
        get_mock.side_effect = fake.get
        post_mock.side_effect = fake.post
        put_mock.side_effect = fake.put
        delete_mock.side_effect = fake.delete
        yield fake


@pytest.fixture
def namespace_file():
    """Make the namespace file of the service account readable, with namespace-from-file in it"""
    real_open = open

    def _mock_namespace_file_open(name, *args, **kwargs):
        if name == "/var/run/secrets/kubernetes.io/serviceaccount/namespace":
            return mock.mock_open(read_data="namespace-from-file")()
        else:
            return real_open(name, *args, **kwargs)

    with mock.patch("builtins.open") as mock_open:
        mock_open.side_effect = _mock_namespace_file_open
        yield mock_open


@pytest.helpers.register
def alcorset_dict(name="web", namespace=NAMESPACE, finalizers=None, status=None, **spec):
    spec.setdefault("replicas", 2)
    spec.setdefault("ippool", "pool")
    spec.setdefault("template", {
        "metadata": {"labels": {"tier": "frontend"}, "annotations": {"team": "alcor"}},
        "spec": {"containers": [{"name": "main", "image": "nginx"}]},
    })
    d = {
        "apiVersion": API_VERSION,
        "kind": ALCORSET_KIND,
        "metadata": {"name": name, "namespace": namespace},
        "spec": spec,
    }
    if finalizers is not None:
        d["metadata"]["finalizers"] = finalizers
    if status is not None:
        d["status"] = status
    return d


def _response(data, status_code=200, method="GET", url=""):
    response = mock.MagicMock(spec=Response)
    response.status_code = status_code
    response.json.return_value = data
    request = mock.MagicMock(spec=Request)
    request.method = method
    request.url = url
    response.request = request
    return response


def _conflict(method, url, reason):
    return ClientError("Conflict", response=_response({"reason": reason, "message": "{} {}".format(method, url)},
                                                      status_code=409, method=method, url=url))


def _matches(obj, selector):
    if not selector:
        return True
    labels = obj["metadata"].get("labels") or {}
    for term in selector.split(","):
        key, value = term.split("=", 1)
        if labels.get(key) != value:
            return False
    return True


class FakeCluster(object):
    """Objects are kept as plain dicts, keyed by (plural, namespace, name)

    Writes behave like the API server where the controller depends on it: resourceVersion is checked on PUT, status
    is only written through the status subresource, and objects with finalizers are only marked for deletion.
    """

    def __init__(self):
        self.objects = {}
        self.mutations = []
        self.graceful_pod_deletion = False
        self.conflicts_to_raise = 0
        self._versions = itertools.count(1)
        self._uids = itertools.count(1)

    # API

    def get(self, url, timeout=None, **kwargs):
        plural, namespace, name, _ = self._parse(url)
        if name:
            obj = self.objects.get((plural, namespace, name))
            if obj is None:
                raise NotFound()
            return _response(copy.deepcopy(obj), url=url)
        selector = kwargs.get("params", {}).get("labelSelector")
        items = [copy.deepcopy(obj) for (p, ns, _), obj in sorted(self.objects.items())
                 if p == plural and ns == namespace and _matches(obj, selector)]
        return _response({"items": items}, url=url)

    def post(self, url, body, timeout=None):
        plural, namespace, _, _ = self._parse(url)
        obj = copy.deepcopy(body)
        name = obj["metadata"]["name"]
        key = (plural, namespace, name)
        if key in self.objects:
            raise _conflict("POST", url, "AlreadyExists")
        self.mutations.append(("POST", url + name))
        metadata = obj["metadata"]
        metadata["namespace"] = namespace
        metadata["uid"] = "uid-{}".format(next(self._uids))
        metadata["creationTimestamp"] = TIMESTAMP
        self._store(key, obj)
        return _response(copy.deepcopy(obj), status_code=201, method="POST", url=url)

    def put(self, url, body, timeout=None):
        plural, namespace, name, subresource = self._parse(url)
        key = (plural, namespace, name)
        current = self.objects.get(key)
        if current is None:
            raise NotFound()
        sent_version = (body.get("metadata") or {}).get("resourceVersion")
        if self.conflicts_to_raise > 0 or (sent_version and sent_version != current["metadata"]["resourceVersion"]):
            self.conflicts_to_raise = max(0, self.conflicts_to_raise - 1)
            raise _conflict("PUT", url, "Conflict")
        self.mutations.append(("PUT", url))
        updated = copy.deepcopy(current)
        if subresource:
            updated["status"] = copy.deepcopy(body.get("status"))
        else:
            for field, value in body.items():
                if field not in ("status", "metadata"):
                    updated[field] = copy.deepcopy(value)
            metadata = updated["metadata"]
            for field in ("labels", "annotations", "finalizers", "ownerReferences"):
                metadata[field] = copy.deepcopy(body["metadata"].get(field))
        self._store(key, updated)
        if updated["metadata"].get("deletionTimestamp") and not updated["metadata"].get("finalizers"):
            del self.objects[key]
        return _response(copy.deepcopy(updated), method="PUT", url=url)

    def delete(self, url, timeout=None, **kwargs):
        plural, namespace, name, _ = self._parse(url)
        key = (plural, namespace, name)
        obj = self.objects.get(key)
        if obj is None:
            raise NotFound()
        self.mutations.append(("DELETE", url))
        if obj["metadata"].get("finalizers") or (plural == "pods" and self.graceful_pod_deletion):
            if not obj["metadata"].get("deletionTimestamp"):
                obj["metadata"]["deletionTimestamp"] = TIMESTAMP
                self._store(key, obj)
        else:
            del self.objects[key]
        return _response({}, method="DELETE", url=url)

    # Test helpers

    def add_alcorset(self, name="web", namespace=NAMESPACE, **kwargs):
        obj = alcorset_dict(name, namespace, **kwargs)
        obj["metadata"]["uid"] = "uid-{}".format(next(self._uids))
        self._store(("alcorsets", namespace, name), obj)
        return obj

    def alcorset(self, name="web", namespace=NAMESPACE):
        return self.objects.get(("alcorsets", namespace, name))

    def update_alcorset_spec(self, name="web", namespace=NAMESPACE, **spec):
        obj = self.objects[("alcorsets", namespace, name)]
        obj["spec"].update(spec)
        self._store(("alcorsets", namespace, name), obj)

    def mark_alcorset_deleted(self, name="web", namespace=NAMESPACE):
        obj = self.objects[("alcorsets", namespace, name)]
        obj["metadata"]["deletionTimestamp"] = TIMESTAMP
        self._store(("alcorsets", namespace, name), obj)

    def names(self, plural, namespace=NAMESPACE):
        return sorted(name for (p, ns, name) in self.objects if p == plural and ns == namespace)

    def get_object(self, plural, name, namespace=NAMESPACE):
        return self.objects.get((plural, namespace, name))

    def assign_ips(self, plural="ipclaims", namespace=NAMESPACE, first=5):
        """Give every claim without an IP the next free address in 10.0.0.0/24, like an IPAM controller would"""
        taken = {obj["status"]["ip"] for (p, _, _), obj in self.objects.items()
                 if p == plural and (obj.get("status") or {}).get("ip")}
        addresses = ("10.0.0.{}".format(i) for i in itertools.count(first) if "10.0.0.{}".format(i) not in taken)
        for name in self.names(plural, namespace):
            obj = self.objects[(plural, namespace, name)]
            if (obj.get("status") or {}).get("ip"):
                continue
            status = {"ip": next(addresses)}
            if plural == "vpcipclaims":
                status.update({
                    "interfaceMACAddress": "02:00:00:00:00:{:02x}".format(int(status["ip"].rsplit(".", 1)[1])),
                    "interfaceID": "eni-{}".format(name),
                    "instanceID": "i-{}".format(name),
                })
            obj["status"] = status
            self._store((plural, namespace, name), obj)

    def make_pods_ready(self, namespace=NAMESPACE):
        for name in self.names("pods", namespace):
            obj = self.objects[("pods", namespace, name)]
            if obj["metadata"].get("deletionTimestamp"):
                continue
            obj["status"] = {"phase": "Running", "conditions": [{"type": "Ready", "status": "True"}],
                             "podIP": obj["metadata"].get("annotations", {}).get("sriov.alcor.io/ip")}
            self._store(("pods", namespace, name), obj)

    def finish_termination(self, namespace=NAMESPACE):
        for name in self.names("pods", namespace):
            if self.objects[("pods", namespace, name)]["metadata"].get("deletionTimestamp"):
                del self.objects[("pods", namespace, name)]

    def _store(self, key, obj):
        obj["metadata"]["resourceVersion"] = str(next(self._versions))
        self.objects[key] = obj

    @staticmethod
    def _parse(url):
        m = URL_PATTERN.match(url)
        if not m:
            raise AssertionError("Unexpected url {}".format(url))
        namespace, plural, name, subresource = m.groups()
        return plural, namespace, name, subresource
