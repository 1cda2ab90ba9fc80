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
import os

from setuptools import setup, find_packages


def read(filename):
    with open(os.path.join(os.path.dirname(__file__), filename)) as f:
        return f.read()


GENERIC_REQ = [
    "ConfigArgParse >= 1.5",
    "prometheus_client >= 0.7.1",
    "PyYAML >= 6.0",
    "pinject == 0.14.1",
    "k8s == 0.24.1",
    "backoff >= 1.8.0",
]

WEB_REQ = [
    "Flask >= 3.0.0",
    "werkzeug >= 3.0.1",
    "blinker >= 1.7.0",
]

DEPLOY_REQ = [
    "urllib3 >= 1.26.17",
    "requests >= 2.31.0",
]

FLAKE8_REQ = [
    "flake8-print == 3.1.4",
    "flake8-comprehensions == 1.4.1",
    "pep8-naming == 0.11.1",
    "flake8 == 3.9.0",
]

TESTS_REQ = [
    "pytest-xdist == 3.3.1",
    "pytest-cov == 4.1.0",
    "pytest-helpers-namespace == 2021.12.29",
    "pytest == 7.4.2",
    "callee == 0.3.1",
    "mock >= 4.0.3",
]

DEV_TOOLS = [
    "tox==3.14.5",
    "black ~= 22.0",
]


if __name__ == "__main__":
    setup(
        name="alcorset-controller",
        author="Alcor Team",
        version="1.0",
        packages=find_packages(exclude=("tests", "tests.*")),
        zip_safe=True,
        include_package_data=True,
        # Requirements
        install_requires=GENERIC_REQ + WEB_REQ + DEPLOY_REQ,
        extras_require={
            "dev": TESTS_REQ + FLAKE8_REQ + DEV_TOOLS,
            "ci": DEV_TOOLS,
        },
        # Metadata
        description="Keep the Pods and IP claims of AlcorSets in line with their spec",
        long_description=read("README.md"),
        long_description_content_type="text/markdown",
        # Entrypoints
        entry_points={
            "console_scripts": [
                "alcorset-controller = alcorset_controller:main",
            ]
        },
    )
