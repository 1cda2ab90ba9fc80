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
import os
from argparse import Namespace

import configargparse

DEFAULT_CONFIG_FILE = "/var/run/config/alcorset/controller_config.yaml"

WATCH_ALL_NAMESPACES_HELP = """
Make the controller watch AlcorSets, Pods and IP claims in all namespaces. The default behavior is to only watch the
namespace the controller runs in."""

BACKOFF_LONG_HELP = """
When a reconcile fails, the AlcorSet is retried after a delay that starts at the base, doubles on each consecutive
failure of the same AlcorSet, and never exceeds the maximum. A successful reconcile resets the delay.
"""

EPILOG = """
Args that start with '--' (eg. --log-format) can also be set in a config file
({} or specified via -c). The config file uses YAML syntax and must represent
a YAML 'mapping' (for details, see http://learn.getgrav.org/advanced/yaml).

If an arg is specified in more than one place, then commandline values
override config file values which override defaults.
""".format(
    DEFAULT_CONFIG_FILE
)


class Configuration(Namespace):
    VALID_LOG_FORMAT = ("plain", "json")

    def __init__(self, args=None, **kwargs):
        super(Configuration, self).__init__(**kwargs)
        self._logger = logging.getLogger(__name__)
        self.version = ""
        self._parse_args(args)
        self._resolve_env()
        self.namespace = self._resolve_namespace()

    def _parse_args(self, args):
        parser = configargparse.ArgParser(
            add_config_file_help=False,
            add_env_var_help=False,
            config_file_parser_class=configargparse.YAMLConfigFileParser,
            default_config_files=[DEFAULT_CONFIG_FILE],
            args_for_setting_config_path=["-c", "--config-file"],
            ignore_unknown_config_file_keys=True,
            description="%(prog)s keeps the Pods and IP claims of AlcorSets in line with their spec",
            epilog=EPILOG,
            formatter_class=configargparse.ArgumentDefaultsHelpFormatter,
        )
        parser.add_argument(
            "--log-format", help="Set logformat (default: %(default)s)", choices=self.VALID_LOG_FORMAT, default="plain"
        )
        parser.add_argument(
            "--debug",
            help="Enable a number of debugging options (including disable SSL-verification)",
            action="store_true",
        )
        parser.add_argument(
            "--port", help="Port to use for the web-interface (default: %(default)s)", type=int, default=5000
        )
        parser.add_argument("--watch-all-namespaces", help=WATCH_ALL_NAMESPACES_HELP, action="store_true")
        parser.add_argument(
            "--requeue-delay",
            help="Seconds to wait before reconciling an AlcorSet that asked to be looked at again (default: %(default)s)",
            type=float,
            default=1,
        )
        backoff_parser = parser.add_argument_group("Error backoff", BACKOFF_LONG_HELP)
        backoff_parser.add_argument(
            "--error-backoff-base",
            help="Seconds to wait after the first failed reconcile (default: %(default)s)",
            type=float,
            default=1,
        )
        backoff_parser.add_argument(
            "--error-backoff-max",
            help="Longest wait between retries of a failing reconcile (default: %(default)s)",
            type=float,
            default=300,
        )
        api_parser = parser.add_argument_group("API server")
        api_parser.add_argument(
            "--api-server",
            help="Address of the api-server to use (IP or name)",
            default="https://kubernetes.default.svc.cluster.local",
        )
        api_parser.add_argument("--api-token", help="Token to use (default: lookup from service account)", default=None)
        api_parser.add_argument(
            "--api-cert", help="API server certificate (default: lookup from service account)", default=None
        )
        client_cert_parser = parser.add_argument_group("Client certificate")
        client_cert_parser.add_argument("--client-cert", help="Client certificate to use", default=None)
        client_cert_parser.add_argument("--client-key", help="Client certificate key to use", default=None)

        parser.parse_args(args, namespace=self)
        if self.error_backoff_max < self.error_backoff_base:
            raise InvalidConfigurationException(
                "--error-backoff-max ({}) must not be less than --error-backoff-base ({})".format(
                    self.error_backoff_max, self.error_backoff_base
                )
            )

    def _resolve_env(self):
        version = os.getenv("VERSION")
        if version:
            self.version = version

    @staticmethod
    def _resolve_namespace():
        namespace_file_path = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"
        namespace_env_variable = "NAMESPACE"
        try:
            with open(namespace_file_path, "r") as fobj:
                namespace = fobj.read().strip()
                if namespace:
                    return namespace
        except IOError:
            namespace = os.getenv(namespace_env_variable)
            if namespace:
                return namespace
        raise InvalidConfigurationException(
            "Could not determine namespace: could not read {path}, and ${env_var} was not set".format(
                path=namespace_file_path, env_var=namespace_env_variable
            )
        )

    def __repr__(self):
        return "Configuration({})".format(
            ", ".join(
                "{}={}".format(key, self.__dict__[key])
                for key in vars(self)
                if not key.startswith("_") and not key.isupper() and "token" not in key
            )
        )


class InvalidConfigurationException(Exception):
    pass
