# Licensed to Elasticsearch B.V. under one or more contributor
# license agreements. See the NOTICE file distributed with
# this work for additional information regarding copyright
# ownership. Elasticsearch B.V. licenses this file to you under
# the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# 	http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

import os

from esprovider import PROGRAM_NAME


def provider_confdir():
    default_home = os.path.expanduser("~")
    return os.path.join(os.getenv("ESPROVIDER_HOME", default_home), f".{PROGRAM_NAME}")


def logs():
    """
    :return: The absolute path to the directory that contains the provider's log file.
    """
    return os.path.join(provider_confdir(), "logs")
