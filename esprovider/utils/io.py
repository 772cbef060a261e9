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


def ensure_dir(directory, mode=0o777):
    """
    Creates ``directory`` including all missing parents. Existing directories are left alone.
    """
    if directory:
        os.makedirs(directory, mode, exist_ok=True)


def normalize_path(path, cwd="."):
    """
    Expands ``~`` to the user's home directory and collapses redundant separators and ``..`` segments. A bare file name is
    resolved against ``cwd``.
    """
    normalized = os.path.normpath(os.path.expanduser(path))
    if os.path.dirname(normalized):
        return normalized
    return os.path.join(cwd, normalized)
