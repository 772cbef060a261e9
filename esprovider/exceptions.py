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


class ProviderError(Exception):
    """
    Base class for all provider exceptions
    """

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def full_message(self):
        msg = str(self.message)
        nesting = 0
        current_exc = self
        while hasattr(current_exc, "cause") and current_exc.cause:
            nesting += 1
            current_exc = current_exc.cause
            if hasattr(current_exc, "message"):
                msg += "\n%s%s" % ("\t" * nesting, current_exc.message)
            else:
                msg += "\n%s%s" % ("\t" * nesting, str(current_exc))
        return msg


class SystemSetupError(ProviderError):
    """
    Thrown when a user did something wrong, e.g. no Elasticsearch URL has been configured
    """


class ConfigError(ProviderError):
    pass


class InvalidSyntax(ProviderError):
    pass


class UnsupportedVersion(ProviderError):
    """
    Thrown when a client handle does not belong to a supported Elasticsearch major version.
    """


class TransientError(ProviderError):
    """
    Thrown when a remote call did not produce an HTTP response, e.g. because the connection was refused or timed out.
    """


class CheckError(ProviderError):
    """
    Base class for failed lifecycle checks.
    """


class StateLookupError(CheckError):
    """
    Thrown when an expected resource or its ID is missing from the applied state.
    """


class RemoteMismatchError(CheckError):
    """
    Thrown when Elasticsearch answered with an unexpected (non-2xx) status.
    """

    def __init__(self, message, status=None, body=None, cause=None):
        super().__init__(message, cause)
        self.status = status
        self.body = body


class ResourceStillExists(CheckError):
    def __init__(self, message, resource_id=None, cause=None):
        super().__init__(message, cause)
        self.resource_id = resource_id


class BaselineRestoreFailed(CheckError):
    """
    Thrown when the cluster could not be reverted to the basic license. Subsequent tests run against an unknown license
    state so this needs to be checked manually.
    """
