# Copyright (c) 2010-2012 OpenStack, LLC.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or
# implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from urllib.parse import urlparse


class ClientException(Exception):
    """
    Base error of the library. Errors raised for an HTTP reply carry the
    request URL parts, the reply status, reason, body and headers.
    """

    def __init__(self, msg, http_scheme='', http_host='', http_port='',
                 http_path='', http_query='', http_status=None, http_reason='',
                 http_response_content='', http_response_headers=None):
        super(ClientException, self).__init__(msg)
        self.msg = msg
        self.http_scheme = http_scheme
        self.http_host = http_host
        self.http_port = http_port
        self.http_path = http_path
        self.http_query = http_query
        self.http_status = http_status
        self.http_reason = http_reason
        self.http_response_content = http_response_content
        self.http_response_headers = http_response_headers or {}
        self.transaction_id = None
        for key, value in self.http_response_headers.items():
            if key.lower() == 'x-trans-id':
                self.transaction_id = value

    @classmethod
    def from_response(cls, resp, msg, body=None):
        """
        :param resp: an http response with ``status``, ``reason``, ``url``
                     and ``getheaders()``
        """
        url = urlparse(resp.url or '')
        return cls(msg, http_scheme=url.scheme, http_host=url.hostname,
                   http_port=url.port, http_path=url.path,
                   http_query=url.query, http_status=resp.status,
                   http_reason=resp.reason, http_response_content=body,
                   http_response_headers=dict(resp.getheaders()))

    def _url(self):
        parts = [
            self.http_scheme and '%s://' % self.http_scheme,
            self.http_host,
            self.http_port and ':%s' % self.http_port,
            self.http_path,
            self.http_query and '?%s' % self.http_query,
        ]
        return ''.join(part for part in parts if part)

    def __str__(self):
        details = [part for part in (self._url(), self.http_status and
                                     str(self.http_status), self.http_reason)
                   if part]
        text = self.msg
        if details:
            text = '%s: %s' % (text, ' '.join(details))
        content = self.http_response_content
        if content:
            if len(content) > 60:
                text += ' [first 60 chars of response] %s' % content[:60]
            else:
                text += ' %s' % content
        if self.transaction_id:
            text += ' (txn: %s)' % self.transaction_id
        return text


class AuthenticationError(ClientException):
    """Credentials or token were rejected (HTTP 401)."""


class NotAuthenticated(AuthenticationError):
    """No storage URL / auth token pair is available for a request."""


class ValidationError(ClientException):
    """Caller input was rejected before any request was made."""


class NotFoundError(ClientException):
    """The referenced resource does not exist (HTTP 404)."""


class NoSuchContainer(NotFoundError):
    pass


class NoSuchObject(NotFoundError):
    pass


class InvalidResponseError(ClientException):
    """Unexpected status code or malformed response from the service."""


class ContainerNotEmpty(InvalidResponseError):
    pass


class MisMatchedChecksum(InvalidResponseError):
    pass
