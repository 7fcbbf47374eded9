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

"""
HTTP transport shared by every ucloud storage request, and the request log.
"""
from collections.abc import Mapping
import logging
from urllib.parse import urlparse

import requests

from ucloudstorage import consts
from ucloudstorage.exceptions import ClientException
from ucloudstorage.utils import get_body

logger = logging.getLogger("ucloudstorage")
logger.addHandler(logging.NullHandler())

#: Values of the headers in LOGGER_SENSITIVE_HEADERS are cut down to a short
#: prefix before they are logged. Set ``redact_sensitive_headers`` to False
#: to log them in full.
logger_settings = {
    'redact_sensitive_headers': True,
    'reveal_sensitive_prefix': 16
}
#: Lower case names of headers carrying secrets.
LOGGER_SENSITIVE_HEADERS = frozenset([
    'x-auth-token', 'x-auth-key', 'x-storage-token', 'x-storage-pass',
    'set-cookie'
])


def set_debug(flag):
    """Log every request and response at DEBUG level when flag is true."""
    logger.setLevel(logging.DEBUG if flag else logging.NOTSET)


def _text(value):
    if isinstance(value, bytes):
        return value.decode('utf-8', 'replace')
    return str(value)


def redact(name, value):
    """
    Return ``value`` as it may be logged for header ``name``. Sensitive
    values keep at most ``reveal_sensitive_prefix`` leading characters, and
    fewer for short values, followed by '...'.
    """
    if not logger_settings.get('redact_sensitive_headers', True) or \
            name.lower() not in LOGGER_SENSITIVE_HEADERS:
        return value
    reveal = max(0, logger_settings.get('reveal_sensitive_prefix', 16))
    shown = int(min(reveal, len(value) ** 2 / 32, len(value) / 2))
    return value[:shown] + '...'


def scrub_headers(headers):
    """
    :param headers: a mapping or (name, value) pairs
    :returns: a dict of text headers safe to log
    """
    if isinstance(headers, Mapping):
        headers = headers.items()
    return dict((_text(name), redact(_text(name), _text(value)))
                for name, value in headers)


def resp_header_dict(resp):
    """Response headers as a dict keyed by lower case names."""
    return dict((name.lower(), value) for name, value in resp.getheaders())


def store_response(resp, response_dict):
    """Copy status, reason and headers of ``resp`` into ``response_dict``."""
    if response_dict is not None:
        response_dict['status'] = resp.status
        response_dict['reason'] = resp.reason
        response_dict['headers'] = resp_header_dict(resp)


def http_log(method, url, headers, resp, body=None):
    """
    Log a request as the equivalent curl command line, followed by the
    reply. Successful exchanges are logged at DEBUG, failures at INFO.
    """
    if not logger.isEnabledFor(logging.INFO):
        return
    parts = ['curl -i', '-I' if method == 'HEAD' else '-X %s' % method, url]
    parts.extend('-H "%s: %s"' % header
                 for header in scrub_headers(headers).items())
    log = logger.debug if resp.status < 300 else logger.info
    log("REQ: %s", ' '.join(parts))
    log("RESP STATUS: %s %s", resp.status, resp.reason)
    log("RESP HEADERS: %s", scrub_headers(resp.getheaders()))
    if body:
        log("RESP BODY: %s", get_body(resp_header_dict(resp), body))


def iter_body(resp, chunk_size, conn_to_close=None):
    """
    Yield the body of ``resp`` ``chunk_size`` bytes at a time. The response
    and ``conn_to_close``, if given, are closed once the body is consumed.
    """
    try:
        while True:
            chunk = resp.read(chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        resp.close()
        if conn_to_close is not None:
            conn_to_close.close()


def _header_text(value):
    # requests decodes header bytes as latin-1; the service sends utf-8
    try:
        return value.encode('iso-8859-1').decode('utf-8')
    except UnicodeError:
        return value


class _Response(object):
    """httplib style view of a streamed requests response."""

    def __init__(self, resp):
        self._resp = resp
        self.status = resp.status_code
        self.reason = resp.reason
        self.url = resp.url

    def getheaders(self):
        return [(_header_text(name), _header_text(value))
                for name, value in self._resp.headers.items()]

    def getheader(self, name, default=None):
        name = name.lower()
        for key, value in self.getheaders():
            if key.lower() == name:
                return value
        return default

    def read(self, amt=None):
        chunk = self._resp.raw.read(amt)
        if not chunk:
            self._resp.close()
        return chunk

    def close(self):
        self._resp.close()


class HTTPConnection(object):
    """
    A keep-alive session to one storage or auth endpoint.

    :param url: endpoint URL; requests go to its scheme and host
    :param cacert: CA bundle used to verify the server certificate
    :param insecure: skip certificate verification
    :param timeout: socket timeout in seconds, passed to requests
    :raises ClientException: the URL scheme is not http or https
    """

    def __init__(self, url, cacert=None, insecure=False, timeout=None):
        self.parsed_url = urlparse(url)
        if self.parsed_url.scheme not in ('http', 'https'):
            raise ClientException('Unsupported scheme "%s" in url "%s"'
                                  % (self.parsed_url.scheme, url))
        self.request_session = requests.Session()
        self.request_session.headers.clear()
        self.requests_args = {
            'stream': True,
            'verify': False if insecure else (cacert or True),
        }
        if timeout:
            self.requests_args['timeout'] = timeout
        self.resp = None

    def _request(self, *args, **kwargs):
        return self.request_session.request(*args, **kwargs)

    def request(self, method, full_path, data=None, headers=None):
        """
        Send a request for ``full_path`` on this endpoint. Header names are
        lower cased and values sent as UTF-8.
        """
        send_headers = {}
        for name, value in (headers or {}).items():
            if type(value) in (int, float, bool):
                value = str(value)
            if isinstance(value, str):
                value = value.encode('utf-8')
            send_headers[name.lower()] = value
        send_headers.setdefault('user-agent', consts.user_agent)
        url = '%s://%s%s' % (self.parsed_url.scheme, self.parsed_url.netloc,
                             full_path)
        self.resp = self._request(method, url, headers=send_headers,
                                  data=data, **self.requests_args)
        return self.resp

    def getresponse(self):
        return _Response(self.resp)

    def close(self):
        if self.resp is not None:
            self.resp.close()
        self.request_session.close()


def http_connection(url, cacert=None, insecure=False, timeout=None):
    """:returns: tuple of (parsed url, connection object)"""
    conn = HTTPConnection(url, cacert=cacert, insecure=insecure,
                          timeout=timeout)
    return conn.parsed_url, conn
