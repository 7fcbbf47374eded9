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

import importlib
import unittest
from urllib.parse import urlparse

from requests import RequestException

from ucloudstorage import client as c
from ucloudstorage.authentication import Authentication
from ucloudstorage.connection import Connection
from ucloudstorage.container import Container

STORAGE_URL = 'http://storage.example.com/v1/AUTH_test'
TOKEN = 'AUTH_tk_test'
# md5 of b''
EMPTY_ETAG = 'd41d8cd98f00b204e9800998ecf8427e'


class StubResponse(object):
    """
    A scripted reply for fake_http_connection. ``headers``, when given,
    replace the default reply headers entirely.
    """

    def __init__(self, status=200, body=b'', headers=None):
        self.status = status
        self.body = body
        self.headers = headers

    def __repr__(self):
        return '%s(%r, %r, %r)' % (self.__class__.__name__, self.status,
                                   self.body, self.headers)


class FakeResponse(object):
    reason = 'Fake'

    def __init__(self, status, body, headers, url):
        self.status = status
        self.body = body
        self.headers = dict((k.lower(), v) for k, v in headers.items())
        self.url = url
        self.closed = False

    def getheaders(self):
        return list(self.headers.items())

    def getheader(self, name, default=None):
        return self.headers.get(name.lower(), default)

    def read(self, amt=None):
        if amt is None:
            amt = len(self.body)
        chunk, self.body = self.body[:amt], self.body[amt:]
        return chunk

    def close(self):
        self.closed = True


class FakeConnection(object):
    """
    Stands in for HTTPConnection: every request takes the next scripted
    reply of the test and is recorded in ``test.request_log``.
    """

    def __init__(self, test, parsed):
        self.test = test
        self.parsed = parsed
        self.resp = None
        self.closed = False

    def request(self, method, full_path, data=None, headers=None):
        url = '%s://%s%s' % (self.parsed.scheme, self.parsed.netloc,
                             full_path)
        self.resp = self.test.next_response(method, url)
        # consume upload bodies the way requests would
        if hasattr(data, 'read'):
            data = data.read()
        elif data is not None and not isinstance(data, (bytes, str)):
            data = b''.join(data)
        self.test.request_log.append({
            'method': method,
            'path': full_path,
            'url': url,
            'body': data,
            'headers': dict((k.lower(), v)
                            for k, v in (headers or {}).items()),
            'response': self.resp,
        })
        return self.resp

    def getresponse(self):
        return self.resp

    def close(self):
        self.closed = True


class MockHttpTest(unittest.TestCase):
    """
    Replace ``client.http_connection`` with the result of
    ``self.fake_http_connection(*statuses, **options)`` to script replies.

    Each status is an int or a StubResponse. Statuses <= 0 raise
    RequestException instead of replying. Options:

    - ``body``: body of every int status reply
    - ``headers``: added to the default reply headers
    - ``auth_headers``: add x-storage-url and x-auth-token headers
    - ``etags``: etag header of each int status reply, in order
    """

    def setUp(self):
        super(MockHttpTest, self).setUp()
        self.pending = []
        self.request_log = []
        self.connect_log = []
        self.fake_http_connection = self._fake_http_connection

    def _default_headers(self, body, etag, options):
        headers = {
            'content-length': str(len(body)),
            'content-type': 'x-application/test',
            'x-timestamp': '1',
            'last-modified': '1',
            'x-object-meta-test': 'testing',
            'etag': etag or '"%s"' % EMPTY_ETAG,
            'x-works': 'yes',
            'x-account-container-count': '12345',
        }
        headers.update(options.get('headers') or {})
        if options.get('auth_headers'):
            headers['x-storage-url'] = STORAGE_URL
            headers['x-auth-token'] = TOKEN
        return headers

    def _fake_http_connection(self, *statuses, **options):
        self.assertPendingConsumed()
        self.request_log = []
        etags = list(options.get('etags') or [])
        body = options.get('body', b'')
        self.pending = []
        for status in statuses:
            if isinstance(status, StubResponse):
                self.pending.append((status.status, status.body,
                                     status.headers or {}))
            else:
                etag = etags.pop(0) if etags else None
                self.pending.append(
                    (status, body,
                     self._default_headers(body, etag, options)))

        def http_connection(url, cacert=None, insecure=False, timeout=None):
            self.connect_log.append({
                'url': url, 'cacert': cacert, 'insecure': insecure,
                'timeout': timeout})
            parsed = urlparse(url)
            return parsed, FakeConnection(self, parsed)
        return http_connection

    def next_response(self, method, url):
        if not self.pending:
            self.fail('Unexpected %s request for %s' % (method, url))
        status, body, headers = self.pending.pop(0)
        if status <= 0:
            raise RequestException('Connection refused')
        return FakeResponse(status, body, headers, url)

    def assertRequests(self, expected_requests):
        """
        Compare the recorded requests with a list of (method, path[, body
        [, headers]]) tuples. A path with a scheme is compared with the full
        URL. Expected headers must match the sent headers exactly.
        """
        self.assertEqual(len(expected_requests), len(self.request_log),
                         'Expected %d requests, got %r' % (
                             len(expected_requests),
                             [(r['method'], r['url'])
                              for r in self.request_log]))
        for expected, real in zip(expected_requests, self.request_log):
            method, path = expected[:2]
            sent_path = real['url'] if urlparse(path).scheme else real['path']
            self.assertEqual((method, path), (real['method'], sent_path))
            if len(expected) > 2:
                self.assertEqual(expected[2], real['body'],
                                 'Body mismatch for %s %s' % (method, path))
            if len(expected) > 3:
                self.assertEqual(
                    dict((k.lower(), v) for k, v in expected[3].items()),
                    real['headers'],
                    'Header mismatch for %s %s' % (method, path))

    def assertPendingConsumed(self):
        if self.pending:
            self.fail('Unused responses %r' % (self.pending,))

    def tearDown(self):
        self.assertPendingConsumed()
        super(MockHttpTest, self).tearDown()
        importlib.reload(c)


class MockConnectionTest(MockHttpTest):
    """
    MockHttpTest with an authenticated :class:`Connection` built from cached
    credentials, so no auth request is made.
    """

    def setUp(self):
        super(MockConnectionTest, self).setUp()
        self.auth = Authentication('user', 'key')
        self.auth.load_cached_credentials(TOKEN, STORAGE_URL)
        self.conn = Connection(self.auth)

    def make_container(self, name='photos'):
        return Container(self.conn, name)
