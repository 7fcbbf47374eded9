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
Credentials and the storage session obtained from them.
"""
from requests import certs

from ucloudstorage import client
from ucloudstorage import consts
from ucloudstorage.exceptions import ValidationError
from ucloudstorage.http import set_debug


class Authentication(object):
    """
    Holds the portal id and API key, and the storage URL / auth token pair
    once authenticated.

    ::

        >>> auth = Authentication('portal-id', 'api-key')
        >>> auth.authenticate()
        True
        >>> cached = auth.export_credentials()

    A later process can skip the auth round trip::

        >>> auth = Authentication()
        >>> auth.load_cached_credentials(cached['auth_token'],
        ...                              cached['storage_url'])
        True
    """

    def __init__(self, username=None, api_key=None, auth_url=consts.AUTH_URL,
                 cacert=None, insecure=False, timeout=None):
        """
        :param username: portal id
        :param api_key: API access key
        :param auth_url: authentication endpoint, defaults to the korean
                         region; use ``consts.JP_AUTH_URL`` for japan
        :param cacert: CA bundle file used to verify the TLS certificate
        :param insecure: skip TLS certificate verification
        :param timeout: socket read timeout for every request
        """
        self.username = username
        self.api_key = api_key
        self.auth_url = auth_url
        self.cacert = cacert
        self.insecure = insecure
        self.timeout = timeout
        self.storage_url = None
        self.auth_token = None

    def __repr__(self):
        return '<%s %s@%s>' % (self.__class__.__name__, self.username,
                               self.auth_url)

    def authenticate(self):
        """
        Exchange the credentials for a storage URL and auth token.

        :returns: True
        :raises ValidationError: username or api_key is missing
        :raises AuthenticationError: the credentials were rejected
        :raises InvalidResponseError: the auth service replied with an
                                      unexpected status or without the
                                      storage URL / token headers
        """
        if not self.username or not self.api_key:
            raise ValidationError('A username and api_key are required to '
                                  'authenticate.')
        self.storage_url, self.auth_token = client.get_auth(
            self.auth_url, self.username, self.api_key, cacert=self.cacert,
            insecure=self.insecure, timeout=self.timeout)
        return True

    def load_cached_credentials(self, auth_token, storage_url):
        """
        Use a previously exported session instead of authenticating.

        :raises ValidationError: either value is empty
        """
        if not storage_url:
            raise ValidationError('Missing storage URL.')
        if not auth_token:
            raise ValidationError('Missing auth token.')
        self.storage_url = storage_url
        self.auth_token = auth_token
        return True

    def export_credentials(self):
        return {'storage_url': self.storage_url,
                'auth_token': self.auth_token}

    def authenticated(self):
        return bool(self.storage_url and self.auth_token)

    def invalidate(self):
        self.storage_url = None
        self.auth_token = None

    def ssl_use_cabundle(self, path=None):
        """
        Verify TLS certificates against a CA bundle file.

        :param path: bundle file; None selects the bundle shipped with
                     requests
        """
        self.cacert = path or certs.where()
        self.insecure = False

    def set_debug(self, flag):
        set_debug(flag)

    def http_connection(self, url, timeout=None):
        """
        :param url: url to connect to
        :param timeout: overrides the timeout given at construction
        :returns: tuple of (parsed url, connection object)
        """
        if timeout is None:
            timeout = self.timeout
        return client.http_connection(url, cacert=self.cacert,
                                      insecure=self.insecure,
                                      timeout=timeout)
