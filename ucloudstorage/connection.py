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
Account level access: container listing and container CRUD.
"""
import os

from requests.exceptions import RequestException

from ucloudstorage import client
from ucloudstorage import consts
from ucloudstorage.authentication import Authentication
from ucloudstorage.container import Container
from ucloudstorage.exceptions import AuthenticationError, NotAuthenticated
from ucloudstorage.http import logger
from ucloudstorage.utils import config_true_value


class Connection(object):
    """
    Manages the storage session of an authenticated :class:`Authentication`
    and keeps one HTTP connection warm across calls.

    Requests are never retried. A 401 reply invalidates the session and the
    :class:`AuthenticationError` is raised to the caller, who may call
    :meth:`reauthenticate` and try again.
    """

    def __init__(self, auth, timeout=None):
        """
        :param auth: an authenticated :class:`Authentication`
        :param timeout: socket read timeout, overriding the one of ``auth``
        :raises NotAuthenticated: ``auth`` holds no session
        """
        if not auth.authenticated():
            raise NotAuthenticated('Authentication must be performed before '
                                   'creating a connection.')
        self.auth = auth
        self.timeout = timeout
        self.http_conn = None

    def __repr__(self):
        return '<%s %s>' % (self.__class__.__name__, self.auth.storage_url)

    def close(self):
        if self.http_conn and isinstance(self.http_conn, tuple)\
                and len(self.http_conn) > 1:
            conn = self.http_conn[1]
            conn.close()
        self.http_conn = None

    def http_connection(self):
        return self.auth.http_connection(self.auth.storage_url,
                                         timeout=self.timeout)

    def make_request(self, func, *args, **kwargs):
        """
        Call one of the :mod:`ucloudstorage.client` functions with the
        session's storage URL, token and warm connection.

        :raises NotAuthenticated: the session was invalidated
        """
        if not self.auth.authenticated():
            raise NotAuthenticated('No storage session; call '
                                   'reauthenticate() first.')
        if not self.http_conn:
            self.http_conn = self.http_connection()
        kwargs['http_conn'] = self.http_conn
        try:
            return func(self.auth.storage_url, self.auth.auth_token,
                        *args, **kwargs)
        except AuthenticationError:
            logger.info('Auth token rejected by %s, session invalidated',
                        self.auth.storage_url)
            self.auth.invalidate()
            self.close()
            raise
        except RequestException:
            self.close()
            raise

    def reauthenticate(self):
        """
        Authenticate again with the stored credentials and drop the warm
        connection.
        """
        self.close()
        return self.auth.authenticate()

    def set_debug(self, flag):
        self.auth.set_debug(flag)

    def ssl_use_cabundle(self, path=None):
        self.auth.ssl_use_cabundle(path)
        self.close()

    def get_info(self):
        """
        :returns: a tuple of (container count, bytes used) for the account
        """
        headers = self.make_request(client.head_account)
        return (int(headers.get('x-account-container-count', 0)),
                int(headers.get('x-account-bytes-used', 0)))

    def list_containers_info(self, limit=0, marker=None):
        """
        :returns: a list of dicts with the ``name``, ``count`` and ``bytes``
                  of each container
        """
        _, listing = self.make_request(client.get_account, marker=marker,
                                       limit=limit)
        return listing

    def list_containers(self, limit=0, marker=None):
        return [info['name'] for info in
                self.list_containers_info(limit=limit, marker=marker)]

    def get_containers(self, limit=0, marker=None):
        return [Container(self, info['name'], count=info.get('count', 0),
                          bytes_used=info.get('bytes', 0))
                for info in self.list_containers_info(limit=limit,
                                                      marker=marker)]

    def create_container(self, name):
        """
        :returns: the new :class:`Container`
        :raises ValidationError: invalid container name
        """
        container = Container(self, name)
        self.make_request(client.put_container, container.name)
        return container

    def get_container(self, name):
        """
        :returns: a :class:`Container` populated from a HEAD request
        :raises ValidationError: invalid container name
        :raises NoSuchContainer: the container does not exist
        """
        container = Container(self, name)
        headers = self.make_request(client.head_container, container.name)
        container.load_headers(headers)
        return container

    def delete_container(self, container):
        """
        :param container: container name or :class:`Container`
        :raises NoSuchContainer: the container does not exist
        :raises ContainerNotEmpty: the container still holds objects
        """
        if not isinstance(container, Container):
            container = Container(self, container)
        self.make_request(client.delete_container, container.name)


def connect(username=None, api_key=None, auth_url=None, cacert=None,
            insecure=None, timeout=None):
    """
    Authenticate and return a :class:`Connection`.

    Arguments left as None are read from the environment: ``UCLOUD_USER``,
    ``UCLOUD_KEY``, ``UCLOUD_AUTH_URL``, ``UCLOUD_CACERT`` and
    ``UCLOUD_INSECURE``.
    """
    environ = os.environ
    if insecure is None:
        insecure = config_true_value(environ.get('UCLOUD_INSECURE'))
    auth = Authentication(
        username or environ.get('UCLOUD_USER'),
        api_key or environ.get('UCLOUD_KEY'),
        auth_url or environ.get('UCLOUD_AUTH_URL') or consts.AUTH_URL,
        cacert=cacert or environ.get('UCLOUD_CACERT'),
        insecure=insecure, timeout=timeout)
    auth.authenticate()
    return Connection(auth, timeout=timeout)
