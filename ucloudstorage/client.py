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
ucloud storage REST calls, one function per request.

Every function takes the storage URL and auth token first and an optional
``http_conn`` tuple of (parsed url, HTTPConnection) to reuse a connection.
Non-2xx replies are raised as typed exceptions: 401 as
:class:`AuthenticationError`, 404 as a :class:`NotFoundError` subclass and
anything else as :class:`InvalidResponseError`.
"""
from urllib.parse import quote

from ucloudstorage.exceptions import (
    AuthenticationError, ContainerNotEmpty, InvalidResponseError,
    MisMatchedChecksum, NoSuchContainer, NoSuchObject, NotFoundError)
from ucloudstorage.http import (
    http_connection, http_log, iter_body, resp_header_dict, store_response)
from ucloudstorage.utils import parse_api_response


def _raise_for_status(resp, msg, body, not_found=NotFoundError,
                      conflict=InvalidResponseError):
    if resp.status == 401:
        exc_class = AuthenticationError
    elif resp.status == 404:
        exc_class = not_found
    elif resp.status == 409:
        exc_class = conflict
    elif resp.status == 422:
        exc_class = MisMatchedChecksum
        msg += ': ETag does not match the content'
    else:
        exc_class = InvalidResponseError
    raise exc_class.from_response(resp, msg, body)


def expect_status(response_dict, status, msg):
    """
    Raise InvalidResponseError unless the stored response has exactly the
    given status.

    :param response_dict: dict filled in by :func:`store_response`
    :param status: the only acceptable status code
    :param msg: description of the failed request
    """
    if response_dict.get('status') != status:
        raise InvalidResponseError(
            '%s: invalid response (%s), expected %s' % (
                msg, response_dict.get('status'), status),
            http_status=response_dict.get('status'),
            http_reason=response_dict.get('reason', ''),
            http_response_headers=response_dict.get('headers'))


def _path(*names):
    return ''.join('/' + quote(name) for name in names)


def _listing_query(marker=None, limit=None, prefix=None, delimiter=None,
                   path=None):
    qs = 'format=json'
    if marker:
        qs += '&marker=%s' % quote(marker)
    if limit:
        qs += '&limit=%d' % limit
    for name, value in (('prefix', prefix), ('delimiter', delimiter),
                        ('path', path)):
        if value:
            qs += '&%s=%s' % (name, quote(value))
    return qs


def _request(method, url, token, path='', query=None, headers=None, data='',
             http_conn=None, response_dict=None, chunk_size=None,
             msg='Request failed', not_found=NotFoundError,
             conflict=InvalidResponseError):
    """
    Send one authenticated request below the storage URL.

    :param path: quoted path appended to the storage URL path
    :param query: query string, without the leading '?'
    :param chunk_size: stream a successful body in chunks of this size
                       instead of reading it
    :param msg: message of the exception raised for a non-2xx reply
    :param not_found: exception class raised for 404
    :param conflict: exception class raised for 409
    :returns: a tuple of (response, body); body is bytes, or a chunk
              iterator when ``chunk_size`` is set
    """
    owns_conn = not http_conn
    parsed, conn = http_connection(url) if owns_conn else http_conn
    full_path = parsed.path + path
    if query:
        full_path += '?' + query
    req_headers = {'X-Auth-Token': token}
    if headers:
        req_headers.update(headers)
    conn.request(method, full_path, data, req_headers)
    resp = conn.getresponse()
    store_response(resp, response_dict)
    log_url = '%s://%s%s' % (parsed.scheme, parsed.netloc, full_path)

    if chunk_size and 200 <= resp.status < 300:
        http_log(method, log_url, req_headers, resp)
        return resp, iter_body(resp, chunk_size,
                               conn_to_close=conn if owns_conn else None)
    body = resp.read()
    resp.close()
    if owns_conn:
        conn.close()
    http_log(method, log_url, req_headers, resp, body)
    if resp.status < 200 or resp.status >= 300:
        _raise_for_status(resp, msg, body, not_found=not_found,
                          conflict=conflict)
    return resp, body


def get_auth(auth_url, user, key, cacert=None, insecure=False, timeout=None):
    """
    Get authentication/authorization credentials.

    :param auth_url: authentication URL
    :param user: portal id to authenticate as
    :param key: API access key
    :param cacert: CA bundle file used to verify the TLS certificate
    :param insecure: skip TLS certificate verification
    :param timeout: socket read timeout
    :returns: a tuple, (storage_url, token)
    :raises AuthenticationError: the credentials were rejected
    :raises InvalidResponseError: unexpected status, or the storage URL or
                                  token headers are missing
    """
    parsed, conn = http_connection(auth_url, cacert=cacert,
                                   insecure=insecure, timeout=timeout)
    headers = {'X-Storage-User': user, 'X-Storage-Pass': key}
    path = parsed.path
    if parsed.query:
        path += '?' + parsed.query
    conn.request('GET', path, '', headers)
    resp = conn.getresponse()
    body = resp.read()
    resp.close()
    conn.close()
    http_log('GET', auth_url, headers, resp, body)

    if resp.status == 401:
        raise AuthenticationError.from_response(
            resp, 'Invalid username or access key.', body)
    if resp.status < 200 or resp.status >= 300:
        raise InvalidResponseError.from_response(
            resp, 'Unexpected response (%s): %s' % (resp.status, resp.reason),
            body)

    url = resp.getheader('x-storage-url')
    token = resp.getheader('x-auth-token', resp.getheader('x-storage-token'))
    if not url or not token:
        raise InvalidResponseError.from_response(
            resp, 'Expected headers missing from auth service.', body)
    return url, token


def _listing(resp, body):
    headers = resp_header_dict(resp)
    if resp.status == 204:
        return headers, []
    return headers, parse_api_response(headers, body)


def get_account(url, token, marker=None, limit=None, http_conn=None):
    """
    Get a listing of containers for the account.

    :returns: a tuple of (response headers, list of container dicts with
              ``name``, ``count`` and ``bytes``)
    """
    resp, body = _request('GET', url, token,
                          query=_listing_query(marker, limit),
                          headers={'Accept-Encoding': 'gzip'},
                          http_conn=http_conn, msg='Account GET failed')
    return _listing(resp, body)


def head_account(url, token, http_conn=None):
    """
    :returns: the account headers, lower cased, including
              ``x-account-container-count`` and ``x-account-bytes-used``
    """
    resp, _ = _request('HEAD', url, token, http_conn=http_conn,
                       msg='Account HEAD failed')
    return resp_header_dict(resp)


def get_container(url, token, container, marker=None, limit=None,
                  prefix=None, delimiter=None, path=None, http_conn=None):
    """
    Get a listing of objects for the container.

    :param path: path query (equivalent: "delimiter=/" and "prefix=path/")
    :returns: a tuple of (response headers, list of object dicts)
    :raises NoSuchContainer: the container does not exist
    """
    resp, body = _request('GET', url, token, _path(container),
                          query=_listing_query(marker, limit, prefix,
                                               delimiter, path),
                          headers={'Accept-Encoding': 'gzip'},
                          http_conn=http_conn, msg='Container GET failed',
                          not_found=NoSuchContainer)
    return _listing(resp, body)


def head_container(url, token, container, http_conn=None):
    """
    :returns: the container headers, lower cased
    :raises NoSuchContainer: the container does not exist
    """
    resp, _ = _request('HEAD', url, token, _path(container),
                       http_conn=http_conn, msg='Container HEAD failed',
                       not_found=NoSuchContainer)
    return resp_header_dict(resp)


def put_container(url, token, container, headers=None, http_conn=None):
    req_headers = {'Content-Length': '0'}
    req_headers.update(headers or {})
    _request('PUT', url, token, _path(container), headers=req_headers,
             http_conn=http_conn, msg='Container PUT failed')


def post_container(url, token, container, headers, http_conn=None,
                   response_dict=None):
    """
    Update a container's metadata.

    :param headers: the metadata and ACL headers to set
    :param response_dict: an optional dictionary into which to place
                     the response - status, reason and headers
    :raises NoSuchContainer: the container does not exist
    """
    req_headers = {'Content-Length': '0'}
    req_headers.update(headers)
    _request('POST', url, token, _path(container), headers=req_headers,
             http_conn=http_conn, response_dict=response_dict,
             msg='Container POST failed', not_found=NoSuchContainer)


def delete_container(url, token, container, http_conn=None):
    """
    :raises NoSuchContainer: the container does not exist
    :raises ContainerNotEmpty: the container still holds objects
    """
    _request('DELETE', url, token, _path(container), http_conn=http_conn,
             msg='Container DELETE failed', not_found=NoSuchContainer,
             conflict=ContainerNotEmpty)


def get_object(url, token, container, name, http_conn=None,
               resp_chunk_size=None, headers=None):
    """
    Get an object

    :param resp_chunk_size: if set, the content is returned as an iterator
                            of chunks of this size, which must be consumed
                            before the connection is used again
    :param headers: extra request headers, e.g. ``Range``
    :returns: a tuple of (response headers, the object's contents)
    :raises NoSuchObject: the object does not exist
    """
    resp, body = _request('GET', url, token, _path(container, name),
                          headers=headers, http_conn=http_conn,
                          chunk_size=resp_chunk_size, msg='Object GET failed',
                          not_found=NoSuchObject)
    return resp_header_dict(resp), body


def head_object(url, token, container, name, http_conn=None):
    """
    :returns: the object headers, lower cased
    :raises NoSuchObject: the object does not exist
    """
    resp, _ = _request('HEAD', url, token, _path(container, name),
                       http_conn=http_conn, msg='Object HEAD failed',
                       not_found=NoSuchObject)
    return resp_header_dict(resp)


def put_object(url, token, container, name, contents=None,
               content_length=None, etag=None, content_type=None,
               headers=None, http_conn=None):
    """
    Put an object

    :param contents: bytes, a file-like object or an iterable of chunks;
                     if None, a zero-byte object is written
    :param content_length: value of the Content-Length header; without it
                           an iterable is sent chunked
    :param etag: md5 of the contents, checked by the service
    :param content_type: value of the Content-Type header
    :param headers: metadata and other headers to send
    :returns: the ETag of the stored object, without quotes
    :raises NoSuchObject: the container does not exist
    :raises MisMatchedChecksum: the content did not match ``etag``
    """
    req_headers = dict(headers) if headers else {}
    if etag:
        req_headers['ETag'] = etag.strip('"')
    if content_length is not None:
        req_headers['Content-Length'] = str(content_length)
    if content_type is not None:
        req_headers['Content-Type'] = content_type
    if contents is None:
        contents = b''
        req_headers['Content-Length'] = '0'
    resp, _ = _request('PUT', url, token, _path(container, name),
                       headers=req_headers, data=contents,
                       http_conn=http_conn, msg='Object PUT failed',
                       not_found=NoSuchObject)
    return resp.getheader('etag', '').strip('"')


def post_object(url, token, container, name, headers, http_conn=None,
                response_dict=None):
    """
    Update object metadata

    :param headers: the metadata headers to set; existing metadata not
                    listed is removed by the service
    :param response_dict: an optional dictionary into which to place
                     the response - status, reason and headers
    :raises NoSuchObject: the object does not exist
    """
    _request('POST', url, token, _path(container, name), headers=headers,
             http_conn=http_conn, response_dict=response_dict,
             msg='Object POST failed', not_found=NoSuchObject)


def copy_object(url, token, container, name, destination, headers=None,
                http_conn=None):
    """
    Server side copy.

    :param destination: target in the form /container/object, unquoted
    :param headers: metadata headers for the copy
    :raises NoSuchObject: the source object or the destination container
                          does not exist
    """
    req_headers = dict(headers) if headers else {}
    req_headers['Destination'] = quote(destination)
    _request('COPY', url, token, _path(container, name), headers=req_headers,
             http_conn=http_conn, msg='Object COPY failed',
             not_found=NoSuchObject)


def delete_object(url, token, container, name, http_conn=None,
                  response_dict=None):
    """
    :param response_dict: an optional dictionary into which to place
                     the response - status, reason and headers
    :raises NoSuchObject: the object does not exist
    """
    _request('DELETE', url, token, _path(container, name),
             http_conn=http_conn, response_dict=response_dict,
             msg='Object DELETE failed', not_found=NoSuchObject)
