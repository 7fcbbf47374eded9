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
Storage objects: content transfer and object metadata.
"""
import hashlib
import io
import mimetypes
import os

from ucloudstorage import client
from ucloudstorage import consts
from ucloudstorage.exceptions import (
    MisMatchedChecksum, NoSuchObject, ValidationError)
from ucloudstorage.http import logger
from ucloudstorage.utils import ChunkedUpload, SizedUpload


class Object(object):
    """
    An object stored in a :class:`~ucloudstorage.container.Container`.

    :ivar name: object name
    :ivar content_type: content type sent on write, read from HEAD
    :ivar content_length: size in bytes, as of the last HEAD, listing or
                          write
    :ivar last_modified: last modification time reported by the service
    :ivar metadata: user metadata without the ``X-Object-Meta-`` prefix
    :ivar headers: extra headers sent by :meth:`write` and
                   :meth:`sync_metadata`
    """

    def __init__(self, container, name=None, force_exists=False,
                 dohead=True):
        """
        Objects are normally obtained from
        :meth:`~ucloudstorage.container.Container.create_object`,
        :meth:`~ucloudstorage.container.Container.get_object` or
        :meth:`~ucloudstorage.container.Container.get_objects`.

        :param container: the parent container
        :param name: object name
        :param force_exists: raise NoSuchObject if the object is missing
        :param dohead: populate the attributes with a HEAD request
        """
        self.container = container
        self.name = name
        self.content_type = None
        self.content_length = 0
        self.last_modified = None
        self.metadata = {}
        self.headers = {}
        self._etag = None
        self._etag_override = False
        if name is not None:
            self._name_check()
        if dohead and name:
            try:
                self._initialize()
            except NoSuchObject:
                if force_exists:
                    raise

    @classmethod
    def from_listing(cls, container, record):
        """Build an object from one record of a JSON container listing."""
        obj = cls(container, record['name'], dohead=False)
        obj.content_type = record.get('content_type')
        obj.content_length = int(record.get('bytes', 0))
        obj.last_modified = record.get('last_modified')
        obj._etag = record.get('hash')
        return obj

    def __str__(self):
        return self.name

    def __repr__(self):
        return '<%s %s/%s>' % (self.__class__.__name__, self.container,
                               self.name)

    @property
    def conn(self):
        return self.container.conn

    @property
    def etag(self):
        return self._etag

    @etag.setter
    def etag(self, value):
        self.set_etag(value)

    def set_etag(self, etag):
        """
        Send ``etag`` with the next write; the service rejects content that
        does not match it.
        """
        self._etag = etag
        self._etag_override = True

    def _name_check(self):
        if not self.name:
            raise ValidationError('Object name not set.')
        if len(self.name.encode('utf-8')) > consts.MAX_OBJECT_NAME_LEN:
            raise ValidationError('Object name exceeds maximum allowed '
                                  'length of %d bytes.'
                                  % consts.MAX_OBJECT_NAME_LEN)

    def _initialize(self):
        headers = self.conn.make_request(client.head_object,
                                         self.container.name, self.name)
        self._load_headers(headers)

    def _load_headers(self, headers):
        prefix = consts.OBJECT_METADATA_HEADER_PREFIX.lower()
        self.metadata = {}
        for key, value in headers.items():
            key = key.lower()
            if key.startswith(prefix):
                self.metadata[key[len(prefix):]] = value
            elif key == 'content-type':
                self.content_type = value
            elif key == 'content-length':
                self.content_length = int(value)
            elif key == 'last-modified':
                self.last_modified = value
            elif key == 'etag':
                self._etag = value.strip('"')
                self._etag_override = False

    def _make_headers(self):
        headers = dict(
            (consts.OBJECT_METADATA_HEADER_PREFIX + key, value)
            for key, value in self.metadata.items())
        headers.update(self.headers)
        return headers

    def read(self, hdrs=None):
        """
        :param hdrs: extra request headers, e.g. ``Range``
        :returns: the object content as bytes
        :raises NoSuchObject: the object does not exist
        """
        self._name_check()
        _, body = self.conn.make_request(client.get_object,
                                         self.container.name, self.name,
                                         headers=hdrs)
        return body

    def stream(self, fp, chunk_size=consts.DEFAULT_CHUNK_SIZE, hdrs=None):
        """
        Copy the object content into ``fp`` one chunk at a time.

        :param fp: writable file-like object
        :param chunk_size: bytes read from the response per write
        :param hdrs: extra request headers
        :returns: the number of bytes written
        """
        self._name_check()
        _, body = self.conn.make_request(client.get_object,
                                         self.container.name, self.name,
                                         resp_chunk_size=chunk_size,
                                         headers=hdrs)
        written = 0
        for chunk in body:
            fp.write(chunk)
            written += len(chunk)
        return written

    def save_to_filename(self, filename):
        with open(filename, 'wb') as fp:
            return self.stream(fp)

    def write(self, data=b'', size=None, verify=True):
        """
        Upload the object content.

        :param data: bytes, str or a readable file-like object
        :param size: bytes to send; taken from ``data`` when possible,
                     otherwise the upload is chunked
        :param verify: compare the md5 of the sent bytes with the ETag
                       returned by the service
        :raises ValidationError: the name is invalid or ``size`` exceeds
                                 the maximum object size
        :raises MisMatchedChecksum: the stored content does not match
        """
        self._name_check()
        if isinstance(data, str):
            data = data.encode('utf-8')
        if isinstance(data, bytes):
            if size is None:
                size = len(data)
            data = io.BytesIO(data)
        elif size is None and hasattr(data, 'fileno'):
            try:
                size = os.fstat(data.fileno()).st_size - data.tell()
            except (OSError, io.UnsupportedOperation):
                size = None

        if size is not None and size > consts.MAX_OBJECT_SIZE:
            raise ValidationError('Object size %d exceeds the maximum of %d '
                                  'bytes.' % (size, consts.MAX_OBJECT_SIZE))

        if size is None:
            contents = ChunkedUpload(data, verify=verify)
        else:
            contents = SizedUpload(data, size, verify=verify)

        content_type = self.content_type or \
            mimetypes.guess_type(self.name)[0] or \
            consts.DEFAULT_CONTENT_TYPE
        send_etag = self._etag if self._etag_override else None

        etag = self.conn.make_request(
            client.put_object, self.container.name, self.name, contents,
            content_length=size, etag=send_etag, content_type=content_type,
            headers=self._make_headers())

        if verify and contents.get_md5sum() != etag:
            raise MisMatchedChecksum(
                'Upload of %s/%s: local md5 %s does not match ETag %s'
                % (self.container.name, self.name, contents.get_md5sum(),
                   etag))
        logger.debug('Wrote %s/%s, etag %s', self.container.name, self.name,
                     etag)
        if size is None:
            size = contents.bytes_read
        self.content_type = content_type
        self.content_length = size
        self._etag = etag
        self._etag_override = False
        return True

    def load_from_filename(self, filename, verify=True):
        with open(filename, 'rb') as fp:
            return self.write(fp, verify=verify)

    def sync_metadata(self):
        """
        POST :attr:`metadata` and :attr:`headers` to the service. Nothing is
        sent when both are empty.

        :raises InvalidResponseError: the reply was not 202 Accepted
        """
        self._name_check()
        if not self.metadata and not self.headers:
            return False
        response_dict = {}
        self.conn.make_request(client.post_object, self.container.name,
                               self.name, self._make_headers(),
                               response_dict=response_dict)
        client.expect_status(response_dict, 202, 'Object POST failed')
        return True

    @classmethod
    def compute_md5sum(cls, fobj):
        """
        Given an open file object, returns the md5 hexdigest of the data.
        """
        checksum = hashlib.md5()
        buff = fobj.read(4096)
        while buff:
            checksum.update(buff)
            buff = fobj.read(4096)
        fobj.seek(0)
        return checksum.hexdigest()
