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
"""Miscellaneous utility functions for use with ucloud storage."""
from collections.abc import Mapping
import gzip
import hashlib
import json

from ucloudstorage import consts
from ucloudstorage.exceptions import ValidationError

TRUE_VALUES = set(('true', '1', 'yes', 'on', 't', 'y'))


def config_true_value(value):
    """
    Returns True if the value is either True or a string in TRUE_VALUES.
    Returns False otherwise.
    """
    return value is True or \
        (isinstance(value, str) and value.lower() in TRUE_VALUES)


def get_body(headers, body):
    """Undo a gzip content-encoding, if any."""
    if headers.get('content-encoding') == 'gzip':
        return gzip.decompress(body)
    return body


def parse_api_response(headers, body):
    charset = 'utf-8'
    for param in headers.get('content-type', '').split(';')[1:]:
        name, _, value = param.strip().partition('=')
        if name.lower() == 'charset' and value:
            charset = value
    return json.loads(get_body(headers, body).decode(charset))


def _split_entry(entry):
    if isinstance(entry, str):
        key, sep, value = entry.partition(':')
        if not sep:
            raise ValidationError(
                "Metadata entry %r must look like 'Key: value'." % entry)
        return key.strip(), value.strip()
    if isinstance(entry, (bytes, Mapping)) or \
            not hasattr(entry, '__len__') or len(entry) != 2:
        raise ValidationError(
            'Metadata entry %r must be a (key, value) pair.' % (entry,))
    key, value = entry
    return str(key), str(value)


def split_request_headers(options, prefix=''):
    """
    Normalise metadata into a dict of request headers.

    ``options`` is a mapping, a sequence of (key, value) pairs or a sequence
    of 'Key: value' strings. Whitespace is trimmed around the key and value
    of the string form only; mapping and pair values are sent as given.

    :param prefix: prepended to every key, e.g. 'X-Container-Meta-'
    :raises ValidationError: the entries are not key-value shaped
    """
    if isinstance(options, Mapping):
        entries = options.items()
    elif isinstance(options, (str, bytes)) or \
            not hasattr(options, '__iter__'):
        raise ValidationError(
            'Metadata must be a mapping or a sequence of key-value pairs, '
            'not %s' % type(options).__name__)
    else:
        entries = options
    headers = {}
    for entry in entries:
        key, value = _split_entry(entry)
        headers[(prefix + key).title()] = value
    return headers


class _HashingSource(object):
    """File-like source that counts and hashes what it hands out."""

    def __init__(self, source, verify):
        self.source = source
        self.hasher = hashlib.md5() if verify else None
        self.bytes_read = 0

    def _take(self, size):
        chunk = self.source.read(size)
        if isinstance(chunk, str):
            chunk = chunk.encode('utf-8')
        if self.hasher is not None:
            self.hasher.update(chunk)
        self.bytes_read += len(chunk)
        return chunk

    def get_md5sum(self):
        """Hex md5 of the bytes read so far, or '' when not verifying."""
        if self.hasher is None:
            return ''
        return self.hasher.hexdigest()


class SizedUpload(_HashingSource):
    """
    Upload body of a known size. At most ``length`` bytes are read from the
    source, and ``len()`` gives requests the Content-Length.
    """

    def __init__(self, source, length, verify=False):
        super(SizedUpload, self).__init__(source, verify)
        self.length = length

    def __len__(self):
        return self.length

    def read(self, size=-1):
        remaining = self.length - self.bytes_read
        if remaining <= 0:
            return b''
        if size is None or size < 0 or size > remaining:
            size = remaining
        return self._take(size)


class ChunkedUpload(_HashingSource):
    """
    Upload body of unknown size, sent with chunked transfer encoding.
    """

    def __init__(self, source, chunk_size=consts.DEFAULT_CHUNK_SIZE,
                 verify=False):
        super(ChunkedUpload, self).__init__(source, verify)
        self.chunk_size = chunk_size

    def __iter__(self):
        while True:
            chunk = self._take(self.chunk_size)
            if not chunk:
                return
            yield chunk
