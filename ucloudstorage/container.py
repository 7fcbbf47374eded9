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
Containers: object listing, copy/move/delete and container metadata.

Public access, static website hosting, access logging and user metadata are
all header sets sent through :meth:`Container.update_metadata`.
"""
from ucloudstorage import client
from ucloudstorage import consts
from ucloudstorage.exceptions import NoSuchObject, ValidationError
from ucloudstorage.storage_object import Object
from ucloudstorage.utils import split_request_headers


def _object_name(obj):
    name = obj.name if isinstance(obj, Object) else obj
    if not name:
        raise ValidationError('Object name not set.')
    return name


def _container_name(container, what):
    name = container.name if isinstance(container, Container) else container
    if not name:
        raise ValidationError('Container name %s not set.' % what)
    return name


class Container(object):
    """
    A container of the storage account.

    :ivar name: container name
    :ivar object_count: number of objects, as of the last listing or HEAD
    :ivar bytes_used: bytes stored, as of the last listing or HEAD
    :ivar metadata: user metadata with the ``X-Container-Meta-`` prefix
                    stripped from the keys
    :ivar read_acl: value of the ``X-Container-Read`` header, if fetched
    """

    def __init__(self, connection, name, count=0, bytes_used=0,
                 metadata=None):
        self.check_name(name)
        self.conn = connection
        self.name = name
        self.object_count = count
        self.bytes_used = bytes_used
        self.metadata = metadata or {}
        self.read_acl = None

    @staticmethod
    def check_name(name):
        if not name:
            raise ValidationError('Container name not set.')
        if len(name.encode('utf-8')) > consts.MAX_CONTAINER_NAME_LEN:
            raise ValidationError('Container name exceeds maximum allowed '
                                  'length of %d bytes.'
                                  % consts.MAX_CONTAINER_NAME_LEN)
        if '/' in name:
            raise ValidationError("Container names cannot contain a '/' "
                                  "character.")

    def __str__(self):
        return self.name

    def __repr__(self):
        return '<%s %s: %s objects, %s bytes>' % (
            self.__class__.__name__, self.name, self.object_count,
            self.bytes_used)

    def load_headers(self, headers):
        """Populate stats, metadata and the read ACL from HEAD headers."""
        self.object_count = int(headers.get('x-container-object-count', 0))
        self.bytes_used = int(headers.get('x-container-bytes-used', 0))
        self.read_acl = headers.get('x-container-read')
        prefix = consts.CONTAINER_METADATA_HEADER_PREFIX.lower()
        self.metadata = dict(
            (key[len(prefix):], value) for key, value in headers.items()
            if key.lower().startswith(prefix))

    def create_object(self, name):
        """Return a local :class:`Object` handle; nothing is sent."""
        return Object(self, name, dohead=False)

    def get_object(self, name):
        """
        :raises NoSuchObject: the object does not exist
        """
        return Object(self, name, force_exists=True)

    def _listing(self, limit=0, marker=None, prefix=None, path=None,
                 delimiter=None):
        _, listing = self.conn.make_request(
            client.get_container, self.name, marker=marker, limit=limit,
            prefix=prefix, delimiter=delimiter, path=path)
        return listing

    def list_objects(self, limit=0, marker=None, prefix=None, path=None):
        """
        :returns: a list of object names, empty when nothing matches
        """
        return [record['name'] for record in
                self._listing(limit=limit, marker=marker, prefix=prefix,
                              path=path)
                if 'name' in record]

    def get_objects(self, limit=0, marker=None, prefix=None, path=None,
                    delimiter=None):
        """
        :returns: a list of :class:`Object` populated from the listing;
                  ``subdir`` entries produced by ``delimiter`` are skipped
        """
        return [Object.from_listing(self, record) for record in
                self._listing(limit=limit, marker=marker, prefix=prefix,
                              path=path, delimiter=delimiter)
                if 'subdir' not in record]

    def _copy(self, obj_name, src_container, dest_container, dest_obj_name,
              metadata, headers):
        if dest_obj_name is None:
            dest_obj_name = obj_name
        req_headers = {}
        if metadata:
            req_headers.update(split_request_headers(
                metadata, consts.OBJECT_METADATA_HEADER_PREFIX))
        if headers:
            req_headers.update(headers)
        try:
            self.conn.make_request(
                client.copy_object, src_container, obj_name,
                destination='/%s/%s' % (dest_container, dest_obj_name),
                headers=req_headers)
        except NoSuchObject as err:
            err.msg = ("Specified object '%s/%s' did not exist as source to "
                       "copy from or '%s' did not exist as target to copy to."
                       % (src_container, obj_name, dest_container))
            err.args = (err.msg,)
            raise
        return True

    def copy_object_to(self, obj, container_target, dest_obj_name=None,
                       metadata=None, headers=None):
        """
        Server side copy of an object of this container to another one.

        :param obj: object name or :class:`Object`
        :param container_target: container name or :class:`Container`
        :param dest_obj_name: name of the copy, defaults to the source name
        :param metadata: user metadata of the copy, sent as
                         ``X-Object-Meta-*`` headers
        :param headers: extra headers of the copy
        :raises ValidationError: object or container name missing
        :raises NoSuchObject: source object or target container missing
        """
        return self._copy(_object_name(obj), self.name,
                          _container_name(container_target, 'target'),
                          dest_obj_name, metadata, headers)

    def copy_object_from(self, obj, container_source, dest_obj_name=None,
                         metadata=None, headers=None):
        """
        Server side copy of an object of another container into this one.

        Arguments are the same as :meth:`copy_object_to`.
        """
        return self._copy(_object_name(obj),
                          _container_name(container_source, 'source'),
                          self.name, dest_obj_name, metadata, headers)

    def move_object_to(self, obj, container_target, dest_obj_name=None,
                       metadata=None, headers=None):
        """
        Copy the object to ``container_target`` then delete the source.

        The move is not atomic: when the delete fails its error is raised and
        the copy is left in place.
        """
        obj_name = _object_name(obj)
        self.copy_object_to(obj_name, container_target, dest_obj_name,
                            metadata, headers)
        return self.delete_object(obj_name)

    def move_object_from(self, obj, container_source, dest_obj_name=None,
                         metadata=None, headers=None):
        """
        Copy the object from ``container_source`` then delete the source.

        Not atomic, see :meth:`move_object_to`.
        """
        obj_name = _object_name(obj)
        self.copy_object_from(obj_name, container_source, dest_obj_name,
                              metadata, headers)
        return self.delete_object(obj_name, container_source)

    def delete_object(self, obj, container=None):
        """
        :param obj: object name or :class:`Object`
        :param container: container holding the object, defaults to this one
        :raises NoSuchObject: the object does not exist
        :raises InvalidResponseError: the reply was not 204 No Content
        """
        obj_name = _object_name(obj)
        if container is None:
            container_name = self.name
        else:
            container_name = _container_name(container, 'source')
        response_dict = {}
        self.conn.make_request(client.delete_object, container_name,
                               obj_name, response_dict=response_dict)
        client.expect_status(response_dict, 204, 'Object DELETE failed')
        return True

    def update_metadata(self, entries):
        """
        Send one POST carrying the given container headers.

        The local :attr:`metadata` is left untouched, fetch the container
        again to see the result.

        :param entries: a mapping, a sequence of (key, value) pairs or a
                        sequence of 'Key: value' strings
        :raises ValidationError: entries are empty or not key-value shaped
        :raises NoSuchContainer: the container does not exist
        :raises InvalidResponseError: the reply was not 204 No Content
        """
        headers = split_request_headers(entries)
        if not headers:
            raise ValidationError('Metadata entries are empty.')
        response_dict = {}
        self.conn.make_request(client.post_container, self.name, headers,
                               response_dict=response_dict)
        client.expect_status(response_dict, 204, 'Container POST failed')
        return True

    def make_public(self):
        return self.update_metadata(
            {consts.CONTAINER_READ_HEADER: consts.PUBLIC_READ_ACL})

    def make_private(self):
        return self.update_metadata(
            {consts.CONTAINER_REMOVE_READ_HEADER: consts.REMOVE_HEADER_VALUE})

    def is_public(self):
        """Whether the fetched read ACL grants anonymous read access."""
        if not self.read_acl:
            return False
        return consts.PUBLIC_READ_ACL in [
            acl.strip() for acl in self.read_acl.split(',')]

    def enable_static_website(self, index=None, error=None, listings=None,
                              css=None):
        """
        Serve the container as a static website; this also makes it public.

        :param index: index object name, e.g. 'index.html'
        :param error: error object suffix, e.g. 'error.html'
        :param listings: list objects when there is no index
        :param css: style sheet object used for listings
        """
        if isinstance(listings, bool):
            listings = 'true' if listings else 'false'
        prefix = consts.CONTAINER_METADATA_HEADER_PREFIX
        entries = [(consts.CONTAINER_READ_HEADER, consts.PUBLIC_READ_ACL)]
        for key, value in ((consts.WEB_INDEX, index),
                           (consts.WEB_ERROR, error),
                           (consts.WEB_LISTINGS, listings),
                           (consts.WEB_LISTINGS_CSS, css)):
            if value is not None:
                entries.append((prefix + key, value))
        return self.update_metadata(entries)

    def disable_static_website(self):
        prefix = consts.CONTAINER_REMOVE_METADATA_HEADER_PREFIX
        entries = [(prefix + key, consts.REMOVE_HEADER_VALUE)
                   for key in (consts.WEB_INDEX, consts.WEB_ERROR,
                               consts.WEB_LISTINGS, consts.WEB_LISTINGS_CSS)]
        entries.append((consts.CONTAINER_REMOVE_READ_HEADER,
                        consts.REMOVE_HEADER_VALUE))
        return self.update_metadata(entries)

    def enable_logging(self):
        return self.update_metadata(
            {consts.CONTAINER_METADATA_HEADER_PREFIX +
             consts.ACCESS_LOG_DELIVERY: 'true'})

    def disable_logging(self):
        return self.update_metadata(
            {consts.CONTAINER_REMOVE_METADATA_HEADER_PREFIX +
             consts.ACCESS_LOG_DELIVERY: consts.REMOVE_HEADER_VALUE})

    @staticmethod
    def _check_metadata_key(key):
        if not isinstance(key, str) or not key:
            raise ValidationError('Metadata key must be a non-empty string, '
                                  'not %r.' % (key,))

    def set_user_metadata(self, key, value):
        self._check_metadata_key(key)
        return self.update_metadata(
            {consts.CONTAINER_METADATA_HEADER_PREFIX + key: value})

    def delete_user_metadata(self, key):
        self._check_metadata_key(key)
        return self.update_metadata(
            {consts.CONTAINER_REMOVE_METADATA_HEADER_PREFIX + key:
             consts.REMOVE_HEADER_VALUE})

    def create_paths(self, path_name):
        """
        Create the directory marker objects of a '/' separated object name.

        For 'a/b/c.txt' one byte ``application/directory`` objects 'a' and
        'a/b' are written; the last element is the real object and is not
        created.
        """
        if path_name.startswith('/'):
            path_name = path_name[1:]
        build_path = ''
        for element in path_name.split('/')[:-1]:
            if build_path:
                build_path = '%s/%s' % (build_path, element)
            else:
                build_path = element
            marker = self.create_object(build_path)
            marker.content_type = consts.DIRECTORY_CONTENT_TYPE
            marker.write(b'.', 1)
