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

import hashlib
import json

from .utils import MockConnectionTest, TOKEN

from ucloudstorage import client as c
from ucloudstorage import consts
from ucloudstorage.container import Container
from ucloudstorage.exceptions import (
    InvalidResponseError, NoSuchContainer, NoSuchObject, ValidationError)
from ucloudstorage.storage_object import Object

LISTING = [
    {'name': 'a.txt', 'bytes': 3, 'content_type': 'text/plain',
     'hash': '900150983cd24fb0d6963f7d28e17f72',
     'last_modified': '2012-11-22T01:10:15.123456'},
    {'subdir': 'docs/'},
    {'name': 'b.jpg', 'bytes': 10, 'content_type': 'image/jpeg',
     'hash': 'd41d8cd98f00b204e9800998ecf8427e',
     'last_modified': '2012-11-22T01:10:16.123456'},
]


class TestContainerName(MockConnectionTest):

    def test_valid(self):
        container = self.make_container('x' * consts.MAX_CONTAINER_NAME_LEN)
        self.assertEqual(len(container.name), consts.MAX_CONTAINER_NAME_LEN)
        self.assertEqual(str(self.make_container()), 'photos')

    def test_invalid(self):
        for name in (None, '', 'a/b', 'x' * (consts.MAX_CONTAINER_NAME_LEN +
                                             1)):
            self.assertRaises(ValidationError, Container, self.conn, name)

    def test_length_counts_utf8_bytes(self):
        # 200 characters, 400 bytes
        self.assertRaises(ValidationError, Container, None, '\xe9' * 200)
        limit = consts.MAX_CONTAINER_NAME_LEN
        container = Container(None, '\xe9' * (limit // 2))
        self.assertEqual(len(container.name.encode('utf-8')), limit)
        self.assertRaises(ValidationError, Container, None,
                          '\xe9' * (limit // 2) + 'x')


class TestListing(MockConnectionTest):

    def test_list_objects(self):
        c.http_connection = self.fake_http_connection(
            200, body=json.dumps(LISTING).encode())
        names = self.make_container().list_objects(limit=5, prefix='a')
        self.assertEqual(names, ['a.txt', 'b.jpg'])
        self.assertRequests([
            ('GET', '/v1/AUTH_test/photos?format=json&limit=5&prefix=a'),
        ])

    def test_list_objects_empty(self):
        c.http_connection = self.fake_http_connection(204)
        self.assertEqual(self.make_container().list_objects(), [])

    def test_list_objects_path(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().list_objects(marker='m', path='docs')
        self.assertRequests([
            ('GET', '/v1/AUTH_test/photos?format=json&marker=m&path=docs'),
        ])

    def test_list_objects_missing_container(self):
        c.http_connection = self.fake_http_connection(404)
        self.assertRaises(NoSuchContainer,
                          self.make_container().list_objects)

    def test_get_objects(self):
        c.http_connection = self.fake_http_connection(
            200, body=json.dumps(LISTING).encode())
        container = self.make_container()
        objs = container.get_objects(delimiter='/')
        self.assertEqual([o.name for o in objs], ['a.txt', 'b.jpg'])
        first = objs[0]
        self.assertIsInstance(first, Object)
        self.assertIs(first.container, container)
        self.assertEqual(first.content_length, 3)
        self.assertEqual(first.content_type, 'text/plain')
        self.assertEqual(first.etag, '900150983cd24fb0d6963f7d28e17f72')
        self.assertEqual(first.last_modified, '2012-11-22T01:10:15.123456')
        self.assertRequests([
            ('GET', '/v1/AUTH_test/photos?format=json&delimiter=/'),
        ])


class TestObjectHandles(MockConnectionTest):

    def test_create_object_sends_nothing(self):
        c.http_connection = self.fake_http_connection()
        obj = self.make_container().create_object('new.txt')
        self.assertEqual(obj.name, 'new.txt')
        self.assertEqual(self.request_log, [])

    def test_get_object(self):
        c.http_connection = self.fake_http_connection(
            200, headers={'content-length': '3'})
        obj = self.make_container().get_object('a.txt')
        self.assertEqual(obj.content_length, 3)
        self.assertRequests([('HEAD', '/v1/AUTH_test/photos/a.txt')])

    def test_get_object_missing(self):
        c.http_connection = self.fake_http_connection(404)
        self.assertRaises(NoSuchObject, self.make_container().get_object,
                          'a.txt')


class TestCopyMove(MockConnectionTest):

    def test_copy_object_to(self):
        c.http_connection = self.fake_http_connection(201)
        container = self.make_container()
        target = self.make_container('backup')
        self.assertIs(container.copy_object_to(
            'a.txt', target, 'b.txt', metadata={'color': 'blue'}), True)
        self.assertRequests([('COPY', '/v1/AUTH_test/photos/a.txt', '', {
            'x-auth-token': TOKEN,
            'destination': '/backup/b.txt',
            'x-object-meta-color': 'blue'})])

    def test_copy_object_from(self):
        c.http_connection = self.fake_http_connection(201)
        container = self.make_container()
        obj = Object(container, 'a.txt', dohead=False)
        container.copy_object_from(obj, 'backup')
        self.assertRequests([('COPY', '/v1/AUTH_test/backup/a.txt', '', {
            'x-auth-token': TOKEN,
            'destination': '/photos/a.txt'})])

    def test_copy_missing_source_or_target(self):
        c.http_connection = self.fake_http_connection(404)
        with self.assertRaises(NoSuchObject) as exc_context:
            self.make_container().copy_object_to('a.txt', 'backup')
        self.assertEqual(
            exc_context.exception.msg,
            "Specified object 'photos/a.txt' did not exist as source to copy "
            "from or 'backup' did not exist as target to copy to.")
        self.assertEqual(exc_context.exception.http_status, 404)

    def test_copy_requires_names(self):
        c.http_connection = self.fake_http_connection()
        container = self.make_container()
        self.assertRaises(ValidationError, container.copy_object_to,
                          '', 'backup')
        self.assertRaises(ValidationError, container.copy_object_to,
                          'a.txt', None)
        self.assertRaises(ValidationError, container.copy_object_from,
                          'a.txt', '')

    def test_move_object_to(self):
        c.http_connection = self.fake_http_connection(201, 204)
        self.assertIs(
            self.make_container().move_object_to('a.txt', 'backup'), True)
        self.assertRequests([
            ('COPY', '/v1/AUTH_test/photos/a.txt'),
            ('DELETE', '/v1/AUTH_test/photos/a.txt'),
        ])

    def test_move_object_from(self):
        c.http_connection = self.fake_http_connection(201, 204)
        self.make_container().move_object_from('a.txt', 'backup', 'c.txt')
        self.assertRequests([
            ('COPY', '/v1/AUTH_test/backup/a.txt'),
            ('DELETE', '/v1/AUTH_test/backup/a.txt'),
        ])

    def test_move_delete_failure_keeps_copy(self):
        c.http_connection = self.fake_http_connection(201, 500, 200)
        container = self.make_container()
        self.assertRaises(InvalidResponseError, container.move_object_to,
                          'a.txt', 'backup')
        copy = Container(self.conn, 'backup').get_object('a.txt')
        self.assertEqual(copy.name, 'a.txt')
        self.assertRequests([
            ('COPY', '/v1/AUTH_test/photos/a.txt'),
            ('DELETE', '/v1/AUTH_test/photos/a.txt'),
            ('HEAD', '/v1/AUTH_test/backup/a.txt'),
        ])

    def test_move_copy_failure_skips_delete(self):
        c.http_connection = self.fake_http_connection(404)
        self.assertRaises(NoSuchObject,
                          self.make_container().move_object_to,
                          'a.txt', 'backup')
        self.assertRequests([('COPY', '/v1/AUTH_test/photos/a.txt')])


class TestDeleteObject(MockConnectionTest):

    def test_ok(self):
        c.http_connection = self.fake_http_connection(204)
        self.assertIs(self.make_container().delete_object('a.txt'), True)
        self.assertRequests([('DELETE', '/v1/AUTH_test/photos/a.txt')])

    def test_other_container(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().delete_object(
            'a.txt', self.make_container('backup'))
        self.assertRequests([('DELETE', '/v1/AUTH_test/backup/a.txt')])

    def test_unexpected_success_status(self):
        c.http_connection = self.fake_http_connection(200)
        with self.assertRaises(InvalidResponseError) as exc_context:
            self.make_container().delete_object('a.txt')
        self.assertEqual(exc_context.exception.http_status, 200)

    def test_missing(self):
        c.http_connection = self.fake_http_connection(404)
        self.assertRaises(NoSuchObject,
                          self.make_container().delete_object, 'a.txt')


class TestUpdateMetadata(MockConnectionTest):

    def assert_post(self, headers):
        expected = {'x-auth-token': TOKEN, 'content-length': '0'}
        expected.update(headers)
        self.assertRequests([
            ('POST', '/v1/AUTH_test/photos', '', expected)])

    def test_mapping(self):
        c.http_connection = self.fake_http_connection(204)
        self.assertIs(self.make_container().update_metadata(
            {'X-Container-Meta-Color': 'blue'}), True)
        self.assert_post({'X-Container-Meta-Color': 'blue'})

    def test_strings(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().update_metadata(
            ['x-container-meta-color: blue', 'X-Container-Read:.r:*'])
        self.assert_post({'X-Container-Meta-Color': 'blue',
                          'X-Container-Read': '.r:*'})

    def test_empty(self):
        c.http_connection = self.fake_http_connection()
        container = self.make_container()
        self.assertRaises(ValidationError, container.update_metadata, {})
        self.assertRaises(ValidationError, container.update_metadata, [])
        self.assertRaises(ValidationError, container.update_metadata,
                          ['no colon here'])
        self.assertEqual(self.request_log, [])

    def test_unexpected_success_status(self):
        c.http_connection = self.fake_http_connection(202)
        self.assertRaises(InvalidResponseError,
                          self.make_container().update_metadata,
                          {'X-Container-Meta-Color': 'blue'})

    def test_missing_container(self):
        c.http_connection = self.fake_http_connection(404)
        self.assertRaises(NoSuchContainer,
                          self.make_container().update_metadata,
                          {'X-Container-Meta-Color': 'blue'})

    def test_make_public(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().make_public()
        self.assert_post({'X-Container-Read': '.r:*'})

    def test_make_private(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().make_private()
        self.assert_post({'X-Remove-Container-Read': 'x'})

    def test_enable_static_website(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().enable_static_website(
            index='index.html', error='error.html', listings=True,
            css='listing.css')
        self.assert_post({
            'X-Container-Read': '.r:*',
            'X-Container-Meta-Web-Index': 'index.html',
            'X-Container-Meta-Web-Error': 'error.html',
            'X-Container-Meta-Web-Listings': 'true',
            'X-Container-Meta-Web-Listings-Css': 'listing.css'})

    def test_enable_static_website_partial(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().enable_static_website(index='index.html',
                                                    listings=False)
        self.assert_post({
            'X-Container-Read': '.r:*',
            'X-Container-Meta-Web-Index': 'index.html',
            'X-Container-Meta-Web-Listings': 'false'})

    def test_disable_static_website(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().disable_static_website()
        self.assert_post({
            'X-Remove-Container-Meta-Web-Index': 'x',
            'X-Remove-Container-Meta-Web-Error': 'x',
            'X-Remove-Container-Meta-Web-Listings': 'x',
            'X-Remove-Container-Meta-Web-Listings-Css': 'x',
            'X-Remove-Container-Read': 'x'})

    def test_logging(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().enable_logging()
        self.assert_post({'X-Container-Meta-Access-Log-Delivery': 'true'})

        c.http_connection = self.fake_http_connection(204)
        self.make_container().disable_logging()
        self.assert_post(
            {'X-Remove-Container-Meta-Access-Log-Delivery': 'x'})

    def test_user_metadata(self):
        c.http_connection = self.fake_http_connection(204)
        self.make_container().set_user_metadata('owner', 'alice')
        self.assert_post({'X-Container-Meta-Owner': 'alice'})

        c.http_connection = self.fake_http_connection(204)
        self.make_container().delete_user_metadata('owner')
        self.assert_post({'X-Remove-Container-Meta-Owner': 'x'})

    def test_local_metadata_untouched(self):
        c.http_connection = self.fake_http_connection(204)
        container = Container(self.conn, 'photos', metadata={'a': '1'})
        container.set_user_metadata('b', '2')
        self.assertEqual(container.metadata, {'a': '1'})

    def test_user_metadata_key_must_be_text(self):
        c.http_connection = self.fake_http_connection()
        container = self.make_container()
        for key in (None, 42, b'owner', ''):
            self.assertRaises(ValidationError, container.set_user_metadata,
                              key, 'alice')
            self.assertRaises(ValidationError,
                              container.delete_user_metadata, key)
        self.assertEqual(self.request_log, [])


class TestIsPublic(MockConnectionTest):

    def test_read_acl(self):
        container = self.make_container()
        self.assertFalse(container.is_public())
        container.read_acl = '.r:*,.rlistings'
        self.assertTrue(container.is_public())
        container.read_acl = 'AUTH_other'
        self.assertFalse(container.is_public())


class TestCreatePaths(MockConnectionTest):

    def test_markers(self):
        etag = '"%s"' % hashlib.md5(b'.').hexdigest()
        c.http_connection = self.fake_http_connection(
            201, 201, etags=[etag, etag])
        self.make_container().create_paths('/a/b/c.txt')
        expected_headers = {'x-auth-token': TOKEN, 'content-length': '1',
                            'content-type': 'application/directory'}
        self.assertRequests([
            ('PUT', '/v1/AUTH_test/photos/a', b'.', expected_headers),
            ('PUT', '/v1/AUTH_test/photos/a/b', b'.', expected_headers),
        ])

    def test_single_element(self):
        c.http_connection = self.fake_http_connection()
        self.make_container().create_paths('c.txt')
        self.assertEqual(self.request_log, [])
