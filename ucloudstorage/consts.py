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
"""Protocol constants for the ucloud storage service."""

version = '1.0.0'
user_agent = 'python-ucloudstorage-%s' % version

AUTH_URL = 'https://api.ucloudbiz.olleh.com/storage/v1/auth'
JP_AUTH_URL = 'https://api.ucloudbiz.olleh.com/storage/v1/authjp'

MAX_CONTAINER_NAME_LEN = 256
MAX_OBJECT_NAME_LEN = 1024
MAX_OBJECT_SIZE = 5 * 1024 * 1024 * 1024 + 1

DEFAULT_CHUNK_SIZE = 65536

CONTAINER_METADATA_HEADER_PREFIX = 'X-Container-Meta-'
CONTAINER_REMOVE_METADATA_HEADER_PREFIX = 'X-Remove-Container-Meta-'
OBJECT_METADATA_HEADER_PREFIX = 'X-Object-Meta-'

CONTAINER_READ_HEADER = 'X-Container-Read'
CONTAINER_REMOVE_READ_HEADER = 'X-Remove-Container-Read'
PUBLIC_READ_ACL = '.r:*'

# Swift ignores the value of X-Remove-* headers but requires one to be set.
REMOVE_HEADER_VALUE = 'x'

WEB_INDEX = 'Web-Index'
WEB_ERROR = 'Web-Error'
WEB_LISTINGS = 'Web-Listings'
WEB_LISTINGS_CSS = 'Web-Listings-Css'
ACCESS_LOG_DELIVERY = 'Access-Log-Delivery'

DIRECTORY_CONTENT_TYPE = 'application/directory'
DEFAULT_CONTENT_TYPE = 'application/octet-stream'
