# -*- encoding: utf-8 -*-
"""
KT ucloud storage Python client binding.
"""
from ucloudstorage.authentication import Authentication
from ucloudstorage.connection import Connection, connect
from ucloudstorage.consts import AUTH_URL, JP_AUTH_URL, version
from ucloudstorage.container import Container
from ucloudstorage.exceptions import (
    AuthenticationError, ClientException, ContainerNotEmpty,
    InvalidResponseError, MisMatchedChecksum, NoSuchContainer, NoSuchObject,
    NotAuthenticated, NotFoundError, ValidationError)
from ucloudstorage.storage_object import Object

__version__ = version

__all__ = [
    'AUTH_URL', 'Authentication', 'AuthenticationError', 'ClientException',
    'Connection', 'Container', 'ContainerNotEmpty', 'InvalidResponseError',
    'JP_AUTH_URL', 'MisMatchedChecksum', 'NoSuchContainer', 'NoSuchObject',
    'NotAuthenticated', 'NotFoundError', 'Object', 'ValidationError',
    'connect',
]
