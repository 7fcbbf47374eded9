import logging

from os import walk
from os.path import join, relpath
from ucloudstorage import ClientException, connect
from sys import argv

logging.basicConfig(level=logging.ERROR)
logging.getLogger("requests").setLevel(logging.CRITICAL)
logging.getLogger("ucloudstorage").setLevel(logging.CRITICAL)
logger = logging.getLogger(__name__)

dir = argv[1]
container_name = argv[2]
conn = connect()
try:
    container = conn.create_container(container_name)
    for (_dir, _ds, _fs) in walk(dir):
        for _f in _fs:
            path = join(_dir, _f)
            object_name = 'my-%s-objects/%s' % (dir, relpath(path, dir))
            # Directory marker objects for each parent path
            container.create_paths(object_name)
            try:
                container.create_object(object_name).load_from_filename(path)
            except ClientException as e:
                logger.error(
                    "Failed to upload object %s to container %s: %s" %
                    (object_name, container_name, e)
                )
            else:
                print(object_name)

except ClientException as e:
    logger.error(e)
finally:
    conn.close()
