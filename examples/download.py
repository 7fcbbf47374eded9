import logging

from os import makedirs
from os.path import dirname, join
from ucloudstorage import ClientException, connect
from sys import argv

logging.basicConfig(level=logging.ERROR)
logging.getLogger("requests").setLevel(logging.CRITICAL)
logging.getLogger("ucloudstorage").setLevel(logging.CRITICAL)
logger = logging.getLogger(__name__)


def is_png(obj):
    return (
        obj.content_type == 'image/png' or
        obj.name.lower().endswith('.png')
    )


container_name = argv[1]
out_dir = argv[2]
conn = connect()
try:
    container = conn.get_container(container_name)
    for obj in container.get_objects():
        if not is_png(obj):
            continue
        path = join(out_dir, obj.name)
        makedirs(dirname(path), exist_ok=True)
        try:
            size = obj.save_to_filename(path)
        except ClientException as e:
            logger.error("Object '%s' download failed: %s", obj.name, e)
        else:
            print("Object '%s' downloaded, %d bytes" % (obj.name, size))

except ClientException as e:
    logger.error(e)
finally:
    conn.close()
