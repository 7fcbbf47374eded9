import logging

from ucloudstorage import ClientException, connect
from sys import argv

logging.basicConfig(level=logging.ERROR)
logging.getLogger("requests").setLevel(logging.CRITICAL)
logging.getLogger("ucloudstorage").setLevel(logging.CRITICAL)
logger = logging.getLogger(__name__)

source = argv[1]
destination = argv[2]
objects = argv[3:]
conn = connect()
try:
    container = conn.get_container(source)
    for name in objects:
        try:
            container.copy_object_to(
                name, destination, metadata={'Copied-From': source})
        except ClientException as e:
            logger.error("Failed to copy object '%s': %s", name, e)
        else:
            print("%s copied to %s" % (name, destination))

except ClientException as e:
    logger.error(e)
finally:
    conn.close()
