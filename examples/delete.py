import logging

from ucloudstorage import ClientException, NoSuchObject, connect
from sys import argv

logging.basicConfig(level=logging.ERROR)
logging.getLogger("requests").setLevel(logging.CRITICAL)
logging.getLogger("ucloudstorage").setLevel(logging.CRITICAL)
logger = logging.getLogger(__name__)

container_name = argv[1]
objects = argv[2:]
conn = connect()
try:
    container = conn.get_container(container_name)
    for name in objects:
        try:
            container.delete_object(name)
        except NoSuchObject:
            print("Object '%s' did not exist" % name)
        except ClientException as e:
            logger.error("Failed to delete object '%s': %s", name, e)
        else:
            print("Deleted '%s'" % name)

except ClientException as e:
    logger.error(e)
finally:
    conn.close()
