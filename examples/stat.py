import logging
import pprint

from ucloudstorage import ClientException, connect
from sys import argv

logging.basicConfig(level=logging.ERROR)
logging.getLogger("requests").setLevel(logging.CRITICAL)
logging.getLogger("ucloudstorage").setLevel(logging.CRITICAL)
logger = logging.getLogger(__name__)

container_name = argv[1]
objects = argv[2:]
conn = connect()
try:
    count, bytes_used = conn.get_info()
    print("Account: %d containers, %d bytes" % (count, bytes_used))
    container = conn.get_container(container_name)
    for name in objects:
        obj = container.get_object(name)
        pprint.pprint({
            'name': obj.name,
            'content_type': obj.content_type,
            'content_length': obj.content_length,
            'etag': obj.etag,
            'last_modified': obj.last_modified,
            'metadata': obj.metadata,
        })

except ClientException as e:
    logger.error(e)
finally:
    conn.close()
