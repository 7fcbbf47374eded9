import logging

from ucloudstorage import ClientException, connect
from sys import argv

logging.basicConfig(level=logging.ERROR)
logging.getLogger("requests").setLevel(logging.CRITICAL)
logging.getLogger("ucloudstorage").setLevel(logging.CRITICAL)
logger = logging.getLogger(__name__)

container_name = argv[1]
minimum_size = 10*1024**2
conn = connect()
try:
    container = conn.get_container(container_name)
    marker = None
    while True:
        page = container.get_objects(marker=marker)
        if not page:
            break
        for obj in page:
            if obj.content_length > minimum_size:
                print(
                    "%s [size: %s] [etag: %s]" %
                    (obj.name, obj.content_length, obj.etag)
                )
        marker = page[-1].name

except ClientException as e:
    logger.error(e)
finally:
    conn.close()
