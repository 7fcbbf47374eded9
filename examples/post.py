import logging

from ucloudstorage import ClientException, connect
from sys import argv

logging.basicConfig(level=logging.ERROR)
logging.getLogger("requests").setLevel(logging.CRITICAL)
logging.getLogger("ucloudstorage").setLevel(logging.CRITICAL)
logger = logging.getLogger(__name__)

container_name = argv[1]
index = argv[2] if len(argv) > 2 else 'index.html'
conn = connect()
try:
    container = conn.get_container(container_name)
    container.set_user_metadata('Color', 'Blue')
    container.enable_static_website(index=index, listings=True)
    container.enable_logging()

    container = conn.get_container(container_name)
    print("Public: %s" % container.is_public())
    for key, value in sorted(container.metadata.items()):
        print("%s: %s" % (key, value))

except ClientException as e:
    logger.error("Failed to update container '%s': %s", container_name, e)
finally:
    conn.close()
