import logging
import os

import uvicorn

from protocol_z_cash.api.main import app
from protocol_z_cash.core.observability.logging_setup import configure_logging

log = logging.getLogger("protocol_z_cash")


def main() -> None:
    configure_logging()

    # IPv6 any address by default
    host = os.getenv("PROTOCOL_HOST", "::")
    port = int(os.getenv("PROTOCOL_PORT", "8080"))
    log.debug("Listening on [%s]:%d", host, port)

    # log_config=None keeps the handlers installed above
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
