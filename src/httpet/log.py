"""Logging setup.

Module loggers follow the ``httpet.<area>`` naming used throughout the
package (``httpet.server``, ``httpet.pets``, ``httpet.access``).
"""

import logging

_QUIET_LOGGERS = ("pounce", "asyncio")


def setup_logging(debug: bool = False) -> None:
    """Configure the root logger once at startup.

    Debug mode logs everything at DEBUG. Otherwise httpet logs at INFO
    and the server's own loggers are held at WARNING.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        force=True,
    )
    if not debug:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
