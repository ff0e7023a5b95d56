"""Minimal example demonstrating indentlog context and groups."""

from __future__ import annotations

import time

import indentlog


def main() -> None:
    indentlog.configure({"level": "DEBUG", "stream": "stdout"})

    logger = indentlog.get_context_logger("front", " [orders]", app="indentlog-demo")
    for order_id in range(1, 4):
        order_log = logger.with_group("order").with_(id=order_id)
        order_log.info("processed order", total=order_id * 19.99, paid=True)
        time.sleep(0.1)

    indentlog.get_logger("examples.stdlib").warning("via logging", extra={"retries": 2})


if __name__ == "__main__":
    main()
