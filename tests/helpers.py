from __future__ import annotations

RESET = "\x1b[0m"


def gray(text: str) -> str:
    return f"\x1b[90m{text}{RESET}"


def blue(text: str) -> str:
    return f"\x1b[34m{text}{RESET}"


def info() -> str:
    return f"\x1b[32mINFO{RESET} "


def debug() -> str:
    return f"\x1b[96mDEBUG{RESET}"


def warn() -> str:
    return f"\x1b[33mWARN{RESET} "


def error() -> str:
    return f"\x1b[91mERROR{RESET}"
