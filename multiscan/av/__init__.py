"""Scanners for individual antivirus engines."""

__all__ = [
    "avast",
    "avira",
    "bitdefender",
    "clamav",
    "comodo",
    "drweb",
    "eset",
    "fsecure",
    "kaspersky",
    "mcafee",
    "sophos",
    "symantec",
    "trendmicro",
    "windefender",
]