"""Growable ring buffers, linked-list buffers, pools and logging helpers."""

__version__ = "0.1.0"

__all__ = [
    "bytebuffer",
    "byteslice",
    "elastic",
    "errors",
    "goroutine",
    "linkedlist",
    "logging",
    "ring",
    "ringpool",
]