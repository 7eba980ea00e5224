"""Splits a raw mov_text subtitle dump into its length-prefixed packets."""

import logging
import struct
from typing import Iterator

logger = logging.getLogger(__name__)

_LENGTH_PREFIX = struct.Struct('>H')


class PacketFramer:
    """
    Iterates over the payloads of a mov_text packet stream.

    Each packet is a 2-byte big-endian length followed by that many payload
    bytes. Iteration always starts from the first byte, so the same framer
    can be walked more than once.
    """

    def __init__(self, data: bytes):
        self.data = data

    def __iter__(self) -> Iterator[bytes]:
        data = self.data
        offset = 0
        total = len(data)
        while total - offset >= _LENGTH_PREFIX.size:
            (length,) = _LENGTH_PREFIX.unpack_from(data, offset)
            offset += _LENGTH_PREFIX.size
            if length > total - offset:
                logger.debug(f"Packet at byte {offset - _LENGTH_PREFIX.size} claims {length} bytes, "
                             f"only {total - offset} remain. Stopping.")
                return
            yield data[offset:offset + length]
            offset += length
