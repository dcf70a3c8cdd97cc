"""Requesting cover images over a data channel."""

from __future__ import annotations

import struct

from .spotify_id import FileId

CMD_IMAGE = 0x19


def cover_request(channel_id: int, file: FileId) -> bytes:
    """The body of the packet that asks for image ``file`` on channel ``channel_id``.

    The packet is sent with command ``CMD_IMAGE``; the image arrives on the channel.
    """
    return struct.pack(">HH", channel_id, 0) + file.raw