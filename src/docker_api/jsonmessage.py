"""
Docker JSON progress streams

Pull, push, import and build answer with a sequence of JSON objects such as
``{"status": "Downloading", "progress": "[==>  ]"}`` or
``{"stream": "Step 1/3 : FROM busybox\\n"}``. The objects are not always
newline separated and can be split across socket reads.
"""

import json
import logging
from typing import Any, BinaryIO, Dict, Iterator, Optional

from .exceptions import StreamError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

_decoder = json.JSONDecoder()


def iter_json_messages(fp, chunk_size: int = CHUNK_SIZE) -> Iterator[Any]:
    """
    Yield JSON values read from a binary stream

    Args:
        fp: Object with a read(size) method returning bytes
        chunk_size: Bytes to read at a time

    Raises:
        json.JSONDecodeError: If the stream ends inside a value or holds
            something that isn't JSON
    """
    buffer = ''
    pending = b''
    while True:
        chunk = fp.read(chunk_size)
        if not chunk:
            break

        # Multi-byte characters can straddle two reads
        pending += chunk
        try:
            text = pending.decode('utf-8')
            pending = b''
        except UnicodeDecodeError as e:
            if len(pending) - e.start > 3:
                raise
            text = pending[:e.start].decode('utf-8')
            pending = pending[e.start:]
        buffer += text

        while True:
            buffer = buffer.lstrip()
            if not buffer:
                break
            try:
                value, end = _decoder.raw_decode(buffer)
            except json.JSONDecodeError:
                # Incomplete value, wait for more data
                break
            yield value
            buffer = buffer[end:]

    buffer = buffer.lstrip()
    if pending or buffer:
        # Raises a JSONDecodeError describing the leftover
        _decoder.raw_decode(buffer + pending.decode('utf-8', errors='replace'))


def error_message(message: Dict[str, Any]) -> Optional[str]:
    """Error text of a message, preferring errorDetail"""
    error = message.get('error')
    detail = message.get('errorDetail')
    if isinstance(detail, dict) and detail.get('message'):
        return detail['message']
    return error or None


def render_json_stream(fp, out: Optional[BinaryIO] = None):
    """
    Write a JSON progress stream to out as text

    ``stream`` text is written as-is, progress bars end with a carriage
    return and statuses with a newline.

    Args:
        fp: Binary response stream
        out: Binary writable, None discards the output

    Raises:
        StreamError: If the daemon reports an error in the stream
    """
    def write(text: str):
        if out is not None:
            out.write(text.encode('utf-8'))

    for message in iter_json_messages(fp):
        if not isinstance(message, dict):
            logger.debug(f"Ignoring non-object stream message: {message!r}")
            continue

        status = message.get('status') or ''
        if message.get('stream'):
            write(message['stream'])
        elif message.get('progress'):
            write(f"{status} {message['progress']}\r")
        else:
            error = error_message(message)
            if error:
                raise StreamError(error)

        if status:
            write(f"{status}\n")
