"""
Embedded tag parsing for audio files.
Decodes ID3v2.3 / ID3v2.4 title, artist, album and cover art from a byte prefix.
Malformed input never raises; parsing degrades to a partial or empty result.
"""

import logging

from tagdeck.core.track import Artwork, ParsedTag


logger = logging.getLogger(__name__)

TAG_MAGIC = b"ID3"
HEADER_SIZE = 10
FRAME_HEADER_SIZE = 10
EXTENDED_HEADER_FLAG = 0x40
SUPPORTED_VERSIONS = (3, 4)
DEFAULT_READ_LIMIT = 1024 * 1024

ENCODING_LATIN1 = 0
ENCODING_UTF16 = 1
ENCODING_UTF16BE = 2
ENCODING_UTF8 = 3

TEXT_FRAMES = {
    "TIT2": "title",
    "TPE1": "artist",
    "TALB": "album",
}
PICTURE_FRAME = "APIC"
PADDING_FRAME = "\x00\x00\x00\x00"


def read_synchsafe(data, offset=0):
    """
    Read a 28-bit synchsafe integer (7 significant bits per byte, MSB first).

    Args:
        data: Byte buffer
        offset: Position of the first of the four size bytes

    Returns:
        Decoded integer
    """
    b = data[offset:offset + 4]
    return ((b[0] & 0x7F) << 21) | ((b[1] & 0x7F) << 14) | ((b[2] & 0x7F) << 7) | (b[3] & 0x7F)


def read_uint32(data, offset=0):
    """Read a plain 32-bit big-endian integer"""
    return int.from_bytes(data[offset:offset + 4], "big")


def _strip_nulls(text):
    return text.rstrip("\x00")


def decode_text_frame(body):
    """
    Decode the body of a text frame (encoding byte followed by text).

    Args:
        body: Raw frame body bytes

    Returns:
        Decoded string with trailing null padding removed, or "" if nothing decodes
    """
    if not body:
        return ""
    encoding = body[0]
    data = bytes(body[1:])
    try:
        if encoding == ENCODING_LATIN1:
            return _strip_nulls(data.decode("latin-1"))
        if encoding == ENCODING_UTF16:
            return _strip_nulls(data.decode("utf-16"))
        if encoding == ENCODING_UTF16BE:
            # No byte-order mark on the wire; prepend a big-endian one
            return _strip_nulls((b"\xfe\xff" + data).decode("utf-16"))
        if encoding == ENCODING_UTF8:
            return _strip_nulls(data.decode("utf-8"))
    except (UnicodeDecodeError, LookupError) as exc:
        logger.debug("Text frame with encoding %d did not decode: %s", encoding, exc)

    try:
        return _strip_nulls(data.decode("utf-8", errors="replace"))
    except (UnicodeDecodeError, LookupError):
        return ""


def _find_terminator(view, start, wide):
    """Return the index of the string terminator, or len(view) if there is none"""
    if not wide:
        end = view.find(b"\x00", start)
        return len(view) if end < 0 else end
    i = start
    while i + 1 < len(view):
        if view[i] == 0 and view[i + 1] == 0:
            return i
        i += 2
    return len(view)


def parse_picture_frame(body):
    """
    Parse an attached-picture frame.

    Layout: encoding byte, ASCII MIME type + one null, picture type byte,
    description + terminator (one null for 8-bit text, two for 16-bit text),
    then the image bytes.

    Args:
        body: Raw frame body bytes

    Returns:
        Artwork with the untouched image payload, or None if the frame is empty
    """
    view = bytes(body)
    if not view:
        return None
    encoding = view[0]

    mime_end = _find_terminator(view, 1, wide=False)
    mime = view[1:mime_end].decode("ascii", errors="ignore") or "image/jpeg"

    # Skip the mime terminator and the picture type byte
    desc_start = mime_end + 2
    wide = encoding in (ENCODING_UTF16, ENCODING_UTF16BE)
    desc_end = _find_terminator(view, desc_start, wide)
    data_start = desc_end + (2 if wide else 1)

    return Artwork(data=view[data_start:], mime_type=mime)


def parse_tag(buffer):
    """
    Extract title, artist, album and cover art from the start of an audio file.

    Args:
        buffer: Bytes from the beginning of the file (a capped prefix is enough)

    Returns:
        ParsedTag. Empty when the buffer carries no ID3v2 tag.
    """
    buf = memoryview(buffer)
    result = ParsedTag()

    if len(buf) < HEADER_SIZE or bytes(buf[0:3]) != TAG_MAGIC:
        return result

    version = buf[3]
    if version not in SUPPORTED_VERSIONS:
        logger.debug("Unsupported ID3v2 version %d", version)
        return result

    flags = buf[5]
    tag_size = read_synchsafe(buf, 6)
    offset = HEADER_SIZE

    if flags & EXTENDED_HEADER_FLAG:
        if offset + 4 > len(buf):
            return result
        if version == 4:
            ext_size = read_synchsafe(buf, offset)
        else:
            ext_size = read_uint32(buf, offset)
        offset += 4 + ext_size

    # Declared size is counted from the first frame
    end = min(offset + tag_size, len(buf))

    while offset + FRAME_HEADER_SIZE <= end:
        frame_id = bytes(buf[offset:offset + 4]).decode("latin-1")
        if frame_id == PADDING_FRAME:
            break

        if version == 4:
            frame_size = read_synchsafe(buf, offset + 4)
        else:
            frame_size = read_uint32(buf, offset + 4)

        frame_start = offset + FRAME_HEADER_SIZE
        frame_end = frame_start + frame_size
        if frame_end > end:
            logger.debug("Frame %r overruns the tag boundary; stopping", frame_id)
            break

        body = buf[frame_start:frame_end]
        if frame_id in TEXT_FRAMES:
            text = decode_text_frame(body)
            if text:
                setattr(result, TEXT_FRAMES[frame_id], text)
        elif frame_id == PICTURE_FRAME:
            artwork = parse_picture_frame(body)
            if artwork is not None:
                result.artwork = artwork

        offset = frame_end

    return result
