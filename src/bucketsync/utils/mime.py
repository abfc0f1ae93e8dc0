"""Content-Type detection for uploaded files."""

import mimetypes

DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

# Number of leading bytes inspected when the extension is unknown
SNIFF_LENGTH = 512


def detect_content_type(path: str) -> str:
    """Return the Content-Type of the file at ``path``.

    The extension registry is consulted first; unknown extensions fall back
    to inspecting the head of the file.
    """
    content_type, encoding = mimetypes.guess_type(path)
    if content_type and not encoding:
        return content_type

    with open(path, "rb") as f:
        head = f.read(SNIFF_LENGTH)

    if not head:
        return TEXT_CONTENT_TYPE
    if b"\x00" in head:
        return DEFAULT_CONTENT_TYPE
    try:
        head.decode("utf-8")
    except UnicodeDecodeError as e:
        # A multi-byte sequence cut at the sniff boundary is still text
        if e.start < len(head) - 3:
            return DEFAULT_CONTENT_TYPE
    return TEXT_CONTENT_TYPE
