"""Binary constants of the MGIc texture container."""

from __future__ import annotations

# Outer record
CONTAINER_VERSION = 65536
CONTAINER_MAGIC = b"MGIc"
RECORD_COUNT = 1
HEADER_PADDING = 16
# version(4) + magic(4) + total_length(4) + record_count(4) + padding(16)
OUTER_HEADER_SIZE = 32

# PIC chunk: tag(4) + zero(4) + length(4) + sub-chunk count(4)
PIC_TAG = b"PIC "
PIC_HEADER_SIZE = 16

# Sub-chunk tags
TAG_VERSION = b"ver "
TAG_FLAGS = b"flgs"
TAG_WIDTH = b"wdth"
TAG_HEIGHT = b"hgt "
TAG_MIPS = b"mips"
TAG_SIZE = b"size"
TAG_FRAMES = b"frms"
TAG_DEPTH = b"dpth"
TAG_BITS = b"bits"

# tag(4) + length(4) + u8 value
BYTE_CHUNK_SIZE = 9
# tag(4) + length(4) + u32 value
U32_CHUNK_SIZE = 12
# tag(4) + length(4), payload follows
BITS_CHUNK_OVERHEAD = 8

VARIANT_B_FLAG = 0x80000000
FORMAT_CODE_MASK = 0x7FFFFFFF

# Row stride alignment (pixels) for uncompressed payloads
ROW_ALIGNMENT = 16

__all__ = [
    "CONTAINER_VERSION",
    "CONTAINER_MAGIC",
    "RECORD_COUNT",
    "HEADER_PADDING",
    "OUTER_HEADER_SIZE",
    "PIC_TAG",
    "PIC_HEADER_SIZE",
    "TAG_VERSION",
    "TAG_FLAGS",
    "TAG_WIDTH",
    "TAG_HEIGHT",
    "TAG_MIPS",
    "TAG_SIZE",
    "TAG_FRAMES",
    "TAG_DEPTH",
    "TAG_BITS",
    "BYTE_CHUNK_SIZE",
    "U32_CHUNK_SIZE",
    "BITS_CHUNK_OVERHEAD",
    "VARIANT_B_FLAG",
    "FORMAT_CODE_MASK",
    "ROW_ALIGNMENT",
]
