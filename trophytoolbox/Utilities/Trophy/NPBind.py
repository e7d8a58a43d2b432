import os
import logging

logger = logging.getLogger(__name__)

NPBIND_BASE_OFFSET = 0x84
NPBIND_RECORD_SIZE = 0x180
NP_COMM_ID_LEN = 12
TOKEN_LEN = 16
NP_COMM_ID_SENTINEL = b'NP'

EMPTY_TOKEN = bytes(TOKEN_LEN)


def npbind_path(title_path):
    return os.path.join(title_path, "sce_sys", "npbind.dat")


def resolve_np_comm_id(binding_file_path, index):
    """Return the 16 byte key token for the trophy container at ``index``.

    The binding file holds one 0x180 byte record per trophy container,
    starting at 0x84; the first 12 bytes of a record are the NP communication
    id. The token is that id zero-filled to 16 bytes. A missing binding file
    or one too short to hold the whole record yields an all-zero token, which
    later fails the sentinel check.
    """
    offset = NPBIND_BASE_OFFSET + index * NPBIND_RECORD_SIZE
    try:
        fs = open(binding_file_path, 'rb')
    except OSError:
        return EMPTY_TOKEN

    with fs:
        file_size = os.fstat(fs.fileno()).st_size
        if index < 0 or file_size < offset + NPBIND_RECORD_SIZE:
            logger.critical(f"Failed to seek to NPbind offset 0x{offset:X} in {binding_file_path}")
            return EMPTY_TOKEN
        fs.seek(offset)
        np_comm_id = fs.read(NP_COMM_ID_LEN)

    logger.debug(f"Resolved NP communication id {np_comm_id!r} for index {index}")
    return np_comm_id.ljust(TOKEN_LEN, b'\x00')


def has_valid_sentinel(np_comm_id):
    return np_comm_id[:len(NP_COMM_ID_SENTINEL)] == NP_COMM_ID_SENTINEL
