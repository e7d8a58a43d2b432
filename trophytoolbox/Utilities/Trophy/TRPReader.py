import os
import hashlib
import struct
import logging
from .Utils import Utils

logger = logging.getLogger(__name__)

TRP_MAGIC = 0xDCA24D00
HEADER_FORMAT = '>IIQIII20sI44s'
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
ENTRY_FORMAT = '>32sQQI12s'
ENTRY_SIZE = struct.calcsize(ENTRY_FORMAT)
SHA1_OFFSET = 28
SHA1_LEN = 20


class TRPError(Exception):
    pass


class InvalidMagicError(TRPError):
    pass


class TRPFormatError(TRPError):
    pass


class TRPSeekError(TRPError):
    pass


class TrpEntry:
    def __init__(self, index, name, offset, size, flag):
        self.index = index
        self.name = name
        self.offset = offset
        self.size = size
        self.flag = flag

    def __repr__(self):
        return f"TrpEntry(index={self.index}, name={self.name!r}, offset=0x{self.offset:X}, size={self.size}, flag={self.flag})"


class TRPReader:
    class TRPHeader:
        def __init__(self, raw):
            (self.magic,
             self.version,
             self.file_size,
             self.entry_num,
             self.entry_size,
             self.dev_flag,
             self.sha1,
             self.key_index,
             self.padding) = struct.unpack(HEADER_FORMAT, raw)

    def __init__(self, filename):
        self._inputfile = os.fspath(filename)
        self._fs = None
        self._hdr = None
        self._actual_size = 0

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def open(self):
        """Open the container and validate its header and entry table bounds.

        ``OSError`` from opening the file propagates unchanged. A bad magic
        raises ``InvalidMagicError`` and a truncated or oversized table raises
        ``TRPFormatError``; the file is closed again in both cases.
        """
        self._fs = open(self._inputfile, 'rb')
        try:
            self._actual_size = os.fstat(self._fs.fileno()).st_size
            self._hdr = self.read_header()
        except Exception:
            self.close()
            raise
        return self

    def close(self):
        if self._fs is not None:
            self._fs.close()
            self._fs = None

    def read_header(self):
        self._fs.seek(0)
        raw = self._fs.read(HEADER_SIZE)
        if len(raw) < HEADER_SIZE:
            raise TRPFormatError(f"File too small for a TRP header: {len(raw)} bytes")

        hdr = self.TRPHeader(raw)
        if hdr.magic != TRP_MAGIC:
            raise InvalidMagicError(f"Invalid TRP magic 0x{hdr.magic:08X} in {self._inputfile}")

        logger.debug(f"Header: version={hdr.version}, file_size={hdr.file_size}, entry_num={hdr.entry_num}, entry_size={hdr.entry_size}")

        if hdr.entry_size < ENTRY_SIZE:
            raise TRPFormatError(f"Entry size {hdr.entry_size} is smaller than {ENTRY_SIZE} bytes")
        table_end = HEADER_SIZE + hdr.entry_num * hdr.entry_size
        if table_end > self._actual_size:
            raise TRPFormatError(f"Entry table of {hdr.entry_num} entries runs past end of file ({table_end} > {self._actual_size})")
        return hdr

    def entries(self):
        for i in range(self._hdr.entry_num):
            self._fs.seek(HEADER_SIZE + i * self._hdr.entry_size)
            raw = self._fs.read(ENTRY_SIZE)
            if len(raw) < ENTRY_SIZE:
                logger.critical("Failed to seek to TRP entry offset")
                raise TRPSeekError(f"Truncated entry {i} in {self._inputfile}")
            name, offset, size, flag, _padding = struct.unpack(ENTRY_FORMAT, raw)
            yield TrpEntry(i, Utils.read_null_terminated_name(name), offset, size, flag)

    def read_payload(self, offset, length):
        if offset < 0 or length < 0 or offset + length > self._actual_size:
            raise TRPSeekError(f"Range 0x{offset:X}+{length} lies outside {self._inputfile} ({self._actual_size} bytes)")
        self._fs.seek(offset)
        data = self._fs.read(length)
        if len(data) != length:
            raise TRPSeekError(f"Short read at 0x{offset:X}: expected {length}, got {len(data)}")
        return data

    @property
    def header(self):
        return self._hdr

    @property
    def version(self):
        return self._hdr.version

    @property
    def file_size(self):
        return self._hdr.file_size

    @property
    def file_count(self):
        return self._hdr.entry_num

    @property
    def sha1(self):
        if self.version <= 1:
            return None
        return Utils.byte_array_to_hex_string(self._hdr.sha1)

    def calculate_sha1(self):
        if self.version <= 1:
            return None
        self._fs.seek(0)
        data = self._fs.read()
        sha1 = hashlib.sha1()
        sha1.update(data[:SHA1_OFFSET])
        sha1.update(b'\x00' * SHA1_LEN)
        sha1.update(data[SHA1_OFFSET + SHA1_LEN:])
        return sha1.hexdigest().upper()

    def verify_integrity(self):
        """Return ``True``/``False`` for the digest check, ``None`` for version 1 files."""
        if self.file_size != self._actual_size:
            logger.warning(f"File size mismatch. Expected: {self.file_size}, Actual: {self._actual_size}")
        calculated = self.calculate_sha1()
        if calculated is None:
            return None
        if calculated != self.sha1:
            logger.warning(f"SHA1 mismatch. Calculated: {calculated}, Expected: {self.sha1}")
            return False
        return True
