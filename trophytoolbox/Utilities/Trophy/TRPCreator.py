import os
import re
import hashlib
import struct
import logging
from io import BytesIO
from .enums import EntryFlag
from .TRPReader import TRP_MAGIC, HEADER_FORMAT, HEADER_SIZE, ENTRY_FORMAT, ENTRY_SIZE, SHA1_OFFSET, SHA1_LEN
from .Utils import Utils

logger = logging.getLogger(__name__)

NAME_LEN = 32


class Archiver:
    def __init__(self, index, name, offset, size, bytes_data, flag=EntryFlag.PNG):
        self.index = index
        self.name = name
        self.offset = offset
        self.size = size
        self.bytes = bytes_data
        self.flag = flag


def flag_for_name(name):
    upper = name.upper()
    if upper.endswith(".ESFM"):
        return EntryFlag.ESFM
    if upper.endswith(".SFM"):
        return EntryFlag.SFM
    return EntryFlag.PNG


class TRPCreator:
    def __init__(self, version=3):
        self._trophyList = []
        self._setversion = version
        self.dev_flag = 0

    @property
    def set_version(self):
        return self._setversion

    @set_version.setter
    def set_version(self, value):
        self._setversion = value

    def create(self, filename, contents):
        """Pack the files at ``contents`` into a container at ``filename``."""
        contents = self.sort_list(contents)
        archivers = []
        for m_Index, path in enumerate(contents):
            fileName = os.path.basename(path)
            with open(path, 'rb') as f:
                m_Bytes = f.read()
            archivers.append(Archiver(m_Index, fileName, 0, len(m_Bytes), m_Bytes, flag_for_name(fileName)))
        self.create_from_list(filename, archivers)

    def create_from_list(self, filename, contents):
        data = self.build(contents)
        with open(filename, 'wb') as f:
            f.write(data)
        logger.info(f"File '{filename}' created successfully.")

    def build(self, contents):
        if self._setversion < 1 or self._setversion > 3:
            raise ValueError("File version must be one of these { 1, 2, 3 }.")
        self._trophyList = []
        num2 = HEADER_SIZE + ENTRY_SIZE * len(contents)
        for m_Index, content in enumerate(contents):
            if len(content.name.encode('ascii')) >= NAME_LEN:
                raise ValueError(f"Entry name too long: {content.name}")
            size = len(content.bytes)
            self._trophyList.append(Archiver(m_Index, content.name, num2, size, content.bytes, content.flag))
            num2 += size + Utils.get_pads(size, 16)

        memoryStream = BytesIO()
        memoryStream.write(self.get_header(num2, len(contents)))
        memoryStream.write(self.get_header_files())
        memoryStream.write(self.get_bytes())
        if self._setversion > 1:
            memoryStream.seek(SHA1_OFFSET)
            memoryStream.write(hashlib.sha1(memoryStream.getvalue()).digest())
        return memoryStream.getvalue()

    def sort_list(self, alist):
        patterns = [
            "TROPCONF.(E?)SFM",
            "TROP.(E?)SFM",
            "TROP_\\d+.(E?)SFM",
            "ICON0.PNG",
            "ICON0_\\d+.PNG",
            "GR\\d+.PNG",
            "GR\\d+_\\d+.PNG",
            "TROP\\d+.PNG"
        ]
        arrayList1, arrayList2, arrayList3, arrayList4, arrayList5 = [], [], [], [], []
        seen = set()
        for pattern in patterns:
            for item in alist:
                base = os.path.basename(item)
                if item in seen or not re.fullmatch(pattern, base, re.IGNORECASE):
                    continue
                seen.add(item)
                if base.upper().startswith("TROPCONF"):
                    arrayList1.append(item)
                elif base.upper().endswith("SFM"):
                    arrayList2.append(item)
                elif base.upper().startswith("ICON"):
                    arrayList3.append(item)
                elif base.upper().startswith("GR"):
                    arrayList4.append(item)
                elif base.upper().endswith("PNG"):
                    arrayList5.append(item)
        rest = [item for item in alist if item not in seen]
        arrayList2.sort()
        arrayList3.sort()
        arrayList4.sort()
        arrayList5.sort()
        return arrayList1 + arrayList2 + arrayList3 + arrayList4 + arrayList5 + sorted(rest)

    def get_header_files(self):
        memoryStream = BytesIO()
        for item in self._trophyList:
            memoryStream.write(struct.pack(ENTRY_FORMAT, item.name.encode('ascii'), item.offset, item.size, int(item.flag), bytes(12)))
        return memoryStream.getvalue()

    def get_bytes(self):
        memoryStream = BytesIO()
        for item in self._trophyList:
            memoryStream.write(item.bytes)
            memoryStream.write(bytes(Utils.get_pads(len(item.bytes), 16)))
        return memoryStream.getvalue()

    def get_header(self, file_size, files_count):
        sha1 = bytes(SHA1_LEN)
        if self._setversion == 3:
            padding = b'010'.ljust(44, b'\x00')
        else:
            padding = bytes(44)
        return struct.pack(HEADER_FORMAT, TRP_MAGIC, self._setversion, file_size, files_count, ENTRY_SIZE, self.dev_flag, sha1, 0, padding)
