from enum import Enum, IntEnum


class EntryFlag(IntEnum):
    PNG = 0x0
    SFM = 0x1
    ESFM = 0x3


class EntryKind(Enum):
    ICON = "icon"
    ENCRYPTED_METADATA = "encrypted_metadata"
    IGNORE = "ignore"


class ExtractStatus(Enum):
    SUCCESS = "success"
    NOTHING_TO_EXTRACT = "nothing_to_extract"
    FAILED = "failed"

    def __bool__(self):
        return self is not ExtractStatus.FAILED
