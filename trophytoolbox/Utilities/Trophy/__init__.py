from .enums import EntryFlag, EntryKind, ExtractStatus
from .NPBind import resolve_np_comm_id, has_valid_sentinel
from .TRPReader import TRPReader, TrpEntry, TRPError, InvalidMagicError, TRPFormatError, TRPSeekError
from .TRPExtractor import TRPExtractor, classify
from .TRPCreator import Archiver, TRPCreator
from .ESMFDecrypter import ESMFDecrypter
from .Utils import Utils
