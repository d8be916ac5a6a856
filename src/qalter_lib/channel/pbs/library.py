# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Bindings to the PBS client library (IFL).

Only the calls needed to alter jobs are bound: connecting and disconnecting,
altering a job, retrieving per-attribute errors, locating a job, reading the
server error message and error number, and the security library lifecycle.
"""

import ctypes
import ctypes.util
from collections.abc import Sequence
from functools import lru_cache

from qalter_lib.core.config import CFG
from qalter_lib.core.error import QalterError
from qalter_lib.core.logger import get_logger
from qalter_lib.properties.attributes import AttributeEdit

logger = get_logger(__name__)

# value of `CS_SUCCESS` returned by the security library
CS_SUCCESS = 0


class Attrl(ctypes.Structure):
    """`struct attrl` / `struct attropl` of the PBS client library."""


Attrl._fields_ = [
    ("next", ctypes.POINTER(Attrl)),
    ("name", ctypes.c_char_p),
    ("resource", ctypes.c_char_p),
    ("value", ctypes.c_char_p),
    ("op", ctypes.c_int),
]


class EclAttrErr(ctypes.Structure):
    """`struct ecl_attrerr` of the PBS client library."""

    _fields_ = [
        ("ecl_attribute", ctypes.POINTER(Attrl)),
        ("ecl_errcode", ctypes.c_int),
        ("ecl_errmsg", ctypes.c_char_p),
    ]


class EclAttributeErrors(ctypes.Structure):
    """`struct ecl_attribute_errors` of the PBS client library."""

    _fields_ = [
        ("ecl_numerrors", ctypes.c_int),
        ("ecl_attrerr", ctypes.POINTER(EclAttrErr)),
    ]


class AttrlList:
    """
    Linked list of `struct attrl` built from attribute edits.

    The object owns the encoded strings and structures; it must be kept alive
    for as long as the list is used by the library.
    """

    def __init__(self, edits: Sequence[AttributeEdit]):
        self._nodes = (Attrl * len(edits))() if edits else None

        for i, edit in enumerate(edits):
            node = self._nodes[i]
            node.name = edit.name.encode()
            node.resource = edit.resource.encode() if edit.resource is not None else None
            node.value = edit.value.encode()
            # SET
            node.op = 0
            if i + 1 < len(edits):
                node.next = ctypes.pointer(self._nodes[i + 1])

    @property
    def head(self) -> ctypes._Pointer | None:
        """Pointer to the first element or None for an empty list."""
        if self._nodes is None:
            return None
        return ctypes.pointer(self._nodes[0])


def decode(value: bytes | None) -> str:
    """Decode a C string returned by the library."""
    return value.decode(errors="replace") if value else ""


class PBSLibrary:
    """
    Thin wrapper around the loaded PBS client library.
    """

    def __init__(self, lib: ctypes.CDLL):
        self._lib = lib
        self._libc = ctypes.CDLL(ctypes.util.find_library("c"))
        self._declare()

    @staticmethod
    @lru_cache(maxsize=1)
    def load() -> "PBSLibrary":
        """
        Load the PBS client library named in the configuration.

        Raises:
            QalterError: If the library cannot be loaded.
        """
        name = CFG.pbs_options.library
        try:
            lib = ctypes.CDLL(name)
        except OSError:
            found = ctypes.util.find_library("pbs")
            if not found:
                raise QalterError(f"Could not load the PBS client library '{name}'.")
            lib = ctypes.CDLL(found)

        logger.debug(f"Loaded PBS client library '{lib._name}'.")
        return PBSLibrary(lib)

    def _declare(self) -> None:
        """Declare argument and return types of the bound functions."""
        lib = self._lib

        lib.pbs_connect.argtypes = [ctypes.c_char_p]
        lib.pbs_connect.restype = ctypes.c_int

        lib.pbs_disconnect.argtypes = [ctypes.c_int]
        lib.pbs_disconnect.restype = ctypes.c_int

        lib.pbs_alterjob.argtypes = [
            ctypes.c_int,
            ctypes.c_char_p,
            ctypes.POINTER(Attrl),
            ctypes.c_char_p,
        ]
        lib.pbs_alterjob.restype = ctypes.c_int

        lib.pbs_get_attributes_in_error.argtypes = [ctypes.c_int]
        lib.pbs_get_attributes_in_error.restype = ctypes.POINTER(EclAttributeErrors)

        lib.pbs_geterrmsg.argtypes = [ctypes.c_int]
        lib.pbs_geterrmsg.restype = ctypes.c_char_p

        lib.pbs_locjob.argtypes = [ctypes.c_int, ctypes.c_char_p, ctypes.c_char_p]
        lib.pbs_locjob.restype = ctypes.c_void_p

        self._libc.free.argtypes = [ctypes.c_void_p]
        self._libc.free.restype = None

    @property
    def errno(self) -> int:
        """Current value of `pbs_errno`."""
        # newer versions of PBS keep `pbs_errno` thread-local
        if hasattr(self._lib, "__pbs_errno_location"):
            location = getattr(self._lib, "__pbs_errno_location")
            location.restype = ctypes.POINTER(ctypes.c_int)
            return location().contents.value
        return ctypes.c_int.in_dll(self._lib, "pbs_errno").value

    def connect(self, server: str) -> int:
        """Connect to a server. Returns the connection handle (<= 0 on failure)."""
        return self._lib.pbs_connect(server.encode() if server else None)

    def disconnect(self, handle: int) -> None:
        self._lib.pbs_disconnect(handle)

    def alterJob(self, handle: int, job_id: str, edits: Sequence[AttributeEdit]) -> int:
        """Alter a job. Returns zero on success."""
        attrl = AttrlList(edits)
        return self._lib.pbs_alterjob(handle, job_id.encode(), attrl.head, None)

    def getAttributesInError(self, handle: int) -> list[tuple[AttributeEdit, int, str]]:
        """Return the attributes refused in the last request sent over `handle`."""
        errors = self._lib.pbs_get_attributes_in_error(handle)
        if not errors:
            return []

        result = []
        for i in range(errors.contents.ecl_numerrors):
            entry = errors.contents.ecl_attrerr[i]
            attribute = entry.ecl_attribute.contents
            edit = AttributeEdit(
                name=decode(attribute.name),
                value=decode(attribute.value),
                resource=decode(attribute.resource) or None,
            )
            result.append((edit, entry.ecl_errcode, decode(entry.ecl_errmsg)))

        return result

    def getErrorMessage(self, handle: int) -> str:
        return decode(self._lib.pbs_geterrmsg(handle))

    def locateJob(self, handle: int, job_id: str) -> str | None:
        """Ask the server over `handle` where the job is located."""
        pointer = self._lib.pbs_locjob(handle, job_id.encode(), None)
        if not pointer:
            return None

        try:
            return decode(ctypes.string_at(pointer)) or None
        finally:
            self._libc.free(pointer)

    def initSecurity(self) -> bool:
        """Initialize the security library. Returns True on success."""
        # security library functions are missing in newer versions of PBS
        if not hasattr(self._lib, "CS_client_init"):
            return True
        return self._lib.CS_client_init() == CS_SUCCESS

    def closeSecurity(self) -> None:
        if hasattr(self._lib, "CS_close_app"):
            self._lib.CS_close_app()
