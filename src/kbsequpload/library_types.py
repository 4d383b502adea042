"""KBaseAssembly library records and the Shock handles they reference."""

import json
import os
from enum import Enum
from typing import Any, Dict, Optional

from .errors import UnknownLibraryTypeError

HANDLE_TO_BE_UPLOADED = "to-be-uploaded"
HANDLE_TYPE_SHOCK = "shock"


class LibraryType(Enum):
    """KBaseAssembly output types."""
    PAIRED_END = "PairedEndLibrary"
    SINGLE_END = "SingleEndLibrary"
    REFERENCE = "ReferenceAssembly"

    @classmethod
    def parse(cls, value) -> "LibraryType":
        """Return the LibraryType named by value, or raise UnknownLibraryTypeError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownLibraryTypeError(f"Unrecognized output type: {value}") from None

    @property
    def handle_fields(self):
        """Names of the handle-valued fields of this library type, in order."""
        if self is LibraryType.PAIRED_END:
            return ("handle_1", "handle_2")
        return ("handle",)


class Handle:
    """Reference to one file uploaded to Shock.

    A handle starts as a placeholder pointing at a local file
    (type ``to-be-uploaded``). Uploading fills in the Shock url and node id
    and clears the local path; registration with the handle service adds
    the handle id (``hid``).
    """

    def __init__(
        self,
        file_name: str,
        full_path_file: Optional[str] = None,
        type: str = HANDLE_TO_BE_UPLOADED,
        url: Optional[str] = None,
        id: Optional[str] = None,
        hid: Optional[str] = None,
    ):
        self.file_name = file_name
        self.full_path_file = full_path_file
        self.type = type
        self.url = url
        self.id = id
        self.hid = hid

    @property
    def uploaded(self) -> bool:
        """True once the file has been stored in Shock and has a node id."""
        return self.type == HANDLE_TYPE_SHOCK and self.id is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the handle to a dictionary, leaving out unset optional fields."""
        data = {"file_name": self.file_name, "type": self.type}
        if self.full_path_file is not None:
            data["full_path_file"] = self.full_path_file
        for key in ("url", "id", "hid"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Handle":
        """Create a Handle from a dictionary produced by to_dict."""
        return cls(
            file_name=data["file_name"],
            full_path_file=data.get("full_path_file"),
            type=data.get("type", HANDLE_TO_BE_UPLOADED),
            url=data.get("url"),
            id=data.get("id"),
            hid=data.get("hid"),
        )

    def __repr__(self) -> str:
        return f"Handle({self.to_dict()!r})"


class LibraryRecord:
    """A KBaseAssembly library with JSON serialization support.

    Handle-valued fields and scalar fields are kept apart: ``handles`` maps
    field names such as ``handle_1`` to Handle objects, ``fields`` holds
    everything else (``interleaved``, ``insert_size_mean``,
    ``reference_name``...). Fields that were never set are absent from the
    serialized record rather than null.
    """

    def __init__(self, library_type):
        self.library_type = LibraryType.parse(library_type)
        self.handles: Dict[str, Handle] = {}
        self.fields: Dict[str, Any] = {}

    def set_handle(self, field_name: str, handle: Handle) -> None:
        """Attach a handle to one of the handle fields of this library type.

        Raises:
            ValueError: field_name is not a handle field of this library type
        """
        if field_name not in self.library_type.handle_fields:
            raise ValueError(
                f"{field_name} is not a handle field of {self.library_type.value}"
            )
        self.handles[field_name] = handle

    def set_field(self, field_name: str, value: Any) -> None:
        """Set a scalar field such as insert_size_mean or reference_name.

        Raises:
            ValueError: field_name is reserved for a handle
        """
        if field_name in self.library_type.handle_fields:
            raise ValueError(f"{field_name} must be set with set_handle")
        self.fields[field_name] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to the KBaseAssembly object dictionary."""
        data = dict(self.fields)
        for field_name, handle in self.handles.items():
            data[field_name] = handle.to_dict()
        return data

    def to_json(self, filepath: Optional[str] = None) -> str:
        """Serialize the record to JSON.

        Args:
            filepath: Optional path to save JSON file

        Returns:
            JSON string representation
        """
        json_str = json.dumps(self.to_dict())
        if filepath:
            with open(filepath, "w") as f:
                f.write(json_str)
        return json_str

    @classmethod
    def from_dict(cls, library_type, data: Dict[str, Any]) -> "LibraryRecord":
        """Create a record of the given type from a KBaseAssembly object dictionary."""
        record = cls(library_type)
        for key, value in data.items():
            if key in record.library_type.handle_fields:
                record.set_handle(key, Handle.from_dict(value))
            else:
                record.set_field(key, value)
        return record

    @classmethod
    def from_json(cls, library_type, json_str_or_file: str) -> "LibraryRecord":
        """Create a record from a JSON string or file."""
        if os.path.exists(json_str_or_file):
            with open(json_str_or_file, "r") as f:
                data = json.load(f)
        else:
            data = json.loads(json_str_or_file)
        return cls.from_dict(library_type, data)
