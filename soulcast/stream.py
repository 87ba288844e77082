"""Byte streams over files, caller-owned buffers and growable buffers."""

import struct
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Union

from .filesystem import File, FileMode, PathArg
from .mathx import Endian

_PIPE_CHUNK = 4096

BytesLike = Union[bytes, bytearray, memoryview]


class NumberKind(Enum):
    """Fixed-size numbers a stream can read and write, by struct format code."""

    UINT8 = "B"
    UINT16 = "H"
    UINT32 = "I"
    UINT64 = "Q"
    INT8 = "b"
    INT16 = "h"
    INT32 = "i"
    INT64 = "q"
    FLOAT32 = "f"
    FLOAT64 = "d"

    @property
    def size(self) -> int:
        return struct.calcsize("<" + self.value)

    def _format(self, endian: Endian) -> str:
        return ("<" if endian is Endian.LITTLE else ">") + self.value


def _to_bytes(data: Union[BytesLike, str]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class Stream(ABC):
    """A positioned sequence of bytes that may be read and written."""

    @abstractmethod
    def length(self) -> int:
        """Total number of bytes in the stream."""

    @abstractmethod
    def position(self) -> int:
        """Current read/write offset."""

    @abstractmethod
    def seek(self, position: int) -> int:
        """Move to an absolute offset and return the new position."""

    @abstractmethod
    def is_open(self) -> bool: ...

    @abstractmethod
    def is_readable(self) -> bool: ...

    @abstractmethod
    def is_writable(self) -> bool: ...

    @abstractmethod
    def _read_data(self, length: int) -> bytes:
        """Read at most length bytes."""

    @abstractmethod
    def _write_data(self, data: bytes) -> int:
        """Write data and return how many bytes were written."""

    def pipe(self, to: "Stream", length: int) -> int:
        """Copy up to length bytes from this stream into another; returns bytes written."""
        result = 0
        while length > 0:
            step = min(length, _PIPE_CHUNK)
            chunk = self.read(step)
            wrote = to.write(chunk)
            result += wrote
            length -= step
            if len(chunk) < step or wrote < len(chunk):
                break
        return result

    def read(self, length: int) -> bytes:
        """Read at most length bytes."""
        if length <= 0:
            return b""
        return self._read_data(length)

    def read_string(self, length: int = -1) -> str:
        """Read a string; a negative length reads up to a NUL byte or the end.

        With a non-negative length exactly that many characters are returned,
        NUL-padded where the stream ran out.
        """
        if length < 0:
            collected = bytearray()
            while True:
                byte = self.read(1)
                if not byte or byte == b"\0":
                    break
                collected += byte
            return collected.decode("utf-8", errors="replace")

        raw = self.read(length)
        raw += b"\0" * (length - len(raw))
        return raw.decode("utf-8", errors="replace")

    def read_line(self) -> str:
        """Read up to a newline, a NUL byte or the end; the terminator is dropped."""
        collected = bytearray()
        while True:
            byte = self.read(1)
            if not byte or byte in (b"\n", b"\0"):
                break
            collected += byte
        return collected.decode("utf-8", errors="replace")

    def write(self, data: Union[BytesLike, str]) -> int:
        """Write bytes, or a string as UTF-8; returns how many bytes were written."""
        raw = _to_bytes(data)
        if not raw:
            return 0
        return self._write_data(raw)

    def read_value(self, kind: NumberKind, endian: Endian = Endian.LITTLE):
        """Read one number; raises EOFError when the stream holds too few bytes."""
        raw = self.read(kind.size)
        if len(raw) < kind.size:
            raise EOFError(
                f"needed {kind.size} bytes for {kind.name}, got {len(raw)}"
            )
        return struct.unpack(kind._format(endian), raw)[0]

    def write_value(self, kind: NumberKind, value, endian: Endian = Endian.LITTLE) -> int:
        """Write one number; returns how many bytes were written."""
        return self.write(struct.pack(kind._format(endian), value))


class FileStream(Stream):
    """Reads and writes through a File handle."""

    def __init__(
        self,
        source: Union[File, PathArg, None] = None,
        mode: FileMode = FileMode.OPEN_READ,
    ) -> None:
        self._file: Optional[File]
        if source is None or isinstance(source, File):
            self._file = source
        else:
            try:
                self._file = File.open(source, mode)
            except OSError:
                self._file = None

    def length(self) -> int:
        return self._file.length() if self._file else 0

    def position(self) -> int:
        return self._file.position() if self._file else 0

    def seek(self, position: int) -> int:
        return self._file.seek(position) if self._file else 0

    def is_open(self) -> bool:
        return self._file is not None

    def is_readable(self) -> bool:
        return self._file is not None and self._file.mode is not FileMode.CREATE_WRITE

    def is_writable(self) -> bool:
        return self._file is not None and self._file.mode is not FileMode.OPEN_READ

    def _read_data(self, length: int) -> bytes:
        return self._file.read(length) if self._file else b""

    def _write_data(self, data: bytes) -> int:
        return self._file.write(data) if self._file else 0

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "FileStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class MemoryStream(Stream):
    """Moves over a caller-owned buffer; read-only buffers cannot be written."""

    def __init__(self, data: BytesLike = b"", length: Optional[int] = None) -> None:
        self._view = memoryview(data).cast("B")
        self._length = len(self._view) if length is None else max(0, min(length, len(self._view)))
        self._position = 0

    def length(self) -> int:
        return self._length

    def position(self) -> int:
        return self._position

    def seek(self, position: int) -> int:
        self._position = max(0, min(position, self._length))
        return self._position

    def is_open(self) -> bool:
        return self._length > 0

    def is_readable(self) -> bool:
        return self._length > 0

    def is_writable(self) -> bool:
        return not self._view.readonly and self._length > 0

    def data(self) -> memoryview:
        """The underlying buffer."""
        return self._view[: self._length]

    def _read_data(self, length: int) -> bytes:
        if self._position >= self._length:
            return b""
        end = min(self._position + length, self._length)
        chunk = bytes(self._view[self._position:end])
        self._position = end
        return chunk

    def _write_data(self, data: bytes) -> int:
        if self._view.readonly or self._position >= self._length:
            return 0
        count = min(len(data), self._length - self._position)
        self._view[self._position:self._position + count] = data[:count]
        self._position += count
        return count


class BufferStream(Stream):
    """Reads and writes an internal buffer that grows as it is written."""

    def __init__(self, capacity: int = 0) -> None:
        self._buffer = bytearray(max(0, capacity))
        self._position = 0

    def length(self) -> int:
        return len(self._buffer)

    def position(self) -> int:
        return self._position

    def seek(self, position: int) -> int:
        self._position = max(0, min(position, len(self._buffer)))
        return self._position

    def is_open(self) -> bool:
        return True

    def is_readable(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return True

    def resize(self, length: int) -> None:
        """Grow with zeros or truncate the buffer to length bytes."""
        length = max(0, length)
        if length < len(self._buffer):
            del self._buffer[length:]
        else:
            self._buffer.extend(bytes(length - len(self._buffer)))

    def clear(self) -> None:
        self._buffer.clear()
        self._position = 0

    def data(self) -> bytearray:
        """The internal buffer."""
        return self._buffer

    def _read_data(self, length: int) -> bytes:
        end = min(self._position + length, len(self._buffer))
        if end <= self._position:
            return b""
        chunk = bytes(self._buffer[self._position:end])
        self._position = end
        return chunk

    def _write_data(self, data: bytes) -> int:
        end = self._position + len(data)
        if end > len(self._buffer):
            self.resize(end)
        self._buffer[self._position:end] = data
        self._position = end
        return len(data)