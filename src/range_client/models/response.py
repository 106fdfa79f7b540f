"""
Range response payload helpers.

Some range server implementations end the payload with a newline and some do
not. RangeResponse normalizes the final newline so splitting is uniform.
"""


class RangeResponse:
    """Raw payload of a successful query, from which lines can be obtained."""

    __slots__ = ("_buf",)

    def __init__(self, buf: bytes):
        self._buf = buf

    @classmethod
    def from_bytes(cls, buf: bytes) -> "RangeResponse":
        if not buf or not buf.endswith(b"\n"):
            buf = buf + b"\n"
        return cls(buf)

    @property
    def raw(self) -> bytes:
        """Normalized payload, always ending with a single newline terminator."""
        return self._buf

    def split(self) -> list[str]:
        """
        Return one string per result line.

        Examples:
            >>> RangeResponse.from_bytes(b"a\\nb\\nc").split()
            ['a', 'b', 'c']
            >>> RangeResponse.from_bytes(b"\\n").split()
            []
        """
        if len(self._buf) == 1:
            # Only the terminator is left: no results.
            return []
        # Undecodable bytes survive as surrogates; encode with the same
        # handler to recover them.
        return self._buf.decode("utf-8", errors="surrogateescape").split("\n")[:-1]

    def __len__(self) -> int:
        return len(self.split())

    def __repr__(self) -> str:
        return f"RangeResponse(bytes={len(self._buf)})"


def split_lines(buf: bytes) -> list[str]:
    """Split a raw range payload into result lines."""
    return RangeResponse.from_bytes(buf).split()
