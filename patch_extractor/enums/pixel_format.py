"""Pixel format enum."""

from enum import StrEnum


class PixelFormat(StrEnum):
    """Packed 4-byte-per-pixel formats, named by in-memory channel order."""

    BGRA32 = "BGRA32"
    RGBA32 = "RGBA32"
    ARGB32 = "ARGB32"

    @property
    def bytes_per_pixel(self) -> int:
        """
        Get the number of bytes a single pixel occupies.

        Returns:
            int: Always 4 for the supported packed formats.
        """
        return 4

    @property
    def channel_order(self) -> str:
        """
        Get the channel letters in memory order.

        Returns:
            str: Channel order, e.g. "BGRA".
        """
        return self.value[:4]

    def channel_indices_from(self, other: "PixelFormat") -> list[int]:
        """
        Get the indices that reorder pixels of `other` into this format.

        Args:
            other (PixelFormat): Format of the source pixels.

        Returns:
            list[int]: Channel indices to apply to the last axis of `other` pixels.
        """
        return [other.channel_order.index(channel) for channel in self.channel_order]
