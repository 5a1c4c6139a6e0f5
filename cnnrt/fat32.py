"""Reading files from the root directory of a FAT32 volume on a block device.

The device may be partitioned with an MBR or a GPT table. Files are looked up
by their 8.3 short name in the root directory that starts at cluster 2.
"""

import argparse
import struct
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

__all__ = [
    "BLOCK_SIZE",
    "MAX_FAT_SIZE",
    "FAT_BUF_LBA_SIZE",
    "END_OF_CHAIN",
    "Fat32Error",
    "BlockDevice",
    "BlockImage",
    "BootSector",
    "DirEntry",
    "long_to_short",
    "partition_first_lba",
    "Fat32Volume",
    "read_file",
    "main",
]

BLOCK_SIZE = 512
MAX_FAT_SIZE = 512
FAT_BUF_LBA_SIZE = MAX_FAT_SIZE * 4 // BLOCK_SIZE
END_OF_CHAIN = 0x0FFFFFF8
PARTITION_NO = 0

_PROTECTIVE_MBR_TYPE = 0xEE
_DELETED_MARK = 0xE5
_LONG_NAME_ATTR = 0x0F
_DIR_ENTRY_SIZE = 32
_ROOT_CLUSTER = 2
_MBR_TABLE_OFFSET = 446
_MBR_ENTRY_SIZE = 16
_MBR_ENTRIES = 4
_GPT_ENTRIES_LBA_OFFSET = 72
_GPT_ENTRY_SIZE = 128
_GPT_FIRST_LBA_OFFSET = 32

_BOOT_SECTOR = struct.Struct("<3s8sHBHBHHBHHHIIIHHIHH12sBBB4s11s8s")
_DIR_ENTRY = struct.Struct("<11sBBBHHHHHHHI")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


class Fat32Error(Exception):
    """Raised when the disk or the file system cannot be read as expected."""


class BlockDevice(Protocol):
    """Anything that hands out whole 512-byte blocks."""

    def read_blocks(self, lba: int, count: int) -> bytes: ...


class BlockImage:
    """A disk image held in memory and read in 512-byte blocks."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def read_blocks(self, lba: int, count: int) -> bytes:
        """Return ``count`` blocks starting at block ``lba``."""
        if lba < 0 or count < 0:
            raise Fat32Error(f"invalid block range: lba {lba}, count {count}")
        start = lba * BLOCK_SIZE
        end = start + count * BLOCK_SIZE
        if end > len(self._data):
            raise Fat32Error(
                f"blocks {lba}..{lba + count - 1} lie beyond the end of the image"
            )
        return self._data[start:end]


@dataclass(frozen=True)
class BootSector:
    """The BIOS parameter block at the start of a FAT32 volume."""

    jump_boot: bytes
    oem_name: bytes
    bytes_per_sector: int
    sectors_per_cluster: int
    reserved_sectors: int
    num_fats: int
    root_entry_count: int
    total_sectors_16: int
    media: int
    fat_size_16: int
    sectors_per_track: int
    num_heads: int
    hidden_sectors: int
    total_sectors_32: int
    fat_size_32: int
    ext_flags: int
    fs_version: int
    root_cluster: int
    fs_info: int
    backup_boot_sector: int
    reserved: bytes
    drive_number: int
    reserved1: int
    boot_signature: int
    volume_id: bytes
    volume_label: bytes
    fs_type: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "BootSector":
        """Parse the packed boot sector at the start of ``data``."""
        if len(data) < _BOOT_SECTOR.size:
            raise Fat32Error(
                f"boot sector needs {_BOOT_SECTOR.size} bytes, got {len(data)}"
            )
        return cls(*_BOOT_SECTOR.unpack_from(data, 0))


@dataclass(frozen=True)
class DirEntry:
    """One 32-byte short-name directory entry."""

    name: bytes
    attr: int
    nt_res: int
    create_time_tenth: int
    create_time: int
    create_date: int
    last_access_date: int
    first_cluster_high: int
    write_time: int
    write_date: int
    first_cluster_low: int
    file_size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "DirEntry":
        """Parse the packed directory entry at the start of ``data``."""
        if len(data) < _DIR_ENTRY.size:
            raise Fat32Error(
                f"directory entry needs {_DIR_ENTRY.size} bytes, got {len(data)}"
            )
        return cls(*_DIR_ENTRY.unpack_from(data, 0))

    @property
    def first_cluster(self) -> int:
        """The first cluster of the file's data."""
        return (self.first_cluster_high << 16) + self.first_cluster_low

    @property
    def deleted(self) -> bool:
        return self.name[0] == _DELETED_MARK

    @property
    def is_long_name(self) -> bool:
        return self.attr == _LONG_NAME_ATTR


def _upper(text: str) -> str:
    return "".join(chr(ord(ch) - 32) if "a" <= ch <= "z" else ch for ch in text)


def long_to_short(name: str) -> str:
    """Convert a file name to the 11-character 8.3 form used on disk.

    Names longer than eight characters always get the ``~1`` tail, so the
    result does not match every name the file system would have chosen.
    """
    name = name.split("\0", 1)[0]
    stem, dot, suffix = name.partition(".")
    head = _upper(stem[:8]).ljust(8)
    ext = _upper(suffix[:3]).ljust(3) if dot else " " * 3
    short = head + ext
    if len(stem) > 8:
        short = short[:6] + "~1" + short[8:]
    return short


def partition_first_lba(device: BlockDevice, part_no: int = PARTITION_NO) -> int:
    """Return the first block of partition ``part_no``.

    The MBR table is tried first. A protective MBR entry, or an entry that
    starts at block 0, sends the search on to the GPT partition entries.
    """
    if part_no < 0:
        raise ValueError(f"partition number must not be negative, got {part_no}")
    if part_no >= _MBR_ENTRIES:
        raise Fat32Error(f"MBR partition number should be < {_MBR_ENTRIES}")

    mbr = device.read_blocks(0, 1)
    entry = _MBR_TABLE_OFFSET + part_no * _MBR_ENTRY_SIZE
    first_lba = 0
    if mbr[entry + 4] != _PROTECTIVE_MBR_TYPE:
        first_lba = _U32.unpack_from(mbr, entry + 8)[0]

    if first_lba == 0:
        header = device.read_blocks(1, 1)
        entries_lba = _U64.unpack_from(header, _GPT_ENTRIES_LBA_OFFSET)[0] & 0xFFFFFFFF
        entries = device.read_blocks(entries_lba, 1)
        offset = part_no * _GPT_ENTRY_SIZE + _GPT_FIRST_LBA_OFFSET
        first_lba = _U64.unpack_from(entries, offset)[0]

    if first_lba == 0:
        raise Fat32Error(f"partition {part_no} not found")
    return first_lba


def _c_string(raw: bytes) -> bytes:
    return raw.split(b"\0", 1)[0]


class Fat32Volume:
    """A FAT32 file system starting at block ``first_lba`` of a device."""

    def __init__(self, device: BlockDevice, first_lba: int) -> None:
        self.device = device
        self.first_lba = first_lba
        self.boot = BootSector.from_bytes(device.read_blocks(first_lba, 1))
        boot = self.boot
        if boot.bytes_per_sector < BLOCK_SIZE or boot.bytes_per_sector % BLOCK_SIZE:
            raise Fat32Error(f"unsupported sector size {boot.bytes_per_sector}")
        if boot.sectors_per_cluster == 0:
            raise Fat32Error("boot sector gives zero sectors per cluster")

        self.lba_per_sector = boot.bytes_per_sector // BLOCK_SIZE
        self.lba_per_cluster = boot.sectors_per_cluster * self.lba_per_sector
        self.bytes_per_cluster = boot.sectors_per_cluster * boot.bytes_per_sector
        fat_sectors = boot.fat_size_32 * boot.num_fats
        self.fat_base = first_lba + boot.reserved_sectors * self.lba_per_sector
        self.data_base = (
            first_lba + (boot.reserved_sectors + fat_sectors) * self.lba_per_sector
        )
        self._fat_window: Optional[int] = None
        self._fat = b""

    def next_cluster(self, cluster: int) -> int:
        """Return the FAT entry that follows ``cluster``."""
        if cluster < 0:
            raise ValueError(f"cluster number must not be negative, got {cluster}")
        window, offset = divmod(cluster, MAX_FAT_SIZE)
        if window != self._fat_window:
            self._fat = self.device.read_blocks(
                self.fat_base + window * FAT_BUF_LBA_SIZE, FAT_BUF_LBA_SIZE
            )
            self._fat_window = window
        return _U32.unpack_from(self._fat, offset * 4)[0]

    def _chain(self, start: int) -> Iterator[int]:
        seen = set()
        cluster = start
        while cluster < END_OF_CHAIN:
            if cluster in seen:
                raise Fat32Error(f"cluster chain loops back to cluster {cluster}")
            seen.add(cluster)
            yield cluster
            cluster = self.next_cluster(cluster)

    def _read_cluster(self, cluster: int) -> bytes:
        if cluster < 2:
            raise Fat32Error(f"invalid data cluster {cluster}")
        return self.device.read_blocks(
            self.data_base + (cluster - 2) * self.lba_per_cluster, self.lba_per_cluster
        )

    @staticmethod
    def _entries(data: bytes) -> Iterator[DirEntry]:
        for offset in range(0, len(data) - _DIR_ENTRY_SIZE + 1, _DIR_ENTRY_SIZE):
            yield DirEntry.from_bytes(data[offset:offset + _DIR_ENTRY_SIZE])

    def read_entry(self, entry: DirEntry) -> bytes:
        """Return the data of the file described by ``entry``."""
        if entry.first_cluster == 0 and entry.file_size == 0:
            return b""
        data = b"".join(
            self._read_cluster(cluster) for cluster in self._chain(entry.first_cluster)
        )
        if len(data) < entry.file_size:
            raise Fat32Error(
                f"cluster chain holds {len(data)} bytes, file needs {entry.file_size}"
            )
        return data[:entry.file_size]

    def find(self, name: str) -> Optional[DirEntry]:
        """Look ``name`` up in the root directory.

        The search reads the first directory cluster and moves on to the next
        one only while each cluster read holds a match; the last match wins.
        """
        short = _c_string(long_to_short(name).encode("latin-1"))
        found = None
        for cluster in self._chain(_ROOT_CLUSTER):
            match = next(
                (
                    entry
                    for entry in self._entries(self._read_cluster(cluster))
                    if not entry.deleted
                    and not entry.is_long_name
                    and _c_string(entry.name) == short
                ),
                None,
            )
            if match is None:
                break
            found = match
        return found

    def read_file(self, name: str) -> bytes:
        """Return the contents of root-directory file ``name``."""
        entry = self.find(name)
        if entry is None:
            raise FileNotFoundError(f"{name} not found in the root directory")
        return self.read_entry(entry)


def read_file(device: BlockDevice, name: str) -> bytes:
    """Read ``name`` from the root directory of the device's first partition."""
    volume = Fat32Volume(device, partition_first_lba(device, PARTITION_NO))
    return volume.read_file(name)


def main(argv=None) -> int:
    """Copy a file out of a FAT32 disk image."""
    parser = argparse.ArgumentParser(
        prog="cnnrt-fat32",
        description="Copy a file out of the root directory of a FAT32 disk image.",
    )
    parser.add_argument("image", type=Path, help="disk image file")
    parser.add_argument("name", help="file name in the root directory")
    parser.add_argument("-o", "--output", type=Path, help="where to write the file")
    args = parser.parse_args(argv)

    try:
        device = BlockImage(args.image.read_bytes())
        data = read_file(device, args.name)
        if args.output is not None:
            args.output.write_bytes(data)
        else:
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
    except (OSError, Fat32Error, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0