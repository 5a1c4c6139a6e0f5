"""A best-fit heap allocator over a fixed region of memory.

Each block carries a header of ``HEADER_SIZE`` bytes followed by its payload.
Blocks lie in address order. Allocation picks the smallest free block that
is large enough and splits off the rest when a header and at least one byte
still fit. Freeing merges a block with a free neighbour on either side.
"""

from dataclasses import dataclass, replace
from typing import Optional

__all__ = ["HEADER_SIZE", "Block", "HeapAllocator"]

HEADER_SIZE = 12


@dataclass(frozen=True)
class Block:
    """One block of the heap: header address, payload size and state."""

    address: int
    size: int
    free: bool

    @property
    def payload(self) -> int:
        """The address handed out for this block."""
        return self.address + HEADER_SIZE


class HeapAllocator:
    """Allocate payload addresses from a heap of ``size`` bytes at address 0."""

    def __init__(self, size: int) -> None:
        if size < HEADER_SIZE:
            raise ValueError(f"heap of {size} bytes cannot hold a block header")
        self.size = size
        self.memory = bytearray(size)
        self._blocks: list[Block] = [Block(0, size - HEADER_SIZE, True)]

    def malloc(self, size: int) -> Optional[int]:
        """Return the payload address of a new block of ``size`` bytes.

        A size of zero gives ``None``. ``MemoryError`` is raised when no free
        block is large enough.
        """
        if size < 0:
            raise ValueError(f"allocation size must not be negative, got {size}")
        if size == 0:
            return None

        best_index = None
        for i, block in enumerate(self._blocks):
            if block.free and block.size >= size:
                if best_index is None or block.size < self._blocks[best_index].size:
                    best_index = i
        if best_index is None:
            raise MemoryError(f"no free block of {size} bytes")

        best = self._blocks[best_index]
        if best.size > size + HEADER_SIZE:
            rest = Block(
                best.address + HEADER_SIZE + size,
                best.size - size - HEADER_SIZE,
                True,
            )
            self._blocks.insert(best_index + 1, rest)
            best = replace(best, size=size)
        self._blocks[best_index] = replace(best, free=False)
        return best.payload

    def calloc(self, count: int, size: int) -> Optional[int]:
        """Allocate ``count * size`` bytes and fill them with zeros."""
        if count < 0 or size < 0:
            raise ValueError("element count and size must not be negative")
        total = count * size
        address = self.malloc(total)
        if address is not None:
            self.memory[address:address + total] = bytes(total)
        return address

    def free(self, address: Optional[int]) -> None:
        """Release the block whose payload starts at ``address``.

        ``None`` is ignored; an address that is not the start of a block
        raises ``ValueError``.
        """
        if address is None:
            return
        header = address - HEADER_SIZE
        index = next(
            (i for i, block in enumerate(self._blocks) if block.address == header),
            None,
        )
        if index is None:
            raise ValueError(f"address {address} was not handed out by this heap")

        block = replace(self._blocks[index], free=True)
        if index + 1 < len(self._blocks) and self._blocks[index + 1].free:
            following = self._blocks.pop(index + 1)
            block = replace(block, size=block.size + HEADER_SIZE + following.size)
        self._blocks[index] = block

        if index > 0 and self._blocks[index - 1].free:
            previous = self._blocks[index - 1]
            self._blocks[index - 1] = replace(
                previous, size=previous.size + HEADER_SIZE + block.size
            )
            del self._blocks[index]

    def blocks(self) -> tuple[Block, ...]:
        """Return the blocks of the heap in address order."""
        return tuple(self._blocks)