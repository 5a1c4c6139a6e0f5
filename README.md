# cnnrt

A small, dependency-free collection of pieces for a minimal machine-learning
runtime: activation functions, a compact C-style formatter, integer parsing
and pseudo-random numbers, a model of a best-fit heap allocator, the SD card
command and data checksums, and a reader for files on FAT32 disk images.

## Installing

```
pip install .
```

## Modules

### `cnnrt.activation`

Element-wise activation functions. Each takes the whole pre-activation
sequence and an index, so that `softmax` can look at every element:

- `identity(values, index)`, `relu(values, index)`,
  `bounded_relu(values, index)` (clamped into 0 to 1).
- `softmax(values, index)`: the softmax weight of one element, with `e**x`
  computed by a 35-term Taylor series (`SOFTMAX_TERMS`).
- `taylor_exp(x, terms)`: the first `terms` terms of the series for `e**x`.
- `poly_exp(x)`: a fourth-order polynomial approximation of `e**x`; outside
  -10 to 10 it returns `x` itself.

```python
from cnnrt.activation import relu, softmax

relu([-1.0, 2.0], 0)          # 0.0
softmax([1.0, 1.0], 0)        # 0.5
```

### `cnnrt.cformat`

`sprintf(fmt, *args)` and `printf(fmt, *args)` (which writes to standard
output and returns 0) understand `%d`, `%u`, `%x`, `%X`, `%f` and `%s`. A
leading `0` selects zero padding, digits give the width, one `l` is ignored
and `.N` sets the decimals for `%f`; that precision stays in force for the
rest of the format string. Unknown conversion characters are copied as they
are. Too few arguments raise `TypeError`.

```python
from cnnrt.cformat import sprintf

sprintf("%05d", -42)      # '-0042'
sprintf("%08x", 255)      # '000000ff'
sprintf("%.2f", 3.14159)  # '3.14'
```

The building blocks are available too: `format_decimal`, `format_hex`,
`format_long` and `format_float`. Note that `%x` without zero padding prints
no digits at all for 0.

### `cnnrt.clib`

- `atoi(text)`: strict decimal parsing. Leading spaces and tabs and one `-`
  are accepted; any other non-digit character gives 0. The result wraps to a
  signed 32-bit integer.
- `LinearCongruential(seed=DEFAULT_SEED)`: a 32-bit linear congruential
  generator with `seed(value)` and `rand()`, returning values from 0 to
  `RAND_MAX` (0x7FFF).

### `cnnrt.heap`

`HeapAllocator(size)` models a best-fit allocator over `size` bytes starting at
address 0. Every block has a header of `HEADER_SIZE` (12) bytes.

- `malloc(size)` returns a payload address, `None` for a size of 0, and raises
  `MemoryError` when no free block is large enough.
- `calloc(count, size)` allocates and zero-fills the bytes in `memory`.
- `free(address)` releases a block and merges it with free neighbours;
  `None` is ignored and an unknown address raises `ValueError`.
- `blocks()` returns the `Block` records (`address`, `size`, `free`,
  `payload`) in address order.

```python
from cnnrt.heap import HeapAllocator

heap = HeapAllocator(64)
a = heap.malloc(10)   # 12
heap.free(a)
```

### `cnnrt.sdcrc`

Checksums and frames of the SD card SPI protocol: `crc7`, `crc16`,
`command_crc(command, argument)`, `build_command(command, argument, crc)`
(the six bytes of a command), `block_crc16(data)`, and the command and token
constants such as `SD_CMD_READ_BLOCK_MULTIPLE` and `SD_DATA_TOKEN`.
`crc7` combines each byte with the running value by AND, so a chain started at
zero stays at zero.

### `cnnrt.fat32`

Reads files from the root directory of a FAT32 partition on an MBR- or
GPT-partitioned disk image.

- `BlockImage(data)`: an in-memory image read in 512-byte blocks; any object
  with a `read_blocks(lba, count)` method can stand in for it.
- `partition_first_lba(device, part_no=0)`: the first block of a partition.
- `Fat32Volume(device, first_lba)` with `find(name)`, `read_file(name)`,
  `read_entry(entry)` and `next_cluster(cluster)`.
- `read_file(device, name)`: read a file from the first partition.
- `long_to_short(name)`: the 11-character 8.3 name; names longer than eight
  characters always get the `~1` tail.
- `BootSector` and `DirEntry` parse the on-disk structures.

Errors in the disk layout raise `Fat32Error`; a missing file raises
`FileNotFoundError`.

```python
from cnnrt.fat32 import BlockImage, read_file

with open("disk.img", "rb") as fh:
    device = BlockImage(fh.read())
data = read_file(device, "weights.dat")
```

The same is available from the command line; the file goes to standard
output, or to the path given with `-o`/`--output`:

```
cnnrt-fat32 disk.img weights.dat -o weights.dat
```

## What the package does not do

The package has activation functions but no layer or network types: it does
not build or run a convolutional network. The FAT32 reader only reads, only
from the root directory, and only from disk images or objects that hand out
blocks; it does not talk to an SD card.

## Running the tests

```
pip install .[test]
pytest
```