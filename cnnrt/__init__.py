"""Activation functions, C-style formatting, integer parsing and random numbers, a heap allocator model, SD card checksums and FAT32 image reading."""

__version__ = "0.1.0"