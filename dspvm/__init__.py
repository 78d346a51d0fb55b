"""A bytecode virtual machine and toy assembler for vector DSP programs."""

__version__ = "0.1.0"
__all__ = ["isa", "assembler", "vm", "cli"]