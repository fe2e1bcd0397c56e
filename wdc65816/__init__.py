"""Interpreting emulator of the WDC 65C816 CPU with pluggable memory."""

__version__ = "0.1.0"
__all__ = ["addressing", "core", "cpu", "ops_arith", "ops_flow", "ops_stack", "statusreg"]