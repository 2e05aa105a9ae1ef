"""
disawsm Command-Line Interface
==============================

The ``disawsm`` command is a Click group with four subcommands:

- **disasm**: classify and format a program, write assembly or a listing
- **save**: write a .dis project file
- **export**: re-render a .dis project as assembly
- **info**: summarize a .dis project
"""

__all__ = ["disawsm"]
