# xfstool

Tools for an XFS disk image (`disk.xfs`): a disk of 512 blocks, each block
512 words, each word a 16-byte string. The package formats the image, loads
OS startup code, interrupt routines, modules and system programs into their
fixed blocks, stores data and executable files through the inode table and
root file, and copies their contents back out to ordinary files.

It also holds the storage pieces of the XSM machine: words, memory with
page-table address translation, the register file, machine exceptions and
the machine's in-memory copy of the disk.

## Installing

```
pip install .
```

## The command interface

```
xfs-interface
```

opens a prompt (`# `) working on `disk.xfs` in the current directory. Tab
completes commands, `load` options, interrupt and module numbers, `dump`
options and file names where readline is available. To use another image:

```
xfs-interface --disk-file /path/to/disk.xfs
```

A single command can be given on the command line instead:

```
xfs-interface fdisk
xfs-interface load --exec prog.xsm
xfs-interface ls
```

| Command | Effect |
| --- | --- |
| `fdisk` | Format the disk with the XFS file system |
| `run <pathname>` | Run the commands in a file, one per line |
| `load --exec <pathname>` | Load an executable; the name must end in `.xsm` and be at most 12 characters |
| `load --data <pathname>` | Load a data file; the name must end in `.dat` and be at most 12 characters |
| `load --init`, `--os`, `--idle`, `--shell`, `--library <pathname>` | Load system code into its fixed blocks |
| `load --int=timer`, `--int=disk`, `--int=console <pathname>` | Load an interrupt routine |
| `load --int=<4-18> <pathname>` | Load a numbered interrupt routine |
| `load --exhandler <pathname>` | Load the exception handler |
| `load --module <number> <pathname>` | Load a module |
| `export <xfs_filename> <pathname>` | Write every word of a file, one per line, to a host file |
| `rm <xfs_filename>` | Remove a file and free its blocks (`root` cannot be removed) |
| `ls` | List files with their sizes |
| `df` | Show the free list and the number of free blocks |
| `cat <xfs_filename>` | Show the non-empty words of a file |
| `copy <start_block> <end_block> <unix_filename>` | Write blocks `start` to `end` inclusive to a host file |
| `dump --inodeusertable` | Write the inode and user tables to `inodeusertable.txt` |
| `dump --rootfile` | Write the root file to `rootfile.txt` |
| `help` | List the commands |
| `exit` | Leave the interface |

In OS startup code, interrupt routines, the exception handler and modules,
jump and call targets written as labels (`loop:` ... `JMP loop`) are replaced
by absolute addresses for the memory page the code is loaded at. Code that
does not fit in its blocks is rejected and the blocks are cleared.

## From Python

```python
from xfstool.xfs.utility import XfsDisk

disk = XfsDisk("disk.xfs")
disk.format(True)
disk.load_executable("prog.xsm")
for entry in disk.files():
    print(entry.name, entry.size)
disk.export_file("prog.xsm", "copy.txt")
```

Failures raise `xfstool.xfs.errors.XfsError` (with `DiskOpenError` and
`DiskCreateError` for the image itself), `xfstool.xfs.labels.LabelError`, or
`FileNotFoundError` for a missing file. `xfstool.cli.XfsShell` runs command
lines against an `XfsDisk` and writes its messages to any text stream.

The lower layers are usable on their own: `xfstool.xfs.vdisk.VirtualDisk`
(blocks of the image and its memory copy), `xfstool.xfs.inode.InodeTable`,
`xfstool.xfs.labels.LabelTable`, `xfstool.xfs.codeblocks` (turning source and
data text into blocks of words) and `xfstool.xfs.layout` (block numbers and
sizes).

The machine side is in `xfstool.xsm`: `word.Word`, `memory.Memory` (whose
`translate_address` raises `PageFault`, `NoWriteAccess` or `IllegalPage`),
`registers.RegisterFile`, `exception.MachineException` and `disk.Disk`, which
reads a disk image into memory and writes it back on `close()`.

## What it does not do

There is no machine here that runs code: the `xfstool.xsm` modules give
storage, registers and address translation, but nothing decodes or executes
instructions, raises interrupts, or offers a debugger. The package prepares
and inspects disk images only.