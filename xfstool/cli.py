"""Interactive and one-shot command interface for disk files."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TextIO

from .xfs.errors import XfsError
from .xfs.labels import LabelError
from .xfs.layout import NO_OF_DISK_BLOCKS, NO_OF_INTERRUPTS, NO_OF_MODULES
from .xfs.utility import XfsDisk
from .xfs.vdisk import atoi

try:
    import readline
except ImportError:  # pragma: no cover - platform without readline
    readline = None

DEFAULT_DISK_NAME = "disk.xfs"

COMMANDS = (
    "fdisk", "run", "load", "export", "rm", "ls",
    "df", "cat", "copy", "dump", "exit", "help",
)
LOAD_OPTIONS = (
    "--int=", "--exec", "--data", "--init", "--os", "--idle",
    "--shell", "--library", "--exhandler", "--module",
)
INTERRUPT_CHOICES = (*(str(n) for n in range(4, 19)), "timer", "disk", "console")
MODULE_CHOICES = tuple(str(n) for n in range(8))
DUMP_OPTIONS = ("--inodeusertable", "--rootfile")

HELP_TEXT = """\
 fdisk 
\t Format the disk with XFS filesystem
 run <pathname> 
\t Executes the set of xfs-interface commands sequentially 
 load --exec <pathname> 
\t Loads an executable file to XFS disk 
 load --data <pathname> 
\t Loads a data file to XFS disk 
 load --init <pathname> 
\t Loads INIT code to XFS disk 
 load --os <pathname> 
\t Loads OS startup code to XFS disk 
 load --idle <pathname> 
\t Loads Idle code to XFS disk 
 load --shell <pathname> 
\t Loads Shell code to XFS disk 
 load --library <pathname> 
\t Loads Library code to XFS disk 
 load --int=timer <pathname>
\t Loads Timer Interrupt routine to XFS disk 
 load --int=disk <pathname>
\t Loads Disk Controller Interrupt routine to XFS disk 
 load --int=console <pathname>
\t Loads Console Interrupt routine to XFS disk 
 load --int=[4-18] <pathname>
\t Loads the specified Interrupt routine to XFS disk 
 load --exhandler <pathname> 
\t Loads exception handler routine to XFS disk 
 load --module [0-7] <pathname>
\t Loads the specified Module to XFS disk 
 export <xfs_filename> <pathname>
\t Exports a data file from XFS disk to UNIX file system
 rm <xfs_filename>
\t Removes a file from XFS disk 
 ls 
\t List all files
 df 
\t Display free list and free space
 cat <xfs_filename> 
\t to display contents of a file
 copy <start_blocks> <end_block> <unix_filename> 
\t Copies contents of specified range of blocks to a UNIX file.
 dump --inodeusertable
\t Copies the contents of inode table and the user table to an external UNIX file named inodeusertable.txt
 dump --rootfile 
\t Copies the contents of root file to an external UNIX file named rootfile.txt
 exit 
\t Exit the interface
"""


def _matching(choices: tuple[str, ...], text: str) -> list[str]:
    return [choice for choice in choices if choice.startswith(text)]


class XfsShell:
    """Parses interface commands and runs them against a disk."""

    def __init__(self, disk: XfsDisk, out: TextIO | None = None) -> None:
        self.disk = disk
        self.out = out if out is not None else sys.stdout

    def _print(self, text: str = "") -> None:
        self.out.write(text + "\n")

    def run_command(self, line: str) -> None:
        """Run one command line; 'exit' raises SystemExit."""
        words = line.split(" ")
        tokens = [word for word in words if word]
        if not tokens:
            return
        name, args = tokens[0], tokens[1:]
        handler = getattr(self, f"_cmd_{name}", None)
        if handler is None:
            self._print(f'Unknown command "{name}". See "help" for more information.')
            return
        try:
            handler(args)
        except (XfsError, LabelError) as exc:
            self._print(str(exc))
        except OSError as exc:
            self._print(str(exc))

    @staticmethod
    def _arg(args: list[str], index: int) -> str | None:
        return args[index] if index < len(args) else None

    def _cmd_help(self, args: list[str]) -> None:
        self.out.write(HELP_TEXT)

    def _cmd_fdisk(self, args: list[str]) -> None:
        self._print('Formatting Complete. "disk.xfs" created.')
        self.disk.format(True)

    def _cmd_run(self, args: list[str]) -> None:
        path = self._arg(args, 0)
        try:
            handle = open(path, encoding="latin-1") if path else None
        except OSError:
            handle = None
        if handle is None:
            self._print(f"Unable to open file : {path}.")
            return
        with handle:
            for line in handle:
                self.run_command(line.rstrip("\n"))

    def _cmd_load(self, args: list[str]) -> None:
        arg1, arg2, arg3 = (self._arg(args, i) for i in range(3))
        if arg2 is None or arg1 is None:
            self._print('Missing <pathname> for load. See "help" for more information.')
            return
        option, _, int_type = arg1.partition("=")
        int_type = int_type.split("=", 1)[0] or None
        filename = arg2[:100]

        if option in ("--exec", "--data"):
            ext = ".xsm" if option == "--exec" else ".dat"
            if len(os.path.basename(filename)) > 12:
                self._print("Filename is more than 12 characters long.")
                return
            dot = filename.rfind(".")
            if dot == -1 or filename[dot:] != ext:
                self._print(f'Filename does not have "{ext}" extension.')
                return
            loader = self.disk.load_executable if option == "--exec" else self.disk.load_data_file
            self._load(loader, filename)
        elif option == "--init":
            self._load(self.disk.load_init_code, filename)
        elif option == "--shell":
            self._load(self.disk.load_shell_code, filename)
        elif option == "--library":
            self._load(self.disk.load_library_code, filename)
        elif option == "--idle":
            self._load(self.disk.load_idle_code, filename)
        elif option == "--os":
            self._load(self.disk.load_os_code, filename)
        elif option == "--int":
            if int_type == "timer":
                self._load(self.disk.load_timer_code, filename)
            elif int_type == "disk":
                self._load(self.disk.load_disk_controller_code, filename)
            elif int_type == "console":
                self._load(self.disk.load_console_code, filename)
            else:
                number = atoi(int_type or "")
                if 4 <= number <= NO_OF_INTERRUPTS:
                    self._load(self.disk.load_interrupt_code, filename, number)
                else:
                    self._print('Invalid argument for "--int=".')
        elif option == "--module":
            number = atoi(arg2)
            if not 0 <= number <= NO_OF_MODULES:
                self._print('Invalid argument for "--module=".')
            elif arg3 is None:
                self._print('Missing <pathname> for load. See "help" for more information.')
            else:
                self._load(self.disk.load_module_code, arg3, number)
        elif option == "--exhandler":
            self._load(self.disk.load_exception_handler, filename)
        else:
            self._print(
                f'Invalid argument "{arg1}" for load. See "help" for more information.'
            )

    def _load(self, loader, path: str, *extra: int) -> None:
        try:
            loader(path, *extra)
        except (XfsError, LabelError):
            raise
        except OSError:
            self._print(f"File {path} not found.")

    def _cmd_rm(self, args: list[str]) -> None:
        name = self._arg(args, 0)
        if name is None:
            self._print('Missing <xfs_filename> for rm. See "help" for more information.')
            return
        self.disk.delete_file(name)

    def _cmd_export(self, args: list[str]) -> None:
        name, path = self._arg(args, 0), self._arg(args, 1)
        if path is None:
            self._print('Missing <pathname> for export. See "help" for more information.')
            return
        try:
            self.disk.export_file(name, path)
        except FileNotFoundError as exc:
            if exc.filename is None:
                raise
            self._print(f"File '{path}' not found!")
        except (IsADirectoryError, PermissionError):
            self._print(f"File '{path}' not found!")

    def _cmd_ls(self, args: list[str]) -> None:
        files = self.disk.files()
        if not files:
            self._print("The disk contains no files.")
            return
        for entry in files:
            self._print(f"Filename: {entry.name} \t Filesize {entry.size}")

    def _cmd_df(self, args: list[str]) -> None:
        entries = self.disk.free_list()
        for index, word in enumerate(entries):
            self._print(f"{index} \t - \t {word}  ")
        free = sum(1 for word in entries if atoi(word) == 0)
        self.out.write(f"\nNo of Free Blocks = {free}")
        self.out.write(f"\nTotal no of Blocks = {NO_OF_DISK_BLOCKS}\n")

    def _cmd_cat(self, args: list[str]) -> None:
        name = self._arg(args, 0)
        if name is None:
            self._print('Missing <xfs_filename> for cat. See "help" for more information.')
            return
        for word in self.disk.file_lines(name):
            self._print(f"{word}\t")

    def _cmd_copy(self, args: list[str]) -> None:
        if len(args) < 3:
            self._print('Insufficient arguments for "copy". See "help" for more information.')
            return
        start, end, path = atoi(args[0]), atoi(args[1]), args[2][:50]
        try:
            self.disk.copy_blocks_to_file(start, end, path)
        except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
            if exc.filename is None:
                raise
            self._print(f"File '{path}' not found!")

    def _cmd_dump(self, args: list[str]) -> None:
        option = self._arg(args, 0)
        if option == "--inodeusertable":
            self.disk.dump_inode_table("inodeusertable.txt")
        elif option == "--rootfile":
            self.disk.dump_root_file("rootfile.txt")
        else:
            self._print(
                f'Invalid argument "{option or ""}" for dump. See "help" for more information.'
            )

    def _cmd_exit(self, args: list[str]) -> None:
        raise SystemExit(0)

    def _file_names(self) -> tuple[str, ...]:
        try:
            return tuple(entry.name for entry in self.disk.files())
        except XfsError:
            return ()

    def completions(self, line: str, text: str, start: int) -> list[str]:
        """Return the candidates for the word *text* starting at *start* in *line*."""
        context = line[:start].split()
        if not context:
            return _matching(COMMANDS, text)
        command = context[0]
        if command == "load":
            if line[:start].endswith("--int="):
                return _matching(INTERRUPT_CHOICES, text)
            if len(context) > 1 and context[1] == "--module":
                return _matching(MODULE_CHOICES, text)
            return _matching(LOAD_OPTIONS, text)
        if command in ("export", "cat", "rm"):
            return _matching(self._file_names(), text)
        if command == "dump":
            return _matching(DUMP_OPTIONS, text)
        return []

    def _setup_completion(self) -> None:
        if readline is None:
            return
        matches: list[str] = []

        def complete(text: str, state: int) -> str | None:
            nonlocal matches
            if state == 0:
                matches = self.completions(
                    readline.get_line_buffer(), text, readline.get_begidx()
                )
            return matches[state] if state < len(matches) else None

        readline.set_completer_delims(" \t\n=")
        readline.set_completer(complete)
        readline.parse_and_bind("tab: complete")

    def loop(self) -> None:
        """Read and run commands until 'exit' or end of input."""
        self._print(
            'Unix-XFS Interace Version 2.0. \nType "help" for getting a list of commands.'
        )
        self._setup_completion()
        while True:
            try:
                line = input("# ")
            except EOFError:
                break
            command = line.strip()
            if not command:
                continue
            if command == "exit":
                break
            self.run_command(command)


def main(argv: list[str] | None = None) -> int:
    """Run one command given on the command line, or an interactive session."""
    args = list(sys.argv[1:] if argv is None else argv)
    disk_file = DEFAULT_DISK_NAME
    if args and args[0] == "--disk-file":
        if len(args) > 1:
            disk_file = args[1]
            args = args[2:]
        else:
            print("--disk-file option requires a file name.")
            print()
            print("Syntax: --disk-file /path/to/disk.xfs")
            print("Specifies the path to disk.xfs to use.")
            return -1

    shell = XfsShell(XfsDisk(Path(disk_file)))
    if args:
        shell.run_command(" ".join(args))
    else:
        shell.loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())