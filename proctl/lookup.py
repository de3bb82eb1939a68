# This file is part of proctl.
#
# proctl is free software: you can redistribute it and/or modify it
# under the terms of the GNU General Public License as published by the
# Free Software Foundation, either version 3 of the License, (or at your
# option) any later version.
#
# proctl is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
# FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License
# for more details.
#
# You should have received a copy of the GNU General Public License
# along with proctl.  If not, see <https://www.gnu.org/licenses/>.

"""Locate processes, and reconstruct their identities, from the output of ps and lsof.

There are three ways to find a process:
    - L{find_by_pid}: The pid is known. ps supplies the tty, command and arguments,
      and lsof supplies the current directory.
    - L{find_pid}: The command, arguments and tty are known, (e.g. from an earlier
      lookup), and the pid is located by scanning the listing of all processes.
    - L{find_by_name}: The caller is shown all processes whose listing mentions a
      name, and picks one.

Each function takes an optional C{listing}, a L{proctl.listing.Listing}, which runs
the tools. By default, a new one is created using the current environment.
"""

import sys

import proctl.exception
import proctl.listing
import proctl.object.process
import proctl.table

SELECTION_PROMPT = '\nWhich number above represents the correct process (enter the number):'


def find_by_pid(pid, listing=None):
    listing = _listing(listing)
    process = proctl.object.process.Process()
    # Fails immediately if there is no such process.
    process.attach(pid)
    tty, cmd = proctl.table.parse_tty_and_command(listing.tty_and_command(pid))
    command_line = proctl.table.single_line(listing.command_line(pid))
    process.tty = tty
    process.cmd, process.args = proctl.table.parse_command_line(command_line, cmd)
    process.cwd = proctl.table.parse_cwd(listing.open_files(pid))
    listing.env.trace.found('find_by_pid', process)
    return process


def find_pid(process, listing=None):
    """Set the pid of C{process} to that of a running process with the same command,
    arguments and tty, and return C{process}.

    A row of the process listing matches if it contains the full command, and it contains
    the tty. These are substring tests, not comparisons of columns, so more than one row
    can match. If so, the last matching row wins. Use L{find_by_pid} when the pid is
    known.
    """
    if not process.cmd:
        raise proctl.exception.CommandEmptyException()
    listing = _listing(listing)
    full_command = process.full_command()
    tty = proctl.table.listed_tty(process.tty)
    pid = None
    for line in listing.all_processes().splitlines():
        if full_command in line and tty in line:
            pid = proctl.table.parse_pid(line)
    if pid is None:
        raise proctl.exception.ProcessNotFoundException(f'{full_command} (tty {process.tty})')
    process.attach(pid)
    listing.env.trace.found('find_pid', process)
    return process


def find_by_fingerprint(cmd, args=None, tty=proctl.table.NO_TTY, listing=None):
    return find_pid(proctl.object.process.Process(cmd=cmd, args=args, tty=tty), listing)


def find_by_name(name, writer=None, reader=None, listing=None):
    """List the processes whose listing mentions C{name}, ignoring case, and ask which
    one is wanted. The numbered list and the question are written to C{writer}
    (default stdout), and the answer, a 0-based index, is read from C{reader}
    (default stdin), which must provide C{readline()}.
    """
    writer = sys.stdout if writer is None else writer
    reader = sys.stdin if reader is None else reader
    listing = _listing(listing)
    name = name.lower()
    candidates = [line for line in listing.all_processes().lower().splitlines() if name in line]
    if len(candidates) == 0:
        raise proctl.exception.ProcessNotFoundException(name)
    for i, line in enumerate(candidates):
        print(f'{i}: {line}', file=writer)
    print(SELECTION_PROMPT, file=writer, flush=True)
    selection = reader.readline()
    try:
        index = int(selection.strip())
    except ValueError:
        raise proctl.exception.InvalidSelectionException(selection)
    if index < 0 or index >= len(candidates):
        raise proctl.exception.InvalidSelectionException(selection)
    return find_by_pid(proctl.table.parse_pid(candidates[index]), listing)


def _listing(listing):
    return proctl.listing.Listing() if listing is None else listing
