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

"""Parsing of the whitespace-delimited tables printed by ps and lsof.

Fields are separated by runs of whitespace. Each function knows which columns it
needs; a row that is too short to supply them raises C{MalformedOutputException}.
Functions that scan many rows select the rows they are interested in and ignore
the rest.
"""

import proctl.exception

# Placeholder for "no controlling terminal". BSD ps prints ??, procps prints ?.
# Any all-? tty column is normalized to NO_TTY.
NO_TTY = '??'
NO_TTY_LISTED = '?'

# lsof columns: COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME
LSOF_FD = 3
LSOF_NAME = 8
LSOF_CWD = 'cwd'


def _malformed(problem, text):
    return proctl.exception.MalformedOutputException(problem, text)


def normalize_tty(tty):
    return NO_TTY if len(tty.strip('?')) == 0 else tty


# How a tty appears in the all-process listing. ? is contained in both placeholders.
def listed_tty(tty):
    return NO_TTY_LISTED if tty == NO_TTY else tty


def single_line(text):
    lines = [line for line in text.splitlines() if len(line.strip()) > 0]
    if len(lines) != 1:
        raise _malformed(f'Expected one line, found {len(lines)}', text)
    return lines[0]


# ps -o tty= -o comm= -p PID
def parse_tty_and_command(text):
    line = single_line(text)
    fields = line.split()
    if len(fields) < 2:
        raise _malformed('Expected tty and command', line)
    return normalize_tty(fields[0]), ' '.join(fields[1:])


# ps -o args= -p PID: The arguments are whatever follows the first occurrence of
# the command. If the command also occurs earlier in the line, e.g. in a directory
# name, the split happens there instead.
# ps cuts comm short, (to 15 characters on Linux), so the command runs on to the end
# of the path component it starts in. Returns the completed command and the arguments.
def parse_command_line(line, command):
    position = line.find(command) if command else -1
    if position < 0:
        raise _malformed(f'Command {command!r} not found', line)
    end = position + len(command)
    while end < len(line) and not line[end].isspace() and line[end] != '/':
        end += 1
    return line[position:end], line[end:].split()


# ps -e -o pid= -o tty= -o args=
def parse_pid(line):
    fields = line.split()
    if len(fields) == 0:
        raise _malformed('Expected pid', line)
    try:
        return int(fields[0])
    except ValueError:
        raise _malformed('pid is not an integer', line)


# lsof -p PID. The path is everything from the NAME column on, so a path containing
# spaces survives, (as long as it is the last thing on the line).
def parse_cwd(text):
    cwd = ''
    for line in text.splitlines():
        fields = line.split()
        if len(fields) > LSOF_FD and fields[LSOF_FD] == LSOF_CWD:
            if len(fields) <= LSOF_NAME:
                raise _malformed('cwd row has no path', line)
            cwd = ' '.join(fields[LSOF_NAME:]).strip()
    return cwd
