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

import fcntl
import os
import subprocess
import termios

import proctl.exception
import proctl.lookup

# About the use of preexec_fn in Popen:
# See https://pymotw.com/2/subprocess/#process-groups-sessions for more information.


def health_check(process):
    # Signal 0 checks for existence and permission without affecting the process.
    # Lack of permission is indistinguishable from death here.
    try:
        process.signal(0)
    except proctl.exception.ProcessException as e:
        raise proctl.exception.ProcessNotRunningException() from e


def is_running(process):
    try:
        health_check(process)
        return True
    except proctl.exception.ProcessNotRunningException:
        return False


def start(process, detach=False, stdin=None, stdout=None, stderr=None, notify=None):
    """Run the process's command and arguments as a new process, and wait for it to finish.

    C{stdin}, C{stdout} and C{stderr} are passed to L{subprocess.Popen}, so None means
    that the stream is inherited. If C{detach} is true, the new process leaves this
    process's process group, if the C{process} has a tty, or starts a new session,
    detached from any terminal, if it doesn't.

    Once the new process has started, its pid is put on C{notify}, if specified,
    (e.g. a L{queue.Queue}). If C{notify} is bounded and full, this blocks.

    Returns the exit status of the new process, negative if it was killed by a signal.
    """
    if not process.cmd:
        raise proctl.exception.CommandEmptyException()
    preexec_fn = None
    if detach:
        preexec_fn = os.setpgrp if process.in_tty() else os.setsid
    try:
        child = subprocess.Popen([process.cmd] + process.args,
                                 stdin=stdin,
                                 stdout=stdout,
                                 stderr=stderr,
                                 preexec_fn=preexec_fn)
    except (OSError, subprocess.SubprocessError) as e:
        raise proctl.exception.ProcessOSException(f'Unable to start {process.full_command()}: {e}') from e
    if notify is not None:
        notify.put(child.pid)
    return child.wait()


def start_tty(process, tty, notify=None, listing=None):
    """Type the process's command line into a terminal, and then find the process that
    results, updating C{process}'s pid.

    C{tty} is a file object or file descriptor for the terminal, open for writing,
    (see L{open_tty}). Each byte of the command line, followed by a newline, is pushed
    into the terminal's input queue, (TIOCSTI), as if typed. This usually requires
    root.

    If injection fails partway, whatever was already injected stays in the terminal's
    input. The exception reports how many bytes that was.

    The new pid is put on C{notify}, if specified, once it has been found.
    """
    if not process.cmd:
        raise proctl.exception.CommandEmptyException()
    fd = tty if isinstance(tty, int) else tty.fileno()
    typed = (process.full_command() + '\n').encode()
    for i in range(len(typed)):
        try:
            _inject(fd, typed[i:i + 1])
        except OSError as e:
            raise proctl.exception.TerminalInjectionException(process.tty, i, e) from e
    proctl.lookup.find_pid(process, listing)
    if notify is not None:
        notify.put(process.pid)
    return process


def open_tty(process):
    # O_NOCTTY: Don't let the terminal become this process's controlling terminal.
    if not process.in_tty():
        raise proctl.exception.NotInTtyException()
    path = f'/dev/{process.tty}'
    try:
        fd = os.open(path, os.O_RDWR | os.O_NOCTTY)
    except OSError as e:
        raise proctl.exception.ProcessOSException(f'Unable to open {path}: {e}') from e
    return os.fdopen(fd, 'r+b', buffering=0)


def chdir(process):
    try:
        os.chdir(process.cwd)
    except OSError as e:
        raise proctl.exception.ProcessOSException(f'Unable to change directory to {process.cwd!r}: {e}') from e


def _inject(fd, byte):
    fcntl.ioctl(fd, termios.TIOCSTI, byte)
