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

import contextlib

import psutil

import proctl.control
import proctl.exception
import proctl.lookup
import proctl.object.renderable
import proctl.table

NO_TTY = proctl.table.NO_TTY

Proc = psutil.Process  # Avoid confusion with proctl.object.process.Process


class Process(proctl.object.renderable.Renderable):
    """A unix process: its pid, controlling terminal, working directory, command and arguments.

    A Process is usually obtained from one of the functions in L{proctl.lookup}. It can
    also be created from a command, arguments and tty, in which case it has no pid until
    L{find_pid} locates a matching process.

    Signalling and waiting go through a L{psutil.Process} handle that the Process owns.
    After L{release}, the handle is gone and those operations fail, but the other
    attributes remain readable.
    """

    def __init__(self, cmd='', args=None, tty=NO_TTY, cwd=''):
        self.pid = None
        self.tty = tty
        self.cwd = cwd
        self.cmd = cmd
        self.args = [] if args is None else list(args)
        self._handle = None

    # Renderable

    def render_compact(self):
        return f'process({self.pid})'

    def render_full(self):
        return (f'[Pid]: {self.pid}\n'
                f'[Command]: {self.cmd}\n'
                f'[Args]: {", ".join(self.args)}\n'
                f'[Cwd]: {self.cwd}\n'
                f'[Tty]: {self.tty}\n')

    # Process

    def full_command(self):
        return ' '.join([self.cmd] + self.args) if self.args else self.cmd

    def in_tty(self):
        return self.tty != NO_TTY

    def attach(self, pid):
        """Bind this Process to C{pid}, replacing the current pid and handle, if any."""
        if pid is None or pid <= 0:
            raise proctl.exception.ProcessNotFoundException(pid)
        with _platform_errors(pid):
            handle = Proc(pid)
        self.pid = pid
        self._handle = handle

    def attached(self):
        return self._handle is not None

    def signal(self, signal):
        with _platform_errors(self.pid):
            self._checked_handle().send_signal(signal)

    # Returns the exit status if the process is a child of this one, None otherwise.
    def wait(self, timeout=None):
        with _platform_errors(self.pid):
            return self._checked_handle().wait(timeout)

    def kill(self):
        with _platform_errors(self.pid):
            self._checked_handle().kill()

    # Gives up the handle without signalling or waiting. The OS process is unaffected.
    def release(self):
        self._handle = None

    def _checked_handle(self):
        if self._handle is None:
            raise proctl.exception.ProcessReleasedException(self.pid)
        return self._handle

    # Lookup and control

    def find_pid(self, listing=None):
        return proctl.lookup.find_pid(self, listing)

    def health_check(self):
        proctl.control.health_check(self)

    def start(self, detach=False, stdin=None, stdout=None, stderr=None, notify=None):
        return proctl.control.start(self, detach, stdin, stdout, stderr, notify)

    def start_tty(self, tty, notify=None, listing=None):
        return proctl.control.start_tty(self, tty, notify, listing)

    def is_running(self):
        return proctl.control.is_running(self)

    def open_tty(self):
        return proctl.control.open_tty(self)

    def chdir(self):
        proctl.control.chdir(self)


@contextlib.contextmanager
def _platform_errors(pid):
    try:
        yield
    except psutil.NoSuchProcess as e:
        raise proctl.exception.ProcessNotFoundException(pid) from e
    except psutil.TimeoutExpired as e:
        raise proctl.exception.ProcessOSException(f'Timed out waiting for process {pid}') from e
    except psutil.Error as e:
        raise proctl.exception.ProcessOSException(f'process {pid}: {e}') from e
    except OSError as e:
        raise proctl.exception.ProcessOSException(f'process {pid}: {e}') from e
