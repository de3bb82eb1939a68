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

"""Exceptions raised by process lookup and control.

Every exception extends C{ProcessException}, so a caller that only needs to know that
something went wrong can catch that. The categories are:
    - C{UserInputException}: The caller supplied something unusable, e.g. an empty command,
      or an invalid selection from a list of processes.
    - C{ProcessNotFoundException}: No process matches a pid or a fingerprint.
    - C{ToolException}: ps or lsof could not be run, failed, or produced output that
      could not be parsed (C{MalformedOutputException}).
    - C{ProcessOSException}: An operating system operation failed: signal, start, wait,
      open, chdir, or terminal injection.

C{ProcessNotRunningException} is raised only by health checks, which deliberately don't
distinguish among the reasons for a process not being signalable.

Nothing is retried. Whether an exception is fatal is up to the caller.
"""


class ProcessException(Exception):

    def __init__(self, cause):
        super().__init__(cause)
        self.cause = cause

    def __str__(self):
        return str(self.cause)


# User input

class UserInputException(ProcessException):
    pass


class CommandEmptyException(UserInputException):

    def __init__(self):
        super().__init__('process command is empty')


class InvalidSelectionException(UserInputException):

    def __init__(self, selection):
        super().__init__('please enter a valid number')
        self.selection = selection


class UsageException(UserInputException):

    def __init__(self, message, usage=None):
        super().__init__(message if usage is None else f'{message}\n{usage}')


# Not found

class ProcessNotFoundException(ProcessException):

    def __init__(self, description):
        super().__init__(f'No such process: {description}')
        self.description = description


# External tools

class ToolException(ProcessException):

    def __init__(self, command, cause):
        super().__init__(f'{" ".join(command)}: {cause}' if command else cause)
        self.command = command


# Output of ps or lsof that doesn't have the expected shape. The parser doesn't know
# which command produced the output, so the command is not reported.
class MalformedOutputException(ToolException):

    def __init__(self, problem, text):
        super().__init__(None, f'{problem}: {text!r}')
        self.text = text


# Operating system

class ProcessOSException(ProcessException):
    pass


class NotInTtyException(ProcessOSException):

    def __init__(self):
        super().__init__('process is not in a tty')


class ProcessReleasedException(ProcessOSException):

    def __init__(self, pid):
        super().__init__(f'process {pid} has been released' if pid else 'process has no pid')
        self.pid = pid


# Injection stops at the first failure. The bytes already injected remain in the
# terminal's input buffer.
class TerminalInjectionException(ProcessOSException):

    def __init__(self, tty, injected, cause):
        super().__init__(f'Injection into {tty} failed after {injected} bytes: {cause}')
        self.tty = tty
        self.injected = injected


# Health check

class ProcessNotRunningException(ProcessException):

    def __init__(self):
        super().__init__('process is not running')
