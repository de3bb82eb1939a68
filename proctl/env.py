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

import os
import sys

import proctl.exception


class Environment(object):

    PS_VAR = 'PROCTL_PS'
    LSOF_VAR = 'PROCTL_LSOF'
    TRACE_VAR = 'PROCTL_TRACE'

    DEFAULT_PS = 'ps'
    DEFAULT_LSOF = 'lsof'

    def __init__(self, ps=DEFAULT_PS, lsof=DEFAULT_LSOF, trace=None):
        self.ps = ps
        self.lsof = lsof
        self.trace = trace if trace else Trace()

    def __repr__(self):
        return f'Environment(ps={self.ps}, lsof={self.lsof}, trace={self.trace.description})'

    @staticmethod
    def create(trace=None):
        env = Environment(ps=os.getenv(Environment.PS_VAR, default=Environment.DEFAULT_PS),
                          lsof=os.getenv(Environment.LSOF_VAR, default=Environment.DEFAULT_LSOF),
                          trace=trace)
        # PROCTL_TRACE=- traces to stdout, anything else names a file.
        target = os.getenv(Environment.TRACE_VAR)
        if target and not env.trace.is_enabled():
            env.trace.enable(target)
        return env



class Trace(object):
    """Records what proctl asks of the outside world, one line per event:

        run: ps -ww -e -o pid= -o tty= -o args= -> 214 lines
        failed: lsof -p 4242 -> exit status 1
        find_pid: process(4242) pts/1 -> python3 worker.py --fast

    The target is a path, opened for appending, C{-} for stdout, or an open file,
    which the caller continues to own.
    """

    STDOUT = '-'

    def __init__(self):
        self.tracefile = None
        self.description = None
        self.owned = False

    def is_enabled(self):
        return self.tracefile is not None

    def enable(self, target):
        if target == Trace.STDOUT or target is sys.stdout:
            self.tracefile = sys.stdout
            self.description = 'stdout'
        elif hasattr(target, 'write'):
            self.tracefile = target
            self.description = repr(target)
        else:
            try:
                self.tracefile = open(target, 'a')
                self.description = target
                self.owned = True
            except OSError as e:
                raise proctl.exception.ProcessOSException(f'Unable to start tracing to {target}: {e}')

    def disable(self):
        if self.owned:
            self.tracefile.close()
        self.tracefile = None
        self.description = None
        self.owned = False

    def run(self, command, stdout):
        self.write('run', ' '.join(command), f'{len(stdout.splitlines())} lines')

    def failed(self, command, cause):
        self.write('failed', ' '.join(command), cause)

    # A lookup has bound process to a pid.
    def found(self, operation, process):
        self.write(operation, f'process({process.pid}) {process.tty}', process.full_command())

    def write(self, phase, subject, output=None):
        if self.tracefile is None:
            return
        line = f'{phase}: {subject}' if output is None else f'{phase}: {subject} -> {output}'
        print(line, file=self.tracefile, flush=True)
