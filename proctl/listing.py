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

import subprocess

import proctl.env
import proctl.exception


# Runs ps and lsof, returning stdout. -ww keeps ps from truncating command lines.
class Listing(object):

    def __init__(self, env=None):
        self.env = env if env else proctl.env.Environment.create()

    def __repr__(self):
        return f'Listing({self.env.ps}, {self.env.lsof})'

    def all_processes(self):
        return self.run(self.env.ps, '-ww', '-e', '-o', 'pid=', '-o', 'tty=', '-o', 'args=')

    def tty_and_command(self, pid):
        return self.run(self.env.ps, '-o', 'tty=', '-o', 'comm=', '-p', str(pid))

    def command_line(self, pid):
        return self.run(self.env.ps, '-ww', '-o', 'args=', '-p', str(pid))

    def open_files(self, pid):
        return self.run(self.env.lsof, '-p', str(pid))

    def run(self, *command):
        trace = self.env.trace
        try:
            process = subprocess.run(command,
                                     stdout=subprocess.PIPE,
                                     stderr=subprocess.PIPE,
                                     universal_newlines=True)
        except OSError as e:
            trace.failed(command, e)
            raise proctl.exception.ToolException(command, e) from e
        if process.returncode != 0:
            stderr = process.stderr.strip()
            cause = f'exit status {process.returncode}' + (f': {stderr}' if stderr else '')
            trace.failed(command, cause)
            raise proctl.exception.ToolException(command, cause)
        trace.run(command, process.stdout)
        return process.stdout
