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

import sys

import prompt_toolkit

import proctl.cliargs
import proctl.env
import proctl.exception
import proctl.listing
import proctl.lookup
import proctl.util

USAGE = '''usage: proctl (-p|--pid PID | -n|--name NAME) [-c|--check] [-k|--kill] [-r|--restart] [-d|--detach]

    -p, --pid PID       The process with the given pid.
    -n, --name NAME     Choose among the processes whose command mentions NAME.
    -c, --check         Report whether the process is running.
    -k, --kill          Kill the process.
    -r, --restart       Kill the process and run its command again, typed into its
                        terminal if it has one, (this usually requires root).
    -d, --detach        With --restart, for a process without a terminal: run the
                        command in a new session.'''


# Selection input for find_by_name, when stdin is a terminal.
class ConsoleReader(object):

    def __init__(self):
        self.session = prompt_toolkit.PromptSession()

    def readline(self):
        return self.session.prompt('> ')


def parse_args(argv):
    values = proctl.cliargs.CommandLine(USAGE,
                                        pid=proctl.cliargs.flag('-p', '--pid'),
                                        name=proctl.cliargs.flag('-n', '--name'),
                                        check=proctl.cliargs.boolean_flag('-c', '--check'),
                                        kill=proctl.cliargs.boolean_flag('-k', '--kill'),
                                        restart=proctl.cliargs.boolean_flag('-r', '--restart'),
                                        detach=proctl.cliargs.boolean_flag('-d', '--detach')).parse(argv)
    if (values['pid'] is None) == (values['name'] is None):
        raise proctl.exception.UsageException('Specify exactly one of --pid and --name', USAGE)
    if values['kill'] and values['restart']:
        raise proctl.exception.UsageException('--kill and --restart are mutually exclusive', USAGE)
    if values['pid'] is not None:
        try:
            values['pid'] = int(values['pid'])
        except ValueError:
            raise proctl.exception.UsageException(f'pid must be an int: {values["pid"]}', USAGE)
    return values


def find(values, listing):
    if values['pid'] is not None:
        return proctl.lookup.find_by_pid(values['pid'], listing)
    reader = ConsoleReader() if sys.stdin.isatty() else sys.stdin
    return proctl.lookup.find_by_name(values['name'], writer=sys.stdout, reader=reader, listing=listing)


def restart(process, detach, listing):
    process.kill()
    process.wait()
    if process.in_tty():
        with process.open_tty() as tty:
            process.start_tty(tty, listing=listing)
        print(process)
        return 0
    status = process.start(detach=detach)
    # Death by signal n is reported as 128 + n, as shells do.
    return status if status >= 0 else 128 - status


def run(argv, env):
    values = parse_args(argv)
    listing = proctl.listing.Listing(env)
    process = find(values, listing)
    print(process)
    if values['check']:
        print('running' if process.is_running() else 'not running')
    if values['kill']:
        process.kill()
        process.wait()
    if values['restart']:
        return restart(process, values['detach'], listing)
    return 0


def main(argv=None):
    env = None
    try:
        env = proctl.env.Environment.create()
        status = run(sys.argv[1:] if argv is None else argv, env)
    except proctl.exception.ProcessException as e:
        proctl.util.print_to_stderr(e)
        status = 1
    finally:
        if env:
            env.trace.disable()
    sys.exit(status)


if __name__ == '__main__':
    main()
