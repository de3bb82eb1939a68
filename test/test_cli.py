import io
import os
import sys
import tempfile

import proctl.cliargs
import proctl.env
import proctl.exception
import proctl.listing
import proctl.lookup
import proctl.main
import proctl.object.process

import test_base

timeit = test_base.timeit
TEST = test_base.TestBase()

PID = os.getpid()


# Sets environment variables, restoring the originals afterward.
class EnvironmentVariables:

    def __init__(self, **vars):
        self.vars = vars
        self.original = {}

    def __enter__(self):
        for var, value in self.vars.items():
            self.original[var] = os.environ.get(var)
            if value is None:
                os.environ.pop(var, None)
            else:
                os.environ[var] = value
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        for var, value in self.original.items():
            if value is None:
                os.environ.pop(var, None)
            else:
                os.environ[var] = value


def command_line():
    return proctl.cliargs.CommandLine('usage: test',
                                      count=proctl.cliargs.flag('-c', '--count', default='1'),
                                      name=proctl.cliargs.flag('--name', required=True),
                                      verbose=proctl.cliargs.boolean_flag('-v', '--verbose'))


@timeit
def test_cliargs():
    TEST.check_eq(test_cliargs,
                  {'count': '1', 'name': 'x', 'verbose': False},
                  command_line().parse(['--name', 'x']))
    TEST.check_eq(test_cliargs,
                  {'count': '5', 'name': 'x', 'verbose': True},
                  command_line().parse(['-v', '--count', '5', '--name', 'x']))
    TEST.check_eq(test_cliargs,
                  {'count': '5', 'name': 'x', 'verbose': True},
                  command_line().parse(['--name', 'x', '-c', '5', '--verbose']))


@timeit
def test_cliargs_errors():
    def check(argv, message):
        TEST.check_raises(test_cliargs_errors,
                          proctl.exception.UsageException,
                          lambda: command_line().parse(argv),
                          message)

    check([], 'No value specified for required flag: --name')
    check(['--name'], 'Value missing for flag: --name')
    check(['--name', '-v'], 'Value missing for flag: --name')
    check(['--name', 'x', '-q'], 'Unrecognized flag: -q')
    check(['--name', 'x', 'y'], 'Unexpected argument: y')
    check(['--name', 'x', 'y'], 'usage: test')
    TEST.check_raises(test_cliargs_errors,
                      proctl.exception.UsageException,
                      lambda: proctl.cliargs.flag('-a', '-b'),
                      'one must be long and one must be short')
    TEST.check_raises(test_cliargs_errors,
                      proctl.exception.UsageException,
                      lambda: proctl.cliargs.CommandLine('usage',
                                                         a=proctl.cliargs.flag('-a'),
                                                         b=proctl.cliargs.flag('-a', '--bee')),
                      'Duplicated flag: -a')


@timeit
def test_parse_args():
    values = proctl.main.parse_args(['-p', '123', '--check'])
    TEST.check_eq(test_parse_args, 123, values['pid'])
    TEST.check_eq(test_parse_args, None, values['name'])
    TEST.check_eq(test_parse_args, True, values['check'])
    TEST.check_eq(test_parse_args, False, values['kill'])
    values = proctl.main.parse_args(['--name', 'cron', '-r', '-d'])
    TEST.check_eq(test_parse_args, 'cron', values['name'])
    TEST.check_eq(test_parse_args, True, values['restart'])
    TEST.check_eq(test_parse_args, True, values['detach'])

    def check_error(argv, message):
        TEST.check_raises(test_parse_args,
                          proctl.exception.UsageException,
                          lambda: proctl.main.parse_args(argv),
                          message)

    check_error([], 'Specify exactly one of --pid and --name')
    check_error(['-p', '1', '-n', 'cron'], 'Specify exactly one of --pid and --name')
    check_error(['-p', '1', '-k', '-r'], 'mutually exclusive')
    check_error(['-p', 'one'], 'pid must be an int: one')


@timeit
def test_environment():
    with EnvironmentVariables(PROCTL_PS=None, PROCTL_LSOF=None, PROCTL_TRACE=None):
        env = proctl.env.Environment.create()
        TEST.check_eq(test_environment, 'ps', env.ps)
        TEST.check_eq(test_environment, 'lsof', env.lsof)
        TEST.check_eq(test_environment, False, env.trace.is_enabled())
    with tempfile.TemporaryDirectory() as dir:
        trace_path = os.path.join(dir, 'trace')
        with EnvironmentVariables(PROCTL_PS='/opt/ps', PROCTL_LSOF='/opt/lsof', PROCTL_TRACE=trace_path):
            env = proctl.env.Environment.create()
            TEST.check_eq(test_environment, '/opt/ps', env.ps)
            TEST.check_eq(test_environment, '/opt/lsof', env.lsof)
            TEST.check_eq(test_environment, True, env.trace.is_enabled())
            process = proctl.object.process.Process(cmd='sleep', args=['60'], tty='pts/1')
            process.pid = 123
            env.trace.run(['ps', '-e'], '  1 ?  init\n123 pts/1  sleep 60\n')
            env.trace.found('find_pid', process)
            env.trace.disable()
            TEST.check_eq(test_environment, False, env.trace.is_enabled())
        with open(trace_path) as trace_file:
            TEST.check_eq(test_environment, 'run: ps -e -> 2 lines\nfind_pid: process(123) pts/1 -> sleep 60\n', trace_file.read())
    with EnvironmentVariables(PROCTL_TRACE='-'):
        env = proctl.env.Environment.create()
        TEST.check_eq(test_environment, 'stdout', env.trace.description)
        env.trace.disable()
    with EnvironmentVariables(PROCTL_TRACE='/no/such/dir/trace'):
        TEST.check_raises(test_environment,
                          proctl.exception.ProcessOSException,
                          lambda: proctl.env.Environment.create(),
                          'Unable to start tracing')


@timeit
def test_trace_lookups():
    trace = proctl.env.Trace()
    output = io.StringIO()
    trace.enable(output)
    listing = test_base.FakeListing(all_processes=f'  {PID} pts/1    /usr/bin/python3 worker.py\n')
    listing.env.trace = trace
    proctl.lookup.find_by_fingerprint('python3', ['worker.py'], 'pts/1', listing)
    # Trace doesn't close a file it didn't open
    trace.disable()
    TEST.check_eq(test_trace_lookups, False, trace.is_enabled())
    TEST.check_eq(test_trace_lookups, f'find_pid: process({PID}) pts/1 -> python3 worker.py\n', output.getvalue())
    # Tool runs and failures
    output = io.StringIO()
    env = proctl.env.Environment(ps='/no/such/ps')
    env.trace.enable(output)
    listing = proctl.listing.Listing(env)
    TEST.check_raises(test_trace_lookups, proctl.exception.ToolException, lambda: listing.all_processes())
    TEST.check_substring(test_trace_lookups, 'failed: /no/such/ps -ww -e -o pid= -o tty= -o args= -> ', output.getvalue())


@timeit
def test_listing_failures():
    listing = proctl.listing.Listing(proctl.env.Environment(ps='/no/such/ps'))
    TEST.check_raises(test_listing_failures,
                      proctl.exception.ToolException,
                      lambda: listing.all_processes(),
                      '/no/such/ps -ww -e')
    # Tool runs, but fails
    listing = proctl.listing.Listing(proctl.env.Environment(lsof=sys.executable))
    TEST.check_raises(test_listing_failures,
                      proctl.exception.ToolException,
                      lambda: listing.open_files(PID),
                      'exit status')


@timeit
def test_main():
    e = TEST.check_raises(test_main,
                          SystemExit,
                          lambda: proctl.main.main(['--pid']))
    TEST.check_eq(test_main, 1, e.code)
    e = TEST.check_raises(test_main,
                          SystemExit,
                          lambda: proctl.main.main(['--pid', '-5']))
    TEST.check_eq(test_main, 1, e.code)


@timeit
def test_main_check_self():
    TEST.require_executables('ps', 'lsof')
    e = TEST.check_raises(test_main_check_self,
                          SystemExit,
                          lambda: proctl.main.main(['--pid', str(PID), '--check']))
    TEST.check_eq(test_main_check_self, 0, e.code)


def main():
    TEST.run(test_cliargs,
             test_cliargs_errors,
             test_parse_args,
             test_environment,
             test_trace_lookups,
             test_listing_failures,
             test_main,
             test_main_check_self)
    TEST.report_failures('test_cli')
    sys.exit(TEST.failures)


if __name__ == '__main__':
    main()
