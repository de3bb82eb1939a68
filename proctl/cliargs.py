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

import proctl.exception


def _report_error(message, usage):
    raise proctl.exception.UsageException(message, usage)


class FlagArg(object):

    def __init__(self, f1, f2, default, required):
        self.default = default
        self.required = required
        self.var = None  # Filled in by CommandLine
        self.short = None
        self.long = None
        if f2 is None:
            if FlagArg.is_short(f1):
                self.short = f1
            elif FlagArg.is_long(f1):
                self.long = f1
            else:
                _report_error(f'Invalid flag: {f1}', None)
        elif FlagArg.is_short(f1) and FlagArg.is_long(f2):
            self.short = f1
            self.long = f2
        elif FlagArg.is_long(f1) and FlagArg.is_short(f2):
            self.long = f1
            self.short = f2
        else:
            _report_error(f'If two flags are specified, one must be long and one must be short: {f1}, {f2}', None)

    def __repr__(self):
        return (f'{self.short}|{self.long}' if self.short and self.long else
                self.short if self.short else
                self.long)

    def flags(self):
        return [flag for flag in (self.short, self.long) if flag is not None]

    def has_flag(self, flag):
        return flag in self.flags()

    def is_boolean(self):
        return False

    @staticmethod
    def is_short(f):
        return len(f) >= 2 and f[0] == '-' and f[1] != '-'

    @staticmethod
    def is_long(f):
        return len(f) >= 3 and f.startswith('--')


class BooleanFlagArg(FlagArg):

    def __init__(self, f1, f2, default):
        super().__init__(f1, f2, default, False)

    def is_boolean(self):
        return True


class CommandLine(object):

    def __init__(self, usage, **var_arg):
        self.usage = usage
        self.var_arg = var_arg
        all_flags = set()
        for var, arg in self.var_arg.items():
            if not (type(var) is str and var.isidentifier()):
                _report_error(f'Var must be valid as a Python identifier: {var}', None)
            arg.var = var
            for flag in arg.flags():
                if flag in all_flags:
                    _report_error(f'Duplicated flag: {flag}', None)
                all_flags.add(flag)

    # argv excludes the program name. Returns a dict mapping each var to its value.
    def parse(self, argv):
        def arg_of(flag):
            for arg in self.var_arg.values():
                if arg.has_flag(flag):
                    return arg
            _report_error(f'Unrecognized flag: {flag}', self.usage)

        values = {arg.var: arg.default for arg in self.var_arg.values() if not arg.required}
        a = 0
        while a < len(argv):
            token = argv[a]
            a += 1
            if not token.startswith('-'):
                _report_error(f'Unexpected argument: {token}', self.usage)
            arg = arg_of(token)
            if arg.is_boolean():
                values[arg.var] = True
            elif a == len(argv) or argv[a].startswith('-'):
                _report_error(f'Value missing for flag: {token}', self.usage)
            else:
                values[arg.var] = argv[a]
                a += 1
        for arg in self.var_arg.values():
            if arg.required and arg.var not in values:
                _report_error(f'No value specified for required flag: {arg}', self.usage)
        return values


def flag(f1, f2=None, default=None, required=False):
    return FlagArg(f1, f2, default=default, required=required)


def boolean_flag(f1, f2=None, default=False):
    return BooleanFlagArg(f1, f2, default=default)
