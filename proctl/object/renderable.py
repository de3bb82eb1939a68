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


class Renderable:

    def __repr__(self):
        return self.render_compact()

    def __str__(self):
        return self.render_full()

    # Short description, suitable for messages and lists
    def render_compact(self):
        assert False

    # Complete, multi-line description
    def render_full(self):
        assert False
