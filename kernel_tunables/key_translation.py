#
# Copyright (c) 2019 Matthias Tafelmeier.
#
# This file is part of godon
#
# godon is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# godon is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this godon. If not, see <http://www.gnu.org/licenses/>.
#

"""
Key translation between sysctl notation and /proc/sys paths.

    net.ipv4.ip_forward  <->  net/ipv4/ip_forward

The conversion is a toggle rather than a plain replace: the first
separator decides whether the key still needs converting, and from there
on every '.' and '/' is swapped. That keeps dotted interface names
working, e.g. the VLAN device eth0.100 is addressed as

    net.ipv4.conf.eth0/100.rp_filter  ->  net/ipv4/conf/eth0.100/rp_filter
"""

SEPARATORS = "./"


def translate_key(key: str, old: str, new: str) -> str:
    """
    Swap old/new separators in key, starting at the first separator.

    Args:
        key: Key in either notation
        old: Separator to convert from ('.' or '/')
        new: Separator to convert to ('/' or '.')

    Returns:
        The translated key. Unchanged if it has no separator or if its
        first separator is already `new`.
    """
    positions = [i for i, c in enumerate(key) if c in SEPARATORS]
    if not positions:
        return key

    # First separator already in the target notation
    if key[positions[0]] == new:
        return key

    chars = list(key)
    for i in positions:
        c = chars[i]
        if c == old:
            chars[i] = new
        elif c == new:
            chars[i] = old

    return "".join(chars)


def to_storage_key(key: str) -> str:
    """Dotted key -> path relative to the proc root"""
    return translate_key(key, ".", "/")


def to_display_key(key: str) -> str:
    """Path relative to the proc root -> dotted key"""
    return translate_key(key, "/", ".")


def storage_path(proc_path: str, key: str) -> str:
    """Full storage path; the root prefix itself is never translated"""
    return proc_path + to_storage_key(key)
