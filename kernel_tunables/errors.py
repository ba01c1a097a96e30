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

import errno
import logging

logger = logging.getLogger(__name__)

# Classifications, also used as metric label values
SUCCESS = "success"
UNKNOWN_KEY = "unknown_key"
PERMISSION_DENIED = "permission_denied"
UNKNOWN_ERROR = "unknown_error"
NO_SEPARATOR = "no_separator"
MALFORMED = "malformed"

ERR_UNKNOWN_PARAMETER = "Unknown parameter '{}'"
ERR_MALFORMED_SETTING = "Malformed setting '{}'"
ERR_NO_EQUALS = "'{}' must be of the form name=value"
ERR_INVALID_KEY = "'{}' is an unknown key"
ERR_UNKNOWN = "unknown error {} {} key '{}'"
ERR_PERMISSION_DENIED = "permission denied on key '{}'"
ERR_OPENING_DIR = "unable to open directory '{}'"
ERR_MAX_DEPTH = "maximum depth {} exceeded at '{}'"
ERR_PRELOAD_FILE = "unable to open preload file '{}'"
WARN_BAD_LINE = "{}({}): invalid syntax, continuing..."

# Actions for the unclassified error message
READING = "reading"
SETTING = "setting"


def classify_os_error(exc: OSError) -> str:
    """Map an OSError from opening/accessing a tunable to a classification"""
    if exc.errno == errno.ENOENT:
        return UNKNOWN_KEY
    if exc.errno in (errno.EACCES, errno.EPERM):
        return PERMISSION_DENIED
    return UNKNOWN_ERROR


def report_os_error(exc: OSError, display_name: str, action: str) -> str:
    """
    Log the diagnostic for a failed tunable access.

    Args:
        exc: The error raised by the filesystem call
        display_name: Key in dotted notation, as shown to the user
        action: READING or SETTING

    Returns:
        The classification of the error
    """
    classification = classify_os_error(exc)

    if classification == UNKNOWN_KEY:
        logger.error(ERR_INVALID_KEY.format(display_name))
    elif classification == PERMISSION_DENIED:
        logger.error(ERR_PERMISSION_DENIED.format(display_name))
    else:
        logger.error(ERR_UNKNOWN.format(exc.errno, action, display_name))

    return classification
