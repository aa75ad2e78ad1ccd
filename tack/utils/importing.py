# Copyright (c) 2011-2015 Rackspace US, Inc.
# All Rights Reserved.
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.
"""Utilities for importing optional dependencies.

Modules in tack that talk to a driver or a heavy library (``pyodbc``,
``pandas``) import it through :func:`import_me_maybe` so that the rest of
the package stays usable without it:

    from tack.utils import importing

    pyodbc = importing.import_me_maybe('pyodbc')

A DependencyRequiredWarning is emitted when the import fails. To silence it:

    from tack.utils.importing import disable_warnings_for

    disable_warnings_for('pandas')
"""
import importlib
import inspect
import os
import warnings

from tack.exceptions import DependencyRequiredWarning


def import_me_maybe(name, package=None):
    """Try to import a module by name and return it.

    If the module is not found, this function returns None.

    Emits a DependencyRequiredWarning if the import fails along
    with information about the caller that needed it.
    """
    # lookup caller
    importer = inspect.stack()[1]
    importer_module_name = inspect.getmodulename(importer[1])
    fq_path = os.path.abspath(importer[1]).split(os.path.sep)
    if 'tack' in fq_path:
        # find the rightmost instance of 'tack' in path
        begin = (len(fq_path) - 1) - fq_path[::-1].index('tack')
        import_string = '.'.join(fq_path[begin:-1] + [importer_module_name])
    else:
        import_string = importer_module_name or importer[1]
    try:
        mod = importlib.import_module(name, package=package)
    except ImportError as err:
        mod = None
        imp_err = '%s: %s' % (type(err).__name__, str(err))
        warn_msg = DependencyRequiredWarning.format_msg(
            import_string=import_string, requirement=name, from_exc=imp_err)
        warnings.warn(warn_msg, DependencyRequiredWarning, stacklevel=2)
    return mod


def require(module, name):
    """Return `module` or raise ImportError naming the missing `name`."""
    if module is None:
        raise ImportError("'%s' is required for this operation. "
                          "Install it with `pip install %s`." % (name, name))
    return module


def disable_warnings_for(name):
    """Disable DependencyRequiredWarning for this requirement."""
    return DependencyRequiredWarning.filter(requirement=name)
