# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

"""Loading of the bundled default configuration file

"""
import configparser
import os

from argparse import Namespace

_DEFAULT_NAME = 'default.cfg'
_BASEDIR = os.path.dirname(os.path.abspath(__file__))


def load_config_from_file(default_file: str = "") -> Namespace:
    """ Load config from default config.

        Values in the [top] section are placed directly in the namespace returned,
        values in any other section are placed in a nested namespace with the
        name of the section.

        Arguments:
            default_file: the path to the default config file, if not provided
                          the bundled version will be used

        Returns:
            a Namespace mapping option name to option value
    """
    namespace = Namespace()
    default_file = default_file or os.path.join(_BASEDIR, _DEFAULT_NAME)
    config = configparser.ConfigParser()
    with open(default_file, "r", encoding="utf-8") as handle:
        config.read_file(handle)

    for section in config.sections():
        if section not in namespace:
            namespace.__dict__[section] = Namespace()
        for key, value in config.items(section):
            key = key.replace('-', '_')
            if key in namespace.__dict__[section]:
                continue
            if value.lower() in ("true", "false", "yes", "no", "on", "off"):
                value = config.getboolean(section, key)
            namespace.__dict__[section].__dict__[key] = value
    if "top" in namespace:
        top_level = namespace.__dict__.pop("top")
        for key, value in top_level.__dict__.items():
            namespace.__dict__[key] = value
    else:
        namespace.__dict__["branding"] = "seqfeat"

    return namespace
