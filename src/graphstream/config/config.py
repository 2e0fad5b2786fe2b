import logging
import os
import platform
import sys

from configobj import ConfigObj, ConfigObjError, Section, flatten_errors
from validate import Validator

logger = logging.getLogger(__name__)

# The default extension for configuration files
config_extension = '.cfg'


def config_flavor(name, flavor=None):
    """
    >>> config_flavor('graphstream', 'default')
    'graphstream.default'
    >>> config_flavor('graphstream')
    'graphstream'
    """
    return name if not flavor else name + '.' + flavor


def config_filename(name, package=None):
    """
    Determines the location of a config file relative to the source root that holds this package.
    """
    filename = sys.modules[__name__].__file__
    dirname = os.path.abspath(os.path.join(os.path.dirname(os.path.abspath(filename)), '../..'))
    if package:
        dirname = os.path.join(dirname, package.replace('.', '/'))
    return os.path.join(dirname, name + config_extension)


def load_config_file_base(file, must_exist=True) -> ConfigObj:
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    if not must_exist and not os.path.exists(file):
        return ConfigObj()
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist)
    except (IOError, ConfigObjError) as e:
        raise ConfigObjError("unable to load config %s: %s" % (file, e)) from e


def config_flavor_file(name, package=None, flavor=None, must_exist=False) -> ConfigObj:
    """
    Loads a specialization of a config file. The configuration file is expected to be named
    after the base, followed by a period and then the flavor, if the flavor is given,
    otherwise just the base name.
    """
    file = config_filename(config_flavor(name, flavor), package)
    return load_config_file_base(file, must_exist)


def user_config_file(name):
    return os.path.expanduser('~/' + name + config_extension)


def load_config(name, package=None, user_file=None) -> ConfigObj:
    """
        Loads all the configuration files that relate to the given name.
        Configurations are merged in this order, later files overriding earlier ones:
        - the default specialization
        - the platform specialization
        - the user override
        - the base configuration
        The merged configuration is validated against the "schema" specialization, which also
        supplies defaults for missing values.
    :param name: the base name of the configuration to load.
    :param user_file: the user override file. Defaults to ~/<name>.cfg
    :return: the validated ConfigObj
    """
    schema = config_filename(config_flavor(name, 'schema'), package)
    config = ConfigObj(configspec=schema, interpolation='Template')
    config.merge(config_flavor_file(name, package, 'default'))
    config.merge(config_flavor_file(name, package, platform.system().lower()))
    config.merge(load_config_file_base(user_file or user_config_file(name), must_exist=False))
    config.merge(config_flavor_file(name, package))

    result = config.validate(Validator(), preserve_errors=True)
    if result is not True:
        for section_list, key, res in flatten_errors(config, result):
            if key is not None:
                logger.error('The "%s" key in the section "%s" failed validation: %s' %
                             (key, ', '.join(section_list), res))
            else:
                logger.error('The following section was missing: %s' % ', '.join(section_list))
        raise ConfigObjError("the config %s failed validation" % name)
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:    The root configuration
    :param path:    An iterable that lists the names of the sections to resolve
    :return: The configuration section identified by the path, or None
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf(conf: Section, target):
    """
    Applies the scalar values in a configuration section to a target object.
    Only attributes the target already has are set.
    """
    for k in conf.scalars:
        if hasattr(target, k):
            setattr(target, k, conf[k])
    return target


def configure(target, config_path, config_name, package=None, user_file=None):
    """
    Applies defined values from a path to a given target object.
    :param target: The object to receive the values defined
    :param config_path: The path that is the prefix to the values defined. The path is split on '.'.
    :param config_name: The configuration file to load.
    :param package: the package that contains the configuration file
    :return: the target
    """
    conf = fetch_conf_path(load_config(config_name, package, user_file), config_path.split('.'))
    if conf:
        apply_conf(conf, target)
    return target
