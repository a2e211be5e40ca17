#!/usr/bin/env python3
"""
read the configuration file

TOML example:

```
[global]
color = "#FF0505"
brightness = 100
speed = 1000
mode = "fixed"

[fan3]
enabled = false
```

Files without a [global] section are read as a single global section
(the format used by earlier versions). YAML files (.yaml, .yml) use
the same structure.
"""

import logging
import os
import tomllib

import yaml

from feeph.unihub.errors import ConfigError, ConfigParseError
from feeph.unihub.protocol import FAN_COUNT
from feeph.unihub.settings import ConfigLayer, FanMode, HubConfig

LH = logging.getLogger('feeph.unihub')


GLOBAL_SECTION = 'global'
ZONE_SECTION_PREFIX = 'fan'
FIELDS = ('enabled', 'color', 'red', 'green', 'blue', 'brightness', 'speed', 'mode')


def load_config(path: str) -> HubConfig:
    """
    read and parse the configuration file

    raises ConfigError if the file can't be read and ConfigParseError
    if its content is malformed
    """
    try:
        with open(path, 'rb') as fh:
            content = fh.read()
    except OSError as e:
        raise ConfigError(f"unable to read config file '{path}': {e}") from e
    _, extension = os.path.splitext(path)
    try:
        if extension.lower() in ('.yaml', '.yml'):
            data = yaml.safe_load(content)
        else:
            data = tomllib.loads(content.decode('utf-8'))
    except (tomllib.TOMLDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"unable to parse config file '{path}': {e}") from e
    if data is None:
        data = {}
    return import_hub_config(data)


def load_config_or_defaults(path: str | None) -> HubConfig:
    """
    read the configuration file, an unreadable or malformed file results
    in an empty configuration (command line defaults apply)
    """
    if path is None:
        return HubConfig()
    try:
        config = load_config(path)
    except ConfigError as e:
        LH.warning("%s", e)
        LH.warning("Ignoring config file. Using command line settings instead.")
        return HubConfig()
    LH.info("Loaded config file '%s'.", path)
    return config


def import_hub_config(data: dict) -> HubConfig:
    if not isinstance(data, dict):
        raise ConfigParseError("config must be a table of sections")
    flat_keys = [key for key in data if key in FIELDS]
    if GLOBAL_SECTION in data and flat_keys:
        raise ConfigParseError(f"found top-level settings ({', '.join(flat_keys)}) and a [{GLOBAL_SECTION}] section")
    config = HubConfig()
    if GLOBAL_SECTION in data:
        config.global_layer = import_config_layer(data[GLOBAL_SECTION], section=GLOBAL_SECTION)
    elif flat_keys:
        LH.debug("No [%s] section, using top-level settings instead.", GLOBAL_SECTION)
        config.global_layer = import_config_layer({key: data[key] for key in flat_keys}, section=GLOBAL_SECTION)
    for key, value in data.items():
        if key == GLOBAL_SECTION or key in FIELDS:
            continue
        zone = _parse_zone_section(key)
        if zone is None:
            LH.warning("Ignoring unknown config entry '%s'.", key)
            continue
        config.zones[zone] = import_config_layer(value, section=key)
    return config


def import_config_layer(data: dict, section: str) -> ConfigLayer:
    if not isinstance(data, dict):
        raise ConfigParseError(f"[{section}] must be a table")
    layer = ConfigLayer()
    for key, value in data.items():
        if key not in FIELDS:
            LH.warning("Ignoring unknown setting '%s' in [%s].", key, section)
            continue
        setattr(layer, key, _parse_value(section, key, value))
    return layer


def _parse_zone_section(name: str) -> int | None:
    """
    'fan2' -> 2

    returns 'None' if this is not a zone section at all and raises
    ConfigParseError if the zone does not exist
    """
    if not isinstance(name, str) or not name.startswith(ZONE_SECTION_PREFIX):
        return None
    suffix = name[len(ZONE_SECTION_PREFIX):]
    if not suffix.isdecimal():
        return None
    zone = int(suffix)
    if zone >= FAN_COUNT:
        raise ConfigParseError(f"[{name}] does not exist (zones: {ZONE_SECTION_PREFIX}0..{ZONE_SECTION_PREFIX}{FAN_COUNT - 1})")
    return zone


def _parse_value(section: str, key: str, value):
    # bool is a subclass of int and must be excluded explicitly
    if key == 'enabled':
        if isinstance(value, bool):
            return value
    elif key == 'color':
        if isinstance(value, str):
            return value
    elif key in ('red', 'green', 'blue'):
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 255:
            return value
    elif key == 'brightness':
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif key == 'speed':
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
    elif key == 'mode':
        if isinstance(value, str):
            try:
                return FanMode(value.lower())
            except ValueError:
                pass
    raise ConfigParseError(f"invalid value {value!r} for '{key}' in [{section}]")
