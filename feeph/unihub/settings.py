#!/usr/bin/env python3
"""
resolve the effective settings of each fan zone

Precedence (highest first): zone section, global section, command line.
Color is resolved as a single unit:

  zone hex > zone RGB > global hex > global RGB > command line RGB

brightness, speed and mode are resolved independently of each other.
"""

from enum import Enum

from attrs import define, field

from feeph.unihub.conversions import parse_hex_color
from feeph.unihub.errors import InvalidZone
from feeph.unihub.protocol import FAN_COUNT


class FanMode(Enum):
    FIXED     = 'fixed'      # user-provided RPM
    QUIET_CPU = 'quiet-cpu'  # follow the CPU temperature
    QUIET_GPU = 'quiet-gpu'  # follow the GPU temperature

    @property
    def is_reactive(self) -> bool:
        return self != FanMode.FIXED


@define(frozen=True)
class CliDefaults:
    red:        int = 255
    green:      int = 5
    blue:       int = 5
    brightness: float = 100.0
    speed:      int = 1350
    mode:       FanMode = FanMode.FIXED


@define
class ConfigLayer:
    """
    a single section of the configuration file

    unset fields are 'None' and defer to the next layer
    """
    enabled:    bool | None = None
    color:      str | None = None  # hex string, e.g. '#FF0505'
    red:        int | None = None
    green:      int | None = None
    blue:       int | None = None
    brightness: float | None = None
    speed:      int | None = None
    mode:       FanMode | None = None

    def has_rgb(self) -> bool:
        return self.red is not None or self.green is not None or self.blue is not None


@define(frozen=True)
class ZoneSettings:
    zone:       int
    color:      tuple[int, int, int]
    brightness: float
    mode:       FanMode
    speed:      int  # ignored in quiet modes
    enabled:    bool = True


def resolve(zone_id: int, zone_cfg: ConfigLayer | None, global_cfg: ConfigLayer | None, cli_defaults: CliDefaults, min_rpm: int) -> ZoneSettings:
    """
    compute the effective settings for a zone

    a disabled zone goes dark and spins at the minimum speed, all other
    configured fields are ignored
    """
    if not 0 <= zone_id < FAN_COUNT:
        raise InvalidZone(zone_id, FAN_COUNT)
    layers = [layer for layer in (zone_cfg, global_cfg) if layer is not None]
    if not _pick(layers, 'enabled', True):
        return ZoneSettings(zone=zone_id, color=(0, 0, 0), brightness=0, mode=FanMode.FIXED, speed=min_rpm, enabled=False)
    return ZoneSettings(
        zone=zone_id,
        color=_resolve_color(layers, cli_defaults),
        brightness=_pick(layers, 'brightness', cli_defaults.brightness),
        mode=_pick(layers, 'mode', cli_defaults.mode),
        speed=_pick(layers, 'speed', cli_defaults.speed),
        enabled=True,
    )


def _pick(layers: list[ConfigLayer], name: str, default):
    for layer in layers:
        value = getattr(layer, name)
        if value is not None:
            return value
    return default


def _resolve_color(layers: list[ConfigLayer], cli_defaults: CliDefaults) -> tuple[int, int, int]:
    for layer in layers:
        if layer.color is not None:
            return parse_hex_color(layer.color)
        if layer.has_rgb():
            # missing channels are taken from the command line
            return (
                # fmt: off
                layer.red   if layer.red   is not None else cli_defaults.red,
                layer.green if layer.green is not None else cli_defaults.green,
                layer.blue  if layer.blue  is not None else cli_defaults.blue,
                # fmt: on
            )
    return (cli_defaults.red, cli_defaults.green, cli_defaults.blue)


@define
class HubConfig:
    """
    the contents of a configuration file
    """
    global_layer: ConfigLayer | None = None
    zones:        dict[int, ConfigLayer] = field(factory=dict)


def resolve_all(config: HubConfig, cli_defaults: CliDefaults, min_rpm: int) -> list[ZoneSettings]:
    """
    compute the effective settings for all zones (in zone order)
    """
    return [resolve(zone, config.zones.get(zone), config.global_layer, cli_defaults, min_rpm=min_rpm) for zone in range(FAN_COUNT)]
