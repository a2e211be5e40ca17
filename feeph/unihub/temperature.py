#!/usr/bin/env python3
"""
temperature sensors and the temperature to fan speed mapping used by
the quiet modes
"""

import glob
import logging
import os
from abc import ABC, abstractmethod

import psutil
import pynvml

LH = logging.getLogger('feeph.unihub')

# single linear segment: TEMP_LOW -> min_rpm, TEMP_HIGH -> max_rpm
TEMP_LOW = 30.0
TEMP_HIGH = 80.0

# used if no sensor is available
FALLBACK_TEMPERATURE = 50.0

CPU_LABELS = ('package id', 'tctl', 'tdie', 'cpu', 'core', 'k10temp', 'coretemp', 'zenpower')

# AMD GPUs expose their temperature via the DRM subsystem
DRM_CARDS = range(5)


def map_temp_to_rpm(temperature: float, min_rpm: int, max_rpm: int) -> int:
    """
    map a temperature (°C) to a fan speed (RPM)
    (≤30°C -> min_rpm, ≥80°C -> max_rpm)
    """
    if temperature <= TEMP_LOW:
        return min_rpm
    if temperature >= TEMP_HIGH:
        return max_rpm
    ratio = (temperature - TEMP_LOW) / (TEMP_HIGH - TEMP_LOW)
    return round(min_rpm + ratio * (max_rpm - min_rpm))


class TemperatureSource(ABC):
    """
    abstract base class for temperature sources
    """

    name = 'unknown'

    @abstractmethod
    def get_temperature(self) -> float:
        """
        get the current temperature in °C

        must not raise, use FALLBACK_TEMPERATURE if there is no reading
        """
        ...


class CpuTemperature(TemperatureSource):

    name = 'CPU'

    def get_temperature(self) -> float:
        """
        maximum reading among all CPU sensors

        falls back to the maximum of all sensors if no CPU sensor
        could be identified
        """
        readings = _read_psutil_sensors()
        cpu_temps = [value for text, value in readings if any(label in text for label in CPU_LABELS)]
        if cpu_temps:
            temperature = max(cpu_temps)
            LH.debug("Detected CPU temperature: %.1f°C", temperature)
            return temperature
        other_temps = [value for _, value in readings if value > 0]
        if other_temps:
            temperature = max(other_temps)
            LH.debug("No CPU sensor found, using hottest sensor: %.1f°C", temperature)
            return temperature
        LH.warning("No CPU temperature detected, using fallback %.0f°C", FALLBACK_TEMPERATURE)
        return FALLBACK_TEMPERATURE


class GpuTemperature(TemperatureSource):

    name = 'GPU'

    def __init__(self, drm_root: str = '/sys/class/drm'):
        self._drm_root = drm_root

    def get_temperature(self) -> float:
        temperature = _read_nvml_temperature()
        if temperature is not None:
            LH.debug("Detected NVIDIA GPU, temperature: %.1f°C", temperature)
            return temperature
        temperature = _read_amdgpu_temperature(self._drm_root)
        if temperature is not None:
            LH.debug("Detected AMD GPU, temperature: %.1f°C", temperature)
            return temperature
        LH.warning("No GPU temperature detected, using fallback %.0f°C", FALLBACK_TEMPERATURE)
        return FALLBACK_TEMPERATURE


def get_cpu_temp() -> float:
    return CpuTemperature().get_temperature()


def get_gpu_temp() -> float:
    return GpuTemperature().get_temperature()


def _read_psutil_sensors() -> list[tuple[str, float]]:
    """
    returns a list of ('<chip> <label>', temperature) tuples
    (the text is lowercase)
    """
    # not available on all platforms
    sensors_temperatures = getattr(psutil, 'sensors_temperatures', None)
    if sensors_temperatures is None:
        return []
    try:
        sensors = sensors_temperatures() or {}
    except (OSError, RuntimeError) as e:
        LH.debug("Unable to enumerate temperature sensors: %s", e)
        return []
    readings = []
    for chip, entries in sensors.items():
        for entry in entries:
            if entry.current is not None:
                readings.append((f"{chip} {entry.label}".lower(), float(entry.current)))
    return readings


def _read_nvml_temperature() -> float | None:
    try:
        pynvml.nvmlInit()
    except pynvml.NVMLError as e:
        LH.debug("NVML is not available: %s", e)
        return None
    try:
        handle = pynvml.nvmlDeviceGetHandleByIndex(0)
        return float(pynvml.nvmlDeviceGetTemperature(handle, pynvml.NVML_TEMPERATURE_GPU))
    except pynvml.NVMLError as e:
        LH.debug("Unable to read GPU temperature via NVML: %s", e)
        return None
    finally:
        pynvml.nvmlShutdown()


def _read_amdgpu_temperature(drm_root: str) -> float | None:
    for card in DRM_CARDS:
        pattern = os.path.join(drm_root, f"card{card}", "device", "hwmon", "hwmon*", "temp1_input")
        for path in sorted(glob.glob(pattern)):
            try:
                with open(path) as fh:
                    return int(fh.read().strip()) / 1000.0  # millidegree -> °C
            except (OSError, ValueError):
                continue
    return None
