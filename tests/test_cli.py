#!/usr/bin/env python3
# pylint: disable=missing-class-docstring,missing-function-docstring,missing-module-docstring

import os
import signal
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from emulated_hid import EmulatedHidDevice

import feeph.unihub.cli as sut  # system under test
import feeph.unihub.scheduler
from feeph.unihub.errors import DeviceNotFound
from feeph.unihub.protocol import build_confirm_sequence, build_init_sequence
from feeph.unihub.settings import FanMode
from feeph.unihub.temperature import TemperatureSource
from feeph.unihub.transport import HidTransport


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.device = EmulatedHidDevice()
        self.transport = HidTransport(device=self.device, vendor_id=0x0CF2, product_id=0xA100)
        self.signal = MagicMock(name='signal')
        patchers = [
            patch('time.sleep'),
            patch.object(sut.coloredlogs, 'install'),
            patch.object(sut.colorama, 'init'),
            patch.object(sut.signal, 'signal', self.signal),
            patch.object(sut.HidTransport, 'open', return_value=self.transport),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def _write_config(self, content: str) -> str:
        path = os.path.join(self.tmpdir.name, 'fans.toml')
        with open(path, 'w') as fh:
            fh.write(content)
        return path

    def test_fixed_run(self):
        argv = ['--red', '255', '--green', '0', '--blue', '0', '--brightness', '50', '--speed', '1200', '--mode', 'fixed']
        # -----------------------------------------------------------------
        computed = sut.main(argv)
        # -----------------------------------------------------------------
        self.assertEqual(computed, 0)
        expected = [('feature', frame) for frame in build_init_sequence()]
        for zone in range(4):
            expected.append(('write', bytes([0xE0, 0x30 + zone]) + bytes([128, 0, 0]) * 117))
            expected.extend(('feature', frame) for frame in build_confirm_sequence(zone))
        for zone in range(4):
            expected.append(('write', bytes([0xE0, 0x10, 0x31, 0x10 << zone])))
            expected.append(('write', bytes([0xE0, 0x20 + zone, 0x00, 93])))
        self.assertEqual(self.device.frames, expected)
        self.assertTrue(self.device.closed)

    def test_config_overrides_command_line(self):
        path = self._write_config('[global]\ncolor = "#00FF00"\n\n[fan3]\nenabled = false\n')
        # -----------------------------------------------------------------
        computed = sut.main(['--config', path, '--red', '255'])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 0)
        colors = [frame for frame in self.device.writes() if len(frame) == 353]
        self.assertEqual(colors[0][2:5], bytes([0x00, 0x00, 0xFF]))  # R, B, G
        self.assertEqual(colors[3][2:5], bytes([0x00, 0x00, 0x00]))  # disabled
        self.assertIn(bytes([0xE0, 0x23, 0x00, 0x01]), self.device.writes())  # minimum speed

    def test_broken_config_falls_back_to_command_line(self):
        path = self._write_config('[global\n')
        # -----------------------------------------------------------------
        with self.assertLogs('feeph.unihub', level='WARNING'):
            computed = sut.main(['--config', path, '--red', '1', '--green', '2', '--blue', '3'])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 0)
        colors = [frame for frame in self.device.writes() if len(frame) == 353]
        self.assertEqual(colors[0][2:5], bytes([1, 3, 2]))

    def test_device_not_found(self):
        with patch.object(sut.HidTransport, 'open', side_effect=DeviceNotFound(0x0CF2, [0xA100])):
            with self.assertLogs('feeph.unihub', level='ERROR'):
                computed = sut.main([])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 1)

    def test_invalid_speed(self):
        with self.assertLogs('feeph.unihub', level='ERROR') as logs:
            computed = sut.main(['--speed', '5000'])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 1)
        self.assertIn("805", logs.output[-1])
        self.assertTrue(self.device.closed)

    def test_invalid_brightness(self):
        with self.assertLogs('feeph.unihub', level='ERROR'):
            computed = sut.main(['--brightness', '120'])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 1)

    def test_invalid_hex_color_in_config(self):
        path = self._write_config('color = "#12345"\n')
        # -----------------------------------------------------------------
        with self.assertLogs('feeph.unihub', level='ERROR'):
            computed = sut.main(['--config', path])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 1)

    def test_transport_error(self):
        self.device.write = MagicMock(return_value=-1)
        # -----------------------------------------------------------------
        with self.assertLogs('feeph.unihub', level='ERROR'):
            computed = sut.main([])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 1)

    def test_invalid_channel_value(self):
        with patch('sys.stderr'):
            with self.assertRaises(SystemExit) as context:
                sut.main(['--red', '256'])
        # -----------------------------------------------------------------
        self.assertEqual(context.exception.code, 2)

    def test_invalid_mode(self):
        with patch('sys.stderr'):
            with self.assertRaises(SystemExit) as context:
                sut.main(['--mode', 'turbo'])
        # -----------------------------------------------------------------
        self.assertEqual(context.exception.code, 2)

    def test_quiet_mode_stops_on_signal(self):
        test = self

        class InterruptedTemperature(TemperatureSource):
            name = 'CPU'

            def get_temperature(self) -> float:
                # simulate SIGTERM while the first tick is processed
                handlers = {c.args[0]: c.args[1] for c in test.signal.call_args_list}
                handlers[signal.SIGTERM](signal.SIGTERM, None)
                return 80.0

        sources = {FanMode.QUIET_CPU: InterruptedTemperature()}
        with patch.object(feeph.unihub.scheduler, 'default_sources', return_value=sources):
            # -------------------------------------------------------------
            computed = sut.main(['--mode', 'quiet-cpu'])
        # -----------------------------------------------------------------
        self.assertEqual(computed, 0)
        self.assertEqual(self.device.writes()[-1], bytes([0xE0, 0x23, 0x00, 0xFF]))


class TestParser(unittest.TestCase):

    def test_defaults(self):
        # -----------------------------------------------------------------
        args = sut.build_parser().parse_args([])
        # -----------------------------------------------------------------
        self.assertEqual((args.red, args.green, args.blue), (255, 5, 5))
        self.assertEqual(args.brightness, 100.0)
        self.assertEqual(args.speed, 1350)
        self.assertEqual(args.mode, FanMode.FIXED)
        self.assertIsNone(args.config)
        self.assertEqual(args.log_level, 'INFO')
        self.assertFalse(args.rgb_sync)

    def test_mode(self):
        args = sut.build_parser().parse_args(['--mode', 'quiet-gpu'])
        # -----------------------------------------------------------------
        self.assertEqual(args.mode, FanMode.QUIET_GPU)

    def test_log_level(self):
        args = sut.build_parser().parse_args(['--log-level', 'debug'])
        # -----------------------------------------------------------------
        self.assertEqual(args.log_level, 'DEBUG')
