#!/usr/bin/env python3
"""
Interactive Controller Test Script.

This script demonstrates the Controller API.
Run it to perform the GIP handshake, print live input and pulse the rumble
motors when A is pressed. Needs permission to claim the USB device.
"""

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

# Add SDK to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from gip import (
    Button,
    Controller,
    GuideButtonPressed,
    InputSnapshot,
    RumbleCommand,
    SessionConfig,
    SessionEnded,
    UnhandledFrame,
    UsbTransport,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)


def format_report(count, report):
    names = " ".join(button.name for button in report.pressed) or "none"
    return (f"[{count:04d}] BTN: {names:<30} | LT:{report.left_trigger:3d} RT:{report.right_trigger:3d} "
            f"| LS:({report.left_stick_x:6d},{report.left_stick_y:6d}) "
            f"RS:({report.right_stick_x:6d},{report.right_stick_y:6d})")


def main():
    parser = argparse.ArgumentParser(description="Read input from a wired Xbox One controller")
    parser.add_argument("--config", help="ini file with a [session] section")
    parser.add_argument("--serial", help="serial number of the controller to use")
    args = parser.parse_args()

    controller = Controller(transport=UsbTransport(serial_number=args.serial),
                            config=SessionConfig.from_ini(args.config))
    finished = threading.Event()
    count = 0
    rumbling = False

    def on_event(event):
        nonlocal count, rumbling
        if isinstance(event, InputSnapshot):
            count += 1
            print("\r" + format_report(count, event.report), end="")
            sys.stdout.flush()
            pressed = event.report.is_pressed(Button.A)
            if pressed != rumbling:
                rumbling = pressed
                controller.rumble(RumbleCommand(magnitude_left=0x60, magnitude_right=0x60)
                                  if pressed else RumbleCommand.stop())
        elif isinstance(event, GuideButtonPressed):
            print("\nGUIDE BUTTON PRESSED")
        elif isinstance(event, UnhandledFrame):
            print(f"\nReceived: {event.header.command_name} (0x{event.header.command:02x})")
        elif isinstance(event, SessionEnded):
            print(f"\nSession ended: {event.reason}")
            finished.set()

    controller.subscribe(on_event)

    def on_signal(signum, frame):
        print("\nShutting down...")
        finished.set()

    signal.signal(signal.SIGINT, on_signal)
    signal.signal(signal.SIGTERM, on_signal)

    print("Connecting (auto-detect)...")
    if not controller.connect():
        print("Failed to connect! Is the controller plugged in?")
        return 1

    print("Move sticks and press buttons, hold A to rumble. Ctrl+C to exit.")
    try:
        while not finished.wait(0.5):
            pass
    finally:
        print("\nDisconnecting...")
        controller.disconnect()
        print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
