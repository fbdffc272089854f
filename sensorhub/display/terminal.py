"""
Terminal view of devices and their readings.
Renders the device list and single-device detail using the Rich library.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sensorhub.shared.models import Device
from sensorhub.query.devices import DeviceAggregator
from .format import display_fields, format_timestamp, time_ago

logger = logging.getLogger(__name__)

CATEGORY_STYLES = {"gateway": "bold magenta", "sensor": "bold cyan"}


class DeviceMonitor:
    """Prints device state tables to a console"""

    def __init__(self, aggregator: DeviceAggregator, console: Optional[Console] = None):
        self.aggregator = aggregator
        self.console = console or Console()

    def show_devices(self) -> int:
        """Print the device list, returns the number of devices shown"""
        devices = self.aggregator.list_devices()
        self.console.print(self.create_device_table(devices))
        return len(devices)

    def show_device(self, mac: str) -> bool:
        """Print one device, returns False when it is unknown"""
        device = self.aggregator.get_device(mac)
        if device is None:
            self.console.print(Text(f"Device not found: {mac}", style="red"))
            return False

        self.console.print(self.create_device_header(device))
        self.console.print(self.create_readings_table(device))
        return True

    def create_device_table(self, devices: List[Device], now: Optional[datetime] = None) -> Table:
        table = Table(title=f"Devices ({len(devices)})", header_style="bold cyan")
        table.add_column("Category")
        table.add_column("Type", style="white")
        table.add_column("MAC", style="white")
        table.add_column("Gateway", style="white")
        table.add_column("Last Seen", style="white")
        table.add_column("Readings", justify="right")

        for device in devices:
            table.add_row(
                Text(device.category, style=CATEGORY_STYLES.get(device.category, "white")),
                device.type,
                device.mac,
                device.gateway_id,
                self._last_seen_text(device, now),
                str(len(device.readings)),
            )
        return table

    def create_device_header(self, device: Device, now: Optional[datetime] = None) -> Panel:
        header_text = Text()
        header_text.append(f"{device.type}", style=CATEGORY_STYLES.get(device.category, "bold"))
        header_text.append(f"  {device.mac}", style="white")
        header_text.append(f"\nGateway {device.gateway_id}  Group {device.group_id}", style="dim")
        header_text.append(f"\nLast seen {self._last_seen_text(device, now)}", style="dim")
        return Panel(header_text, title=device.category.capitalize(), style="cyan")

    def create_readings_table(self, device: Device) -> Table:
        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Reading", style="white")
        table.add_column("Value", style="green", justify="right")

        for item in display_fields(device.readings):
            table.add_row(item.label, item.value_text)
        return table

    def _last_seen_text(self, device: Device, now: Optional[datetime] = None) -> str:
        if device.last_seen is None:
            return "never"
        now = now or datetime.now(timezone.utc)
        return f"{format_timestamp(device.last_seen)} ({time_ago(device.last_seen, now)})"
