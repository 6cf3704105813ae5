import logging

from bleak import BleakScanner

from .HubInterface import HubDiscovery
from .Decoder import Decoder
from .MoveHub import MoveHub

class HubScanner(HubDiscovery):
	"""
	Finds LEGO hubs with Bleak and emits 'discover' with a MoveHub for each
	new address whose advertised system type is one of config.hub_types
	"""

	def __init__(self, config=None):
		super().__init__()

		self.logger = logging.getLogger(__name__.split('.')[0])
		self.config = config

		self.hub_types = ( 'boostmove', )
		if config is not None:
			self.hub_types = tuple(config.hub_types)

		self.scanner = None
		self.seen_addresses = set()

	async def scan(self):
		if self.scanner is not None:
			self.logger.debug('Already scanning')
			return
		self.scanner = BleakScanner(self._detection_callback)
		self.logger.info("Scanning for LEGO hubs...")
		await self.scanner.start()

	async def stop_scanning(self):
		if self.scanner is None:
			return
		scanner = self.scanner
		self.scanner = None
		await scanner.stop()
		self.logger.debug("Stopped scanning")

	def _detection_callback(self, device, advertisement_data):
		if not device:
			return

		manufacturer_data = getattr(advertisement_data, 'manufacturer_data', None) or {}
		if Decoder.lego_manufacturer_id not in manufacturer_data:
			return

		dev_shortname = Decoder.determine_device_shortname(advertisement_data)
		if dev_shortname not in self.hub_types:
			self.logger.debug(f'Ignoring {dev_shortname} at {device.address}')
			return

		if device.address in self.seen_addresses:
			return
		self.seen_addresses.add(device.address)

		self.logger.info(f'Found {dev_shortname} {device.name} ({device.address})')
		self.emit('discover', MoveHub(device, advertisement_data, self.config))
