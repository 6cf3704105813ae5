"""Stand-ins for the Bluetooth side of BTBoost, no hardware needed"""

import asyncio

from BTBoost.Config import BoostConfig
from BTBoost.HubInterface import DeviceHandle, HubHandle, HubDiscovery

def _run(coro):
	loop = asyncio.new_event_loop()
	try:
		return loop.run_until_complete(coro)
	finally:
		loop.close()

def fast_config(**kwargs):
	settings = {
		'discovery_timeout': 0.2,
		'device_wait_timeout': 0.05,
	}
	settings.update(kwargs)
	return BoostConfig(**settings)

class FakeDevice(DeviceHandle):

	def __init__(self, port, name='device', device_type=None, mode_map=None):
		super().__init__(port)
		self.name = name
		self.device_type = device_type
		self.mode_map = dict(mode_map or {})

		self.powers = []
		self.modes = []
		self.subscribed = []
		self.unsubscribed = []

		self.fail_power = False
		self.fail_subscribe = False
		self.fail_unsubscribe = False
		self.fail_set_mode = False

	async def set_power(self, power):
		if self.fail_power:
			raise IOError('radio write failed')
		self.powers.append(power)

	async def set_mode(self, mode):
		if self.fail_set_mode:
			raise IOError('mode rejected')
		self.modes.append(mode)

	async def subscribe(self, mode):
		if self.fail_subscribe:
			raise IOError('subscribe rejected')
		self.subscribed.append(mode)

	async def unsubscribe(self, mode):
		if self.fail_unsubscribe:
			raise IOError('unsubscribe rejected')
		self.unsubscribed.append(mode)

class NoSubscribeDevice(DeviceHandle):
	"""Quacks like a sensor without any way to subscribe"""

	subscribe = None

	def __init__(self, port):
		super().__init__(port)
		self.mode_map = { 'color': 0 }

	async def set_mode(self, mode):
		pass

def motor(port):
	return FakeDevice(port, 'Internal Motor with Tacho', 0x27, { 'power': 0 })

def color_sensor(port, mode_map=None):
	if mode_map is None:
		mode_map = { 'color': 0, 'distance': 1, 'colorAndDistance': 8 }
	return FakeDevice(port, 'Vision Sensor', 0x25, mode_map)

class FakeHub(HubHandle):

	def __init__(self, name='Move Hub', devices=None):
		super().__init__()
		self.name = name
		self.devices = {}
		for device in devices or ():
			self.devices[device.port] = device

		self.connect_calls = 0
		self.disconnect_calls = 0
		self.connect_delay = 0
		self.fail_connect = False
		self.fail_disconnect = False
		self._waiters = []

	@classmethod
	def boost(cls, extra=()):
		return cls(devices=[ motor('A'), motor('B') ] + list(extra))

	async def connect(self):
		self.connect_calls += 1
		if self.connect_delay:
			await asyncio.sleep(self.connect_delay)
		if self.fail_connect:
			raise ConnectionError('hub refused connection')

	async def disconnect(self):
		self.disconnect_calls += 1
		# Same as MoveHub, anyone still waiting on a port gets an error
		for port, waiter in self._waiters:
			if not waiter.done():
				waiter.set_exception(ConnectionError(f'hub disconnected while waiting for port {port}'))
		self._waiters = []
		if self.fail_disconnect:
			raise ConnectionError('hub already gone')

	def get_devices(self):
		return list(self.devices.values())

	async def wait_for_device_at_port(self, port):
		if port in self.devices:
			return self.devices[port]
		# Never shows up
		waiter = asyncio.get_running_loop().create_future()
		self._waiters.append((port, waiter))
		return await waiter

class FakeScanner(HubDiscovery):

	def __init__(self, hubs=()):
		super().__init__()
		# Discovered as soon as scanning starts
		self.hubs = list(hubs)
		self.scan_calls = 0
		self.stop_calls = 0

	async def scan(self):
		self.scan_calls += 1
		for hub in self.hubs:
			self.emit('discover', hub)

	async def stop_scanning(self):
		self.stop_calls += 1

	def discover(self, hub):
		self.emit('discover', hub)

class ScannerFactory():
	"""Hands out a new FakeScanner per connection attempt and remembers them"""

	def __init__(self, *hubs):
		self.hubs = hubs
		self.scanners = []

	def __call__(self):
		scanner = FakeScanner(self.hubs)
		self.scanners.append(scanner)
		return scanner

	@property
	def scan_calls(self):
		return sum(scanner.scan_calls for scanner in self.scanners)

class Recorder():
	"""Controller callback that keeps every message"""

	def __init__(self):
		self.messages = []

	def __call__(self, message):
		self.messages.append(message[1:])

	def of_type(self, message_type):
		return [ message for message in self.messages if message[0] == message_type ]
