import asyncio
import logging

from bleak import BleakClient

from .HubInterface import HubHandle
from .Decoder import Decoder
from .LPF_Devices import LPF_class_for_type_id

class MoveHub(HubHandle):

	characteristic_uuid = '00001624-1212-efde-1623-785feabcd123'

	# Letters printed on the Move Hub.  Anything else is addressed by number
	port_numbers = {
		'A': 0x0,
		'B': 0x1,
		'C': 0x2,
		'D': 0x3,
	}

	def __init__(self, device, advertisement_data=None, config=None):
		super().__init__()

		self.logger = logging.getLogger(__name__.split('.')[0])

		self.device = device
		self.advertisement = advertisement_data
		self.address = getattr(device, 'address', None)
		self.name = getattr(device, 'name', None)
		self.system_type = Decoder.determine_device_shortname(advertisement_data) if advertisement_data else None

		self.client = None
		self.connected = False

		self.gatt_send_rate_limit = 0.1
		self.enumeration_quiet_time = 0.5
		self.enumeration_timeout = 3
		if config is not None:
			self.gatt_send_rate_limit = config.gatt_send_rate_limit
			self.enumeration_quiet_time = config.enumeration_quiet_time
			self.enumeration_timeout = config.enumeration_timeout

		# Give attached devices this function to let them send their own gatt messages
		self.gatt_writer = lambda payload: MoveHub._gatt_send(self, payload)

		self.lock = asyncio.Lock()			# Connect lock
		self.ports = {}
		self._port_waiters = {}
		self._last_attach = None

	def port_number(self, port):
		if isinstance(port, str):
			label = port.strip().upper()
			if label in self.port_numbers:
				return self.port_numbers[label]
			if label.isdigit():
				return int(label)
			return None
		return port

	# ---- HubHandle ----

	async def connect(self):
		async with self.lock:
			if self.connected:
				return
			self.logger.info(f'Connecting to {self.system_type} {self.name} ({self.address})...')
			self.client = BleakClient(self.device, disconnected_callback=self._bleak_disconnect)
			await self.client.connect()
			if not self.client.is_connected:
				raise ConnectionError(f'Failed to connect to {self.address} after client creation')
			self.connected = True
			self.logger.info(f'Connected to {self.system_type}! ({self.name})')

			self._last_attach = asyncio.get_running_loop().time()
			await self.client.start_notify(MoveHub.characteristic_uuid, self._device_events)

		await self._wait_for_enumeration()

	async def disconnect(self):
		async with self.lock:
			was_connected = self.connected
			self.connected = False
			# Waiters get an error, never a cancel, so callers can tell this from their own cancellation
			for port, waiter in self._port_waiters.items():
				if not waiter.done():
					waiter.set_exception(ConnectionError(f'{self.system_type} disconnected while waiting for port {port}'))
			self._port_waiters.clear()
			self.ports.clear()
			if self.client is not None:
				client = self.client
				self.client = None
				if was_connected:
					try:
						await client.stop_notify(MoveHub.characteristic_uuid)
					finally:
						await client.disconnect()
			self.logger.info(f'{self.system_type} has disconnected.')

	def get_devices(self):
		return [ self.ports[port] for port in sorted(self.ports) ]

	async def wait_for_device_at_port(self, port):
		port_number = self.port_number(port)
		if port_number is None:
			raise KeyError(f'{self.system_type} has no port {port}')

		if port_number in self.ports:
			return self.ports[port_number]

		if port_number not in self._port_waiters:
			self._port_waiters[port_number] = asyncio.get_running_loop().create_future()
		return await asyncio.shield(self._port_waiters[port_number])

	# ---- Bleak side ----

	def _bleak_disconnect(self, client):
		"""Called by the BleakClient when disconnected"""
		self.logger.info(f'Bleak disconnect {self.system_type}: {self.address}')
		if self.connected:
			self.connected = False
			self.emit('disconnect')

	async def _wait_for_enumeration(self):
		# Attached I/O messages arrive unrequested right after notifications start
		loop = asyncio.get_running_loop()
		start = loop.time()
		while loop.time() - start < self.enumeration_timeout:
			if loop.time() - self._last_attach >= self.enumeration_quiet_time:
				break
			await asyncio.sleep(0.05)
		self.logger.debug(f'{self.system_type} enumerated {len(self.ports)} devices')

	# Bleak events get sent here
	def _device_events(self, sender, data):
		bt_message = Decoder.decode_payload(data)
		msg_prefix = str(self.system_type)+" "
		if bt_message['error']:
			self.logger.error(msg_prefix+"ERR:"+bt_message['readable'])
			return

		message_type = Decoder.message_type_str.get(bt_message['type'])

		if message_type == 'hub_attached_io':
			self._process_attached_io(bt_message)

		elif message_type == 'port_value_single':
			port = bt_message['port']
			self.emit('portValue', port, list(bt_message['value']))
			if port in self.ports:
				self.ports[port].decode_pvs(bt_message['value'])
			else:
				self.logger.error(f'{msg_prefix}Received data for unconfigured port {port}: '+bt_message['readable'])

		elif message_type == 'hub_actions':
			if bt_message['action'] in (0x30, 0x31):
				self.logger.info(msg_prefix+bt_message['action_str'])
				self.connected = False
				self.emit('disconnect')

		else:
			self.logger.debug(msg_prefix+bt_message['readable'])

	def _process_attached_io(self, bt_message):
		msg_prefix = str(self.system_type)+" "
		port = bt_message['port']
		event = bt_message['event_str']

		if event == 'attached':
			self._last_attach = asyncio.get_running_loop().time()
			devclass = LPF_class_for_type_id(bt_message['io_type_id'])
			device = devclass(port, self.gatt_writer)
			device.set_type(bt_message['io_type_id'])
			device.hw_ver_str = bt_message['hw_ver_str']
			device.fw_ver_str = bt_message['sw_ver_str']
			if port in self.ports:
				self.logger.info(msg_prefix+"Re-attached "+device.name+" on port "+str(port))
			else:
				self.logger.info(msg_prefix+"Attached "+device.name+" on port "+str(port))
			self.ports[port] = device

			waiter = self._port_waiters.pop(port, None)
			if waiter is not None and not waiter.done():
				waiter.set_result(device)

		elif event == 'detached':
			self.logger.info(msg_prefix+"Detached device on port "+str(port))
			device = self.ports.pop(port, None)
			if device is not None:
				device.status = 0x0		# Decoder.io_event_type_str[0x0]

		else:
			# Virtual ports (AB) aren't something the controller drives
			self.logger.debug(msg_prefix+"HubAttachedIO: "+bt_message['readable'])

	async def _gatt_send(self, payload):
		if self.connected and self.client is not None:
			await self.client.write_gatt_char(MoveHub.characteristic_uuid, payload)
			await asyncio.sleep(self.gatt_send_rate_limit)
			return True
		else:
			self.logger.warning("GATT SEND PROHIBITED: NOT CONNECTED")
			return False
