from enum import IntEnum

from ..HubInterface import DeviceHandle
from ..Decoder import Decoder

class Devtype(IntEnum):
	FIXED = 1
	LPF = 2

class LPF_Device(DeviceHandle):

	def __init__(self, port=-1, gatt_writer=None):
		"""
		port:
			Port number the device is attached to on the hub
		gatt_writer:
			The hub's coroutine that writes a bytearray to the BLE connection

		Built-in devices seem to follow similar rules to LPF2 devices, so FIXED
		vs LPF is mostly to be able to determine if a device could possibly
		disappear

		All intermediate subclasses need to start with LPF_
		"""
		super().__init__(port)

		self.devtype = Devtype.FIXED
		self.gatt_writer = gatt_writer

		self.port_id = 0x0	# Identifier for the type of device attached
							# Index into Decoder.io_type_id_str
		self.status = 0x1	# Decoder.io_event_type_str[0x1]
		self.delta_interval = 1

		self.hw_ver_str = None
		self.fw_ver_str = None

		# This is the currently "negatively selected" mode for operating
		# Many devices won't accept input to modes unless it's "selected" by
		# disabling notifications on the mode
		self.selected_mode = -1
		self.subscribed_mode = None

	def set_type(self, port_id):
		self.port_id = port_id
		self.device_type = port_id
		if port_id in Decoder.io_type_id_str:
			self.name = Decoder.io_type_id_str[port_id]
		else:
			self.name = 'UNKNOWN DEVICE_'+str(port_id)

	def decode_pvs(self, data):
		"""
		Decode Port Value - Single
		LWP 3.21

		The hub calls this with the bytes after the port number.  This stub
		just hands the bytes out as a 'data' event, subclasses should know better
		"""
		self.emit('data', list(data))

	async def set_mode(self, mode):
		'''
		This does the "negative subscribe" to select the device's mode

		Many devices do not like to have data written to them for a mode that
		did not previously receive a subscription command.  A negative
		selection effectively changes the current operating mode of the device
		without asking it to report anything.
		'''
		return await self.PIF_single_setup(mode, False)

	async def subscribe(self, mode):
		result = await self.PIF_single_setup(mode, True)
		if result:
			self.subscribed_mode = mode
		return result

	async def unsubscribe(self, mode):
		result = await self.PIF_single_setup(mode, False)
		if self.subscribed_mode == mode:
			self.subscribed_mode = None
		return result

	async def PIF_single_setup(self, mode, should_subscribe):
		"""
		Port Input Format (PIF) Setup for a single port (versus a combination of ports)
		LWP Section 3.23.1

		LWP Documentation calls (un)subscribing to port data as notification disable/enable
		"""
		mode = int(mode)
		if mode < 0 or mode > 255:
			self.logger.error(f'Invalid mode {mode} for {self.name} on port {self.port}')
			return False

		payload = bytearray([
			0x0A,		# length
			0x00,
			0x41,		# Port input format (single)
			self.port,	# port
			mode,
		])

		# delta interval (uint32)
		payload.extend(self.delta_interval.to_bytes(4,byteorder='little',signed=False))

		if should_subscribe:
			payload.append(0x1)		# notification enable
		else:
			payload.append(0x0)		# notification disable

		payload[0] = len(payload)

		self.selected_mode = mode

		return await self._write(payload)

	async def _write(self, payload):
		if self.gatt_writer is None:
			self.logger.error(f'{self.name} on port {self.port} is not attached to a hub')
			return False
		return await self.gatt_writer(payload)
