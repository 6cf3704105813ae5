import asyncio
import inspect
import logging
import uuid
from enum import Enum

from .Config import BoostConfig
from .Errors import BoostError, DiscoveryTimeout, NotConnected, NoSubscribeCapability, DeviceNotFound, HubConnectionError
from .PortResolver import resolve_port
from .ModeResolver import resolve_mode
from .EventNormalizer import EventKind, normalize_event
from .DriveThrottler import DriveThrottler, clamp_power
from .HubInterface import ANY_EVENT

class ConnectionState(Enum):
	IDLE = 'idle'
	SCANNING = 'scanning'
	CONNECTING = 'connecting'
	ENUMERATING = 'enumerating'
	CONNECTED = 'connected'
	DISCONNECTING = 'disconnecting'

class DeviceDescriptor():
	"""
	What the UI gets to know about a device.  Built fresh from the hub's
	device list every time, never cached
	"""

	def __init__(self, port_id, name, device_type):
		self.port_id = port_id
		self.name = name
		self.device_type = device_type

	@classmethod
	def from_device(cls, device):
		port_id = None
		for attribute in ( 'port', 'port_id', 'portID' ):
			port_id = getattr(device, attribute, None)
			if port_id is not None:
				break

		device_type = getattr(device, 'device_type', None)
		if device_type is None:
			device_type = getattr(device, 'type', None)

		return cls(port_id, getattr(device, 'name', None) or 'device', device_type)

	def as_dict(self):
		return { 'portId': self.port_id, 'name': self.name, 'type': self.device_type }

	def __eq__(self, other):
		if not isinstance(other, DeviceDescriptor):
			return NotImplemented
		return self.as_dict() == other.as_dict()

	def __repr__(self):
		return f'DeviceDescriptor({self.port_id!r}, {self.name!r}, {self.device_type!r})'

class MotorBinding():

	def __init__(self, role, port, device):
		self.role = role		# 'left', 'right' or 'head'
		self.port = port
		self.device = device

class SensorBinding():

	def __init__(self, port, device, mode_id, mode_name):
		self.port = port
		self.device = device
		self.mode_id = mode_id
		self.mode_name = mode_name
		# ( event_name, handler ) registered on device
		self.listeners = []

class HubSession():
	"""
	Everything that belongs to one connected hub.  Thrown away as a whole on
	disconnect so nothing from this hub can leak into the next connection
	"""

	def __init__(self, hub, deadline):
		self.hub = hub
		self.deadline = deadline
		self.motors = {}
		self.sensor = None
		self.head_checked = False
		# ( event_name, handler ) registered on hub
		self.hub_listeners = []

	def motor(self, role):
		binding = self.motors.get(role)
		if binding is None:
			return None
		return binding.device

class BoostController():
	"""
	Owns the scan -> connect -> enumerate lifecycle of one BOOST hub and
	everything attached to it

	Outbound messages go to callbacks registered with register_callback() as
	( callback_uuid, type, key, value ) tuples

		status:		connecting, connected, disconnected, error	-> message
		log:		'line'					-> text
		devices:	'inventory'				-> [ { portId, name, type } ]
		color:		port					-> { port, mode, color, raw }
		raw:		port					-> { port, value, eventName }
	"""

	drive_roles = ( 'left', 'right' )

	def __init__(self, scanner_factory=None, config=None):
		"""
		scanner_factory:
			Returns a new HubDiscovery for every connection attempt.  Defaults
			to the Bleak HubScanner
		"""
		self.logger = logging.getLogger(__name__.split('.')[0])

		if config is None:
			config = BoostConfig()
		self.config = config

		if scanner_factory is None:
			from .Scanner import HubScanner
			scanner_factory = lambda: HubScanner(self.config)
		self.scanner_factory = scanner_factory

		self.state = ConnectionState.IDLE
		self.session = None

		self.callbacks = {}

		self.drive_throttler = DriveThrottler()
		self.head_throttler = DriveThrottler()

		self._scanner = None
		self._discovery = None
		self._connect_task = None
		self._sensor_lock = asyncio.Lock()
		# Tasks started from driver callbacks, held until they finish
		self._background_tasks = set()

	# ---- Outbound ----

	def register_callback(self, callback):
		callback_uuid = str(uuid.uuid4())
		self.callbacks[callback_uuid] = callback
		return callback_uuid

	def unregister_callback(self, callback_uuid):
		if self.callbacks.pop(callback_uuid, None) is None:
			self.logger.error(f'Given UUID {callback_uuid} doesn\'t exist to unregister')

	def _notify(self, message_type, key, value):
		for callback_uuid, callback in list(self.callbacks.items()):
			try:
				result = callback((callback_uuid, message_type, key, value))
				if inspect.isawaitable(result):
					try:
						self._start_background(result)
					except RuntimeError:
						result.close()
						self.logger.error(f'No running loop for async callback {callback_uuid}, dropped {message_type}')
			except Exception as e:
				self.logger.error(f'Callback {callback_uuid} failed on {message_type} message: {e}')

	def _start_background(self, coro):
		# Raises RuntimeError without a running loop, like create_task
		task = asyncio.get_running_loop().create_task(coro)
		self._background_tasks.add(task)
		task.add_done_callback(self._background_tasks.discard)
		return task

	def send_log(self, line):
		self.logger.info(line)
		self._notify('log', 'line', str(line))

	def send_status(self, state, message):
		self.logger.info(f'STATUS: {state} - {message}')
		self._notify('status', state, message)

	def _set_state(self, state):
		if state is not self.state:
			self.logger.debug(f'{self.state.value} -> {state.value}')
			self.state = state

	# ---- Connection lifecycle ----

	async def connect(self):
		"""
		Scan for a hub, connect and enumerate it.  Returns True when connected

		Raises DiscoveryTimeout if nothing shows up in config.discovery_timeout
		seconds.  A second call while the first is still going waits on the
		first one instead of scanning again
		"""
		if self.state is ConnectionState.CONNECTED:
			return True

		if self._connect_task is None:
			self._connect_task = asyncio.ensure_future(self._connect())
			self._connect_task.add_done_callback(self._connect_finished)
		else:
			self.logger.debug('Connection attempt already in flight, waiting on it')

		return await asyncio.shield(self._connect_task)

	def _connect_finished(self, task):
		if self._connect_task is task:
			self._connect_task = None

	async def _connect(self):
		loop = asyncio.get_running_loop()

		self._set_state(ConnectionState.SCANNING)
		scanner = self.scanner_factory()
		self._scanner = scanner

		discovered = loop.create_future()
		self._discovery = discovered

		def on_discover(hub):
			if discovered.done():
				self.logger.debug(f'Ignoring hub {getattr(hub, "name", None)}, already have one')
				return
			discovered.set_result(hub)

		scanner.on('discover', on_discover)

		timeout = self.config.discovery_timeout
		deadline = loop.time() + timeout
		self.send_status('connecting', 'Scanning Bluetooth...')
		try:
			await scanner.scan()
			hub = await asyncio.wait_for(discovered, max(0, deadline - loop.time()))
		except asyncio.TimeoutError:
			self.send_log(f'No hub found after {timeout} seconds')
			await self._teardown(None)
			raise DiscoveryTimeout(timeout)
		except BoostError:
			await self._teardown(None)
			raise
		except Exception as e:
			await self._teardown(None)
			raise HubConnectionError(f'Scanning failed: {e}') from e
		finally:
			self._discovery = None

		session = HubSession(hub, deadline)
		self.session = session
		self._set_state(ConnectionState.CONNECTING)
		try:
			self.send_log(f'Discovered hub: {getattr(hub, "name", None) or "(no-name)"}')
			self.send_status('connecting', 'Connecting to hub...')
			await hub.connect()

			await self._best_effort('stop scanning', scanner.stop_scanning)
			self._attach_hub_forwarding(session)

			self._set_state(ConnectionState.ENUMERATING)
			self.send_status('connecting', 'Detecting devices...')
			inventory = [ descriptor.as_dict() for descriptor in self._describe_devices(hub) ]
			self._notify('devices', 'inventory', inventory)

			await self._bind_motors(session)

		except BoostError:
			await self._teardown(session)
			raise
		except Exception as e:
			await self._teardown(session)
			raise HubConnectionError(f'Connecting to hub failed: {e}') from e

		self._set_state(ConnectionState.CONNECTED)
		self.send_status('connected', 'Connected')
		self.send_log('Connected OK')
		return True

	async def disconnect(self):
		"""
		Tear everything down, in order, ignoring whatever fails along the way.
		Never raises.  Safe to call any time, any number of times
		"""
		task = self._connect_task
		if task is not None and not task.done():
			discovery = self._discovery
			if discovery is not None and not discovery.done():
				discovery.set_exception(HubConnectionError('Connection cancelled by disconnect'))
			# Connecting and enumerating can't be interrupted, let them land
			await asyncio.wait([ task ])

		if self.session is not None or self._scanner is not None:
			self._set_state(ConnectionState.DISCONNECTING)

		await self._teardown(self.session)

		self.send_status('disconnected', 'Disconnected')
		self.send_log('Disconnected')
		return True

	async def _teardown(self, session):
		# Anything still waiting on this session sees it gone straight away
		if session is not None and self.session is session:
			self.session = None

		if session is not None:
			await self._release_sensor(session)
			await self._best_effort('remove hub listeners', self._remove_listeners, session.hub, session.hub_listeners)
			session.hub_listeners = []
			await self._best_effort('hub disconnect', getattr(session.hub, 'disconnect', None))
			session.motors = {}

		scanner = self._scanner
		self._scanner = None
		if scanner is not None:
			await self._best_effort('stop scanning', scanner.stop_scanning)
			await self._best_effort('remove discover listeners', scanner.remove_all_listeners, 'discover')

		# Even if everything above failed
		self.session = None
		self.drive_throttler.reset()
		self.head_throttler.reset()
		self._set_state(ConnectionState.IDLE)

	async def _best_effort(self, description, step, *args):
		"""
		One teardown step.  Returns whether it worked, a failure is only logged
		"""
		if step is None:
			self.logger.debug(f'{description}: not supported, skipped')
			return False
		try:
			result = step(*args)
			if inspect.isawaitable(result):
				await result
		except Exception as e:
			self.logger.warning(f'{description} failed: {e}')
			return False
		self.logger.debug(f'{description}: ok')
		return True

	def _remove_listeners(self, emitter, listeners):
		remove_listener = getattr(emitter, 'remove_listener', None)
		if remove_listener is None:
			emitter.remove_all_listeners()
			return
		for event_name, handler in listeners:
			remove_listener(event_name, handler)

	def _attach_hub_forwarding(self, session):
		hub = session.hub

		# Never forward twice for the same hub
		self._remove_listeners(hub, session.hub_listeners)
		session.hub_listeners = []

		def forward_port_value(port, value):
			self._forward_raw(port, value, None)

		def hub_lost():
			if self.session is not session:
				return
			self.send_log('Hub disconnected')
			self._start_background(self.disconnect())

		for event_name, handler in ( ('portValue', forward_port_value), ('disconnect', hub_lost) ):
			hub.on(event_name, handler)
			session.hub_listeners.append((event_name, handler))

	def _describe_devices(self, hub):
		try:
			devices = hub.get_devices() or []
		except Exception as e:
			self.logger.warning(f'Unable to list hub devices: {e}')
			return []
		return [ DeviceDescriptor.from_device(device) for device in devices ]

	async def _lookup_device(self, hub, port):
		timeout = self.config.device_wait_timeout
		try:
			return await asyncio.wait_for(hub.wait_for_device_at_port(port), timeout)
		except asyncio.TimeoutError:
			raise DeviceNotFound(port, timeout)

	async def _bind_motors(self, session):
		ports = { 'left': self.config.left_port, 'right': self.config.right_port }
		for role in self.drive_roles:
			port = ports[role]
			try:
				device = await self._lookup_device(session.hub, port)
			except Exception as e:
				self.send_log(f'No {role} motor on port {port}: {e}')
				continue
			session.motors[role] = MotorBinding(role, port, device)
			self.logger.debug(f'Bound {role} motor to port {port}')

	async def _head_motor(self, session):
		# Optional, so only looked for once per session and only when asked for
		if not session.head_checked:
			session.head_checked = True
			port = self.config.head_port
			try:
				device = await self._lookup_device(session.hub, port)
			except Exception as e:
				self.send_log(f'No head motor on port {port}: {e}')
			else:
				if self.session is session:
					session.motors['head'] = MotorBinding('head', port, device)
		return session.motor('head')

	# ---- Commands ----

	def list_devices(self):
		if self.state is not ConnectionState.CONNECTED or self.session is None:
			return []
		return self._describe_devices(self.session.hub)

	async def drive(self, left, right):
		"""
		Set both drive motors, -100 to 100.  Returns True if anything was sent

		Does nothing if not connected, if either motor is missing, or if the
		(clamped) values are the same as last time
		"""
		session = self.session
		if self.state is not ConnectionState.CONNECTED or session is None:
			return False

		left_motor = session.motor('left')
		right_motor = session.motor('right')
		if left_motor is None or right_motor is None:
			return False

		left = clamp_power(left)
		right = clamp_power(right)
		if not self.drive_throttler.should_send(left, right):
			return False

		try:
			await left_motor.set_power(left)
			await right_motor.set_power(right)
		except Exception:
			self.drive_throttler.reset()
			raise
		return True

	async def head(self, power):
		session = self.session
		if self.state is not ConnectionState.CONNECTED or session is None:
			return False

		head_motor = await self._head_motor(session)
		if head_motor is None:
			return False

		power = clamp_power(power)
		if not self.head_throttler.should_send(power):
			return False

		try:
			await head_motor.set_power(power)
		except Exception:
			self.head_throttler.reset()
			raise
		return True

	async def attach_color_sensor(self, port_input, mode_input=None):
		"""
		Start color telemetry from the device on port_input

		mode_input:
			Mode name or number, resolved against the device's own mode table.
			Defaults to config.default_sensor_mode

		Returns ( mode_name, mode_id ).  Any previously attached sensor is
		released first, there is only ever one
		"""
		if self.state is not ConnectionState.CONNECTED or self.session is None:
			raise NotConnected()

		port = resolve_port(port_input)

		requested_mode = mode_input
		if requested_mode is None or not str(requested_mode).strip():
			requested_mode = self.config.default_sensor_mode

		async with self._sensor_lock:
			session = self.session
			if self.state is not ConnectionState.CONNECTED or session is None:
				raise NotConnected()

			await self._release_sensor(session)

			self.send_log(f'wait_for_device_at_port({port})...')
			try:
				device = await self._lookup_device(session.hub, port)
			except Exception as e:
				if self.session is not session:
					raise NotConnected('Disconnected while waiting for the sensor') from e
				raise
			if self.session is not session:
				raise NotConnected('Disconnected while waiting for the sensor')

			mode_id, mode_name = resolve_mode(getattr(device, 'mode_map', None), requested_mode)

			binding = SensorBinding(port, device, mode_id, mode_name)
			subscribed = False
			try:
				self._register_sensor_listeners(binding)

				await self._best_effort(f'set mode {mode_id} on port {port}', getattr(device, 'set_mode', None), mode_id)

				subscribe = getattr(device, 'subscribe', None)
				if not callable(subscribe):
					raise NoSubscribeCapability(port)

				self.send_log(f'subscribe({mode_name} -> mode {mode_id})...')
				await subscribe(mode_id)
				subscribed = True

				if self.session is not session:
					raise NotConnected('Disconnected while subscribing to the sensor')
			except Exception:
				await self._release_binding(binding, subscribed)
				raise

			session.sensor = binding

		self.send_log(f'OK: sensor active on port {port} (mode={mode_name}/{mode_id})')
		return ( mode_name, mode_id )

	def _register_sensor_listeners(self, binding):
		device = binding.device
		port = binding.port

		def forwarder(event_name):
			return lambda payload=None, *extra: self._forward_sensor(port, event_name, payload)

		def forward_unknown(event_name, *args):
			if EventKind.from_name(event_name) is not EventKind.RAW:
				return
			payload = args[0] if len(args) == 1 else list(args)
			self._forward_raw(port, payload, event_name)

		# Firmware decides which of these it actually uses
		registrations = [ (kind.value, forwarder(kind.value)) for kind in EventKind.sensor_kinds() ]
		registrations.append((ANY_EVENT, forward_unknown))

		for event_name, handler in registrations:
			try:
				device.on(event_name, handler)
			except Exception as e:
				self.logger.warning(f'Unable to listen for {event_name} on port {port}: {e}')
				continue
			binding.listeners.append((event_name, handler))

	async def _release_sensor(self, session):
		binding = session.sensor
		session.sensor = None
		if binding is not None:
			await self._release_binding(binding, True)

	async def _release_binding(self, binding, unsubscribe):
		device = binding.device
		if unsubscribe and binding.mode_id is not None:
			await self._best_effort(f'unsubscribe port {binding.port} mode {binding.mode_id}', getattr(device, 'unsubscribe', None), binding.mode_id)
		await self._best_effort(f'remove listeners on port {binding.port}', self._remove_listeners, device, binding.listeners)
		binding.listeners = []

	# ---- Telemetry ----

	def _forward_sensor(self, port, event_name, payload):
		# Runs inside the driver's notification callback, so nothing gets out
		try:
			code = normalize_event(payload)
			if code is not None:
				self._notify('color', port, { 'port': port, 'mode': event_name, 'color': code, 'raw': payload })
			else:
				self._forward_raw(port, payload, event_name)
		except Exception as e:
			self.logger.error(f'Dropped {event_name} telemetry from port {port}: {e}')

	def _forward_raw(self, port, value, event_name):
		self._notify('raw', port, { 'port': port, 'value': value, 'eventName': event_name })
