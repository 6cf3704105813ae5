import logging

# Catch-all listeners get ( event_name, *args )
ANY_EVENT = '*'

class EventEmitter():
	"""
	Minimal name -> handlers registry for hubs, devices and scanners

	Handlers are plain functions called in registration order.  A handler
	that blows up is logged and the rest still run, because emit() is
	usually running inside a Bleak notification callback
	"""

	def __init__(self):
		self.logger = logging.getLogger(__name__.split('.')[0])
		self._listeners = {}

	def on(self, event_name, handler):
		self._listeners.setdefault(event_name, []).append(handler)
		return handler

	def remove_listener(self, event_name, handler):
		handlers = self._listeners.get(event_name)
		if handlers and handler in handlers:
			handlers.remove(handler)
			if not handlers:
				del self._listeners[event_name]
			return True
		return False

	def remove_all_listeners(self, event_name=None):
		if event_name is None:
			self._listeners.clear()
		else:
			self._listeners.pop(event_name, None)

	def listener_count(self, event_name=None):
		if event_name is None:
			return sum(len(handlers) for handlers in self._listeners.values())
		return len(self._listeners.get(event_name, ()))

	def emit(self, event_name, *args):
		handled = False
		for handler in list(self._listeners.get(event_name, ())):
			handled = True
			try:
				handler(*args)
			except Exception as e:
				self.logger.error(f'{self.__class__.__name__} handler for {event_name} failed: {e}')

		if event_name != ANY_EVENT:
			for handler in list(self._listeners.get(ANY_EVENT, ())):
				handled = True
				try:
					handler(event_name, *args)
				except Exception as e:
					self.logger.error(f'{self.__class__.__name__} catch-all handler for {event_name} failed: {e}')
		return handled

# The controller only talks to the classes below.  Override everything.

class DeviceHandle(EventEmitter):
	"""
	Something attached to a hub port: a motor, a sensor, a light...

	port:
		Port identifier as the hub reports it
	name, device_type:
		Human readable name and the hub's numeric device type
	mode_map:
		{ mode_name: mode_id } reported by the device
	"""

	def __init__(self, port=None):
		super().__init__()
		self.port = port
		self.name = 'device'
		self.device_type = None
		self.mode_map = {}

	async def set_power(self, power):
		raise NotImplementedError

	async def set_mode(self, mode):
		raise NotImplementedError

	async def subscribe(self, mode):
		raise NotImplementedError

	async def unsubscribe(self, mode):
		raise NotImplementedError

class HubHandle(EventEmitter):
	"""
	A discovered hub

	Emits:
		'portValue' ( port, value ) for every value any port reports
		'disconnect' () when the hub goes away on its own
	"""

	def __init__(self):
		super().__init__()
		self.name = None

	async def connect(self):
		raise NotImplementedError

	async def disconnect(self):
		raise NotImplementedError

	def get_devices(self):
		raise NotImplementedError

	async def wait_for_device_at_port(self, port):
		raise NotImplementedError

class HubDiscovery(EventEmitter):
	"""
	Emits 'discover' ( HubHandle ) for each hub found while scanning
	"""

	async def scan(self):
		raise NotImplementedError

	async def stop_scanning(self):
		raise NotImplementedError
