class BoostError(Exception):
	"""Base for everything the controller raises on purpose"""
	pass

class DiscoveryTimeout(BoostError):
	# Recoverable, just connect() again
	def __init__(self, timeout):
		super().__init__(f'BOOST hub not found within {timeout} seconds (timeout)')
		self.timeout = timeout

class NotConnected(BoostError):
	def __init__(self, message='Not connected'):
		super().__init__(message)

class EmptyPort(BoostError):
	def __init__(self, port_input=None):
		super().__init__('Port is empty')
		self.port_input = port_input

class UnknownMode(BoostError):
	def __init__(self, requested_mode):
		super().__init__(f'Unknown sensor mode: "{requested_mode}"')
		self.requested_mode = requested_mode

class NoSubscribeCapability(BoostError):
	def __init__(self, port):
		super().__init__(f'Device on port {port} has no subscribe()')
		self.port = port

class DeviceNotFound(BoostError):
	def __init__(self, port, timeout):
		super().__init__(f'No device appeared on port {port} within {timeout} seconds')
		self.port = port
		self.timeout = timeout

class HubConnectionError(BoostError):
	pass
