import logging

class BoostCommands():
	"""
	The controller as seen from the other side of an IPC boundary: every
	command takes a params dict and answers with a plain dict, { 'ok': ... }
	"""

	channels = {
		'boost:connect': 'connect',
		'boost:disconnect': 'disconnect',
		'boost:drive': 'drive',
		'boost:head': 'head',
		'boost:colorAttach': 'color_attach',
		'boost:listDevices': 'list_devices',
	}

	def __init__(self, controller):
		self.logger = logging.getLogger(__name__.split('.')[0])
		self.controller = controller

	async def handle(self, channel, params=None):
		if channel not in self.channels:
			self.logger.error(f'No handler for {channel}')
			return { 'ok': False, 'error': f'Unknown command: {channel}' }

		command = getattr(self, self.channels[channel])
		if channel in ( 'boost:drive', 'boost:head', 'boost:colorAttach' ):
			return await command(params or {})
		return await command()

	def _failed(self, command_name, e):
		message = str(e) or e.__class__.__name__
		self.controller.send_status('error', message)
		self.controller.send_log(f'ERROR {command_name}: {message}')
		return { 'ok': False, 'error': message }

	async def connect(self):
		try:
			await self.controller.connect()
		except Exception as e:
			return self._failed('connect', e)
		return { 'ok': True }

	async def disconnect(self):
		await self.controller.disconnect()
		return { 'ok': True }

	async def drive(self, params):
		try:
			await self.controller.drive(params.get('left', 0), params.get('right', 0))
		except Exception as e:
			self.logger.error(f'drive failed: {e}')
			return { 'ok': False, 'error': str(e) }
		return { 'ok': True }

	async def head(self, params):
		try:
			await self.controller.head(params.get('power', 0))
		except Exception as e:
			self.logger.error(f'head failed: {e}')
			return { 'ok': False, 'error': str(e) }
		return { 'ok': True }

	async def color_attach(self, params):
		try:
			mode_name, mode_id = await self.controller.attach_color_sensor(params.get('port'), params.get('mode'))
		except Exception as e:
			return self._failed('colorAttach', e)
		return { 'ok': True, 'mode': mode_name, 'modeId': mode_id }

	async def list_devices(self):
		devices = [ descriptor.as_dict() for descriptor in self.controller.list_devices() ]
		return { 'ok': True, 'devices': devices }
