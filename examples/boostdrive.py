# Setup
# -----
# * Turn on the BOOST Move Hub (press the green button, the LED blinks)
# * Plug the Color & Distance sensor into port C
#
# Use
# -----
# * Connects, lists what's plugged in, and watches the color sensor
# * Drives forward, spins in place, stops
# * Hold a brick in front of the sensor to hear about it

import sys
import logging
import asyncio

import BTBoost

color_names = {
	0: 'black',
	3: 'blue',
	5: 'green',
	7: 'yellow',
	9: 'red',
	10: 'white'
}

sensor_port = 'C'
sensor_mode = 'color'

last_color = None

def boost_callback(message):
	global last_color

	( cb_uuid, message_type, message_key, message_value ) = message

	if message_type == 'status':
		print(f'STATUS: {message_key} - {message_value}')
	elif message_type == 'log':
		print(f'LOG: {message_value}')
	elif message_type == 'devices':
		print('Devices:')
		for device in message_value:
			print(f"- port={device['portId']} name={device['name']} type={device['type']}")
	elif message_type == 'color':
		code = message_value['color']
		# Sensor jitters, only say it when it changes
		if code == last_color:
			return
		last_color = code
		print(f"COLOR: {message_key}/{message_value['mode']} -> {code} ({color_names.get(code, '?')})")

async def main():
	config = BTBoost.load_config()
	controller = BTBoost.BoostController(config=config)
	controller.register_callback(boost_callback)

	try:
		await controller.connect()
	except BTBoost.BoostError as e:
		print(f'Unable to connect: {e}')
		return 1

	try:
		try:
			mode_name, mode_id = await controller.attach_color_sensor(sensor_port, sensor_mode)
			print(f'Color sensor on {sensor_port} in mode {mode_name} ({mode_id})')
		except BTBoost.BoostError as e:
			print(f'No color sensor: {e}')

		await controller.drive(50, 50)
		await asyncio.sleep(2)
		await controller.drive(-40, 40)
		await asyncio.sleep(1)
		await controller.drive(0, 0)

		# Watch colors for a bit
		await asyncio.sleep(20)
	finally:
		await controller.disconnect()
	return 0

BTBoost.setLoggingLevel(logging.INFO)

try:
	sys.exit(asyncio.run(main()))
except KeyboardInterrupt:
	print("Recieved keyboard interrupt, stopping.")
